# authkeys_core/constants.py

SSH_DIR = ".ssh"
AUTH_KEYS_FILE = "authorized_keys"

SSH_DIR_MODE = 0o755
DEFAULT_KEYS_FILE_MODE = 0o644

# Appended to the caller's prefix when a key has no comment at all.
DEFAULT_COMMENT_SUFFIX = "sshkey"

# Algorithms validated and re-marshalled through `cryptography`.
CRYPTOGRAPHY_KEY_TYPES = frozenset({
    "ssh-rsa",
    "ecdsa-sha2-nistp256",
    "ecdsa-sha2-nistp384",
    "ecdsa-sha2-nistp521",
    "ssh-ed25519",
})

# Accepted on structure alone (wire name must match the declared type).
STRUCTURAL_KEY_TYPES = frozenset({
    "ssh-dss",
    "sk-ecdsa-sha2-nistp256@openssh.com",
    "sk-ssh-ed25519@openssh.com",
})

KNOWN_KEY_TYPES = CRYPTOGRAPHY_KEY_TYPES | STRUCTURAL_KEY_TYPES

ENV_ACCOUNT_PROVIDER = "AUTHKEYS_ACCOUNT_PROVIDER"
ENV_LOG_LEVEL = "AUTHKEYS_LOG_LEVEL"
ENV_LOG_FILE = "AUTHKEYS_LOG_FILE"
