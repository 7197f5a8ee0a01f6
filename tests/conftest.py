from pathlib import Path
import pytest
from cryptography.hazmat.primitives.asymmetric import ec, ed25519, rsa
from cryptography.hazmat.primitives.serialization import Encoding, PublicFormat
from authkeys_core import Account, AuthorisedKeysStore, KeyStoreObserver
from authkeys_core.accounts import StaticAccountProvider


class RecordingObserver(KeyStoreObserver):
    def __init__(self):
        self.invalid = []
        self.written = []

    def invalid_key(self, line, error, action):
        self.invalid.append((line, action))

    def writing(self, path):
        self.written.append(path)


def _openssh_line(public_key, comment=""):
    line = public_key.public_bytes(Encoding.OpenSSH, PublicFormat.OpenSSH).decode("ascii")
    return f"{line} {comment}" if comment else line


@pytest.fixture
def make_key():
    """Return a factory producing fresh ssh-ed25519 authorized_keys lines."""
    def _make(comment=""):
        return _openssh_line(ed25519.Ed25519PrivateKey.generate().public_key(), comment)
    return _make


@pytest.fixture
def make_ecdsa_key():
    def _make(comment=""):
        return _openssh_line(ec.generate_private_key(ec.SECP256R1()).public_key(), comment)
    return _make


@pytest.fixture
def make_rsa_key():
    def _make(comment=""):
        private_key = rsa.generate_private_key(public_exponent=65537, key_size=2048)
        return _openssh_line(private_key.public_key(), comment)
    return _make


@pytest.fixture
def observer():
    return RecordingObserver()


@pytest.fixture
def accounts(tmp_path):
    return StaticAccountProvider(
        [
            Account(name="alice", home=tmp_path / "alice"),
            Account(name="bob", home=tmp_path / "bob"),
        ],
        default_user="alice",
    )


@pytest.fixture
def store(accounts, observer):
    return AuthorisedKeysStore(accounts=accounts, observer=observer)


@pytest.fixture
def keys_file(tmp_path) -> Path:
    return tmp_path / "alice" / ".ssh" / "authorized_keys"
