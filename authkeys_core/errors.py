"""
authkeys_core.errors
--------------------
Error taxonomy for the authorized-keys core.

Validation errors (MissingComment, DuplicateKey, DuplicateComment, KeyNotFound)
abort the whole call before anything is written. I/O failures surface as
KeyStoreIOError, an OSError, so callers that already handle IOError keep working.
"""


class AuthKeysError(Exception):
    pass


class UserLookupError(AuthKeysError, LookupError):
    def __init__(self, user: str, reason: str = "unknown user"):
        self.user = user
        super().__init__(f"cannot resolve user {user!r}: {reason}")


class InvalidKeyFormat(AuthKeysError, ValueError):
    def __init__(self, line: str):
        self.line = line
        super().__init__(f"invalid authorized_key {line!r}")


class KeyValidationError(AuthKeysError):
    pass


class MissingComment(KeyValidationError):
    def __init__(self, line: str):
        self.line = line
        super().__init__("cannot add ssh key without comment")


class DuplicateKey(KeyValidationError):
    def __init__(self, fingerprint: str):
        self.fingerprint = fingerprint
        super().__init__(f"cannot add duplicate ssh key: {fingerprint}")


class DuplicateComment(KeyValidationError):
    def __init__(self, comment: str):
        self.comment = comment
        super().__init__(f"cannot add ssh key with duplicate comment: {comment}")


class KeyNotFound(KeyValidationError):
    def __init__(self, key_id: str):
        self.key_id = key_id
        super().__init__(f"cannot delete non existent key: {key_id}")


class KeyStoreIOError(OSError):
    pass


class AtomicWriteError(KeyStoreIOError):
    pass
