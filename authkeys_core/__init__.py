"""
authkeys Core Package
=====================
Management of a user's SSH authorized_keys credential store.

Provides:
- Public-key line parsing and RFC4716 fingerprints
- Atomic file replacement usable by any caller
- Add / delete / replace / list over ~/.ssh/authorized_keys with per-file locking
- Pluggable account lookup and ownership (POSIX, no-ownership, static table)
"""

from .atomic import atomic_write_file, atomic_write_file_and_change
from .crypto import key_fingerprint, parse_authorised_key
from .errors import (
    AtomicWriteError, AuthKeysError, DuplicateComment, DuplicateKey, InvalidKeyFormat,
    KeyNotFound, KeyStoreIOError, KeyValidationError, MissingComment, UserLookupError,
)
from .models import Account, AuthorisedKey, ListMode
from .observer import KeyStoreObserver, LoggingObserver
from .store import (
    AuthorisedKeysStore, add_keys, delete_keys, ensure_comment, get_key_store, list_keys,
    replace_keys,
)
from .utils import split_authorised_keys

__all__ = [
    "Account",
    "AtomicWriteError",
    "AuthKeysError",
    "AuthorisedKey",
    "AuthorisedKeysStore",
    "DuplicateComment",
    "DuplicateKey",
    "InvalidKeyFormat",
    "KeyNotFound",
    "KeyStoreIOError",
    "KeyStoreObserver",
    "KeyValidationError",
    "ListMode",
    "LoggingObserver",
    "MissingComment",
    "UserLookupError",
    "add_keys",
    "atomic_write_file",
    "atomic_write_file_and_change",
    "delete_keys",
    "ensure_comment",
    "get_key_store",
    "key_fingerprint",
    "list_keys",
    "parse_authorised_key",
    "replace_keys",
    "split_authorised_keys",
]
