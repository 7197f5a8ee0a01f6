"""
authkeys_core.store
-------------------
Read-modify-write management of a user's ~/.ssh/authorized_keys.

Every operation re-reads the file, applies its policy in memory and persists
the result through atomic_write_file(), so a failed call never leaves a
partially updated file behind. Calls touching the same file are serialised
by a lock keyed on the resolved file path; different users do not contend.
"""

from __future__ import annotations
from contextlib import contextmanager
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Tuple, Union
import os, stat, threading
from .accounts import AccountProvider, load_account_provider
from .atomic import atomic_write_file
from .constants import (
    AUTH_KEYS_FILE, DEFAULT_COMMENT_SUFFIX, DEFAULT_KEYS_FILE_MODE, SSH_DIR, SSH_DIR_MODE,
)
from .crypto import key_fingerprint, parse_authorised_key
from .errors import (
    DuplicateComment, DuplicateKey, InvalidKeyFormat, KeyNotFound, KeyStoreIOError, MissingComment,
)
from .models import Account, ListMode
from .observer import KeyStoreObserver, LoggingObserver
from .utils import is_comment_line, trim_line

# Lines are kept byte-for-byte, even when they are not valid UTF-8.
_ENCODING = "utf-8"
_ERRORS = "surrogateescape"

_locks_guard = threading.Lock()
_path_locks: Dict[str, threading.Lock] = {}


def _lock_for(path: Path) -> threading.Lock:
    key = os.path.realpath(path)
    with _locks_guard:
        lock = _path_locks.get(key)
        if lock is None:
            lock = _path_locks[key] = threading.Lock()
        return lock


def _normalise(key: str) -> str:
    key = key.strip(" \r\n")
    if "\n" in key or "\r" in key:
        raise InvalidKeyFormat(key)
    return key


class AuthorisedKeysStore:
    """
    Add, delete, replace and list public keys in a user's authorized_keys.

    user == "" means the current process user. Keys given to delete_keys()
    may be fingerprints or comments.
    """

    def __init__(self, accounts: Optional[AccountProvider] = None,
                 observer: Optional[KeyStoreObserver] = None):
        self.accounts = accounts or load_account_provider()
        self.observer = observer or LoggingObserver()

    # --- paths & locking ---

    def _locate(self, user: str) -> Tuple[Account, Path]:
        account = self.accounts.resolve_user(user)
        return account, account.home / SSH_DIR / AUTH_KEYS_FILE

    def path_for(self, user: str) -> Path:
        return self._locate(user)[1]

    @contextmanager
    def _locked(self, user: str) -> Iterator[Tuple[Account, Path]]:
        account, path = self._locate(user)
        with _lock_for(path):
            yield account, path

    def _report(self, line: str, err: Exception, action: str) -> None:
        # Plain '#' comments are expected in the file and never reported.
        if not is_comment_line(line):
            self.observer.invalid_key(line, err, action)

    # --- raw file access (caller holds the lock) ---

    def _read(self, path: Path) -> List[str]:
        try:
            data = path.read_text(encoding=_ENCODING, errors=_ERRORS)
        except FileNotFoundError:
            return []
        except OSError as e:
            raise KeyStoreIOError(f"reading ssh authorised keys file: {e}") from e

        lines = []
        for line in data.split("\n"):
            line = trim_line(line)
            if line:
                lines.append(line)
        return lines

    def _write(self, account: Account, path: Path, lines: List[str]) -> None:
        try:
            path.parent.mkdir(mode=SSH_DIR_MODE, parents=True, exist_ok=True)
        except OSError as e:
            raise KeyStoreIOError(f"cannot create ssh key directory: {e}") from e

        data = "\n".join(lines) + "\n"

        try:
            perms = stat.S_IMODE(path.stat().st_mode)
        except FileNotFoundError:
            perms = DEFAULT_KEYS_FILE_MODE

        self.observer.writing(path)
        atomic_write_file(path, data.encode(_ENCODING, _ERRORS), perms)
        self.accounts.set_ownership(path, account)

    # --- public operations ---

    def read(self, user: str) -> List[str]:
        """Return the non-blank lines of the file, comments included."""
        with self._locked(user) as (_, path):
            return self._read(path)

    def write(self, user: str, lines: List[str]) -> None:
        with self._locked(user) as (account, path):
            self._write(account, path, list(lines))

    def add_keys(self, user: str, *new_keys: str) -> None:
        """
        Append new_keys to the file. Every key needs a comment, and neither its
        fingerprint nor its comment may already be present. Any failure aborts
        the whole batch before anything is written.
        """
        candidates = [_normalise(k) for k in new_keys]
        with self._locked(user) as (account, path):
            existing = self._read(path)

            known: List[Tuple[str, str]] = []
            for line in existing:
                try:
                    known.append(key_fingerprint(line))
                except InvalidKeyFormat as e:
                    self._report(line, e, "kept")

            for key in candidates:
                fingerprint, comment = key_fingerprint(key)
                if not comment:
                    raise MissingComment(key)
                for existing_fingerprint, existing_comment in known:
                    if existing_fingerprint == fingerprint:
                        raise DuplicateKey(fingerprint)
                    if existing_comment == comment:
                        raise DuplicateComment(comment)

            self._write(account, path, existing + candidates)

    def delete_keys(self, user: str, *key_ids: str) -> None:
        """
        Remove the keys identified by fingerprint or comment. An unknown id
        fails the whole call with KeyNotFound and nothing is written.
        """
        with self._locked(user) as (account, path):
            keys_to_write: List[str] = []
            ssh_keys: Dict[str, str] = {}
            key_comments: Dict[str, str] = {}
            for line in self._read(path):
                try:
                    fingerprint, comment = key_fingerprint(line)
                except InvalidKeyFormat as e:
                    self._report(line, e, "kept")
                    keys_to_write.append(line)
                    continue
                ssh_keys[fingerprint] = line
                if comment:
                    key_comments[comment] = fingerprint

            for key_id in key_ids:
                fingerprint = key_id
                if fingerprint not in ssh_keys:
                    fingerprint = key_comments.get(key_id)
                    if fingerprint is None:
                        raise KeyNotFound(key_id)
                # Already removed through another id for the same key.
                ssh_keys.pop(fingerprint, None)

            keys_to_write.extend(ssh_keys.values())
            self._write(account, path, keys_to_write)

    def replace_keys(self, user: str, *new_keys: str) -> None:
        """Swap every parseable key for new_keys; other lines are kept."""
        candidates = [_normalise(k) for k in new_keys]
        with self._locked(user) as (account, path):
            non_key_lines = []
            for line in self._read(path):
                try:
                    parse_authorised_key(line)
                except InvalidKeyFormat:
                    non_key_lines.append(line)
            self._write(account, path, non_key_lines + candidates)

    def list_keys(self, user: str, mode: Union[ListMode, str] = ListMode.FULL) -> List[str]:
        mode = ListMode(mode)
        keys = []
        with self._locked(user) as (_, path):
            for line in self._read(path):
                try:
                    fingerprint, comment = key_fingerprint(line)
                except InvalidKeyFormat as e:
                    self._report(line, e, "ignored")
                    continue
                if mode is ListMode.FULL:
                    keys.append(line)
                elif comment:
                    keys.append(f"{fingerprint} ({comment})")
                else:
                    keys.append(fingerprint)
        return keys

    def status(self, user: str) -> dict:
        valid = 0
        with self._locked(user) as (_, path):
            exists = path.exists()
            lines = self._read(path)
            for line in lines:
                try:
                    parse_authorised_key(line)
                except InvalidKeyFormat:
                    continue
                valid += 1
        return {
            "authorized_keys_path": str(path),
            "file_exists": exists,
            "registered_keys": valid,
            "unrecognised_lines": len(lines) - valid,
        }


def ensure_comment(prefix: str, key: str, observer: Optional[KeyStoreObserver] = None) -> str:
    """
    Make sure the key's comment starts with `prefix`, so keys added by a
    caller can be told apart from keys added externally. Keys without a
    comment get `prefix + "sshkey"`. Invalid keys are returned unchanged.
    """
    try:
        ak = parse_authorised_key(key)
    except InvalidKeyFormat as e:
        (observer or LoggingObserver()).invalid_key(key, e, "unchanged")
        return key

    if not ak.comment:
        return f"{key} {prefix}{DEFAULT_COMMENT_SUFFIX}"
    if not ak.comment.startswith(prefix):
        i = key.rfind(ak.comment)
        return key[:i] + prefix + key[i:]
    return key


# Module-level singleton
_key_store: Optional[AuthorisedKeysStore] = None
_key_store_guard = threading.Lock()


def get_key_store() -> AuthorisedKeysStore:
    """Get or create the shared AuthorisedKeysStore instance."""
    global _key_store
    with _key_store_guard:
        if _key_store is None:
            _key_store = AuthorisedKeysStore()
        return _key_store


def add_keys(user: str, *new_keys: str) -> None:
    get_key_store().add_keys(user, *new_keys)


def delete_keys(user: str, *key_ids: str) -> None:
    get_key_store().delete_keys(user, *key_ids)


def replace_keys(user: str, *new_keys: str) -> None:
    get_key_store().replace_keys(user, *new_keys)


def list_keys(user: str, mode: Union[ListMode, str] = ListMode.FULL) -> List[str]:
    return get_key_store().list_keys(user, mode)
