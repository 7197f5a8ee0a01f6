from __future__ import annotations
from pathlib import Path
import os, pwd
from authkeys_core.accounts.provider import AccountProvider
from authkeys_core.errors import KeyStoreIOError, UserLookupError
from authkeys_core.models import Account


class PosixAccountProvider(AccountProvider):
    """Resolves users through the passwd database and chowns files to them."""

    def resolve_user(self, user: str) -> Account:
        try:
            entry = pwd.getpwnam(user) if user else pwd.getpwuid(os.getuid())
        except KeyError as e:
            raise UserLookupError(user or str(os.getuid())) from e
        return Account(
            name=entry.pw_name,
            home=Path(entry.pw_dir),
            uid=entry.pw_uid,
            gid=entry.pw_gid,
        )

    def set_ownership(self, path: Path, account: Account) -> None:
        try:
            os.chown(path, account.uid, account.gid)
        except OSError as e:
            raise KeyStoreIOError(f"cannot set ownership of {path} to {account.name}: {e}") from e
