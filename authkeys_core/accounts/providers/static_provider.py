from __future__ import annotations
from pathlib import Path
from typing import Dict, Iterable, Optional
import os
from authkeys_core.accounts.provider import AccountProvider
from authkeys_core.errors import KeyStoreIOError, UserLookupError
from authkeys_core.models import Account


class StaticAccountProvider(AccountProvider):
    """
    Explicit account table, for callers that manage keys for accounts the
    host user database does not know about (containers, chroots, tests).

    Ownership is applied only for accounts that carry a uid or gid.
    """

    def __init__(self, accounts: Optional[Iterable[Account]] = None, default_user: str = ""):
        self.accounts: Dict[str, Account] = {}
        self.default_user = default_user
        for acc in accounts or ():
            self.add_account(acc)

    def add_account(self, account: Account) -> None:
        self.accounts[account.name] = account

    def resolve_user(self, user: str) -> Account:
        name = user or self.default_user
        acc = self.accounts.get(name)
        if acc is None:
            raise UserLookupError(name)
        return acc

    def set_ownership(self, path: Path, account: Account) -> None:
        if account.uid is None and account.gid is None:
            return
        uid = -1 if account.uid is None else account.uid
        gid = -1 if account.gid is None else account.gid
        try:
            os.chown(path, uid, gid)
        except OSError as e:
            raise KeyStoreIOError(f"cannot set ownership of {path} to {account.name}: {e}") from e
