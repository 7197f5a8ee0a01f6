from __future__ import annotations
from pathlib import Path
import getpass, os
from authkeys_core.accounts.provider import AccountProvider
from authkeys_core.errors import UserLookupError
from authkeys_core.models import Account


class NoOwnershipAccountProvider(AccountProvider):
    """
    For platforms without POSIX ownership (Windows). Home directories come
    from the user profile lookup; ownership changes are skipped.
    """

    def resolve_user(self, user: str) -> Account:
        current = getpass.getuser()
        if not user or user == current:
            return Account(name=current, home=Path.home())

        home = os.path.expanduser(f"~{user}")
        if home.startswith("~"):
            raise UserLookupError(user)
        if not os.path.isdir(home):
            raise UserLookupError(user, f"no home directory at {home}")
        return Account(name=user, home=Path(home))

    def set_ownership(self, path: Path, account: Account) -> None:
        return None
