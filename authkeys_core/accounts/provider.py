# authkeys_core/accounts/provider.py
from __future__ import annotations
from abc import ABC, abstractmethod
from pathlib import Path
from authkeys_core.models import Account


class AccountProvider(ABC):
    """
    Platform capability used by the key store.

    resolve_user("") means the current process user. Providers raise
    UserLookupError for unknown users and KeyStoreIOError when ownership
    cannot be applied.
    """

    @abstractmethod
    def resolve_user(self, user: str) -> Account: ...

    @abstractmethod
    def set_ownership(self, path: Path, account: Account) -> None: ...
