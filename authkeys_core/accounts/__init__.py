# authkeys_core/accounts/__init__.py

from __future__ import annotations

from pathlib import Path
import os
from authkeys_core.constants import ENV_ACCOUNT_PROVIDER
from authkeys_core.models import Account
from .provider import AccountProvider
from .providers.none_provider import NoOwnershipAccountProvider
from .providers.static_provider import StaticAccountProvider


def _static_accounts(raw) -> list:
    accounts = []
    for name, entry in (raw or {}).items():
        if isinstance(entry, dict):
            accounts.append(Account(
                name=name,
                home=Path(entry["home"]),
                uid=entry.get("uid"),
                gid=entry.get("gid"),
            ))
        else:
            accounts.append(Account(name=name, home=Path(entry)))
    return accounts


def load_account_provider(config: dict | None = None) -> AccountProvider:
    """
    Factory resolver for the platform account capability.

    - posix  (default on POSIX): passwd lookup + chown
    - none   (default elsewhere): profile lookup, no ownership changes
    - static: accounts from config["accounts"]
    """
    config = config or {}
    default = "posix" if os.name == "posix" else "none"
    provider = (config.get("provider") or os.getenv(ENV_ACCOUNT_PROVIDER) or default).lower()

    if provider == "posix":
        # pwd only exists on POSIX platforms
        from .providers.posix_provider import PosixAccountProvider
        return PosixAccountProvider()

    if provider == "none":
        return NoOwnershipAccountProvider()

    if provider == "static":
        return StaticAccountProvider(
            _static_accounts(config.get("accounts")),
            default_user=config.get("default_user", ""),
        )

    raise ValueError(f"Unknown account provider: {provider}")


__all__ = [
    "AccountProvider",
    "NoOwnershipAccountProvider",
    "StaticAccountProvider",
    "load_account_provider",
]
