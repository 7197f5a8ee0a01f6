# authkeys_core/models.py
from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional


@dataclass(frozen=True)
class AuthorisedKey:
    """
    One parsed public-key line.

    `key` holds the SSH wire encoding of the key material only, so two lines
    that differ in comment, options or spacing share the same bytes.
    """
    type: str
    key: bytes
    comment: str = ""


class ListMode(str, Enum):
    FULL = "full"
    FINGERPRINT = "fingerprint"


@dataclass
class Account:
    """
    Resolved OS account owning an authorized_keys file.

    uid/gid are None where the platform has no POSIX ownership.
    """
    name: str
    home: Path
    uid: Optional[int] = None
    gid: Optional[int] = None
