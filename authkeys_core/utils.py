"""
authkeys_core.utils
-------------------
Lightweight helpers for base64, SSH wire strings, authorized_keys line handling
and RFC4716 fingerprint formatting.
"""

from __future__ import annotations
import base64, binascii, struct
from typing import List, Tuple

LINE_TRIM = " \r"


def b64d(s: str) -> bytes:
    # validate=True rejects stray characters instead of silently dropping them
    try:
        return base64.b64decode(s.encode("ascii"), validate=True)
    except (binascii.Error, UnicodeEncodeError) as e:
        raise ValueError(f"invalid base64 data: {e}") from e

def read_ssh_string(data: bytes, offset: int = 0) -> Tuple[bytes, int]:
    """Read one uint32-length-prefixed string; returns (value, next_offset)."""
    if len(data) - offset < 4:
        raise ValueError("truncated ssh string length")
    (length,) = struct.unpack(">I", data[offset:offset + 4])
    start = offset + 4
    end = start + length
    if end > len(data):
        raise ValueError("truncated ssh string")
    return data[start:end], end

def trim_line(line: str) -> str:
    return line.strip(LINE_TRIM)

def is_comment_line(line: str) -> bool:
    return line.lstrip(LINE_TRIM).startswith("#")

def split_authorised_keys(key_data: str) -> List[str]:
    """
    Split a caller-supplied blob of keys into candidate key lines,
    dropping blank lines and '#' comments.
    """
    keys = []
    for key in key_data.split("\n"):
        key = trim_line(key)
        if not key or key.startswith("#"):
            continue
        keys.append(key)
    return keys

def colon_hex(digest: bytes) -> str:
    return ":".join(f"{b:02x}" for b in digest)
