"""
authkeys_core.crypto
--------------------
Parsing and fingerprinting of authorized_keys public-key lines:

- parse_authorised_key(): "[options] type base64-blob [comment]" -> AuthorisedKey
- key_fingerprint(): RFC4716 MD5 fingerprint plus comment

Key material for RSA, ECDSA and Ed25519 is validated and re-marshalled with
`cryptography`, so the fingerprint is computed over canonical wire bytes and
never over the caller's formatting.
"""

from __future__ import annotations
from typing import Tuple
from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import serialization
import hashlib, re
from .constants import CRYPTOGRAPHY_KEY_TYPES, KNOWN_KEY_TYPES
from .errors import InvalidKeyFormat
from .models import AuthorisedKey
from .utils import b64d, colon_hex, read_ssh_string

_FIELD_SEP = re.compile(r"[ \t]+")

# Wire fields following the algorithm name, for types checked on structure only.
_STRUCTURAL_FIELDS = {
    "ssh-dss": 4,                               # p, q, g, y
    "sk-ecdsa-sha2-nistp256@openssh.com": 3,    # curve, Q, application
    "sk-ssh-ed25519@openssh.com": 2,            # pk, application
}


def _marshal(key_type: str, blob_b64: str) -> bytes:
    if key_type not in KNOWN_KEY_TYPES:
        raise ValueError(f"unknown key type {key_type!r}")
    blob = b64d(blob_b64)
    name, offset = read_ssh_string(blob)
    if name != key_type.encode("ascii"):
        raise ValueError(f"key type {key_type!r} does not match key data")

    if key_type in CRYPTOGRAPHY_KEY_TYPES:
        try:
            pub = serialization.load_ssh_public_key(f"{key_type} {blob_b64}".encode("ascii"))
        except UnsupportedAlgorithm as e:
            raise ValueError(str(e)) from e
        text = pub.public_bytes(serialization.Encoding.OpenSSH, serialization.PublicFormat.OpenSSH)
        return b64d(text.split(b" ")[1].decode("ascii"))

    for _ in range(_STRUCTURAL_FIELDS[key_type]):
        _, offset = read_ssh_string(blob, offset)
    if offset != len(blob):
        raise ValueError("trailing data after key")
    return blob


def _parse_fields(text: str) -> AuthorisedKey:
    parts = _FIELD_SEP.split(text.strip(" \t"), 2)
    if len(parts) < 2:
        raise ValueError("missing key data")
    key_type, blob_b64 = parts[0], parts[1]
    comment = parts[2].strip() if len(parts) > 2 else ""
    return AuthorisedKey(type=key_type, key=_marshal(key_type, blob_b64), comment=comment)


def _strip_options(text: str) -> str:
    """Drop a leading options field (e.g. `command="a b",no-pty`)."""
    in_quote = False
    i = 0
    while i < len(text):
        ch = text[i]
        if ch == "\\" and text[i + 1:i + 2] == '"':
            i += 2
            continue
        if ch == '"':
            in_quote = not in_quote
        elif ch in " \t" and not in_quote:
            return text[i:].lstrip(" \t")
        i += 1
    return ""


def parse_authorised_key(line: str) -> AuthorisedKey:
    """
    Parse a non-comment line from an authorized_keys file.

    Raises InvalidKeyFormat for blank lines, '#' comments and anything that
    is not a recognised public key.
    """
    text = line.strip()
    # One key per line; embedded line breaks would smuggle in further keys.
    if not text or text.startswith("#") or "\n" in text or "\r" in text:
        raise InvalidKeyFormat(line)

    for candidate in (text, _strip_options(text)):
        if not candidate:
            continue
        try:
            return _parse_fields(candidate)
        except ValueError:
            continue
    raise InvalidKeyFormat(line)


def key_fingerprint(line: str) -> Tuple[str, str]:
    """
    Return (fingerprint, comment) for an authorized_keys line.

    Fingerprints follow RFC4716 section 4: MD5 over the wire-encoded key,
    printed as colon separated lowercase hex octets.
    """
    ak = parse_authorised_key(line)
    return colon_hex(hashlib.md5(ak.key).digest()), ak.comment
