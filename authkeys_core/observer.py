# authkeys_core/observer.py
from __future__ import annotations
from pathlib import Path
from .logger import get_logger


class KeyStoreObserver:
    """
    Diagnostics hook injected into the key store. The base class ignores
    everything; subclass it to capture or forward events.

    invalid_key() receives the offending line, the parse error and what was
    done with the line: "ignored", "kept" or "unchanged".
    """

    def invalid_key(self, line: str, error: Exception, action: str) -> None:
        pass

    def writing(self, path: Path) -> None:
        pass


class LoggingObserver(KeyStoreObserver):
    def __init__(self, logger=None):
        self.log = logger or get_logger("authkeys.store")

    def invalid_key(self, line: str, error: Exception, action: str) -> None:
        if action == "ignored":
            self.log.warning(f"ignoring invalid ssh key {line!r}: {error}")
        elif action == "kept":
            self.log.warning(f"keeping unrecognised existing ssh key {line!r}: {error}")
        else:
            self.log.warning(f"invalid ssh key {line!r}: {error}")

    def writing(self, path: Path) -> None:
        self.log.info(f"writing authorised keys file {path}")
