from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from .errors import IdentifierError, StateNotWritableError, StateWriteError
from .identifiers import to_level_identifier

logger = logging.getLogger(__name__)


class TransitionState:
    """The level last known to own the Active slot, kept in a sidecar file.

    The file holds exactly the encoded identifier bytes and nothing else. It is
    the only record that survives a crash of the host process, so it wins over
    whatever leaving level the host reports. No locking is done; the host runs
    one transition at a time.
    """

    def __init__(self, path: Path, encoding: str = "utf-8", max_bytes: int = 255) -> None:
        self.path = Path(path)
        self.encoding = encoding
        self.max_bytes = max_bytes

    @property
    def exists(self) -> bool:
        return self.path.exists()

    def load(self) -> Optional[str]:
        """Return the persisted level, or None when there is no usable record.

        A missing file (first run) and an unreadable one both mean "no prior
        state"; the latter is logged. So is a record that is not a usable level
        name, such as one holding a path separator.
        """
        try:
            raw = self.path.read_bytes()
        except FileNotFoundError:
            return None
        except OSError as exc:
            logger.warning("Cannot read transition state %s: %s", self.path, exc)
            return None

        try:
            text = raw.decode(self.encoding)
        except UnicodeDecodeError as exc:
            logger.warning("Transition state %s is not valid %s: %s", self.path, self.encoding, exc)
            return None
        if not text:
            return None
        try:
            return to_level_identifier(text, self.encoding, self.max_bytes)
        except IdentifierError as exc:
            logger.warning("Ignoring transition state %s: %s", self.path, exc)
            return None

    def ensure_writable(self) -> None:
        """Open the state file for writing and close it straight away.

        Used on first run, before any clip is touched: if the outcome cannot be
        recorded the transition must not start.
        """
        try:
            with self.path.open("ab"):
                pass
        except OSError as exc:
            raise StateNotWritableError(
                f"Transition state {self.path} is not writable: {exc}", self.path
            ) from exc

    def store(self, identifier: str) -> None:
        """Truncate the state file and write ``identifier`` into it."""
        logger.debug("Recording %r in %s", identifier, self.path)
        try:
            with self.path.open("wb") as f:
                f.write(identifier.encode(self.encoding))
        except OSError as exc:
            raise StateWriteError(
                f"Failed to record transition state in {self.path}: {exc}", self.path
            ) from exc
