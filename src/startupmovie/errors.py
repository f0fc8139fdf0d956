from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Optional, Tuple

if TYPE_CHECKING:
    from .rotation import SlotAction


class StartupMovieError(Exception):
    """Base error for loading-clip selection failures."""


class ConfigError(StartupMovieError):
    """Raised when the configuration file or its values are invalid."""


class IdentifierError(StartupMovieError, ValueError):
    """Raised when a level name cannot be used as a filename fragment."""


class StateError(StartupMovieError):
    """Base class for persisted transition state failures."""

    def __init__(self, message: str, path: Path) -> None:
        super().__init__(message)
        self.path = path


class StateNotWritableError(StateError):
    """Raised when the state file cannot be opened for writing on first run."""


class StateWriteError(StateError):
    """Raised when the new state could not be recorded."""


class RotationError(StartupMovieError):
    """Raised when a slot rename or delete fails part way through a rotation.

    ``action`` is the step that failed (None for failures detected while
    planning) and ``completed`` lists the steps applied before it, so an
    operator can see exactly which files already moved.
    """

    def __init__(
        self,
        message: str,
        action: Optional["SlotAction"] = None,
        completed: Tuple["SlotAction", ...] = (),
    ) -> None:
        super().__init__(message)
        self.action = action
        self.completed = tuple(completed)


class SlotMissingError(RotationError):
    """Raised when a slot expected to be present vanished before it was moved."""


class SlotOccupiedError(RotationError):
    """Raised when a parking target appeared between probing and renaming."""


class SlotOperationError(RotationError):
    """Raised for any other OS-level failure while renaming or deleting a slot."""


class ActiveSlotEmptyError(RotationError):
    """Raised when neither Active nor any parked clip can fill the Active slot."""
