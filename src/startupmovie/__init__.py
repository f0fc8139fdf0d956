"""
Loading-screen clip selection for the host engine.

The engine only ever plays one fixed file. Before each level load this package
renames clips between three kinds of slot so that file holds the right bytes:

- the Active slot the engine reads
- the Default slot, where the generic clip is parked
- per-level slots holding level-specific clips

The level that last owned the Active slot is kept in a small state file so a
crash between renames can be recovered on the next call.
"""
from .config import MovieConfig
from .errors import (
    ActiveSlotEmptyError,
    ConfigError,
    IdentifierError,
    RotationError,
    SlotMissingError,
    SlotOccupiedError,
    SlotOperationError,
    StartupMovieError,
    StateError,
    StateNotWritableError,
    StateWriteError,
)
from .rotation import ActionKind, RotationResult, SlotAction, SlotRotator, plan_rotation
from .slots import SlotLayout, SlotPaths
from .state import TransitionState
from .transition import (
    SetStartupMovie,
    TransitionOutcome,
    Transitioner,
    TransitionStatus,
    set_startup_movie,
)

__version__ = "1.0.0"

__all__ = [
    "MovieConfig",
    "SlotLayout",
    "SlotPaths",
    "TransitionState",
    "ActionKind",
    "SlotAction",
    "RotationResult",
    "SlotRotator",
    "plan_rotation",
    "TransitionStatus",
    "TransitionOutcome",
    "Transitioner",
    "set_startup_movie",
    "SetStartupMovie",
    "StartupMovieError",
    "ConfigError",
    "IdentifierError",
    "StateError",
    "StateNotWritableError",
    "StateWriteError",
    "RotationError",
    "SlotMissingError",
    "SlotOccupiedError",
    "SlotOperationError",
    "ActiveSlotEmptyError",
]
