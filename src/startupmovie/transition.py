from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from .config import MovieConfig
from .errors import RotationError, StateWriteError
from .identifiers import to_level_identifier
from .rotation import SlotAction, SlotRotator
from .slots import SlotPaths
from .state import TransitionState

logger = logging.getLogger(__name__)


class TransitionStatus(str, Enum):
    UNCHANGED = "unchanged"
    ROTATED = "rotated"
    RECOVERED = "recovered"


@dataclass
class TransitionOutcome:
    status: TransitionStatus
    leaving: str
    loading: str
    actions: List[SlotAction] = field(default_factory=list)

    @property
    def changed(self) -> bool:
        return bool(self.actions)

    def summary(self) -> str:
        if not self.actions:
            return f"{self.status.value}: {self.leaving} -> {self.loading} (no files moved)"
        steps = "; ".join(str(a) for a in self.actions)
        return f"{self.status.value}: {self.leaving} -> {self.loading} ({steps})"


class Transitioner:
    """Drives one level transition: state first, then the slot rotation.

    Order of work:

    1. identical host names are a no-op
    2. the persisted level, when readable, replaces the host's leaving level
    3. on first run the state file must be writable before anything moves
    4. the loading level is recorded, then the clips are rotated

    If the persisted level already equals the loading level but that level's
    clip still sits in its own slot, or Active is empty, the previous call
    stopped between recording and installing; the rotation is resumed from the
    host's leaving level. A rotation that fails before moving any file puts
    the previous record back, so retrying the same transition redoes it.
    """

    def __init__(self, config: MovieConfig) -> None:
        self.config = config
        self.slots = SlotPaths(config)
        self.state = TransitionState(
            self.slots.state_file, encoding=config.encoding, max_bytes=config.max_identifier_bytes
        )
        self.rotator = SlotRotator(self.slots)

    def _identifier(self, text: str) -> str:
        return to_level_identifier(text, self.config.encoding, self.config.max_identifier_bytes)

    def switch(self, leaving: str, loading: str) -> TransitionOutcome:
        if leaving == loading:
            logger.debug("Leaving and loading level are both %r; nothing to change", loading)
            return TransitionOutcome(TransitionStatus.UNCHANGED, leaving, loading)

        leaving_id = self._identifier(leaving)
        loading_id = self._identifier(loading)

        status = TransitionStatus.ROTATED
        previous = self.state.load()
        if previous is not None:
            effective = previous
            if previous == loading_id:
                parked = self.slots.exists(self.slots.level(loading_id))
                active = self.slots.exists(self.slots.active)
                if active and not parked:
                    logger.debug("Persisted level already %r; nothing to change", loading_id)
                    return TransitionOutcome(TransitionStatus.UNCHANGED, previous, loading_id)
                logger.warning(
                    "Clip for %r recorded as loaded but not installed (active %s); resuming from %r",
                    loading_id,
                    "present" if active else "missing",
                    leaving_id,
                )
                effective = leaving_id
                status = TransitionStatus.RECOVERED
            elif previous != leaving_id:
                logger.info("Host reports leaving %r but %r was last loaded; trusting the record", leaving_id, previous)
        else:
            if leaving_id == loading_id:
                # Distinct host names that truncate to the same identifier
                return TransitionOutcome(TransitionStatus.UNCHANGED, leaving_id, loading_id)
            logger.info("No transition state at %s; first run", self.state.path)
            self.state.ensure_writable()
            effective = leaving_id

        if effective == loading_id:
            return TransitionOutcome(TransitionStatus.UNCHANGED, effective, loading_id)

        self.state.store(loading_id)
        try:
            result = self.rotator.rotate(effective, loading_id)
        except RotationError as exc:
            if not exc.completed:
                self._restore_record(previous if previous is not None else leaving_id)
            raise
        return TransitionOutcome(status, effective, loading_id, list(result.actions))

    def _restore_record(self, identifier: str) -> None:
        # Nothing moved, so the level that owned Active before this call still does
        try:
            self.state.store(identifier)
        except StateWriteError as exc:
            logger.error("Could not restore transition state to %r: %s", identifier, exc)
        else:
            logger.info("Rotation failed before any file moved; state restored to %r", identifier)


def set_startup_movie(leaving: str, loading: str, config: Optional[MovieConfig] = None) -> TransitionOutcome:
    """Make the Active clip match ``loading``.

    Raises a StartupMovieError subclass when the state cannot be recorded or a
    slot operation fails.
    """
    return Transitioner(config or MovieConfig.load()).switch(leaving, loading)


def SetStartupMovie(leaving_level: str, loading_level: str) -> None:  # noqa: N802 - host export name
    """Host-facing entry point using the default configuration."""
    set_startup_movie(leaving_level, loading_level)
