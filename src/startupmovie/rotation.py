from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import List, Optional, Tuple

from .errors import (
    ActiveSlotEmptyError,
    SlotMissingError,
    SlotOccupiedError,
    SlotOperationError,
)
from .slots import SlotLayout, SlotPaths

logger = logging.getLogger(__name__)


class ActionKind(str, Enum):
    PARK = "park"  # move the clip out of Active to where it can be reused
    INSTALL = "install"  # move a clip into Active
    DISCARD = "discard"  # delete a stale duplicate of the default clip


@dataclass(frozen=True)
class SlotAction:
    kind: ActionKind
    source: Path
    target: Optional[Path] = None

    def __post_init__(self) -> None:
        if (self.target is None) != (self.kind is ActionKind.DISCARD):
            raise ValueError(f"{self.kind.value} action needs a target exactly when it moves a file")

    def __str__(self) -> str:
        if self.target is None:
            return f"{self.kind.value} {self.source.name}"
        return f"{self.kind.value} {self.source.name} -> {self.target.name}"


@dataclass
class RotationResult:
    leaving: str
    loading: str
    layout: SlotLayout
    actions: List[SlotAction] = field(default_factory=list)

    @property
    def changed(self) -> bool:
        return bool(self.actions)


def plan_rotation(layout: SlotLayout, slots: SlotPaths, leaving: str, loading: str) -> Tuple[SlotAction, ...]:
    """Decide which renames and deletes put the right clip into Active.

    Pure function of the probed layout; at most three actions. The clip in
    Active belongs to ``leaving`` when the default clip is parked (Default
    exists) and is the default clip otherwise.
    """
    active = slots.active
    default = slots.default
    leaving_clip = slots.level(leaving)
    loading_clip = slots.level(loading)

    if layout.loading_level:
        actions: List[SlotAction] = []
        # Active is already empty when an earlier rotation stopped right after parking
        if layout.active:
            if not layout.default:
                actions.append(SlotAction(ActionKind.PARK, active, default))
            elif layout.leaving_level:
                actions.append(SlotAction(ActionKind.DISCARD, default))
            else:
                actions.append(SlotAction(ActionKind.PARK, active, leaving_clip))
        actions.append(SlotAction(ActionKind.INSTALL, loading_clip, active))
        return tuple(actions)

    if not layout.default:
        if not layout.active:
            raise ActiveSlotEmptyError(
                f"No clip for {loading!r}, no parked default and {active.name} is missing"
            )
        # Default clip already installed
        return ()

    if not layout.active:
        return (SlotAction(ActionKind.INSTALL, default, active),)

    if layout.leaving_level:
        return (SlotAction(ActionKind.DISCARD, default),)

    return (
        SlotAction(ActionKind.PARK, active, leaving_clip),
        SlotAction(ActionKind.INSTALL, default, active),
    )


class SlotRotator:
    """Moves clips between the Active, Default and level slots.

    Every step is a single rename or delete. The first failing step raises a
    RotationError that records what was already applied; later steps are not
    attempted.
    """

    def __init__(self, slots: SlotPaths) -> None:
        self.slots = slots

    def plan(self, leaving: str, loading: str) -> Tuple[SlotLayout, Tuple[SlotAction, ...]]:
        if leaving == loading:
            raise ValueError(f"Rotation needs two different levels, got {loading!r} twice")
        layout = self.slots.probe(leaving, loading)
        logger.debug("Probed slots for %r -> %r: %s", leaving, loading, layout.describe())
        return layout, plan_rotation(layout, self.slots, leaving, loading)

    def rotate(self, leaving: str, loading: str) -> RotationResult:
        layout, actions = self.plan(leaving, loading)
        result = RotationResult(leaving=leaving, loading=loading, layout=layout)
        if not actions:
            logger.info("Default clip already active for %r; nothing to move", loading)
            return result

        for action in actions:
            self._apply(action, tuple(result.actions))
            result.actions.append(action)
        logger.info(
            "Rotated clips for %r -> %r: %s",
            leaving,
            loading,
            "; ".join(str(a) for a in result.actions),
        )
        return result

    def _apply(self, action: SlotAction, completed: Tuple[SlotAction, ...]) -> None:
        logger.debug("Applying %s", action)
        try:
            if action.kind is ActionKind.DISCARD:
                logger.info("Discarding stale duplicate %s", action.source)
                os.unlink(action.source)
            elif action.kind is ActionKind.PARK:
                if action.target.exists():
                    raise SlotOccupiedError(
                        f"Cannot park {action.source.name}: {action.target.name} appeared after probing",
                        action,
                        completed,
                    )
                os.rename(action.source, action.target)
            else:
                os.replace(action.source, action.target)
        except FileExistsError as exc:
            raise SlotOccupiedError(f"Cannot {action}: target already exists", action, completed) from exc
        except FileNotFoundError as exc:
            if not action.source.exists():
                raise SlotMissingError(
                    f"Cannot {action}: {action.source.name} vanished after probing", action, completed
                ) from exc
            raise SlotOperationError(f"Cannot {action}: {exc}", action, completed) from exc
        except OSError as exc:
            raise SlotOperationError(f"Cannot {action}: {exc}", action, completed) from exc
