from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from .config import MovieConfig


@dataclass(frozen=True)
class SlotLayout:
    """Which slots existed when probed. Advisory only: files can move after."""

    active: bool
    default: bool
    loading_level: bool
    leaving_level: bool

    def describe(self) -> str:
        flags = {
            "active": self.active,
            "default": self.default,
            "loading": self.loading_level,
            "leaving": self.leaving_level,
        }
        return " ".join(f"{name}={'yes' if present else 'no'}" for name, present in flags.items())


class SlotPaths:
    """Path construction and read-only existence probes for the clip slots."""

    def __init__(self, config: MovieConfig) -> None:
        self.config = config
        self.root = Path(config.movies_dir)

    @property
    def active(self) -> Path:
        return self.root / self.config.active_name

    @property
    def default(self) -> Path:
        return self.root / self.config.default_name

    @property
    def state_file(self) -> Path:
        return self.root / self.config.state_name

    def level(self, identifier: str) -> Path:
        return self.root / f"{self.config.level_prefix}{identifier}{self.config.extension}"

    @staticmethod
    def exists(path: Path) -> bool:
        return os.path.exists(path)

    def probe(self, leaving: str, loading: str) -> SlotLayout:
        return SlotLayout(
            active=self.exists(self.active),
            default=self.exists(self.default),
            loading_level=self.exists(self.level(loading)),
            leaving_level=self.exists(self.level(leaving)),
        )
