import sys
from pathlib import Path

import pytest

# Ensure 'src' is on sys.path for test imports without installing the package
ROOT = Path(__file__).resolve().parents[1]
src = ROOT / "src"
if str(src) not in sys.path:
    sys.path.insert(0, str(src))

from startupmovie.config import MovieConfig  # noqa: E402
from startupmovie.slots import SlotPaths  # noqa: E402


class MovieDir:
    """A temporary movies directory with helpers to lay out clip slots."""

    def __init__(self, config: MovieConfig) -> None:
        self.config = config
        self.slots = SlotPaths(config)

    def level_path(self, level: str) -> Path:
        return self.slots.level(level)

    def setup(self, active=None, default=None, levels=None, state=None) -> None:
        if active is not None:
            self.slots.active.write_bytes(active)
        if default is not None:
            self.slots.default.write_bytes(default)
        for level, content in (levels or {}).items():
            self.level_path(level).write_bytes(content)
        if state is not None:
            self.slots.state_file.write_bytes(state)

    def read(self, path: Path):
        return path.read_bytes() if path.exists() else None

    @property
    def active(self):
        return self.read(self.slots.active)

    @property
    def default(self):
        return self.read(self.slots.default)

    @property
    def state(self):
        return self.read(self.slots.state_file)

    def level(self, level: str):
        return self.read(self.level_path(level))

    def snapshot(self) -> dict:
        return {p.name: p.read_bytes() for p in sorted(self.slots.root.iterdir()) if p.is_file()}


@pytest.fixture()
def movie_config(tmp_path) -> MovieConfig:
    movies_dir = tmp_path / "Movies"
    movies_dir.mkdir()
    return MovieConfig(movies_dir=movies_dir)


@pytest.fixture()
def movies(movie_config) -> MovieDir:
    return MovieDir(movie_config)


@pytest.fixture()
def isolated_user_config(tmp_path, monkeypatch) -> Path:
    """Point the platform config directory at an empty temp dir."""
    config_dir = tmp_path / "user_config"
    config_dir.mkdir()
    monkeypatch.delenv("STARTUP_MOVIE_CONFIG", raising=False)
    monkeypatch.setattr("startupmovie.config.user_config_dir", lambda appname, appauthor=None: str(config_dir))
    return config_dir
