from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from importlib import resources
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from platformdirs import user_config_dir

from .errors import ConfigError

logger = logging.getLogger(__name__)

APP_NAME = "startup-movie"
CONFIG_FILENAME = "config.yaml"

# Environment variable override for the user config file
ENV_CONFIG_PATH = "STARTUP_MOVIE_CONFIG"


@dataclass
class MovieConfig:
    """Where the clip slots live and how their filenames are built.

    All slots and the state file sit directly inside ``movies_dir``:

    - active: ``active_name`` (the file the engine opens)
    - default: ``default_name`` (no extension, its existence is the signal)
    - level clips: ``level_prefix + <level> + extension``
    - persisted state: ``state_name``
    """

    movies_dir: Path = field(default_factory=lambda: Path("../../../UDKGame/Movies"))
    active_name: str = "UDKFrontEnd.udk_loading.bik"
    default_name: str = "LoadingScreen_"
    level_prefix: str = "LoadingScreen_"
    extension: str = ".bik"
    state_name: str = "LastLoaded.txt"
    encoding: str = "utf-8"
    max_identifier_bytes: int = 255

    def __post_init__(self) -> None:
        self.movies_dir = Path(self.movies_dir)
        if self.max_identifier_bytes < 1:
            raise ConfigError(f"max_identifier_bytes must be positive, got {self.max_identifier_bytes}")
        for name in ("active_name", "default_name", "state_name"):
            value = getattr(self, name)
            if not value or os.sep in value or "/" in value:
                raise ConfigError(f"{name} must be a bare filename, got {value!r}")
        if self.active_name == self.default_name:
            raise ConfigError("active_name and default_name must differ")
        try:
            "".encode(self.encoding)
        except LookupError as exc:
            raise ConfigError(f"Unknown identifier encoding: {self.encoding}") from exc

    def with_movies_dir(self, movies_dir: Path) -> "MovieConfig":
        data = self.to_dict()
        data["movies"]["directory"] = str(movies_dir)
        return MovieConfig.from_dict(data)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "movies": {
                "directory": str(self.movies_dir),
                "active_name": self.active_name,
                "default_name": self.default_name,
                "level_prefix": self.level_prefix,
                "extension": self.extension,
            },
            "state": {"filename": self.state_name},
            "identifiers": {
                "encoding": self.encoding,
                "max_bytes": self.max_identifier_bytes,
            },
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any], base_dir: Optional[Path] = None) -> "MovieConfig":
        """Build a config from the nested YAML layout.

        A relative ``movies.directory`` is resolved against ``base_dir`` when
        given (the directory of the file it came from).
        """
        allowed = {"movies", "state", "identifiers"}
        unknown = set(data) - allowed
        if unknown:
            raise ConfigError(f"Unknown config sections: {', '.join(sorted(unknown))}")
        movies = data.get("movies") or {}
        state = data.get("state") or {}
        identifiers = data.get("identifiers") or {}

        directory = movies.get("directory")
        if directory is None:
            raise ConfigError("movies.directory is required")
        movies_dir = Path(str(directory)).expanduser()
        if base_dir is not None and not movies_dir.is_absolute():
            movies_dir = base_dir / movies_dir

        try:
            return cls(
                movies_dir=movies_dir,
                active_name=str(movies["active_name"]),
                default_name=str(movies["default_name"]),
                level_prefix=str(movies["level_prefix"]),
                extension=str(movies["extension"]),
                state_name=str(state["filename"]),
                encoding=str(identifiers["encoding"]),
                max_identifier_bytes=int(identifiers["max_bytes"]),
            )
        except KeyError as exc:
            raise ConfigError(f"Missing config key: {exc.args[0]}") from exc
        except (TypeError, ValueError) as exc:
            raise ConfigError(f"Invalid config value: {exc}") from exc

    @staticmethod
    def _load_yaml(path: Path) -> dict:
        try:
            with path.open("r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as exc:
            raise ConfigError(f"Invalid YAML in {path}: {exc}") from exc
        if not isinstance(data, dict):
            raise ConfigError(f"Config file {path} must contain a mapping")
        return data

    @classmethod
    def _deep_merge(cls, base: dict, overlay: dict) -> dict:
        merged = dict(base)
        for k, v in (overlay or {}).items():
            if isinstance(v, dict) and isinstance(base.get(k), dict):
                merged[k] = cls._deep_merge(base[k], v)
            else:
                merged[k] = v
        return merged

    @classmethod
    def load(cls, user_path: Optional[Path] = None) -> "MovieConfig":
        """Load built-in defaults and overlay an optional user config file.

        When ``user_path`` is not given, the ``STARTUP_MOVIE_CONFIG`` variable
        and then the platform config directory are consulted. A missing
        explicit file is an error; a missing default file is not.
        """
        with resources.files("startupmovie.data").joinpath("default_config.yaml").open("r", encoding="utf-8") as f:
            default_data = yaml.safe_load(f) or {}

        explicit = user_path is not None or bool(os.getenv(ENV_CONFIG_PATH))
        path = Path(user_path) if user_path is not None else default_config_path()

        user_data: dict = {}
        base_dir: Optional[Path] = None
        if path.exists():
            user_data = cls._load_yaml(path)
            base_dir = path.resolve().parent
            logger.info("Loaded user config from %s", path)
        elif explicit:
            raise ConfigError(f"Config file not found: {path}")
        else:
            logger.debug("No user config at %s; using built-in defaults", path)

        merged = cls._deep_merge(default_data, user_data)
        # Relative directories from the built-in defaults stay relative to the cwd
        if not (user_data.get("movies") or {}).get("directory"):
            base_dir = None
        config = cls.from_dict(merged, base_dir=base_dir)
        logger.debug("Config merged: %s", config)
        return config

    def save(self, path: Path) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("w", encoding="utf-8") as f:
            yaml.safe_dump(self.to_dict(), f, sort_keys=False)
        logger.info("Saved config to %s", path)


def default_config_path() -> Path:
    """Return the user config file, honoring ``STARTUP_MOVIE_CONFIG``."""
    override = os.getenv(ENV_CONFIG_PATH)
    if override:
        return Path(override).expanduser()
    return Path(user_config_dir(appname=APP_NAME, appauthor=False)) / CONFIG_FILENAME
