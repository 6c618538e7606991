"""
Configuration management for Kotoba.

This module centralizes all configuration settings:
- Overrides loaded from environment variables (and an optional .env file)
- Sensible defaults for development
- Single source of truth for paths, progress rules, search and logging
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


def _env_bool(name: str, default: bool) -> bool:
    """Read a boolean flag from the environment."""
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


@dataclass
class PathConfig:
    """File system paths - single source of truth for all directories."""

    # Base paths
    project_root: Path = field(default_factory=lambda: Path(__file__).parent.parent)
    package_root: Path = field(default_factory=lambda: Path(__file__).parent)
    data_dir: Path = field(
        default_factory=lambda: Path(
            os.getenv("KOTOBA_DATA_DIR", str(Path(__file__).parent.parent / "data"))
        )
    )

    # Bundled resources (computed from package_root)
    schemas_dir: Path = field(init=False)
    catalog_dir: Path = field(init=False)

    def __post_init__(self):
        """Initialize computed paths."""
        self.data_dir = Path(self.data_dir)
        self.schemas_dir = self.package_root / "schemas"
        self.catalog_dir = self.package_root / "catalog"

    def prepare_filesystem(self):
        """
        Create the data directory if it doesn't exist.

        Separated from __post_init__ to avoid side-effects on import.
        Call this explicitly from your app entrypoint.
        """
        self.data_dir.mkdir(parents=True, exist_ok=True)


@dataclass
class ProgressConfig:
    """Rules for recent lessons, daily goals and quiz rewards."""

    recent_lessons_limit: int = 5
    daily_lesson_target: int = 2  # "Complete 2 Lessons"
    points_per_correct_answer: int = 1


@dataclass
class SearchConfig:
    """Flashcard search configuration."""

    # Delay before a typed query is executed
    debounce_seconds: float = field(
        default_factory=lambda: float(os.getenv("KOTOBA_SEARCH_DEBOUNCE", "0.3"))
    )
    # Catalog-only by default; custom lessons are searched when enabled
    include_custom_lessons: bool = field(
        default_factory=lambda: _env_bool("KOTOBA_SEARCH_INCLUDE_CUSTOM", False)
    )


@dataclass
class LoggingConfig:
    """Logging configuration."""

    log_level: str = field(default_factory=lambda: os.getenv("KOTOBA_LOG_LEVEL", "INFO"))
    log_format: str = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class Config:
    """
    Main configuration class. Singleton pattern.

    Usage:
        from kotoba.config import config

        # Access settings
        limit = config.progress.recent_lessons_limit
        delay = config.search.debounce_seconds

        # Prepare filesystem (call once at startup)
        config.prepare_fs()
    """

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance.paths = PathConfig()
            cls._instance.progress = ProgressConfig()
            cls._instance.search = SearchConfig()
            cls._instance.logging = LoggingConfig()

        return cls._instance

    def prepare_fs(self):
        """Prepare filesystem (create directories). Call once at startup."""
        self.paths.prepare_filesystem()

    def configure_logging(self) -> None:
        """Apply the logging section to the root logger."""
        logging.basicConfig(
            level=self.logging.log_level.upper(),
            format=self.logging.log_format,
        )

    def validate(self) -> list[str]:
        """
        Validate configuration and return list of errors.

        Returns:
            List of error messages (empty if valid)
        """
        errors = []

        # Progress validation
        if self.progress.recent_lessons_limit < 1:
            errors.append(
                f"recent_lessons_limit must be >= 1, got {self.progress.recent_lessons_limit}"
            )

        if self.progress.daily_lesson_target < 1:
            errors.append(
                f"daily_lesson_target must be >= 1, got {self.progress.daily_lesson_target}"
            )

        if self.progress.points_per_correct_answer < 0:
            errors.append(
                f"points_per_correct_answer must be >= 0, got {self.progress.points_per_correct_answer}"
            )

        # Search validation
        if self.search.debounce_seconds < 0:
            errors.append(
                f"search debounce_seconds must be >= 0, got {self.search.debounce_seconds}"
            )

        # Logging validation
        if logging.getLevelName(self.logging.log_level.upper()) not in (
            logging.DEBUG,
            logging.INFO,
            logging.WARNING,
            logging.ERROR,
            logging.CRITICAL,
        ):
            errors.append(f"Unknown log level: {self.logging.log_level}")

        # Path validation
        if not self.paths.schemas_dir.exists():
            errors.append(f"Schemas directory not found: {self.paths.schemas_dir}")

        if not self.paths.catalog_dir.exists():
            errors.append(f"Catalog directory not found: {self.paths.catalog_dir}")

        return errors


# Global config instance
config = Config()
