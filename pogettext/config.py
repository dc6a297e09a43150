"""
Configuration for the translation context.

Handles:
- Library path, language and default domain settings
- Environment variable overrides
- Reading/writing settings to ~/.pogettext/config.yaml
- Thread-safe and process-safe file access

Concurrency Safety:
- Thread locks (threading.Lock) protect against race conditions within a single process
- File locks (fcntl.flock) protect against race conditions between multiple processes
"""

from __future__ import annotations

import logging
import os
import sys
import threading
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any

import yaml

from pogettext.detector import detect_os_language, simplified_locale

logger = logging.getLogger(__name__)

DEFAULT_LIBRARY = "/usr/local/share/locale"
DEFAULT_DOMAIN = "default"
DEFAULT_CONFIG_FILE = Path.home() / ".pogettext" / "config.yaml"

ENV_LIBRARY = "POGETTEXT_LIBRARY"
ENV_LANGUAGE = "POGETTEXT_LANGUAGE"
ENV_DOMAIN = "POGETTEXT_DOMAIN"
ENV_DEBUG = "POGETTEXT_DEBUG"

_file_lock = threading.Lock()


def _acquire_file_lock(file_obj: Any, exclusive: bool = False) -> None:
    """
    Acquire a file lock for concurrent access.

    Uses fcntl.flock on Unix systems; on Windows only the thread lock applies.
    """
    if sys.platform != "win32":
        import fcntl

        lock_type = fcntl.LOCK_EX if exclusive else fcntl.LOCK_SH
        try:
            fcntl.flock(file_obj.fileno(), lock_type)
        except OSError as e:
            logger.debug(f"Could not acquire file lock: {e}")


def _release_file_lock(file_obj: Any) -> None:
    if sys.platform != "win32":
        import fcntl

        try:
            fcntl.flock(file_obj.fileno(), fcntl.LOCK_UN)
        except OSError as e:
            logger.debug(f"Could not release file lock: {e}")


def read_config_file(path: Path) -> dict[str, Any]:
    """
    Load settings from a YAML file with proper locking.

    Returns:
        Dictionary of settings, or empty dict on failure

    Handles:
        - Missing file (returns empty dict)
        - Malformed YAML (returns empty dict, logs warning)
        - Empty file (returns empty dict)
        - Invalid types (returns empty dict if not a dict)
    """
    try:
        with _file_lock:
            if not path.exists():
                return {}

            with open(path, encoding="utf-8") as f:
                _acquire_file_lock(f, exclusive=False)
                try:
                    content = f.read()
                    if not content.strip():
                        return {}
                    data = yaml.safe_load(content)

                    if data is None:
                        return {}
                    if not isinstance(data, dict):
                        logger.warning(
                            f"Config file contains invalid type: {type(data).__name__}, "
                            "expected dict. Using defaults."
                        )
                        return {}

                    return data
                finally:
                    _release_file_lock(f)

    except yaml.YAMLError as e:
        logger.warning(f"Malformed YAML in config file: {e}. Using defaults.")
        return {}
    except OSError as e:
        logger.debug(f"Could not read config file: {e}")
        return {}


def _setting(env_var: str, file_data: dict[str, Any], key: str) -> str | None:
    env_value = os.environ.get(env_var, "").strip()
    if env_value:
        return env_value
    value = file_data.get(key)
    if isinstance(value, str) and value.strip():
        return value.strip()
    if value is not None and not isinstance(value, str):
        logger.warning(f"Ignoring config value for '{key}': expected string, got {type(value).__name__}")
    return None


@dataclass
class GettextConfig:
    """
    Settings of a translation context.

    Resolution order, per setting:
    1. POGETTEXT_LIBRARY / POGETTEXT_LANGUAGE / POGETTEXT_DOMAIN environment variables
    2. Config file (~/.pogettext/config.yaml)
    3. Defaults (OS-detected language)
    """

    library: str = DEFAULT_LIBRARY
    language: str = field(default_factory=detect_os_language)
    domain: str = DEFAULT_DOMAIN

    def __post_init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        """
        Normalize and check the settings.

        Raises:
            ValueError: If the language or domain is empty
        """
        self.language = simplified_locale(self.language)
        if not self.language:
            raise ValueError("Language must not be empty")
        if not self.domain or not self.domain.strip():
            raise ValueError("Domain must not be empty")
        self.domain = self.domain.strip()

    @classmethod
    def load(cls, path: str | Path | None = None) -> GettextConfig:
        """
        Build settings from the environment and a config file.

        Args:
            path: Config file, defaults to ~/.pogettext/config.yaml
        """
        file_data = read_config_file(Path(path) if path else DEFAULT_CONFIG_FILE)

        kwargs: dict[str, str] = {}
        library = _setting(ENV_LIBRARY, file_data, "library")
        if library:
            kwargs["library"] = library
        language = _setting(ENV_LANGUAGE, file_data, "language")
        if language:
            kwargs["language"] = language
        domain = _setting(ENV_DOMAIN, file_data, "domain")
        if domain:
            kwargs["domain"] = domain

        return cls(**kwargs)

    def save(self, path: str | Path | None = None) -> None:
        """
        Save the settings with proper locking.

        Raises:
            RuntimeError: If the settings cannot be saved
        """
        target = Path(path) if path else DEFAULT_CONFIG_FILE
        try:
            with _file_lock:
                target.parent.mkdir(mode=0o700, parents=True, exist_ok=True)
                # Write atomically by writing to temp file first, then renaming
                temp_file = target.with_suffix(target.suffix + ".tmp")

                with open(temp_file, "w", encoding="utf-8") as f:
                    _acquire_file_lock(f, exclusive=True)
                    try:
                        yaml.safe_dump(
                            self.to_dict(), f, default_flow_style=False, allow_unicode=True
                        )
                    finally:
                        _release_file_lock(f)

                temp_file.replace(target)

        except OSError as e:
            raise RuntimeError(f"Failed to save config to {target}: {e}") from e

    def to_dict(self) -> dict[str, str]:
        return asdict(self)


def debug_enabled() -> bool:
    return os.environ.get(ENV_DEBUG, "").lower() in ("1", "true", "yes")
