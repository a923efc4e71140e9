"""
Runtime Configuration

Central configuration for dataset loading, root persistence, tamper
simulation and logging.
"""

from __future__ import annotations

import copy
import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv

load_dotenv()


ENV_PREFIX = "REVIEWPROOF_"

DEFAULT_CONFIG_PATHS = (
    Path("reviewproof.json"),
    Path(".reviewproof.json"),
    Path.home() / ".config" / "reviewproof" / "config.json",
)


@dataclass
class StorageConfig:
    """Where root hashes are persisted."""
    root_log_path: str = "merkle_roots.txt"


@dataclass
class IngestConfig:
    """Dataset loading settings."""
    dataset_path: Optional[str] = None
    max_records: int = 0  # 0 = no limit


@dataclass
class TamperConfig:
    """Tamper simulation settings."""
    seed: Optional[int] = None
    default_count: int = 1


@dataclass
class LoggingConfig:
    """Logging settings."""
    level: str = "INFO"
    file: Optional[str] = None


@dataclass
class RuntimeConfig:
    """
    Complete runtime configuration.

    Can be loaded from:
    - Environment variables
    - JSON or YAML file
    - Programmatic construction
    """
    storage: StorageConfig = field(default_factory=StorageConfig)
    ingest: IngestConfig = field(default_factory=IngestConfig)
    tamper: TamperConfig = field(default_factory=TamperConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    extra: dict[str, Any] = field(default_factory=dict)

    @staticmethod
    def _get_env_overrides() -> dict[str, Any]:
        """
        Get configuration overrides from environment variables.

        Supported variables:
        - REVIEWPROOF_ROOT_LOG: Root hash log path
        - REVIEWPROOF_DATASET: Default dataset path
        - REVIEWPROOF_MAX_RECORDS: Record limit for loads (0 = all)
        - REVIEWPROOF_TAMPER_SEED: Seed for tamper simulations
        - REVIEWPROOF_LOG_LEVEL: Log level
        - REVIEWPROOF_LOG_FILE: Log file path
        """
        overrides: dict[str, Any] = {}

        if os.getenv(f"{ENV_PREFIX}ROOT_LOG"):
            overrides.setdefault("storage", {})["root_log_path"] = os.getenv(f"{ENV_PREFIX}ROOT_LOG")

        if os.getenv(f"{ENV_PREFIX}DATASET"):
            overrides.setdefault("ingest", {})["dataset_path"] = os.getenv(f"{ENV_PREFIX}DATASET")
        if os.getenv(f"{ENV_PREFIX}MAX_RECORDS"):
            overrides.setdefault("ingest", {})["max_records"] = int(
                os.getenv(f"{ENV_PREFIX}MAX_RECORDS", "0")
            )

        if os.getenv(f"{ENV_PREFIX}TAMPER_SEED"):
            overrides.setdefault("tamper", {})["seed"] = int(
                os.getenv(f"{ENV_PREFIX}TAMPER_SEED", "0")
            )

        if os.getenv(f"{ENV_PREFIX}LOG_LEVEL"):
            overrides.setdefault("logging", {})["level"] = os.getenv(f"{ENV_PREFIX}LOG_LEVEL")
        if os.getenv(f"{ENV_PREFIX}LOG_FILE"):
            overrides.setdefault("logging", {})["file"] = os.getenv(f"{ENV_PREFIX}LOG_FILE")

        return overrides

    @classmethod
    def from_env(cls) -> "RuntimeConfig":
        """
        Load configuration purely from environment variables.

        Uses defaults for any values not specified in env vars.
        """
        return cls.from_dict(cls._get_env_overrides())

    @classmethod
    def from_yaml(cls, path: str | Path) -> "RuntimeConfig":
        """Load configuration from a YAML file."""
        import yaml
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        with open(path) as f:
            data = yaml.safe_load(f)

        return cls.from_dict(data or {})

    @classmethod
    def from_json(cls, path: str | Path) -> "RuntimeConfig":
        """Load configuration from a JSON file."""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        with open(path) as f:
            data = json.load(f)

        return cls.from_dict(data)

    @classmethod
    def from_file(cls, path: str | Path) -> "RuntimeConfig":
        """Load from a ``.yaml``/``.yml`` or JSON file by extension."""
        if Path(path).suffix.lower() in (".yaml", ".yml"):
            return cls.from_yaml(path)
        return cls.from_json(path)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RuntimeConfig":
        """Load configuration from a dictionary (supports partial data)."""
        storage_data = data.get("storage", {})
        ingest_data = data.get("ingest", {})
        tamper_data = data.get("tamper", {})
        logging_data = data.get("logging", {})

        return cls(
            storage=StorageConfig(**storage_data) if storage_data else StorageConfig(),
            ingest=IngestConfig(**ingest_data) if ingest_data else IngestConfig(),
            tamper=TamperConfig(**tamper_data) if tamper_data else TamperConfig(),
            logging=LoggingConfig(**logging_data) if logging_data else LoggingConfig(),
            extra=data.get("extra", {}),
        )

    def with_env_overrides(self) -> "RuntimeConfig":
        """
        Return a new config with environment variable overrides applied.

        This allows loading from a config file first, then overlaying env vars.
        """
        overrides = self._get_env_overrides()
        if not overrides:
            return self

        new_config = copy.deepcopy(self)
        for section, values in overrides.items():
            target = getattr(new_config, section)
            for key, value in values.items():
                setattr(target, key, value)

        return new_config

    def to_dict(self) -> dict[str, Any]:
        """Convert configuration to a dictionary."""
        return {
            "storage": {
                "root_log_path": self.storage.root_log_path,
            },
            "ingest": {
                "dataset_path": self.ingest.dataset_path,
                "max_records": self.ingest.max_records,
            },
            "tamper": {
                "seed": self.tamper.seed,
                "default_count": self.tamper.default_count,
            },
            "logging": {
                "level": self.logging.level,
                "file": self.logging.file,
            },
            "extra": self.extra,
        }


def load_config(config_path: str | Path | None = None) -> RuntimeConfig:
    """
    Load configuration from file and/or environment.

    Search order when no path is given: ./reviewproof.json,
    ./.reviewproof.json, ~/.config/reviewproof/config.json.
    Environment variables always override file settings.

    Raises:
        FileNotFoundError: If an explicit ``config_path`` does not exist
    """
    if config_path is not None:
        config = RuntimeConfig.from_file(config_path)
    else:
        config = RuntimeConfig()
        for candidate in DEFAULT_CONFIG_PATHS:
            if candidate.exists():
                config = RuntimeConfig.from_file(candidate)
                break

    return config.with_env_overrides()


def get_default_config_template() -> str:
    """Get a template configuration file."""
    return json.dumps(RuntimeConfig().to_dict(), indent=2) + "\n"


# Global default configuration
_default_config: Optional[RuntimeConfig] = None


def get_default_config() -> RuntimeConfig:
    """Get the default runtime configuration."""
    global _default_config
    if _default_config is None:
        _default_config = load_config()
    return _default_config


def set_default_config(config: RuntimeConfig | None) -> None:
    """Set (or with None, reset) the default runtime configuration."""
    global _default_config
    _default_config = config
