"""Configuration loader for classification result tooling."""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, NonNegativeInt, field_validator


load_dotenv()

CONFIG_PATH = Path(__file__).resolve().parent / "settings.yaml"
CONFIG_ENV_VAR = "RESULTS_SETTINGS_PATH"

LOG_LEVELS = {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}

# Characters that occur in float text ("1e+20", "nan", "-inf") or CSV quoting.
RESERVED_SEPARATOR_CHARS = set("0123456789+-.eEnaifNAIFtyTY,\"'")


class EvaluationSettings(BaseModel):
    null_class_label: NonNegativeInt = 0
    strict_validation: bool = False
    likelihood_tolerance: float = 1e-6

    @field_validator("likelihood_tolerance")
    @classmethod
    def validate_tolerance(cls, value: float) -> float:
        if value < 0.0:
            raise ValueError("likelihood_tolerance must not be negative")
        return value


class StorageSettings(BaseModel):
    output_dir: Path = Path("data/results")
    sequence_separator: str = "|"

    @field_validator("sequence_separator")
    @classmethod
    def validate_separator(cls, value: str) -> str:
        if len(value) != 1:
            raise ValueError("sequence_separator must be a single character")
        if value in RESERVED_SEPARATOR_CHARS or value.isspace():
            raise ValueError(f"sequence_separator {value!r} clashes with CSV or number syntax")
        return value


class LoggingSettings(BaseModel):
    level: str = "INFO"

    @field_validator("level")
    @classmethod
    def validate_level(cls, value: str) -> str:
        level = value.upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"unknown log level: {value}")
        return level


class Settings(BaseModel):
    evaluation: EvaluationSettings = EvaluationSettings()
    storage: StorageSettings = StorageSettings()
    logging: LoggingSettings = LoggingSettings()


def _load_yaml(path: Path) -> Dict[str, Any]:
    if not path.exists():
        raise FileNotFoundError(f"Settings file not found: {path}")
    with path.open("r", encoding="utf-8") as handle:
        return yaml.safe_load(handle) or {}


@lru_cache(maxsize=1)
def get_settings(path: Optional[Path] = None) -> Settings:
    """Load and cache application settings."""

    env_path = os.getenv(CONFIG_ENV_VAR)
    target_path = path or (Path(env_path) if env_path else CONFIG_PATH)
    raw = _load_yaml(target_path)
    return Settings.model_validate(raw)
