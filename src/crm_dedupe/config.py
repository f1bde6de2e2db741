from __future__ import annotations

from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from crm_dedupe.errors import ConfigError

CONFIG_FILENAMES = ("crm-dedupe.yaml", "crm-dedupe.yml")


class MatchingSettings(BaseModel):
    email_weight: int = 100
    phone_weight: int = 80
    exact_name_weight: int = 60
    similar_name_weight: int = 40
    similar_name_ratio: float = Field(default=0.8, ge=0.0, le=1.0)
    min_phone_digits: int = 10
    min_exact_name_length: int = 4
    max_score: int = 100
    candidate_threshold: int = Field(default=70, ge=0, le=100)


class ClusteringSettings(BaseModel):
    primary_order: str = "scan"

    @field_validator("primary_order")
    @classmethod
    def _check_order(cls, value: str) -> str:
        if value not in {"scan", "created_at"}:
            raise ValueError("primary_order must be 'scan' or 'created_at'")
        return value


class StoreSettings(BaseModel):
    database_path: Path = Field(default=Path("./data/crm.sqlite3"), validate_default=True)

    @field_validator("database_path", mode="before")
    @classmethod
    def _expand_path(cls, value: str | Path) -> Path:
        return Path(value).expanduser().resolve()


class LoggingSettings(BaseModel):
    level: str = "INFO"


class Settings(BaseModel):
    matching: MatchingSettings = MatchingSettings()
    clustering: ClusteringSettings = ClusteringSettings()
    store: StoreSettings = StoreSettings()
    logging: LoggingSettings = LoggingSettings()

    @classmethod
    def load(cls, path: Path) -> "Settings":
        try:
            with path.open("r", encoding="utf-8") as fh:
                raw = yaml.safe_load(fh)
        except (OSError, yaml.YAMLError) as exc:
            raise ConfigError(f"Cannot read settings from {path}: {exc}") from exc
        try:
            return cls.model_validate(raw or {})
        except ValidationError as exc:
            raise ConfigError(f"Invalid settings in {path}: {exc}") from exc


def find_config(explicit_path: Optional[Path]) -> Optional[Path]:
    if explicit_path:
        return explicit_path
    cwd = Path.cwd()
    for name in CONFIG_FILENAMES:
        candidate = cwd / name
        if candidate.exists():
            return candidate
    return None


def load_settings(explicit_path: Optional[Path] = None) -> Settings:
    path = find_config(explicit_path)
    if path is None:
        return Settings()
    return Settings.load(path)
