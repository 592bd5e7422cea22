"""
Settings Store
Persist the Gemini credential and preferred model in a small YAML file
"""
from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from loguru import logger
from pydantic import BaseModel, field_validator

from data.catalog import DEFAULT_MODEL

DEFAULT_SETTINGS_FILE = "config/settings.yaml"


class AppSettings(BaseModel):
    api_key: str = ""
    model: str = DEFAULT_MODEL

    @field_validator('model')
    @classmethod
    def default_blank_model(cls, v):
        return v.strip() or DEFAULT_MODEL

    @property
    def needs_configuration(self) -> bool:
        return not self.api_key.strip()

    def masked_api_key(self) -> str:
        key = self.api_key.strip()
        if not key:
            return ""
        if len(key) <= 8:
            return "*" * len(key)
        return f"{key[:4]}{'*' * (len(key) - 8)}{key[-4:]}"


class SettingsUpdate(BaseModel):
    api_key: str
    model: str = DEFAULT_MODEL

    @field_validator('api_key')
    @classmethod
    def validate_api_key(cls, v):
        if not v.strip():
            raise ValueError('Vui lòng nhập API Key')
        return v.strip()


def load_yaml(path: Path) -> Dict[str, Any]:
    if not path.exists():
        return {}
    with path.open('r', encoding='utf-8') as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        return {}
    return data


def resolve_value(file_value: Any, env_name: str, default: Any) -> Any:
    if file_value:
        return file_value
    return os.getenv(env_name) or default


class SettingsStore:
    """Key-value settings read at startup and written on every update"""

    def __init__(self, path: Optional[str] = None):
        self.path = Path(path or os.getenv("SETTINGS_FILE", DEFAULT_SETTINGS_FILE))
        self._settings = self.load()

    @property
    def settings(self) -> AppSettings:
        return self._settings

    def load(self) -> AppSettings:
        data = load_yaml(self.path)
        settings = AppSettings(
            api_key=resolve_value(data.get("api_key"), "GEMINI_API_KEY", ""),
            model=resolve_value(data.get("model"), "GEMINI_MODEL", DEFAULT_MODEL),
        )
        if settings.needs_configuration:
            logger.warning(f"No Gemini API key configured ({self.path}); generation disabled until set")
        return settings

    def save(self, update: SettingsUpdate) -> AppSettings:
        self._settings = AppSettings(api_key=update.api_key, model=update.model)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with self.path.open('w', encoding='utf-8') as f:
            yaml.safe_dump(self._settings.model_dump(), f, allow_unicode=True, sort_keys=False)
        logger.info(f"Settings saved to {self.path} (model={self._settings.model})")
        return self._settings
