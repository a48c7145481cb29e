"""Local key-value cache holding the GitHub API credentials."""
from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Protocol

from pydantic import ValidationError as PydanticValidationError

from cost_center_report.core.errors import ConfigurationError
from cost_center_report.core.schema import APIConfig

logger = logging.getLogger(__name__)

API_CONFIG_KEY = "github-api-config"


class KeyValueStore(Protocol):
    """Persistence contract for small JSON values."""

    def get(self, key: str) -> Any | None: ...

    def set(self, key: str, value: Any) -> None: ...

    def delete(self, key: str) -> None: ...


class InMemoryKeyValueStore:
    """Process-local store for tests and ephemeral runs."""

    def __init__(self) -> None:
        self._values: dict[str, Any] = {}

    def get(self, key: str) -> Any | None:
        return self._values.get(key)

    def set(self, key: str, value: Any) -> None:
        self._values[key] = value

    def delete(self, key: str) -> None:
        self._values.pop(key, None)


class JsonFileKeyValueStore:
    """Store every key in a single JSON object on disk."""

    def __init__(self, path: Path) -> None:
        self._path = path

    def _read(self) -> dict[str, Any]:
        if not self._path.exists():
            return {}
        try:
            payload = json.loads(self._path.read_text(encoding="utf-8"))
        except json.JSONDecodeError:
            logger.warning("Ignoring unreadable key-value file %s", self._path)
            return {}
        return payload if isinstance(payload, dict) else {}

    def _write(self, values: dict[str, Any]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=self._path.parent, prefix=".kv-", suffix=".json")
        with os.fdopen(fd, "w", encoding="utf-8") as fp:
            json.dump(values, fp, indent=2)
        os.replace(tmp_name, self._path)

    def get(self, key: str) -> Any | None:
        return self._read().get(key)

    def set(self, key: str, value: Any) -> None:
        values = self._read()
        values[key] = value
        self._write(values)

    def delete(self, key: str) -> None:
        values = self._read()
        if key in values:
            del values[key]
            self._write(values)


class CredentialStore:
    """Reads and writes the API configuration under its application key."""

    def __init__(self, store: KeyValueStore) -> None:
        self._store = store

    def load(self) -> APIConfig | None:
        raw = self._store.get(API_CONFIG_KEY)
        if raw is None:
            return None
        try:
            return APIConfig.model_validate(raw)
        except PydanticValidationError:
            logger.warning("Discarding malformed %s entry", API_CONFIG_KEY)
            return None

    def save(self, token: str, enterprise: str) -> APIConfig:
        token = (token or "").strip()
        enterprise = (enterprise or "").strip()
        if not token:
            raise ConfigurationError("GitHub Personal Access Token is required")
        if not enterprise:
            raise ConfigurationError("Enterprise slug is required")
        config = APIConfig(token=token, enterprise=enterprise)
        self._store.set(API_CONFIG_KEY, config.model_dump())
        logger.info("Saved API configuration for enterprise %s", enterprise)
        return config

    def clear(self) -> None:
        self._store.delete(API_CONFIG_KEY)
        logger.info("Cleared API configuration")


def mask_token(token: str) -> str:
    if len(token) <= 8:
        return "*" * len(token)
    return f"{token[:4]}{'*' * (len(token) - 8)}{token[-4:]}"


__all__ = [
    "API_CONFIG_KEY",
    "CredentialStore",
    "InMemoryKeyValueStore",
    "JsonFileKeyValueStore",
    "KeyValueStore",
    "mask_token",
]
