"""JSON file persistence for the active validation configuration."""

from __future__ import annotations

import os
import tempfile
from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from pydantic import TypeAdapter, ValidationError

from scoutrecon.config import get_storage_config
from scoutrecon.domain.model import DEFAULT_VALIDATION_CONFIG, ValidationConfig

if TYPE_CHECKING:
    from pathlib import Path

log = getLogger(__name__)

_CONFIG_ADAPTER = TypeAdapter(ValidationConfig)


def _default_path() -> Path:
    return get_storage_config().validation_config_path()


@dataclass(slots=True)
class JsonValidationConfigStore:
    """Stores one :class:`ValidationConfig` as JSON.

    A missing or unreadable file is never fatal: ``load`` logs the problem and
    answers with the default configuration.
    """

    path: Path = field(default_factory=_default_path)

    def load(self) -> ValidationConfig:
        try:
            raw = self.path.read_bytes()
        except FileNotFoundError:
            return DEFAULT_VALIDATION_CONFIG
        except OSError as exc:
            log.warning(f"Could not read validation config {self.path}: {exc}")
            return DEFAULT_VALIDATION_CONFIG
        try:
            return _CONFIG_ADAPTER.validate_json(raw)
        except ValidationError as exc:
            log.warning(
                f"Ignoring invalid validation config {self.path} ({exc.error_count()} error(s)); "
                "using defaults"
            )
            return DEFAULT_VALIDATION_CONFIG

    def save(self, config: ValidationConfig) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        payload = _CONFIG_ADAPTER.dump_json(config, indent=2)
        with tempfile.NamedTemporaryFile(
            "wb", dir=self.path.parent, prefix=f".{self.path.name}.", delete=False
        ) as handle:
            handle.write(payload)
            temp_path = handle.name
        try:
            os.replace(temp_path, self.path)
        except OSError:
            os.unlink(temp_path)
            raise
        log.info(f"Saved validation config to {self.path}")

    def reset(self) -> ValidationConfig:
        self.save(DEFAULT_VALIDATION_CONFIG)
        return DEFAULT_VALIDATION_CONFIG

    def dump(self, config: ValidationConfig) -> str:
        return _CONFIG_ADAPTER.dump_json(config, indent=2).decode()
