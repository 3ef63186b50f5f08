"""Port for persisting the active validation configuration."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from scoutrecon.domain.model import ValidationConfig


@runtime_checkable
class ValidationConfigStore(Protocol):
    def load(self) -> ValidationConfig:
        """Return the stored config, or the default when nothing usable is stored."""
        ...

    def save(self, config: ValidationConfig) -> None: ...

    def reset(self) -> ValidationConfig: ...
