"""Port for the official match results provider."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from scoutrecon.domain.model import OfficialMatch


class OfficialDataUnavailableError(RuntimeError):
    """Official data was never fetched and cannot be fetched now.

    Distinct from a match that simply does not exist, which providers report
    as ``None``.
    """


@runtime_checkable
class OfficialDataProvider(Protocol):
    """Returns cached or fresh official data; stale data is served, never deleted."""

    def get_match(self, event_key: str, match_key: str) -> OfficialMatch | None: ...

    def get_event_matches(self, event_key: str) -> list[OfficialMatch]: ...
