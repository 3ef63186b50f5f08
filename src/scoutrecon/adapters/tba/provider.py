"""Official data provider that serves fresh results and falls back to snapshots."""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

import httpx

from scoutrecon.domain.ports.official_data import OfficialDataUnavailableError

from .client import TbaAPIError

if TYPE_CHECKING:
    from collections.abc import Callable

    from scoutrecon.domain.model import OfficialMatch
    from scoutrecon.domain.ports.unit_of_work import ScoutingUnitOfWork

    from .client import TbaClient

log = getLogger(__name__)

FETCH_ERRORS = (httpx.HTTPError, TbaAPIError)


@dataclass(slots=True)
class CachingOfficialDataProvider:
    """Fetch from The Blue Alliance and keep every answer as a snapshot.

    Snapshots are upserted, never deleted. When the service cannot be reached
    the last snapshot is served instead; only when no snapshot exists does the
    provider raise :class:`OfficialDataUnavailableError`. Without a client the
    provider works from snapshots only.
    """

    unit_of_work_factory: Callable[[], ScoutingUnitOfWork]
    client: TbaClient | None = None

    def get_match(self, event_key: str, match_key: str) -> OfficialMatch | None:
        if self.client is not None:
            try:
                match = self.client.fetch_match(match_key)
            except FETCH_ERRORS as exc:
                log.warning(f"Could not fetch match {match_key}, using snapshot: {exc}")
            else:
                if match is not None:
                    self._store([match])
                return match

        with self.unit_of_work_factory() as uow:
            snapshot = uow.repositories.official_matches.get(match_key)
        if snapshot is None:
            raise OfficialDataUnavailableError(
                f"No official data for {match_key} in event {event_key}"
            )
        return snapshot

    def get_event_matches(self, event_key: str) -> list[OfficialMatch]:
        if self.client is not None:
            try:
                matches = self.client.fetch_event_matches(event_key)
            except FETCH_ERRORS as exc:
                log.warning(f"Could not fetch matches for {event_key}, using snapshots: {exc}")
            else:
                self._store(matches)
                return matches

        with self.unit_of_work_factory() as uow:
            snapshots = uow.repositories.official_matches.list_for_event(event_key)
        if not snapshots:
            raise OfficialDataUnavailableError(f"No official data stored for event {event_key}")
        return snapshots

    def _store(self, matches: list[OfficialMatch]) -> None:
        if not matches:
            return
        with self.unit_of_work_factory() as uow:
            uow.repositories.official_matches.upsert_many(matches)
            uow.commit()
        log.debug(f"Stored {len(matches)} official match snapshot(s)")
