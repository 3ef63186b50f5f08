"""HTTP client for The Blue Alliance v3 API."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

import httpx
from pydantic import ValidationError

from scoutrecon.adapters.http_resilience import ResilientClient
from scoutrecon.config import TBA_BASE_URL, get_tba_config

from .schema import MatchPayload
from .translator import parse_match

if TYPE_CHECKING:
    from collections.abc import Callable

    from scoutrecon.config import ResilienceConfig, TbaConfig
    from scoutrecon.domain.model import OfficialMatch

log = getLogger(__name__)


def _default_client_factory(config: ResilienceConfig) -> ResilientClient:
    return ResilientClient(config)


class TbaAPIError(RuntimeError):
    """Raised when The Blue Alliance answers with something other than match data."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


@dataclass(slots=True)
class TbaClient:
    """Fetches matches from The Blue Alliance.

    Transport failures surface as :class:`httpx.HTTPError`; a malformed or
    refused answer surfaces as :class:`TbaAPIError`. Unknown keys (HTTP 404)
    are reported as ``None`` or an empty list.
    """

    config: TbaConfig = field(default_factory=get_tba_config)
    client_factory: Callable[[ResilienceConfig], ResilientClient] = field(
        default=_default_client_factory
    )

    def fetch_match(self, match_key: str) -> OfficialMatch | None:
        return asyncio.run(self._fetch_match_async(match_key))

    def fetch_event_matches(self, event_key: str) -> list[OfficialMatch]:
        return asyncio.run(self._fetch_event_matches_async(event_key))

    async def _fetch_match_async(self, match_key: str) -> OfficialMatch | None:
        async with self.client_factory(self.config.resilience) as client:
            payload = await self._perform_request(client=client, path=f"/match/{match_key}")
        if payload is None:
            return None
        if not isinstance(payload, dict):
            raise TbaAPIError(f"Unexpected payload for match {match_key}")
        return parse_match(self._validate(payload))

    async def _fetch_event_matches_async(self, event_key: str) -> list[OfficialMatch]:
        async with self.client_factory(self.config.resilience) as client:
            payload = await self._perform_request(
                client=client, path=f"/event/{event_key}/matches"
            )
        if payload is None:
            log.warning(f"The Blue Alliance does not know event {event_key}")
            return []
        if not isinstance(payload, list):
            raise TbaAPIError(f"Unexpected payload for event {event_key}")
        matches = [parse_match(self._validate(item)) for item in payload]
        log.info(f"Fetched {len(matches)} official matches for {event_key}")
        return matches

    async def _perform_request(self, *, client: ResilientClient, path: str) -> object | None:
        base_url = self.config.resilience.base_url or TBA_BASE_URL
        response = await client.get(f"{base_url.rstrip('/')}{path}")
        if response.status_code == httpx.codes.NOT_FOUND:
            return None
        if response.status_code in {httpx.codes.UNAUTHORIZED, httpx.codes.FORBIDDEN}:
            log.error(f"The Blue Alliance rejected the API key ({response.status_code})")
            raise TbaAPIError(
                "The Blue Alliance rejected the configured API key",
                status_code=response.status_code,
            )
        response.raise_for_status()
        try:
            return response.json()
        except ValueError as exc:
            raise TbaAPIError(f"Invalid JSON from {path}") from exc

    @staticmethod
    def _validate(payload: object) -> MatchPayload:
        try:
            return MatchPayload.model_validate(payload)
        except ValidationError as exc:
            raise TbaAPIError("Unexpected match payload") from exc
