"""Public interface for The Blue Alliance adapter."""

from __future__ import annotations

from .client import TbaAPIError, TbaClient
from .provider import CachingOfficialDataProvider
from .schema import AllianceBreakdownPayload, MatchPayload, ReefPayload
from .translator import parse_match, parse_matches, team_number_from_key

__all__ = [
    "AllianceBreakdownPayload",
    "CachingOfficialDataProvider",
    "MatchPayload",
    "ReefPayload",
    "TbaAPIError",
    "TbaClient",
    "parse_match",
    "parse_matches",
    "team_number_from_key",
]
