"""Import payload parsing for scouting records."""

from __future__ import annotations

from .parser import (
    TABLE_COLUMNS,
    ParsedPayload,
    PayloadFormatError,
    PayloadShape,
    detect_shape,
    is_header_row,
    load_payload,
    parse_payload,
)
from .schema import ScoutingEntryPayload

__all__ = [
    "TABLE_COLUMNS",
    "ParsedPayload",
    "PayloadFormatError",
    "PayloadShape",
    "ScoutingEntryPayload",
    "detect_shape",
    "is_header_row",
    "load_payload",
    "parse_payload",
]
