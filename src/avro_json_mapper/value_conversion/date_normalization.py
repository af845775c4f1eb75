"""Normalization of heterogeneous date strings into UTC instants.

Upstream producers disagree on date formats, so a date string is tried against
an ordered chain of parsers. Strict ISO-8601 forms come first and looser
heuristics only run once every strict form has failed. The first parser that
succeeds wins; exhausting the chain yields ``None`` and the caller decides on a
fallback (usually the field default).
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable
from datetime import UTC, datetime, timedelta, timezone, tzinfo
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

logger = logging.getLogger(__name__)

_ISO_DATE = r"(?P<year>\d{4})-(?P<month>\d{2})-(?P<day>\d{2})"
_ISO_TIME = (
    r"(?P<hour>\d{2}):(?P<minute>\d{2})"
    r"(?::(?P<second>\d{2})(?:[.,](?P<fraction>\d{1,9}))?)?"
)
_ISO_OFFSET = r"(?P<offset>Z|[+-]\d{2}:\d{2}(?::\d{2})?)"

_ISO_DATE_TIME_PATTERN = re.compile(
    rf"{_ISO_DATE}T{_ISO_TIME}"
    rf"(?:{_ISO_OFFSET}(?:\[(?P<region>[^\]]+)\])?|\[(?P<only_region>[^\]]+)\])"
)
_ISO_DATE_WITH_OFFSET_PATTERN = re.compile(rf"{_ISO_DATE}{_ISO_OFFSET}")
_COMPACT_DATE_WITH_ZONE_PATTERN = re.compile(
    r"(?P<year>\d{4})(?P<month>\d{2})(?P<day>\d{2})(?P<zone>[A-Za-z+\-][\w/+\-:]*)"
)
_COMPACT_DATE_TIME_WITH_ZONE_PATTERN = re.compile(
    r"(?P<year>\d{4})(?P<month>\d{2})(?P<day>\d{2})"
    r"(?P<hour>\d{2})(?P<minute>\d{2})(?P<second>\d{2})"
    r"(?P<zone>[A-Za-z+\-][\w/+\-:]*)"
)
_SPACED_DATE_TIME_PATTERN = re.compile(
    rf"{_ISO_DATE} (?P<hour>\d{{2}}):(?P<minute>\d{{2}}):(?P<second>\d{{2}})"
)
_ZONE_MARKER_DATE_TIME_PATTERN = re.compile(
    rf"{_ISO_DATE}T(?P<hour>\d{{2}}):(?P<minute>\d{{2}}):(?P<second>\d{{2}})T00:00"
)
_NUMERIC_OFFSET_PATTERN = re.compile(
    r"(?P<sign>[+-])(?P<hours>\d{2})(?::?(?P<minutes>\d{2})(?::?(?P<seconds>\d{2}))?)?"
)
_UTC_ALIASES = frozenset({"Z", "UTC", "GMT", "UT"})


def normalize_date(text: str | None) -> datetime | None:
    """Convert a date string of unknown format into an aware UTC datetime.

    Returns:
      The parsed instant, or ``None`` when no parser accepts the value.
    """
    if text is None:
        return None
    candidate = text.strip()
    if not candidate:
        return None
    for name, parser in _STRATEGIES:
        try:
            return parser(candidate)
        except (ValueError, OverflowError) as exc:
            logger.debug("Date parser %s rejected %r: %s", name, candidate, exc)
    logger.debug("No date parser accepted %r", candidate)
    return None


def parse_iso_date_time(text: str) -> datetime:
    """Full ISO date-time with an offset and/or a bracketed region id."""
    match = _fullmatch(_ISO_DATE_TIME_PATTERN, text)
    if match["offset"] is not None:
        zone = parse_zone(match["offset"])
    else:
        zone = parse_zone(match["only_region"])
    return _to_utc(_datetime_from_match(match, zone))


def parse_iso_date_with_zone(text: str) -> datetime:
    """ISO calendar date followed by an offset; noon UTC of that day."""
    match = _fullmatch(_ISO_DATE_WITH_OFFSET_PATTERN, text)
    parse_zone(match["offset"])
    return parse_iso_date_time(f"{match['year']}-{match['month']}-{match['day']}T12:00Z")


def parse_compact_date_with_zone(text: str) -> datetime:
    """``yyyyMMdd`` followed by a zone token; noon UTC of that day."""
    match = _fullmatch(_COMPACT_DATE_WITH_ZONE_PATTERN, text)
    parse_zone(match["zone"])
    return parse_compact_date_time_with_zone(
        f"{match['year']}{match['month']}{match['day']}120000Z"
    )


def parse_compact_date_time_with_zone(text: str) -> datetime:
    """``yyyyMMddHHmmss`` followed by a zone token."""
    match = _fullmatch(_COMPACT_DATE_TIME_WITH_ZONE_PATTERN, text)
    return _to_utc(_datetime_from_match(match, parse_zone(match["zone"])))


def parse_iso_date_time_without_offset(text: str) -> datetime:
    return parse_iso_date_time(f"{text}Z")


def parse_iso_date_without_offset(text: str) -> datetime:
    return parse_iso_date_time(f"{text}T00:00Z")


def parse_compact_date_without_zone(text: str) -> datetime:
    return parse_compact_date_time_with_zone(f"{text}120000Z")


def parse_compact_date_time_without_zone(text: str) -> datetime:
    return parse_compact_date_time_with_zone(f"{text}Z")


def parse_spaced_local_date_time(text: str) -> datetime:
    """``yyyy-MM-dd HH:mm:ss`` read in the local time zone of the process."""
    match = _fullmatch(_SPACED_DATE_TIME_PATTERN, text)
    return _datetime_from_match(match, None).astimezone(UTC)


def parse_zone_marker_local_date_time(text: str) -> datetime:
    """``yyyy-MM-dd'T'HH:mm:ss'T'00:00`` read in the local time zone of the process."""
    match = _fullmatch(_ZONE_MARKER_DATE_TIME_PATTERN, text)
    return _datetime_from_match(match, None).astimezone(UTC)


def parse_zone(token: str) -> tzinfo:
    """Resolve ``Z``, ``UTC``/``GMT``, ``±HH[:]MM`` or an IANA zone id.

    Raises:
      ValueError: If the token names no known zone.
    """
    if token in _UTC_ALIASES:
        return UTC
    offset_match = _NUMERIC_OFFSET_PATTERN.fullmatch(token)
    if offset_match:
        hours = int(offset_match["hours"])
        minutes = int(offset_match["minutes"] or 0)
        seconds = int(offset_match["seconds"] or 0)
        if hours > 18 or minutes > 59 or seconds > 59:
            raise ValueError(f"Offset out of range: {token}")
        delta = timedelta(hours=hours, minutes=minutes, seconds=seconds)
        return timezone(-delta if offset_match["sign"] == "-" else delta)
    if token[:1] in "+-":
        raise ValueError(f"Malformed offset: {token}")
    try:
        return ZoneInfo(token)
    except (ZoneInfoNotFoundError, ValueError, OSError) as exc:
        raise ValueError(f"Unknown time zone: {token}") from exc


def _fullmatch(pattern: re.Pattern[str], text: str) -> re.Match[str]:
    match = pattern.fullmatch(text)
    if match is None:
        raise ValueError(f"Text does not match {pattern.pattern}")
    return match


def _datetime_from_match(match: re.Match[str], zone: tzinfo | None) -> datetime:
    groups = match.groupdict()
    fraction = (groups.get("fraction") or "").ljust(6, "0")[:6]
    return datetime(
        int(groups["year"]),
        int(groups["month"]),
        int(groups["day"]),
        int(groups.get("hour") or 0),
        int(groups.get("minute") or 0),
        int(groups.get("second") or 0),
        int(fraction),
        tzinfo=zone,
    )


def _to_utc(value: datetime) -> datetime:
    return value.astimezone(UTC)


_STRATEGIES: tuple[tuple[str, Callable[[str], datetime]], ...] = (
    ("iso-date-time", parse_iso_date_time),
    ("iso-date-with-zone", parse_iso_date_with_zone),
    ("compact-date-with-zone", parse_compact_date_with_zone),
    ("compact-date-time-with-zone", parse_compact_date_time_with_zone),
    ("iso-date-time-without-offset", parse_iso_date_time_without_offset),
    ("iso-date-without-offset", parse_iso_date_without_offset),
    ("compact-date-without-zone", parse_compact_date_without_zone),
    ("compact-date-time-without-zone", parse_compact_date_time_without_zone),
    ("spaced-local-date-time", parse_spaced_local_date_time),
    ("zone-marker-local-date-time", parse_zone_marker_local_date_time),
)
