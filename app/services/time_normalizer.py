"""
Conversion between local wall-clock input and canonical UTC instants.

Events are stored with ``start_at`` as UTC text (``2025-12-15T19:00:00.000Z``);
organizers type local times in a handful of layouts.
"""

from datetime import datetime, timezone
from typing import Callable, List, Optional
from zoneinfo import ZoneInfo

from app.core.config import settings
from app.core.errors import TimeParseError

DISPLAY_FORMAT = "%d %b %Y, %H:%M"


def _from_iso(text: str) -> datetime:
    return datetime.fromisoformat(text)


def _from_format(fmt: str) -> Callable[[str], datetime]:
    def parse(text: str) -> datetime:
        return datetime.strptime(text, fmt)
    return parse


# Order matters: the first layout that yields a valid date wins.
CANDIDATE_PARSERS: List[Callable[[str], datetime]] = [
    _from_iso,
    _from_format("%Y-%m-%d %H:%M"),
    _from_format("%d.%m.%Y %H:%M"),
]


class TimeNormalizer:
    """Time helpers bound to the configured local zone"""

    @staticmethod
    def zone(name: Optional[str] = None) -> ZoneInfo:
        return ZoneInfo(name or settings.LOCAL_TIMEZONE)

    @staticmethod
    def to_iso_utc(moment: datetime) -> str:
        """Serialize an aware datetime as ISO-8601 UTC with millisecond precision."""
        # isoformat zero-pads years below 1000, strftime("%Y") does not on glibc
        utc = moment.astimezone(timezone.utc)
        return utc.replace(tzinfo=None).isoformat(timespec="milliseconds") + "Z"

    @staticmethod
    def to_utc(text: str, zone: Optional[str] = None) -> str:
        """Interpret ``text`` as local time in ``zone`` and return the UTC instant."""
        normalized = " ".join(text.split())
        tz = TimeNormalizer.zone(zone)

        for parse in CANDIDATE_PARSERS:
            try:
                parsed = parse(normalized)
            except ValueError:
                continue
            if parsed.tzinfo is None:
                parsed = parsed.replace(tzinfo=tz)
            try:
                return TimeNormalizer.to_iso_utc(parsed)
            except OverflowError:
                # Valid locally but outside year 1..9999 once shifted to UTC
                raise TimeParseError(text)

        raise TimeParseError(text)

    @staticmethod
    def from_utc(instant: str, zone: Optional[str] = None) -> datetime:
        """Stored UTC instant as an aware datetime in ``zone``; display only."""
        moment = datetime.fromisoformat(instant)
        if moment.tzinfo is None:
            moment = moment.replace(tzinfo=timezone.utc)
        return moment.astimezone(TimeNormalizer.zone(zone))

    @staticmethod
    def format_for_display(instant: str, zone: Optional[str] = None) -> str:
        return TimeNormalizer.from_utc(instant, zone).strftime(DISPLAY_FORMAT)

    @staticmethod
    def utc_now_iso() -> str:
        return TimeNormalizer.to_iso_utc(datetime.now(timezone.utc))
