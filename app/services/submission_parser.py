"""
Parser for one-line event submissions.

Expected line::

    Title | 2025-12-15 19:00 | 60 | https://meet.link | public

The trailing visibility field is optional and defaults to ``public``.
"""

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Any, Callable, Dict, List, Optional, Tuple

from pydantic import AnyUrl, TypeAdapter, ValidationError

from app.core.errors import EventBotError, SubmissionFormatError, TimeParseError
from app.schemas.event import EventCreationRequest
from app.services.time_normalizer import TimeNormalizer

_url_adapter = TypeAdapter(AnyUrl)

# Largest value a 32-bit INTEGER column holds
MAX_DURATION_MIN = 2**31 - 1


@dataclass(frozen=True)
class FieldResult:
    ok: bool
    value: Any = None
    error: Optional[EventBotError] = None

    @classmethod
    def valid(cls, value: Any) -> "FieldResult":
        return cls(ok=True, value=value)

    @classmethod
    def invalid(cls, error: Optional[EventBotError] = None) -> "FieldResult":
        return cls(ok=False, error=error or SubmissionFormatError())


def validate_title(raw: Optional[str]) -> FieldResult:
    if raw is None or len(raw) < 2:
        return FieldResult.invalid()
    return FieldResult.valid(raw)


def validate_start_at(raw: Optional[str]) -> FieldResult:
    # Coarse length filter only; the real parsing happens in TimeNormalizer.
    if raw is None:
        return FieldResult.invalid()
    if len(raw) < 10:
        return FieldResult.invalid(TimeParseError(raw))
    return FieldResult.valid(raw)


def validate_duration(raw: Optional[str]) -> FieldResult:
    if not raw:
        return FieldResult.invalid()
    try:
        minutes = int(raw)
    except ValueError:
        # Integral decimals such as "60.0"
        try:
            number = Decimal(raw)
        except InvalidOperation:
            return FieldResult.invalid()
        if not number.is_finite() or number != number.to_integral_value():
            return FieldResult.invalid()
        minutes = int(number)
    if not 0 < minutes <= MAX_DURATION_MIN:
        return FieldResult.invalid()
    return FieldResult.valid(minutes)


def validate_meeting_url(raw: Optional[str]) -> FieldResult:
    if not raw:
        return FieldResult.invalid()
    try:
        _url_adapter.validate_python(raw)
    except ValidationError:
        return FieldResult.invalid()
    return FieldResult.valid(raw)


def validate_visibility(raw: Optional[str]) -> FieldResult:
    if not raw:
        return FieldResult.valid(True)
    if raw == "public":
        return FieldResult.valid(True)
    if raw == "private":
        return FieldResult.valid(False)
    return FieldResult.invalid()


# (field name, segment index, validator), checked in order; first failure wins.
FIELD_VALIDATORS: List[Tuple[str, int, Callable[[Optional[str]], FieldResult]]] = [
    ("title", 0, validate_title),
    ("start_at", 1, validate_start_at),
    ("duration_min", 2, validate_duration),
    ("meeting_url", 3, validate_meeting_url),
    ("is_public", 4, validate_visibility),
]


def split_segments(line: str) -> List[str]:
    return [segment.strip() for segment in line.split("|")]


def parse_submission(line: str, zone: Optional[str] = None) -> EventCreationRequest:
    """Parse a submission line into an :class:`EventCreationRequest`.

    Raises:
        SubmissionFormatError: the line or one of its fields is malformed.
        TimeParseError: the date/time field is not in a recognised layout.
    """
    segments = split_segments(line)
    if not 4 <= len(segments) <= len(FIELD_VALIDATORS):
        raise SubmissionFormatError()

    values: Dict[str, Any] = {}
    for name, index, validator in FIELD_VALIDATORS:
        raw = segments[index] if index < len(segments) else None
        result = validator(raw)
        if not result.ok:
            raise result.error
        values[name] = result.value

    return EventCreationRequest(
        title=values["title"],
        start_at=TimeNormalizer.to_utc(values["start_at"], zone),
        duration_min=values["duration_min"],
        meeting_url=values["meeting_url"],
        is_public=values["is_public"],
    )
