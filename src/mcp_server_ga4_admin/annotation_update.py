"""
Reporting data annotation models and partial updates.

An annotation carries either a single date or a date range. Updates are
read-modify-write: the existing annotation is fetched, the supplied fields
are merged into it, and the merge yields the PATCH body together with the
update mask listing only the fields that changed.
"""

import re
from typing import Any, ClassVar, Dict, List, Optional, Union

from pydantic import BaseModel, Field, field_validator

_ISO_DATE = re.compile(r"^(\d{4})-(\d{2})-(\d{2})$")

ANNOTATION_DATE = "annotationDate"
ANNOTATION_DATE_RANGE = "annotationDateRange"
DESCRIPTION = "description"


class CalendarDate(BaseModel):
    """A calendar date without time of day or timezone.

    Calendar validity is not checked here; the Admin API rejects
    impossible dates itself.
    """

    year: int
    month: int
    day: int

    model_config = {"frozen": True}

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "CalendarDate":
        return cls(year=data.get("year", 0), month=data.get("month", 0), day=data.get("day", 0))

    def to_api(self) -> Dict[str, int]:
        return {"year": self.year, "month": self.month, "day": self.day}


class SingleDate(BaseModel):
    field: ClassVar[str] = ANNOTATION_DATE

    date: CalendarDate

    model_config = {"frozen": True}

    def to_api(self) -> Dict[str, int]:
        return self.date.to_api()


class DateRange(BaseModel):
    field: ClassVar[str] = ANNOTATION_DATE_RANGE

    start: CalendarDate
    end: CalendarDate

    model_config = {"frozen": True}

    def to_api(self) -> Dict[str, Dict[str, int]]:
        return {"startDate": self.start.to_api(), "endDate": self.end.to_api()}


DateSpec = Union[SingleDate, DateRange]


def parse_calendar_date(value: str) -> CalendarDate:
    """Parse the calendar part of an ISO 8601 date-time string.

    Only the first ten characters (YYYY-MM-DD) are read; any time of day or
    offset that follows is ignored. Whether the date exists on the calendar
    is left to the API.

    Raises:
        ValueError: if the string does not start with YYYY-MM-DD digits.
    """
    match = _ISO_DATE.match((value or "")[:10])
    if not match:
        raise ValueError(
            f"Invalid date '{value}': expected ISO 8601 format, e.g. '2023-04-01T00:00:00Z'"
        )
    year, month, day = (int(part) for part in match.groups())
    return CalendarDate(year=year, month=month, day=day)


def date_spec_from_api(data: Dict[str, Any]) -> Optional[DateSpec]:
    """Read the date of an API annotation. A date range takes precedence."""
    date_range = data.get(ANNOTATION_DATE_RANGE)
    if date_range:
        return DateRange(
            start=CalendarDate.from_api(date_range.get("startDate") or {}),
            end=CalendarDate.from_api(date_range.get("endDate") or {}),
        )
    single = data.get(ANNOTATION_DATE)
    if single:
        return SingleDate(date=CalendarDate.from_api(single))
    return None


def date_spec_for(start_time: str, end_time: Optional[str] = None) -> DateSpec:
    """Build the date of a new annotation; an end time makes it a range."""
    start = parse_calendar_date(start_time)
    if end_time:
        return DateRange(start=start, end=parse_calendar_date(end_time))
    return SingleDate(date=start)


class AnnotationRecord(BaseModel):
    """A reporting data annotation as returned by the Admin API."""

    name: str
    title: Optional[str] = None
    description: Optional[str] = None
    color: str = "COLOR_UNSPECIFIED"
    system_generated: bool = False
    date: Optional[DateSpec] = None

    model_config = {"frozen": True}

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "AnnotationRecord":
        return cls(
            name=data.get("name", ""),
            title=data.get("title"),
            description=data.get("description"),
            color=data.get("color", "COLOR_UNSPECIFIED"),
            system_generated=bool(data.get("systemGenerated", False)),
            date=date_spec_from_api(data),
        )

    def to_api(self) -> Dict[str, Any]:
        resource = self.required_fields()
        if self.description:
            resource[DESCRIPTION] = self.description
        if self.date is not None:
            resource[self.date.field] = self.date.to_api()
        return resource

    def required_fields(self) -> Dict[str, Any]:
        """Name, title and color; a missing title is left out."""
        resource: Dict[str, Any] = {"name": self.name}
        if self.title is not None:
            resource["title"] = self.title
        resource["color"] = self.color
        return resource


class AnnotationPatch(BaseModel):
    """Fields supplied for an update. None means the field was not supplied.

    An empty start or end time counts as not supplied, so the existing date
    fills that slot.
    """

    description: Optional[str] = None
    start_time: Optional[str] = None
    end_time: Optional[str] = None

    model_config = {"frozen": True}

    @field_validator("start_time", "end_time")
    @classmethod
    def blank_time_is_unset(cls, value: Optional[str]) -> Optional[str]:
        return value or None

    @property
    def has_dates(self) -> bool:
        return self.start_time is not None or self.end_time is not None


class UpdateRequest(BaseModel):
    """PATCH body and the update mask naming the fields that changed."""

    resource: Dict[str, Any]
    field_mask: List[str] = Field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.field_mask


def _merge_dates(existing: Optional[DateSpec], patch: AnnotationPatch) -> DateSpec:
    start = parse_calendar_date(patch.start_time) if patch.start_time is not None else None
    end = parse_calendar_date(patch.end_time) if patch.end_time is not None else None

    if isinstance(existing, DateRange) or end is not None:
        if start is None:
            if isinstance(existing, DateRange):
                start = existing.start
            elif isinstance(existing, SingleDate):
                start = existing.date
            else:
                raise ValueError("Annotation has no date to extend into a range; supply a start time")
        if end is None:
            end = existing.end
        return DateRange(start=start, end=end)

    return SingleDate(date=start)


def resolve_update(existing: AnnotationRecord, patch: AnnotationPatch) -> UpdateRequest:
    """Merge a partial update into an existing annotation.

    Name, title and color are always sent since the API requires them on
    write; a title the annotation does not have is left out. Description is
    masked only when supplied; an existing description is carried along
    unmasked. Supplying an end time turns the annotation into a date range.
    An empty mask means there is nothing to update.

    Raises:
        ValueError: on a malformed date, or when a range is needed on an
            annotation without a date and no start time is supplied.
    """
    resource = existing.required_fields()
    field_mask: List[str] = []

    if patch.description is not None:
        resource[DESCRIPTION] = patch.description
        field_mask.append(DESCRIPTION)
    elif existing.description:
        resource[DESCRIPTION] = existing.description

    if patch.has_dates:
        date = _merge_dates(existing.date, patch)
        resource[date.field] = date.to_api()
        field_mask.append(date.field)
    elif existing.date is not None:
        resource[existing.date.field] = existing.date.to_api()

    return UpdateRequest(resource=resource, field_mask=field_mask)
