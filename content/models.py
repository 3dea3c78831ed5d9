import logging
from dataclasses import dataclass, field
from typing import List, Optional

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Period:
    time: str
    subject: str
    teacher: Optional[str] = None
    room: Optional[str] = None


@dataclass(frozen=True)
class DaySchedule:
    day: str
    periods: List[Period] = field(default_factory=list)


@dataclass(frozen=True)
class Timetable:
    branch: str
    semester: int
    batch: str
    days: List[DaySchedule] = field(default_factory=list)

    @classmethod
    def from_payload(cls, data: dict, defaults) -> "Timetable":
        days = []
        for raw_day in _as_list(data.get("days")):
            if not isinstance(raw_day, dict) or not raw_day.get("day"):
                continue
            periods = [
                Period(
                    time=str(p.get("time", "")),
                    subject=str(p.get("subject", "")),
                    teacher=_opt_str(p.get("teacher")),
                    room=_opt_str(p.get("room")),
                )
                for p in _as_list(raw_day.get("periods"))
                if isinstance(p, dict) and p.get("subject")
            ]
            days.append(DaySchedule(day=str(raw_day["day"]), periods=periods))

        return cls(
            branch=str(data.get("branch") or defaults.branch),
            semester=_as_int(data.get("semester"), defaults.semester),
            batch=str(data.get("batch") or defaults.batch),
            days=days,
        )


@dataclass(frozen=True)
class Exam:
    subject: str
    date: str
    venue: Optional[str] = None


@dataclass(frozen=True)
class ExamSet:
    branch: str
    semester: int
    batch: str
    exams: List[Exam] = field(default_factory=list)

    @classmethod
    def from_payload(cls, data: dict, defaults) -> "ExamSet":
        # The service sends either {"exams": [...]} or a bare list.
        raw_exams = data if isinstance(data, list) else _as_list(data.get("exams"))
        exams = [
            Exam(
                subject=str(e["subject"]),
                date=str(e.get("date", "")),
                venue=_opt_str(e.get("venue")),
            )
            for e in raw_exams
            if isinstance(e, dict) and e.get("subject")
        ]
        meta = data if isinstance(data, dict) else {}
        return cls(
            branch=str(meta.get("branch") or defaults.branch),
            semester=_as_int(meta.get("semester"), defaults.semester),
            batch=str(meta.get("batch") or defaults.batch),
            exams=exams,
        )


@dataclass(frozen=True)
class Material:
    title: str
    subject: Optional[str] = None
    semester: Optional[int] = None
    file_ref: Optional[str] = None
    uploaded_at: Optional[str] = None


@dataclass(frozen=True)
class MaterialList:
    items: List[Material] = field(default_factory=list)

    @classmethod
    def from_payload(cls, data, defaults=None) -> "MaterialList":
        raw_items = data if isinstance(data, list) else _as_list(data.get("items") or data.get("pdfs"))
        items = [
            Material(
                title=str(m["title"]),
                subject=_opt_str(m.get("subject")),
                semester=_as_int(m.get("semester"), None),
                file_ref=_opt_str(m.get("fileRef") or m.get("file_ref") or m.get("url")),
                uploaded_at=_opt_str(m.get("uploadedAt") or m.get("uploaded_at")),
            )
            for m in raw_items
            if isinstance(m, dict) and m.get("title")
        ]
        return cls(items=items)


# -------------------------------------------------
# Remote payload helpers
# -------------------------------------------------

PAYLOAD_TYPES = {
    "timetable": Timetable,
    "exam": ExamSet,
    "pdfs": MaterialList,
}


def content_from_payload(content_type: str, data, defaults):
    """
    Parse a query-service payload into structured content.
    Returns None when the type is unknown or the payload has no usable shape.
    """
    model = PAYLOAD_TYPES.get(content_type)
    if model is None or not isinstance(data, (dict, list)):
        return None
    if isinstance(data, list) and model is Timetable:
        return None

    try:
        return model.from_payload(data, defaults)
    except (KeyError, TypeError, ValueError, AttributeError) as e:
        logger.warning("Unusable %s payload from query service: %s", content_type, e)
        return None


def _as_list(value):
    return value if isinstance(value, list) else []


def _opt_str(value):
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _as_int(value, default):
    try:
        return int(value)
    except (TypeError, ValueError):
        return default
