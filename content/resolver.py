import logging
import re

from content.mock_source import MockContentSource
from content.models import MaterialList
from storage.user_context import DEFAULT_CONTEXT, UserContext

logger = logging.getLogger(__name__)

UPCOMING_EXAMS_RE = re.compile(r"upcoming|dates?|schedule", re.IGNORECASE)
PREVIOUS_PAPERS_RE = re.compile(r"previous|papers?", re.IGNORECASE)
EXAM_MATERIAL_TERMS = ("exam", "paper")

KNOWN_SUBJECTS = [
    "web technology",
    "dsa",
    "operating systems",
    "database",
    "computer networks",
]


def find_subject(text: str):
    lowered = (text or "").lower()
    for subject in KNOWN_SUBJECTS:
        if subject in lowered:
            return subject
    return None


class ResponseResolver:
    """
    Turns a resolved intent plus its qualifier text into structured content.

    `defaults` fills whatever the saved profile is missing.
    """

    def __init__(self, source=None, defaults: UserContext = DEFAULT_CONTEXT):
        self.source = source or MockContentSource()
        self.defaults = defaults

    def resolve(self, intent_type, qualifier, user_context=None):
        ctx = (user_context or UserContext()).with_defaults(self.defaults)
        qualifier = qualifier or ""

        if intent_type == "timetable":
            # "today" and "this week" both get the full week.
            return self.source.timetable(ctx.branch, ctx.semester, ctx.batch)

        if intent_type == "exam":
            if UPCOMING_EXAMS_RE.search(qualifier):
                return self.source.exams(ctx.branch, ctx.semester, ctx.batch)
            if PREVIOUS_PAPERS_RE.search(qualifier):
                return self._exam_papers()
            return self.source.exams(ctx.branch, ctx.semester, ctx.batch)

        if intent_type == "notes":
            subject = find_subject(qualifier)
            materials = self.source.materials()
            if subject is None:
                return materials
            return MaterialList(items=[
                m for m in materials.items
                if m.subject and subject in m.subject.lower()
            ])

        raise ValueError(f"Unknown intent type: {intent_type!r}")

    def _exam_papers(self):
        materials = self.source.materials()
        return MaterialList(items=[
            m for m in materials.items
            if any(
                term in (m.subject or "").lower() or term in m.title.lower()
                for term in EXAM_MATERIAL_TERMS
            )
        ])
