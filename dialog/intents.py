import re
from typing import Literal, Optional

IntentTag = Literal["timetable", "exam", "notes"]

# Checked in this order; the first match wins.
INTENT_PATTERNS = [
    ("timetable", re.compile(r"timetable|schedule", re.IGNORECASE)),
    ("exam", re.compile(r"exam", re.IGNORECASE)),
    ("notes", re.compile(r"notes?|material|study|pdf", re.IGNORECASE)),
]

CLARIFYING_QUESTIONS = {
    "timetable": "Would you like today's timetable or the full week's schedule?",
    "exam": "Are you looking for upcoming exam dates or previous year papers?",
    "notes": (
        "Which subject do you need notes for? (Web Technology, DSA, "
        "Operating Systems, Database, Computer Networks)"
    ),
}


def classify(text) -> Optional[IntentTag]:
    """
    Map raw input to an intent tag, or None.
    Keyword matching only; never raises.
    """
    if not isinstance(text, str) or not text:
        return None

    for tag, pattern in INTENT_PATTERNS:
        if pattern.search(text):
            return tag
    return None
