import random
import re

from dialog.intents import classify
from dialog.reply import Reply

GREETING_RE = re.compile(
    r"^\s*(good\s+morning|good\s+afternoon|good\s+evening|greetings|namaste|hello|helo|hii+|hlo|hey|hi)\b",
    re.IGNORECASE,
)

GREETING_REPLY = (
    "Hello! 👋 How can I help you today? You can ask for your timetable, "
    "exam schedule or study notes."
)

HELP_MESSAGES = [
    "I can help with your timetable, exam schedule and study materials. Try asking \"show my timetable\".",
    "Not sure I got that. You can ask me about upcoming exams, previous year papers or notes for a subject.",
    "I'm best at academic questions. Try \"exam dates\", \"DSA notes\" or \"weekly schedule\".",
    "Could you rephrase? I can fetch timetables, exam dates and study materials for your semester.",
]


class HeuristicStrategy:
    """
    Last step of the fallback chain. Works offline and always answers.
    """

    name = "heuristic"
    enabled = True

    def __init__(self, resolver, rng=None):
        self.resolver = resolver
        self.rng = rng or random.Random()

    def attempt(self, text, transcript, user_context) -> Reply:
        if GREETING_RE.match(text or ""):
            return Reply(content=GREETING_REPLY, source=self.name)

        tag = classify(text)
        if tag is not None:
            content = self.resolver.resolve(tag, text, user_context)
            return Reply.from_content(content, source=self.name)

        return Reply(content=self.rng.choice(HELP_MESSAGES), source=self.name)
