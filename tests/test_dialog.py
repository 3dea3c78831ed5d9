import json

import pytest

from dialog.intents import CLARIFYING_QUESTIONS
from intelligence.heuristics import GREETING_REPLY, HELP_MESSAGES
from session.assistant import APOLOGY_REPLY, Assistant, TurnInProgressError
from session.context import PendingIntent
from storage.local_store import TRANSCRIPT_SLOT, read_slot
from storage.transcript import WELCOME_MESSAGE
from storage.user_context import UserContext


@pytest.mark.parametrize("text", ["show my timetable", "Weekly SCHEDULE?"])
def test_timetable_keyword_asks_for_clarification(assistant, text):
    before = len(assistant.messages)

    user, bot = assistant.submit(text)

    assert len(assistant.messages) == before + 2
    assert user.role == "user" and user.content == text
    assert bot.role == "bot"
    assert bot.content == CLARIFYING_QUESTIONS["timetable"]
    assert not bot.is_markup
    assert assistant.dialog.state == "awaiting_clarification"
    assert assistant.dialog.context.pending_intent == PendingIntent(
        type="timetable", clarifying_question=CLARIFYING_QUESTIONS["timetable"],
    )


def test_answer_resolves_pending_timetable(assistant):
    assistant.submit("timetable")

    _, bot = assistant.submit("today")

    assert bot.is_markup
    assert "Timetable" in bot.content
    assert "Monday" in bot.content
    assert assistant.dialog.state == "idle"


def test_previous_papers_answer(assistant):
    assistant.submit("exam")

    _, bot = assistant.submit("previous papers")

    assert bot.is_markup
    assert "Study Materials" in bot.content
    assert "Previous Year Exam Paper - DSA" in bot.content
    assert "Web Technology Unit 1 Notes" not in bot.content
    assert assistant.dialog.state == "idle"


def test_upcoming_answer(assistant):
    assistant.submit("any exams soon?")

    _, bot = assistant.submit("upcoming")

    assert "Exam Schedule" in bot.content
    assert "Computer Networks" in bot.content
    assert assistant.dialog.state == "idle"


def test_clarification_answer_is_never_reclassified(assistant):
    assistant.submit("notes please")

    _, bot = assistant.submit("actually my exam timetable")

    assert "Study Materials" in bot.content
    assert bot.content != CLARIFYING_QUESTIONS["timetable"]
    assert assistant.dialog.state == "idle"


def test_profile_personalizes_resolution(assistant):
    assistant.save_profile(UserContext(branch="IT", semester=2, batch="2023"))
    assistant.submit("timetable")

    _, bot = assistant.submit("this week")

    assert "IT &middot; Semester 2 &middot; Batch 2023" in bot.content


def test_greeting_reaches_heuristics_offline(assistant):
    _, bot = assistant.submit("hlo")

    assert bot.content == GREETING_REPLY
    assert assistant.dialog.state == "idle"


def test_free_text_offline_gets_help_message(assistant):
    for text in ["what is the canteen menu", "who won the match", "?"]:
        _, bot = assistant.submit(text)
        assert bot.content in HELP_MESSAGES


def test_blank_input_is_ignored(assistant):
    before = assistant.messages

    assert assistant.submit("   ") == []
    assert assistant.messages == before


def test_every_turn_is_persisted(assistant, db_path):
    assistant.submit("hi")

    stored = json.loads(read_slot(TRANSCRIPT_SLOT, db_path))
    assert [m["content"] for m in stored] == [m.content for m in assistant.messages]


def test_clear_transcript(assistant, db_path):
    assistant.submit("hi")
    assistant.submit("exam")

    assistant.clear_transcript()

    assert [(m.role, m.content) for m in assistant.messages] == [("bot", WELCOME_MESSAGE)]
    assert len(json.loads(read_slot(TRANSCRIPT_SLOT, db_path))) == 1


def test_pending_intent_is_not_persisted(db_path, resolver, offline_chain):
    first = Assistant.create(db_path=db_path, resolver=resolver, fallback_chain=offline_chain)
    first.submit("timetable")

    reloaded = Assistant.create(db_path=db_path, resolver=resolver, fallback_chain=offline_chain)

    assert reloaded.dialog.state == "idle"
    assert len(reloaded.messages) == len(first.messages)


def test_second_submit_while_busy_is_rejected(assistant):
    assistant._turn_lock.acquire()
    try:
        assert assistant.busy
        with pytest.raises(TurnInProgressError):
            assistant.submit("timetable")
    finally:
        assistant._turn_lock.release()

    assert not assistant.busy


def test_clear_and_profile_save_wait_for_the_turn(assistant):
    assistant.submit("hi")
    before = assistant.messages
    profile_before = assistant.user_context

    assistant._turn_lock.acquire()
    try:
        with pytest.raises(TurnInProgressError):
            assistant.clear_transcript()
        with pytest.raises(TurnInProgressError):
            assistant.save_profile(UserContext(branch="IT", semester=2, batch="2023"))
    finally:
        assistant._turn_lock.release()

    assert assistant.messages == before
    assert assistant.user_context == profile_before
    assert not assistant.busy


class ExplodingDialog:
    state = "idle"

    def handle(self, text, transcript, user_context):
        raise RuntimeError("boom")


def test_unexpected_failure_still_answers(db_path, offline_chain):
    assistant = Assistant.create(db_path=db_path, fallback_chain=offline_chain)
    assistant.dialog = ExplodingDialog()

    _, bot = assistant.submit("anything")

    assert bot.content == APOLOGY_REPLY
    assert not assistant.busy
