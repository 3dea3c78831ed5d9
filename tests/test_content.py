import pytest

from content.formatter import render_content
from content.models import ExamSet, Material, MaterialList, Timetable, content_from_payload
from content.resolver import ResponseResolver
from storage.user_context import DEFAULT_CONTEXT, UserContext


def _is_exam_material(m):
    text = f"{m.title} {m.subject or ''}".lower()
    return "exam" in text or "paper" in text


def test_timetable_uses_profile(resolver):
    result = resolver.resolve("timetable", "today", UserContext(branch="ECE", semester=3, batch="2024"))

    assert isinstance(result, Timetable)
    assert (result.branch, result.semester, result.batch) == ("ECE", 3, "2024")
    assert [d.day for d in result.days][0] == "Monday"
    assert all(day.periods for day in result.days)


def test_timetable_today_and_week_are_identical(resolver):
    ctx = UserContext(branch="CSE", semester=5, batch="2025")

    assert resolver.resolve("timetable", "today", ctx) == resolver.resolve("timetable", "this week", ctx)


def test_missing_profile_uses_defaults(resolver):
    result = resolver.resolve("exam", "upcoming", None)

    assert (result.branch, result.semester, result.batch) == (
        DEFAULT_CONTEXT.branch, DEFAULT_CONTEXT.semester, DEFAULT_CONTEXT.batch,
    )


@pytest.mark.parametrize("qualifier", ["upcoming", "exam dates", "the schedule please", "whatever"])
def test_exam_qualifiers_give_full_exam_list(resolver, qualifier):
    result = resolver.resolve("exam", qualifier, UserContext())

    assert isinstance(result, ExamSet)
    assert len(result.exams) == 5


def test_previous_papers_filters_materials(resolver):
    result = resolver.resolve("exam", "previous papers", UserContext())

    assert isinstance(result, MaterialList)
    assert result.items
    assert all(_is_exam_material(m) for m in result.items)
    everything = resolver.source.materials().items
    assert len(result.items) == sum(1 for m in everything if _is_exam_material(m))


def test_notes_filtered_by_known_subject(resolver):
    result = resolver.resolve("notes", "need DSA notes", UserContext())

    assert result.items
    assert all("dsa" in m.subject.lower() for m in result.items)


def test_notes_database_matches_longer_subject_name(resolver):
    result = resolver.resolve("notes", "Database", UserContext())

    assert [m.subject for m in result.items] == ["Database Management Systems"]


def test_notes_unknown_subject_returns_everything(resolver):
    result = resolver.resolve("notes", "chemistry", UserContext())

    assert result == resolver.source.materials()


def test_unknown_intent_rejected(resolver):
    with pytest.raises(ValueError):
        resolver.resolve("weather", "", UserContext())


# -------------------------------------------------
# Formatting
# -------------------------------------------------

def test_markup_escapes_content():
    content = MaterialList(items=[
        Material(title="<script>alert(1)</script>", subject="DSA & Algo", file_ref='x" onclick="evil()'),
    ])

    html = render_content(content, element_prefix="t")

    assert "<script>" not in html
    assert "&lt;script&gt;alert(1)&lt;/script&gt;" in html
    assert "DSA &amp; Algo" in html
    assert 'onclick="evil()"' not in html
    assert 'data-action="preview-document"' in html


@pytest.mark.parametrize("ref,previewable", [
    ("materials/dsa-notes.pdf", True),
    ("https://cdn.gcet.ac.in/dsa.pdf", True),
    ("javascript:alert(1)", False),
    ("JavaScript:alert(1)", False),
    ("data:text/html,<b>x</b>", False),
])
def test_document_preview_only_for_web_refs(ref, previewable):
    html = render_content(MaterialList(items=[Material(title="Unit 1", file_ref=ref)]))

    assert ("preview-document" in html) is previewable
    assert "javascript:" not in html.lower()


def test_timetable_markup_has_day_toggles(resolver):
    timetable = resolver.resolve("timetable", "week", UserContext())

    html = render_content(timetable, element_prefix="tt")

    assert 'data-action="toggle-day"' in html
    assert 'data-section="tt-day-0"' in html
    assert 'id="tt-day-0"' in html
    assert "Monday" in html


def test_empty_results_render_notice():
    html = render_content(MaterialList(items=[]))

    assert "No study materials found." in html


def test_render_rejects_unknown_content():
    with pytest.raises(TypeError):
        render_content({"not": "content"})


# -------------------------------------------------
# Remote payloads
# -------------------------------------------------

def test_exam_payload_parsing_drops_bad_entries():
    data = {"exams": [{"subject": "Maths", "date": "2025-12-01"}, {"date": "no subject"}, "junk"]}

    result = content_from_payload("exam", data, DEFAULT_CONTEXT)

    assert isinstance(result, ExamSet)
    assert [e.subject for e in result.exams] == ["Maths"]
    assert result.branch == DEFAULT_CONTEXT.branch


def test_pdfs_payload_accepts_bare_list():
    result = content_from_payload("pdfs", [{"title": "Unit 2", "fileRef": "u2.pdf"}], DEFAULT_CONTEXT)

    assert result == MaterialList(items=[Material(title="Unit 2", file_ref="u2.pdf")])


@pytest.mark.parametrize("content_type,data", [
    ("weather", {}),
    ("exam", "a string"),
    ("timetable", [1, 2]),
    ("pdfs", None),
])
def test_unusable_payloads(content_type, data):
    assert content_from_payload(content_type, data, DEFAULT_CONTEXT) is None
