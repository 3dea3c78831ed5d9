"""
Deterministic stand-in for the college data source.

Content is generated from branch/semester/batch so the same profile
always sees the same timetable and exam dates.
"""

from datetime import date, timedelta

from content.models import DaySchedule, Exam, ExamSet, Material, MaterialList, Period, Timetable

WEEKDAYS = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday"]

SLOTS = ["09:00 - 09:50", "10:00 - 10:50", "11:00 - 11:50", "13:00 - 13:50", "14:00 - 14:50"]

# (subject, teacher)
COURSES = [
    ("Web Technology", "Dr. A. Sharma"),
    ("DSA", "Prof. R. Mehta"),
    ("Operating Systems", "Dr. S. Iyer"),
    ("Database Management Systems", "Prof. K. Nair"),
    ("Computer Networks", "Dr. P. Verma"),
]

VENUES = ["Exam Hall A", "Exam Hall B", "Seminar Hall", "Block C - 201"]

MATERIALS = [
    Material("Web Technology Unit 1 Notes", "Web Technology", 5, "materials/web-tech-unit-1.pdf", "2025-07-14"),
    Material("HTML & CSS Lab Manual", "Web Technology", 5, "materials/web-tech-lab.pdf", "2025-07-21"),
    Material("DSA Complete Notes", "DSA", 3, "materials/dsa-notes.pdf", "2025-06-30"),
    Material("Sorting Algorithms Cheat Sheet", "DSA", 3, "materials/dsa-sorting.pdf", "2025-07-02"),
    Material("Operating Systems Process Scheduling", "Operating Systems", 4, "materials/os-scheduling.pdf", "2025-07-08"),
    Material("Database Normalization Notes", "Database Management Systems", 4, "materials/dbms-normalization.pdf", "2025-07-10"),
    Material("Computer Networks OSI Model", "Computer Networks", 5, "materials/cn-osi.pdf", "2025-07-18"),
    Material("Previous Year Exam Paper - DSA", "DSA", 3, "papers/dsa-2024.pdf", "2025-05-02"),
    Material("Operating Systems Question Paper 2024", "Operating Systems", 4, "papers/os-2024.pdf", "2025-05-05"),
    Material("Mid-Semester Papers Collection", "Exam Papers", 5, "papers/midsem-collection.pdf", "2025-04-20"),
]

# Exam season starts on this date for every batch; the profile shifts it by days.
EXAM_SEASON_START = date(2025, 12, 1)


def _seed(branch, semester, batch):
    return sum(ord(c) for c in f"{branch}{semester}{batch}")


class MockContentSource:
    """
    Generates timetables, exam lists and study materials.
    """

    def timetable(self, branch, semester, batch) -> Timetable:
        seed = _seed(branch, semester, batch)
        days = []
        for day_index, day in enumerate(WEEKDAYS):
            periods = []
            slot_count = 3 if day == "Saturday" else len(SLOTS)
            for slot_index in range(slot_count):
                subject, teacher = COURSES[(seed + day_index + slot_index) % len(COURSES)]
                room = f"{branch}-{100 * int(semester) + (day_index + slot_index) % 4 + 1}"
                periods.append(Period(SLOTS[slot_index], subject, teacher, room))
            days.append(DaySchedule(day, periods))

        return Timetable(branch=branch, semester=int(semester), batch=batch, days=days)

    def exams(self, branch, semester, batch) -> ExamSet:
        seed = _seed(branch, semester, batch)
        start = EXAM_SEASON_START + timedelta(days=seed % 5)
        exams = []
        for index, (subject, _) in enumerate(COURSES):
            exam_date = start + timedelta(days=3 * index)
            exams.append(Exam(subject, exam_date.isoformat(), VENUES[(seed + index) % len(VENUES)]))

        return ExamSet(branch=branch, semester=int(semester), batch=batch, exams=exams)

    def materials(self) -> MaterialList:
        return MaterialList(items=list(MATERIALS))
