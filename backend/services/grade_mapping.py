"""Static grade-level appropriateness table for curriculum subjects.

Grade levels run from 0 (Nursery) to 14 (Class 12). Subject ranges are
inclusive. Everything here is pure: no database access.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class SubjectMapping:
    code: str
    name: str
    min_grade: int
    max_grade: int | None
    category: str
    description: str = ""


@dataclass(frozen=True)
class GradeValidation:
    is_valid: bool
    message: str | None = None
    suggestion: str | None = None


GRADE_SUBJECT_MAPPING: tuple[SubjectMapping, ...] = (
    # Early childhood
    SubjectMapping("ENG_BASIC", "English", 0, 12, "core", "Basic English language learning"),
    SubjectMapping("HINDI_BASIC", "Hindi", 0, 12, "language", "Basic Hindi language learning"),
    SubjectMapping("MATH_BASIC", "Mathematics", 0, 12, "core", "Age-appropriate mathematics concepts"),
    SubjectMapping("ART", "Art & Craft", 0, 12, "arts", "Creative arts and crafts activities"),
    SubjectMapping("MUS", "Music", 0, 12, "arts", "Music education and singing"),
    SubjectMapping("PE", "Physical Education", 0, 12, "activity", "Physical fitness and sports"),
    SubjectMapping("ENV_SCIENCE", "Environmental Science", 0, 4, "science", "Nature and environment studies"),
    # Primary
    SubjectMapping("SCI_BASIC", "Science", 3, 7, "science", "Integrated science"),
    SubjectMapping("SST_BASIC", "Social Studies", 3, 7, "core", "Civics and general knowledge"),
    SubjectMapping("COMP_BASIC", "Computer Science", 3, 12, "elective", "Computer literacy and programming"),
    SubjectMapping("SANS", "Sanskrit", 5, 12, "language", "Classical Sanskrit"),
    # Middle
    SubjectMapping("HIST_INTRO", "History", 6, 12, "core", "Historical studies"),
    SubjectMapping("GEO_INTRO", "Geography", 6, 12, "core", "Physical and human geography"),
    # Secondary
    SubjectMapping("PHY", "Physics", 9, 12, "science", "Principles of physics"),
    SubjectMapping("CHEM", "Chemistry", 9, 12, "science", "Chemical reactions and structures"),
    SubjectMapping("BIO", "Biology", 9, 12, "science", "Life sciences"),
    SubjectMapping("ECO", "Economics", 9, 12, "elective", "Economic principles"),
    SubjectMapping("POL", "Political Science", 9, 12, "elective", "Government and political theory"),
    # Senior secondary
    SubjectMapping("PHIL", "Philosophy", 11, 12, "elective", "Philosophical thought and ethics"),
    SubjectMapping("PSY", "Psychology", 11, 12, "elective", "Human behaviour"),
    SubjectMapping("SOC", "Sociology", 11, 12, "elective", "Society and human relationships"),
)

_BY_NAME: dict[str, SubjectMapping] = {s.name: s for s in GRADE_SUBJECT_MAPPING}

GRADE_NAMES: tuple[str, ...] = (
    "Nursery",
    "LKG",
    "UKG",
    *(f"Class {n}" for n in range(1, 13)),
)

GRADE_LEVEL_MAPPING: dict[str, int] = {name: level for level, name in enumerate(GRADE_NAMES)}


def grade_name(level: int) -> str:
    if 0 <= level < len(GRADE_NAMES):
        return GRADE_NAMES[level]
    return f"Grade {level}"


def get_grade_level_from_class_name(class_name: str | None) -> int:
    # Unknown names land on Nursery.
    return GRADE_LEVEL_MAPPING.get((class_name or "").strip(), 0)


def resolve_grade_level(*, grade_level: int | None, class_name: str | None) -> int:
    if grade_level is not None:
        return int(grade_level)
    return get_grade_level_from_class_name(class_name)


def find_subject(name: str) -> SubjectMapping | None:
    return _BY_NAME.get(name)


def _in_range(subject: SubjectMapping, level: int) -> bool:
    return level >= subject.min_grade and (subject.max_grade is None or level <= subject.max_grade)


def get_subjects_for_grade(level: int) -> list[SubjectMapping]:
    return [s for s in GRADE_SUBJECT_MAPPING if _in_range(s, level)]


def is_subject_appropriate_for_grade(subject_name: str, level: int) -> bool:
    subject = find_subject(subject_name)
    return subject is not None and _in_range(subject, level)


def validate_subject_grade_assignment(subject_name: str, level: int) -> GradeValidation:
    subject = find_subject(subject_name)
    if subject is None:
        return GradeValidation(
            is_valid=False,
            message=f'Subject "{subject_name}" is not recognized in the curriculum',
            suggestion="Please use one of the predefined subjects or add it to the mapping",
        )

    if level < subject.min_grade:
        if subject.category == "science" and level < 6:
            suggestion = 'Consider using "Environmental Science" or "Science" for younger grades'
        else:
            suggestion = "Please select an age-appropriate subject"
        return GradeValidation(
            is_valid=False,
            message=(
                f"{subject_name} is not appropriate for {grade_name(level)}. "
                f"It should start from {grade_name(subject.min_grade)}"
            ),
            suggestion=suggestion,
        )

    if subject.max_grade is not None and level > subject.max_grade:
        return GradeValidation(
            is_valid=False,
            message=f"{subject_name} is typically completed by Grade {subject.max_grade}",
            suggestion="Consider selecting an advanced alternative or specialized course",
        )

    return GradeValidation(is_valid=True)
