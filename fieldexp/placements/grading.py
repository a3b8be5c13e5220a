"""
placements/grading.py
─────────────────────
Letter grade → 4.0-scale conversion and the Microteaching eligibility rule.
"""

GRADE_POINTS = {
    'A+': 4.0, 'A': 4.0, 'A-': 3.7,
    'B+': 3.3, 'B': 3.0, 'B-': 2.7,
    'C+': 2.3, 'C': 2.0, 'C-': 1.7,
    'D+': 1.3, 'D': 1.0,
    'F': 0.0,
}

# A "B" in Microteaching is the lowest passing grade for field experience.
MINIMUM_MICROTEACHING_POINTS = 3.0


def grade_to_numeric(grade):
    """Return the grade points for *grade*; unknown or empty grades count as 0."""
    if not grade:
        return 0.0
    return GRADE_POINTS.get(grade.strip().upper(), 0.0)


def is_eligible(has_microteaching, grade):
    """A student may register once Microteaching is completed with at least a B."""
    return bool(has_microteaching) and grade_to_numeric(grade) >= MINIMUM_MICROTEACHING_POINTS
