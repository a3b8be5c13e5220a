from django.test import SimpleTestCase

from placements.grading import GRADE_POINTS, grade_to_numeric, is_eligible


class GradeToNumericTests(SimpleTestCase):
    def test_table_values(self):
        expected = {
            'A+': 4.0, 'A': 4.0, 'A-': 3.7,
            'B+': 3.3, 'B': 3.0, 'B-': 2.7,
            'C+': 2.3, 'C': 2.0, 'C-': 1.7,
            'D+': 1.3, 'D': 1.0, 'F': 0.0,
        }
        self.assertEqual(GRADE_POINTS, expected)
        for grade, points in expected.items():
            self.assertEqual(grade_to_numeric(grade), points, grade)

    def test_unknown_or_missing_grade_is_zero(self):
        self.assertEqual(grade_to_numeric('E'), 0.0)
        self.assertEqual(grade_to_numeric(''), 0.0)
        self.assertEqual(grade_to_numeric(None), 0.0)

    def test_whitespace_and_case_are_ignored(self):
        self.assertEqual(grade_to_numeric(' b+ '), 3.3)


class EligibilityTests(SimpleTestCase):
    def test_b_is_enough(self):
        self.assertTrue(is_eligible(True, 'B'))

    def test_b_minus_is_not(self):
        self.assertFalse(is_eligible(True, 'B-'))

    def test_flag_is_required(self):
        self.assertFalse(is_eligible(False, 'A'))

    def test_missing_grade(self):
        self.assertFalse(is_eligible(True, ''))
