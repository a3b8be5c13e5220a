from decimal import Decimal
from unittest.mock import patch

from django.contrib.auth import get_user_model
from django.test import SimpleTestCase, TestCase

from placements.exceptions import (
    AlreadyRegistered,
    NotAuthenticated,
    RegistrationError,
    SelectionUnavailable,
    StudentRecordConflict,
)
from placements.models import Registration, School, SchoolQuota, Student, Subject
from placements.services import (
    GroupedSchool,
    SubjectEntry,
    VerifiedStudent,
    aggregate_quota_totals,
    fetch_quotas,
    filter_schools,
    find_quota_entry,
    group_quotas_by_school,
    is_selectable,
    quota_status,
    register_student,
    registration_stats,
    verify_student,
)

User = get_user_model()


def _verified(student_id='S-001', gpa=3.5, eligible=True):
    return VerifiedStudent(
        id=student_id,
        name='Siti Rahma',
        has_microteaching=eligible,
        microteaching_grade='A-',
        gpa=gpa,
    )


class QuotaStatusTests(SimpleTestCase):
    def test_limited_below_thirty_percent(self):
        self.assertEqual(quota_status(10, 8).label, 'Limited')

    def test_available_at_half(self):
        self.assertEqual(quota_status(10, 5).label, 'Available')

    def test_exactly_thirty_percent_is_available(self):
        self.assertEqual(quota_status(10, 7).label, 'Available')

    def test_full(self):
        self.assertEqual(quota_status(10, 10).label, 'Full')
        self.assertEqual(quota_status(10, 10).tone, 'destructive')

    def test_overbooked_entry_is_limited_and_not_clamped(self):
        entry = SubjectEntry(quota_id=1, subject='math', total_quota=3, registered_count=5)
        self.assertEqual(entry.available, -2)
        self.assertEqual(entry.status.label, 'Limited')
        self.assertEqual(entry.percent_available, 0)


class SelectionRuleTests(SimpleTestCase):
    def setUp(self):
        self.school = GroupedSchool(id=1, name='SMA 1', location='Jakarta', min_gpa=3.0)

    def test_selectable_with_room_and_gpa(self):
        entry = SubjectEntry(quota_id=1, subject='math', total_quota=5, registered_count=2)
        self.assertTrue(is_selectable(entry, self.school, 3.0))

    def test_full_entry_is_not_selectable(self):
        entry = SubjectEntry(quota_id=1, subject='math', total_quota=5, registered_count=5)
        self.assertFalse(is_selectable(entry, self.school, 4.0))

    def test_gpa_gate(self):
        entry = SubjectEntry(quota_id=1, subject='math', total_quota=5, registered_count=0)
        self.assertFalse(is_selectable(entry, self.school, 2.99))


class FilterSchoolsTests(SimpleTestCase):
    def setUp(self):
        self.schools = [
            GroupedSchool(id=1, name='SMA Negeri 1', location='Jakarta', min_gpa=0),
            GroupedSchool(id=2, name='SMP Harapan', location='Bandung', min_gpa=0),
        ]

    def test_matches_location_case_insensitively(self):
        result = filter_schools(self.schools, 'jakarta')
        self.assertEqual([s.id for s in result], [1])

    def test_matches_name(self):
        result = filter_schools(self.schools, 'HARAPAN')
        self.assertEqual([s.id for s in result], [2])

    def test_empty_query_returns_everything(self):
        self.assertEqual(len(filter_schools(self.schools, '  ')), 2)


class AggregateQuotaTotalsTests(SimpleTestCase):
    def test_totals(self):
        self.assertEqual(aggregate_quota_totals([(10, 4), (5, 5)]), (15, 6))

    def test_no_rows(self):
        self.assertEqual(aggregate_quota_totals([]), (0, 0))


class VerifyStudentTests(TestCase):
    def test_unknown_id(self):
        self.assertIsNone(verify_student('NOPE'))

    def test_eligible_student(self):
        Student.objects.create(
            student_id='S-001', name='Siti Rahma', has_microteaching=True,
            microteaching_grade='B', gpa=Decimal('3.20'),
        )
        verified = verify_student('  S-001 ')
        self.assertEqual(verified.id, 'S-001')
        self.assertTrue(verified.has_microteaching)
        self.assertEqual(verified.microteaching_grade, 'B')
        self.assertAlmostEqual(verified.gpa, 3.2)

    def test_low_grade_is_returned_but_not_eligible(self):
        Student.objects.create(
            student_id='S-002', name='Budi', has_microteaching=True,
            microteaching_grade='B-', gpa=Decimal('3.90'),
        )
        verified = verify_student('S-002')
        self.assertIsNotNone(verified)
        self.assertFalse(verified.has_microteaching)

    def test_missing_grade_shows_na(self):
        Student.objects.create(student_id='S-003', name='Dewi', has_microteaching=False)
        verified = verify_student('S-003')
        self.assertEqual(verified.microteaching_grade, 'N/A')
        self.assertFalse(verified.has_microteaching)


class FetchAndGroupTests(TestCase):
    def setUp(self):
        self.bandung = School.objects.create(name='B School', location='Bandung')
        self.jakarta = School.objects.create(
            name='A School', location='Jakarta', min_gpa=Decimal('3.00'),
            latitude=Decimal('-6.200000'), longitude=Decimal('106.816666'),
        )
        SchoolQuota.objects.create(school=self.bandung, subject=Subject.MATH, total_quota=4)
        SchoolQuota.objects.create(school=self.jakarta, subject=Subject.PHYSICS, total_quota=3)
        SchoolQuota.objects.create(school=self.jakarta, subject=Subject.MATH, total_quota=2)
        SchoolQuota.objects.create(school=self.jakarta, subject=Subject.BIOLOGY, total_quota=0)

    def test_zero_capacity_rows_are_skipped_and_ordered_by_school(self):
        schools = group_quotas_by_school(fetch_quotas())
        self.assertEqual([s.name for s in schools], ['A School', 'B School'])
        self.assertEqual([e.subject for e in schools[0].subjects], ['physics', 'math'])
        self.assertEqual(schools[0].min_gpa, 3.0)
        self.assertTrue(schools[0].has_coordinates)

    def test_subject_filter(self):
        schools = group_quotas_by_school(fetch_quotas(Subject.PHYSICS))
        self.assertEqual(len(schools), 1)
        self.assertEqual(schools[0].subjects[0].subject, 'physics')

    def test_map_embed_without_api_key_uses_openstreetmap(self):
        with self.settings(GOOGLE_MAPS_API_KEY=''):
            school = group_quotas_by_school(fetch_quotas(Subject.PHYSICS))[0]
            self.assertIn('openstreetmap.org', school.map_embed_url)

    def test_map_embed_with_api_key_uses_google(self):
        with self.settings(GOOGLE_MAPS_API_KEY='test-key'):
            school = group_quotas_by_school(fetch_quotas(Subject.PHYSICS))[0]
            self.assertIn('google.com/maps/embed', school.map_embed_url)
            self.assertIn('-6.2,106.816666', school.map_embed_url)


class RegisterStudentTests(TestCase):
    def setUp(self):
        self.user = User.objects.create_user(username='siti', password='pw-12345-x')
        self.school = School.objects.create(name='SMA 1', location='Jakarta', min_gpa=Decimal('3.00'))
        self.quota = SchoolQuota.objects.create(school=self.school, subject=Subject.MATH, total_quota=10)

    def test_creates_student_and_registration(self):
        registration = register_student(self.user, _verified(), self.quota.pk)

        self.assertEqual(registration.school, self.school)
        self.assertEqual(registration.subject, 'math')
        student = Student.objects.get(user=self.user)
        self.assertEqual(student.student_id, 'S-001')
        self.quota.refresh_from_db()
        self.assertEqual(self.quota.registered_count, 1)

    def test_claims_existing_academic_record(self):
        record = Student.objects.create(
            student_id='S-001', name='Siti Rahma', has_microteaching=True, microteaching_grade='A-',
        )
        register_student(self.user, _verified(), self.quota.pk)
        record.refresh_from_db()
        self.assertEqual(record.user, self.user)
        self.assertEqual(Student.objects.count(), 1)

    def test_second_registration_is_rejected(self):
        register_student(self.user, _verified(), self.quota.pk)
        with self.assertRaisesMessage(AlreadyRegistered, 'You have already registered for a school'):
            register_student(self.user, _verified(), self.quota.pk)

        self.assertEqual(Registration.objects.count(), 1)
        self.quota.refresh_from_db()
        self.assertEqual(self.quota.registered_count, 1)

    def test_anonymous_user(self):
        with self.assertRaises(NotAuthenticated):
            register_student(None, _verified(), self.quota.pk)

    def test_ineligible_student(self):
        with self.assertRaises(RegistrationError):
            register_student(self.user, _verified(eligible=False), self.quota.pk)
        self.assertFalse(Registration.objects.exists())

    def test_full_quota(self):
        self.quota.registered_count = 10
        self.quota.save()
        with self.assertRaises(SelectionUnavailable):
            register_student(self.user, _verified(), self.quota.pk)

    def test_gpa_below_school_minimum(self):
        with self.assertRaises(SelectionUnavailable):
            register_student(self.user, _verified(gpa=2.5), self.quota.pk)

    def test_record_linked_to_other_account(self):
        other = User.objects.create_user(username='other', password='pw-12345-x')
        Student.objects.create(student_id='S-001', name='Siti Rahma', user=other)
        with self.assertRaises(StudentRecordConflict):
            register_student(self.user, _verified(), self.quota.pk)
        self.assertFalse(Registration.objects.exists())

    def test_deleting_registration_releases_slot(self):
        registration = register_student(self.user, _verified(), self.quota.pk)
        registration.delete()
        self.quota.refresh_from_db()
        self.assertEqual(self.quota.registered_count, 0)

    def test_registrations_written_outside_the_flow_are_counted(self):
        self.quota.total_quota = 2
        self.quota.save()
        walk_in = Student.objects.create(student_id='S-900', name='Agus')

        added = Registration.objects.create(student=walk_in, school=self.school, subject=Subject.MATH)
        register_student(self.user, _verified(), self.quota.pk)
        self.quota.refresh_from_db()
        self.assertEqual(self.quota.registered_count, 2)

        added.delete()
        self.quota.refresh_from_db()
        self.assertEqual(self.quota.registered_count, Registration.objects.count())
        self.assertEqual(self.quota.registered_count, 1)

    def test_moving_a_registration_moves_the_slot(self):
        physics = SchoolQuota.objects.create(school=self.school, subject=Subject.PHYSICS, total_quota=3)
        registration = register_student(self.user, _verified(), self.quota.pk)

        registration.subject = Subject.PHYSICS
        registration.save()

        self.quota.refresh_from_db()
        physics.refresh_from_db()
        self.assertEqual(self.quota.registered_count, 0)
        self.assertEqual(physics.registered_count, 1)

    def test_last_slot_taken_after_the_page_was_read(self):
        self.quota.total_quota = 1
        self.quota.save()
        stale = find_quota_entry(self.quota.pk)
        SchoolQuota.objects.filter(pk=self.quota.pk).update(registered_count=1)

        with patch('placements.services.find_quota_entry', return_value=stale):
            with self.assertRaises(SelectionUnavailable):
                register_student(self.user, _verified(), self.quota.pk)

        self.assertFalse(Registration.objects.exists())
        self.assertFalse(Student.objects.exists())
        self.quota.refresh_from_db()
        self.assertEqual(self.quota.registered_count, 1)

    def test_duplicate_quota_rows_count_against_the_selected_one(self):
        second = SchoolQuota.objects.create(school=self.school, subject=Subject.MATH, total_quota=5)
        register_student(self.user, _verified(), second.pk)

        self.quota.refresh_from_db()
        second.refresh_from_db()
        self.assertEqual(self.quota.registered_count, 0)
        self.assertEqual(second.registered_count, 1)


class RegistrationStatsTests(TestCase):
    def test_counts(self):
        school_a = School.objects.create(name='A', location='Jakarta')
        school_b = School.objects.create(name='B', location='Bogor')
        SchoolQuota.objects.create(school=school_a, subject=Subject.MATH, total_quota=10, registered_count=3)
        SchoolQuota.objects.create(school=school_b, subject=Subject.ENGLISH, total_quota=5, registered_count=5)
        student = Student.objects.create(student_id='S-9', name='Rina')
        Registration.objects.create(student=student, school=school_a, subject=Subject.MATH)

        stats = registration_stats()

        self.assertEqual(stats.total_students, 1)
        self.assertEqual(stats.total_schools, 2)
        self.assertEqual(stats.total_quotas, 15)
        self.assertEqual(stats.available_slots, 6)
