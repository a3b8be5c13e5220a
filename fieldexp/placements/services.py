"""
placements/services.py
──────────────────────
Everything the placement views need from the database, kept out of the views
so the rules can be tested on their own.

Functions
─────────
verify_student(student_id)
    Look up an academic record and decide Microteaching eligibility.

fetch_quotas(subject=None) / group_quotas_by_school(quotas) / filter_schools(...)
    Build the school list shown on the selection page.

quota_status(total, registered) / is_selectable(entry, school, gpa)
    Availability labels and the click gate for a subject entry.

register_student(user, verified, quota_id)
    Write the student's single registration.

registration_stats() / aggregate_quota_totals(rows)
    Numbers for the admin statistics tab.
"""

import logging
from dataclasses import asdict, dataclass, field
from typing import List, NamedTuple, Optional
from urllib.parse import quote

from django.conf import settings
from django.db import IntegrityError, transaction
from django.db.models import F

from .exceptions import (
    AlreadyRegistered,
    NotAuthenticated,
    RegistrationError,
    SelectionUnavailable,
    StudentRecordConflict,
)
from .grading import is_eligible
from .models import Registration, School, SchoolQuota, Student, Subject

logger = logging.getLogger(__name__)

# Share of remaining capacity below which a subject is flagged "Limited".
LIMITED_THRESHOLD = 0.30


# ── Eligibility check ─────────────────────────────────────────────────────────

@dataclass
class VerifiedStudent:
    """
    Result of a successful ID lookup.  `has_microteaching` already combines
    the completion flag with the minimum-grade rule.
    """

    id: str
    name: str
    has_microteaching: bool
    microteaching_grade: str
    gpa: float

    SESSION_KEY = 'verified_student'

    @property
    def initials(self):
        return ''.join(part[0] for part in self.name.split() if part).upper()

    def to_session(self, session):
        session[self.SESSION_KEY] = asdict(self)

    @classmethod
    def from_session(cls, session):
        data = session.get(cls.SESSION_KEY)
        if not data:
            return None
        return cls(**data)

    @classmethod
    def forget(cls, session):
        session.pop(cls.SESSION_KEY, None)


def verify_student(student_id):
    """
    Return a VerifiedStudent for *student_id*, or None when no record matches.
    The result is returned whether or not the student is eligible.
    """
    student = Student.objects.filter(student_id=student_id.strip()).first()
    if student is None:
        logger.info("Verification failed: no student with id %r", student_id)
        return None

    verified = VerifiedStudent(
        id=student.student_id,
        name=student.name,
        has_microteaching=is_eligible(student.has_microteaching, student.microteaching_grade),
        microteaching_grade=student.microteaching_grade or 'N/A',
        gpa=float(student.gpa or 0),
    )
    logger.info(
        "Verified student %s (eligible=%s)", verified.id, verified.has_microteaching,
    )
    return verified


# ── School / quota browser ────────────────────────────────────────────────────

class QuotaStatus(NamedTuple):
    label: str
    tone: str


FULL = QuotaStatus('Full', 'destructive')
LIMITED = QuotaStatus('Limited', 'warning')
AVAILABLE = QuotaStatus('Available', 'success')


def quota_status(total, registered):
    """
    Classify a subject entry: Full when exactly nothing is left, Limited when
    less than 30% of the capacity remains, Available otherwise.  An
    overbooked row (negative remainder) reads as Limited.
    """
    available = total - registered
    if available == 0 or total <= 0:
        return FULL
    if available / total < LIMITED_THRESHOLD:
        return LIMITED
    return AVAILABLE


@dataclass
class SubjectEntry:
    quota_id: int
    subject: str
    total_quota: int
    registered_count: int

    @property
    def available(self):
        return self.total_quota - self.registered_count

    @property
    def status(self):
        return quota_status(self.total_quota, self.registered_count)

    @property
    def label(self):
        return Subject(self.subject).label

    @property
    def percent_available(self):
        if self.total_quota <= 0:
            return 0
        return max(0, round(self.available / self.total_quota * 100))


@dataclass
class GroupedSchool:
    id: int
    name: str
    location: str
    min_gpa: float
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    address: str = ''
    subjects: List[SubjectEntry] = field(default_factory=list)

    @property
    def has_available_subjects(self):
        return any(entry.available > 0 for entry in self.subjects)

    @property
    def has_coordinates(self):
        return self.latitude is not None and self.longitude is not None

    def meets_gpa(self, gpa):
        return gpa >= self.min_gpa

    def entry_for(self, quota_id):
        for entry in self.subjects:
            if entry.quota_id == quota_id:
                return entry
        return None

    @property
    def map_embed_url(self):
        """Embeddable map centred on the school, or '' without coordinates."""
        if not self.has_coordinates:
            return ''
        lat, lon = self.latitude, self.longitude
        api_key = getattr(settings, 'GOOGLE_MAPS_API_KEY', '')
        if api_key:
            return (
                'https://www.google.com/maps/embed/v1/place'
                f'?key={quote(api_key)}&q={lat},{lon}&zoom=15'
            )
        bbox = f'{lon - 0.005},{lat - 0.005},{lon + 0.005},{lat + 0.005}'
        return (
            'https://www.openstreetmap.org/export/embed.html'
            f'?bbox={quote(bbox)}&layer=mapnik&marker={quote(f"{lat},{lon}")}'
        )


def fetch_quotas(subject=None):
    """
    Quota rows with capacity, joined with their school and ordered by school
    name.  *subject* narrows the list to one Subject value.
    """
    quotas = (
        SchoolQuota.objects
        .select_related('school')
        .filter(total_quota__gt=0)
    )
    if subject:
        quotas = quotas.filter(subject=Subject(subject))
    return quotas.order_by('school__name', 'school_id', 'id')


def _coordinate(value):
    return float(value) if value is not None else None


def group_quotas_by_school(quotas):
    """Fold quota rows into one GroupedSchool per school, keeping row order."""
    grouped = {}
    for quota in quotas:
        school = quota.school
        if school.pk not in grouped:
            grouped[school.pk] = GroupedSchool(
                id=school.pk,
                name=school.name,
                location=school.location,
                min_gpa=float(school.min_gpa or 0),
                latitude=_coordinate(school.latitude),
                longitude=_coordinate(school.longitude),
                address=school.address or '',
            )
        grouped[school.pk].subjects.append(SubjectEntry(
            quota_id=quota.pk,
            subject=quota.subject,
            total_quota=quota.total_quota,
            registered_count=quota.registered_count,
        ))
    return list(grouped.values())


def filter_schools(schools, query):
    """Case-insensitive substring match on school name or location."""
    needle = (query or '').strip().lower()
    if not needle:
        return list(schools)
    return [
        school for school in schools
        if needle in school.name.lower() or needle in school.location.lower()
    ]


def is_selectable(entry, school, gpa):
    """A subject entry can be picked while it has room and the GPA gate is met."""
    return entry.available > 0 and school.meets_gpa(gpa)


def find_quota_entry(quota_id):
    """
    Re-read one quota row as (GroupedSchool, SubjectEntry), or (None, None)
    if it no longer exists or has no capacity.
    """
    quotas = fetch_quotas().filter(pk=quota_id)
    schools = group_quotas_by_school(quotas)
    if not schools:
        return None, None
    school = schools[0]
    return school, school.subjects[0]


# ── Registration writer ───────────────────────────────────────────────────────

def _student_for_account(user, verified):
    """
    The Student row behind *user*.  An unlinked record with the verified ID is
    claimed; without one a new row is inserted from the verified data.
    """
    student = Student.objects.filter(user=user).first()
    if student is not None:
        return student

    student = (
        Student.objects
        .select_for_update()
        .filter(student_id=verified.id)
        .first()
    )
    if student is None:
        return Student.objects.create(
            user=user,
            student_id=verified.id,
            name=verified.name,
            has_microteaching=verified.has_microteaching,
        )
    if student.user_id is not None and student.user_id != user.pk:
        raise StudentRecordConflict(
            f'Student ID {verified.id} is already linked to another account.'
        )
    student.user = user
    student.save(update_fields=['user'])
    return student


def register_student(user, verified, quota_id):
    """
    Register the verified student for the school/subject of *quota_id*.

    The student row and the registration are written in one transaction, so a
    rejected registration never leaves a half-created student behind.

    Raises NotAuthenticated, SelectionUnavailable, AlreadyRegistered,
    StudentRecordConflict or RegistrationError; database failures other than
    the uniqueness conflict propagate as DatabaseError.
    """
    if user is None or not user.is_authenticated:
        raise NotAuthenticated('Please log in to register')
    if not verified.has_microteaching:
        raise RegistrationError('Grade requirement not met')

    school, entry = find_quota_entry(quota_id)
    if entry is None or not is_selectable(entry, school, verified.gpa):
        raise SelectionUnavailable('This school and subject can no longer be selected.')

    try:
        with transaction.atomic():
            # Locked until commit so two students cannot take the last slot.
            quota = (
                SchoolQuota.objects
                .select_for_update()
                .filter(pk=entry.quota_id, registered_count__lt=F('total_quota'))
                .first()
            )
            if quota is None:
                raise SelectionUnavailable('This school and subject can no longer be selected.')

            student = _student_for_account(user, verified)
            registration = Registration(
                student=student,
                school_id=school.id,
                subject=entry.subject,
            )
            # signals.claim_quota_slot counts the row against this quota.
            registration.claimed_quota_id = quota.pk
            registration.save(force_insert=True)
    except IntegrityError as exc:
        logger.info("Duplicate registration rejected for student %s: %s", verified.id, exc)
        raise AlreadyRegistered('You have already registered for a school') from exc

    logger.info(
        "Registered student %s at school %s for %s",
        verified.id, school.id, entry.subject,
    )
    return registration


# ── Admin statistics ──────────────────────────────────────────────────────────

@dataclass
class RegistrationStats:
    total_students: int = 0
    total_schools: int = 0
    total_quotas: int = 0
    available_slots: int = 0


def aggregate_quota_totals(rows):
    """
    Sum (total_quota, registered_count) pairs.
    Returns (total_quotas, available_slots).
    """
    total = 0
    registered = 0
    for total_quota, registered_count in rows:
        total += total_quota
        registered += registered_count
    return total, total - registered


def registration_stats():
    total_quotas, available_slots = aggregate_quota_totals(
        SchoolQuota.objects.values_list('total_quota', 'registered_count')
    )
    return RegistrationStats(
        total_students=Registration.objects.count(),
        total_schools=School.objects.count(),
        total_quotas=total_quotas,
        available_slots=available_slots,
    )
