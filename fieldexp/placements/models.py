"""
placements/models.py
────────────────────
The field-experience placement data.

Subject      – closed set of teaching subjects a quota can be opened for.
Student      – academic record used for the eligibility check.
School       – partner school, optionally with coordinates and a GPA gate.
SchoolQuota  – capacity of one school for one subject.
Registration – a student's single placement (school + subject).
"""

from decimal import Decimal

from django.conf import settings
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models


class Subject(models.TextChoices):
    CHEMISTRY  = 'chemistry',  'Chemistry'
    MATH       = 'math',       'Mathematics'
    PHYSICS    = 'physics',    'Physics'
    BIOLOGY    = 'biology',    'Biology'
    ENGLISH    = 'english',    'English'
    INDONESIAN = 'indonesian', 'Indonesian'


GPA_VALIDATORS = [MinValueValidator(Decimal('0')), MaxValueValidator(Decimal('4'))]


class Student(models.Model):
    """
    A student's academic record.

    Records are loaded by the registrar (see the import_students command) and
    looked up by `student_id` during verification.  `user` is filled in when
    the student registers from a signed-in account.
    """

    student_id = models.CharField(
        max_length=50,
        unique=True,
        verbose_name='Student ID',
    )
    name = models.CharField(max_length=200)
    has_microteaching = models.BooleanField(
        default=False,
        verbose_name='Completed Microteaching',
    )
    microteaching_grade = models.CharField(
        max_length=2,
        blank=True,
        help_text='Letter grade, e.g. "A-" or "B+".',
    )
    gpa = models.DecimalField(
        max_digits=3,
        decimal_places=2,
        default=Decimal('0'),
        validators=GPA_VALIDATORS,
        verbose_name='GPA',
    )
    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='student',
        help_text='Account that registered with this record.',
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['name']
        verbose_name = 'Student'
        verbose_name_plural = 'Students'

    def __str__(self):
        return f"{self.name} ({self.student_id})"


class School(models.Model):
    """A partner school accepting field-experience students."""

    name = models.CharField(max_length=200)
    location = models.CharField(
        max_length=200,
        help_text='City or district, shown in the school list and searched.',
    )
    address = models.TextField(blank=True)
    latitude = models.DecimalField(
        max_digits=9,
        decimal_places=6,
        null=True,
        blank=True,
        validators=[MinValueValidator(Decimal('-90')), MaxValueValidator(Decimal('90'))],
    )
    longitude = models.DecimalField(
        max_digits=9,
        decimal_places=6,
        null=True,
        blank=True,
        validators=[MinValueValidator(Decimal('-180')), MaxValueValidator(Decimal('180'))],
    )
    min_gpa = models.DecimalField(
        max_digits=3,
        decimal_places=2,
        default=Decimal('0'),
        validators=GPA_VALIDATORS,
        verbose_name='Minimum GPA',
        help_text='0 means no requirement.',
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['name']
        verbose_name = 'School'
        verbose_name_plural = 'Schools'

    def __str__(self):
        return f"{self.name} – {self.location}"

    @property
    def has_coordinates(self):
        return self.latitude is not None and self.longitude is not None


class SchoolQuota(models.Model):
    """
    How many students one school takes for one subject.

    Several rows for the same (school, subject) are not prevented.
    """

    school = models.ForeignKey(
        School,
        on_delete=models.CASCADE,
        related_name='quotas',
    )
    subject = models.CharField(max_length=20, choices=Subject.choices)
    total_quota = models.PositiveIntegerField(default=0)
    registered_count = models.PositiveIntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['school__name', 'subject']
        verbose_name = 'School Quota'
        verbose_name_plural = 'School Quotas'

    def __str__(self):
        return f"{self.school.name} – {self.get_subject_display()} ({self.registered_count}/{self.total_quota})"

    @property
    def available(self):
        return self.total_quota - self.registered_count


class Registration(models.Model):
    """
    A student's placement.  The one-to-one link on `student` is the
    database-level "one registration per student" rule.
    """

    student = models.OneToOneField(
        Student,
        on_delete=models.CASCADE,
        related_name='registration',
    )
    school = models.ForeignKey(
        School,
        on_delete=models.CASCADE,
        related_name='registrations',
    )
    subject = models.CharField(max_length=20, choices=Subject.choices)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-created_at']
        verbose_name = 'Registration'
        verbose_name_plural = 'Registrations'

    def __str__(self):
        return f"{self.student} → {self.school.name} ({self.get_subject_display()})"
