"""
Load academic records from a CSV export.

Expected CSV columns (header row required):
    student_id, name, has_microteaching, microteaching_grade, gpa

Rows are matched on student_id; existing records are updated in place, so the
export can be re-imported after grades change.  Account links and
registrations are never touched.
"""

import csv
import logging
from decimal import Decimal, InvalidOperation

from django.core.management.base import BaseCommand, CommandError
from django.db import transaction

from placements.grading import GRADE_POINTS
from placements.models import Student

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = {'student_id', 'name', 'has_microteaching', 'microteaching_grade', 'gpa'}
TRUE_VALUES = {'1', 'true', 'yes', 'y', 't'}


def parse_row(row, line_no):
    """Validate one CSV row and return the Student field values."""
    student_id = (row.get('student_id') or '').strip()
    if not student_id:
        raise CommandError(f'Line {line_no}: student_id is empty.')
    name = (row.get('name') or '').strip()
    for column, value in (('student_id', student_id), ('name', name)):
        limit = Student._meta.get_field(column).max_length
        if len(value) > limit:
            raise CommandError(f'Line {line_no}: {column} is longer than {limit} characters.')

    grade = (row.get('microteaching_grade') or '').strip().upper()
    if grade and grade not in GRADE_POINTS:
        raise CommandError(f'Line {line_no}: unknown grade {grade!r}.')

    try:
        gpa = Decimal((row.get('gpa') or '0').strip() or '0')
    except InvalidOperation:
        raise CommandError(f'Line {line_no}: GPA {row.get("gpa")!r} is not a number.')
    if not Decimal('0') <= gpa <= Decimal('4'):
        raise CommandError(f'Line {line_no}: GPA must be between 0 and 4.')

    return student_id, {
        'name':                name,
        'has_microteaching':   (row.get('has_microteaching') or '').strip().lower() in TRUE_VALUES,
        'microteaching_grade': grade,
        'gpa':                 gpa,
    }


class Command(BaseCommand):
    help = "Create or update Student academic records from a CSV file."

    def add_arguments(self, parser):
        parser.add_argument('csv_path', help='Path to the CSV file.')
        parser.add_argument(
            '--dry-run',
            action='store_true',
            help='Validate the file and report counts without saving.',
        )

    def handle(self, *args, **options):
        path = options['csv_path']
        try:
            with open(path, newline='', encoding='utf-8-sig') as fh:   # handle Excel BOM
                reader = csv.DictReader(fh)
                missing = REQUIRED_COLUMNS - set(reader.fieldnames or [])
                if missing:
                    raise CommandError(f'CSV is missing required columns: {", ".join(sorted(missing))}')
                records = [parse_row(row, line_no) for line_no, row in enumerate(reader, start=2)]
        except OSError as exc:
            raise CommandError(f'Cannot read {path}: {exc}')
        except UnicodeDecodeError:
            raise CommandError('File must be UTF-8 encoded.')

        if not records:
            self.stdout.write(self.style.WARNING('The CSV file is empty.'))
            return

        created = updated = 0
        with transaction.atomic():
            for student_id, fields in records:
                _, was_created = Student.objects.update_or_create(
                    student_id=student_id, defaults=fields,
                )
                if was_created:
                    created += 1
                else:
                    updated += 1
            if options['dry_run']:
                transaction.set_rollback(True)

        logger.info("import_students %s: %s created, %s updated", path, created, updated)
        prefix = '[dry run] ' if options['dry_run'] else ''
        self.stdout.write(self.style.SUCCESS(
            f'{prefix}{created} student(s) created, {updated} updated.'
        ))
