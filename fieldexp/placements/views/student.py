"""
placements/views/student.py
───────────────────────────
Student-facing flow:
  • Step 1 – student ID verification
  • Step 2 – school & subject selection
  • Registration, timed success page, reset to step 1
"""

import logging
from urllib.parse import urlencode

from django.conf import settings
from django.db import DatabaseError
from django.shortcuts import redirect, render
from django.urls import reverse

from core.notifications import toast_error, toast_info, toast_success

from ..exceptions import (
    AlreadyRegistered,
    NotAuthenticated,
    RegistrationError,
    SelectionUnavailable,
)
from ..forms import SchoolFilterForm, StudentIdForm
from ..services import (
    VerifiedStudent,
    fetch_quotas,
    filter_schools,
    find_quota_entry,
    group_quotas_by_school,
    is_selectable,
    register_student,
    verify_student,
)
from .utils import (
    add_form_control_class,
    clear_selection,
    get_selection,
    require_POST_or_405,
    set_selection,
    verified_student_required,
)

logger = logging.getLogger(__name__)

REGISTRATION_DONE_KEY = 'registration_done'


def _selection_url(subject='', q=''):
    params = {k: v for k, v in (('subject', subject), ('q', q)) if v}
    url = reverse('school_selection')
    return f'{url}?{urlencode(params)}' if params else url


# ── Step 1: verification ──────────────────────────────────────────────────────

def home_view(req):
    """Landing page with the student ID form and the programme requirements."""
    form = add_form_control_class(StudentIdForm())
    return render(req, 'placements/home.html', {'form': form, 'step': 1})


@require_POST_or_405
def verify_view(req):
    """
    Look the student up and store the result in the session.  Eligible
    students move on to school selection; everyone else stays on step 1.
    """
    form = StudentIdForm(req.POST)
    if not form.is_valid():
        add_form_control_class(form)
        return render(req, 'placements/home.html', {'form': form, 'step': 1})

    try:
        verified = verify_student(form.cleaned_data['student_id'])
    except DatabaseError as exc:
        logger.exception("Student verification failed")
        toast_error(req, 'Verification failed', str(exc) or 'Please try again later')
        return redirect('home')

    if verified is None:
        toast_error(req, 'Student not found', 'Please check your student ID and try again.')
        return redirect('home')

    verified.to_session(req.session)
    clear_selection(req.session)

    if not verified.has_microteaching:
        toast_error(
            req,
            'Grade requirement not met',
            'You need a minimum grade of B in Microteaching to register for Field Experience.',
        )
        return redirect('home')

    return redirect('school_selection')


@require_POST_or_405
def forget_student_view(req):
    """Profile menu "Log out": drop the verified student and start over."""
    VerifiedStudent.forget(req.session)
    clear_selection(req.session)
    toast_info(req, 'You have been logged out.')
    return redirect('home')


# ── Step 2: school selection ──────────────────────────────────────────────────

@verified_student_required
def school_selection_view(req):
    """
    Schools with their subject quotas.  The subject filter is applied in the
    query; the search box filters the fetched list on name or location.
    """
    verified = req.verified_student
    filter_form = SchoolFilterForm(req.GET or None)
    subject = ''
    query = ''
    if filter_form.is_valid():
        subject = filter_form.cleaned_data['subject']
        query = filter_form.cleaned_data['q']
    add_form_control_class(filter_form)

    try:
        schools = group_quotas_by_school(fetch_quotas(subject or None))
    except DatabaseError:
        logger.exception("Loading school quotas failed")
        toast_error(req, 'Failed to load schools')
        schools = []

    selected_quota_id = get_selection(req.session)
    selected_school, selected_entry = (None, None)
    if selected_quota_id is not None:
        selected_school, selected_entry = find_quota_entry(selected_quota_id)
        if selected_entry is None:
            clear_selection(req.session)

    school_rows = []
    for school in filter_schools(schools, query):
        meets_gpa = school.meets_gpa(verified.gpa)
        is_selected = selected_school is not None and selected_school.id == school.id
        school_rows.append({
            'school':      school,
            'meets_gpa':   meets_gpa,
            'is_selected': is_selected,
            'dimmed':      not school.has_available_subjects or not meets_gpa,
            'entries': [
                {
                    'entry':       entry,
                    'selectable':  is_selectable(entry, school, verified.gpa),
                    'is_selected': is_selected and entry.quota_id == selected_quota_id,
                }
                for entry in school.subjects
            ],
        })

    return render(req, 'placements/school_selection.html', {
        'step':            2,
        'student':         verified,
        'filter_form':     filter_form,
        'subject':         subject,
        'query':           query,
        'school_rows':     school_rows,
        'selected_school': selected_school,
        'selected_entry':  selected_entry,
    })


@verified_student_required
@require_POST_or_405
def select_subject_view(req):
    """
    Pick a (school, subject) pair.  Full subjects and schools whose GPA gate
    the student misses are ignored and the previous selection stays.
    """
    subject = req.POST.get('subject_filter', '')
    query = req.POST.get('q', '')
    try:
        quota_id = int(req.POST.get('quota_id') or 0)
    except ValueError:
        quota_id = 0

    if quota_id:
        school, entry = find_quota_entry(quota_id)
        if entry is not None and is_selectable(entry, school, req.verified_student.gpa):
            set_selection(req.session, school, entry)

    return redirect(_selection_url(subject, query))


# ── Registration ──────────────────────────────────────────────────────────────

@verified_student_required
@require_POST_or_405
def register_view(req):
    """Write the registration for the selected school and subject."""
    quota_id = get_selection(req.session)
    if quota_id is None:
        toast_error(req, 'Please select a school and subject')
        return redirect('school_selection')

    try:
        registration = register_student(req.user, req.verified_student, quota_id)
    except NotAuthenticated as exc:
        toast_error(req, str(exc))
        return redirect(f"{reverse('login')}?{urlencode({'next': reverse('school_selection')})}")
    except AlreadyRegistered as exc:
        toast_error(req, str(exc))
        return redirect('school_selection')
    except SelectionUnavailable as exc:
        clear_selection(req.session)
        toast_error(req, 'Registration failed', str(exc))
        return redirect('school_selection')
    except RegistrationError as exc:
        toast_error(req, 'Registration failed', str(exc) or 'Please try again later')
        return redirect('school_selection')
    except DatabaseError as exc:
        logger.exception("Registration insert failed")
        toast_error(req, 'Registration failed', str(exc) or 'Please try again later')
        return redirect('school_selection')

    req.session[REGISTRATION_DONE_KEY] = registration.pk
    return redirect('registration_success')


def registration_success_view(req):
    """
    Confirmation shown for REGISTRATION_SUCCESS_SECONDS before the page
    moves on to registration_complete.
    """
    if REGISTRATION_DONE_KEY not in req.session:
        return redirect('home')
    return render(req, 'placements/registration_success.html', {
        'delay_seconds': settings.REGISTRATION_SUCCESS_SECONDS,
    })


def registration_complete_view(req):
    """Reset the flow to student verification after a registration."""
    if req.session.pop(REGISTRATION_DONE_KEY, None) is not None:
        VerifiedStudent.forget(req.session)
        clear_selection(req.session)
        toast_success(
            req,
            'Registration Successful!',
            'You have been registered for Field Experience Practice.',
        )
    return redirect('home')
