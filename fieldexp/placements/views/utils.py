"""
placements/views/utils.py
─────────────────────────
Small helpers shared by the student and management view modules.
Nothing here imports from other view modules (no circular imports).
"""

from functools import wraps

from django.http import HttpResponseNotAllowed
from django.shortcuts import redirect

from core.notifications import toast_error

from ..services import VerifiedStudent


# ── Form styling ──────────────────────────────────────────────────────────────

def add_form_control_class(form):
    """Inject a uniform CSS class onto every visible widget."""
    if form is None:
        return form
    for field in form.fields.values():
        field.widget.attrs.setdefault('class', 'form-control-input')
    return form


# ── Access control ────────────────────────────────────────────────────────────

def admin_required(view_fn):
    """
    Decorator for the management dashboard: anonymous visitors and accounts
    without an admin UserRole are sent to the admin login page.
    """
    @wraps(view_fn)
    def wrapper(req, *args, **kwargs):
        if not req.user.is_authenticated:
            return redirect('admin_login')
        if not req.user.is_portal_admin:
            toast_error(req, 'Access Denied')
            return redirect('admin_login')
        return view_fn(req, *args, **kwargs)
    return wrapper


def verified_student_required(view_fn):
    """
    Decorator: the session must hold an eligible VerifiedStudent.
    The student is exposed to the view as `req.verified_student`.
    """
    @wraps(view_fn)
    def wrapper(req, *args, **kwargs):
        verified = VerifiedStudent.from_session(req.session)
        if verified is None:
            toast_error(req, 'Please verify your student ID first')
            return redirect('home')
        if not verified.has_microteaching:
            toast_error(
                req,
                'Grade requirement not met',
                'You need a minimum grade of B in Microteaching to register for Field Experience.',
            )
            return redirect('home')
        req.verified_student = verified
        return view_fn(req, *args, **kwargs)
    return wrapper


def require_POST_or_405(view_fn):
    """Decorator: return 405 for any non-POST request."""
    @wraps(view_fn)
    def wrapper(req, *args, **kwargs):
        if req.method != 'POST':
            return HttpResponseNotAllowed(['POST'])
        return view_fn(req, *args, **kwargs)
    return wrapper


# ── Selection state ───────────────────────────────────────────────────────────

SELECTION_KEY = 'placement_selection'


def get_selection(session):
    """The currently selected quota id, or None."""
    selection = session.get(SELECTION_KEY)
    return selection.get('quota_id') if selection else None


def set_selection(session, school, entry):
    session[SELECTION_KEY] = {
        'quota_id':  entry.quota_id,
        'school_id': school.id,
        'subject':   entry.subject,
    }


def clear_selection(session):
    session.pop(SELECTION_KEY, None)
