"""
core/context_processors.py
──────────────────────────
Global template context injected into every request.

Registered in settings.py → TEMPLATES[0]['OPTIONS']['context_processors'].
"""


def verified_student(request):
    """
    Exposes the student verified in this session (if any) so the header can
    show the profile menu:

        verified_student – placements.services.VerifiedStudent or None
    """
    # Import here to avoid circular imports during app startup
    from placements.services import VerifiedStudent

    session = getattr(request, 'session', None)
    student = VerifiedStudent.from_session(session) if session is not None else None
    return {'verified_student': student}
