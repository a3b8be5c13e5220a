"""
placements/views/
─────────────────
Split into sub-modules for clarity:
  utils.py    – shared helpers (decorators, session selection, form styling)
  student.py  – verification, school selection and registration
  manager.py  – admin dashboard: schools, quotas and statistics
"""
from .manager import (
    add_quota_view,
    add_school_view,
    delete_quota_view,
    delete_school_view,
    edit_quota_view,
    manage_view,
)
from .student import (
    forget_student_view,
    home_view,
    register_view,
    registration_complete_view,
    registration_success_view,
    school_selection_view,
    select_subject_view,
    verify_view,
)

__all__ = [
    # student
    'home_view',
    'verify_view',
    'forget_student_view',
    'school_selection_view',
    'select_subject_view',
    'register_view',
    'registration_success_view',
    'registration_complete_view',
    # manager
    'manage_view',
    'add_school_view',
    'delete_school_view',
    'add_quota_view',
    'edit_quota_view',
    'delete_quota_view',
]
