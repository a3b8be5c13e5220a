"""
placements/urls.py
──────────────────
URL patterns for the registration flow and the admin dashboard.
Included in the root urls.py with:
    path('', include('placements.urls')),
"""

from django.urls import path

from . import views

urlpatterns = [
    # Student flow
    path('',                    views.home_view,                  name='home'),
    path('verify/',             views.verify_view,                name='verify_student'),
    path('forget/',             views.forget_student_view,        name='forget_student'),
    path('schools/',            views.school_selection_view,      name='school_selection'),
    path('schools/select/',     views.select_subject_view,        name='select_subject'),
    path('register/',           views.register_view,              name='register'),
    path('register/success/',   views.registration_success_view,  name='registration_success'),
    path('register/complete/',  views.registration_complete_view, name='registration_complete'),

    # Admin dashboard
    path('manage/',                              views.manage_view,        name='manage'),
    path('manage/schools/add/',                  views.add_school_view,    name='add_school'),
    path('manage/schools/<int:school_id>/delete/', views.delete_school_view, name='delete_school'),
    path('manage/quotas/add/',                   views.add_quota_view,     name='add_quota'),
    path('manage/quotas/<int:quota_id>/edit/',   views.edit_quota_view,    name='edit_quota'),
    path('manage/quotas/<int:quota_id>/delete/', views.delete_quota_view,  name='delete_quota'),
]
