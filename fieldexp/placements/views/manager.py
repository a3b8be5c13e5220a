"""
placements/views/manager.py
───────────────────────────
Admin-only views, all behind @admin_required:
  • Dashboard with Schools / Quotas / Statistics tabs
  • Add / delete School
  • Add / edit capacity / delete SchoolQuota
"""

import logging

from django.db import DatabaseError
from django.shortcuts import redirect, render
from django.urls import reverse

from core.notifications import toast_error, toast_success

from ..forms import QuotaEditForm, QuotaForm, SchoolForm
from ..models import School, SchoolQuota
from ..services import registration_stats
from .utils import add_form_control_class, admin_required, require_POST_or_405

logger = logging.getLogger(__name__)

TABS = ('schools', 'quotas', 'stats')


def _tab_url(tab):
    return f"{reverse('manage')}?tab={tab}"


def _form_errors(form):
    """Flatten form errors into one line for the notification description."""
    parts = []
    for field, errors in form.errors.items():
        label = form.fields[field].label if field in form.fields else ''
        for error in errors:
            parts.append(f'{label}: {error}' if label else error)
    return ' '.join(parts)


def _render_dashboard(req, tab, school_form=None, quota_form=None):
    schools = School.objects.order_by('name')
    quotas = SchoolQuota.objects.select_related('school').order_by('school__name', 'subject')

    return render(req, 'placements/manage.html', {
        'tab':         tab,
        'tabs':        TABS,
        'schools':     schools,
        'quotas':      quotas,
        'stats':       registration_stats(),
        'school_form': add_form_control_class(school_form or SchoolForm()),
        'quota_form':  add_form_control_class(quota_form or QuotaForm()),
    })


# ── Dashboard ─────────────────────────────────────────────────────────────────

@admin_required
def manage_view(req):
    """Admin dashboard; `?tab=` picks the visible panel."""
    tab = req.GET.get('tab', 'schools')
    if tab not in TABS:
        tab = 'schools'
    return _render_dashboard(req, tab)


# ── Schools ───────────────────────────────────────────────────────────────────

@admin_required
@require_POST_or_405
def add_school_view(req):
    form = SchoolForm(req.POST)
    if not form.is_valid():
        toast_error(req, 'Failed to add school', _form_errors(form))
        return _render_dashboard(req, 'schools', school_form=form)

    school = form.save()
    logger.info("School %s (%s) added by %s", school.pk, school.name, req.user)
    toast_success(req, 'School added successfully')
    return redirect(_tab_url('schools'))


@admin_required
@require_POST_or_405
def delete_school_view(req, school_id):
    """Delete a school; its quotas go with it through the cascading FK."""
    try:
        school = School.objects.get(pk=school_id)
        name = school.name
        school.delete()
    except School.DoesNotExist:
        toast_error(req, 'School not found')
        return redirect(_tab_url('schools'))
    except DatabaseError as exc:
        logger.exception("Deleting school %s failed", school_id)
        toast_error(req, 'Failed to delete school', str(exc))
        return redirect(_tab_url('schools'))

    logger.info("School %s (%s) deleted by %s", school_id, name, req.user)
    toast_success(req, 'School deleted successfully')
    return redirect(_tab_url('schools'))


# ── Quotas ────────────────────────────────────────────────────────────────────

@admin_required
@require_POST_or_405
def add_quota_view(req):
    form = QuotaForm(req.POST)
    if not form.is_valid():
        if 'subject' in form.errors:
            toast_error(req, 'Please select a subject')
        else:
            toast_error(req, 'Failed to add quota', _form_errors(form))
        return _render_dashboard(req, 'quotas', quota_form=form)

    quota = form.save()
    logger.info(
        "Quota %s opened: %s / %s x%s", quota.pk, quota.school.name, quota.subject, quota.total_quota,
    )
    toast_success(req, 'Quota added successfully')
    return redirect(_tab_url('quotas'))


@admin_required
def edit_quota_view(req, quota_id):
    """Change the capacity of an existing quota; school and subject stay fixed."""
    try:
        quota = SchoolQuota.objects.select_related('school').get(pk=quota_id)
    except SchoolQuota.DoesNotExist:
        toast_error(req, 'Quota not found')
        return redirect(_tab_url('quotas'))

    if req.method == 'POST':
        form = QuotaEditForm(req.POST, instance=quota)
        if form.is_valid():
            form.save()
            toast_success(req, 'Quota updated successfully')
            return redirect(_tab_url('quotas'))
        else:
            toast_error(req, 'Failed to update quota', _form_errors(form))
    else:
        form = QuotaEditForm(instance=quota)

    add_form_control_class(form)
    return render(req, 'placements/edit_quota.html', {
        'form':  form,
        'quota': quota,
    })


@admin_required
@require_POST_or_405
def delete_quota_view(req, quota_id):
    try:
        SchoolQuota.objects.get(pk=quota_id).delete()
    except SchoolQuota.DoesNotExist:
        toast_error(req, 'Quota not found')
        return redirect(_tab_url('quotas'))
    except DatabaseError as exc:
        logger.exception("Deleting quota %s failed", quota_id)
        toast_error(req, 'Failed to delete quota', str(exc))
        return redirect(_tab_url('quotas'))

    toast_success(req, 'Quota deleted successfully')
    return redirect(_tab_url('quotas'))
