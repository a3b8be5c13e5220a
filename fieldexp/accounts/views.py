"""
accounts/views.py
─────────────────
Authentication views: student login / logout / sign-up, and the separate
admin login / logout used by the management dashboard.

All templates are resolved from accounts/templates/accounts/.
"""

from django.contrib import messages
from django.contrib.auth import authenticate, login, logout
from django.http import HttpResponseNotAllowed
from django.shortcuts import redirect, render
from django.utils.http import url_has_allowed_host_and_scheme

from core.notifications import toast_error

from .forms import SignupForm


# ── Helpers ───────────────────────────────────────────────────────────────────

def _add_form_control_class(form):
    """Inject a uniform CSS class onto every visible widget."""
    for field in form.fields.values():
        field.widget.attrs.setdefault('class', 'form-control-input')
    return form


def _safe_next(req, default):
    next_url = req.POST.get('next') or req.GET.get('next')
    if next_url and url_has_allowed_host_and_scheme(next_url, allowed_hosts={req.get_host()}):
        return next_url
    return default


# ── Login / Logout ────────────────────────────────────────────────────────────

def login_view(req):
    """Show the login form (GET) or authenticate and redirect (POST)."""
    if req.user.is_authenticated:
        return redirect(_safe_next(req, 'school_selection'))

    if req.method == 'POST':
        username = req.POST.get('username', '').strip()
        password = req.POST.get('password', '')
        user = authenticate(req, username=username, password=password)
        if user is not None:
            login(req, user)
            messages.success(req, f'Welcome back, {user.get_full_name() or user.username}!')
            return redirect(_safe_next(req, 'school_selection'))
        else:
            messages.error(req, 'Invalid username or password. Please try again.')

    return render(req, 'accounts/login.html', {'next': req.GET.get('next', '')})


def logout_view(req):
    """Log the current user out (POST only for CSRF safety)."""
    if req.method != 'POST':
        return HttpResponseNotAllowed(['POST'])
    logout(req)
    messages.info(req, 'You have been logged out.')
    return redirect('home')


def signup_view(req):
    """Create a student account and sign it in straight away."""
    if req.user.is_authenticated:
        return redirect('school_selection')

    if req.method == 'POST':
        form = SignupForm(req.POST)
        if form.is_valid():
            user = form.save()
            login(req, user, backend='django.contrib.auth.backends.ModelBackend')
            messages.success(req, 'Account created. You can now complete your registration.')
            return redirect(_safe_next(req, 'school_selection'))
        else:
            messages.error(req, 'Please fix the errors below.')
    else:
        form = SignupForm()

    _add_form_control_class(form)
    return render(req, 'accounts/signup.html', {'form': form, 'next': req.GET.get('next', '')})


# ── Admin login / logout ──────────────────────────────────────────────────────

def admin_login_view(req):
    """
    Sign-in screen for the management dashboard.

    Credentials alone are not enough: the account also needs an admin
    UserRole row, otherwise the session is closed again straight away.
    """
    if req.user.is_authenticated and req.user.is_portal_admin:
        return redirect('manage')

    if req.method == 'POST':
        username = req.POST.get('username', '').strip()
        password = req.POST.get('password', '')
        user = authenticate(req, username=username, password=password)
        if user is None:
            messages.error(req, 'Invalid username or password. Please try again.')
        elif not user.is_portal_admin:
            toast_error(req, 'Access Denied', 'This account has no admin role.')
        else:
            login(req, user)
            messages.success(req, 'Signed in to the admin dashboard.')
            return redirect('manage')

    return render(req, 'accounts/admin_login.html')


def admin_logout_view(req):
    """Sign out of the dashboard (POST only)."""
    if req.method != 'POST':
        return HttpResponseNotAllowed(['POST'])
    logout(req)
    messages.success(req, 'Logged out successfully')
    return redirect('admin_login')
