"""
core/views.py
─────────────
Public pages: about page.
Custom error handlers (404 / 500) are registered in the root urls.py.
"""

from django.shortcuts import render


def about_view(req):
    """Programme information and registration requirements."""
    return render(req, 'core/about.html')


# ── Custom error pages ────────────────────────────────────────────────────────

def handler404(req, exception):
    return render(req, 'core/404.html', status=404)


def handler500(req):
    return render(req, 'core/500.html', status=500)
