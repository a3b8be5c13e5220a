"""
core/urls.py
────────────
URL patterns for public / sitewide pages.
Included in the root urls.py with:
    path('', include('core.urls')),
"""

from django.urls import path

from . import views

urlpatterns = [
    path('about/', views.about_view, name='about'),
]
