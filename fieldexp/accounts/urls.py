"""
accounts/urls.py
────────────────
URL patterns for authentication.
Included in the root urls.py with:
    path('', include('accounts.urls')),
"""

from django.urls import path

from . import views

urlpatterns = [
    path('login/',  views.login_view,  name='login'),
    path('logout/', views.logout_view, name='logout'),
    path('signup/', views.signup_view, name='signup'),

    path('manage/login/',  views.admin_login_view,  name='admin_login'),
    path('manage/logout/', views.admin_logout_view, name='admin_logout'),
]
