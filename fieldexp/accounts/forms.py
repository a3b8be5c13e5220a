"""
accounts/forms.py
─────────────────
Forms for account self-service.
"""

from django import forms
from django.contrib.auth.forms import UserCreationForm

from .models import User


class SignupForm(UserCreationForm):
    """
    Student account sign-up.

    The account is only an authenticated session; the academic record is
    linked to it when the student registers for a school.
    """

    first_name = forms.CharField(max_length=150, label='First name')
    last_name = forms.CharField(max_length=150, required=False, label='Last name (optional)')
    email = forms.EmailField(required=False, label='Email (optional)')

    class Meta(UserCreationForm.Meta):
        model = User
        fields = ('username', 'first_name', 'last_name', 'email')
