"""
core/notifications.py
─────────────────────
Transient notifications ("toasts") built on django.contrib.messages.

A toast has a short title and an optional description.  Both travel in one
message, separated by a newline; base.html renders the first line as the
heading and the rest as the description.
"""

from django.contrib import messages


def toast(req, level, title, description=''):
    text = f'{title}\n{description}' if description else title
    messages.add_message(req, level, text)


def toast_success(req, title, description=''):
    toast(req, messages.SUCCESS, title, description)


def toast_error(req, title, description=''):
    toast(req, messages.ERROR, title, description)


def toast_info(req, title, description=''):
    toast(req, messages.INFO, title, description)
