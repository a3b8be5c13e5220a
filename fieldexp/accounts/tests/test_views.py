from django.contrib.auth import get_user_model
from django.contrib.messages import get_messages
from django.db import IntegrityError, transaction
from django.test import TestCase
from django.urls import reverse

from accounts.models import UserRole

User = get_user_model()


def _messages(resp):
    return [str(m) for m in get_messages(resp.wsgi_request)]


class LoginViewTests(TestCase):
    def setUp(self):
        self.user = User.objects.create_user(username='rina', password='pw-12345-x', first_name='Rina')

    def test_login_redirects_to_school_selection(self):
        resp = self.client.post(reverse('login'), {'username': 'rina', 'password': 'pw-12345-x'})
        self.assertRedirects(resp, reverse('school_selection'), fetch_redirect_response=False)
        self.assertIn('Welcome back, Rina!', _messages(resp))

    def test_login_honours_local_next(self):
        resp = self.client.post(reverse('login'), {
            'username': 'rina', 'password': 'pw-12345-x', 'next': '/about/',
        })
        self.assertRedirects(resp, '/about/', fetch_redirect_response=False)

    def test_login_ignores_foreign_next(self):
        resp = self.client.post(reverse('login'), {
            'username': 'rina', 'password': 'pw-12345-x', 'next': 'https://evil.example/',
        })
        self.assertRedirects(resp, reverse('school_selection'), fetch_redirect_response=False)

    def test_bad_password_stays_on_form(self):
        resp = self.client.post(reverse('login'), {'username': 'rina', 'password': 'nope'})
        self.assertEqual(resp.status_code, 200)
        self.assertFalse(resp.wsgi_request.user.is_authenticated)

    def test_logout_requires_post(self):
        self.client.force_login(self.user)
        self.assertEqual(self.client.get(reverse('logout')).status_code, 405)
        resp = self.client.post(reverse('logout'))
        self.assertRedirects(resp, reverse('home'))


class SignupViewTests(TestCase):
    def test_signup_creates_and_logs_in(self):
        resp = self.client.post(reverse('signup'), {
            'username': 'agus',
            'first_name': 'Agus',
            'password1': 'a-Long-pass-2024',
            'password2': 'a-Long-pass-2024',
        })
        self.assertRedirects(resp, reverse('school_selection'), fetch_redirect_response=False)
        user = User.objects.get(username='agus')
        self.assertEqual(int(self.client.session['_auth_user_id']), user.pk)
        self.assertFalse(user.is_portal_admin)

    def test_mismatched_passwords(self):
        resp = self.client.post(reverse('signup'), {
            'username': 'agus',
            'first_name': 'Agus',
            'password1': 'a-Long-pass-2024',
            'password2': 'different-pass-2024',
        })
        self.assertEqual(resp.status_code, 200)
        self.assertFalse(User.objects.filter(username='agus').exists())


class AdminLoginViewTests(TestCase):
    def setUp(self):
        self.admin = User.objects.create_user(username='coordinator', password='pw-12345-x')
        UserRole.objects.create(user=self.admin, role=UserRole.Role.ADMIN)
        self.student = User.objects.create_user(username='rina', password='pw-12345-x')

    def test_admin_role_reaches_dashboard(self):
        resp = self.client.post(reverse('admin_login'), {'username': 'coordinator', 'password': 'pw-12345-x'})
        self.assertRedirects(resp, reverse('manage'))

    def test_account_without_role_is_refused(self):
        resp = self.client.post(reverse('admin_login'), {'username': 'rina', 'password': 'pw-12345-x'})
        self.assertEqual(resp.status_code, 200)
        self.assertIn('Access Denied\nThis account has no admin role.', _messages(resp))
        self.assertFalse(resp.wsgi_request.user.is_authenticated)

    def test_already_signed_in_admin_skips_form(self):
        self.client.force_login(self.admin)
        resp = self.client.get(reverse('admin_login'))
        self.assertRedirects(resp, reverse('manage'))

    def test_admin_logout(self):
        self.client.force_login(self.admin)
        resp = self.client.post(reverse('admin_logout'))
        self.assertRedirects(resp, reverse('admin_login'))
        self.assertIn('Logged out successfully', _messages(resp))
        self.assertEqual(self.client.get(reverse('manage')).status_code, 302)


class UserRoleModelTests(TestCase):
    def test_role_is_unique_per_user(self):
        user = User.objects.create_user(username='coordinator', password='pw-12345-x')
        UserRole.objects.create(user=user, role=UserRole.Role.ADMIN)
        with self.assertRaises(IntegrityError), transaction.atomic():
            UserRole.objects.create(user=user, role=UserRole.Role.ADMIN)
