from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from apps.users.models import User


class TestAuth(APITestCase):
    def setUp(self):
        self.register_url = reverse('auth-register')
        self.login_url = reverse('auth-login')
        self.staff_login_url = reverse('auth-staff-login')
        self.me_url = reverse('auth-me')
        self.refresh_url = reverse('auth-refresh')
        self.logout_url = reverse('auth-logout')
        self.user_data = {
            'first_name': 'Test',
            'last_name': 'User',
            'email': 'testuser@example.com',
            'username': 'testuser',
            'password': 'TestPass123!',
            'phone': '+994501234567',
        }

    def _register_and_login(self):
        self.client.post(self.register_url, self.user_data, format='json')
        return self.client.post(
            self.login_url, {'username': 'testuser', 'password': 'TestPass123!'}, format='json'
        )

    def test_register(self):
        response = self.client.post(self.register_url, self.user_data, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        user = User.objects.get(username='testuser')
        self.assertEqual(user.first_name, 'Test')
        self.assertEqual(user.phone, '+994501234567')

    def test_register_duplicate_username(self):
        self.client.post(self.register_url, self.user_data, format='json')
        response = self.client.post(self.register_url, dict(self.user_data, email='x@example.com'), format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error']['message'], 'Username already exists')

    def test_login_and_me(self):
        login = self._register_and_login()
        self.assertEqual(login.status_code, status.HTTP_200_OK)
        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {login.data['access']}")
        response = self.client.get(self.me_url)
        self.assertTrue(response.data['authenticated'])
        self.assertEqual(response.data['user']['username'], 'testuser')

    def test_me_anonymous(self):
        response = self.client.get(self.me_url)
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIsNone(response.data['user'])

    def test_staff_login_rejects_customers(self):
        self.client.post(self.register_url, self.user_data, format='json')
        response = self.client.post(
            self.staff_login_url, {'username': 'testuser', 'password': 'TestPass123!'}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_refresh_token(self):
        login = self._register_and_login()
        response = self.client.post(self.refresh_url, {'refresh': login.data['refresh']}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIn('access', response.data)

    def test_logout_blacklists_refresh(self):
        login = self._register_and_login()
        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {login.data['access']}")
        response = self.client.post(self.logout_url, {'refresh': login.data['refresh']}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        again = self.client.post(self.refresh_url, {'refresh': login.data['refresh']}, format='json')
        self.assertEqual(again.status_code, status.HTTP_401_UNAUTHORIZED)
