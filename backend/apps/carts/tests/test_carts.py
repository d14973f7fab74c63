from decimal import Decimal

from rest_framework import status
from rest_framework.test import APITestCase
from rest_framework_simplejwt.tokens import RefreshToken

from apps.carts.models import CartSnapshot
from apps.catalog.models import Product
from apps.users.models import User


class TestCartApi(APITestCase):
    def setUp(self):
        self.user = User.objects.create_user(
            username='cartuser', password='TestPass123', email='cart@example.com'
        )
        self.staff = User.objects.create_user(
            username='admin_user', password='TestPass123', email='admin@example.com', is_staff=True
        )
        self.widget = Product.objects.create(name='Widget', price=Decimal('10.00'), category='tools')
        self.gadget = Product.objects.create(name='Gadget', price=Decimal('5.00'), category='tools')

    def _auth(self, user):
        token = RefreshToken.for_user(user).access_token
        self.client.credentials(HTTP_AUTHORIZATION=f'Bearer {token}')

    def test_anonymous_cart_follows_session(self):
        res = self.client.post('/api/cart/items/', {'product_id': self.widget.id, 'quantity': 2}, format='json')
        self.assertEqual(res.status_code, status.HTTP_200_OK)
        res = self.client.get('/api/cart/')
        self.assertEqual(res.data['count'], 2)
        self.assertEqual(res.data['total'], '20.00')
        self.assertTrue(CartSnapshot.objects.filter(storage_key__startswith='cart-storage:session:').exists())

    def test_user_cart_scenario(self):
        self._auth(self.user)
        self.client.post('/api/cart/items/', {'product_id': self.widget.id, 'quantity': 2}, format='json')
        res = self.client.post('/api/cart/items/', {'product_id': self.widget.id, 'quantity': 3}, format='json')
        self.assertEqual(len(res.data['items']), 1)
        self.assertEqual(res.data['total'], '50.00')
        res = self.client.post('/api/cart/items/', {'product_id': self.gadget.id}, format='json')
        self.assertEqual(res.data['total'], '55.00')
        res = self.client.delete(f'/api/cart/items/{self.widget.id}/')
        self.assertEqual(res.data['total'], '5.00')
        res = self.client.delete('/api/cart/')
        self.assertEqual(res.data['items'], [])
        snapshot = CartSnapshot.objects.get(storage_key=f'cart-storage:user:{self.user.id}')
        self.assertEqual(snapshot.payload['items'], [])

    def test_patch_quantity_rejects_zero(self):
        self._auth(self.user)
        self.client.post('/api/cart/items/', {'product_id': self.widget.id}, format='json')
        res = self.client.patch(f'/api/cart/items/{self.widget.id}/', {'quantity': 0}, format='json')
        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)
        res = self.client.patch(f'/api/cart/items/{self.widget.id}/', {'quantity': 4}, format='json')
        self.assertEqual(res.data['total'], '40.00')

    def test_patch_quantity_for_product_not_in_cart(self):
        self._auth(self.user)
        self.client.post('/api/cart/items/', {'product_id': self.widget.id}, format='json')
        res = self.client.patch(f'/api/cart/items/{self.gadget.id}/', {'quantity': 3}, format='json')
        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual([item['product_id'] for item in res.data['items']], [self.widget.id])
        self.assertEqual(res.data['total'], '10.00')

    def test_quantity_is_capped(self):
        self._auth(self.user)
        res = self.client.post(
            '/api/cart/items/', {'product_id': self.widget.id, 'quantity': 10**11}, format='json'
        )
        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(res.data['error']['code'], 'VALIDATION_ERROR')
        self.client.post('/api/cart/items/', {'product_id': self.widget.id, 'quantity': 999}, format='json')
        res = self.client.post('/api/cart/items/', {'product_id': self.widget.id}, format='json')
        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)
        res = self.client.get('/api/cart/')
        self.assertEqual(res.data['count'], 999)

    def test_replace_items(self):
        self._auth(self.user)
        res = self.client.put(
            '/api/cart/',
            {'items': [{'product_id': self.widget.id, 'quantity': 1}, {'product_id': self.gadget.id, 'quantity': 2}]},
            format='json',
        )
        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(res.data['total'], '20.00')
        res = self.client.put('/api/cart/', {'items': [{'product_id': 999, 'quantity': 1}]}, format='json')
        self.assertEqual(res.status_code, status.HTTP_404_NOT_FOUND)

    def test_deleting_product_prunes_carts(self):
        self._auth(self.user)
        self.client.post('/api/cart/items/', {'product_id': self.widget.id}, format='json')
        self.client.post('/api/cart/items/', {'product_id': self.gadget.id}, format='json')
        self._auth(self.staff)
        res = self.client.delete(f'/api/products/{self.widget.id}/')
        self.assertEqual(res.status_code, status.HTTP_204_NO_CONTENT)
        self._auth(self.user)
        res = self.client.get('/api/cart/')
        self.assertEqual([item['product_id'] for item in res.data['items']], [self.gadget.id])
