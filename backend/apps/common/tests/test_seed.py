from django.core.management import call_command
from django.test import TestCase

from apps.catalog.models import Product
from apps.comments.models import Comment
from apps.users.models import User


class SeedStorefrontCommandTests(TestCase):
    def test_seed_is_idempotent(self):
        call_command('seed_storefront', verbosity=0)
        call_command('seed_storefront', verbosity=0)
        self.assertEqual(Product.objects.count(), 10)
        self.assertEqual(User.objects.filter(is_staff=True).count(), 2)
        self.assertEqual(Comment.objects.filter(parent__isnull=False).count(), 2)

    def test_seeded_users_can_authenticate(self):
        call_command('seed_storefront', verbosity=0)
        admin = User.objects.get(username='admin')
        self.assertTrue(admin.is_superuser and admin.is_staff)
        self.assertTrue(admin.check_password('Admin123!'))
