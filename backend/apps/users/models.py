from django.db import models
from django.contrib.auth.models import AbstractUser


class User(AbstractUser):
    # id, username, password, first_name, last_name, is_staff, is_superuser... are inherited
    email = models.EmailField(unique=True)
    phone = models.CharField(max_length=50, blank=True, default="")
    avatar_url = models.URLField(max_length=500, blank=True, default="")

    def __str__(self):
        return self.username

    @property
    def is_privileged(self) -> bool:
        return bool(self.is_staff or self.is_superuser)
