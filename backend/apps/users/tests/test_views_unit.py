import types
import unittest
from unittest.mock import Mock, patch

from rest_framework.test import APIRequestFactory, force_authenticate

from apps.api.validation import validate_request_context
from apps.users.dtos import UserDTO
from apps.users.views import ProfileView, UserDetailView, UserListView


def _user(user_id, *, staff=False):
    return types.SimpleNamespace(
        id=user_id, pk=user_id, is_authenticated=True, is_staff=staff, is_superuser=False
    )


def _dto(user_id, **overrides):
    attrs = dict(
        id=user_id,
        username=f"user{user_id}",
        email=f"user{user_id}@example.com",
        first_name="First",
        last_name="Last",
        phone="",
        avatar_url="",
        is_staff=False,
        date_joined=None,
    )
    attrs.update(overrides)
    return UserDTO(**attrs)


class UserViewsUnitTests(unittest.TestCase):
    def setUp(self):
        self.factory = APIRequestFactory()

    def _dispatch(self, view_cls, request, **kwargs):
        # Mirrors RequestValidationMiddleware before calling the view
        blocked = validate_request_context(request, view_cls, kwargs)
        if blocked is not None:
            return blocked
        force_authenticate(request, user=getattr(request, "user", None))
        return view_cls.as_view()(request, **kwargs)

    def test_user_list_for_staff(self):
        service = Mock()
        service.list_users.return_value = [_dto(1), _dto(2)]
        with patch.object(UserListView, "service", service):
            request = self.factory.get("/api/users/")
            request.user = _user(9, staff=True)
            response = self._dispatch(UserListView, request)
        self.assertEqual(response.status_code, 200)
        self.assertEqual([u["id"] for u in response.data], [1, 2])

    def test_user_list_forbidden_for_customers(self):
        service = Mock()
        with patch.object(UserListView, "service", service):
            request = self.factory.get("/api/users/")
            request.user = _user(3)
            response = self._dispatch(UserListView, request)
        self.assertEqual(response.status_code, 403)
        service.list_users.assert_not_called()

    def test_user_detail_maps_service_error(self):
        service = Mock()
        service.get_user_with_access.return_value = (
            None,
            ("NOT_FOUND", "User not found", {"id": "4"}),
        )
        with patch.object(UserDetailView, "service", service):
            request = self.factory.get("/api/users/4/")
            request.user = _user(1, staff=True)
            response = self._dispatch(UserDetailView, request, user_id=4)
        self.assertEqual(response.status_code, 404)
        service.get_user_with_access.assert_called_once_with(
            4, actor_id=1, is_privileged=True
        )

    def test_profile_patch_validates_phone(self):
        service = Mock()
        with patch.object(ProfileView, "service", service):
            request = self.factory.patch("/api/users/me/", {"phone": "call me"}, format="json")
            request.user = _user(5)
            response = self._dispatch(ProfileView, request)
        self.assertEqual(response.status_code, 400)
        service.update_profile.assert_not_called()

    def test_profile_patch_updates(self):
        service = Mock()
        service.update_profile.return_value = _dto(5, first_name="Aysel")
        with patch.object(ProfileView, "service", service):
            request = self.factory.patch(
                "/api/users/me/", {"first_name": "Aysel"}, format="json"
            )
            request.user = _user(5)
            response = self._dispatch(ProfileView, request)
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["first_name"], "Aysel")
        service.update_profile.assert_called_once_with(5, {"first_name": "Aysel"})
