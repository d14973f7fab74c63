import types
import unittest
from unittest.mock import Mock, patch

from rest_framework.test import APIRequestFactory, force_authenticate

from apps.api.validation import validate_request_context
from apps.comments.dtos import CommentAuthorDTO, CommentDTO
from apps.comments.views import ProductCommentListView


def make_comment_dto(comment_id=1, parent_id=None):
    return CommentDTO(
        id=comment_id,
        product_id=3,
        parent_id=parent_id,
        content="Nice",
        created_at="2024-05-01T12:00:00+00:00",
        author=CommentAuthorDTO(id=4, first_name="Ada", last_name="L", avatar_url=""),
    )


class CommentViewsUnitTests(unittest.TestCase):
    def setUp(self):
        self.factory = APIRequestFactory()

    def dispatch(self, request, view_cls, **kwargs):
        pre_response = validate_request_context(request, view_cls, kwargs)
        if pre_response is not None:
            return pre_response
        return view_cls.as_view()(request, **kwargs)

    def test_list_returns_threads(self):
        root = make_comment_dto(1)
        root.replies = [make_comment_dto(2, parent_id=1)]
        service_mock = Mock()
        service_mock.list_comments.return_value = ([root], None)
        with patch.object(ProductCommentListView, "service", service_mock):
            request = self.factory.get("/api/products/3/comments/")
            response = self.dispatch(request, ProductCommentListView, product_id=3)
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data[0]["replies"][0]["parent_id"], 1)

    def test_post_requires_authentication(self):
        service_mock = Mock()
        with patch.object(ProductCommentListView, "service", service_mock):
            request = self.factory.post(
                "/api/products/3/comments/", {"content": "hi"}, format="json"
            )
            response = self.dispatch(request, ProductCommentListView, product_id=3)
        self.assertEqual(response.status_code, 401)
        service_mock.create_comment.assert_not_called()

    def test_post_uses_authenticated_author(self):
        user = types.SimpleNamespace(id=4, pk=4, is_authenticated=True, is_staff=False)
        service_mock = Mock()
        service_mock.create_comment.return_value = (make_comment_dto(5), None)
        with patch.object(ProductCommentListView, "service", service_mock):
            request = self.factory.post(
                "/api/products/3/comments/", {"content": "hi"}, format="json"
            )
            request.user = user
            force_authenticate(request, user=user)
            response = self.dispatch(request, ProductCommentListView, product_id=3)
        self.assertEqual(response.status_code, 201)
        args, _ = service_mock.create_comment.call_args
        self.assertEqual(args[:2], (3, 4))
