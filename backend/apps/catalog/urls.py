from django.urls import path

from apps.comments.views import ProductCommentListView
from .views import ProductListView, ProductDetailView

urlpatterns = [
    path('', ProductListView.as_view(), name='api-products-list'),
    path('<int:product_id>/', ProductDetailView.as_view(), name='api-products-detail'),
    path(
        '<int:product_id>/comments/',
        ProductCommentListView.as_view(),
        name='api-products-comments',
    ),
]
