from django.urls import path
from .views import CartView, CartItemListView, CartItemDetailView

urlpatterns = [
    path('', CartView.as_view(), name='api-cart'),
    path('items/', CartItemListView.as_view(), name='api-cart-items'),
    path('items/<int:product_id>/', CartItemDetailView.as_view(), name='api-cart-item-detail'),
]
