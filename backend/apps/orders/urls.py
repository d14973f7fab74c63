from django.urls import path
from .views import CheckoutView, OrderListView

urlpatterns = [
    path('checkout/', CheckoutView.as_view(), name='api-checkout'),
    path('orders/', OrderListView.as_view(), name='api-orders-list'),
]
