from django.urls import path
from .views import UserListView, UserDetailView, ProfileView

urlpatterns = [
    path("", UserListView.as_view(), name="api-users-list"),
    path("me/", ProfileView.as_view(), name="api-users-me"),
    path("<int:user_id>/", UserDetailView.as_view(), name="api-users-detail"),
]
