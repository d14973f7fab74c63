from django.urls import path
from .views import (
    RegisterView,
    LoginView,
    StaffLoginView,
    RefreshView,
    MeView,
    LogoutView,
)

urlpatterns = [
    path("register/", RegisterView.as_view(), name="auth-register"),
    path("login/", LoginView.as_view(), name="auth-login"),
    path("login/staff/", StaffLoginView.as_view(), name="auth-staff-login"),
    path("refresh/", RefreshView.as_view(), name="auth-refresh"),
    path("me/", MeView.as_view(), name="auth-me"),
    path("logout/", LogoutView.as_view(), name="auth-logout"),
]
