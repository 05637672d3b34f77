"""Account URL configuration."""

from __future__ import annotations

from django.urls import path
from rest_framework.routers import DefaultRouter

from modules.accounts.views import (
    ChangePasswordView,
    ChangeUsernameView,
    MeView,
    RegisterView,
    UserViewSet,
)

router = DefaultRouter(trailing_slash=True)
router.register("users", UserViewSet, basename="user")

urlpatterns = [
    path("auth/register/", RegisterView.as_view(), name="register"),
    path("me", MeView.as_view(), name="me"),
    path("me/username", ChangeUsernameView.as_view(), name="me-username"),
    path("me/password", ChangePasswordView.as_view(), name="me-password"),
    *router.urls,
]
