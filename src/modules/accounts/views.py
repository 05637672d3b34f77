"""Account API views: registration, the current principal and its profile,
and admin user management."""

from __future__ import annotations

from pydantic import ValidationError as PydanticValidationError
from rest_framework import status
from rest_framework.mixins import ListModelMixin
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView
from rest_framework.viewsets import GenericViewSet

from modules.accounts.dtos import (
    ChangePasswordDTO,
    ChangeUsernameDTO,
    CreateUserDTO,
    RegisterUserDTO,
    UpdateUserDTO,
)
from modules.accounts.exceptions import (
    CannotDeleteSelf,
    InvalidCurrentPassword,
    UserAlreadyExists,
    UserInUse,
    UserNotFound,
)
from modules.accounts.models import User
from modules.accounts.principal import Principal
from modules.accounts.repositories.django_repository import UserDjangoRepository
from modules.accounts.serializers import RoleTokenObtainPairSerializer, UserSerializer
from modules.accounts.services import UserService
from modules.core.permissions import IsAdminRole

USER_NOT_FOUND = {"detail": "User not found."}


class MeView(APIView):
    """GET /api/v1/me -- the authenticated principal."""

    permission_classes = [IsAuthenticated]

    def get(self, request: Request) -> Response:
        return Response(UserSerializer(request.user).data)


class RegisterView(APIView):
    """POST /api/v1/auth/register/ -- public sign-up as a representative.

    Responds with the new user and a token pair carrying the role claims.
    """

    permission_classes = [AllowAny]
    authentication_classes: list = []
    throttle_scope = "registration"

    def post(self, request: Request) -> Response:
        try:
            dto = RegisterUserDTO(**_pick(request.data, RegisterUserDTO.model_fields))
        except (PydanticValidationError, ValueError) as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)

        try:
            user = _service().register(dto)
        except UserAlreadyExists as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)

        refresh = RoleTokenObtainPairSerializer.get_token(user)
        return Response(
            {
                "user": UserSerializer(user).data,
                "refresh": str(refresh),
                "access": str(refresh.access_token),
            },
            status=status.HTTP_201_CREATED,
        )


class ChangeUsernameView(APIView):
    """PUT /api/v1/me/username"""

    permission_classes = [IsAuthenticated]

    def put(self, request: Request) -> Response:
        try:
            dto = ChangeUsernameDTO(**_pick(request.data, ChangeUsernameDTO.model_fields))
        except (PydanticValidationError, ValueError) as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)

        try:
            user = _service().change_username(Principal.from_user(request.user), dto)
        except UserAlreadyExists as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)
        return Response(UserSerializer(user).data)


class ChangePasswordView(APIView):
    """PUT /api/v1/me/password"""

    permission_classes = [IsAuthenticated]

    def put(self, request: Request) -> Response:
        try:
            dto = ChangePasswordDTO(**_pick(request.data, ChangePasswordDTO.model_fields))
        except (PydanticValidationError, ValueError) as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)

        try:
            _service().change_password(Principal.from_user(request.user), dto)
        except InvalidCurrentPassword as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)
        return Response({"detail": "Password updated successfully."})


class UserViewSet(ListModelMixin, GenericViewSet):
    """Admin-only user management backed by ``UserService``."""

    permission_classes = [IsAdminRole]
    serializer_class = UserSerializer
    queryset = User.objects.all()
    ordering = ["username"]

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = _service()

    def get_queryset(self):
        return User.objects.order_by("username")

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        try:
            user = self._service.get_user(pk)
        except UserNotFound:
            return Response(USER_NOT_FOUND, status=status.HTTP_404_NOT_FOUND)
        return Response(UserSerializer(user).data)

    def create(self, request: Request) -> Response:
        try:
            dto = CreateUserDTO(**_pick(request.data, CreateUserDTO.model_fields))
        except (PydanticValidationError, ValueError) as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)

        try:
            user = self._service.create_user(dto)
        except UserAlreadyExists as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_409_CONFLICT)
        return Response(UserSerializer(user).data, status=status.HTTP_201_CREATED)

    def partial_update(self, request: Request, pk: str | None = None) -> Response:
        try:
            dto = UpdateUserDTO(**_pick(request.data, UpdateUserDTO.model_fields))
        except (PydanticValidationError, ValueError) as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)

        try:
            user = self._service.update_user(pk, dto)
        except UserNotFound:
            return Response(USER_NOT_FOUND, status=status.HTTP_404_NOT_FOUND)
        return Response(UserSerializer(user).data)

    def destroy(self, request: Request, pk: str | None = None) -> Response:
        try:
            self._service.delete_user(Principal.from_user(request.user), pk)
        except UserNotFound:
            return Response(USER_NOT_FOUND, status=status.HTTP_404_NOT_FOUND)
        except CannotDeleteSelf as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)
        except UserInUse as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_409_CONFLICT)
        return Response(status=status.HTTP_204_NO_CONTENT)


def _pick(data, fields) -> dict:
    return {key: data[key] for key in fields if key in data}


def _service() -> UserService:
    return UserService(repository=UserDjangoRepository())
