"""Customer API views.

Exposes the ``CustomerService`` via HTTP using DRF ViewSets.
Domain exceptions are caught and translated into appropriate
HTTP status codes; the view never swallows generic exceptions.
"""

from __future__ import annotations

from django_filters.rest_framework import DjangoFilterBackend
from pydantic import ValidationError as PydanticValidationError
from rest_framework import status
from rest_framework.filters import OrderingFilter, SearchFilter
from rest_framework.mixins import ListModelMixin
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.viewsets import GenericViewSet

from modules.accounts.principal import Principal
from modules.customers.dtos import CreateCustomerDTO, UpdateCustomerDTO
from modules.customers.exceptions import (
    CustomerAccessDenied,
    CustomerAlreadyExists,
    CustomerNotFound,
)
from modules.customers.filters import CustomerFilter
from modules.customers.models import Customer
from modules.customers.repositories.django_repository import CustomerDjangoRepository
from modules.customers.serializers import CustomerSerializer
from modules.customers.services import CustomerService

CUSTOMER_NOT_FOUND = {"detail": "Customer not found."}

CREATE_FIELDS = ("name", "telephone", "route", "credit_limit")
UPDATE_FIELDS = CREATE_FIELDS + ("current_credits",)


class CustomerViewSet(ListModelMixin, GenericViewSet):
    """ViewSet for Customer CRUD operations.

    Uses ``CustomerService`` with ``CustomerDjangoRepository`` (DIP).
    Representatives are scoped to the customers they added.
    """

    filterset_class = CustomerFilter
    search_fields = ["name", "route", "telephone"]
    ordering_fields = ["name", "created_at", "credit_limit"]
    ordering = ["-created_at", "-id"]
    filter_backends = [DjangoFilterBackend, SearchFilter, OrderingFilter]
    queryset = Customer.objects.all()
    serializer_class = CustomerSerializer

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = CustomerService(repository=CustomerDjangoRepository())

    def _actor(self, request: Request) -> Principal:
        return Principal.from_user(request.user)

    # ------------------------------------------------------------------
    # List / Retrieve
    # ------------------------------------------------------------------

    def get_queryset(self):
        queryset = Customer.objects.alive().select_related("added_by")
        actor = self._actor(self.request)
        if not actor.is_admin:
            queryset = queryset.filter(added_by_id=actor.id)
        return queryset

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/v1/customers/{pk}/"""
        try:
            customer = self._service.get_customer(self._actor(request), pk)
        except CustomerNotFound:
            return Response(CUSTOMER_NOT_FOUND, status=status.HTTP_404_NOT_FOUND)
        except CustomerAccessDenied as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_403_FORBIDDEN)
        return Response(CustomerSerializer(customer).data)

    # ------------------------------------------------------------------
    # Create / Update / Destroy
    # ------------------------------------------------------------------

    def create(self, request: Request) -> Response:
        """POST /api/v1/customers/"""
        data = {key: request.data[key] for key in CREATE_FIELDS if key in request.data}
        try:
            dto = CreateCustomerDTO(**data)
        except (PydanticValidationError, ValueError, TypeError) as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)

        try:
            customer = self._service.create_customer(self._actor(request), dto)
        except CustomerAlreadyExists as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_409_CONFLICT)

        return Response(
            CustomerSerializer(customer).data, status=status.HTTP_201_CREATED
        )

    def update(self, request: Request, pk: str | None = None) -> Response:
        """PUT/PATCH /api/v1/customers/{pk}/"""
        data = {key: request.data[key] for key in UPDATE_FIELDS if key in request.data}
        try:
            dto = UpdateCustomerDTO(**data)
        except (PydanticValidationError, ValueError, TypeError) as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)

        try:
            customer = self._service.update_customer(self._actor(request), pk, dto)
        except CustomerNotFound:
            return Response(CUSTOMER_NOT_FOUND, status=status.HTTP_404_NOT_FOUND)
        except CustomerAccessDenied as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_403_FORBIDDEN)
        except CustomerAlreadyExists as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_409_CONFLICT)

        return Response(CustomerSerializer(customer).data)

    def partial_update(self, request: Request, pk: str | None = None) -> Response:
        """PATCH /api/v1/customers/{pk}/"""
        return self.update(request, pk)

    def destroy(self, request: Request, pk: str | None = None) -> Response:
        """DELETE /api/v1/customers/{pk}/ (admin only)"""
        try:
            self._service.delete_customer(self._actor(request), pk)
        except CustomerAccessDenied as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_403_FORBIDDEN)
        except CustomerNotFound:
            return Response(CUSTOMER_NOT_FOUND, status=status.HTTP_404_NOT_FOUND)
        return Response(status=status.HTTP_204_NO_CONTENT)
