"""Stock ledger API views.

Reads are open to every authenticated user; writes need the admin role.
Domain exceptions are caught and translated into HTTP responses here.
"""

from __future__ import annotations

from django_filters.rest_framework import DjangoFilterBackend
from pydantic import ValidationError as PydanticValidationError
from rest_framework import status
from rest_framework.decorators import action
from rest_framework.filters import OrderingFilter
from rest_framework.mixins import ListModelMixin
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.viewsets import GenericViewSet

from modules.accounts.principal import Principal
from modules.core.permissions import IsAdminOrReadOnly
from modules.stock.dtos import CreateStockItemDTO, UpdateStockItemDTO
from modules.stock.exceptions import StockItemNotFound, StockQuantityConflict
from modules.stock.filters import StockItemFilter
from modules.stock.models import StockItem
from modules.stock.repositories.django_repository import StockDjangoRepository
from modules.stock.serializers import StockItemSerializer
from modules.stock.services import StockService

STOCK_NOT_FOUND = {"detail": "Stock item not found."}

WRITABLE_FIELDS = (
    "name",
    "category",
    "price",
    "quantity",
    "barcode",
    "description",
    "image_url",
)


class StockItemViewSet(ListModelMixin, GenericViewSet):
    """Stock CRUD plus ledger search.

    All ORM writes go through ``StockService`` / ``StockDjangoRepository``.
    """

    permission_classes = [IsAdminOrReadOnly]
    filterset_class = StockItemFilter
    ordering_fields = ["name", "price", "quantity", "created_at"]
    ordering = ["name"]
    filter_backends = [DjangoFilterBackend, OrderingFilter]
    queryset = StockItem.objects.all()
    serializer_class = StockItemSerializer

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = StockService(repository=StockDjangoRepository())

    def get_queryset(self):
        return StockItem.objects.alive()

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/v1/stock/{pk}/"""
        try:
            item = self._service.get_item(pk)
        except StockItemNotFound:
            return Response(STOCK_NOT_FOUND, status=status.HTTP_404_NOT_FOUND)
        return Response(StockItemSerializer(item).data)

    @action(detail=False, methods=["get"], url_path="search")
    def search(self, request: Request) -> Response:
        """GET /api/v1/stock/search/?q=<text>&mode=text|barcode"""
        query = request.query_params.get("q", "")
        mode = request.query_params.get("mode", "text")
        try:
            items = self._service.search(query, mode)
        except ValueError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)
        return Response(StockItemSerializer(items, many=True).data)

    # ------------------------------------------------------------------
    # Writes (admin)
    # ------------------------------------------------------------------

    def create(self, request: Request) -> Response:
        """POST /api/v1/stock/"""
        data = {key: request.data[key] for key in WRITABLE_FIELDS if key in request.data}
        try:
            dto = CreateStockItemDTO(**data)
        except (PydanticValidationError, ValueError, TypeError) as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)

        item = self._service.create_item(Principal.from_user(request.user), dto)
        return Response(
            StockItemSerializer(item).data, status=status.HTTP_201_CREATED
        )

    def update(self, request: Request, pk: str | None = None) -> Response:
        """PUT/PATCH /api/v1/stock/{pk}/"""
        data = {key: request.data[key] for key in WRITABLE_FIELDS if key in request.data}
        try:
            dto = UpdateStockItemDTO(**data)
        except (PydanticValidationError, ValueError, TypeError) as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)

        try:
            item = self._service.update_item(pk, dto)
        except StockItemNotFound:
            return Response(STOCK_NOT_FOUND, status=status.HTTP_404_NOT_FOUND)
        except StockQuantityConflict as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_409_CONFLICT)
        return Response(StockItemSerializer(item).data)

    def partial_update(self, request: Request, pk: str | None = None) -> Response:
        """PATCH /api/v1/stock/{pk}/"""
        return self.update(request, pk)

    def destroy(self, request: Request, pk: str | None = None) -> Response:
        """DELETE /api/v1/stock/{pk}/"""
        try:
            self._service.delete_item(pk)
        except StockItemNotFound:
            return Response(STOCK_NOT_FOUND, status=status.HTTP_404_NOT_FOUND)
        return Response(status=status.HTTP_204_NO_CONTENT)
