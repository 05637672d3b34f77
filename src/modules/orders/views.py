"""Order API views.

Exposes the ``OrderService`` via HTTP using DRF ViewSets.
Domain exceptions are caught and translated into HTTP status codes;
the view never swallows generic exceptions (``StorageError`` is rendered
as 503 by the project exception handler).
"""

from __future__ import annotations

from pydantic import ValidationError as PydanticValidationError
from rest_framework import status
from rest_framework.decorators import action
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.throttling import BaseThrottle
from rest_framework.viewsets import GenericViewSet

from modules.accounts.principal import Principal
from modules.core.pagination import StandardResultsSetPagination
from modules.orders.dtos import CreateOrderDTO
from modules.orders.exceptions import (
    InsufficientStock,
    InvalidOrderTransition,
    OrderAccessDenied,
    OrderNotFound,
    OrderValidationError,
    StockItemNotFound,
)
from modules.orders.models import Order
from modules.orders.repositories.django_repository import OrderDjangoRepository
from modules.orders.serializers import (
    CreateOrderSerializer,
    OrderListQuerySerializer,
    OrderListSerializer,
    OrderSerializer,
    OrderSummarySerializer,
    SalesOverviewSerializer,
    SummaryQuerySerializer,
    UpdateOrderStatusSerializer,
)
from modules.orders.services import OrderService
from modules.stock.repositories.django_repository import StockDjangoRepository

ORDER_NOT_FOUND = {"detail": "Order not found."}


def insufficient_stock_response(exc: InsufficientStock) -> Response:
    return Response(
        {
            "detail": str(exc),
            "product_name": exc.product_name,
            "available": exc.available,
        },
        status=status.HTTP_409_CONFLICT,
    )


class OrderViewSet(GenericViewSet):
    """ViewSet for Order operations.

    Uses ``OrderService`` with injected repositories (DIP).
    Does **not** extend ``ModelViewSet``; all ORM access goes through
    the service/repository layer.
    """

    queryset = Order.objects.all()
    serializer_class = OrderSerializer

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = OrderService(
            order_repository=OrderDjangoRepository(),
            stock_repository=StockDjangoRepository(),
        )

    def get_throttles(self) -> list[BaseThrottle]:
        """Per-action throttling scopes."""
        throttle_scope: str | None
        if self.action == "create":
            throttle_scope = "order_creation"
        elif self.action in {"list", "retrieve"}:
            throttle_scope = "order_listing"
        else:
            throttle_scope = None
        self.throttle_scope = throttle_scope
        return super().get_throttles()

    def _actor(self, request: Request) -> Principal:
        return Principal.from_user(request.user)

    # ------------------------------------------------------------------
    # Create
    # ------------------------------------------------------------------

    def create(self, request: Request) -> Response:
        """POST /api/v1/orders/"""
        create_serializer = CreateOrderSerializer(data=request.data)
        create_serializer.is_valid(raise_exception=True)

        try:
            dto = CreateOrderDTO(**create_serializer.validated_data)
        except PydanticValidationError as exc:
            return Response(
                {"detail": _first_error(exc)}, status=status.HTTP_400_BAD_REQUEST
            )

        try:
            order = self._service.create_order(self._actor(request), dto)
        except OrderValidationError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)
        except StockItemNotFound as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_404_NOT_FOUND)
        except InsufficientStock as exc:
            return insufficient_stock_response(exc)

        return Response(OrderSerializer(order).data, status=status.HTTP_201_CREATED)

    # ------------------------------------------------------------------
    # List / Retrieve
    # ------------------------------------------------------------------

    def list(self, request: Request) -> Response:
        """GET /api/v1/orders/?date=YYYY-MM-DD&seller=<user id>"""
        query = OrderListQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)

        orders = self._service.list_orders(
            self._actor(request),
            on_date=query.validated_data.get("date"),
            seller_id=query.validated_data.get("seller"),
        )

        paginator = StandardResultsSetPagination()
        page = paginator.paginate_queryset(orders, request, view=self)
        serializer = OrderListSerializer(page, many=True)
        return paginator.get_paginated_response(serializer.data)

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/v1/orders/{pk}/"""
        try:
            order = self._service.get_order(self._actor(request), pk)
        except OrderNotFound:
            return Response(ORDER_NOT_FOUND, status=status.HTTP_404_NOT_FOUND)
        except OrderAccessDenied as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_403_FORBIDDEN)
        return Response(OrderSerializer(order).data)

    # ------------------------------------------------------------------
    # Status transition
    # ------------------------------------------------------------------

    @action(detail=True, methods=["put", "patch"], url_path="status")
    def update_status(self, request: Request, pk: str | None = None) -> Response:
        """PUT/PATCH /api/v1/orders/{pk}/status/"""
        payload = UpdateOrderStatusSerializer(data=request.data)
        payload.is_valid(raise_exception=True)

        try:
            order = self._service.update_status(
                self._actor(request),
                pk,
                payload.validated_data["status"],
                notes=payload.validated_data["notes"],
            )
        except OrderValidationError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)
        except OrderNotFound:
            return Response(ORDER_NOT_FOUND, status=status.HTTP_404_NOT_FOUND)
        except OrderAccessDenied as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_403_FORBIDDEN)
        except InvalidOrderTransition as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_409_CONFLICT)
        except InsufficientStock as exc:
            return insufficient_stock_response(exc)

        return Response(OrderSerializer(order).data)

    # ------------------------------------------------------------------
    # Admin projections
    # ------------------------------------------------------------------

    @action(detail=False, methods=["get"], url_path="summary")
    def summary(self, request: Request) -> Response:
        """GET /api/v1/orders/summary/?date=YYYY-MM-DD"""
        query = SummaryQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        try:
            result = self._service.summarize(
                self._actor(request), on_date=query.validated_data.get("date")
            )
        except OrderAccessDenied as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_403_FORBIDDEN)
        return Response(OrderSummarySerializer(result).data)

    @action(detail=False, methods=["get"], url_path="overview")
    def overview(self, request: Request) -> Response:
        """GET /api/v1/orders/overview/ -- today and last 7 days."""
        try:
            result = self._service.sales_overview(self._actor(request))
        except OrderAccessDenied as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_403_FORBIDDEN)
        return Response(SalesOverviewSerializer(result).data)


def _first_error(exc: PydanticValidationError) -> str:
    error = exc.errors()[0]
    location = ".".join(str(part) for part in error.get("loc", ()))
    return f"{location}: {error['msg']}" if location else error["msg"]
