"""Order URL configuration.

Besides the CRUD-style routes the viewset exposes ``orders/summary/``,
``orders/overview/`` and ``orders/{id}/status/``.
"""

from __future__ import annotations

from rest_framework.routers import DefaultRouter

from modules.orders.views import OrderViewSet

router = DefaultRouter(trailing_slash=True)
router.register(r"orders", OrderViewSet, basename="order")

urlpatterns = router.urls
