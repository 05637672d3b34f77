"""Stock ledger URL configuration."""

from __future__ import annotations

from rest_framework.routers import DefaultRouter

from modules.stock.views import StockItemViewSet

router = DefaultRouter(trailing_slash=True)
router.register("stock", StockItemViewSet, basename="stock")

urlpatterns = router.urls
