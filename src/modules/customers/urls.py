"""Customer (shop directory) URL configuration."""

from rest_framework.routers import DefaultRouter

from modules.customers.views import CustomerViewSet

router = DefaultRouter(trailing_slash=True)
router.register(r"customers", CustomerViewSet, basename="customer")

urlpatterns = list(router.urls)
