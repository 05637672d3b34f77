from django.apps import AppConfig


class OrdersConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "modules.orders"
    label = "orders"
    verbose_name = "Sales orders"

    def ready(self) -> None:
        from modules.orders import events, handlers
        from shared.infrastructure.bus import event_bus

        subscriptions = (
            (events.OrderCreated, handlers.order_created_handler),
            (events.OrderStatusChanged, handlers.order_status_changed_handler),
            (events.OrderCancelled, handlers.order_cancelled_handler),
        )
        for event_class, handler in subscriptions:
            event_bus.subscribe(event_class, handler)
