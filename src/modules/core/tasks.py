"""Asynchronous tasks for the core module."""

from __future__ import annotations

import structlog
from celery import shared_task
from django.db import transaction

from modules.core.models import OutboxEvent

logger = structlog.get_logger(__name__)

OUTBOX_BATCH_SIZE = 100
OUTBOX_MAX_RETRIES = 5


@shared_task(name="core.debug_task")
def debug_task():
    """Diagnostic task used to check that the worker is running."""
    logger.info("debug_task.executed", status="ok")
    return {"status": "ok", "message": "Celery is working"}


@shared_task(name="core.publish_outbox_events")
def publish_outbox_events(batch_size: int = OUTBOX_BATCH_SIZE) -> dict:
    """Dispatch deliverable outbox rows to the in-process event bus.

    Each row is rebuilt into its ``DomainEvent`` class and published; a
    handler failure marks only that row as failed so it is retried on a
    later run (up to ``OUTBOX_MAX_RETRIES``).  Unknown event types are
    marked failed as well.
    """
    from shared.infrastructure.bus import event_bus

    published = failed = 0
    with transaction.atomic():
        events = list(
            OutboxEvent.objects.select_for_update(skip_locked=True)
            .deliverable(OUTBOX_MAX_RETRIES)[:batch_size]
        )
        for outbox_event in events:
            event_class = event_bus.resolve(outbox_event.event_type)
            if event_class is None:
                outbox_event.mark_as_failed(
                    f"No handler registered for {outbox_event.event_type}"
                )
                failed += 1
                continue
            try:
                event_bus.publish(event_class.from_payload(outbox_event.payload))
            except Exception as exc:  # handler errors must not block the batch
                logger.warning(
                    "outbox.publish_failed",
                    outbox_id=str(outbox_event.id),
                    event_type=outbox_event.event_type,
                    error=str(exc),
                )
                outbox_event.mark_as_failed(str(exc))
                failed += 1
            else:
                outbox_event.mark_as_published()
                published += 1

    logger.info("outbox.batch_processed", published=published, failed=failed)
    return {"published": published, "failed": failed}
