import os

from celery import Celery
from celery.schedules import crontab  # type: ignore

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings.dev")

app = Celery("befest")

app.config_from_object("django.conf:settings", namespace="CELERY")
app.autodiscover_tasks()


# ============================================================================
# CELERY BEAT SCHEDULE (Periodic Tasks)
# ============================================================================

app.conf.beat_schedule = {
    # Recalcula valores estimados dos orçamentos - diariamente às 03:00
    "reconcile-event-service-prices": {
        "task": "events.reconcile_event_service_prices",
        "schedule": crontab(minute=0, hour=3),
    },
    # Conclui festas confirmadas cuja data já passou - a cada hora
    "complete-past-events": {
        "task": "events.complete_past_events",
        "schedule": crontab(minute=10),
    },
}

app.conf.timezone = "America/Sao_Paulo"
