"""
Celery app for dispatch workers.

Start a worker with `celery -A dispatch.tasks worker -Q dispatch`.
"""

from celery import Celery

celery_app = Celery("dispatch")
celery_app.config_from_object("celeryconfig")
celery_app.autodiscover_tasks(["dispatch.tasks.processing_tasks"])
