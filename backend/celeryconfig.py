"""
Celery configuration for the dispatch processor workers.

Loaded by `celery_app.config_from_object("celeryconfig")` in dispatch/tasks/__init__.py.
Broker/result-backend URLs come from environment variables,
defaulting to localhost for local dev.
"""

from dispatch.core.config import settings

# ═══════════════════════════════════════════════════════════
#  Broker & Result Backend
# ═══════════════════════════════════════════════════════════

broker_url = settings.CELERY_BROKER_URL
result_backend = settings.CELERY_RESULT_BACKEND

# ═══════════════════════════════════════════════════════════
#  Serialization
# ═══════════════════════════════════════════════════════════

task_serializer = "json"
result_serializer = "json"
accept_content = ["json"]

timezone = "UTC"
enable_utc = True

# ═══════════════════════════════════════════════════════════
#  Task Execution
# ═══════════════════════════════════════════════════════════

task_acks_late = True
task_reject_on_worker_lost = True

# Archives are held in memory; one task per worker process at a time.
worker_prefetch_multiplier = 1

# One chunk stops itself at MAX_PROCESSING_TIME_MS (45s); these only
# catch a hung download or database call.
task_soft_time_limit = 90
task_time_limit = 120

# Large archives are materialised in memory; recycle workers often.
worker_max_tasks_per_child = 20

result_expires = 86400

worker_send_task_events = False
task_send_sent_event = False

# ═══════════════════════════════════════════════════════════
#  Task Routes
# ═══════════════════════════════════════════════════════════
# Run a dedicated worker for the processing queue:
#   celery -A dispatch.tasks worker -Q dispatch

task_routes = {
    "dispatch.tasks.processing_tasks.*": {"queue": "dispatch"},
}

task_default_queue = "default"
