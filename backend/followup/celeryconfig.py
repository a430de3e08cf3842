"""
Celery configuration for the follow-up plan intake service.

Loaded by `celery_app.config_from_object("followup.celeryconfig")` in
followup/messaging/__init__.py.  The broker URL comes from Settings.
"""

from followup.core.config import settings

# ═══════════════════════════════════════════════════════════
#  Broker
# ═══════════════════════════════════════════════════════════

broker_url = settings.BROKER_URL
broker_connection_retry_on_startup = True

# Connections kept in the producer pool, per process
broker_pool_limit = 10

# ═══════════════════════════════════════════════════════════
#  Serialization: JSON only
# ═══════════════════════════════════════════════════════════

task_serializer = "json"
result_serializer = "json"
accept_content = ["json"]

# ═══════════════════════════════════════════════════════════
#  Timezone
# ═══════════════════════════════════════════════════════════

timezone = "UTC"
enable_utc = True
