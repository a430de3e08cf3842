"""
Celery application — owns the broker connection and producer pools.

The intake service does not run Celery tasks; inbound submissions are
consumed by the ingestion loop and outbound messages are published to
plain durable queues.  The app is used for its configured connections.
"""

from celery import Celery

celery_app = Celery("followup")
celery_app.config_from_object("followup.celeryconfig")
