"""
Celery app for the farm backend.

The only background job is the new-order notification email
(sales_revenue.tasks.send_order_notification). Broker and result backend come
from CELERY_* settings; tests and single-process setups can set
CELERY_TASK_ALWAYS_EAGER=True.

Run a worker with: celery -A core worker -l info
"""
import os

from celery import Celery

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'core.settings')

app = Celery('countryfarm')
app.config_from_object('django.conf:settings', namespace='CELERY')
app.autodiscover_tasks()

app.conf.update(
    # Notification payloads are just an order id
    task_serializer='json',
    result_serializer='json',
    accept_content=['json'],
    # Redeliver if a worker dies mid-send
    task_acks_late=True,
    result_expires=24 * 3600,
)
