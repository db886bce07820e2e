"""Gunicorn config for serving the dispensing query API."""
import os

bind = f"0.0.0.0:{os.environ.get('PORT', '8000')}"

# Uvicorn async workers — each loads and cleans its own copy of the month
worker_class = "uvicorn.workers.UvicornWorker"
workers = int(os.environ.get("WEB_CONCURRENCY", "2"))

# Loading a full month (~180k rows) happens in the lifespan hook before the first request
timeout = 120
graceful_timeout = 30
keepalive = 65

# Logging
accesslog = "-"
errorlog = "-"
loglevel = "info"

wsgi_app = "nhs_dispensing.main:app"
