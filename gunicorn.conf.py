"""
Gunicorn configuration for Weather Alerts production deployment.

Usage:
    gunicorn weather_alerts.main:app -c gunicorn.conf.py
"""

import os

# Bind to all interfaces on PORT (default 3000)
bind = f"0.0.0.0:{os.getenv('PORT', '3000')}"

# The evaluation scheduler runs inside each worker process, so more than one
# worker means more than one scheduler. Keep a single worker unless
# SCHEDULER_ENABLED=false is set for the extra ones.
workers = int(os.getenv("WEB_CONCURRENCY", "1"))

# Use Uvicorn's ASGI worker for FastAPI
worker_class = "uvicorn.workers.UvicornWorker"

# Request timeout (seconds). A manual evaluation waits on one weather fetch per alert
timeout = 60

# Keep-alive connections (seconds)
keepalive = 5

# Logging
accesslog = "-"  # stdout
errorlog = "-"   # stderr
loglevel = "info"
