"""Gunicorn configuration for production deployment."""

import os

# Server socket
bind = os.environ.get('GUNICORN_BIND', '0.0.0.0:8000')

# SQLite serializes writers; reservation writes wait up to DATABASE_TIMEOUT
# for the write lock, so keep the worker count low and use threads.
workers = int(os.environ.get('GUNICORN_WORKERS', 2))
threads = int(os.environ.get('GUNICORN_THREADS', 4))
worker_class = 'gthread'

# Must stay above DATABASE_TIMEOUT
timeout = 30
graceful_timeout = 30
keepalive = 5

# Logging ('-' writes to stdout/stderr)
accesslog = os.environ.get('GUNICORN_ACCESS_LOG', 'logs/gunicorn-access.log')
errorlog = os.environ.get('GUNICORN_ERROR_LOG', 'logs/gunicorn-error.log')
loglevel = os.environ.get('GUNICORN_LOG_LEVEL', 'info')

proc_name = 'rentdesk'

preload_app = True

max_requests = 1000
max_requests_jitter = 50
