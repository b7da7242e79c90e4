"""
Gunicorn configuration.
"""
import os

bind = f"0.0.0.0:{os.getenv('PORT', '4000')}"

# Batch runs and discount creation block a worker for minutes
workers = int(os.getenv('GUNICORN_WORKERS', '2'))
worker_class = 'sync'
timeout = int(os.getenv('GUNICORN_TIMEOUT', '600'))
keepalive = 5

# Logging
accesslog = '-'  # stdout
errorlog = '-'   # stderr
loglevel = os.getenv('LOG_LEVEL', 'info')
capture_output = True

proc_name = 'dynamic-pricing-ai'

preload_app = True

graceful_timeout = 30


def on_starting(server):
    server.log.info("Starting Dynamic Pricing AI backend...")


def on_exit(server):
    server.log.info("Dynamic Pricing AI backend shutting down...")
