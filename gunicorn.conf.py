# gunicorn.conf.py
import os

bind = f"0.0.0.0:{os.getenv('PORT', '8080')}"
# promo codes, leads and quiz sessions live in process memory: one worker shares one store
workers = int(os.getenv("WEB_CONCURRENCY", "1"))
threads = int(os.getenv("WEB_THREADS", "4"))
worker_class = "uvicorn.workers.UvicornWorker"
wsgi_app = "hvacquote.main:app"
preload_app = False
timeout = 60
graceful_timeout = 30
keepalive = 5
accesslog = "-"
errorlog = "-"
loglevel = os.getenv("LOG_LEVEL", "info").lower()
