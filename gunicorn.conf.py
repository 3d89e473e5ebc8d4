# gunicorn.conf.py
import multiprocessing
import os

wsgi_app = "safespace.wsgi:application"

# Workers: sync workers, one request each. Chat clients poll, so keep a few.
workers = int(os.getenv("GUNICORN_WORKERS", min(multiprocessing.cpu_count() * 2 + 1, 5)))
worker_class = "sync"
# Must stay above GEMINI_TIMEOUT or AI chat requests get killed mid-call
timeout = int(os.getenv("GUNICORN_TIMEOUT", 60))
graceful_timeout = 30
keepalive = 5
max_requests = 2000
max_requests_jitter = 100

# Logging to stdout/stderr for the platform log collector
accesslog = "-"
errorlog = "-"
loglevel = os.getenv("GUNICORN_LOG_LEVEL", "info")
access_log_format = '%(h)s "%(r)s" %(s)s %(b)s %(L)ss'

proc_name = "safespace"

bind = os.getenv("GUNICORN_BIND", f"0.0.0.0:{os.getenv('PORT', '8000')}")

# Behind the hosting proxy
forwarded_allow_ips = os.getenv("FORWARDED_ALLOW_IPS", "*")
