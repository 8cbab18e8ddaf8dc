import os
import shutil

import prometheus_client.multiprocess

wsgi_app = "wsgi:app"
bind = os.environ.get("BIND", "0.0.0.0:8000")
workers = int(os.environ.get("WEB_CONCURRENCY", "4"))
# Logging is configured by main.py from logging.yaml
accesslog = "-"


def on_starting(server):
    # Metrics are shared between workers through files in this directory
    prometheus_dir = os.environ.get("PROMETHEUS_MULTIPROC_DIR")
    if not prometheus_dir:
        raise RuntimeError("PROMETHEUS_MULTIPROC_DIR must be set to run under gunicorn")

    shutil.rmtree(prometheus_dir, ignore_errors=True)
    os.makedirs(prometheus_dir)


def child_exit(server, worker):
    prometheus_client.multiprocess.mark_process_dead(worker.pid)
