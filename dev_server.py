import os
import shutil

prometheus_dir = "var/prometheus"
os.environ["PROMETHEUS_MULTIPROC_DIR"] = prometheus_dir
os.environ.setdefault("SETTINGS_FILE", os.path.join(os.path.dirname(os.path.abspath(__file__)), "config", "development.cfg"))

if os.path.exists(prometheus_dir):
    shutil.rmtree(prometheus_dir, True)
os.makedirs(prometheus_dir, exist_ok=True)

from main import create_app, db  # noqa: E402

app = create_app(dev_server=True)
# Prevent DB connections being shared between reloader processes
ppid = os.getpid()


@app.before_request
def fix_shared_state():
    if os.getpid() != ppid:
        db.engine.dispose()


import prometheus_client.multiprocess  # noqa: E402


@app.after_request
def prometheus_cleanup(response):
    # this keeps livesum and liveall accurate
    # other metrics will hang around until restart
    prometheus_client.multiprocess.mark_process_dead(os.getpid())
    return response
