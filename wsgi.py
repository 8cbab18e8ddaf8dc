from werkzeug.middleware.proxy_fix import ProxyFix

from main import create_app

# ProxyFix handles the X-Forwarded-For and X-Forwarded-Proto headers
# set by the reverse proxy in front of gunicorn
app = ProxyFix(create_app(), x_for=1, x_proto=1)
