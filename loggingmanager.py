"""Request context for log lines.

Werkzeug logs the request after the Flask app context has ended, so the
logged-in user and the request id live in a werkzeug Local which the
middleware clears once the response has been sent.
"""

import logging
import uuid

from flask import request
from werkzeug.local import Local, LocalManager

local = Local()
local_manager = LocalManager([local])


class ContextFormatter(logging.Formatter):
    """Adds `user` (an email, or "-" when anonymous) and `request_id` to every record."""

    def format(self, record):
        record.user = getattr(local, "user_id", None) or "-"
        record.request_id = getattr(local, "request_id", None) or "-"
        return super().format(record)


def set_user_id(uid):
    local.user_id = uid


def set_request_id(request_id=None):
    """Use the proxy's X-Request-Id if there is one, so log lines can be matched up."""
    local.request_id = request_id or uuid.uuid4().hex[:12]
    return local.request_id


def create_logging_manager(app):
    @app.before_request
    def tag_request():
        set_request_id(request.headers.get("X-Request-Id"))

    app.wsgi_app = local_manager.make_middleware(app.wsgi_app)
