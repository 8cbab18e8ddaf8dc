import logging

from decorator import decorator
from flask import current_app as app
from flask_login import current_user

from models.event import Event

logger = logging.getLogger(__name__)


def require_team_member(user_id: int, team_slug: str, event_slug: str) -> Event:
    """
    Return the event if the user holds any role on the team that owns it.

    Raises ForbiddenOperation otherwise, without saying whether the team,
    the event or the membership was missing. Call this before reading any
    proposal data.
    """
    event, role = Event.get_for_member(user_id, team_slug, event_slug)
    logger.debug("User %s accessing %s/%s as %s", user_id, team_slug, event_slug, role)
    return event


def require_login():
    def call(f, *args, **kwargs):
        if current_user.is_authenticated:
            return f(*args, **kwargs)
        return app.login_manager.unauthorized()

    return decorator(call)
