import uuid
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from sqlalchemy import true

from main import db

# If we're type checking, we want models to inherit from the BaseModel (trivial subclass
# of DeclarativeBase) as mypy can't handle using the sqlalchemy-flask generated db.Model
if TYPE_CHECKING:
    from main import BaseModel
else:
    BaseModel = db.Model


def naive_utcnow() -> datetime:
    return datetime.now(UTC).replace(tzinfo=None)


def generate_invitation_code() -> str:
    """Opaque code handed out in invitation links. Must be unique per table."""
    return str(uuid.uuid4())


def exists(query):
    return db.session.query(true()).filter(query.exists()).scalar()


from .exc import *  # noqa: F403
from .user import *  # noqa: F403
from .team import *  # noqa: F403
from .event import *  # noqa: F403
from .cfp import *  # noqa: F403

db.configure_mappers()
