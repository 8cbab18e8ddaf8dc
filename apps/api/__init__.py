import logging

from decorator import decorator
from flask import Blueprint
from flask_restful import Api, abort

from models.cfp import CfpStateException
from models.exc import EntityNotFound, ForbiddenOperation

logger = logging.getLogger(__name__)

api_bp = Blueprint("api", __name__)
api = Api(api_bp)


@decorator
def domain_errors(f, *args, **kwargs):
    """Turn the service layer's exceptions into HTTP errors."""
    try:
        return f(*args, **kwargs)

    except ForbiddenOperation as e:
        logger.info("Forbidden: %s", e)
        abort(403, message="You are not allowed to access this resource")

    except EntityNotFound as e:
        abort(404, message=str(e))

    except (CfpStateException, ValueError) as e:
        abort(400, message=str(e))


from . import reviews  # noqa: F401
from . import invite  # noqa: F401
