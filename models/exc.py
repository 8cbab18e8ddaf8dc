__all__ = [
    "ForbiddenOperation",
    "EntityNotFound",
    "InvitationNotFound",
]


class ForbiddenOperation(Exception):
    """The user holds no role on the team owning the requested event."""

    pass


class EntityNotFound(Exception):
    pass


class InvitationNotFound(EntityNotFound):
    """No proposal or team carries the given invitation code."""

    pass
