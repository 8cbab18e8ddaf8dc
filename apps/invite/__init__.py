"""
Invitation links. Anyone holding a proposal's code can join it as a co-speaker,
anyone holding a team's code can join the team as a reviewer.
"""

import logging

from sqlalchemy.exc import IntegrityError

from main import db
from models import exists
from models.cfp import Proposal
from models.exc import EntityNotFound, InvitationNotFound
from models.team import Team, TeamMember
from models.user import User

from ..metrics import invitations_accepted

logger = logging.getLogger(__name__)

ATTACH_ATTEMPTS = 3


class Invitation:
    kind: str
    model: type

    def __init__(self, code: str):
        self.code = code

    @classmethod
    def with_code(cls, code: str):
        return cls(code)

    def _find(self):
        entity = self.model.query.filter_by(invitation_code=self.code).one_or_none()
        if entity is None:
            raise InvitationNotFound(f"No {self.kind} for invitation code {self.code!r}")
        return entity

    def identity(self, entity) -> dict:
        raise NotImplementedError

    def add_user(self, entity, user: User) -> bool:
        """Add the user to the entity. Return False if they were already there."""
        raise NotImplementedError

    def resolve(self) -> dict:
        return self.identity(self._find())

    def attach(self, user_id: int) -> dict:
        entity = self._find()
        entity_id = entity.id
        if db.session.get(User, user_id) is None:
            raise EntityNotFound(f"User {user_id} not found")

        for attempt in range(1, ATTACH_ATTEMPTS + 1):
            user = db.session.get(User, user_id)
            try:
                added = self.add_user(entity, user)
                db.session.commit()
                break
            except IntegrityError:
                # A concurrent request wrote some of the same rows. The rollback
                # dropped ours too, so check again against what's committed now.
                db.session.rollback()
                if attempt == ATTACH_ATTEMPTS:
                    raise
                logger.info("Retrying adding user %s to %s %s", user_id, self.kind, entity_id)
                entity = self._find()
            except Exception:
                db.session.rollback()
                raise

        if added:
            logger.info("User %s joined %s %s by invitation", user_id, self.kind, entity.id)
            invitations_accepted.labels(self.kind).inc()

        return self.identity(entity)


class ProposalInvite(Invitation):
    kind = "proposal"
    model = Proposal

    def identity(self, proposal: Proposal) -> dict:
        return {
            "id": proposal.id,
            "title": proposal.title,
            "event": {"slug": proposal.event.slug, "name": proposal.event.name},
        }

    def add_user(self, proposal: Proposal, user: User) -> bool:
        # Both speaker lists are written in the same transaction
        added = False
        if user not in proposal.speakers:
            proposal.speakers.append(user)
            added = True

        talk = proposal.talk
        if talk is not None and user not in talk.speakers:
            talk.speakers.append(user)
            added = True

        return added


class TeamInvite(Invitation):
    kind = "team"
    model = Team

    def identity(self, team: Team) -> dict:
        return {"id": team.id, "slug": team.slug, "name": team.name}

    def add_user(self, team: Team, user: User) -> bool:
        # Existing members keep whatever role they had
        if exists(TeamMember.query.filter_by(team_id=team.id, member_id=user.id)):
            return False

        db.session.add(TeamMember(member=user, team=team, role="REVIEWER"))
        return True
