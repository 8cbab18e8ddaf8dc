import logging

from sqlalchemy.exc import IntegrityError

from main import db
from models.cfp import CfpStateException, Proposal, Review
from models.exc import EntityNotFound, ForbiddenOperation
from models.user import User

from ..common import require_team_member

logger = logging.getLogger(__name__)


class ProposalReview:
    """A team member's reviews of one proposal."""

    def __init__(self, user_id: int, team_slug: str, event_slug: str, proposal_id: int):
        self.user_id = user_id
        self.team_slug = team_slug
        self.event_slug = event_slug
        self.proposal_id = proposal_id

    @classmethod
    def for_user(cls, user_id: int, team_slug: str, event_slug: str, proposal_id: int) -> "ProposalReview":
        return cls(user_id, team_slug, event_slug, proposal_id)

    def _get_proposal(self):
        event = require_team_member(self.user_id, self.team_slug, self.event_slug)
        proposal = Proposal.query.filter_by(id=self.proposal_id, event_id=event.id).one_or_none()
        if proposal is None:
            raise EntityNotFound(f"Proposal {self.proposal_id} not found in {event.slug}")
        return event, proposal

    def add_review(self, feeling: str, note: int | None = None, comment: str | None = None) -> dict:
        """Create or replace the user's review. There's only ever one per user and proposal."""
        event, proposal = self._get_proposal()
        if not event.review_enabled:
            raise ForbiddenOperation(f"Reviews are closed for {event.slug}")

        review = proposal.get_user_review(self.user_id)
        if review is None:
            user = db.session.get(User, self.user_id)
            review = Review(user, proposal)
            db.session.add(review)

        try:
            review.set_opinion(feeling, note, comment)
        except CfpStateException:
            db.session.rollback()
            raise

        try:
            db.session.commit()
        except IntegrityError:
            # Another request created the review first, update that one instead
            db.session.rollback()
            review = Review.query.filter_by(user_id=self.user_id, proposal_id=self.proposal_id).one()
            review.set_opinion(feeling, note, comment)
            db.session.commit()

        logger.info("User %s reviewed proposal %s: %s", self.user_id, proposal.id, review.feeling)
        return review.to_you()

    def get_reviews(self) -> dict:
        event, proposal = self._get_proposal()

        own_review = proposal.get_user_review(self.user_id)
        if not event.display_proposals_reviews:
            return {"you": own_review.to_you() if own_review else None}

        return {
            "summary": proposal.review_summary(),
            "you": own_review.to_you() if own_review else None,
            "reviews": [
                {
                    "user": review.user.name,
                    "feeling": review.feeling,
                    "note": review.note,
                    "comment": review.comment,
                }
                for review in sorted(proposal.reviews, key=lambda r: r.created)
            ],
        }
