import pytest

from apps.cfp_review.review import ProposalReview
from models.cfp import CfpStateException, Review
from models.exc import EntityNotFound, ForbiddenOperation
from tests._utils import create_event, create_proposal, create_review, create_talk, create_team, create_user


@pytest.fixture(scope="module")
def owner(db):
    return create_user(name="Diana Prince")


@pytest.fixture(scope="module")
def reviewer(db):
    return create_user(name="Barry Allen")


@pytest.fixture
def event(db, owner, reviewer):
    return create_event(create_team(owners=[owner], reviewers=[reviewer]))


@pytest.fixture
def proposal(event):
    return create_proposal(event, create_talk([create_user()]))


def review_for(user, proposal):
    return ProposalReview.for_user(user.id, proposal.event.team.slug, proposal.event.slug, proposal.id)


def test_add_review(owner, proposal):
    result = review_for(owner, proposal).add_review("positive", 4, "Nice topic")

    assert result == {"note": 4, "feeling": "POSITIVE", "comment": "Nice topic"}
    assert Review.query.filter_by(proposal_id=proposal.id).count() == 1


def test_review_is_replaced(owner, proposal):
    review_for(owner, proposal).add_review("POSITIVE")
    result = review_for(owner, proposal).add_review("NEGATIVE", comment="Changed my mind")

    assert result == {"note": 0, "feeling": "NEGATIVE", "comment": "Changed my mind"}
    assert Review.query.filter_by(proposal_id=proposal.id, user_id=owner.id).count() == 1


def test_no_opinion_has_no_note(owner, proposal):
    result = review_for(owner, proposal).add_review("NO_OPINION", 3)
    assert result["note"] is None


@pytest.mark.parametrize("feeling, note", [("POSITIVE", 6), ("NEUTRAL", -1), ("AMAZING", 3)])
def test_invalid_review(owner, proposal, feeling, note):
    with pytest.raises(CfpStateException):
        review_for(owner, proposal).add_review(feeling, note)

    assert Review.query.filter_by(proposal_id=proposal.id).count() == 0


def test_reviews_closed(db, owner, event, proposal):
    event.review_enabled = False
    db.session.commit()

    with pytest.raises(ForbiddenOperation):
        review_for(owner, proposal).add_review("POSITIVE")


def test_cannot_review_as_outsider(db, proposal):
    with pytest.raises(ForbiddenOperation):
        review_for(create_user(), proposal).add_review("POSITIVE")


def test_proposal_of_another_event(owner, event):
    other = create_proposal(create_event(create_team(owners=[create_user()])), create_talk([create_user()]))

    with pytest.raises(EntityNotFound):
        ProposalReview.for_user(owner.id, event.team.slug, event.slug, other.id).get_reviews()


def test_get_reviews(owner, reviewer, proposal):
    create_review(proposal, reviewer, "NEGATIVE", 1, "Too short")
    create_review(proposal, owner, "POSITIVE", 5)

    reviews = review_for(owner, proposal).get_reviews()

    assert reviews == {
        "summary": {"positives": 1, "negatives": 1, "average": 3},
        "you": {"note": 5, "feeling": "POSITIVE", "comment": None},
        "reviews": [
            {"user": reviewer.name, "feeling": "NEGATIVE", "note": 1, "comment": "Too short"},
            {"user": owner.name, "feeling": "POSITIVE", "note": 5, "comment": None},
        ],
    }


def test_get_reviews_hidden(db, owner, reviewer, event, proposal):
    event.display_proposals_reviews = False
    db.session.commit()
    create_review(proposal, reviewer, "NEGATIVE", 1)

    assert review_for(owner, proposal).get_reviews() == {"you": None}

    review_for(owner, proposal).add_review("NEUTRAL", 3)
    assert review_for(owner, proposal).get_reviews() == {
        "you": {"note": 3, "feeling": "NEUTRAL", "comment": None}
    }
