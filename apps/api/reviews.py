from typing import ClassVar

from flask import request
from flask_login import current_user
from flask_restful import Resource, abort

from apps.cfp_review.review import ProposalReview
from apps.cfp_review.search import ReviewsFilters, ReviewsSearch
from apps.common import require_login

from . import api, domain_errors


class EventReviews(Resource):
    method_decorators: ClassVar = [domain_errors, require_login()]

    def get(self, team_slug, event_slug):
        filters = ReviewsFilters.from_args(request.args)
        return ReviewsSearch.for_user(current_user.id, team_slug, event_slug).search(filters)


class EventReviewsJsonExport(Resource):
    method_decorators: ClassVar = [domain_errors, require_login()]

    def get(self, team_slug, event_slug):
        filters = ReviewsFilters.from_args(request.args)
        return ReviewsSearch.for_user(current_user.id, team_slug, event_slug).for_json_export(filters)


class EventReviewsCardsExport(Resource):
    method_decorators: ClassVar = [domain_errors, require_login()]

    def get(self, team_slug, event_slug):
        filters = ReviewsFilters.from_args(request.args)
        return ReviewsSearch.for_user(current_user.id, team_slug, event_slug).for_cards_export(filters)


class ProposalReviewResource(Resource):
    method_decorators: ClassVar = [domain_errors, require_login()]

    def get(self, team_slug, event_slug, proposal_id):
        return ProposalReview.for_user(current_user.id, team_slug, event_slug, proposal_id).get_reviews()

    def put(self, team_slug, event_slug, proposal_id):
        if not request.is_json:
            abort(415)

        payload = request.get_json()
        if not payload or "feeling" not in payload:
            abort(400, message="feeling is required")

        ALLOWED_ATTRIBUTES = {"feeling", "note", "comment"}
        if set(payload.keys()) - ALLOWED_ATTRIBUTES:
            abort(400)

        note = payload.get("note")
        if note is not None and (isinstance(note, bool) or not isinstance(note, int)):
            abort(400, message="note must be an integer")

        review = ProposalReview.for_user(current_user.id, team_slug, event_slug, proposal_id)
        return review.add_review(payload["feeling"], note, payload.get("comment"))


api.add_resource(EventReviews, "/team/<team_slug>/<event_slug>/reviews")
api.add_resource(EventReviewsJsonExport, "/team/<team_slug>/<event_slug>/reviews/export/json")
api.add_resource(EventReviewsCardsExport, "/team/<team_slug>/<event_slug>/reviews/export/cards")
api.add_resource(ProposalReviewResource, "/team/<team_slug>/<event_slug>/reviews/<int:proposal_id>")
