import logging
from collections.abc import Mapping
from dataclasses import asdict, dataclass

from flask import current_app as app
from sqlalchemy import func, or_, select
from sqlalchemy.orm import selectinload

from models.cfp import Proposal, Review
from models.event import Event, EventCategory, EventFormat
from models.user import User

from ..common import require_team_member
from . import REVIEW_FILTERS, RESULTS_BY_PAGE, SORT_OPTIONS, STATUS_FILTERS, page_count

logger = logging.getLogger(__name__)

EMPTY_REVIEW = {"note": None, "feeling": None, "comment": None}

CARD_FIELDS = ["id", "title", "languages", "level", "categories", "formats"]


@dataclass
class ReviewsFilters:
    query: str | None = None
    status: str | None = None
    reviews: str | None = None
    category: int | None = None
    format: int | None = None
    sort: str | None = None
    page: int = 1

    def __post_init__(self):
        if self.query is not None:
            self.query = self.query.strip() or None

        if self.status is not None and self.status not in STATUS_FILTERS:
            raise ValueError(f"Unknown status filter {self.status!r}")
        if self.reviews is not None and self.reviews not in REVIEW_FILTERS:
            raise ValueError(f"Unknown reviews filter {self.reviews!r}")
        if self.sort is not None and self.sort not in SORT_OPTIONS:
            raise ValueError(f"Unknown sort order {self.sort!r}")

        self.page = max(int(self.page or 1), 1)

    @classmethod
    def from_args(cls, args: Mapping) -> "ReviewsFilters":
        """Build filters from a request's query string. Empty values are ignored."""

        def get_str(name):
            return args.get(name) or None

        def get_int(name):
            value = args.get(name)
            if value in (None, ""):
                return None
            try:
                return int(value)
            except ValueError:
                raise ValueError(f"Invalid {name} {value!r}") from None

        return cls(
            query=get_str("query"),
            status=get_str("status"),
            reviews=get_str("reviews"),
            category=get_int("category"),
            format=get_int("format"),
            sort=get_str("sort"),
            page=get_int("page") or 1,
        )

    @classmethod
    def coerce(cls, filters) -> "ReviewsFilters":
        if filters is None:
            return cls()
        if isinstance(filters, cls):
            return filters
        return cls(**filters)

    def to_dict(self) -> dict:
        """The filters as given, for echoing back to the caller."""
        return {k: v for k, v in asdict(self).items() if v is not None and k != "page"}


class ReviewsSearch:
    """
    Proposals of one event as seen by one member of the organizing team.

    What is shown depends on the event settings: with `display_proposals_speakers`
    off speakers are neither listed nor searchable, with `display_proposals_reviews`
    off nobody's reviews are shown.
    """

    def __init__(self, user_id: int, team_slug: str, event_slug: str):
        self.user_id = user_id
        self.team_slug = team_slug
        self.event_slug = event_slug

    @classmethod
    def for_user(cls, user_id: int, team_slug: str, event_slug: str) -> "ReviewsSearch":
        return cls(user_id, team_slug, event_slug)

    def search(self, filters=None) -> dict:
        event = require_team_member(self.user_id, self.team_slug, self.event_slug)
        filters = ReviewsFilters.coerce(filters)
        logger.debug("Searching proposals of %s with %s", event.slug, filters)

        query = self._filter(event, filters)
        total = query.count()
        reviewed = query.filter(self._reviewed_by_user()).count()

        per_page = app.config.get("REVIEWS_RESULTS_BY_PAGE", RESULTS_BY_PAGE)
        proposals = (
            self._order(event, query, filters)
            .options(selectinload(Proposal.speakers), selectinload(Proposal.reviews))
            .limit(per_page)
            .offset((filters.page - 1) * per_page)
            .all()
        )

        return {
            "results": [self._search_row(event, p) for p in proposals],
            "filters": filters.to_dict(),
            "statistics": {"reviewed": reviewed, "total": total},
            "pagination": {"current": filters.page, "total": page_count(total, per_page)},
        }

    def for_json_export(self, filters=None) -> list[dict]:
        event = require_team_member(self.user_id, self.team_slug, self.event_slug)
        filters = ReviewsFilters.coerce(filters)
        return [self._export_row(event, p) for p in self._export_proposals(event, filters)]

    def for_cards_export(self, filters=None) -> list[dict]:
        event = require_team_member(self.user_id, self.team_slug, self.event_slug)
        filters = ReviewsFilters.coerce(filters)

        cards = []
        for proposal in self._export_proposals(event, filters):
            row = self._export_row(event, proposal)
            card = {k: row[k] for k in CARD_FIELDS}
            if "reviews" in row:
                card["reviews"] = row["reviews"]
            if "speakers" in row:
                card["speakers"] = [speaker["name"] for speaker in row["speakers"]]
            cards.append(card)

        return cards

    def _reviewed_by_user(self):
        return Proposal.reviews.any(Review.user_id == self.user_id)

    def _filter(self, event: Event, filters: ReviewsFilters):
        query = Proposal.query.filter(Proposal.event_id == event.id)

        if filters.query:
            pattern = f"%{filters.query}%"
            matches = [Proposal.title.ilike(pattern)]
            # Hidden speakers mustn't be findable by name either
            if event.display_proposals_speakers:
                matches.append(Proposal.speakers.any(User.name.ilike(pattern)))
            query = query.filter(or_(*matches))

        if filters.status:
            query = query.filter_by(**STATUS_FILTERS[filters.status])

        if filters.reviews == "reviewed":
            query = query.filter(self._reviewed_by_user())
        elif filters.reviews == "not-reviewed":
            query = query.filter(~self._reviewed_by_user())

        if filters.category is not None:
            query = query.filter(Proposal.categories.any(EventCategory.id == filters.category))

        if filters.format is not None:
            query = query.filter(Proposal.formats.any(EventFormat.id == filters.format))

        return query

    def _order(self, event: Event, query, filters: ReviewsFilters):
        sort = filters.sort or "newest"

        # Ordering by score would leak hidden reviews
        if sort in ("highest", "lowest") and event.display_proposals_reviews:
            average = (
                select(func.avg(Review.note))
                .where(Review.proposal_id == Proposal.id)
                .correlate(Proposal)
                .scalar_subquery()
            )
            direction = average.desc() if sort == "highest" else average.asc()
            return query.order_by(direction.nulls_last(), Proposal.created.desc(), Proposal.id.desc())

        if sort == "oldest":
            return query.order_by(Proposal.created.asc(), Proposal.id.asc())

        return query.order_by(Proposal.created.desc(), Proposal.id.desc())

    def _export_proposals(self, event: Event, filters: ReviewsFilters) -> list[Proposal]:
        return (
            self._order(event, self._filter(event, filters), filters)
            .options(
                selectinload(Proposal.speakers),
                selectinload(Proposal.reviews),
                selectinload(Proposal.categories),
                selectinload(Proposal.formats),
            )
            .all()
        )

    def _search_row(self, event: Event, proposal: Proposal) -> dict:
        row = {
            "id": proposal.id,
            "title": proposal.title,
            "deliberation_status": proposal.deliberation_status,
            "confirmation_status": proposal.confirmation_status,
            "publication_status": proposal.publication_status,
            "speakers": [],
        }

        if event.display_proposals_speakers:
            row["speakers"] = [{"name": s.name, "picture": s.picture} for s in proposal.speakers]

        # The caller always sees their own review, other people's only when displayed
        own_review = proposal.get_user_review(self.user_id)
        row["reviews"] = {"you": own_review.to_you() if own_review else dict(EMPTY_REVIEW)}
        if event.display_proposals_reviews:
            row["reviews"]["summary"] = proposal.review_summary()

        return row

    def _export_row(self, event: Event, proposal: Proposal) -> dict:
        row = {
            "id": proposal.id,
            "title": proposal.title,
            "deliberation_status": proposal.deliberation_status,
            "confirmation_status": proposal.confirmation_status,
            "abstract": proposal.abstract,
            "comments": proposal.comments,
            "languages": proposal.languages,
            "references": proposal.references,
            "level": proposal.level,
            "categories": [c.name for c in proposal.categories],
            "formats": [f.name for f in proposal.formats],
        }

        if event.display_proposals_reviews:
            row["reviews"] = proposal.review_summary()

        if event.display_proposals_speakers:
            row["speakers"] = [s.speaker_profile() for s in proposal.speakers]

        return row
