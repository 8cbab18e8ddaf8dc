from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime

from sqlalchemy import JSON, Column, ForeignKey, Integer, Table
from sqlalchemy.orm import Mapped, mapped_column, relationship

from main import db

from . import BaseModel, generate_invitation_code, naive_utcnow
from .event import Event, EventCategory, EventFormat
from .user import User

__all__ = [
    "DELIBERATION_STATUSES",
    "CONFIRMATION_STATUSES",
    "PUBLICATION_STATUSES",
    "REVIEW_FEELINGS",
    "CfpStateException",
    "TalkSpeaker",
    "ProposalSpeaker",
    "Talk",
    "Proposal",
    "Review",
]

# Organizer decision
DELIBERATION_STATUSES = ["PENDING", "ACCEPTED", "REJECTED"]
# Speaker answer once an accepted proposal has been published. None until then.
CONFIRMATION_STATUSES = ["PENDING", "CONFIRMED", "DECLINED"]
PUBLICATION_STATUSES = ["NOT_PUBLISHED", "PUBLISHED"]

REVIEW_FEELINGS = ["POSITIVE", "NEGATIVE", "NEUTRAL", "NO_OPINION"]
MAX_REVIEW_NOTE = 5


class CfpStateException(Exception):
    pass


TalkSpeaker = Table(
    "talk_speaker",
    BaseModel.metadata,
    Column("talk_id", Integer, ForeignKey("talk.id"), primary_key=True),
    Column("user_id", Integer, ForeignKey("user.id"), primary_key=True, index=True),
)

# Copied from the talk on submission, then edited independently
ProposalSpeaker = Table(
    "proposal_speaker",
    BaseModel.metadata,
    Column("proposal_id", Integer, ForeignKey("proposal.id"), primary_key=True),
    Column("user_id", Integer, ForeignKey("user.id"), primary_key=True, index=True),
)

ProposalCategory = Table(
    "proposal_category",
    BaseModel.metadata,
    Column("proposal_id", Integer, ForeignKey("proposal.id"), primary_key=True),
    Column("category_id", Integer, ForeignKey("event_category.id"), primary_key=True),
)

ProposalFormat = Table(
    "proposal_format",
    BaseModel.metadata,
    Column("proposal_id", Integer, ForeignKey("proposal.id"), primary_key=True),
    Column("format_id", Integer, ForeignKey("event_format.id"), primary_key=True),
)


class Talk(BaseModel):
    __tablename__ = "talk"

    id: Mapped[int] = mapped_column(primary_key=True)
    creator_id: Mapped[int] = mapped_column(ForeignKey("user.id"))
    created: Mapped[datetime] = mapped_column(default=naive_utcnow)
    modified: Mapped[datetime] = mapped_column(default=naive_utcnow, onupdate=naive_utcnow)

    title: Mapped[str] = mapped_column()
    abstract: Mapped[str] = mapped_column()
    references: Mapped[str | None]
    level: Mapped[str | None]
    languages: Mapped[list[str]] = mapped_column(JSON, default=list)
    archived: Mapped[bool] = mapped_column(default=False)

    creator: Mapped[User] = relationship()
    speakers: Mapped[list[User]] = relationship(
        back_populates="talks", secondary=TalkSpeaker, order_by=User.id
    )
    proposals: Mapped[list[Proposal]] = relationship(back_populates="talk")

    def __init__(self, creator: User, title: str, abstract: str, **kwargs):
        self.creator = creator
        self.title = title
        self.abstract = abstract
        self.speakers = [creator]
        for key, value in kwargs.items():
            setattr(self, key, value)

    def __repr__(self):
        return f"<Talk id={self.id} title={self.title!r}>"


class Proposal(BaseModel):
    __tablename__ = "proposal"

    id: Mapped[int] = mapped_column(primary_key=True)
    talk_id: Mapped[int | None] = mapped_column(ForeignKey("talk.id"))
    event_id: Mapped[int] = mapped_column(ForeignKey("event.id"), index=True)
    created: Mapped[datetime] = mapped_column(default=naive_utcnow)
    modified: Mapped[datetime] = mapped_column(default=naive_utcnow, onupdate=naive_utcnow)

    # Snapshot of the talk at submission time
    title: Mapped[str] = mapped_column()
    abstract: Mapped[str] = mapped_column()
    references: Mapped[str | None]
    comments: Mapped[str | None]
    level: Mapped[str | None]
    languages: Mapped[list[str]] = mapped_column(JSON, default=list)

    deliberation_status: Mapped[str] = mapped_column(default="PENDING")
    confirmation_status: Mapped[str | None] = mapped_column(default=None)
    publication_status: Mapped[str] = mapped_column(default="NOT_PUBLISHED")

    invitation_code: Mapped[str] = mapped_column(unique=True, default=generate_invitation_code)

    talk: Mapped[Talk | None] = relationship(back_populates="proposals")
    event: Mapped[Event] = relationship(back_populates="proposals")
    speakers: Mapped[list[User]] = relationship(
        back_populates="proposals", secondary=ProposalSpeaker, order_by=User.id
    )
    categories: Mapped[list[EventCategory]] = relationship(secondary=ProposalCategory)
    formats: Mapped[list[EventFormat]] = relationship(secondary=ProposalFormat)
    reviews: Mapped[list[Review]] = relationship(back_populates="proposal", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<Proposal id={self.id} title={self.title!r}>"

    @classmethod
    def from_talk(
        cls,
        talk: Talk,
        event: Event,
        categories: Iterable[EventCategory] = (),
        formats: Iterable[EventFormat] = (),
        comments: str | None = None,
    ) -> Proposal:
        """Submit a talk to an event."""
        proposal = cls()
        # Reading the talk may lazy load, which mustn't flush the half-built proposal
        with db.session.no_autoflush:
            proposal.title = talk.title
            proposal.abstract = talk.abstract
            proposal.references = talk.references
            proposal.level = talk.level
            proposal.languages = list(talk.languages or [])
            proposal.comments = comments
            proposal.invitation_code = generate_invitation_code()
            # A new list, so later changes to the talk's speakers don't leak into the proposal
            proposal.speakers = list(talk.speakers)
            proposal.categories = list(categories)
            proposal.formats = list(formats)
            proposal.talk = talk
            proposal.event = event
        return proposal

    def set_deliberation_status(self, status: str):
        status = status.upper()
        if status not in DELIBERATION_STATUSES:
            raise CfpStateException('"%s" is not a valid deliberation status' % status)
        self.deliberation_status = status

    def regenerate_invitation_code(self) -> str:
        """Issue a new code. Links carrying the old one stop resolving."""
        self.invitation_code = generate_invitation_code()
        return self.invitation_code

    def get_user_review(self, user_id: int) -> Review | None:
        for review in self.reviews:
            if review.user_id == user_id:
                return review
        return None

    def review_summary(self) -> dict:
        positives = negatives = 0
        notes = []
        for review in self.reviews:
            if review.feeling == "POSITIVE":
                positives += 1
            elif review.feeling == "NEGATIVE":
                negatives += 1
            if review.note is not None:
                notes.append(review.note)

        average = sum(notes) / len(notes) if notes else None
        return {"positives": positives, "negatives": negatives, "average": average}


class Review(BaseModel):
    __tablename__ = "review"

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("user.id"))
    proposal_id: Mapped[int] = mapped_column(ForeignKey("proposal.id"))
    created: Mapped[datetime] = mapped_column(default=naive_utcnow)
    modified: Mapped[datetime] = mapped_column(default=naive_utcnow, onupdate=naive_utcnow)

    feeling: Mapped[str] = mapped_column(default="NO_OPINION")
    note: Mapped[int | None] = mapped_column()  # None for "no opinion"
    comment: Mapped[str | None] = mapped_column()

    user: Mapped[User] = relationship(back_populates="reviews")
    proposal: Mapped[Proposal] = relationship(back_populates="reviews")

    def __init__(self, user: User, proposal: Proposal):
        self.user = user
        self.proposal = proposal
        self.feeling = "NO_OPINION"

    def set_opinion(self, feeling: str, note: int | None = None, comment: str | None = None):
        feeling = feeling.upper()
        if feeling not in REVIEW_FEELINGS:
            raise CfpStateException('"%s" is not a valid review feeling' % feeling)

        if feeling == "NO_OPINION":
            note = None
        elif note is None and feeling == "POSITIVE":
            note = MAX_REVIEW_NOTE
        elif note is None and feeling == "NEGATIVE":
            note = 0

        if note is not None and not 0 <= note <= MAX_REVIEW_NOTE:
            raise CfpStateException(f"Review note must be between 0 and {MAX_REVIEW_NOTE}")

        self.feeling = feeling
        self.note = note
        self.comment = comment

    def to_you(self) -> dict:
        return {"note": self.note, "feeling": self.feeling, "comment": self.comment}


db.Index("ix_review_user_id_proposal_id", Review.user_id, Review.proposal_id, unique=True)
