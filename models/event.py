from __future__ import annotations

import typing
from datetime import datetime

from slugify import slugify
from sqlalchemy import ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship

from . import BaseModel, naive_utcnow
from .exc import ForbiddenOperation
from .team import Team, TeamMember

if typing.TYPE_CHECKING:
    from .cfp import Proposal

__all__ = [
    "EVENT_TYPES",
    "Event",
    "EventCategory",
    "EventFormat",
]

EVENT_TYPES = ["CONFERENCE", "MEETUP"]


class Event(BaseModel):
    __tablename__ = "event"

    id: Mapped[int] = mapped_column(primary_key=True)
    team_id: Mapped[int] = mapped_column(ForeignKey("team.id"))
    name: Mapped[str] = mapped_column()
    slug: Mapped[str] = mapped_column(unique=True, index=True)
    type: Mapped[str] = mapped_column(default="CONFERENCE")
    created: Mapped[datetime] = mapped_column(default=naive_utcnow)

    # What organizers get to see when reviewing proposals
    display_proposals_speakers: Mapped[bool] = mapped_column(default=True)
    display_proposals_reviews: Mapped[bool] = mapped_column(default=True)
    review_enabled: Mapped[bool] = mapped_column(default=True)

    team: Mapped[Team] = relationship(back_populates="events")
    categories: Mapped[list[EventCategory]] = relationship(
        back_populates="event", cascade="all, delete-orphan", order_by="EventCategory.id"
    )
    formats: Mapped[list[EventFormat]] = relationship(
        back_populates="event", cascade="all, delete-orphan", order_by="EventFormat.id"
    )
    proposals: Mapped[list[Proposal]] = relationship(back_populates="event", lazy="dynamic")

    def __init__(self, team: Team, name: str, slug: str | None = None, type: str = "CONFERENCE", **kwargs):
        if type not in EVENT_TYPES:
            raise ValueError(f'"{type}" is not a valid event type')
        self.team = team
        self.name = name
        self.slug = slug or slugify(name)
        self.type = type
        for key, value in kwargs.items():
            setattr(self, key, value)

    def __repr__(self):
        return f"<Event {self.slug}>"

    @classmethod
    def get_for_member(cls, user_id: int, team_slug: str, event_slug: str) -> tuple[Event, str]:
        """Find an event in a team the user belongs to, and the user's role on that team.

        Missing team, missing event and missing membership all look the same to the caller.
        """
        row = (
            cls.query.join(Team, Team.id == cls.team_id)
            .join(TeamMember, TeamMember.team_id == Team.id)
            .filter(
                cls.slug == event_slug,
                Team.slug == team_slug,
                TeamMember.member_id == user_id,
            )
            .with_entities(cls, TeamMember.role)
            .one_or_none()
        )
        if row is None:
            raise ForbiddenOperation(f"User {user_id} cannot access event {team_slug}/{event_slug}")

        event, role = row
        return event, role


class EventCategory(BaseModel):
    __tablename__ = "event_category"

    id: Mapped[int] = mapped_column(primary_key=True)
    event_id: Mapped[int] = mapped_column(ForeignKey("event.id"))
    name: Mapped[str] = mapped_column()
    description: Mapped[str | None]

    event: Mapped[Event] = relationship(back_populates="categories")


class EventFormat(BaseModel):
    __tablename__ = "event_format"

    id: Mapped[int] = mapped_column(primary_key=True)
    event_id: Mapped[int] = mapped_column(ForeignKey("event.id"))
    name: Mapped[str] = mapped_column()
    description: Mapped[str | None]

    event: Mapped[Event] = relationship(back_populates="formats")
