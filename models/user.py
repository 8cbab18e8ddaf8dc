from __future__ import annotations

import typing
from datetime import datetime

from flask_login import UserMixin
from sqlalchemy import JSON, Index, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from . import BaseModel, naive_utcnow

if typing.TYPE_CHECKING:
    from .cfp import Proposal, Review, Talk
    from .team import TeamMember

__all__ = [
    "User",
]


class User(BaseModel, UserMixin):
    __tablename__ = "user"

    id: Mapped[int] = mapped_column(primary_key=True)
    email: Mapped[str] = mapped_column(unique=True, index=True)
    name: Mapped[str] = mapped_column(index=True)
    created: Mapped[datetime] = mapped_column(default=naive_utcnow)

    # Speaker profile, shown to organizers when the event displays speakers
    picture: Mapped[str | None]
    bio: Mapped[str | None]
    company: Mapped[str | None]
    address: Mapped[str | None]
    references: Mapped[str | None]
    socials: Mapped[dict] = mapped_column(JSON, default=dict)

    team_memberships: Mapped[list[TeamMember]] = relationship(
        back_populates="member", cascade="all, delete-orphan"
    )
    talks: Mapped[list[Talk]] = relationship(back_populates="speakers", secondary="talk_speaker")
    proposals: Mapped[list[Proposal]] = relationship(
        back_populates="speakers", secondary="proposal_speaker"
    )
    reviews: Mapped[list[Review]] = relationship(back_populates="user", lazy="dynamic")

    def __init__(self, email: str, name: str, **kwargs):
        self.email = email
        self.name = name
        for key, value in kwargs.items():
            setattr(self, key, value)

    def __repr__(self):
        return f"<User {self.email}>"

    def speaker_profile(self) -> dict:
        """Full profile as exported to organizers."""
        return {
            "name": self.name,
            "email": self.email,
            "bio": self.bio,
            "picture": self.picture,
            "company": self.company,
            "address": self.address,
            "references": self.references,
            "socials": self.socials or {},
        }


Index("ix_user_email_lower", func.lower(User.email), unique=True)
