from __future__ import annotations

import typing
from datetime import datetime

from slugify import slugify
from sqlalchemy import ForeignKey, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from . import BaseModel, generate_invitation_code, naive_utcnow

if typing.TYPE_CHECKING:
    from .event import Event
    from .user import User

__all__ = [
    "TEAM_ROLES",
    "Team",
    "TeamMember",
]

# OWNER manages the team and its events, MEMBER organizes, REVIEWER only reviews.
# Invitation links always grant REVIEWER.
TEAM_ROLES = ["OWNER", "MEMBER", "REVIEWER"]


class Team(BaseModel):
    __tablename__ = "team"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column()
    slug: Mapped[str] = mapped_column(unique=True, index=True)
    invitation_code: Mapped[str] = mapped_column(unique=True, default=generate_invitation_code)
    created: Mapped[datetime] = mapped_column(default=naive_utcnow)

    members: Mapped[list[TeamMember]] = relationship(back_populates="team", cascade="all, delete-orphan")
    events: Mapped[list[Event]] = relationship(back_populates="team", cascade="all, delete-orphan")

    def __init__(self, name: str, slug: str | None = None):
        self.name = name
        self.slug = slug or slugify(name)
        self.invitation_code = generate_invitation_code()

    def __repr__(self):
        return f"<Team {self.slug}>"

    def get_member_role(self, user_id: int) -> str | None:
        membership = TeamMember.query.filter_by(team_id=self.id, member_id=user_id).one_or_none()
        if membership is None:
            return None
        return membership.role

    def add_member(self, user: User, role: str) -> TeamMember:
        if role not in TEAM_ROLES:
            raise ValueError(f'"{role}" is not a valid team role')
        return TeamMember(member=user, team=self, role=role)

    def regenerate_invitation_code(self) -> str:
        """Issue a new code. Links carrying the old one stop resolving."""
        self.invitation_code = generate_invitation_code()
        return self.invitation_code


class TeamMember(BaseModel):
    __tablename__ = "team_member"

    id: Mapped[int] = mapped_column(primary_key=True)
    member_id: Mapped[int] = mapped_column(ForeignKey("user.id"))
    team_id: Mapped[int] = mapped_column(ForeignKey("team.id"))
    role: Mapped[str] = mapped_column(default="MEMBER")
    created: Mapped[datetime] = mapped_column(default=naive_utcnow)

    member: Mapped[User] = relationship(back_populates="team_memberships")
    team: Mapped[Team] = relationship(back_populates="members")

    __table_args__ = (UniqueConstraint("member_id", "team_id", name="_team_member_uniq"),)

    def __repr__(self):
        return f"<TeamMember team={self.team_id} member={self.member_id} role={self.role}>"
