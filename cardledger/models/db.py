"""
SQLAlchemy ORM models for persistent storage.

Tables mirror the ledger records. Card, grading and history rows are
insert-only; owner and admin rows are the only ones ever updated.
"""

from sqlalchemy import (
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Base class for all ORM models."""

    pass


class CardDB(Base):
    """A registered card and its static attributes."""

    __tablename__ = "cards"

    # Ids are allocated by the card registry, never by the database.
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=False)
    name: Mapped[str] = mapped_column(String(255))
    series: Mapped[str] = mapped_column(String(255))
    manufacturer: Mapped[str] = mapped_column(String(255))
    rarity: Mapped[str] = mapped_column(String(100))
    issue_date: Mapped[int] = mapped_column(Integer)
    registrant: Mapped[str] = mapped_column(String(255), index=True)

    def __repr__(self) -> str:
        return f"<CardDB(id={self.id}, name={self.name})>"


class CardGradingDB(Base):
    """The single grading record for a card id."""

    __tablename__ = "card_gradings"

    # Not a foreign key: gradings are not tied to card registration.
    card_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=False)
    grade: Mapped[float] = mapped_column(Float)
    grader: Mapped[str] = mapped_column(String(255), index=True)
    grading_date: Mapped[int] = mapped_column(Integer)
    notes: Mapped[str] = mapped_column(Text, default="")

    def __repr__(self) -> str:
        return f"<CardGradingDB(card_id={self.card_id}, grade={self.grade})>"


class VerifiedGraderDB(Base):
    """Allowlist membership for a grader principal."""

    __tablename__ = "verified_graders"

    grader: Mapped[str] = mapped_column(String(255), primary_key=True)

    def __repr__(self) -> str:
        return f"<VerifiedGraderDB(grader={self.grader})>"


class RegistryAdminDB(Base):
    """Current admin principal of one registry component."""

    __tablename__ = "registry_admins"

    component: Mapped[str] = mapped_column(String(50), primary_key=True)
    admin: Mapped[str] = mapped_column(String(255))

    def __repr__(self) -> str:
        return f"<RegistryAdminDB(component={self.component}, admin={self.admin})>"


class CardOwnerDB(Base):
    """Current owner of a card id."""

    __tablename__ = "card_owners"

    card_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=False)
    owner: Mapped[str] = mapped_column(String(255), index=True)

    def __repr__(self) -> str:
        return f"<CardOwnerDB(card_id={self.card_id}, owner={self.owner})>"


class OwnershipHistoryDB(Base):
    """One appended transfer, keyed by card id and sequence index."""

    __tablename__ = "ownership_history"

    card_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("card_owners.card_id"), primary_key=True, autoincrement=False
    )
    seq: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=False)
    previous_owner: Mapped[str] = mapped_column(String(255))
    new_owner: Mapped[str] = mapped_column(String(255))
    transfer_date: Mapped[int] = mapped_column(Integer)

    def __repr__(self) -> str:
        return f"<OwnershipHistoryDB(card_id={self.card_id}, seq={self.seq})>"
