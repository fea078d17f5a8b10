"""Tests for SQLAlchemy ORM models."""

import pytest
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from cardledger.models.db import (
    CardDB,
    CardGradingDB,
    CardOwnerDB,
    OwnershipHistoryDB,
    VerifiedGraderDB,
)


class TestCardDB:
    async def test_create_card_with_explicit_id(self, session: AsyncSession) -> None:
        """Card ids come from the registry, not the database."""
        session.add(
            CardDB(
                id=42,
                name="Rare Dragon",
                series="Fantasy Series 1",
                manufacturer="Acme",
                rarity="Mythic Rare",
                issue_date=1625097600,
                registrant="user-1",
            )
        )
        await session.commit()

        saved = (await session.execute(select(CardDB))).scalar_one()

        assert saved.id == 42
        assert repr(saved) == "<CardDB(id=42, name=Rare Dragon)>"


class TestCardGradingDB:
    async def test_notes_default_empty(self, session: AsyncSession) -> None:
        session.add(CardGradingDB(card_id=1, grade=95.0, grader="grader-1", grading_date=100))
        await session.commit()

        saved = await session.get(CardGradingDB, 1)

        assert saved.notes == ""


class TestVerifiedGraderDB:
    async def test_grader_unique(self, session: AsyncSession) -> None:
        session.add(VerifiedGraderDB(grader="grader-1"))
        await session.commit()
        session.expunge_all()

        session.add(VerifiedGraderDB(grader="grader-1"))
        with pytest.raises(IntegrityError):
            await session.commit()


class TestOwnershipHistoryDB:
    async def test_composite_key_orders_entries(self, session: AsyncSession) -> None:
        """History rows are keyed by (card_id, seq)."""
        session.add(CardOwnerDB(card_id=1, owner="owner-3"))
        session.add_all(
            [
                OwnershipHistoryDB(
                    card_id=1, seq=1, previous_owner="owner-2", new_owner="owner-3", transfer_date=2
                ),
                OwnershipHistoryDB(
                    card_id=1, seq=0, previous_owner="owner-1", new_owner="owner-2", transfer_date=1
                ),
            ]
        )
        await session.commit()

        rows = (
            await session.execute(select(OwnershipHistoryDB).order_by(OwnershipHistoryDB.seq))
        ).scalars()

        assert [row.new_owner for row in rows] == ["owner-2", "owner-3"]
