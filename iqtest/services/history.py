"""Test history persistence.

Completed results of signed-in users are written to the ``iq_test_results``
table with SQLAlchemy. Any SQLAlchemy-supported database works; tests use an
in-memory SQLite database.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import Column, DateTime, Integer, String, Text, create_engine, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker
from sqlalchemy.types import JSON

from iqtest.core.datetime_utils import ensure_timezone_aware, utc_now
from iqtest.core.errors import PersistenceError
from iqtest.core.results import HistoryRecord

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """Base class for SQLAlchemy models."""

    pass


class TestHistoryModel(Base):
    """SQLAlchemy model for the iq_test_results table."""

    __tablename__ = "iq_test_results"
    __test__ = False  # not a pytest test class

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String(255), nullable=False, index=True)
    score = Column(Integer, nullable=False)
    answers = Column(JSON, nullable=False, default=list)
    category_performance = Column(JSON, nullable=False)
    ai_analysis = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), default=utc_now, nullable=False)


@dataclass(frozen=True)
class HistoryEntry:
    """A stored result as read back from the history table."""

    id: int
    user_id: str
    score: int
    category_performance: Dict[str, float]
    analysis_text: Optional[str]
    answers: List[Dict[str, Any]]
    created_at: datetime


class HistoryStore:
    """Service for reading and writing test history."""

    def __init__(self, database_url: str, create_tables: bool = True):
        """Initialize the history store.

        Args:
            database_url: SQLAlchemy connection URL
            create_tables: Create the history table if it does not exist

        Raises:
            PersistenceError: If the database cannot be opened or prepared
        """
        self.database_url = database_url
        try:
            self.engine = create_engine(database_url)
            if create_tables:
                Base.metadata.create_all(self.engine)
        except SQLAlchemyError as e:
            logger.error(f"Failed to open history database: {str(e)}")
            raise PersistenceError(f"Failed to open history database: {e}") from e
        self.SessionLocal = sessionmaker(
            autocommit=False, autoflush=False, bind=self.engine
        )

    def get_session(self) -> Session:
        return self.SessionLocal()

    def save(self, user_id: str, record: HistoryRecord) -> int:
        """Insert one completed result for ``user_id``.

        Args:
            user_id: Identifier of the signed-in user
            record: Result to store

        Returns:
            ID of the inserted row

        Raises:
            PersistenceError: If the write fails
        """
        session = self.get_session()
        try:
            row = TestHistoryModel(
                user_id=user_id,
                score=record.score,
                answers=list(record.answers),
                category_performance=dict(record.category_performance),
                ai_analysis=record.analysis_text,
                created_at=record.timestamp,
            )
            session.add(row)
            session.commit()
            session.refresh(row)

            logger.info(f"Saved test result {row.id} (score={record.score})")
            return row.id  # type: ignore[return-value]

        except SQLAlchemyError as e:
            session.rollback()
            logger.error(f"Failed to save test result: {str(e)}")
            raise PersistenceError(f"Failed to save test result: {e}") from e
        finally:
            session.close()

    def list_for_user(self, user_id: str, limit: int = 50) -> List[HistoryEntry]:
        """Return up to ``limit`` stored results for ``user_id``, newest first.

        Raises:
            PersistenceError: If the read fails
        """
        session = self.get_session()
        try:
            query = (
                select(TestHistoryModel)
                .where(TestHistoryModel.user_id == user_id)
                .order_by(TestHistoryModel.created_at.desc(), TestHistoryModel.id.desc())
                .limit(limit)
            )
            rows = session.execute(query).scalars().all()
            return [
                HistoryEntry(
                    id=row.id,
                    user_id=row.user_id,
                    score=row.score,
                    category_performance=dict(row.category_performance or {}),
                    analysis_text=row.ai_analysis,
                    answers=list(row.answers or []),
                    created_at=ensure_timezone_aware(row.created_at),
                )
                for row in rows
            ]
        except SQLAlchemyError as e:
            logger.error(f"Failed to load test history: {str(e)}")
            raise PersistenceError(f"Failed to load test history: {e}") from e
        finally:
            session.close()
