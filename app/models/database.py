"""SQLAlchemy database models and setup."""

import logging
from datetime import datetime
from typing import Optional

from sqlalchemy import (
    Column,
    Integer,
    String,
    DateTime,
    Text,
    create_engine,
)
from sqlalchemy.orm import declarative_base, sessionmaker

from app.config import settings
from app.errors import NotFoundError
from .vendor import Evaluation

logger = logging.getLogger(__name__)

Base = declarative_base()


class DBEvaluation(Base):
    """Stored evaluation, keyed by template id."""

    __tablename__ = "evaluations"

    id = Column(Integer, primary_key=True, autoincrement=True)
    evaluation_id = Column(String(255), unique=True, nullable=False, index=True)
    name = Column(String(500), nullable=False)
    data = Column(Text, nullable=False)  # JSON blob of Evaluation
    awarded_vendor_id = Column(String(255))
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow)

    def get_evaluation(self) -> Evaluation:
        return Evaluation.model_validate_json(self.data)

    def set_evaluation(self, evaluation: Evaluation):
        self.name = evaluation.template.name
        self.data = evaluation.model_dump_json()
        self.awarded_vendor_id = evaluation.awarded_vendor_id
        self.updated_at = evaluation.updated_at


# Database initialization
def init_db(db_url: Optional[str] = None) -> sessionmaker:
    """Initialize database and return session maker."""
    url = db_url or settings.database_url
    engine = create_engine(url, echo=False)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)


class EvaluationRepository:
    """Key-value store of evaluations."""

    def __init__(self, session_factory: Optional[sessionmaker] = None):
        self.session_factory = session_factory or init_db()

    def save(self, evaluation: Evaluation) -> Evaluation:
        """Insert or replace the evaluation stored under its id."""
        session = self.session_factory()
        try:
            record = session.query(DBEvaluation).filter_by(evaluation_id=evaluation.id).first()
            if not record:
                record = DBEvaluation(evaluation_id=evaluation.id)
                session.add(record)
            record.set_evaluation(evaluation)
            session.commit()
        finally:
            session.close()

        logger.info(f"Saved evaluation {evaluation.id}")
        return evaluation

    def get(self, evaluation_id: str) -> Evaluation:
        session = self.session_factory()
        try:
            record = session.query(DBEvaluation).filter_by(evaluation_id=evaluation_id).first()
            if not record:
                raise NotFoundError("Evaluation", evaluation_id)
            return record.get_evaluation()
        finally:
            session.close()

    def list_all(self) -> list[Evaluation]:
        session = self.session_factory()
        try:
            records = session.query(DBEvaluation).order_by(DBEvaluation.updated_at.desc()).all()
            return [r.get_evaluation() for r in records]
        finally:
            session.close()

    def delete(self, evaluation_id: str) -> None:
        session = self.session_factory()
        try:
            record = session.query(DBEvaluation).filter_by(evaluation_id=evaluation_id).first()
            if not record:
                raise NotFoundError("Evaluation", evaluation_id)
            session.delete(record)
            session.commit()
        finally:
            session.close()

        logger.info(f"Deleted evaluation {evaluation_id}")
