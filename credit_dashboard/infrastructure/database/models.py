"""SQLAlchemy ORM models for the stored portfolio and recommendation history"""

import uuid
from sqlalchemy import Column, Float, DateTime, Integer, Text, JSON, Uuid
from sqlalchemy.orm import declarative_base
from sqlalchemy.sql import func

Base = declarative_base()


class CreditProfileRecord(Base):
    """Profile in the current portfolio snapshot"""

    __tablename__ = "credit_profile"

    user_id = Column(Text, primary_key=True)
    position = Column(Integer, nullable=False)  # Order within the generated portfolio
    name = Column(Text, nullable=False)
    credit_score = Column(Integer, nullable=False)
    risk_level = Column(Text, nullable=False, index=True)
    payload = Column(JSON, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())


class RecommendationRecord(Base):
    """Loan recommendation served to a caller"""

    __tablename__ = "loan_recommendation"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Text, nullable=False, index=True)
    recommendation = Column(Text, nullable=False)
    recommended_amount = Column(Float, nullable=True)
    confidence = Column(Integer, nullable=False)
    reasoning = Column(JSON, nullable=False)
    risk_factors = Column(JSON, nullable=False)
    evaluated_at = Column(DateTime(timezone=True), nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
