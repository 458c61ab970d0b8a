"""SQLAlchemy ORM models for stored calculation runs"""

import uuid
from sqlalchemy import Column, BigInteger, Boolean, DateTime, Date, Text, JSON
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import declarative_base
from sqlalchemy.sql import func

Base = declarative_base()


class RMCCalculation(Base):
    """One recalculation request: inputs plus headline results"""

    __tablename__ = "rmc_calculation"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    client_name = Column(Text, nullable=True)
    client_cpf = Column(Text, nullable=True, index=True)
    client_birth_date = Column(Date, nullable=True)
    client_benefit_number = Column(Text, nullable=True)
    principal_cents = Column(BigInteger, nullable=False)
    monthly_rate = Column(Text, nullable=False)  # exact decimal string
    start_date = Column(Date, nullable=True)
    double_restitution = Column(Boolean, nullable=False, default=False)
    fees_percent = Column(Text, nullable=False, default="0")
    payments = Column(JSON, nullable=False)
    total_paid_cents = Column(BigInteger, nullable=False)
    current_debt_balance_cents = Column(BigInteger, nullable=False)
    total_restitution_cents = Column(BigInteger, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
