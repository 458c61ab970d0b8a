"""Pytest fixtures for testing"""

import pytest
from datetime import date
from decimal import Decimal
from typing import Generator
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from rmc_recalc.api.main import create_app
from rmc_recalc.infrastructure.database.models import Base
from rmc_recalc.infrastructure.database.session import get_db
from rmc_recalc.domain.models import Contract, PaymentRecord


# Test database
TEST_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db() -> Generator[Session, None, None]:
    """Create test database and session"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def app(db: Session):
    """FastAPI app wired to the test database"""
    app = create_app()

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    return app


@pytest.fixture
def client(app) -> TestClient:
    """Create FastAPI test client with test database"""
    return TestClient(app)


@pytest.fixture
def hiscre_text() -> str:
    """HISCRE-like statement: two competences with an RMC debit each, plus header/footer noise"""
    return "\n".join(
        [
            "INSTITUTO NACIONAL DO SEGURO SOCIAL",
            "HISTÓRICO DE CRÉDITOS",
            "Data de Nascimento: 15/03/1958",
            "Benefício: 123.456.789-0",
            "Competência Inicial: 01/2015",
            "07/2020 01/07/2020 a 31/07/2020",
            "104 VALOR TOTAL DE MR DO PERIODO R$ 1.500,00",
            "217 EMPRÉSTIMO SOBRE A RMC R$ 150,00",
            "08/2020 01/08/2020 a 31/08/2020",
            "104 VALOR TOTAL DE MR DO PERIODO R$ 1.500,00",
            "217 EMPRÉSTIMO SOBRE A RMC R$ 152,35",
            "Gerado em 10/10/2023 14:32",
            "Página 1 de 1",
        ]
    )


@pytest.fixture
def sample_contract() -> Contract:
    """R$ 1.000,00 at 2% a.m., simple restitution"""
    return Contract(principal=Decimal("1000.00"), monthly_rate=Decimal("2"))


@pytest.fixture
def monthly_payments() -> list[PaymentRecord]:
    """Twelve monthly R$ 100,00 debits from Jan/2021"""
    return [
        PaymentRecord(
            id=i + 1,
            competence_date=date(2021, i + 1, 1),
            amount=Decimal("100.00"),
        )
        for i in range(12)
    ]
