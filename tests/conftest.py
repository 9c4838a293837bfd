"""Shared test fixtures.

Every test gets a fresh in-memory SQLite database so tests are fully isolated.
StaticPool keeps one connection, so the FastAPI TestClient thread sees the
same database as the test.
"""

from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

import finstatements.models  # noqa: F401
from finstatements.config import Settings
from finstatements.database import Base, enable_sqlite_foreign_keys, get_db
from finstatements.dependencies import get_settings
from finstatements.main import app
from finstatements.models.company import CompanyModel
from finstatements.models.inconsistency import InconsistencyModel
from finstatements.models.metric import MetricModel
from finstatements.models.statement import StatementModel
from finstatements.models.user import TeamModel, UserModel


@pytest.fixture()
def db_engine():
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    event.listen(engine, "connect", enable_sqlite_foreign_keys)
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture()
def session_factory(db_engine):
    return sessionmaker(bind=db_engine, autocommit=False, autoflush=False)


@pytest.fixture()
def db(session_factory) -> Session:
    session = session_factory()
    yield session
    session.close()


# ── Convenience fixtures ─────────────────────────────────────────────────

@pytest.fixture()
def sample_team(db: Session) -> TeamModel:
    team = TeamModel(name="Equity Research", description="Covers industrials")
    db.add(team)
    db.commit()
    db.refresh(team)
    return team


@pytest.fixture()
def sample_user(db: Session, sample_team: TeamModel) -> UserModel:
    user = UserModel(email="analyst@example.com", role="admin", team_id=sample_team.id)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture()
def sample_company(db: Session, sample_team: TeamModel) -> CompanyModel:
    company = CompanyModel(name="Acme Manufacturing", industry="Industrials", team_id=sample_team.id)
    db.add(company)
    db.commit()
    db.refresh(company)
    return company


@pytest.fixture()
def sample_statement(
    db: Session, sample_company: CompanyModel, sample_user: UserModel
) -> StatementModel:
    """Processed Q2 2024 income statement with three metrics and one issue."""
    statement = StatementModel(
        company_id=sample_company.id,
        statement_type="income_statement",
        period="Q2",
        year=2024,
        quarter=2,
        file_path="acme_q2_2024.pdf",
        processed_at=datetime(2024, 8, 1, 12, 0, tzinfo=timezone.utc),
        uploaded_by=sample_user.id,
    )
    db.add(statement)
    db.flush()
    db.add_all([
        MetricModel(statement_id=statement.id, metric_name="total_revenue",
                    metric_value=100_000_000, metric_category="revenue"),
        MetricModel(statement_id=statement.id, metric_name="net_income",
                    metric_value=12_500_000, metric_category="profitability"),
        MetricModel(statement_id=statement.id, metric_name="current_ratio",
                    metric_value=1.8, metric_category="ratios"),
        InconsistencyModel(statement_id=statement.id, inconsistency_type="sum_mismatch",
                           description="Segment revenues do not add up to total_revenue",
                           severity="high"),
    ])
    db.commit()
    db.refresh(statement)
    return statement


@pytest.fixture()
def add_statement(db: Session, sample_user: UserModel):
    """Factory: add a statement with ``{metric_name: value}`` metrics and ``[(type, severity)]`` issues."""

    def _add(
        company: CompanyModel,
        year: int,
        quarter=None,
        metrics=None,
        issues=(),
        processed: bool = True,
        statement_type: str = "income_statement",
    ) -> StatementModel:
        statement = StatementModel(
            company_id=company.id,
            statement_type=statement_type,
            period=f"Q{quarter}" if quarter else "Annual",
            year=year,
            quarter=quarter,
            file_path=f"{company.name.lower().replace(' ', '_')}_{year}_{quarter or 'fy'}.pdf",
            processed_at=datetime(year, 12, 31, tzinfo=timezone.utc) if processed else None,
            uploaded_by=sample_user.id,
        )
        db.add(statement)
        db.flush()
        for name, value in (metrics or {}).items():
            db.add(MetricModel(statement_id=statement.id, metric_name=name,
                               metric_value=value, metric_category="general"))
        for kind, severity in issues:
            db.add(InconsistencyModel(statement_id=statement.id, inconsistency_type=kind,
                                      description=f"{kind} detected", severity=severity))
        db.commit()
        db.refresh(statement)
        return statement

    return _add


@pytest.fixture()
def other_company(db: Session) -> CompanyModel:
    company = CompanyModel(name="Birch Retail", industry="Consumer")
    db.add(company)
    db.commit()
    db.refresh(company)
    return company


# ── API fixtures ─────────────────────────────────────────────────────────

@pytest.fixture
def test_settings() -> Settings:
    return Settings(
        _env_file=None,
        ai_tools_api_key="test-key",
        ai_tools_app_id="test-app",
        archive_id="archive-1",
    )


@pytest.fixture
def client(session_factory, test_settings):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_settings] = lambda: test_settings
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def admin_headers(sample_user):
    return {"X-User-ID": str(sample_user.id)}


@pytest.fixture
def analyst(db, sample_team):
    user = UserModel(email="junior@example.com", role="user", team_id=sample_team.id)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture
def analyst_headers(analyst):
    return {"X-User-ID": str(analyst.id)}
