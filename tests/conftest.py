import pytest
import os
from types import SimpleNamespace
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

# Set env before importing app components
os.environ["APP_ENV"] = "testing"
os.environ["DATABASE_URL"] = "sqlite:///:memory:"

from hrtalent.database import Base, get_db
from hrtalent.main import app
from fastapi.testclient import TestClient

# SQLite in-memory database configuration
SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

# pysqlite defers BEGIN on its own; emit it explicitly so SAVEPOINTs nest correctly
@event.listens_for(engine, "connect")
def _disable_pysqlite_begin(dbapi_connection, connection_record):
    dbapi_connection.isolation_level = None

@event.listens_for(engine, "begin")
def _emit_begin(conn):
    conn.exec_driver_sql("BEGIN")

TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

@pytest.fixture(scope="session", autouse=True)
def setup_database():
    """Create tables once for the whole test session."""
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)

@pytest.fixture(scope="function")
def db_session():
    """
    Get a clean database session for each test function with rollback safety.

    Service commits and rollbacks act on a SAVEPOINT; the outer transaction
    is discarded after the test.
    """
    connection = engine.connect()
    transaction = connection.begin()
    session = TestingSessionLocal(bind=connection, join_transaction_mode="create_savepoint")

    yield session

    session.close()
    if transaction.is_active:
        transaction.rollback()
    connection.close()

@pytest.fixture(scope="function")
def department(db_session):
    from hrtalent.models.department import Department
    dept = Department(name="Engenharia", code="ENG")
    db_session.add(dept)
    db_session.commit()
    return dept

@pytest.fixture(scope="function")
def other_department(db_session):
    from hrtalent.models.department import Department
    dept = Department(name="Financeiro", code="FIN")
    db_session.add(dept)
    db_session.commit()
    return dept

def _make_user(db_session, email, department=None, **kwargs):
    from hrtalent.models.user import User
    user = User(
        email=email,
        full_name=kwargs.pop("full_name", email.split("@")[0].title()),
        department_id=department.id if department else None,
        is_active=kwargs.pop("is_active", True),
        **kwargs,
    )
    db_session.add(user)
    db_session.commit()
    return user

@pytest.fixture(scope="function")
def make_user(db_session):
    def _factory(email, department=None, **kwargs):
        return _make_user(db_session, email, department, **kwargs)
    return _factory

@pytest.fixture(scope="function")
def director_user(db_session, department):
    return _make_user(db_session, "director@talent.test", department, is_director=True, full_name="Diretora Geral")

@pytest.fixture(scope="function")
def leader_user(db_session, department):
    return _make_user(db_session, "leader@talent.test", department, is_leader=True, full_name="Líder Técnico")

@pytest.fixture(scope="function")
def employee(db_session, department):
    return _make_user(db_session, "employee@talent.test", department, full_name="Ana Souza")

@pytest.fixture(scope="function")
def salary_structure(db_session, department):
    """
    One engineering track:

        junior   C1  base 10000
        junior2  C1  base 10000  (same class, horizontal sibling)
        pleno    C2  base 15000

    Interlevels A (0%), B (5%), C (10%), D (15%).
    """
    from hrtalent.models.salary import SalaryClass, JobPosition, SalaryLevel
    from hrtalent.models.career_track import CareerTrack, TrackPosition

    c1 = SalaryClass(code="C1", name="Classe 1", order_index=1)
    c2 = SalaryClass(code="C2", name="Classe 2", order_index=2)
    dev_jr = JobPosition(name="Desenvolvedor Júnior")
    dev_jr2 = JobPosition(name="Analista Júnior")
    dev_pl = JobPosition(name="Desenvolvedor Pleno")
    levels = [
        SalaryLevel(name="A", percentage=0.0, order_index=1),
        SalaryLevel(name="B", percentage=5.0, order_index=2),
        SalaryLevel(name="C", percentage=10.0, order_index=3),
        SalaryLevel(name="D", percentage=15.0, order_index=4),
    ]
    db_session.add_all([c1, c2, dev_jr, dev_jr2, dev_pl, *levels])
    db_session.flush()

    track = CareerTrack(name="Engenharia de Software", department_id=department.id)
    junior = TrackPosition(position_id=dev_jr.id, class_id=c1.id, base_salary=10000.0, order_index=1)
    junior2 = TrackPosition(position_id=dev_jr2.id, class_id=c1.id, base_salary=10000.0, order_index=2)
    pleno = TrackPosition(position_id=dev_pl.id, class_id=c2.id, base_salary=15000.0, order_index=3)
    track.positions = [junior, junior2, pleno]
    db_session.add(track)
    db_session.commit()

    return SimpleNamespace(
        track=track,
        classes=(c1, c2),
        junior=junior,
        junior2=junior2,
        pleno=pleno,
        levels=levels,
        level_a=levels[0],
        level_b=levels[1],
        level_c=levels[2],
        level_d=levels[3],
    )

@pytest.fixture(scope="function")
def get_token():
    """Helper fixture to create access tokens for a user."""
    from hrtalent.services.auth import create_access_token

    def _get_token(user):
        return create_access_token(data={
            "sub": user.email,
            "role": user.role.value,
            "type": "access"
        })
    return _get_token

@pytest.fixture(scope="function")
def auth_headers(get_token):
    def _headers(user):
        return {"Authorization": f"Bearer {get_token(user)}"}
    return _headers

@pytest.fixture(scope="function")
def client(db_session):
    """Get a TestClient that uses the test database session via dependency override."""
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
