import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from werkzeug.security import generate_password_hash
from timeclock.database import Base, get_db
from timeclock.main import app
from timeclock.models.employee import Employee
from timeclock.models.time_entry import TimeEntry
from timeclock.utils import clock
from datetime import datetime

TEST_DB_URL = "sqlite:///./test_timeclock.db"

engine = create_engine(TEST_DB_URL, connect_args={"check_same_thread": False})
TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def override_get_db():
    db = TestingSession()
    try:
        yield db
    finally:
        db.close()


app.dependency_overrides[get_db] = override_get_db


@pytest.fixture(autouse=True)
def setup_db():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db():
    db = TestingSession()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def freeze_clock(monkeypatch):
    """clock.now()를 고정 시각으로 바꾸는 헬퍼를 돌려준다. 여러 번 호출해 시간을 진행시킬 수 있다."""

    def _freeze(value: datetime) -> datetime:
        monkeypatch.setattr(clock, "now", lambda: value)
        return value

    return _freeze


def make_employee(db, name: str, pin: str, is_admin: bool = False) -> Employee:
    employee = Employee(
        name=name,
        # 테스트 속도를 위해 가벼운 해시 설정을 사용한다.
        pin_hash=generate_password_hash(pin, method="pbkdf2:sha256:1000"),
        admin_pin=pin,
        is_admin=is_admin,
    )
    db.add(employee)
    db.commit()
    db.refresh(employee)
    return employee


def make_entry(db, employee_id: int, clock_in: datetime, clock_out: datetime = None, **fields) -> TimeEntry:
    entry = TimeEntry(employee_id=employee_id, clock_in=clock_in, **fields)
    if clock_out is not None:
        entry.close(clock_out)
    db.add(entry)
    db.commit()
    db.refresh(entry)
    return entry


@pytest.fixture
def seed_employees(db):
    employees = {
        "admin": make_employee(db, "관리자", "1234", is_admin=True),
        "staff": make_employee(db, "김직원", "5678"),
        "staff2": make_employee(db, "이직원", "2468"),
    }
    return employees


def get_token(client, pin: str) -> str:
    resp = client.post("/api/auth/login", json={"pin": pin})
    assert resp.status_code == 200, resp.text
    return resp.json()["access_token"]


def auth_headers(client, pin: str) -> dict:
    return {"Authorization": f"Bearer {get_token(client, pin)}"}
