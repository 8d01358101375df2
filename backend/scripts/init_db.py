"""근무 기록 DB 초기화 스크립트. employees, time_entries 테이블과 인덱스를 생성합니다.

이미 존재하는 테이블은 건드리지 않으므로 여러 번 실행해도 안전합니다.
"""
import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from timeclock.config import settings
from timeclock.database import engine, Base
import timeclock.models  # noqa: F401 - registers Employee, TimeEntry


def init_db():
    print(f"Initializing time clock database: {settings.DATABASE_URL}")
    Base.metadata.create_all(bind=engine)
    for table in Base.metadata.sorted_tables:
        print(f"  - {table.name}")
    print("Time clock tables are ready.")


if __name__ == "__main__":
    init_db()
