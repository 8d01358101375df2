import hmac
import logging

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session
from jose import JWTError, jwt
from timeclock.database import get_db
from timeclock.errors import AdminPrivilegesRequired
from timeclock.models.employee import Employee
from timeclock.config import settings
from timeclock.services.auth_service import ALGORITHM

logger = logging.getLogger(__name__)

security = HTTPBearer()


def decode_token(token: str) -> dict:
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[ALGORITHM])
        return payload
    except JWTError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
        )


def get_current_employee(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    db: Session = Depends(get_db),
) -> Employee:
    payload = decode_token(credentials.credentials)
    employee_id = payload.get("sub")
    if employee_id is None:
        raise HTTPException(status_code=401, detail="Invalid token payload")

    employee = db.query(Employee).filter(Employee.employee_id == int(employee_id)).first()
    if not employee:
        raise HTTPException(status_code=401, detail="Employee not found")
    return employee


def require_admin(current_employee: Employee = Depends(get_current_employee)) -> Employee:
    if not current_employee.is_admin:
        raise AdminPrivilegesRequired()
    return current_employee


def verify_cron_secret(
    credentials: HTTPAuthorizationCredentials = Depends(HTTPBearer(auto_error=False)),
) -> None:
    """스케줄러 호출 인증. CRON_SECRET이 비어 있으면 모든 호출을 거부합니다."""
    expected = settings.CRON_SECRET or ""
    provided = credentials.credentials if credentials else ""
    if not expected or not hmac.compare_digest(provided.encode(), expected.encode()):
        logger.warning("[cron] unauthorized auto-clockout trigger attempt")
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")
