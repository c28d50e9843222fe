# careconnect/routers/auth.py

from fastapi import APIRouter, Depends
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from .. import schemas
from ..database import get_db
from ..errors import InvalidCredentials
from ..services import accounts
from ..utils import decode_jwt

router = APIRouter(prefix="/auth", tags=["Auth"])

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/user/login")


@router.get("/me", response_model=schemas.Me)
def me(token: str = Depends(oauth2_scheme), db: Session = Depends(get_db)):
    try:
        payload = decode_jwt(token)
    except ValueError as exc:
        raise InvalidCredentials("INVALID_TOKEN", "Invalid token") from exc

    role = payload.get("role")
    subject = payload.get("sub")
    if role not in accounts.ROLES or subject is None or not str(subject).isdigit():
        raise InvalidCredentials("INVALID_TOKEN", "Invalid token")

    account = accounts.require_account(db, role, int(subject))
    _, id_attr = accounts.ROLES[role]
    return schemas.Me(role=role, id=getattr(account, id_attr), name=account.name, email=account.email)
