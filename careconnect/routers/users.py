from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from .. import schemas
from ..database import get_db
from ..services import accounts

router = APIRouter(prefix="/user", tags=["Users"])


@router.post("/register", response_model=schemas.UserRegistered, status_code=status.HTTP_201_CREATED)
def register(body: schemas.UserRegister, db: Session = Depends(get_db)):
    user = accounts.register_user(db, body)
    return schemas.UserRegistered(user_id=user.user_id)


@router.post("/login", response_model=schemas.UserLogin)
def login(body: schemas.LoginRequest, db: Session = Depends(get_db)):
    user, token = accounts.authenticate(db, "user", body.email, body.password)
    return schemas.UserLogin(user_id=user.user_id, name=user.name, email=user.email, access_token=token)
