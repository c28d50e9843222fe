from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from .. import schemas
from ..database import get_db
from ..services import accounts

router = APIRouter(prefix="/doctor", tags=["Doctors"])


@router.post("/register", response_model=schemas.DoctorRegistered, status_code=status.HTTP_201_CREATED)
def register(body: schemas.DoctorRegister, db: Session = Depends(get_db)):
    doctor = accounts.register_doctor(db, body)
    return schemas.DoctorRegistered(doctor_id=doctor.doctor_id)


@router.post("/login", response_model=schemas.DoctorLogin)
def login(body: schemas.LoginRequest, db: Session = Depends(get_db)):
    doctor, token = accounts.authenticate(db, "doctor", body.email, body.password)
    return schemas.DoctorLogin(doctor_id=doctor.doctor_id, name=doctor.name, email=doctor.email, access_token=token)


@router.get("/all", response_model=List[schemas.DoctorOut])
def all_doctors(db: Session = Depends(get_db)):
    return accounts.list_doctors(db)
