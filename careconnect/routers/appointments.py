from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from .. import schemas
from ..database import get_db
from ..services import appointments

router = APIRouter(prefix="/doctor/appointment", tags=["Appointments"])


@router.post("/add", response_model=schemas.AppointmentCreated, status_code=status.HTTP_201_CREATED)
def add_appointment(body: schemas.AppointmentCreate, db: Session = Depends(get_db)):
    appointment = appointments.add_appointment(db, body.user_id, body.doctor_id, body.day, body.at)
    return schemas.AppointmentCreated(appointment_id=appointment.appointment_id)


@router.post("/confirm", response_model=schemas.AppointmentConfirmed)
def confirm_appointment(body: schemas.AppointmentConfirm, db: Session = Depends(get_db)):
    appointment = appointments.confirm_appointment(db, body.appointment_id, body.doctor_id)
    return schemas.AppointmentConfirmed(appointment_id=appointment.appointment_id, status=appointment.status)


@router.get("/user/{user_id}", response_model=List[schemas.UserAppointment])
def appointments_for_user(user_id: int, db: Session = Depends(get_db)):
    return [
        schemas.UserAppointment(
            appointment_id=item.appointment_id,
            doctor_id=item.doctor.doctor_id,
            doctor_name=item.doctor.name,
            date=item.appointment_time.strftime("%Y-%m-%d"),
            time=item.appointment_time.strftime("%H:%M"),
            status=item.status,
        )
        for item in appointments.list_for_user(db, user_id)
    ]


@router.get("/doctor/{doctor_id}", response_model=List[schemas.DoctorAppointment])
def appointments_for_doctor(doctor_id: int, db: Session = Depends(get_db)):
    return [
        schemas.DoctorAppointment(
            appointment_id=item.appointment_id,
            user_id=item.user.user_id,
            user_name=item.user.name,
            date=item.appointment_time.strftime("%Y-%m-%d"),
            time=item.appointment_time.strftime("%H:%M"),
            status=item.status,
        )
        for item in appointments.list_for_doctor(db, doctor_id)
    ]
