import logging
from datetime import date, datetime, time

from sqlalchemy import select, update
from sqlalchemy.orm import Session, joinedload

from ..errors import Conflict, InvalidOwnership, NotFound
from ..identifiers import allocate_public_id, is_storable_id
from ..models import Appointment, AppointmentStatus
from .accounts import require_doctor, require_user

logger = logging.getLogger(__name__)


def add_appointment(db: Session, user_id: int, doctor_id: int, day: date, at: time) -> Appointment:
    user = require_user(db, user_id)
    doctor = require_doctor(db, doctor_id)

    appointment = Appointment(
        appointment_id=allocate_public_id(db, Appointment.appointment_id),
        user=user,
        doctor=doctor,
        appointment_time=datetime.combine(day, at),
        status=AppointmentStatus.PENDING.value,
    )
    db.add(appointment)
    db.commit()
    db.refresh(appointment)
    logger.info("Appointment %s booked by user %s with doctor %s", appointment.appointment_id, user_id, doctor_id)
    return appointment


def confirm_appointment(db: Session, appointment_id: int, doctor_id: int) -> Appointment:
    appointment = None
    if is_storable_id(appointment_id):
        appointment = db.scalar(select(Appointment).where(Appointment.appointment_id == appointment_id))
    if appointment is None:
        raise NotFound("APPOINTMENT_NOT_FOUND", "Appointment not found")
    doctor = require_doctor(db, doctor_id)
    if appointment.doctor_pk != doctor.id:
        raise InvalidOwnership("APPOINTMENT_NOT_OWNED", "This appointment does not belong to the specified doctor")

    confirmed = db.execute(
        update(Appointment)
        .where(Appointment.id == appointment.id, Appointment.status == AppointmentStatus.PENDING.value)
        .values(status=AppointmentStatus.CONFIRMED.value)
        .execution_options(synchronize_session=False)
    ).rowcount
    if confirmed != 1:
        db.rollback()
        raise Conflict("APPOINTMENT_NOT_PENDING", "Appointment is already confirmed")

    db.commit()
    db.refresh(appointment)
    logger.info("Appointment %s confirmed by doctor %s", appointment_id, doctor_id)
    return appointment


def list_for_user(db: Session, user_id: int) -> list[Appointment]:
    user = require_user(db, user_id)
    query = (
        select(Appointment)
        .where(Appointment.user_pk == user.id)
        .options(joinedload(Appointment.doctor))
        .order_by(Appointment.appointment_time)
    )
    return list(db.scalars(query).all())


def list_for_doctor(db: Session, doctor_id: int) -> list[Appointment]:
    doctor = require_doctor(db, doctor_id)
    query = (
        select(Appointment)
        .where(Appointment.doctor_pk == doctor.id)
        .options(joinedload(Appointment.user))
        .order_by(Appointment.appointment_time)
    )
    return list(db.scalars(query).all())
