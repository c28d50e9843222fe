import logging
from typing import Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from .. import schemas
from ..errors import Conflict, InvalidCredentials, NotFound
from ..geo import haversine_distance_meters
from ..identifiers import allocate_public_id, is_storable_id
from ..models import Assistant, AssistantStatus, Doctor, User
from ..utils import create_jwt, hash_password, verify_password

logger = logging.getLogger(__name__)

# role -> (model, public id attribute)
ROLES = {
    "user": (User, "user_id"),
    "assistant": (Assistant, "assistant_id"),
    "doctor": (Doctor, "doctor_id"),
}


def normalize_email(email: str) -> str:
    return email.strip().lower()


# ────────────────────────────── LOOKUPS ──────────────────────────────

def find_account(db: Session, role: str, public_id: int):
    if not is_storable_id(public_id):
        return None
    model, id_attr = ROLES[role]
    return db.scalar(select(model).where(getattr(model, id_attr) == public_id))


def require_account(db: Session, role: str, public_id: int):
    account = find_account(db, role, public_id)
    if account is None:
        raise NotFound(f"{role.upper()}_NOT_FOUND", f"{role.capitalize()} not found")
    return account


def find_assistant(db: Session, assistant_id: int) -> Optional[Assistant]:
    return find_account(db, "assistant", assistant_id)


def require_user(db: Session, user_id: int) -> User:
    return require_account(db, "user", user_id)


def require_assistant(db: Session, assistant_id: int) -> Assistant:
    return require_account(db, "assistant", assistant_id)


def require_doctor(db: Session, doctor_id: int) -> Doctor:
    return require_account(db, "doctor", doctor_id)


# ────────────────────────────── REGISTRATION ──────────────────────────────

def _register(db: Session, role: str, fields: dict, password: str):
    model, id_attr = ROLES[role]
    email = normalize_email(fields.pop("email"))
    if db.scalar(select(model.id).where(model.email == email)) is not None:
        logger.info("Registration rejected: %s email already in use", role)
        raise Conflict("EMAIL_EXISTS", "Email already exists")

    account = model(**fields, email=email, password_hash=hash_password(password))
    setattr(account, id_attr, allocate_public_id(db, getattr(model, id_attr)))
    db.add(account)
    db.commit()
    db.refresh(account)
    logger.info("Registered %s %s", role, getattr(account, id_attr))
    return account


def register_user(db: Session, data: schemas.UserRegister) -> User:
    return _register(db, "user", data.model_dump(exclude={"password"}), data.password)


def register_assistant(db: Session, data: schemas.AssistantRegister) -> Assistant:
    fields = data.model_dump(exclude={"password"})
    fields["status"] = AssistantStatus.AVAILABLE.value
    return _register(db, "assistant", fields, data.password)


def register_doctor(db: Session, data: schemas.DoctorRegister) -> Doctor:
    return _register(db, "doctor", data.model_dump(exclude={"password"}), data.password)


# ────────────────────────────── LOGIN ──────────────────────────────

def authenticate(db: Session, role: str, email: str, password: str):
    """Return ``(account, access_token)`` for valid credentials."""
    model, id_attr = ROLES[role]
    account = db.scalar(select(model).where(model.email == normalize_email(email)))
    if account is None:
        raise NotFound(f"{role.upper()}_NOT_FOUND", f"{role.capitalize()} not found")
    if not verify_password(password, account.password_hash):
        logger.info("Invalid credentials for %s %s", role, getattr(account, id_attr))
        raise InvalidCredentials("INVALID_CREDENTIALS", "Invalid credentials")

    token = create_jwt({"sub": str(getattr(account, id_attr)), "role": role})
    return account, token


# ────────────────────────────── DIRECTORIES ──────────────────────────────

def list_available_assistants(
    db: Session, latitude: Optional[float] = None, longitude: Optional[float] = None
) -> list[tuple[Assistant, Optional[float]]]:
    """Available assistants, nearest first when a reference point is given.

    Distances are informational; the client still picks the assistant.
    """
    assistants = db.scalars(
        select(Assistant).where(Assistant.status == AssistantStatus.AVAILABLE.value).order_by(Assistant.created_at)
    ).all()
    if latitude is None or longitude is None:
        return [(assistant, None) for assistant in assistants]

    ranked = [
        (assistant, haversine_distance_meters(latitude, longitude, assistant.latitude, assistant.longitude))
        for assistant in assistants
    ]
    ranked.sort(key=lambda item: item[1])
    return ranked


def list_doctors(db: Session) -> list[Doctor]:
    return list(db.scalars(select(Doctor).order_by(Doctor.created_at)).all())
