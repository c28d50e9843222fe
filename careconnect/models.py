import enum
from datetime import datetime, timezone
from uuid import uuid4

from sqlalchemy import (
    Boolean,
    Column,
    Date,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from .database import Base


def new_storage_id() -> str:
    return uuid4().hex


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AssistantStatus(str, enum.Enum):
    AVAILABLE = "available"
    BUSY = "busy"


class RequestStatus(str, enum.Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    COMPLETED = "completed"


class AppointmentStatus(str, enum.Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"


class User(Base):
    __tablename__ = "users"
    id = Column(String(32), primary_key=True, default=new_storage_id)
    user_id = Column(Integer, unique=True, index=True, nullable=False)
    name = Column(String(100), nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    password_hash = Column(String(255), nullable=False)
    address = Column(String, nullable=True)
    dob = Column(Date, nullable=True)
    gender = Column(String(50), nullable=True)
    number = Column(String(20), nullable=True)
    profile_picture = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    requests = relationship("PendingRequest", back_populates="user")


class Assistant(Base):
    __tablename__ = "assistants"
    id = Column(String(32), primary_key=True, default=new_storage_id)
    assistant_id = Column(Integer, unique=True, index=True, nullable=False)
    name = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    password_hash = Column(String(255), nullable=False)
    dob = Column(Date, nullable=True)
    gender = Column(String(50), nullable=True)
    number = Column(String(20), nullable=True)
    address = Column(String, nullable=True)
    profile_picture = Column(String, nullable=True)
    id_proof = Column(String, nullable=True)
    latitude = Column(Float, nullable=False)
    longitude = Column(Float, nullable=False)
    status = Column(String(16), default=AssistantStatus.AVAILABLE.value, nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    requests = relationship("PendingRequest", back_populates="assistant")


class Doctor(Base):
    __tablename__ = "doctors"
    id = Column(String(32), primary_key=True, default=new_storage_id)
    doctor_id = Column(Integer, unique=True, index=True, nullable=False)
    name = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    password_hash = Column(String(255), nullable=False)
    gender = Column(String(50), nullable=False)
    dob = Column(Date, nullable=True)
    profile_picture = Column(String, nullable=True)
    reg_no = Column(String(100), nullable=False)
    id_proof = Column(String, nullable=True)
    specialization = Column(String(255), nullable=False)
    experience = Column(Integer, nullable=False)
    address = Column(String, nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)


class PendingRequest(Base):
    __tablename__ = "pending_requests"
    id = Column(String(32), primary_key=True, default=new_storage_id)
    request_id = Column(Integer, unique=True, index=True, nullable=False)
    user_pk = Column(String(32), ForeignKey("users.id"), nullable=False, index=True)
    assistant_pk = Column(String(32), ForeignKey("assistants.id"), nullable=True, index=True)
    category = Column(String(100), nullable=False)
    description = Column(Text, nullable=True)
    latitude = Column(Float, nullable=True)
    longitude = Column(Float, nullable=True)
    status = Column(String(16), default=RequestStatus.PENDING.value, nullable=False, index=True)
    notified = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    user = relationship("User", back_populates="requests")
    assistant = relationship("Assistant", back_populates="requests")


class Appointment(Base):
    __tablename__ = "appointments"
    id = Column(String(32), primary_key=True, default=new_storage_id)
    appointment_id = Column(Integer, unique=True, index=True, nullable=False)
    user_pk = Column(String(32), ForeignKey("users.id"), nullable=False, index=True)
    doctor_pk = Column(String(32), ForeignKey("doctors.id"), nullable=False, index=True)
    appointment_time = Column(DateTime, nullable=False)
    status = Column(String(16), default=AppointmentStatus.PENDING.value, nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    user = relationship("User")
    doctor = relationship("Doctor")


class Post(Base):
    __tablename__ = "posts"
    id = Column(String(32), primary_key=True, default=new_storage_id)
    user_pk = Column(String(32), ForeignKey("users.id"), nullable=False, index=True)
    content = Column(Text, nullable=False)
    media = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    user = relationship("User")
    comments = relationship("Comment", back_populates="post", order_by="Comment.created_at")
    likes = relationship("PostLike", back_populates="post", cascade="all, delete-orphan")


class PostLike(Base):
    __tablename__ = "post_likes"
    __table_args__ = (UniqueConstraint("post_pk", "user_pk", name="uq_post_like"),)
    id = Column(Integer, primary_key=True, autoincrement=True)
    post_pk = Column(String(32), ForeignKey("posts.id"), nullable=False, index=True)
    user_pk = Column(String(32), ForeignKey("users.id"), nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    post = relationship("Post", back_populates="likes")
    user = relationship("User")


class Comment(Base):
    __tablename__ = "comments"
    id = Column(String(32), primary_key=True, default=new_storage_id)
    user_pk = Column(String(32), ForeignKey("users.id"), nullable=False)
    post_pk = Column(String(32), ForeignKey("posts.id"), nullable=False, index=True)
    content = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    user = relationship("User")
    post = relationship("Post", back_populates="comments")


class Notification(Base):
    __tablename__ = "notifications"
    id = Column(String(32), primary_key=True, default=new_storage_id)
    user_pk = Column(String(32), ForeignKey("users.id"), nullable=False, index=True)
    post_pk = Column(String(32), ForeignKey("posts.id"), nullable=True)
    content = Column(String(255), nullable=False)
    is_read = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
