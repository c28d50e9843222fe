from datetime import date, datetime, time
from typing import List, Optional, Union

from pydantic import BaseModel, Field


# ────────────────────────────── ACCOUNTS ──────────────────────────────

class LoginRequest(BaseModel):
    email: str = Field(min_length=3, max_length=255)
    password: str = Field(min_length=1)


class UserRegister(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    email: str = Field(min_length=3, max_length=255)
    password: str = Field(min_length=6, max_length=72)
    address: Optional[str] = None
    dob: Optional[date] = None
    gender: Optional[str] = Field(default=None, max_length=50)
    number: Optional[str] = Field(default=None, max_length=20)
    profile_picture: Optional[str] = None


class AssistantRegister(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    email: str = Field(min_length=3, max_length=255)
    password: str = Field(min_length=6, max_length=72)
    latitude: float = Field(ge=-90, le=90)
    longitude: float = Field(ge=-180, le=180)
    dob: Optional[date] = None
    gender: Optional[str] = Field(default=None, max_length=50)
    number: Optional[str] = Field(default=None, max_length=20)
    address: Optional[str] = None
    profile_picture: Optional[str] = None
    id_proof: Optional[str] = None


class DoctorRegister(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    email: str = Field(min_length=3, max_length=255)
    password: str = Field(min_length=6, max_length=72)
    gender: str = Field(min_length=1, max_length=50)
    reg_no: str = Field(min_length=1, max_length=100)
    specialization: str = Field(min_length=1, max_length=255)
    experience: int = Field(ge=0)
    address: str = Field(min_length=1)
    dob: Optional[date] = None
    profile_picture: Optional[str] = None
    id_proof: Optional[str] = None


class UserRegistered(BaseModel):
    message: str = "User registered successfully"
    user_id: int


class AssistantRegistered(BaseModel):
    assistant_id: int
    name: str
    email: str


class DoctorRegistered(BaseModel):
    message: str = "Doctor registered successfully"
    doctor_id: int


class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"


class UserLogin(Token):
    user_id: int
    name: str
    email: str


class AssistantLogin(Token):
    assistant_id: int
    name: str
    email: str


class DoctorLogin(Token):
    doctor_id: int
    name: str
    email: str


class Me(BaseModel):
    role: str
    id: int
    name: str
    email: str


class AssistantOut(BaseModel):
    assistant_id: int
    name: str
    latitude: float
    longitude: float
    profile_picture: Optional[str]
    number: Optional[str]
    distance_m: Optional[float] = None

    class Config:
        from_attributes = True


class DoctorOut(BaseModel):
    doctor_id: int
    name: str
    profile_picture: Optional[str]
    gender: str
    specialization: str
    experience: int
    address: str

    class Config:
        from_attributes = True


# ────────────────────────────── DISPATCH ──────────────────────────────

class SendRequest(BaseModel):
    userId: int
    assistantId: int
    category: str = Field(min_length=1, max_length=100)
    description: Optional[str] = None
    latitude: Optional[float] = Field(default=None, ge=-90, le=90)
    longitude: Optional[float] = Field(default=None, ge=-180, le=180)


class SendResult(BaseModel):
    message: str = "Request sent successfully"
    requestId: int


class ConfirmRequest(BaseModel):
    requestId: int
    assistantId: int


class ConfirmResult(BaseModel):
    message: str = "Request confirmed"
    requestId: int


class CompleteRequest(BaseModel):
    # public request id or storage id
    requestId: Optional[Union[int, str]] = None
    assistantId: Optional[int] = None


class CompleteResult(BaseModel):
    message: str = "Request completed successfully"
    requestStatus: str
    assistantStatus: str


class RequestSummary(BaseModel):
    requestId: int
    userId: int
    userName: str
    assistantId: Optional[int]
    assistantName: Optional[str]
    category: str
    description: Optional[str]
    latitude: Optional[float]
    longitude: Optional[float]
    created_at: datetime
    status: str


class AcceptedNotification(BaseModel):
    requestId: int
    latitude: Optional[float]
    longitude: Optional[float]
    assistantId: Optional[int]
    assistantName: Optional[str]


class RequestStatusOut(BaseModel):
    requestId: int
    status: str
    latitude: Optional[float]
    longitude: Optional[float]
    assistantId: Optional[int]
    assistantName: Optional[str]


# ────────────────────────────── APPOINTMENTS ──────────────────────────────

class AppointmentCreate(BaseModel):
    user_id: int
    doctor_id: int
    day: date = Field(alias="date")
    at: time = Field(alias="time")


class AppointmentConfirm(BaseModel):
    appointment_id: int
    doctor_id: int


class AppointmentCreated(BaseModel):
    message: str = "Appointment added successfully"
    appointment_id: int


class AppointmentConfirmed(BaseModel):
    message: str = "Appointment confirmed"
    appointment_id: int
    status: str


class UserAppointment(BaseModel):
    appointment_id: int
    doctor_id: int
    doctor_name: str
    date: str
    time: str
    status: str


class DoctorAppointment(BaseModel):
    appointment_id: int
    user_id: int
    user_name: str
    date: str
    time: str
    status: str


# ────────────────────────────── FEED ──────────────────────────────

class PostCreate(BaseModel):
    user_id: int
    content: str = Field(min_length=1)
    media: Optional[str] = None


class CommentCreate(BaseModel):
    user_id: int
    post_id: str
    content: str = Field(min_length=1)


class LikeToggle(BaseModel):
    user_id: int
    post_id: str


class PostCreated(BaseModel):
    message: str = "Post added successfully"
    post_id: str


class CommentCreated(BaseModel):
    message: str = "Comment added successfully"
    comment_id: str


class LikeResult(BaseModel):
    message: str = "Successfully"
    liked: bool
    likes: int


class CommentOut(BaseModel):
    comment_id: str
    user_id: int
    user_name: str
    user_image: Optional[str] = None
    content: str
    created_at: datetime


class PostOut(BaseModel):
    post_id: str
    user_id: int
    user_name: str
    user_image: Optional[str] = None
    content: str
    image: Optional[str]
    created_at: datetime
    comments: List[CommentOut]
    likes: int = 0
    liked: bool = False


class FeedNotification(BaseModel):
    notification_id: str
    content: str
    created_at: datetime
    post_id: Optional[str]
