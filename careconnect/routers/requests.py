from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from .. import schemas
from ..database import get_db
from ..models import PendingRequest
from ..services import dispatch

router = APIRouter(prefix="/pending", tags=["Requests"])


def _summary(req: PendingRequest) -> schemas.RequestSummary:
    return schemas.RequestSummary(
        requestId=req.request_id,
        userId=req.user.user_id,
        userName=req.user.name,
        assistantId=req.assistant.assistant_id if req.assistant else None,
        assistantName=req.assistant.name if req.assistant else None,
        category=req.category,
        description=req.description,
        latitude=req.latitude,
        longitude=req.longitude,
        created_at=req.created_at,
        status=req.status,
    )


@router.post("/send", response_model=schemas.SendResult, status_code=status.HTTP_201_CREATED)
def send_request(body: schemas.SendRequest, db: Session = Depends(get_db)):
    request = dispatch.send_request(
        db,
        user_id=body.userId,
        assistant_id=body.assistantId,
        category=body.category,
        description=body.description,
        latitude=body.latitude,
        longitude=body.longitude,
    )
    return schemas.SendResult(requestId=request.request_id)


@router.get("/requests/user/{user_id}", response_model=List[schemas.RequestSummary])
def requests_for_user(user_id: int, db: Session = Depends(get_db)):
    return [_summary(req) for req in dispatch.list_for_user(db, user_id)]


@router.get("/requests/{assistant_id}", response_model=List[schemas.RequestSummary])
def requests_for_assistant(assistant_id: int, db: Session = Depends(get_db)):
    return [_summary(req) for req in dispatch.list_for_assistant(db, assistant_id)]


@router.post("/confirm", response_model=schemas.ConfirmResult)
def confirm_request(body: schemas.ConfirmRequest, db: Session = Depends(get_db)):
    request = dispatch.confirm_request(db, request_id=body.requestId, assistant_id=body.assistantId)
    return schemas.ConfirmResult(requestId=request.request_id)


@router.post("/completed", response_model=schemas.CompleteResult)
def complete_request(body: schemas.CompleteRequest, db: Session = Depends(get_db)):
    result = dispatch.complete_request(db, request_ref=body.requestId, assistant_id=body.assistantId)
    return schemas.CompleteResult(requestStatus=result.request_status, assistantStatus=result.assistant_status)


@router.get("/notification/{user_id}", response_model=List[schemas.AcceptedNotification])
def accepted_notifications(user_id: int, db: Session = Depends(get_db)):
    # Delivering a notification consumes it
    return [
        schemas.AcceptedNotification(
            requestId=req.request_id,
            latitude=req.latitude,
            longitude=req.longitude,
            assistantId=req.assistant.assistant_id if req.assistant else None,
            assistantName=req.assistant.name if req.assistant else None,
        )
        for req in dispatch.dequeue_notifications(db, user_id)
    ]


@router.get("/check/{user_id}", response_model=List[schemas.RequestStatusOut])
def check_status(user_id: int, db: Session = Depends(get_db)):
    return [
        schemas.RequestStatusOut(
            requestId=req.request_id,
            status=req.status,
            latitude=req.latitude,
            longitude=req.longitude,
            assistantId=req.assistant.assistant_id if req.assistant else None,
            assistantName=req.assistant.name if req.assistant else None,
        )
        for req in dispatch.check_status(db, user_id)
    ]
