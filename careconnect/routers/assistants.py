from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from .. import schemas
from ..database import get_db
from ..services import accounts

router = APIRouter(prefix="/assistant", tags=["Assistants"])


@router.post("/register", response_model=schemas.AssistantRegistered, status_code=status.HTTP_201_CREATED)
def register(body: schemas.AssistantRegister, db: Session = Depends(get_db)):
    assistant = accounts.register_assistant(db, body)
    return schemas.AssistantRegistered(
        assistant_id=assistant.assistant_id, name=assistant.name, email=assistant.email
    )


@router.post("/login", response_model=schemas.AssistantLogin)
def login(body: schemas.LoginRequest, db: Session = Depends(get_db)):
    assistant, token = accounts.authenticate(db, "assistant", body.email, body.password)
    return schemas.AssistantLogin(
        assistant_id=assistant.assistant_id, name=assistant.name, email=assistant.email, access_token=token
    )


@router.get("/all", response_model=List[schemas.AssistantOut])
def available_assistants(
    latitude: Optional[float] = Query(default=None, ge=-90, le=90),
    longitude: Optional[float] = Query(default=None, ge=-180, le=180),
    db: Session = Depends(get_db),
):
    ranked = accounts.list_available_assistants(db, latitude=latitude, longitude=longitude)
    results = []
    for assistant, distance in ranked:
        item = schemas.AssistantOut.model_validate(assistant)
        item.distance_m = round(distance, 1) if distance is not None else None
        results.append(item)
    return results
