"""Request dispatch: the lifecycle of a PendingRequest and its assistant.

    pending --confirm--> accepted --complete--> completed

An assistant is ``busy`` exactly while it owns an ``accepted`` request. Every
transition that touches both rows runs in one transaction made of
compare-and-swap updates, so a lost race rolls back instead of leaving the
assistant and the request disagreeing.
"""

import logging
import re
from dataclasses import dataclass
from typing import Optional, Union

from sqlalchemy import select, update
from sqlalchemy.orm import Session, joinedload

from ..errors import AlreadyInTerminalState, Conflict, InvalidOwnership, NotFound, ValidationFailed
from ..identifiers import allocate_public_id, is_storable_id
from ..models import Assistant, AssistantStatus, PendingRequest, RequestStatus, utcnow
from .accounts import find_assistant, require_assistant, require_user

logger = logging.getLogger(__name__)

STORAGE_ID_PATTERN = re.compile(r"^[0-9a-f]{32}$")
PUBLIC_ID_PATTERN = re.compile(r"^[0-9]{1,19}$")


@dataclass
class CompletionResult:
    request: PendingRequest
    request_status: str
    assistant_status: str


# ────────────────────────────── LOOKUPS ──────────────────────────────

def find_request(db: Session, request_id: int) -> Optional[PendingRequest]:
    if not is_storable_id(request_id):
        return None
    return db.scalar(select(PendingRequest).where(PendingRequest.request_id == request_id))


def resolve_request(db: Session, reference: Union[int, str]) -> Optional[PendingRequest]:
    """Find a request by public ``request_id``, falling back to its storage id.

    Clients may hold either form. Public ids are tried first; the storage id
    lookup only happens when the reference looks like one.
    """
    if isinstance(reference, bool):
        return None
    if isinstance(reference, int):
        return find_request(db, reference)
    text = str(reference).strip().lower()
    if PUBLIC_ID_PATTERN.match(text):
        found = find_request(db, int(text))
        if found is not None:
            return found
    if STORAGE_ID_PATTERN.match(text):
        return db.get(PendingRequest, text)
    return None


# ────────────────────────────── TRANSITIONS ──────────────────────────────

def send_request(
    db: Session,
    user_id: int,
    assistant_id: int,
    category: str,
    description: Optional[str] = None,
    latitude: Optional[float] = None,
    longitude: Optional[float] = None,
) -> PendingRequest:
    """Propose a request to an available assistant.

    The assistant is not reserved: several users may propose to the same
    assistant and only a later confirm makes it busy.
    """
    assistant = find_assistant(db, assistant_id)
    if assistant is None or assistant.status != AssistantStatus.AVAILABLE.value:
        logger.info("Send rejected: assistant %s is not available", assistant_id)
        raise Conflict("ASSISTANT_UNAVAILABLE", "Assistant is not available")

    user = require_user(db, user_id)

    request = PendingRequest(
        request_id=allocate_public_id(db, PendingRequest.request_id),
        user=user,
        assistant=assistant,
        category=category,
        description=description,
        latitude=latitude,
        longitude=longitude,
        status=RequestStatus.PENDING.value,
        notified=False,
    )
    db.add(request)
    db.commit()
    db.refresh(request)
    logger.info(
        "Request %s sent by user %s to assistant %s", request.request_id, user_id, assistant_id
    )
    return request


def confirm_request(db: Session, request_id: int, assistant_id: int) -> PendingRequest:
    request = find_request(db, request_id)
    if request is None:
        raise NotFound("REQUEST_NOT_FOUND", "Request not found")
    assistant = require_assistant(db, assistant_id)

    if request.status == RequestStatus.COMPLETED.value:
        raise AlreadyInTerminalState("REQUEST_ALREADY_COMPLETED", "Request is already marked as completed")
    if request.status != RequestStatus.PENDING.value:
        raise Conflict("REQUEST_NOT_PENDING", "Request has already been accepted")
    if assistant.status != AssistantStatus.AVAILABLE.value:
        raise Conflict("ASSISTANT_BUSY", "Assistant is already serving another request")

    now = utcnow()
    claimed = db.execute(
        update(PendingRequest)
        .where(PendingRequest.id == request.id, PendingRequest.status == RequestStatus.PENDING.value)
        .values(
            status=RequestStatus.ACCEPTED.value,
            assistant_pk=assistant.id,
            notified=False,
            updated_at=now,
        )
        .execution_options(synchronize_session=False)
    ).rowcount
    if claimed != 1:
        db.rollback()
        logger.warning("Confirm of request %s lost a race: no longer pending", request_id)
        raise Conflict("REQUEST_NOT_PENDING", "Request has already been accepted")

    reserved = db.execute(
        update(Assistant)
        .where(Assistant.id == assistant.id, Assistant.status == AssistantStatus.AVAILABLE.value)
        .values(status=AssistantStatus.BUSY.value)
        .execution_options(synchronize_session=False)
    ).rowcount
    if reserved != 1:
        db.rollback()
        logger.warning("Confirm of request %s lost a race: assistant %s became busy", request_id, assistant_id)
        raise Conflict("ASSISTANT_BUSY", "Assistant is already serving another request")

    db.commit()
    db.refresh(request)
    logger.info("Request %s accepted by assistant %s", request_id, assistant_id)
    return request


def complete_request(
    db: Session, request_ref: Union[int, str, None], assistant_id: Optional[int]
) -> CompletionResult:
    if request_ref in (None, "") or assistant_id is None:
        raise ValidationFailed("VALIDATION_ERROR", "requestId and assistantId are required")

    assistant = require_assistant(db, assistant_id)
    request = resolve_request(db, request_ref)
    if request is None:
        raise NotFound("REQUEST_NOT_FOUND", "Request not found")

    if request.status == RequestStatus.COMPLETED.value:
        raise AlreadyInTerminalState("REQUEST_ALREADY_COMPLETED", "Request is already marked as completed")
    if request.assistant_pk != assistant.id:
        logger.warning(
            "Assistant %s tried to complete request %s it does not own", assistant_id, request.request_id
        )
        raise InvalidOwnership("REQUEST_NOT_OWNED", "This request does not belong to the specified assistant")
    if request.status != RequestStatus.ACCEPTED.value:
        raise Conflict("REQUEST_NOT_ACCEPTED", "Request has not been accepted yet")

    finished = db.execute(
        update(PendingRequest)
        .where(
            PendingRequest.id == request.id,
            PendingRequest.assistant_pk == assistant.id,
            PendingRequest.status == RequestStatus.ACCEPTED.value,
        )
        .values(status=RequestStatus.COMPLETED.value, updated_at=utcnow())
        .execution_options(synchronize_session=False)
    ).rowcount
    if finished != 1:
        db.rollback()
        raise Conflict("REQUEST_NOT_ACCEPTED", "Request changed state while completing")

    db.execute(
        update(Assistant)
        .where(Assistant.id == assistant.id)
        .values(status=AssistantStatus.AVAILABLE.value)
        .execution_options(synchronize_session=False)
    )
    db.commit()
    db.refresh(request)
    db.refresh(assistant)
    logger.info("Request %s completed by assistant %s", request.request_id, assistant_id)
    return CompletionResult(request=request, request_status=request.status, assistant_status=assistant.status)


# ────────────────────────────── READ SIDE ──────────────────────────────

def list_for_user(db: Session, user_id: int) -> list[PendingRequest]:
    user = require_user(db, user_id)
    query = (
        select(PendingRequest)
        .where(PendingRequest.user_pk == user.id)
        .options(joinedload(PendingRequest.user), joinedload(PendingRequest.assistant))
        .order_by(PendingRequest.created_at)
    )
    return list(db.scalars(query).all())


def list_for_assistant(db: Session, assistant_id: int) -> list[PendingRequest]:
    assistant = require_assistant(db, assistant_id)
    query = (
        select(PendingRequest)
        .where(PendingRequest.assistant_pk == assistant.id)
        .options(joinedload(PendingRequest.user), joinedload(PendingRequest.assistant))
        .order_by(PendingRequest.created_at)
    )
    return list(db.scalars(query).all())


def dequeue_notifications(db: Session, user_id: int) -> list[PendingRequest]:
    """Take the user's accepted-but-undelivered requests, marking them delivered.

    Each request is handed out at most once: a row is only returned if this
    call is the one that flipped its ``notified`` flag.
    """
    user = require_user(db, user_id)
    candidates = db.scalars(
        select(PendingRequest)
        .where(
            PendingRequest.user_pk == user.id,
            PendingRequest.status == RequestStatus.ACCEPTED.value,
            PendingRequest.notified.is_(False),
        )
        .options(joinedload(PendingRequest.assistant))
        .order_by(PendingRequest.updated_at)
    ).all()

    delivered = []
    for request in candidates:
        flipped = db.execute(
            update(PendingRequest)
            .where(PendingRequest.id == request.id, PendingRequest.notified.is_(False))
            .values(notified=True)
            .execution_options(synchronize_session=False)
        ).rowcount
        if flipped == 1:
            delivered.append(request)
    db.commit()
    if delivered:
        logger.info("Delivered %d acceptance notification(s) to user %s", len(delivered), user_id)
    return delivered


def check_status(db: Session, user_id: int) -> list[PendingRequest]:
    """Every request of the user with its current status; nothing is consumed."""
    user = require_user(db, user_id)
    query = (
        select(PendingRequest)
        .where(PendingRequest.user_pk == user.id)
        .options(joinedload(PendingRequest.assistant))
        .order_by(PendingRequest.created_at)
    )
    return list(db.scalars(query).all())


# ────────────────────────────── INVARIANT ──────────────────────────────

def reconcile_assistant_status(db: Session) -> int:
    """Recompute every assistant's status from its accepted requests.

    Returns the number of assistants whose stored status had drifted.
    """
    has_accepted = (
        select(PendingRequest.id)
        .where(
            PendingRequest.assistant_pk == Assistant.id,
            PendingRequest.status == RequestStatus.ACCEPTED.value,
        )
        .correlate(Assistant)
        .exists()
    )
    fixed = 0
    for assistant, busy in db.execute(select(Assistant, has_accepted)).all():
        expected = AssistantStatus.BUSY.value if busy else AssistantStatus.AVAILABLE.value
        if assistant.status != expected:
            logger.warning(
                "Assistant %s status drifted (%s), resetting to %s",
                assistant.assistant_id,
                assistant.status,
                expected,
            )
            assistant.status = expected
            fixed += 1
    db.commit()
    return fixed
