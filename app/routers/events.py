import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from .. import crud
from ..database import get_db
from ..results import raise_for
from ..schemas import EventCreate, EventMessage, EventOut, EventUpdate, Page, RegistrationIn, RegistrationOut
from ..validators import EventFilters, PageParams, event_filter_params, pagination_params, parse_uuid

router = APIRouter(prefix="/events", tags=["events"])
logger = logging.getLogger(__name__)


@router.get("/{event_id}", response_model=EventOut)
def get_event(event_id: str, db: Session = Depends(get_db)):
    event = crud.get_event(db, parse_uuid(event_id, "event"))
    if event is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Event not found")
    return event


@router.get("", response_model=Page[EventOut])
def list_events(
    params: PageParams = Depends(pagination_params),
    filters: EventFilters = Depends(event_filter_params),
    db: Session = Depends(get_db),
):
    rows, total = crud.list_events(db, params.page, params.size, type_id=filters.type_id, title=filters.title)
    return params.build(rows, total)


@router.post("", response_model=EventOut, status_code=status.HTTP_201_CREATED)
def create_event(payload: EventCreate, db: Session = Depends(get_db)):
    event = crud.create_event(db, payload.model_dump())
    logger.info("Event %s created", event.id)
    return event


@router.put("/{event_id}", response_model=EventOut)
def update_event(event_id: str, payload: EventUpdate, db: Session = Depends(get_db)):
    """Only the fields present in the body are changed."""
    result = crud.update_event(db, parse_uuid(event_id, "event"), payload.model_dump(exclude_unset=True))
    raise_for(result, "Event not found")
    return result.value


@router.delete("/{event_id}", response_model=EventMessage)
def delete_event(event_id: str, db: Session = Depends(get_db)):
    result = crud.delete_event(db, parse_uuid(event_id, "event"))
    raise_for(result, "Event not found")
    logger.info("Event %s deleted", event_id)
    return {"message": "Event deleted successfully", "event": result.value}


@router.get("/{event_id}/registrations", response_model=list[RegistrationOut])
def list_registrations(event_id: str, db: Session = Depends(get_db)):
    event = crud.get_event(db, parse_uuid(event_id, "event"))
    if event is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Event not found")
    return crud.list_registrations(db, event.id)


@router.post(
    "/{event_id}/register/{user_id}",
    response_model=RegistrationOut,
    status_code=status.HTTP_201_CREATED,
)
def register_for_event(event_id: str, user_id: str, payload: RegistrationIn, db: Session = Depends(get_db)):
    event = crud.get_event(db, parse_uuid(event_id, "event"))
    if event is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Event not found")
    user = crud.get_user(db, parse_uuid(user_id, "user"))
    if user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    result = crud.register_for_event(db, event.id, user.id, payload.user_type)
    raise_for(result, "Event not found")
    logger.info("User %s registered for event %s as %s", user.id, event.id, payload.user_type)
    return result.value
