"""/v1/rooms - Room management"""

from fastapi import APIRouter, Depends, Request, Response
from sqlalchemy.orm import Session

from domus.api.v1.schemas import RoomCreate, RoomResponse, RoomUpdate
from domus.api.dependencies import commit_change, raise_http_error
from domus.domain.exceptions import DomainException
from domus.infrastructure.database.session import get_db
from domus.infrastructure.database.repositories import RoomRepository

router = APIRouter()


@router.post("/rooms", response_model=RoomResponse, status_code=201)
def create_room(body: RoomCreate, request: Request, db: Session = Depends(get_db)):
    try:
        db_room = RoomRepository(db).create_room(body.house_id, body.name, body.type)
        commit_change(db, request, "room", "created", db_room.id)
    except DomainException as e:
        raise_http_error(db, request, e)

    return RoomResponse.model_validate(db_room)


@router.patch("/rooms/{room_id}", response_model=RoomResponse)
def update_room(room_id: int, body: RoomUpdate, request: Request, db: Session = Depends(get_db)):
    try:
        db_room = RoomRepository(db).update_room(room_id, body.model_dump(exclude_unset=True))
        commit_change(db, request, "room", "updated", room_id)
    except DomainException as e:
        raise_http_error(db, request, e)

    return RoomResponse.model_validate(db_room)


@router.delete("/rooms/{room_id}", status_code=204)
def delete_room(room_id: int, request: Request, db: Session = Depends(get_db)):
    """Delete a room; its tenant and the tenant's payments go with it"""
    try:
        RoomRepository(db).delete_room(room_id)
        commit_change(db, request, "room", "deleted", room_id)
    except DomainException as e:
        raise_http_error(db, request, e)

    return Response(status_code=204)
