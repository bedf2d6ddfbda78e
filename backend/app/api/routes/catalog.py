from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import select
from sqlalchemy.orm import Session

from app.api.deps import get_current_principal, get_db, require_schedulers
from app.core.security import Principal
from app.models.catalog_course import CatalogCourse
from app.models.instructor import Instructor
from app.models.room import Room
from app.schemas.catalog import (
    CatalogCourseCreate,
    CatalogCourseOut,
    InstructorCreate,
    InstructorOut,
    RoomCreate,
    RoomOut,
)

router = APIRouter()


@router.get("/courses", response_model=list[CatalogCourseOut])
def list_courses(principal: Principal = Depends(get_current_principal), db: Session = Depends(get_db)) -> list[CatalogCourseOut]:
    return list(db.execute(select(CatalogCourse).order_by(CatalogCourse.code)).scalars())


@router.post("/courses", response_model=CatalogCourseOut, status_code=status.HTTP_201_CREATED)
def create_course(
    payload: CatalogCourseCreate,
    principal: Principal = Depends(require_schedulers),
    db: Session = Depends(get_db),
) -> CatalogCourseOut:
    existing = db.execute(select(CatalogCourse).where(CatalogCourse.code == payload.code)).scalar_one_or_none()
    if existing:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Course code already exists")
    course = CatalogCourse(**payload.model_dump())
    db.add(course)
    db.commit()
    db.refresh(course)
    return course


@router.get("/rooms", response_model=list[RoomOut])
def list_rooms(principal: Principal = Depends(get_current_principal), db: Session = Depends(get_db)) -> list[RoomOut]:
    return list(db.execute(select(Room).order_by(Room.name)).scalars())


@router.post("/rooms", response_model=RoomOut, status_code=status.HTTP_201_CREATED)
def create_room(
    payload: RoomCreate,
    principal: Principal = Depends(require_schedulers),
    db: Session = Depends(get_db),
) -> RoomOut:
    existing = db.execute(select(Room).where(Room.name == payload.name)).scalar_one_or_none()
    if existing:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Room name already exists")
    room = Room(**payload.model_dump())
    db.add(room)
    db.commit()
    db.refresh(room)
    return room


@router.get("/instructors", response_model=list[InstructorOut])
def list_instructors(
    principal: Principal = Depends(get_current_principal), db: Session = Depends(get_db)
) -> list[InstructorOut]:
    return list(db.execute(select(Instructor).order_by(Instructor.name)).scalars())


@router.post("/instructors", response_model=InstructorOut, status_code=status.HTTP_201_CREATED)
def create_instructor(
    payload: InstructorCreate,
    principal: Principal = Depends(require_schedulers),
    db: Session = Depends(get_db),
) -> InstructorOut:
    if payload.email:
        existing = db.execute(select(Instructor).where(Instructor.email == payload.email)).scalar_one_or_none()
        if existing:
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Instructor email already exists")
    instructor = Instructor(**payload.model_dump())
    db.add(instructor)
    db.commit()
    db.refresh(instructor)
    return instructor
