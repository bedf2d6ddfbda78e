from pydantic import BaseModel, EmailStr, Field


class CatalogCourseBase(BaseModel):
    code: str = Field(min_length=1, max_length=50)
    title: str = Field(min_length=1, max_length=200)
    credits: float = Field(default=0, ge=0, le=40)
    lecture_hours_per_week: float | None = Field(default=None, ge=0, le=40)
    lab_hours_per_week: float | None = Field(default=None, ge=0, le=40)
    contact_hours_per_week: float | None = Field(default=None, ge=0, le=40)
    description: str | None = None
    is_active: bool = True


class CatalogCourseCreate(CatalogCourseBase):
    pass


class CatalogCourseOut(CatalogCourseBase):
    id: str

    model_config = {"from_attributes": True}


class RoomBase(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    building: str | None = Field(default=None, max_length=200)
    room_number: str | None = Field(default=None, max_length=50)
    is_active: bool = True


class RoomCreate(RoomBase):
    pass


class RoomOut(RoomBase):
    id: str

    model_config = {"from_attributes": True}


class InstructorBase(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    email: EmailStr | None = None
    is_full_time: bool = True
    is_active: bool = True


class InstructorCreate(InstructorBase):
    pass


class InstructorOut(InstructorBase):
    id: str

    model_config = {"from_attributes": True}
