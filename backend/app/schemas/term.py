from datetime import date, datetime

from pydantic import BaseModel, Field, field_validator, model_validator


class TermBase(BaseModel):
    code: str = Field(min_length=1, max_length=50)
    name: str = Field(min_length=1, max_length=200)
    starts_on: date | None = None
    ends_on: date | None = None
    # Unset values fall back to the configured term defaults.
    weeks_in_term: int | None = Field(default=None, ge=1, le=52)
    slot_minutes: int | None = Field(default=None, ge=5, le=120)
    buffer_minutes: int | None = Field(default=None, ge=0, le=240)

    @model_validator(mode="after")
    def validate_dates(self) -> "TermBase":
        if self.starts_on and self.ends_on and self.ends_on < self.starts_on:
            raise ValueError("ends_on must not be before starts_on")
        return self


class TermCreate(TermBase):
    pass


class TermUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=200)
    starts_on: date | None = None
    ends_on: date | None = None
    weeks_in_term: int | None = Field(default=None, ge=1, le=52)
    slot_minutes: int | None = Field(default=None, ge=5, le=120)
    buffer_minutes: int | None = Field(default=None, ge=0, le=240)

    @field_validator("name", "weeks_in_term", "slot_minutes", "buffer_minutes")
    @classmethod
    def reject_null(cls, value):
        if value is None:
            raise ValueError("Field cannot be null")
        return value


class TermOut(TermBase):
    id: str
    schedule_locked: bool
    schedule_locked_at: datetime | None = None
    schedule_locked_by: str | None = None

    model_config = {"from_attributes": True}
