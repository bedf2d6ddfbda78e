from __future__ import annotations

from pydantic import BaseModel, Field, field_validator, model_validator

from app.services.time_intervals import TIME_PATTERN, normalize_day, normalize_days, parse_time_to_minutes


class TimeBlockFields(BaseModel):
    days: list[str] = Field(min_length=1, max_length=7)
    starts_at: str
    ends_at: str

    @field_validator("days")
    @classmethod
    def validate_days(cls, value: list[str]) -> list[str]:
        invalid = [day for day in value if normalize_day(day) is None]
        if invalid:
            raise ValueError(f"Invalid day(s): {', '.join(str(day) for day in invalid)}")
        days = list(normalize_days(value))
        if not days:
            raise ValueError("At least one day is required")
        return days

    @field_validator("starts_at", "ends_at")
    @classmethod
    def validate_time_format(cls, value: str) -> str:
        value = value.strip()
        if not TIME_PATTERN.match(value):
            raise ValueError("Time must be in HH:MM 24-hour format")
        return value[:5]

    @model_validator(mode="after")
    def validate_order(self) -> "TimeBlockFields":
        if parse_time_to_minutes(self.ends_at) <= parse_time_to_minutes(self.starts_at):
            raise ValueError("ends_at must be after starts_at")
        return self
