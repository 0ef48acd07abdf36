from datetime import date
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class CertificationCreate(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    name: str = Field(min_length=1, max_length=255)
    provider: str | None = None
    category: str | None = None
    issue_date: date | None = None
    expiry_date: date | None = None
    cert_id: str | None = None
    cert_url: str | None = None
    notes: str | None = None

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("name is required")
        return value

    @field_validator("provider", "category", "cert_id", "cert_url", "notes", mode="before")
    @classmethod
    def empty_to_none(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("issue_date", "expiry_date", mode="before")
    @classmethod
    def empty_date_to_none(cls, value):
        if value == "":
            return None
        return value


class FilterCriteria(BaseModel):
    window: int | None = None
    category: str = "all"
    status: str = "all"
    search: str = ""

    @field_validator("window", mode="before")
    @classmethod
    def parse_window(cls, value):
        if isinstance(value, str):
            value = value.strip().lower()
        if value in (None, "", "all", 0, "0"):
            return None
        value = int(value)
        if value not in (30, 60, 90):
            raise ValueError("window must be one of all, 30, 60, 90")
        return value
