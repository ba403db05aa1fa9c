# src/empservice/schemas/employee.py
from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator

from src.empservice.utils.timezone import as_utc


class EmployeeIn(BaseModel):
    """Request body for create/update. Any ``id`` sent by the client is ignored."""

    model_config = ConfigDict(extra="ignore")

    firstname: str = ""
    lastname: str = ""
    doj: Optional[datetime] = None
    skills: str = ""

    @field_validator("firstname", "lastname", "skills", mode="before")
    @classmethod
    def none_as_empty(cls, v):
        return "" if v is None else v

    def has_names(self) -> bool:
        return bool(self.firstname) and bool(self.lastname)


class EmployeeOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    firstname: str
    lastname: str
    doj: Optional[datetime] = None
    skills: str = ""

    @field_validator("doj")
    @classmethod
    def stored_as_utc(cls, v: Optional[datetime]) -> Optional[datetime]:
        return as_utc(v)

    @field_validator("skills", mode="before")
    @classmethod
    def none_as_empty(cls, v):
        return "" if v is None else v
