# src/empservice/models/employee.py
from __future__ import annotations

from datetime import datetime
from sqlalchemy import String, DateTime, Text, Integer
from sqlalchemy.orm import Mapped, mapped_column

from src.empservice.utils.database import Base


class Employee(Base):
    __tablename__ = "employee"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    firstname: Mapped[str] = mapped_column(String(100), nullable=False)
    lastname: Mapped[str] = mapped_column(String(100), nullable=False)
    # naive UTC, see utils.timezone.to_naive_utc
    doj: Mapped[datetime | None] = mapped_column(DateTime(timezone=False), nullable=True)
    skills: Mapped[str | None] = mapped_column(Text, nullable=True)

    def __repr__(self) -> str:
        return f"<Employee {self.id} {self.firstname} {self.lastname}>"
