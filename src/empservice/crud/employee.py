# src/empservice/crud/employee.py
from __future__ import annotations

from typing import List, Optional

from sqlalchemy import select, update, delete
from sqlalchemy.ext.asyncio import AsyncSession

from src.empservice.models.employee import Employee
from src.empservice.schemas.employee import EmployeeIn, EmployeeOut
from src.empservice.utils.timezone import to_naive_utc


# -------------------------
# helpers
# -------------------------
def escape_skills(v: Optional[str]) -> str:
    """Skills are stored with single quotes escaped: ' -> \\'"""
    return (v or "").replace("'", "\\'")


def unescape_skills(v: Optional[str]) -> str:
    """Inverse of escape_skills."""
    return (v or "").replace("\\'", "'")


def _to_out(row: Employee) -> EmployeeOut:
    # copy out of the ORM row; the row itself stays clean for later commits
    out = EmployeeOut.model_validate(row)
    out.skills = unescape_skills(out.skills)
    return out


# -------------------------
# Listing
# -------------------------
async def list_employees(db: AsyncSession) -> List[EmployeeOut]:
    res = await db.execute(select(Employee).order_by(Employee.id).execution_options(populate_existing=True))
    return [_to_out(row) for row in res.scalars().all()]


# -------------------------
# Single
# -------------------------
async def get_employee(db: AsyncSession, emp_id: int) -> Optional[EmployeeOut]:
    res = await db.execute(
        select(Employee).where(Employee.id == emp_id).limit(1).execution_options(populate_existing=True)
    )
    row = res.scalar_one_or_none()
    return _to_out(row) if row is not None else None


# -------------------------
# Create / Update / Delete
# -------------------------
async def create_employee(db: AsyncSession, data: EmployeeIn) -> int:
    """Insert a row and return the id the store assigned to it."""
    row = Employee(
        firstname=data.firstname,
        lastname=data.lastname,
        doj=to_naive_utc(data.doj),
        skills=escape_skills(data.skills),
    )
    db.add(row)
    try:
        await db.commit()
    except Exception:
        await db.rollback()
        raise
    return row.id


async def update_employee(db: AsyncSession, emp_id: int, data: EmployeeIn) -> bool:
    """
    Overwrite every column but id. Returns False when no row with ``emp_id``
    exists at the time of the write.
    """
    stmt = (
        update(Employee)
        .where(Employee.id == emp_id)
        .values(
            firstname=data.firstname,
            lastname=data.lastname,
            doj=to_naive_utc(data.doj),
            skills=escape_skills(data.skills),
        )
    )
    try:
        res = await db.execute(stmt)
        await db.commit()
    except Exception:
        await db.rollback()
        raise
    return res.rowcount > 0


async def delete_employee(db: AsyncSession, emp_id: int) -> bool:
    """Returns False when no row with ``emp_id`` exists at the time of the write."""
    try:
        res = await db.execute(delete(Employee).where(Employee.id == emp_id))
        await db.commit()
    except Exception:
        await db.rollback()
        raise
    return res.rowcount > 0
