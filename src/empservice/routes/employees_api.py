# src/empservice/routes/employees_api.py
from __future__ import annotations

import logging
import re
from typing import Dict, List

from fastapi import APIRouter, Depends, Request, Response
from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from src.empservice.crud.employee import (
    list_employees,
    get_employee,
    create_employee,
    update_employee,
    delete_employee,
)
from src.empservice.middleware.cors import PREFLIGHT_HEADERS
from src.empservice.schemas.employee import EmployeeIn, EmployeeOut
from src.empservice.utils.database import STORE_ERRORS, get_db
from src.empservice.utils.error_handler import FieldsEmpty, NotFound, StoreFailure

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/emps", tags=["Employees"])


_DECIMAL_ID = re.compile(r"[+-]?[0-9]+")
_ID_MIN, _ID_MAX = -(2 ** 63), 2 ** 63 - 1


def _parse_id(raw: str) -> int:
    """
    Signed 64-bit decimal id from the path. Anything else (whitespace,
    underscores, non-ASCII digits, trailing text, out of range) becomes 0,
    which no row ever has.
    """
    if not _DECIMAL_ID.fullmatch(raw):
        return 0
    value = int(raw)
    if not _ID_MIN <= value <= _ID_MAX:
        return 0
    return value


async def _bind(request: Request) -> EmployeeIn:
    """
    Read the JSON body into an EmployeeIn. A body that does not bind
    (missing, not JSON, wrong types) yields an empty payload, which the
    name check then rejects.
    """
    body = await request.body()
    try:
        return EmployeeIn.model_validate_json(body or b"{}")
    except ValidationError as e:
        logger.debug("request body did not bind: %s", e)
        return EmployeeIn()


def _echo(emp_id: int, data: EmployeeIn) -> EmployeeOut:
    return EmployeeOut(
        id=emp_id,
        firstname=data.firstname,
        lastname=data.lastname,
        doj=data.doj,
        skills=data.skills,
    )


async def _require_employee(db: AsyncSession, emp_id: int) -> EmployeeOut:
    try:
        emp = await get_employee(db, emp_id)
    except STORE_ERRORS as e:
        raise NotFound() from e
    if emp is None:
        raise NotFound()
    return emp


# ----------------------------------------------------------
# LIST
# ----------------------------------------------------------
@router.get("", response_model=List[EmployeeOut])
async def api_list_employees(db: AsyncSession = Depends(get_db)):
    try:
        return await list_employees(db)
    except STORE_ERRORS as e:
        raise NotFound("no employee(s) into the table") from e


# ----------------------------------------------------------
# GET ONE
# ----------------------------------------------------------
@router.get("/{emp_id}", response_model=EmployeeOut)
async def api_get_employee(emp_id: str, db: AsyncSession = Depends(get_db)):
    parsed = _parse_id(emp_id)
    emp = await _require_employee(db, parsed)
    # the response echoes the id from the path
    emp.id = parsed
    logger.info("fetched employee %s", emp.id)
    return emp


# ----------------------------------------------------------
# CREATE
# ----------------------------------------------------------
@router.post("", response_model=EmployeeOut, status_code=201)
async def api_create_employee(request: Request, db: AsyncSession = Depends(get_db)):
    data = await _bind(request)
    if not data.has_names():
        raise FieldsEmpty("Fields are empty")

    try:
        new_id = await create_employee(db, data)
    except STORE_ERRORS as e:
        raise StoreFailure("employee could not be created") from e

    logger.info("created employee %s", new_id)
    return _echo(new_id, data)


# ----------------------------------------------------------
# UPDATE
# ----------------------------------------------------------
@router.put("/{emp_id}", response_model=EmployeeOut)
async def api_update_employee(emp_id: str, request: Request, db: AsyncSession = Depends(get_db)):
    parsed = _parse_id(emp_id)
    await _require_employee(db, parsed)

    data = await _bind(request)
    if not data.has_names():
        raise FieldsEmpty("fields are empty")

    try:
        updated = await update_employee(db, parsed, data)
    except STORE_ERRORS as e:
        raise StoreFailure("employee could not be updated") from e
    if not updated:
        # deleted between the existence check and the write
        raise NotFound()

    logger.info("updated employee %s", parsed)
    return _echo(parsed, data)


# ----------------------------------------------------------
# DELETE
# ----------------------------------------------------------
@router.delete("/{emp_id}")
async def api_delete_employee(emp_id: str, db: AsyncSession = Depends(get_db)) -> Dict[str, str]:
    parsed = _parse_id(emp_id)
    await _require_employee(db, parsed)

    try:
        deleted = await delete_employee(db, parsed)
    except STORE_ERRORS as e:
        raise StoreFailure("employee could not be deleted") from e
    if not deleted:
        raise NotFound()

    logger.info("deleted employee %s", parsed)
    return {"id #" + emp_id: "deleted"}


# ----------------------------------------------------------
# CORS PREFLIGHT
# ----------------------------------------------------------
@router.options("")
@router.options("/{emp_id}")
async def api_options_employee():
    return Response(status_code=200, headers=PREFLIGHT_HEADERS)
