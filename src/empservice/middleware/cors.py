# src/empservice/middleware/cors.py

from fastapi import Request

PREFLIGHT_HEADERS = {
    "Access-Control-Allow-Methods": "DELETE,POST, PUT",
    "Access-Control-Allow-Headers": "Content-Type",
}


async def cors_middleware(request: Request, call_next):
    resp = await call_next(request)
    resp.headers["Access-Control-Allow-Origin"] = "*"
    return resp
