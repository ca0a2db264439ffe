# quiz_server/routers/system_router.py

from fastapi import APIRouter
from fastapi.responses import PlainTextResponse

router = APIRouter()

HEALTH_MESSAGE = "✅ Quiz App Server is running"


@router.get("/", response_class=PlainTextResponse)
async def health():
    return HEALTH_MESSAGE
