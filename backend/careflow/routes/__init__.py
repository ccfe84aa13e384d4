from fastapi import APIRouter

from .appointments import router as appointments_router
from .interviews import router as interviews_router
from .practitioners import router as practitioners_router

api_router = APIRouter()
api_router.include_router(interviews_router)
api_router.include_router(practitioners_router)
api_router.include_router(appointments_router)
