import logging

from fastapi import FastAPI

from .config import settings
from .db import init_db
from .routes import api_router
from .seed import seed_data
from .services.interview import InterviewRegistry

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
)

app = FastAPI(title="CareFlow API")
app.state.interviews = InterviewRegistry(ttl_seconds=settings.interview_ttl_seconds)


@app.on_event("startup")
def on_startup() -> None:
    init_db()
    if settings.seed_demo_data:
        seed_data()


@app.get("/health")
def health() -> dict:
    return {"status": "ok"}


app.include_router(api_router, prefix="/api")
