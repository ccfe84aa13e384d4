import logging
import uuid

from faker import Faker
from sqlalchemy import func, select

from .db import session_scope
from .models import Practitioner

logger = logging.getLogger(__name__)

SPECIALTIES = [
    "General Physician",
    "Cardiology",
    "Pulmonology",
    "Neurology",
    "Gastroenterology",
    "ENT",
    "Dermatology",
    "Orthopedics",
    "Endocrinology",
    "Psychiatry",
]


def seed_data(per_specialty: int = 2, seed: int | None = None) -> int:
    with session_scope() as db:
        existing = db.scalar(select(func.count()).select_from(Practitioner))
        if existing:
            return 0

        fake = Faker()
        if seed is not None:
            fake.seed_instance(seed)
        practitioners = []
        for specialty in SPECIALTIES:
            for _ in range(per_specialty):
                practitioners.append(
                    Practitioner(
                        id=str(uuid.uuid4()),
                        name=f"Dr. {fake.name()}",
                        specialty=specialty,
                        full_day_leaves=[],
                        leave_slots={},
                    )
                )
        db.add_all(practitioners)
        db.commit()
        logger.info("seeded_practitioners count=%s", len(practitioners))
        return len(practitioners)
