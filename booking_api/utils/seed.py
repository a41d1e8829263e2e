import logging
from sqlalchemy.orm import Session
from booking_api.models.center import Center
from booking_api.models.room import Room

logger = logging.getLogger(__name__)

SAMPLE_CENTERS = [
    {
        "name": "Main Center",
        "address": "123 Main Street, Example City",
        "phone": "+34 912 345 678",
        "email": "info@maincenter.example.com",
        "description": "Main center of the organisation",
    },
    {
        "name": "North Center",
        "address": "456 North Avenue, Example City",
        "phone": "+34 912 345 679",
        "email": "info@northcenter.example.com",
        "description": "Center located in the north district",
    },
]

SAMPLE_ROOMS = [
    {
        "name": "Meeting room A",
        "center": "Main Center",
        "capacity": 10,
        "description": "Room with projector and whiteboard",
    },
    {
        "name": "Auditorium",
        "center": "Main Center",
        "capacity": 50,
        "description": "Auditorium for up to 50 people",
    },
]


def seed_sample_data(db: Session) -> None:
    """Insert sample centers and rooms into empty tables."""
    if db.query(Center).first() is None:
        db.add_all(Center(**data) for data in SAMPLE_CENTERS)
        logger.info(f"Seeded {len(SAMPLE_CENTERS)} sample centers")
    if db.query(Room).first() is None:
        db.add_all(Room(**data) for data in SAMPLE_ROOMS)
        logger.info(f"Seeded {len(SAMPLE_ROOMS)} sample rooms")
    db.commit()
