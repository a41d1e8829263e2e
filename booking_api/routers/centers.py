import logging
from typing import List
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from booking_api.db import get_db, utc_now
from booking_api.models.center import Center
from booking_api.schemas.center import CenterCreate, CenterUpdate, CenterResponse

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/centers",
    tags=["centers"],
)


def _get_center_or_404(db: Session, center_id: str) -> Center:
    center = db.query(Center).filter(Center.id == center_id).first()
    if not center:
        logger.error(f"Center not found: {center_id}")
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Center not found")
    return center


@router.post("/", response_model=CenterResponse, status_code=status.HTTP_201_CREATED)
def create_center(center: CenterCreate, db: Session = Depends(get_db)):
    db_center = Center(**center.model_dump())
    db.add(db_center)
    db.commit()
    db.refresh(db_center)
    logger.debug(f"Created center: {db_center.id}")
    return db_center


@router.get("/", response_model=List[CenterResponse])
def get_centers(skip: int = 0, limit: int = 100, db: Session = Depends(get_db)):
    return db.query(Center).offset(skip).limit(limit).all()


@router.get("/{center_id}", response_model=CenterResponse)
def get_center(center_id: str, db: Session = Depends(get_db)):
    return _get_center_or_404(db, center_id)


@router.put("/{center_id}", response_model=CenterResponse)
def update_center(center_id: str, center_update: CenterUpdate, db: Session = Depends(get_db)):
    """
    Update a center. Blank phone or email clears the stored value.
    """
    db_center = _get_center_or_404(db, center_id)

    update_data = center_update.model_dump(exclude_unset=True)
    for key, value in update_data.items():
        if value is None and key not in ("phone", "email", "description"):
            continue
        setattr(db_center, key, value)
    db_center.updated_at = utc_now()

    db.commit()
    db.refresh(db_center)
    return db_center


@router.delete("/{center_id}", response_model=CenterResponse)
def delete_center(center_id: str, db: Session = Depends(get_db)):
    db_center = _get_center_or_404(db, center_id)
    removed = CenterResponse.model_validate(db_center)

    db.delete(db_center)
    db.commit()
    logger.debug(f"Deleted center: {center_id}")
    return removed
