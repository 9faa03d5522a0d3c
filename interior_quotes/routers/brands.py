import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from .. import models, schemas
from ..database import get_db
from ..rates import ACRYLIC_FINISH_ADDER, STANDARD_BRAND_ADDER

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/brands", tags=["brands"])

# Default brand adders (INR per sqft) - update via API as supplier pricing changes
DEFAULT_BRANDS = [
    # Core materials
    {"type": models.BrandType.CORE, "name": "Generic Ply", "adder_per_sft": 0, "is_default": True},
    {"type": models.BrandType.CORE, "name": "Century Ply", "adder_per_sft": STANDARD_BRAND_ADDER},
    {"type": models.BrandType.CORE, "name": "Greenply", "adder_per_sft": STANDARD_BRAND_ADDER},
    # Finishes
    {"type": models.BrandType.FINISH, "name": "Generic Laminate", "adder_per_sft": 0, "is_default": True},
    {"type": models.BrandType.FINISH, "name": "Merino", "adder_per_sft": STANDARD_BRAND_ADDER},
    {"type": models.BrandType.FINISH, "name": "Greenlam", "adder_per_sft": STANDARD_BRAND_ADDER},
    {"type": models.BrandType.FINISH, "name": "Acrylic", "adder_per_sft": ACRYLIC_FINISH_ADDER},
    # Hardware
    {"type": models.BrandType.HARDWARE, "name": "Nimmi", "adder_per_sft": 0, "is_default": True},
    {"type": models.BrandType.HARDWARE, "name": "Hettich", "adder_per_sft": STANDARD_BRAND_ADDER},
    {"type": models.BrandType.HARDWARE, "name": "Häfele", "adder_per_sft": STANDARD_BRAND_ADDER},
    {"type": models.BrandType.HARDWARE, "name": "Ebco", "adder_per_sft": STANDARD_BRAND_ADDER},
    {"type": models.BrandType.HARDWARE, "name": "Sleek", "adder_per_sft": STANDARD_BRAND_ADDER},
]


def seed_default_brands(db: Session) -> int:
    """Insert the default brands that are not there yet. Returns how many were added."""
    added = 0
    for brand in DEFAULT_BRANDS:
        existing = db.query(models.Brand).filter(
            models.Brand.type == brand["type"],
            models.Brand.name == brand["name"],
        ).first()
        if not existing:
            db.add(models.Brand(**brand))
            added += 1
    db.commit()
    if added:
        logger.info("Seeded %d default brands", added)
    return added


@router.get("/seed")
def seed_brands(db: Session = Depends(get_db)):
    """Seed default brand adders."""
    added = seed_default_brands(db)
    return {"ok": True, "seeded": added, "total": len(DEFAULT_BRANDS)}


@router.get("/", response_model=List[schemas.Brand])
def list_brands(type: Optional[models.BrandType] = None, db: Session = Depends(get_db)):
    query = db.query(models.Brand)
    if type:
        query = query.filter(models.Brand.type == type)
    return query.order_by(models.Brand.type, models.Brand.adder_per_sft, models.Brand.name).all()


@router.patch("/{brand_id}", response_model=schemas.Brand)
def update_brand(brand_id: int, update: schemas.BrandUpdate, db: Session = Depends(get_db)):
    brand = db.query(models.Brand).filter(models.Brand.id == brand_id).first()
    if not brand:
        raise HTTPException(status_code=404, detail="Brand not found - run /brands/seed first")
    for field, value in update.model_dump(exclude_unset=True).items():
        setattr(brand, field, value)
    db.commit()
    db.refresh(brand)
    return brand
