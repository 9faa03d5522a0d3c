"""
Line item endpoints for a quotation.

Every mutation recomputes the item's derived fields server-side, commits,
then refreshes the quotation totals snapshot. Derived values sent by the
client (sqft, area, rate_auto, unit_price on interior items, total_price)
are ignored.
"""

from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from .. import models, schemas
from ..calculators.registry import get_calculator
from ..database import get_db
from .quotations import brand_adders, get_quotation_or_404, recalculate_quotation_totals

router = APIRouter(prefix="/quotations", tags=["items"])

FALSE_CEILING_FIELDS = ("room_type", "description", "length", "width", "unit_price")
OTHER_ITEM_FIELDS = ("item_type", "description", "value_type", "value", "unit_price")


def _editable_quotation(quotation_id: int, db: Session) -> models.Quotation:
    quotation = get_quotation_or_404(quotation_id, db)
    quotation.ensure_editable()
    return quotation


def _get_item(model, quotation_id: int, item_id: int, db: Session):
    item = db.query(model).filter(model.id == item_id, model.quotation_id == quotation_id).first()
    if not item:
        raise HTTPException(status_code=404, detail="Item not found")
    return item


def _apply(item, values: dict, columns):
    for field in columns:
        if field in values:
            setattr(item, field, values[field])


def _commit_and_recalculate(quotation: models.Quotation, item, db: Session):
    db.commit()
    db.refresh(quotation)
    recalculate_quotation_totals(quotation, db)
    if item is not None:
        db.refresh(item)


# ====================
# Interior items
# ====================

INTERIOR_COLUMNS = (
    "room_type", "description", "length", "height", "width", "sqft", "build_type",
    "material", "finish", "hardware", "rate_auto", "rate_override", "is_rate_overridden",
    "unit_price", "total_price",
)


@router.get("/{quotation_id}/interior-items", response_model=List[schemas.InteriorItem])
def list_interior_items(quotation_id: int, db: Session = Depends(get_db)):
    return get_quotation_or_404(quotation_id, db).interior_items


@router.post("/{quotation_id}/interior-items", response_model=schemas.InteriorItem)
def create_interior_item(quotation_id: int, payload: schemas.InteriorItemCreate, db: Session = Depends(get_db)):
    quotation = _editable_quotation(quotation_id, db)
    fields = payload.model_dump(exclude_unset=True)
    if not fields.get("build_type"):
        fields["build_type"] = quotation.build_type
    values = get_calculator("interior", brand_adders(db)).calculate(fields)

    item = models.InteriorItem(quotation_id=quotation.id)
    _apply(item, values, INTERIOR_COLUMNS)
    db.add(item)
    _commit_and_recalculate(quotation, item, db)
    return item


@router.patch("/{quotation_id}/interior-items/{item_id}", response_model=schemas.InteriorItem)
def update_interior_item(quotation_id: int, item_id: int, payload: schemas.InteriorItemUpdate,
                         db: Session = Depends(get_db)):
    quotation = _editable_quotation(quotation_id, db)
    item = _get_item(models.InteriorItem, quotation_id, item_id, db)
    values = get_calculator("interior", brand_adders(db)).update(item, payload.model_dump(exclude_unset=True))
    _apply(item, values, INTERIOR_COLUMNS)
    _commit_and_recalculate(quotation, item, db)
    return item


@router.post("/{quotation_id}/interior-items/{item_id}/reset-rate", response_model=schemas.InteriorItem)
def reset_interior_rate(quotation_id: int, item_id: int, db: Session = Depends(get_db)):
    """Drop the manual rate and go back to the automatic one."""
    quotation = _editable_quotation(quotation_id, db)
    item = _get_item(models.InteriorItem, quotation_id, item_id, db)
    values = get_calculator("interior", brand_adders(db)).update(item, {"is_rate_overridden": False})
    _apply(item, values, INTERIOR_COLUMNS)
    _commit_and_recalculate(quotation, item, db)
    return item


@router.delete("/{quotation_id}/interior-items/{item_id}")
def delete_interior_item(quotation_id: int, item_id: int, db: Session = Depends(get_db)):
    quotation = _editable_quotation(quotation_id, db)
    db.delete(_get_item(models.InteriorItem, quotation_id, item_id, db))
    _commit_and_recalculate(quotation, None, db)
    return {"ok": True}


# ====================
# False ceiling items
# ====================

@router.get("/{quotation_id}/false-ceiling-items", response_model=List[schemas.FalseCeilingItem])
def list_false_ceiling_items(quotation_id: int, db: Session = Depends(get_db)):
    return get_quotation_or_404(quotation_id, db).false_ceiling_items


@router.post("/{quotation_id}/false-ceiling-items", response_model=schemas.FalseCeilingItem)
def create_false_ceiling_item(quotation_id: int, payload: schemas.FalseCeilingItemCreate,
                              db: Session = Depends(get_db)):
    quotation = _editable_quotation(quotation_id, db)
    values = get_calculator("false_ceiling").calculate(payload.model_dump())
    item = models.FalseCeilingItem(quotation_id=quotation.id)
    _apply(item, values, FALSE_CEILING_FIELDS + ("area", "total_price"))
    db.add(item)
    _commit_and_recalculate(quotation, item, db)
    return item


@router.patch("/{quotation_id}/false-ceiling-items/{item_id}", response_model=schemas.FalseCeilingItem)
def update_false_ceiling_item(quotation_id: int, item_id: int, payload: schemas.FalseCeilingItemUpdate,
                              db: Session = Depends(get_db)):
    quotation = _editable_quotation(quotation_id, db)
    item = _get_item(models.FalseCeilingItem, quotation_id, item_id, db)
    fields = {f: getattr(item, f) for f in FALSE_CEILING_FIELDS}
    fields.update(payload.model_dump(exclude_unset=True))
    values = get_calculator("false_ceiling").calculate(fields)
    _apply(item, values, FALSE_CEILING_FIELDS + ("area", "total_price"))
    _commit_and_recalculate(quotation, item, db)
    return item


@router.delete("/{quotation_id}/false-ceiling-items/{item_id}")
def delete_false_ceiling_item(quotation_id: int, item_id: int, db: Session = Depends(get_db)):
    quotation = _editable_quotation(quotation_id, db)
    db.delete(_get_item(models.FalseCeilingItem, quotation_id, item_id, db))
    _commit_and_recalculate(quotation, None, db)
    return {"ok": True}


# ====================
# Other items
# ====================

@router.get("/{quotation_id}/other-items", response_model=List[schemas.OtherItem])
def list_other_items(quotation_id: int, db: Session = Depends(get_db)):
    return get_quotation_or_404(quotation_id, db).other_items


@router.post("/{quotation_id}/other-items", response_model=schemas.OtherItem)
def create_other_item(quotation_id: int, payload: schemas.OtherItemCreate, db: Session = Depends(get_db)):
    quotation = _editable_quotation(quotation_id, db)
    values = get_calculator("other").calculate(payload.model_dump())
    item = models.OtherItem(quotation_id=quotation.id)
    _apply(item, values, OTHER_ITEM_FIELDS + ("total_price",))
    db.add(item)
    _commit_and_recalculate(quotation, item, db)
    return item


@router.patch("/{quotation_id}/other-items/{item_id}", response_model=schemas.OtherItem)
def update_other_item(quotation_id: int, item_id: int, payload: schemas.OtherItemUpdate,
                      db: Session = Depends(get_db)):
    quotation = _editable_quotation(quotation_id, db)
    item = _get_item(models.OtherItem, quotation_id, item_id, db)
    fields = {f: getattr(item, f) for f in OTHER_ITEM_FIELDS}
    fields.update(payload.model_dump(exclude_unset=True))
    values = get_calculator("other").calculate(fields)
    _apply(item, values, OTHER_ITEM_FIELDS + ("total_price",))
    _commit_and_recalculate(quotation, item, db)
    return item


@router.delete("/{quotation_id}/other-items/{item_id}")
def delete_other_item(quotation_id: int, item_id: int, db: Session = Depends(get_db)):
    quotation = _editable_quotation(quotation_id, db)
    db.delete(_get_item(models.OtherItem, quotation_id, item_id, db))
    _commit_and_recalculate(quotation, None, db)
    return {"ok": True}
