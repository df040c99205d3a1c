from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from typing import List
from .. import models, schemas
from ..calculators.material_lookup import DEFAULT_PRICES
from ..database import get_db

router = APIRouter(prefix="/materials", tags=["materials"])


def seed_defaults(db: Session) -> int:
    """Insert a row for every default material that has none. Returns rows added."""
    added = 0
    for name, price_data in DEFAULT_PRICES.items():
        existing = db.query(models.MaterialPrice).filter(models.MaterialPrice.name == name).first()
        if not existing:
            db.add(models.MaterialPrice(name=name, **price_data))
            added += 1
    db.commit()
    return added

@router.get("/seed")
def seed_prices(db: Session = Depends(get_db)):
    """Seed default material prices."""
    added = seed_defaults(db)
    return {"ok": True, "seeded": len(DEFAULT_PRICES), "added": added}

@router.get("/", response_model=List[schemas.MaterialPrice])
def list_prices(db: Session = Depends(get_db)):
    return db.query(models.MaterialPrice).order_by(models.MaterialPrice.name).all()

@router.patch("/{name}", response_model=schemas.MaterialPrice)
def update_price(name: str, update: schemas.MaterialPriceUpdate, db: Session = Depends(get_db)):
    price = db.query(models.MaterialPrice).filter(models.MaterialPrice.name == name).first()
    if not price:
        raise HTTPException(status_code=404, detail="Material not found — run /materials/seed first")
    for field, value in update.model_dump(exclude_unset=True).items():
        setattr(price, field, value)
    db.commit()
    db.refresh(price)
    return price
