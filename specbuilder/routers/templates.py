from typing import List, Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from specbuilder.database import get_db
from specbuilder.models.schemas import TemplateOut
from specbuilder.services import templates

router = APIRouter(prefix="/templates", tags=["templates"])


@router.get("", response_model=List[TemplateOut])
def read_templates(category: Optional[str] = None, db: Session = Depends(get_db)):
    return templates.list_templates(db, category)
