from typing import List

from fastapi import APIRouter, Depends, status
from fastapi.responses import PlainTextResponse
from sqlalchemy.orm import Session

from specbuilder.database import get_db
from specbuilder.deps import get_current_user
from specbuilder.models.schemas import SpecificationOut, SpecificationUpdate, SynthesisRequest
from specbuilder.services import synthesizer

router = APIRouter(prefix="/specifications", tags=["specifications"])


@router.post("", status_code=status.HTTP_201_CREATED)
async def generate_specification(request: SynthesisRequest, db: Session = Depends(get_db),
                                 user_id: int = Depends(get_current_user)):
    return await synthesizer.synthesize(db, request.conversation_id, user_id)


@router.get("", response_model=List[SpecificationOut])
def read_specifications(db: Session = Depends(get_db), user_id: int = Depends(get_current_user)):
    return synthesizer.list_for_owner(db, user_id)


@router.get("/{spec_id}", response_model=SpecificationOut)
def read_specification(spec_id: int, db: Session = Depends(get_db), user_id: int = Depends(get_current_user)):
    return synthesizer.get(db, spec_id, user_id)


@router.patch("/{spec_id}", response_model=SpecificationOut)
def update_specification(spec_id: int, data: SpecificationUpdate, db: Session = Depends(get_db),
                         user_id: int = Depends(get_current_user)):
    return synthesizer.update(db, spec_id, user_id, document=data.document, build_prompt=data.build_prompt)


@router.get("/{spec_id}/export", response_class=PlainTextResponse)
def export_specification(spec_id: int, db: Session = Depends(get_db), user_id: int = Depends(get_current_user)):
    db_spec = synthesizer.get(db, spec_id, user_id)
    return PlainTextResponse(
        synthesizer.export_build_prompt(db_spec),
        media_type="text/markdown",
        headers={"Content-Disposition": f'attachment; filename="{synthesizer.export_filename(db_spec)}"'},
    )
