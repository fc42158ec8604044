from typing import List

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from specbuilder.database import get_db
from specbuilder.deps import get_current_user
from specbuilder.models.schemas import (
    AnswersUpdate,
    ChatTurnRequest,
    ChatTurnResponse,
    ConversationOut,
    PhaseResponse,
)
from specbuilder.services import conversation

router = APIRouter(prefix="/conversations", tags=["conversations"])


@router.post("", response_model=ConversationOut, status_code=status.HTTP_201_CREATED)
def create_conversation(db: Session = Depends(get_db), user_id: int = Depends(get_current_user)):
    return conversation.create(db, user_id)


@router.get("", response_model=List[ConversationOut])
def read_conversations(db: Session = Depends(get_db), user_id: int = Depends(get_current_user)):
    return conversation.list_for_owner(db, user_id)


@router.get("/{conversation_id}", response_model=ConversationOut)
def read_conversation(conversation_id: int, db: Session = Depends(get_db), user_id: int = Depends(get_current_user)):
    return conversation.get(db, conversation_id, user_id)


@router.delete("/{conversation_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_conversation(conversation_id: int, db: Session = Depends(get_db), user_id: int = Depends(get_current_user)):
    await conversation.delete(db, conversation_id, user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{conversation_id}/messages", response_model=ChatTurnResponse)
async def send_message(conversation_id: int, request: ChatTurnRequest,
                       db: Session = Depends(get_db), user_id: int = Depends(get_current_user)):
    reply = await conversation.append_and_respond(db, conversation_id, user_id, request.content)
    db_conv = conversation.get(db, conversation_id, user_id)
    return ChatTurnResponse(
        assistant_message=reply,
        phase=db_conv.phase,
        message_count=len(db_conv.messages),
    )


@router.post("/{conversation_id}/advance-phase", response_model=PhaseResponse)
async def advance_phase(conversation_id: int, db: Session = Depends(get_db), user_id: int = Depends(get_current_user)):
    return PhaseResponse(phase=await conversation.advance_phase(db, conversation_id, user_id))


@router.patch("/{conversation_id}/answers")
async def update_answers(conversation_id: int, data: AnswersUpdate,
                         db: Session = Depends(get_db), user_id: int = Depends(get_current_user)):
    return {"answers": await conversation.update_answers(db, conversation_id, user_id, data.answers)}
