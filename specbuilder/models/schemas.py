from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import List, Optional, Literal, Dict, Any
import datetime


class Message(BaseModel):
    role: Literal["user", "assistant"]
    content: str
    timestamp: str


class ConversationOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    owner_id: int
    messages: List[Message]
    answers: Dict[str, Any]
    phase: int
    created_at: datetime.datetime
    last_updated: datetime.datetime


class ChatTurnRequest(BaseModel):
    content: str

    @field_validator("content")
    @classmethod
    def content_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Message cannot be empty")
        return v


class ChatTurnResponse(BaseModel):
    assistant_message: str
    phase: int
    message_count: int


class PhaseResponse(BaseModel):
    phase: int


class AnswersUpdate(BaseModel):
    answers: Dict[str, Any]


class SynthesisRequest(BaseModel):
    conversation_id: int


class SpecificationOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    owner_id: int
    source_conversation_id: Optional[int]
    app_name: str
    document: Dict[str, Any]
    build_prompt: str
    version: int
    created_at: datetime.datetime


class SpecificationUpdate(BaseModel):
    document: Optional[Dict[str, Any]] = None
    build_prompt: Optional[str] = None


class TemplateOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    category: str
    template_data: Dict[str, Any]


# Shape the synthesis reply must have. Only the overview is typed; every other
# document section is carried through untouched.

class SpecOverview(BaseModel):
    appName: str
    tagline: str
    targetUser: str
    coreValue: str


class SpecDocument(BaseModel):
    model_config = ConfigDict(extra="allow")

    overview: SpecOverview


class SynthesisOutput(BaseModel):
    # Matches the app_name column width
    appName: str = Field(max_length=255)
    document: SpecDocument
    buildPrompt: str
