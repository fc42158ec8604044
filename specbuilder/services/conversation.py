"""Conversation engine: transcript, phase counter and chat turns for one conversation."""
import asyncio
import datetime
import logging
import weakref
from enum import IntEnum
from typing import Any, Dict, List

from sqlalchemy.orm import Session

from specbuilder.errors import GenerationFailed, NotFound
from specbuilder.services import llm_client, prompts, store

logger = logging.getLogger(__name__)

FALLBACK_REPLY = "Sorry, I couldn't generate a response. Please try again."


class Phase(IntEnum):
    CONCEPT = 1
    AUDIENCE = 2
    FEATURES = 3
    DESIGN = 4
    TECHNICAL = 5

    @property
    def topic(self) -> str:
        return _TOPICS[self]

    def advance(self) -> "Phase":
        """The only transition: step forward, staying put once the last topic is reached."""
        return Phase(min(self + 1, Phase.TECHNICAL))


_TOPICS = {
    Phase.CONCEPT: "concept",
    Phase.AUDIENCE: "target audience",
    Phase.FEATURES: "features",
    Phase.DESIGN: "design",
    Phase.TECHNICAL: "technical constraints",
}

# Turns on the same conversation are serialized within this process.
# Separate server processes still race on the transcript (last write wins).
# Entries live only while some caller holds or waits on the lock.
_conversation_locks: "weakref.WeakValueDictionary[int, asyncio.Lock]" = weakref.WeakValueDictionary()


def _lock_for(conversation_id: int) -> asyncio.Lock:
    lock = _conversation_locks.get(conversation_id)
    if lock is None:
        lock = asyncio.Lock()
        _conversation_locks[conversation_id] = lock
    return lock


def _now() -> str:
    return datetime.datetime.now(datetime.timezone.utc).isoformat()


def create(db: Session, owner_id: int):
    db_conv = store.create_conversation(db, owner_id)
    logger.info("[Chat] Created conversation %s for user %s", db_conv.id, owner_id)
    return db_conv


def get(db: Session, conversation_id: int, owner_id: int):
    db_conv = store.get_conversation(db, conversation_id)
    if db_conv is None or db_conv.owner_id != owner_id:
        if db_conv is not None:
            logger.info("[Chat] User %s asked for conversation %s owned by someone else", owner_id, conversation_id)
        raise NotFound("Conversation not found")
    return db_conv


def list_for_owner(db: Session, owner_id: int):
    return store.get_conversations(db, owner_id)


def build_chat_messages(transcript: List[Dict[str, Any]], phase: int, user_text: str) -> List[Dict[str, str]]:
    """System instruction, the prior transcript in order, then the new user message."""
    current = Phase(phase)
    messages = [{
        "role": "system",
        "content": prompts.interview_prompt(int(current), current.topic, len(transcript)),
    }]
    for m in transcript:
        messages.append({
            "role": "assistant" if m["role"] == "assistant" else "user",
            "content": m["content"],
        })
    messages.append({"role": "user", "content": user_text})
    return messages


def _save(db: Session, conversation_id: int, **fields):
    # The row can vanish while we wait on generation (another process deleting it)
    db_conv = store.update_conversation(db, conversation_id, **fields)
    if db_conv is None:
        raise NotFound("Conversation not found")
    return db_conv


async def append_and_respond(db: Session, conversation_id: int, owner_id: int, user_text: str) -> str:
    # Ownership is checked before a lock is created for the id
    get(db, conversation_id, owner_id)
    async with _lock_for(conversation_id):
        db_conv = get(db, conversation_id, owner_id)
        transcript = list(db_conv.messages or [])
        request_messages = build_chat_messages(transcript, db_conv.phase, user_text)
        user_message = {"role": "user", "content": user_text, "timestamp": _now()}

        logger.info("[Chat] Conversation %s: generating reply from %d messages", conversation_id, len(request_messages))
        try:
            reply = await llm_client.generate(request_messages)
        except GenerationFailed as e:
            logger.warning("[Chat] Conversation %s: generation failed, using fallback reply: %s", conversation_id, e)
            reply = FALLBACK_REPLY

        assistant_message = {"role": "assistant", "content": reply, "timestamp": _now()}
        _save(db, conversation_id, messages=transcript + [user_message, assistant_message])
        return reply


async def advance_phase(db: Session, conversation_id: int, owner_id: int) -> int:
    get(db, conversation_id, owner_id)
    async with _lock_for(conversation_id):
        db_conv = get(db, conversation_id, owner_id)
        new_phase = Phase(db_conv.phase).advance()
        _save(db, conversation_id, phase=int(new_phase))
        logger.info("[Chat] Conversation %s now at phase %d", conversation_id, new_phase)
        return int(new_phase)


async def update_answers(db: Session, conversation_id: int, owner_id: int, answers: Dict[str, Any]) -> Dict[str, Any]:
    get(db, conversation_id, owner_id)
    async with _lock_for(conversation_id):
        db_conv = get(db, conversation_id, owner_id)
        merged = dict(db_conv.answers or {})
        merged.update(answers)
        _save(db, conversation_id, answers=merged)
        return merged


async def delete(db: Session, conversation_id: int, owner_id: int):
    get(db, conversation_id, owner_id)
    async with _lock_for(conversation_id):
        get(db, conversation_id, owner_id)
        store.delete_conversation(db, conversation_id)
    _conversation_locks.pop(conversation_id, None)
    logger.info("[Chat] Deleted conversation %s", conversation_id)
