"""Turns a finished transcript into a stored specification, and edits/exports stored ones."""
import json
import logging
import re
from typing import Any, Dict, List, Optional

from pydantic import ValidationError
from sqlalchemy.orm import Session

from specbuilder.errors import InvalidGenerationOutput, NotFound
from specbuilder.models.schemas import SynthesisOutput
from specbuilder.services import conversation, llm_client, prompts, store

logger = logging.getLogger(__name__)


def build_synthesis_messages(transcript: List[Dict[str, Any]]) -> List[Dict[str, str]]:
    # Whole transcript, never truncated; an oversized one fails at the generation service
    return [
        {"role": "system", "content": prompts.SYNTHESIS_PROMPT},
        {"role": "user", "content": json.dumps(transcript, ensure_ascii=False)},
    ]


def parse_synthesis_output(raw: str) -> Dict[str, Any]:
    """Parse and check the model's reply. Anything short of the required fields is rejected whole."""
    try:
        data = json.loads(raw)
    except (TypeError, ValueError) as e:
        raise InvalidGenerationOutput(f"Specification reply is not valid JSON: {e}") from e
    try:
        SynthesisOutput.model_validate(data)
    except ValidationError as e:
        raise InvalidGenerationOutput(f"Specification reply is missing required fields: {e.error_count()} error(s)") from e
    return data


async def synthesize(db: Session, conversation_id: int, owner_id: int) -> Dict[str, Any]:
    db_conv = conversation.get(db, conversation_id, owner_id)
    messages = build_synthesis_messages(list(db_conv.messages or []))

    logger.info("[Synthesis] Conversation %s: requesting specification", conversation_id)
    raw = await llm_client.generate(messages, response_format=prompts.SPECIFICATION_RESPONSE_FORMAT)
    try:
        spec = parse_synthesis_output(raw)
    except InvalidGenerationOutput as e:
        logger.warning("[Synthesis] Conversation %s: rejected reply: %s", conversation_id, e)
        raise

    db_spec = store.create_specification(
        db,
        owner_id=owner_id,
        source_conversation_id=conversation_id,
        app_name=spec["appName"],
        document=spec["document"],
        build_prompt=spec["buildPrompt"],
    )
    logger.info("[Synthesis] Stored specification %s (%s)", db_spec.id, db_spec.app_name)
    return {"specification_id": db_spec.id, "specification": spec}


def get(db: Session, spec_id: int, owner_id: int):
    db_spec = store.get_specification(db, spec_id)
    if db_spec is None or db_spec.owner_id != owner_id:
        raise NotFound("Specification not found")
    return db_spec


def list_for_owner(db: Session, owner_id: int):
    return store.get_specifications(db, owner_id)


def update(db: Session, spec_id: int, owner_id: int, document: Optional[Dict[str, Any]] = None,
           build_prompt: Optional[str] = None):
    """Apply a manual edit. Every call bumps the version, even when nothing changed."""
    db_spec = get(db, spec_id, owner_id)
    return store.update_specification(
        db, spec_id,
        document=document,
        build_prompt=build_prompt,
        version=db_spec.version + 1,
    )


def export_build_prompt(db_spec) -> str:
    return f"# {db_spec.app_name} - spec\n\n{db_spec.build_prompt}\n"


def export_filename(db_spec) -> str:
    safe = re.sub(r"[^A-Za-z0-9._-]+", "_", db_spec.app_name).strip("_") or "app"
    return f"{safe}-spec.md"
