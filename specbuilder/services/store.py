"""Row storage for conversations, specifications and templates.

Nothing here knows about owners beyond storing ``owner_id``: callers check
ownership before handing a row out or mutating it.

Every entity kind gets create, get, update and delete by id. Only conversation
deletes are reachable over HTTP.
"""
import logging
from contextlib import contextmanager
from typing import Any, Dict, List, Optional

from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session
from sqlalchemy.orm.attributes import flag_modified

from specbuilder.errors import StorageUnavailable
from specbuilder.models import db_models

logger = logging.getLogger(__name__)


@contextmanager
def _storage(db: Session, action: str):
    try:
        yield
    except OperationalError as e:
        db.rollback()
        logger.error("[Store] %s failed, storage unreachable: %s", action, e)
        raise StorageUnavailable(f"Storage unavailable while trying to {action}") from e


# Conversations

def create_conversation(db: Session, owner_id: int):
    with _storage(db, "create conversation"):
        db_conv = db_models.ConversationDB(owner_id=owner_id, messages=[], answers={}, phase=1)
        db.add(db_conv)
        db.commit()
        db.refresh(db_conv)
    return db_conv


def get_conversation(db: Session, conv_id: int):
    with _storage(db, "load conversation"):
        return db.query(db_models.ConversationDB).filter(db_models.ConversationDB.id == conv_id).first()


def get_conversations(db: Session, owner_id: int, limit: int = 50, offset: int = 0):
    try:
        with _storage(db, "list conversations"):
            return (
                db.query(db_models.ConversationDB)
                .filter(db_models.ConversationDB.owner_id == owner_id)
                .order_by(db_models.ConversationDB.last_updated.desc(), db_models.ConversationDB.id.desc())
                .offset(offset)
                .limit(limit)
                .all()
            )
    except StorageUnavailable:
        return []


def update_conversation(db: Session, conv_id: int, messages: Optional[List[Dict]] = None,
                        answers: Optional[Dict[str, Any]] = None, phase: Optional[int] = None):
    with _storage(db, "update conversation"):
        db_conv = db.query(db_models.ConversationDB).filter(db_models.ConversationDB.id == conv_id).first()
        if db_conv:
            if messages is not None:
                db_conv.messages = messages
                # ORM requires re-assignment for JSON mutation detection
                flag_modified(db_conv, "messages")
            if answers is not None:
                db_conv.answers = answers
                flag_modified(db_conv, "answers")
            if phase is not None:
                db_conv.phase = phase
            db_conv.last_updated = db_models.utcnow()
            db.commit()
            db.refresh(db_conv)
    return db_conv


def delete_conversation(db: Session, conv_id: int):
    with _storage(db, "delete conversation"):
        db_conv = db.query(db_models.ConversationDB).filter(db_models.ConversationDB.id == conv_id).first()
        if db_conv:
            db.delete(db_conv)
            db.commit()
            return True
    return False


# Specifications

def create_specification(db: Session, owner_id: int, source_conversation_id: Optional[int],
                         app_name: str, document: Dict[str, Any], build_prompt: str):
    with _storage(db, "create specification"):
        db_spec = db_models.SpecificationDB(
            owner_id=owner_id,
            source_conversation_id=source_conversation_id,
            app_name=app_name,
            document=document,
            build_prompt=build_prompt,
            version=1,
        )
        db.add(db_spec)
        db.commit()
        db.refresh(db_spec)
    return db_spec


def get_specification(db: Session, spec_id: int):
    with _storage(db, "load specification"):
        return db.query(db_models.SpecificationDB).filter(db_models.SpecificationDB.id == spec_id).first()


def get_specifications(db: Session, owner_id: int, limit: int = 50, offset: int = 0):
    try:
        with _storage(db, "list specifications"):
            return (
                db.query(db_models.SpecificationDB)
                .filter(db_models.SpecificationDB.owner_id == owner_id)
                .order_by(db_models.SpecificationDB.created_at.desc(), db_models.SpecificationDB.id.desc())
                .offset(offset)
                .limit(limit)
                .all()
            )
    except StorageUnavailable:
        return []


def count_specifications(db: Session, owner_id: int) -> int:
    with _storage(db, "count specifications"):
        return db.query(db_models.SpecificationDB).filter(db_models.SpecificationDB.owner_id == owner_id).count()


def update_specification(db: Session, spec_id: int, document: Optional[Dict[str, Any]] = None,
                         build_prompt: Optional[str] = None, version: Optional[int] = None):
    with _storage(db, "update specification"):
        db_spec = db.query(db_models.SpecificationDB).filter(db_models.SpecificationDB.id == spec_id).first()
        if db_spec:
            if document is not None:
                db_spec.document = document
                flag_modified(db_spec, "document")
            if build_prompt is not None:
                db_spec.build_prompt = build_prompt
            if version is not None:
                db_spec.version = version
            db.commit()
            db.refresh(db_spec)
    return db_spec


def delete_specification(db: Session, spec_id: int):
    with _storage(db, "delete specification"):
        db_spec = db.query(db_models.SpecificationDB).filter(db_models.SpecificationDB.id == spec_id).first()
        if db_spec:
            db.delete(db_spec)
            db.commit()
            return True
    return False


# Templates

def create_template(db: Session, category: str, template_data: Dict[str, Any]):
    with _storage(db, "create template"):
        db_tpl = db_models.TemplateDB(category=category, template_data=template_data)
        db.add(db_tpl)
        db.commit()
        db.refresh(db_tpl)
    return db_tpl


def get_template(db: Session, template_id: int):
    with _storage(db, "load template"):
        return db.query(db_models.TemplateDB).filter(db_models.TemplateDB.id == template_id).first()


def get_templates(db: Session, category: Optional[str] = None):
    try:
        with _storage(db, "list templates"):
            query = db.query(db_models.TemplateDB)
            if category is not None:
                query = query.filter(db_models.TemplateDB.category == category)
            return query.order_by(db_models.TemplateDB.id).all()
    except StorageUnavailable:
        return []


def count_templates(db: Session) -> int:
    with _storage(db, "count templates"):
        return db.query(db_models.TemplateDB).count()


def update_template(db: Session, template_id: int, category: Optional[str] = None,
                    template_data: Optional[Dict[str, Any]] = None):
    with _storage(db, "update template"):
        db_tpl = db.query(db_models.TemplateDB).filter(db_models.TemplateDB.id == template_id).first()
        if db_tpl:
            if category is not None:
                db_tpl.category = category
            if template_data is not None:
                db_tpl.template_data = template_data
                flag_modified(db_tpl, "template_data")
            db.commit()
            db.refresh(db_tpl)
    return db_tpl


def delete_template(db: Session, template_id: int):
    with _storage(db, "delete template"):
        db_tpl = db.query(db_models.TemplateDB).filter(db_models.TemplateDB.id == template_id).first()
        if db_tpl:
            db.delete(db_tpl)
            db.commit()
            return True
    return False
