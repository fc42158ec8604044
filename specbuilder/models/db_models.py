from sqlalchemy import Column, Integer, String, Text, JSON, DateTime
import datetime
from specbuilder.database import Base


def utcnow():
    return datetime.datetime.now(datetime.timezone.utc).replace(tzinfo=None)


class ConversationDB(Base):
    __tablename__ = "conversations"

    id = Column(Integer, primary_key=True, autoincrement=True)
    owner_id = Column(Integer, nullable=False, index=True)
    messages = Column(JSON, nullable=False, default=list)
    answers = Column(JSON, nullable=False, default=dict)
    phase = Column(Integer, nullable=False, default=1)
    created_at = Column(DateTime, default=utcnow)
    last_updated = Column(DateTime, default=utcnow, onupdate=utcnow)


class SpecificationDB(Base):
    __tablename__ = "specifications"

    id = Column(Integer, primary_key=True, autoincrement=True)
    owner_id = Column(Integer, nullable=False, index=True)
    # Plain back-reference; rows outlive the conversation they came from
    source_conversation_id = Column(Integer, nullable=True)
    app_name = Column(String(255), nullable=False)
    document = Column(JSON, nullable=False)
    build_prompt = Column(Text, nullable=False)
    version = Column(Integer, nullable=False, default=1)
    created_at = Column(DateTime, default=utcnow)


class TemplateDB(Base):
    __tablename__ = "templates"

    id = Column(Integer, primary_key=True, autoincrement=True)
    category = Column(String(100), nullable=False, index=True)
    template_data = Column(JSON, nullable=False)
    created_at = Column(DateTime, default=utcnow)
