# services/chat_logs/models/chat_log.py
from sqlalchemy import Column, String, Text, DateTime, Index
from sqlalchemy import Uuid
import uuid
from shared.db import Base, utcnow

class ChatLog(Base):
    __tablename__ = "chat_logs"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    school_id = Column(String, nullable=False)
    session_id = Column(String, nullable=False)
    question = Column(Text, nullable=False)
    answer = Column(Text, nullable=False, default="")
    url = Column(String, nullable=False, default="")
    timestamp = Column(DateTime(timezone=True), nullable=False)  # reported by the widget
    created_at = Column(DateTime(timezone=True), default=utcnow)

    __table_args__ = (
        Index("idx_chat_log_school_time", "school_id", "timestamp"),
        Index("idx_chat_log_session", "session_id"),
    )
