# services/faq_management/models/faq.py
from sqlalchemy import Column, String, Integer, DateTime
from sqlalchemy import Uuid
from shared.db import Base, JSONType, utcnow
import uuid

class Faq(Base):
    __tablename__ = "faqs"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    school_id = Column(String, unique=True, nullable=False, index=True)
    items = Column(JSONType, nullable=False, default=list)
    palette = Column(String, nullable=True)
    cta_label = Column(String, nullable=True)
    cta_url = Column(String, nullable=True)
    launcher_text = Column(String, nullable=True)
    version = Column(Integer, nullable=False, default=1)  # bumped on every save
    updated_by = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)
