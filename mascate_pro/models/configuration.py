from sqlalchemy import Column, String, DateTime, ForeignKey, Text, JSON
from mascate_pro.core.database import Base, generate_uuid, utcnow


class Configuration(Base):
    __tablename__ = "configurations"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    key = Column(String(100), unique=True, index=True, nullable=False)
    value = Column(JSON, nullable=False, default=dict)
    description = Column(Text)
    created_by = Column(String(36), ForeignKey("users.id"))
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), onupdate=utcnow)
