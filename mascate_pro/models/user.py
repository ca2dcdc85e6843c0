from sqlalchemy import Column, String, Boolean, DateTime
from mascate_pro.core.database import Base, generate_uuid, utcnow


class User(Base):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    email = Column(String(255), unique=True, index=True, nullable=False)
    display_name = Column(String(100), nullable=False)
    avatar_id = Column(String(50))
    role = Column(String(20), nullable=False, default="user")  # user, admin, superadmin
    active = Column(Boolean, nullable=False, default=True)
    password_hash = Column(String(255))
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), onupdate=utcnow)
    last_login = Column(DateTime(timezone=True))
