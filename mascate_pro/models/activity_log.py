from sqlalchemy import Column, String, DateTime, ForeignKey, Text
from mascate_pro.core.database import Base, generate_uuid, utcnow


class ActivityLog(Base):
    __tablename__ = "activity_logs"

    id = Column(String(36), primary_key=True, default=generate_uuid)

    # who
    user_id = Column(String(36), ForeignKey("users.id"), index=True)

    # what happened, e.g. LOGIN_SUCCESS, PRODUCT_CREATED, STOCK_SALE
    action = Column(String(100), nullable=False, index=True)
    details = Column(Text)

    # where from
    ip_address = Column(String(64))
    user_agent = Column(String(500))

    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, index=True)
