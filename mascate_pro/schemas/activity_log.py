from pydantic import BaseModel, Field
from typing import Dict, List, Optional
from datetime import datetime

class ActivityLogCreate(BaseModel):
    # defaults to the caller; logging on behalf of someone else needs admin
    user_id: Optional[str] = None
    action: str = Field(min_length=1, max_length=100)
    details: Optional[str] = Field(default=None, max_length=1000)
    # ip_address and user_agent always come from the request itself

class ActivityLogResponse(BaseModel):
    id: str
    user_id: Optional[str]
    action: str
    details: Optional[str]
    ip_address: Optional[str]
    user_agent: Optional[str]
    created_at: datetime

    class Config:
        from_attributes = True

class ActivityLogPage(BaseModel):
    items: List[ActivityLogResponse]
    total: int
    limit: int
    offset: int
    has_more: bool

class ActiveUser(BaseModel):
    user_id: str
    display_name: Optional[str]
    activity_count: int

class ActivityLogStats(BaseModel):
    total_logs: int
    today_logs: int
    yesterday_logs: int
    action_counts: Dict[str, int]
    top_users: List[ActiveUser]
    generated_at: datetime

class PruneResult(BaseModel):
    deleted: int
    older_than_days: int
