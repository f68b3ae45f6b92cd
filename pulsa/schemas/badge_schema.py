from pydantic import BaseModel
from typing import Optional
from datetime import datetime

class BadgeDisplay(BaseModel):
    id: int
    name: str
    description: str
    icon: str
    condition: str

    class Config:
        from_attributes = True

class UserBadgeDisplay(BaseModel):
    id: int
    user_id: int
    badge: BadgeDisplay
    earned_at: Optional[datetime] = None

    class Config:
        from_attributes = True
