"""
Esquemas Pydantic para la bandeja de `notification`.
"""
from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel


class NotificationOut(BaseModel):
    id: str
    user_id: str
    title: str
    message: str
    type: Literal["info", "success", "warning", "alert"]
    link: Optional[str] = None
    is_read: bool = False
    created_at: datetime


class NotificationListOut(BaseModel):
    notifications: List[NotificationOut]
    unread: int


class SetReadPayload(BaseModel):
    is_read: bool = True


class CountOut(BaseModel):
    success: bool = True
    count: int
