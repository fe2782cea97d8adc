"""
Shared API dependencies
"""
from typing import Optional
from fastapi import Header

from orderdesk.config import settings


def get_actor(x_actor_id: Optional[str] = Header(None, description="Acting staff user id")) -> str:
    """Acting user for audit fields, passed explicitly with each request"""
    actor = (x_actor_id or "").strip()
    return actor or settings.DEFAULT_ACTOR
