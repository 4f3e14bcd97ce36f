from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class User:
    """Login account that owns workers and summaries.

    Plain data object, no DB access here.
    """

    user_id: int
    username: str
    full_name: str
    password_hash: str
    is_active: bool = True
    created_at: Optional[datetime] = None
