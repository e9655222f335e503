from __future__ import annotations

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel

DuplicateDecision = Literal["pending", "accepted", "declined"]


class DuplicateAttemptOut(BaseModel):
    id: int
    campaign_id: int | None = None
    campaign_name: str = "Standard Campaign"
    influencer_info: dict[str, Any] = {}
    decision: DuplicateDecision = "pending"
    reason: str = "Duplicate Attempt"
    created_at: datetime | None = None


class DuplicateDecisionUpdate(BaseModel):
    decision: DuplicateDecision
