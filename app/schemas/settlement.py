from typing import List
from pydantic import BaseModel, Field
from app.models.debt import SettlementAttempt


class SettlementRunRequest(BaseModel):
    """
    The user's answers for this run: every actionable debt whose creditor is
    listed is settled, every other one is skipped.
    """
    approve: List[str] = Field(default_factory=list)
    approve_all: bool = False


class SettlementRunResponse(BaseModel):
    attempts: List[SettlementAttempt]
