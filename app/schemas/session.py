from typing import Optional
from pydantic import BaseModel


class AccountChange(BaseModel):
    """Account-changed notification. An empty account means the wallet disconnected."""
    account: Optional[str] = None


class SessionResponse(BaseModel):
    account: Optional[str] = None
    is_connected: bool
    is_registered: bool
    name: str = ""
    total_registered: int = 0
    tx_pending: bool = False
