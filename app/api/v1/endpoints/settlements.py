from typing import List
from fastapi import APIRouter, Depends
from web3 import Web3
from app.api.v1.endpoints.session import get_session
from app.core.exceptions import PreconditionError
from app.models.debt import Debt
from app.schemas.settlement import SettlementRunRequest, SettlementRunResponse
from app.services.session_service import LedgerSession
from app.services.settlement_service import SettlementService

router = APIRouter()


@router.get("/pending", response_model=List[Debt])
async def list_pending(session: LedgerSession = Depends(get_session)):
    """Debts that will be offered for settlement"""
    report = await SettlementService.overdue_report(session)
    return report.actionable


@router.post("/run", response_model=SettlementRunResponse)
async def run_settlement(
    request: SettlementRunRequest,
    session: LedgerSession = Depends(get_session)
):
    """Settle the approved overdue debts one by one"""
    invalid = [a for a in request.approve if not Web3.is_address(a)]
    if invalid:
        raise PreconditionError("Invalid creditor address", details={"addresses": invalid})
    approved = {Web3.to_checksum_address(a) for a in request.approve}

    async def decide(debt: Debt) -> bool:
        return request.approve_all or debt.creditor in approved

    attempts = await SettlementService.run(decide, session)
    return SettlementRunResponse(attempts=attempts)
