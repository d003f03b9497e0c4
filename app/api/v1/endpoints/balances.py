from fastapi import APIRouter, Depends
from web3 import Web3
from app.api.v1.endpoints.session import get_session
from app.core.exceptions import PreconditionError
from app.models.debt import OverdueReport
from app.schemas.balance import BalanceResponse
from app.services.balance_service import BalanceService
from app.services.session_service import LedgerSession
from app.services.settlement_service import SettlementService

router = APIRouter()


async def _balance(address: str) -> BalanceResponse:
    net = await BalanceService.net_balance(address)
    return BalanceResponse(address=address, net_balance=net, is_debtor=net < 0)


@router.get("/me", response_model=BalanceResponse)
async def get_my_balance(session: LedgerSession = Depends(get_session)):
    """Get the connected account's net balance"""
    return await _balance(session.require_registered())


@router.get("/me/overdue", response_model=OverdueReport)
async def get_my_overdue_debts(session: LedgerSession = Depends(get_session)):
    """All overdue debts, plus those old enough to settle"""
    return await SettlementService.overdue_report(session)


@router.get("/{address}", response_model=BalanceResponse)
async def get_balance(
    address: str,
    session: LedgerSession = Depends(get_session)
):
    """Get net balance for a specific address"""
    session.require_registered()
    if not Web3.is_address(address):
        raise PreconditionError(f"Invalid address: {address!r}")
    return await _balance(Web3.to_checksum_address(address))
