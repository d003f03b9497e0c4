from fastapi import APIRouter, Depends
from app.schemas.session import AccountChange, SessionResponse
from app.services.session_service import LedgerSession, ledger_session

router = APIRouter()


def get_session() -> LedgerSession:
    """The process-wide ledger session."""
    return ledger_session


def session_snapshot(session: LedgerSession) -> SessionResponse:
    return SessionResponse(
        account=session.account,
        is_connected=session.is_connected,
        is_registered=session.is_registered,
        name=session.name,
        total_registered=session.total_registered,
        tx_pending=session.tx_pending,
    )


@router.get("/", response_model=SessionResponse)
async def get_current_session(session: LedgerSession = Depends(get_session)):
    return session_snapshot(session)


@router.post("/account", response_model=SessionResponse)
async def change_account(
    change: AccountChange,
    session: LedgerSession = Depends(get_session)
):
    """Account-changed notification from the wallet"""
    await session.on_account_changed(change.account)
    return session_snapshot(session)


@router.post("/reload", response_model=SessionResponse)
async def reload_session(session: LedgerSession = Depends(get_session)):
    session.require_account()
    await session.reload()
    return session_snapshot(session)


@router.delete("/", response_model=SessionResponse)
async def disconnect(session: LedgerSession = Depends(get_session)):
    session.disconnect()
    return session_snapshot(session)
