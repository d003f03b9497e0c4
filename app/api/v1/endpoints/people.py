from typing import List
from fastapi import APIRouter, Depends, status
from app.api.v1.endpoints.session import get_session, session_snapshot
from app.models.person import Person
from app.schemas.person import NameUpdateRequest, NameUpdateResponse, PeopleCountResponse, RegisterRequest
from app.schemas.session import SessionResponse
from app.services.account_service import AccountService
from app.services.session_service import LedgerSession

router = APIRouter()


@router.get("/", response_model=List[Person])
async def list_people(session: LedgerSession = Depends(get_session)):
    """Registered people with their net balances"""
    session.require_registered()
    return session.people


@router.get("/count", response_model=PeopleCountResponse)
async def count_people(session: LedgerSession = Depends(get_session)):
    session.require_registered()
    return PeopleCountResponse(total=session.total_registered)


@router.post("/register", response_model=SessionResponse, status_code=status.HTTP_201_CREATED)
async def register(
    request: RegisterRequest,
    session: LedgerSession = Depends(get_session)
):
    """Register the connected account under a name"""
    await AccountService.register(request.name, session)
    return session_snapshot(session)


@router.patch("/me", response_model=NameUpdateResponse)
async def update_my_name(
    request: NameUpdateRequest,
    session: LedgerSession = Depends(get_session)
):
    updated = await AccountService.update_name(request.name, session)
    return NameUpdateResponse(name=session.name, updated=updated)
