"""Teacher registration and roster management endpoints."""

from fastapi import APIRouter, Depends, Response

from papertrade.api.deps import get_actor, get_roster_service
from papertrade.api.schemas import (
    AccountResponse,
    CashAdjustRequest,
    CashBalanceResponse,
    CredentialsUpdateRequest,
    RosterResponse,
    StudentCreateRequest,
    TeacherCreateRequest,
)
from papertrade.domain.models import Actor
from papertrade.services import RosterService

teachers_router = APIRouter(prefix="/teachers", tags=["teachers"])
router = APIRouter(prefix="/roster", tags=["roster"])


@teachers_router.post("", response_model=AccountResponse, status_code=201)
def register_teacher(
    data: TeacherCreateRequest,
    service: RosterService = Depends(get_roster_service),
) -> AccountResponse:
    """Register a teacher account."""
    return AccountResponse.from_domain(service.register_teacher(data.username))


@router.get("", response_model=RosterResponse)
def list_roster(
    actor: Actor = Depends(get_actor),
    service: RosterService = Depends(get_roster_service),
) -> RosterResponse:
    """List the caller's students."""
    students = service.list_roster(actor)
    return RosterResponse(
        students=[AccountResponse.from_domain(s) for s in students],
        count=len(students),
    )


@router.post("/students", response_model=AccountResponse, status_code=201)
def add_student(
    data: StudentCreateRequest,
    actor: Actor = Depends(get_actor),
    service: RosterService = Depends(get_roster_service),
) -> AccountResponse:
    """Add a student to the caller's roster."""
    student = service.add_student(actor, data.username, starting_cash=data.starting_cash)
    return AccountResponse.from_domain(student)


@router.get("/students/{student_id}", response_model=AccountResponse)
def get_student(
    student_id: str,
    actor: Actor = Depends(get_actor),
    service: RosterService = Depends(get_roster_service),
) -> AccountResponse:
    """Get one of the caller's students."""
    return AccountResponse.from_domain(service.get_student(actor, student_id))


@router.delete("/students/{student_id}", status_code=204)
def remove_student(
    student_id: str,
    actor: Actor = Depends(get_actor),
    service: RosterService = Depends(get_roster_service),
) -> Response:
    """Remove a student with their holdings, badges and trades."""
    service.remove_student(actor, student_id)
    return Response(status_code=204)


@router.post("/students/{student_id}/cash", response_model=CashBalanceResponse)
def adjust_student_cash(
    student_id: str,
    data: CashAdjustRequest,
    actor: Actor = Depends(get_actor),
    service: RosterService = Depends(get_roster_service),
) -> CashBalanceResponse:
    """Add (or with a negative delta, remove) cash from a student."""
    cash = service.adjust_student_cash(actor, student_id, data.delta)
    return CashBalanceResponse(account_id=student_id, cash=cash)


@router.put("/students/{student_id}/credentials", response_model=AccountResponse)
def change_student_credentials(
    student_id: str,
    data: CredentialsUpdateRequest,
    actor: Actor = Depends(get_actor),
    service: RosterService = Depends(get_roster_service),
) -> AccountResponse:
    """Change a student's username."""
    return AccountResponse.from_domain(
        service.change_student_username(actor, student_id, data.username)
    )


@router.post("/cash", response_model=CashBalanceResponse)
def adjust_own_cash(
    data: CashAdjustRequest,
    actor: Actor = Depends(get_actor),
    service: RosterService = Depends(get_roster_service),
) -> CashBalanceResponse:
    """Adjust the calling teacher's own cash."""
    cash = service.adjust_own_cash(actor, data.delta)
    return CashBalanceResponse(account_id=actor.account_id, cash=cash)
