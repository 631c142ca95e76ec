"""Roster management and authorization for teacher-owned students."""

import logging
import uuid
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

from papertrade.core.exceptions import (
    AccountNotFoundError,
    InsufficientFundsError,
    UnauthorizedRosterAccessError,
    ValidationError,
)
from papertrade.core.timezone import now_eastern
from papertrade.domain.models import (
    AMOUNT_SCALE,
    Account,
    Actor,
    Role,
    RosterAction,
    normalize_username,
    exceeds_amount_scale,
)
from papertrade.repositories.protocols import AccountRepository

logger = logging.getLogger(__name__)


def require_teacher(actor: Actor) -> None:
    """Raise UnauthorizedRosterAccessError unless actor is a teacher."""
    if not actor.is_teacher:
        raise UnauthorizedRosterAccessError("Only teachers can manage a roster")


def authorize(actor: Actor, target: Account, action: RosterAction) -> None:
    """
    Allow action on target only for the teacher who owns it.

    Raises UnauthorizedRosterAccessError otherwise.
    """
    require_teacher(actor)
    if target.teacher_id != actor.account_id:
        logger.warning(
            "Teacher %s denied %s on account %s",
            actor.account_id,
            RosterAction(action).value,
            target.account_id,
        )
        raise UnauthorizedRosterAccessError()


def _to_decimal(value: Any, name: str) -> Decimal:
    try:
        number = value if isinstance(value, Decimal) else Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise ValidationError(f"{name} must be a number") from None
    if not number.is_finite():
        raise ValidationError(f"{name} must be a finite number")
    if exceeds_amount_scale(number):
        raise ValidationError(f"{name} allows at most {AMOUNT_SCALE} decimal places")
    return number


class RosterService:
    """
    Service for teacher and student accounts.

    Handles registration, the teacher's roster, and cash and username changes
    a teacher makes on students they own.
    """

    def __init__(
        self,
        account_repo: AccountRepository,
        default_student_cash: Decimal = Decimal("100000"),
        default_teacher_cash: Decimal = Decimal("0"),
    ):
        self._account_repo = account_repo
        self._default_student_cash = default_student_cash
        self._default_teacher_cash = default_teacher_cash

    def register_teacher(self, username: str) -> Account:
        """Create a teacher account."""
        self._ensure_username_available(username)
        account = Account(
            account_id=str(uuid.uuid4()),
            username=username.strip(),
            role=Role.TEACHER,
            cash=self._default_teacher_cash,
            created_at_est=now_eastern(),
        )
        created = self._account_repo.create(account)
        logger.info("Registered teacher %s (%s)", created.username, created.account_id)
        return created

    def add_student(
        self,
        actor: Actor,
        username: str,
        starting_cash: Optional[Decimal] = None,
    ) -> Account:
        """
        Create a student owned by the acting teacher.

        Args:
            actor: The teacher adding the student
            username: Unique username (compared case-insensitively)
            starting_cash: Opening cash balance, default 100000

        Returns:
            Created Account instance
        """
        self._get_teacher(actor)
        self._ensure_username_available(username)

        cash = self._default_student_cash
        if starting_cash is not None:
            cash = _to_decimal(starting_cash, "starting_cash")
            if cash < 0:
                raise ValidationError("starting_cash must be >= 0")

        account = Account(
            account_id=str(uuid.uuid4()),
            username=username.strip(),
            role=Role.STUDENT,
            cash=cash,
            teacher_id=actor.account_id,
            created_at_est=now_eastern(),
        )
        created = self._account_repo.create(account)
        logger.info(
            "Teacher %s added student %s (%s) with cash %s",
            actor.account_id,
            created.username,
            created.account_id,
            created.cash,
        )
        return created

    def list_roster(self, actor: Actor) -> list[Account]:
        """Students owned by the acting teacher."""
        self._get_teacher(actor)
        return self._account_repo.list_by_teacher(actor.account_id)

    def get_student(self, actor: Actor, student_id: str) -> Account:
        student = self._get_account(student_id)
        authorize(actor, student, RosterAction.VIEW_STUDENT)
        return student

    def remove_student(self, actor: Actor, student_id: str) -> None:
        """Delete a student with its holdings, badges and trade history."""
        student = self._get_account(student_id)
        authorize(actor, student, RosterAction.REMOVE_STUDENT)
        self._account_repo.delete(student_id)
        logger.info("Teacher %s removed student %s", actor.account_id, student_id)

    def adjust_student_cash(self, actor: Actor, student_id: str, delta: Any) -> Decimal:
        """
        Add delta (may be negative) to a student's cash.

        The increment is a single atomic update scoped to the acting
        teacher's students. Returns the new balance.
        """
        amount = _to_decimal(delta, "delta")
        student = self._get_account(student_id)
        authorize(actor, student, RosterAction.ADJUST_CASH)

        new_cash = self._account_repo.increment_cash(
            student_id, amount, teacher_id=actor.account_id
        )
        if new_cash is None:
            self._raise_failed_increment(student_id, amount, actor)

        logger.info(
            "Teacher %s adjusted cash of %s by %s; cash now %s",
            actor.account_id,
            student_id,
            amount,
            new_cash,
        )
        return new_cash

    def adjust_own_cash(self, actor: Actor, delta: Any) -> Decimal:
        """Add delta to the acting teacher's own cash; returns the new balance."""
        self._get_teacher(actor)
        amount = _to_decimal(delta, "delta")

        new_cash = self._account_repo.increment_cash(actor.account_id, amount, role=Role.TEACHER)
        if new_cash is None:
            self._raise_failed_increment(actor.account_id, amount, actor, required_role=Role.TEACHER)

        logger.info("Teacher %s adjusted own cash by %s; cash now %s", actor.account_id, amount, new_cash)
        return new_cash

    def change_student_username(
        self,
        actor: Actor,
        student_id: str,
        new_username: str,
    ) -> Account:
        """Rename a student; the new username must not belong to another account."""
        student = self._get_account(student_id)
        authorize(actor, student, RosterAction.CHANGE_CREDENTIALS)

        if normalize_username(new_username) != student.username_key:
            self._ensure_username_available(new_username)

        renamed = self._account_repo.rename(student_id, new_username)
        logger.info(
            "Teacher %s renamed student %s from %s to %s",
            actor.account_id,
            student_id,
            student.username,
            renamed.username,
        )
        return renamed

    def _get_account(self, account_id: str) -> Account:
        account = self._account_repo.get_by_id(account_id)
        if account is None:
            raise AccountNotFoundError(account_id)
        return account

    def _ensure_username_available(self, username: str) -> None:
        if not username or not username.strip():
            raise ValidationError("username is required")
        if self._account_repo.get_by_username(username) is not None:
            raise ValidationError(f"Username '{username.strip()}' is already taken")

    def _get_teacher(self, actor: Actor) -> Account:
        """Load the acting teacher, whose stored role must also be teacher."""
        require_teacher(actor)
        account = self._get_account(actor.account_id)
        if account.role != Role.TEACHER:
            logger.warning("Account %s claimed the teacher role", actor.account_id)
            raise UnauthorizedRosterAccessError("Only teachers can manage a roster")
        return account

    def _raise_failed_increment(
        self,
        account_id: str,
        amount: Decimal,
        actor: Actor,
        required_role: Optional[Role] = None,
    ) -> None:
        # No row matched: the account vanished, changed owner or role, or would go negative
        account = self._account_repo.get_by_id(account_id)
        if account is None:
            raise AccountNotFoundError(account_id)
        if required_role is not None and account.role != required_role:
            raise UnauthorizedRosterAccessError()
        if account.account_id != actor.account_id and account.teacher_id != actor.account_id:
            raise UnauthorizedRosterAccessError()
        raise InsufficientFundsError(str(-amount), str(account.cash))
