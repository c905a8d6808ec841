"""
Applies career moves to a user.

The executor never validates: routers run ProgressionValidator first and only
call in here when the result is valid (see ``validate_and_progress``). Each
write (history row plus user update plus audit entry) is one transaction.
"""
from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict
from sqlalchemy.orm import Session, joinedload

from hrtalent.core.exceptions import NotFoundError
from hrtalent.core.schemas import ValidationResult
from hrtalent.models.progression import ProgressionHistory, ProgressionRule, ProgressionType
from hrtalent.models.user import User
from hrtalent.services.audit import AuditService
from hrtalent.services.base import BaseService
from hrtalent.services.notification import NotificationService
from hrtalent.services.progression_rules import ProgressionValidator
from hrtalent.services.salary_calculator import SalaryService

REASSIGNMENT_REASON = "Reatribuição de trilha"


class ProgressionResult(BaseModel):
    model_config = ConfigDict(arbitrary_types_allowed=True)

    history: Optional[ProgressionHistory] = None
    user: User
    warnings: List[str] = []


class OutcomeKind(str, Enum):
    SUCCESS = "success"
    VALIDATION_FAILED = "validation_failed"


class ProgressionOutcome(BaseModel):
    """Either an executed move or the validation result that blocked it."""
    model_config = ConfigDict(arbitrary_types_allowed=True)

    kind: OutcomeKind
    validation: ValidationResult
    result: Optional[ProgressionResult] = None

    @property
    def succeeded(self) -> bool:
        return self.kind == OutcomeKind.SUCCESS


class ProgressionExecutor(BaseService):
    def __init__(self, db: Session, actor_id: Optional[int] = None, actor_role: Optional[str] = None,
                 clock=datetime.now):
        super().__init__(db, actor_id)
        self.actor_role = actor_role
        self.clock = clock
        self.salaries = SalaryService(db)
        self.audit = AuditService(db, actor_id)

    def get_user(self, user_id: int) -> User:
        user = self.db.get(User, user_id)
        if user is None:
            raise NotFoundError("User", user_id)
        return user

    @staticmethod
    def _snapshot(user: User) -> dict:
        return {
            "track_position_id": user.current_track_position_id,
            "salary_level_id": user.current_salary_level_id,
            "salary": user.current_salary,
        }

    def _place(self, user: User, position, level, new_salary: float, now: datetime):
        user.current_track_position_id = position.id
        user.current_salary_level_id = level.id
        user.current_salary = new_salary
        user.position_start_date = now
        if position.position is not None:
            user.position = position.position.name

    def progress(
        self,
        user_id: int,
        to_track_position_id: int,
        to_salary_level_id: int,
        progression_type: str,
        reason: Optional[str] = None,
        approved_by: Optional[int] = None,
    ) -> ProgressionResult:
        """
        Move a user to a new track position and interlevel.

        Writes one ProgressionHistory row with the before/after snapshot and
        updates the user's placement, salary and position start date.
        Not idempotent: call once per business event.

        Raises:
            NotFoundError: if the user, position or level does not exist
        """
        user = self.get_user(user_id)
        position = self.salaries.get_track_position(to_track_position_id)
        level = self.salaries.get_salary_level(to_salary_level_id)
        progression_type = ProgressionType(progression_type).value

        before = self._snapshot(user)
        new_salary = self.salaries.calculate(position.id, level.id)["calculatedSalary"]
        now = self.clock()

        try:
            history = ProgressionHistory(
                user_id=user.id,
                from_track_position_id=before["track_position_id"],
                to_track_position_id=position.id,
                from_salary_level_id=before["salary_level_id"],
                to_salary_level_id=level.id,
                from_salary=before["salary"],
                to_salary=new_salary,
                progression_type=progression_type,
                progression_date=now.date(),
                reason=reason,
                approved_by=approved_by if approved_by is not None else self.actor_id,
            )
            self.db.add(history)
            self._place(user, position, level, new_salary, now)
            self.db.flush()

            self.audit.log_action(
                action="progress_user",
                entity_type="user",
                entity_id=user.id,
                user_id=self.actor_id,
                user_role=self.actor_role,
                details={"progression_type": progression_type, "reason": reason, "history_id": history.id},
                before_state=before,
                after_state=self._snapshot(user),
            )
            NotificationService.notify_progression(self.db, user.id, progression_type, new_salary)
            self.db.commit()
        except Exception:
            self.db.rollback()
            self.log_error("Progression write failed", user_id=user_id)
            raise

        self.db.refresh(user)
        self.db.refresh(history)
        self.log_info("User progressed", user_id=user.id, progression_type=progression_type,
                      to_track_position_id=position.id, to_salary_level_id=level.id)
        return ProgressionResult(history=history, user=user)

    def assign_user_to_track(self, user_id: int, track_position_id: int, salary_level_id: int,
                             warnings: Optional[List[str]] = None) -> ProgressionResult:
        """
        Place a user on a track position. A re-assignment records history
        (vertical when the position changes, horizontal otherwise); the first
        assignment does not.
        """
        user = self.get_user(user_id)
        position = self.salaries.get_track_position(track_position_id)
        level = self.salaries.get_salary_level(salary_level_id)

        before = self._snapshot(user)
        new_salary = self.salaries.calculate(position.id, level.id)["calculatedSalary"]
        now = self.clock()
        history = None

        try:
            if before["track_position_id"]:
                move = (
                    ProgressionType.VERTICAL
                    if before["track_position_id"] != position.id
                    else ProgressionType.HORIZONTAL
                )
                history = ProgressionHistory(
                    user_id=user.id,
                    from_track_position_id=before["track_position_id"],
                    to_track_position_id=position.id,
                    from_salary_level_id=before["salary_level_id"],
                    to_salary_level_id=level.id,
                    from_salary=before["salary"],
                    to_salary=new_salary,
                    progression_type=move.value,
                    progression_date=now.date(),
                    reason=REASSIGNMENT_REASON,
                    approved_by=self.actor_id,
                )
                self.db.add(history)

            self._place(user, position, level, new_salary, now)
            self.db.flush()
            self.audit.log_action(
                action="assign_track",
                entity_type="user",
                entity_id=user.id,
                user_id=self.actor_id,
                user_role=self.actor_role,
                details={"track_position_id": position.id, "salary_level_id": level.id},
                before_state=before,
                after_state=self._snapshot(user),
                warnings=warnings,
            )
            self.db.commit()
        except Exception:
            self.db.rollback()
            self.log_error("Track assignment write failed", user_id=user_id)
            raise

        self.db.refresh(user)
        if history is not None:
            self.db.refresh(history)
        self.log_info("User assigned to track", user_id=user.id, track_position_id=position.id,
                      reassignment=history is not None)
        return ProgressionResult(history=history, user=user, warnings=warnings or [])

    def update_user_salary_level(self, user_id: int, salary_level_id: int,
                                 warnings: Optional[List[str]] = None) -> User:
        """Change only the interlevel; salary is recalculated when the user has a position."""
        user = self.get_user(user_id)
        level = self.salaries.get_salary_level(salary_level_id)
        before = self._snapshot(user)

        try:
            user.current_salary_level_id = level.id
            if user.current_track_position_id:
                user.current_salary = self.salaries.calculate(
                    user.current_track_position_id, level.id
                )["calculatedSalary"]
            self.db.flush()
            self.audit.log_action(
                action="update_salary_level",
                entity_type="user",
                entity_id=user.id,
                user_id=self.actor_id,
                user_role=self.actor_role,
                details={"salary_level_id": level.id},
                before_state=before,
                after_state=self._snapshot(user),
                warnings=warnings,
            )
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        self.db.refresh(user)
        return user

    def get_user_progression_history(self, user_id: int) -> List[ProgressionHistory]:
        return (
            self.db.query(ProgressionHistory)
            .options(
                joinedload(ProgressionHistory.from_position),
                joinedload(ProgressionHistory.to_position),
                joinedload(ProgressionHistory.from_level),
                joinedload(ProgressionHistory.to_level),
                joinedload(ProgressionHistory.approver),
            )
            .filter(ProgressionHistory.user_id == user_id)
            .order_by(ProgressionHistory.progression_date.desc(), ProgressionHistory.id.desc())
            .all()
        )

    def possible_progressions(self, user_id: int) -> List[ProgressionRule]:
        user = self.get_user(user_id)
        if not user.current_track_position_id:
            return []
        return (
            self.db.query(ProgressionRule)
            .options(joinedload(ProgressionRule.to_position))
            .filter(ProgressionRule.from_position_id == user.current_track_position_id)
            .order_by(ProgressionRule.id)
            .all()
        )

    def validate_and_progress(
        self,
        validator: ProgressionValidator,
        user_id: int,
        to_track_position_id: int,
        to_salary_level_id: int,
        progression_type: str,
        reason: Optional[str] = None,
    ) -> ProgressionOutcome:
        """Run the progression rules from the user's current position, then execute if valid."""
        user = self.get_user(user_id)
        validation = validator.validate_progression(
            user_id, user.current_track_position_id, to_track_position_id, progression_type
        )
        if not validation.is_valid:
            self.log_warning("Progression blocked by rules", user_id=user_id, errors=validation.errors)
            return ProgressionOutcome(kind=OutcomeKind.VALIDATION_FAILED, validation=validation)

        result = self.progress(user_id, to_track_position_id, to_salary_level_id,
                               progression_type, reason=reason)
        result.warnings = validation.warnings
        return ProgressionOutcome(kind=OutcomeKind.SUCCESS, validation=validation, result=result)
