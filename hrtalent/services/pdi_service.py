from typing import Any, Dict, List, Optional

from sqlalchemy.orm import joinedload

from hrtalent.core.exceptions import AppException, NotFoundError
from hrtalent.models.development_plan import DevelopmentPlan, PlanStatus
from hrtalent.models.user import User
from hrtalent.services import pdi_rules
from hrtalent.services.audit import AuditService
from hrtalent.services.base import BaseService
from hrtalent.services.notification import NotificationService

DEFAULT_PERIOD = "Anual"


class PDIService(BaseService):
    def save(
        self,
        employee_id: int,
        items: List[Dict[str, Any]],
        cycle_id: Optional[int] = None,
        leader_evaluation_id: Optional[int] = None,
        periodo: Optional[str] = None,
        actor_role: Optional[str] = None,
    ) -> DevelopmentPlan:
        """
        Store a new active plan for the employee. Any plan that is still
        active is moved to ``completed`` in the same transaction.
        """
        if not items:
            raise AppException("O PDI deve conter pelo menos um item", status_code=400)
        if not pdi_rules.has_recognised_term(items):
            raise AppException(
                "O PDI deve conter pelo menos um item em algum prazo (curto, médio ou longo)",
                status_code=400,
            )
        if not pdi_rules.validate_items(items):
            raise AppException("Itens do PDI inválidos", status_code=400, error_code="INVALID_PDI_ITEMS")
        if self.db.get(User, employee_id) is None:
            raise NotFoundError("Employee", employee_id)

        try:
            previous = (
                self.db.query(DevelopmentPlan)
                .filter(
                    DevelopmentPlan.employee_id == employee_id,
                    DevelopmentPlan.status == PlanStatus.ACTIVE.value,
                )
                .all()
            )
            for plan in previous:
                plan.status = PlanStatus.COMPLETED.value

            plan = DevelopmentPlan(
                employee_id=employee_id,
                cycle_id=cycle_id,
                leader_evaluation_id=leader_evaluation_id,
                items=[dict(item) for item in items],
                periodo=periodo or DEFAULT_PERIOD,
                status=PlanStatus.ACTIVE.value,
                created_by=self.actor_id,
            )
            self.db.add(plan)
            self.db.flush()

            AuditService(self.db, self.actor_id).log_action(
                action="save_pdi",
                entity_type="development_plan",
                entity_id=plan.id,
                user_id=self.actor_id,
                user_role=actor_role,
                details={
                    "employee_id": employee_id,
                    "items": len(items),
                    "replaced": [p.id for p in previous],
                },
            )
            NotificationService.notify_pdi(self.db, employee_id)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        self.db.refresh(plan)
        self.log_info("PDI saved", plan_id=plan.id, employee_id=employee_id, replaced=len(previous))
        return plan

    def get_active(self, employee_id: int) -> Optional[DevelopmentPlan]:
        return (
            self.db.query(DevelopmentPlan)
            .options(joinedload(DevelopmentPlan.employee))
            .filter(
                DevelopmentPlan.employee_id == employee_id,
                DevelopmentPlan.status == PlanStatus.ACTIVE.value,
            )
            .order_by(DevelopmentPlan.id.desc())
            .first()
        )

    def list_by_cycle(self, cycle_id: int) -> List[DevelopmentPlan]:
        return (
            self.db.query(DevelopmentPlan)
            .options(joinedload(DevelopmentPlan.employee))
            .filter(
                DevelopmentPlan.cycle_id == cycle_id,
                DevelopmentPlan.status == PlanStatus.ACTIVE.value,
            )
            .order_by(DevelopmentPlan.id.desc())
            .all()
        )
