"""
PDI Router

Individual development plans. Saving a plan replaces the employee's active
one; reads return items grouped by term with completion statistics.
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from hrtalent.core.exceptions import AppException
from hrtalent.core.schemas import ApiResponse
from hrtalent.database import get_db
from hrtalent.models.development_plan import DevelopmentPlan
from hrtalent.models.user import User
from hrtalent.routers.auth_deps import get_current_user, require_manager
from hrtalent.schemas.pdi import DevelopmentPlanResponse, PDISaveRequest
from hrtalent.services import pdi_rules
from hrtalent.services.pdi_service import PDIService

router = APIRouter(prefix="/pdi", tags=["pdi"])


def _plan_payload(plan: DevelopmentPlan) -> dict:
    data = DevelopmentPlanResponse.model_validate(plan).model_dump(mode="json")
    data["employeeName"] = plan.employee.full_name if plan.employee else None
    data["byTerm"] = pdi_rules.organize_by_term(plan.items or [])
    data["stats"] = pdi_rules.calculate_stats(plan.items or [])
    return data


@router.post("", status_code=201)
def save_pdi(
    request: PDISaveRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_manager()),
):
    items = pdi_rules.normalize_payload(request.model_dump(by_alias=True))
    if request.employee_id is None or not items:
        raise AppException("Campos obrigatórios: employeeId e items (array não vazio)", status_code=400)

    plan = PDIService(db, current_user.id).save(
        request.employee_id,
        items,
        cycle_id=request.cycle_id,
        leader_evaluation_id=request.leader_evaluation_id,
        periodo=request.periodo,
        actor_role=current_user.role.value,
    )
    return ApiResponse.ok(_plan_payload(plan)).to_dict()


@router.get("/cycle/{cycle_id}")
def get_pdis_by_cycle(cycle_id: int, db: Session = Depends(get_db),
                      current_user: User = Depends(require_manager())):
    plans = PDIService(db).list_by_cycle(cycle_id)
    return ApiResponse.ok([_plan_payload(p) for p in plans]).to_dict()


@router.get("/{employee_id}")
def get_pdi(employee_id: int, db: Session = Depends(get_db),
            current_user: User = Depends(get_current_user)):
    """Active plan for the employee, or null when none exists."""
    plan = PDIService(db).get_active(employee_id)
    return ApiResponse.ok(_plan_payload(plan) if plan else None).to_dict()
