"""
Evaluations Router

Evaluation cycles and self/leader evaluations. Category and final scores
are derived server-side from the submitted competencies.
"""
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from hrtalent.core.exceptions import AccessDeniedError
from hrtalent.core.schemas import ApiResponse
from hrtalent.database import get_db
from hrtalent.models.evaluation import EvaluationType
from hrtalent.models.user import User
from hrtalent.routers.auth_deps import get_current_user, require_manager
from hrtalent.schemas.evaluation import (
    CycleCreate,
    CycleResponse,
    EvaluationCreate,
    EvaluationResponse,
    LeaderEvaluationCreate,
)
from hrtalent.services.evaluation_service import EvaluationService

router = APIRouter(prefix="/evaluations", tags=["evaluations"])


# --- Cycles ---

@router.get("/cycles")
def list_cycles(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    cycles = EvaluationService(db).list_cycles()
    return ApiResponse.ok([CycleResponse.model_validate(c) for c in cycles]).to_dict()


@router.get("/cycles/current")
def get_current_cycle(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    """The open/active cycle covering today, or null."""
    cycle = EvaluationService(db).current_cycle()
    return ApiResponse.ok(CycleResponse.model_validate(cycle) if cycle else None).to_dict()


@router.post("/cycles", status_code=201)
def create_cycle(
    request: CycleCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_manager()),
):
    cycle = EvaluationService(db, current_user.id).create_cycle(request.model_dump())
    return ApiResponse.ok(CycleResponse.model_validate(cycle)).to_dict()


@router.put("/cycles/{cycle_id}/open")
def open_cycle(cycle_id: int, db: Session = Depends(get_db),
               current_user: User = Depends(require_manager())):
    cycle = EvaluationService(db, current_user.id).set_cycle_status(cycle_id, "open")
    return ApiResponse.ok(CycleResponse.model_validate(cycle)).to_dict()


@router.put("/cycles/{cycle_id}/close")
def close_cycle(cycle_id: int, db: Session = Depends(get_db),
                current_user: User = Depends(require_manager())):
    cycle = EvaluationService(db, current_user.id).set_cycle_status(cycle_id, "closed")
    return ApiResponse.ok(CycleResponse.model_validate(cycle)).to_dict()


# --- Evaluations ---

@router.get("/check-existing")
def check_existing_evaluation(
    employee_id: int = Query(..., alias="employeeId"),
    evaluation_type: EvaluationType = Query(..., alias="type"),
    cycle_id: Optional[int] = Query(None, alias="cycleId"),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    existing = EvaluationService(db).find_existing(cycle_id, employee_id, evaluation_type.value)
    return ApiResponse.ok({"exists": existing is not None, "evaluationId": existing.id if existing else None}).to_dict()


@router.get("/employee/{employee_id}")
def get_employee_evaluations(employee_id: int, db: Session = Depends(get_db),
                             current_user: User = Depends(get_current_user)):
    evaluations = EvaluationService(db).list_for_employee(employee_id)
    return ApiResponse.ok([EvaluationResponse.model_validate(e) for e in evaluations]).to_dict()


@router.post("/self", status_code=201)
def create_self_evaluation(
    request: EvaluationCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    if request.employee_id != current_user.id:
        raise AccessDeniedError("Autoavaliação só pode ser registrada pelo próprio colaborador")

    evaluation = EvaluationService(db, current_user.id).create_evaluation(
        EvaluationType.SELF.value,
        employee_id=request.employee_id,
        evaluator_id=current_user.id,
        competencies=[c.model_dump(mode="json") for c in request.competencies],
        cycle_id=request.cycle_id,
        status=request.status.value,
        evaluation_date=request.evaluation_date,
        feedback=request.feedback,
    )
    return ApiResponse.ok(EvaluationResponse.model_validate(evaluation)).to_dict()


@router.post("/leader", status_code=201)
def create_leader_evaluation(
    request: LeaderEvaluationCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_manager()),
):
    evaluation = EvaluationService(db, current_user.id).create_evaluation(
        EvaluationType.LEADER.value,
        employee_id=request.employee_id,
        evaluator_id=current_user.id,
        competencies=[c.model_dump(mode="json") for c in request.competencies],
        cycle_id=request.cycle_id,
        status=request.status.value,
        evaluation_date=request.evaluation_date,
        potential_score=request.potential_score,
        feedback=request.feedback,
    )
    return ApiResponse.ok(EvaluationResponse.model_validate(evaluation)).to_dict()
