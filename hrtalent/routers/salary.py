"""
Salary Router

Career tracks, salary calculation, progressions and salary reports.
Rules run in ProgressionValidator; writes go through ProgressionExecutor.
"""
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session, selectinload

from hrtalent.core.exceptions import BusinessRuleError
from hrtalent.core.schemas import ApiResponse, ValidationResult
from hrtalent.database import get_db
from hrtalent.models.career_track import CareerTrack, TrackPosition
from hrtalent.models.user import User
from hrtalent.routers.auth_deps import get_current_user, require_manager
from hrtalent.schemas.salary import (
    BudgetSimulationRequest,
    CareerTrackCreate,
    CareerTrackResponse,
    LevelChangeRequest,
    ProgressionHistoryResponse,
    ProgressionRequest,
    ProgressionRuleResponse,
    SalaryCalculationRequest,
    SalaryStructureRequest,
    TrackAssignmentRequest,
    UserCareerResponse,
)
from hrtalent.services.audit import AuditService
from hrtalent.services.progression_executor import ProgressionExecutor
from hrtalent.services.progression_rules import ProgressionValidator
from hrtalent.services.salary_calculator import SalaryService
from hrtalent.services.salary_reports import SalaryReportService

router = APIRouter(
    prefix="/salary",
    tags=["salary"],
    dependencies=[Depends(get_current_user)],
)


def _raise_if_invalid(result: ValidationResult):
    if not result.is_valid:
        raise BusinessRuleError(
            f"Validação falhou: {', '.join(result.errors)}",
            errors=result.errors,
            warnings=result.warnings,
        )


def _executor(db: Session, actor: User) -> ProgressionExecutor:
    return ProgressionExecutor(db, actor_id=actor.id, actor_role=actor.role.value)


# --- Calculation -----------------------------------------------------------

@router.post("/calculate")
def calculate_salary(request: SalaryCalculationRequest, db: Session = Depends(get_db)):
    """Price a track position at an interlevel: {baseSalary, levelPercentage, calculatedSalary}."""
    result = SalaryService(db).calculate(request.track_position_id, request.salary_level_id)
    return ApiResponse.ok(result).to_dict()


@router.get("/track-positions/{track_position_id}/levels")
def get_level_table(track_position_id: int, db: Session = Depends(get_db)):
    return ApiResponse.ok(SalaryService(db).level_table(track_position_id)).to_dict()


# --- Structure -------------------------------------------------------------

@router.get("/tracks")
def list_career_tracks(db: Session = Depends(get_db)):
    tracks = (
        db.query(CareerTrack)
        .options(selectinload(CareerTrack.positions))
        .filter(CareerTrack.is_active.is_(True))
        .order_by(CareerTrack.name)
        .all()
    )
    return ApiResponse.ok([CareerTrackResponse.model_validate(t) for t in tracks]).to_dict()


@router.post("/tracks", status_code=201)
def create_career_track(
    request: CareerTrackCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_manager()),
):
    """Create a career track with its positions; duplicate names per department are rejected."""
    validation = ProgressionValidator(db).validate_career_track(
        request.name, request.department_id, request.positions
    )
    _raise_if_invalid(validation)

    try:
        track = CareerTrack(
            name=request.name,
            code=request.code,
            description=request.description,
            department_id=request.department_id,
            positions=[TrackPosition(**p.model_dump()) for p in request.positions],
        )
        db.add(track)
        db.flush()
        AuditService(db, current_user.id).log_action(
            action="create_career_track",
            entity_type="career_track",
            entity_id=track.id,
            user_id=current_user.id,
            user_role=current_user.role.value,
            details={"name": track.name, "positions": len(request.positions)},
            warnings=validation.warnings,
        )
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(track)
    return ApiResponse.ok(CareerTrackResponse.model_validate(track), warnings=validation.warnings).to_dict()


@router.post("/structure/validate")
def validate_salary_structure(
    request: SalaryStructureRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_manager()),
):
    """Check that base salaries grow with the salary class order. Reports, never blocks."""
    positions = [p.model_dump() for p in request.positions]
    return ApiResponse.ok(ProgressionValidator(db).validate_salary_structure(positions)).to_dict()


# --- User placement --------------------------------------------------------

@router.put("/users/{user_id}/assign-track")
def assign_user_to_track(
    user_id: int,
    request: TrackAssignmentRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_manager()),
):
    validation = ProgressionValidator(db).validate_track_assignment(
        user_id, request.track_position_id, request.salary_level_id
    )
    _raise_if_invalid(validation)

    result = _executor(db, current_user).assign_user_to_track(
        user_id, request.track_position_id, request.salary_level_id, warnings=validation.warnings
    )
    data = UserCareerResponse.model_validate(result.user).model_dump(mode="json")
    data["warnings"] = validation.warnings
    return ApiResponse.ok(data, warnings=validation.warnings).to_dict()


@router.put("/users/{user_id}/update-level")
def update_user_salary_level(
    user_id: int,
    request: LevelChangeRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_manager()),
):
    """Move a user to another interlevel inside their current position."""
    executor = _executor(db, current_user)
    user = executor.get_user(user_id)

    warnings: List[str] = []
    if user.current_salary_level_id:
        validation = ProgressionValidator(db).validate_level_change(
            user_id, user.current_salary_level_id, request.salary_level_id
        )
        _raise_if_invalid(validation)
        warnings = validation.warnings

    user = executor.update_user_salary_level(user_id, request.salary_level_id, warnings=warnings)
    return ApiResponse.ok(UserCareerResponse.model_validate(user), warnings=warnings).to_dict()


@router.post("/users/{user_id}/progress")
def progress_user(
    user_id: int,
    request: ProgressionRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_manager()),
):
    """
    Validate the move from the user's current position, then execute it.
    Returns {history, user, warnings}; a rule violation returns 400 with
    the errors and warnings.
    """
    outcome = _executor(db, current_user).validate_and_progress(
        ProgressionValidator(db),
        user_id,
        request.to_track_position_id,
        request.to_salary_level_id,
        request.progression_type.value,
        reason=request.reason,
    )
    _raise_if_invalid(outcome.validation)

    result = outcome.result
    return ApiResponse.ok(
        {
            "history": ProgressionHistoryResponse.model_validate(result.history).model_dump(mode="json"),
            "user": UserCareerResponse.model_validate(result.user).model_dump(mode="json"),
            "warnings": result.warnings,
        },
        warnings=result.warnings,
    ).to_dict()


@router.get("/users/{user_id}/progression-history")
def get_progression_history(user_id: int, db: Session = Depends(get_db)):
    history = ProgressionExecutor(db).get_user_progression_history(user_id)
    return ApiResponse.ok([ProgressionHistoryResponse.model_validate(h) for h in history]).to_dict()


@router.get("/users/{user_id}/possible-progressions")
def get_possible_progressions(user_id: int, db: Session = Depends(get_db)):
    rules = ProgressionExecutor(db).possible_progressions(user_id)
    return ApiResponse.ok([ProgressionRuleResponse.model_validate(r) for r in rules]).to_dict()


# --- Reports ---------------------------------------------------------------

@router.get("/reports/overview", dependencies=[Depends(require_manager())])
def salary_overview(db: Session = Depends(get_db)):
    return ApiResponse.ok(SalaryReportService(db).overview()).to_dict()


@router.get("/reports/by-department", dependencies=[Depends(require_manager())])
def salary_by_department(db: Session = Depends(get_db)):
    return ApiResponse.ok(SalaryReportService(db).by_department()).to_dict()


@router.get("/reports/by-position", dependencies=[Depends(require_manager())])
def salary_by_position(db: Session = Depends(get_db)):
    return ApiResponse.ok(SalaryReportService(db).by_position()).to_dict()


@router.post("/reports/budget-simulation", dependencies=[Depends(require_manager())])
def simulate_budget(request: BudgetSimulationRequest, db: Session = Depends(get_db)):
    scenarios = [s.model_dump(by_alias=True, exclude_none=True) for s in request.scenarios]
    return ApiResponse.ok(SalaryReportService(db).simulate_budget_impact(scenarios)).to_dict()
