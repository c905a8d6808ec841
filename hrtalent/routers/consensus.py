from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from hrtalent.core.schemas import ApiResponse
from hrtalent.database import get_db
from hrtalent.models.user import User
from hrtalent.routers.auth_deps import get_current_user, require_manager
from hrtalent.schemas.consensus import ConsensusCompletion, ConsensusMeetingCreate, ConsensusMeetingResponse
from hrtalent.services.consensus_service import ConsensusService

router = APIRouter(prefix="/consensus", tags=["consensus"])


@router.post("", status_code=201)
def create_consensus_meeting(
    request: ConsensusMeetingCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_manager()),
):
    meeting = ConsensusService(db, current_user.id).create_meeting(
        request.employee_id, cycle_id=request.cycle_id,
        meeting_date=request.meeting_date, notes=request.notes,
    )
    return ApiResponse.ok(ConsensusMeetingResponse.model_validate(meeting)).to_dict()


@router.put("/{meeting_id}/complete")
def complete_consensus_meeting(
    meeting_id: int,
    request: ConsensusCompletion,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_manager()),
):
    """Store the agreed performance/potential pair and its nine-box label."""
    meeting = ConsensusService(db, current_user.id).complete_meeting(
        meeting_id,
        request.performance_score,
        request.potential_score,
        notes=request.notes,
        actor_role=current_user.role.value,
    )
    return ApiResponse.ok(ConsensusMeetingResponse.model_validate(meeting)).to_dict()


@router.get("/cycles/{cycle_id}/nine-box")
def get_nine_box(cycle_id: int, db: Session = Depends(get_db),
                 current_user: User = Depends(get_current_user)):
    return ApiResponse.ok(ConsensusService(db).nine_box_data(cycle_id)).to_dict()
