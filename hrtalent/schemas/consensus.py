from pydantic import BaseModel, ConfigDict, Field
from datetime import datetime
from typing import Optional

from hrtalent.core.schemas import CamelModel


class ConsensusMeetingCreate(CamelModel):
    employee_id: int
    cycle_id: Optional[int] = None
    meeting_date: Optional[datetime] = None
    notes: Optional[str] = None


class ConsensusCompletion(CamelModel):
    performance_score: float = Field(..., ge=0, le=5)
    potential_score: float = Field(..., ge=0, le=5)
    notes: Optional[str] = None


class ConsensusMeetingResponse(BaseModel):
    id: int
    cycle_id: Optional[int] = None
    employee_id: int
    self_evaluation_id: Optional[int] = None
    leader_evaluation_id: Optional[int] = None
    meeting_date: Optional[datetime] = None
    status: str
    consensus_performance_score: Optional[float] = None
    consensus_potential_score: Optional[float] = None
    nine_box_position: Optional[str] = None
    notes: Optional[str] = None
    completed_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
