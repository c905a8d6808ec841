from sqlalchemy import Column, Integer, String, Float, DateTime, Text, ForeignKey
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from hrtalent.database import Base
import enum


class ConsensusStatus(str, enum.Enum):
    SCHEDULED = "scheduled"
    COMPLETED = "completed"


class ConsensusMeeting(Base):
    """Reconciles self and leader scores into the official performance/potential pair."""
    __tablename__ = "consensus_meetings"

    id = Column(Integer, primary_key=True, index=True)
    cycle_id = Column(Integer, ForeignKey("evaluation_cycles.id"), nullable=True, index=True)
    employee_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    self_evaluation_id = Column(Integer, ForeignKey("evaluations.id"), nullable=True)
    leader_evaluation_id = Column(Integer, ForeignKey("evaluations.id"), nullable=True)
    meeting_date = Column(DateTime, nullable=True)
    status = Column(String, default=ConsensusStatus.SCHEDULED.value, nullable=False)

    consensus_performance_score = Column(Float, nullable=True)
    consensus_potential_score = Column(Float, nullable=True)
    nine_box_position = Column(String, nullable=True)
    notes = Column(Text, nullable=True)

    created_by = Column(Integer, ForeignKey("users.id"), nullable=True)
    completed_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    employee = relationship("User", foreign_keys=[employee_id])
