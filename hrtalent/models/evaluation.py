from sqlalchemy import Column, Integer, String, Float, Date, DateTime, Text, ForeignKey
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from hrtalent.database import Base
import enum


class EvaluationType(str, enum.Enum):
    SELF = "self"
    LEADER = "leader"


class EvaluationStatus(str, enum.Enum):
    DRAFT = "draft"
    COMPLETED = "completed"


class CompetencyCategory(str, enum.Enum):
    TECHNICAL = "technical"
    BEHAVIORAL = "behavioral"
    DELIVERIES = "deliveries"


class EvaluationCycle(Base):
    __tablename__ = "evaluation_cycles"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
    status = Column(String, default="draft")  # draft, open, active, closed
    created_by = Column(Integer, ForeignKey("users.id"), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())


class Evaluation(Base):
    """Header row shared by self- and leader-evaluations; holds the derived scores."""
    __tablename__ = "evaluations"

    id = Column(Integer, primary_key=True, index=True)
    cycle_id = Column(Integer, ForeignKey("evaluation_cycles.id"), nullable=True, index=True)
    employee_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    evaluator_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    evaluation_type = Column(String, nullable=False)  # EvaluationType value
    status = Column(String, default=EvaluationStatus.DRAFT.value, nullable=False)
    evaluation_date = Column(Date, nullable=False)

    technical_score = Column(Float, default=0.0)
    behavioral_score = Column(Float, default=0.0)
    deliveries_score = Column(Float, default=0.0)
    final_score = Column(Float, default=0.0)
    potential_score = Column(Float, nullable=True)  # leader evaluations only

    feedback = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    competencies = relationship(
        "EvaluationCompetency",
        back_populates="evaluation",
        cascade="all, delete-orphan",
        order_by="EvaluationCompetency.id",
    )
    employee = relationship("User", foreign_keys=[employee_id])
    evaluator = relationship("User", foreign_keys=[evaluator_id])


class EvaluationCompetency(Base):
    __tablename__ = "evaluation_competencies"

    id = Column(Integer, primary_key=True, index=True)
    evaluation_id = Column(Integer, ForeignKey("evaluations.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String, nullable=False)
    category = Column(String, nullable=False)  # CompetencyCategory value
    score = Column(Float, nullable=False)
    written_response = Column(Text, nullable=True)

    evaluation = relationship("Evaluation", back_populates="competencies")
