from pydantic import BaseModel, ConfigDict, Field, model_validator
from datetime import date
from typing import List, Literal, Optional

from hrtalent.core.schemas import CamelModel
from hrtalent.models.evaluation import CompetencyCategory, EvaluationStatus


class CompetencyInput(CamelModel):
    name: str = Field(..., min_length=1)
    category: CompetencyCategory
    score: float = Field(..., ge=0, le=5)
    written_response: Optional[str] = None


class EvaluationCreate(CamelModel):
    employee_id: int
    cycle_id: Optional[int] = None
    competencies: List[CompetencyInput] = Field(..., min_length=1)
    status: EvaluationStatus = EvaluationStatus.COMPLETED
    evaluation_date: Optional[date] = None
    feedback: Optional[str] = None


class LeaderEvaluationCreate(EvaluationCreate):
    potential_score: Optional[float] = Field(None, ge=0, le=5)


class CycleCreate(CamelModel):
    title: str = Field(..., min_length=1)
    description: Optional[str] = None
    start_date: date
    end_date: date
    status: Literal["draft", "open", "active", "closed"] = "draft"

    @model_validator(mode="after")
    def check_dates(self):
        if self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")
        return self


class CompetencyResponse(BaseModel):
    id: int
    name: str
    category: str
    score: float
    written_response: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class EvaluationResponse(BaseModel):
    id: int
    cycle_id: Optional[int] = None
    employee_id: int
    evaluator_id: int
    evaluation_type: str
    status: str
    evaluation_date: date
    technical_score: float
    behavioral_score: float
    deliveries_score: float
    final_score: float
    potential_score: Optional[float] = None
    feedback: Optional[str] = None
    competencies: List[CompetencyResponse] = []

    model_config = ConfigDict(from_attributes=True)


class CycleResponse(BaseModel):
    id: int
    title: str
    description: Optional[str] = None
    start_date: date
    end_date: date
    status: str

    model_config = ConfigDict(from_attributes=True)
