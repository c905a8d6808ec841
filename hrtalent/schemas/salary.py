from pydantic import BaseModel, ConfigDict, Field
from datetime import date, datetime
from typing import Any, Dict, List, Literal, Optional

from hrtalent.core.schemas import CamelModel
from hrtalent.models.progression import ProgressionType


# --- Requests ---

class SalaryCalculationRequest(CamelModel):
    track_position_id: int
    salary_level_id: int


class TrackAssignmentRequest(CamelModel):
    track_position_id: int
    salary_level_id: int


class ProgressionRequest(CamelModel):
    to_track_position_id: int
    to_salary_level_id: int
    progression_type: ProgressionType
    reason: Optional[str] = None


class LevelChangeRequest(CamelModel):
    salary_level_id: int
    reason: Optional[str] = None


class TrackPositionCreate(CamelModel):
    position_id: int
    class_id: int
    base_salary: float = Field(..., ge=0)
    order_index: int = 0
    vacancies: Optional[int] = Field(None, ge=0)
    custom_level_percentages: Optional[Dict[str, float]] = None


class CareerTrackCreate(CamelModel):
    name: str = Field(..., min_length=1)
    code: Optional[str] = None
    description: Optional[str] = None
    department_id: Optional[int] = None
    positions: List[TrackPositionCreate] = []


class StructurePosition(CamelModel):
    class_id: int
    base_salary: float


class SalaryStructureRequest(CamelModel):
    positions: List[StructurePosition]


class BudgetScenario(CamelModel):
    type: Literal["individual", "department", "global"]
    target_id: Optional[int] = None
    percentage_increase: Optional[float] = None
    absolute_increase: Optional[float] = None


class BudgetSimulationRequest(CamelModel):
    scenarios: List[BudgetScenario] = Field(..., min_length=1)


# --- Responses ---

class UserCareerResponse(BaseModel):
    id: int
    email: str
    full_name: Optional[str] = None
    position: Optional[str] = None
    is_active: bool
    department_id: Optional[int] = None
    current_track_position_id: Optional[int] = None
    current_salary_level_id: Optional[int] = None
    current_salary: Optional[float] = None
    position_start_date: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class ProgressionHistoryResponse(BaseModel):
    id: int
    user_id: int
    from_track_position_id: Optional[int] = None
    to_track_position_id: int
    from_salary_level_id: Optional[int] = None
    to_salary_level_id: int
    from_salary: Optional[float] = None
    to_salary: float
    progression_type: str
    progression_date: date
    reason: Optional[str] = None
    approved_by: Optional[int] = None

    model_config = ConfigDict(from_attributes=True)


class TrackPositionResponse(BaseModel):
    id: int
    track_id: int
    position_id: int
    class_id: int
    base_salary: float
    order_index: int
    vacancies: Optional[int] = None
    custom_level_percentages: Optional[Dict[str, float]] = None

    model_config = ConfigDict(from_attributes=True)


class CareerTrackResponse(BaseModel):
    id: int
    name: str
    code: Optional[str] = None
    description: Optional[str] = None
    department_id: Optional[int] = None
    is_active: bool
    positions: List[TrackPositionResponse] = []

    model_config = ConfigDict(from_attributes=True)


class ProgressionRuleResponse(BaseModel):
    id: int
    from_position_id: int
    to_position_id: int
    progression_type: str
    min_time_months: Optional[int] = None
    performance_requirement: Optional[float] = None
    additional_requirements: Optional[Dict[str, Any]] = None

    model_config = ConfigDict(from_attributes=True)
