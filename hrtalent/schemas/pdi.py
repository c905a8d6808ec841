from pydantic import BaseModel, ConfigDict
from datetime import datetime
from typing import Any, Dict, List, Optional

from hrtalent.core.schemas import CamelModel


class PDISaveRequest(CamelModel):
    """
    Items are kept as raw mappings; their shape is checked by the PDI rules
    so that a malformed item yields a 400 with a domain message.
    """
    employee_id: Optional[int] = None
    cycle_id: Optional[int] = None
    leader_evaluation_id: Optional[int] = None
    periodo: Optional[str] = None
    items: Optional[List[Dict[str, Any]]] = None
    curtos_prazos: Optional[List[Dict[str, Any]]] = None
    medios_prazos: Optional[List[Dict[str, Any]]] = None
    longos_prazos: Optional[List[Dict[str, Any]]] = None


class DevelopmentPlanResponse(BaseModel):
    id: int
    employee_id: int
    cycle_id: Optional[int] = None
    leader_evaluation_id: Optional[int] = None
    items: List[Dict[str, Any]]
    periodo: Optional[str] = None
    status: str
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
