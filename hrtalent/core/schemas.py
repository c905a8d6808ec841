from typing import Any, Dict, Generic, List, Optional, TypeVar
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

T = TypeVar("T")

class ApiResponse(BaseModel, Generic[T]):
    """Envelope shared by every endpoint: {success, data} or {success: false, error}."""
    success: bool
    data: Optional[T] = None
    error: Optional[str] = None
    code: Optional[str] = None
    errors: Optional[List[Any]] = None
    warnings: Optional[List[str]] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary with JSON-serializable values, dropping unset extras."""
        payload = self.model_dump(mode="json")
        for key in ("error", "code", "errors", "warnings"):
            if payload.get(key) is None:
                payload.pop(key, None)
        if not self.success:
            payload.pop("data", None)
        return payload

    @classmethod
    def ok(cls, data: T, warnings: Optional[List[str]] = None) -> "ApiResponse[T]":
        return cls(success=True, data=data, warnings=warnings or None)

    @classmethod
    def fail(
        cls,
        message: str,
        code: Optional[str] = None,
        errors: Optional[List[Any]] = None,
        warnings: Optional[List[str]] = None,
    ) -> "ApiResponse[T]":
        return cls(success=False, error=message, code=code, errors=errors, warnings=warnings)


class ValidationResult(BaseModel):
    """Outcome of a rules check. Errors block the operation, warnings never do."""
    is_valid: bool = True
    errors: List[str] = Field(default_factory=list)
    warnings: List[str] = Field(default_factory=list)

    @classmethod
    def from_messages(cls, errors: List[str], warnings: List[str]) -> "ValidationResult":
        return cls(is_valid=len(errors) == 0, errors=list(errors), warnings=list(warnings))

    @classmethod
    def failure(cls, message: str) -> "ValidationResult":
        return cls(is_valid=False, errors=[message], warnings=[])


class CamelModel(BaseModel):
    """Request body accepting camelCase keys (as sent by the web client) or snake_case."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)
