# schemas.py
from __future__ import annotations
import math
from typing import List, Literal, Optional, Any
from datetime import datetime, timezone
from pydantic import BaseModel, Field, validator, model_validator, constr

from nsolver import GroupingMode


# ---------------------------
# Helper validators / types
# ---------------------------

NumbersText = constr(min_length=1, max_length=512)


def ensure_tzaware(dt: datetime) -> datetime:
    """Ensure a datetime has tzinfo. If naive, interpret as UTC."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt


# ---------------------------
# Requests
# ---------------------------

class SolveRequest(BaseModel):
    """
    Solve request sent by a client.
    - numbers: already parsed input values
    - text: raw space separated input, parsed server side (an invalid token empties the input)
    Exactly one of numbers / text must be given.
    """
    numbers: Optional[List[float]] = Field(None, description="Input values")
    text: Optional[NumbersText] = Field(None, description="Space separated input values")
    target: Optional[float] = Field(None, description="Target value, defaults to the server setting")
    mode: Optional[GroupingMode] = Field(None, description="Reduction order scheme")
    include_traces: Optional[bool] = Field(None, description="Return derivation traces")

    model_config = {
        "json_schema_extra": {
            "example": {"text": "1 5 5 5", "target": 24, "mode": "clamped", "include_traces": True}
        }
    }

    @validator('numbers')
    def numbers_must_be_finite(cls, v):
        if v is not None and not all(math.isfinite(n) for n in v):
            raise ValueError("numbers must be finite")
        return v

    @validator('target')
    def target_must_be_finite(cls, v):
        if v is not None and not math.isfinite(v):
            raise ValueError("target must be finite")
        return v

    @model_validator(mode="after")
    def numbers_xor_text(self):
        if (self.numbers is None) == (self.text is None):
            raise ValueError("exactly one of 'numbers' or 'text' is required")
        return self


# ---------------------------
# Responses
# ---------------------------

class ReductionStepModel(BaseModel):
    left: float
    operator: Literal["+", "-", "*", "/"]
    right: float
    position: int = Field(..., ge=0)
    buffer: List[float]
    text: str = Field(..., description="Step rendered as 'l op r: buffer'")

    # inf / nan intermediates serialize as null
    model_config = {"ser_json_inf_nan": "null"}


class SolutionModel(BaseModel):
    permutation: List[float]
    operators: List[Literal["+", "-", "*", "/"]] = Field(default_factory=list)
    order: List[int] = Field(default_factory=list)
    expression: str
    steps: List[ReductionStepModel] = Field(default_factory=list)
    trace: Optional[str] = None


class SolveResponse(BaseModel):
    numbers: List[float]
    target: float
    mode: GroupingMode
    count: int = Field(..., ge=0)
    elapsed_ms: float = Field(..., ge=0.0)
    elapsed_display: str
    solutions: List[SolutionModel] = Field(default_factory=list)
    solved_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    _tz_solved = validator('solved_at', allow_reuse=True)(ensure_tzaware)


class HealthResponse(BaseModel):
    status: Literal["healthy"] = "healthy"
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    version: str


class ErrorPayload(BaseModel):
    code: str
    message: str
    details: Optional[Any] = None
