"""
API Response Models

Pydantic models for API responses.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from tacf_tracker.mentions import AgeBracket, ExerciseKind, GradeThresholds, MentionDecision, Sex
from tacf_tracker.schemas import HistoryPoint, TacfMentions, TacfRecordRead


class ClassifyResponse(BaseModel):
    """Response for POST /api/mentions/classify."""

    mention: str = Field(..., description="Mention code (MAB, ABN, NOR, ACN, MAC)")
    decision: MentionDecision = Field(..., description="Full classification decision")


class ThresholdRow(BaseModel):
    """One row of the mention table."""

    exercise: ExerciseKind
    sex: Sex
    bracket: AgeBracket
    unit: str = Field(..., description="'m' for Cooper, 'reps' otherwise")
    thresholds: GradeThresholds


class ThresholdTableResponse(BaseModel):
    """Response for GET /api/mentions/table."""

    rows: List[ThresholdRow] = Field(..., description="Table rows")
    count: int = Field(..., description="Number of rows returned")


class TacfSaveResponse(BaseModel):
    """Response for TACF create/update."""

    message: str = Field(..., description="Human-readable outcome")
    record: TacfRecordRead = Field(..., description="Stored record")
    mentions: TacfMentions = Field(..., description="Computed mentions")


class TacfListResponse(BaseModel):
    """Response for GET /api/people/{id}/tacf."""

    records: List[TacfRecordRead]
    count: int


class HistoryResponse(BaseModel):
    """Response for GET /api/people/{id}/history."""

    points: List[HistoryPoint] = Field(..., description="Points ordered by test date ascending")


class ErrorResponse(BaseModel):
    """Standard error response."""

    error: str = Field(..., description="Error type")
    message: str = Field(..., description="Error message")
    details: Optional[Dict[str, Any]] = Field(None, description="Additional details")
