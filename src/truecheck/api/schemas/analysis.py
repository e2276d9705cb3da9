"""Local analysis function request/response schemas."""
from typing import Literal

from pydantic import BaseModel, Field

from truecheck.core.verdict import AnalysisResult, MediaDetails, ModelVerdict

__all__ = ["AnalyzeJsonRequest", "AnalysisResult", "MediaDetails", "ModelVerdict"]


class AnalyzeJsonRequest(BaseModel):
    """JSON body variant: base64 data URI plus the declared media kind."""
    media: str = Field(..., description="data:<mime>;base64,<payload>")
    type: Literal["image", "video"] = "image"
