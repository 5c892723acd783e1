"""
Pydantic request/response models.

Rationale:
- Define explicit contracts for both sides of the pipeline: what the API returns
  and what each model call must send back.
- Model output is validated against these schemas and never coerced into the
  success path, so ranges and enums live here rather than in the pipeline.
- Field names are snake_case; the wire format uses the camelCase names the
  frontend already knows (isValidChart, annotatedImage).
"""

from enum import Enum
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator
from pydantic.alias_generators import to_camel

from .utils import is_image_data_uri

Direction = Literal["UP", "DOWN"]


class Prediction(BaseModel):
    model_config = ConfigDict(frozen=True)

    direction: Direction
    probability: float = Field(ge=0, le=1, strict=True)


# ---- Model call contracts ----

class ChartImageInput(BaseModel):
    photo_data_uri: str


class ChartAssessment(BaseModel):
    """Classifier output. `prediction` should be present iff `is_valid_chart`."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    is_valid_chart: bool = Field(strict=True)
    prediction: Optional[Prediction] = None


class AnnotationInput(BaseModel):
    photo_data_uri: str
    prediction: Prediction
    watermark: str

    @computed_field
    @property
    def probability_percent(self) -> str:
        return f"{self.prediction.probability * 100:.0f}"


class AnnotationOutput(BaseModel):
    image: str

    @field_validator("image")
    @classmethod
    def _must_be_image_data_uri(cls, v: str) -> str:
        if not is_image_data_uri(v):
            raise ValueError("annotation output is not an image data URI")
        return v


class DisclaimerInput(BaseModel):
    direction: Direction
    probability: float = Field(ge=0, le=1, strict=True)
    language: str


class DisclaimerOutput(BaseModel):
    disclaimer: str

    @field_validator("disclaimer")
    @classmethod
    def _must_not_be_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("disclaimer is empty")
        return v


# ---- API responses ----

class Outcome(str, Enum):
    SUCCESS = "SUCCESS"
    REJECTED_INVALID_INPUT = "REJECTED_INVALID_INPUT"
    REJECTED_NOT_A_CHART = "REJECTED_NOT_A_CHART"
    REJECTED_NO_PREDICTION = "REJECTED_NO_PREDICTION"
    UPSTREAM_FAILURE = "UPSTREAM_FAILURE"


class AnalysisResult(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    success: bool
    is_valid_chart: bool
    outcome: Outcome
    prediction: Optional[Prediction] = None
    annotated_image: Optional[str] = None
    disclaimer: Optional[str] = None
    error: Optional[str] = None


class LoginResult(BaseModel):
    success: bool
    error: Optional[str] = None
