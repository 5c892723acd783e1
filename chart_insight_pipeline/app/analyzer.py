"""
Core orchestration / pipeline.

Flow:
1. Validate the payload is an embedded image (data URI). No model call otherwise.
2. Classifier call: is this a binary options chart, and if so UP/DOWN + probability.
   - "not a chart" and "valid chart without prediction" are expected terminal outcomes
   - call failures and schema mismatches are fatal (UPSTREAM_FAILURE)
3. Annotator call (best-effort): annotated copy of the chart, or nothing.
4. Disclaimer call (best-effort): localized risk text, or a fixed fallback.
5. Aggregate into one AnalysisResult. Nothing escapes analyze().
"""

import logging
from dataclasses import dataclass
from typing import Dict, Generic, Optional, TypeVar

from .errors import ContractViolation, UpstreamError, ValidationError
from .llm_client import ModelClient, ModelRole, PromptSpec
from .messages import messages_for
from .schemas import (
    AnalysisResult,
    AnnotationInput,
    AnnotationOutput,
    ChartAssessment,
    ChartImageInput,
    DisclaimerInput,
    DisclaimerOutput,
    Outcome,
    Prediction,
)
from .utils import is_image_data_uri, parse_data_uri, preview

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_LANGUAGE = "Bengali"
DEFAULT_WATERMARK = "Quotex Ai 3.0"

CLASSIFY_PROMPT = PromptSpec(
    name="classify_chart",
    template_file="classify_chart.txt",
    role=ModelRole.VISION,
    image_field="photo_data_uri",
)
ANNOTATE_PROMPT = PromptSpec(
    name="annotate_chart",
    template_file="annotate_chart.txt",
    role=ModelRole.IMAGE,
    image_field="photo_data_uri",
)
DISCLAIMER_PROMPT = PromptSpec(
    name="risk_disclaimer",
    template_file="risk_disclaimer.txt",
    role=ModelRole.TEXT,
)


@dataclass(frozen=True)
class StageResult(Generic[T]):
    """Outcome of a best-effort stage: either a value or the reason it failed."""

    value: Optional[T] = None
    failure: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.failure is None

    def or_none(self) -> Optional[T]:
        return self.value if self.ok else None

    def or_else(self, default: T) -> T:
        return self.value if self.ok else default


def validate_payload(payload: Optional[str], messages: Dict[str, str]) -> str:
    """Return the payload unchanged if it is an image data URI, else raise ValidationError."""
    if not payload:
        raise ValidationError(messages["no_screenshot"])
    if not is_image_data_uri(payload):
        raise ValidationError(messages["invalid_format"])
    try:
        parse_data_uri(payload)
    except ValueError:
        raise ValidationError(messages["invalid_format"])
    return payload


def classify_chart(photo_data_uri: str, client: ModelClient) -> ChartAssessment:
    """Single vision call. Raises UpstreamError / ContractViolation on failure."""
    return client.invoke(CLASSIFY_PROMPT, ChartImageInput(photo_data_uri=photo_data_uri), ChartAssessment)


def annotate_chart(
    photo_data_uri: str,
    prediction: Prediction,
    client: ModelClient,
    watermark: str = DEFAULT_WATERMARK,
) -> StageResult[str]:
    try:
        output = client.invoke(
            ANNOTATE_PROMPT,
            AnnotationInput(photo_data_uri=photo_data_uri, prediction=prediction, watermark=watermark),
            AnnotationOutput,
        )
    except Exception as e:
        logger.error(f"Non-critical error during image annotation: {type(e).__name__}: {e}")
        return StageResult(failure=str(e) or type(e).__name__)

    logger.info(f"Annotated image generated: {preview(output.image)}")
    return StageResult(value=output.image)


def generate_disclaimer(prediction: Prediction, client: ModelClient, language: str = DEFAULT_LANGUAGE) -> StageResult[str]:
    try:
        output = client.invoke(
            DISCLAIMER_PROMPT,
            DisclaimerInput(direction=prediction.direction, probability=prediction.probability, language=language),
            DisclaimerOutput,
        )
    except Exception as e:
        logger.error(f"Non-critical error during disclaimer generation: {type(e).__name__}: {e}")
        return StageResult(failure=str(e) or type(e).__name__)

    logger.info("Disclaimer generated successfully.")
    return StageResult(value=output.disclaimer)


def aggregate(
    prediction: Prediction,
    annotation: StageResult[str],
    disclaimer: StageResult[str],
    messages: Dict[str, str],
) -> AnalysisResult:
    """Fold best-effort outcomes into the SUCCESS result."""
    return AnalysisResult(
        success=True,
        is_valid_chart=True,
        outcome=Outcome.SUCCESS,
        prediction=prediction,
        annotated_image=annotation.or_none(),
        disclaimer=disclaimer.or_else(messages["disclaimer_fallback"]),
    )


def _rejected(outcome: Outcome, error: str, is_valid_chart: bool = False) -> AnalysisResult:
    return AnalysisResult(success=False, is_valid_chart=is_valid_chart, outcome=outcome, error=error)


def _upstream_failure(error: Exception, messages: Dict[str, str]) -> AnalysisResult:
    detail = str(error) or messages["unknown_error"]
    return _rejected(Outcome.UPSTREAM_FAILURE, messages["unexpected"].format(error=detail))


def _run_pipeline(
    payload: Optional[str],
    client: ModelClient,
    language: str,
    watermark: str,
    messages: Dict[str, str],
) -> AnalysisResult:
    # 1) Validate before spending any model call
    try:
        photo_data_uri = validate_payload(payload, messages)
    except ValidationError as e:
        logger.error(f"Validation error: {e}")
        return _rejected(Outcome.REJECTED_INVALID_INPUT, str(e))
    logger.info(f"Screenshot passed validation: {preview(photo_data_uri)}")

    # 2) Classify + predict (fatal on failure)
    try:
        assessment = classify_chart(photo_data_uri, client)
    except (UpstreamError, ContractViolation) as e:
        logger.error(f"Chart classification failed: {type(e).__name__}: {e}")
        return _upstream_failure(e, messages)

    if not assessment.is_valid_chart:
        if assessment.prediction is not None:
            logger.warning("Classifier returned a prediction for a non-chart image; ignoring it.")
        logger.info("AI determined image is not a valid chart.")
        return _rejected(Outcome.REJECTED_NOT_A_CHART, messages["not_a_chart"])

    if assessment.prediction is None:
        logger.error("Valid chart detected, but AI failed to return a prediction.")
        return _rejected(Outcome.REJECTED_NO_PREDICTION, messages["no_prediction"], is_valid_chart=True)

    prediction = assessment.prediction
    logger.info(f"Prediction: {prediction.direction} ({prediction.probability:.2f})")

    # 3) + 4) Best-effort enhancements; neither depends on the other
    annotation = annotate_chart(photo_data_uri, prediction, client, watermark=watermark)
    disclaimer = generate_disclaimer(prediction, client, language=language)

    return aggregate(prediction, annotation, disclaimer, messages)


def analyze(
    payload: Optional[str],
    client: ModelClient,
    language: str = DEFAULT_LANGUAGE,
    watermark: str = DEFAULT_WATERMARK,
) -> AnalysisResult:
    """
    Main analysis pipeline.

    Args:
        payload: Screenshot as a data URI ("data:image/png;base64,...")
        client: Model capability used for all three calls
        language: Language of the disclaimer and of user-facing messages
        watermark: Text the annotator overlays on the chart

    Returns:
        AnalysisResult in exactly one terminal state (see schemas.Outcome)
    """
    messages = messages_for(language)
    logger.info("--- Starting chart analysis ---")
    try:
        result = _run_pipeline(payload, client, language, watermark, messages)
    except Exception as e:
        logger.exception(f"Critical failure in chart analysis: {e}")
        return _upstream_failure(e, messages)

    logger.info(f"--- Chart analysis finished: {result.outcome.value} ---")
    return result
