import pytest
from pydantic import ValidationError

from chart_insight_pipeline.app.schemas import (
    AnalysisResult,
    AnnotationInput,
    AnnotationOutput,
    ChartAssessment,
    DisclaimerInput,
    DisclaimerOutput,
    Outcome,
    Prediction,
)


@pytest.mark.parametrize("probability", [0, 0.0, 0.5, 1, 1.0])
def test_prediction_accepts_closed_unit_interval(probability):
    assert Prediction(direction="DOWN", probability=probability).probability == probability


@pytest.mark.parametrize("probability", [-0.01, 1.01, 2])
def test_prediction_rejects_out_of_range(probability):
    with pytest.raises(ValidationError):
        Prediction(direction="UP", probability=probability)


def test_prediction_is_immutable():
    prediction = Prediction(direction="UP", probability=0.7)
    with pytest.raises(ValidationError):
        prediction.direction = "DOWN"


def test_chart_assessment_reads_camel_case():
    assessment = ChartAssessment.model_validate(
        {"isValidChart": True, "prediction": {"direction": "UP", "probability": 0.6}}
    )

    assert assessment.is_valid_chart is True
    assert assessment.prediction == Prediction(direction="UP", probability=0.6)


def test_chart_assessment_flag_is_strict():
    with pytest.raises(ValidationError):
        ChartAssessment.model_validate({"isValidChart": 1})


def test_annotation_input_exposes_rounded_percent():
    payload = AnnotationInput(
        photo_data_uri="data:image/png;base64,iVBORw0KGgo=",
        prediction=Prediction(direction="DOWN", probability=0.666),
        watermark="wm",
    )

    assert payload.model_dump()["probability_percent"] == "67"


def test_annotation_output_requires_image_data_uri():
    assert AnnotationOutput(image="data:image/png;base64,AAAA").image == "data:image/png;base64,AAAA"
    with pytest.raises(ValidationError):
        AnnotationOutput(image="https://example.com/a.png")


def test_disclaimer_output_is_stripped_and_non_empty():
    assert DisclaimerOutput(disclaimer="  text \n").disclaimer == "text"
    with pytest.raises(ValidationError):
        DisclaimerOutput(disclaimer=" \n ")


def test_analysis_result_serializes_with_wire_names():
    result = AnalysisResult(
        success=True,
        is_valid_chart=True,
        outcome=Outcome.SUCCESS,
        prediction=Prediction(direction="UP", probability=0.73),
        annotated_image="data:image/png;base64,AAAA",
        disclaimer="Risky.",
    )

    data = result.model_dump(mode="json", by_alias=True)

    assert data == {
        "success": True,
        "isValidChart": True,
        "outcome": "SUCCESS",
        "prediction": {"direction": "UP", "probability": 0.73},
        "annotatedImage": "data:image/png;base64,AAAA",
        "disclaimer": "Risky.",
        "error": None,
    }


@pytest.mark.parametrize("probability", ["0.73", "1", True, False])
def test_prediction_probability_is_not_coerced(probability):
    with pytest.raises(ValidationError):
        Prediction(direction="UP", probability=probability)


def test_disclaimer_input_probability_is_strict():
    assert DisclaimerInput(direction="UP", probability=1, language="English").probability == 1.0
    with pytest.raises(ValidationError):
        DisclaimerInput(direction="UP", probability="0.5", language="English")
