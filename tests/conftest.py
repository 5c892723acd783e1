import pytest

from chart_insight_pipeline.app.llm_client import validate_output

# 8-byte PNG signature, enough to be a decodable image payload
PNG_DATA_URI = "data:image/png;base64,iVBORw0KGgo="
ANNOTATED_DATA_URI = "data:image/png;base64,iVBORw0KGgoAAAANSUhEUg=="

VALID_UP = {"isValidChart": True, "prediction": {"direction": "UP", "probability": 0.73}}


class FakeModelClient:
    """
    Records every invoke() and answers from a table keyed by prompt name.
    A table value is either raw model output (validated like the real client)
    or an exception instance to raise.
    """

    def __init__(self, responses):
        self.responses = dict(responses)
        self.calls = []
        self.rendered = {}

    @property
    def call_names(self):
        return [name for name, _ in self.calls]

    def invoke(self, prompt, payload, output_schema):
        self.calls.append((prompt.name, payload))
        self.rendered[prompt.name] = prompt.render(payload)
        response = self.responses[prompt.name]
        if isinstance(response, Exception):
            raise response
        return validate_output(response, output_schema)


@pytest.fixture
def png_data_uri():
    return PNG_DATA_URI


@pytest.fixture
def make_client():
    def _make(classify=VALID_UP, annotate=None, disclaimer=None):
        return FakeModelClient({
            "classify_chart": classify,
            "annotate_chart": annotate if annotate is not None else {"image": ANNOTATED_DATA_URI},
            "risk_disclaimer": disclaimer if disclaimer is not None else {"disclaimer": "Trading is risky."},
        })
    return _make
