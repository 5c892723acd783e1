"""
FastAPI entrypoint.

Routes:
- POST /analyze: screenshot (data URI form field, or an uploaded file) -> AnalysisResult
- POST /login: static credential check for the frontend
- GET /health: liveness check

The Gemini client is built once at startup and handed to the pipeline through
a dependency, so tests can override it with a fake.
"""

import logging
from contextlib import asynccontextmanager
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

from .config import Settings, get_settings


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=settings.log_level.upper(),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )


configure_logging(get_settings())
logger = logging.getLogger(__name__)

from fastapi import Depends, FastAPI, File, Form, Request, UploadFile
from typing import Optional

from .analyzer import analyze
from .auth import authenticate, check_login_form
from .llm_client import GeminiModelClient, ModelClient
from .messages import messages_for
from .schemas import AnalysisResult, LoginResult, Outcome
from .utils import preview, to_data_uri


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    app.state.model_client = GeminiModelClient.from_settings(settings)
    logger.info(
        f"Gemini client ready (vision={settings.vision_model}, text={settings.text_model}, "
        f"image={settings.image_model})"
    )
    yield


app = FastAPI(title="Chart Insight Pipeline", lifespan=lifespan)


def get_model_client(request: Request) -> ModelClient:
    return request.app.state.model_client


def _upload_to_data_uri(file: UploadFile) -> str:
    """Encode an uploaded file as a data URI using its declared content type."""
    content_type = file.content_type or "application/octet-stream"
    return to_data_uri(content_type, file.file.read())


@app.get("/health")
def health():
    return {"status": "ok"}


@app.post("/analyze", response_model=AnalysisResult)
def analyze_endpoint(
    screenshot: Optional[str] = Form(None),
    file: Optional[UploadFile] = File(None),
    client: ModelClient = Depends(get_model_client),
    settings: Settings = Depends(get_settings),
):
    logger.info(">>> /analyze started.")
    try:
        payload = screenshot
        if not payload and file is not None:
            payload = _upload_to_data_uri(file)
        if payload:
            logger.info(f"Screenshot received: {preview(payload)}")

        result = analyze(
            payload,
            client,
            language=settings.disclaimer_language,
            watermark=settings.annotation_watermark,
        )
    except Exception as e:
        # analyze() already shapes its own failures; this covers the request handling around it
        logger.exception(f"Unexpected critical error in /analyze: {e}")
        messages = messages_for(settings.disclaimer_language)
        return AnalysisResult(
            success=False,
            is_valid_chart=False,
            outcome=Outcome.UPSTREAM_FAILURE,
            error=messages["unexpected"].format(error=str(e) or messages["unknown_error"]),
        )

    if not result.success:
        logger.error(f"Analysis did not succeed ({result.outcome.value}): {result.error}")
    logger.info("<<< /analyze finished.")
    return result


@app.post("/login", response_model=LoginResult)
def login_endpoint(
    user_id: Optional[str] = Form(None, alias="userId"),
    password: Optional[str] = Form(None),
    settings: Settings = Depends(get_settings),
):
    messages = messages_for(settings.disclaimer_language)

    problem = check_login_form(user_id, password, messages)
    if problem:
        logger.error(f"Login validation failed: {problem}")
        return LoginResult(success=False, error=problem)

    try:
        return authenticate(user_id, password, settings, messages)
    except Exception as e:
        logger.exception(f"Critical error during authentication: {e}")
        return LoginResult(success=False, error=messages["auth_error"])
