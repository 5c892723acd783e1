"""
LLM client wrapper using Google Gemini.

Rationale:
- Keep interface tiny: invoke(prompt, payload, output_schema) -> validated model.
  The pipeline only depends on the ModelClient protocol, so tests swap in fakes.
- Structured (JSON) calls go through the google-generativeai SDK. The annotation
  call needs an IMAGE response modality, which only the google-genai SDK exposes.
- No retries / no fallback. Call failures raise UpstreamError, schema mismatches
  raise ContractViolation; the caller decides which of those are fatal.
"""

import json
import logging
import os
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Protocol, Tuple, Type, TypeVar

import google.generativeai as genai
# google-generativeai has no IMAGE response modality; only the annotation call uses google-genai
from google import genai as google_genai
from google.genai import types as genai_types
from pydantic import BaseModel
from pydantic import ValidationError as SchemaValidationError

from .config import Settings
from .errors import ContractViolation, UpstreamError
from .utils import extract_json_object, parse_data_uri, to_data_uri

logger = logging.getLogger(__name__)

BASE_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
PROMPTS_DIR = os.path.join(BASE_DIR, "prompts")

T = TypeVar("T", bound=BaseModel)


class ModelRole(str, Enum):
    VISION = "vision"  # image in, JSON out
    TEXT = "text"      # JSON out
    IMAGE = "image"    # image in, image out


def _read_prompt(path: str) -> str:
    """Read a prompt text file."""
    with open(path, "r", encoding="utf-8") as f:
        return f.read()


@dataclass(frozen=True)
class PromptSpec:
    """
    One model call: which template to render, which model family answers it,
    and which payload field (if any) holds a data URI to attach as an image.
    """

    name: str
    template_file: str
    role: ModelRole
    image_field: Optional[str] = None

    def render(self, payload: BaseModel) -> str:
        template = _read_prompt(os.path.join(PROMPTS_DIR, self.template_file))
        return template.format(**payload.model_dump())

    def attachments(self, payload: BaseModel) -> List[Tuple[str, bytes]]:
        if not self.image_field:
            return []
        return [parse_data_uri(getattr(payload, self.image_field))]


class ModelClient(Protocol):
    def invoke(self, prompt: PromptSpec, payload: BaseModel, output_schema: Type[T]) -> T:
        ...


def validate_output(raw: object, output_schema: Type[T]) -> T:
    """Validate raw model output against the schema; mismatch is a ContractViolation."""
    try:
        return output_schema.model_validate(raw)
    except SchemaValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(p) for p in err['loc']) or '<root>'}: {err['msg']}" for err in e.errors()
        )
        raise ContractViolation(f"{output_schema.__name__} rejected model output: {problems}")


class GeminiModelClient:
    """ModelClient backed by Gemini. Build once at startup and share."""

    def __init__(
        self,
        api_key: str,
        vision_model: str,
        text_model: str,
        image_model: str,
        max_tokens: int = 2048,
    ):
        genai.configure(api_key=api_key)
        self._image_client = google_genai.Client(api_key=api_key)
        self.vision_model = vision_model
        self.text_model = text_model
        self.image_model = image_model
        self.max_tokens = max_tokens

    @classmethod
    def from_settings(cls, settings: Settings) -> "GeminiModelClient":
        if not settings.gemini_api_key:
            raise RuntimeError("GEMINI_API_KEY or LLM_API_KEY must be set in environment")
        return cls(
            api_key=settings.gemini_api_key,
            vision_model=settings.vision_model,
            text_model=settings.text_model,
            image_model=settings.image_model,
        )

    def invoke(self, prompt: PromptSpec, payload: BaseModel, output_schema: Type[T]) -> T:
        prompt_text = prompt.render(payload)
        images = prompt.attachments(payload)
        logger.info(f"Invoking {prompt.name} ({prompt.role.value}, {len(images)} image(s))")

        if prompt.role is ModelRole.IMAGE:
            raw = {"image": self._generate_image(prompt_text, images)}
        else:
            model_name = self.vision_model if prompt.role is ModelRole.VISION else self.text_model
            text = self._generate_json(model_name, prompt_text, images)
            logger.debug(f"{prompt.name} raw response: {text}")
            try:
                raw = extract_json_object(text)
            except json.JSONDecodeError as e:
                raise ContractViolation(f"{prompt.name} response is not valid JSON: {e}")

        return validate_output(raw, output_schema)

    def _generate_json(self, model_name: str, prompt_text: str, images: List[Tuple[str, bytes]]) -> str:
        model = genai.GenerativeModel(model_name=model_name)
        config = genai.GenerationConfig(
            max_output_tokens=self.max_tokens,
            temperature=0.1,  # Low temperature for more deterministic JSON
            response_mime_type="application/json",
        )
        contents = [prompt_text] + [{"mime_type": mime, "data": data} for mime, data in images]

        try:
            response = model.generate_content(contents, generation_config=config)
        except Exception as e:
            raise UpstreamError(f"Gemini API error: {e}")

        # response.text raises ValueError on safety blocks and other finish reasons
        try:
            result = response.text
        except ValueError:
            if response.candidates:
                raise UpstreamError(f"Gemini blocked response. Finish reason: {response.candidates[0].finish_reason}")
            raise UpstreamError("Gemini returned no candidates.")

        if not result:
            raise UpstreamError("Gemini returned empty response")
        return result

    def _generate_image(self, prompt_text: str, images: List[Tuple[str, bytes]]) -> str:
        contents = [prompt_text] + [genai_types.Part.from_bytes(data=data, mime_type=mime) for mime, data in images]

        try:
            response = self._image_client.models.generate_content(
                model=self.image_model,
                contents=contents,
                config=genai_types.GenerateContentConfig(response_modalities=["TEXT", "IMAGE"]),
            )
        except Exception as e:
            raise UpstreamError(f"Gemini image API error: {e}")

        if not response.candidates or not response.candidates[0].content:
            reason = response.candidates[0].finish_reason if response.candidates else None
            raise ContractViolation(f"Image model returned no content. Finish reason: {reason}")

        for part in response.candidates[0].content.parts or []:
            if part.inline_data and part.inline_data.data:
                return to_data_uri(part.inline_data.mime_type or "image/png", part.inline_data.data)

        raise ContractViolation("Image model response contained no image part")
