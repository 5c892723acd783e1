"""
Runtime settings read from the environment.

main.py calls load_dotenv() before anything asks for settings, so values from
a local .env file are visible here.
"""

import os
from functools import lru_cache
from typing import Optional

from pydantic import BaseModel


class Settings(BaseModel):
    gemini_api_key: Optional[str] = None
    vision_model: str = "gemini-2.5-flash"
    text_model: str = "gemini-2.5-flash"
    image_model: str = "gemini-2.5-flash-image"
    disclaimer_language: str = "Bengali"
    annotation_watermark: str = "Quotex Ai 3.0"
    admin_uid: str = "admin"
    admin_password: str = "password123"
    log_level: str = "INFO"


def load_settings() -> Settings:
    """Build Settings from environment variables, keeping defaults for unset ones."""
    vision_model = os.getenv("GEMINI_MODEL") or Settings.model_fields["vision_model"].default
    values = {
        "gemini_api_key": os.getenv("GEMINI_API_KEY") or os.getenv("LLM_API_KEY"),
        "vision_model": vision_model,
        "text_model": os.getenv("GEMINI_TEXT_MODEL") or vision_model,
        "image_model": os.getenv("GEMINI_IMAGE_MODEL"),
        "disclaimer_language": os.getenv("DISCLAIMER_LANGUAGE"),
        "annotation_watermark": os.getenv("ANNOTATION_WATERMARK"),
        "admin_uid": os.getenv("ADMIN_UID"),
        "admin_password": os.getenv("ADMIN_PASSWORD"),
        "log_level": os.getenv("LOG_LEVEL"),
    }
    return Settings(**{k: v for k, v in values.items() if v})


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return load_settings()
