"""
Gemini API Service - the text-completion client behind every AI feature.

One instance is built per application from ``app.config`` (GEMINI_API_KEY,
GEMINI_MODEL) and stored on ``app.extensions``. It sends a prompt, returns
the raw response text and translates provider exceptions into our upstream
errors. No retries, caching or timeouts are layered on top of the SDK.
"""
import logging
from typing import Optional

import google.generativeai as genai
from google.api_core import exceptions as google_exceptions
from flask import current_app

from services.errors import UpstreamAuthError, UpstreamError, UpstreamQuotaExceeded

logger = logging.getLogger(__name__)

EXTENSION_KEY = 'completion_client'


class GeminiService:
    """Completion client for Google's Gemini models"""

    def __init__(self, api_key: str, model_name: str = 'gemini-2.0-flash'):
        if not api_key:
            raise ValueError("GEMINI_API_KEY is not set")

        genai.configure(api_key=api_key)
        self.model_name = model_name
        self.model = genai.GenerativeModel(model_name)

    def complete(self, prompt: str) -> str:
        """
        Send ``prompt`` to the model and return the response text.

        Raises:
            UpstreamAuthError: the key was rejected or lacks permission
            UpstreamQuotaExceeded: quota or rate limit exhausted
            UpstreamError: any other provider failure, or an empty response
        """
        logger.debug("Requesting completion from %s (%d chars)", self.model_name, len(prompt))
        try:
            response = self.model.generate_content(prompt)
            text = response.text
        except (google_exceptions.Unauthenticated, google_exceptions.PermissionDenied) as e:
            logger.error("Gemini rejected credentials: %s", e)
            raise UpstreamAuthError("Invalid Gemini API key. Please check your configuration.") from e
        except (google_exceptions.ResourceExhausted, google_exceptions.TooManyRequests) as e:
            logger.error("Gemini quota exhausted: %s", e)
            raise UpstreamQuotaExceeded(
                "Gemini API quota exceeded. Please check your usage and billing settings."
            ) from e
        except google_exceptions.InvalidArgument as e:
            if getattr(e, 'reason', None) == 'API_KEY_INVALID':
                logger.error("Gemini rejected API key: %s", e)
                raise UpstreamAuthError("Invalid Gemini API key. Please check your configuration.") from e
            logger.error("Gemini rejected request: %s", e)
            raise UpstreamError(f"Gemini rejected the request: {e}") from e
        except google_exceptions.GoogleAPIError as e:
            logger.error("Gemini API error: %s", e)
            raise UpstreamError(f"Gemini API error: {e}") from e
        except ValueError as e:
            # response.text raises ValueError when the candidate was blocked
            logger.error("Gemini returned no usable text: %s", e)
            raise UpstreamError("No response generated from Gemini") from e

        if not text or not text.strip():
            raise UpstreamError("No response generated from Gemini")

        logger.debug("Gemini responded (%d chars)", len(text))
        return text


def init_gemini_service(app) -> Optional[GeminiService]:
    """Build the completion client from app config and attach it to ``app``"""
    try:
        service = GeminiService(
            api_key=app.config.get('GEMINI_API_KEY'),
            model_name=app.config.get('GEMINI_MODEL', 'gemini-2.0-flash'),
        )
    except ValueError as e:
        logger.warning("Gemini disabled: %s", e)
        service = None
    app.extensions[EXTENSION_KEY] = service
    return service


def get_gemini_service():
    """
    Return the completion client for the current app.

    Anything exposing ``complete(prompt) -> str`` may be installed under
    ``app.extensions['completion_client']``; tests use this to swap in a fake.
    """
    service = current_app.extensions.get(EXTENSION_KEY)
    if service is None:
        raise UpstreamError("Gemini API key is not configured", status_code=500)
    return service
