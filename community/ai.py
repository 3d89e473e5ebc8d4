"""
Gemini completion client.

Talks to the public ``generateContent`` REST endpoint with ``requests``;
the API key, model and timeout come from settings (GEMINI_*).
"""

import logging

import requests
from django.conf import settings

logger = logging.getLogger(__name__)

GEMINI_ENDPOINT = "https://generativelanguage.googleapis.com/v1beta/models/{model}:generateContent"

FALLBACK_RESPONSE = "I'm here to listen and support you. Could you please try sending your message again?"


class AIServiceError(Exception):
    """Completion failed. ``status`` is the HTTP status the view should return."""

    def __init__(self, message, status=502):
        super().__init__(message)
        self.status = status


def is_configured():
    return bool(settings.GEMINI_API_KEY)


def extract_text(data):
    """Join the text parts of the first candidate."""
    candidates = data.get('candidates') or []
    if not candidates:
        feedback = data.get('promptFeedback') or {}
        raise AIServiceError(f"No candidates returned (block reason: {feedback.get('blockReason', 'unknown')})")
    parts = (candidates[0].get('content') or {}).get('parts') or []
    text = "".join(part.get('text', '') for part in parts).strip()
    if not text:
        raise AIServiceError("Empty completion")
    return text


def generate_reply(prompt, session=None):
    """
    Send a single-turn prompt and return the model's text.

    Raises:
        AIServiceError: status 503 when no API key is configured,
                        502 for transport errors or unusable responses
    """
    if not is_configured():
        raise AIServiceError("AI service is not configured", status=503)

    http = session or requests
    try:
        response = http.post(
            GEMINI_ENDPOINT.format(model=settings.GEMINI_MODEL),
            params={'key': settings.GEMINI_API_KEY},
            json={'contents': [{'role': 'user', 'parts': [{'text': prompt}]}]},
            timeout=settings.GEMINI_TIMEOUT,
            headers={"User-Agent": "SafeSpace/1.0 (Serene)"},
        )
        response.raise_for_status()
        data = response.json()
    except requests.Timeout:
        logger.warning(f"Gemini request timed out after {settings.GEMINI_TIMEOUT}s")
        raise AIServiceError("AI service timed out")
    except requests.RequestException as e:
        # The key travels in the query string, so log the status only
        status = getattr(getattr(e, 'response', None), 'status_code', None)
        logger.warning(f"Gemini API error (status={status}): {e.__class__.__name__}")
        raise AIServiceError("AI service request failed")
    except ValueError:
        logger.warning("Gemini returned a non-JSON body")
        raise AIServiceError("AI service returned an invalid response")

    return extract_text(data)
