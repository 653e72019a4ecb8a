"""Ephemeral credentials for the browser-side realtime voice assistant.

The server never touches audio.  It only exchanges the long-lived Azure key
for a short-lived session key that the browser uses over WebRTC.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

import httpx

from sitecloner.config import settings
from sitecloner.scraper.errors import ConfigurationError, InputError, UpstreamError

logger = logging.getLogger(__name__)

VALID_VOICES = ("alloy", "echo", "shimmer", "ash", "ballad", "coral", "sage", "verse")


@dataclass
class VoiceSession:
    session_id: str
    ephemeral_key: str
    deployment: str
    endpoint: str


def _validate(voice: str, temperature: float) -> None:
    if voice not in VALID_VOICES:
        raise InputError(f"Invalid voice. Must be one of: {', '.join(VALID_VOICES)}")
    if not 0 <= temperature <= 1:
        raise InputError("Invalid temperature. Must be between 0 and 1.")


def create_voice_session(voice: str = "coral", temperature: float = 0.7) -> VoiceSession:
    """Create a realtime session and return its ephemeral credentials.

    *temperature* is only validated here; the browser applies it when it
    configures the session.

    Raises:
        InputError: Unknown voice or out-of-range temperature.
        ConfigurationError: Azure endpoint, key or deployment not set.
        UpstreamError: The session request failed or returned no credentials.
    """
    _validate(voice, temperature)
    if not settings.voice_configured:
        raise ConfigurationError(
            "Server configuration error. Missing required environment variables."
        )

    endpoint = settings.azure_openai_endpoint.rstrip("/")
    session_url = f"{endpoint}/openai/realtimeapi/sessions"
    try:
        with httpx.Client(timeout=settings.voice_timeout) as client:
            response = client.post(
                session_url,
                params={"api-version": settings.azure_openai_api_version},
                headers={"api-key": settings.azure_openai_api_key},
                json={"model": settings.azure_openai_deployment, "voice": voice},
            )
    except httpx.HTTPError as exc:
        raise UpstreamError(f"Failed to create voice session: {exc}") from exc

    if response.is_error:
        logger.error(
            "Voice session creation failed",
            extra={"status": response.status_code, "details": response.text[:500]},
        )
        raise UpstreamError(
            f"Failed to create voice session: {response.text[:200]}",
            status_code=response.status_code,
        )

    try:
        data = response.json()
    except ValueError as exc:
        raise UpstreamError("Voice session response was not JSON") from exc

    session_id = data.get("id")
    ephemeral_key = (data.get("client_secret") or {}).get("value")
    if not session_id or not ephemeral_key:
        raise UpstreamError("Failed to extract session credentials from Azure response")

    return VoiceSession(
        session_id=session_id,
        ephemeral_key=ephemeral_key,
        deployment=settings.azure_openai_deployment,
        endpoint=settings.realtime_webrtc_url,
    )
