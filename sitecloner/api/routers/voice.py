"""Voice assistant session endpoint.

Routes
------
POST /api/voice-session    Body: {"voice": "coral", "temperature": 0.7}
"""

from __future__ import annotations

from typing import Any, Union

from fastapi import APIRouter
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from sitecloner.api.responses import error_response
from sitecloner.scraper.errors import ConfigurationError, InputError, UpstreamError
from sitecloner.voice.session import create_voice_session

router = APIRouter()


class VoiceSessionRequest(BaseModel):
    voice: str = "coral"
    temperature: float = 0.7
    instructions: str = ""


@router.post("/voice-session", response_model=None)
def voice_session(body: VoiceSessionRequest) -> Union[dict[str, Any], JSONResponse]:
    """Issue ephemeral realtime credentials for the browser.

    ``instructions`` is accepted for compatibility; the browser applies it
    when it configures the session.
    """
    try:
        session = create_voice_session(body.voice, body.temperature)
    except InputError as exc:
        return error_response(400, str(exc))
    except ConfigurationError as exc:
        return error_response(500, str(exc))
    except UpstreamError as exc:
        return error_response(502, str(exc))

    return {
        "success": True,
        "sessionId": session.session_id,
        "ephemeralKey": session.ephemeral_key,
        "deployment": session.deployment,
        "endpoint": session.endpoint,
    }
