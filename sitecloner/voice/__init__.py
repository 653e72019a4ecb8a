"""Realtime voice session issuance."""

from sitecloner.voice.session import VALID_VOICES, VoiceSession, create_voice_session

__all__ = ["create_voice_session", "VoiceSession", "VALID_VOICES"]
