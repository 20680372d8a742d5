# speechkit/core/default_client.py
"""
Module-level shortcuts backed by one shared ElevenLabsClient.

Configure once at startup with set_api_key() / set_timeout(); both replace
the shared client. Reconfiguring while other threads are calling is not
supported.
"""

from typing import BinaryIO, Optional

from speechkit.core.config import ClientConfig
from speechkit.core.elevenlabs_client import ElevenLabsClient
from speechkit.core.models import SpeechToSpeechRequest, TextToSpeechRequest

_api_key: Optional[str] = None
_timeout: Optional[float] = None
_default_client: Optional[ElevenLabsClient] = None


def get_default_client() -> ElevenLabsClient:
    """Get or create the shared client"""
    global _default_client
    if _default_client is None:
        config = ClientConfig.from_settings(api_key=_api_key, timeout=_timeout)
        _default_client = ElevenLabsClient(config)
    return _default_client


def _reset() -> None:
    global _default_client
    if _default_client is not None:
        _default_client.close()
    _default_client = None


def set_api_key(api_key: str) -> None:
    global _api_key
    _api_key = api_key
    _reset()


def set_timeout(timeout: float) -> None:
    global _timeout
    _timeout = timeout
    _reset()


def text_to_speech(voice_id: str, request: TextToSpeechRequest, **kwargs) -> bytes:
    return get_default_client().text_to_speech(voice_id, request, **kwargs)


def text_to_speech_stream(sink: BinaryIO, voice_id: str, request: TextToSpeechRequest, **kwargs) -> int:
    return get_default_client().text_to_speech_stream(sink, voice_id, request, **kwargs)


def speech_to_speech(voice_id: str, request: SpeechToSpeechRequest, **kwargs) -> bytes:
    return get_default_client().speech_to_speech(voice_id, request, **kwargs)


def get_history(page_size: Optional[int] = None):
    return get_default_client().get_history(page_size=page_size)
