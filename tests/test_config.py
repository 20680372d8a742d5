import io

import pytest
from pydantic import ValidationError

from speechkit.core.config import ClientConfig, DEFAULT_BASE_URL, Settings
from speechkit.core.errors import ConfigurationError
from speechkit.core.models import SpeechToSpeechRequest, TextToSpeechRequest, VoiceSettings


def fake_settings(**values):
    source = Settings()
    for name, value in values.items():
        setattr(source, name, value)
    return source


def test_from_settings():
    config = ClientConfig.from_settings(fake_settings(
        ELEVENLABS_API_KEY="abcdefgh12345",
        ELEVENLABS_BASE_URL="https://api.elevenlabs.io/v1/",
        ELEVENLABS_TIMEOUT=60.0,
    ))

    assert config.api_key == "abcdefgh12345"
    assert config.base_url == DEFAULT_BASE_URL
    assert config.timeout == 60.0
    assert config.masked_key == "abcdefgh..."


def test_overrides_win_over_environment():
    config = ClientConfig.from_settings(fake_settings(ELEVENLABS_API_KEY="from-env"), api_key="explicit", timeout=None)

    assert config.api_key == "explicit"


def test_missing_api_key():
    with pytest.raises(ConfigurationError):
        ClientConfig.from_settings(fake_settings(ELEVENLABS_API_KEY=""))


def test_invalid_timeout():
    with pytest.raises(ConfigurationError):
        ClientConfig.from_settings(fake_settings(ELEVENLABS_API_KEY="key"), timeout=-1)


def test_config_is_immutable():
    config = ClientConfig(api_key="key")

    with pytest.raises(ValidationError):
        config.api_key = "other"


def test_tts_request_payload():
    request = TextToSpeechRequest(text="Hi", model_id="eleven_multilingual_v1")

    assert request.to_payload() == {"text": "Hi", "model_id": "eleven_multilingual_v1"}


def test_blank_text_rejected():
    with pytest.raises(ValidationError):
        TextToSpeechRequest(text="   ")


def test_voice_settings_bounds():
    with pytest.raises(ValidationError):
        VoiceSettings(stability=1.5)


def test_sts_request_needs_readable_audio():
    with pytest.raises(ValidationError):
        SpeechToSpeechRequest(audio=b"raw bytes are not a stream")

    request = SpeechToSpeechRequest(
        audio=io.BytesIO(b"x"),
        model_id="eleven_english_sts_v2",
        voice_settings=VoiceSettings(stability=0.3, similarity_boost=0.9),
    )
    assert request.form_fields() == {
        "model_id": "eleven_english_sts_v2",
        "voice_settings": '{"stability":0.3,"similarity_boost":0.9}',
    }


def test_malformed_timeout_from_environment():
    with pytest.raises(ConfigurationError):
        ClientConfig.from_settings(fake_settings(ELEVENLABS_API_KEY="key", ELEVENLABS_TIMEOUT="soon"))


def test_timeout_from_environment_string():
    config = ClientConfig.from_settings(fake_settings(ELEVENLABS_API_KEY="key", ELEVENLABS_TIMEOUT="45"))

    assert config.timeout == 45.0
