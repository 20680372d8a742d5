# speechkit/core/models.py

from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator

if TYPE_CHECKING:
    from speechkit.core.elevenlabs_client import ElevenLabsClient


class VoiceSettings(BaseModel):
    model_config = ConfigDict(frozen=True)

    stability: float = Field(0.5, ge=0.0, le=1.0)
    similarity_boost: float = Field(0.75, ge=0.0, le=1.0)
    style: Optional[float] = Field(None, ge=0.0, le=1.0)
    use_speaker_boost: Optional[bool] = None


class TextToSpeechRequest(BaseModel):
    model_config = ConfigDict(frozen=True, protected_namespaces=())

    text: str
    model_id: Optional[str] = None
    voice_settings: Optional[VoiceSettings] = None

    @field_validator("text")
    @classmethod
    def _text_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("text must not be blank")
        return value

    def to_payload(self) -> Dict[str, Any]:
        """JSON body for the text-to-speech endpoints"""
        return self.model_dump(exclude_none=True)


class SpeechToSpeechRequest(BaseModel):
    """
    Voice conversion request.
    audio is any readable binary stream (open file, BytesIO, pipe).
    The caller opens and closes it; the client only reads it to the end.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True, protected_namespaces=())

    audio: Any
    model_id: Optional[str] = None
    voice_settings: Optional[VoiceSettings] = None
    filename: str = "audio.mp3"
    content_type: str = "audio/mpeg"

    @field_validator("audio")
    @classmethod
    def _readable(cls, value: Any) -> Any:
        if not callable(getattr(value, "read", None)):
            raise ValueError("audio must be a readable binary stream")
        return value

    def form_fields(self) -> Dict[str, str]:
        fields = {}
        if self.model_id:
            fields["model_id"] = self.model_id
        if self.voice_settings is not None:
            fields["voice_settings"] = self.voice_settings.model_dump_json(exclude_none=True)
        return fields


class HistoryItem(BaseModel):
    model_config = ConfigDict(extra="ignore", protected_namespaces=())

    history_item_id: str
    date_unix: int
    text: str = ""
    voice_id: Optional[str] = None
    voice_name: Optional[str] = None
    model_id: Optional[str] = None
    content_type: Optional[str] = None
    state: Optional[str] = None
    character_count_change_from: Optional[int] = None
    character_count_change_to: Optional[int] = None

    @property
    def created_at(self) -> datetime:
        return datetime.fromtimestamp(self.date_unix, tz=timezone.utc)

    @property
    def byte_length(self) -> int:
        return len(self.text.encode("utf-8"))


class HistoryPage(BaseModel):
    model_config = ConfigDict(extra="ignore")

    history: List[HistoryItem] = Field(default_factory=list)
    last_history_item_id: Optional[str] = None
    has_more: bool = False

    def __len__(self) -> int:
        return len(self.history)


class HistoryCursor(BaseModel):
    """
    Handle on the next page of generation history.

    Carries the id to start after and the page size in effect.
    next_page() performs a network call and returns a fresh
    (page, cursor) pair; the cursor is None once the history is exhausted.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    start_after_history_item_id: str
    page_size: int
    client: Any = Field(exclude=True, repr=False)

    def next_page(self, page_size: Optional[int] = None) -> Tuple[HistoryPage, Optional["HistoryCursor"]]:
        client: "ElevenLabsClient" = self.client
        return client.get_history(
            page_size=page_size or self.page_size,
            start_after_history_item_id=self.start_after_history_item_id,
        )


class Voice(BaseModel):
    model_config = ConfigDict(extra="ignore")

    voice_id: str
    name: str
    category: Optional[str] = None


class Model(BaseModel):
    model_config = ConfigDict(extra="ignore", protected_namespaces=())

    model_id: str
    name: str
    can_do_text_to_speech: Optional[bool] = None
    can_do_voice_conversion: Optional[bool] = None
    languages: List[Dict[str, Any]] = Field(default_factory=list)
