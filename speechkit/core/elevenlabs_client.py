# speechkit/core/elevenlabs_client.py

import httpx
from urllib.parse import quote
from typing import BinaryIO, Iterator, List, Optional, Tuple

from speechkit.core.config import ClientConfig
from speechkit.core.errors import APIError, SinkError, StreamError, TransportError
from speechkit.core.logger import get_logger
from speechkit.core.models import (
    HistoryCursor,
    HistoryItem,
    HistoryPage,
    Model,
    SpeechToSpeechRequest,
    TextToSpeechRequest,
    Voice,
)

logger = get_logger("elevenlabs_client")

DEFAULT_PAGE_SIZE = 100
MAX_PAGE_SIZE = 1000


class ElevenLabsClient:
    """
    Synchronous client for the ElevenLabs REST API.

    Every call is one blocking round trip with no retries. Non-success
    statuses raise APIError, network failures raise TransportError.
    """

    def __init__(self, config: Optional[ClientConfig] = None, transport: Optional[httpx.BaseTransport] = None):
        self.config = config or ClientConfig.from_settings()

        # One pooled connection per client, credential attached to every request
        self.client = httpx.Client(
            base_url=self.config.base_url,
            timeout=self.config.timeout,
            headers={"xi-api-key": self.config.api_key},
            transport=transport,
        )

        logger.info(f"✅ ElevenLabsClient initialized (key: {self.config.masked_key}, timeout: {self.config.timeout}s)")

    def __enter__(self) -> "ElevenLabsClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        """Close the HTTP client"""
        self.client.close()

    # ------------------------------------------------------------
    # Text to speech
    # ------------------------------------------------------------

    def text_to_speech(
        self,
        voice_id: str,
        request: TextToSpeechRequest,
        output_format: Optional[str] = None,
        optimize_streaming_latency: Optional[int] = None,
    ) -> bytes:
        """
        Convert text to speech and return the complete audio payload.

        Args:
            voice_id: Remote voice profile, e.g. "pNInz6obpgDQGcFmaJgB" (Adam)
            request: Text and model to synthesize
            output_format: Remote output format, e.g. "mp3_44100_128"
            optimize_streaming_latency: 0 (off) to 4 (max)

        Returns:
            Audio bytes as produced by the service (mp3 by default)
        """
        params = _query(output_format=output_format, optimize_streaming_latency=optimize_streaming_latency)
        logger.debug(f"🔊 TTS voice={voice_id} model={request.model_id} chars={len(request.text)}")

        response = self._send(
            "POST",
            f"/text-to-speech/{_segment(voice_id)}",
            json=request.to_payload(),
            params=params,
            headers={"Accept": "audio/mpeg"},
        )
        return self._audio_content(response)

    def text_to_speech_stream(
        self,
        sink: BinaryIO,
        voice_id: str,
        request: TextToSpeechRequest,
        output_format: Optional[str] = None,
        optimize_streaming_latency: Optional[int] = None,
    ) -> int:
        """
        Stream synthesized speech into sink as chunks arrive.

        sink needs only a write(bytes) method (file, pipe, BytesIO). It is
        never closed here. Returns the number of bytes written.
        """
        params = _query(output_format=output_format, optimize_streaming_latency=optimize_streaming_latency)
        logger.debug(f"🔊 TTS stream voice={voice_id} model={request.model_id} chars={len(request.text)}")

        return self._stream_to_sink(
            sink,
            "POST",
            f"/text-to-speech/{_segment(voice_id)}/stream",
            json=request.to_payload(),
            params=params,
            headers={"Accept": "audio/mpeg"},
        )

    # ------------------------------------------------------------
    # Speech to speech
    # ------------------------------------------------------------

    def speech_to_speech(
        self,
        voice_id: str,
        request: SpeechToSpeechRequest,
        output_format: Optional[str] = None,
    ) -> bytes:
        """Convert the voice in request.audio to voice_id and return the audio"""
        files, data = self._multipart(request)
        logger.debug(f"🔁 STS voice={voice_id} model={request.model_id} input={len(files['audio'][1])} bytes")

        response = self._send(
            "POST",
            f"/speech-to-speech/{_segment(voice_id)}",
            files=files,
            data=data,
            params=_query(output_format=output_format),
        )
        return self._audio_content(response)

    def speech_to_speech_stream(
        self,
        sink: BinaryIO,
        voice_id: str,
        request: SpeechToSpeechRequest,
        output_format: Optional[str] = None,
    ) -> int:
        files, data = self._multipart(request)
        return self._stream_to_sink(
            sink,
            "POST",
            f"/speech-to-speech/{_segment(voice_id)}/stream",
            files=files,
            data=data,
            params=_query(output_format=output_format),
        )

    # ------------------------------------------------------------
    # History
    # ------------------------------------------------------------

    def get_history(
        self,
        page_size: Optional[int] = None,
        start_after_history_item_id: Optional[str] = None,
    ) -> Tuple[HistoryPage, Optional[HistoryCursor]]:
        """
        Fetch one page of generation history.

        Returns the page and a cursor for the next one. The cursor is None
        when the service reports no further items. Items keep the order the
        service returns them in (newest first).
        """
        page_size = page_size or DEFAULT_PAGE_SIZE
        if not 1 <= page_size <= MAX_PAGE_SIZE:
            raise ValueError(f"page_size must be between 1 and {MAX_PAGE_SIZE}, got {page_size}")

        params = {"page_size": page_size}
        if start_after_history_item_id:
            params["start_after_history_item_id"] = start_after_history_item_id

        response = self._send("GET", "/history", params=params)
        page = HistoryPage.model_validate(response.json())
        logger.debug(f"📜 History page: {len(page)} item(s), has_more={page.has_more}")

        if not page.has_more or not page.history:
            return page, None

        cursor = HistoryCursor(
            start_after_history_item_id=page.last_history_item_id or page.history[-1].history_item_id,
            page_size=page_size,
            client=self,
        )
        return page, cursor

    def iter_history(self, page_size: Optional[int] = None) -> Iterator[HistoryItem]:
        """Yield every history item, fetching pages lazily"""
        page, cursor = self.get_history(page_size=page_size)
        yield from page.history
        while cursor is not None:
            page, cursor = cursor.next_page()
            yield from page.history

    def get_history_item_audio(self, history_item_id: str) -> bytes:
        response = self._send("GET", f"/history/{_segment(history_item_id)}/audio")
        return self._audio_content(response)

    def delete_history_item(self, history_item_id: str) -> None:
        self._send("DELETE", f"/history/{_segment(history_item_id)}")
        logger.info(f"🗑️ Deleted history item {history_item_id}")

    # ------------------------------------------------------------
    # Voices and models
    # ------------------------------------------------------------

    def get_voices(self) -> List[Voice]:
        response = self._send("GET", "/voices")
        return [Voice.model_validate(v) for v in response.json().get("voices", [])]

    def get_models(self) -> List[Model]:
        response = self._send("GET", "/models")
        return [Model.model_validate(m) for m in response.json()]

    # ------------------------------------------------------------
    # Plumbing
    # ------------------------------------------------------------

    def _send(self, method: str, url: str, **kwargs) -> httpx.Response:
        try:
            response = self.client.request(method, url, **kwargs)
        except httpx.TimeoutException as e:
            logger.error(f"❌ ElevenLabs timeout: {method} {url}")
            raise TransportError(f"No progress for {self.config.timeout}s (connect, read or write): {method} {url}") from e
        except httpx.RequestError as e:
            # Connection failures, redirect loops and undecodable bodies alike
            logger.error(f"❌ ElevenLabs request error: {method} {url}: {e}")
            raise TransportError(f"{method} {url} failed: {e}") from e

        if response.is_error:
            raise self._api_error(response)
        return response

    def _stream_to_sink(self, sink: BinaryIO, method: str, url: str, **kwargs) -> int:
        written = 0
        try:
            with self.client.stream(method, url, **kwargs) as response:
                if response.is_error:
                    # Error bodies are small; read the whole thing before failing
                    response.read()
                    raise self._api_error(response)

                for chunk in response.iter_bytes():
                    if not chunk:
                        continue
                    try:
                        sink.write(chunk)
                    except (OSError, ValueError) as e:
                        logger.error(f"❌ Sink write failed after {written} bytes: {e}")
                        raise SinkError(f"Could not write audio to sink: {e}", bytes_written=written) from e
                    written += len(chunk)
        except httpx.RequestError as e:
            logger.error(f"❌ ElevenLabs stream failed after {written} bytes: {e}")
            raise StreamError(f"{method} {url} failed after {written} bytes: {e}", bytes_written=written) from e

        logger.debug(f"✅ Streamed {written} bytes from {url}")
        return written

    @staticmethod
    def _multipart(request: SpeechToSpeechRequest):
        # The input stream stays open; its owner closes it
        audio = request.audio.read()
        files = {"audio": (request.filename, audio, request.content_type)}
        return files, request.form_fields()

    @staticmethod
    def _api_error(response: httpx.Response) -> APIError:
        error = APIError.from_response(response)
        if error.is_unauthorized:
            logger.error("❌ Invalid API key")
        elif error.is_rate_limited:
            logger.warning("❌ Rate limit exceeded")
        else:
            logger.error(f"❌ ElevenLabs HTTP error: {error}")
        return error

    @staticmethod
    def _audio_content(response: httpx.Response) -> bytes:
        audio = response.content
        if not audio:
            raise APIError(response.status_code, "Service returned an empty audio payload")
        return audio


def _query(**params) -> dict:
    return {k: v for k, v in params.items() if v is not None}


def _segment(value: str) -> str:
    # Ids go into the path verbatim; "/", "?" and "#" must not change the target
    return quote(value, safe="")
