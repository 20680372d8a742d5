# speechkit/examples.py
"""
Manual walkthrough of the client against the live API.
Needs ELEVENLABS_API_KEY (environment or .env); the streaming example needs mpv.

    python -m speechkit.examples [tts|stream|history|sts|all]
"""
import subprocess
import sys

from speechkit.core.config import ClientConfig, settings
from speechkit.core.elevenlabs_client import ElevenLabsClient
from speechkit.core.errors import ElevenLabsError
from speechkit.core.models import HistoryPage, SpeechToSpeechRequest, TextToSpeechRequest
from speechkit.utils.audio_utils import save_audio, stream_to_player

ADAM_VOICE_ID = settings.ELEVENLABS_VOICE_ID
RACHEL_VOICE_ID = "21m00Tcm4TlvDq8ikWAM"

STREAM_MESSAGE = """The concept of "flushing" typically applies to I/O buffers in many programming
languages, which store data temporarily in memory before writing it to a more permanent location
like a file or a network connection. Flushing the buffer means writing all the buffered data
immediately, even if the buffer isn't full."""


def text_to_speech_example(client: ElevenLabsClient):
    print("\n" + "=" * 70)
    print("🔊 TEXT TO SPEECH -> adam.mp3")
    print("=" * 70)

    request = TextToSpeechRequest(
        text="Hello, world! My name is Adam, nice to meet you!",
        model_id=settings.ELEVENLABS_MODEL_ID,
    )
    audio = client.text_to_speech(ADAM_VOICE_ID, request)
    save_audio("adam.mp3", audio)
    print(f"✅ Successfully generated audio file ({len(audio)} bytes)")


def text_to_speech_stream_example(client: ElevenLabsClient):
    print("\n" + "=" * 70)
    print("📡 STREAMING TEXT TO SPEECH -> mpv")
    print("=" * 70)

    request = TextToSpeechRequest(text=STREAM_MESSAGE, model_id="eleven_multilingual_v1")
    written = stream_to_player(client, ADAM_VOICE_ID, request)
    print(f"✅ Streaming finished ({written} bytes). All done.")


def print_history(page: HistoryPage, page_number: int, first_index: int):
    print(f"--Page {page_number}--")
    for i, item in enumerate(page.history):
        created = item.created_at.strftime("%Y-%m-%d %H:%M:%S")
        print(f"{first_index + i}. {created} - {item.history_item_id}: {item.byte_length} bytes")


def history_example(client: ElevenLabsClient):
    print("\n" + "=" * 70)
    print("📜 GENERATION HISTORY (5 items per page)")
    print("=" * 70)

    page_number, index = 1, 1
    page, cursor = client.get_history(page_size=5)
    print_history(page, page_number, index)

    # The cursor keeps the original page size; pass page_size to override it
    while cursor is not None:
        page_number += 1
        index += len(page)
        page, cursor = cursor.next_page()
        print_history(page, page_number, index)


def speech_to_speech_example(client: ElevenLabsClient):
    print("\n" + "=" * 70)
    print("🔁 SPEECH TO SPEECH adam.mp3 -> rachel.mp3")
    print("=" * 70)

    # Uses the file written by the text to speech example
    with open("adam.mp3", "rb") as input_audio:
        request = SpeechToSpeechRequest(audio=input_audio, model_id="eleven_english_sts_v2")
        audio = client.speech_to_speech(RACHEL_VOICE_ID, request)

    save_audio("rachel.mp3", audio)
    print(f"✅ Successfully generated audio file ({len(audio)} bytes)")


EXAMPLES = {
    "tts": text_to_speech_example,
    "stream": text_to_speech_stream_example,
    "history": history_example,
    "sts": speech_to_speech_example,
}


def main(argv=None) -> int:
    argv = sys.argv[1:] if argv is None else argv
    selected = argv or ["all"]
    names = list(EXAMPLES) if "all" in selected else selected

    unknown = [n for n in names if n not in EXAMPLES]
    if unknown:
        print(f"❌ Unknown example(s): {', '.join(unknown)}. Choose from: {', '.join(EXAMPLES)}, all")
        return 2

    try:
        config = ClientConfig.from_settings(settings)
    except ElevenLabsError as e:
        print(e)
        return 1

    with ElevenLabsClient(config) as client:
        for name in names:
            try:
                EXAMPLES[name](client)
            except ElevenLabsError as e:
                print(f"❌ Got {type(e).__name__} error: {e}")
                return 1
            except (OSError, subprocess.CalledProcessError) as e:
                print(f"❌ Local I/O error: {e}")
                return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
