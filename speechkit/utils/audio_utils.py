import os
import subprocess
from typing import List, Optional

from speechkit.core.config import settings
from speechkit.core.elevenlabs_client import ElevenLabsClient
from speechkit.core.logger import get_logger
from speechkit.core.models import TextToSpeechRequest

logger = get_logger("audio_utils")


def save_audio(path: str, audio: bytes, mode: int = 0o644) -> str:
    """Write audio bytes to path, replacing any existing file. Returns the path."""
    with open(path, "wb") as f:
        f.write(audio)
    os.chmod(path, mode)
    logger.info(f"💾 Saved {len(audio)} bytes to {path}")
    return path


def player_command(player: Optional[str] = None) -> List[str]:
    """Command line for a player reading audio from its standard input"""
    player = player or settings.AUDIO_PLAYER
    if player == "mpv":
        return ["mpv", "--no-cache", "--no-terminal", "--", "fd://0"]
    if player == "ffplay":
        return ["ffplay", "-nodisp", "-autoexit", "-loglevel", "quiet", "-"]
    # mpg123 and friends
    return [player, "-"]


class PlayerProcess:
    """
    External audio player fed through a stdin pipe.
    stdin is the sink for streamed audio; finish() closes it and waits.
    """

    def __init__(self, command: Optional[List[str]] = None):
        self.command = command or player_command()
        self.process = subprocess.Popen(self.command, stdin=subprocess.PIPE)
        logger.debug(f"▶️ Started player: {' '.join(self.command)}")

    @property
    def stdin(self):
        return self.process.stdin

    def finish(self) -> int:
        # With the pipe closed the player exits as soon as it finishes playing
        if not self.process.stdin.closed:
            self.process.stdin.close()
        returncode = self.process.wait()
        if returncode != 0:
            raise subprocess.CalledProcessError(returncode, self.command)
        return returncode

    def __enter__(self) -> "PlayerProcess":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if exc_type is None:
            self.finish()
            return
        self.process.kill()
        self.process.wait()


def stream_to_player(
    client: ElevenLabsClient,
    voice_id: str,
    request: TextToSpeechRequest,
    command: Optional[List[str]] = None,
) -> int:
    """Stream synthesized speech straight into a player process"""
    with PlayerProcess(command) as player:
        written = client.text_to_speech_stream(player.stdin, voice_id, request)
        logger.info(f"🔊 Streaming finished ({written} bytes)")
    return written
