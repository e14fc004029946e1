"""FFmpegAudioAdapter — duration probing and speech re-encoding via ffmpeg."""

import re
import logging
import subprocess
from typing import Optional

from domain.errors import ProbeError, TranscodeError
from domain.planner import SPEECH_SAMPLE_RATE
from ports.audio import AudioProcessingPort

logger = logging.getLogger(__name__)

DEFAULT_PROBE_TIMEOUT = 30
DEFAULT_TRANSCODE_TIMEOUT = 300

# ffmpeg prints e.g. "Duration: 01:02:03.45, start: ..." to stderr.
DURATION_PATTERN = re.compile(r"Duration:\s*(\d+):(\d+):(\d+)\.(\d+)")

# Keep error messages readable; ffmpeg stderr can be very long.
STDERR_TAIL_CHARS = 2000


def parse_duration(stderr: str) -> Optional[float]:
    """Parse the container duration from ffmpeg diagnostic output."""
    match = DURATION_PATTERN.search(stderr)
    if not match:
        return None
    hours, minutes, seconds, fraction = match.groups()
    return int(hours) * 3600 + int(minutes) * 60 + int(seconds) + int(fraction) / (10 ** len(fraction))


class FFmpegAudioAdapter(AudioProcessingPort):
    def __init__(
        self,
        binary: str = "ffmpeg",
        probe_timeout: float = DEFAULT_PROBE_TIMEOUT,
        transcode_timeout: float = DEFAULT_TRANSCODE_TIMEOUT,
    ):
        self._binary = binary
        self._probe_timeout = probe_timeout
        self._transcode_timeout = transcode_timeout

    def get_duration(self, path: str) -> float:
        # No output file: ffmpeg exits non-zero but still prints the input's
        # metadata, including its duration, to stderr.
        cmd = [self._binary, "-hide_banner", "-i", path]
        try:
            result = subprocess.run(cmd, capture_output=True, text=True, timeout=self._probe_timeout)
        except FileNotFoundError as exc:
            raise ProbeError(path, f"ffmpeg binary not found ({self._binary})") from exc
        except subprocess.TimeoutExpired as exc:
            raise ProbeError(path, f"ffmpeg timed out after {self._probe_timeout}s") from exc

        duration = parse_duration(result.stderr or "")
        if duration is None or duration <= 0:
            raise ProbeError(path)

        logger.info(f"Audio duration: {duration:.2f} seconds")
        return duration

    def compress(self, input_path: str, output_path: str, bitrate_kbps: int) -> None:
        cmd = [
            self._binary, "-y",
            "-i", input_path,
            *self._speech_encoding(bitrate_kbps),
            output_path,
        ]
        logger.info(f"Compressing {input_path} to {bitrate_kbps}kbps mono")
        self._run(cmd, "compress audio")

    def extract_chunk(
        self,
        input_path: str,
        output_path: str,
        start_seconds: float,
        duration_seconds: float,
        bitrate_kbps: int,
    ) -> None:
        cmd = [
            self._binary, "-y",
            "-ss", str(start_seconds),
            "-t", str(duration_seconds),
            "-i", input_path,
            *self._speech_encoding(bitrate_kbps),
            output_path,
        ]
        self._run(cmd, f"extract chunk at {start_seconds:.0f}s")

    def extract_audio_track(self, input_path: str, output_path: str) -> None:
        cmd = [
            self._binary, "-y",
            "-i", input_path,
            "-vn",
            "-f", "mp3",
            output_path,
        ]
        logger.info(f"Extracting audio track from {input_path}")
        self._run(cmd, "extract audio")

    @staticmethod
    def _speech_encoding(bitrate_kbps: int) -> list[str]:
        return [
            "-ac", "1",
            "-ar", str(SPEECH_SAMPLE_RATE),
            "-b:a", f"{bitrate_kbps}k",
            "-f", "mp3",
        ]

    def _run(self, cmd: list[str], action: str) -> None:
        try:
            result = subprocess.run(cmd, capture_output=True, text=True, timeout=self._transcode_timeout)
        except FileNotFoundError as exc:
            raise TranscodeError(f"Failed to {action}: ffmpeg binary not found ({self._binary})") from exc
        except subprocess.TimeoutExpired as exc:
            raise TranscodeError(f"Failed to {action}: ffmpeg timed out after {self._transcode_timeout}s") from exc

        if result.returncode != 0:
            stderr = (result.stderr or "").strip()[-STDERR_TAIL_CHARS:]
            logger.error(f"ffmpeg failed to {action} (exit {result.returncode}): {stderr}")
            raise TranscodeError(f"Failed to {action} (exit {result.returncode}): {stderr}")
