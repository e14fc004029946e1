"""Error taxonomy for the transcription pipeline."""

from typing import Optional


class TranscriptionPipelineError(Exception):
    """Base class for every error raised by the pipeline."""


class UnsupportedMediaError(TranscriptionPipelineError):
    """Input file is neither a known audio nor a known video container."""


class ProbeError(TranscriptionPipelineError):
    def __init__(self, path: str, reason: str = ""):
        self.path = path
        message = f"Could not determine audio duration for {path}"
        if reason:
            message += f": {reason}"
        super().__init__(message)


class TranscodeError(TranscriptionPipelineError):
    """ffmpeg is missing, timed out or exited non-zero."""


class SpeakerHintError(TranscriptionPipelineError):
    """Invalid diarization parameters supplied by the caller."""


class PairingError(SpeakerHintError):
    pass


class LimitError(SpeakerHintError):
    pass


class ReferenceFormatError(SpeakerHintError):
    pass


class RemoteServiceError(TranscriptionPipelineError):
    """Failure reported by the transcription or text-generation backend."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.status_code = status_code
        super().__init__(message)


class CompressionInvariantError(TranscriptionPipelineError):
    """Compressed audio still exceeds the upload hard limit.

    The bitrate math should make this unreachable; seeing it means a bug,
    not an oversized user file.
    """

    def __init__(self, size: int, limit: int, bitrate_kbps: int):
        self.size = size
        self.limit = limit
        self.bitrate_kbps = bitrate_kbps
        super().__init__(
            f"Compressed audio is {size} bytes at {bitrate_kbps}kbps, "
            f"still over the {limit} byte upload limit. This is a bug; please report it."
        )
