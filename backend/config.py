import os
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Optional, Any

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 8001
DEFAULT_BASE_URL = "https://ai-gateway.vercel.sh/v1"
DEFAULT_TRANSCRIPTION_MODEL = "whisper-1"
DEFAULT_DIARIZE_MODEL = "gpt-4o-transcribe-diarize"
DEFAULT_FORMAT_MODEL = "anthropic/claude-sonnet-4"
DEFAULT_FORMAT_MAX_OUTPUT_TOKENS = 8192
DEFAULT_CHUNK_DURATION = 1500
DEFAULT_CHUNK_OVERLAP = 15


def _env_bool(name: str, default: str) -> bool:
    return os.environ.get(name, default).lower() in ("1", "true", "yes")


@dataclass(frozen=True)
class Config:
    """Process configuration, read once from the environment and never mutated.

    Built explicitly by load_config() and handed to the adapters and use
    cases that need it.
    """
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    debug: bool = False
    temp_dir: str = "/tmp/echo-markdown"
    ffmpeg_binary: str = "ffmpeg"
    api_key: Optional[str] = field(default=None, repr=False)
    base_url: str = DEFAULT_BASE_URL
    transcription_model: str = DEFAULT_TRANSCRIPTION_MODEL
    diarize_model: str = DEFAULT_DIARIZE_MODEL
    format_model: str = DEFAULT_FORMAT_MODEL
    format_max_output_tokens: int = DEFAULT_FORMAT_MAX_OUTPUT_TOKENS
    probe_timeout: float = 30.0
    transcode_timeout: float = 300.0
    chunk_duration: float = DEFAULT_CHUNK_DURATION
    chunk_overlap: float = DEFAULT_CHUNK_OVERLAP
    dedup_window: float = 1.0
    default_diarize: bool = True

    @classmethod
    def from_env(cls) -> "Config":
        return cls(
            host=os.environ.get("HOST", DEFAULT_HOST),
            port=int(os.environ.get("PORT", DEFAULT_PORT)),
            debug=os.environ.get("DEBUG", "0") == "1",
            temp_dir=os.environ.get("TEMP_DIR", "/tmp/echo-markdown"),
            ffmpeg_binary=os.environ.get("FFMPEG_BINARY", "ffmpeg"),
            api_key=os.environ.get("AI_GATEWAY_API_KEY") or os.environ.get("OPENAI_API_KEY") or None,
            base_url=(
                os.environ.get("OPENAI_BASE_URL")
                or _gateway_base_url(os.environ.get("AI_GATEWAY_URL"))
                or DEFAULT_BASE_URL
            ),
            transcription_model=os.environ.get("TRANSCRIPTION_MODEL", DEFAULT_TRANSCRIPTION_MODEL),
            diarize_model=os.environ.get("DIARIZE_MODEL", DEFAULT_DIARIZE_MODEL),
            format_model=os.environ.get("FORMAT_MODEL", DEFAULT_FORMAT_MODEL),
            format_max_output_tokens=int(
                os.environ.get("FORMAT_MAX_OUTPUT_TOKENS", DEFAULT_FORMAT_MAX_OUTPUT_TOKENS)
            ),
            probe_timeout=float(os.environ.get("PROBE_TIMEOUT", "30")),
            transcode_timeout=float(os.environ.get("TRANSCODE_TIMEOUT", "300")),
            chunk_duration=float(os.environ.get("CHUNK_DURATION", DEFAULT_CHUNK_DURATION)),
            chunk_overlap=float(os.environ.get("CHUNK_OVERLAP", DEFAULT_CHUNK_OVERLAP)),
            dedup_window=float(os.environ.get("DEDUP_WINDOW", "1.0")),
            default_diarize=_env_bool("ENABLE_DIARIZATION", "true"),
        )

    def as_dict(self) -> Dict[str, Any]:
        return {
            "host": self.host,
            "port": self.port,
            "debug": self.debug,
            "base_url": self.base_url,
            "transcription_model": self.transcription_model,
            "diarize_model": self.diarize_model,
            "format_model": self.format_model,
            "format_max_output_tokens": self.format_max_output_tokens,
            "chunk_duration": self.chunk_duration,
            "chunk_overlap": self.chunk_overlap,
            "dedup_window": self.dedup_window,
            "default_diarize": self.default_diarize,
            "has_api_key": self.api_key is not None,
        }


def _gateway_base_url(gateway_url: Optional[str]) -> Optional[str]:
    if not gateway_url:
        return None
    return gateway_url.rstrip("/") + "/v1"


def load_config() -> Config:
    """Load .env, then build a Config from the environment."""
    load_dotenv()
    cfg = Config.from_env()
    Path(cfg.temp_dir).mkdir(parents=True, exist_ok=True)
    return cfg


def create_remote_adapters(cfg: Config):
    """Create the transcription and text-generation adapters.

    Both talk to the same OpenAI-compatible endpoint.
    """
    from adapters.openai.transcription import OpenAITranscriptionAdapter
    from adapters.openai.formatting import OpenAITextGenerationAdapter

    transcription = OpenAITranscriptionAdapter(
        api_key=cfg.api_key,
        base_url=cfg.base_url,
        transcription_model=cfg.transcription_model,
        diarize_model=cfg.diarize_model,
    )
    text_generation = OpenAITextGenerationAdapter(
        api_key=cfg.api_key,
        base_url=cfg.base_url,
        model=cfg.format_model,
    )
    logger.info(
        f"Remote adapters: base_url={cfg.base_url}, transcription={cfg.transcription_model}, "
        f"diarize={cfg.diarize_model}, format={cfg.format_model}"
    )
    return transcription, text_generation


def create_audio_adapter(cfg: Config):
    """Create the audio processing adapter (always FFmpeg)."""
    from adapters.ffmpeg.audio import FFmpegAudioAdapter
    return FFmpegAudioAdapter(
        binary=cfg.ffmpeg_binary,
        probe_timeout=cfg.probe_timeout,
        transcode_timeout=cfg.transcode_timeout,
    )


def create_media_converter(cfg: Config):
    """Wire the full media-to-markdown pipeline from a Config."""
    from adapters.local.log_progress import LogProgressAdapter
    from use_cases.convert_media import ConvertMediaUseCase
    from use_cases.format_markdown import MarkdownFormatter
    from use_cases.transcribe import TranscribeAudioUseCase

    transcription, text_generation = create_remote_adapters(cfg)
    transcriber = TranscribeAudioUseCase(
        audio=create_audio_adapter(cfg),
        transcription=transcription,
        progress=LogProgressAdapter(),
        config=cfg,
    )
    formatter = MarkdownFormatter(text_generation, max_output_tokens=cfg.format_max_output_tokens)
    return ConvertMediaUseCase(transcriber=transcriber, formatter=formatter)
