"""
Configuration module for SlideReel (configs).
"""

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

GOOGLE_TTS_DEFAULT_ENDPOINT = (
    "https://us-central1-texttospeech.googleapis.com/v1beta1/text:synthesize"
)


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower() == "true"


class Config:
    def __init__(self) -> None:
        self._store_path: Path | None = None
        self._output_dir: Path | None = None

        # Queue / run
        self.render_concurrency = int(os.getenv("RENDER_CONCURRENCY", "3"))
        self.keep_failed_workspaces = _env_flag("KEEP_FAILED_WORKSPACES")

        # Output frame
        self.video_width = int(os.getenv("VIDEO_WIDTH", "1080"))
        self.video_height = int(os.getenv("VIDEO_HEIGHT", "1920"))

        # FFmpeg
        self.ffmpeg_binary = os.getenv("FFMPEG_BINARY", "ffmpeg")
        self.ffprobe_binary = os.getenv("FFPROBE_BINARY", "ffprobe")
        self.ffmpeg_fps = int(os.getenv("FFMPEG_FPS", "24"))
        self.ffmpeg_threads = int(os.getenv("FFMPEG_THREADS", "2"))
        self.ffmpeg_preset = os.getenv("FFMPEG_PRESET", "medium")
        self.ffmpeg_codec = os.getenv("FFMPEG_CODEC", "libx264")
        self.ffmpeg_audio_codec = os.getenv("FFMPEG_AUDIO_CODEC", "aac")

        # Logging / runtime
        self.log_level = os.getenv("LOG_LEVEL", "INFO").upper()
        self.log_file = os.getenv("LOG_FILE")
        self.log_dir = os.getenv("LOG_DIR", "logs")

        # OpenAI
        self.openai_api_key = os.getenv("OPENAI_API_KEY")
        # Optional base URL for OpenAI-compatible services
        self.openai_base_url = os.getenv("OPENAI_BASE_URL") or os.getenv(
            "OPENAI_API_BASE"
        )
        self.openai_timeout = float(os.getenv("OPENAI_TIMEOUT", "60"))
        # One attempt per call; failed items are retried by the next run
        self.openai_retries = int(os.getenv("OPENAI_RETRIES", "1"))
        self.openai_backoff = float(os.getenv("OPENAI_BACKOFF", "0.5"))

        self.planner_model = os.getenv("PLANNER_MODEL", "gpt-4o")
        self.image_model = os.getenv("IMAGE_MODEL", "gpt-image-1")
        self.image_size = os.getenv("IMAGE_SIZE", "1024x1536")
        self.image_quality = os.getenv("IMAGE_QUALITY", "medium")

        # Speech synthesis
        self.tts_provider = os.getenv("TTS_PROVIDER", "google").lower()
        self.google_tts_api_key = os.getenv("GOOGLE_TTS_API_KEY", "")
        self.google_tts_endpoint = (
            os.getenv("GOOGLE_TTS_ENDPOINT") or GOOGLE_TTS_DEFAULT_ENDPOINT
        )
        self.google_tts_language = os.getenv("GOOGLE_TTS_LANGUAGE", "en-IN")
        self.google_tts_voice = os.getenv("GOOGLE_TTS_VOICE", "en-IN-Wavenet-E")
        self.google_tts_timeout = float(os.getenv("GOOGLE_TTS_TIMEOUT", "30"))
        self.openai_tts_model = os.getenv("OPENAI_TTS_MODEL", "tts-1-hd")
        self.openai_tts_voice = os.getenv("OPENAI_TTS_VOICE", "nova")

    @property
    def store_path(self) -> Path:
        if self._store_path is None:
            self._store_path = Path(os.getenv("CONTENT_STORE", "content.json"))
        return self._store_path

    @property
    def output_dir(self) -> Path:
        if self._output_dir is None:
            self._output_dir = Path(os.getenv("OUTPUT_DIR", "output_reel"))
        return self._output_dir


config = Config()
