"""
Studio Configuration - Environment Variable Management.
Loads provider credentials and production limits from .env file.
"""
import os
import logging
from pathlib import Path
from dataclasses import dataclass, field
from typing import Optional

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

# Load .env from project root
PROJECT_ROOT = Path(__file__).parent.parent
ENV_FILE = PROJECT_ROOT / ".env"

if ENV_FILE.exists():
    load_dotenv(ENV_FILE)
    logger.info(f"Loaded environment from {ENV_FILE}")
else:
    logger.warning(f".env file not found at {ENV_FILE}")


def _is_configured(value: Optional[str]) -> bool:
    return bool(value and not value.startswith("PASTE_"))


@dataclass
class ProviderKeys:
    """Credentials for generation, assembly and storage providers."""
    replicate_api_token: Optional[str] = None  # Video + music
    openai_api_key: Optional[str] = None  # Voiceover (TTS)
    shotstack_api_key: Optional[str] = None  # Assembly / render
    shotstack_env: str = "v1"  # 'v1' for production, 'stage' for sandbox
    supabase_url: Optional[str] = None
    supabase_service_key: Optional[str] = None

    @property
    def has_replicate(self) -> bool:
        return _is_configured(self.replicate_api_token)

    @property
    def has_openai(self) -> bool:
        return _is_configured(self.openai_api_key)

    @property
    def has_shotstack(self) -> bool:
        return _is_configured(self.shotstack_api_key)

    @property
    def has_storage(self) -> bool:
        return bool(self.supabase_url) and _is_configured(self.supabase_service_key)


@dataclass
class ProductionLimits:
    """Timeouts and request bounds for a production run."""
    poll_interval_seconds: float = 5.0
    max_poll_seconds: float = 600.0  # 10 minutes for long renders
    render_request_timeout: float = 30.0
    generation_request_timeout: float = 10.0
    generation_max_poll_seconds: float = 120.0
    generation_poll_interval_seconds: float = 3.0
    tts_request_timeout: float = 30.0
    max_prompt_length: int = 2000
    max_scenes: int = 20
    min_duration_seconds: float = 10.0
    max_duration_seconds: float = 300.0


@dataclass
class StudioConfig:
    """Main Studio Configuration."""
    keys: ProviderKeys
    limits: ProductionLimits = field(default_factory=ProductionLimits)
    debug: bool = False

    def validate(self) -> dict:
        """Validate configuration and return status."""
        return {
            "providers": {
                "video_configured": self.keys.has_replicate,
                "music_configured": self.keys.has_replicate,
                "voiceover_configured": self.keys.has_openai,
                "assembly_configured": self.keys.has_shotstack,
                "storage_configured": self.keys.has_storage,
            },
            "ready_for_production": (
                self.keys.has_replicate and self.keys.has_openai and self.keys.has_shotstack
            ),
        }

    def log_status(self):
        """Log configuration status (without exposing keys)."""
        status = self.validate()["providers"]

        logger.info("=" * 50)
        logger.info("Configuration Status:")
        logger.info(f"  Replicate (video/music): {'OK' if status['video_configured'] else 'NOT CONFIGURED'}")
        logger.info(f"  OpenAI TTS (voiceover): {'OK' if status['voiceover_configured'] else 'NOT CONFIGURED'}")
        logger.info(f"  Shotstack (assembly): {'OK' if status['assembly_configured'] else 'NOT CONFIGURED'}")
        logger.info(f"  Storage: {'OK' if status['storage_configured'] else 'NOT CONFIGURED'}")
        logger.info("=" * 50)

        if not status["storage_configured"]:
            logger.warning("Storage not configured - rendered videos keep their transient URLs")


def _float_env(name: str, default: float) -> float:
    return float(os.getenv(name, str(default)))


def load_config() -> StudioConfig:
    """Load configuration from environment variables."""
    keys = ProviderKeys(
        replicate_api_token=os.getenv("REPLICATE_API_TOKEN"),
        openai_api_key=os.getenv("OPENAI_API_KEY"),
        shotstack_api_key=os.getenv("SHOTSTACK_API_KEY"),
        shotstack_env=os.getenv("SHOTSTACK_ENV", "v1"),
        supabase_url=os.getenv("SUPABASE_URL"),
        supabase_service_key=os.getenv("SUPABASE_SERVICE_ROLE_KEY"),
    )

    limits = ProductionLimits(
        poll_interval_seconds=_float_env("ASSEMBLY_POLL_INTERVAL", 5.0),
        max_poll_seconds=_float_env("ASSEMBLY_MAX_POLL_SECONDS", 600.0),
        render_request_timeout=_float_env("ASSEMBLY_REQUEST_TIMEOUT", 30.0),
    )

    return StudioConfig(
        keys=keys,
        limits=limits,
        debug=os.getenv("DEBUG", "false").lower() == "true",
    )


# Global config instance
config = load_config()
