"""Application configuration via environment variables."""

from __future__ import annotations

from pathlib import Path

from pydantic_settings import BaseSettings

from dialogue.transport.base import TransportSettings


class Settings(BaseSettings):
    # Speech (handed to the transport untouched)
    locale: str = "en-US"
    tts_default_voice: str = "en-US-DavisNeural"
    asr_no_input_timeout_ms: int = 5000
    asr_complete_timeout_ms: int = 0

    # Azure speech credentials
    azure_region: str = "swedencentral"
    azure_key: str = ""

    # Grammar (JSONL); empty means the built-in table
    grammar_path: str = ""

    debug: bool = False

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}

    def validate_startup(self) -> list[str]:
        """Validate configuration at startup. Returns warnings, raises on errors."""
        warnings: list[str] = []
        _placeholders = {"your-azure-key", "..."}

        if self.asr_no_input_timeout_ms < 0 or self.asr_complete_timeout_ms < 0:
            raise ValueError("ASR timeouts must not be negative.")

        if self.grammar_path and not Path(self.grammar_path).is_file():
            raise ValueError(f"GRAMMAR_PATH does not exist: {self.grammar_path}")

        if not self.azure_key or self.azure_key in _placeholders:
            warnings.append(
                "AZURE_KEY is missing or a placeholder; only the console transport will work."
            )

        return warnings

    def transport_settings(self) -> TransportSettings:
        return TransportSettings(
            locale=self.locale,
            voice=self.tts_default_voice,
            no_input_timeout_ms=self.asr_no_input_timeout_ms,
            complete_timeout_ms=self.asr_complete_timeout_ms,
        )


settings = Settings()
