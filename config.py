from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

# Load .env file if present (no extra dependency needed)
_env_path = Path(__file__).resolve().parent / ".env"
if _env_path.exists():
    for line in _env_path.read_text().splitlines():
        line = line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, _, value = line.partition("=")
        key, value = key.strip(), value.strip()
        if value and key not in os.environ:  # don't override existing env vars
            os.environ[key] = value


def _csv(name: str, default: str = "") -> tuple[str, ...]:
    """Split a comma-separated env var, dropping blanks."""
    raw = os.getenv(name, default)
    return tuple(part.strip() for part in raw.split(",") if part.strip())


def _flag(name: str, default: str = "true") -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class Settings:
    """Application-wide settings resolved from environment variables."""

    # Database
    database_url: str = field(
        default_factory=lambda: os.getenv("DATABASE_URL", "sqlite:///./issues.db")
    )

    # GitHub
    github_api_base: str = field(
        default_factory=lambda: os.getenv("GITHUB_API_BASE", "https://api.github.com")
    )
    github_token: str | None = field(
        default_factory=lambda: os.getenv("GITHUB_TOKEN")
    )
    github_timeout: int = field(
        default_factory=lambda: int(os.getenv("GITHUB_TIMEOUT", "30"))
    )

    # Chat-completion providers, in priority order: Cerebras, Groq
    cerebras_endpoint: str = field(
        default_factory=lambda: os.getenv("CEREBRAS_ENDPOINT", "https://api.cerebras.ai/v1/")
    )
    cerebras_api_keys: tuple[str, ...] = field(
        default_factory=lambda: _csv("CEREBRAS_API_KEYS")
    )
    cerebras_models: tuple[str, ...] = field(
        default_factory=lambda: _csv(
            "CEREBRAS_MODELS", "llama-4-scout-17b-16e-instruct,qwen-3-32b"
        )
    )
    cerebras_translation_models: tuple[str, ...] = field(
        default_factory=lambda: _csv("CEREBRAS_TRANSLATION_MODELS", "qwen-3-32b")
    )
    groq_endpoint: str = field(
        default_factory=lambda: os.getenv("GROQ_ENDPOINT", "https://api.groq.com/openai/v1/")
    )
    groq_api_keys: tuple[str, ...] = field(
        default_factory=lambda: _csv("GROQ_API_KEYS")
    )
    groq_models: tuple[str, ...] = field(
        default_factory=lambda: _csv(
            "GROQ_MODELS", "meta-llama/llama-4-scout-17b-16e-instruct,qwen/qwen3-32b"
        )
    )
    groq_translation_models: tuple[str, ...] = field(
        default_factory=lambda: _csv("GROQ_TRANSLATION_MODELS", "qwen/qwen3-32b")
    )

    # Summarization / LLM calls
    llm_timeout: int = field(
        default_factory=lambda: int(os.getenv("LLM_TIMEOUT", "60"))
    )
    summary_max_tokens: int = field(
        default_factory=lambda: int(os.getenv("SUMMARY_MAX_TOKENS", "500"))
    )
    summary_temperature: float = field(
        default_factory=lambda: float(os.getenv("SUMMARY_TEMPERATURE", "0.3"))
    )
    translation_max_tokens: int = field(
        default_factory=lambda: int(os.getenv("TRANSLATION_MAX_TOKENS", "2000"))
    )

    # Dedicated translators
    azure_translator_keys: tuple[str, ...] = field(
        default_factory=lambda: _csv("AZURE_TRANSLATOR_KEYS")
    )
    azure_translator_region: str = field(
        default_factory=lambda: os.getenv("AZURE_TRANSLATOR_REGION", "westeurope")
    )
    azure_translator_endpoint: str = field(
        default_factory=lambda: os.getenv(
            "AZURE_TRANSLATOR_ENDPOINT", "https://api.cognitive.microsofttranslator.com/"
        )
    )
    deepl_api_keys: tuple[str, ...] = field(
        default_factory=lambda: _csv("DEEPL_API_KEYS")
    )
    deepl_endpoint: str = field(
        default_factory=lambda: os.getenv("DEEPL_ENDPOINT", "https://api.deepl.com/v2/")
    )
    deepl_free_endpoint: str = field(
        default_factory=lambda: os.getenv("DEEPL_FREE_ENDPOINT", "https://api-free.deepl.com/v2/")
    )
    google_translate_enabled: bool = field(
        default_factory=lambda: _flag("GOOGLE_TRANSLATE_ENABLED", "true")
    )
    translator_timeout: int = field(
        default_factory=lambda: int(os.getenv("TRANSLATOR_TIMEOUT", "30"))
    )
    translator_provider_order: tuple[str, ...] = field(
        default_factory=lambda: _csv("TRANSLATOR_PROVIDER_ORDER", "Azure,DeepL,Google,LLM")
    )

    # Languages
    source_language: str = field(
        default_factory=lambda: os.getenv("SOURCE_LANGUAGE", "en")
    )
    target_language: str = field(
        default_factory=lambda: os.getenv("TARGET_LANGUAGE", "cs")
    )

    def deepl_endpoint_for(self, api_key: str) -> str:
        # Free-tier keys end with ":fx"
        if api_key.lower().endswith(":fx"):
            return self.deepl_free_endpoint
        return self.deepl_endpoint


def get_settings() -> Settings:
    return Settings()
