"""Builds the translation fallback chain from settings."""

from __future__ import annotations

import logging

from clients.llm_client import LLMClient
from clients.translators import (
    AzureTranslator,
    DeepLTranslator,
    GoogleFreeTranslator,
    LLMTranslator,
    Translator,
)
from config import Settings
from services.fallback import FallbackChain, ProviderGroup
from services.rotation import RotationCursor, build_combinations

logger = logging.getLogger(__name__)


def _llm_translators(settings: Settings) -> list[Translator]:
    combinations = build_combinations(
        [
            ("Cerebras", settings.cerebras_endpoint, settings.cerebras_api_keys, settings.cerebras_translation_models),
            ("Groq", settings.groq_endpoint, settings.groq_api_keys, settings.groq_translation_models),
        ]
    )
    return [
        LLMTranslator(
            LLMClient(
                combination,
                timeout=settings.llm_timeout,
                max_tokens=settings.translation_max_tokens,
                temperature=0.2,
            )
        )
        for combination in combinations
    ]


def build_provider_groups(settings: Settings) -> list[ProviderGroup]:
    """Create one group per configured provider, arranged in the configured order."""
    available: dict[str, list[Translator]] = {}
    timeout = settings.translator_timeout

    if settings.azure_translator_keys:
        available["azure"] = [
            AzureTranslator(
                key,
                settings.azure_translator_region,
                settings.azure_translator_endpoint,
                timeout=timeout,
                key_index=i,
            )
            for i, key in enumerate(settings.azure_translator_keys)
        ]
    if settings.deepl_api_keys:
        available["deepl"] = [
            DeepLTranslator(key, settings.deepl_endpoint_for(key), timeout=timeout, key_index=i)
            for i, key in enumerate(settings.deepl_api_keys)
        ]
    if settings.google_translate_enabled:
        available["google"] = [GoogleFreeTranslator(timeout=timeout)]
    llm = _llm_translators(settings)
    if llm:
        available["llm"] = llm

    groups: list[ProviderGroup] = []
    for name in settings.translator_provider_order:
        translators = available.pop(name.lower(), None)
        if translators is None:
            logger.warning("Provider %s in order config but not configured/enabled", name)
            continue
        groups.append(ProviderGroup(name, tuple(translators)))
        logger.info("%s group: %d translator(s)", name, len(translators))

    for leftover in available:
        logger.info("Provider %s configured but missing from provider order; skipped", leftover)
    return groups


def build_fallback_chain(settings: Settings, cursor: RotationCursor | None = None) -> FallbackChain:
    return FallbackChain(build_provider_groups(settings), cursor)
