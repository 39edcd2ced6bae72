"""
Translators

Translator implementations and a factory building one from configuration.
"""

from typing import Any, Dict, Optional

from i18n_recreate.config import DEFAULT_SYSTEM_MESSAGE, PROVIDER_DEFAULTS, validate_translator_config
from i18n_recreate.logger import get_logger
from i18n_recreate.translators.base import CallableTranslator, EchoTranslator, Translator
from i18n_recreate.translators.google import GoogleTranslator
from i18n_recreate.translators.llm import ChatCompletionTranslator

logger = get_logger(__name__)

__all__ = [
    'Translator',
    'EchoTranslator',
    'CallableTranslator',
    'GoogleTranslator',
    'ChatCompletionTranslator',
    'create_translator',
]


def create_translator(
    config: Dict[str, Any],
    provider_override: Optional[str] = None,
    source_language: Optional[str] = None,
    client=None,
) -> Translator:
    """
    Build the configured translator.

    Args:
        config: Loaded configuration (credentials already resolved).
        provider_override: Provider name to use instead of config['translator'].
        source_language: Optional source language hint (Google only).
        client: Optional pre-built httpx.Client (tests inject a MockTransport).

    Raises:
        ConfigError: If the provider is not properly configured.
    """
    provider = validate_translator_config(config, provider_override)

    if provider == 'echo':
        logger.info("Initialized echo translator (dry run)")
        return EchoTranslator()

    provider_config = config[provider]
    max_retries = provider_config.get('max_retries', PROVIDER_DEFAULTS['max_retries'])
    timeout = provider_config.get('timeout', PROVIDER_DEFAULTS['timeout'])

    if provider == 'google':
        translator = GoogleTranslator(
            api_key=provider_config['api_key'],
            api_url=provider_config.get('api_url'),
            source_language=source_language,
            timeout=timeout,
            max_retries=max_retries,
            client=client,
        )
    else:
        # openai and custom providers share the OpenAI-compatible protocol
        translator = ChatCompletionTranslator(
            api_key=provider_config['api_key'],
            model=provider_config['model'],
            api_url=provider_config['api_url'],
            provider=provider,
            system_message=provider_config.get('system_message') or DEFAULT_SYSTEM_MESSAGE,
            timeout=timeout,
            max_retries=max_retries,
            client=client,
        )

    logger.info(f"Initialized translator with provider: {provider}")
    return translator
