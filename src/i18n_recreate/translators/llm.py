"""
OpenAI-compatible chat-completions translator.

Works with OpenAI and any provider exposing the same
`/v1/chat/completions` format (set `api_url` and `model`).
"""

import time
from typing import Dict, Optional

import httpx

from i18n_recreate import language_codes as lc
from i18n_recreate.config import DEFAULT_SYSTEM_MESSAGE, get_prompt
from i18n_recreate.exceptions import ConfigError, TranslationFailure
from i18n_recreate.logger import get_logger
from i18n_recreate.translators.base import Translator
from i18n_recreate.translators.http import get_httpx_timeout, http_error_failure

logger = get_logger(__name__)

OPENAI_CHAT_URL = "https://api.openai.com/v1/chat/completions"


def _is_quoted(text: str) -> bool:
    return len(text) >= 2 and text[0] == text[-1] == '"'


def strip_response_text(content: str, source_text: Optional[str] = None) -> str:
    """
    Remove markdown fences and wrapping quotes some models add.

    Wrapping quotes are kept when the source text itself was quoted.
    """
    text = content.strip()
    if text.startswith('```'):
        lines = text.split('\n')[1:]
        if lines and lines[-1].strip() == '```':
            lines = lines[:-1]
        text = '\n'.join(lines).strip()
    if _is_quoted(text) and not (source_text is not None and _is_quoted(source_text.strip())):
        text = text[1:-1]
    return text


class ChatCompletionTranslator(Translator):
    """Translates one string per chat completion request."""

    name = "openai"

    def __init__(
        self,
        api_key: str,
        model: str,
        api_url: str = OPENAI_CHAT_URL,
        provider: str = "openai",
        system_message: str = DEFAULT_SYSTEM_MESSAGE,
        timeout=120,
        max_retries: int = 3,
        client: Optional[httpx.Client] = None,
        sleep=time.sleep,
    ):
        super().__init__(max_retries=max_retries, sleep=sleep)
        if not api_key:
            raise ConfigError(
                f"{provider} API key not configured",
                code="translator_config_missing",
                details={"provider": provider, "missing_field": "api_key"},
            )
        self.api_key = api_key
        self.model = model
        self.api_url = api_url or OPENAI_CHAT_URL
        self.provider = provider
        self.system_message = system_message
        self._owns_client = client is None
        self.client = client or httpx.Client(timeout=get_httpx_timeout(timeout))
        # Token usage tracking
        self._last_token_usage = {'prompt_tokens': 0, 'completion_tokens': 0}
        self.total_prompt_tokens = 0
        self.total_completion_tokens = 0

    def get_total_token_usage(self) -> Dict[str, int]:
        """Get accumulated token usage."""
        return {
            'prompt_tokens': self.total_prompt_tokens,
            'completion_tokens': self.total_completion_tokens,
        }

    def _build_prompt(self, text: str, target_language: str) -> str:
        prompt_template = get_prompt('single_translation_prompt')['prompt']
        return prompt_template.format(
            target_language_name=lc.get_language_name(target_language) or target_language,
            target_language_code=target_language,
            text=text,
        )

    def _translate_once(self, text: str, target_language: str) -> str:
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json"
        }
        body = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": self.system_message},
                {"role": "user", "content": self._build_prompt(text, target_language)},
            ],
        }

        logger.debug(f"  Calling {self.provider} API (model: {self.model})...")

        try:
            response = self.client.post(self.api_url, headers=headers, json=body)
            response.raise_for_status()
            result = response.json()
        except httpx.HTTPStatusError as e:
            raise http_error_failure(e, self.provider, text, target_language)
        except httpx.TimeoutException:
            raise TranslationFailure(text, target_language, f"{self.provider} API request timeout")
        except httpx.HTTPError as e:
            raise TranslationFailure(text, target_language, f"{self.provider} API call failed: {e}")
        except ValueError as e:
            raise TranslationFailure(text, target_language, f"malformed {self.provider} response: {e}")

        usage = result.get('usage') or {}
        self._last_token_usage = {
            'prompt_tokens': usage.get('prompt_tokens', 0),
            'completion_tokens': usage.get('completion_tokens', 0),
        }
        self.total_prompt_tokens += self._last_token_usage['prompt_tokens']
        self.total_completion_tokens += self._last_token_usage['completion_tokens']

        choices = result.get('choices') or []
        if not choices:
            raise TranslationFailure(text, target_language, f"malformed {self.provider} response: no choices")

        content = (choices[0].get('message') or {}).get('content')
        if not content:
            raise TranslationFailure(text, target_language, f"malformed {self.provider} response: empty content")

        logger.debug(f"  Received {len(content)} chars from {self.provider} (tokens: {self._last_token_usage})")
        return strip_response_text(content, text)

    def close(self):
        if self._owns_client:
            self.client.close()
