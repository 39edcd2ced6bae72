"""
Google Cloud Translation (v2, Basic) translator.

The API key is passed in at construction. Batches are split into requests
of at most 128 segments, the provider limit.
"""

import time
from typing import List, Optional

import httpx

from i18n_recreate.config import GOOGLE_MAX_BATCH_SIZE
from i18n_recreate.exceptions import ConfigError, TranslationFailure
from i18n_recreate.logger import get_logger
from i18n_recreate.translators.base import Translator
from i18n_recreate.translators.http import get_httpx_timeout, http_error_failure

logger = get_logger(__name__)

GOOGLE_TRANSLATE_URL = "https://translation.googleapis.com/language/translate/v2"


class GoogleTranslator(Translator):
    """Translator backed by the Google Translate v2 REST API."""

    name = "google"

    def __init__(
        self,
        api_key: str,
        api_url: str = GOOGLE_TRANSLATE_URL,
        source_language: Optional[str] = None,
        timeout=60,
        max_retries: int = 3,
        client: Optional[httpx.Client] = None,
        sleep=time.sleep,
    ):
        super().__init__(max_retries=max_retries, sleep=sleep)
        if not api_key:
            raise ConfigError(
                "Google Translate API key not configured",
                code="translator_config_missing",
                details={"provider": "google", "missing_field": "api_key"},
            )
        self.api_key = api_key
        self.api_url = api_url or GOOGLE_TRANSLATE_URL
        self.source_language = source_language
        self._owns_client = client is None
        self.client = client or httpx.Client(timeout=get_httpx_timeout(timeout))

    def _translate_once(self, text: str, target_language: str) -> str:
        return self._translate_batch_once([text], target_language)[0]

    def translate_batch(self, texts: List[str], target_language: str) -> List[str]:
        results: List[str] = []
        for start in range(0, len(texts), GOOGLE_MAX_BATCH_SIZE):
            chunk = texts[start:start + GOOGLE_MAX_BATCH_SIZE]
            results.extend(super().translate_batch(chunk, target_language))
        return results

    def _translate_batch_once(self, texts: List[str], target_language: str) -> List[str]:
        params = [
            ("key", self.api_key),
            ("target", target_language),
            ("format", "text"),
        ]
        if self.source_language:
            params.append(("source", self.source_language))
        for text in texts:
            params.append(("q", text))

        logger.debug(f"Calling Google Translate API: {len(texts)} segment(s) -> {target_language}")

        try:
            response = self.client.post(self.api_url, params=params)
            response.raise_for_status()
            result = response.json()
        except httpx.HTTPStatusError as e:
            logger.error(f"Google Translate API HTTP error: {e.response.status_code} - {e.response.text[:200]}")
            raise http_error_failure(e, "Google Translate", texts[0], target_language)
        except httpx.TimeoutException:
            raise TranslationFailure(texts[0], target_language, "Google Translate API request timeout")
        except httpx.HTTPError as e:
            raise TranslationFailure(texts[0], target_language, f"Google Translate API call failed: {e}")
        except ValueError as e:
            raise TranslationFailure(texts[0], target_language, f"malformed Google Translate response: {e}")

        try:
            translations = result["data"]["translations"]
            translated = [item["translatedText"] for item in translations]
        except (KeyError, TypeError) as e:
            raise TranslationFailure(
                texts[0], target_language, f"malformed Google Translate response: missing {e}"
            )

        if len(translated) != len(texts):
            raise TranslationFailure(
                texts[0],
                target_language,
                f"malformed Google Translate response: expected {len(texts)} translations, got {len(translated)}",
            )
        return translated

    def close(self):
        if self._owns_client:
            self.client.close()
