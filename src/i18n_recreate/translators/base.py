"""
Translator Interface

Defines the single-operation collaborator consumed by the tree recreator:
- Translator base class (translate one string, optional batch translation)
- Retry policy scoped to a single provider call
- Small in-process translators (echo, callable) for dry runs and tests
"""

import time
from typing import Callable, List, Optional, Tuple

from i18n_recreate.exceptions import TranslationFailure
from i18n_recreate.logger import get_logger

logger = get_logger(__name__)


def categorize_error(error: Exception, attempt: int) -> Tuple[bool, float]:
    """
    Categorize an error and determine retry strategy.

    Returns:
        Tuple of (should_retry, wait_time_seconds)
    """
    if isinstance(error, TranslationFailure) and not error.retryable:
        return False, 0

    status_code = None
    cause = error
    if isinstance(error, TranslationFailure):
        status_code = error.details.get('status_code')
        cause = error.cause
    # Only the cause is inspected; the formatted message contains the source text
    error_str = str(cause).lower() if cause is not None else ""

    if status_code is not None:
        # Rate limiting (429) - long backoff
        if status_code == 429:
            wait_time = 30 * (2 ** attempt)  # 30s, 60s, 120s
            return True, min(wait_time, 300)  # Max 5 minutes
        # Server errors (5xx) - standard backoff
        if 500 <= status_code < 600:
            return True, 2 ** attempt
        # Authentication / quota (401, 403), invalid request (400) and other client errors
        return False, 0

    if 'rate limit' in error_str or 'too many requests' in error_str:
        return True, min(30 * (2 ** attempt), 300)

    if 'unauthorized' in error_str or 'forbidden' in error_str:
        return False, 0

    # Timeout - retry with backoff
    if 'timeout' in error_str:
        return True, 5 * (2 ** attempt)  # 5s, 10s, 20s

    # Malformed responses - retry once
    if 'malformed' in error_str or 'parse' in error_str or 'json' in error_str:
        return attempt < 1, 1.0

    # Unknown errors - standard backoff
    return True, 2 ** attempt


class Translator:
    """
    Base translator.

    Subclasses implement `_translate_once`. `translate` adds the empty-string
    short-circuit and the bounded per-call retry.
    """

    name = "base"

    def __init__(self, max_retries: int = 1, sleep: Callable[[float], None] = time.sleep):
        self.max_retries = max(1, int(max_retries))
        self._sleep = sleep
        self.request_count = 0

    def _translate_once(self, text: str, target_language: str) -> str:
        raise NotImplementedError

    def _translate_batch_once(self, texts: List[str], target_language: str) -> List[str]:
        return [self._translate_once(text, target_language) for text in texts]

    def translate(self, text: str, target_language: str) -> str:
        """Translate one string; raises TranslationFailure."""
        if text == "":
            return ""
        return self._with_retries(lambda: self._translate_once(text, target_language), text, target_language)

    def translate_batch(self, texts: List[str], target_language: str) -> List[str]:
        """
        Translate several strings, results in input order.

        Empty strings are answered locally and never sent to the provider.
        """
        results = list(texts)
        pending = [i for i, text in enumerate(texts) if text != ""]
        if not pending:
            return results

        batch = [texts[i] for i in pending]
        translated = self._with_retries(
            lambda: self._translate_batch_once(batch, target_language),
            batch[0],
            target_language,
        )
        if len(translated) != len(batch):
            raise TranslationFailure(
                batch[0],
                target_language,
                f"malformed response: expected {len(batch)} translations, got {len(translated)}",
                retryable=False,
            )
        for index, value in zip(pending, translated):
            results[index] = value
        return results

    def _with_retries(self, call, text: str, target_language: str):
        last_error: Optional[TranslationFailure] = None

        for attempt in range(self.max_retries):
            try:
                if attempt > 0:
                    logger.info(f"  Retry attempt {attempt + 1}/{self.max_retries}")
                self.request_count += 1
                return call()
            except TranslationFailure as e:
                last_error = e
            except Exception as e:
                last_error = TranslationFailure(text, target_language, e)

            should_retry, wait_time = categorize_error(last_error, attempt)
            if should_retry and attempt < self.max_retries - 1:
                logger.warning(f"  Attempt {attempt + 1} failed: {last_error.cause}. Waiting {wait_time}s before retry...")
                self._sleep(wait_time)
            elif not should_retry:
                logger.error(f"  Non-recoverable error: {last_error.cause}")
                break

        raise last_error

    def close(self):
        """Release provider resources (HTTP clients)."""

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()


class EchoTranslator(Translator):
    """Returns every string unchanged. Used for dry runs."""

    name = "echo"

    def _translate_once(self, text: str, target_language: str) -> str:
        return text


class CallableTranslator(Translator):
    """Adapts a plain `func(text, target_language) -> str` to the Translator interface."""

    name = "callable"

    def __init__(self, func: Callable[[str, str], str], max_retries: int = 1, sleep=time.sleep):
        super().__init__(max_retries=max_retries, sleep=sleep)
        self.func = func

    def _translate_once(self, text: str, target_language: str) -> str:
        return self.func(text, target_language)
