"""
Tree Recreator

Rebuilds a resource tree with every string leaf replaced by its translation:
- Mappings keep their keys in the original order
- Sequences keep their length and element order
- Numbers, booleans and null pass through unchanged
- Any translator failure aborts the whole pass (no partial output)

The traversal uses an explicit work stack, so nesting depth is limited by
memory only. Leaves can be translated one at a time (default), in batches,
and/or on a bounded thread pool; results are always written back to their
original positions.
"""

import threading
import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Tuple

from i18n_recreate import language_codes as lc
from i18n_recreate.config import get_translation_settings
from i18n_recreate.exceptions import RecreationCancelled, TranslationFailure
from i18n_recreate.logger import get_logger
from i18n_recreate.translation.placeholders import (
    is_placeholder_only,
    missing_placeholders,
    replace_variables_with_placeholders,
    restore_variables_from_placeholders,
)
from i18n_recreate.translation.progress import RecreationProgress, RecreationResult, RecreationStats
from i18n_recreate.translation.tree import (
    MISSING,
    ValueKind,
    join_pointer,
    kind_of,
    needs_translation,
    resolve_pointer,
)

logger = get_logger(__name__)


@dataclass
class _Slot:
    """Position of one string leaf in the output tree."""
    parent: Any
    key: Any
    pointer: str
    text: str


@dataclass
class _Job:
    """One string to send to the translator, possibly feeding several slots."""
    text: str
    protected: str
    placeholders: Dict[str, str]
    slots: List[_Slot] = field(default_factory=list)

    @property
    def pointer(self) -> str:
        return self.slots[0].pointer


def rebuild_skeleton(node: Any) -> Tuple[list, List[_Slot]]:
    """
    Copy the container structure of node.

    Returns a one-element holder list whose item is the new root, and the
    string slots in document order. String slots still hold the source text.
    """
    holder = [None]
    slots: List[_Slot] = []
    stack = [(node, holder, 0, "")]

    while stack:
        value, parent, key, pointer = stack.pop()
        kind = kind_of(value, pointer)

        if kind is ValueKind.MAPPING:
            out = {}
            parent[key] = out
            children = []
            for child_key, child in value.items():
                # Reserve the key now so order never depends on visit order
                out[child_key] = None
                children.append((child, out, child_key, join_pointer(pointer, child_key)))
            stack.extend(reversed(children))
        elif kind is ValueKind.SEQUENCE:
            out = [None] * len(value)
            parent[key] = out
            stack.extend(reversed([
                (child, out, index, join_pointer(pointer, index))
                for index, child in enumerate(value)
            ]))
        elif kind is ValueKind.STRING:
            parent[key] = value
            slots.append(_Slot(parent, key, pointer, value))
        else:
            # NUMBER, BOOLEAN, NULL
            parent[key] = value

    return holder, slots


class TreeRecreator:
    """
    Structure-preserving translation of a resource tree.

    Args:
        translator: Object with `translate(text, target_language) -> str`
            (and optionally `translate_batch(texts, target_language)`).
        max_concurrent_requests: Upper bound on in-flight translator calls.
        batch_size: When > 0, send strings through translate_batch in
            chunks of this size.
        deduplicate: Translate each distinct string once per pass.
        preserve_variables: Protect interpolation variables with
            placeholders around the translator call.
        variable_patterns: Regexes recognising interpolation variables.
        progress_callback: Called with RecreationProgress after every unit of
            work; returning True requests cancellation.
        cancel_check: Polled between units; returning True cancels.
    """

    def __init__(
        self,
        translator,
        max_concurrent_requests: int = 1,
        batch_size: int = 0,
        deduplicate: bool = False,
        preserve_variables: bool = False,
        variable_patterns: Optional[List[str]] = None,
        progress_callback: Optional[Callable[[RecreationProgress], Optional[bool]]] = None,
        cancel_check: Optional[Callable[[], bool]] = None,
    ):
        if int(max_concurrent_requests) < 1:
            raise ValueError("max_concurrent_requests must be at least 1")
        if int(batch_size) < 0:
            raise ValueError("batch_size must not be negative")

        self.translator = translator
        self.max_concurrent_requests = int(max_concurrent_requests)
        self.batch_size = int(batch_size)
        self.deduplicate = deduplicate
        self.preserve_variables = preserve_variables
        self.variable_patterns = list(variable_patterns or [])
        self.progress_callback = progress_callback
        self.cancel_check = cancel_check

    @classmethod
    def from_config(cls, translator, config: Dict[str, Any], **overrides) -> "TreeRecreator":
        """Build a recreator from the `translation` config section; None overrides are ignored."""
        settings = get_translation_settings(config)
        options = {
            'max_concurrent_requests': settings['max_concurrent_requests'],
            'batch_size': settings['batch_size'],
            'deduplicate': settings['deduplicate'],
            'preserve_variables': settings['preserve_variables'],
            'variable_patterns': settings['variable_patterns'],
        }
        options.update({key: value for key, value in overrides.items() if value is not None})
        return cls(translator, **options)

    def recreate(self, node: Any, target_language: str, existing: Any = None) -> Any:
        """
        Return a new tree shaped like node with every string translated.

        Args:
            node: Source tree (not modified).
            target_language: Target language code, e.g. "de".
            existing: Optional earlier translation of the same file; string
                leaves found at the same JSON pointer are reused as-is.

        Raises:
            TranslationFailure: First failing leaf, with its JSON pointer.
            RecreationCancelled: Cancellation was requested.
            UnsupportedValueError: The tree holds a non-JSON value.
        """
        return self.recreate_with_stats(node, target_language, existing).tree

    def recreate_with_stats(self, node: Any, target_language: str, existing: Any = None) -> RecreationResult:
        """Like recreate(), also returning pass statistics."""
        start_time = time.time()
        holder, slots = rebuild_skeleton(node)
        stats = RecreationStats(total_strings=len(slots))

        jobs = self._plan(slots, existing, stats)
        logger.info(
            f"Recreating tree for '{target_language}': {len(slots)} strings, "
            f"{len(jobs)} to translate, {stats.reused} reused, {stats.skipped} skipped"
        )

        translations = self._translate_jobs(jobs, target_language, stats, start_time)

        for job, translated in zip(jobs, translations):
            for slot in job.slots:
                slot.parent[slot.key] = translated
                stats.translated += 1

        stats.elapsed_seconds = time.time() - start_time
        self._report(target_language, len(jobs), len(jobs), None, stats, start_time, phase="completed")
        logger.info(
            f"Recreation for '{target_language}' finished in {stats.elapsed_seconds:.2f}s "
            f"({stats.translated} translated, {stats.translator_calls} translator calls)"
        )
        return RecreationResult(holder[0], stats)

    def _plan(self, slots: List[_Slot], existing: Any, stats: RecreationStats) -> List[_Job]:
        jobs: List[_Job] = []
        by_text: Dict[str, _Job] = {}

        for slot in slots:
            if not needs_translation(slot.text):
                stats.skipped += 1
                continue

            if existing is not None:
                previous = resolve_pointer(existing, slot.pointer)
                if previous is not MISSING and isinstance(previous, str) and needs_translation(previous):
                    slot.parent[slot.key] = previous
                    stats.reused += 1
                    continue

            protected, placeholders = replace_variables_with_placeholders(
                slot.text, self.variable_patterns, self.preserve_variables
            )
            if placeholders and is_placeholder_only(protected):
                stats.skipped += 1
                continue

            if self.deduplicate and slot.text in by_text:
                by_text[slot.text].slots.append(slot)
                continue

            job = _Job(slot.text, protected, placeholders, [slot])
            jobs.append(job)
            by_text[slot.text] = job

        return jobs

    def _units(self, jobs: List[_Job]) -> List[List[_Job]]:
        size = self.batch_size if self.batch_size > 0 else 1
        return [jobs[start:start + size] for start in range(0, len(jobs), size)]

    def _translate_jobs(
        self,
        jobs: List[_Job],
        target_language: str,
        stats: RecreationStats,
        start_time: float,
    ) -> List[str]:
        if not jobs:
            return []
        units = self._units(jobs)
        if self.max_concurrent_requests > 1 and len(units) > 1:
            return self._run_concurrent(units, len(jobs), target_language, stats, start_time)
        return self._run_sequential(units, len(jobs), target_language, stats, start_time)

    def _run_sequential(self, units, total_jobs, target_language, stats, start_time) -> List[str]:
        results: List[str] = []

        for unit in units:
            if self._cancel_requested():
                raise RecreationCancelled(len(results), total_jobs)

            results.extend(self._run_unit(unit, target_language))
            stats.translator_calls += 1

            if self._report(target_language, len(results), total_jobs, unit[-1], stats, start_time):
                raise RecreationCancelled(len(results), total_jobs)

        return results

    def _run_concurrent(self, units, total_jobs, target_language, stats, start_time) -> List[str]:
        unit_results: List[Optional[List[str]]] = [None] * len(units)
        stop = threading.Event()
        done_jobs = 0
        futures = {}

        def work(unit):
            if stop.is_set():
                return None
            return self._run_unit(unit, target_language)

        if self._cancel_requested():
            raise RecreationCancelled(0, total_jobs)

        executor = ThreadPoolExecutor(
            max_workers=self.max_concurrent_requests,
            thread_name_prefix="recreate",
        )
        try:
            for index, unit in enumerate(units):
                futures[executor.submit(work, unit)] = index

            for future in as_completed(futures):
                index = futures[future]
                unit_results[index] = future.result()
                done_jobs += len(units[index])
                stats.translator_calls += 1

                if self._report(target_language, done_jobs, total_jobs, units[index][-1], stats, start_time):
                    raise RecreationCancelled(done_jobs, total_jobs)
                if self._cancel_requested():
                    raise RecreationCancelled(done_jobs, total_jobs)
        except BaseException:
            stop.set()
            for future in futures:
                future.cancel()
            raise
        finally:
            executor.shutdown(wait=True)

        results: List[str] = []
        for unit_result in unit_results:
            results.extend(unit_result)
        return results

    def _run_unit(self, unit: List[_Job], target_language: str) -> List[str]:
        if self.batch_size > 0:
            return self._translate_batch(unit, target_language)
        return [self._translate_one(unit[0], target_language)]

    def _translate_one(self, job: _Job, target_language: str) -> str:
        try:
            translated = self.translator.translate(job.protected, target_language)
        except TranslationFailure as e:
            raise e.at(job.pointer)
        except Exception as e:
            raise TranslationFailure(job.text, target_language, e, pointer=job.pointer) from e
        return self._finish(job, translated, target_language)

    def _translate_batch(self, unit: List[_Job], target_language: str) -> List[str]:
        texts = [job.protected for job in unit]
        translate_batch = getattr(self.translator, 'translate_batch', None)

        try:
            if translate_batch is not None:
                translated = translate_batch(texts, target_language)
            else:
                translated = [self.translator.translate(text, target_language) for text in texts]
        except TranslationFailure as e:
            failing = next((job for job in unit if job.protected == e.text), unit[0])
            raise e.at(failing.pointer)
        except Exception as e:
            raise TranslationFailure(unit[0].text, target_language, e, pointer=unit[0].pointer) from e

        if not isinstance(translated, list) or len(translated) != len(unit):
            raise TranslationFailure(
                unit[0].text,
                target_language,
                f"malformed batch result: expected {len(unit)} translations",
                pointer=unit[0].pointer,
                retryable=False,
            )
        return [self._finish(job, text, target_language) for job, text in zip(unit, translated)]

    def _finish(self, job: _Job, translated: Any, target_language: str) -> str:
        if not isinstance(translated, str):
            raise TranslationFailure(
                job.text,
                target_language,
                f"malformed translator result of type {type(translated).__name__}",
                pointer=job.pointer,
                retryable=False,
            )
        if job.placeholders:
            lost = missing_placeholders(job.protected, translated, job.placeholders)
            if lost:
                raise TranslationFailure(
                    job.text,
                    target_language,
                    f"variable_lost:{','.join(lost)}",
                    pointer=job.pointer,
                    retryable=False,
                )
            translated = restore_variables_from_placeholders(translated, job.placeholders)
        return translated

    def _cancel_requested(self) -> bool:
        return bool(self.cancel_check and self.cancel_check())

    def _report(
        self,
        target_language: str,
        done: int,
        total: int,
        last_job: Optional[_Job],
        stats: RecreationStats,
        start_time: float,
        phase: str = "translating",
    ) -> bool:
        """Send a progress update; True means the callback asked to cancel."""
        if not self.progress_callback:
            return False

        elapsed = time.time() - start_time
        remaining = None
        if 0 < done < total:
            remaining = elapsed / done * (total - done)

        progress = RecreationProgress(
            target_language=target_language,
            target_language_name=lc.get_language_name(target_language) or target_language,
            current_item=done,
            total_items=total,
            current_pointer=last_job.pointer if last_job else "",
            current_text=last_job.text if last_job else "",
            translated_count=done,
            reused_count=stats.reused,
            skipped_count=stats.skipped,
            phase=phase,
            estimated_time_remaining=remaining,
        )
        return bool(self.progress_callback(progress)) and phase != "completed"
