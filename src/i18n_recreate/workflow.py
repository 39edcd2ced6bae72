"""
File-level recreation workflow.

All-or-nothing: the source is read and validated before any translator call,
and the destination is written only after every string has been translated.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

from i18n_recreate import files
from i18n_recreate import language_codes as lc
from i18n_recreate.config import get_translation_settings
from i18n_recreate.exceptions import ConfigError, OutputWriteFailure
from i18n_recreate.logger import get_logger
from i18n_recreate.translation import RecreationStats, TreeRecreator

logger = get_logger(__name__)


@dataclass
class FileRecreation:
    """Outcome of recreate_file()."""
    source_path: Path
    output_path: Path
    target_language: str
    stats: RecreationStats
    written: bool


def resolve_target_language(code: str) -> str:
    """Canonical spelling of a target code; unknown codes are passed on as given."""
    normalized = lc.normalize_language_code(code)
    if normalized is None:
        if not code or not code.strip():
            raise ConfigError("Target language code is empty", code="invalid_language")
        logger.warning(f"Unknown language code '{code}', passing it to the translator unchanged")
        return code.strip()
    return normalized


def locale_paths(project_root: Path, source_language: str, target_language: str):
    """(source_path, output_path) in the project's locale directory."""
    locales_dir = files.find_locales_dir(project_root)
    return (
        files.locale_file(locales_dir, source_language),
        files.locale_file(locales_dir, target_language),
    )


def recreate_file(
    source_path: Path,
    output_path: Path,
    target_language: str,
    recreator: TreeRecreator,
    incremental: bool = False,
    indent: Optional[int] = 2,
    dry_run: bool = False,
) -> FileRecreation:
    """
    Translate source_path into output_path.

    Args:
        source_path: Source locale file.
        output_path: Destination; only written on full success.
        target_language: Target language code.
        recreator: Configured TreeRecreator.
        incremental: Reuse strings already present in output_path.
        indent: JSON indentation of the written file.
        dry_run: Translate but don't write.

    Raises:
        InputReadFailure, TranslationFailure, RecreationCancelled,
        OutputWriteFailure (with the translated tree attached).
    """
    source_path = Path(source_path)
    output_path = Path(output_path)
    if source_path.resolve() == output_path.resolve():
        raise ConfigError(
            f"Refusing to overwrite the source file {source_path}",
            code="same_path",
            details={"path": str(source_path)},
        )

    target_language = resolve_target_language(target_language)
    source_tree = files.load_tree(source_path)
    existing = files.load_existing_tree(output_path) if incremental else None

    logger.info(f"Recreating {source_path} -> {output_path} ({target_language})")
    result = recreator.recreate_with_stats(source_tree, target_language, existing=existing)

    if dry_run:
        logger.info("Dry run: destination not written")
        return FileRecreation(source_path, output_path, target_language, result.stats, written=False)

    files.write_tree(output_path, result.tree, indent=indent)
    logger.info(f"Wrote {output_path}")
    return FileRecreation(source_path, output_path, target_language, result.stats, written=True)


def retry_write(failure: OutputWriteFailure, path: Optional[Path] = None, indent: Optional[int] = 2) -> Path:
    """Write the tree carried by an OutputWriteFailure again, without re-translating."""
    destination = Path(path) if path else Path(failure.path)
    return files.write_tree(destination, failure.tree, indent=indent)


def build_recreator(translator, config: Dict[str, Any], **overrides: Any) -> TreeRecreator:
    """TreeRecreator from config with CLI/API overrides applied."""
    return TreeRecreator.from_config(translator, config, **overrides)


def output_indent(config: Dict[str, Any]) -> Optional[int]:
    return get_translation_settings(config).get('indent', 2)
