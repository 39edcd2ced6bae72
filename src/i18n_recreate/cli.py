"""
Command line entry point.

Recreates a locale file in another language, keeping the original JSON
structure and key order. Only string values are translated; numbers,
booleans and null are copied as-is.
"""

import argparse
import sys
import tempfile
from pathlib import Path
from typing import List, Optional

from i18n_recreate import __version__
from i18n_recreate.config import create_default_config, load_config
from i18n_recreate.exceptions import (
    ConfigError,
    InputReadFailure,
    OutputWriteFailure,
    RecreationCancelled,
    TranslationFailure,
)
from i18n_recreate.logger import get_logger, set_log_mode
from i18n_recreate.translators import create_translator
from i18n_recreate.workflow import (
    build_recreator,
    locale_paths,
    output_indent,
    recreate_file,
    resolve_target_language,
    retry_write,
)

logger = get_logger(__name__)

EXIT_OK = 0
EXIT_INPUT_ERROR = 1
EXIT_TRANSLATION_ERROR = 2
EXIT_WRITE_ERROR = 3
EXIT_CANCELLED = 130


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="i18n-recreate",
        description="Recreate a JSON translation file in another language, preserving structure and key order",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # assets/i18n/en.json -> assets/i18n/de.json
  i18n-recreate -s en -t de

  # Explicit files, four requests in flight
  i18n-recreate -t pl --source locales/en.json --output locales/pl.json --concurrency 4

  # Only translate keys missing from an existing target file
  i18n-recreate -s en -t fr --incremental
"""
    )

    parser.add_argument("--version", action="version", version=f"i18n-recreate {__version__}")
    parser.add_argument("-s", "--source-lang", help="Source language code (locates <locales>/<code>.json)")
    parser.add_argument("-t", "--target-lang", help="Target language code, e.g. de, pl, pt-BR")
    parser.add_argument("--source", type=Path, help="Source file path (overrides the locale directory lookup)")
    parser.add_argument("--output", "-o", type=Path, help="Destination file path")
    parser.add_argument("--root", "-r", type=Path, default=Path("."), help="Project root (default: current directory)")
    parser.add_argument("--provider", "-p", help="Translator provider: google, openai, echo or a custom config section")
    parser.add_argument("--api-key", "-k", help="Provider API key (otherwise from config or environment)")
    parser.add_argument("--config", "-c", help="Path to config.json")
    parser.add_argument("--concurrency", type=int, help="Maximum concurrent translation requests")
    parser.add_argument("--batch-size", type=int, help="Strings per provider request (0 = one request per string)")
    parser.add_argument("--dedupe", action="store_true", help="Translate each distinct string only once")
    parser.add_argument("--incremental", action="store_true", help="Reuse strings already present in the destination file")
    parser.add_argument("--indent", type=int, help="JSON indentation of the output file")
    parser.add_argument("--dry-run", action="store_true", help="Walk the file with the echo translator and write nothing")
    parser.add_argument("--verbose", "-v", action="store_true", help="Log progress")
    parser.add_argument("--debug", "-d", action="store_true", help="Enable debug logging")
    parser.add_argument("--init-config", action="store_true", help="Write a default config file and exit")
    return parser


def _resolve_paths(args, target_language: str):
    if args.source:
        source_path = args.source
        output_path = args.output or source_path.with_name(f"{target_language}.json")
        return source_path, output_path

    if not args.source_lang:
        raise ConfigError("Either --source-lang or --source is required", code="missing_source")

    source_path, output_path = locale_paths(args.root, args.source_lang, target_language)
    return source_path, args.output or output_path


def _recover_write(failure: OutputWriteFailure, indent) -> Optional[Path]:
    """Save the translated tree somewhere writable so the translation isn't lost."""
    fallback = Path(tempfile.gettempdir()) / Path(failure.path).name
    try:
        return retry_write(failure, fallback, indent=indent)
    except OutputWriteFailure as e:
        logger.error(f"Fallback write failed: {e}")
        return None


def run(args) -> int:
    if args.init_config:
        path = create_default_config(args.config)
        print(f"Created {path}")
        return EXIT_OK

    if not args.target_lang:
        print("error: --target-lang is required", file=sys.stderr)
        return EXIT_INPUT_ERROR

    config = load_config(args.config)
    provider = "echo" if args.dry_run else (args.provider or config.get('translator', 'google'))
    if args.api_key and provider != "echo":
        config.setdefault(provider, {})['api_key'] = args.api_key

    target_language = resolve_target_language(args.target_lang)
    source_path, output_path = _resolve_paths(args, target_language)
    indent = args.indent if args.indent is not None else output_indent(config)

    translator = create_translator(config, provider, source_language=args.source_lang)
    recreator = build_recreator(
        translator,
        config,
        max_concurrent_requests=args.concurrency,
        batch_size=args.batch_size,
        deduplicate=True if args.dedupe else None,
    )

    with translator:
        outcome = recreate_file(
            source_path,
            output_path,
            target_language,
            recreator,
            incremental=args.incremental,
            indent=indent,
            dry_run=args.dry_run,
        )

    stats = outcome.stats
    summary = (
        f"{stats.total_strings} strings: {stats.translated} translated, "
        f"{stats.reused} reused, {stats.skipped} skipped ({stats.elapsed_seconds:.1f}s)"
    )
    get_usage = getattr(translator, "get_total_token_usage", None)
    if get_usage is not None:
        usage = get_usage()
        summary += f", {usage['prompt_tokens']} prompt + {usage['completion_tokens']} completion tokens"
    if outcome.written:
        print(f"Wrote {outcome.output_path} - {summary}")
    else:
        print(f"Dry run, nothing written - {summary}")
    return EXIT_OK


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.debug:
        set_log_mode('debug')
    elif args.verbose:
        set_log_mode('info')

    try:
        return run(args)
    except (ConfigError, InputReadFailure) as e:
        print(f"error: {e}", file=sys.stderr)
        return EXIT_INPUT_ERROR
    except TranslationFailure as e:
        print(f"error: {e}", file=sys.stderr)
        print("No output was written.", file=sys.stderr)
        return EXIT_TRANSLATION_ERROR
    except OutputWriteFailure as e:
        print(f"error: {e}", file=sys.stderr)
        recovered = _recover_write(e, args.indent if args.indent is not None else 2)
        if recovered:
            print(f"The translated file was saved to {recovered} instead.", file=sys.stderr)
        return EXIT_WRITE_ERROR
    except (RecreationCancelled, KeyboardInterrupt):
        print("Cancelled, no output was written.", file=sys.stderr)
        return EXIT_CANCELLED


if __name__ == "__main__":
    sys.exit(main())
