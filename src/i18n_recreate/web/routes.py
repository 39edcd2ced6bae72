"""Recreation API routes."""

from __future__ import annotations

from typing import Any, Dict, Tuple

from flask import Blueprint, current_app, jsonify, request

from i18n_recreate import language_codes as lc
from i18n_recreate.exceptions import ConfigError, RecreationCancelled, TranslationFailure
from i18n_recreate.logger import get_logger
from i18n_recreate.translation import TreeRecreator
from i18n_recreate.workflow import resolve_target_language
from i18n_recreate.web.tasks import cancel_job, create_recreation_job, get_job, serialize_job

api_bp = Blueprint("api", __name__)
logger = get_logger(__name__)

_INT_OPTIONS = ("max_concurrent_requests", "batch_size")


class RequestError(Exception):
    def __init__(self, message: str, code: str = "invalid_request"):
        super().__init__(message)
        self.code = code


def _parse_request() -> Dict[str, Any]:
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise RequestError("Request body must be a JSON object")

    tree = data.get("tree")
    if not isinstance(tree, (dict, list)):
        raise RequestError("'tree' must be a JSON object or array", code="invalid_tree")

    target_language = data.get("target_language")
    if not isinstance(target_language, str) or not target_language.strip():
        raise RequestError("'target_language' is required", code="invalid_language")

    provider = data.get("provider") or None
    if provider is not None and not isinstance(provider, str):
        raise RequestError("'provider' must be a string", code="invalid_provider")

    existing = data.get("existing")
    if existing is not None and not isinstance(existing, (dict, list)):
        raise RequestError("'existing' must be a JSON object or array", code="invalid_existing")

    options: Dict[str, Any] = {}
    for name in _INT_OPTIONS:
        if data.get(name) is not None:
            try:
                options[name] = int(data[name])
            except (TypeError, ValueError):
                raise RequestError(f"'{name}' must be an integer", code="invalid_option")
    if data.get("deduplicate") is not None:
        options["deduplicate"] = bool(data["deduplicate"])

    if options.get("max_concurrent_requests", 1) < 1 or options.get("batch_size", 0) < 0:
        raise RequestError("max_concurrent_requests must be >= 1 and batch_size >= 0", code="invalid_option")

    return {
        "tree": tree,
        "target_language": resolve_target_language(target_language),
        "provider": provider,
        "existing": existing,
        "options": options,
    }


def _make_recreator(provider, options: Dict[str, Any], **hooks) -> TreeRecreator:
    config = current_app.config["RECREATE_CONFIG"]
    translator = current_app.config["TRANSLATOR_FACTORY"](config, provider)
    return TreeRecreator.from_config(translator, config, **options, **hooks)


def _error(message: str, code: str, status: int, details: Dict[str, Any] = None) -> Tuple[Any, int]:
    payload = {"error": message, "code": code}
    if details:
        payload["details"] = details
    return jsonify(payload), status


@api_bp.get("/languages")
def list_languages():
    """Known language codes and display names."""
    languages = [
        {"code": code, "name": name}
        for code, name in sorted(lc.get_all_language_codes().items())
    ]
    return jsonify({"languages": languages})


@api_bp.post("/recreate")
def recreate_tree():
    """Translate a tree synchronously and return the recreated tree."""
    try:
        parsed = _parse_request()
        recreator = _make_recreator(parsed["provider"], parsed["options"])
    except RequestError as e:
        return _error(str(e), e.code, 400)
    except ConfigError as e:
        logger.warning("Translator configuration invalid: %s", e)
        return _error(str(e), e.code or "config_error", 400, e.details)

    try:
        result = recreator.recreate_with_stats(
            parsed["tree"], parsed["target_language"], existing=parsed["existing"]
        )
    except TranslationFailure as e:
        logger.warning("Recreation failed: %s", e)
        return _error(str(e), e.code, 502, e.details)
    except RecreationCancelled as e:
        return _error(str(e), e.code, 409, e.details)
    finally:
        if hasattr(recreator.translator, "close"):
            recreator.translator.close()

    return jsonify({
        "tree": result.tree,
        "target_language": parsed["target_language"],
        "stats": result.stats.to_dict(),
    })


@api_bp.post("/jobs")
def start_job():
    """Start a background recreation job."""
    try:
        parsed = _parse_request()
        config = current_app.config["RECREATE_CONFIG"]
        factory = current_app.config["TRANSLATOR_FACTORY"]
        # Build once up front so configuration errors surface as 400 here
        check = factory(config, parsed["provider"])
        if hasattr(check, "close"):
            check.close()
    except RequestError as e:
        return _error(str(e), e.code, 400)
    except ConfigError as e:
        logger.warning("Translator configuration invalid: %s", e)
        return _error(str(e), e.code or "config_error", 400, e.details)

    def make_recreator(**hooks) -> TreeRecreator:
        translator = factory(config, parsed["provider"])
        return TreeRecreator.from_config(translator, config, **parsed["options"], **hooks)

    job = create_recreation_job(
        parsed["tree"],
        parsed["target_language"],
        parsed["provider"] or config.get("translator", "google"),
        make_recreator,
        existing=parsed["existing"],
    )
    return jsonify({"job": serialize_job(job)}), 202


@api_bp.get("/jobs/<job_id>")
def job_status(job_id: str):
    job = get_job(job_id)
    if not job:
        return _error("Job not found", "job_not_found", 404)
    return jsonify({"job": serialize_job(job)})


@api_bp.post("/jobs/<job_id>/cancel")
def cancel(job_id: str):
    if not get_job(job_id):
        return _error("Job not found", "job_not_found", 404)
    if not cancel_job(job_id):
        return _error("Job already finished", "job_finished", 409)
    return jsonify({"job": serialize_job(get_job(job_id))})
