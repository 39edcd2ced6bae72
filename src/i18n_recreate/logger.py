import logging
import os
from pathlib import Path

LOG_DIR = Path(os.environ.get("I18N_RECREATE_LOG_DIR", Path.cwd() / "logs"))
LOG_FILE = LOG_DIR / "app.log"

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
LOG_MODES = ('off', 'info', 'debug')

# Cache for log mode to avoid repeated config reads
_log_mode_cache = None
# Explicit override (e.g. from the --debug flag), wins over the config file
_log_mode_override = None


def _get_log_mode():
    """Get log mode from override or configuration."""
    global _log_mode_cache
    if _log_mode_override is not None:
        return _log_mode_override
    if _log_mode_cache is not None:
        return _log_mode_cache

    try:
        from i18n_recreate.config import load_config
        log_mode = load_config().get('log_mode', 'off')
    except Exception:
        # Config not importable yet (circular import) or unreadable
        return 'off'
    _log_mode_cache = log_mode if log_mode in LOG_MODES else 'off'
    # Loggers created while config was still importing were left at 'off'
    for name in list(_configured):
        _apply_mode(logging.getLogger(name), _log_mode_cache)
    return _log_mode_cache


def _levels_for(log_mode):
    """Return (logger_level, console_level) for a log mode."""
    if log_mode == 'debug':
        return logging.DEBUG, logging.DEBUG
    if log_mode == 'off':
        # Higher than CRITICAL disables everything
        return logging.CRITICAL + 1, logging.CRITICAL + 1
    return logging.INFO, logging.INFO


def _file_handler():
    LOG_DIR.mkdir(parents=True, exist_ok=True)
    f_handler = logging.FileHandler(LOG_FILE, encoding='utf-8')
    f_handler.setLevel(logging.DEBUG)
    f_handler.setFormatter(logging.Formatter(LOG_FORMAT))
    return f_handler


def _apply_mode(logger, log_mode):
    """Bring an already configured logger in line with the log mode."""
    logger_level, console_level = _levels_for(log_mode)
    logger.setLevel(logger_level)

    has_file_handler = any(isinstance(h, logging.FileHandler) for h in logger.handlers)
    has_console_handler = any(
        isinstance(h, logging.StreamHandler) and not isinstance(h, logging.FileHandler)
        for h in logger.handlers
    )

    if log_mode != 'off' and not has_file_handler:
        logger.addHandler(_file_handler())
    elif log_mode == 'off' and has_file_handler:
        for handler in [h for h in logger.handlers if isinstance(h, logging.FileHandler)]:
            handler.close()
            logger.removeHandler(handler)

    if log_mode != 'off' and not has_console_handler:
        c_handler = logging.StreamHandler()
        c_handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(c_handler)

    for handler in logger.handlers:
        if isinstance(handler, logging.StreamHandler) and not isinstance(handler, logging.FileHandler):
            handler.setLevel(console_level)


_configured = set()


def set_log_mode(log_mode):
    """Override the configured log mode and update all loggers created here."""
    global _log_mode_override
    if log_mode not in LOG_MODES:
        raise ValueError(f"Unknown log mode: {log_mode}")
    _log_mode_override = log_mode
    for name in list(_configured):
        _apply_mode(logging.getLogger(name), log_mode)


def get_logger(name: str) -> logging.Logger:
    logger = logging.getLogger(name)
    _configured.add(name)
    _apply_mode(logger, _get_log_mode())
    return logger
