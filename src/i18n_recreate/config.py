import copy
import json
import os
from pathlib import Path
from typing import Any, Dict, Optional

from dotenv import find_dotenv, load_dotenv

from i18n_recreate.exceptions import ConfigError
from i18n_recreate.logger import get_logger

logger = get_logger(__name__)

DEFAULT_SYSTEM_MESSAGE = (
    "You are a professional translator for software localization files. "
    "Return only the translated text."
)

# Provider configuration constants
BUILTIN_PROVIDERS = ["google", "openai", "echo"]

BUILTIN_PROVIDER_DISPLAY_NAMES = {
    "google": "Google Translate",
    "openai": "OpenAI",
    "echo": "Echo (no translation)",
}

# Credentials are supplied out-of-band through these variables
PROVIDER_API_KEY_ENV = {
    "google": "GOOGLE_TRANSLATE_API_KEY",
    "openai": "OPENAI_API_KEY",
}

PROVIDER_DEFAULTS = {
    "max_retries": 3,
    "timeout": 120
}

API_KEY_PLACEHOLDER = "YOUR_API_KEY_HERE"

# Google Translate v2 accepts at most 128 `q` segments per request
GOOGLE_MAX_BATCH_SIZE = 128

CONFIG_ENV = "I18N_RECREATE_CONFIG"
CONFIG_DIR = Path.cwd() / "config"
CONFIG_FILE = CONFIG_DIR / "config.json"

DEFAULT_PROMPTS = {
    "single_translation_prompt": {
        "version": "1.0",
        "description": "Prompt for translating a single resource string",
        "prompt": """Translate the following text into {target_language_name} ({target_language_code}).

CRITICAL REQUIREMENTS:
- Preserve ALL placeholders EXACTLY as they appear (__VAR_0__, __VAR_1__, {{name}}, %s, ...)
- Maintain the original tone, punctuation and capitalization style
- Do not add quotes, explanations or markdown

Text:
{text}"""
    }
}

# Default configuration template
DEFAULT_CONFIG = {
    "translator": "google",
    "google": {
        "api_key": API_KEY_PLACEHOLDER,
        "api_url": "https://translation.googleapis.com/language/translate/v2",
        "max_retries": 3,
        "timeout": 60
    },
    "openai": {
        "api_key": API_KEY_PLACEHOLDER,
        "model": "gpt-4o-mini",
        "max_retries": 3,
        "timeout": 120,
        "api_url": "https://api.openai.com/v1/chat/completions"
    },
    "translation": {
        "max_concurrent_requests": 1,
        "batch_size": 0,
        "deduplicate": False,
        "preserve_variables": True,
        "variable_patterns": [
            r"\{[^}]+\}",
            r"\$\{[^}]+\}",
            r"%[sd]",
            r"{{[^}]+}}"
        ],
        "indent": 2
    },
    "log_mode": "off"
}


def resolve_config_path(path: Optional[str] = None) -> Path:
    """Explicit path, then $I18N_RECREATE_CONFIG, then ./config/config.json."""
    if path:
        return Path(path)
    env_path = os.environ.get(CONFIG_ENV)
    if env_path:
        return Path(env_path)
    return CONFIG_FILE


def create_default_config(path: Optional[str] = None) -> Path:
    """Write the default config.json file and return its path."""
    config_file = resolve_config_path(path)
    config_file.parent.mkdir(parents=True, exist_ok=True)
    with open(config_file, 'w', encoding='utf-8') as f:
        json.dump(DEFAULT_CONFIG, f, indent=4, ensure_ascii=False)
    logger.info(f"Created default config file: {config_file}")
    return config_file


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def _apply_env_credentials(config: Dict[str, Any]) -> None:
    # A .env file in the working directory (or a parent) fills in variables
    # that are not already set in the environment
    dotenv_path = find_dotenv(usecwd=True)
    if dotenv_path:
        load_dotenv(dotenv_path)
        logger.debug(f"Loaded environment from {dotenv_path}")

    for provider, env_name in PROVIDER_API_KEY_ENV.items():
        value = os.environ.get(env_name)
        if value:
            config.setdefault(provider, {})['api_key'] = value


def load_config(path: Optional[str] = None) -> Dict[str, Any]:
    """
    Load configuration from the config file merged over the defaults.

    A missing file yields the defaults. Provider credentials found in the
    environment (or a .env file) override whatever the file says.

    Raises:
        ConfigError: If the file exists but is not a JSON object.
    """
    config_file = resolve_config_path(path)
    config = copy.deepcopy(DEFAULT_CONFIG)

    if config_file.exists():
        try:
            with open(config_file, 'r', encoding='utf-8') as f:
                file_config = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise ConfigError(
                f"Failed to read config file {config_file}: {e}",
                code="config_invalid",
                details={"path": str(config_file)},
            )
        if not isinstance(file_config, dict):
            raise ConfigError(
                f"Config file {config_file} must contain a JSON object",
                code="config_invalid",
                details={"path": str(config_file)},
            )
        config = _deep_merge(config, file_config)
        logger.debug(f"Configuration loaded from {config_file}")
    else:
        logger.debug(f"No config file at {config_file}, using defaults")

    _apply_env_credentials(config)
    return config


def get_prompt(prompt_name: str = "single_translation_prompt") -> Dict[str, Any]:
    """Get a specific prompt by name."""
    return DEFAULT_PROMPTS.get(prompt_name, DEFAULT_PROMPTS["single_translation_prompt"])


def get_translation_settings(config: Dict[str, Any]) -> Dict[str, Any]:
    """Translation section of the config with defaults filled in."""
    settings = copy.deepcopy(DEFAULT_CONFIG['translation'])
    settings.update(config.get('translation', {}))
    return settings


def validate_translator_config(config: Dict[str, Any], provider_override: Optional[str] = None) -> str:
    """
    Validate that the translator provider is properly set up.

    Args:
        config: Loaded configuration.
        provider_override: Optional provider to validate instead of the default.

    Returns:
        The provider name that was validated.

    Raises:
        ConfigError: If configuration is invalid or missing, with code and details.
    """
    provider = provider_override if provider_override else config.get('translator', 'google')

    if provider == 'echo':
        return provider

    provider_config = config.get(provider)
    if not isinstance(provider_config, dict) or not provider_config:
        raise ConfigError(
            f"Translator provider '{provider}' configuration not found",
            code="translator_config_missing",
            details={"provider": provider}
        )

    provider_display = BUILTIN_PROVIDER_DISPLAY_NAMES.get(provider, provider.replace('-', ' ').title())

    api_key = provider_config.get('api_key', '')
    if not api_key or api_key == API_KEY_PLACEHOLDER:
        env_hint = PROVIDER_API_KEY_ENV.get(provider)
        hint = f" or set {env_hint}" if env_hint else ""
        raise ConfigError(
            f"{provider_display} API key not configured. Add it to the config file{hint}.",
            code="translator_config_missing",
            details={"provider": provider, "missing_field": "api_key"}
        )

    # Everything that isn't Google talks the OpenAI-compatible protocol
    if provider != 'google':
        if not provider_config.get('api_url'):
            raise ConfigError(
                f"{provider_display} API URL not configured",
                code="translator_config_missing",
                details={"provider": provider, "missing_field": "api_url"}
            )
        if not provider_config.get('model'):
            raise ConfigError(
                f"{provider_display} model not configured",
                code="translator_config_missing",
                details={"provider": provider, "missing_field": "model"}
            )

    return provider
