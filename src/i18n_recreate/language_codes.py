"""
Language code table and helpers used to validate target languages and to
name locale files.

Standards:
- ISO 639-1: 2-letter language codes (de, pl, zh)
- BCP 47: Language + Region codes (pt-BR, zh-TW)

Locale files are named after the language code: 'de' -> 'de.json',
'zh-TW' -> 'zh-TW.json'.
"""

from typing import Dict, Optional

# ISO 639-1 language codes (2-letter)
# Source: https://en.wikipedia.org/wiki/List_of_ISO_639-1_codes
ISO_639_1 = {
    'af': 'Afrikaans',
    'am': 'Amharic',
    'ar': 'Arabic',
    'ay': 'Aymara',
    'az': 'Azerbaijani',
    'bg': 'Bulgarian',
    'bn': 'Bengali',
    'bo': 'Tibetan',
    'bs': 'Bosnian',
    'ca': 'Catalan',
    'cs': 'Czech',
    'cy': 'Welsh',
    'da': 'Danish',
    'de': 'German',
    'el': 'Greek',
    'en': 'English',
    'es': 'Spanish',
    'et': 'Estonian',
    'eu': 'Basque',
    'fa': 'Persian',
    'ff': 'Fulah',
    'fi': 'Finnish',
    'fr': 'French',
    'ga': 'Irish',
    'gl': 'Galician',
    'gn': 'Guarani',
    'gu': 'Gujarati',
    'ha': 'Hausa',
    'he': 'Hebrew',
    'hi': 'Hindi',
    'hr': 'Croatian',
    'hu': 'Hungarian',
    'hy': 'Armenian',
    'id': 'Indonesian',
    'ig': 'Igbo',
    'is': 'Icelandic',
    'it': 'Italian',
    'ja': 'Japanese',
    'ka': 'Georgian',
    'kk': 'Kazakh',
    'km': 'Khmer',
    'kn': 'Kannada',
    'ko': 'Korean',
    'ky': 'Kyrgyz',
    'lb': 'Luxembourgish',
    'lo': 'Lao',
    'lt': 'Lithuanian',
    'lv': 'Latvian',
    'mg': 'Malagasy',
    'mi': 'Maori',
    'mk': 'Macedonian',
    'ml': 'Malayalam',
    'mn': 'Mongolian',
    'mr': 'Marathi',
    'ms': 'Malay',
    'mt': 'Maltese',
    'my': 'Burmese',
    'ne': 'Nepali',
    'nl': 'Dutch',
    'no': 'Norwegian',
    'om': 'Oromo',
    'or': 'Odia',
    'pa': 'Punjabi',
    'pl': 'Polish',
    'pt': 'Portuguese',
    'qu': 'Quechua',
    'rn': 'Kirundi',
    'ro': 'Romanian',
    'ru': 'Russian',
    'rw': 'Kinyarwanda',
    'si': 'Sinhala',
    'sk': 'Slovak',
    'sl': 'Slovenian',
    'so': 'Somali',
    'sq': 'Albanian',
    'sr': 'Serbian',
    'ss': 'Swati',
    'st': 'Southern Sotho',
    'sv': 'Swedish',
    'sw': 'Swahili',
    'ta': 'Tamil',
    'te': 'Telugu',
    'tg': 'Tajik',
    'th': 'Thai',
    'tk': 'Turkmen',
    'tn': 'Tswana',
    'tr': 'Turkish',
    'ts': 'Tsonga',
    'uk': 'Ukrainian',
    'ur': 'Urdu',
    'uz': 'Uzbek',
    've': 'Venda',
    'vi': 'Vietnamese',
    'xh': 'Xhosa',
    'yo': 'Yoruba',
    'zh': 'Chinese',
    'zu': 'Zulu',
}

# BCP 47 language-region codes (common variants)
BCP_47_VARIANTS = {
    'en-US': 'English (United States)',
    'en-GB': 'English (United Kingdom)',
    'en-AU': 'English (Australia)',
    'en-CA': 'English (Canada)',

    'zh-CN': 'Chinese (Simplified, China)',
    'zh-TW': 'Chinese (Traditional, Taiwan)',
    'zh-HK': 'Chinese (Traditional, Hong Kong)',
    'zh-SG': 'Chinese (Simplified, Singapore)',

    'es-ES': 'Spanish (Spain)',
    'es-MX': 'Spanish (Mexico)',
    'es-AR': 'Spanish (Argentina)',
    'es-CO': 'Spanish (Colombia)',

    'pt-BR': 'Portuguese (Brazil)',
    'pt-PT': 'Portuguese (Portugal)',

    'fr-FR': 'French (France)',
    'fr-CA': 'French (Canada)',
    'fr-BE': 'French (Belgium)',
    'fr-CH': 'French (Switzerland)',

    'de-DE': 'German (Germany)',
    'de-AT': 'German (Austria)',
    'de-CH': 'German (Switzerland)',

    'ar-SA': 'Arabic (Saudi Arabia)',
    'ar-AE': 'Arabic (United Arab Emirates)',
    'ar-EG': 'Arabic (Egypt)',
}

# Combined mapping
ALL_LANGUAGE_CODES = {**ISO_639_1, **BCP_47_VARIANTS}

_LOWERCASE_INDEX = {code.lower(): code for code in ALL_LANGUAGE_CODES}


def normalize_language_code(code: str) -> Optional[str]:
    """
    Canonicalize spelling of a language code.

    Accepts underscores and any letter case ('pt_br', 'PT-br') and returns the
    canonical table spelling ('pt-BR'). Unknown region variants of a known
    base language are kept with the region upper-cased ('de-LU'). Returns
    None when the base language is unknown.

    Examples:
        >>> normalize_language_code('zh_tw')
        'zh-TW'
        >>> normalize_language_code('DE')
        'de'
        >>> normalize_language_code('xx') is None
        True
    """
    if not code or not isinstance(code, str):
        return None

    lowered = code.strip().lower().replace('_', '-')
    if lowered in _LOWERCASE_INDEX:
        return _LOWERCASE_INDEX[lowered]

    base, _, region = lowered.partition('-')
    if base in ISO_639_1 and region:
        return f"{base}-{region.upper()}"
    return None


def extract_base_language(code: str) -> str:
    """'zh-CN' -> 'zh', 'fr' -> 'fr'."""
    return code.replace('_', '-').split('-')[0].lower()


def get_language_name(code: str) -> Optional[str]:
    """
    Get the display name for a code, falling back to the base language.

    Examples:
        >>> get_language_name('pl')
        'Polish'
        >>> get_language_name('de-LU')
        'German'
    """
    normalized = normalize_language_code(code)
    if normalized is None:
        return None
    return ALL_LANGUAGE_CODES.get(normalized) or ISO_639_1.get(extract_base_language(normalized))


def get_language_file_name(language_code: str) -> str:
    """'de' -> 'de.json'."""
    return f"{language_code}.json"


def get_all_language_codes() -> Dict[str, str]:
    """Get all known language codes mapped to display names."""
    return ALL_LANGUAGE_CODES.copy()
