"""
Variable Placeholder Protection

Interpolation variables such as {name}, ${count}, %s or {{item}} must reach
the translated file untouched. Before a string is sent to the translator
they are swapped for __VAR_n__ tokens and restored afterwards.
"""

import re
from typing import Dict, List, Set, Tuple

from i18n_recreate.logger import get_logger

logger = get_logger(__name__)

_PLACEHOLDER_ONLY = re.compile(r'^(?:\s|__VAR_\d+__)*$')


def extract_variables(text: str, variable_patterns: List[str]) -> Set[str]:
    """
    Extract all variables from text using configured patterns.

    Invalid patterns are skipped.
    """
    variables = set()
    for pattern in variable_patterns:
        try:
            variables.update(re.findall(pattern, text))
        except re.error:
            continue
    return variables


def replace_variables_with_placeholders(
    text: str,
    variable_patterns: List[str],
    preserve_variables: bool = True,
) -> Tuple[str, Dict[str, str]]:
    """
    Replace variables in text with placeholders.

    Args:
        text: The text containing variables to replace
        variable_patterns: List of regex patterns to match variables
        preserve_variables: Whether to preserve variables (if False, returns unchanged)

    Returns:
        Tuple of (text_with_placeholders, placeholder_map)
        where placeholder_map is {"__VAR_0__": "{original_var}", ...}
    """
    if not preserve_variables or not variable_patterns:
        return text, {}

    protected_text = text
    placeholder_map = {}
    placeholder_index = 0

    # Longest patterns first so ${x} wins over {x}
    sorted_patterns = sorted(variable_patterns, key=len, reverse=True)

    for pattern in sorted_patterns:
        try:
            matches = list(re.finditer(pattern, protected_text))
        except re.error:
            logger.warning(f"Ignoring invalid variable pattern: {pattern}")
            continue
        # Replace from end to start to preserve positions
        for match in reversed(matches):
            placeholder = f"__VAR_{placeholder_index}__"
            placeholder_map[placeholder] = match.group(0)
            start, end = match.span()
            protected_text = protected_text[:start] + placeholder + protected_text[end:]
            placeholder_index += 1

    if placeholder_map:
        logger.debug(f"Replaced {len(placeholder_map)} variables with placeholders: {text[:50]} -> {protected_text[:50]}")

    return protected_text, placeholder_map


def restore_variables_from_placeholders(text: str, placeholder_map: Dict[str, str]) -> str:
    """
    Restore original variables from placeholders after translation.

    Placeholders are restored in reverse creation order because a later
    placeholder may have been matched inside an earlier variable's text.
    """
    if not placeholder_map:
        return text

    restored_text = text
    for placeholder, original_var in reversed(list(placeholder_map.items())):
        restored_text = restored_text.replace(placeholder, original_var)
    return restored_text


def missing_placeholders(protected_text: str, translated: str, placeholder_map: Dict[str, str]) -> List[str]:
    """Original variables whose placeholder was sent but did not come back."""
    return [
        var for placeholder, var in placeholder_map.items()
        if placeholder in protected_text and placeholder not in translated
    ]


def is_placeholder_only(protected_text: str) -> bool:
    """True if nothing but placeholders and whitespace is left to translate."""
    return bool(_PLACEHOLDER_ONLY.match(protected_text))
