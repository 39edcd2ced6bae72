from i18n_recreate.config import DEFAULT_CONFIG
from i18n_recreate.translation.placeholders import (
    extract_variables,
    is_placeholder_only,
    missing_placeholders,
    replace_variables_with_placeholders,
    restore_variables_from_placeholders,
)

PATTERNS = DEFAULT_CONFIG["translation"]["variable_patterns"]


def test_extract_variables_skips_invalid_patterns():
    assert extract_variables("Hi {name}, %s", [r"\{[^}]+\}", "(", r"%[sd]"]) == {"{name}", "%s"}


def test_replace_and_restore():
    text = "Hello {name}, you have %d messages"

    protected, placeholders = replace_variables_with_placeholders(text, PATTERNS)

    assert "{name}" not in protected
    assert "%d" not in protected
    assert set(placeholders.values()) == {"{name}", "%d"}
    assert restore_variables_from_placeholders(protected, placeholders) == text


def test_dollar_variable_is_one_placeholder():
    protected, placeholders = replace_variables_with_placeholders("Total: ${count}", PATTERNS)

    assert protected == "Total: __VAR_0__"
    assert placeholders == {"__VAR_0__": "${count}"}


def test_double_braces_survive_round_trip():
    text = "Item {{item}} of {total}"

    protected, placeholders = replace_variables_with_placeholders(text, PATTERNS)

    assert "{" not in protected
    assert restore_variables_from_placeholders(protected, placeholders) == text
    assert missing_placeholders(protected, protected, placeholders) == []


def test_disabled_or_no_patterns_leave_text_alone():
    assert replace_variables_with_placeholders("Hi {name}", PATTERNS, preserve_variables=False) == ("Hi {name}", {})
    assert replace_variables_with_placeholders("Hi {name}", []) == ("Hi {name}", {})


def test_missing_placeholders():
    protected, placeholders = replace_variables_with_placeholders("{a} and {b}", [r"\{[^}]+\}"])
    kept_one = protected.replace("__VAR_0__", "")

    assert missing_placeholders(protected, kept_one, placeholders) == ["{b}"]
    assert missing_placeholders(protected, protected, placeholders) == []


def test_is_placeholder_only():
    assert is_placeholder_only("__VAR_0__")
    assert is_placeholder_only(" __VAR_0__ __VAR_1__ ")
    assert not is_placeholder_only("Hello __VAR_0__")
