"""
i18n-recreate

Recreates a JSON resource tree (typically a locale file) in another
language, translating every string leaf while keeping structure, key order
and non-string values unchanged.
"""

__version__ = "0.1.0"
