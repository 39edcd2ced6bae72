"""
Translation module - structure-preserving tree translation

This module provides:
- TreeRecreator: rebuilds a resource tree with translated string leaves
- RecreationProgress / RecreationStats / RecreationResult data classes
- Tree helpers (value kinds, JSON pointers, leaf iteration)
- Variable placeholder protection
"""

from i18n_recreate.translation.progress import RecreationProgress, RecreationResult, RecreationStats
from i18n_recreate.translation.recreator import TreeRecreator
from i18n_recreate.translation.tree import (
    ValueKind,
    kind_of,
    iter_string_leaves,
    join_pointer,
    resolve_pointer,
    same_shape,
)
from i18n_recreate.translation.placeholders import (
    extract_variables,
    replace_variables_with_placeholders,
    restore_variables_from_placeholders,
)
