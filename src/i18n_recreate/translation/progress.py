"""
Recreation progress and result data classes.
"""

from dataclasses import dataclass, field, asdict
from typing import Any, Dict, Optional


@dataclass
class RecreationProgress:
    """Progress information for an ongoing recreation."""
    target_language: str
    target_language_name: str
    current_item: int
    total_items: int
    current_pointer: str
    current_text: str
    translated_count: int = 0
    reused_count: int = 0
    skipped_count: int = 0
    phase: str = "translating"       # "translating", "completed"
    estimated_time_remaining: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class RecreationStats:
    """Counters for one recreation pass."""
    total_strings: int = 0           # String leaves in the source tree
    translated: int = 0              # Leaves filled from a translator result
    reused: int = 0                  # Leaves taken from an existing translation
    skipped: int = 0                 # Empty, whitespace-only or variable-only leaves
    translator_calls: int = 0        # translate/translate_batch invocations
    elapsed_seconds: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class RecreationResult:
    tree: Any
    stats: RecreationStats = field(default_factory=RecreationStats)
