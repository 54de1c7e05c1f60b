"""
Rule Sets Package

YAML rule files, one per experiment type, and the loader that turns them
into ValidationRule objects.
"""

from .loader import (
    RULES_DIR,
    build_rule,
    load_rules,
    get_rules,
    get_nucleic_extraction_rules,
    get_pcr_amplification_rules,
    get_library_construction_rules,
    clear_rule_cache,
)

__all__ = [
    "RULES_DIR",
    "build_rule",
    "load_rules",
    "get_rules",
    "get_nucleic_extraction_rules",
    "get_pcr_amplification_rules",
    "get_library_construction_rules",
    "clear_rule_cache",
]
