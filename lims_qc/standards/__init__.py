"""
Quality Standards Package

Reference envelopes (min, max, optimal range) per experiment stage.
"""

from .tables import (
    STANDARDS_PATH,
    STANDARDS,
    NUCLEIC_EXTRACTION_STANDARDS,
    PCR_AMPLIFICATION_STANDARDS,
    LIBRARY_CONSTRUCTION_STANDARDS,
    load_standards,
    get_standards,
    find_standard,
)

__all__ = [
    "STANDARDS_PATH",
    "STANDARDS",
    "NUCLEIC_EXTRACTION_STANDARDS",
    "PCR_AMPLIFICATION_STANDARDS",
    "LIBRARY_CONSTRUCTION_STANDARDS",
    "load_standards",
    "get_standards",
    "find_standard",
]
