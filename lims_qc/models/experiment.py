"""
Experiment stages that carry their own rule set and standards table.
"""

from enum import Enum
from typing import Union

from ..exceptions import UnknownExperimentTypeError


class ExperimentType(str, Enum):
    """Experiment stages supported by the quality control engine."""

    NUCLEIC_EXTRACTION = "nucleic_extraction"
    PCR_AMPLIFICATION = "pcr_amplification"
    LIBRARY_CONSTRUCTION = "library_construction"

    @classmethod
    def parse(cls, value: Union[str, "ExperimentType"]) -> "ExperimentType":
        """
        Accept either the enum or its string value.

        Raises:
            UnknownExperimentTypeError: if the value names no experiment type
        """
        if isinstance(value, ExperimentType):
            return value
        try:
            return cls(value)
        except ValueError:
            raise UnknownExperimentTypeError(value) from None
