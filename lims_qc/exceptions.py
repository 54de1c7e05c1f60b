"""
Exceptions raised by the quality control package.

Validation findings are never raised; they are returned as ValidationResult
objects. These exceptions cover configuration mistakes only.
"""


class UnknownExperimentTypeError(ValueError):
    """Raised when an experiment type has no rule set."""

    def __init__(self, experiment_type):
        self.experiment_type = experiment_type
        super().__init__(
            f"Unknown experiment type: {experiment_type!r} "
            f"(expected nucleic_extraction, pcr_amplification or library_construction)"
        )


class RuleConfigurationError(ValueError):
    """Raised when a rule or standards YAML document is malformed."""
