"""Exception types raised by the take-home calculators."""


class ValidationError(ValueError):
    """Input that the calculators cannot evaluate (negative income, duplicate streams, ...)."""


class NegativeBusinessIncomeError(ValidationError):
    """Business income below zero. Losses are not carried into other income."""


class UnsupportedConfigurationError(ValueError):
    """A well-formed input the engine deliberately does not model."""
