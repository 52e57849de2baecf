"""Exception hierarchy shared by the data models and the checkers."""


class EngineEquivError(Exception):
    """Base class for every error raised by engine_equiv."""


class DecodeError(EngineEquivError, ValueError):
    """Raised when bytes cannot be decoded into a data model."""


class EncodeError(EngineEquivError, ValueError):
    """Raised when a data model cannot be written back to JSON."""


class SchemaError(EngineEquivError, TypeError):
    """A model field is missing its wire-name declaration.

    This is a bug in the model definition itself, not something the fuzz
    input can provoke, so checkers raise it immediately.
    """


class DivergenceError(EngineEquivError, AssertionError):
    """The two data models disagreed on some input."""

    def __init__(self, finding):
        self.finding = finding
        super().__init__(finding.describe())


class FieldMismatchError(EngineEquivError, AssertionError):
    """A decoded field does not match the untyped JSON it came from."""
