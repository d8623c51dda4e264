"""Exceptions raised while reading JSON into tables."""


class JsonTableError(Exception):
    """Base class for all read errors."""
    pass


class MalformedInputError(JsonTableError):
    """Input cannot be interpreted as a record list (bad JSON, scalar records, pointer miss)."""
    pass


class StructuralShapeError(MalformedInputError):
    """Records disagree on shape: array vs object, positional arity, or nesting depth."""
    pass


class SourceIOError(JsonTableError, OSError):
    """Reading from the underlying source failed. The original error is the __cause__."""
    pass


class UnsupportedOverrideError(JsonTableError):
    """A column type override cannot represent the column's structural kind."""
    pass
