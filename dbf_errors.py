"""
Exceptions raised by the dBase engine.

Every error derives from DBFError. Most also derive from the matching
builtin (ValueError, IndexError, KeyError, TypeError) so callers that
only know the builtin still catch them.
"""


class DBFError(Exception):
    """Base class for all dBase errors."""


class DBFFormatError(DBFError, ValueError):
    """The bytes are not a file (or field) this engine understands."""


class DBFInvalidSchemaError(DBFFormatError):
    """A field descriptor or schema cannot be represented."""


class DBFUnsupportedFormatError(DBFFormatError):
    """A recognised dialect that has no implementation here."""


class DBFConsistencyError(DBFError):
    """Stored header values disagree with the parsed schema."""


class DBFRangeError(DBFError, IndexError):
    """Record, field or stream offset out of bounds."""


class DBFFieldMissingError(DBFError, KeyError):
    """No field with the given name."""

    def __init__(self, field_name: str):
        DBFError.__init__(self, f"{field_name}: no such field")
        self.field_name = field_name

    def __str__(self) -> str:
        return f"{self.field_name}: no such field"


class DBFTypeMismatchError(DBFError, TypeError):
    """A value does not match the declared type of its field."""


class DBFDataOverflowError(DBFError, ValueError):
    """A value does not fit in the declared width of its field."""

    def __init__(self, message: str, data=None):
        DBFError.__init__(self, message)
        self.data = data


__all__ = [
    'DBFError', 'DBFFormatError', 'DBFInvalidSchemaError', 'DBFUnsupportedFormatError',
    'DBFConsistencyError', 'DBFRangeError', 'DBFFieldMissingError',
    'DBFTypeMismatchError', 'DBFDataOverflowError',
]
