# Error taxonomy shared by the loader, translator and CLI shell.
from typing import Optional


class ConversionError(Exception):
    """Base class for every failure raised while converting a report."""


class LoadError(ConversionError):
    """The input document could not be turned into a ViolationReport."""


class ParseError(LoadError):
    """Input is not well-formed UTF-8 JSON."""


class SchemaError(LoadError):
    """Well-formed JSON that does not match the report schema."""

    def __init__(self, message: str, field: Optional[str] = None, index: Optional[int] = None):
        self.message = message
        self.field = field
        self.index = index
        super().__init__(str(self))

    @property
    def location(self) -> str:
        if self.index is None:
            return self.field or "<document>"
        if self.field is None:
            return f"violations[{self.index}]"
        return f"violations[{self.index}].{self.field}"

    def __str__(self) -> str:
        return f"{self.location}: {self.message}"


class TranslateError(ConversionError):
    """The report could not be mapped to SARIF."""


class MappingError(TranslateError):
    def __init__(self, severity: object):
        self.severity = severity
        super().__init__(f"severity {severity!r} has no SARIF level (expected 1..5)")


class ConfigError(ConversionError):
    """Settings file missing, unreadable or invalid."""


class ProvenanceError(ConversionError):
    """Git metadata could not be discovered or parsed."""
