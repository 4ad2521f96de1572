from typing import Optional


class TranslationError(Exception):
    """Base class for translation errors."""
    pass


class SwiftParseError(TranslationError):
    """Raised when the source text is not valid input for the parser."""
    def __init__(self, message: str, line: Optional[int] = None, column: Optional[int] = None,
                 source_line: str = ""):
        self.message = message
        self.line = line
        self.column = column
        self.source_line = source_line
        location = f" (line {line}, column {column})" if line is not None else ""
        super().__init__(f"Parse error: {message}{location}")


class ResourceError(TranslationError):
    """Raised when a file or other environment resource cannot be used."""
    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Cannot access {path}: {reason}")


class UnsupportedConstructError(TranslationError):
    """Raised under the 'reject' policy for constructs Kotlin has no equivalent for."""
    def __init__(self, construct: str, text: str = ""):
        self.construct = construct
        self.text = text
        super().__init__(f"Unsupported construct: {construct}" + (f" ({text})" if text else ""))


class ConfigError(TranslationError):
    """Raised when a configuration file or value is invalid."""
    pass
