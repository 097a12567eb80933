"""Exception types raised by json2json."""


class Json2JsonError(Exception):
    """Base class for errors raised by json2json itself."""


class DereferenceError(TypeError):
    """A required field was read from an absent value.

    The message mirrors the diagnostic JavaScript hosts produce for the same
    situation, so callers matching on it keep working.
    """

    def __init__(self, field: str) -> None:
        self.field = field
        super().__init__(f"Cannot read property '{field}' of undefined")


class TemplateError(Json2JsonError, TypeError):
    """A template could not be compiled."""


class ConfigError(Json2JsonError):
    """Error in json2json configuration."""
