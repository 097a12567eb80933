"""Configuration of the reserved tokens recognised in paths and templates."""

from dataclasses import dataclass, fields

from ._errors import ConfigError

_FORBIDDEN_ROOT_CHARS = (".", "[", "]")


@dataclass(slots=True, frozen=True)
class Json2JsonConfig:
    """Reserved tokens recognised by the path parser and template compiler.

    Attributes:
        root_token: Leading path segment that switches resolution to the root document.
        path_key: Object-template key holding the scope-narrowing path.
        formatting_key: Object-template key holding the formatting function.

    """

    root_token: str = "$root"
    path_key: str = "$path"
    formatting_key: str = "$formatting"

    def __post_init__(self) -> None:
        for f in fields(self):
            value = getattr(self, f.name)
            if not isinstance(value, str) or not value:
                msg = f"Invalid {f.name}: expected non-empty string, got {value!r}"
                raise ConfigError(msg)
        if self.path_key == self.formatting_key:
            msg = f"path_key and formatting_key must differ. Got: {self.path_key!r}"
            raise ConfigError(msg)
        if any(c in self.root_token for c in _FORBIDDEN_ROOT_CHARS):
            msg = f"root_token must not contain '.', '[' or ']'. Got: {self.root_token!r}"
            raise ConfigError(msg)


DEFAULT_CONFIG = Json2JsonConfig()
