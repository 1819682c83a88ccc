from collections.abc import Callable, Mapping
from dataclasses import dataclass, field, replace
from typing import Any

from typing_extensions import Self

from json_kv.codec import DocumentCodec, FunctionCodec, JSONCodec

DEFAULT_INDENT = 4

# Option names accepted by `StoreOptions.from_mapping`, including camelCase spellings such as `syncOnWrite`.
OPTION_ALIASES: dict[str, str] = {
    "async_write": "async_write",
    "asyncWrite": "async_write",
    "sync_on_write": "sync_on_write",
    "syncOnWrite": "sync_on_write",
    "indent": "indent",
    "indent_size": "indent",
    "indentSize": "indent",
    "json_spaces": "indent",
    "jsonSpaces": "indent",
    "codec": "codec",
    "serialize": "serialize",
    "stringify": "serialize",
    "deserialize": "deserialize",
    "parse": "deserialize",
}


@dataclass(frozen=True, kw_only=True)
class StoreOptions:
    """Immutable configuration of a `JSONStore`.

    Attributes:
        async_write: Dispatch the write of `sync` to the background instead of blocking.
        sync_on_write: Call `sync` after every mutation. When False, nothing is persisted until
            `sync` is called explicitly.
        indent: Indentation width passed to the codec. `None` asks for compact output; the default
            codec also writes `0` compactly, while a custom serializer receives `0` as-is.
        codec: The serialize/deserialize strategy.
    """

    async_write: bool = False
    sync_on_write: bool = True
    indent: int | None = DEFAULT_INDENT
    codec: DocumentCodec = field(default_factory=JSONCodec)

    def __post_init__(self) -> None:
        if self.indent is not None and (isinstance(self.indent, bool) or not isinstance(self.indent, int) or self.indent < 0):
            msg = f"indent must be a non-negative integer or None, got {self.indent!r}"
            raise ValueError(msg)

        if not isinstance(self.codec, DocumentCodec):
            msg = f"codec must be a DocumentCodec, got {type(self.codec).__name__}"
            raise TypeError(msg)

    def merge(self, **overrides: Any) -> Self:
        """Return a copy with the given options replaced, accepting the same names as `from_mapping`."""
        if not overrides:
            return self

        return replace(self, **_normalize(options=overrides))

    @classmethod
    def from_mapping(cls, options: Mapping[str, Any] | None = None, /, **overrides: Any) -> Self:
        """Build options from a mapping merged over the defaults.

        Unspecified options keep their defaults. `serialize`/`stringify` and `deserialize`/`parse`
        build a `FunctionCodec`; when only one of the pair is given the other falls back to the JSON
        codec.

        Raises:
            ValueError: If an option name is not recognized.
        """
        merged: dict[str, Any] = {**(options or {}), **overrides}

        return cls(**_normalize(options=merged))


def _normalize(options: Mapping[str, Any]) -> dict[str, Any]:
    normalized: dict[str, Any] = {}

    for name, value in options.items():
        if name not in OPTION_ALIASES:
            msg = f"Unknown store option: {name!r}"
            raise ValueError(msg)
        normalized[OPTION_ALIASES[name]] = value

    serialize: Callable[..., str] | None = normalized.pop("serialize", None)
    deserialize: Callable[[str], Any] | None = normalized.pop("deserialize", None)

    if serialize is not None or deserialize is not None:
        if "codec" in normalized:
            msg = "Pass either a codec or serialize/deserialize functions, not both"
            raise ValueError(msg)
        default_codec = JSONCodec()
        normalized["codec"] = FunctionCodec(
            serialize=serialize or default_codec.dumps,
            deserialize=deserialize or default_codec.loads,
        )

    return normalized


def resolve_options(options: StoreOptions | Mapping[str, Any] | None, overrides: Mapping[str, Any]) -> StoreOptions:
    """Resolve the `options` argument and keyword overrides of `JSONStore` into one `StoreOptions`."""
    if options is None:
        return StoreOptions.from_mapping(overrides)

    if isinstance(options, StoreOptions):
        return options.merge(**overrides)

    if isinstance(options, Mapping):
        return StoreOptions.from_mapping(options, **overrides)

    msg = f"options must be StoreOptions or a mapping, got {type(options).__name__}"
    raise TypeError(msg)
