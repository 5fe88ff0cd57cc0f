"""Codec classes and functions. A codec converts an option value to its ini string
and back. Codecs are chosen by the type the caller declares, never by inspecting
the value."""

import json
from datetime import date, datetime, time
from decimal import Decimal
from typing import Any, Callable, Generic, TypeAlias, TypeVar, get_origin
from ..exceptions_warnings import TypeConversionError

ScalarTypes: TypeAlias = str | int | float | complex | bool | Decimal
"""Scalar types with a dedicated codec."""
TemporalTypes: TypeAlias = datetime | date | time
"""Date and time types with a dedicated (ISO 8601) codec."""


T = TypeVar("T")


class TypeCodec(Generic[T]):
    """Encodes values of one type to strings and decodes strings back.

    To create a codec, use the codec decorator on a decoding function.
    """

    def __init__(
        self, name: str, encoder: Callable[[T], str], decoder: Callable[[str], T]
    ) -> None:
        """
        Args:
            name (str): Name of the target type (used in error messages).
            encoder (Callable[[T], str]): Converts a value into its string.
            decoder (Callable[[str], T]): Converts a string into a value. Should raise
                ValueError (or TypeError) if that's impossible.
        """
        self.name = name
        self._encoder = encoder
        self._decoder = decoder

    def __repr__(self) -> str:
        return f"TypeCodec({self.name!r})"

    def encode(self, value: T | None) -> str:
        """Convert a value to its ini string. None becomes an empty string.

        Raises:
            TypeConversionError: If the value can't be converted.
        """
        if value is None:
            return ""
        try:
            return self._encoder(value)
        except (TypeError, ValueError) as e:
            raise TypeConversionError(value, self.name) from e

    def decode(self, string: str) -> T:
        """Convert an ini string to a value.

        Raises:
            TypeConversionError: If the string can't be converted.
        """
        try:
            return self._decoder(string)
        except (TypeError, ValueError, ArithmeticError) as e:
            raise TypeConversionError(string, self.name) from e


def codec(name: str, encoder: Callable[[T], str] = str) -> Callable[
    [Callable[[str], T]], TypeCodec[T]
]:
    """Create a new TypeCodec from a decoding function.

    Args:
        name (str): Name of the target type.
        encoder (Callable[[T], str], optional): Converts a value into its string.
            Defaults to str.

    Returns:
        Callable[[Callable[[str], T]], TypeCodec[T]]: Decorator turning the decoding
            function into the codec.
    """

    def wrapped(decoder: Callable[[str], T]) -> TypeCodec[T]:
        return TypeCodec(name, encoder, decoder)

    return wrapped


def string_codec(strip_whitespace: bool = False) -> TypeCodec[str]:
    """Create a new string codec.

    Args:
        strip_whitespace (bool, optional): Whether to strip leading and trailing
            whitespace when decoding. Defaults to False.
    """

    @codec("str")
    def to_string(string: str) -> str:
        return string.strip() if strip_whitespace else string

    return to_string


def bool_codec(
    true: str | tuple[str, ...] = ("1", "true", "yes", "y", "on"),
    false: str | tuple[str, ...] = ("0", "false", "no", "n", "off"),
) -> TypeCodec[bool]:
    """Create a new bool codec. Encodes as "true"/"false".

    Args:
        true (str | tuple[str, ...], optional): String(s) that should be regarded as
            True (case-insensitive). Defaults to ("1", "true", "yes", "y", "on").
        false (str | tuple[str, ...], optional): String(s) that should be regarded as
            False (case-insensitive). Defaults to ("0", "false", "no", "n", "off").

    Returns:
        TypeCodec[bool]: The bool codec.
    """

    if not isinstance(true, tuple):
        true = (true,)
    true = tuple(i.lower() for i in true)

    if not isinstance(false, tuple):
        false = (false,)
    false = tuple(i.lower() for i in false)

    def from_bool(value: bool) -> str:
        if not isinstance(value, bool):
            raise TypeError(f"{value!r} is no bool.")
        return "true" if value else "false"

    @codec("bool", from_bool)
    def to_bool(string: str) -> bool:
        string = string.lower().strip()
        if string in true:
            return True
        elif string in false:
            return False
        raise ValueError(f"{string!r} is no boolean.")

    return to_bool


Numerics: TypeAlias = int | float | complex | Decimal
"""Possible numeric conversion result types."""

NumericT = TypeVar("NumericT", bound=Numerics)
TemporalT = TypeVar("TemporalT", bound=TemporalTypes)


def numeric_codec(numeric_type: type[NumericT]) -> TypeCodec[NumericT]:
    """Create a new numeric codec. Conversion is locale-independent (decimal point,
    no thousands separators).

    Args:
        numeric_type (type[Numerics]): The type to convert to.

    Returns:
        TypeCodec[Numerics]: The numeric codec.
    """

    def from_num(value: NumericT) -> str:
        # ints are accepted by every numeric codec, nothing is silently truncated
        if isinstance(value, bool) or not isinstance(value, (numeric_type, int)):
            raise TypeError(f"{value!r} is no {numeric_type.__name__}.")
        return str(numeric_type(value))

    @codec(numeric_type.__name__, from_num)
    def to_num(string: str) -> NumericT:
        return numeric_type(string.strip().replace(" ", ""))

    return to_num


def temporal_codec(temporal_type: type[TemporalT]) -> TypeCodec[TemporalT]:
    """Create a new ISO 8601 codec for datetime, date or time.

    Args:
        temporal_type (type[TemporalTypes]): The type to convert to.

    Returns:
        TypeCodec[TemporalTypes]: The codec.
    """

    def from_temporal(value: TemporalT) -> str:
        if not isinstance(value, temporal_type):
            raise TypeError(f"{value!r} is no {temporal_type.__name__}.")
        return value.isoformat()

    @codec(temporal_type.__name__, from_temporal)
    def to_temporal(string: str) -> TemporalT:
        return temporal_type.fromisoformat(string.strip())

    return to_temporal


def json_codec(name: str = "json") -> TypeCodec[Any]:
    """Create a new codec serializing any JSON-compatible value (lists, dicts, ...).

    Args:
        name (str, optional): Name of the target type. Defaults to "json".

    Returns:
        TypeCodec[Any]: The JSON codec.
    """

    def from_json(value: Any) -> str:
        return json.dumps(value, ensure_ascii=False)

    @codec(name, from_json)
    def to_json(string: str) -> Any:
        return json.loads(string)

    return to_json


def codec_for(type_hint: Any) -> TypeCodec:
    """Get the codec for a declared type.

    Args:
        type_hint (Any): A type (str, int, float, complex, bool, Decimal, datetime,
            date, time or anything JSON-compatible like list, dict or list[int]) or a
            TypeCodec, which is returned as is.

    Returns:
        TypeCodec: The matching codec. Types without dedicated codec get the JSON
            codec.
    """
    if isinstance(type_hint, TypeCodec):
        return type_hint
    if type_hint is str:
        return DEFAULT_STRING_CODEC
    if type_hint is bool:
        return DEFAULT_BOOL_CODEC
    if type_hint in {int, float, complex, Decimal}:
        return numeric_codec(type_hint)
    if type_hint in {datetime, date, time}:
        return temporal_codec(type_hint)

    origin = get_origin(type_hint) or type_hint
    return json_codec(getattr(origin, "__name__", str(type_hint)))


# default codecs
DEFAULT_STRING_CODEC = string_codec()
"""String codec, returns the raw ini string."""
DEFAULT_BOOL_CODEC = bool_codec()
"""Bool codec with default conversion parameters."""
DEFAULT_JSON_CODEC = json_codec()
"""Fallback codec for structured values."""
