from .converters import (
    TypeCodec,
    codec,
    codec_for,
    string_codec,
    bool_codec,
    numeric_codec,
    temporal_codec,
    json_codec,
    DEFAULT_STRING_CODEC,
    DEFAULT_BOOL_CODEC,
    DEFAULT_JSON_CODEC,
)
