"""Format errors raised while decoding a filter payload."""


class FilterFormatError(RuntimeError):
    """Raised when a filter payload cannot be decoded."""
    pass


class MalformedJsonError(FilterFormatError):
    """Payload is not a JSON object, or `m` / `h` / `c` / `b` / `counts` / `hm` is missing or mis-typed."""
    pass


class InvalidBase64Error(FilterFormatError):
    """The plain-filter body `b` is not valid base64."""
    pass


class InvalidCountEntryError(FilterFormatError):
    """A `counts` entry has a non-integer key or value, or is out of range."""
    pass


class BodyLengthError(FilterFormatError):
    """The decoded bit array has set bits beyond the declared size."""
    pass
