"""Exceptions raised while reading or writing FITS data."""


class FitsError(Exception):
    """Base class for every error raised by lightfits."""


class FormatError(FitsError):
    """
    The byte stream is not a well formed FITS stream: a header does not
    start with the required keyword, or the stream ends early.
    """


class MissingFieldError(FitsError):
    """A keyword required to interpret the data is absent from the header."""


class UnsupportedFormatError(FitsError):
    """A BITPIX value, TFORM code or array type that cannot be handled."""


class InvalidOperationError(FitsError):
    """Misuse of the header API, such as setting a commentary keyword."""


class StructureError(FitsError):
    """The HDU list would violate the primary/extension ordering rules."""


def _check_first_keyword(header, keyword):
    """
    Raises `FormatError` unless the first card of ``header`` has the given
    keyword.
    """

    keys = header.keys()
    if not keys or keys[0] != keyword:
        raise FormatError('missing %s' % keyword)
