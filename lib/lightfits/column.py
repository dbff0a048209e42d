import re

import numpy as np

from lightfits.verify import (FormatError, MissingFieldError,
                              UnsupportedFormatError)


__all__ = ['Column']


# mapping from TFORM data type to numpy data type (code)
# A: Character
# I: 16-bit Integer
# E: Single-precision Floating Point
# D: Double-precision Floating Point
FITS2NUMPY = {'A': 'S', 'I': 'i2', 'E': 'f4', 'D': 'f8'}

# TFORM regular expression
TFORMAT_RE = re.compile(r'(?P<repeat>^[0-9]*)(?P<dtype>[A-Za-z])'
                        r'(?P<option>[!-~]*)')


def _parse_tformat(tform):
    """Parse the ``TFORM`` value into `repeat`, `dtype`, and `option`."""

    match = TFORMAT_RE.match(str(tform).strip())
    if match is None:
        raise UnsupportedFormatError('Format %r is not recognized.' % tform)
    repeat, dtype, option = match.groups()

    dtype = dtype.upper()
    if dtype not in FITS2NUMPY:
        raise UnsupportedFormatError('Unsupported TFORM type code %r in %r.' %
                                     (dtype, tform))

    if repeat == '':
        repeat = 1
    else:
        repeat = int(repeat)

    return (repeat, dtype, option)


class Column(object):
    """
    Column definition of a binary table: a name and a ``TFORM`` format such
    as ``'5A'`` (five characters) or ``'1E'`` (one float32).
    """

    def __init__(self, name, format):
        self.name = name
        self.format = format
        self.repeat, self.code, _ = _parse_tformat(format)

    def __repr__(self):
        return 'Column(name=%r, format=%r)' % (self.name, self.format)

    @property
    def dtype(self):
        """The big-endian numpy dtype of one field of a row."""

        if self.code == 'A':
            return np.dtype('S%d' % self.repeat)
        base = np.dtype(FITS2NUMPY[self.code]).newbyteorder('>')
        if self.repeat == 1:
            return base
        return np.dtype((base, (self.repeat,)))

    @property
    def width(self):
        """The number of bytes the column takes in a row."""

        return self.dtype.itemsize

    def decode(self, value):
        """Converts a field read from a row to its Python value."""

        if self.code == 'A':
            return bytes(value).replace(b'\0', b'').decode('latin-1').strip()
        if self.repeat == 1:
            return value.item()
        return np.asarray(value).astype(np.dtype(FITS2NUMPY[self.code]))

    def encode(self, value):
        """
        Converts a Python value to what is stored in the field.  Missing or
        unconvertible values become an empty string or zero.
        """

        if self.code == 'A':
            if value is None:
                value = ''
            return str(value)[:self.repeat].ljust(self.repeat).encode(
                'latin-1')

        if self.repeat == 1:
            number = _to_number(value)
            if self.code == 'I':
                return int(_wrap_int16(number))
            return number

        values = np.zeros(self.repeat, dtype=np.float64)
        if value is not None:
            try:
                items = np.asarray(value, dtype=np.float64).ravel()
            except (TypeError, ValueError):
                items = values
            count = min(len(items), self.repeat)
            values[:count] = items[:count]
        if self.code == 'I':
            return _wrap_int16(values)
        return values


def _to_number(value):
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0
    if np.isnan(number) or np.isinf(number):
        return number
    if number == int(number):
        return int(number)
    return number


def _wrap_int16(values):
    """
    Truncates values to integers and wraps them into the int16 range, the
    way a 16-bit store of the low bits would.  Non-finite values become 0.
    """

    values = np.trunc(np.nan_to_num(np.asarray(values, dtype=np.float64),
                                    nan=0.0, posinf=0.0, neginf=0.0))
    return (np.mod(values + 32768, 65536) - 32768).astype(np.int16)


def _columns_from_header(header):
    """
    Builds the `Column` list described by the ``TFIELDS``, ``TFORMn`` and
    ``TTYPEn`` keywords of a table header.
    """

    columns = []
    for idx in range(1, header.get('TFIELDS', 0) + 1):
        tform = header.get('TFORM%d' % idx)
        if tform is None:
            raise MissingFieldError('TFORM%d keyword is required to read '
                                    'the table.' % idx)
        name = header.get('TTYPE%d' % idx)
        if name is None:
            name = 'COL%d' % idx
        else:
            name = str(name).strip()
        columns.append(Column(name, tform))
    return columns


def _row_dtype(columns, width):
    """
    The numpy record dtype of a table row: one field per column, packed left
    to right, in a record of ``width`` bytes.
    """

    offsets = []
    offset = 0
    for column in columns:
        offsets.append(offset)
        offset += column.width

    if offset > width:
        raise FormatError('Table row width NAXIS1 = %d is smaller than the '
                          '%d bytes its columns need.' % (width, offset))

    return np.dtype({'names': ['f%d' % idx for idx in range(len(columns))],
                     'formats': [column.dtype for column in columns],
                     'offsets': offsets,
                     'itemsize': width})
