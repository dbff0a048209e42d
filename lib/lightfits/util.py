import numpy as np


BLOCK_SIZE = 2880  # the FITS block size
CARD_LENGTH = 80
CARDS_PER_BLOCK = BLOCK_SIZE // CARD_LENGTH


def itersubclasses(cls, _seen=None):
    """
    Generator over all subclasses of a given class, in depth first order.

    >>> class A(object): pass
    >>> class B(A): pass
    >>> class C(A): pass
    >>> [c.__name__ for c in itersubclasses(A)]
    ['B', 'C']
    """

    if not isinstance(cls, type):
        raise TypeError('itersubclasses must be called with '
                        'new-style classes, not %.100r' % cls)
    if _seen is None:
        _seen = set()
    for sub in cls.__subclasses__():
        if sub not in _seen:
            _seen.add(sub)
            yield sub
            for sub in itersubclasses(sub, _seen):
                yield sub


def encode_ascii(s):
    """Encodes header text to the bytes written to a FITS stream."""

    if isinstance(s, str):
        return s.encode('latin-1')
    return s


def decode_ascii(s):
    """Decodes bytes read from a FITS stream to header text."""

    if isinstance(s, (bytes, bytearray, memoryview)):
        return bytes(s).decode('latin-1')
    return s


def _is_int(val):
    return isinstance(val, (int, np.integer)) and \
        not isinstance(val, (bool, np.bool_))


def _is_float(val):
    return isinstance(val, (float, np.floating))


def _str_to_num(val):
    """Converts a given string to either an int or a float if necessary."""

    if '.' in val or 'e' in val or 'E' in val:
        return float(val)
    try:
        num = int(val)
    except ValueError:
        # If this fails then an exception should be raised anyways
        num = float(val)
    return num


def _pad_length(stringlen):
    """Bytes needed to pad the input stringlen to the next FITS block."""

    return (BLOCK_SIZE - (stringlen % BLOCK_SIZE)) % BLOCK_SIZE


def _block_span(stringlen):
    """Length of stringlen bytes once padded out to whole FITS blocks."""

    return stringlen + _pad_length(stringlen)
