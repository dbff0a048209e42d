import re
import warnings

import numpy as np

from lightfits.util import CARD_LENGTH, _is_int, _is_float, _str_to_num
from lightfits.verify import InvalidOperationError


__all__ = ['Card', 'COMMENTARY_KEYWORDS']


COMMENTARY_KEYWORDS = ('COMMENT', 'HISTORY')

KEYWORD_LENGTH = 8
VALUE_LENGTH = 20
STRING_LENGTH = 68     # longest string content that fits between the quotes
COMMENTARY_LENGTH = 72


class Card(object):
    """
    A single 80 character header record: a keyword, a value and an optional
    comment.

    Commentary cards (``COMMENT`` and ``HISTORY``) have no value indicator;
    their free text is held in ``value``.
    """

    length = CARD_LENGTH

    # The value field is either a quoted string, in which a doubled quote
    # stands for a literal quote, or anything up to the first slash
    _value_comment_re = re.compile(
        r" *(?P<valu>'(?:[^']|'')*'?|[^/]*?)"
        r" *(?:/ *(?P<comm>.*?))? *$")

    def __init__(self, keyword='', value=None, comment=None):
        self.keyword = keyword
        self.value = value
        self.comment = comment

    def __repr__(self):
        return repr((self.keyword, self.value, self.comment))

    def __str__(self):
        return self.image

    def _getkeyword(self):
        return self._keyword

    def _setkeyword(self, keyword):
        keyword = keyword.strip().upper()
        if len(keyword) > KEYWORD_LENGTH:
            raise InvalidOperationError(
                'Keyword %r is longer than %d characters.' %
                (keyword, KEYWORD_LENGTH))
        self._keyword = keyword
    keyword = property(_getkeyword, _setkeyword)

    @property
    def is_commentary(self):
        return self._keyword in COMMENTARY_KEYWORDS

    @property
    def image(self):
        """The card formatted as an 80 character record."""

        keyword = self._keyword.ljust(KEYWORD_LENGTH)

        if self._keyword == 'END':
            return _pad(keyword)

        if self.is_commentary:
            text = self.value or ''
            return _pad(keyword + text[:COMMENTARY_LENGTH])

        output = keyword + '= ' + _format_value(self.value)
        if self.comment:
            output += ' / ' + self.comment
        return _pad(output)

    @classmethod
    def fromstring(cls, image):
        """
        Construct a `Card` from an 80 character record.  Values are converted
        to the matching Python type: `str`, `bool`, `int`, `float` or `None`
        for an empty value field.
        """

        keyword = image[:KEYWORD_LENGTH].strip()

        if keyword.upper() in COMMENTARY_KEYWORDS:
            return cls(keyword, image[KEYWORD_LENGTH:].rstrip())

        valuetext, comment = _split_value_comment(image)
        return cls(keyword, _parse_value(valuetext), comment)


def _split_value_comment(image):
    """
    Splits the part of a card after the keyword into its value text and
    comment.  The value follows the first ``=``, or column 9 when there is
    no value indicator.
    """

    eq = image.find('=', KEYWORD_LENGTH)
    if eq >= 0:
        rest = image[eq + 1:]
    else:
        rest = image[KEYWORD_LENGTH:]

    match = Card._value_comment_re.match(rest)
    valuetext = match.group('valu').strip()
    comment = match.group('comm')
    if comment is not None:
        comment = comment.strip()
    return valuetext, comment


def _parse_value(text):
    """Converts the text of a card's value field to a typed value."""

    if text == '':
        return None

    if text.startswith("'"):
        end = text.rfind("'")
        if end > 0:
            text = text[1:end]
        else:
            text = text[1:]
        return text.replace("''", "'")

    if text in ('T', 'F'):
        return text == 'T'

    numtext = text.replace('D', 'E').replace('d', 'E')
    try:
        return _str_to_num(numtext)
    except ValueError:
        warnings.warn('Card value %r could not be parsed; it is kept as a '
                      'string.' % text)
        return text


def _format_value(value):
    """
    Converts a card value to its 20 character representation in the value
    field.
    """

    # must be before int checking since bool is also int
    if isinstance(value, (bool, np.bool_)):
        return ('T' if value else 'F').rjust(VALUE_LENGTH)

    elif _is_int(value):
        return str(int(value))[:VALUE_LENGTH].rjust(VALUE_LENGTH)

    elif _is_float(value):
        return _format_float(value).rjust(VALUE_LENGTH)

    elif isinstance(value, str):
        val_str = value.replace("'", "''")
        if len(val_str) > STRING_LENGTH:
            val_str = val_str[:STRING_LENGTH]
            # don't leave half of an escaped quote behind
            if (len(val_str) - len(val_str.rstrip("'"))) % 2:
                val_str = val_str[:-1]
        return ("'%s'" % val_str).ljust(VALUE_LENGTH)

    elif value is None:
        return ' ' * VALUE_LENGTH

    raise InvalidOperationError('Illegal value type for a card: %s' %
                                type(value).__name__)


def _format_float(value):
    """Format a floating point number in exponential notation."""

    return ('%.6E' % value)[:VALUE_LENGTH]


def _pad(input):
    """Pad blank space to the input string or truncate it to 80 columns."""

    _len = len(input)
    if _len >= Card.length:
        return input[:Card.length]
    return input + ' ' * (Card.length - _len)
