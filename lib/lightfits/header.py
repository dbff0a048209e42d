import collections
import copy

from lightfits.card import Card, COMMENTARY_KEYWORDS
from lightfits.util import CARD_LENGTH, CARDS_PER_BLOCK, decode_ascii
from lightfits.verify import InvalidOperationError


__all__ = ['Header']


def _normalize_key(key):
    """Keywords are matched case-insensitively, ignoring blank padding."""

    return key.strip().upper()


class Header(object):
    """
    FITS header class.  This class exposes both a dict-like interface and a
    list-like interface to FITS headers.

    The header may contain any number of ``COMMENT`` and ``HISTORY`` cards,
    added with `add_comment` and `add_history`; every other keyword appears
    at most once.  Cards are kept, and written, in the order they were added.
    """

    def __init__(self, cards=[]):
        """
        Construct a `Header` from an iterable of `Card` objects or of
        ``(keyword, value, comment)`` tuples.
        """

        self.clear()
        for card in cards:
            if not isinstance(card, Card):
                card = Card(*card)
            if card.is_commentary:
                self.append(card)
            else:
                self.set(card.keyword, card.value, card.comment)

    def __len__(self):
        return len(self._cards)

    def __iter__(self):
        for card in self._cards:
            yield card.keyword

    def __contains__(self, keyword):
        return _normalize_key(keyword) in self._keyword_indices

    def __getitem__(self, key):
        if isinstance(key, int):
            return self._cards[key].value

        keyword = _normalize_key(key)
        if keyword not in self._keyword_indices:
            raise KeyError("Keyword %r not found." % key)
        if keyword in COMMENTARY_KEYWORDS:
            return self._commentary(keyword)
        return self._cards[self._keyword_indices[keyword][0]].value

    def __setitem__(self, key, value):
        if isinstance(value, tuple):
            if len(value) != 2:
                raise ValueError(
                    'A Header item may be set with either a scalar value or '
                    'a 2-tuple containing a value and a comment string.')
            value, comment = value
        else:
            comment = None
        self.set(key, value, comment)

    def __delitem__(self, key):
        if _normalize_key(key) not in self._keyword_indices:
            raise KeyError("Keyword %r not found." % key)
        self.remove(key)

    def __repr__(self):
        return '\n'.join(repr(card) for card in self._cards)

    def __str__(self):
        return self.tostring()

    @property
    def cards(self):
        """The `Card` objects in this header, in order."""

        return list(self._cards)

    @classmethod
    def fromstring(cls, data):
        """
        Creates a `Header` from header text: a sequence of 80 character
        records, optionally terminated by an ``END`` record.

        Blank records and commentary cards with no text are dropped.
        """

        data = decode_ascii(data)
        header = cls()
        for idx in range(0, len(data), CARD_LENGTH):
            image = data[idx:idx + CARD_LENGTH]
            keyword = image[:8].strip().upper()
            if keyword == 'END':
                break
            header._append_image(image)
        return header

    def _append_image(self, image):
        """Interprets one card image and adds it to this header."""

        card = Card.fromstring(image)
        if not card.keyword:
            return
        if card.is_commentary:
            if card.value:
                self.append(card)
            return
        self.set(card.keyword, card.value, card.comment)

    def tostring(self):
        """The header records joined into a single string."""

        return ''.join(self.torecords())

    def torecords(self):
        """
        Returns the header as a list of 80 character records: one per card,
        then the ``END`` record, then blank records until the length is a
        whole number of 2880 byte blocks.
        """

        records = [card.image for card in self._cards]
        records.append(Card('END').image)
        blank = ' ' * CARD_LENGTH
        while len(records) % CARDS_PER_BLOCK:
            records.append(blank)
        return records

    def clear(self):
        """Remove all cards from the header."""

        self._cards = []
        self._keyword_indices = collections.defaultdict(list)

    def copy(self):
        """Make a copy of the `Header`."""

        return self.__class__(copy.copy(card) for card in self._cards)

    def get(self, key, default=None):
        """
        Get a keyword value from the header; returns ``default`` if the
        keyword is not present.  The ``END`` keyword is never present.
        """

        try:
            return self[key]
        except KeyError:
            return default

    def set(self, key, value=None, comment=None):
        """
        Set the value, and optionally the comment, of a keyword.

        An existing keyword keeps its position in the header and only has its
        comment replaced when a new one is given; a new keyword is added at
        the end.  Commentary keywords must be added with `add_comment` and
        `add_history`.
        """

        keyword = _normalize_key(key)
        if keyword in COMMENTARY_KEYWORDS:
            raise InvalidOperationError(
                'Use add_comment/add_history to add %s cards.' % keyword)
        if keyword == 'END':
            raise InvalidOperationError(
                'The END card is added when the header is written.')

        if keyword in self._keyword_indices:
            card = self._cards[self._keyword_indices[keyword][0]]
            card.value = value
            if comment is not None:
                card.comment = comment
        else:
            self.append(Card(keyword, value, comment))

    def append(self, card):
        """Appends a `Card` to the end of the header."""

        if not card.is_commentary and card.keyword in self._keyword_indices:
            raise InvalidOperationError('Keyword %r is already in the header.'
                                        % card.keyword)
        self._cards.append(card)
        self._keyword_indices[card.keyword].append(len(self._cards) - 1)

    def insert(self, idx, card):
        """Inserts a `Card` before the card at index ``idx``."""

        if not card.is_commentary and card.keyword in self._keyword_indices:
            raise InvalidOperationError('Keyword %r is already in the header.'
                                        % card.keyword)
        self._cards.insert(idx, card)
        self._updateindices()

    def add_comment(self, value):
        """Add a ``COMMENT`` card to the end of the header."""

        self.append(Card('COMMENT', value))

    def add_history(self, value):
        """Add a ``HISTORY`` card to the end of the header."""

        self.append(Card('HISTORY', value))

    def get_comment(self):
        """The text of all the ``COMMENT`` cards, in order."""

        return self._commentary('COMMENT')

    def get_history(self):
        """The text of all the ``HISTORY`` cards, in order."""

        return self._commentary('HISTORY')

    def _commentary(self, keyword):
        return [self._cards[idx].value
                for idx in self._keyword_indices.get(keyword, [])]

    def comment_of(self, key):
        """The comment of a keyword, or `None` if it has none."""

        keyword = _normalize_key(key)
        if keyword not in self._keyword_indices:
            raise KeyError("Keyword %r not found." % key)
        return self._cards[self._keyword_indices[keyword][0]].comment

    def remove(self, key):
        """
        Removes every card with the given keyword.  Does nothing if the
        keyword is not in the header.
        """

        keyword = _normalize_key(key)
        if keyword not in self._keyword_indices:
            return
        self._cards = [card for card in self._cards
                       if card.keyword != keyword]
        self._updateindices()

    def keys(self):
        """
        The keywords of all cards in order; commentary keywords appear once
        per card.
        """

        return [card.keyword for card in self._cards]

    def values(self):
        return [card.value for card in self._cards]

    def items(self):
        return [(card.keyword, card.value) for card in self._cards]

    def _updateindices(self):
        self._keyword_indices = collections.defaultdict(list)
        for idx, card in enumerate(self._cards):
            self._keyword_indices[card.keyword].append(idx)
