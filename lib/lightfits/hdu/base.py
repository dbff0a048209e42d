import logging

from lightfits.header import Header
from lightfits.util import (CARD_LENGTH, _block_span, decode_ascii,
                            itersubclasses)
from lightfits.verify import (FormatError, MissingFieldError,
                              _check_first_keyword)


log = logging.getLogger(__name__)


def _hdu_class_from_header(cls, header):
    """
    Used primarily by _BaseHDU.fromstring to find an appropriate HDU class to
    use based on values in the header.

    The class hierarchy is traversed in a depth-last order.  Each
    match_header() should identify an HDU type as uniquely as possible.
    Abstract types may raise NotImplementedError to be skipped.
    """

    klass = cls  # By default, if no subclasses are defined
    if header:
        for c in reversed(list(itersubclasses(cls))):
            try:
                if c.match_header(header):
                    klass = c
                    break
            except NotImplementedError:
                continue

    return klass


class _BaseHDU(object):
    """
    Base class for all HDU (header data unit) classes.
    """

    is_primary = False

    def __init__(self, data=None, header=None):
        self._header = header
        self._hdrLoc = None
        self._datLoc = None
        self._datSpan = None
        self.data = data

    def _getheader(self):
        return self._header

    def _setheader(self, value):
        self._header = value
    header = property(_getheader, _setheader)

    @classmethod
    def match_header(cls, header):
        raise NotImplementedError

    @property
    def ext_type(self):
        """
        The structural kind of an extension, such as ``'IMAGE'`` or
        ``'BINTABLE'``; `None` for the primary HDU.
        """

        xtension = self._header.get('XTENSION')
        if xtension is None:
            return None
        return str(xtension).rstrip()

    @property
    def name(self):
        return self._header.get('EXTNAME', '')

    @property
    def shape(self):
        """The dimensions declared by the header, recomputed on each access."""

        raise NotImplementedError

    @property
    def width(self):
        return self._header.get('NAXIS1')

    @property
    def height(self):
        return self._header.get('NAXIS2')

    def get_data(self):
        """The data arranged for display; see the subclasses."""

        return self.data

    def size(self):
        """
        Size (in bytes) of the data portion of the HDU, as declared by the
        header.
        """

        naxis = self._header.get('NAXIS', 0)
        if not naxis:
            return 0

        bitpix = self._header.get('BITPIX')
        if bitpix is None:
            raise MissingFieldError('BITPIX keyword is required to compute '
                                    'the size of the data.')

        size = 1
        for idx in range(naxis):
            size = size * self._header.get('NAXIS' + str(idx + 1), 1)
        gcount = self._header.get('GCOUNT', 1)
        pcount = self._header.get('PCOUNT', 0)
        return abs(bitpix) * gcount * (pcount + size) // 8

    @classmethod
    def fromstring(cls, data, offset=0, scale_image_data=False):
        """
        Creates a new HDU object of the appropriate type from a byte string
        containing a FITS stream.

        Parameters
        ----------
        data : bytes
            The FITS stream.

        offset : int, optional
            The offset at which the HDU's header begins.  An HDU at offset 0
            must be a primary HDU (beginning with ``SIMPLE``); one anywhere
            else must be an extension (beginning with ``XTENSION``).

        scale_image_data : bool, optional
            If `True`, image data is scaled with its ``BSCALE``/``BZERO``
            keywords when read.
        """

        from lightfits import core

        hdrend = offset
        while True:
            image = data[hdrend:hdrend + CARD_LENGTH]
            if len(image) < CARD_LENGTH:
                raise FormatError('Header starting at byte %d is missing '
                                  'its END card.' % offset)
            hdrend += CARD_LENGTH
            if decode_ascii(image[:8]).strip() == 'END':
                break

        # every record read counts toward the header length, END included
        hdrlen = _block_span(hdrend - offset)
        header = Header.fromstring(data[offset:hdrend])

        if offset == 0:
            _check_first_keyword(header, 'SIMPLE')
        else:
            _check_first_keyword(header, 'XTENSION')
            if core.EXTEND_EXTENSION_HEADERS:
                header.set('EXTEND', True)

        cls = _hdu_class_from_header(cls, header)
        hdu = cls(header=header)

        size = hdu.size()
        hdu._hdrLoc = offset                 # beginning of the header area
        hdu._datLoc = offset + hdrlen        # beginning of the data area
        hdu._datSpan = _block_span(size)     # data area size, with padding

        if size > 0:
            raw = data[hdu._datLoc:hdu._datLoc + size]
            if len(raw) < size:
                raise FormatError(
                    'Data of HDU at byte %d is truncated: expected %d bytes, '
                    'found %d.' % (offset, size, len(raw)))
            hdu.data = hdu._decode_data(raw, scale_image_data)

        log.debug('Read %s at byte %d: %d header bytes, %d data bytes',
                  cls.__name__, offset, hdrlen, size)
        return hdu

    def _decode_data(self, raw, scale_image_data=False):
        raise NotImplementedError

    def _encode_data(self):
        raise NotImplementedError

    def _verify_shape(self):
        """
        Called before the HDU is written to reconcile its header with its
        data.
        """

        pass

    def _summary(self):
        return '%-10s  %-11s  %5d  %-12s' % (
            self.name, self.__class__.__name__, len(self._header),
            tuple(self.shape))
