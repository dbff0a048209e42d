import logging
import sys

import numpy as np

from lightfits.card import Card
from lightfits.file import _File
from lightfits.hdu.base import _BaseHDU
from lightfits.hdu.image import PrimaryHDU, _ImageBaseHDU
from lightfits.header import Header
from lightfits.util import CARD_LENGTH, _block_span, encode_ascii
from lightfits.verify import StructureError, UnsupportedFormatError


log = logging.getLogger(__name__)


def fitsopen(name, scale_image_data=False):
    """Factory function to open a FITS file and return an `HDUList` object.

    Parameters
    ----------
    name : file path, file object or file-like object
        File to be opened.  Gzip, zlib and zip compressed files are
        decompressed first.

    scale_image_data : bool, optional
        If `True`, image data is scaled using its ``BSCALE``/``BZERO``
        values when read.

    Returns
    -------
    hdulist : an `HDUList` object
        `HDUList` containing all of the header data units in the file.
    """

    log.info('Opening FITS file: %s', name)
    with _File(name, mode='readonly') as ffo:
        data = ffo.read()
    return HDUList.fromstring(data, scale_image_data=scale_image_data)


class HDUList(list):
    """
    HDU list class.  This is the top-level FITS object.  The first HDU is
    the primary HDU; every other HDU is an extension.
    """

    # type names accepted by `create`
    BITPIX_NAMES = {'uint8': 8, 'int16': 16, 'int32': 32, 'int64': 64,
                    'float32': -32, 'float64': -64}

    def __init__(self, hdus=[]):
        """
        Construct a `HDUList` object.

        Parameters
        ----------
        hdus : sequence of HDU objects or single HDU, optional
            The HDU object(s) to comprise the `HDUList`.  Should be
            instances of `_BaseHDU`.
        """

        super(HDUList, self).__init__()

        if isinstance(hdus, _BaseHDU):
            hdus = [hdus]

        for hdu in hdus:
            self.append(hdu)

    def __getitem__(self, key):
        """
        Get an HDU from the `HDUList`, indexed by number or name.
        """

        key = self.index_of(key)
        return super(HDUList, self).__getitem__(key)

    def __setitem__(self, key, hdu):
        """
        Set an HDU to the `HDUList`, indexed by number or name.
        """

        idx = self.index_of(key)
        if not isinstance(hdu, _BaseHDU):
            raise ValueError('%s is not an HDU.' % hdu)
        if hdu.is_primary != (idx == 0):
            raise StructureError('Only the first HDU may be a primary HDU.')
        super(HDUList, self).__setitem__(idx, hdu)

    @property
    def primary(self):
        """The primary HDU, or `None` for an empty list."""

        if not len(self):
            return None
        return super(HDUList, self).__getitem__(0)

    @classmethod
    def fromstring(cls, data, scale_image_data=False):
        """
        Creates an `HDUList` from a byte string containing a whole FITS
        stream.
        """

        if not isinstance(data, bytes):
            data = bytes(data)

        hdulist = cls()
        offset = 0
        while offset < len(data):
            # a blank record where a header should start is trailing padding
            if not data[offset:offset + CARD_LENGTH].strip(b'\0 '):
                break
            hdu = _BaseHDU.fromstring(data, offset,
                                      scale_image_data=scale_image_data)
            super(HDUList, hdulist).append(hdu)
            offset = hdu._datLoc + hdu._datSpan

        log.info('Read FITS stream with %d HDU(s).', len(hdulist))
        return hdulist

    @classmethod
    def create(cls, shape, bitpix):
        """
        Create a new `HDUList` holding a primary HDU of zeros.

        Parameters
        ----------
        shape : sequence of int
            The axis lengths, ``NAXIS1`` first.

        bitpix : int or str
            A ``BITPIX`` value, or one of ``'uint8'``, ``'int16'``,
            ``'int32'``, ``'int64'``, ``'float32'`` or ``'float64'``.
        """

        bitpix_value = cls.BITPIX_NAMES.get(bitpix, bitpix)
        if bitpix_value not in _ImageBaseHDU.NumCode:
            raise UnsupportedFormatError(
                'Unsupported data type for new FITS: %r' % (bitpix,))

        header = Header([
            Card('SIMPLE', True, 'file conforms to FITS standard'),
            Card('BITPIX', bitpix_value, 'bits per data value'),
            Card('NAXIS', len(shape), 'number of data axes')])
        for idx, axis in enumerate(shape):
            header.set('NAXIS%d' % (idx + 1), axis,
                       'length of data axis %d' % (idx + 1))
        if not shape:
            header.set('NAXIS', 0, 'no data present')
        header.set('EXTEND', True, 'there are extensions')

        npix = 0
        if shape:
            npix = 1
            for axis in shape:
                npix *= axis
        data = np.zeros(npix, dtype=_ImageBaseHDU.NumCode[bitpix_value])

        hdulist = cls([PrimaryHDU(data=data, header=header)])
        log.info('Created new FITS with shape %s and BITPIX=%d.',
                 list(shape), bitpix_value)
        return hdulist

    def append(self, hdu):
        """
        Append a new HDU to the `HDUList`.

        The first HDU must be a primary HDU, and no other may be.  Appending
        the first extension sets ``EXTEND = T`` in the primary header.
        """

        if not isinstance(hdu, _BaseHDU):
            raise ValueError('HDUList can only append an HDU.')

        if len(self) == 0:
            if not hdu.is_primary:
                raise StructureError('primary HDU is not defined')
        elif hdu.is_primary:
            raise StructureError('HDUList already has a primary HDU.')

        super(HDUList, self).append(hdu)

        # make sure the EXTEND keyword is in primary HDU if there is extension
        if len(self) == 2:
            self.update_extend()
        if len(self) > 1:
            log.info('Added extension HDU (total HDUs now %d).', len(self))

    def insert(self, index, hdu):
        """
        Insert an extension HDU into the `HDUList` at the given index.  The
        primary HDU stays first.
        """

        if len(self) == 0 or index >= len(self):
            self.append(hdu)
            return
        if index < 1:
            raise StructureError('Extensions cannot precede the primary HDU.')
        if not isinstance(hdu, _BaseHDU):
            raise ValueError('HDUList can only insert an HDU.')
        if hdu.is_primary:
            raise StructureError('HDUList already has a primary HDU.')
        super(HDUList, self).insert(index, hdu)
        self.update_extend()

    def update_extend(self):
        """
        Make sure that the primary header has the keyword ``EXTEND`` and that
        it is true.
        """

        hdr = self.primary.header
        if hdr.get('EXTEND') is not True:
            hdr.set('EXTEND', True, 'File has extensions')

    def index_of(self, key):
        """
        Get the index of an HDU from the `HDUList`.

        Parameters
        ----------
        key : int or str
           The key identifying the HDU: its index, or its name (the
           ``EXTNAME`` value, case-insensitive).

        Returns
        -------
        index : int
           The index of the HDU in the `HDUList`.
        """

        if isinstance(key, (int, np.integer, slice)):
            return key

        if not isinstance(key, str):
            raise KeyError(key)
        _key = key.strip().upper()

        found = None
        for idx, hdu in enumerate(self):
            if str(hdu.name).strip().upper() == _key:
                found = idx
                break

        if found is None:
            raise KeyError('Extension %r not found.' % key)
        return found

    def tostring(self):
        """
        Encodes the `HDUList` as a FITS byte stream: for each HDU the header
        records, then the data, zero padded to a whole number of blocks.
        """

        for hdu in self:
            hdu._verify_shape()

        headers = [encode_ascii(hdu.header.tostring()) for hdu in self]
        sizes = [hdu.size() for hdu in self]
        total = sum(len(hdr) + _block_span(size)
                    for hdr, size in zip(headers, sizes))

        output = bytearray(total)
        offset = 0
        for hdu, hdr, size in zip(self, headers, sizes):
            output[offset:offset + len(hdr)] = hdr
            offset += len(hdr)
            if size > 0 and hdu.data is not None:
                data = hdu._encode_data()[:size]
                output[offset:offset + len(data)] = data
            log.debug('Wrote %s: %d header bytes, %d data bytes',
                      hdu.__class__.__name__, len(hdr), size)
            offset += _block_span(size)

        log.info('Encoded %d HDU(s) into %d bytes.', len(self), total)
        return bytes(output)

    def writeto(self, name, clobber=False):
        """
        Write the `HDUList` to a new file.

        Parameters
        ----------
        name : file path, file object or file-like object
            File to write to.  If a file object, must be opened for
            writing in binary mode.

        clobber : bool
            When `True`, overwrite the output file if exists.
        """

        data = self.tostring()
        with _File(name, mode='ostream', clobber=clobber) as ffo:
            ffo.write(data)
            ffo.flush()
        log.info('Wrote FITS file: %s', name)

    def info(self, output=None):
        """
        Summarize the info of the HDUs in this `HDUList`.

        Parameters
        ----------
        output : file, optional
            A file-like object to write the summary to.  Defaults to
            ``sys.stdout``.
        """

        if output is None:
            output = sys.stdout

        results = ['No.    Name         Type      Cards   Dimensions   Format']
        for idx, hdu in enumerate(self):
            results.append('%-3d  %s' % (idx, hdu._summary()))
        output.write('\n'.join(results) + '\n')
