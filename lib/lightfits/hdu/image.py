import warnings

import numpy as np

from lightfits.card import Card
from lightfits.hdu.base import _BaseHDU
from lightfits.header import Header
from lightfits.verify import UnsupportedFormatError


__all__ = ['PrimaryHDU', 'ImageHDU']


def _unsigned_zero(dtype):
    """
    Given a numpy dtype, finds its "zero" point, which is exactly in the
    middle of its range.
    """

    return 1 << (dtype.itemsize * 8 - 1)


def _is_pseudo_unsigned(dtype):
    return dtype.kind == 'u' and dtype.itemsize >= 2


class _ImageBaseHDU(_BaseHDU):
    """FITS image HDU base class.

    Attributes
    ----------
    header
        image header

    data
        image data, a flat numpy array with ``NAXIS1`` varying fastest
    """

    # mappings between FITS and numpy typecodes
    NumCode = {8: 'uint8', 16: 'int16', 32: 'int32', 64: 'int64',
               -32: 'float32', -64: 'float64'}
    ImgCode = {'uint8': 8, 'int16': 16, 'uint16': 16, 'int32': 32,
               'uint32': 32, 'int64': 64, 'uint64': 64,
               'float32': -32, 'float64': -64}

    def __init__(self, data=None, header=None):
        if header is not None and not isinstance(header, Header):
            raise ValueError('header must be a Header object')

        # the array last read from a stream without BSCALE/BZERO scaling
        self._raw_data = None

        super(_ImageBaseHDU, self).__init__(header=header)

        if header is None:
            self._header = Header(self._minimal_cards())
            if data is not None:
                self.data = data
                self.update_header()
        elif data is not None:
            self.data = data
            if np.ndim(data) > 1:
                self.update_header()

    def _minimal_cards(self):
        return [Card('SIMPLE', True, 'conforms to FITS standard'),
                Card('BITPIX', 8, 'array data type'),
                Card('NAXIS', 0, 'number of array dimensions')]

    def _getdata(self):
        return self._data

    def _setdata(self, value):
        if value is not None:
            value = np.asarray(value)
        self._data = value
        self._shape_hint = None if value is None else value.shape
        # True only while the data is the unscaled array read from a stream;
        # any other assignment holds physical values
        self._raw = value is not None and value is self._raw_data
        if value is not None and value.ndim != 1:
            self._data = value.ravel()
    data = property(_getdata, _setdata)

    @property
    def shape(self):
        shape = []
        for idx in range(self._header.get('NAXIS', 0)):
            axis = self._header.get('NAXIS' + str(idx + 1))
            if axis is not None:
                shape.append(axis)
        return shape

    def update_header(self):
        """
        Update the BITPIX, NAXIS and NAXISn keywords to agree with the data.
        The data's numpy axes are the reverse of the FITS axes.
        """

        old_naxis = self._header.get('NAXIS', 0)

        if self._data is None:
            axes = []
        else:
            dtype_name = self._data.dtype.name
            if dtype_name not in self.ImgCode:
                raise UnsupportedFormatError(
                    'Image data of type %s cannot be stored in FITS.' %
                    dtype_name)
            self._header['BITPIX'] = self.ImgCode[dtype_name]
            axes = list(self._shape_hint)
            axes.reverse()

        self._header['NAXIS'] = len(axes)

        # add NAXISi if it does not exist
        for idx, axis in enumerate(axes):
            keyword = 'NAXIS' + str(idx + 1)
            if keyword in self._header:
                self._header[keyword] = axis
            else:
                after = self._header.keys().index('NAXIS%s' % (idx or ''))
                self._header.insert(after + 1, Card(
                    keyword, axis, 'length of data axis %d' % (idx + 1)))

        # delete extra NAXISi's
        for idx in range(len(axes) + 1, old_naxis + 1):
            self._header.remove('NAXIS' + str(idx))

        if self._data is not None and _is_pseudo_unsigned(self._data.dtype):
            self._header['BZERO'] = _unsigned_zero(self._data.dtype)
            self._header['BSCALE'] = 1

    def get_data(self):
        """
        The image as a 2-D array of ``NAXIS2`` rows by ``NAXIS1`` columns.
        Images with any other number of axes, or whose data does not match
        the header's axes, are returned flat.
        """

        if self._data is None:
            return None
        shape = self.shape
        if len(shape) == 2 and self._data.size == shape[0] * shape[1]:
            return self._data.reshape(shape[1], shape[0])
        return self._data

    def _dtype(self):
        bitpix = self._header.get('BITPIX')
        if bitpix not in self.NumCode:
            raise UnsupportedFormatError('Unsupported BITPIX value: %r' %
                                         bitpix)
        return np.dtype(self.NumCode[bitpix]).newbyteorder('>')

    def _decode_data(self, raw, scale_image_data=False):
        dtype = self._dtype()
        count = len(raw) // dtype.itemsize
        data = np.frombuffer(raw, dtype=dtype, count=count)
        data = data.astype(data.dtype.newbyteorder('='))

        bzero = self._header.get('BZERO', 0)
        bscale = self._header.get('BSCALE', 1)
        if not scale_image_data or (bzero == 0 and bscale == 1):
            if bzero != 0 or bscale != 1:
                self._raw_data = data
            return data

        bitpix = self._header['BITPIX']
        if (bitpix > 8 and bscale == 1 and
                bzero == _unsigned_zero(data.dtype)):
            # stored as signed integers offset by half their range
            utype = np.dtype('uint%d' % bitpix)
            return data.view(utype) ^ utype.type(bzero)

        if bitpix > 16:
            ftype = np.float64
        else:
            ftype = np.float32
        data = data.astype(ftype)
        if bscale != 1:
            data *= bscale
        if bzero != 0:
            data += bzero
        return data

    def _encode_data(self):
        dtype = self._dtype()
        data = self._data
        bzero = self._header.get('BZERO', 0)
        bscale = self._header.get('BSCALE', 1)

        if not self._raw and (bzero != 0 or bscale != 1):
            if (_is_pseudo_unsigned(data.dtype) and bscale == 1 and
                    bzero == _unsigned_zero(data.dtype)):
                data = data ^ data.dtype.type(bzero)
                data = data.view('int%d' % (data.dtype.itemsize * 8))
            else:
                data = (data.astype(np.float64) - bzero) / bscale
                if dtype.kind in 'iu':
                    data = np.around(data)

        return data.astype(dtype).tobytes()

    def _verify_shape(self):
        if self._data is None:
            return
        if self._header.get('NAXIS') == 1:
            if self._header.get('NAXIS1') != self._data.size:
                self._header['NAXIS1'] = self._data.size
            return

        shape = self.shape
        npix = 0
        if shape:
            npix = 1
            for axis in shape:
                npix *= axis
        if npix != self._data.size:
            warnings.warn('Image data of %s has %d elements but its header '
                          'declares %d; the header is left unchanged.' %
                          (self.__class__.__name__, self._data.size, npix))

    def _summary(self):
        summary = super(_ImageBaseHDU, self)._summary()
        if self._data is not None:
            return summary + '  ' + self._data.dtype.name
        return summary + '  ' + self.NumCode.get(self._header.get('BITPIX'),
                                                 '')


class PrimaryHDU(_ImageBaseHDU):
    """
    FITS primary HDU class.
    """

    is_primary = True

    def __init__(self, data=None, header=None):
        """
        Construct a primary HDU.

        Parameters
        ----------
        data : array, optional
            The data in the HDU.

        header : Header instance, optional
            The header to be used.  If `header` is `None`, a minimal header
            will be provided.
        """

        _ImageBaseHDU.__init__(self, data=data, header=header)

        # insert the keyword EXTEND
        if header is None:
            self._header['EXTEND'] = True

    @classmethod
    def match_header(cls, header):
        return header.keys()[:1] == ['SIMPLE']

    @property
    def name(self):
        return self._header.get('EXTNAME', 'PRIMARY')


class ImageHDU(_ImageBaseHDU):
    """
    FITS image extension HDU class.
    """

    def __init__(self, data=None, header=None, name=None):
        """
        Construct an image HDU.

        Parameters
        ----------
        data : array
            The data in the HDU.

        header : Header instance
            The header to be used.  If `header` is `None`, a minimal header
            will be provided.

        name : str, optional
            The name of the HDU, will be the value of the keyword
            ``EXTNAME``.
        """

        _ImageBaseHDU.__init__(self, data=data, header=header)

        if name is not None:
            self._header['EXTNAME'] = name

    @classmethod
    def match_header(cls, header):
        # any extension that is not a table is read as an image
        if header.keys()[:1] != ['XTENSION']:
            return False
        return str(header['XTENSION']).rstrip() not in ('BINTABLE', 'TABLE')

    def _minimal_cards(self):
        return [Card('XTENSION', 'IMAGE', 'Image extension'),
                Card('BITPIX', 8, 'array data type'),
                Card('NAXIS', 0, 'number of array dimensions'),
                Card('PCOUNT', 0, 'number of parameters'),
                Card('GCOUNT', 1, 'number of groups')]
