"""Convenience functions for simple reading and writing of FITS data."""

from lightfits.hdu.hdulist import HDUList, fitsopen
from lightfits.hdu.image import PrimaryHDU


__all__ = ['decode', 'encode', 'getheader', 'getdata', 'writeto']


def decode(data, scale_image_data=False):
    """Decodes a FITS byte stream into an `HDUList`."""

    return HDUList.fromstring(data, scale_image_data=scale_image_data)


def encode(hdulist):
    """Encodes an `HDUList` into a FITS byte stream."""

    return hdulist.tostring()


def getheader(filename, ext=0):
    """
    Get the header from an extension of a FITS file.

    Parameters
    ----------
    filename : file path, file object, or file like object
        File to get header from.

    ext : int or str, optional
        The extension, by index or ``EXTNAME``.  Defaults to the primary
        HDU.

    Returns
    -------
    header : `Header` object
    """

    return fitsopen(filename)[ext].header


def getdata(filename, ext=0, header=False, scale_image_data=True):
    """
    Get the data from an extension of a FITS file (and optionally the
    header).

    Parameters
    ----------
    filename : file path, file object, or file like object
        File to get data from.

    ext : int or str, optional
        The extension, by index or ``EXTNAME``.

    header : bool, optional
        If `True`, return the data and the header of the specified HDU as
        a tuple.

    scale_image_data : bool, optional
        Scale image data with ``BSCALE``/``BZERO``.  Defaults to `True`.

    Returns
    -------
    array or list, or (data, header) tuple
        2-D images are returned as ``(NAXIS2, NAXIS1)`` arrays, tables as
        lists of row dicts.
    """

    hdu = fitsopen(filename, scale_image_data=scale_image_data)[ext]
    data = hdu.get_data()
    if data is None and ext == 0:
        raise IndexError('No data in this HDU.')
    if header:
        return data, hdu.header
    return data


def writeto(filename, data, header=None, clobber=False):
    """
    Create a new FITS file using the supplied data/header.

    Parameters
    ----------
    filename : file path, file object, or file like object
        File to write to.  If opened, must be opened for write in binary
        mode.

    data : array
        Data to write to the new file.

    header : Header object, optional
        The header associated with `data`.  If `None`, a header of the
        appropriate type is created for the supplied data.

    clobber : bool, optional
        If `True`, and if filename already exists, it will overwrite
        the file.  Default is `False`.
    """

    hdu = PrimaryHDU(data, header=header)
    HDUList([hdu]).writeto(filename, clobber=clobber)
