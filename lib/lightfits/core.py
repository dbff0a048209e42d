"""
A module for reading and writing FITS files and manipulating their
contents.

A FITS (Flexible Image Transport System) file is a sequence of header/data
units (HDUs).  Each is a header of 80 character keyword records followed by
big-endian binary data, and the whole is laid out in 2880 byte blocks.
"""

import logging

# Refactored imports--will move around a lot for a while
from lightfits.card import Card
from lightfits.column import Column
from lightfits.convenience import *
from lightfits.hdu import *
from lightfits.hdu.hdulist import fitsopen
from lightfits.hdu.hdulist import fitsopen as open
from lightfits.header import Header
from lightfits.verify import (FitsError, FormatError, MissingFieldError,
                              UnsupportedFormatError, InvalidOperationError,
                              StructureError)


log = logging.getLogger('lightfits')
log.addHandler(logging.NullHandler())

LOG_LEVELS = {'none': logging.CRITICAL + 10, 'error': logging.ERROR,
              'warn': logging.WARNING, 'info': logging.INFO,
              'debug': logging.DEBUG}

# Module variables; GLOBALS lists each setting with its default
LOG_LEVEL = 'info'

# The following variable and function control whether an EXTEND = T card is
# added to the header of each extension read from a stream.

EXTEND_EXTENSION_HEADERS = True

GLOBALS = [('LOG_LEVEL', 'info'), ('EXTEND_EXTENSION_HEADERS', True)]


def set_log_level(level='info'):
    """
    Sets the level of the ``lightfits`` logger to one of ``'none'``,
    ``'error'``, ``'warn'``, ``'info'`` or ``'debug'``.
    """

    global LOG_LEVEL
    if level not in LOG_LEVELS:
        raise ValueError('Log level %r not recognized; use one of %s.' %
                         (level, ', '.join(sorted(LOG_LEVELS))))
    LOG_LEVEL = level
    log.setLevel(LOG_LEVELS[level])


def set_extend_extension_headers(value=True):
    global EXTEND_EXTENSION_HEADERS
    EXTEND_EXTENSION_HEADERS = value


set_log_level(LOG_LEVEL)


__all__ = ['Card', 'Column', 'Header', 'HDUList', 'PrimaryHDU', 'ImageHDU',
           'TableHDU', 'BinTableHDU', 'new_table', 'open', 'fitsopen',
           'decode', 'encode', 'getheader', 'getdata', 'writeto',
           'FitsError', 'FormatError', 'MissingFieldError',
           'UnsupportedFormatError', 'InvalidOperationError',
           'StructureError', 'set_log_level', 'set_extend_extension_headers']
