import gzip
import io
import logging
import os
import warnings
import zipfile
import zlib


log = logging.getLogger(__name__)


GZIP_MAGIC = b'\x1f\x8b'
ZIP_MAGIC = b'PK\x03\x04'
# first bytes of a zlib stream at each compression level
ZLIB_MAGICS = (b'\x78\x01', b'\x78\x5e', b'\x78\x9c', b'\x78\xda')

PYTHON_MODES = {'readonly': 'rb', 'ostream': 'wb'}


class _File(object):
    """
    A file object that reads a whole FITS stream into memory, or writes one
    out.  Compressed input (gzip, zlib or single member zip) is inflated on
    read.
    """

    def __init__(self, fileobj=None, mode='readonly', clobber=False):
        if mode not in PYTHON_MODES:
            raise ValueError('Mode %r not recognized.' % mode)

        self.mode = mode
        self.file_like = False
        self.name = None

        if isinstance(fileobj, (str, os.PathLike)):
            self.name = os.fspath(fileobj)
            if mode == 'ostream' and os.path.exists(self.name):
                if not clobber:
                    raise OSError('File %r already exists.' % self.name)
                warnings.warn('Overwriting existing file %r.' % self.name)
            self.__file = open(self.name, PYTHON_MODES[mode])
        else:
            # We are dealing with a file like object.
            # Assume it is open.
            self.file_like = True
            self.__file = fileobj
            self.name = getattr(fileobj, 'name', None)

    def __repr__(self):
        return '<%s.%s %s>' % (self.__module__, self.__class__.__name__,
                               self.__file)

    def __enter__(self):
        return self

    def __exit__(self, type, value, traceback):
        self.close()

    def read(self):
        """Reads the whole stream, decompressing it if necessary."""

        data = self.__file.read()
        if isinstance(data, str):
            data = data.encode('latin-1')

        if (data.startswith(GZIP_MAGIC) or
                (self.name and str(self.name).endswith('.gz'))):
            log.debug('Decompressing gzip stream from %s', self.name)
            data = gzip.decompress(data)
        elif data.startswith(ZIP_MAGIC):
            log.debug('Extracting zip archive %s', self.name)
            zfile = zipfile.ZipFile(io.BytesIO(data))
            namelist = zfile.namelist()
            if len(namelist) != 1:
                raise OSError(
                    'Zip files with multiple members are not supported.')
            data = zfile.read(namelist[0])
            zfile.close()
        elif data[:2] in ZLIB_MAGICS:
            log.debug('Decompressing zlib stream from %s', self.name)
            data = zlib.decompress(data)
        return data

    def write(self, data):
        self.__file.write(data)

    def flush(self):
        self.__file.flush()

    def close(self):
        """Closes the file, unless it was opened by the caller."""

        if not self.file_like:
            self.__file.close()
