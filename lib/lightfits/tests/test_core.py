import logging

import numpy as np
import pytest

import lightfits
from lightfits import core

from lightfits.tests import FitsTestCase


class TestCore(FitsTestCase):
    def test_set_log_level(self):
        logger = logging.getLogger('lightfits')
        lightfits.set_log_level('debug')
        assert core.LOG_LEVEL == 'debug'
        assert logger.level == logging.DEBUG
        lightfits.set_log_level('none')
        assert logger.level > logging.CRITICAL
        with pytest.raises(ValueError):
            lightfits.set_log_level('verbose')
        assert core.LOG_LEVEL == 'none'

    def test_globals_restored(self):
        assert core.LOG_LEVEL == 'info'
        assert core.EXTEND_EXTENSION_HEADERS is True
        assert logging.getLogger('lightfits').level == logging.INFO

    def test_logging(self, caplog):
        lightfits.set_log_level('debug')
        with caplog.at_level(logging.DEBUG, logger='lightfits'):
            data = lightfits.HDUList.create([2, 2], 'uint8').tostring()
            lightfits.decode(data)
        messages = [record.getMessage() for record in caplog.records]
        assert any('Created new FITS' in m for m in messages)
        assert any('Read FITS stream with 1 HDU(s).' in m for m in messages)
        assert any(r.name == 'lightfits.hdu.base' for r in caplog.records)

    def test_error_hierarchy(self):
        for error in (lightfits.FormatError, lightfits.MissingFieldError,
                      lightfits.UnsupportedFormatError,
                      lightfits.InvalidOperationError,
                      lightfits.StructureError):
            assert issubclass(error, lightfits.FitsError)

    def test_encode_decode(self):
        hdul = lightfits.HDUList.create([3, 2], 'float32')
        hdul[0].data[:] = np.arange(6)
        data = lightfits.encode(hdul)
        decoded = lightfits.decode(data)
        assert decoded[0].get_data().tolist() == [[0, 1, 2], [3, 4, 5]]
        assert lightfits.encode(decoded) == data

    def test_convenience_functions(self):
        data = np.arange(6, dtype=np.uint16).reshape(2, 3)
        lightfits.writeto(self.temp('conv.fits'), data)
        header = lightfits.getheader(self.temp('conv.fits'))
        assert header['BZERO'] == 32768
        result, header = lightfits.getdata(self.temp('conv.fits'),
                                           header=True)
        assert result.dtype == np.uint16
        assert result.tolist() == data.tolist()
        assert header['NAXIS'] == 2
        raw = lightfits.getdata(self.temp('conv.fits'),
                                scale_image_data=False)
        assert raw.dtype == np.int16

    def test_getdata_without_data(self):
        lightfits.HDUList([lightfits.PrimaryHDU()]).writeto(
            self.temp('empty.fits'))
        with pytest.raises(IndexError):
            lightfits.getdata(self.temp('empty.fits'))
