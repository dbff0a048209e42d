import numpy as np
import pytest

import lightfits
from lightfits.column import Column
from lightfits.hdu import (BinTableHDU, HDUList, PrimaryHDU, TableHDU,
                           new_table)
from lightfits.verify import (FormatError, MissingFieldError,
                              UnsupportedFormatError)

from lightfits.tests import FitsTestCase
from lightfits.tests.util import header_block, pad_block


PRIMARY = header_block('SIMPLE  = T', 'BITPIX  = 8', 'NAXIS   = 0')


def table_stream(cards, rows, xtension='BINTABLE'):
    header = header_block(*(["XTENSION= '%s'" % xtension, 'BITPIX  = 8',
                             'NAXIS   = 2'] + cards))
    return PRIMARY + header + pad_block(rows)


class TestTableFunctions(FitsTestCase):
    def setup_method(self, method):
        super(TestTableFunctions, self).setup_method(method)
        self.rows = (b'Hello' + np.array([1.23], dtype='>f4').tobytes() +
                     b'World' + np.array([4.56], dtype='>f4').tobytes())

    def test_decode_binary_table(self):
        data = table_stream(['NAXIS1  = 9', 'NAXIS2  = 2', 'PCOUNT  = 0',
                             'GCOUNT  = 1', 'TFIELDS = 2',
                             "TFORM1  = '5A'", "TTYPE1  = 'colText'",
                             "TFORM2  = '1E'", "TTYPE2  = 'colFloat'"],
                            self.rows)
        hdul = lightfits.decode(data)
        hdu = hdul[1]
        assert isinstance(hdu, BinTableHDU)
        assert hdu.ext_type == 'BINTABLE'
        assert hdu.shape == [2, 2]
        assert hdu.data[0]['colText'] == 'Hello'
        assert hdu.data[0]['colFloat'] == pytest.approx(1.23)
        assert hdu.data[1]['colText'] == 'World'
        assert hdu.data[1]['colFloat'] == pytest.approx(4.56)
        assert hdu.get_data() is hdu.data

    def test_default_column_names(self):
        data = table_stream(['NAXIS1  = 9', 'NAXIS2  = 2', 'TFIELDS = 2',
                             "TFORM1  = '5A'", "TFORM2  = 'E'"], self.rows)
        rows = lightfits.decode(data)[1].data
        assert list(rows[0].keys()) == ['COL1', 'COL2']
        assert rows[1]['COL1'] == 'World'

    def test_ascii_table_kind(self):
        data = table_stream(['NAXIS1  = 9', 'NAXIS2  = 2', 'TFIELDS = 2',
                             "TFORM1  = '5A'", "TFORM2  = '1E'"], self.rows,
                            xtension='TABLE')
        hdu = lightfits.decode(data)[1]
        assert isinstance(hdu, TableHDU)
        assert hdu.ext_type == 'TABLE'
        assert hdu.data[0]['COL1'] == 'Hello'

    def test_text_null_padding_is_dropped(self):
        data = table_stream(['NAXIS1  = 6', 'NAXIS2  = 1', 'TFIELDS = 1',
                             "TFORM1  = '6A'", "TTYPE1  = ' name '"],
                            b' ab\0\0\0')
        rows = lightfits.decode(data)[1].data
        assert rows == [{'name': 'ab'}]

    def test_missing_tform(self):
        data = table_stream(['NAXIS1  = 9', 'NAXIS2  = 2', 'TFIELDS = 2',
                             "TFORM1  = '5A'"], self.rows)
        with pytest.raises(MissingFieldError):
            lightfits.decode(data)

    def test_unsupported_tform(self):
        data = table_stream(['NAXIS1  = 9', 'NAXIS2  = 2', 'TFIELDS = 2',
                             "TFORM1  = '5A'", "TFORM2  = '1J'"], self.rows)
        with pytest.raises(UnsupportedFormatError):
            lightfits.decode(data)

    def test_row_narrower_than_fields(self):
        data = table_stream(['NAXIS1  = 4', 'NAXIS2  = 2', 'TFIELDS = 1',
                             "TFORM1  = '5A'"], self.rows)
        with pytest.raises(FormatError):
            lightfits.decode(data)

    def test_column(self):
        column = Column('flux', '3D')
        assert column.repeat == 3
        assert column.code == 'D'
        assert column.width == 24
        assert Column('name', 'A').width == 1
        assert Column('count', '1I').width == 2
        with pytest.raises(UnsupportedFormatError):
            Column('bad', '2L')

    def test_new_table(self):
        hdu = new_table([('name', '8A'), Column('count', '1I')],
                        [{'name': 'a', 'count': 1}], name='CAT')
        header = hdu.header
        assert header.keys() == ['XTENSION', 'BITPIX', 'NAXIS', 'NAXIS1',
                                 'NAXIS2', 'PCOUNT', 'GCOUNT', 'TFIELDS',
                                 'EXTNAME', 'TTYPE1', 'TFORM1', 'TTYPE2',
                                 'TFORM2']
        assert header['NAXIS1'] == 10
        assert header['NAXIS2'] == 1
        assert hdu.shape == [2, 1]
        assert hdu.name == 'CAT'
        assert hdu.size() == 10

    def test_round_trip(self):
        rows = [{'name': 'alpha', 'count': 3, 'flux': 1.5,
                 'vec': [1.0, 2.0, 3.0]},
                {'name': 'beta', 'count': -2, 'flux': -0.25,
                 'vec': [4.0, 5.0, 6.0]}]
        hdu = new_table([('name', '8A'), ('count', '1I'), ('flux', '1E'),
                         ('vec', '3D')], rows)
        hdul = HDUList([PrimaryHDU(), hdu])
        data = hdul.tostring()
        assert len(data) == 3 * 2880

        decoded = lightfits.decode(data)[1]
        assert decoded.shape == [4, 2]
        assert decoded.header.keys()[:-1] == hdu.header.keys()
        for row, original in zip(decoded.data, rows):
            assert row['name'] == original['name']
            assert row['count'] == original['count']
            assert row['flux'] == original['flux']
            assert row['vec'].tolist() == original['vec']

    def test_text_is_padded_and_truncated(self):
        hdu = new_table([('name', '4A')], [{'name': 'abcdefg'}, {'name': 'x'}])
        data = HDUList([PrimaryHDU(), hdu]).tostring()
        assert data[5760:5768] == b'abcdx   '
        rows = lightfits.decode(data)[1].data
        assert rows == [{'name': 'abcd'}, {'name': 'x'}]

    def test_missing_values_default(self):
        hdu = new_table([('name', '3A'), ('count', '1I'), ('vec', '2E')],
                        [{'name': 'a'}, {'count': 'bad', 'vec': [7.0]}])
        data = HDUList([PrimaryHDU(), hdu]).tostring()
        rows = lightfits.decode(data)[1].data
        assert rows[0]['name'] == 'a'
        assert rows[0]['count'] == 0
        assert rows[0]['vec'].tolist() == [0.0, 0.0]
        assert rows[1]['name'] == ''
        assert rows[1]['count'] == 0
        assert rows[1]['vec'].tolist() == [7.0, 0.0]

    def test_missing_rows_are_written_as_defaults(self):
        hdu = new_table([('count', '1I')], [{'count': 5}])
        hdu.header['NAXIS2'] = 2
        with pytest.warns(UserWarning):
            data = HDUList([PrimaryHDU(), hdu]).tostring()
        rows = lightfits.decode(data)[1].data
        assert rows == [{'count': 5}, {'count': 0}]

    def test_shape_without_tfields(self):
        hdu = BinTableHDU()
        assert hdu.shape == [0, 0]
        hdu.header.remove('TFIELDS')
        assert hdu.shape == []

    def test_int16_values_wrap(self):
        hdu = new_table([('n', '1I'), ('v', '2I')],
                        [{'n': 40000, 'v': [70000, -40000]},
                         {'n': float('inf'), 'v': [1.9, float('nan')]}])
        data = HDUList([PrimaryHDU(), hdu]).tostring()
        rows = lightfits.decode(data)[1].data
        assert rows[0]['n'] == -25536
        assert rows[0]['v'].tolist() == [4464, 25536]
        assert rows[1]['n'] == 0
        assert rows[1]['v'].tolist() == [1, 0]

    def test_column_encode_int16(self):
        assert Column('n', '1I').encode(32768) == -32768
        assert Column('n', '1I').encode(-3.7) == -3
        assert Column('n', '1I').encode(None) == 0
