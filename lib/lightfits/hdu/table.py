import warnings

import numpy as np

from lightfits.card import Card
from lightfits.column import Column, _columns_from_header, _row_dtype
from lightfits.hdu.base import _BaseHDU
from lightfits.header import Header


__all__ = ['BinTableHDU', 'TableHDU', 'new_table']


class _TableBaseHDU(_BaseHDU):
    """
    FITS table extension base HDU class.

    The data of a table is a list of rows, each a dict mapping column names
    to values: a `str` for character columns, a number for single element
    numeric columns and a numpy array for repeated ones.
    """

    _extension = ''

    def __init__(self, data=None, header=None, name=None):
        """
        Parameters
        ----------
        data : list of dict, optional
            The table rows.

        header : Header instance, optional
            Header to be used.  If `header` is `None`, a minimal header with
            no columns will be provided.

        name : str, optional
            The ``EXTNAME`` value.
        """

        if header is not None and not isinstance(header, Header):
            raise ValueError('header must be a Header object')

        super(_TableBaseHDU, self).__init__(data=data, header=header)

        if header is None:
            self._header = Header([
                Card('XTENSION', self._extension, 'table extension'),
                Card('BITPIX', 8, 'array data type'),
                Card('NAXIS', 2, 'number of array dimensions'),
                Card('NAXIS1', 0, 'length of dimension 1'),
                Card('NAXIS2', 0, 'length of dimension 2'),
                Card('PCOUNT', 0, 'number of group parameters'),
                Card('GCOUNT', 1, 'number of groups'),
                Card('TFIELDS', 0, 'number of table fields')])
            if data is not None:
                self._header['NAXIS2'] = len(data)

        if name is not None:
            self._header['EXTNAME'] = name

    @classmethod
    def match_header(cls, header):
        if not cls._extension:
            raise NotImplementedError
        if header.keys()[:1] != ['XTENSION']:
            return False
        return str(header['XTENSION']).rstrip() == cls._extension

    @property
    def columns(self):
        """The `Column` definitions from the header."""

        return _columns_from_header(self._header)

    @property
    def shape(self):
        tfields = self._header.get('TFIELDS')
        nrows = self._header.get('NAXIS2')
        if tfields is None or nrows is None:
            return []
        return [tfields, nrows]

    def _decode_data(self, raw, scale_image_data=False):
        columns = self.columns
        width = self._header.get('NAXIS1', 0)
        nrows = self._header.get('NAXIS2', 0)
        dtype = _row_dtype(columns, width)

        records = np.frombuffer(raw, dtype=dtype, count=nrows)
        rows = []
        for record in records:
            row = {}
            for idx, column in enumerate(columns):
                row[column.name] = column.decode(record[idx])
            rows.append(row)
        return rows

    def _encode_data(self):
        columns = self.columns
        width = self._header.get('NAXIS1', 0)
        nrows = self._header.get('NAXIS2', 0)
        dtype = _row_dtype(columns, width)

        records = np.zeros(nrows, dtype=dtype)
        for idx in range(nrows):
            if idx < len(self.data):
                row = self.data[idx]
            else:
                row = {}
            for fidx, column in enumerate(columns):
                value = column.encode(row.get(column.name))
                records['f%d' % fidx][idx] = value
        return records.tobytes()

    def _verify_shape(self):
        if self.data is None:
            return
        nrows = self._header.get('NAXIS2', 0)
        if nrows != len(self.data):
            warnings.warn('Table %s has %d rows but its header declares %d; '
                          'the header is left unchanged.' %
                          (self.name or self.__class__.__name__,
                           len(self.data), nrows))

    def _summary(self):
        summary = super(_TableBaseHDU, self)._summary()
        return summary + '  ' + str([c.format for c in self.columns])


class BinTableHDU(_TableBaseHDU):
    """
    Binary table HDU class.
    """

    _extension = 'BINTABLE'


class TableHDU(_TableBaseHDU):
    """
    Table extension HDU class, read and written with the same fixed width
    field layout as binary tables.
    """

    _extension = 'TABLE'


def new_table(columns, rows=None, name=None):
    """
    Create a new binary table HDU.

    Parameters
    ----------
    columns : list
        `Column` objects or ``(name, format)`` pairs, in field order.

    rows : list of dict, optional
        The table rows, keyed by column name.

    name : str, optional
        The ``EXTNAME`` value.

    Returns
    -------
    hdu : BinTableHDU
    """

    columns = [c if isinstance(c, Column) else Column(*c) for c in columns]
    if rows is None:
        rows = []

    hdu = BinTableHDU(data=list(rows), name=name)
    header = hdu.header
    header['NAXIS1'] = sum(column.width for column in columns)
    header['TFIELDS'] = len(columns)
    for idx, column in enumerate(columns):
        header.set('TTYPE%d' % (idx + 1), column.name,
                   'label for field %d' % (idx + 1))
        header.set('TFORM%d' % (idx + 1), column.format,
                   'data format of field')
    return hdu
