from lightfits.hdu.hdulist import HDUList
from lightfits.hdu.image import PrimaryHDU, ImageHDU
from lightfits.hdu.table import TableHDU, BinTableHDU, new_table

__all__ = ['HDUList', 'PrimaryHDU', 'ImageHDU', 'TableHDU', 'BinTableHDU',
           'new_table']
