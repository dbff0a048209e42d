# This is the configuration file for the lightfits namespace.

__version__ = '0.1.0'

# Import the lightfits core module.
from lightfits import core

from lightfits.core import *

__doc__ = core.__doc__

__all__ = core.__all__
