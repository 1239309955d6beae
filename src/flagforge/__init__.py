"""flagforge: typesafe bitmask flag sets for Python.

Declare a closed table of named bit patterns once, then work with values
through set algebra, three raw-bits conversion policies, iteration and a
``"A | B | 0x8"`` text format.  A ``flagforge.toml`` project file plus the
``flagforge generate`` command turn declarations into a Python module.
"""

from flagforge.bits import BITS_TYPES as BITS_TYPES
from flagforge.bits import U8 as U8
from flagforge.bits import U16 as U16
from flagforge.bits import U32 as U32
from flagforge.bits import U64 as U64
from flagforge.bits import U128 as U128
from flagforge.bits import BitsType as BitsType
from flagforge.builder import define_flags as define_flags
from flagforge.flags import BitFlags as BitFlags
from flagforge.flags import DefinitionError as DefinitionError
from flagforge.flags import Flag as Flag
from flagforge.flags import ZeroFlagWarning as ZeroFlagWarning
from flagforge.parser import ParseError as ParseError
from flagforge.parser import ParseErrorKind as ParseErrorKind
from flagforge.parser import from_str as from_str
from flagforge.parser import to_string as to_string
from flagforge.parser import to_writer as to_writer

__version__ = "0.1.0"
