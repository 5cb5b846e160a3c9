"""
mpnum - Multiple precision integers, rationals, reals and complex numbers, with rounding contexts.

Usage example:

    import mpnum

    seven = mpnum.mpz(7)
    assert seven + 5 == 12
    assert seven + mpnum.mpq(1, 2) == mpnum.mpq(15, 2)

    with mpnum.local_context(precision=100, trap_divzero=True) as ctx:
        third = mpnum.mpfr(1) / 3      # 100 bits
        assert ctx.inexact

Usage example:

    from mpnum import mpfr, get_context

    get_context().clear_flags()
    infinity = mpfr(1.0) / mpfr(0.0)   # +inf, because trap_divzero is off
    assert get_context().divzero
"""

from .number import mpz
from .number import xmpz
from .number import mpq
from .number import mpfr
from .number import mpc
from .context import Context
from .context import context
from .context import ieee
from .context import get_context
from .context import set_context
from .context import local_context
from .context import push
from .context import pop
from .context import set_context_scope
from .context import get_context_scope
from .context import get_max_precision
from .context import get_emax_max
from .context import get_emin_min
from .context import RoundToNearest
from .context import RoundToZero
from .context import RoundUp
from .context import RoundDown
from .context import RoundAwayZero
from .context import Default
from .context import OperandTypeError
from .context import CompareError
from .context import ContextError
from .context import ContextStackError
from .context import ReadOnlyContextError
from .context import MpnumError
from .context import RangeError
from .context import InexactResultError
from .context import OverflowResultError
from .context import UnderflowResultError
from .context import InvalidOperationError
from .context import DivisionByZeroError
from .binary import to_binary
from .binary import from_binary
from .binary import BinaryFormatError
from .dispatch import add
from .dispatch import sub
from .dispatch import mul
from .dispatch import div
from .dispatch import floor_div
from .dispatch import mod
from .dispatch import div_mod
from .dispatch import power
from .dispatch import minus
from .dispatch import plus
from .dispatch import absolute
from .dispatch import cmp
from .dispatch import sqrt
from .dispatch import exp
from .dispatch import log
from .dispatch import sin
from .dispatch import cos

__all__ = [
    'mpz',
    'xmpz',
    'mpq',
    'mpfr',
    'mpc',
    'Context',
    'context',
    'ieee',
    'get_context',
    'set_context',
    'local_context',
    'push',
    'pop',
    'set_context_scope',
    'get_context_scope',
    'get_max_precision',
    'get_emax_max',
    'get_emin_min',
    'RoundToNearest',
    'RoundToZero',
    'RoundUp',
    'RoundDown',
    'RoundAwayZero',
    'Default',
    'OperandTypeError',
    'CompareError',
    'ContextError',
    'ContextStackError',
    'ReadOnlyContextError',
    'MpnumError',
    'RangeError',
    'InexactResultError',
    'OverflowResultError',
    'UnderflowResultError',
    'InvalidOperationError',
    'DivisionByZeroError',
    'to_binary',
    'from_binary',
    'BinaryFormatError',
    'add',
    'sub',
    'mul',
    'div',
    'floor_div',
    'mod',
    'div_mod',
    'power',
    'minus',
    'plus',
    'absolute',
    'cmp',
    'sqrt',
    'exp',
    'log',
    'sin',
    'cos',
]

from . import version
__version__ = version.__doc__
