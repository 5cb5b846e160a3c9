"""
Multiple precision numbers:  mpz, xmpz, mpq, mpfr, mpc.

    mpz   - Integer, immutable, any size
    xmpz  - Integer, mutable:  in-place operators edit it, x[i] reads and writes bits
    mpq   - Rational, exact
    mpfr  - Real, binary floating point with its own precision
    mpc   - Complex, a pair of mpfr parts, each with its own precision

Operators accept any mix of these and of int, Fraction, float, complex, Decimal.
The result has the kind of the richer operand:

    assert mpz(7) + mpq(1, 2) == mpq(15, 2)
    assert isinstance(mpq(1, 2) + 0.5, mpfr)

Real and Complex results are rounded under the active context (see context.py).
"""

import decimal
import math
import numbers
import operator
import re

from mpmath.libmp import (
    mpc_hash,
    mpf_hash,
    repr_dps,
    to_float,
    to_str,
)

from . import binary, convert, dispatch, floating
from .context import (
    Context,
    DivisionByZeroError,
    PREC_MAX,
    PREC_MIN,
    RoundAwayZero,
    RoundDown,
    RoundToNearest,
    RoundToZero,
    RoundUp,
    resolve,
)
from .kind import Kind, classify, native_kind


class Number(object):
    """
    Common ground of the numeric types:  operators, comparisons, pickling.

    Every operator is fobbed off on the dispatcher, which picks the result type.
    """
    __slots__ = ()

    class ConstructorTypeError(TypeError):
        """e.g. mpz([]) or mpfr(1j)"""

    class ConstructorValueError(ValueError):
        """e.g. mpz('alpha string') or mpq('1/x')"""

    class IntOverflowError(OverflowError):
        """Python int has no sane way to represent infinity.  Example int(mpfr('inf'))"""

    @classmethod
    def _unsupported(cls, value):
        return cls.ConstructorTypeError("{outer}({inner}) is not supported".format(
            outer=cls.__name__,
            inner=convert.type_name(value),
        ))

    # Pickling
    # --------
    def __getstate__(self):
        return binary.to_binary(self)

    def __setstate__(self, state):
        other = binary.from_binary(state)
        if type(other) is not type(self):
            raise ValueError("pickled {} cannot be restored as {}".format(
                convert.type_name(other),
                convert.type_name(self),
            ))
        for slot in self._all_slots():
            setattr(self, slot, getattr(other, slot))

    @classmethod
    def _all_slots(cls):
        for klass in cls.__mro__:
            for slot in getattr(klass, '__slots__', ()):
                yield slot

    def __copy__(self):
        return self

    def __deepcopy__(self, memo):
        return self

    # Comparison
    # ----------
    def __eq__(self, other): return dispatch.richcompare(operator.__eq__, self, other)
    def __ne__(self, other): return dispatch.richcompare(operator.__ne__, self, other)
    def __lt__(self, other): return dispatch.richcompare(operator.__lt__, self, other)
    def __le__(self, other): return dispatch.richcompare(operator.__le__, self, other)
    def __gt__(self, other): return dispatch.richcompare(operator.__gt__, self, other)
    def __ge__(self, other): return dispatch.richcompare(operator.__ge__, self, other)

    __hash__ = None

    # Math
    # ----
    def __pos__(self): return dispatch.unary(operator.__pos__, self)
    def __neg__(self): return dispatch.unary(operator.__neg__, self)
    def __abs__(self): return dispatch.unary(operator.__abs__, self)

    def __add__(self, other): return dispatch.binary(operator.__add__, self, other)
    def __radd__(self, other): return dispatch.binary(operator.__add__, other, self)
    def __sub__(self, other): return dispatch.binary(operator.__sub__, self, other)
    def __rsub__(self, other): return dispatch.binary(operator.__sub__, other, self)
    def __mul__(self, other): return dispatch.binary(operator.__mul__, self, other)
    def __rmul__(self, other): return dispatch.binary(operator.__mul__, other, self)
    def __truediv__( self, other): return dispatch.binary(operator.__truediv__, self, other)
    def __rtruediv__(self, other): return dispatch.binary(operator.__truediv__, other, self)
    def __floordiv__( self, other): return dispatch.binary(operator.__floordiv__, self, other)
    def __rfloordiv__(self, other): return dispatch.binary(operator.__floordiv__, other, self)
    def __mod__(self, other): return dispatch.binary(operator.__mod__, self, other)
    def __rmod__(self, other): return dispatch.binary(operator.__mod__, other, self)
    def __divmod__(self, other): return dispatch.binary(divmod, self, other)
    def __rdivmod__(self, other): return dispatch.binary(divmod, other, self)
    def __pow__(self, other, modulo=None): return dispatch.power_operator(self, other, modulo)
    def __rpow__(self, other, modulo=None): return dispatch.power_operator(other, self, modulo)


class mpz(Number, numbers.Integral):
    """
    Integer of any size.

        mpz(42)
        mpz('0x2a')           base 0 by default, detecting a 0b, 0o or 0x prefix
        mpz('2a', 16)
        mpz(42.9)             truncates, like int()
        mpz(mpfr('42.5'))     rounds in the context rounding mode
    """
    __slots__ = ('_value',)
    _mpnum_kind = Kind.INTEGER

    def __init__(self, value=0, base=None):
        if base is not None:
            if not isinstance(value, str):
                raise self.ConstructorTypeError("{}() with a base requires a string".format(type(self).__name__))
            self._from_string(value, base)
        elif isinstance(value, bool) or isinstance(value, int):
            self._value = int(value)
        elif isinstance(value, str):
            self._from_string(value, 0)
        elif isinstance(value, float):
            self._from_float(value)
        elif native_kind(value) == Kind.REAL:
            self._value = convert.integer_from_raw(value._mpf, resolve(None).round)
        else:
            self._from_another_number(value)

    def _from_string(self, s, base):
        try:
            self._value = convert.parse_integer(s, base)
        except ValueError as e:
            raise self.ConstructorValueError("{}({!r}) {}".format(type(self).__name__, s, e))

    def _from_float(self, x):
        if math.isnan(x):
            raise ValueError("Not-A-Number cannot be represented by integers.")
        if math.isinf(x):
            raise self.IntOverflowError("Infinity cannot be represented by integers.")
        self._value = int(x)

    def _from_another_number(self, value):
        kind = classify(value)
        if kind == Kind.INTEGER:
            self._value = convert.integer_of(value)
        elif kind == Kind.RATIONAL:
            self._value = int(convert.rational_of(value))
        elif kind == Kind.REAL:
            try:
                self._value = int(convert.rational_of(value))
            except OverflowError as e:
                raise self.IntOverflowError(str(e))
        else:
            raise self._unsupported(value)

    @classmethod
    def _make(cls, value):
        """Wrap a Python int without any checks."""
        instance = cls.__new__(cls)
        instance._value = value
        return instance

    def __repr__(self):
        return "{}({})".format(type(self).__name__, convert.integer_digits(self._value))

    def __str__(self):
        return convert.integer_digits(self._value)

    def __format__(self, format_spec):
        if format_spec == '':
            return str(self)
        return format(self._value, format_spec)

    def __hash__(self):
        return hash(self._value)

    def __bool__(self):
        return self._value != 0

    def __int__(self):
        return self._value

    def __index__(self):
        return self._value

    def __float__(self):
        return float(self._value)

    def __complex__(self):
        return complex(self._value)

    def __trunc__(self):
        return mpz._make(self._value)

    def __floor__(self):
        return mpz._make(self._value)

    def __ceil__(self):
        return mpz._make(self._value)

    def __round__(self, ndigits=None):
        if ndigits is None:
            return mpz._make(self._value)
        return mpz._make(round(self._value, ndigits))

    # Bits
    # ----
    def __and__(self, other): return dispatch.bitwise(operator.__and__, self, other)
    def __rand__(self, other): return dispatch.bitwise(operator.__and__, other, self)
    def __or__(self, other): return dispatch.bitwise(operator.__or__, self, other)
    def __ror__(self, other): return dispatch.bitwise(operator.__or__, other, self)
    def __xor__(self, other): return dispatch.bitwise(operator.__xor__, self, other)
    def __rxor__(self, other): return dispatch.bitwise(operator.__xor__, other, self)
    def __lshift__(self, other): return dispatch.bitwise(operator.__lshift__, self, other)
    def __rlshift__(self, other): return dispatch.bitwise(operator.__lshift__, other, self)
    def __rshift__(self, other): return dispatch.bitwise(operator.__rshift__, self, other)
    def __rrshift__(self, other): return dispatch.bitwise(operator.__rshift__, other, self)

    def __invert__(self):
        return mpz._make(~self._value)

    def bit_length(self):
        return self._value.bit_length()

    @staticmethod
    def _bit_index(index):
        index = operator.index(index)
        if index < 0:
            raise ValueError("bit index must be non-negative, not {}".format(index))
        return index

    def bit_test(self, index):
        """Is bit number index set?  Negative values act as infinite two's complement."""
        return bool((self._value >> self._bit_index(index)) & 1)

    def bit_set(self, index):
        return mpz._make(self._value | (1 << self._bit_index(index)))

    def bit_clear(self, index):
        return mpz._make(self._value & ~(1 << self._bit_index(index)))

    def bit_flip(self, index):
        return mpz._make(self._value ^ (1 << self._bit_index(index)))

    def digits(self, base=10):
        """
        Text in base 2 to 62.  Bases 2, 8, 16 carry a prefix.

            assert mpz(-31).digits(16) == '-0x1f'
            assert mpz(mpz(-31).digits(16), 16) == -31
        """
        return convert.integer_digits(self._value, base)

    def is_even(self):
        return self._value & 1 == 0

    def is_odd(self):
        return self._value & 1 == 1

    # Rational and Complex views
    # --------------------------
    @property
    def numerator(self):
        return mpz._make(self._value)

    @property
    def denominator(self):
        return mpz._make(1)

    @property
    def real(self):
        return mpz._make(self._value)

    @property
    def imag(self):
        return mpz._make(0)

    def conjugate(self):
        return mpz._make(self._value)


class xmpz(mpz):
    """
    Mutable Integer.  Unhashable.

        x = xmpz(5)
        x += 1          x is still the same object, now 6
        x[0] = 1        x is now 7
        assert x[2] == 1

    Not safe for concurrent mutation from several threads without a lock.
    """
    __slots__ = ()

    __hash__ = None

    def make_mpz(self):
        """Immutable copy."""
        return mpz._make(self._value)

    def __copy__(self):
        return xmpz._make(self._value)

    def __deepcopy__(self, memo):
        return xmpz._make(self._value)

    def _in_place(self, result):
        if result is NotImplemented:
            return NotImplemented
        if native_kind(result) == Kind.INTEGER:
            self._value = result._value
            return self
        return result

    def __iadd__(self, other): return self._in_place(dispatch.binary(operator.__add__, self, other))
    def __isub__(self, other): return self._in_place(dispatch.binary(operator.__sub__, self, other))
    def __imul__(self, other): return self._in_place(dispatch.binary(operator.__mul__, self, other))
    def __ifloordiv__(self, other): return self._in_place(dispatch.binary(operator.__floordiv__, self, other))
    def __imod__(self, other): return self._in_place(dispatch.binary(operator.__mod__, self, other))
    def __ipow__(self, other): return self._in_place(dispatch.power_operator(self, other))
    def __iand__(self, other): return self._in_place(dispatch.bitwise(operator.__and__, self, other))
    def __ior__(self, other): return self._in_place(dispatch.bitwise(operator.__or__, self, other))
    def __ixor__(self, other): return self._in_place(dispatch.bitwise(operator.__xor__, self, other))
    def __ilshift__(self, other): return self._in_place(dispatch.bitwise(operator.__lshift__, self, other))
    def __irshift__(self, other): return self._in_place(dispatch.bitwise(operator.__rshift__, self, other))

    def __getitem__(self, index):
        return int(self.bit_test(index))

    def __setitem__(self, index, bit):
        index = self._bit_index(index)
        if bit:
            self._value |= 1 << index
        else:
            self._value &= ~(1 << index)


class mpq(Number, numbers.Rational):
    """
    Exact fraction, always in lowest terms.

        mpq(3, 4)
        mpq('3/4')
        mpq(0.75)         exact value of the float
        mpq(Decimal('0.1'))
    """
    __slots__ = ('_value',)
    _mpnum_kind = Kind.RATIONAL

    def __init__(self, value=0, denominator=None, base=10):
        if denominator is not None:
            self._from_pair(value, denominator)
        elif isinstance(value, str):
            self._from_string(value, base)
        else:
            self._from_another_number(value)

    def _from_pair(self, numerator, denominator):
        exact_kinds = (Kind.INTEGER, Kind.RATIONAL)
        for part in (numerator, denominator):
            if classify(part) not in exact_kinds:
                raise self._unsupported(part)
        denominator = convert.rational_of(denominator)
        if denominator == 0:
            raise DivisionByZeroError("zero denominator in mpq()")
        self._value = convert.rational_of(numerator) / denominator

    def _from_string(self, s, base):
        try:
            self._value = convert.parse_rational(s, base)
        except ValueError as e:
            raise self.ConstructorValueError("mpq({!r}) {}".format(s, e))
        except ZeroDivisionError:
            raise DivisionByZeroError("zero denominator in mpq({!r})".format(s))

    def _from_another_number(self, value):
        if classify(value) not in (Kind.INTEGER, Kind.RATIONAL, Kind.REAL):
            raise self._unsupported(value)
        self._value = convert.rational_of(value)

    @classmethod
    def _make(cls, value):
        """Wrap a Fraction without any checks."""
        instance = cls.__new__(cls)
        instance._value = value
        return instance

    def __repr__(self):
        return "mpq({},{})".format(
            convert.integer_digits(self._value.numerator),
            convert.integer_digits(self._value.denominator),
        )

    def __str__(self):
        if self._value.denominator == 1:
            return convert.integer_digits(self._value.numerator)
        return "{}/{}".format(
            convert.integer_digits(self._value.numerator),
            convert.integer_digits(self._value.denominator),
        )

    def __format__(self, format_spec):
        """Fill, align and width, e.g. format(mpq(3, 4), '>8') == '     3/4'"""
        return format(str(self), format_spec)

    def __hash__(self):
        return hash(self._value)

    def __bool__(self):
        return self._value != 0

    def __float__(self):
        return float(self._value)

    def __complex__(self):
        return complex(float(self._value))

    def __trunc__(self):
        return mpz._make(math.trunc(self._value))

    def __floor__(self):
        return mpz._make(math.floor(self._value))

    def __ceil__(self):
        return mpz._make(math.ceil(self._value))

    def __round__(self, ndigits=None):
        if ndigits is None:
            return mpz._make(round(self._value))
        return mpq._make(round(self._value, ndigits))

    def as_integer_ratio(self):
        return mpz._make(self._value.numerator), mpz._make(self._value.denominator)

    @property
    def numerator(self):
        return mpz._make(self._value.numerator)

    @property
    def denominator(self):
        return mpz._make(self._value.denominator)

    @property
    def real(self):
        return mpq._make(self._value)

    @property
    def imag(self):
        return mpz._make(0)

    def conjugate(self):
        return mpq._make(self._value)


_FORMAT_PATTERN = re.compile(r'''
    ^
    (?:(?P<fill>.)?(?P<align>[<>=^]))?
    (?P<sign>[-+ ])?
    (?P<width>\d+)?
    (?:\.(?P<precision>\d+))?
    (?P<round>[UDYZN])?
    (?P<type>[eEfFgG%])?
    $
''', re.VERBOSE)

_DECIMAL_ROUNDING = {
    'U': decimal.ROUND_CEILING,
    'D': decimal.ROUND_FLOOR,
    'Y': decimal.ROUND_UP,
    'Z': decimal.ROUND_DOWN,
    'N': decimal.ROUND_HALF_EVEN,
}

_DECIMAL_ROUNDING_FROM_CONTEXT = {
    RoundToNearest: 'N',
    RoundToZero: 'Z',
    RoundUp: 'U',
    RoundDown: 'D',
    RoundAwayZero: 'Y',
}


def _check_precision(precision, name='precision'):
    if isinstance(precision, bool) or not isinstance(precision, int):
        raise TypeError("{} must be an int, not {}".format(name, convert.type_name(precision)))
    if not PREC_MIN <= precision <= PREC_MAX:
        raise ValueError("invalid value for {}: {}".format(name, precision))
    return precision


class mpfr(Number, numbers.Real):
    """
    Binary floating point number with its own precision in bits.

        mpfr(1.5)
        mpfr('1.5', 10)              10 bits of precision
        mpfr('ff.8', base=16)
        mpfr(mpq(1, 3))              rounded once, in the context rounding mode
        mpfr('inf'), mpfr('nan')

    precision=0 means the precision of the context.
    rc is the ternary rounding result of creating the value:
    negative if it is below the exact value, 0 if exact, positive if above.
    """
    __slots__ = ('_mpf', '_prec', '_rc')
    _mpnum_kind = Kind.REAL

    def __init__(self, value=0, precision=0, base=10, context=None):
        context = resolve(context)
        if precision == 0:
            precision = context.precision
        precision = _check_precision(precision)
        if isinstance(value, str):
            try:
                the_kernel = convert.real_kernel(value, base)
            except ValueError as e:
                raise self.ConstructorValueError("mpfr({!r}) {}".format(value, e))
        elif classify(value) in (Kind.INTEGER, Kind.RATIONAL, Kind.REAL):
            the_kernel = convert.real_kernel(value)
        else:
            raise self._unsupported(value)
        rounded = floating.evaluate_under(the_kernel, context, precision)
        context.settle(rounded.flags, "mpfr() conversion")
        self._mpf = rounded.value
        self._prec = precision
        self._rc = rounded.rc

    @classmethod
    def _make(cls, raw, precision, rc=0):
        """Wrap a raw mpf value without any checks."""
        instance = cls.__new__(cls)
        instance._mpf = raw
        instance._prec = precision
        instance._rc = rc
        return instance

    @property
    def precision(self):
        return self._prec

    @property
    def rc(self):
        return self._rc

    # Predicates
    # ----------
    def is_nan(self):
        return floating.is_nan(self._mpf)

    def is_infinite(self):
        return floating.is_inf(self._mpf)

    def is_finite(self):
        return floating.is_finite(self._mpf)

    def is_zero(self):
        return floating.is_zero(self._mpf)

    def is_signed(self):
        return floating.is_signed(self._mpf)

    def is_integer(self):
        return floating.is_integer(self._mpf)

    def is_regular(self):
        """Neither zero, NaN nor infinite."""
        return bool(self._mpf[1])

    # Text
    # ----
    def _text(self, digits=None):
        raw = self._mpf
        if floating.is_nan(raw):
            return 'nan'
        if floating.is_inf(raw):
            return '-inf' if floating.is_signed(raw) else 'inf'
        if floating.is_zero(raw):
            return '-0.0' if floating.is_signed(raw) else '0.0'
        return to_str(raw, digits or repr_dps(self._prec))

    def __repr__(self):
        if self._prec == Context.DEFAULT_PRECISION:
            return "mpfr('{}')".format(self._text())
        return "mpfr('{}',{})".format(self._text(), self._prec)

    def __str__(self):
        return self._text()

    def __format__(self, format_spec):
        """
        [[fill]align][sign][width][.precision][rounding][type]

        rounding - U toward +Infinity, D toward -Infinity, Y away from zero, Z toward zero, N nearest
        type     - e E f F g G %

            format(mpfr('2.5'), '.0Uf') == '3'
        """
        if format_spec == '':
            return str(self)
        match = _FORMAT_PATTERN.match(format_spec)
        if match is None:
            raise ValueError("invalid format specifier {!r} for mpfr".format(format_spec))
        parts = match.groupdict()
        alignment = "{}{}".format(
            (parts['fill'] or '') if parts['align'] else '',
            parts['align'] or '',
        )
        if parts['type'] is None and parts['precision'] is None:
            text = str(self)
            if parts['sign'] in ('+', ' ') and not text.startswith('-'):
                text = parts['sign'] + text
            return format(text, alignment + (parts['width'] or ''))
        rounding = parts['round'] or _DECIMAL_ROUNDING_FROM_CONTEXT[resolve(None).round]
        python_spec = "{}{}{}.{}{}".format(
            alignment,
            parts['sign'] or '',
            parts['width'] or '',
            parts['precision'] or '6',
            parts['type'] or 'g',
        )
        if not floating.is_finite(self._mpf) or floating.is_zero(self._mpf):
            return format(float(self), python_spec)
        with decimal.localcontext() as decimal_context:
            decimal_context.rounding = _DECIMAL_ROUNDING[rounding]
            return format(self._exact_decimal(decimal_context), python_spec)

    def _exact_decimal(self, decimal_context):
        """Exact decimal.Decimal of a regular value.  Widens the precision and exponent range of decimal_context to fit."""
        sign, man, exp, bc = self._mpf
        man = int(man)
        decimal_context.Emax = decimal.MAX_EMAX
        decimal_context.Emin = decimal.MIN_EMIN
        if exp >= 0:
            value = decimal.Decimal(man << exp)
        else:
            scaled = man * 5 ** -exp
            # man * 5**-exp has at most this many decimal digits.
            digits = int(int(bc) * math.log10(2) + -exp * math.log10(5)) + 1
            decimal_context.prec = max(decimal_context.prec, digits + 2)
            value = decimal.Decimal(scaled).scaleb(exp)
        return -value if sign else value

    # Conversions
    # -----------
    def __hash__(self):
        return mpf_hash(floating.plain(self._mpf))

    def __bool__(self):
        return not floating.is_zero(self._mpf)

    def __float__(self):
        raw = self._mpf
        if floating.is_zero(raw):
            return -0.0 if floating.is_signed(raw) else 0.0
        return to_float(raw, rnd='n')

    def __complex__(self):
        return complex(float(self))

    def __int__(self):
        """Truncate toward zero, like int(float)."""
        try:
            return convert.integer_from_raw(self._mpf)
        except OverflowError as e:
            raise self.IntOverflowError(str(e))

    def _integer(self, rounding):
        try:
            return mpz._make(convert.integer_from_raw(self._mpf, rounding))
        except OverflowError as e:
            raise self.IntOverflowError(str(e))

    def __trunc__(self):
        return self._integer(RoundToZero)

    def __floor__(self):
        return self._integer(RoundDown)

    def __ceil__(self):
        return self._integer(RoundUp)

    def __round__(self, ndigits=None):
        """Round half to even.  With ndigits, an mpfr of the same precision."""
        if ndigits is None:
            return self._integer(RoundToNearest)
        if not self.is_finite():
            return self
        return mpfr(round(convert.rational_of(self), ndigits), self._prec)

    def as_integer_ratio(self):
        fraction = convert.rational_of(self)
        return mpz._make(fraction.numerator), mpz._make(fraction.denominator)

    def as_mantissa_exp(self):
        """(mantissa, exponent) with self == mantissa * 2**exponent"""
        if not self.is_finite():
            convert.rational_of(self)
        sign, man, exp, bc = self._mpf
        man = int(man)
        return mpz._make(-man if sign else man), mpz._make(int(exp) if man else 0)

    # Complex view
    # ------------
    @property
    def real(self):
        return self

    @property
    def imag(self):
        return mpfr._make(floating.fzero, self._prec)

    def conjugate(self):
        return self


class mpc(Number, numbers.Complex):
    """
    Complex number with mpfr parts.

        mpc(1, 2)
        mpc(1+2j)
        mpc('1.5-2j')
        mpc('(1.5 -2)')
        mpc(1, 2, precision=(100, 60))

    precision=0 means the context's real_prec and imag_prec.
    """
    __slots__ = ('_re', '_im', '_prec', '_rc')
    _mpnum_kind = Kind.COMPLEX

    def __init__(self, value=0, imag=None, precision=0, base=10, context=None):
        context = resolve(context)
        precision_pair = self._precision_pair(precision, context)
        if isinstance(value, str) or classify(value) != Kind.UNSUPPORTED:
            try:
                kernels = convert.complex_kernels(value, imag, base)
            except ValueError as e:
                raise self.ConstructorValueError("mpc({!r}) {}".format(value, e))
            except TypeError as e:
                raise self.ConstructorTypeError(str(e))
        else:
            raise self._unsupported(value)
        real, imag_part, flags = floating.evaluate_complex(kernels, context, precision_pair)
        context.settle(flags, "mpc() conversion")
        self._re = real.value
        self._im = imag_part.value
        self._prec = precision_pair
        self._rc = (real.rc, imag_part.rc)

    @staticmethod
    def _precision_pair(precision, context):
        if precision == 0:
            return context.effective_real_prec, context.effective_imag_prec
        if isinstance(precision, tuple):
            if len(precision) != 2:
                raise ValueError("precision for mpc must be an int or a pair of ints")
            return (
                _check_precision(precision[0] or context.effective_real_prec, 'real precision'),
                _check_precision(precision[1] or context.effective_imag_prec, 'imaginary precision'),
            )
        precision = _check_precision(precision)
        return precision, precision

    @classmethod
    def _make(cls, real, imag, precision_pair, rc_pair=(0, 0)):
        """Wrap a pair of raw mpf values without any checks."""
        instance = cls.__new__(cls)
        instance._re = real
        instance._im = imag
        instance._prec = precision_pair
        instance._rc = rc_pair
        return instance

    @property
    def precision(self):
        return self._prec

    @property
    def rc(self):
        return self._rc

    @property
    def real(self):
        return mpfr._make(self._re, self._prec[0], self._rc[0])

    @property
    def imag(self):
        return mpfr._make(self._im, self._prec[1], self._rc[1])

    def conjugate(self):
        return mpc._make(self._re, floating.negate(self._im), self._prec, (self._rc[0], -self._rc[1]))

    def is_nan(self):
        return floating.is_nan(self._re) or floating.is_nan(self._im)

    def is_infinite(self):
        return floating.is_inf(self._re) or floating.is_inf(self._im)

    def is_finite(self):
        return floating.is_finite(self._re) and floating.is_finite(self._im)

    def is_zero(self):
        return floating.is_zero(self._re) and floating.is_zero(self._im)

    def __hash__(self):
        return mpc_hash((floating.plain(self._re), floating.plain(self._im)))

    def __bool__(self):
        return not self.is_zero()

    def __complex__(self):
        return complex(float(self.real), float(self.imag))

    def _text(self, real_text, imag_text):
        if not imag_text.startswith('-'):
            imag_text = '+' + imag_text
        return "{}{}j".format(real_text, imag_text)

    def __str__(self):
        return self._text(str(self.real), str(self.imag))

    def __repr__(self):
        default = Context.DEFAULT_PRECISION
        if self._prec == (default, default):
            return "mpc('{}')".format(self)
        return "mpc('{}',({},{}))".format(self, self._prec[0], self._prec[1])

    def __format__(self, format_spec):
        """Each part formatted as an mpfr, e.g. format(mpc(1, 2), '.2f') == '1.00+2.00j'"""
        if format_spec == '':
            return str(self)
        return self._text(format(self.real, format_spec), format(self.imag, format_spec))

