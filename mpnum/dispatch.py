"""
Operation dispatcher:  route each arithmetic primitive to a path fitting its operand kinds.

A binary operation runs in the promoted kind of its operands (see kind.py).
Within the Real kind the paths are tried cheapest first:

    1. both operands mpfr, both inside the context's exponent range
    2. an mpfr with a Python int or float, using dedicated backend entry points
    3. a Rational or decimal operand, computed exactly then rounded once
    4. anything else Real, converted exactly (or clamped) then computed
    5. NotImplemented, so Python can try the reflected operation

Operator methods get NotImplemented for unsupported operands.  The named
functions (add(), sub(), ...) raise OperandTypeError instead.

Every Real or Complex result goes through the same finish:  evaluate the
kernel, merge the flags into the context, raise the first trapped flag.
"""

import fractions
import operator

from mpmath.libmp import from_int, from_rational, fzero, round_nearest

from . import convert, floating, number
from .context import (
    CompareError,
    DivisionByZeroError,
    Flag,
    OperandTypeError,
    resolve,
)
from .kind import (
    Kind,
    classify,
    is_native_and_range_valid,
    native_kind,
    result_kind,
)


OPERATION_NAMES = {
    operator.__add__: 'addition',
    operator.__sub__: 'subtraction',
    operator.__mul__: 'multiplication',
    operator.__truediv__: 'division',
    operator.__floordiv__: 'floor division',
    operator.__mod__: 'modulo',
    divmod: 'divmod',
    operator.__pow__: 'power',
    operator.__neg__: 'negation',
    operator.__pos__: 'plus',
    operator.__abs__: 'absolute value',
}

GUARD_BITS = 64


def _operand_names(x, y=None):
    if y is None:
        return convert.type_name(x)
    return "{} and {}".format(convert.type_name(x), convert.type_name(y))


# Finishing
# ---------
def _finish_real(the_kernel, context, flags=frozenset(), op=None):
    rounded = floating.evaluate_under(the_kernel, context)
    context.settle(flags | rounded.flags, "'mpfr' " + OPERATION_NAMES.get(op, 'operation'))
    return number.mpfr._make(rounded.value, context.precision, rounded.rc)


def _finish_complex(kernel_pair, context, flags=frozenset(), op=None):
    real, imag, part_flags = floating.evaluate_complex(kernel_pair, context)
    context.settle(flags | part_flags, "'mpc' " + OPERATION_NAMES.get(op, 'operation'))
    return number.mpc._make(
        real.value,
        imag.value,
        (context.effective_real_prec, context.effective_imag_prec),
        (real.rc, imag.rc),
    )


def _zero_division(op):
    return DivisionByZeroError("{} by zero".format(OPERATION_NAMES[op]))


# Integer
# -------
def _integer_binary(op, x, y, context):
    a = convert.integer_of(x)
    b = convert.integer_of(y)
    if op in (operator.__add__, operator.__sub__, operator.__mul__):
        return number.mpz._make(op(a, b))
    if op is operator.__truediv__:
        if b == 0:
            raise _zero_division(op)
        if context.rational_division:
            return number.mpq._make(fractions.Fraction(a, b))
        return _finish_real(floating.from_fraction(fractions.Fraction(a, b)), context, op=op)
    if op in (operator.__floordiv__, operator.__mod__, divmod):
        if b == 0:
            raise _zero_division(op)
        if op is divmod:
            quotient, remainder = divmod(a, b)
            return number.mpz._make(quotient), number.mpz._make(remainder)
        return number.mpz._make(op(a, b))
    if op is operator.__pow__:
        if b >= 0:
            return number.mpz._make(a ** b)
        return _finish_real(floating.pow_int(from_int(a), b), context, op=op)
    return NotImplemented


_BITWISE = {
    operator.__and__,
    operator.__or__,
    operator.__xor__,
    operator.__lshift__,
    operator.__rshift__,
}


def bitwise(op, x, y):
    """&, |, ^, <<, >> on Integer operands only."""
    if op not in _BITWISE:
        raise ValueError("not a bitwise operator: {!r}".format(op))
    if classify(x) != Kind.INTEGER or classify(y) != Kind.INTEGER:
        return NotImplemented
    return number.mpz._make(op(convert.integer_of(x), convert.integer_of(y)))


# Rational
# --------
def _rational_binary(op, x, y, context):
    a = convert.rational_of(x)
    b = convert.rational_of(y)
    if op in (operator.__add__, operator.__sub__, operator.__mul__):
        return number.mpq._make(op(a, b))
    if op is operator.__truediv__:
        if b == 0:
            raise _zero_division(op)
        return number.mpq._make(a / b)
    if op in (operator.__floordiv__, operator.__mod__, divmod):
        if b == 0:
            raise _zero_division(op)
        quotient, remainder = divmod(a, b)
        if op is operator.__floordiv__:
            return number.mpz._make(quotient)
        if op is operator.__mod__:
            return number.mpq._make(remainder)
        return number.mpz._make(quotient), number.mpq._make(remainder)
    if op is operator.__pow__:
        if b.denominator == 1:
            exponent = b.numerator
            if a == 0 and exponent < 0:
                raise _zero_division(op)
            return number.mpq._make(a ** exponent)
        return _real_binary(op, x, y, context)
    return NotImplemented


# Real
# ----
_REAL_KERNELS = {
    operator.__add__: floating.add,
    operator.__sub__: floating.sub,
    operator.__mul__: floating.mul,
    operator.__truediv__: floating.div,
    operator.__floordiv__: floating.floor_div,
    operator.__mod__: floating.mod,
    operator.__pow__: floating.power,
}


def _approximate(operand, context):
    """Raw value for a Fraction operand, exact when its denominator is a power of two."""
    if not isinstance(operand, fractions.Fraction):
        return operand
    exact = floating.from_fraction_exact(operand)
    if exact is not None:
        return exact
    return from_rational(operand.numerator, operand.denominator, context.precision + GUARD_BITS, round_nearest)


def _is_negative(operand):
    if isinstance(operand, fractions.Fraction):
        return operand < 0
    return floating.is_signed(operand)


def _is_zero(operand):
    if isinstance(operand, fractions.Fraction):
        return operand == 0
    return floating.is_zero(operand)


def _exact_real_kernel(op, s, t):
    """
    Kernel computing op exactly in rational arithmetic, rounding only at the end.

    For a Fraction operand next to a finite raw one.  None when some other path must be taken.
    """
    for operand in (s, t):
        if not isinstance(operand, fractions.Fraction) and floating.is_special(operand):
            return None
    a = s if isinstance(s, fractions.Fraction) else floating.to_fraction(s)
    b = t if isinstance(t, fractions.Fraction) else floating.to_fraction(t)
    if op in (operator.__add__, operator.__sub__):
        total = op(a, b)
        if total != 0:
            return floating.from_fraction(total)
        s_zero = floating.signed_zero(_is_negative(s)) if _is_zero(s) else None
        t_zero = floating.signed_zero(_is_negative(t)) if _is_zero(t) else None
        if s_zero is not None and t_zero is not None:
            return _REAL_KERNELS[op](s_zero, t_zero)
        return floating.sub(floating.fone, floating.fone)
    if op is operator.__mul__:
        product = a * b
        if product == 0:
            return floating.constant(floating.signed_zero(_is_negative(s) != _is_negative(t)))
        return floating.from_fraction(product)
    if b == 0:
        return None
    if op is operator.__truediv__:
        quotient = a / b
        if quotient == 0:
            return floating.constant(floating.signed_zero(_is_negative(s) != _is_negative(t)))
        return floating.from_fraction(quotient)
    if op is operator.__floordiv__:
        quotient = a // b
        if quotient == 0:
            return floating.constant(floating.signed_zero(a == 0 and _is_negative(s) != _is_negative(t)))
        return floating.from_integer(quotient)
    if op is operator.__mod__:
        remainder = a % b
        if remainder == 0:
            return floating.constant(floating.signed_zero(_is_negative(t)))
        return floating.from_fraction(remainder)
    return None


def _real_primitive(op, x, y, context):
    """Step 2:  an in-range mpfr with a Python int, through the backend's int entry points."""
    if op is operator.__mul__:
        if native_kind(x) == Kind.REAL and type(y) is int and is_native_and_range_valid(x, context):
            return floating.mul_int(x._mpf, y)
        if native_kind(y) == Kind.REAL and type(x) is int and is_native_and_range_valid(y, context):
            return floating.mul_int(y._mpf, x)
    if op is operator.__truediv__:
        if native_kind(y) == Kind.REAL and type(x) is int and is_native_and_range_valid(y, context):
            return floating.rdiv_int(x, y._mpf)
    if op is operator.__pow__:
        if native_kind(x) == Kind.REAL and type(y) is int and is_native_and_range_valid(x, context):
            return floating.pow_int(x._mpf, y)
    return None


def _real_kernel(op, x, y, context):
    """Choose the kernel for a Real binary operation.  Returns (kernel, conversion flags)."""
    if (native_kind(x) == Kind.REAL and native_kind(y) == Kind.REAL and
            is_native_and_range_valid(x, context) and is_native_and_range_valid(y, context)):
        return _REAL_KERNELS[op](x._mpf, y._mpf), frozenset()
    fast = _real_primitive(op, x, y, context)
    if fast is not None:
        return fast, frozenset()
    s, s_flags = convert.real_operand(x, context)
    t, t_flags = convert.real_operand(y, context)
    flags = s_flags | t_flags
    if isinstance(s, fractions.Fraction) or isinstance(t, fractions.Fraction):
        exact = _exact_real_kernel(op, s, t)
        if exact is not None:
            return exact, flags
        s = _approximate(s, context)
        t = _approximate(t, context)
    return _REAL_KERNELS[op](s, t), flags


def _real_binary(op, x, y, context):
    if op is divmod:
        return _real_binary(operator.__floordiv__, x, y, context), _real_binary(operator.__mod__, x, y, context)
    if op not in _REAL_KERNELS:
        return NotImplemented
    the_kernel, flags = _real_kernel(op, x, y, context)
    return _finish_real(the_kernel, context, flags, op)


# Complex
# -------
_COMPLEX_KERNELS = {
    operator.__add__: floating.complex_add,
    operator.__sub__: floating.complex_sub,
    operator.__mul__: floating.complex_mul,
    operator.__truediv__: floating.complex_div,
    operator.__pow__: floating.complex_pow,
}


def _complex_binary(op, x, y, context):
    if op not in _COMPLEX_KERNELS:
        return NotImplemented
    z, z_flags = convert.complex_operand(x, context)
    w, w_flags = convert.complex_operand(y, context)
    flags = z_flags | w_flags
    if op is operator.__truediv__ and floating.is_zero(w[0]) and floating.is_zero(w[1]):
        flags |= {Flag.DIVZERO}
    return _finish_complex(_COMPLEX_KERNELS[op](z, w), context, flags, op)


_BINARY_BY_KIND = {
    Kind.INTEGER: _integer_binary,
    Kind.RATIONAL: _rational_binary,
    Kind.REAL: _real_binary,
    Kind.COMPLEX: _complex_binary,
}


def binary(op, x, y, context=None):
    """
    Two-input operator, in the promoted kind of its operands.

    op - operator.__add__, operator.__sub__, operator.__mul__, operator.__truediv__,
         operator.__floordiv__, operator.__mod__, divmod, operator.__pow__
    Returns NotImplemented for unsupported operands.
    """
    kind = result_kind(x, y)
    if kind == Kind.UNSUPPORTED:
        return NotImplemented
    return _BINARY_BY_KIND[kind](op, x, y, resolve(context))


def _named(op, x, y, context):
    result = binary(op, x, y, context)
    if result is NotImplemented:
        raise OperandTypeError("{}() argument type not supported: {}".format(
            OPERATION_NAMES[op],
            _operand_names(x, y),
        ))
    return result


def add(x, y, context=None):
    return _named(operator.__add__, x, y, context)


def sub(x, y, context=None):
    return _named(operator.__sub__, x, y, context)


def mul(x, y, context=None):
    return _named(operator.__mul__, x, y, context)


def div(x, y, context=None):
    """True division.  mpz / mpz is an mpfr, or an mpq with rational_division set."""
    return _named(operator.__truediv__, x, y, context)


def floor_div(x, y, context=None):
    return _named(operator.__floordiv__, x, y, context)


def mod(x, y, context=None):
    return _named(operator.__mod__, x, y, context)


def div_mod(x, y, context=None):
    return _named(divmod, x, y, context)


def power(x, y, modulus=None, context=None):
    """
    x ** y, or pow(x, y, modulus) for Integer operands.

    A negative Integer exponent gives an mpfr.
    """
    if modulus is None:
        return _named(operator.__pow__, x, y, context)
    if not all(classify(operand) == Kind.INTEGER for operand in (x, y, modulus)):
        raise OperandTypeError("pow() with a modulus requires Integer arguments")
    m = convert.integer_of(modulus)
    if m == 0:
        raise ValueError("pow() 3rd argument cannot be 0")
    return number.mpz._make(pow(convert.integer_of(x), convert.integer_of(y), m))


def power_operator(x, y, modulus=None):
    """Back end of __pow__ and __rpow__:  NotImplemented instead of OperandTypeError."""
    if modulus is None:
        return binary(operator.__pow__, x, y)
    if not all(classify(operand) == Kind.INTEGER for operand in (x, y, modulus)):
        return NotImplemented
    return power(x, y, modulus)


# Unary
# -----
_REAL_UNARY = {
    operator.__neg__: floating.neg,
    operator.__pos__: floating.pos,
    operator.__abs__: floating.abs_,
}


def _complex_abs(z):
    """|a+bi| = sqrt(a*a + b*b), rounded once."""
    a, b = z
    if floating.is_inf(a) or floating.is_inf(b):
        return floating.constant(floating.finf)
    if floating.is_nan(a) or floating.is_nan(b):
        return floating.constant(floating.fnan)
    return floating.sqrt(floating.exact_sum(floating.exact_product(a, a), floating.exact_product(b, b)))


def unary(op, x, context=None):
    """One-input operator:  operator.__neg__, operator.__pos__ or operator.__abs__"""
    kind = classify(x)
    if kind == Kind.INTEGER:
        return number.mpz._make(op(convert.integer_of(x)))
    if kind == Kind.RATIONAL:
        return number.mpq._make(op(convert.rational_of(x)))
    if kind == Kind.REAL:
        context = resolve(context)
        s, flags = convert.real_operand(x, context)
        if isinstance(s, fractions.Fraction):
            return _finish_real(floating.from_fraction(op(s)), context, flags, op)
        return _finish_real(_REAL_UNARY[op](s), context, flags, op)
    if kind == Kind.COMPLEX:
        context = resolve(context)
        z, flags = convert.complex_operand(x, context)
        if op is operator.__abs__:
            return _finish_real(_complex_abs(z), context, flags, op)
        if op is operator.__neg__:
            return _finish_complex(floating.complex_neg(z), context, flags, op)
        return _finish_complex(floating.complex_copy(z), context, flags, op)
    return NotImplemented


def _named_unary(op, x, context):
    result = unary(op, x, context)
    if result is NotImplemented:
        raise OperandTypeError("{}() argument type not supported: {}".format(OPERATION_NAMES[op], _operand_names(x)))
    return result


def minus(x, context=None):
    return _named_unary(operator.__neg__, x, context)


def plus(x, context=None):
    """+x, which rounds a Real or Complex value to the context precision."""
    return _named_unary(operator.__pos__, x, context)


def absolute(x, context=None):
    return _named_unary(operator.__abs__, x, context)


# Comparison
# ----------
_ORDERING = {operator.__lt__, operator.__le__, operator.__gt__, operator.__ge__}


def _exact_compare(s, t):
    """
    Order two exact values, each a raw mpf or a Fraction.  -1, 0, +1, or None with NaN.
    """
    if not isinstance(s, fractions.Fraction) and not isinstance(t, fractions.Fraction):
        return floating.compare(s, t)
    for operand, sign in ((s, 1), (t, -1)):
        if not isinstance(operand, fractions.Fraction):
            if floating.is_nan(operand):
                return None
            if floating.is_inf(operand):
                return sign * (-1 if floating.is_signed(operand) else 1)
    a = s if isinstance(s, fractions.Fraction) else floating.to_fraction(s)
    b = t if isinstance(t, fractions.Fraction) else floating.to_fraction(t)
    return (a > b) - (a < b)


def _order(x, y, kind):
    if kind == Kind.INTEGER:
        a = convert.integer_of(x)
        b = convert.integer_of(y)
        return (a > b) - (a < b)
    if kind == Kind.RATIONAL:
        a = convert.rational_of(x)
        b = convert.rational_of(y)
        return (a > b) - (a < b)
    return _exact_compare(convert.real_exact(x), convert.real_exact(y))


def _complex_equal(x, y):
    z = convert.complex_exact(x)
    w = convert.complex_exact(y)
    return _exact_compare(z[0], w[0]) == 0 and _exact_compare(z[1], w[1]) == 0


def _comparison_with_nan(context):
    context = resolve(context)
    context.settle({Flag.ERANGE}, "comparison with NaN")


def richcompare(op, x, y, context=None):
    """
    x op y, exactly, for op in operator.__eq__, __ne__, __lt__, __le__, __gt__, __ge__

    NaN is unequal to everything.  Ordering a NaN raises the erange flag (and
    RangeError under trap_erange) then returns False.  Complex values have no
    order:  CompareError.
    """
    kind = result_kind(x, y)
    if kind == Kind.UNSUPPORTED:
        return NotImplemented
    if kind == Kind.COMPLEX:
        if op in _ORDERING:
            raise CompareError("no ordering relation is defined for complex numbers")
        equal = _complex_equal(x, y)
        return equal if op is operator.__eq__ else not equal
    order = _order(x, y, kind)
    if order is None:
        if op in _ORDERING:
            _comparison_with_nan(context)
            return False
        return op is operator.__ne__
    return op(order, 0)


def cmp(x, y, context=None):
    """
    -1, 0 or +1 as x is less than, equal to, or greater than y.

    A NaN operand raises erange and gives 0.
    """
    kind = result_kind(x, y)
    if kind == Kind.UNSUPPORTED:
        raise OperandTypeError("cmp() argument type not supported: {}".format(_operand_names(x, y)))
    if kind == Kind.COMPLEX:
        raise CompareError("cmp() is not defined for complex numbers")
    order = _order(x, y, kind)
    if order is None:
        _comparison_with_nan(context)
        return 0
    return order


# Elementary functions
# --------------------
_REAL_FUNCTIONS = {
    'sqrt': floating.sqrt,
    'exp': floating.exp,
    'log': floating.log,
    'sin': floating.sin,
    'cos': floating.cos,
}

_COMPLEX_FUNCTIONS = {
    'sqrt': floating.complex_sqrt,
    'exp': floating.complex_exp,
    'log': floating.complex_log,
    'sin': floating.complex_sin,
    'cos': floating.complex_cos,
}

_COMPLEX_FOR_NEGATIVE = ('sqrt', 'log')


def _elementary(name, x, context):
    kind = classify(x)
    if kind == Kind.UNSUPPORTED:
        raise OperandTypeError("{}() argument type not supported: {}".format(name, _operand_names(x)))
    context = resolve(context)
    if kind == Kind.COMPLEX:
        z, flags = convert.complex_operand(x, context)
        return _finish_complex(_COMPLEX_FUNCTIONS[name](z), context, flags)
    s, flags = convert.real_operand(x, context)
    s = _approximate(s, context)
    if (name in _COMPLEX_FOR_NEGATIVE and context.allow_complex and
            floating.is_signed(s) and not floating.is_zero(s)):
        return _finish_complex(_COMPLEX_FUNCTIONS[name]((s, fzero)), context, flags)
    return _finish_real(_REAL_FUNCTIONS[name](s), context, flags)


def sqrt(x, context=None):
    """Square root.  Negative reals give NaN, or an mpc with allow_complex set."""
    return _elementary('sqrt', x, context)


def exp(x, context=None):
    return _elementary('exp', x, context)


def log(x, context=None):
    """Natural logarithm.  log(0) is -Infinity with divzero; negative reals as in sqrt()."""
    return _elementary('log', x, context)


def sin(x, context=None):
    return _elementary('sin', x, context)


def cos(x, context=None):
    return _elementary('cos', x, context)
