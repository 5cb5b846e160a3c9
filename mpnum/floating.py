"""
Correctly rounded Real and Complex primitives on raw mpmath values.

A raw value is an mpmath.libmp tuple (sign, man, exp, bc).  The backend has no
negative zero, so this module adds one:  fnzero == (1, 0, 0, 0).  Every value
handed back to the backend goes through plain() first.

Each primitive is described by a Kernel:  a function op(prec, rnd) computing
the result rounded in one step, plus any flags known before rounding
(e.g. divzero).  evaluate() runs the kernel under a context and returns

    Rounded(value, rc, flags)

    value - the raw result, after exponent range clamping and subnormalization
    rc    - ternary rounding result:  negative if value is below the exact result,
            0 if exact, positive if above
    flags - frozenset of Flag names the operation raised

Nothing here touches a context's sticky flags.  Merging is the caller's job.
"""

import collections
import fractions
import math

from mpmath.libmp import (
    bitcount,
    fnan,
    finf,
    fninf,
    fone,
    from_float,
    from_int,
    from_man_exp,
    from_rational,
    fzero,
    mpc_cos,
    mpc_exp,
    mpc_log,
    mpc_pow,
    mpc_pow_int,
    mpc_sin,
    mpc_sqrt,
    mpf_add,
    mpf_cmp,
    mpf_cos,
    mpf_div,
    mpf_exp,
    mpf_log,
    mpf_mod,
    mpf_mul,
    mpf_mul_int,
    mpf_neg,
    mpf_pos,
    mpf_pow,
    mpf_pow_int,
    mpf_rdiv_int,
    mpf_sin,
    mpf_sqrt,
    round_ceiling,
    round_down,
    round_floor,
    round_nearest,
    round_up,
)

from .context import (
    Flag,
    RoundAwayZero,
    RoundDown,
    RoundToNearest,
    RoundToZero,
    RoundUp,
)
from .kind import mpf_exponent


LETTER_FROM_ROUNDING = {
    RoundToNearest: round_nearest,
    RoundToZero: round_down,
    RoundUp: round_ceiling,
    RoundDown: round_floor,
    RoundAwayZero: round_up,
}


fnzero = (1, 0, 0, 0)
assert fnzero != fzero
assert fnzero[1:] == fzero[1:]


Rounded = collections.namedtuple('Rounded', ('value', 'rc', 'flags'))
Kernel = collections.namedtuple('Kernel', ('op', 'flags'))


def kernel(op, *flags):
    return Kernel(op, frozenset(flags))


# Raw value predicates
# --------------------
def is_nan(x):
    return x == fnan


def is_inf(x):
    return x == finf or x == fninf


def is_special(x):
    """NaN or an infinity."""
    return not x[1] and x[2] != 0


def is_zero(x):
    return not x[1] and x[2] == 0


def is_signed(x):
    """Sign bit, set for negative values including -0 and -inf.  NaN is unsigned."""
    return x[0] == 1


def is_finite(x):
    return not is_special(x)


def is_integer(x):
    if is_special(x):
        return False
    return is_zero(x) or x[2] >= 0


def plain(x):
    """The same value the backend understands:  -0 becomes 0."""
    return fzero if x == fnzero else x


def signed_zero(negative):
    return fnzero if negative else fzero


def negate(x):
    """Exact negation, including of zeros."""
    if x == fzero:
        return fnzero
    if x == fnzero:
        return fzero
    return mpf_neg(x)


def absolute(x):
    if is_zero(x):
        return fzero
    if x == fninf:
        return finf
    if is_nan(x):
        return x
    return (0,) + tuple(x[1:])


def to_fraction(x):
    """Exact value of a finite raw value."""
    sign, man, exp, bc = x
    if is_special(x):
        raise ValueError("no exact value for NaN or infinity")
    man = int(man)
    if sign:
        man = -man
    if exp >= 0:
        return fractions.Fraction(man << exp)
    return fractions.Fraction(man, 1 << -exp)


def from_fraction_exact(fraction):
    """Raw value of a Fraction whose denominator is a power of two, else None."""
    denominator = fraction.denominator
    if denominator & (denominator - 1):
        return None
    return from_man_exp(fraction.numerator, 1 - bitcount(denominator))


def from_float_signed(value):
    """Exact raw value of a Python float, keeping the sign of zero."""
    if value == 0.0:
        return signed_zero(math.copysign(1.0, value) < 0)
    return from_float(value, 53, round_nearest)


def compare(x, y):
    """
    Order two raw values.  -1, 0, +1.  NaN compares as None.

    -0 and +0 are equal.
    """
    if is_nan(x) or is_nan(y):
        return None
    return mpf_cmp(plain(x), plain(y))


# Evaluation
# ----------
def _round(op, prec, rnd):
    """Compute op and its ternary value by bracketing with the directed roundings."""
    value = op(prec, rnd)
    if not value[1]:
        return value, 0
    lower = value if rnd == round_floor else op(prec, round_floor)
    upper = value if rnd == round_ceiling else op(prec, round_ceiling)
    if lower == upper:
        return value, 0
    return value, (-1 if value == lower else 1)


def _to_overflow_infinity(negative, rnd):
    if rnd in (round_nearest, round_up):
        return True
    if rnd == round_ceiling:
        return not negative
    if rnd == round_floor:
        return negative
    return False


def check_range(value, rc, prec, rnd, emin, emax):
    """
    Clamp a rounded raw value into [emin, emax].

    Overflow goes to infinity or to the largest finite value, depending on rnd.
    Underflow goes to zero or to the smallest positive value 2**(emin-1).
    Returns (value, rc, flags).
    """
    exponent = mpf_exponent(value)
    if exponent is None or emin <= exponent <= emax:
        return value, rc, ()
    negative = is_signed(value)
    if exponent > emax:
        if _to_overflow_infinity(negative, rnd):
            value = fninf if negative else finf
            rc = -1 if negative else 1
        else:
            value = (int(negative), (1 << prec) - 1, emax - prec, prec)
            rc = 1 if negative else -1
        return value, rc, (Flag.OVERFLOW, Flag.INEXACT)

    if rnd == round_nearest:
        if exponent < emin - 1:
            to_minimum = False
        elif value[1] == 1:
            # Exactly half the minimum.  Round to even (zero) unless already rounded down in magnitude.
            to_minimum = (rc > 0) if negative else (rc < 0)
        else:
            to_minimum = True
    elif rnd == round_up:
        to_minimum = True
    elif rnd == round_ceiling:
        to_minimum = not negative
    elif rnd == round_floor:
        to_minimum = negative
    else:
        to_minimum = False
    if to_minimum:
        value = (int(negative), 1, emin - 1, 1)
        rc = -1 if negative else 1
    else:
        value = signed_zero(negative)
        rc = 1 if negative else -1
    return value, rc, (Flag.UNDERFLOW, Flag.INEXACT)


def evaluate(the_kernel, prec, rounding, emin, emax, subnormalize=False):
    """
    Run a kernel:  compute, clamp, subnormalize.

    prec and rounding are the target precision and rounding mode (RoundToNearest etc).
    """
    rnd = LETTER_FROM_ROUNDING[rounding]
    flags = set(the_kernel.flags)
    value, rc = _round(the_kernel.op, prec, rnd)
    exponent = mpf_exponent(value)
    if subnormalize and exponent is not None and emin <= exponent <= emin + prec - 2:
        value, rc = _round(the_kernel.op, exponent - emin + 1, rnd)
        if rc:
            flags.add(Flag.UNDERFLOW)
    value, rc, range_flags = check_range(value, rc, prec, rnd, emin, emax)
    flags.update(range_flags)
    if rc:
        flags.add(Flag.INEXACT)
    if is_nan(value):
        flags.add(Flag.INVALID)
    return Rounded(value, rc, frozenset(flags))


def evaluate_under(the_kernel, context, prec=None, rounding=None):
    """evaluate() with the exponent range of a context, and its precision and rounding by default."""
    return evaluate(
        the_kernel,
        context.precision if prec is None else prec,
        context.round if rounding is None else rounding,
        context.emin,
        context.emax,
        context.subnormalize,
    )


def evaluate_complex(kernel_pair, context, precision_pair=None):
    """
    Run a (real, imaginary) pair of kernels, each under its own precision and rounding.

    Returns (Rounded real part, Rounded imaginary part, union of the flags).
    """
    if precision_pair is None:
        precision_pair = (context.effective_real_prec, context.effective_imag_prec)
    real_kernel, imag_kernel = kernel_pair
    real = evaluate_under(real_kernel, context, precision_pair[0], context.effective_real_round)
    imag = evaluate_under(imag_kernel, context, precision_pair[1], context.effective_imag_round)
    return real, imag, real.flags | imag.flags


# Kernels for conversions
# -----------------------
def constant(value, *flags):
    """A result known without computation, e.g. a special value."""
    return kernel(lambda prec, rnd: value, *flags)


def copy(x):
    """Round an existing raw value to a new precision."""
    if is_special(x) or is_zero(x):
        return constant(x)
    return kernel(lambda prec, rnd: mpf_pos(x, prec, rnd))


def from_integer(n):
    return kernel(lambda prec, rnd: from_int(n, prec, rnd))


def from_fraction(fraction):
    numerator = fraction.numerator
    denominator = fraction.denominator
    if denominator == 1:
        return from_integer(numerator)
    return kernel(lambda prec, rnd: from_rational(numerator, denominator, prec, rnd))


def from_scaled_integer(significand, base, power):
    """
    significand * base**power, for a nonzero significand and a |power| too big to expand exactly.

    The value is enclosed between directed roundings at a working precision,
    which grows until both ends of the enclosure round to the same result.
    """
    negative = significand < 0
    magnitude = from_int(abs(significand))
    base_raw = from_int(base)

    def enclosure(wp):
        if power >= 0:
            low = mpf_mul(magnitude, mpf_pow_int(base_raw, power, wp, round_floor), wp, round_floor)
            high = mpf_mul(magnitude, mpf_pow_int(base_raw, power, wp, round_ceiling), wp, round_ceiling)
        else:
            low = mpf_div(magnitude, mpf_pow_int(base_raw, -power, wp, round_ceiling), wp, round_floor)
            high = mpf_div(magnitude, mpf_pow_int(base_raw, -power, wp, round_floor), wp, round_ceiling)
        if negative:
            return mpf_neg(high), mpf_neg(low)
        return low, high

    def op(prec, rnd):
        wp = prec + 32
        for _ in range(4):
            low, high = enclosure(wp)
            rounded = mpf_pos(low, prec, rnd)
            if rounded == mpf_pos(high, prec, rnd):
                return rounded
            wp *= 2
        # Exactly representable, or a tie.
        if power >= 0:
            return from_int(significand * base ** power, prec, rnd)
        return from_rational(significand, base ** -power, prec, rnd)
    return kernel(op)


# Kernels for arithmetic
# ----------------------
def _sum_is_negative_zero(s, t, rnd):
    """IEEE 754 sign of an exact zero sum."""
    if is_zero(s) and is_zero(t):
        if rnd == round_floor:
            return is_signed(s) or is_signed(t)
        return is_signed(s) and is_signed(t)
    return rnd == round_floor


def add(s, t):
    def op(prec, rnd):
        value = mpf_add(plain(s), plain(t), prec, rnd)
        if value == fzero:
            return signed_zero(_sum_is_negative_zero(s, t, rnd))
        return value
    return kernel(op)


def sub(s, t):
    return add(s, negate(t))


def add_fraction(s, fraction):
    """s + fraction for a finite raw value s, rounded once."""
    total = to_fraction(s) + fraction
    if total == 0:
        return kernel(lambda prec, rnd: signed_zero(_sum_is_negative_zero(s, fzero, rnd)))
    return from_fraction(total)


def exact_product(s, t):
    """Unrounded product, zero signed."""
    value = mpf_mul(plain(s), plain(t))
    if value == fzero:
        return signed_zero(is_signed(s) != is_signed(t))
    return value


def exact_sum(s, t):
    """Unrounded sum, zero signed as under round to nearest."""
    value = mpf_add(plain(s), plain(t))
    if value == fzero:
        return signed_zero(_sum_is_negative_zero(s, t, round_nearest))
    return value


def mul(s, t):
    negative = is_signed(s) != is_signed(t)

    def op(prec, rnd):
        value = mpf_mul(plain(s), plain(t), prec, rnd)
        return signed_zero(negative) if value == fzero else value
    return kernel(op)


def mul_int(s, n):
    """s * n for a Python int n, without converting n first."""
    if is_special(s) or is_zero(s) or n == 0:
        return mul(s, from_int(n))
    return kernel(lambda prec, rnd: mpf_mul_int(s, n, prec, rnd))


def _division_by_zero(s, t):
    if is_nan(s) or is_zero(s):
        return constant(fnan)
    negative = is_signed(s) != is_signed(t)
    infinity = fninf if negative else finf
    if is_inf(s):
        return constant(infinity)
    return constant(infinity, Flag.DIVZERO)


def div(s, t):
    if is_zero(t):
        return _division_by_zero(s, t)
    negative = is_signed(s) != is_signed(t)

    def op(prec, rnd):
        value = mpf_div(plain(s), plain(t), prec, rnd)
        return signed_zero(negative) if value == fzero else value
    return kernel(op)


def rdiv_int(n, t):
    """n / t for a Python int n."""
    if n == 0 or is_special(t) or is_zero(t):
        return div(from_int(n), t)
    return kernel(lambda prec, rnd: mpf_rdiv_int(n, t, prec, rnd))


def floor_div(s, t):
    """floor(s / t), rounded once."""
    quotient = div(s, t)
    if is_zero(t) or is_special(s) or is_special(t):
        return quotient
    n = (to_fraction(s) / to_fraction(t)).__floor__()
    if n == 0:
        return constant(signed_zero(is_zero(s) and is_signed(s) != is_signed(t)))
    return from_integer(n)


def mod(s, t):
    """
    s - t * floor(s / t), sign following t.

    Modulo zero raises divzero and invalid.  An infinite modulus is invalid too,
    with the result s (or -infinity when t is -infinity).
    """
    if is_zero(t):
        return constant(fnan, Flag.DIVZERO)
    if is_nan(s) or is_nan(t) or is_inf(s):
        return constant(fnan)
    if is_inf(t):
        if is_signed(t):
            return constant(fninf, Flag.INVALID)
        return kernel(copy(s).op, Flag.INVALID)
    negative = is_signed(t)

    def op(prec, rnd):
        value = mpf_pos(mpf_mod(plain(s), plain(t), prec, rnd), prec, rnd)
        return signed_zero(negative) if value == fzero else value
    return kernel(op)


def pos(s):
    return copy(s)


def neg(s):
    if is_special(s) or is_zero(s):
        return constant(negate(s))
    return kernel(lambda prec, rnd: mpf_neg(s, prec, rnd))


def abs_(s):
    return copy(absolute(s))


def pow_int(s, n):
    """s ** n for a Python int n."""
    if n == 0:
        return constant(fone)
    odd = n & 1
    if is_nan(s):
        return constant(fnan)
    if is_zero(s):
        negative = is_signed(s) and odd
        if n < 0:
            return constant(fninf if negative else finf, Flag.DIVZERO)
        return constant(signed_zero(negative))
    if is_inf(s):
        negative = is_signed(s) and odd
        if n < 0:
            return constant(signed_zero(negative))
        return constant(fninf if negative else finf)
    if n == 1:
        return copy(s)
    return kernel(lambda prec, rnd: mpf_pow_int(s, n, prec, rnd))


def power(s, t):
    """s ** t for raw values.  A negative base needs an integer exponent, else NaN."""
    if is_zero(t):
        return constant(fone)
    if s == fone:
        return constant(fone)
    if is_nan(s) or is_nan(t):
        return constant(fnan)
    if is_integer(t):
        return pow_int(s, int(to_fraction(t)))
    if is_inf(t):
        magnitude = compare(absolute(s), fone)
        if magnitude == 0:
            return constant(fone)
        grows = (magnitude > 0) != is_signed(t)
        return constant(finf if grows else fzero)
    # t is finite and not an integer from here on.
    if is_zero(s):
        if is_signed(t):
            return constant(finf, Flag.DIVZERO)
        return constant(fzero)
    if is_inf(s):
        return constant(fzero if is_signed(t) else finf)
    if is_signed(s):
        return constant(fnan)
    return kernel(lambda prec, rnd: mpf_pow(s, t, prec, rnd))


# Kernels for elementary functions
# --------------------------------
def sqrt(s):
    if is_nan(s) or is_zero(s) or s == finf:
        return constant(s)
    if is_signed(s):
        return constant(fnan)
    return kernel(lambda prec, rnd: mpf_sqrt(s, prec, rnd))


def exp(s):
    if is_nan(s) or s == finf:
        return constant(s)
    if s == fninf:
        return constant(fzero)
    if is_zero(s):
        return constant(fone)
    return kernel(lambda prec, rnd: mpf_exp(s, prec, rnd))


def log(s):
    if is_nan(s) or s == finf:
        return constant(s)
    if is_zero(s):
        return constant(fninf, Flag.DIVZERO)
    if is_signed(s):
        return constant(fnan)
    if s == fone:
        return constant(fzero)
    return kernel(lambda prec, rnd: mpf_log(s, prec, rnd))


def sin(s):
    if is_special(s):
        return constant(fnan)
    if is_zero(s):
        return constant(s)
    return kernel(lambda prec, rnd: mpf_sin(s, prec, rnd))


def cos(s):
    if is_special(s):
        return constant(fnan)
    if is_zero(s):
        return constant(fone)
    return kernel(lambda prec, rnd: mpf_cos(s, prec, rnd))


# Complex kernels
# ---------------
# A complex raw value is a pair (re, im) of raw values.
COMPLEX_NAN = (fnan, fnan)


def complex_constant(value, *flags):
    return constant(value[0], *flags), constant(value[1], *flags)


def complex_copy(z):
    return copy(z[0]), copy(z[1])


def complex_add(z, w):
    return add(z[0], w[0]), add(z[1], w[1])


def complex_sub(z, w):
    return sub(z[0], w[0]), sub(z[1], w[1])


def complex_neg(z):
    return neg(z[0]), neg(z[1])


def complex_mul(z, w):
    """(a+bi)(c+di) = (ac-bd) + (ad+bc)i, each part rounded once."""
    a, b = z
    c, d = w
    return (
        sub(exact_product(a, c), exact_product(b, d)),
        add(exact_product(a, d), exact_product(b, c)),
    )


def complex_div(z, w):
    """
    (a+bi)/(c+di) = ((ac+bd) + (bc-ad)i) / (c*c + d*d), each part rounded once.

    Division by a complex zero divides each part by the zero real part.
    """
    a, b = z
    c, d = w
    if is_zero(c) and is_zero(d):
        return div(a, c), div(b, c)
    denominator = exact_sum(exact_product(c, c), exact_product(d, d))
    return (
        div(exact_sum(exact_product(a, c), exact_product(b, d)), denominator),
        div(exact_sum(exact_product(b, c), negate(exact_product(a, d))), denominator),
    )


def _complex_is_zero(z):
    return is_zero(z[0]) and is_zero(z[1])


def _complex_is_special(z):
    return is_special(z[0]) or is_special(z[1])


def _complex_function(function, z, *args):
    """Both parts of a libmpc function, each computed under its own rounding."""
    z = (plain(z[0]), plain(z[1]))

    def part(index):
        def op(prec, rnd):
            return function(z, *(args + (prec, rnd)))[index]
        return kernel(op)
    return part(0), part(1)


def complex_pow_int(z, n):
    if n == 0:
        return complex_constant((fone, fzero))
    if _complex_is_special(z):
        return complex_constant(COMPLEX_NAN)
    if _complex_is_zero(z):
        if n < 0:
            return complex_constant((finf, fzero), Flag.DIVZERO)
        return complex_constant((fzero, fzero))
    if n == 1:
        return complex_copy(z)
    return _complex_function(mpc_pow_int, z, n)


def complex_pow(z, w):
    if _complex_is_zero(w):
        return complex_constant((fone, fzero))
    if _complex_is_special(z) or _complex_is_special(w):
        return complex_constant(COMPLEX_NAN)
    if is_zero(w[1]) and is_integer(w[0]):
        return complex_pow_int(z, int(to_fraction(w[0])))
    if _complex_is_zero(z):
        if is_zero(w[1]) and not is_signed(w[0]):
            return complex_constant((fzero, fzero))
        return complex_constant(COMPLEX_NAN)
    w = (plain(w[0]), plain(w[1]))
    return _complex_function(mpc_pow, z, w)


def complex_sqrt(z):
    if _complex_is_special(z):
        return complex_constant(COMPLEX_NAN)
    if _complex_is_zero(z):
        return complex_constant((fzero, z[1]))
    return _complex_function(mpc_sqrt, z)


def complex_exp(z):
    if _complex_is_special(z):
        return complex_constant(COMPLEX_NAN)
    if _complex_is_zero(z):
        return complex_constant((fone, z[1]))
    return _complex_function(mpc_exp, z)


def complex_log(z):
    if _complex_is_special(z):
        return complex_constant(COMPLEX_NAN)
    if _complex_is_zero(z):
        return complex_constant((fninf, fzero), Flag.DIVZERO)
    return _complex_function(mpc_log, z)


def complex_sin(z):
    if _complex_is_special(z):
        return complex_constant(COMPLEX_NAN)
    if _complex_is_zero(z):
        return complex_constant(z)
    return _complex_function(mpc_sin, z)


def complex_cos(z):
    if _complex_is_special(z):
        return complex_constant(COMPLEX_NAN)
    if _complex_is_zero(z):
        return complex_constant((fone, signed_zero(is_signed(z[0]) == is_signed(z[1]))))
    return _complex_function(mpc_cos, z)

