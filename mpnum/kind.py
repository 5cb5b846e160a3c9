"""
Operand classification for the numeric tower.

Every operand of every operation is first sorted into one of four kinds.
The kinds form a total order, and a binary operation is carried out in
the larger of its two operand kinds:

    INTEGER < RATIONAL < REAL < COMPLEX

The module's own types announce their kind through a class attribute.
Foreign types are recognized by what they can do (numerator and
denominator accessors, decimal predicates, conversion hooks), never by
the name of their type.
"""

import numbers


class Kind(object):
    """
    Numeric kind codes.  Larger codes are richer kinds.

    Kind.name_from_code - dictionary translating each code to its name
        {Kind.INTEGER: 'INTEGER', ...}
    Kind.ascending_codes - codes of the supported kinds in promotion order
        [Kind.INTEGER, Kind.RATIONAL, Kind.REAL, Kind.COMPLEX]
    """
    UNSUPPORTED = 0
    INTEGER     = 1
    RATIONAL    = 2
    REAL        = 3
    COMPLEX     = 4

    name_from_code = None
    ascending_codes = None

    @classmethod
    def internal_setup(cls):
        """Initialize Kind properties after the Kind class is otherwise defined."""
        cls.name_from_code = { getattr(cls, attr): attr for attr in dir(cls) if attr.isupper() }
        cls.ascending_codes = sorted(code for code in cls.name_from_code if code != cls.UNSUPPORTED)


Kind.internal_setup()
assert Kind.name_from_code[Kind.REAL] == 'REAL'
assert Kind.ascending_codes[0] == Kind.INTEGER
assert Kind.ascending_codes[-1] == Kind.COMPLEX


NATIVE_KIND_ATTRIBUTE = '_mpnum_kind'


def native_kind(value):
    """Kind declared by one of this package's own types, or None for a foreign value."""
    return getattr(type(value), NATIVE_KIND_ATTRIBUTE, None)


def is_native(value):
    return native_kind(value) is not None


def is_rational_like(value):
    """Does it expose exact numerator and denominator accessors?"""
    return hasattr(value, 'numerator') and hasattr(value, 'denominator')


_DECIMAL_PREDICATES = ('is_nan', 'is_infinite', 'is_signed', 'is_zero', 'as_integer_ratio')


def is_decimal_like(value):
    """
    Does it behave like decimal.Decimal?

    A decimal-like value can report its special states and hand over its
    exact value as an integer ratio.  That is all the conversion layer needs.
    """
    return all(callable(getattr(value, predicate, None)) for predicate in _DECIMAL_PREDICATES)


def classify(value):
    """
    Report the numeric kind of a value.

    The declared type wins over the mathematical value:  mpq(4, 2) is
    RATIONAL even though it is a whole number.
    """
    declared = native_kind(value)
    if declared is not None:
        return declared
    if isinstance(value, bool) or isinstance(value, int):
        return Kind.INTEGER
    if isinstance(value, float):
        return Kind.REAL
    if isinstance(value, complex):
        return Kind.COMPLEX
    if hasattr(value, '__mpz__') or isinstance(value, numbers.Integral):
        return Kind.INTEGER
    if hasattr(value, '__mpq__') or isinstance(value, numbers.Rational):
        return Kind.RATIONAL
    if hasattr(value, '__mpfr__') or hasattr(value, '_mpf_') or is_decimal_like(value) or isinstance(value, numbers.Real):
        return Kind.REAL
    if hasattr(value, '__mpc__') or hasattr(value, '_mpc_') or isinstance(value, numbers.Complex):
        return Kind.COMPLEX
    if is_rational_like(value) and not isinstance(value, (str, bytes)):
        return Kind.RATIONAL
    return Kind.UNSUPPORTED


def result_kind(left, right):
    """
    Promoted kind of a binary operation, or UNSUPPORTED.

    assert Kind.RATIONAL == result_kind(7, fractions.Fraction(1, 2))
    """
    left_kind = classify(left)
    right_kind = classify(right)
    if left_kind == Kind.UNSUPPORTED or right_kind == Kind.UNSUPPORTED:
        return Kind.UNSUPPORTED
    return max(left_kind, right_kind)


def mpf_exponent(mpf):
    """
    Exponent of a raw mpf value, normalized so the significand is in [0.5, 1).

    Zero and special values have no such exponent, return None.
    """
    sign, man, exp, bc = mpf
    if not man:
        return None
    return exp + bc


def _mpf_in_range(mpf, context):
    exponent = mpf_exponent(mpf)
    return exponent is None or context.emin <= exponent <= context.emax


def is_native_and_range_valid(value, context):
    """
    Is this one of our own Real or Complex values, still inside the exponent range of context?

    A value created under a wider context may fall outside a narrower one.
    Such values must be re-clamped by the conversion layer before they are trusted.
    """
    declared = native_kind(value)
    if declared == Kind.REAL:
        return _mpf_in_range(value._mpf, context)
    if declared == Kind.COMPLEX:
        return _mpf_in_range(value._re, context) and _mpf_in_range(value._im, context)
    return False
