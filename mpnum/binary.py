"""
Portable binary form of mpz, xmpz, mpq, mpfr, mpc.  Also what pickling stores.

    assert from_binary(to_binary(mpfr('1.5', 10))).precision == 10

Byte 0 is the type code, see TypeCode.  Magnitudes are little-endian base-256.

    mpz, xmpz   code, sign, magnitude
    mpq         code, sign, numerator length (8 bytes), numerator, denominator
    mpfr        code, flags, precision (8 bytes), rc (1 byte), exponent (8 bytes), mantissa
    mpc         code, real length (8 bytes), real mpfr, imaginary mpfr

sign is 0 for zero, 1 positive, 2 negative.
mpfr flags:  low bits are the value's Special code, 0x80 means negative.
Only a regular mpfr carries the exponent and mantissa.
"""

import fractions
import struct

from mpmath.libmp import fnan, finf, fninf, from_man_exp

from . import floating, number


class BinaryFormatError(ValueError):
    """e.g. from_binary(b'') or from_binary(b'\\x09')"""


class TypeCode(object):
    MPZ = 1
    XMPZ = 2
    MPQ = 3
    MPFR = 4
    MPC = 5


class Sign(object):
    ZERO = 0
    POSITIVE = 1
    NEGATIVE = 2


class Special(object):
    ZERO = 0
    REGULAR = 1
    INFINITE = 2
    NAN = 3
    MASK = 0x0F
    NEGATIVE = 0x80


_COUNT = struct.Struct('<Q')
_RC = struct.Struct('<b')
_EXPONENT = struct.Struct('<q')


# Integers
# --------
def pack_integer(the_integer):
    """
    Magnitude of an integer as little-endian base-256.  Minimum length, empty for zero.

        assert b'\xAA\x00\x01' == pack_integer(65706)
    """
    magnitude = abs(the_integer)
    return magnitude.to_bytes((magnitude.bit_length() + 7) // 8, 'little')
assert b'' == pack_integer(0)
assert b'\xAA\x00\x01' == pack_integer(65706)
assert b'\xFF' == pack_integer(-255)


def unpack_integer(binary_string):
    """Inverse of pack_integer(), always non-negative."""
    return int.from_bytes(binary_string, 'little')
assert 65706 == unpack_integer(b'\xAA\x00\x01')
assert 0 == unpack_integer(b'')


def sign_code(n):
    if n == 0:
        return Sign.ZERO
    return Sign.NEGATIVE if n < 0 else Sign.POSITIVE


def _signed(sign, magnitude):
    if sign == Sign.ZERO:
        if magnitude != 0:
            raise BinaryFormatError("zero sign with a nonzero magnitude")
        return 0
    if sign == Sign.POSITIVE:
        return magnitude
    if sign == Sign.NEGATIVE:
        return -magnitude
    raise BinaryFormatError("unknown sign code {}".format(sign))


def _count(data, offset):
    try:
        return _COUNT.unpack_from(data, offset)[0]
    except struct.error as e:
        raise BinaryFormatError("truncated length at byte {}: {}".format(offset, e))


# Encoding
# --------
def _integer_binary(code, n):
    return bytes((code, sign_code(n))) + pack_integer(n)


def _rational_binary(fraction):
    numerator = pack_integer(fraction.numerator)
    return b''.join((
        bytes((TypeCode.MPQ, sign_code(fraction.numerator))),
        _COUNT.pack(len(numerator)),
        numerator,
        pack_integer(fraction.denominator),
    ))


def _ternary(rc):
    return (rc > 0) - (rc < 0)


def _real_binary(raw, precision, rc):
    flags = Special.NEGATIVE if floating.is_signed(raw) else 0
    if floating.is_nan(raw):
        flags = Special.NAN
    elif floating.is_inf(raw):
        flags |= Special.INFINITE
    elif floating.is_zero(raw):
        flags |= Special.ZERO
    else:
        flags |= Special.REGULAR
    header = bytes((TypeCode.MPFR, flags)) + _COUNT.pack(precision) + _RC.pack(_ternary(rc))
    if flags & Special.MASK != Special.REGULAR:
        return header
    sign, man, exp, bc = raw
    return header + _EXPONENT.pack(exp) + pack_integer(int(man))


def to_binary(x):
    """Bytes for an mpz, xmpz, mpq, mpfr or mpc.  Anything else is a TypeError."""
    if isinstance(x, number.xmpz):
        return _integer_binary(TypeCode.XMPZ, x._value)
    if isinstance(x, number.mpz):
        return _integer_binary(TypeCode.MPZ, x._value)
    if isinstance(x, number.mpq):
        return _rational_binary(x._value)
    if isinstance(x, number.mpfr):
        return _real_binary(x._mpf, x._prec, x._rc)
    if isinstance(x, number.mpc):
        real = _real_binary(x._re, x._prec[0], x._rc[0])
        imag = _real_binary(x._im, x._prec[1], x._rc[1])
        return bytes((TypeCode.MPC,)) + _COUNT.pack(len(real)) + real + imag
    raise TypeError("to_binary() requires an mpz, xmpz, mpq, mpfr or mpc, not {}".format(
        type(x).__name__,
    ))


# Decoding
# --------
def _integer_from(data):
    if len(data) < 2:
        raise BinaryFormatError("integer needs at least 2 bytes, not {}".format(len(data)))
    return _signed(data[1], unpack_integer(data[2:]))


def _rational_from(data):
    if len(data) < 2:
        raise BinaryFormatError("rational needs at least 2 bytes, not {}".format(len(data)))
    length = _count(data, 2)
    start = 2 + _COUNT.size
    numerator = _signed(data[1], unpack_integer(data[start:start + length]))
    denominator = unpack_integer(data[start + length:])
    if start + length > len(data) or denominator == 0:
        raise BinaryFormatError("rational is missing its denominator")
    return number.mpq._make(fractions.Fraction(numerator, denominator))


def _real_parts(data):
    """(raw, precision, rc) from mpfr bytes."""
    if len(data) < 2 + _COUNT.size + _RC.size or data[0] != TypeCode.MPFR:
        raise BinaryFormatError("not an mpfr:  {!r}".format(data[:2]))
    flags = data[1]
    negative = bool(flags & Special.NEGATIVE)
    special = flags & Special.MASK
    precision = _count(data, 2)
    rc = _RC.unpack_from(data, 2 + _COUNT.size)[0]
    body = 2 + _COUNT.size + _RC.size
    if special == Special.ZERO:
        raw = floating.signed_zero(negative)
    elif special == Special.INFINITE:
        raw = fninf if negative else finf
    elif special == Special.NAN:
        raw = fnan
    elif special == Special.REGULAR:
        try:
            exp = _EXPONENT.unpack_from(data, body)[0]
        except struct.error as e:
            raise BinaryFormatError("mpfr is missing its exponent: {}".format(e))
        man = unpack_integer(data[body + _EXPONENT.size:])
        if man == 0:
            raise BinaryFormatError("regular mpfr with a zero mantissa")
        raw = from_man_exp(-man if negative else man, exp)
    else:
        raise BinaryFormatError("unknown mpfr flags {:#04x}".format(flags))
    if precision < 1:
        raise BinaryFormatError("mpfr precision {} is too small".format(precision))
    return raw, precision, rc


def _complex_from(data):
    length = _count(data, 1)
    start = 1 + _COUNT.size
    if start + length > len(data):
        raise BinaryFormatError("mpc real part is truncated")
    real, real_precision, real_rc = _real_parts(data[start:start + length])
    imag, imag_precision, imag_rc = _real_parts(data[start + length:])
    return number.mpc._make(real, imag, (real_precision, imag_precision), (real_rc, imag_rc))


def from_binary(data):
    """
    The mpz, xmpz, mpq, mpfr or mpc that to_binary() made these bytes from.

    Bits and precision survive exactly, so does the rc of the value.
    """
    if not isinstance(data, (bytes, bytearray, memoryview)):
        raise TypeError("from_binary() requires bytes, not {}".format(type(data).__name__))
    data = bytes(data)
    if not data:
        raise BinaryFormatError("from_binary() of empty bytes")
    code = data[0]
    if code == TypeCode.MPZ:
        return number.mpz._make(_integer_from(data))
    if code == TypeCode.XMPZ:
        return number.xmpz._make(_integer_from(data))
    if code == TypeCode.MPQ:
        return _rational_from(data)
    if code == TypeCode.MPFR:
        return number.mpfr._make(*_real_parts(data))
    if code == TypeCode.MPC:
        return _complex_from(data)
    raise BinaryFormatError("unknown type code {}".format(code))
