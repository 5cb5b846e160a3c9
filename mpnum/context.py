"""
A Context is the ambient configuration every Real and Complex operation consults.

It holds:
 - precision and rounding mode, optionally split per Complex component
 - the exponent range [emin, emax] and whether subnormal results are emulated
 - six sticky flags, set by operations and cleared only by clear_flags()
 - six traps, each turning its flag into an exception

Every operation takes an explicit context=None argument.  Only at that outer
boundary is None replaced by the active context of the calling thread
(or of the whole process, see set_context_scope()).

    with mpnum.local_context(precision=100) as ctx:
        x = mpnum.mpfr(1) / 3
    assert ctx.inexact
"""

import logging
import math
import threading


log = logging.getLogger(__name__)


# Rounding modes
# --------------
RoundToNearest = 0   # ties to even
RoundToZero = 1
RoundUp = 2          # toward +Infinity
RoundDown = 3        # toward -Infinity
RoundAwayZero = 4
Default = -1         # for real_prec, imag_prec, real_round, imag_round:  use precision or round

ROUNDING_MODES = (RoundToNearest, RoundToZero, RoundUp, RoundDown, RoundAwayZero)
ROUNDING_NAMES = {
    RoundToNearest: 'RoundToNearest',
    RoundToZero: 'RoundToZero',
    RoundUp: 'RoundUp',
    RoundDown: 'RoundDown',
    RoundAwayZero: 'RoundAwayZero',
    Default: 'Default',
}


# Limits
# ------
PREC_MIN = 1
PREC_MAX = 2 ** 31 - 257
EMAX_MAX = 2 ** 62 - 1
EMIN_MIN = 1 - 2 ** 62
EMAX_DEFAULT = 2 ** 30 - 1
EMIN_DEFAULT = -EMAX_DEFAULT


def get_max_precision():
    return PREC_MAX


def get_emax_max():
    return EMAX_MAX


def get_emin_min():
    return EMIN_MIN


# Exceptions
# ----------
class OperandTypeError(TypeError):
    """e.g. mpnum.add(mpz(1), 'one') or mpnum.sqrt([])"""


class CompareError(TypeError):
    """e.g. mpc(1, 2) < mpc(1, 3)"""


class ContextError(ValueError):
    """e.g. Context(precision=0) or Context(round=99)"""


class ContextStackError(RuntimeError):
    """e.g. pop() with nothing pushed"""


class ReadOnlyContextError(AttributeError):
    """e.g. DEFAULT_CONTEXT.precision = 100"""


class MpnumError(ArithmeticError):
    """Base of the exceptions raised by traps."""


class RangeError(MpnumError):
    """A result could not be expressed in range, e.g. a comparison with NaN under trap_erange."""


class InexactResultError(MpnumError):
    """A result was rounded, under trap_inexact."""


class OverflowResultError(InexactResultError):
    """A result exceeded emax, under trap_overflow."""


class UnderflowResultError(InexactResultError):
    """A result fell below emin, under trap_underflow."""


class InvalidOperationError(MpnumError, ValueError):
    """A result was NaN, under trap_invalid."""


class DivisionByZeroError(MpnumError, ZeroDivisionError):
    """Division of a finite nonzero value by zero, under trap_divzero, or any exact-kind division by zero."""


class Flag(object):
    """
    Names of the sticky flags.  Each flag has a matching trap.

    Flag.priority - order in which raised flags are checked against traps.
        Only the first trapped flag raises.
    Flag.exception_from_flag - {Flag.OVERFLOW: OverflowResultError, ...}
    Flag.message_from_flag - default exception message for each flag
    """
    UNDERFLOW = 'underflow'
    OVERFLOW = 'overflow'
    INEXACT = 'inexact'
    INVALID = 'invalid'
    DIVZERO = 'divzero'
    ERANGE = 'erange'

    priority = None
    exception_from_flag = None
    message_from_flag = None

    @classmethod
    def internal_setup(cls):
        """Initialize Flag properties after the exceptions are defined."""
        cls.priority = (cls.UNDERFLOW, cls.OVERFLOW, cls.INEXACT, cls.INVALID, cls.DIVZERO, cls.ERANGE)
        cls.exception_from_flag = {
            cls.UNDERFLOW: UnderflowResultError,
            cls.OVERFLOW: OverflowResultError,
            cls.INEXACT: InexactResultError,
            cls.INVALID: InvalidOperationError,
            cls.DIVZERO: DivisionByZeroError,
            cls.ERANGE: RangeError,
        }
        cls.message_from_flag = {
            cls.UNDERFLOW: "underflow",
            cls.OVERFLOW: "overflow",
            cls.INEXACT: "inexact result",
            cls.INVALID: "invalid operation",
            cls.DIVZERO: "division by zero",
            cls.ERANGE: "range error",
        }

    @staticmethod
    def trap_name(flag):
        return 'trap_' + flag


Flag.internal_setup()
assert Flag.priority[0] == Flag.UNDERFLOW
assert Flag.exception_from_flag[Flag.DIVZERO] is DivisionByZeroError
assert issubclass(Flag.exception_from_flag[Flag.OVERFLOW], Flag.exception_from_flag[Flag.INEXACT])


def _check_precision(value, name, default_allowed=False):
    if default_allowed and value == Default:
        return Default
    if isinstance(value, bool) or not isinstance(value, int):
        raise ContextError("{} must be an int, not {}".format(name, type(value).__name__))
    if not PREC_MIN <= value <= PREC_MAX:
        raise ContextError("invalid value for {}: {}".format(name, value))
    return value


def _check_round(value, name, default_allowed=False):
    if default_allowed and value == Default:
        return Default
    if value not in ROUNDING_MODES or isinstance(value, bool):
        raise ContextError("invalid value for {}: {!r}".format(name, value))
    return value


def _boolean_property(attribute, doc):
    """Read/write boolean option, refused on a read-only context."""
    private = '_' + attribute

    def getter(self):
        return getattr(self, private)

    def setter(self, value):
        self._check_writable(attribute)
        setattr(self, private, bool(value))

    return property(getter, setter, doc=doc)


class Context(object):
    """
    Precision, rounding, exponent range, sticky flags and traps.

    Options are keyword arguments, all validated:
        Context(precision=100, round=RoundToZero, trap_divzero=True)
    """
    DEFAULT_PRECISION = 53
    DEFAULT_ROUND = RoundToNearest
    DEFAULT_EMIN = EMIN_DEFAULT
    DEFAULT_EMAX = EMAX_DEFAULT

    OPTIONS = (
        'precision', 'real_prec', 'imag_prec',
        'round', 'real_round', 'imag_round',
        'emin', 'emax',
        'subnormalize', 'allow_complex', 'rational_division',
    ) + Flag.priority + tuple(Flag.trap_name(flag) for flag in Flag.priority)

    __slots__ = ('_readonly',) + tuple('_' + option for option in OPTIONS)

    def __init__(self, **kwargs):
        self._readonly = False
        self._precision = self.DEFAULT_PRECISION
        self._real_prec = Default
        self._imag_prec = Default
        self._round = self.DEFAULT_ROUND
        self._real_round = Default
        self._imag_round = Default
        self._emin = self.DEFAULT_EMIN
        self._emax = self.DEFAULT_EMAX
        self._subnormalize = False
        self._allow_complex = False
        self._rational_division = False
        for flag in Flag.priority:
            setattr(self, '_' + flag, False)
            setattr(self, '_' + Flag.trap_name(flag), False)
        self.update(**kwargs)

    def update(self, **kwargs):
        """Set several options at once.  Unknown option names are a TypeError."""
        for name in kwargs:
            if name not in self.OPTIONS:
                raise TypeError("{!r} is not a Context option".format(name))
        for name in self.OPTIONS:
            if name in kwargs:
                setattr(self, name, kwargs[name])

    def _check_writable(self, attribute):
        if self._readonly:
            raise ReadOnlyContextError("cannot set {} of a read-only context".format(attribute))

    @property
    def readonly(self):
        return self._readonly

    # Precision and rounding
    # ----------------------
    @property
    def precision(self):
        return self._precision

    @precision.setter
    def precision(self, value):
        self._check_writable('precision')
        self._precision = _check_precision(value, 'precision')

    @property
    def real_prec(self):
        return self._real_prec

    @real_prec.setter
    def real_prec(self, value):
        self._check_writable('real_prec')
        self._real_prec = _check_precision(value, 'real_prec', default_allowed=True)

    @property
    def imag_prec(self):
        return self._imag_prec

    @imag_prec.setter
    def imag_prec(self, value):
        self._check_writable('imag_prec')
        self._imag_prec = _check_precision(value, 'imag_prec', default_allowed=True)

    @property
    def round(self):
        return self._round

    @round.setter
    def round(self, value):
        self._check_writable('round')
        self._round = _check_round(value, 'round')

    @property
    def real_round(self):
        return self._real_round

    @real_round.setter
    def real_round(self, value):
        self._check_writable('real_round')
        self._real_round = _check_round(value, 'real_round', default_allowed=True)

    @property
    def imag_round(self):
        return self._imag_round

    @imag_round.setter
    def imag_round(self, value):
        self._check_writable('imag_round')
        self._imag_round = _check_round(value, 'imag_round', default_allowed=True)

    @property
    def effective_real_prec(self):
        return self._precision if self._real_prec == Default else self._real_prec

    @property
    def effective_imag_prec(self):
        return self.effective_real_prec if self._imag_prec == Default else self._imag_prec

    @property
    def effective_real_round(self):
        return self._round if self._real_round == Default else self._real_round

    @property
    def effective_imag_round(self):
        return self.effective_real_round if self._imag_round == Default else self._imag_round

    # Exponent range
    # --------------
    @property
    def emin(self):
        return self._emin

    @emin.setter
    def emin(self, value):
        self._check_writable('emin')
        if isinstance(value, bool) or not isinstance(value, int):
            raise ContextError("emin must be an int, not {}".format(type(value).__name__))
        if not EMIN_MIN <= value <= 0:
            raise ContextError("requested minimum exponent is invalid: {}".format(value))
        self._emin = value

    @property
    def emax(self):
        return self._emax

    @emax.setter
    def emax(self, value):
        self._check_writable('emax')
        if isinstance(value, bool) or not isinstance(value, int):
            raise ContextError("emax must be an int, not {}".format(type(value).__name__))
        if not 1 <= value <= EMAX_MAX:
            raise ContextError("requested maximum exponent is invalid: {}".format(value))
        self._emax = value

    subnormalize = _boolean_property('subnormalize', "Emulate IEEE 754 subnormal results below emin + precision - 1.")
    allow_complex = _boolean_property('allow_complex', "sqrt(-1) and log(-1) return mpc instead of NaN.")
    rational_division = _boolean_property('rational_division', "mpz / mpz returns mpq instead of mpfr.")

    underflow = _boolean_property(Flag.UNDERFLOW, "Sticky:  a result was below emin.")
    overflow = _boolean_property(Flag.OVERFLOW, "Sticky:  a result was above emax.")
    inexact = _boolean_property(Flag.INEXACT, "Sticky:  a result was rounded.")
    invalid = _boolean_property(Flag.INVALID, "Sticky:  a result was NaN.")
    divzero = _boolean_property(Flag.DIVZERO, "Sticky:  a finite nonzero value was divided by zero.")
    erange = _boolean_property(Flag.ERANGE, "Sticky:  a comparison involved NaN, or a conversion was out of range.")

    trap_underflow = _boolean_property('trap_underflow', "Raise UnderflowResultError.")
    trap_overflow = _boolean_property('trap_overflow', "Raise OverflowResultError.")
    trap_inexact = _boolean_property('trap_inexact', "Raise InexactResultError.")
    trap_invalid = _boolean_property('trap_invalid', "Raise InvalidOperationError.")
    trap_divzero = _boolean_property('trap_divzero', "Raise DivisionByZeroError.")
    trap_erange = _boolean_property('trap_erange', "Raise RangeError.")

    # Flags and traps
    # ---------------
    def flags(self):
        """Set of the sticky flags now raised, e.g. {'inexact', 'divzero'}"""
        return {flag for flag in Flag.priority if getattr(self, '_' + flag)}

    def traps(self):
        """Set of the flags now trapped."""
        return {flag for flag in Flag.priority if getattr(self, '_' + Flag.trap_name(flag))}

    def clear_flags(self):
        """The only way sticky flags go back to False."""
        self._check_writable('flags')
        for flag in Flag.priority:
            setattr(self, '_' + flag, False)

    def merge(self, flags):
        """Record flags raised by an operation.  Never clears a flag."""
        for flag in flags:
            setattr(self, '_' + flag, True)

    def raise_trapped(self, flags, message=None):
        """Raise the exception of the first trapped flag, in Flag.priority order."""
        for flag in Flag.priority:
            if flag in flags and getattr(self, '_' + Flag.trap_name(flag)):
                exception_class = Flag.exception_from_flag[flag]
                log.debug("trapped %s: %s", flag, message)
                raise exception_class(message or Flag.message_from_flag[flag])

    def settle(self, flags, message=None):
        """Merge, then trap.  The flags stay set even when an exception is raised."""
        if flags:
            self.merge(flags)
            self.raise_trapped(flags, message)

    # Copies
    # ------
    def options(self):
        return {option: getattr(self, option) for option in self.OPTIONS}

    def copy(self):
        """Writable copy, including the current flag state."""
        return Context(**self.options())

    def frozen(self):
        """Read-only copy.  Activating it activates a writable copy instead."""
        other = self.copy()
        other._readonly = True
        return other

    def __eq__(self, other):
        if not isinstance(other, Context):
            return NotImplemented
        return self.options() == other.options()

    def __ne__(self, other):
        eq_result = self.__eq__(other)
        if eq_result is NotImplemented:
            return NotImplemented
        return not eq_result

    __hash__ = None

    def __repr__(self):
        lines = []
        for option in self.OPTIONS:
            value = getattr(self, option)
            if option in ('round', 'real_round', 'imag_round'):
                value = ROUNDING_NAMES[value]
            elif option in ('real_prec', 'imag_prec') and value == Default:
                value = 'Default'
            lines.append("{}={}".format(option, value))
        return "context({})".format(", ".join(lines))

    # with ctx:
    # ---------
    def __enter__(self):
        return push(self)

    def __exit__(self, exc_type, exc_value, traceback):
        pop()
        return False

    # Operations under this context
    # -----------------------------
    def _call(self, name, *args):
        from . import dispatch
        return getattr(dispatch, name)(*args, context=self)

    def add(self, x, y): return self._call('add', x, y)
    def sub(self, x, y): return self._call('sub', x, y)
    def mul(self, x, y): return self._call('mul', x, y)
    def div(self, x, y): return self._call('div', x, y)
    def floor_div(self, x, y): return self._call('floor_div', x, y)
    def mod(self, x, y): return self._call('mod', x, y)
    def div_mod(self, x, y): return self._call('div_mod', x, y)
    def power(self, x, y): return self._call('power', x, y)
    def minus(self, x): return self._call('minus', x)
    def plus(self, x): return self._call('plus', x)
    def absolute(self, x): return self._call('absolute', x)
    def cmp(self, x, y): return self._call('cmp', x, y)
    def sqrt(self, x): return self._call('sqrt', x)
    def exp(self, x): return self._call('exp', x)
    def log(self, x): return self._call('log', x)
    def sin(self, x): return self._call('sin', x)
    def cos(self, x): return self._call('cos', x)


DEFAULT_CONTEXT = Context().frozen()


def context(**kwargs):
    """New context from the defaults, with options applied."""
    return Context(**kwargs)


def ieee(bitwidth, subnormalize=True):
    """
    Context emulating an IEEE 754 binary interchange format.

    16, 32, 64, 128 are the standard widths.  Wider formats must be a multiple of 32.

        assert ieee(64).precision == 53
        assert ieee(64).emax == 1024
    """
    standard = {16: (11, 16), 32: (24, 128), 64: (53, 1024), 128: (113, 16384)}
    if isinstance(bitwidth, bool) or not isinstance(bitwidth, int):
        raise TypeError("ieee() requires an int bitwidth")
    if bitwidth in standard:
        precision, emax = standard[bitwidth]
    elif bitwidth > 128 and bitwidth % 32 == 0:
        precision = bitwidth - int(round(4 * math.log(bitwidth, 2))) + 13
        emax = 1 << (bitwidth - precision - 1)
    else:
        raise ContextError("bitwidth must be 16, 32, 64, 128; or must be greater than 128 and divisible by 32")
    return Context(
        precision=precision,
        emax=emax,
        emin=4 - emax - precision,
        subnormalize=subnormalize,
    )


# Active context
# --------------
class _ThreadScope(threading.local):
    """Each thread gets its own active context and push() stack."""
    def __init__(self):
        super(_ThreadScope, self).__init__()
        self.active = None
        self.stack = []


class _ProcessScope(object):
    """One active context and push() stack, shared by all threads.  Callers serialize."""
    def __init__(self):
        self.active = None
        self.stack = []


SCOPE_THREAD = 'thread'
SCOPE_PROCESS = 'process'

_scope_classes = {
    SCOPE_THREAD: _ThreadScope,
    SCOPE_PROCESS: _ProcessScope,
}
_scope_name = SCOPE_THREAD
_scope = _ThreadScope()


def set_context_scope(scope_name):
    """
    Choose where the active context lives:  'thread' (the default) or 'process'.

    The calling thread's active context carries over into the new scope.
    """
    global _scope, _scope_name
    try:
        scope_class = _scope_classes[scope_name]
    except KeyError:
        raise ValueError("context scope must be 'thread' or 'process', not {!r}".format(scope_name))
    if scope_name == _scope_name:
        return
    carried = _scope.active
    _scope = scope_class()
    _scope.active = carried
    _scope_name = scope_name
    log.debug("context scope is now %s", scope_name)


def get_context_scope():
    return _scope_name


def _activatable(ctx):
    if not isinstance(ctx, Context):
        raise TypeError("a Context is required, not {}".format(type(ctx).__name__))
    if ctx.readonly:
        return ctx.copy()
    return ctx


def get_context():
    """The active context.  A default one is created on first use."""
    state = _scope
    if state.active is None:
        state.active = DEFAULT_CONTEXT.copy()
    return state.active


current = get_context


def set_context(ctx):
    """Make ctx the active context.  The push() stack is left alone."""
    ctx = _activatable(ctx)
    _scope.active = ctx
    log.debug("set_context %r", ctx)
    return ctx


def push(ctx):
    """
    Activate ctx, remembering the previously active context for pop().

    Returns the context actually activated, a copy when ctx is read-only.
    """
    ctx = _activatable(ctx)
    state = _scope
    state.stack.append(get_context())
    state.active = ctx
    log.debug("push, depth %d", len(state.stack))
    return ctx


def pop():
    """Restore the context that was active before the matching push().  Returns the popped one."""
    state = _scope
    if not state.stack:
        raise ContextStackError("pop() without a matching push()")
    popped = state.active
    state.active = state.stack.pop()
    log.debug("pop, depth %d", len(state.stack))
    return popped


class local_context(object):
    """
    Run a block under a modified copy of a context.

        with local_context(precision=200) as ctx:
            ...
        with local_context(ieee(32), round=RoundToZero) as ctx:
            ...

    The copy is popped on exit, even when the block raises.
    """
    def __init__(self, ctx=None, **kwargs):
        if ctx is None:
            ctx = get_context()
        elif not isinstance(ctx, Context):
            raise TypeError("local_context() requires a Context, not {}".format(type(ctx).__name__))
        self.context = ctx.copy()
        self.context.update(**kwargs)

    def __enter__(self):
        return push(self.context)

    def __exit__(self, exc_type, exc_value, traceback):
        pop()
        return False


def resolve(ctx):
    """
    The context an operation runs under.

    None means the active context.  A read-only context is used through a
    scratch copy, so its flags never change.
    """
    if ctx is None:
        return get_context()
    if not isinstance(ctx, Context):
        raise TypeError("context must be a Context, not {}".format(type(ctx).__name__))
    if ctx.readonly:
        return ctx.copy()
    return ctx
