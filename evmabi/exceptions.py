class _BaseEvmabiException(Exception):
    """
    Base evmabi exception class.

    This exception is not raised directly. Other exceptions inherit it in
    order to share message and hint formatting.
    """

    def __init__(self, message="Error Message not found.", *, hint=None):
        """
        Exception initializer.

        Arguments
        ---------
        message : str
            Error message to display with the exception.
        hint : str | Callable[[], str], optional
            Additional help appended to the message. Callables are evaluated
            lazily, when the message is formatted.
        """
        self._message = message
        self._hint = hint
        super().__init__(message)

    @property
    def hint(self):
        # some hints are expensive to compute (they render whole schemas or
        # payloads), so we wait until the formatted message is requested.
        if callable(self._hint):
            return self._hint()
        return self._hint

    @property
    def message(self):
        msg = self._message
        if self.hint:
            msg += f"\n\n  (hint: {self.hint})"
        return msg

    def __str__(self):
        return self.message


class EvmabiException(_BaseEvmabiException):
    pass


class MalformedInput(EvmabiException):
    """Input bytes or text cannot be interpreted."""


class InvalidHex(MalformedInput):
    """Text is not a well-formed hex string."""


class InvalidWordLength(MalformedInput):
    """A word was constructed from a buffer that is not exactly 32 bytes."""


class WordOverflow(MalformedInput):
    """Value does not fit in a 256-bit word."""


class InvalidABIType(EvmabiException):
    """An ABI schema was constructed with invalid parameters."""


class UnknownType(InvalidABIType):
    """Reference to an ABI type that does not exist."""


class TypeMismatch(EvmabiException):
    """A value's schema disagrees with the expected schema."""

    def __init__(self, message, expected=None, actual=None, *, hint=None):
        self.expected = expected
        self.actual = actual
        if expected is not None or actual is not None:
            message = f"{message} (expected {_selector_name(expected)}, got {_selector_name(actual)})"
        super().__init__(message, hint=hint)


def _selector_name(schema):
    if schema is None:
        return "<none>"
    return schema.selector_name()


class EncodingOverflow(EvmabiException):
    """Value magnitude or length exceeds what its schema can represent."""


class DecodeError(EvmabiException):
    """ABI-encoded data is truncated, out of bounds or not canonical."""


class ArgumentException(EvmabiException):
    """Call to a descriptor with invalid arguments."""


class ExecutionReverted(EvmabiException):
    """
    Raised when a query reverts and the caller asked for the output.

    The `revert` attribute holds the `QueryRevert` that caused it.
    """

    def __init__(self, revert):
        self.revert = revert
        if revert.error is not None:
            msg = f"execution reverted: {revert.error}"
        elif revert.halt_reason is not None:
            msg = f"execution halted: {revert.halt_reason}"
        else:
            msg = f"execution reverted: 0x{revert.payload.hex()}"
        super().__init__(msg)


class ExecutionFault(EvmabiException):
    """
    Base class for runner-level failures.

    A fault means the environment could not run the code to completion,
    as opposed to the code rejecting the call.
    """


class GasLimitExceeded(ExecutionFault):
    """Execution did not halt within the configured gas budget."""


class EvmabiInternalException(_BaseEvmabiException):
    """
    Base evmabi internal exception class.

    Internal exceptions are raised as a means of telling the user that an
    invariant of the library itself was broken, and that filing a bug report
    would be appropriate.
    """

    def __str__(self):
        return f"{super().__str__()}\n\nThis is an unhandled internal error in evmabi."


class EvmabiPanic(EvmabiInternalException):
    """General unexpected internal error."""
