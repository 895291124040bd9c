"""
Running read-only queries against contract bytecode.

`run_query` executes runtime bytecode with some calldata and classifies
the halt: normal completion is a `QuerySuccess`, a `REVERT` or an
exceptional halt is a `QueryRevert`, whose payload is matched against the
known error descriptors. Problems of the runner itself, such as running out of
the gas budget, are raised as `ExecutionFault`s and are never reported as
reverts.
"""
import logging
from dataclasses import dataclass
from typing import Iterable, Optional, Union

from evmabi.evm.interpreter import BaseInterpreter, PyEvmInterpreter
from evmabi.exceptions import ArgumentException, DecodeError, ExecutionReverted, TypeMismatch
from evmabi.function_signature import (
    BUILTIN_ERRORS,
    DecodedError,
    ErrorSignature,
    FunctionSignature,
)
from evmabi.hexcodec import coerce_bytes
from evmabi.settings import Settings

logger = logging.getLogger(__name__)

ErrorLike = Union[ErrorSignature, str]


@dataclass(frozen=True)
class QueryResult:
    def unwrap(self) -> bytes:
        raise NotImplementedError  # must be implemented by subclasses


@dataclass(frozen=True)
class QuerySuccess(QueryResult):
    output: bytes
    logs: tuple = ()

    def unwrap(self) -> bytes:
        return self.output


@dataclass(frozen=True)
class QueryRevert(QueryResult):
    payload: bytes
    # None when the payload did not match any known error
    error: Optional[DecodedError] = None
    # set when the code halted exceptionally rather than through REVERT
    halt_reason: Optional[str] = None

    @property
    def is_recognized(self) -> bool:
        return self.error is not None

    def unwrap(self) -> bytes:
        raise ExecutionReverted(self)


def _as_error(error: ErrorLike) -> ErrorSignature:
    if isinstance(error, str):
        return ErrorSignature.from_signature(error)
    return error


def decode_revert(payload: bytes, known_errors: Iterable[ErrorLike] = ()) -> Optional[DecodedError]:
    """
    Match a revert payload against `known_errors` first and the builtin
    `Error(string)` and `Panic(uint256)` second.

    A payload whose selector matches but whose arguments do not decode is
    treated as unrecognized.
    """
    payload = bytes(payload)
    if len(payload) < 4:
        return None

    for descriptor in (*(_as_error(e) for e in known_errors), *BUILTIN_ERRORS):
        if not descriptor.matches(payload):
            continue
        try:
            return descriptor.decode(payload)
        except (DecodeError, TypeMismatch) as e:
            logger.debug("revert payload matches %s but does not decode: %s", descriptor, e)

    return None


def run_query(
    bytecode: Union[bytes, str],
    calldata: Union[bytes, str] = b"",
    known_errors: Iterable[ErrorLike] = (),
    interpreter: Optional[BaseInterpreter] = None,
    settings: Optional[Settings] = None,
) -> QueryResult:
    """
    Execute `bytecode` with `calldata` in a fresh context.

    Arguments
    ---------
    bytecode : bytes | str
        Runtime bytecode, raw or as hex.
    calldata : bytes | str
        Input data, raw or as hex.
    known_errors : Iterable[ErrorSignature | str]
        Custom errors the contract may revert with. They are tried before
        the builtin errors.
    interpreter : BaseInterpreter, optional
        Executor to use. Defaults to a `PyEvmInterpreter` built from `settings`.
    settings : Settings, optional
        Only used when no interpreter is passed.

    Returns
    -------
    QueryResult
        `QuerySuccess` or `QueryRevert`.
    """
    if interpreter is not None and settings is not None:
        raise ArgumentException("pass either an interpreter or settings, not both")
    if interpreter is None:
        interpreter = PyEvmInterpreter(settings)

    outcome = interpreter.execute(coerce_bytes(bytecode), coerce_bytes(calldata))

    if outcome.success:
        logger.debug("query returned %d bytes using %d gas", len(outcome.output), outcome.gas_used)
        return QuerySuccess(outcome.output, outcome.logs)

    error = decode_revert(outcome.output, known_errors)
    if outcome.halt_reason is not None:
        logger.debug("query halted using %d gas: %s", outcome.gas_used, outcome.halt_reason)
    else:
        logger.debug(
            "query reverted using %d gas: %s",
            outcome.gas_used,
            error if error is not None else "0x" + outcome.output.hex(),
        )
    return QueryRevert(outcome.output, error, outcome.halt_reason)


def call_function(
    fn: FunctionSignature,
    bytecode: Union[bytes, str],
    *args,
    known_errors: Iterable[ErrorLike] = (),
    interpreter: Optional[BaseInterpreter] = None,
    settings: Optional[Settings] = None,
):
    """
    Call `fn` on `bytecode` and return its decoded outputs as Python values.

    A single output is returned bare, no outputs as None. Raises
    `ExecutionReverted` if the call reverts.
    """
    calldata = fn.encode_call(*args)
    result = run_query(
        bytecode, calldata, known_errors=known_errors, interpreter=interpreter, settings=settings
    )
    values = fn.decode_output(result.unwrap())

    match tuple(v.to_native() for v in values):
        case ():
            return None
        case (single,):
            return single
        case multiple:
            return multiple


def deploy(
    initcode: Union[bytes, str],
    known_errors: Iterable[ErrorLike] = (),
    interpreter: Optional[BaseInterpreter] = None,
    settings: Optional[Settings] = None,
) -> bytes:
    """
    Run creation code and return the runtime code it returns.

    Constructor arguments, if any, must already be appended to `initcode`.
    Storage written by the constructor is not kept.
    """
    result = run_query(
        initcode, b"", known_errors=known_errors, interpreter=interpreter, settings=settings
    )
    return result.unwrap()
