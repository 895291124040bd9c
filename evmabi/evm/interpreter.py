"""
Executing bytecode on py-evm.

`BaseInterpreter` is the seam between queries and execution: it runs one
message call against some bytecode and reports how the call halted.
`PyEvmInterpreter` implements it with py-evm. Each call runs inside a state
snapshot that is reverted afterwards, so storage, balances and transient
storage written by one call are never seen by the next one.
"""
import copy
import logging
from contextlib import contextmanager
from dataclasses import dataclass
from functools import cached_property
from typing import Optional

from eth.abc import ChainAPI, ComputationAPI
from eth.chains.mainnet import MainnetChain
from eth.constants import GENESIS_DIFFICULTY
from eth.db.atomic import AtomicDB
from eth.exceptions import OutOfGas, Revert, VMError
from eth.tools.builder import chain as chain_builder
from eth.vm.base import StateAPI
from eth.vm.message import Message
from eth_typing import Address
from eth_utils import setup_DEBUG2_logging

from evmabi.exceptions import ExecutionFault, GasLimitExceeded
from evmabi.settings import Settings

logger = logging.getLogger(__name__)

# py-evm logs every executed opcode here at DEBUG2
TRACE_LOGGER = "eth.vm.computation.BaseComputation"

# gas limit of the genesis block; calls are bounded by Settings.gas_limit
BLOCK_GAS_LIMIT = 30_000_000


@dataclass(frozen=True)
class BlockEnv:
    """Block fields seen by the code. None keeps the value of the fresh chain."""

    number: Optional[int] = None
    timestamp: Optional[int] = None


@dataclass(frozen=True)
class TxEnv:
    address: int = 0
    caller: int = 0
    # tx.origin, the caller when not set
    origin: Optional[int] = None
    value: int = 0
    gas_price: int = 0


@dataclass(frozen=True)
class LogEntry:
    address: bytes
    topics: tuple[int, ...]
    data: bytes


@dataclass(frozen=True)
class ExecutionOutcome:
    """
    How a call halted.

    `success` is False both for REVERT and for exceptional halts (invalid
    opcode, bad jump, stack underflow...). The latter carry a `halt_reason`
    and an empty output.
    """

    success: bool
    output: bytes
    gas_used: int
    logs: tuple[LogEntry, ...] = ()
    halt_reason: Optional[str] = None

    @property
    def is_revert(self) -> bool:
        return not self.success and self.halt_reason is None


class BaseInterpreter:
    def execute(self, bytecode: bytes, calldata: bytes = b"") -> ExecutionOutcome:
        """
        Run `bytecode` with `calldata` until it halts.

        Raises `ExecutionFault` when the runner cannot finish the call.
        """
        raise NotImplementedError  # must be implemented by subclasses


def _to_address(value: int) -> Address:
    return Address(value.to_bytes(20, "big"))


def _halt_reason(error: VMError) -> str:
    name = type(error).__name__
    detail = str(error)
    return f"{name}: {detail}" if detail else name


class PyEvmInterpreter(BaseInterpreter):
    """
    Runs calls on an in-memory py-evm chain.

    The gas limit of every call is `Settings.get_gas_limit()`. Running out of
    it raises `GasLimitExceeded` instead of being reported as a halt, which
    bounds loops and memory growth alike.

    The chain is built on first use. An instance must not be shared between
    threads; `run_query` builds a new one per query unless given one.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        block: Optional[BlockEnv] = None,
        tx: Optional[TxEnv] = None,
    ):
        self.settings = settings or Settings()
        self.block = block or BlockEnv()
        self.tx = tx or TxEnv()

        if self.settings.get_tracing():
            setup_DEBUG2_logging()
            logging.getLogger(TRACE_LOGGER).setLevel("DEBUG2")

    @cached_property
    def _chain(self) -> ChainAPI:
        spec = getattr(chain_builder, self.settings.get_evm_version() + "_at")(0)
        return chain_builder.build(MainnetChain, spec).from_genesis(
            base_db=AtomicDB(),
            genesis_params={"difficulty": GENESIS_DIFFICULTY, "gas_limit": BLOCK_GAS_LIMIT},
        )

    @cached_property
    def _state(self) -> StateAPI:
        return self._chain.get_vm().state

    @contextmanager
    def _anchor(self):
        state = self._state
        snapshot_id = state.snapshot()
        ctx = copy.copy(state.execution_context)
        try:
            yield
        finally:
            state.revert(snapshot_id)
            state.execution_context = ctx
            self._clear_transient_storage()

    def _clear_transient_storage(self) -> None:
        try:
            self._state.clear_transient_storage()
        except AttributeError as e:
            # forks before cancun have no transient storage
            assert e.args == ("No transient_storage has been set for this State",)

    def _apply_block_env(self) -> None:
        context = self._state.execution_context
        if self.block.number is not None:
            context._block_number = self.block.number
        if self.block.timestamp is not None:
            context._timestamp = self.block.timestamp

    def execute(self, bytecode: bytes, calldata: bytes = b"") -> ExecutionOutcome:
        tx = self.tx
        sender = _to_address(tx.caller)
        origin = sender if tx.origin is None else _to_address(tx.origin)

        with self._anchor():
            self._apply_block_env()
            state = self._state
            if tx.value:
                # the caller must be able to pay for the transferred value
                state.set_balance(sender, state.get_balance(sender) + tx.value)

            message = Message(
                to=_to_address(tx.address),
                sender=sender,
                value=tx.value,
                data=bytes(calldata),
                code=bytes(bytecode),
                gas=self.settings.get_gas_limit(),
                is_static=False,
            )
            tx_context = state.transaction_context_class(origin=origin, gas_price=tx.gas_price)

            try:
                computation = state.computation_class.apply_message(
                    state=state, message=message, transaction_context=tx_context
                )
            except VMError as e:
                # raised (not recorded on the computation) when the call
                # cannot even start, e.g. insufficient funds
                raise ExecutionFault(f"could not start the call: {e}") from e

            outcome = self._to_outcome(computation)

        logger.debug(
            "call halted, success=%s gas_used=%d output=0x%s",
            outcome.success,
            outcome.gas_used,
            outcome.output.hex(),
        )
        return outcome

    def _to_outcome(self, computation: ComputationAPI) -> ExecutionOutcome:
        gas_used = computation.get_gas_used()

        if not computation.is_error:
            logs = tuple(
                LogEntry(address, tuple(topics), data)
                for address, topics, data in computation.get_log_entries()
            )
            return ExecutionOutcome(True, computation.output, gas_used, logs)

        error = computation.error
        if isinstance(error, Revert):
            (output,) = error.args
            return ExecutionOutcome(False, output, gas_used)

        if isinstance(error, OutOfGas):
            gas_limit = self.settings.get_gas_limit()
            raise GasLimitExceeded(
                f"execution did not halt within {gas_limit} gas",
                hint="raise `gas_limit` in the settings or EVMABI_GAS_LIMIT",
            ) from error

        return ExecutionOutcome(False, b"", gas_used, (), _halt_reason(error))
