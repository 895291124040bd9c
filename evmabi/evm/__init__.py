from evmabi.evm.disassembler import disassemble
from evmabi.evm.interpreter import (
    BaseInterpreter,
    BlockEnv,
    ExecutionOutcome,
    LogEntry,
    PyEvmInterpreter,
    TxEnv,
)
from evmabi.evm.metadata import parse_cbor_metadata, strip_cbor_metadata
from evmabi.evm.query import (
    QueryResult,
    QueryRevert,
    QuerySuccess,
    call_function,
    decode_revert,
    deploy,
    run_query,
)
