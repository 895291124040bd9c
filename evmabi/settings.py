import dataclasses
import os
from dataclasses import dataclass
from typing import Optional

EVMABI_GAS_LIMIT = int(os.environ.get("EVMABI_GAS_LIMIT", "30000000"))
EVMABI_EVM_VERSION = os.environ.get("EVMABI_EVM_VERSION", "cancun")
EVMABI_TRACE = os.environ.get("EVMABI_TRACE", "0") == "1"


@dataclass
class Settings:
    gas_limit: Optional[int] = None
    evm_version: Optional[str] = None
    tracing: Optional[bool] = None

    def __post_init__(self):
        # sanity check inputs
        if self.gas_limit is not None:
            assert isinstance(self.gas_limit, int) and self.gas_limit > 0
        if self.evm_version is not None:
            # avoid an import cycle with evmabi.evm.opcodes
            from evmabi.evm.opcodes import EVM_VERSIONS

            assert self.evm_version in EVM_VERSIONS, self.evm_version
        if self.tracing is not None:
            assert isinstance(self.tracing, bool)

    def get_gas_limit(self) -> int:
        if self.gas_limit is None:
            return EVMABI_GAS_LIMIT
        return self.gas_limit

    def get_evm_version(self) -> str:
        if self.evm_version is None:
            return EVMABI_EVM_VERSION
        return self.evm_version

    def get_tracing(self) -> bool:
        if self.tracing is None:
            return EVMABI_TRACE
        return self.tracing

    def as_dict(self):
        ret = dataclasses.asdict(self)
        return {k: v for (k, v) in ret.items() if v is not None}

    @classmethod
    def from_dict(cls, data):
        return cls(**data)
