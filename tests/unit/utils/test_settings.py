import pytest

from evmabi.settings import EVMABI_EVM_VERSION, EVMABI_GAS_LIMIT, EVMABI_TRACE, Settings


def test_defaults_come_from_environment():
    settings = Settings()
    assert settings.get_gas_limit() == EVMABI_GAS_LIMIT
    assert settings.get_evm_version() == EVMABI_EVM_VERSION
    assert settings.get_tracing() is EVMABI_TRACE


def test_overrides():
    settings = Settings(gas_limit=10, evm_version="paris", tracing=True)
    assert settings.get_gas_limit() == 10
    assert settings.get_evm_version() == "paris"
    assert settings.get_tracing() is True


@pytest.mark.parametrize(
    "kwargs",
    [
        {"gas_limit": 0},
        {"gas_limit": "10"},
        {"evm_version": "frontier"},
        {"tracing": 1},
    ],
)
def test_invalid_settings(kwargs):
    with pytest.raises(AssertionError):
        Settings(**kwargs)


def test_dict_roundtrip():
    settings = Settings(gas_limit=100, evm_version="shanghai")
    assert settings.as_dict() == {"gas_limit": 100, "evm_version": "shanghai"}
    assert Settings.from_dict(settings.as_dict()) == settings
    assert Settings().as_dict() == {}
