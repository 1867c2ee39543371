import logging

import pytest

from ink_wrapper_types import Config


def test_defaults():
    cfg = Config()
    assert cfg.finalization_delay == 0.0
    assert cfg.verify_code_hash is True
    assert cfg.deployer_seed is None
    assert cfg.log_level == "WARNING"


def test_from_env(monkeypatch):
    monkeypatch.setenv("INK_WRAPPER_FINALIZATION_DELAY", "0.25")
    monkeypatch.setenv("INK_WRAPPER_VERIFY_CODE_HASH", "off")
    monkeypatch.setenv("INK_WRAPPER_DEPLOYER_SEED", "0x" + "07" * 32)
    monkeypatch.setenv("INK_WRAPPER_LOG_LEVEL", "debug")
    cfg = Config.from_env()
    assert cfg.finalization_delay == 0.25
    assert cfg.verify_code_hash is False
    assert cfg.deployer_seed == b"\x07" * 32
    assert cfg.log_level == "DEBUG"


def test_from_env_custom_prefix(monkeypatch):
    monkeypatch.setenv("DEVNET_LOG_LEVEL", "INFO")
    assert Config.from_env(prefix="DEVNET_").log_level == "INFO"


@pytest.mark.parametrize(
    "kwargs",
    [
        {"finalization_delay": -1},
        {"verify_code_hash": "maybe"},
        {"deployer_seed": b"\x00" * 31},
        {"deployer_seed": "0xzz"},
        {"log_level": "LOUD"},
    ],
)
def test_invalid_values_fail_fast(kwargs):
    with pytest.raises(ValueError):
        Config(**kwargs)


def test_invalid_env_fails_fast(monkeypatch):
    monkeypatch.setenv("INK_WRAPPER_FINALIZATION_DELAY", "soon")
    with pytest.raises(ValueError):
        Config.from_env()


def test_with_overrides_skips_none_and_unknown_keys():
    base = Config(finalization_delay=1.5)
    cfg = Config.with_overrides(base, log_level="info", finalization_delay=None, bogus=1)
    assert cfg.log_level == "INFO"
    assert cfg.finalization_delay == 1.5
    assert base.log_level == "WARNING"


def test_to_dict():
    assert Config(deployer_seed="11" * 32).to_dict() == {
        "finalization_delay": 0.0,
        "verify_code_hash": True,
        "deployer_seed": b"\x11" * 32,
        "log_level": "WARNING",
    }


def test_configure_logging_sets_root_level(monkeypatch):
    calls = {}
    monkeypatch.setattr(logging, "basicConfig", lambda **kw: calls.update(kw))
    Config(log_level="ERROR").configure_logging()
    assert calls["level"] == logging.ERROR
