"""
Harness configuration and command line tests.
"""

import logging
from pathlib import Path

import pytest

from femtorv_tb import runner
from femtorv_tb.config import ConfigError, HarnessConfig, configure_logging
from femtorv_tb.runner import build_parser, config_from_args


def test_defaults_match_femtorv_bringup():
    cfg = HarnessConfig()
    assert cfg.max_time == 1000
    assert cfg.reset_toggles == 10
    assert cfg.memory_words == 1024
    assert cfg.filler == 0x00000013
    assert cfg.reset_active == 0
    assert cfg.reset_inactive == 1


def test_from_env_overrides():
    cfg = HarnessConfig.from_env(
        {
            "PROGRAM_HEX": "prog.hex",
            "SIM_MAX_TIME": "0x100",
            "SIM_RESET_TOGGLES": "4",
            "SIM_DECODE": "0",
        }
    )
    assert cfg.program == "prog.hex"
    assert cfg.max_time == 256
    assert cfg.reset_toggles == 4
    assert cfg.decode is False
    assert cfg.memory_words == 1024


def test_env_round_trip():
    cfg = HarnessConfig(max_time=64, reset_toggles=2, program="a.hex", decode=False)
    assert HarnessConfig.from_env(cfg.to_env()) == cfg


@pytest.mark.parametrize(
    "env",
    [
        {"SIM_MAX_TIME": "lots"},
        {"SIM_MAX_TIME": "-5"},
        {"SIM_MEMORY_WORDS": "0"},
    ],
)
def test_from_env_rejects_bad_values(env):
    with pytest.raises(ConfigError):
        HarnessConfig.from_env(env)


def test_reset_level_must_be_a_bit():
    with pytest.raises(ConfigError):
        HarnessConfig(reset_active=2).validate()


def test_cli_arguments_become_config(tmp_path):
    args = build_parser().parse_args(
        ["core.v", "--program", str(tmp_path / "m.hex"), "--max-time", "2000", "--no-decode"]
    )
    cfg = config_from_args(args)
    assert cfg.max_time == 2000
    assert cfg.decode is False
    assert cfg.program == str((tmp_path / "m.hex").resolve())
    assert cfg.reset_toggles == 10


# ---------------------------------------------------------------------------
# Log level reaching the simulator
# ---------------------------------------------------------------------------

@pytest.fixture
def harness_logger():
    logger = logging.getLogger("femtorv_tb")
    root = logging.getLogger()
    saved = (logger.level, root.level)
    root.setLevel(logging.WARNING)  # what cocotb leaves on the root logger
    yield logger
    logger.setLevel(saved[0])
    root.setLevel(saved[1])


def test_default_log_level_shows_summary(harness_logger):
    configure_logging(HarnessConfig.from_env({}))
    child = logging.getLogger("femtorv_tb.cpu_harness")
    assert child.isEnabledFor(logging.INFO)
    assert not child.isEnabledFor(logging.DEBUG)


def test_env_log_level_enables_cycle_report(harness_logger):
    configure_logging(HarnessConfig.from_env({"SIM_LOG_LEVEL": "debug"}))
    assert logging.getLogger("femtorv_tb.bus_model").isEnabledFor(logging.DEBUG)


def test_unknown_log_level_rejected():
    with pytest.raises(ConfigError):
        HarnessConfig.from_env({"SIM_LOG_LEVEL": "chatty"})


# ---------------------------------------------------------------------------
# Runner hand-off to cocotb
# ---------------------------------------------------------------------------

class FakeRunner:
    def __init__(self, results_xml):
        self.results_xml = results_xml
        self.build_args = None
        self.test_args = None

    def build(self, **kwargs):
        self.build_args = kwargs

    def test(self, **kwargs):
        self.test_args = kwargs
        return self.results_xml


@pytest.fixture
def fake_runner(tmp_path, monkeypatch):
    fake = FakeRunner(tmp_path / "results.xml")
    outcome = {"failed": 0}
    monkeypatch.setattr(runner, "get_runner", lambda sim: fake)
    monkeypatch.setattr(runner, "get_results", lambda path: (1, outcome["failed"]))
    fake.outcome = outcome
    return fake


def test_default_program_is_resolved_from_launch_dir(tmp_path, monkeypatch, fake_runner):
    (tmp_path / "memory.hex").write_text("00000013\n")
    monkeypatch.chdir(tmp_path)
    assert runner.main(["core.v"]) == 0
    env = fake_runner.test_args["extra_env"]
    program = Path(env["PROGRAM_HEX"])
    assert program.is_absolute(), f"PROGRAM_HEX={program} would be looked up in build_dir"
    assert program == (tmp_path / "memory.hex").resolve()
    assert env["SIM_LOG_LEVEL"] == "INFO"
    assert fake_runner.test_args["test_module"] == "femtorv_tb.bench"


def test_verbose_raises_harness_log_level(tmp_path, monkeypatch, fake_runner):
    monkeypatch.chdir(tmp_path)
    assert runner.main(["core.v", "-v"]) == 0
    env = fake_runner.test_args["extra_env"]
    assert env["SIM_LOG_LEVEL"] == "DEBUG"
    assert env["COCOTB_LOG_LEVEL"] == "DEBUG"


def test_failed_cocotb_run_gives_nonzero_status(tmp_path, monkeypatch, fake_runner):
    monkeypatch.chdir(tmp_path)
    fake_runner.outcome["failed"] = 1
    assert runner.main(["core.v"]) == 1
