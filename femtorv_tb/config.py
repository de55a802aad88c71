"""
Harness configuration.

Defaults are the FemtoRV32 bring-up settings. Every value can be
overridden from the environment, which is how the cocotb entry point in
bench.py receives its settings from the runner.

Environment knobs:
  PROGRAM_HEX        Program image path (default: memory.hex)
  SIM_MAX_TIME       Simulated time budget in half clock periods (default: 1000)
  SIM_RESET_TOGGLES  Clock toggles with reset held (default: 10)
  SIM_MEMORY_WORDS   Minimum memory size in words (default: 1024)
  SIM_DECODE         Log decoded instructions on fetch (default: 1)
  SIM_LOG_LEVEL      Level of the femtorv_tb loggers (default: INFO)
"""

import logging
import os
from dataclasses import dataclass, replace

from .memory import MIN_WORDS, NOP


class ConfigError(ValueError):
    """The harness configuration is unusable."""


def _env_flag(value):
    return value not in ("", "0", "false", "False")


@dataclass(frozen=True)
class HarnessConfig:
    max_time: int = 1000
    reset_toggles: int = 10
    memory_words: int = MIN_WORDS
    filler: int = NOP
    reset_active: int = 0
    program: str = "memory.hex"
    decode: bool = True
    time_step_ns: int = 5
    log_level: str = "INFO"

    @property
    def reset_inactive(self):
        return 1 - self.reset_active

    def validate(self):
        """Raise ConfigError for settings the sequencer cannot run with."""
        if self.max_time < 0:
            raise ConfigError(f"max_time must be >= 0, got {self.max_time}")
        if self.reset_toggles < 0:
            raise ConfigError(f"reset_toggles must be >= 0, got {self.reset_toggles}")
        if self.memory_words <= 0:
            raise ConfigError(f"memory_words must be > 0, got {self.memory_words}")
        if self.reset_active not in (0, 1):
            raise ConfigError(f"reset_active must be 0 or 1, got {self.reset_active}")
        if self.time_step_ns <= 0:
            raise ConfigError(f"time_step_ns must be > 0, got {self.time_step_ns}")
        if not isinstance(logging.getLevelName(self.log_level), int):
            raise ConfigError(f"unknown log level {self.log_level!r}")
        return self

    def with_overrides(self, **changes):
        """Return a copy with the given non-None fields replaced."""
        return replace(self, **{k: v for k, v in changes.items() if v is not None})

    @classmethod
    def from_env(cls, environ=None):
        env = os.environ if environ is None else environ
        try:
            cfg = cls().with_overrides(
                program=env.get("PROGRAM_HEX"),
                max_time=_int_or_none(env.get("SIM_MAX_TIME")),
                reset_toggles=_int_or_none(env.get("SIM_RESET_TOGGLES")),
                memory_words=_int_or_none(env.get("SIM_MEMORY_WORDS")),
                decode=_env_flag(env["SIM_DECODE"]) if "SIM_DECODE" in env else None,
                log_level=env.get("SIM_LOG_LEVEL", "").upper() or None,
            )
        except ValueError as exc:
            raise ConfigError(f"bad harness environment: {exc}") from exc
        return cfg.validate()

    def to_env(self):
        """Inverse of from_env, for handing settings to a cocotb run."""
        return {
            "PROGRAM_HEX": str(self.program),
            "SIM_MAX_TIME": str(self.max_time),
            "SIM_RESET_TOGGLES": str(self.reset_toggles),
            "SIM_MEMORY_WORDS": str(self.memory_words),
            "SIM_DECODE": "1" if self.decode else "0",
            "SIM_LOG_LEVEL": self.log_level,
        }


def _int_or_none(value):
    if value is None or value == "":
        return None
    return int(value, 0)


def configure_logging(config):
    """Set the level of every femtorv_tb logger from config.log_level.

    Inside a simulator cocotb leaves the root logger at WARNING, which would
    otherwise hide the per-cycle report and the run summary.
    """
    logger = logging.getLogger("femtorv_tb")
    logger.setLevel(config.log_level)
    return logger
