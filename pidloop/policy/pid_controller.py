from dataclasses import dataclass, replace
from enum import Enum
from typing import NamedTuple, Optional

from .errors import (AllZeroGainsError, ConfigError, NonFiniteGainError,
                     NonFiniteTargetError, NonPositiveOutputLimitError,
                     NonPositiveTimeStepError)
from ..utils.signal import clamp, is_finite


class DerivativeMode(Enum):
    ON_ERROR = 'error'
    ON_MEASUREMENT = 'measurement'


@dataclass(frozen=True)
class ControllerConfig:
    """Immutable, validated tuning.

    Checks run in a fixed order (target, gains, output limit, all-zero gains)
    and the first failure is raised as a ConfigError subclass. Direct
    construction, dataclasses.replace() and make_config() all go through them.
    """
    target: float
    p_gain: float = 0.0
    i_gain: float = 0.0
    d_gain: float = 0.0
    derivative_mode: DerivativeMode = DerivativeMode.ON_ERROR
    output_limit: Optional[float] = None

    def __post_init__(self):
        if not is_finite(self.target):
            raise NonFiniteTargetError(self.target)
        for name in ('p_gain', 'i_gain', 'd_gain'):
            if not is_finite(getattr(self, name)):
                raise NonFiniteGainError(name, getattr(self, name))
        limit = self.output_limit
        if limit is not None:
            try:
                limit = float(limit)
            except (TypeError, ValueError):
                raise NonPositiveOutputLimitError(self.output_limit) from None
            # NaN fails the comparison and is rejected here as well
            if not limit > 0:
                raise NonPositiveOutputLimitError(self.output_limit)
        try:
            mode = DerivativeMode(self.derivative_mode)
        except ValueError:
            raise ConfigError(f"unknown derivative mode {self.derivative_mode!r}") from None

        # frozen, so normalise through object.__setattr__
        for name in ('target', 'p_gain', 'i_gain', 'd_gain'):
            object.__setattr__(self, name, float(getattr(self, name)))
        object.__setattr__(self, 'output_limit', limit)
        object.__setattr__(self, 'derivative_mode', mode)
        if self.p_gain == 0.0 and self.i_gain == 0.0 and self.d_gain == 0.0:
            raise AllZeroGainsError()


@dataclass(frozen=True)
class ControllerState:
    integral_accumulator: float = 0.0
    previous_error: float = 0.0
    previous_measurement: float = 0.0
    has_previous: bool = False


class PIDTerms(NamedTuple):
    p: float
    i: float
    d: float
    output: float


_ZERO_TERMS = PIDTerms(0.0, 0.0, 0.0, 0.0)


class Controller:
    """Discrete PID controller driving a measurement toward config.target.

    The caller owns the loop and the clock: every compute() gets one
    measurement plus the time elapsed since the previous one.
    Not thread-safe; guard a shared instance with a lock.
    """
    def __init__(self, config: ControllerConfig):
        self._config = config
        self.reset()

    @property
    def config(self) -> ControllerConfig:
        return self._config

    @property
    def state(self) -> ControllerState:
        return ControllerState(self._integral, self._prev_err,
                               self._prev_meas, self._has_prev)

    @property
    def is_running(self) -> bool:
        return self._has_prev

    @property
    def last_terms(self) -> PIDTerms:
        return self._last_terms

    def compute(self, measurement: float, dt: float) -> float:
        # written as a negation so NaN is rejected too
        if not dt > 0:
            raise NonPositiveTimeStepError(dt)
        cfg = self._config
        measurement = float(measurement)
        err = cfg.target - measurement

        p_term = cfg.p_gain * err
        # gain applied at accumulation time, not on read
        self._integral += cfg.i_gain * err * dt

        if not self._has_prev:
            d_term = 0.0
        elif cfg.derivative_mode is DerivativeMode.ON_MEASUREMENT:
            d_term = -cfg.d_gain * (measurement - self._prev_meas) / dt
        else:
            d_term = cfg.d_gain * (err - self._prev_err) / dt

        output = clamp(p_term + self._integral + d_term, cfg.output_limit)

        self._prev_err = err
        self._prev_meas = measurement
        self._has_prev = True
        self._last_terms = PIDTerms(p_term, self._integral, d_term, output)
        return output

    def reset(self):
        """Forget integral and derivative history; tuning is kept."""
        self._integral = 0.0
        self._prev_err = 0.0
        self._prev_meas = 0.0
        self._has_prev = False
        self._last_terms = _ZERO_TERMS

    def set_target(self, target: float):
        """Move the setpoint without discarding accumulated state."""
        self._config = replace(self._config, target=target)

    def retune(self, config: ControllerConfig):
        """Swap in new tuning. State is reset so old integral history never mixes with new gains."""
        self._config = config
        self.reset()

    def __repr__(self):
        return f"Controller({self._config!r}, running={self._has_prev})"
