
class ConfigError(ValueError):
    """Controller parameters that would produce a misbehaving controller."""


class NonFiniteTargetError(ConfigError):
    def __init__(self, target):
        super().__init__(f"target must be finite, got {target!r}")
        self.target = target


class NonFiniteGainError(ConfigError):
    def __init__(self, gain_name, value):
        super().__init__(f"{gain_name} must be finite, got {value!r}")
        self.gain_name = gain_name
        self.value = value


class NonPositiveOutputLimitError(ConfigError):
    def __init__(self, limit):
        super().__init__(f"output_limit must be > 0, got {limit!r}")
        self.limit = limit


class AllZeroGainsError(ConfigError):
    def __init__(self):
        super().__init__("All gains cannot be zero at the same time")


class NonPositiveTimeStepError(ValueError):
    """Raised by compute() for dt <= 0 (or NaN); controller state is untouched."""
    def __init__(self, dt):
        super().__init__(f"dt must be > 0, got {dt!r}")
        self.dt = dt
