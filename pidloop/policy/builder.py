from .errors import ConfigError
from .pid_controller import Controller, ControllerConfig, DerivativeMode


def make_config(target, p_gain=0.0, i_gain=0.0, d_gain=0.0,
                derivative_mode=DerivativeMode.ON_ERROR, output_limit=None):
    """Validate every field and return a ControllerConfig; raises a ConfigError subclass."""
    return ControllerConfig(target=target, p_gain=p_gain, i_gain=i_gain, d_gain=d_gain,
                            derivative_mode=derivative_mode, output_limit=output_limit)


class ControllerBuilder:
    """Chainable tuning accumulator. Setters never fail; build() validates."""
    def __init__(self, target):
        self.target = target
        self.p_gain = 0.0
        self.i_gain = 0.0
        self.d_gain = 0.0
        self.derivative_mode = DerivativeMode.ON_ERROR
        self.output_limit = None

    @classmethod
    def new_with_target(cls, target):
        return cls(target)

    def with_p_gain(self, gain):
        self.p_gain = gain
        return self

    def with_i_gain(self, gain):
        self.i_gain = gain
        return self

    def with_d_gain(self, gain):
        self.d_gain = gain
        return self

    def with_derivative_on_measurement(self):
        self.derivative_mode = DerivativeMode.ON_MEASUREMENT
        return self

    def with_output_limit(self, limit):
        self.output_limit = limit
        return self

    def build_config(self):
        return make_config(self.target, self.p_gain, self.i_gain, self.d_gain,
                           self.derivative_mode, self.output_limit)

    def build(self):
        return Controller(self.build_config())


def builder_from_dict(section):
    """Map a `controller:` config section onto a builder."""
    b = ControllerBuilder.new_with_target(section.get('target', 0.0))
    b.with_p_gain(section.get('kp', 0.0))
    b.with_i_gain(section.get('ki', 0.0))
    b.with_d_gain(section.get('kd', 0.0))
    derivative = section.get('derivative', 'error')
    try:
        mode = DerivativeMode(derivative)
    except ValueError:
        raise ConfigError(f"derivative must be 'error' or 'measurement', got {derivative!r}") from None
    if mode is DerivativeMode.ON_MEASUREMENT:
        b.with_derivative_on_measurement()
    if section.get('output_limit') is not None:
        b.with_output_limit(section['output_limit'])
    return b
