import math

import pytest

from pidloop.policy.builder import ControllerBuilder, builder_from_dict, make_config
from pidloop.policy.errors import (AllZeroGainsError, ConfigError, NonFiniteGainError,
                                   NonFiniteTargetError, NonPositiveOutputLimitError)
from pidloop.policy.pid_controller import Controller, ControllerConfig, DerivativeMode


def test_defaults():
    b = ControllerBuilder.new_with_target(5.0)
    assert (b.p_gain, b.i_gain, b.d_gain) == (0.0, 0.0, 0.0)
    assert b.derivative_mode is DerivativeMode.ON_ERROR
    assert b.output_limit is None


def test_build_returns_fresh_controller():
    ctrl = (ControllerBuilder.new_with_target(1.0)
            .with_p_gain(2.0).with_i_gain(0.5).with_d_gain(0.1)
            .with_derivative_on_measurement().with_output_limit(3.0)
            .build())
    assert isinstance(ctrl, Controller)
    assert not ctrl.is_running
    cfg = ctrl.config
    assert (cfg.target, cfg.p_gain, cfg.i_gain, cfg.d_gain) == (1.0, 2.0, 0.5, 0.1)
    assert cfg.derivative_mode is DerivativeMode.ON_MEASUREMENT
    assert cfg.output_limit == 3.0
    assert ctrl.state.integral_accumulator == 0.0


def test_setters_accept_bad_values_until_build():
    b = ControllerBuilder.new_with_target(1.0).with_p_gain(math.nan)
    with pytest.raises(NonFiniteGainError) as exc:
        b.build()
    assert exc.value.gain_name == 'p_gain'


@pytest.mark.parametrize('target', [math.nan, math.inf, -math.inf])
def test_non_finite_target(target):
    with pytest.raises(NonFiniteTargetError):
        ControllerBuilder.new_with_target(target).with_p_gain(1.0).build()


@pytest.mark.parametrize('setter,name', [
    ('with_p_gain', 'p_gain'),
    ('with_i_gain', 'i_gain'),
    ('with_d_gain', 'd_gain'),
])
def test_non_finite_gain_names_the_gain(setter, name):
    b = ControllerBuilder.new_with_target(1.0).with_p_gain(1.0)
    getattr(b, setter)(math.inf)
    with pytest.raises(NonFiniteGainError) as exc:
        b.build()
    assert exc.value.gain_name == name


@pytest.mark.parametrize('limit', [0.0, -1.0, math.nan])
def test_non_positive_output_limit(limit):
    with pytest.raises(NonPositiveOutputLimitError):
        ControllerBuilder.new_with_target(1.0).with_p_gain(1.0).with_output_limit(limit).build()


def test_all_zero_gains_rejected():
    with pytest.raises(AllZeroGainsError):
        ControllerBuilder.new_with_target(1.0).build()


def test_validation_order_target_first():
    b = (ControllerBuilder.new_with_target(math.nan)
         .with_p_gain(math.nan).with_output_limit(-1.0))
    with pytest.raises(NonFiniteTargetError):
        b.build()
    b.target = 1.0
    with pytest.raises(NonFiniteGainError):
        b.build()
    b.with_p_gain(0.0)
    with pytest.raises(NonPositiveOutputLimitError):
        b.build()
    b.with_output_limit(1.0)
    with pytest.raises(AllZeroGainsError):
        b.build()


def test_config_errors_are_value_errors():
    with pytest.raises(ValueError):
        make_config(1.0)
    assert issubclass(NonFiniteGainError, ConfigError)


def test_make_config_is_frozen():
    cfg = make_config(1.0, p_gain=1.0)
    with pytest.raises(AttributeError):
        cfg.p_gain = 2.0


def test_builder_from_dict():
    b = builder_from_dict({'target': 3.0, 'kp': 1.0, 'ki': 0.2, 'kd': 0.1,
                           'derivative': 'measurement', 'output_limit': 4.0})
    cfg = b.build_config()
    assert cfg.derivative_mode is DerivativeMode.ON_MEASUREMENT
    assert cfg.output_limit == 4.0
    assert cfg.i_gain == 0.2


def test_builder_from_dict_unknown_derivative():
    with pytest.raises(ConfigError):
        builder_from_dict({'target': 1.0, 'kp': 1.0, 'derivative': 'setpoint'})


@pytest.mark.parametrize('section,error', [
    ({'target': 1.0, 'kp': None}, NonFiniteGainError),
    ({'target': None, 'kp': 1.0}, NonFiniteTargetError),
    ({'target': 1.0, 'kp': 'fast'}, NonFiniteGainError),
    ({'target': 1.0, 'kp': 1.0, 'output_limit': 'wide'}, NonPositiveOutputLimitError),
])
def test_blank_or_non_numeric_values_are_config_errors(section, error):
    with pytest.raises(error):
        builder_from_dict(section).build()


def test_non_numeric_output_limit_from_setter():
    b = ControllerBuilder.new_with_target(1.0).with_p_gain(1.0).with_output_limit([5])
    with pytest.raises(NonPositiveOutputLimitError):
        b.build()


def test_numeric_strings_are_normalised():
    cfg = make_config('2.5', p_gain='1', output_limit='5')
    assert (cfg.target, cfg.p_gain, cfg.output_limit) == (2.5, 1.0, 5.0)


def test_config_built_directly_is_validated():
    with pytest.raises(NonPositiveOutputLimitError):
        ControllerConfig(target=0.0, p_gain=1.0, output_limit=-2.0)
    with pytest.raises(NonFiniteTargetError):
        ControllerConfig(target=math.nan, p_gain=1.0)
    with pytest.raises(AllZeroGainsError):
        ControllerConfig(target=1.0)
    with pytest.raises(ConfigError):
        ControllerConfig(target=1.0, p_gain=1.0, derivative_mode='setpoint')


def test_controller_built_directly_is_validated():
    with pytest.raises(NonFiniteGainError):
        Controller(ControllerConfig(target=1.0, p_gain=math.inf))
