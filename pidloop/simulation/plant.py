import numpy as np

class EchoPlant:
    """Feeds the controller's last output straight back as the next measurement."""
    def __init__(self, initial=1.0):
        self._y = float(initial)

    def measure(self):
        return self._y

    def apply(self, u, dt):
        self._y = float(u)


class FirstOrderPlant:
    """Discrete first-order lag: y += dt/tau * (gain*u - y).
    Optional Gaussian measurement noise from a seeded generator, so runs repeat.
    """
    def __init__(self, gain=1.0, time_constant=1.0, initial=0.0, noise_std=0.0, seed=42):
        if time_constant <= 0:
            raise ValueError(f"time_constant must be > 0, got {time_constant!r}")
        self.gain = float(gain)
        self.tau = float(time_constant)
        self.noise_std = float(noise_std)
        self.y = float(initial)
        self._rng = np.random.default_rng(seed)

    def measure(self):
        if self.noise_std > 0:
            return self.y + float(self._rng.normal(0, self.noise_std))
        return self.y

    def apply(self, u, dt):
        # cap the step at tau so large dt cannot overshoot the steady state
        alpha = min(1.0, dt / self.tau)
        self.y += alpha * (self.gain * u - self.y)


def make_plant(mode, plant_cfg, initial):
    if mode == 'echo':
        return EchoPlant(initial=initial)
    if mode == 'first_order':
        return FirstOrderPlant(gain=plant_cfg.get('gain', 1.0),
                               time_constant=plant_cfg.get('time_constant', 1.0),
                               initial=initial,
                               noise_std=plant_cfg.get('noise_std', 0.0),
                               seed=plant_cfg.get('seed', 42))
    raise ValueError(f"Unknown mode: {mode!r}")
