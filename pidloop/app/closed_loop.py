
import argparse

from ..policy.builder import builder_from_dict
from ..simulation.plant import make_plant
from ..utils.signal import ema

DEFAULT_CONFIG = {
    'mode': 'echo',
    'steps': 101,
    'dt': 10.0,
    'initial_measurement': 1.0,
    'smoothing': 1.0,
    'controller': {'target': 1000.0, 'kp': 0.01, 'ki': 0.01, 'kd': 0.01,
                   'derivative': 'error', 'output_limit': None},
    'plant': {},
}

def load_config(path):
    import yaml
    with open(path, 'r', encoding='utf-8') as f:
        cfg = yaml.safe_load(f) or {}
    merged = dict(DEFAULT_CONFIG)
    merged.update(cfg)
    return merged

def run(cfg, log_fn=print):
    """Drive one closed loop for cfg['steps'] steps. Returns the list of outputs."""
    log = log_fn
    ctrl = builder_from_dict(cfg['controller']).build()
    dt = float(cfg['dt'])
    plant = make_plant(cfg['mode'], cfg.get('plant') or {}, cfg['initial_measurement'])
    alpha = float(cfg.get('smoothing', 1.0))

    log(f"[START] mode={cfg['mode']} steps={cfg['steps']} dt={dt} target={ctrl.config.target}")
    outputs = []
    smoothed = None
    try:
        for i in range(int(cfg['steps'])):
            smoothed = ema(smoothed, plant.measure(), alpha)
            out = ctrl.compute(smoothed, dt)
            t = ctrl.last_terms
            log(f"[CTRL] {i} : y={smoothed:.4f} p={t.p:.4f} i={t.i:.4f} d={t.d:.4f} -> u={out:.4f}")
            limit = ctrl.config.output_limit
            if limit is not None and abs(out) >= limit:
                # integral keeps growing while clamped (no anti-windup)
                log(f"[WARN] output saturated at {out:.4f} (limit {limit})")
            plant.apply(out, dt)
            outputs.append(out)
    except KeyboardInterrupt:
        log("[STOP] Interrupted by user.")
    finally:
        log(f"[END] steps run: {len(outputs)}")
    return outputs

def main(argv=None):
    p = argparse.ArgumentParser()
    p.add_argument('--config', default=None)
    p.add_argument('--mode', choices=['echo', 'first_order'], default=None)
    p.add_argument('--steps', type=int, default=None)
    args = p.parse_args(argv)

    cfg = load_config(args.config) if args.config else dict(DEFAULT_CONFIG)
    if args.mode is not None:
        cfg['mode'] = args.mode
    if args.steps is not None:
        cfg['steps'] = args.steps

    run(cfg)

if __name__ == '__main__':
    main()
