"""Noise conditioning applied to each analysis window before pitch estimation."""
import numpy as np

# High-pass coefficient: closer to 1.0 keeps more low end.
HIGH_PASS_ALPHA = 0.95

# Gate threshold as a fraction of the window's RMS.
GATE_RMS_FRACTION = 0.15


def high_pass(samples: np.ndarray, alpha: float = HIGH_PASS_ALPHA) -> np.ndarray:
    """First-order IIR high-pass, y[n] = a * (y[n-1] + x[n] - x[n-1]).

    The filter restarts on every call (y[0] = 0, previous input = x[0]),
    so consecutive windows are filtered independently.
    """
    x = np.asarray(samples, dtype=np.float64)
    y = np.zeros(len(x), dtype=np.float64)
    if len(x) < 2:
        return y.astype(np.float32)

    prev_input = x[0]
    prev_output = 0.0
    for n in range(1, len(x)):
        prev_output = alpha * (prev_output + x[n] - prev_input)
        prev_input = x[n]
        y[n] = prev_output
    return y.astype(np.float32)


def noise_gate(samples: np.ndarray, fraction: float = GATE_RMS_FRACTION) -> np.ndarray:
    """Zero every sample whose magnitude does not exceed fraction * RMS."""
    x = np.asarray(samples, dtype=np.float32)
    if len(x) == 0:
        return x.copy()

    rms = float(np.sqrt(np.mean(np.square(x, dtype=np.float64))))
    threshold = rms * fraction
    return np.where(np.abs(x) > threshold, x, 0.0).astype(np.float32)


def condition(samples: np.ndarray) -> np.ndarray:
    """High-pass then gate a window. Output has the same length as the input.

    Args:
        samples: Mono float samples in [-1.0, 1.0]. Not modified.

    Returns:
        New float32 array.
    """
    if len(samples) == 0:
        return np.zeros(0, dtype=np.float32)
    return noise_gate(high_pass(samples))
