import logging
from typing import Tuple

import numpy as np

from lpc_constants import EPS, FLOAT_DTYPE

log = logging.getLogger(__name__)


def autocorr(x: np.ndarray, order: int) -> np.ndarray:
    """
    Computes the autocorrelation of a signal frame up to lag `order`.

    No normalization and no windowing is applied, the frame is taken as is.

    :param x: np.ndarray - Signal frame (N samples).
    :param order: int - Largest lag, must satisfy 0 <= order < N.
    :return: np.ndarray - Autocorrelation vector r (order + 1 values).
    """
    x = np.asarray(x, dtype=FLOAT_DTYPE)
    N = len(x)
    if order < 0 or order >= N:
        raise ValueError(f"Invalid order: {order}. Expected 0 <= order < {N}.")

    r = np.zeros(order + 1, dtype=FLOAT_DTYPE)
    for lag in range(order + 1):
        # Running float32 sum, term by term from n = 0
        r[lag] = np.cumsum(x[:N - lag] * x[lag:], dtype=FLOAT_DTYPE)[-1]

    return r


def window(x: np.ndarray, w: np.ndarray) -> np.ndarray:
    """
    Multiplies a signal by a window, sample by sample.

    :param x: np.ndarray - The original data vector.
    :param w: np.ndarray - The window, same length as x.
    :return: np.ndarray - The windowed data.
    """
    x = np.asarray(x, dtype=FLOAT_DTYPE)
    w = np.asarray(w, dtype=FLOAT_DTYPE)
    if len(x) != len(w):
        raise ValueError(f"Window has incorrect length: {len(w)}. Expected: {len(x)}")

    return x * w


def levinson_durbin(r: np.ndarray, order: int) -> Tuple[np.ndarray, np.ndarray]:
    """
    Levinson-Durbin recursion from autocorrelation to LPC and reflection coefficients.

    The polynomial follows the convention A(z) = 1 + a[1] z^-1 + ... + a[p] z^-p,
    with a[m + 1] = k[m] after step m. A frame whose energy r[0] is below EPS is
    modelled as a flat spectrum: all reflection coefficients and all a[i], i >= 1,
    are zero. No stability check is made on the result.

    Parameters:
    - r: np.ndarray, autocorrelation vector (at least order + 1 values)
    - order: int, order of the LPC filter

    Returns:
    - a: np.ndarray, LPC coefficients (order + 1 values, a[0] = 1)
    - k: np.ndarray, reflection coefficients (order values)
    """
    r = np.asarray(r, dtype=FLOAT_DTYPE)
    if order < 0:
        raise ValueError(f"Invalid order: {order}. Expected order >= 0.")
    if len(r) < order + 1:
        raise ValueError(f"Autocorrelation has incorrect length: {len(r)}. Expected at least: {order + 1}")

    a = np.zeros(order + 1, dtype=FLOAT_DTYPE)
    k = np.zeros(order, dtype=FLOAT_DTYPE)
    a[0] = 1.0

    if order == 0:
        return a, k

    if r[0] < EPS:
        log.debug("Frame energy %.3e below %.3e, using flat LPC model", r[0], EPS)
        return a, k

    k[0] = -r[1] / r[0]
    a[1] = k[0]
    alpha = r[0] + r[1] * k[0]

    for m in range(1, order):
        # Prediction error of the order-m predictor on lag m + 1
        acc = r[m + 1]
        for i in range(m):
            acc += a[i + 1] * r[m - i]
        k[m] = -acc / alpha
        alpha += k[m] * acc

        for i in range((m + 1) // 2):
            low = a[i + 1]
            high = a[m - i]
            a[i + 1] = low + k[m] * high
            a[m - i] = high + k[m] * low
        a[m + 1] = k[m]

    return a, k


def bandwidth_expand(a: np.ndarray, coef: float) -> np.ndarray:
    """
    Scales a[i] by coef^i, pulling the poles of 1/A(z) towards the origin.

    :param a: np.ndarray - The LPC coefficients before bandwidth expansion.
    :param coef: float - The bandwidth expansion factor, in (0, 1].
    :return: np.ndarray - The bandwidth expanded LPC coefficients.
    """
    a = np.asarray(a, dtype=FLOAT_DTYPE)
    coef = FLOAT_DTYPE(coef)

    out = np.empty_like(a)
    if len(a) == 0:
        return out

    out[0] = a[0]
    chirp = coef
    for i in range(1, len(a)):
        out[i] = chirp * a[i]
        chirp *= coef

    return out


def interpolate(in1: np.ndarray, in2: np.ndarray, coef: float) -> np.ndarray:
    """
    Linear interpolation coef * in1 + (1 - coef) * in2.

    coef is not clamped, values outside [0, 1] extrapolate.
    """
    in1 = np.asarray(in1, dtype=FLOAT_DTYPE)
    in2 = np.asarray(in2, dtype=FLOAT_DTYPE)
    if len(in1) != len(in2):
        raise ValueError(f"Vectors have different lengths: {len(in1)} and {len(in2)}")

    coef = FLOAT_DTYPE(coef)
    invcoef = FLOAT_DTYPE(1.0) - coef
    return coef * in1 + invcoef * in2
