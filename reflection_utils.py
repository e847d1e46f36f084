from typing import Tuple

import numpy as np

from lpc_constants import FLOAT_DTYPE


def reflection_to_lpc(k: np.ndarray, r0: float = 1.0) -> Tuple[np.ndarray, float]:
    """
    Converts the reflection coefficients `k` to LPC coefficients `a` (step-up recursion).

    Uses the same sign convention as `levinson_durbin`, so feeding back the
    reflection coefficients of the solver gives back its LPC vector.

    :param k: (np.ndarray) the vector containing the reflection coefficients
    :param r0: (float) the zero lag autocorrelation (default: 1.)

    :return: (np.ndarray) the LPC coefficients, a[0] = 1,
            (float) the final prediction error, r0 * prod(1 - k[i]**2).
    """
    k = np.asarray(k, dtype=FLOAT_DTYPE)

    a = np.array([1.0], dtype=FLOAT_DTYPE)
    err = float(r0)

    for k_m in k:
        a, err = _levup(a, k_m, err)

    return a, err


def lpc_to_reflection(a: np.ndarray) -> np.ndarray:
    """
    Converts the LPC coefficients `a` to the reflection coefficients `k` (step-down recursion).
    If a[0] != 1, the polynomial is normalized by a[0] first.

    :param a: (np.ndarray) the vector containing the LPC coefficients

    :return: (np.ndarray) the reflection coefficients `k`.
    """
    a = np.asarray(a, dtype=np.float64)
    if a.size <= 1:
        return np.array([], dtype=FLOAT_DTYPE)

    if a[0] == 0.:
        raise ValueError("Leading coefficient cannot be zero.")

    a = a / a[0]

    # The leading one does not count
    p = a.size - 1
    k = np.zeros(p, dtype=FLOAT_DTYPE)

    k[-1] = a[-1]
    for m in range(p - 2, -1, -1):
        a = _levdown(a)
        k[m] = a[-1]

    return k


def is_stable(a: np.ndarray) -> bool:
    """
    Checks whether the synthesis filter 1/A(z) is stable, i.e. every
    reflection coefficient lies strictly inside (-1, 1).
    """
    a = np.asarray(a, dtype=np.float64)
    if a.size <= 1:
        return True
    if a[0] == 0.:
        raise ValueError("Leading coefficient cannot be zero.")

    a = a / a[0]
    while a.size > 1:
        if abs(a[-1]) >= 1.0:
            return False
        a = _levdown(a)

    return True

#########################################################################


def _levup(acur: np.ndarray, knxt: float, ecur: float) -> Tuple[np.ndarray, float]:

    # Drop the leading 1, it is not needed in the step-up
    acur = acur[1:]

    acur_0 = np.append(acur, FLOAT_DTYPE(0.0))
    acur_rev_1 = np.append(acur[::-1], FLOAT_DTYPE(1.0))

    anxt = (acur_0 + knxt * acur_rev_1).astype(FLOAT_DTYPE)
    enxt = (1.0 - float(knxt) ** 2) * ecur

    # Insert '1' at the beginning to make it an actual polynomial
    anxt = np.insert(anxt, 0, FLOAT_DTYPE(1.0))

    return anxt, enxt


def _levdown(anxt: np.ndarray) -> np.ndarray:

    # Drop the leading 1 (not needed in the step-down)
    anxt = anxt[1:]

    knxt = anxt[-1]
    if abs(knxt) == 1.0:
        raise ValueError("At least one of the reflection coefficients is equal to one.\nThe algorithm fails for this case.")

    acur = (anxt[:-1] - knxt * anxt[::-1][1:]) / (1 - knxt ** 2)

    acur = np.insert(acur, 0, 1.0)

    return acur
