import logging
from typing import Optional

import numpy as np

from lpc_constants import FLOAT_DTYPE, LSF_CHECK_ITERATIONS, LSF_EPS, LSF_EPS2, LSF_MAX, LSF_MIN

log = logging.getLogger(__name__)


def lsf_check(lsf: np.ndarray, dim: Optional[int] = None) -> bool:
    """
    Enforces a minimum spacing and the valid range on a table of LSF vectors, in place.

    Each adjacent pair closer than LSF_EPS is pushed apart by LSF_EPS2 on both
    sides; a pair already out of order keeps lsf[k] and moves lsf[k + 1] to
    LSF_EPS2 above it, so nothing is pushed onto the previous pair. Both
    values of the pair are then clamped to [LSF_MIN, LSF_MAX]. The whole table
    is swept LSF_CHECK_ITERATIONS times.

    :param lsf: np.ndarray - float32 table of LSF vectors, shape (NoAn, dim), or
        a flat table of NoAn * dim values, or a single vector.
    :param dim: int - Dimension of each LSF vector, needed for flat tables.
    :return: bool - True if any coefficient was changed.
    """
    if not isinstance(lsf, np.ndarray) or lsf.dtype != FLOAT_DTYPE:
        raise TypeError("LSF table must be a float32 numpy array, it is modified in place.")

    if dim is None:
        dim = lsf.shape[-1] if lsf.ndim > 0 else 0
    if dim <= 0 or lsf.size % dim != 0:
        raise ValueError(f"LSF table of {lsf.size} values cannot be split into vectors of {dim}")

    table = lsf.reshape(-1, dim)
    if not np.shares_memory(table, lsf):
        raise ValueError("LSF table must be contiguous, it is modified in place.")

    eps = FLOAT_DTYPE(LSF_EPS)
    eps2 = FLOAT_DTYPE(LSF_EPS2)
    minlsf = FLOAT_DTYPE(LSF_MIN)
    maxlsf = FLOAT_DTYPE(LSF_MAX)

    change = False
    for _ in range(LSF_CHECK_ITERATIONS):
        for vec in table:
            for k in range(dim - 1):
                if vec[k + 1] - vec[k] < eps:
                    if vec[k + 1] < vec[k]:
                        vec[k + 1] = vec[k] + eps2
                    else:
                        vec[k] -= eps2
                        vec[k + 1] += eps2
                    change = True

                for pos in (k, k + 1):
                    if vec[pos] < minlsf:
                        vec[pos] = minlsf
                        change = True
                    elif vec[pos] > maxlsf:
                        vec[pos] = maxlsf
                        change = True

    if change:
        log.debug("LSF table of %d vectors corrected", len(table))

    return change
