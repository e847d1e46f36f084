from typing import Optional, Sequence, Tuple

import numpy as np

from lpc_constants import FLOAT_DTYPE, FLOAT_MAX


def vq(X: np.ndarray, CB: np.ndarray, n_cb: Optional[int] = None) -> Tuple[np.ndarray, int]:
    """
    Nearest neighbour vector quantization under squared Euclidean distance.

    Every codeword is visited; on equal distances the first codeword wins.

    Parameters:
    - X: np.ndarray, the vector to quantize (dim values)
    - CB: np.ndarray, the codebook, n_cb codewords of dim values laid out one after the other
    - n_cb: int, number of codewords (default: len(CB) // dim)

    Returns:
    - Xq: np.ndarray, copy of the selected codeword
    - index: int, position of the selected codeword in the codebook
    """
    X = np.asarray(X, dtype=FLOAT_DTYPE)
    CB = np.asarray(CB, dtype=FLOAT_DTYPE).ravel()
    dim = len(X)

    if dim == 0:
        raise ValueError("Cannot quantize an empty vector.")
    if n_cb is None:
        n_cb = len(CB) // dim
    if n_cb <= 0 or len(CB) != n_cb * dim:
        raise ValueError(f"Codebook has incorrect length: {len(CB)}. Expected: {n_cb} codewords of {dim} values")

    codewords = CB.reshape(n_cb, dim)

    mindist = FLOAT_MAX
    minindex = 0
    for j, codeword in enumerate(codewords):
        diff = X - codeword
        dist = np.dot(diff, diff)
        if dist < mindist:
            mindist = dist
            minindex = j

    return codewords[minindex].copy(), minindex


def split_vq(
    X: np.ndarray,
    CB: np.ndarray,
    dim: Sequence[int],
    cbsize: Sequence[int]
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Split vector quantization: X and CB are cut into contiguous segments and
    each segment is quantized independently with `vq`.

    :param X: np.ndarray - The vector to quantize.
    :param CB: np.ndarray - The concatenated codebooks of all splits.
    :param dim: Sequence[int] - Dimension of each split.
    :param cbsize: Sequence[int] - Number of codewords in each split codebook.
    :return: Tuple[np.ndarray, np.ndarray] - Quantized vector, codebook index of each split.
    """
    X = np.asarray(X, dtype=FLOAT_DTYPE)
    CB = np.asarray(CB, dtype=FLOAT_DTYPE).ravel()

    if len(dim) != len(cbsize):
        raise ValueError(f"dim and cbsize have different lengths: {len(dim)} and {len(cbsize)}")
    if sum(dim) != len(X):
        raise ValueError(f"Vector has incorrect length: {len(X)}. Expected: {sum(dim)}")
    cb_total = sum(d * n for d, n in zip(dim, cbsize))
    if cb_total != len(CB):
        raise ValueError(f"Codebook has incorrect length: {len(CB)}. Expected: {cb_total}")

    qX = np.zeros_like(X)
    index = np.zeros(len(dim), dtype=int)

    X_pos = 0
    cb_pos = 0
    for i, (d, n) in enumerate(zip(dim, cbsize)):
        qX[X_pos:X_pos + d], index[i] = vq(X[X_pos:X_pos + d], CB[cb_pos:cb_pos + d * n], n)
        X_pos += d
        cb_pos += d * n

    return qX, index


def sort_sq(x: float, cb: np.ndarray) -> Tuple[float, int]:
    """
    Scalar quantization against a strictly increasing codebook.

    The first codeword not below x is located, then x is compared with the
    midpoint between it and its predecessor; a value exactly on the midpoint
    goes to the lower codeword.

    Parameters:
    - x: float, the value to quantize
    - cb: np.ndarray, the quantization codebook (at least 2 increasing values)

    Returns:
    - xq: float, the quantized value
    - index: int, the quantization index
    """
    cb = np.asarray(cb, dtype=FLOAT_DTYPE)
    cb_size = len(cb)
    if cb_size < 2:
        raise ValueError(f"Codebook too small: {cb_size}. Expected at least 2 values.")
    if not np.all(np.diff(cb) > 0):
        raise ValueError("Codebook must be strictly increasing.")

    x = FLOAT_DTYPE(x)
    if x <= cb[0]:
        return float(cb[0]), 0

    # cb[0] < x here, so the scan can start one entry in
    i = 1
    while x > cb[i] and i < cb_size - 1:
        i += 1

    if x > (cb[i] + cb[i - 1]) / 2:
        return float(cb[i]), i
    return float(cb[i - 1]), i - 1
