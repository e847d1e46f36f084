import logging

import numpy as np
import pytest

from lpc_constants import LSF_EPS, LSF_EPS2, LSF_MAX, LSF_MIN
from lsf_check import lsf_check


def lsf_table(*rows):
    return np.array(rows, dtype=np.float32)


def test_stable_table_is_unchanged():
    lsf = lsf_table([0.2, 0.5, 1.0, 2.0], [0.3, 0.8, 1.5, 2.5])
    before = lsf.copy()

    assert lsf_check(lsf) is False
    np.testing.assert_array_equal(lsf, before)


def test_close_pair_is_pushed_apart(caplog):
    lsf = lsf_table([0.5, 0.51, 1.0])

    with caplog.at_level(logging.DEBUG, logger="lsf_check"):
        assert lsf_check(lsf) is True

    np.testing.assert_allclose(lsf[0], [0.5 - LSF_EPS2, 0.51 + LSF_EPS2, 1.0], atol=1e-6)
    assert "corrected" in caplog.text


def test_inverted_pair_is_reordered():
    lsf = lsf_table([0.6, 0.5, 1.0])

    assert lsf_check(lsf) is True

    sep = np.diff(lsf[0])
    assert np.all(sep > 0)
    assert np.all(sep >= LSF_EPS - LSF_EPS2 - 1e-6)
    np.testing.assert_allclose(lsf[0], [0.6 - LSF_EPS2, 0.6 + 2 * LSF_EPS2, 1.0], atol=1e-6)


@pytest.mark.parametrize("row", [
    [1.0, 1.0, 1.0, 1.0],
    [1.0, 1.001, 0.999, 1.0, 2.0],
    [0.9, 0.8, 0.7, 2.0],
    [0.5, 0.45, 0.4, 0.35, 0.3],
])
def test_clustered_and_inverted_vectors_keep_minimum_spacing(row):
    lsf = lsf_table(row)

    assert lsf_check(lsf) is True

    assert np.all(np.diff(lsf[0]) >= LSF_EPS - LSF_EPS2 - 1e-6)


def test_equal_cluster_keeps_first_value_within_one_step():
    lsf = lsf_table([1.0, 1.0, 1.0, 1.0])

    lsf_check(lsf)

    assert 1.0 - 2 * LSF_EPS2 - 1e-6 <= lsf[0, 0] <= 1.0 - LSF_EPS2 + 1e-6
    assert np.all(lsf[0, 1:] >= 1.0 - 1e-6)


def test_values_are_clamped_to_range():
    lsf = lsf_table([0.0, 1.0, 3.5])

    assert lsf_check(lsf) is True
    np.testing.assert_allclose(lsf[0], [LSF_MIN, 1.0, LSF_MAX], atol=1e-6)


def test_second_run_reports_no_change():
    lsf = lsf_table([0.0, 0.02, 1.0, 3.5], [0.4, 0.3, 2.0, 2.01])
    assert lsf_check(lsf) is True

    corrected = lsf.copy()
    assert lsf_check(lsf) is False
    np.testing.assert_array_equal(lsf, corrected)


def test_random_tables_end_within_bounds():
    rng = np.random.default_rng(4)
    lsf = np.sort(rng.uniform(-0.5, 4.0, size=(5, 10)), axis=1).astype(np.float32)

    lsf_check(lsf)

    assert np.all(lsf >= np.float32(LSF_MIN))
    assert np.all(lsf <= np.float32(LSF_MAX))


def test_flat_table_with_dimension_is_modified_in_place():
    lsf = np.array([0.5, 0.51, 1.0, 0.2, 0.9, 1.8], dtype=np.float32)

    assert lsf_check(lsf, dim=3) is True
    assert lsf[1] - lsf[0] >= LSF_EPS - LSF_EPS2
    np.testing.assert_array_equal(lsf[3:], np.array([0.2, 0.9, 1.8], dtype=np.float32))


def test_single_vector():
    lsf = np.array([0.1, 0.12, 0.9], dtype=np.float32)
    assert lsf_check(lsf) is True
    assert lsf[1] - lsf[0] >= LSF_EPS - LSF_EPS2


@pytest.mark.parametrize("lsf", [
    [0.1, 0.5, 1.0],
    np.array([0.1, 0.5, 1.0]),
])
def test_rejects_non_float32_tables(lsf):
    with pytest.raises(TypeError):
        lsf_check(lsf)


def test_rejects_table_not_divisible_by_dimension():
    with pytest.raises(ValueError):
        lsf_check(np.zeros(5, dtype=np.float32), dim=3)
