import numpy as np
import pytest

from lector.errors import AlignmentError, DegenerateSignalError, SignalIOError
from lector.models.config import ExtractionConfig
from lector.separation.align import shift_signal
from lector.separation.module import extract_lector, run_extraction
from lector.utils.pcm import load_pcm, store_pcm

ORIGINAL = np.array([100, 200, 300, 400], dtype=np.int16)
MIXED = np.array([0, 250, 350, 450], dtype=np.int16)


def _manual(lag: int, **kwargs) -> ExtractionConfig:
    return ExtractionConfig(max_lag=2, lag_strategy="manual", manual_lag=lag, **kwargs)


def test_worked_example_with_truncating_skip():
    output = extract_lector(ORIGINAL, MIXED, _manual(1))

    # a = [200, 300, 400], c = [0, 250, 350]
    assert output.difference.tolist() == [0 - 100, 125 - 150, 175 - 200]
    assert output.recombined.tolist() == [100, 275, 375]
    assert output.report.aligned_samples == 3
    assert output.report.alpha == pytest.approx(215000 / 290000)
    assert output.report.lag.strategy == "manual"


def test_skip_rejects_negative_lag():
    with pytest.raises(AlignmentError):
        extract_lector(ORIGINAL, MIXED, _manual(-1))


def test_skip_past_end_is_degenerate():
    config = ExtractionConfig(max_lag=10, lag_strategy="manual", manual_lag=6)
    with pytest.raises(DegenerateSignalError):
        extract_lector(ORIGINAL, MIXED, config)


def test_shift_alignment_keeps_mixed_length():
    output = extract_lector(ORIGINAL, MIXED, _manual(-1, alignment="shift"))

    # a = [200, 300, 400, 0]
    assert len(output.difference) == len(MIXED)
    assert output.difference.tolist() == [-100, 125 - 150, 175 - 200, 225]


def test_correlated_shift_with_gain_policy_cancels_scaled_original():
    rng = np.random.default_rng(11)
    original = (rng.integers(-4000, 4000, size=3000) * 2).astype(np.int16)
    mixed = (shift_signal(original, 7, len(original)) // 2).astype(np.int16)
    config = ExtractionConfig(max_lag=20, alignment="shift", combine_policy="gain")

    output = extract_lector(original, mixed, config)

    assert output.report.lag.lag == 7
    assert output.report.alpha == pytest.approx(0.5)
    assert np.all(output.difference == 0)
    np.testing.assert_array_equal(output.recombined, shift_signal(original, 7, len(original)))


def test_inputs_are_not_mutated():
    original = ORIGINAL.copy()
    mixed = MIXED.copy()
    extract_lector(original, mixed, _manual(1))
    np.testing.assert_array_equal(original, ORIGINAL)
    np.testing.assert_array_equal(mixed, MIXED)


def test_run_extraction_writes_both_outputs(tmp_path):
    store_pcm(tmp_path / "orig.pcm", ORIGINAL)
    store_pcm(tmp_path / "mixed.pcm", MIXED)

    report = run_extraction(
        tmp_path / "orig.pcm",
        tmp_path / "mixed.pcm",
        tmp_path / "diff.pcm",
        tmp_path / "sum.pcm",
        _manual(1),
    )

    assert report.lag.lag == 1
    assert load_pcm(tmp_path / "diff.pcm").tolist() == [-100, -25, -25]
    assert load_pcm(tmp_path / "sum.pcm").tolist() == [100, 275, 375]


def test_run_extraction_missing_input_writes_nothing(tmp_path):
    store_pcm(tmp_path / "orig.pcm", ORIGINAL)

    with pytest.raises(SignalIOError):
        run_extraction(
            tmp_path / "orig.pcm",
            tmp_path / "missing.pcm",
            tmp_path / "diff.pcm",
            tmp_path / "sum.pcm",
            _manual(1),
        )

    assert not (tmp_path / "diff.pcm").exists()
    assert not (tmp_path / "sum.pcm").exists()


def test_run_extraction_removes_first_output_when_second_fails(tmp_path):
    store_pcm(tmp_path / "orig.pcm", ORIGINAL)
    store_pcm(tmp_path / "mixed.pcm", MIXED)
    blocker = tmp_path / "blocker"
    blocker.write_text("")

    with pytest.raises(SignalIOError):
        run_extraction(
            tmp_path / "orig.pcm",
            tmp_path / "mixed.pcm",
            tmp_path / "diff.pcm",
            blocker / "sum.pcm",
            _manual(1),
        )

    assert not (tmp_path / "diff.pcm").exists()


@pytest.mark.parametrize("true_lag", [5, -5])
def test_default_config_cancels_shifted_copy(true_lag):
    rng = np.random.default_rng(21)
    original = rng.integers(-8000, 8000, size=2000).astype(np.int16)
    mixed = shift_signal(original, true_lag, len(original))

    output = extract_lector(original, mixed, ExtractionConfig(max_lag=20))

    assert output.report.lag.lag == true_lag
    assert output.report.alignment == "skip"
    assert output.report.aligned_samples == 2000 - abs(true_lag)
    assert output.report.alpha == pytest.approx(1.0)
    assert np.all(output.difference == 0)


def test_default_config_isolates_added_voice():
    rng = np.random.default_rng(22)
    original = (rng.integers(-4000, 4000, size=2500) * 2).astype(np.int16)
    voice = np.zeros(2500, dtype=np.int16)
    voice[1000:1100] = 600
    mixed = (shift_signal(original, 9, 2500) + voice).astype(np.int16)

    output = extract_lector(original, mixed, ExtractionConfig(max_lag=30))

    assert output.report.lag.lag == 9
    # mixed loses its first 9 samples, so the voice moves 9 samples earlier
    expected = np.zeros(2491, dtype=np.int16)
    expected[991:1091] = 300
    np.testing.assert_array_equal(output.difference, expected)
