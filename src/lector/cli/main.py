"""lector-extract: separate a voice-over from a mixed PCM track."""

from __future__ import annotations

import click
from pydantic import ValidationError

from lector import __version__
from lector.utils.progress import log_error, set_quiet


@click.command()
@click.version_option(version=__version__, prog_name="lector-extract")
@click.argument("original", type=click.Path(dir_okay=False))
@click.argument("mixed", type=click.Path(dir_okay=False))
@click.argument("output_diff", type=click.Path(dir_okay=False))
@click.argument("output_sum", type=click.Path(dir_okay=False))
@click.option(
    "--max-lag",
    default=48000,
    show_default=True,
    type=click.IntRange(min=0),
    help="Lag search window in samples (±)",
)
@click.option(
    "--lag", "manual_lag",
    default=None,
    type=int,
    help="Use this lag instead of estimating it",
)
@click.option(
    "--method",
    default="direct",
    show_default=True,
    type=click.Choice(["direct", "fft"]),
    help="Cross-correlation method",
)
@click.option(
    "--align", "alignment",
    default="skip",
    show_default=True,
    type=click.Choice(["skip", "shift"]),
    help="Alignment strategy (truncating skip or zero-padded shift)",
)
@click.option(
    "--policy",
    default="halving",
    show_default=True,
    type=click.Choice(["halving", "gain"]),
    help="Combine policy (integer halving or gain-compensated)",
)
@click.option(
    "--sample-rate",
    default=48000,
    show_default=True,
    type=click.IntRange(min=1),
    help="Sample rate of both input tracks",
)
@click.option(
    "--stereo-input",
    is_flag=True,
    help="Inputs are interleaved stereo; downmix to mono on load",
)
@click.option("--quiet", "-q", is_flag=True, help="Only report errors")
def cli(
    original: str,
    mixed: str,
    output_diff: str,
    output_sum: str,
    max_lag: int,
    manual_lag: int | None,
    method: str,
    alignment: str,
    policy: str,
    sample_rate: int,
    stereo_input: bool,
    quiet: bool,
) -> None:
    """Extract the lector track from MIXED using ORIGINAL.

    Writes the isolated voice-over estimate to OUTPUT_DIFF and the
    recombined mix to OUTPUT_SUM. All files are headerless 16-bit
    little-endian PCM.
    """
    from lector.models.config import ExtractionConfig
    from lector.separation.module import run_extraction

    set_quiet(quiet)

    try:
        config = ExtractionConfig(
            sample_rate=sample_rate,
            channels=2 if stereo_input else 1,
            max_lag=max_lag,
            lag_strategy="manual" if manual_lag is not None else "correlate",
            manual_lag=manual_lag,
            correlation_method=method,
            alignment=alignment,
            combine_policy=policy,
        )
    except ValidationError as e:
        log_error(f"Invalid options: {e}")
        raise SystemExit(1)

    try:
        run_extraction(original, mixed, output_diff, output_sum, config)
    except Exception as e:
        log_error(f"Extraction failed: {e}")
        raise SystemExit(1)
