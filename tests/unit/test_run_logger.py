"""Unit tests for structured phase logging."""

from __future__ import annotations

import io

from notevoice.telemetry.logger import RunLogger


def test_run_logger_emits_phase_lines_in_order() -> None:
    """Stage events are written as deterministic `[phase]` lines."""

    sink = io.StringIO()
    run_logger = RunLogger(sink=sink)

    run_logger.log_stage_start("summarize")
    run_logger.log_stage_complete("summarize")
    run_logger.log_stage_failure("synthesize", "ExternalServiceError")

    assert sink.getvalue().splitlines() == [
        "[phase] level=INFO stage=summarize event=start",
        "[phase] level=INFO stage=summarize event=complete",
        "[phase] level=ERROR stage=synthesize event=failure error_type=ExternalServiceError",
    ]


def test_run_logger_outcome_sorts_and_sanitizes_context() -> None:
    """Outcome context keys are sorted, unsafe characters replaced, and `None` skipped."""

    sink = io.StringIO()
    run_logger = RunLogger(sink=sink)

    run_logger.log_outcome("done", note="Notes/My Note.md", audio_path="Audio/My Note.mp3", extra=None)
    run_logger.log_outcome("failed", stage="read")

    assert sink.getvalue().splitlines() == [
        "[phase] level=INFO stage=run event=outcome "
        "audio_path=Audio/My_Note.mp3 note=Notes/My_Note.md status=done",
        "[phase] level=ERROR stage=read event=outcome status=failed",
    ]


def test_run_logger_level_filters_lower_severity() -> None:
    """A higher threshold drops informational stage lines."""

    sink = io.StringIO()
    run_logger = RunLogger(sink=sink, level="ERROR")

    run_logger.log_stage_start("read")
    run_logger.log_outcome("failed", stage="read")

    assert sink.getvalue().splitlines() == [
        "[phase] level=ERROR stage=read event=outcome status=failed",
    ]
