"""Notevoice pipeline package.

This package contains orchestration and stage-telemetry helpers for turning a
note into an audio artifact.
"""

from .orchestrator import NotevoicePipeline, should_summarize

__all__ = ["NotevoicePipeline", "should_summarize"]
