"""
Human-readable result printing.
"""

import sys
from typing import Optional, Sequence, TextIO

from fanout.core.outcome import SubmissionOutcome
from fanout.engine.submitter import BatchSummary


def format_outcome(outcome: SubmissionOutcome) -> str:
    """Format one outcome as a single line."""
    elapsed = f"{outcome.elapsed_ms:.0f} ms"
    if outcome.is_confirmed:
        return f"✅ Tx sent: {outcome.signature} ({elapsed})"
    return f"❌ Error: {outcome.cause} ({elapsed})"


def format_summary(outcomes: Sequence[SubmissionOutcome]) -> str:
    summary = BatchSummary.from_outcomes(outcomes)
    return (
        f"{summary.confirmed}/{summary.total} confirmed, {summary.failed} failed "
        f"(slowest {summary.max_elapsed_ms:.0f} ms)"
    )


def print_report(
    outcomes: Sequence[SubmissionOutcome],
    stream: Optional[TextIO] = None,
) -> None:
    """Print every outcome in request order, followed by a summary line."""
    stream = stream or sys.stdout
    for outcome in sorted(outcomes, key=lambda o: o.index):
        print(format_outcome(outcome), file=stream)
    print(file=stream)
    print(format_summary(outcomes), file=stream)
