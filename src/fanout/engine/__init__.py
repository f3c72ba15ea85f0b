"""
Submission engine.

Fans transfers out into concurrent tasks and collects their outcomes.
"""

from fanout.engine.submitter import BatchSummary, SubmissionEngine, submit_batch

__all__ = [
    "BatchSummary",
    "SubmissionEngine",
    "submit_batch",
]
