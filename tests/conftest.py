"""Shared fixtures for merge-queue-bot tests."""

import pytest

from merge_queue_bot.auto_merger import PullRequestSummary


@pytest.fixture
def make_pr():
    """Return a factory for pull request summaries."""

    def _make_pr(
        number: int = 1,
        review_decision: str | None = "APPROVED",
        author: str | None = "alice",
        check_state: str | None = "SUCCESS",
        head_ref: str | None = None,
        base_ref: str = "main",
        is_cross_repository: bool = False,
    ) -> PullRequestSummary:
        return PullRequestSummary(
            id=f"PR_node{number}",
            number=number,
            title=f"Change {number}",
            author=author,
            head_ref=head_ref or f"feature-{number}",
            head_oid=f"{number:040x}",
            base_ref=base_ref,
            review_decision=review_decision,
            check_state=check_state,
            is_cross_repository=is_cross_repository,
        )

    return _make_pr
