"""Lead pull request selection."""

from collections.abc import Iterable

from .models import PullRequestSummary

APPROVED = "APPROVED"


def is_eligible(pr: PullRequestSummary, author: str | None = None) -> bool:
    """Return True if the pull request may lead the queue.

    Parameters
    ----------
    pr : PullRequestSummary
        Pull request to check.
    author : str or None, optional
        Required author login. Pull requests without a reported author
        never match a set filter.

    Returns
    -------
    bool
        True if approved and (when filtered) opened by ``author``.

    """
    if pr.review_decision != APPROVED:
        return False
    if author is not None and pr.author != author:
        return False
    return True


def select_candidate(
    pull_requests: Iterable[PullRequestSummary],
    author: str | None = None,
) -> PullRequestSummary | None:
    """Pick the oldest eligible pull request.

    GitHub does not return pull requests sorted by number, so every entry
    is scanned before deciding.

    Parameters
    ----------
    pull_requests : Iterable[PullRequestSummary]
        All open pull requests (every page).
    author : str or None, optional
        Required author login.

    Returns
    -------
    PullRequestSummary or None
        Eligible pull request with the smallest number, or None.

    """
    candidate = None
    for pr in pull_requests:
        if not is_eligible(pr, author):
            continue
        if candidate is None or pr.number < candidate.number:
            candidate = pr
    return candidate
