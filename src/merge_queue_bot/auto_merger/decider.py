"""Decide the next action for the lead pull request."""

from .models import Action, ComparisonResult, PullRequestSummary

CHECKS_PENDING = "PENDING"
CHECKS_SUCCESS = "SUCCESS"


def decide(
    comparison: ComparisonResult,
    pr: PullRequestSummary,
    auto_merge: bool,
    require_all_checks: bool,
) -> Action:
    """Choose exactly one action for this cycle.

    Rules are evaluated in order and the first match wins:

    1. Head is behind base: update the branch. A stale branch is never
       merged, whatever its check state.
    2. Auto-merge disabled: nothing to do.
    3. Checks still pending: wait.
    4. All checks required and rollup is not SUCCESS: wait.
    5. Otherwise: merge.

    Parameters
    ----------
    comparison : ComparisonResult
        Base/head comparison of the candidate.
    pr : PullRequestSummary
        The candidate.
    auto_merge : bool
        Whether merging is enabled.
    require_all_checks : bool
        Whether the rollup must be SUCCESS before merging.

    Returns
    -------
    Action
        Action to perform.

    """
    if comparison.behind_by > 0:
        return Action.UPDATE_BRANCH
    if not auto_merge:
        return Action.NO_OP
    if pr.check_state == CHECKS_PENDING:
        return Action.WAIT
    if require_all_checks and pr.check_state != CHECKS_SUCCESS:
        return Action.WAIT_CHECKS_NOT_SUCCESSFUL
    return Action.MERGE
