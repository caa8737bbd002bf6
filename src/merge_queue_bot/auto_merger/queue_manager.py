"""Queue cycle: fetch, select, compare, decide, act."""

from rich.markup import escape

from ..utils.logging import log_error, log_info, log_success, log_warning
from .decider import decide
from .gateway import PlatformGateway
from .models import (
    Action,
    CycleOutcome,
    CycleResult,
    GatewayError,
    MergeError,
    SelectionCriteria,
)
from .selector import select_candidate

WAIT_OUTCOMES = {
    Action.WAIT: (
        CycleOutcome.WAITING_ON_CHECKS,
        "Checks are still running, waiting",
    ),
    Action.WAIT_CHECKS_NOT_SUCCESSFUL: (
        CycleOutcome.WAITING_CHECKS_NOT_SUCCESSFUL,
        "Not all checks are successful, waiting",
    ),
    Action.NO_OP: (
        CycleOutcome.NO_ACTION,
        "Branch is up to date, auto-merge disabled",
    ),
}


def run_cycle(criteria: SelectionCriteria, gateway: PlatformGateway) -> CycleResult:
    """Advance the lead pull request by at most one step.

    Every cycle is a fresh evaluation of remote state. Soft failures
    (fetch error, nothing to do, comparison unavailable, merge rejected)
    end the cycle with a result. A failed branch update propagates to
    the caller.

    Parameters
    ----------
    criteria : SelectionCriteria
        Repository and queue settings.
    gateway : PlatformGateway
        Authenticated platform gateway.

    Returns
    -------
    CycleResult
        Outcome of the cycle.

    Raises
    ------
    GatewayError
        If the branch update mutation fails.

    """
    log_info(f"Checking open pull requests in {criteria.repository}")

    try:
        pull_requests = gateway.list_open_pull_requests(criteria.owner, criteria.repo)
    except GatewayError as e:
        log_error(f"Failed to fetch pull requests: {escape(str(e))}")
        return CycleResult(CycleOutcome.FETCH_FAILED, message=str(e))

    if not pull_requests:
        log_info("No open pull requests found")
        return CycleResult(
            CycleOutcome.NO_PULL_REQUESTS, message="No open pull requests"
        )

    log_info(f"Found {len(pull_requests)} open pull requests")

    pr = select_candidate(pull_requests, criteria.author)
    if pr is None:
        message = "No approved pull request found"
        if criteria.author:
            message += f" for author {criteria.author}"
        log_info(message)
        return CycleResult(CycleOutcome.NO_CANDIDATE, message=message)

    log_info(
        f"Lead pull request: {criteria.repository}#{pr.number} ({escape(pr.title)})"
    )

    if pr.is_cross_repository:
        # Fork branches cannot be compared by name inside the base repository
        message = f"Comparison unavailable for fork branch {pr.head_ref}"
        log_error(f"  {message}")
        return CycleResult(
            CycleOutcome.COMPARISON_UNAVAILABLE, pull_request=pr, message=message
        )

    try:
        comparison = gateway.compare_branches(
            criteria.owner, criteria.repo, pr.base_ref, pr.head_ref
        )
    except GatewayError as e:
        log_error(
            f"  Failed to compare {pr.base_ref}...{pr.head_ref}: {escape(str(e))}"
        )
        comparison = None

    if comparison is None:
        message = f"Comparison unavailable for {pr.base_ref}...{pr.head_ref}"
        log_error(f"  {message}")
        return CycleResult(
            CycleOutcome.COMPARISON_UNAVAILABLE, pull_request=pr, message=message
        )

    log_info(
        f"  {pr.head_ref} is {comparison.behind_by} behind, "
        f"{comparison.ahead_by} ahead of {pr.base_ref} ({comparison.status})"
    )

    action = decide(comparison, pr, criteria.auto_merge, criteria.require_all_checks)
    log_info(f"  Decision: {action.value} (checks: {pr.check_state or 'none'})")

    if action is Action.UPDATE_BRANCH:
        gateway.request_branch_update(pr.id)
        log_success(f"  Update requested for #{pr.number}")
        return CycleResult(
            CycleOutcome.UPDATE_REQUESTED,
            pull_request=pr,
            comparison=comparison,
            message=f"Branch {pr.head_ref} updated from {pr.base_ref}",
            action=action,
        )

    if action is Action.MERGE:
        try:
            gateway.request_merge(pr.id)
        except MergeError as e:
            log_error(f"  Merge of #{pr.number} failed: {escape(str(e))}")
            return CycleResult(
                CycleOutcome.MERGE_FAILED,
                pull_request=pr,
                comparison=comparison,
                message=str(e),
                action=action,
            )
        log_success(f"  Merge requested for #{pr.number}")
        return CycleResult(
            CycleOutcome.MERGE_REQUESTED,
            pull_request=pr,
            comparison=comparison,
            message=f"Pull request #{pr.number} squash-merged",
            action=action,
        )

    outcome, message = WAIT_OUTCOMES[action]
    if action is Action.WAIT_CHECKS_NOT_SUCCESSFUL:
        log_warning(f"  {message}")
    else:
        log_info(f"  {message}")
    return CycleResult(
        outcome,
        pull_request=pr,
        comparison=comparison,
        message=message,
        action=action,
    )
