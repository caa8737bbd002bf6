"""Tests for the GitHub GraphQL gateway."""

import json
import subprocess
from unittest.mock import MagicMock, patch

import pytest

from merge_queue_bot.auto_merger import GatewayError, GitHubGateway, MergeError


def gh_response(data=None, errors=None) -> MagicMock:
    """Build a fake completed gh process."""
    payload = {"data": data}
    if errors:
        payload["errors"] = errors
    return MagicMock(stdout=json.dumps(payload))


def pr_node(number: int, review_decision="APPROVED", state="SUCCESS") -> dict:
    """Build a PullRequest GraphQL node."""
    return {
        "id": f"PR_{number}",
        "number": number,
        "title": f"Change {number}",
        "author": {"login": "alice"},
        "headRefName": f"feature-{number}",
        "headRefOid": "a" * 40,
        "baseRefName": "main",
        "reviewDecision": review_decision,
        "commits": {"nodes": [{"commit": {"statusCheckRollup": {"state": state}}}]},
    }


def page(nodes, has_next=False, cursor=None) -> MagicMock:
    """Build one page of the pull request listing."""
    return gh_response(
        {
            "repository": {
                "pullRequests": {
                    "nodes": nodes,
                    "pageInfo": {"hasNextPage": has_next, "endCursor": cursor},
                }
            }
        }
    )


@pytest.fixture
def gateway():
    """Create a gateway with a test token."""
    return GitHubGateway(gh_token="test-token")


@pytest.fixture
def mock_run():
    """Patch subprocess.run in the gateway module."""
    with patch("merge_queue_bot.auto_merger.gateway.subprocess.run") as mock:
        yield mock


class TestGhInvocation:
    """Test how gh is invoked."""

    def test_passes_token_in_environment(self, gateway, mock_run):
        """Test that GH_TOKEN is set for the gh subprocess."""
        mock_run.return_value = page([])

        gateway.list_open_pull_requests("my-org", "my-repo")

        env = mock_run.call_args.kwargs["env"]
        assert env["GH_TOKEN"] == "test-token"
        assert mock_run.call_args.kwargs["check"] is True

    def test_typed_and_raw_fields(self, gateway, mock_run):
        """Test that strings use -f, integers use -F and None is omitted."""
        mock_run.return_value = page([])

        gateway.list_open_pull_requests("my-org", "my-repo")

        cmd = mock_run.call_args.args[0]
        assert cmd[:3] == ["gh", "api", "graphql"]
        assert cmd[cmd.index("owner=my-org") - 1] == "-f"
        assert cmd[cmd.index("first=100") - 1] == "-F"
        assert not any(arg.startswith("cursor=") for arg in cmd)


class TestListOpenPullRequests:
    """Test list_open_pull_requests."""

    def test_parses_nodes(self, gateway, mock_run):
        """Test that nodes become summaries."""
        mock_run.return_value = page([pr_node(5, state="PENDING")])

        prs = gateway.list_open_pull_requests("my-org", "my-repo")

        assert len(prs) == 1
        assert prs[0].number == 5
        assert prs[0].id == "PR_5"
        assert prs[0].author == "alice"
        assert prs[0].check_state == "PENDING"
        assert prs[0].review_decision == "APPROVED"

    def test_drains_all_pages(self, gateway, mock_run):
        """Test that pagination follows endCursor until the last page."""
        mock_run.side_effect = [
            page([pr_node(5)], has_next=True, cursor="cursor-1"),
            page([pr_node(3)], has_next=False),
        ]

        prs = gateway.list_open_pull_requests("my-org", "my-repo")

        assert [pr.number for pr in prs] == [5, 3]
        assert mock_run.call_count == 2
        second_cmd = mock_run.call_args_list[1].args[0]
        assert "cursor=cursor-1" in second_cmd

    def test_mid_pagination_failure_raises(self, gateway, mock_run):
        """Test that a failing second page discards the partial result."""
        mock_run.side_effect = [
            page([pr_node(5)], has_next=True, cursor="cursor-1"),
            subprocess.CalledProcessError(1, ["gh"], stderr="HTTP 502"),
        ]

        with pytest.raises(GatewayError, match="HTTP 502"):
            gateway.list_open_pull_requests("my-org", "my-repo")

    def test_missing_gh_binary_raises(self, gateway, mock_run):
        """Test that gh failing to start becomes a GatewayError."""
        mock_run.side_effect = FileNotFoundError("gh")

        with pytest.raises(GatewayError, match="could not run gh"):
            gateway.list_open_pull_requests("my-org", "my-repo")

    def test_next_page_without_cursor_raises(self, gateway, mock_run):
        """Test that a next page with no endCursor stops pagination."""
        mock_run.return_value = page([pr_node(5)], has_next=True, cursor=None)

        with pytest.raises(GatewayError, match="missing endCursor"):
            gateway.list_open_pull_requests("my-org", "my-repo")

        assert mock_run.call_count == 1

    def test_reads_cross_repository_flag(self, gateway, mock_run):
        """Test that fork pull requests are marked as cross-repository."""
        node = pr_node(5)
        node["isCrossRepository"] = True
        mock_run.return_value = page([node, pr_node(6)])

        prs = gateway.list_open_pull_requests("my-org", "my-repo")

        assert prs[0].is_cross_repository is True
        assert prs[1].is_cross_repository is False

    def test_graphql_errors_raise(self, gateway, mock_run):
        """Test that a GraphQL errors array becomes a GatewayError."""
        mock_run.return_value = gh_response(
            errors=[{"message": "Could not resolve to a Repository"}]
        )

        with pytest.raises(GatewayError, match="Could not resolve"):
            gateway.list_open_pull_requests("my-org", "missing")

    def test_invalid_json_raises(self, gateway, mock_run):
        """Test that unparseable output becomes a GatewayError."""
        mock_run.return_value = MagicMock(stdout="not json")

        with pytest.raises(GatewayError, match="invalid JSON"):
            gateway.list_open_pull_requests("my-org", "my-repo")

    def test_missing_repository_raises(self, gateway, mock_run):
        """Test that a null repository is a fetch error."""
        mock_run.return_value = gh_response({"repository": None})

        with pytest.raises(GatewayError, match="not found"):
            gateway.list_open_pull_requests("my-org", "my-repo")


class TestCompareBranches:
    """Test compare_branches."""

    def test_returns_comparison(self, gateway, mock_run):
        """Test that the compare object is parsed."""
        mock_run.return_value = gh_response(
            {
                "repository": {
                    "ref": {
                        "compare": {"aheadBy": 1, "behindBy": 4, "status": "DIVERGED"}
                    }
                }
            }
        )

        result = gateway.compare_branches("my-org", "my-repo", "main", "feature")

        assert result.behind_by == 4
        assert result.ahead_by == 1
        assert result.status == "DIVERGED"
        cmd = mock_run.call_args.args[0]
        assert "base=main" in cmd
        assert "head=feature" in cmd

    def test_missing_base_ref_returns_none(self, gateway, mock_run):
        """Test that a missing base ref means the comparison is unavailable."""
        mock_run.return_value = gh_response({"repository": {"ref": None}})

        assert gateway.compare_branches("my-org", "my-repo", "gone", "x") is None


class TestMutations:
    """Test branch update and merge mutations."""

    def test_branch_update_uses_merge_method(self, gateway, mock_run):
        """Test that the update mutation asks for a merge from base."""
        mock_run.return_value = gh_response(
            {"updatePullRequestBranch": {"pullRequest": {"number": 3}}}
        )

        gateway.request_branch_update("PR_3")

        cmd = mock_run.call_args.args[0]
        assert "pullRequestId=PR_3" in cmd
        assert "method=MERGE" in cmd
        assert any("updatePullRequestBranch" in arg for arg in cmd)

    def test_branch_update_failure_raises_gateway_error(self, gateway, mock_run):
        """Test that a rejected update is a plain GatewayError."""
        mock_run.side_effect = subprocess.CalledProcessError(
            1, ["gh"], stderr="merge conflict"
        )

        with pytest.raises(GatewayError) as exc_info:
            gateway.request_branch_update("PR_3")

        assert not isinstance(exc_info.value, MergeError)

    def test_merge_uses_squash(self, gateway, mock_run):
        """Test that the merge mutation squashes."""
        mock_run.return_value = gh_response(
            {"mergePullRequest": {"pullRequest": {"number": 3, "merged": True}}}
        )

        gateway.request_merge("PR_3")

        cmd = mock_run.call_args.args[0]
        assert "method=SQUASH" in cmd
        assert any("mergePullRequest" in arg for arg in cmd)

    def test_merge_rejection_raises_merge_error(self, gateway, mock_run):
        """Test that any merge failure surfaces as MergeError."""
        mock_run.return_value = gh_response(
            errors=[{"message": "Required status check is expected"}]
        )

        with pytest.raises(MergeError, match="Required status check"):
            gateway.request_merge("PR_3")
