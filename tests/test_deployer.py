"""
Tests for pushing a file to repositories through pull requests.

Feature: template deployment
"""

from datetime import datetime, timezone

import httpx
import pytest

from huborg.client import GitHubClient
from huborg.deployer import BranchNamer, RemoteTemplateDeployer, commit_message
from huborg.exceptions import ServerError
from huborg.logging import null_logger
from huborg.testing import MockGitHubClient, create_mock_repository

MUTATING_CALLS = [
    "repos.create_ref",
    "repos.create_contents",
    "repos.update_contents",
    "pulls.create",
]


def fixed_clock(*values: datetime):
    moments = iter(values)
    return lambda: next(moments)


@pytest.fixture
def deployer(mock_client: MockGitHubClient) -> RemoteTemplateDeployer:
    return RemoteTemplateDeployer(mock_client, logger=null_logger())


def test_create_path(mock_client, deployer, template_file) -> None:
    repo = mock_client.add_repository(create_mock_repository("acme/a"), head_sha="tip")

    result = deployer.deploy(repo, template_file, ".github/ci.yml")

    assert result.status == "success"
    assert result.pull_request is not None
    create_ref = mock_client.get_calls("repos.create_ref")[0]
    assert create_ref.args == ("acme/a", f"refs/heads/{result.branch}", "tip")
    assert mock_client.branch_files[("acme/a", result.branch, ".github/ci.yml")] == b"Copyright Acme\n"
    assert not mock_client.was_called("repos.update_contents")

    pull = mock_client.get_calls("pulls.create")[0]
    assert pull.kwargs["head"] == result.branch
    assert pull.kwargs["base"] == "main"
    assert pull.kwargs["title"] == "Adding/updating .github/ci.yml"
    assert pull.kwargs["body"] == commit_message(".github/ci.yml")


def test_reads_from_the_default_branch(mock_client, deployer, template_file) -> None:
    repo = mock_client.add_repository(create_mock_repository("acme/a", default_branch="trunk"))

    result = deployer.deploy(repo, template_file, "LICENSE")

    assert result.status == "success"
    assert mock_client.get_calls("repos.get_ref")[0].args == ("acme/a", "heads/trunk")
    assert mock_client.get_calls("repos.get_contents")[0].kwargs == {"ref": "trunk"}
    assert mock_client.get_calls("pulls.create")[0].kwargs["base"] == "trunk"


def test_commit_message() -> None:
    assert commit_message("LICENSE") == (
        "Adding/updating LICENSE\n\nThis was uploaded via automation."
    )


def test_existing_file_without_overwrite_is_skipped(mock_client, deployer, template_file) -> None:
    repo = mock_client.add_repository(
        create_mock_repository("acme/a"), files={"LICENSE": "Apache"}
    )

    result = deployer.deploy(repo, template_file, "LICENSE", overwrite=False)

    assert result.status == "skipped"
    assert result.reason == "exists"
    for method in MUTATING_CALLS:
        assert not mock_client.was_called(method), method


def test_idempotence_without_overwrite(mock_client, deployer, template_file) -> None:
    """
    Deploying twice without overwrite to a repository that has the file
    produces no second branch and no second pull request.
    """
    repo = mock_client.add_repository(
        create_mock_repository("acme/a"), files={"CODE_OF_CONDUCT.md": "Be kind"}
    )

    first = deployer.deploy(repo, template_file, "CODE_OF_CONDUCT.md")
    second = deployer.deploy(repo, template_file, "CODE_OF_CONDUCT.md")

    assert first.status == second.status == "skipped"
    assert mock_client.branches("acme/a") == ["main"]
    assert mock_client.pull_requests.get("acme/a", []) == []


def test_update_path_uses_existing_sha(mock_client, deployer, template_file) -> None:
    repo = mock_client.add_repository(
        create_mock_repository("acme/a"), files={".mailmap": "Old <old@acme.io>\n"}
    )
    existing = mock_client.repos.get_contents("acme/a", ".mailmap")
    mock_client.reset()

    result = deployer.deploy(repo, template_file, ".mailmap", overwrite=True)

    assert result.status == "success"
    update = mock_client.get_calls("repos.update_contents")[0]
    assert update.kwargs["sha"] == existing.sha
    assert update.kwargs["branch"] == result.branch
    assert not mock_client.was_called("repos.create_contents")


@pytest.mark.parametrize("overwrite", [True, False])
def test_archived_repository_is_never_mutated(
    mock_client, deployer, template_file, archived_repository, overwrite
) -> None:
    mock_client.add_repository(archived_repository)

    result = deployer.deploy(archived_repository, template_file, "LICENSE", overwrite=overwrite)

    assert result.status == "skipped"
    assert result.reason == "archived"
    assert mock_client.get_calls() == []


def test_remote_failure_is_reported_not_raised(mock_client, deployer, template_file) -> None:
    repo = mock_client.add_repository(create_mock_repository("acme/a"))
    mock_client.pulls.configure_create(
        error=ServerError("SERVER_ERROR", "Boom"), full_name="acme/a"
    )

    result = deployer.deploy(repo, template_file, "LICENSE")

    assert result.status == "failure"
    assert result.reason == "SERVER_ERROR"
    assert isinstance(result.error, ServerError)
    assert not result.ok
    # The branch is left behind; cleanup is not attempted
    assert result.branch in mock_client.branches("acme/a")


def test_failure_isolation(mock_client, deployer, template_file) -> None:
    repos = [
        mock_client.add_repository(create_mock_repository(f"acme/{name}"))
        for name in ("a", "b", "c")
    ]
    mock_client.repos.configure_create_ref(
        error=ServerError("SERVER_ERROR", "Boom"), full_name="acme/b"
    )

    results = [deployer.deploy(repo, template_file, "LICENSE") for repo in repos]

    assert [result.status for result in results] == ["success", "failure", "success"]
    assert mock_client.call_count("pulls.create") == 2


def test_missing_default_branch_is_a_failure(mock_client, deployer, template_file) -> None:
    repo = create_mock_repository("acme/empty")
    mock_client.repositories.append(repo)

    result = deployer.deploy(repo, template_file, "LICENSE")

    assert result.status == "failure"
    assert result.reason == "NOT_FOUND"
    assert not mock_client.was_called("repos.create_ref")


def test_missing_template_raises(mock_client, deployer, tmp_path) -> None:
    repo = mock_client.add_repository(create_mock_repository("acme/a"))

    with pytest.raises(FileNotFoundError):
        deployer.deploy(repo, tmp_path / "nope.txt", "LICENSE")
    assert mock_client.get_calls() == []


def test_branch_name_from_utc_timestamp() -> None:
    namer = BranchNamer(clock=fixed_clock(datetime(2024, 1, 15, 10, 30, 5, tzinfo=timezone.utc)))

    assert namer.next_name("acme/a") == "autoupdate-20240115103005"


def test_branch_names_do_not_collide_within_a_second() -> None:
    moment = datetime(2024, 1, 15, 10, 30, 5, tzinfo=timezone.utc)
    namer = BranchNamer(clock=fixed_clock(moment, moment, moment, moment))

    names = [namer.next_name("acme/a") for _ in range(3)]

    assert names == [
        "autoupdate-20240115103005",
        "autoupdate-20240115103005-1",
        "autoupdate-20240115103005-2",
    ]
    # Names are tracked per repository
    assert namer.next_name("acme/b") == "autoupdate-20240115103005"


def test_rapid_overwrites_open_distinct_pull_requests(mock_client, template_file) -> None:
    moment = datetime(2024, 1, 15, 10, 30, 5, tzinfo=timezone.utc)
    deployer = RemoteTemplateDeployer(
        mock_client,
        logger=null_logger(),
        branch_namer=BranchNamer(clock=fixed_clock(moment, moment)),
    )
    repo = mock_client.add_repository(create_mock_repository("acme/a"))

    first = deployer.deploy(repo, template_file, "LICENSE", overwrite=True)
    second = deployer.deploy(repo, template_file, "LICENSE", overwrite=True)

    assert first.status == second.status == "success"
    assert first.branch != second.branch
    assert len(mock_client.pull_requests["acme/a"]) == 2


def test_branch_namer_forgets_earlier_seconds() -> None:
    first = datetime(2024, 1, 15, 10, 30, 5, tzinfo=timezone.utc)
    later = datetime(2024, 1, 15, 10, 30, 6, tzinfo=timezone.utc)
    namer = BranchNamer(clock=fixed_clock(first, first, later, later))

    namer.next_name("acme/a")
    namer.next_name("acme/b")
    assert namer.next_name("acme/a") == "autoupdate-20240115103006"
    assert namer.next_name("acme/c") == "autoupdate-20240115103006"

    assert namer._issued == {"acme/a": 1, "acme/c": 1}


def _json(status: int, payload) -> httpx.Response:
    return httpx.Response(status, json=payload)


def test_directory_at_destination_fails_only_that_repository(template_file) -> None:
    tip = {"ref": "refs/heads/main", "object": {"sha": "abc"}}
    routes = {
        ("GET", "/repos/acme/a/git/ref/heads/main"): _json(200, tip),
        ("GET", "/repos/acme/b/git/ref/heads/main"): _json(200, tip),
        ("GET", "/repos/acme/a/contents/docs"): _json(
            200, [{"type": "file", "path": "docs/index.md", "sha": "x"}]
        ),
        ("POST", "/repos/acme/b/git/refs"): _json(201, tip),
        ("PUT", "/repos/acme/b/contents/docs"): _json(201, {"commit": {"sha": "c"}}),
        ("POST", "/repos/acme/b/pulls"): _json(201, {
            "number": 1,
            "title": "Adding/updating docs",
            "state": "open",
            "html_url": "https://github.com/acme/b/pull/1",
            "head": {"ref": "autoupdate-20240115103005"},
            "base": {"ref": "main"},
            "user": {"login": "octocat"},
            "created_at": "2024-01-15T10:30:00Z",
        }),
    }

    def handler(request: httpx.Request) -> httpx.Response:
        return routes.get(
            (request.method, request.url.path), _json(404, {"message": "Not Found"})
        )

    client = GitHubClient(token="ghp_testtoken", http_transport=httpx.MockTransport(handler))
    deployer = RemoteTemplateDeployer(client, logger=null_logger())
    repos = [create_mock_repository("acme/a"), create_mock_repository("acme/b")]

    with client:
        results = [deployer.deploy(repo, template_file, "docs") for repo in repos]

    assert [result.status for result in results] == ["failure", "success"]
    assert results[0].reason == "NOT_A_FILE"
    assert results[0].branch is None
    assert results[1].pull_request.number == 1
