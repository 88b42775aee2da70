#!/usr/bin/env python3
"""
Huborg - Organization Maintenance Workflows

Runs one of the bulk operations against a real GitHub organization:

    push_template     Push this script to every repository as a disposable file
    clone_and_rebase  Clone or update every repository under $DIRECTORY (default ~/git)
    audit_license     Report repositories with a missing license
    mailmap           Merge and redistribute .mailmap files ($MAILMAP_TEMPLATE_FILENAME)
    pull_requests     Print open pull requests as tab separated values

Run with:
    GITHUB_ACCESS_TOKEN=... GITHUB_ORG_NAME=my-org python examples/org_workflow.py audit_license
"""

import logging
import os
import sys
from datetime import datetime, timezone
from pathlib import Path

from huborg import Huborg, HuborgError
from huborg.logging import configure_logging


def push_template(huborg: Huborg) -> None:
    stamp = datetime.now(timezone.utc).strftime("%Y%m%d%H%M%S")
    results = huborg.push_template(template=__file__, filename=f"disposable-{stamp}.py")
    for result in results:
        url = result.pull_request.html_url if result.pull_request else ""
        print(f"{result.repository.full_name}\t{result.status}\t{result.reason or ''}\t{url}")


def clone_and_rebase(huborg: Huborg) -> None:
    directory = os.environ.get("DIRECTORY", str(Path.home() / "git"))
    results = huborg.clone_and_rebase(directory=directory, max_workers=4)
    for result in results:
        print(f"{result.path}\t{result.status}\t{result.reason or ''}")


def audit_license(huborg: Huborg) -> None:
    findings = huborg.audit_license()
    problems = [finding for finding in findings if finding.status != "allowed"]
    print(f"{len(problems)} of {len(findings)} repositories need attention")


def mailmap(huborg: Huborg) -> None:
    template = os.environ.get("MAILMAP_TEMPLATE_FILENAME")
    if not template:
        print("Set MAILMAP_TEMPLATE_FILENAME to the seed .mailmap file")
        sys.exit(1)
    result = huborg.synchronize_mailmap(template=template)
    print(f"Wrote {len(result.lines)} line(s) to {result.path}")
    print(f"Opened {sum(1 for d in result.deployments if d.ok)} pull request(s)")


def pull_requests(huborg: Huborg) -> None:
    print("REPO_FULL_NAME\tPR_CREATED_AT\tPR_URL\tPR_TITLE")
    for pull, repo in huborg.each_pull_request_with_repo():
        print(f"{repo.full_name}\t{pull.created_at}\t{pull.html_url}\t{pull.title}")


TASKS = {
    "push_template": push_template,
    "clone_and_rebase": clone_and_rebase,
    "audit_license": audit_license,
    "mailmap": mailmap,
    "pull_requests": pull_requests,
}


def main() -> None:
    """Run the task named on the command line."""
    if len(sys.argv) != 2 or sys.argv[1] not in TASKS:
        print(f"Usage: {sys.argv[0]} {{{','.join(TASKS)}}}")
        sys.exit(2)

    configure_logging(level=logging.INFO)

    try:
        huborg = Huborg.from_env()
    except HuborgError as e:
        print(f"Error: [{e.code}] {e.message}")
        sys.exit(1)

    try:
        TASKS[sys.argv[1]](huborg)
    except HuborgError as e:
        print(f"\nError: [{e.code}] {e.message}")
        if e.request_id:
            print(f"Request ID: {e.request_id}")
        sys.exit(1)
    finally:
        huborg.client.close()


if __name__ == "__main__":
    main()
