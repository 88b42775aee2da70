#!/usr/bin/env python3
"""
Basic Huborg usage example.

Drives Huborg against the in-memory MockGitHubClient, so it needs neither a
token nor network access.
Run with: python examples/basic_usage.py
"""

import tempfile
from pathlib import Path

from huborg import ConfigurationError, Huborg, HuborgError, PatternFilter
from huborg.logging import null_logger
from huborg.testing import MockGitHubClient, create_mock_repository

print("=== Huborg Basic Usage Example ===\n")

# 1. Exception hierarchy
print("1. Testing exception classes...")
try:
    raise ConfigurationError("GITHUB_ACCESS_TOKEN environment variable not set")
except HuborgError as e:
    print(f"   Caught HuborgError: {e}")
    print(f"   Code: {e.code}, Message: {e.message}")

print("\n   OK: Exception classes working\n")

# 2. An organization to work on
print("2. Building a mock organization...")
mock = MockGitHubClient()
mock.add_repository(create_mock_repository("acme/a"))
mock.add_repository(create_mock_repository("acme/b", archived=True), files={".mailmap": "Jane <jane@acme.io>\n"})
mock.add_repository(create_mock_repository("acme/hyrax-core"), files={"LICENSE": "Apache-2.0"})

huborg = Huborg(mock, org_names="acme", logger=null_logger())
for repo in huborg.repositories():
    print(f"   - {repo.full_name}{' (archived)' if repo.archived else ''}")

with tempfile.TemporaryDirectory() as workdir:
    # 3. Push a template
    print("\n3. Pushing LICENSE without overwrite...")
    template = Path(workdir) / "LICENSE"
    template.write_text("Copyright Acme\n", encoding="utf-8")
    for result in huborg.push_template(template, "LICENSE"):
        print(f"   {result.repository.full_name}: {result.status} {result.reason or result.branch}")

    # Running it again changes nothing where the file now exists upstream
    assert mock.call_count("pulls.create") == 1

    # 4. Filters
    print("\n4. Narrowing the working set...")
    hyrax = Huborg(mock, org_names="acme", repository_filter=PatternFilter(r"hyrax"), logger=null_logger())
    print(f"   {[repo.full_name for repo in hyrax.repositories()]}")

    # 5. Mailmap
    print("\n5. Synchronizing .mailmap...")
    seed = Path(workdir) / "MAILMAP"
    seed.write_text("Bob <bob@acme.io>\n", encoding="utf-8")
    result = huborg.synchronize_mailmap(seed)
    for line in result.lines:
        print(f"   {line}")
    print(f"   Redistributed to {[d.repository.full_name for d in result.deployments]}")

# 6. License audit
print("\n6. Auditing licenses...")
for finding in huborg.audit_license(allowed_licenses=["apache-2.0"]):
    print(f"   {finding.repository.full_name}: {finding.status}")

print("\n=== All basic tests passed! ===")
