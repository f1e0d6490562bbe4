#!/usr/bin/env python3
"""
Basic prbot admin usage example.

Resolves pull request policies offline, then (when PRBOT_ADMIN_KEY is set)
lists the repositories of a running bot and resolves a policy for each.
Run with: python examples/basic_usage.py
"""

import os

from prbot import (
    AdminClient,
    MergeRuleConflictError,
    PrBotError,
    PrContext,
    check_pr_title,
    create_external_token,
    generate_external_account,
    resolve,
    resolve_merge_strategy,
    resolve_pull_request,
    verify_external_token,
)
from prbot.types import (
    AuthorCondition,
    MergeRule,
    MergeStrategy,
    Named,
    PullRequestRule,
    Repository,
    SetNeededReviewers,
    Wildcard,
)

print("=== prbot admin Basic Usage Example ===\n")

# 1. Rule resolution
print("1. Resolving pull request rules...")
repository = Repository(id=1, owner="acme", name="widgets")
rules = [
    PullRequestRule(
        repository_id=1,
        name="bots-skip-review",
        conditions=[AuthorCondition("bot")],
        actions=[SetNeededReviewers(0)],
    )
]

for author in ("bot", "alice"):
    ctx = PrContext(base_branch="main", head_branch="deps", author=author)
    policy = resolve(rules, ctx, repository)
    print(f"   {ctx}: {policy.needed_reviewers_count} reviewers, rules={policy.rule_names}")

print("\n   OK: Rule resolution working\n")

# 2. Merge strategy
print("2. Picking merge strategies...")
merge_rules = [
    MergeRule(1, Named("main"), Wildcard(), MergeStrategy.MERGE),
    MergeRule(1, Named("main"), Named("feature"), MergeStrategy.SQUASH),
]
ctx = PrContext(base_branch="main", head_branch="feature", author="alice")
print(f"   {ctx}: {resolve_merge_strategy(merge_rules, ctx, MergeStrategy.REBASE).value}")

conflicting = [
    MergeRule(1, Named("main"), Wildcard(), MergeStrategy.MERGE),
    MergeRule(1, Wildcard(), Named("feature"), MergeStrategy.SQUASH),
]
try:
    resolve_merge_strategy(conflicting, ctx, MergeStrategy.REBASE)
except MergeRuleConflictError as e:
    print(f"   Caught conflict: {e.message}")

print("\n   OK: Merge strategies working\n")

# 3. Title validation
print("3. Validating pull request titles...")
pattern = r"^(feat|fix|chore): "
for title in ("feat: add login", "Add login"):
    print(f"   {title!r}: {check_pr_title(title, pattern)}")

print("\n   OK: Title validation working\n")

# 4. External account tokens
print("4. Issuing an external account token...")
account = generate_external_account("ci-bot")
token = create_external_token(account)
claims = verify_external_token(token, account.public_key)
print(f"   Token for {claims['iss']} issued at {claims['iat']}")

print("\n   OK: External account tokens working\n")

# 5. Live server
admin_key = os.environ.get("PRBOT_ADMIN_KEY")
if admin_key:
    print("5. Listing repositories from the bot...")
    try:
        with AdminClient.from_env() as client:
            client.auth.login(admin_key)
            for extended in client.repositories.list():
                policy = resolve_pull_request(extended, ctx)
                print(f"   {extended.repository.path}: {policy}")
    except PrBotError as e:
        print(f"   Failed: {e}")
else:
    print("5. Set PRBOT_ADMIN_KEY (and PRBOT_ADMIN_URL) to query a running bot.")

print("\n=== Done ===")
