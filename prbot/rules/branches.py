"""Branch selector matching."""

from prbot.types.rules import Named, RuleBranch, Wildcard


def matches(branch: RuleBranch, candidate: str) -> bool:
    """
    Check whether a branch selector matches a concrete branch name.

    A wildcard matches any non-empty branch name. A named selector matches
    only the exact (case-sensitive) name.

    Args:
        branch: Wildcard or Named selector
        candidate: Concrete branch name from the pull request

    Returns:
        True if the selector matches
    """
    if isinstance(branch, Wildcard):
        return bool(candidate)
    return candidate == branch.branch


def specificity(branch: RuleBranch) -> int:
    """Return 1 for a named selector and 0 for a wildcard."""
    return 1 if isinstance(branch, Named) else 0
