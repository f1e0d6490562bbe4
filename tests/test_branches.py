"""
Property-based tests for branch selector matching.

Feature: prbot-admin
"""

from hypothesis import given, settings
from hypothesis import strategies as st

from prbot.rules.branches import matches, specificity
from prbot.types.rules import Named, Wildcard

branch_strategy = st.text(
    min_size=1,
    max_size=50,
    alphabet=st.characters(whitelist_categories=("L", "N"), whitelist_characters="-_/."),
)


@given(candidate=branch_strategy)
@settings(max_examples=100)
def test_wildcard_matches_any_branch(candidate: str) -> None:
    """
    Property 1: Wildcard matches every non-empty branch name
    """
    assert matches(Wildcard(), candidate)


def test_wildcard_does_not_match_empty_branch() -> None:
    assert not matches(Wildcard(), "")


@given(name=branch_strategy, candidate=branch_strategy)
@settings(max_examples=100)
def test_named_matches_iff_equal(name: str, candidate: str) -> None:
    """
    Property 2: Named selector matches exactly its own name

    For any names N and C, Named(N) matches C if and only if N == C.
    """
    assert matches(Named(name), candidate) == (name == candidate)


@given(name=branch_strategy)
@settings(max_examples=100)
def test_named_matches_itself(name: str) -> None:
    assert matches(Named(name), name)


def test_named_matching_is_case_sensitive() -> None:
    assert not matches(Named("Main"), "main")
    assert not matches(Named("main"), "main ")


def test_named_star_is_not_a_wildcard_selector() -> None:
    """A Named selector is literal even for glob-like names."""
    assert not matches(Named("release/*"), "release/1.0")
    assert matches(Named("release/*"), "release/*")


def test_specificity() -> None:
    assert specificity(Named("main")) == 1
    assert specificity(Wildcard()) == 0


def test_selector_names() -> None:
    assert Wildcard().name == "*"
    assert str(Wildcard()) == "*"
    assert Named("main").name == "main"
    assert Wildcard() == Wildcard()
    assert Named("a") != Named("b")
