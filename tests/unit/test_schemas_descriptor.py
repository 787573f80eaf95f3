"""Unit tests for the eligibility descriptor schema."""

import pytest

from boneclone.schemas.descriptor import RemoteDescriptor


@pytest.mark.parametrize(
    "accepts,skeleton_name,expected",
    [
        (["base"], "base", True),
        (["other", "base"], "base", True),
        ([" base "], "base", True),
        (["base"], "  base  ", True),
        (["other"], "base", False),
        ([], "base", False),
        (["base"], "", False),
        ([""], "", False),
        (["  "], "   ", False),
    ],
)
def test_accepts_skeleton(accepts: list[str], skeleton_name: str, expected: bool) -> None:
    """Test skeleton name matching with trimming and the empty-name rule."""
    descriptor = RemoteDescriptor(accepts=accepts)
    assert descriptor.accepts_skeleton(skeleton_name) is expected


def test_descriptor_defaults_are_empty() -> None:
    """Test that a descriptor without keys accepts nothing and has no reviewers."""
    descriptor = RemoteDescriptor.model_validate({})
    assert descriptor.accepts == []
    assert descriptor.reviewers == []
