"""Tests for switchyard.__init__ — lazy imports cover all public names."""

import pytest

import switchyard


@pytest.mark.parametrize("name", switchyard.__all__)
def test_all_names_resolve(name: str) -> None:
    """Every name in __all__ must resolve via __getattr__ without error."""
    assert getattr(switchyard, name) is not None


def test_unknown_name_raises() -> None:
    with pytest.raises(AttributeError):
        switchyard.does_not_exist  # noqa: B018
