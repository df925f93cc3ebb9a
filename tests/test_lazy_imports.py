"""Tests for viewstate.__init__ — lazy imports cover all public names."""

import pytest

import viewstate


@pytest.mark.parametrize("name", viewstate.__all__)
def test_all_names_resolve(name: str) -> None:
    """Every name in __all__ must resolve via __getattr__ without error."""
    obj = getattr(viewstate, name)
    assert obj is not None, f"viewstate.{name} resolved to None"


def test_unknown_name_raises_attribute_error() -> None:
    """Accessing an unregistered name raises AttributeError."""
    with pytest.raises(AttributeError, match="no attribute"):
        viewstate.__getattr__("ThisDoesNotExist")
