"""Tests for prompt validators."""

import pytest

from atlas_local.commands.validators import (
    DeploymentNameValidator,
    MdbVersionValidator,
    PortValidator,
    YesNoValidator,
    yes_no_to_bool,
)

PORT_ERROR = "Port must be a number between 1 and 65535, leave empty to auto-assign"


class TestMdbVersionValidator:
    """Tests for MdbVersionValidator."""

    @pytest.mark.parametrize("value", ["latest", "preview", "7", "8", "8.0", "8.0.4", "10"])
    def test_valid(self, value):
        assert MdbVersionValidator().validate(value) is None

    @pytest.mark.parametrize("value", ["6", "6.0", "5.0.1"])
    def test_too_old(self, value):
        assert MdbVersionValidator().validate(value) == "The lowest supported MongoDB version is 7"

    @pytest.mark.parametrize("value", ["", "eight", "8.x", "v8"])
    def test_not_a_version(self, value):
        assert "invalid MongoDB version" in MdbVersionValidator().validate(value)


class TestPortValidator:
    """Tests for PortValidator."""

    @pytest.mark.parametrize("value", ["", "auto-assign", "1", "27017", "65535"])
    def test_valid(self, value):
        assert PortValidator().validate(value) is None

    @pytest.mark.parametrize("value", ["0", "65536", "-1", "abc", "27017.5"])
    def test_invalid(self, value):
        assert PortValidator().validate(value) == PORT_ERROR


class TestYesNo:
    """Tests for yes/no parsing."""

    @pytest.mark.parametrize(
        "value,expected",
        [("y", True), ("YES", True), ("n", False), ("No", False), ("", True), (" ", True)],
    )
    def test_values(self, value, expected):
        assert yes_no_to_bool(value, True) is expected

    def test_invalid(self):
        with pytest.raises(ValueError, match="please enter y or n"):
            yes_no_to_bool("maybe", False)
        assert YesNoValidator().validate("maybe") == "Invalid input 'maybe', please enter y or n"


def test_any_name_is_valid():
    """Empty names are allowed and mean a generated name."""
    assert DeploymentNameValidator().validate("") is None
    assert DeploymentNameValidator().validate("my deployment") is None
