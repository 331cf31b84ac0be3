"""
Tests for chocobuild.versioning module.

Tests package version policies including:
- Year-form (YYYY.MM.DD) handling
- 4-part revision folding
- Minor/patch ceilings
- Error reporting for malformed versions
- Pass-through validation
"""

from __future__ import annotations

import pytest

from chocobuild.exceptions import (
    ConfigError,
    InvalidVersionFormat,
    InvalidVersionPart,
    VersionError,
)
from chocobuild.versioning import (
    apply_version_policy,
    normalize_version,
    validate_version,
)

pytestmark = pytest.mark.unit


class TestNormalizeVersion:
    """Tests for the normalize policy."""

    def test_year_form_uses_two_digit_year(self):
        """Test YYYY.MM.DD keeps the last two digits of the year."""
        assert normalize_version("2024.10.11") == "24.10.11"

    def test_year_form_leading_zero_year(self):
        """Test a year like 2005 becomes major 5."""
        assert normalize_version("2005.1.2") == "5.1.2"

    def test_three_parts_pass_through(self):
        """Test plain MAJOR.MINOR.PATCH is unchanged."""
        assert normalize_version("1.2.3") == "1.2.3"

    def test_five_digit_major_is_not_a_year(self):
        """Test only a 4-character first part is treated as a year."""
        assert normalize_version("12345.1.2") == "12345.1.2"

    def test_four_parts_fold_revision(self):
        """Test REV is folded into PATCH as PATCH*1000 + REV."""
        assert normalize_version("1.2.3.456") == "1.2.3456"

    def test_four_parts_with_year_like_major(self):
        """Test the year rule only applies to 3-part versions."""
        assert normalize_version("2024.1.2.3") == "2024.1.2003"

    def test_ceilings_wrap(self):
        """Test minor wraps at 256 and patch at 65536."""
        assert normalize_version("1.300.70000") == "1.44.4464"

    def test_folded_patch_wraps(self):
        """Test the folded patch is reduced after folding."""
        # 70 * 1000 + 0 = 70000 -> 4464
        assert normalize_version("1.2.70.0") == "1.2.4464"

    def test_leading_zeros_are_dropped(self):
        """Test components are rendered as integers."""
        assert normalize_version("01.02.03") == "1.2.3"

    @pytest.mark.parametrize("version", ["1.2.3", "24.10.11", "0.255.65535"])
    def test_in_range_is_fixed_point(self, version):
        """Test normalizing an in-range version returns it unchanged."""
        assert normalize_version(version) == version
        assert normalize_version(normalize_version(version)) == version

    def test_non_numeric_part_raises(self):
        """Test a non-numeric part names the offending segment."""
        with pytest.raises(InvalidVersionPart, match='"a"') as exc_info:
            normalize_version("1.a.3")
        assert exc_info.value.part == "a"
        assert exc_info.value.version == "1.a.3"

    def test_segment_quoted_verbatim(self):
        """Test the message contains the segment exactly as written."""
        with pytest.raises(InvalidVersionPart) as exc_info:
            normalize_version("1.a\\b.3")

        assert exc_info.value.part == "a\\b"
        assert '"a\\b"' in str(exc_info.value)
        assert '"1.a\\b.3"' in str(exc_info.value)

    def test_oversized_part_raises(self):
        """Test a digit string too long for int() is an InvalidVersionPart."""
        huge = "9" * 5000

        with pytest.raises(InvalidVersionPart) as exc_info:
            normalize_version(f"1.2.{huge}")

        assert exc_info.value.part == huge

    def test_negative_part_raises(self):
        """Test negative numbers are rejected."""
        with pytest.raises(InvalidVersionPart) as exc_info:
            normalize_version("1.-2.3")
        assert exc_info.value.part == "-2"

    def test_empty_part_raises(self):
        """Test an empty segment is rejected."""
        with pytest.raises(InvalidVersionPart):
            normalize_version("1..3")

    def test_year_form_with_letters_raises(self):
        """Test a 4-character non-numeric first part is still rejected."""
        with pytest.raises(InvalidVersionPart, match="abcd"):
            normalize_version("abcd.1.2")

    @pytest.mark.parametrize("version", ["1.2", "1", "1.2.3.4.5", ""])
    def test_wrong_part_count_raises(self, version):
        """Test part counts other than 3 or 4 are rejected."""
        with pytest.raises(InvalidVersionFormat):
            normalize_version(version)

    def test_errors_are_config_errors(self):
        """Test version errors can be caught as ConfigError."""
        with pytest.raises(ConfigError):
            normalize_version("1.2")
        with pytest.raises(VersionError):
            normalize_version("x.y.z")


class TestValidateVersion:
    """Tests for the passthrough policy."""

    def test_returns_input_unchanged(self):
        """Test numeric versions are returned as-is."""
        assert validate_version("2024.10.11") == "2024.10.11"
        assert validate_version("1.300.70000.5") == "1.300.70000.5"

    def test_is_idempotent(self):
        """Test re-validating is a fixed point."""
        version = "01.2"
        assert validate_version(validate_version(version)) == version

    def test_non_numeric_part_raises(self):
        """Test non-numeric parts are rejected."""
        with pytest.raises(InvalidVersionPart, match="beta"):
            validate_version("1.0.beta")

    def test_oversized_part_raises(self):
        """Test passthrough also reports huge parts as InvalidVersionPart."""
        with pytest.raises(InvalidVersionPart):
            validate_version("1.2." + "9" * 5000)


class TestApplyVersionPolicy:
    """Tests for policy dispatch."""

    def test_default_policy_normalizes(self):
        """Test the default policy is normalize."""
        assert apply_version_policy("2024.10.11") == "24.10.11"

    def test_passthrough_policy(self):
        """Test passthrough does not reduce values."""
        assert apply_version_policy("2024.10.11", "passthrough") == "2024.10.11"

    def test_unknown_policy_raises(self):
        """Test unknown policy names are configuration errors."""
        with pytest.raises(ConfigError, match="version_policy"):
            apply_version_policy("1.2.3", "semver")
