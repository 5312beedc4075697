"""
Unit tests for license key generation.
"""
import pytest

from core.domain.exceptions import KeyGenerationError
from licenses.domain.license_key import (
    LICENSE_KEY_PATTERN,
    generate_license_key,
    is_well_formed,
)


class TestGenerateLicenseKey:
    """Tests for generate_license_key."""

    def test_key_format(self):
        """Test generated keys have the PREFIX-XXXXXXXX-XXXXXXXX-XXXXXXXX shape."""
        key = generate_license_key("TEST")

        match = LICENSE_KEY_PATTERN.match(key)
        assert match is not None
        assert match.group(1) == "TEST"
        assert len(key) == len("TEST") + 3 * 9

    def test_prefix_is_normalized(self):
        """Test lower-case prefixes are upper-cased."""
        assert generate_license_key("pro").startswith("PRO-")

    def test_keys_are_distinct(self):
        """Test consecutive keys differ."""
        keys = {generate_license_key("TEST") for _ in range(200)}
        assert len(keys) == 200

    def test_uses_random_source(self):
        """Test segments come from the random byte source."""
        key = generate_license_key("X", token_bytes=lambda n: bytes(range(n)))
        assert key == "X-00010203-04050607-08090A0B"

    def test_invalid_prefix(self):
        """Test malformed prefixes are rejected."""
        with pytest.raises(ValueError):
            generate_license_key("BAD-PREFIX")

    def test_entropy_failure(self):
        """Test a failing random source raises KeyGenerationError."""

        def broken(_n):
            raise OSError("getrandom failed")

        with pytest.raises(KeyGenerationError) as exc_info:
            generate_license_key("TEST", token_bytes=broken)

        assert exc_info.value.code == "KEY_GENERATION_FAILED"

    def test_short_random_output(self):
        """Test too few random bytes raises KeyGenerationError."""
        with pytest.raises(KeyGenerationError):
            generate_license_key("TEST", token_bytes=lambda n: b"\x01\x02")


class TestIsWellFormed:
    """Tests for is_well_formed."""

    def test_generated_key(self):
        """Test generated keys are well formed."""
        assert is_well_formed(generate_license_key("ABC123"))

    @pytest.mark.parametrize(
        "value",
        ["", "TEST", "TEST-aabbccdd-11223344-55667788", "TEST-AABBCCDD-11223344"],
    )
    def test_malformed(self, value):
        """Test malformed keys are rejected."""
        assert not is_well_formed(value)
