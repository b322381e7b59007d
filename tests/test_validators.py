"""
Tests for input validation utilities.
"""

from utils.validators import (
    validate_email,
    validate_password,
    validate_name,
    sanitize_input
)


class TestValidateEmail:
    """Tests for email validation."""

    def test_valid_email(self):
        """Test valid email formats."""
        assert validate_email('user@example.com') is True
        assert validate_email('user.name@example.com') is True
        assert validate_email('user+tag@example.co.uk') is True

    def test_invalid_email(self):
        """Test invalid email formats."""
        assert validate_email('') is False
        assert validate_email(None) is False
        assert validate_email('invalid') is False
        assert validate_email('missing@domain') is False
        assert validate_email('spaces in@email.com') is False


class TestValidatePassword:
    """Tests for password validation."""

    def test_valid_password(self):
        assert validate_password('secret1') == (True, '')

    def test_password_too_short(self):
        is_valid, message = validate_password('abc')
        assert is_valid is False
        assert '6' in message

    def test_password_empty(self):
        assert validate_password('')[0] is False
        assert validate_password(None)[0] is False


class TestValidateName:
    """Tests for location and room names."""

    def test_valid(self):
        assert validate_name('Sunrise Suite') is None

    def test_blank(self):
        assert validate_name('   ') == 'Name is required'
        assert validate_name(None) == 'Name is required'

    def test_too_long(self):
        assert validate_name('x' * 101) is not None


class TestSanitizeInput:
    """Tests for input sanitization."""

    def test_trim_whitespace(self):
        assert sanitize_input('  Garden Retreat  ') == 'Garden Retreat'

    def test_limit_length(self):
        assert sanitize_input('abcdef', max_length=3) == 'abc'

    def test_empty_input(self):
        assert sanitize_input('') == ''
        assert sanitize_input(None) == ''
