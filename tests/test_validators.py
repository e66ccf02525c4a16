"""Tests for validator predicates"""

from datetime import date, datetime

import pytest

from form_validation import validators


class TestFormatValidators:
    """Test format validators."""

    @pytest.mark.parametrize("email,expected", [
        ("user@example.com", True),
        ("first.last+tag@sub.example.mx", True),
        ("bad-email", False),
        ("user@domain", False),
        ("user name@example.com", False),
        ("", False),
        (None, False),
    ])
    def test_is_valid_email(self, email, expected):
        assert validators.is_valid_email(email) is expected

    def test_email_max_length(self):
        """Test that addresses longer than the configured 254 characters fail."""
        domain = "@example.com"
        assert validators.is_valid_email("a" * (254 - len(domain)) + domain) is True
        assert validators.is_valid_email("a" * (255 - len(domain)) + domain) is False

    @pytest.mark.parametrize("phone,expected", [
        ("+52 55 1234 5678", True),
        ("52 55 1234 5678", True),
        ("55 1234 5678", True),
        ("5512345678", True),
        ("55-1234-5678", True),
        ("0512345678", False),
        ("12345", False),
    ])
    def test_is_valid_mexican_phone(self, phone, expected):
        assert validators.is_valid_mexican_phone(phone) is expected

    def test_is_valid_curp(self):
        assert validators.is_valid_curp("GODE561231HDFRRN09") is True
        assert validators.is_valid_curp("gode561231hdfrrn09") is False
        assert validators.is_valid_curp("GODE561231XDFRRN09") is False

    def test_is_valid_rfc(self):
        """Test individual (13 chars) and company (12 chars) RFCs."""
        assert validators.is_valid_rfc("GODE561231GR8") is True
        assert validators.is_valid_rfc("ABC680524P76") is True
        assert validators.is_valid_rfc("AB680524P76") is False

    @pytest.mark.parametrize("url,expected", [
        ("https://example.com", True),
        ("http://localhost:8000/path?q=1", True),
        ("example.com", False),
        ("not a url", False),
        ("", False),
    ])
    def test_is_valid_url(self, url, expected):
        assert validators.is_valid_url(url) is expected


class TestPasswordPolicy:
    """Test validate_password()."""

    def test_strong_password(self):
        result = validators.validate_password("Str0ng!Pass")
        assert result == {"is_valid": True, "errors": []}

    def test_errors_in_policy_order(self):
        """Test that every violation is reported, length first."""
        result = validators.validate_password("abc")

        assert result["is_valid"] is False
        assert result["errors"] == [
            "Must be at least 8 characters",
            "Must include at least one uppercase letter",
            "Must include at least one number",
            "Must include at least one special character",
        ]

    def test_configured_max_length(self):
        """Test that the password policy max_length (128) is enforced."""
        result = validators.validate_password("Aa1!" + "a" * 125)
        assert result["errors"] == ["Must not exceed 128 characters"]
        assert validators.validate_password("Aa1!" + "a" * 124)["is_valid"] is True

    def test_max_length_option(self):
        result = validators.validate_password("Abcdefg1!", max_length=8)
        assert result["errors"] == ["Must not exceed 8 characters"]

    def test_options_override_policy(self):
        result = validators.validate_password(
            "abc", min_length=3, require_uppercase=False,
            require_numbers=False, require_special_chars=False,
        )
        assert result["is_valid"] is True


class TestContentValidators:
    """Test content validators."""

    @pytest.mark.parametrize("value,expected", [
        ("text", True),
        (0, True),
        (False, True),
        ("", False),
        ("   ", False),
        (None, False),
        ([], False),
        (["a.png"], True),
    ])
    def test_is_required(self, value, expected):
        assert validators.is_required(value) is expected

    def test_length_checks(self):
        assert validators.has_min_length("abc", 3) is True
        assert validators.has_min_length("ab", 3) is False
        assert validators.has_min_length("", 0) is False
        assert validators.has_max_length("abc", 3) is True
        assert validators.has_max_length("abcd", 3) is False
        assert validators.has_max_length("", 3) is True

    def test_is_numeric(self):
        assert validators.is_numeric("12345") is True
        assert validators.is_numeric("12.5") is False
        assert validators.is_numeric("-1") is False

    def test_is_valid_age(self):
        today = date(2024, 6, 1)
        assert validators.is_valid_age("2000-01-01", 18, 65, today=today) is True
        assert validators.is_valid_age("2010-01-01", 18, 65, today=today) is False
        assert validators.is_valid_age("not a date", today=today) is False

    def test_is_valid_age_boundary(self):
        """Test that the age is the floor of elapsed years."""
        today = date(2024, 6, 1)
        assert validators.is_valid_age("2006-06-10", 18, 65, today=today) is False
        assert validators.is_valid_age("2006-05-20", 18, 65, today=today) is True

    def test_is_valid_mexican_postal_code(self):
        assert validators.is_valid_mexican_postal_code("06600") is True
        assert validators.is_valid_mexican_postal_code("6600") is False

    def test_is_valid_name(self):
        assert validators.is_valid_name("María José O'Neil-Pérez") is True
        assert validators.is_valid_name("John3") is False
        assert validators.is_valid_name("   ") is False

    def test_is_match(self):
        assert validators.is_match("a", "a") is True
        assert validators.is_match("a", "b") is False

    @pytest.mark.parametrize("number,expected", [
        ("4532015112830366", True),
        ("4532 0151 1283 0366", True),
        ("4111-1111-1111-1111", True),
        ("4532015112830367", False),
        ("123456789012", False),
    ])
    def test_is_valid_credit_card(self, number, expected):
        assert validators.is_valid_credit_card(number) is expected

    def test_is_in_range(self):
        assert validators.is_in_range("5", 1, 10) is True
        assert validators.is_in_range(10, 1, 10) is True
        assert validators.is_in_range(0, 1, 10) is False
        assert validators.is_in_range("abc", 1, 10) is False
        assert validators.is_in_range(float("nan"), 1, 10) is False


class TestDateValidators:
    """Test date validators."""

    @pytest.mark.parametrize("value,fmt,expected", [
        ("2023-12-25", "YYYY-MM-DD", True),
        ("25/12/2023", "DD/MM/YYYY", True),
        ("12/25/2023", "MM/DD/YYYY", True),
        ("2023-02-30", "YYYY-MM-DD", False),
        ("2023-1-5", "YYYY-MM-DD", False),
        ("2023-12-25", "DD/MM/YYYY", False),
        ("", "YYYY-MM-DD", False),
    ])
    def test_is_valid_date(self, value, fmt, expected):
        assert validators.is_valid_date(value, fmt) is expected

    def test_is_future_date(self):
        today = date(2024, 6, 1)
        assert validators.is_future_date("2024-06-02", today=today) is True
        assert validators.is_future_date("2024-05-31", today=today) is False
        assert validators.is_future_date("garbage", today=today) is False

    def test_is_past_date(self):
        """Test that today counts as past."""
        today = date(2024, 6, 1)
        assert validators.is_past_date("2024-05-31", today=today) is True
        assert validators.is_past_date("2024-06-01", today=today) is True
        assert validators.is_past_date("2024-06-02", today=today) is False

    def test_to_datetime(self):
        assert validators.to_datetime(date(2024, 1, 5)) == datetime(2024, 1, 5)
        assert validators.to_datetime("2024-01-05T10:30:00") == datetime(2024, 1, 5, 10, 30)
        assert validators.to_datetime("") is None
        assert validators.to_datetime(42) is None
