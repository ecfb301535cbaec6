"""
Unit tests for authenticator configuration and provider metadata.
"""

import pytest

from service_restrictions.app.config import (
    IPRestrictionConfig, TimeRestrictionConfig,
    read_ip_rules, find_invalid_rules, parse_boolean,
    DEFAULT_ERROR_MESSAGE_BLOCKED, DEFAULT_ERROR_MESSAGE_NOT_ALLOWED, DEFAULT_ERROR_MESSAGE,
)
from service_restrictions.app.providers import (
    IP_RESTRICTION_PROVIDER, TIME_RESTRICTION_PROVIDER, MULTIVALUED_STRING_TYPE, BOOLEAN_TYPE
)
from service_restrictions.app.schedule.models import ALL_DAYS, DayOfWeek
from shared.config import ServiceConfig
from shared.errors import ConfigurationError


class TestReadIPRules:
    """Test cases for rule list reconstruction."""

    def test_indexed_keys(self):
        config = {
            "ip-rules##0": "+10.0.0.0/8",
            "ip-rules##1": "  -10.0.0.5 ",
            "ip-rules##2": "+192.168.1.1",
        }

        assert read_ip_rules(config) == ["+10.0.0.0/8", "-10.0.0.5", "+192.168.1.1"]

    def test_indexed_keys_stop_at_gap(self):
        config = {
            "ip-rules##0": "+10.0.0.0/8",
            "ip-rules##2": "-10.0.0.5",
        }

        assert read_ip_rules(config) == ["+10.0.0.0/8"]

    def test_indexed_keys_stop_at_blank(self):
        config = {
            "ip-rules##0": "+10.0.0.0/8",
            "ip-rules##1": "   ",
            "ip-rules##2": "-10.0.0.5",
        }

        assert read_ip_rules(config) == ["+10.0.0.0/8"]

    def test_indexed_keys_win_over_single_value(self):
        config = {
            "ip-rules##0": "+10.0.0.0/8",
            "ip-rules": "-1.2.3.4",
        }

        assert read_ip_rules(config) == ["+10.0.0.0/8"]

    @pytest.mark.parametrize("value", [
        "+10.0.0.0/8##-10.0.0.5##+192.168.1.1",
        "+10.0.0.0/8\n-10.0.0.5\r\n+192.168.1.1",
        "+10.0.0.0/8, -10.0.0.5 ,+192.168.1.1",
        "+10.0.0.0/8##-10.0.0.5,\n\n+192.168.1.1,",
    ])
    def test_single_value_separators(self, value):
        assert read_ip_rules({"ip-rules": value}) == ["+10.0.0.0/8", "-10.0.0.5", "+192.168.1.1"]

    @pytest.mark.parametrize("config", [{}, {"ip-rules": ""}, {"ip-rules": "  \n , ##"}])
    def test_no_rules(self, config):
        assert read_ip_rules(config) == []

    @pytest.mark.parametrize("config", [
        {"ip-rules": 42},
        {"ip-rules##0": ["+10.0.0.1"]},
    ])
    def test_non_text_value_is_configuration_error(self, config):
        with pytest.raises(ConfigurationError):
            read_ip_rules(config)


class TestFindInvalidRules:
    """Test cases for rule diagnostics."""

    def test_valid_rules(self):
        assert find_invalid_rules(["+10.0.0.0/8", "-192.168.0.1", "- 172.16.0.0/12"]) == []

    def test_invalid_rules(self):
        rules = ["10.0.0.1", "+10.0.0.0/33", "-010.0.0.1", "+", "+10.0.0.1"]

        assert find_invalid_rules(rules) == ["10.0.0.1", "+10.0.0.0/33", "-010.0.0.1", "+"]


class TestParseBoolean:
    """Only the text 'true' counts as true."""

    @pytest.mark.parametrize("value,expected", [
        ("true", True),
        ("TRUE", True),
        ("True", True),
        ("false", False),
        ("yes", False),
        ("1", False),
        ("", False),
        (None, False),
        (True, True),
        (False, False),
    ])
    def test_parse_boolean(self, value, expected):
        assert parse_boolean(value) is expected


class TestIPRestrictionConfig:
    """Test cases for IPRestrictionConfig."""

    def test_defaults(self):
        config = IPRestrictionConfig.from_map({})

        assert config.rules == []
        assert config.check_x_forwarded_for is True
        assert config.error_message_blocked == DEFAULT_ERROR_MESSAGE_BLOCKED
        assert config.error_message_not_allowed == DEFAULT_ERROR_MESSAGE_NOT_ALLOWED

    def test_from_map(self):
        config = IPRestrictionConfig.from_map({
            "ip-rules##0": "+10.0.0.0/8",
            "check-x-forwarded-for": "false",
            "error-message-blocked": "Go away",
            "error-message-not-allowed": "Not from there",
        })

        assert config.rules == ["+10.0.0.0/8"]
        assert config.check_x_forwarded_for is False
        assert config.error_message(explicit_deny=True) == "Go away"
        assert config.error_message(explicit_deny=False) == "Not from there"

    def test_unrecognised_flag_is_false(self):
        config = IPRestrictionConfig.from_map({"check-x-forwarded-for": "maybe"})

        assert config.check_x_forwarded_for is False

    def test_service_settings_fill_missing_flag(self):
        settings = ServiceConfig(check_x_forwarded_for=False)

        assert IPRestrictionConfig.from_map({}, settings).check_x_forwarded_for is False
        assert IPRestrictionConfig.from_map(
            {"check-x-forwarded-for": "true"}, settings
        ).check_x_forwarded_for is True


class TestTimeRestrictionConfig:
    """Test cases for TimeRestrictionConfig."""

    def test_defaults(self):
        config = TimeRestrictionConfig.from_map({})
        schedule = config.to_schedule()

        assert config.error_message == DEFAULT_ERROR_MESSAGE
        assert schedule.timezone_name == "UTC"
        assert schedule.allowed_days == ALL_DAYS
        assert schedule.start_time == "00:00"
        assert schedule.end_time == "23:59"

    def test_from_map(self):
        config = TimeRestrictionConfig.from_map({
            "timezone": "Europe/Istanbul",
            "allowed-days": "monday,wednesday",
            "start-time": "08:30",
            "end-time": "18:00",
            "error-message": "Office is closed",
        })
        schedule = config.to_schedule()

        assert schedule.timezone_name == "Europe/Istanbul"
        assert schedule.allowed_days == frozenset({DayOfWeek.MONDAY, DayOfWeek.WEDNESDAY})
        assert schedule.time_range == "08:30 - 18:00"
        assert config.error_message == "Office is closed"

    def test_service_settings_fill_missing_timezone(self):
        settings = ServiceConfig(default_timezone="Asia/Tokyo")

        assert TimeRestrictionConfig.from_map({}, settings).timezone == "Asia/Tokyo"
        assert TimeRestrictionConfig.from_map({"timezone": "UTC"}, settings).timezone == "UTC"


class TestProviderMetadata:
    """Test cases for provider descriptions."""

    def test_ip_provider(self):
        assert IP_RESTRICTION_PROVIDER.provider_id == "ip-restriction-authenticator"
        assert IP_RESTRICTION_PROVIDER.requires_user is False
        assert IP_RESTRICTION_PROVIDER.user_setup_allowed is False
        assert IP_RESTRICTION_PROVIDER.requirement_choices == ["REQUIRED", "ALTERNATIVE", "DISABLED"]

        types = {prop.name: prop.type for prop in IP_RESTRICTION_PROVIDER.properties}
        assert types["ip-rules"] == MULTIVALUED_STRING_TYPE
        assert types["check-x-forwarded-for"] == BOOLEAN_TYPE

    def test_time_provider(self):
        assert TIME_RESTRICTION_PROVIDER.provider_id == "time-restriction-authenticator"
        assert TIME_RESTRICTION_PROVIDER.requires_user is True
        assert [prop.name for prop in TIME_RESTRICTION_PROVIDER.properties] == [
            "timezone", "allowed-days", "start-time", "end-time", "error-message"
        ]

    @pytest.mark.parametrize("provider,model", [
        (IP_RESTRICTION_PROVIDER, IPRestrictionConfig),
        (TIME_RESTRICTION_PROVIDER, TimeRestrictionConfig),
    ])
    def test_property_defaults_match_config(self, provider, model):
        defaults = {prop.name: prop.default_value for prop in provider.properties}

        assert model.from_map(defaults) == model.from_map({})
