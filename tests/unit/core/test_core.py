"""Tests for environment configuration and log formatting."""

import json
import logging
import os
from unittest.mock import patch

import pytest

from visitor_access.core.config import (
    DEFAULT_DATABASE_URL,
    get_database_echo,
    get_database_url,
    get_log_format,
    get_recent_access_log_limit,
)
from visitor_access.core.logger import JSONFormatter, TextFormatter


class TestConfig:
    def test_database_url_default(self):
        with patch.dict(os.environ, {'DATABASE_URL': ''}):
            assert get_database_url() == DEFAULT_DATABASE_URL

    def test_database_url_from_env(self):
        url = 'postgresql+asyncpg://db/visitors'
        with patch.dict(os.environ, {'DATABASE_URL': url}):
            assert get_database_url() == url

    @pytest.mark.parametrize(
        'value,expected', [('true', True), ('1', True), ('no', False), ('', False)]
    )
    def test_database_echo(self, value, expected):
        with patch.dict(os.environ, {'DATABASE_ECHO': value}):
            assert get_database_echo() is expected

    @pytest.mark.parametrize(
        'value,expected', [('JSON', 'json'), ('text', 'text'), ('xml', 'text')]
    )
    def test_log_format(self, value, expected):
        with patch.dict(os.environ, {'LOG_FORMAT': value}):
            assert get_log_format() == expected

    @pytest.mark.parametrize(
        'value,expected', [('12', 12), ('', 5), ('abc', 5), ('0', 5), ('-3', 5)]
    )
    def test_recent_access_log_limit(self, value, expected):
        with patch.dict(os.environ, {'RECENT_ACCESS_LOG_LIMIT': value}):
            assert get_recent_access_log_limit() == expected


def _record(**extra) -> logging.LogRecord:
    record = logging.LogRecord(
        'visitor_access', logging.WARNING, __file__, 10, 'Invitation rejected', None, None
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestFormatters:
    def test_json_formatter_includes_extra_fields(self):
        output = json.loads(JSONFormatter().format(_record(reason='expired')))

        assert output['message'] == 'Invitation rejected'
        assert output['level'] == 'WARNING'
        assert output['reason'] == 'expired'

    def test_text_formatter_appends_extra_fields(self):
        output = TextFormatter().format(_record(reason='cancelled'))

        assert 'Invitation rejected' in output
        assert output.endswith('reason=cancelled')
