#!/usr/bin/env python3
"""Tests for minishell logging setup."""

import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import logging

import pytest

from minishell.log import (
    ROOT_LOGGER, LogFormatter, configure_logging, get_logger, parse_level
)


def installed_handlers():
    root = logging.getLogger(ROOT_LOGGER)
    return [h for h in root.handlers if getattr(h, '_minishell', False)]


@pytest.fixture(autouse=True)
def reset_logging():
    yield
    configure_logging('WARNING')


class TestGetLogger:

    def test_prefixes_namespace(self):
        assert get_logger('terminal').name == 'minishell.terminal'

    def test_module_names_kept(self):
        assert get_logger('minishell.search_path').name == 'minishell.search_path'
        assert get_logger('minishell').name == 'minishell'


class TestParseLevel:

    @pytest.mark.parametrize('value,expected', [
        ('debug', logging.DEBUG),
        ('INFO', logging.INFO),
        ('Warning', logging.WARNING),
        (logging.ERROR, logging.ERROR),
    ])
    def test_known(self, value, expected):
        assert parse_level(value) == expected

    def test_unknown(self):
        with pytest.raises(ValueError):
            parse_level('chatty')


class TestConfigureLogging:

    def test_quiet_by_default(self):
        configure_logging('WARNING')
        assert installed_handlers() == []

    def test_verbose_goes_to_stderr(self):
        configure_logging('DEBUG')
        handlers = installed_handlers()
        assert len(handlers) == 1
        assert isinstance(handlers[0], logging.StreamHandler)

    def test_file_handler(self, tmp_path):
        log_file = tmp_path / 'nested' / 'shell.log'
        configure_logging('INFO', str(log_file))
        get_logger('terminal').info('hello from the test')
        for handler in installed_handlers():
            handler.flush()

        text = log_file.read_text()
        assert 'INFO' in text
        assert '[terminal] hello from the test' in text

    def test_reconfigure_replaces_handlers(self, tmp_path):
        configure_logging('DEBUG')
        configure_logging('DEBUG', str(tmp_path / 'a.log'))
        handlers = installed_handlers()
        assert len(handlers) == 1
        assert isinstance(handlers[0], logging.FileHandler)


class TestLogFormatter:

    def make_record(self, level=logging.INFO):
        return logging.LogRecord('minishell.search_path', level, __file__, 1,
                                 'resolved %s', ('ls',), None)

    def test_plain(self):
        line = LogFormatter().format(self.make_record())
        assert line.endswith('INFO     [search_path] resolved ls')
        assert line.startswith('[')

    def test_colors(self):
        line = LogFormatter(use_colors=True).format(self.make_record(logging.ERROR))
        assert '\033[31m' in line
        assert line.endswith('[search_path] resolved ls')


if __name__ == '__main__':
    pytest.main([__file__, '-v'])
