"""Tests for configuration loading."""
import pytest

from newsdesk import config_defaults
from newsdesk.trust import TrustSettings


def test_env_file_parsing(tmp_path):
    env_file = tmp_path / '.env.defaults'
    env_file.write_text(
        '# comment\n'
        'SECRET_KEY="quoted value"\n'
        "SINGLE='x'\n"
        'EMPTY=\n'
        'not a pair\n'
        'URL=https://a.test/?q=1\n',
        encoding='utf-8',
    )

    parsed = config_defaults._parse_env_file(env_file)

    assert parsed == {
        'SECRET_KEY': 'quoted value',
        'SINGLE': 'x',
        'EMPTY': '',
        'URL': 'https://a.test/?q=1',
    }


def test_environment_wins(monkeypatch):
    monkeypatch.setenv('NEWSDESK_TEST_SETTING', 'from-env')

    assert config_defaults.get_setting('NEWSDESK_TEST_SETTING', 'fallback') == 'from-env'
    assert config_defaults.get_setting('NEWSDESK_UNSET_SETTING', 'fallback') == 'fallback'


def test_bool_and_int(monkeypatch):
    monkeypatch.setenv('NEWSDESK_FLAG', 'Yes')
    monkeypatch.setenv('NEWSDESK_COUNT', '7')
    monkeypatch.setenv('NEWSDESK_BLANK', ' ')

    assert config_defaults.get_bool('NEWSDESK_FLAG') is True
    assert config_defaults.get_bool('NEWSDESK_MISSING_FLAG', True) is True
    assert config_defaults.get_int('NEWSDESK_COUNT', 1) == 7
    assert config_defaults.get_int('NEWSDESK_BLANK', 3) == 3


def test_trust_settings_from_env(monkeypatch):
    monkeypatch.setenv('TRUST_BASE_URL', 'https://staging.newsdesk.test')
    monkeypatch.setenv('TRUST_BCRYPT_ROUNDS', '5')
    monkeypatch.setenv('TRUST_LOG_BODIES', 'true')
    monkeypatch.setenv('TRUST_BODY_EXCERPT', '40')

    settings = TrustSettings.from_env()

    assert settings == TrustSettings('https://staging.newsdesk.test', 5, True, 40)


def test_trust_settings_defaults():
    settings = TrustSettings()

    assert settings.base_url == 'https://newsdesk.test'
    assert settings.bcrypt_rounds == 4
    assert not settings.log_bodies


def test_require_default_reports_missing_key(monkeypatch):
    monkeypatch.setattr(config_defaults, 'load_defaults', lambda: {'SECRET_KEY': 'from-file'})

    assert config_defaults.require_default('SECRET_KEY') == 'from-file'
    assert config_defaults.get_default('NEWSDESK_NOWHERE', 'x') == 'x'
    with pytest.raises(RuntimeError, match='NEWSDESK_NOWHERE'):
        config_defaults.require_default('NEWSDESK_NOWHERE')
