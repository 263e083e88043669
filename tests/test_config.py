"""Tests for configuration loading and JSON helpers."""

import json

import pytest

from playoff_challenge import config
from playoff_challenge.schemas import AppConfig, PlayersFile, ScheduleFile
from playoff_challenge.utils import load_json, save_json


@pytest.fixture(autouse=True)
def fresh_config():
    config.clear_config_cache()
    yield
    config.clear_config_cache()


class TestAppConfig:
    """Tests for data/app_config.json."""

    def test_shipped_config_loads(self):
        cfg = config.get_config()
        assert cfg.default_scoring_format == 'PPR'
        assert cfg.default_round == 'WC'
        assert cfg.round_cache_ttl_seconds == 30
        assert config.get_default_scoring_format() == 'PPR'
        assert config.get_round_cache_ttl() == 30

    def test_config_is_cached(self):
        assert config.get_config() is config.get_config()

    def test_database_path_env_override(self, monkeypatch, tmp_path):
        monkeypatch.setenv('PLAYOFF_DB_PATH', str(tmp_path / 'other.db'))
        assert config.get_database_path() == tmp_path / 'other.db'

    def test_relative_database_path_resolved(self, monkeypatch):
        monkeypatch.delenv('PLAYOFF_DB_PATH', raising=False)
        path = config.get_database_path()
        assert path.is_absolute()
        assert path.name == 'playoff.db'

    def test_invalid_format_rejected(self):
        with pytest.raises(ValueError):
            AppConfig(database_path='x.db', espn_base_url='http://x', default_scoring_format='TE_PREMIUM')

    def test_unknown_field_rejected(self):
        with pytest.raises(ValueError):
            AppConfig(database_path='x.db', espn_base_url='http://x', season=2026)


class TestJsonHelpers:
    """Tests for load_json/save_json."""

    def test_shipped_seed_files_validate(self):
        players = load_json(config.CONFIG_PATH.parent / 'players.json', schema=PlayersFile)
        schedule = load_json(config.CONFIG_PATH.parent / 'schedule.json', schema=ScheduleFile)
        assert any(p.player_key == 'J.Allen-BUF-QB' for p in players.players)
        assert all(g.round == 'WC' for g in schedule.games)

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_json(tmp_path / 'nope.json')

    def test_malformed_json(self, tmp_path):
        path = tmp_path / 'bad.json'
        path.write_text('{"players": [')
        with pytest.raises(json.JSONDecodeError):
            load_json(path)

    def test_schema_failure(self, tmp_path):
        path = tmp_path / 'players.json'
        path.write_text(json.dumps({'players': [{'player_key': 'X.Y-BUF-LB', 'full_name': 'X', 'team': 'BUF', 'position': 'LB'}]}))
        with pytest.raises(ValueError, match='Schema validation failed'):
            load_json(path, schema=PlayersFile)

    def test_save_and_load(self, tmp_path):
        path = tmp_path / 'out' / 'summary.json'
        save_json(path, {'success': True, 'errors': []})
        assert load_json(path) == {'success': True, 'errors': []}
