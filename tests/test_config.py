"""
Unit tests for RadarConfig and store overrides.
"""
import pytest

from radar.config import DEFAULT_FEEDS, RadarConfig, apply_store_overrides
from radar.errors import ConfigError
from tests.conftest import FakeStore

BASE_ENV = {"SUPABASE_URL": "https://x.supabase.co/", "SUPABASE_ANON_KEY": "anon", "GROQ_API_KEY": "gsk"}


class TestFromEnv:

    def test_defaults(self):
        config = RadarConfig.from_env(env=BASE_ENV)

        assert config.supabase_url == "https://x.supabase.co"
        assert config.llm_provider == "groq"
        assert config.llm_base_url == "https://api.groq.com/openai/v1"
        assert config.batch_size == 100
        assert config.max_age_days == 7
        assert config.noise_bypass_labels == ["Competitor Watch"]
        assert config.feeds == DEFAULT_FEEDS
        assert config.notify is False

    def test_missing_supabase_is_fatal(self):
        with pytest.raises(ConfigError):
            RadarConfig.from_env(env={"GROQ_API_KEY": "gsk"})

    def test_missing_llm_key_is_fatal_when_required(self):
        env = {k: v for k, v in BASE_ENV.items() if k != "GROQ_API_KEY"}

        with pytest.raises(ConfigError):
            RadarConfig.from_env(env=env)
        assert RadarConfig.from_env(require_llm=False, env=env).llm_api_key == ""

    def test_openai_provider_uses_base_url(self):
        env = dict(BASE_ENV, RADAR_LLM_PROVIDER="openai", OPENAI_API_KEY="sk",
                   OPENAI_BASE_URL="http://proxy:4000", RADAR_MODEL="gpt-4o-mini")
        config = RadarConfig.from_env(env=env)

        assert config.llm_api_key == "sk"
        assert config.llm_base_url == "http://proxy:4000"
        assert config.llm_model == "gpt-4o-mini"

    def test_unknown_provider(self):
        with pytest.raises(ConfigError):
            RadarConfig.from_env(env=dict(BASE_ENV, RADAR_LLM_PROVIDER="carrier-pigeon"))

    def test_integer_overrides(self):
        env = dict(BASE_ENV, RADAR_BATCH_SIZE="25", RADAR_MAX_AGE_DAYS="3", RADAR_NOTIFY="true")
        config = RadarConfig.from_env(env=env)

        assert config.batch_size == 25
        assert config.max_age_days == 3
        assert config.notify is True

    def test_bad_integer(self):
        with pytest.raises(ConfigError):
            RadarConfig.from_env(env=dict(BASE_ENV, RADAR_BATCH_SIZE="lots"))

    @pytest.mark.parametrize("var, raw", [
        ("RADAR_BATCH_SIZE", "-1"),
        ("RADAR_BATCH_SIZE", "0"),
        ("RADAR_MAX_AGE_DAYS", "0"),
        ("RADAR_SCORE_THRESHOLD", "11"),
        ("RADAR_SCORE_THRESHOLD", "-2"),
        ("RADAR_FETCH_WORKERS", "0"),
        ("SMTP_PORT", "70000"),
        ("RADAR_LLM_TIMEOUT", "0"),
        ("RADAR_LLM_TIMEOUT", "nan"),
    ])
    def test_out_of_range_values_are_fatal(self, var, raw):
        with pytest.raises(ConfigError):
            RadarConfig.from_env(env=dict(BASE_ENV, **{var: raw}))

    def test_llm_timeout(self):
        assert RadarConfig.from_env(env=dict(BASE_ENV, RADAR_LLM_TIMEOUT="45")).llm_timeout == 45.0


class TestStoreOverrides:

    def test_settings_and_sources_applied(self, config):
        store = FakeStore(tables={
            "radar_settings": [{"key": "batch_size", "value": "10"},
                               {"key": "unknown", "value": "1"},
                               {"key": "max_age_days", "value": "oops"}],
            "radar_sources": [{"url": "https://feed.example/rss", "label": "Custom"}],
        })
        updated = apply_store_overrides(config, store)

        assert updated.batch_size == 10
        assert updated.max_age_days == config.max_age_days
        assert [f.label for f in updated.feeds] == ["Custom"]
        assert config.batch_size == 100   # original untouched

    def test_out_of_range_overrides_ignored(self, config):
        store = FakeStore(tables={"radar_settings": [
            {"key": "batch_size", "value": "-1"},
            {"key": "max_age_days", "value": 0},
            {"key": "score_threshold", "value": "4"},
        ]})

        updated = apply_store_overrides(config, store)

        assert updated.batch_size == 100
        assert updated.max_age_days == 7
        assert updated.score_threshold == 4

    def test_store_errors_keep_defaults(self, config):
        store = FakeStore(fail_on={("radar_settings", "select"), ("radar_sources", "select")})

        assert apply_store_overrides(config, store) == config
