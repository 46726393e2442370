"""
Tests for analysis configuration loading.
YAML files, environment overrides and validation.
"""

import pytest

from pipeline.config import AnalysisConfig, ConfigError, load_config

ENV_VARS = ['ANALYSIS_CONFIG_PATH', 'MA_WINDOWS', 'SENTIMENT_SEED', 'DEFAULT_VOLUME', 'CHAT_HISTORY_LIMIT']


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


class TestAnalysisConfig:
    """Tests for defaults and validation."""

    def test_defaults(self):
        config = AnalysisConfig()

        assert config.window_sizes == (5, 10, 20)
        assert config.default_volume == 1_000_000
        assert config.sentiment_seed is None
        assert config.history_limit == 200

    def test_windows_sorted_and_deduplicated(self):
        assert AnalysisConfig(window_sizes=(20, 5, 5)).window_sizes == (5, 20)

    @pytest.mark.parametrize("windows", [(), (0,), (-3,), (2.5,)])
    def test_invalid_windows(self, windows):
        with pytest.raises(ConfigError, match="Invalid window_sizes"):
            AnalysisConfig(window_sizes=windows)

    def test_invalid_history_limit(self):
        with pytest.raises(ConfigError, match="history_limit"):
            AnalysisConfig(history_limit=0)

    def test_invalid_default_volume(self):
        with pytest.raises(ConfigError, match="default_volume"):
            AnalysisConfig(default_volume=-1)

    @pytest.mark.parametrize("field", ['default_volume', 'sentiment_seed', 'history_limit'])
    def test_booleans_rejected(self, field):
        with pytest.raises(ConfigError, match=field):
            AnalysisConfig(**{field: True})

    def test_negative_seed(self):
        with pytest.raises(ConfigError, match="sentiment_seed must be a non-negative integer"):
            AnalysisConfig(sentiment_seed=-1)


class TestLoadConfig:
    """Tests for load_config."""

    def test_no_file_no_env(self):
        assert load_config() == AnalysisConfig()

    def test_yaml_analysis_section(self, tmp_path):
        path = tmp_path / 'config.yaml'
        path.write_text("analysis:\n  window_sizes: [3, 7]\n  sentiment_seed: 9\n")

        config = load_config(str(path))

        assert config.window_sizes == (3, 7)
        assert config.sentiment_seed == 9

    def test_yaml_top_level_mapping(self, tmp_path):
        path = tmp_path / 'config.yaml'
        path.write_text("history_limit: 10\n")
        assert load_config(str(path)).history_limit == 10

    def test_path_from_env(self, tmp_path, monkeypatch):
        path = tmp_path / 'config.yaml'
        path.write_text("default_volume: 500\n")
        monkeypatch.setenv('ANALYSIS_CONFIG_PATH', str(path))

        assert load_config().default_volume == 500

    def test_env_overrides_file(self, tmp_path, monkeypatch):
        path = tmp_path / 'config.yaml'
        path.write_text("window_sizes: [3, 7]\nsentiment_seed: 1\n")
        monkeypatch.setenv('MA_WINDOWS', '4, 8')
        monkeypatch.setenv('SENTIMENT_SEED', '42')

        config = load_config(str(path))

        assert config.window_sizes == (4, 8)
        assert config.sentiment_seed == 42

    def test_env_history_and_volume(self, monkeypatch):
        monkeypatch.setenv('CHAT_HISTORY_LIMIT', '6')
        monkeypatch.setenv('DEFAULT_VOLUME', '250')

        config = load_config()

        assert config.history_limit == 6
        assert config.default_volume == 250

    def test_bad_env_integer(self, monkeypatch):
        monkeypatch.setenv('SENTIMENT_SEED', 'lucky')
        with pytest.raises(ConfigError, match="SENTIMENT_SEED must be an integer"):
            load_config()

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigError, match="Config file not found"):
            load_config(str(tmp_path / 'missing.yaml'))

    def test_malformed_yaml(self, tmp_path):
        path = tmp_path / 'config.yaml'
        path.write_text("analysis: [unclosed\n")
        with pytest.raises(ConfigError, match="Failed to load config"):
            load_config(str(path))

    def test_non_mapping_file(self, tmp_path):
        path = tmp_path / 'config.yaml'
        path.write_text("- 1\n- 2\n")
        with pytest.raises(ConfigError, match="must contain a mapping"):
            load_config(str(path))

    def test_unknown_key(self, tmp_path):
        path = tmp_path / 'config.yaml'
        path.write_text("windows: [5]\n")
        with pytest.raises(ConfigError, match="Unknown config keys"):
            load_config(str(path))

    def test_window_sizes_not_a_list(self, tmp_path):
        path = tmp_path / 'config.yaml'
        path.write_text("window_sizes: 5\n")
        with pytest.raises(ConfigError, match="window_sizes must be a list"):
            load_config(str(path))

    def test_null_analysis_section_uses_defaults(self, tmp_path):
        path = tmp_path / 'config.yaml'
        path.write_text("analysis:\n")
        assert load_config(str(path)) == AnalysisConfig()

    def test_analysis_section_not_a_mapping(self, tmp_path):
        path = tmp_path / 'config.yaml'
        path.write_text("analysis: [5, 10]\n")
        with pytest.raises(ConfigError, match="analysis section must be a mapping"):
            load_config(str(path))

    def test_negative_seed_from_env(self, monkeypatch):
        monkeypatch.setenv('SENTIMENT_SEED', '-1')
        with pytest.raises(ConfigError, match="sentiment_seed must be a non-negative integer"):
            load_config()
