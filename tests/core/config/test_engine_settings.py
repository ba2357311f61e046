import os
from pathlib import Path
from unittest.mock import patch

import pytest

from healthstats.core.base.exceptions import ConfigurationError
from healthstats.core.config.settings import (
    EngineConfig,
    get_config,
    load_config_file,
    load_config_from_env,
    reset_config,
    save_config_file,
    set_config,
    update_config,
)


@pytest.fixture(autouse=True)
def clean_global_config():
    reset_config()
    yield
    reset_config()


class TestEngineConfig:
    def test_defaults(self):
        cfg = EngineConfig()
        assert cfg.correlation_method == "pearson"
        assert cfg.sampling_rate == 1.0
        assert cfg.log_level == "INFO"
        assert cfg.log_format == "standard"
        assert cfg.log_file is None

    def test_num_workers_defaults_to_cpu_count(self):
        with patch("healthstats.core.config.settings.os.cpu_count", return_value=6):
            assert EngineConfig().num_workers == 6

    def test_normalizes_case_and_paths(self):
        cfg = EngineConfig(log_level="debug", correlation_method="Kendall", log_file="logs/a.log")
        assert cfg.log_level == "DEBUG"
        assert cfg.correlation_method == "kendall"
        assert cfg.log_file == Path("logs/a.log")

    def test_is_immutable(self):
        cfg = EngineConfig()
        with pytest.raises(AttributeError):
            cfg.sampling_rate = 2.0

    @pytest.mark.parametrize("kwargs,fragment", [
        ({"num_workers": 0}, "num_workers"),
        ({"correlation_method": "distance"}, "correlation_method"),
        ({"sampling_rate": 0.0}, "sampling_rate"),
        ({"sampling_rate": float("nan")}, "sampling_rate"),
        ({"log_level": "VERBOSE"}, "log_level"),
        ({"log_format": "xml"}, "log_format"),
    ])
    def test_validation_errors(self, kwargs, fragment):
        with pytest.raises(ConfigurationError) as exc_info:
            EngineConfig(**kwargs)
        assert fragment in str(exc_info.value)

    def test_all_errors_reported_together(self):
        with pytest.raises(ConfigurationError) as exc_info:
            EngineConfig(num_workers=-1, log_format="xml")
        message = str(exc_info.value)
        assert "num_workers" in message and "log_format" in message
        assert "; " in message

    def test_dict_round_trip(self):
        cfg = EngineConfig(num_workers=2, sampling_rate=50.0, log_file="x.log")
        data = cfg.to_dict()
        assert data["log_file"] == "x.log"
        assert EngineConfig.from_dict(data) == cfg

    def test_from_dict_rejects_unknown_keys(self):
        with pytest.raises(ConfigurationError):
            EngineConfig.from_dict({"window_size": 30})

    def test_replace(self):
        cfg = EngineConfig(num_workers=2)
        changed = cfg.replace(sampling_rate=10.0)
        assert changed.sampling_rate == 10.0
        assert changed.num_workers == 2
        assert cfg.sampling_rate == 1.0

    def test_replace_validates(self):
        with pytest.raises(ConfigurationError):
            EngineConfig().replace(sampling_rate=-1.0)
        with pytest.raises(ConfigurationError):
            EngineConfig().replace(unknown=1)


class TestGlobalConfig:
    def test_get_config_is_cached(self):
        assert get_config() is get_config()

    def test_set_config(self):
        cfg = EngineConfig(num_workers=3)
        set_config(cfg)
        assert get_config() is cfg

    def test_set_config_type_check(self):
        with pytest.raises(TypeError):
            set_config({"num_workers": 3})

    def test_update_config(self):
        update_config(correlation_method="spearman")
        assert get_config().correlation_method == "spearman"

    def test_reset_config(self):
        set_config(EngineConfig(sampling_rate=5.0))
        reset_config()
        assert get_config().sampling_rate == 1.0


class TestEnvironmentConfig:
    def test_reads_prefixed_variables(self):
        env = {
            "HEALTHSTATS_NUM_WORKERS": "4",
            "HEALTHSTATS_CORRELATION_METHOD": "spearman",
            "HEALTHSTATS_SAMPLING_RATE": "250",
            "HEALTHSTATS_LOG_LEVEL": "warning",
            "HEALTHSTATS_LOG_FORMAT": "json",
            "HEALTHSTATS_LOG_FILE": "/tmp/healthstats.log",
        }
        with patch.dict(os.environ, env, clear=False):
            cfg = load_config_from_env()
        assert cfg.num_workers == 4
        assert cfg.correlation_method == "spearman"
        assert cfg.sampling_rate == 250.0
        assert cfg.log_level == "WARNING"
        assert cfg.log_format == "json"
        assert cfg.log_file == Path("/tmp/healthstats.log")

    def test_explicit_mapping(self):
        cfg = load_config_from_env({"HEALTHSTATS_SAMPLING_RATE": "2.5"})
        assert cfg.sampling_rate == 2.5

    def test_empty_values_fall_back(self):
        cfg = load_config_from_env({"HEALTHSTATS_NUM_WORKERS": "", "HEALTHSTATS_LOG_FILE": ""})
        assert cfg.num_workers >= 1
        assert cfg.log_file is None

    def test_unparseable_value(self):
        with pytest.raises(ConfigurationError) as exc_info:
            load_config_from_env({"HEALTHSTATS_SAMPLING_RATE": "fast"})
        assert exc_info.value.parameter == "sampling_rate"


class TestConfigFiles:
    @pytest.mark.parametrize("suffix", [".json", ".yaml", ".yml"])
    def test_save_and_load(self, tmp_path, suffix):
        cfg = EngineConfig(num_workers=2, correlation_method="kendall",
                           sampling_rate=100.0, log_file=tmp_path / "engine.log")
        path = tmp_path / f"engine{suffix}"
        save_config_file(cfg, path)
        assert load_config_file(path) == cfg

    def test_yaml_partial_file(self, tmp_path):
        path = tmp_path / "engine.yaml"
        path.write_text("sampling_rate: 32\nlog_format: detailed\n", encoding="utf-8")
        cfg = load_config_file(path)
        assert cfg.sampling_rate == 32
        assert cfg.log_format == "detailed"
        assert cfg.correlation_method == "pearson"

    def test_invalid_values_in_file(self, tmp_path):
        path = tmp_path / "engine.json"
        path.write_text('{"correlation_method": "distance"}', encoding="utf-8")
        with pytest.raises(ConfigurationError):
            load_config_file(path)
