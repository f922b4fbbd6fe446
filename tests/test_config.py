import json

import pytest
import structlog

from solidkern.config import (DEFAULT_TOLERANCE, KernelConfig, get_config, load_config,
                              reset_config)
from solidkern.errors import NonPositiveTolerance
from solidkern.geometry_utils import DEFAULT_COLOR
from solidkern.logging_setup import configure_from_config, configure_logging, get_logger


class TestKernelConfig:

    def test_defaults(self):
        config = KernelConfig()
        assert config.tolerance.value == DEFAULT_TOLERANCE
        assert config.color == DEFAULT_COLOR
        assert config.log_level == 'INFO'
        assert config.log_json is False

    def test_from_mapping(self):
        config = KernelConfig.from_mapping({'tolerance': 0.5, 'color': [1, 2, 3, 4],
                                            'log_level': 'debug'})
        assert config.tolerance.value == 0.5
        assert config.color == (1, 2, 3, 4)
        assert config.log_level == 'DEBUG'

    def test_rejects_bad_values(self):
        with pytest.raises(ValueError):
            KernelConfig.from_mapping({'speed': 11})
        with pytest.raises(ValueError):
            KernelConfig(log_level='LOUD')
        with pytest.raises(NonPositiveTolerance):
            KernelConfig(tolerance=0.0)
        with pytest.raises(ValueError):
            KernelConfig(color=(1, 2, 3))


class TestLoadConfig:

    def test_no_file(self):
        assert load_config(environ={}) == KernelConfig()

    def test_yaml_file(self, tmp_path):
        path = tmp_path / 'kernel.yaml'
        path.write_text('tolerance: 0.01\ncolor: [0, 128, 255, 255]\nlog_json: true\n')
        config = load_config(path, environ={})
        assert config.tolerance.value == 0.01
        assert config.color == (0, 128, 255, 255)
        assert config.log_json is True

    def test_empty_file(self, tmp_path):
        path = tmp_path / 'kernel.yaml'
        path.write_text('')
        assert load_config(path, environ={}) == KernelConfig()

    def test_file_from_environment(self, tmp_path):
        path = tmp_path / 'kernel.yaml'
        path.write_text('tolerance: 0.2\n')
        config = load_config(environ={'SOLIDKERN_CONFIG': str(path)})
        assert config.tolerance.value == 0.2

    def test_environment_overrides(self, tmp_path):
        path = tmp_path / 'kernel.yaml'
        path.write_text('tolerance: 0.2\nlog_level: INFO\n')
        config = load_config(path, environ={'SOLIDKERN_TOLERANCE': '0.05',
                                            'SOLIDKERN_LOG_LEVEL': 'warning'})
        assert config.tolerance.value == 0.05
        assert config.log_level == 'WARNING'

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / 'nope.yaml', environ={})

    def test_not_a_mapping(self, tmp_path):
        path = tmp_path / 'kernel.yaml'
        path.write_text('- 1\n- 2\n')
        with pytest.raises(ValueError):
            load_config(path, environ={})


def test_get_config_caches(monkeypatch):
    first = get_config()
    assert get_config() is first
    monkeypatch.setenv('SOLIDKERN_TOLERANCE', '0.25')
    assert get_config().tolerance.value == DEFAULT_TOLERANCE
    reset_config()
    assert get_config().tolerance.value == 0.25


class TestLogging:

    def test_json_output_and_level(self, capsys):
        configure_logging(level='WARNING', enable_json=True)
        log = get_logger('solidkern.test')
        log.info('dropped')
        log.warning('kept', faces=6)
        lines = [line for line in capsys.readouterr().out.splitlines() if line.strip()]
        assert len(lines) == 1
        record = json.loads(lines[0])
        assert record['event'] == 'kept'
        assert record['faces'] == 6
        assert record['level'] == 'warning'

    def test_from_config(self, capsys):
        configure_from_config(KernelConfig(log_level='DEBUG', log_json=True))
        structlog.get_logger('solidkern.test').debug('visible')
        assert 'visible' in capsys.readouterr().out
