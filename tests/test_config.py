import importlib

from cashflow_planner import config


def test_ensure_data_directories(tmp_path, monkeypatch):
    monkeypatch.setattr(config, 'DATA_DIR', tmp_path / 'data')
    monkeypatch.setattr(config, 'LOGS_DIR', tmp_path / 'data' / 'logs')
    monkeypatch.setattr(config, 'PLAN_PATH', tmp_path / 'plans' / 'cashflow_plans.json')

    config.ensure_data_directories()

    assert (tmp_path / 'data' / 'logs').is_dir()
    assert (tmp_path / 'plans').is_dir()


def test_environment_overrides(tmp_path, monkeypatch):
    monkeypatch.setenv('CASHFLOW_DATA_DIR', str(tmp_path))
    monkeypatch.setenv('CASHFLOW_LOG_LEVEL', 'debug')
    try:
        reloaded = importlib.reload(config)
        assert reloaded.DATA_DIR == tmp_path
        assert reloaded.PLAN_PATH == (tmp_path / 'cashflow_plans.json').resolve()
        assert reloaded.LOG_LEVEL == 'DEBUG'
    finally:
        monkeypatch.delenv('CASHFLOW_DATA_DIR')
        monkeypatch.delenv('CASHFLOW_LOG_LEVEL')
        importlib.reload(config)
