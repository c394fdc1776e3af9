"""
Unit tests for hydrostab/bootstrap

Tests configuration loading (defaults, environment, JSON file), the
Engine facade and logging setup.
"""

import pytest
import json
import logging

from hydrostab.bootstrap.config import (
    EngineConfig,
    TrimConfig,
    load_config,
    get_config,
    reset_config,
)
from hydrostab.bootstrap.app import Engine
from hydrostab.bootstrap.entrypoints import JSONFormatter, setup_logging, bootstrap
from hydrostab.stability.constants import StabilityMethod
from hydrostab.errors import ConfigurationError


@pytest.fixture(autouse=True)
def fresh_config():
    reset_config()
    yield
    reset_config()


@pytest.fixture
def root_handlers():
    """Restore root logger handlers and level after setup_logging."""
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield root
    for handler in root.handlers[:]:
        if handler not in handlers:
            root.removeHandler(handler)
            handler.close()
    root.setLevel(level)


def write_config(tmp_path, data):
    path = tmp_path / "hydrostab.json"
    path.write_text(json.dumps(data))
    return str(path)


class TestDefaults:

    def test_default_values(self):
        config = EngineConfig()
        assert config.trim.max_iterations == 20
        assert config.trim.tolerance_kg == 100.0
        assert config.hydrostatics.default_rho == 1025.0
        assert config.stability.default_method == StabilityMethod.FULL_IMMERSION.value
        assert config.stability.agreement_rtol == 0.02

    def test_defaults_validate(self):
        EngineConfig().validate()

    def test_to_dict_sections(self):
        data = EngineConfig().to_dict()
        assert list(data) == ["integration", "hydrostatics", "stability", "trim", "curves", "logging"]
        assert data["curves"]["default_points"] == 100


class TestEnvironment:

    def test_env_overrides(self, monkeypatch):
        monkeypatch.setenv("HYDROSTAB_TRIM_MAX_ITER", "30")
        monkeypatch.setenv("HYDROSTAB_DEFAULT_RHO", "1000")
        monkeypatch.setenv("HYDROSTAB_JSON_LOGS", "true")
        config = EngineConfig.from_env()
        assert config.trim.max_iterations == 30
        assert config.hydrostatics.default_rho == 1000.0
        assert config.logging.json_logs is True

    def test_invalid_env_value(self, monkeypatch):
        monkeypatch.setenv("HYDROSTAB_TRIM_MAX_ITER", "many")
        with pytest.raises(ConfigurationError) as exc_info:
            TrimConfig.from_env()
        assert exc_info.value.errors[0].field == "HYDROSTAB_TRIM_MAX_ITER"


class TestConfigFile:

    def test_file_overrides_sections(self, tmp_path):
        path = write_config(tmp_path, {
            "trim": {"max_iterations": 40, "tolerance_kg": 10.0},
            "stability": {"default_method": "wall_sided", "angle_max_deg": 30.0},
        })
        config = EngineConfig.from_file(path)
        assert config.trim.max_iterations == 40
        assert config.trim.tolerance_kg == 10.0
        assert config.stability.default_method == "wall_sided"
        assert config.stability.angle_max_deg == 30.0
        assert config.curves.default_points == 100

    def test_unknown_key_ignored(self, tmp_path, caplog):
        path = write_config(tmp_path, {"trim": {"max_iterations": 5, "relaxation": 0.5}})
        with caplog.at_level(logging.WARNING):
            config = EngineConfig.from_file(path)
        assert config.trim.max_iterations == 5
        assert not hasattr(config.trim, "relaxation")
        assert "trim.relaxation" in caplog.text

    def test_missing_file_falls_back(self, tmp_path):
        config = EngineConfig.from_file(str(tmp_path / "absent.json"))
        assert config.trim.max_iterations == 20

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{not json")
        with pytest.raises(ConfigurationError):
            EngineConfig.from_file(str(path))

    def test_invalid_values_rejected(self, tmp_path):
        path = write_config(tmp_path, {
            "stability": {"default_method": "prohaska", "angle_step_deg": 0},
        })
        with pytest.raises(ConfigurationError) as exc_info:
            EngineConfig.from_file(path)
        fields = {e.field for e in exc_info.value.errors}
        assert fields == {"stability.default_method", "stability.angle_step_deg"}

    def test_load_and_get(self, tmp_path):
        path = write_config(tmp_path, {"curves": {"default_points": 25}})
        loaded = load_config(path)
        assert get_config() is loaded
        assert get_config().curves.default_points == 25


class TestEngine:

    def test_loadcase_uses_configured_density(self):
        engine = Engine(EngineConfig())
        assert engine.loadcase(kg=2.5).rho == 1025.0
        assert engine.loadcase(rho=1000.0).rho == 1000.0

    def test_components_share_integrator(self):
        engine = Engine()
        assert engine.stability.hydrostatics is engine.hydrostatics
        assert engine.trim.hydrostatics is engine.hydrostatics
        assert engine.hydrostatics.integrator is engine.integrator

    def test_trim_settings_applied(self):
        config = EngineConfig()
        config.trim.max_iterations = 7
        assert Engine(config).trim.max_iterations == 7

    def test_configured_sweep(self, barge):
        config = EngineConfig()
        config.stability.angle_max_deg = 30.0
        config.stability.angle_step_deg = 5.0
        config.stability.default_method = "wall_sided"
        engine = Engine(config)

        curve = engine.compute_gz_curve(barge, engine.loadcase(kg=2.5))
        assert curve.angles_deg == [0.0, 5.0, 10.0, 15.0, 20.0, 25.0, 30.0]
        assert curve.method is StabilityMethod.WALL_SIDED

    def test_stability_report(self, barge):
        config = EngineConfig()
        config.stability.angle_max_deg = 60.0
        config.stability.default_method = "wall_sided"
        engine = Engine(config)

        report = engine.stability_report(barge, engine.loadcase(kg=2.5))
        assert report.assessment.all_passed
        assert "gz" in report.series

    def test_hydrostatics_and_trim(self, barge):
        engine = Engine()
        lc = engine.loadcase()
        upright = engine.compute_at(barge, lc, 4.0)
        solution = engine.solve_trim(barge, lc, upright.displacement_kg, 5.0, 5.0)
        assert solution.converged
        assert solution.mean_draft_m == pytest.approx(4.0, abs=1e-4)
        assert len(engine.compute_table(barge, lc, [2.0, 4.0])) == 2

    def test_solve_trim_per_call_settings(self, barge):
        engine = Engine()
        lc = engine.loadcase()
        target = engine.compute_at(barge, lc, 4.0).displacement_kg

        capped = engine.solve_trim(barge, lc, target, 5.0, 5.0, max_iterations=1)
        assert capped.iterations == 1
        assert not capped.converged

        loose = engine.solve_trim(barge, lc, target, 4.01, 4.01, tolerance=1.0e6)
        assert loose.iterations == 1
        assert loose.converged
        assert loose.draft_fwd_m == pytest.approx(4.01)

    def test_compare_methods_uses_configured_angle(self, barge):
        config = EngineConfig()
        config.stability.agreement_max_deg = 10.0
        engine = Engine(config)

        agreement = engine.compare_methods(barge, engine.loadcase(kg=2.5))
        assert agreement.max_angle_deg == 10.0
        assert len(agreement.full_immersion.points) == 11
        assert agreement.within_tolerance

    def test_agreement_angle_validated(self):
        config = EngineConfig()
        config.stability.agreement_max_deg = 90.0
        with pytest.raises(ConfigurationError) as exc_info:
            config.validate()
        assert exc_info.value.errors[0].field == "stability.agreement_max_deg"


class TestLogging:

    def test_json_formatter(self):
        record = logging.LogRecord("hydrostab.test", logging.INFO, __file__, 1, "GZ %s", ("ok",), None)
        payload = json.loads(JSONFormatter().format(record))
        assert payload["level"] == "INFO"
        assert payload["logger"] == "hydrostab.test"
        assert payload["message"] == "GZ ok"

    def test_setup_logging_adds_handlers(self, root_handlers, tmp_path):
        before = len(root_handlers.handlers)
        log_file = tmp_path / "engine.log"
        setup_logging(level="DEBUG", log_file=str(log_file))
        assert len(root_handlers.handlers) == before + 2
        assert root_handlers.level == logging.DEBUG

    def test_bootstrap_from_file(self, root_handlers, tmp_path):
        path = write_config(tmp_path, {"trim": {"max_iterations": 12}, "logging": {"level": "WARNING"}})
        engine = bootstrap(path)
        assert isinstance(engine, Engine)
        assert engine.trim.max_iterations == 12
        assert root_handlers.level == logging.WARNING

    def test_bootstrap_without_logging(self, root_handlers, tmp_path):
        before = len(root_handlers.handlers)
        path = write_config(tmp_path, {})
        bootstrap(path, configure_logging=False)
        assert len(root_handlers.handlers) == before
