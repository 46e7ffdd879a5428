"""
Tests for the JSON input/output and the logging setup.
"""
import json
import logging

import pytest

from conftest import make_parameters
from gradientgenerator import create_gradient_generator
from gradientgenerator.io import (
    APP_VERSION,
    load_parameters,
    parameters_from_dict,
    result_to_dict,
    save_parameters,
    save_result,
)
from gradientgenerator.logging_config import setup_logging
from gradientgenerator.utils import compute_index_factor, fraction_to_percent, percent_to_fraction


class TestParameterFiles:

    def test_save_and_load(self, tmp_path, four_outlet_parameters):
        filepath = tmp_path / "parameters.json"
        save_parameters(four_outlet_parameters, str(filepath))
        data = json.loads(filepath.read_text(encoding="utf-8"))
        assert data["version"] == APP_VERSION
        assert data["concentration_unit"] == "fraction"
        assert load_parameters(str(filepath)) == four_outlet_parameters

    def test_percent_concentrations(self, baseline_dict):
        baseline_dict["concentration_unit"] = "percent"
        for entry, percent in zip(baseline_dict["inlets"], [100, 0]):
            entry["concentration"] = percent
        for entry, percent in zip(baseline_dict["outlets"], [100, 50, 0]):
            entry["concentration"] = percent
        parameters = parameters_from_dict(baseline_dict)
        assert [inlet.concentration for inlet in parameters.inlets] == [1.0, 0.0]
        assert [outlet.concentration for outlet in parameters.outlets] == [1.0, 0.5, 0.0]
        parameters.validate()

    def test_unknown_unit(self, baseline_dict):
        baseline_dict["concentration_unit"] = "ppm"
        with pytest.raises(ValueError):
            parameters_from_dict(baseline_dict)

    def test_missing_field(self, baseline_dict):
        del baseline_dict["viscosity"]
        with pytest.raises(ValueError, match="viscosity"):
            parameters_from_dict(baseline_dict)


class TestResultFiles:

    def test_success(self, tmp_path, baseline_parameters):
        result = create_gradient_generator(baseline_parameters)
        data = result_to_dict(result)
        assert data["success"] is True
        assert data["bounds"]["height"] == pytest.approx(result.height)
        assert len(data["paths"]) == 1
        assert data["svg_path_data"].startswith("M ")
        assert [m["n_arcs"] for m in data["meanders"][0]] == [3, 3, 3]

        filepath = tmp_path / "result.json"
        save_result(result, str(filepath))
        assert json.loads(filepath.read_text(encoding="utf-8")) == json.loads(json.dumps(data))

    def test_failure(self):
        result = create_gradient_generator(make_parameters(viscosity=0.0))
        data = result_to_dict(result)
        assert data["success"] is False
        assert data["error"] == {
            "kind": "parameter",
            "identifier": "mu",
            "message": 'Parameter Error: "0 < mu" must hold',
        }
        assert "paths" not in data


class TestUtils:

    def test_index_factor(self):
        assert [compute_index_factor(i, 3) for i in range(3)] == [-1, 0, 1]
        assert [compute_index_factor(i, 2) for i in range(2)] == [-0.5, 0.5]

    def test_percent_conversion(self):
        assert percent_to_fraction(50) == 0.5
        assert fraction_to_percent(0.25) == 25.0


class TestLogging:

    def test_setup_logging_replaces_handlers(self, tmp_path):
        log_file = tmp_path / "run.log"
        setup_logging(level=logging.DEBUG, log_file=str(log_file))
        setup_logging(level=logging.DEBUG, log_file=str(log_file))
        logger = logging.getLogger("gradientgenerator")
        try:
            assert len(logger.handlers) == 2
            logging.getLogger("gradientgenerator.solvers").debug("search done")
            for handler in logger.handlers:
                handler.flush()
            text = log_file.read_text(encoding="utf-8")
            assert "Logging initialized." in text
            assert "search done" in text
        finally:
            for handler in list(logger.handlers):
                handler.close()
                logger.removeHandler(handler)

    def test_console_stream(self, capsys):
        setup_logging(level=logging.INFO)
        logger = logging.getLogger("gradientgenerator")
        try:
            logging.getLogger("gradientgenerator.pipeline").info("on stdout")
            assert "on stdout" in capsys.readouterr().out
        finally:
            for handler in list(logger.handlers):
                logger.removeHandler(handler)
