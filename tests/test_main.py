"""Tests for configuration loading and the command line entry point."""

import json
import os
import sys

import pytest
from openpyxl import load_workbook

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from excel_template.config import DEFAULT_CONFIG, Direction, load_config, parse_direction
from excel_template.main import default_output_path, load_variables, main
from tests.create_sample_template import create_invoice_template

VARIABLES_YAML = """\
number: 7
customer: ACME
issued: 2024-03-01
dates: [2024-01-01, 2024-02-01]
amounts: [1, 2]
note: ok
lines:
  - {item: Widget, qty: 3}
  - {item: Gadget, qty: 1}
"""


@pytest.fixture
def workspace(tmp_path):
    template = tmp_path / "invoice.xlsx"
    create_invoice_template(str(template))
    variables = tmp_path / "vars.yaml"
    variables.write_text(VARIABLES_YAML)
    return tmp_path, str(template), str(variables)


class TestConfig:
    def test_defaults(self):
        config = load_config(None)
        assert config["direction"] is Direction.VERTICAL
        assert config["duplicate_all"] is True
        assert config["remove_non_existent"] is False
        assert DEFAULT_CONFIG["direction"] == "vertical"

    def test_missing_file_gives_defaults(self, tmp_path):
        config = load_config(str(tmp_path / "nope.yaml"))
        assert config["log_level"] == "INFO"

    def test_yaml_overrides(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("direction: horizontal\nremove_non_existent: true\n")
        config = load_config(str(path))
        assert config["direction"] is Direction.HORIZONTAL
        assert config["remove_non_existent"] is True
        assert config["duplicate_all"] is True

    def test_parse_direction(self):
        assert parse_direction(" Horizontal ") is Direction.HORIZONTAL
        assert parse_direction(Direction.VERTICAL) is Direction.VERTICAL
        assert parse_direction(None) is Direction.VERTICAL
        with pytest.raises(ValueError):
            parse_direction("sideways")


class TestLoadVariables:
    def test_yaml(self, workspace):
        _, _, variables = workspace
        data = load_variables(variables)
        assert data["customer"] == "ACME"
        assert data["lines"][0] == {"item": "Widget", "qty": 3}

    def test_json(self, tmp_path):
        path = tmp_path / "vars.json"
        path.write_text(json.dumps({"a": [1, 2]}))
        assert load_variables(str(path)) == {"a": [1, 2]}

    def test_empty_file(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("")
        assert load_variables(str(path)) == {}

    def test_not_a_mapping(self, tmp_path):
        path = tmp_path / "list.yaml"
        path.write_text("- a\n- b\n")
        with pytest.raises(ValueError):
            load_variables(str(path))

    def test_default_output_path(self):
        assert default_output_path("dir/report.xlsx") == "dir/report_filled.xlsx"


class TestMain:
    def test_generates_output(self, workspace, capsys):
        tmp_path, template, variables = workspace
        output = str(tmp_path / "out.xlsx")
        code = main([template, variables, "-o", output,
                     "--config", str(tmp_path / "none.yaml")])
        assert code == 0
        assert f"Generated: {output}" in capsys.readouterr().out
        wb = load_workbook(output)
        assert wb.sheetnames == ["Invoice 7", "Lines"]
        assert wb["Lines"]["C1"].value == "Gadget"

    def test_default_output_next_to_template(self, workspace):
        tmp_path, template, variables = workspace
        assert main([template, variables, "--config", str(tmp_path / "none.yaml")]) == 0
        assert (tmp_path / "invoice_filled.xlsx").exists()

    def test_flags_override_config(self, workspace):
        tmp_path, template, variables = workspace
        config = tmp_path / "config.yaml"
        config.write_text("direction: vertical\n")
        output = str(tmp_path / "out.xlsx")
        code = main([template, variables, "-o", output, "--config", str(config),
                     "--direction", "horizontal", "--no-duplicate-all"])
        assert code == 0
        ws = load_workbook(output)["Lines"]
        # horizontal: the record block is repeated downwards
        assert ws["B1"].value == "Widget"
        assert ws["B4"].value == "Gadget"
        assert ws["A4"].value is None

    def test_missing_template(self, workspace):
        tmp_path, _, variables = workspace
        code = main([str(tmp_path / "missing.xlsx"), variables,
                     "--config", str(tmp_path / "none.yaml")])
        assert code == 1

    def test_bad_variables(self, workspace):
        tmp_path, template, _ = workspace
        bad = tmp_path / "bad.yaml"
        bad.write_text("- just\n- a list\n")
        code = main([template, str(bad), "--config", str(tmp_path / "none.yaml")])
        assert code == 1

    def test_bad_template_type(self, workspace):
        tmp_path, _, variables = workspace
        template = tmp_path / "old.xls"
        template.write_bytes(b"\x00")
        code = main([str(template), variables, "--config", str(tmp_path / "none.yaml")])
        assert code == 1
