"""
Tests for the quote CLI commands.
"""
import json

import pytest
import yaml
from click.testing import CliRunner

from quotebuilder.cli import cli


QUOTE_YAML = """
job:
  id: job-1
  name: Smith Kitchen Remodel
  customer_name: Smith
  surcharge_percent: 10
  surcharge_mode: stacking
categories:
  - id: kitchen
    name: Kitchen
    surcharge_percent: 5
  - id: cabinets
    parent_id: kitchen
    name: Cabinets
    surcharge_percent: 3
line_items:
  - id: item-1
    category_id: kitchen
    type: material
    name: Countertop
    quantity: 10
    unit: sqft
    unit_price: 100
  - id: item-2
    category_id: cabinets
    type: labor
    name: Install
    quantity: 5
    unit: hr
    unit_price: 50
"""


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def quote_file(tmp_path):
    path = tmp_path / "quote.yaml"
    path.write_text(QUOTE_YAML)
    return path


@pytest.fixture
def invalid_quote_file(tmp_path):
    path = tmp_path / "invalid.yaml"
    path.write_text(
        "job:\n"
        "  name: ''\n"
        "categories:\n"
        "  - id: kitchen\n"
        "    name: Kitchen\n"
        "line_items:\n"
        "  - id: item-1\n"
        "    category_id: garage\n"
        "    type: subcontract\n"
        "    name: Drywall\n"
        "    quantity: 0\n"
        "    unit: ea\n"
        "    unit_price: 10\n"
    )
    return path


class TestTotalsCommand:
    """Tests for 'quote totals'."""

    def test_text_output(self, runner, quote_file):
        result = runner.invoke(cli, ['totals', str(quote_file)])

        assert result.exit_code == 0, result.output
        assert "Smith Kitchen Remodel (job-1)" in result.output
        assert "Mode: stacking" in result.output
        assert "Kitchen" in result.output
        assert "Cabinets" in result.output
        # 1000 * 1.15 + 250 * 1.18
        assert "Grand total:     1,445.00" in result.output

    def test_json_output(self, runner, quote_file):
        result = runner.invoke(cli, ['totals', str(quote_file), '--json'])

        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data['job']['id'] == "job-1"
        assert data['totals']['subtotal'] == 1250
        assert data['totals']['grand_total'] == pytest.approx(1445)
        assert data['totals']['labor_subtotal'] == pytest.approx(295)

    def test_category_output(self, runner, quote_file):
        result = runner.invoke(cli, ['totals', str(quote_file), '--category', 'cabinets'])

        assert result.exit_code == 0, result.output
        assert "Smith Kitchen Remodel / Kitchen / Cabinets" in result.output
        assert "Total:           295.00" in result.output

    def test_category_json(self, runner, quote_file):
        result = runner.invoke(
            cli, ['totals', str(quote_file), '--category', 'kitchen', '--json']
        )

        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data['category_id'] == "kitchen"
        assert data['breadcrumbs'] == ["Kitchen"]
        assert data['total'] == pytest.approx(1445)

    def test_unknown_category(self, runner, quote_file):
        result = runner.invoke(cli, ['totals', str(quote_file), '--category', 'garage'])

        assert result.exit_code != 0
        assert "Category with id 'garage' not found" in result.output

    def test_refuses_invalid_document(self, runner, invalid_quote_file):
        result = runner.invoke(cli, ['totals', str(invalid_quote_file)])

        assert result.exit_code != 0
        assert "validation error(s)" in result.output

    def test_unparseable_document(self, runner, tmp_path):
        path = tmp_path / "broken.yaml"
        path.write_text("job: [unclosed\n")

        result = runner.invoke(cli, ['totals', str(path)])

        assert result.exit_code != 0
        assert "Cannot load quote document" in result.output


class TestValidateCommand:
    """Tests for 'quote validate'."""

    def test_valid(self, runner, quote_file):
        result = runner.invoke(cli, ['validate', str(quote_file)])

        assert result.exit_code == 0
        assert "Quote document is valid" in result.output

    def test_invalid_lists_every_error(self, runner, invalid_quote_file):
        result = runner.invoke(cli, ['validate', str(invalid_quote_file)])

        assert result.exit_code == 1
        assert "job.name: Name is required" in result.output
        assert "line_items[item-1].type:" in result.output
        assert "line_items[item-1].quantity: Quantity must be greater than 0" in result.output
        assert "line_items[item-1].category_id: Category not found" in result.output


class TestNewCommand:
    """Tests for 'quote new'."""

    def test_writes_skeleton(self, runner, tmp_path):
        output = tmp_path / "deck.yaml"

        result = runner.invoke(cli, ['new', 'Backyard Deck', '--customer', 'Lee', '-o', str(output)])

        assert result.exit_code == 0, result.output
        assert f"Created {output}" in result.output
        document = yaml.safe_load(output.read_text())
        assert document['job']['name'] == "Backyard Deck"
        assert document['job']['customer_name'] == "Lee"
        assert document['job']['surcharge_mode'] == "stacking"
        assert document['categories'] == []

    def test_default_name_to_stdout(self, runner):
        result = runner.invoke(cli, ['new'])

        assert result.exit_code == 0
        assert yaml.safe_load(result.output)['job']['name'] == "New Quote"

    def test_skeleton_validates(self, runner, tmp_path):
        output = tmp_path / "new.yaml"
        runner.invoke(cli, ['new', 'Deck', '-o', str(output)])

        result = runner.invoke(cli, ['validate', str(output)])
        assert result.exit_code == 0


class TestUnitsCommand:
    """Tests for 'quote units'."""

    def test_all_types(self, runner):
        result = runner.invoke(cli, ['units'])

        assert result.exit_code == 0
        assert "material: ea, sqft" in result.output
        assert "labor: hr, day, job, sqft" in result.output
        assert "equipment:" in result.output

    def test_single_type(self, runner):
        result = runner.invoke(cli, ['units', 'labor'])

        assert result.output.strip() == "labor: hr, day, job, sqft"

    def test_unknown_type(self, runner):
        result = runner.invoke(cli, ['units', 'subcontract'])
        assert result.exit_code != 0


class TestConfigOption:
    """Tests for the global --config option."""

    def test_custom_settings_used_for_new(self, runner, tmp_path):
        config = tmp_path / "config.yaml"
        config.write_text(
            "settings:\n"
            "  default_surcharge_mode: override\n"
            "  default_surcharge_percent: 20\n"
        )

        result = runner.invoke(cli, ['--config', str(config), 'new', 'Deck'])

        assert result.exit_code == 0, result.output
        job = yaml.safe_load(result.output)['job']
        assert job['surcharge_mode'] == "override"
        assert job['surcharge_percent'] == 20

    def test_version(self, runner):
        result = runner.invoke(cli, ['--version'])
        assert "1.0.0" in result.output


class TestBadConfig:
    """Tests for configuration errors surfacing as CLI errors."""

    @pytest.fixture
    def bad_config(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("settings:\n  default_surcharge_mode: bogus\n")
        return path

    @pytest.mark.parametrize("command", [
        ['new', 'Deck'],
        ['units'],
    ])
    def test_config_option(self, runner, bad_config, command):
        result = runner.invoke(cli, ['--config', str(bad_config)] + command)

        assert result.exit_code == 1
        assert isinstance(result.exception, SystemExit)
        assert "default_surcharge_mode must be 'stacking' or 'override'" in result.output

    def test_validate_and_totals_agree(self, runner, bad_config, quote_file):
        """Test that a document never validates under a config that totals rejects."""
        for command in ('validate', 'totals'):
            result = runner.invoke(cli, ['--config', str(bad_config), command, str(quote_file)])
            assert result.exit_code == 1
            assert "default_surcharge_mode" in result.output

    @pytest.mark.parametrize("command", ['validate', 'totals', 'new'])
    def test_environment_variable(self, runner, bad_config, quote_file, monkeypatch, command):
        monkeypatch.setenv("QUOTE_CONFIG_PATH", str(bad_config))
        args = [command] if command == 'new' else [command, str(quote_file)]

        result = runner.invoke(cli, args)

        assert result.exit_code == 1
        assert isinstance(result.exception, SystemExit)
        assert "default_surcharge_mode" in result.output

    def test_negative_default_percent(self, runner, tmp_path):
        config = tmp_path / "negative.yaml"
        config.write_text("settings:\n  default_surcharge_percent: -10\n")

        result = runner.invoke(cli, ['--config', str(config), 'new', 'Deck'])

        assert result.exit_code == 1
        assert "non-negative" in result.output
