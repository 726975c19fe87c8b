import json

import pytest
import typer
from typer.testing import CliRunner

from cli.main import app, parse_pairs

runner = CliRunner()


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch, tmp_path):
    """Sin el .env del directorio de trabajo."""
    monkeypatch.chdir(tmp_path)


class TestParsePairs:

    def test_pairs_and_repeated_keys(self):
        assert parse_pairs(["a=1", "b=2", "b=3", "c=x=y"]) == {"a": "1", "b": ["2", "3"], "c": "x=y"}

    def test_invalid_pair(self):
        with pytest.raises(typer.BadParameter):
            parse_pairs(["nope"])


class TestCommands:

    def test_static_page_as_json(self):
        result = runner.invoke(app, ["page", "/cart", "--json"])

        assert result.exit_code == 0
        assert json.loads(result.stdout) == {
            "dynamicPageType": "frontastic/cart",
            "dataSourcePayload": {},
            "pageMatchingPayload": {},
        }

    def test_static_page_written_to_file(self, tmp_path):
        target = tmp_path / "out" / "page.json"

        result = runner.invoke(app, ["page", "/login", "-o", str(target)])

        assert result.exit_code == 0
        assert json.loads(target.read_text(encoding="utf-8"))["dynamicPageType"] == "frontastic/login"

    def test_unmatched_page_exits_with_error(self):
        result = runner.invoke(app, ["page", "/"])

        assert result.exit_code == 1
        assert "No dynamic page" in result.stdout

    def test_empty_data_source_in_preview(self):
        result = runner.invoke(app, ["data-source", "frontastic/empty", "--preview", "--json"])

        assert result.exit_code == 0
        assert json.loads(result.stdout) == {"dataSourcePayload": {}, "previewPayload": []}

    def test_unknown_data_source(self):
        result = runner.invoke(app, ["data-source", "frontastic/nope"])

        assert result.exit_code == 1
        assert "Unknown data source" in result.stdout

    def test_actions_table(self):
        result = runner.invoke(app, ["actions"])

        assert result.exit_code == 0
        assert "adapters.actions.product" in result.stdout
        assert "wishlist" in result.stdout
