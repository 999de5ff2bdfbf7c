import unittest
from pathlib import Path
from unittest.mock import patch

from typer.testing import CliRunner

from readme_importer import __version__
from readme_importer.cli import app
from readme_importer.config.settings import ImporterSettings
from readme_importer.importing.domain.models import ImportRequest, ImportResult

runner = CliRunner()


class ImportCommandTests(unittest.TestCase):
    def test_prompt_builds_request_and_runs_import(self):
        settings = ImporterSettings()
        with (
            patch("readme_importer.cli.load_settings", return_value=settings),
            patch("readme_importer.cli.run_import", return_value=ImportResult(ok=True, stage="done")) as run_mock,
        ):
            result = runner.invoke(
                app,
                ["import-readme", "--vault", "vault", "--note", "widgets.md"],
                input=" https://github.com/acme/widgets \ny\n",
            )

        self.assertEqual(result.exit_code, 0, result.output)
        self.assertIn("Enter GitHub Repository URL", result.output)
        run_mock.assert_called_once_with(
            ImportRequest(repository_url="https://github.com/acme/widgets"),
            settings=settings,
            vault_dir=Path("vault"),
            note_path=Path("widgets.md"),
        )

    def test_declining_confirmation_skips_import(self):
        with (
            patch("readme_importer.cli.load_settings", return_value=ImporterSettings()),
            patch("readme_importer.cli.run_import") as run_mock,
        ):
            result = runner.invoke(app, ["import-readme"], input="https://github.com/acme/widgets\nn\n")

        self.assertEqual(result.exit_code, 0, result.output)
        self.assertIn("Import cancelled.", result.output)
        run_mock.assert_not_called()

    def test_failed_import_exits_non_zero(self):
        with (
            patch("readme_importer.cli.load_settings", return_value=ImporterSettings()),
            patch("readme_importer.cli.run_import", return_value=ImportResult(ok=False, stage="fetch")),
        ):
            result = runner.invoke(app, ["import-readme"], input="https://github.com/acme/missing\ny\n")

        self.assertEqual(result.exit_code, 1)

    def test_invalid_settings_exit_with_usage_error(self):
        with patch("readme_importer.cli.load_settings", side_effect=ValueError("README_IMPORTER_ASSET_MODE bad")):
            result = runner.invoke(app, ["import-readme"])

        self.assertEqual(result.exit_code, 2)

    def test_version(self):
        result = runner.invoke(app, ["--version"])
        self.assertEqual(result.exit_code, 0)
        self.assertIn(__version__, result.output)
