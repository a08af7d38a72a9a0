"""Tests for cli/main module"""
import pytest
from unittest.mock import patch, MagicMock

from cli.main import main
from errors import DownloadError


@pytest.mark.unit
class TestMain:
    """Test suite for main function"""

    @patch('cli.main.Bootstrapper')
    @patch('sys.argv', ['hytale-bootstrap'])
    def test_main_default_arguments(self, mock_bootstrapper_class):
        """Test main with no extra arguments"""
        main()

        mock_bootstrapper_class.assert_called_once()
        call_kwargs = mock_bootstrapper_class.call_args[1]
        assert call_kwargs['extra_args'] == []
        mock_bootstrapper_class.return_value.run.assert_called_once()

    @patch('cli.main.Bootstrapper')
    @patch('sys.argv', ['hytale-bootstrap', '--world', 'default', '--dry-run'])
    def test_main_passes_arguments_through(self, mock_bootstrapper_class):
        """Arguments after the first go to the server untouched"""
        main()

        call_kwargs = mock_bootstrapper_class.call_args[1]
        assert call_kwargs['extra_args'] == ['--world', 'default', '--dry-run']
        settings = mock_bootstrapper_class.call_args[0][0]
        assert settings.dry_run is False

    @patch('cli.main.Bootstrapper')
    def test_main_leading_dry_run_flag(self, mock_bootstrapper_class):
        main(['--dry-run', '--world', 'default'])

        settings = mock_bootstrapper_class.call_args[0][0]
        assert settings.dry_run is True
        assert mock_bootstrapper_class.call_args[1]['extra_args'] == ['--world', 'default']

    @patch('cli.main.Bootstrapper')
    def test_main_reads_settings_from_environment(self, mock_bootstrapper_class, monkeypatch):
        monkeypatch.setenv('AUTH_MODE', 'offline')
        monkeypatch.setenv('SKIP_UPDATE_CHECK', 'true')

        main([])

        settings = mock_bootstrapper_class.call_args[0][0]
        assert settings.auth_mode == 'offline'
        assert settings.skip_update_check is True

    @patch('cli.main.Console')
    @patch('cli.main.Bootstrapper')
    def test_main_bootstrap_error_exits_with_status_1(self, mock_bootstrapper_class, mock_console_class):
        """Fatal errors print a marker line and exit 1"""
        mock_bootstrapper_class.return_value.run.side_effect = DownloadError("Failed to download server files")
        console = MagicMock()
        mock_console_class.return_value = console

        with pytest.raises(SystemExit) as exc_info:
            main([])

        assert exc_info.value.code == 1
        assert any(
            "ERROR" in str(call) and "Failed to download server files" in str(call)
            for call in console.print.call_args_list
        )

    @patch('cli.main.Bootstrapper')
    def test_main_missing_credentials_end_to_end(self, mock_bootstrapper_class, monkeypatch, capsys):
        """Without a mocked pipeline, a missing blob exits 1"""
        from bootstrap import Bootstrapper

        mock_bootstrapper_class.side_effect = Bootstrapper
        monkeypatch.delenv('HYTALE_CREDENTIALS_JSON', raising=False)

        with pytest.raises(SystemExit) as exc_info:
            main([])

        assert exc_info.value.code == 1
        assert "HYTALE_CREDENTIALS_JSON is required" in capsys.readouterr().out

    @patch('cli.main.Bootstrapper')
    def test_main_numeric_log_level_in_config_file(self, mock_bootstrapper_class, monkeypatch, tmp_path):
        """A non-string level from the config file does not break logging setup"""
        config = tmp_path / "bootstrap.json"
        config.write_text('{"logging": {"level": 10}}')
        monkeypatch.delenv('LOG_LEVEL', raising=False)
        monkeypatch.setenv('BOOTSTRAP_CONFIG', str(config))

        main([])

        mock_bootstrapper_class.return_value.run.assert_called_once()

    @patch('cli.main.Bootstrapper')
    def test_main_config_file_false_keeps_update_check(self, mock_bootstrapper_class, monkeypatch, tmp_path):
        config = tmp_path / "bootstrap.json"
        config.write_text('{"downloader": {"skip_update_check": "false"}}')
        monkeypatch.delenv('SKIP_UPDATE_CHECK', raising=False)
        monkeypatch.setenv('BOOTSTRAP_CONFIG', str(config))

        main([])

        settings = mock_bootstrapper_class.call_args[0][0]
        assert settings.skip_update_check is False
