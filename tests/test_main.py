import logging
from unittest.mock import MagicMock, patch

import pytest

import main
from PolybarTitle.config_loader import Config
from PolybarTitle.errors import DisplayConnectionError, ProtocolError


@pytest.fixture(autouse=True)
def no_log_env(monkeypatch):
    monkeypatch.delenv(main.LOG_LEVEL_ENV, raising=False)


class TestSetupLogging:
    @patch('logging.basicConfig')
    def test_default_level_is_error(self, mock_basic_config):
        main.setup_logging()
        assert mock_basic_config.call_args.kwargs['level'] == logging.ERROR

    @patch('logging.basicConfig')
    def test_level_from_environment(self, mock_basic_config, monkeypatch):
        monkeypatch.setenv(main.LOG_LEVEL_ENV, 'info')
        main.setup_logging()
        assert mock_basic_config.call_args.kwargs['level'] == logging.INFO

    @patch('logging.basicConfig')
    def test_unknown_level_means_debug(self, mock_basic_config, monkeypatch):
        monkeypatch.setenv(main.LOG_LEVEL_ENV, '1')
        main.setup_logging()
        assert mock_basic_config.call_args.kwargs['level'] == logging.DEBUG


class TestMain:
    @patch('main.X11Connection')
    @patch('main.ConfigLoader')
    def test_crash_on_connection_failure(self, mock_loader, mock_connection, capsys):
        mock_loader.return_value.load_or_default.return_value = Config()
        mock_connection.connect.side_effect = DisplayConnectionError("failed to establish a connection")

        assert main.main(['main.py']) == 1
        assert capsys.readouterr().out == "PolyBar title module crashed!\n"
        mock_connection.connect.assert_called_once_with(None)

    @patch('main.WindowMonitor')
    @patch('main.X11Connection')
    @patch('main.ConfigLoader')
    def test_loop_failure_closes_connection(self, mock_loader, mock_connection, mock_monitor, capsys):
        config = Config(display_name=':2')
        mock_loader.return_value.load_or_default.return_value = config
        mock_monitor.return_value.run.side_effect = ProtocolError("BadWindow")

        assert main.main(['main.py']) == 1

        assert mock_monitor.call_args.args[0] is None
        assert mock_monitor.call_args.args[1] is config.resolver
        connect = mock_monitor.call_args.kwargs['connect']
        assert connect() is mock_connection.connect.return_value
        mock_connection.connect.assert_called_once_with(':2')
        mock_monitor.return_value.close.assert_called_once()
        assert capsys.readouterr().out.endswith("PolyBar title module crashed!\n")

    @patch('main.X11Connection')
    def test_invalid_template_is_fatal(self, mock_connection, tmp_path, capsys):
        path = tmp_path / 'config.yml'
        path.write_text('template: "{{ name "\nresolver: {}\n')

        assert main.main(['main.py', str(path)]) == 1
        mock_connection.connect.assert_not_called()
        assert "crashed" in capsys.readouterr().out

    @patch('main.X11Connection')
    def test_explicit_missing_config_is_fatal(self, mock_connection, tmp_path, capsys):
        assert main.main(['main.py', str(tmp_path / 'missing.yml')]) == 1
        mock_connection.connect.assert_not_called()
        assert "crashed" in capsys.readouterr().out

    @patch('main.WindowMonitor')
    @patch('main.X11Connection')
    @patch('main.ConfigLoader')
    def test_keyboard_interrupt(self, mock_loader, mock_connection, mock_monitor, capsys):
        mock_loader.return_value.load_or_default.return_value = Config()
        mock_monitor.return_value.run.side_effect = KeyboardInterrupt

        assert main.main(['main.py']) == 130
        mock_monitor.return_value.close.assert_called_once()
        assert capsys.readouterr().out == ""

    def test_load_config_uses_default_search(self):
        with patch('main.ConfigLoader') as mock_loader:
            main.load_config(['main.py'])
        mock_loader.assert_called_once_with()
        mock_loader.return_value.load_or_default.assert_called_once()

    def test_load_config_explicit_path(self):
        with patch('main.ConfigLoader') as mock_loader:
            main.load_config(['main.py', 'my.yml'])
        mock_loader.assert_called_once_with(['my.yml'])
        mock_loader.return_value.load.assert_called_once()
