# tests/test_cli.py
import pytest

from pi_relay import cli
from pi_relay.relay.errors import TransportError
from pi_relay.relay.transport import MemoryTransport


@pytest.fixture
def memory_board(mocker, memory_config):
    """Runs the CLI against an in-memory register instead of the I2C bus."""
    mocker.patch('pi_relay.cli.load_config', return_value=memory_config)
    mocker.patch('pi_relay.cli.setup_logging')
    transport = MemoryTransport(0xF6)
    mocker.patch('pi_relay.config.MemoryTransport', return_value=transport)
    return transport


def test_get_all_channels(memory_board, capsys):
    assert cli.main(['get']) == 0
    out = capsys.readouterr().out
    assert out.splitlines() == [
        "channel 0: on",
        "channel 1: off",
        "channel 2: off",
        "channel 3: on",
    ]


def test_get_single_channel(memory_board, capsys):
    assert cli.main(['get', '1']) == 0
    assert capsys.readouterr().out.strip() == "off"


def test_set_channel(memory_board, capsys):
    assert cli.main(['set', '2', 'on']) == 0
    assert capsys.readouterr().out.strip() == "register 0xf2"
    assert memory_board.value == 0xF2


def test_set_all(memory_board):
    assert cli.main(['set', 'all', 'off']) == 0
    assert memory_board.value == 0xFF


def test_invalid_channel_exits_with_error(memory_board, capsys):
    assert cli.main(['set', '5', 'on']) == 1
    assert "Invalid channel" in capsys.readouterr().err
    assert memory_board.writes == []


def test_invalid_state_rejected_by_parser(memory_board):
    with pytest.raises(SystemExit):
        cli.main(['set', '0', 'maybe'])


def test_transport_error_exits_with_error(memory_board, mocker, capsys):
    mocker.patch.object(memory_board, 'read_byte', side_effect=TransportError("bus gone"))
    assert cli.main(['get']) == 1
    assert "Error: bus gone" in capsys.readouterr().err


def test_transport_override(mocker, memory_config):
    """--transport replaces the transport named in the config file."""
    memory_config['transport'] = 'smbus'
    mocker.patch('pi_relay.cli.load_config', return_value=memory_config)
    mocker.patch('pi_relay.cli.setup_logging')

    assert cli.main(['--transport', 'memory', 'get', '0']) == 0
    assert memory_config['transport'] == 'memory'


def test_missing_config_file(capsys, tmp_path):
    assert cli.main(['--config', str(tmp_path / 'missing.yaml'), 'get']) == 1
    assert "Config file not found" in capsys.readouterr().err


def test_serve_delegates_to_api(mocker):
    serve = mocker.patch('pi_relay.api.api_service.main')
    assert cli.main(['--config', 'relay.yaml', 'serve', '--port', '8080']) == 0
    serve.assert_called_once_with('relay.yaml', host=None, port=8080)


def test_unwritable_log_dir_exits_with_error(mocker, memory_config, capsys):
    memory_config['log_dir'] = '/var/log/pi_relay'
    mocker.patch('pi_relay.cli.load_config', return_value=memory_config)
    mocker.patch('pi_relay.config.os.makedirs', side_effect=PermissionError(13, "Permission denied"))
    board = mocker.patch('pi_relay.cli.RelayBoard')

    assert cli.main(['get']) == 1

    err = capsys.readouterr().err
    assert err.startswith("Error: cannot set up logging in /var/log/pi_relay")
    assert "Permission denied" in err
    board.assert_not_called()


def test_non_ascii_digit_channel(memory_board, capsys):
    assert cli.main(['get', '²']) == 1
    assert "Invalid channel" in capsys.readouterr().err
