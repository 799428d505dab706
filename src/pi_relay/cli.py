# src/pi_relay/cli.py
"""
Command line control of the relay board.

Usage:
    pi-relay get            # all channels
    pi-relay get 2
    pi-relay set all off
    pi-relay --transport i2ctools set 0 on
    pi-relay serve --port 5000
"""

import argparse
import logging
import sys

from .config import load_config, setup_logging
from .relay.controller import RelayBoard, parse_channel
from .relay.errors import RelayError
from .relay.register import CHANNEL_ALL, STATE_ON, STATE_OFF


def build_parser():
    parser = argparse.ArgumentParser(prog='pi-relay', description='Control a 4-channel I2C relay board')
    parser.add_argument('--config', help='Path to relay_config.yaml')
    parser.add_argument('--transport', choices=['smbus', 'i2ctools', 'memory'],
                        help='Override the transport from the config file')
    parser.add_argument('-v', '--verbose', action='store_true', help='Debug logging')

    sub = parser.add_subparsers(dest='command', required=True)

    get_cmd = sub.add_parser('get', help='Show relay state')
    get_cmd.add_argument('channel', nargs='?', default=CHANNEL_ALL, help="0-3 or 'all' (default)")

    set_cmd = sub.add_parser('set', help='Switch a relay on or off')
    set_cmd.add_argument('channel', help="0-3 or 'all'")
    set_cmd.add_argument('state', choices=[STATE_ON, STATE_OFF])

    serve_cmd = sub.add_parser('serve', help='Run the REST API')
    serve_cmd.add_argument('--host')
    serve_cmd.add_argument('--port', type=int)
    return parser


def run(args, board):
    """Execute a get/set command against board and return the exit status."""
    channel = parse_channel(args.channel)
    if args.command == 'get':
        result = board.get_state(channel)
        if channel == CHANNEL_ALL:
            for idx, state in enumerate(result):
                print(f"channel {idx}: {state}")
        else:
            print(result)
    elif args.command == 'set':
        ack = board.set_state(channel, args.state)
        print(f"register 0x{ack:02x}" if isinstance(ack, int) else ack)
    return 0


def main(argv=None):
    args = build_parser().parse_args(argv)

    if args.command == 'serve':
        from .api.api_service import main as serve
        serve(args.config, host=args.host, port=args.port)
        return 0

    try:
        config = load_config(args.config)
    except FileNotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    if args.transport:
        config['transport'] = args.transport
    try:
        setup_logging(config.get('log_dir'), logging.DEBUG if args.verbose else logging.WARNING)
    except OSError as e:
        print(f"Error: cannot set up logging in {config.get('log_dir')}: {e}", file=sys.stderr)
        return 1

    board = None
    try:
        board = RelayBoard(config)
        return run(args, board)
    except RelayError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    finally:
        if board is not None:
            board.close()


if __name__ == '__main__':
    sys.exit(main())
