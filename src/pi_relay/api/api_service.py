# src/pi_relay/api/api_service.py
import logging
import signal

from flask import Flask, request, jsonify

from .. import __version__
from ..config import load_config, setup_logging
from ..relay.controller import RelayBoard, parse_channel
from ..relay.errors import InvalidChannel, InvalidState, InvalidRegisterByte, TransportError


def create_app(config=None, board=None):
    """Create and configure an instance of the Flask application."""
    app = Flask(__name__)

    if config is None:
        config = load_config()
    if board is None:
        board = RelayBoard(config)
    app.config['RELAY'] = config
    app.board = board  # Attach board to the app instance

    @app.errorhandler(InvalidChannel)
    @app.errorhandler(InvalidState)
    def bad_request(e):
        return jsonify({"error": str(e)}), 400

    @app.errorhandler(InvalidRegisterByte)
    def bad_register(e):
        logging.error(f"Relay board returned garbage: {e}")
        return jsonify({"error": str(e)}), 502

    @app.errorhandler(TransportError)
    def transport_failed(e):
        logging.error(f"Relay transport failed: {e}")
        return jsonify({"error": str(e)}), 503

    @app.route('/health', methods=['GET'])
    def health():
        return jsonify({"status": "healthy", "version": __version__})

    @app.route('/status', methods=['GET'])
    def status():
        return jsonify(app.board.get_status())

    @app.route('/relays', methods=['GET'])
    def get_relays():
        return jsonify({"states": app.board.get_state()})

    @app.route('/relays/<channel>', methods=['GET'])
    def get_relay(channel):
        channel = parse_channel(channel)
        return jsonify({"channel": channel, "state": app.board.get_state(channel)})

    @app.route('/relays/<channel>', methods=['POST'])
    def set_relay(channel):
        data = request.get_json(silent=True)
        if not isinstance(data, dict) or 'state' not in data:
            return jsonify({"error": "Missing 'state' in request body"}), 400

        channel = parse_channel(channel)
        ack = app.board.set_state(channel, data['state'])
        register = f"0x{ack:02x}" if isinstance(ack, int) else ack
        return jsonify({"channel": channel, "state": data['state'], "register": register})

    return app


def main(config_path=None, host=None, port=None):
    config = load_config(config_path)
    setup_logging(config.get('log_dir'))
    app = create_app(config)

    def cleanup(signum, frame):
        logging.info("Caught signal, cleaning up...")
        app.board.close()
        exit(0)

    signal.signal(signal.SIGINT, cleanup)
    signal.signal(signal.SIGTERM, cleanup)

    api = config.get('api', {})
    app.run(host=host or api.get('host', '0.0.0.0'), port=port or api.get('port', 5000), debug=False)


if __name__ == '__main__':
    main()
