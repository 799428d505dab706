# src/pi_relay/api/client.py
"""
Client for the relay REST service.

Usage:
    from pi_relay.api.client import RelayClient

    client = RelayClient('raspberrypi.local')
    client.set_state(0, 'on')
    print(client.get_states())
"""

import requests


class RelayClient:
    def __init__(self, host, port=5000, timeout=5):
        self.base_url = f"http://{host}:{port}"
        self.timeout = timeout

    def _get(self, endpoint):
        response = requests.get(f"{self.base_url}{endpoint}", timeout=self.timeout)
        response.raise_for_status()
        return response.json()

    def _post(self, endpoint, data):
        response = requests.post(f"{self.base_url}{endpoint}", json=data, timeout=self.timeout)
        response.raise_for_status()
        return response.json()

    def health(self):
        return self._get('/health')

    def get_status(self):
        return self._get('/status')

    def get_states(self):
        """Return the state of all four channels, index = channel."""
        return self._get('/relays')['states']

    def get_state(self, channel):
        return self._get(f'/relays/{channel}')['state']

    def set_state(self, channel, state):
        """Switch a channel ('all' for every channel). Returns the service response."""
        return self._post(f'/relays/{channel}', {"state": state})
