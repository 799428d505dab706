"""
Relay board REST API.

Contents:
- api_service.py: Flask REST API service
- client.py: requests-based client for the service
"""
