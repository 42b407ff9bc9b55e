"""Gatehouse — account registration, authentication and profile services.

Three cooperating ASGI services: the auth service owns credentials and
session tokens, the user service owns profiles and addresses, and the
gateway is the single public HTTP entry point in front of both.
"""

__version__ = "0.1.0"
