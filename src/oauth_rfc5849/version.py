"""Version information for the OAuth RFC 5849 SDK"""

__version__ = "0.1.0"
