"""
QXB Token Gateway

A custodial wallet service for the QXB token that provides:
- Token metadata and balance queries
- Email/password accounts with server-held, password-encrypted keys
- Token transfers and daily reward claims signed on behalf of users
- REST API with JWT bearer authentication
"""

__version__ = "0.1.0"
__author__ = "QXB Team"
