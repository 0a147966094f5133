# Copyright (c) 2025 Shiladitya Mallick
# This file is part of the DayPlanner project.
# Licensed under the MIT License - see the LICENSE file for details.

from typing import Optional

from sqlalchemy.types import TypeDecorator, Text
from cryptography.fernet import Fernet

# Column types have no access to the context, so build_context() installs the key here
_fernet: Optional[Fernet] = None


def configure_encryption(secret: str) -> None:
    global _fernet
    if not secret:
        raise EnvironmentError("FERNET_SECRET is missing. Please set it in your environment or .env file.")
    try:
        _fernet = Fernet(secret)
    except Exception as e:
        raise ValueError("FERNET_SECRET is invalid. Make sure it is a valid 32-byte base64 string.") from e


def get_fernet() -> Fernet:
    if _fernet is None:
        raise EnvironmentError("🔐 Contact encryption is not configured; build the app context first.")
    return _fernet


def encrypt_contact(value: str) -> str:
    return get_fernet().encrypt(value.encode()).decode()


def decrypt_contact(token: str) -> str:
    return get_fernet().decrypt(token.encode()).decode()


class EncryptedContact(TypeDecorator):
    """Stores phone numbers and other contact endpoints encrypted at rest."""

    impl = Text
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value:
            return encrypt_contact(value)
        return None

    def process_result_value(self, value, dialect):
        if value:
            return decrypt_contact(value)
        return None
