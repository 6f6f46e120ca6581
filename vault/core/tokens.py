"""Credential generators. All values come from the secrets module."""
import secrets
import string
import uuid

from vault.config import settings

_CODE_ALPHABET = string.ascii_uppercase + string.digits


def create_invite_code(length: int = None) -> str:
    length = length or settings.invite_code_length
    return "".join(secrets.choice(_CODE_ALPHABET) for _ in range(length))


def create_invite_token() -> str:
    return str(uuid.uuid4())


def create_share_token() -> str:
    # 128 bits, hex, not derived from any resource id
    return secrets.token_hex(16)


def normalize_code(code: str) -> str:
    return (code or "").strip().upper()


def normalize_text(value: str) -> str:
    return " ".join((value or "").split())
