"""
Generation and parsing of the two visitor-facing invitation identifiers.

A QR code carries `KASETA:<token>`; the namespace lets a guard's scanner tell
our codes apart from any other QR code. The short code is six characters a
visitor can read out and a guard can type.
"""

import re
import secrets
import string
from dataclasses import dataclass
from enum import Enum

QR_NAMESPACE = 'KASETA'
QR_PAYLOAD_PREFIX = f'{QR_NAMESPACE}:'
QR_TOKEN_LENGTH = 48

# No 0/O or 1/I, which are easily confused when read aloud or typed
SHORT_CODE_ALPHABET = 'ABCDEFGHJKLMNPQRSTUVWXYZ23456789'
SHORT_CODE_LENGTH = 6
SHORT_CODE_PATTERN = re.compile(r'^[A-Z0-9]{6}$')


class LookupKind(str, Enum):
    QR = 'qr'
    SHORT = 'short'


@dataclass(frozen=True)
class LookupKey:
    """A scanned or typed code resolved to the identifier it should be looked up by."""

    kind: LookupKind
    key: str


def generate_qr_token(length: int = QR_TOKEN_LENGTH) -> str:
    """Generate a secure QR token.

    Uses cryptographically secure random generation; tokens are treated as
    unique without any retry on collision.

    Args:
        length: Number of random characters

    Returns:
        str: The opaque token, without the namespace prefix
    """
    alphabet = string.ascii_letters + string.digits
    return ''.join(secrets.choice(alphabet) for _ in range(length))


def generate_short_code() -> str:
    """Generate a six character uppercase alphanumeric short code."""
    return ''.join(
        secrets.choice(SHORT_CODE_ALPHABET) for _ in range(SHORT_CODE_LENGTH)
    )


def qr_payload(token: str) -> str:
    """Build the text to encode into the QR image for a token."""
    return f'{QR_PAYLOAD_PREFIX}{token}'


def is_short_code(code: str) -> bool:
    return bool(SHORT_CODE_PATTERN.match(code))


def normalize_lookup_key(raw_scan: str) -> LookupKey:
    """Decide whether scanned or typed text is a QR payload or a short code.

    Text starting with the QR namespace prefix is a QR payload and the
    prefix is stripped. Anything else is treated as a short code and
    uppercased.

    Args:
        raw_scan: Text read by the scanner or typed by the guard

    Returns:
        LookupKey: The kind of identifier and the key to look it up by
    """
    text = raw_scan.strip()
    if text.startswith(QR_PAYLOAD_PREFIX):
        return LookupKey(LookupKind.QR, text[len(QR_PAYLOAD_PREFIX) :])
    return LookupKey(LookupKind.SHORT, text.upper())
