"""Tests for the invitation identifier codec."""

import re

from visitor_access.server.services.identifier_codec import (
    QR_PAYLOAD_PREFIX,
    QR_TOKEN_LENGTH,
    SHORT_CODE_ALPHABET,
    LookupKey,
    LookupKind,
    generate_qr_token,
    generate_short_code,
    is_short_code,
    normalize_lookup_key,
    qr_payload,
)


class TestGenerateQrToken:
    """Test cases for QR token generation."""

    def test_generate_qr_token_has_correct_length(self):
        assert len(generate_qr_token()) == QR_TOKEN_LENGTH

    def test_generate_qr_token_uses_alphanumeric_characters(self):
        assert generate_qr_token().isalnum()

    def test_generate_qr_token_is_unique(self):
        """Test that generated tokens are unique (probabilistically)."""
        tokens = [generate_qr_token() for _ in range(100)]
        assert len(set(tokens)) == 100

    def test_qr_payload_adds_namespace_prefix(self):
        assert qr_payload('abc123') == f'{QR_PAYLOAD_PREFIX}abc123'
        assert QR_PAYLOAD_PREFIX == 'KASETA:'


class TestGenerateShortCode:
    """Test cases for short code generation."""

    def test_short_code_matches_format(self):
        pattern = re.compile(r'^[A-Z0-9]{6}$')
        for _ in range(200):
            assert pattern.match(generate_short_code())

    def test_short_code_avoids_confusable_characters(self):
        codes = ''.join(generate_short_code() for _ in range(200))
        assert not set(codes) & set('01IO')
        assert set(codes) <= set(SHORT_CODE_ALPHABET)

    def test_is_short_code(self):
        assert is_short_code('ABC234')
        assert not is_short_code('abc234')
        assert not is_short_code('ABC23')
        assert not is_short_code('ABC2345')


class TestNormalizeLookupKey:
    """Test cases for telling QR payloads apart from short codes."""

    def test_qr_payload_is_recognized_and_prefix_stripped(self):
        assert normalize_lookup_key('KASETA:tok3n') == LookupKey(LookupKind.QR, 'tok3n')

    def test_qr_token_case_is_preserved(self):
        result = normalize_lookup_key('KASETA:AbCdEf')
        assert result.key == 'AbCdEf'

    def test_surrounding_whitespace_is_ignored(self):
        assert normalize_lookup_key('  KASETA:tok3n\n').key == 'tok3n'

    def test_other_text_is_a_short_code_uppercased_and_trimmed(self):
        assert normalize_lookup_key(' abc123 ') == LookupKey(LookupKind.SHORT, 'ABC123')

    def test_unrelated_qr_content_is_treated_as_short_code(self):
        result = normalize_lookup_key('https://example.com/promo')
        assert result.kind == LookupKind.SHORT

    def test_lowercase_namespace_is_not_a_qr_payload(self):
        assert normalize_lookup_key('kaseta:tok3n').kind == LookupKind.SHORT
