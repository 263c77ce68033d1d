"""Tests for credential generation."""

import pytest

from matrix_stack_setup.credentials import CHARSET, Secrets, generate_random_string


class TestGenerateRandomString:
    """Tests for generate_random_string function."""

    def test_charset_has_twenty_symbols_without_e(self):
        assert len(set(CHARSET)) == 20
        assert "e" not in CHARSET and "E" not in CHARSET

    @pytest.mark.parametrize("length", [1, 16, 32, 100])
    def test_exact_length_and_charset(self, length):
        value = generate_random_string(length)

        assert len(value) == length
        assert set(value) <= set(CHARSET)

    def test_default_length(self):
        assert len(generate_random_string()) == 16

    def test_successive_calls_differ(self):
        assert generate_random_string(32) != generate_random_string(32)

    @pytest.mark.parametrize("length", [0, -1, 1.5, "16"])
    def test_rejects_invalid_length(self, length):
        with pytest.raises(ValueError):
            generate_random_string(length)


class TestSecrets:
    """Tests for the Secrets bundle."""

    def test_generate_lengths(self):
        secrets = Secrets.generate()

        assert len(secrets.postgres_user) == 16
        assert len(secrets.postgres_password) == 16
        assert len(secrets.postgres_db) == 16
        assert len(secrets.redis_password) == 16
        assert len(secrets.livekit_key) == 16
        assert len(secrets.livekit_secret) == 32
        assert len(secrets.registration_shared_secret) == 16

    def test_generate_is_fresh_each_time(self):
        assert Secrets.generate() != Secrets.generate()

    def test_repr_masks_values(self, secrets):
        text = repr(secrets)

        assert secrets.postgres_password not in text
        assert secrets.livekit_secret not in text
        assert "postgres_password='***'" in text
