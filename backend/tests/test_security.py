import random

import pytest

from timekeeper.core.security import PasswordEncoder, TokenGenerator, is_email_address


class TestTokenGenerator:
    def test_lowercase_letters_of_given_length(self):
        token = TokenGenerator(length=128).create_token()
        assert len(token) == 128
        assert token.isalpha() and token.islower()

    def test_seeded_generator_is_deterministic(self):
        first = TokenGenerator(length=32, rng=random.Random(7)).create_token()
        second = TokenGenerator(length=32, rng=random.Random(7)).create_token()
        assert first == second


class TestPasswordEncoder:
    def test_matches(self):
        encoder = PasswordEncoder(iterations=1_000)
        encoded = encoder.encode("secret")

        assert encoded.startswith("pbkdf2_sha256$1000$")
        assert encoder.matches("secret", encoded)
        assert not encoder.matches("Secret", encoded)

    def test_salted(self):
        encoder = PasswordEncoder(iterations=1_000)
        assert encoder.encode("secret") != encoder.encode("secret")

    @pytest.mark.parametrize("encoded", [None, "", "plain-text", "pbkdf2_sha256$x$00$00"])
    def test_garbage_never_matches(self, encoded):
        assert not PasswordEncoder(iterations=1_000).matches("secret", encoded)


@pytest.mark.parametrize(
    "mail,expected",
    [
        ("alice@timekeeper.io", True),
        ("alice.smith+work@mail.timekeeper.io", True),
        ("alice", False),
        ("alice@", False),
        ("", False),
        (None, False),
    ],
)
def test_is_email_address(mail, expected):
    assert is_email_address(mail) is expected
