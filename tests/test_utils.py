import pytest
from jose import jwt

from careconnect.utils import create_jwt, decode_jwt, hash_password, verify_password


def test_password_hash_round_trip() -> None:
    hashed = hash_password("correct horse")
    assert hashed != "correct horse"
    assert verify_password("correct horse", hashed)
    assert not verify_password("wrong horse", hashed)


def test_verify_password_rejects_malformed_hash() -> None:
    assert not verify_password("anything", "not-a-bcrypt-hash")


def test_jwt_carries_subject_and_role() -> None:
    token = create_jwt({"sub": "1234", "role": "assistant"})
    claims = decode_jwt(token)
    assert claims["sub"] == "1234"
    assert claims["role"] == "assistant"
    assert "exp" in claims


def test_expired_jwt_is_rejected() -> None:
    token = create_jwt({"sub": "1234", "role": "user"}, expires_minutes=-1)
    with pytest.raises(ValueError):
        decode_jwt(token)


def test_jwt_signed_with_another_key_is_rejected() -> None:
    forged = jwt.encode({"sub": "1234", "role": "admin"}, "some-other-key", algorithm="HS256")
    with pytest.raises(ValueError):
        decode_jwt(forged)
