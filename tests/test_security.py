"""
Password, token, and sign-up validation helpers
"""
from jose import jwt

from catalog.security import (
    create_access_token,
    decode_access_token,
    email_domain,
    hash_password,
    is_admin_email,
    validate_email,
    validate_password_format,
    verify_password,
)


def test_password_hash_round_trip():
    hashed = hash_password("hunter2hunter2")
    assert hashed != "hunter2hunter2"
    assert verify_password("hunter2hunter2", hashed)
    assert not verify_password("wrong", hashed)


def test_token_carries_user_id():
    token = create_access_token("user-123")
    assert decode_access_token(token) == "user-123"


def test_token_signed_with_other_secret_rejected():
    token = jwt.encode({"sub": "user-123"}, "some-other-secret", algorithm="HS256")
    assert decode_access_token(token) is None


def test_validate_email():
    assert validate_email("t@school.org")
    assert not validate_email("t@school")
    assert not validate_email("no at sign")


def test_validate_password_format():
    assert validate_password_format("abcdefg1")
    assert not validate_password_format("abcdefgh")
    assert not validate_password_format("12345678")
    assert not validate_password_format("a1")


def test_email_domain_lowercased():
    assert email_domain("T@School.ORG") == "school.org"


def test_admin_email_case_insensitive():
    assert is_admin_email("Admin@Example.org")
    assert not is_admin_email("someone@example.org")
