from datetime import timedelta

import pytest
from jose import JWTError, jwt

from tripplanner.utils import security
from tripplanner.utils.config import JWT_ALGORITHM, JWT_SECRET


def test_password_hash_verifies_only_the_same_password():
    hashed = security.hash_password("correct horse")
    assert hashed != "correct horse"
    assert security.verify_password("correct horse", hashed)
    assert not security.verify_password("wrong horse", hashed)
    assert not security.verify_password("correct horse", "")


def test_access_token_carries_owner_and_trip_planner_audience():
    token = security.create_access_token(subject="64b7f0c2a1b2c3d4e5f60718",
                                         expires_delta=timedelta(minutes=5), username="ada")
    claims = security.decode_token(token)
    assert claims["sub"] == "64b7f0c2a1b2c3d4e5f60718"
    assert claims["aud"] == security.TOKEN_AUDIENCE
    assert claims["username"] == "ada"


def test_token_for_another_audience_is_rejected():
    foreign = jwt.encode({"sub": "64b7f0c2a1b2c3d4e5f60718", "aud": "some-other-app",
                          "iss": security.TOKEN_ISSUER}, JWT_SECRET, algorithm=JWT_ALGORITHM)
    with pytest.raises(JWTError):
        security.decode_token(foreign)


def test_expired_token_is_rejected():
    token = security.create_access_token(subject="64b7f0c2a1b2c3d4e5f60718", expires_delta=timedelta(seconds=-1))
    with pytest.raises(JWTError):
        security.decode_token(token)
