from pathlib import Path

import pytest

from csa.config import DEFAULT_USERS_PATH, load_settings


def test_defaults_generate_a_random_secret():
    a = load_settings({})
    b = load_settings({})
    assert a.secret_key and b.secret_key
    assert a.secret_key != b.secret_key
    assert a.cookie_name == "csa_session"
    assert a.cookie_samesite == "lax"
    assert a.cookie_secure is False
    assert a.users_path == DEFAULT_USERS_PATH.resolve()
    assert a.port == 8000


def test_values_are_read_from_env(tmp_path: Path):
    s = load_settings(
        {
            "CSA_SECRET_KEY": "k",
            "CSA_COOKIE_NAME": "sid",
            "CSA_COOKIE_SECURE": "yes",
            "CSA_COOKIE_SAMESITE": "Strict",
            "CSA_USERS_PATH": str(tmp_path / "u.yml"),
            "CSA_PORT": "9000",
            "CSA_LOG_LEVEL": "debug",
        }
    )
    assert s.secret_key == "k"
    assert s.cookie_name == "sid"
    assert s.cookie_secure is True
    assert s.cookie_samesite == "strict"
    assert s.users_path == (tmp_path / "u.yml").resolve()
    assert s.port == 9000
    assert s.log_level == "DEBUG"


def test_secret_key_takes_precedence_over_prefixed_name():
    assert load_settings({"SECRET_KEY": "a", "CSA_SECRET_KEY": "b"}).secret_key == "a"


@pytest.mark.parametrize(
    "env",
    [
        {"SECRET_KEY": "  "},
        {"CSA_COOKIE_SAMESITE": "sometimes"},
        {"CSA_PORT": "eighty"},
        {"CSA_LOG_LEVEL": "LOUD"},
        {"CSA_COOKIE_NAME": ""},
    ],
)
def test_bad_config_fails_fast(env):
    with pytest.raises((ValueError, RuntimeError)):
        load_settings(env)
