import pytest

from pulsa.core.config import Settings
from pulsa.core.scoring import compute_percentage


@pytest.mark.parametrize("part, whole, expected", [
    (2, 2, 100),
    (1, 2, 50),
    (2, 3, 67),
    (1, 3, 33),
    (1, 8, 13),
    (0, 5, 0),
])
def test_percentage_rounds_half_up(part, whole, expected):
    assert compute_percentage(part, whole) == expected


def test_percentage_of_nothing_is_zero():
    assert compute_percentage(0, 0) == 0


def test_settings_accept_overrides():
    app_settings = Settings(QUIZ_PASS_THRESHOLD=80, DATABASE_URL="sqlite://")
    assert app_settings.QUIZ_PASS_THRESHOLD == 80
    assert app_settings.DATABASE_URL == "sqlite://"


def test_settings_reject_unknown_override():
    with pytest.raises(AttributeError):
        Settings(NOT_A_SETTING=True)


def test_cors_origins_are_split_and_trimmed():
    app_settings = Settings(CORS_ALLOWED_ORIGINS_STR=" http://a.test , ,http://b.test")
    assert app_settings.CORS_ALLOWED_ORIGINS == ["http://a.test", "http://b.test"]
