import pytest

from yolo.server_env import ServerEnv


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("local", ServerEnv.LOCAL),
        ("LOCAL", ServerEnv.LOCAL),
        ("production", ServerEnv.PRODUCTION),
        ("Production", ServerEnv.PRODUCTION),
    ],
)
def test_parse_accepts_known_names_in_any_case(text, expected):
    assert ServerEnv.parse(text) is expected


def test_parse_rejects_unknown_name():
    with pytest.raises(ValueError, match="staging is not supported environment value"):
        ServerEnv.parse("Staging")


@pytest.mark.parametrize("env", list(ServerEnv))
def test_str_round_trips_through_parse(env):
    assert ServerEnv.parse(str(env)) is env


def test_str_gives_file_name():
    assert str(ServerEnv.parse("LOCAL")) == "local"
    assert str(ServerEnv.parse("Production")) == "production"