from datetime import datetime, timezone

import pytest
import responses
from responses import matchers

from kaggle_mcp.client import KAGGLE_API_BASE
from kaggle_mcp.demo import format_competition, main
from kaggle_mcp.models import Competition

LIST_URL = KAGGLE_API_BASE + "/competitions/list"


def _competition(**overrides):
    values = dict(
        ref="titanic",
        title="Titanic",
        url="https://www.kaggle.com/c/titanic",
        category="Getting Started",
        deadline=None,
        reward="$0",
        team_count=1000,
        user_has_entered=False,
        description="Predict survival on the Titanic",
    )
    values.update(overrides)
    return Competition(**values)


def _payload(title, reward="$0", category="Getting Started"):
    return [
        {
            "ref": title.lower(),
            "title": title,
            "url": "https://www.kaggle.com/c/" + title.lower(),
            "category": category,
            "deadline": None,
            "reward": reward,
            "teamCount": 10,
            "userHasEntered": False,
            "description": "About " + title,
        }
    ]


def test_format_competition_fields_in_order():
    text = format_competition(_competition(), ("ref", "teams", "reward"))
    assert text.splitlines() == [
        "🏆 Titanic",
        "   ID: titanic",
        "   Teams: 1000",
        "   Prize: $0",
    ]


def test_format_competition_title_only():
    assert format_competition(_competition(), ()) == "🏆 Titanic"


def test_format_competition_skips_missing_values():
    text = format_competition(_competition(reward=None, description=None), ("reward", "description"))
    assert text == "🏆 Titanic"


def test_format_competition_truncates_description():
    text = format_competition(_competition(description="x" * 150), ("description",))
    lines = text.splitlines()
    assert lines[1] == "   " + "x" * 100 + "..."


def test_format_competition_deadline():
    deadline = datetime(2024, 1, 1, tzinfo=timezone.utc)
    text = format_competition(_competition(deadline=deadline), ("deadline",))
    assert text.splitlines()[1] == "   Deadline: 2024-01-01 00:00:00 UTC"


def test_format_competition_unknown_field():
    with pytest.raises(ValueError):
        format_competition(_competition(), ("nonsense",))


def test_main_prints_all_sections(monkeypatch, capsys):
    monkeypatch.setenv("KAGGLE_USERNAME", "env_user")
    monkeypatch.setenv("KAGGLE_KEY", "placeholder")
    with responses.RequestsMock() as rsps:
        rsps.add(responses.GET, LIST_URL, json=_payload("Alpha"),
                 match=[matchers.query_param_matcher({})])
        rsps.add(responses.GET, LIST_URL, json=_payload("Beta"),
                 match=[matchers.query_param_matcher({"search": "machine learning"})])
        rsps.add(responses.GET, LIST_URL, json=_payload("Gamma", category="Featured"),
                 match=[matchers.query_param_matcher({"category": "featured"})])
        rsps.add(responses.GET, LIST_URL, json=_payload("Delta", reward=None),
                 match=[matchers.query_param_matcher({"sortBy": "prize"})])
        code = main([])
    out = capsys.readouterr().out
    assert code == 0
    lines = out.splitlines()
    assert lines[0] == "🔐 Authenticated with Kaggle API"
    assert "   ID: alpha" in lines
    assert "   About Beta..." in lines
    assert "   Category: Featured" in lines
    assert "   URL: https://www.kaggle.com/c/gamma" in lines
    assert "🏆 Delta - No prize" in lines
    assert out.index("🏆 Alpha") < out.index("🏆 Beta") < out.index("🏆 Gamma") < out.index("🏆 Delta")


def test_main_without_credentials(monkeypatch, capsys, tmp_path):
    monkeypatch.delenv("KAGGLE_USERNAME", raising=False)
    monkeypatch.delenv("KAGGLE_KEY", raising=False)
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.setenv("USERPROFILE", str(tmp_path))
    code = main([])
    captured = capsys.readouterr()
    assert code == 1
    assert "Not authenticated" in captured.err
    assert "Authenticated with Kaggle API" not in captured.out