import json
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

from kaggle_mcp.errors import JsonError
from kaggle_mcp.models import (
    AuthenticationRequest,
    AuthenticationResponse,
    Competition,
    CompetitionListRequest,
    Dataset,
    KaggleConfig,
    KaggleCredentials,
    Kernel,
    Model,
)


def _titanic(**overrides):
    values = dict(
        ref="titanic",
        title="Titanic - Machine Learning from Disaster",
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


def test_kaggle_credentials_serialization():
    creds = KaggleCredentials(username="test_user", key="placeholder")
    data = creds.to_dict()
    assert data["username"] == "test_user"
    assert data["key"] == "placeholder"
    restored = KaggleCredentials.from_dict(json.loads(json.dumps(data)))
    assert restored == creds


def test_credentials_missing_key_raises():
    with pytest.raises(JsonError, match="key"):
        KaggleCredentials.from_dict({"username": "test_user"})


def test_credentials_wrong_type_raises():
    with pytest.raises(JsonError):
        KaggleCredentials.from_dict({"username": 5, "key": "placeholder"})


def test_credentials_non_object_raises():
    with pytest.raises(JsonError):
        KaggleCredentials.from_dict(["test_user", "placeholder"])


def test_authentication_response():
    response = AuthenticationResponse(success=True, message="Success", username="test_user")
    data = response.to_dict()
    assert data["success"] is True
    assert data["message"] == "Success"
    assert data["username"] == "test_user"
    assert AuthenticationResponse.from_dict(data) == response


def test_authentication_response_without_username():
    response = AuthenticationResponse.from_dict({"success": False, "message": "nope"})
    assert response.username is None
    assert response.to_dict() == {"success": False, "message": "nope", "username": None}


def test_authentication_request_round_trip():
    request = AuthenticationRequest(kaggle_username="test_user", kaggle_key="placeholder")
    data = request.to_dict()
    assert data == {"kaggle_username": "test_user", "kaggle_key": "placeholder"}
    assert AuthenticationRequest.from_dict(data) == request


def test_kaggle_config_default():
    config = KaggleConfig()
    assert config.competition is None
    assert config.path is None
    assert config.proxy is None


def test_kaggle_config_round_trip():
    config = KaggleConfig(competition="titanic", path=Path("/tmp/data"), proxy="http://localhost:8080")
    data = config.to_dict()
    assert data["path"] == str(Path("/tmp/data"))
    assert KaggleConfig.from_dict(data) == config


def test_competition_model():
    data = _titanic().to_dict()
    assert data["ref"] == "titanic"
    assert data["title"] == "Titanic - Machine Learning from Disaster"
    assert data["description"] == "Predict survival on the Titanic"
    assert data["teamCount"] == 1000
    assert data["userHasEntered"] is False
    assert data["deadline"] is None


def test_competition_round_trip_with_deadline():
    deadline = datetime(2030, 1, 1, 23, 59, tzinfo=timezone.utc)
    competition = _titanic(deadline=deadline)
    data = competition.to_dict()
    assert data["deadline"] == "2030-01-01T23:59:00Z"
    assert Competition.from_dict(data) == competition


def test_competition_deadline_offset_normalised_to_utc():
    payload = _titanic().to_dict()
    payload["deadline"] = "2030-01-02T01:30:00+02:00"
    competition = Competition.from_dict(payload)
    assert competition.deadline == datetime(2030, 1, 1, 23, 30, tzinfo=timezone.utc)
    assert competition.deadline.utcoffset() == timedelta(0)


def test_competition_deadline_fraction():
    payload = _titanic().to_dict()
    payload["deadline"] = "2030-01-01T00:00:00.123Z"
    competition = Competition.from_dict(payload)
    assert competition.deadline.microsecond == 123000
    assert competition.to_dict()["deadline"] == "2030-01-01T00:00:00.123Z"


def test_competition_deadline_without_offset_rejected():
    payload = _titanic().to_dict()
    payload["deadline"] = "2030-01-01T00:00:00"
    with pytest.raises(JsonError):
        Competition.from_dict(payload)


def test_competition_optional_fields_may_be_absent():
    payload = _titanic().to_dict()
    for key in ("deadline", "reward", "description"):
        del payload[key]
    competition = Competition.from_dict(payload)
    assert competition.reward is None
    assert competition.description is None
    assert competition.deadline is None


def test_competition_team_count_out_of_range():
    payload = _titanic().to_dict()
    payload["teamCount"] = 2**31
    with pytest.raises(JsonError):
        Competition.from_dict(payload)


def test_competition_bool_is_not_int():
    payload = _titanic().to_dict()
    payload["teamCount"] = True
    with pytest.raises(JsonError):
        Competition.from_dict(payload)


def test_competition_list_request():
    request = CompetitionListRequest(search="titanic", sort_by="prize", page=2)
    data = request.to_dict()
    assert data == {
        "search": "titanic",
        "category": None,
        "group": None,
        "sort_by": "prize",
        "page": 2,
    }
    assert CompetitionListRequest.from_dict(data) == request
    assert CompetitionListRequest.from_dict({}) == CompetitionListRequest()


def test_dataset_model():
    dataset = Dataset(
        id="dataset-123",
        title="Test Dataset",
        subtitle="A test dataset",
        creator_name="test_user",
        total_bytes=1024 * 1024,
        url="https://www.kaggle.com/datasets/test/dataset",
    )
    data = dataset.to_dict()
    assert data["id"] == "dataset-123"
    assert data["total_bytes"] == 1024 * 1024
    assert Dataset.from_dict(data) == dataset


def test_kernel_round_trip_uses_ref_underscore_key():
    kernel = Kernel(
        ref="user/notebook",
        title="Notebook",
        author="user",
        language="python",
        kernel_type="notebook",
    )
    data = kernel.to_dict()
    assert data["ref_"] == "user/notebook"
    assert Kernel.from_dict(data) == kernel


def test_model_round_trip():
    model = Model(id="model-1", title="Gemma", subtitle=None, author="google")
    data = model.to_dict()
    assert data == {"id": "model-1", "title": "Gemma", "subtitle": None, "author": "google"}
    assert Model.from_dict(data) == model


def test_model_missing_author():
    with pytest.raises(JsonError, match="author"):
        Model.from_dict({"id": "model-1", "title": "Gemma"})