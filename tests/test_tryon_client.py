"""Virtual try-on client tests against a scripted FASHN backend."""

from __future__ import annotations

import pytest

from tools import tryon_client
from tools.tryon_client import FashnTryOnClient, Garment, TryOnConfigurationError, TryOnError


class FakeHTTPResponse:
    def __init__(self, payload, status_code=200):
        self._payload = payload
        self.status_code = status_code
        self.text = str(payload)

    def json(self):
        return self._payload


class FakeFashn:
    """Answers /run with sequential ids and /status from a per-id script."""

    def __init__(self, statuses=None):
        self.runs = []
        self.status_calls = []
        self.statuses = statuses or {}

    def post(self, url, json, headers, timeout):
        self.runs.append(json)
        return FakeHTTPResponse({"id": f"pred-{len(self.runs)}"})

    def get(self, url, headers, timeout):
        prediction_id = url.rsplit("/", 1)[-1]
        self.status_calls.append(prediction_id)
        script = self.statuses.get(prediction_id, [{"status": "completed", "output": [f"https://cdn/{prediction_id}.jpg"]}])
        payload = script.pop(0) if len(script) > 1 else script[0]
        return FakeHTTPResponse({"id": prediction_id, **payload})


@pytest.fixture()
def fashn(monkeypatch):
    fake = FakeFashn()
    monkeypatch.setattr(tryon_client.requests, "post", fake.post)
    monkeypatch.setattr(tryon_client.requests, "get", fake.get)
    return fake


def _client(**kwargs) -> FashnTryOnClient:
    sleeps = []
    client = FashnTryOnClient("secret", base_url="https://fashn.test/v1", sleep=sleeps.append, **kwargs)
    client.sleeps = sleeps
    return client


def test_run_posts_fixed_output_options(fashn) -> None:
    started = _client().run("model.jpg", "garment.jpg", category="tops")
    assert started == {"id": "pred-1"}
    body = fashn.runs[0]
    assert body["category"] == "tops"
    assert body["output_format"] == "jpeg"
    assert body["return_base64"] is False
    assert body["num_samples"] == 1


def test_missing_api_key_is_a_configuration_error(fashn) -> None:
    with pytest.raises(TryOnConfigurationError) as excinfo:
        FashnTryOnClient(None).run("m", "g")
    assert excinfo.value.status_code == 500
    assert fashn.runs == []


def test_status_requires_an_id(fashn) -> None:
    with pytest.raises(TryOnError) as excinfo:
        _client().status("")
    assert excinfo.value.status_code == 400


def test_http_errors_keep_status_code(monkeypatch) -> None:
    monkeypatch.setattr(
        tryon_client.requests, "post", lambda url, json, headers, timeout: FakeHTTPResponse({}, status_code=429)
    )
    with pytest.raises(TryOnError) as excinfo:
        _client().run("m", "g")
    assert excinfo.value.status_code == 429


def test_wait_polls_until_completed(fashn) -> None:
    fashn.statuses["pred-9"] = [
        {"status": "starting"},
        {"status": "in_queue"},
        {"status": "processing"},
        {"status": "completed", "output": ["https://cdn/out.jpg"]},
    ]
    client = _client(poll_interval_seconds=0.5)
    result = client.wait_for_completion("pred-9")
    assert result.output == ["https://cdn/out.jpg"]
    assert client.sleeps == [0.5, 0.5, 0.5]


@pytest.mark.parametrize(
    "script, message, code",
    [
        ([{"status": "failed", "error": {"message": "bad pose"}}], "bad pose", 500),
        ([{"status": "failed"}], "Processing failed", 500),
        ([{"status": "exploded"}], "Unknown status: exploded", 500),
        ([{"status": "processing"}], "Processing timeout", 504),
    ],
)
def test_wait_failures(fashn, script, message, code) -> None:
    fashn.statuses["pred-x"] = script
    with pytest.raises(TryOnError) as excinfo:
        _client(max_attempts=3).wait_for_completion("pred-x")
    assert str(excinfo.value) == message
    assert excinfo.value.status_code == code


def test_multi_tryon_layers_bottoms_before_tops(fashn) -> None:
    garments = [Garment(image="top.jpg", category="tops"), Garment(image="pants.jpg", category="bottoms")]
    result = _client().run_multi("model.jpg", garments)

    assert result == {"id": "pred-2"}
    assert [run["garment_image"] for run in fashn.runs] == ["pants.jpg", "top.jpg"]
    assert fashn.runs[0]["model_image"] == "model.jpg"
    assert fashn.runs[1]["model_image"] == "https://cdn/pred-1.jpg"
    assert fashn.status_calls == ["pred-1"]


def test_multi_tryon_single_garment_does_not_poll(fashn) -> None:
    assert _client().run_multi("model.jpg", [Garment(image="dress.jpg", category="one-pieces")]) == {"id": "pred-1"}
    assert fashn.status_calls == []


def test_multi_tryon_limits(fashn) -> None:
    with pytest.raises(TryOnError):
        _client().run_multi("model.jpg", [])
    with pytest.raises(TryOnError) as excinfo:
        _client().run_multi("model.jpg", [Garment(image="x.jpg")] * 3)
    assert excinfo.value.status_code == 400


def test_multi_tryon_reports_failed_intermediate_step(fashn) -> None:
    fashn.statuses["pred-1"] = [{"status": "failed", "error": {"message": "no person"}}]
    garments = [Garment(image="pants.jpg", category="bottoms"), Garment(image="top.jpg", category="tops")]
    with pytest.raises(TryOnError) as excinfo:
        _client().run_multi("model.jpg", garments)
    assert str(excinfo.value) == "Failed to complete garment 1: no person"
    assert len(fashn.runs) == 1
