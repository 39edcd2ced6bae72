import threading

import pytest

from conftest import RecordingTranslator
from i18n_recreate.config import DEFAULT_CONFIG
from i18n_recreate.web import create_app
from i18n_recreate.web.tasks import get_job


def suffix_x(text, target_language):
    return f"{text}-X"


@pytest.fixture
def translators():
    return []


@pytest.fixture
def make_client(translators):
    def factory_for(func=None, fail_on=()):
        def factory(config, provider):
            translator = RecordingTranslator(func or suffix_x, fail_on=fail_on)
            translator.provider = provider
            translators.append(translator)
            return translator

        app = create_app(config=DEFAULT_CONFIG, translator_factory=factory)
        app.testing = True
        return app.test_client()

    return factory_for


def _wait_for(job_id):
    assert get_job(job_id).done.wait(5)


def test_health(make_client):
    response = make_client().get("/health")

    assert response.status_code == 200
    assert response.get_json() == {"status": "ok"}


def test_languages(make_client):
    languages = make_client().get("/api/languages").get_json()["languages"]

    assert {"code": "de", "name": "German"} in languages


def test_recreate(make_client, translators):
    tree = {"title": "Welcome", "count": 3, "active": True, "tags": None, "menu": {"z": "Z", "a": "A"}}

    response = make_client().post("/api/recreate", json={"tree": tree, "target_language": "DE"})

    data = response.get_json()
    assert response.status_code == 200
    assert data["tree"] == {"title": "Welcome-X", "count": 3, "active": True, "tags": None, "menu": {"z": "Z-X", "a": "A-X"}}
    assert list(data["tree"]["menu"]) == ["z", "a"]
    assert data["target_language"] == "de"
    assert data["stats"]["translated"] == 3
    assert translators[0].closed


def test_recreate_keeps_unicode(make_client):
    response = make_client(lambda text, lang: "Grüße").post(
        "/api/recreate", json={"tree": ["Hi"], "target_language": "de"}
    )

    assert "Grüße".encode("utf-8") in response.data


def test_recreate_with_existing_and_options(make_client, translators):
    response = make_client().post("/api/recreate", json={
        "tree": {"a": "Save", "b": "Save", "c": "Old"},
        "existing": {"c": "Alt"},
        "target_language": "de",
        "provider": "openai",
        "deduplicate": True,
    })

    assert response.get_json()["tree"] == {"a": "Save-X", "b": "Save-X", "c": "Alt"}
    assert translators[0].calls == ["Save"]
    assert translators[0].provider == "openai"


@pytest.mark.parametrize("body, code", [
    ({"target_language": "de"}, "invalid_tree"),
    ({"tree": "text", "target_language": "de"}, "invalid_tree"),
    ({"tree": {}}, "invalid_language"),
    ({"tree": {}, "target_language": "de", "existing": "x"}, "invalid_existing"),
    ({"tree": {}, "target_language": "de", "batch_size": "many"}, "invalid_option"),
    ({"tree": {}, "target_language": "de", "max_concurrent_requests": 0}, "invalid_option"),
])
def test_recreate_rejects_bad_requests(make_client, body, code):
    response = make_client().post("/api/recreate", json=body)

    assert response.status_code == 400
    assert response.get_json()["code"] == code


def test_recreate_translation_failure(make_client):
    response = make_client(fail_on={"Two"}).post(
        "/api/recreate", json={"tree": {"items": ["One", "Two"]}, "target_language": "de"}
    )

    data = response.get_json()
    assert response.status_code == 502
    assert data["code"] == "translation_failure"
    assert data["details"]["pointer"] == "/items/1"
    assert "tree" not in data


def test_missing_credentials_is_a_bad_request():
    app = create_app(config=DEFAULT_CONFIG)
    app.testing = True

    response = app.test_client().post("/api/recreate", json={"tree": {"a": "b"}, "target_language": "de"})

    assert response.status_code == 400
    assert response.get_json()["code"] == "translator_config_missing"


def test_unknown_route_is_json(make_client):
    response = make_client().get("/nope")

    assert response.status_code == 404
    assert response.get_json()["code"] == "not_found"


def test_job_lifecycle(make_client, translators):
    client = make_client()

    response = client.post("/api/jobs", json={"tree": {"a": "x", "b": ["y"]}, "target_language": "pl"})
    assert response.status_code == 202
    job_id = response.get_json()["job"]["job_id"]

    _wait_for(job_id)
    job = client.get(f"/api/jobs/{job_id}").get_json()["job"]

    assert job["state"] == "completed"
    assert job["result"]["tree"] == {"a": "x-X", "b": ["y-X"]}
    assert job["result"]["stats"]["translated"] == 2
    assert job["progress"]["phase"] == "completed"
    assert all(t.closed for t in translators)


def test_job_failure(make_client):
    client = make_client(fail_on={"y"})

    job_id = client.post("/api/jobs", json={"tree": {"a": "x", "b": ["y"]}, "target_language": "pl"}).get_json()["job"]["job_id"]
    _wait_for(job_id)
    job = client.get(f"/api/jobs/{job_id}").get_json()["job"]

    assert job["state"] == "failed"
    assert job["result"] is None
    assert job["error_details"]["pointer"] == "/b/0"
    assert job["error_details"]["code"] == "translation_failure"


def test_job_cancellation(make_client):
    gate = threading.Event()

    def blocking(text, lang):
        gate.wait(5)
        return text

    client = make_client(blocking)
    job_id = client.post(
        "/api/jobs", json={"tree": ["a", "b", "c"], "target_language": "de"}
    ).get_json()["job"]["job_id"]

    response = client.post(f"/api/jobs/{job_id}/cancel")
    gate.set()
    _wait_for(job_id)

    assert response.status_code == 200
    job = client.get(f"/api/jobs/{job_id}").get_json()["job"]
    assert job["state"] == "cancelled"
    assert job["result"] is None

    assert client.post(f"/api/jobs/{job_id}/cancel").status_code == 409


def test_unknown_job(make_client):
    client = make_client()

    assert client.get("/api/jobs/missing").status_code == 404
    assert client.post("/api/jobs/missing/cancel").status_code == 404


def test_job_config_error_is_reported_up_front():
    app = create_app(config=DEFAULT_CONFIG)
    app.testing = True

    response = app.test_client().post("/api/jobs", json={"tree": {"a": "b"}, "target_language": "de"})

    assert response.status_code == 400
