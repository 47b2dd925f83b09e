import time

import pytest
from fastapi.testclient import TestClient

from reef.api import SceneSession, create_app
from reef.config import SceneConfig


@pytest.fixture
def public_dir(tmp_path):
    (tmp_path / "index.html").write_text("<html>reef</html>")
    (tmp_path / "js").mkdir()
    (tmp_path / "js" / "main.js").write_text("console.log('reef');")
    return tmp_path


@pytest.fixture
def app(public_dir):
    return create_app(SceneConfig(seed=1, frame_interval=0.005, public_dir=public_dir))


def receive_until(websocket, predicate, limit=500):
    for _ in range(limit):
        message = websocket.receive_json()
        if predicate(message):
            return message
    raise AssertionError("expected message never arrived")


def test_health(app):
    client = TestClient(app)
    assert client.get("/health").json() == {"status": "ok"}


def test_scene_and_state(app):
    client = TestClient(app)

    scene = client.get("/scene").json()
    assert scene["counts"] == {"sharks": 3, "small_fish": 20}
    assert len(scene["terrain"]["blocks"]) > 0

    state = client.get("/state").json()
    assert len(state["sharks"]) == 3
    assert state["goldfish"] == {"x": 0.0, "y": 0.0, "z": 0.0}
    assert state["pointer"] is None


def test_post_pointer_clamps_sample(app):
    client = TestClient(app)
    response = client.post("/pointer", json={"x": 2.5, "y": -0.25})
    assert response.status_code == 200
    assert response.json() == {"pointer": {"x": 1.0, "y": -0.25}}


def test_post_pointer_rejects_bad_body(app):
    client = TestClient(app)
    assert client.post("/pointer", json={"x": "left"}).status_code == 422


def test_reset_clears_pointer(app):
    client = TestClient(app)
    client.post("/pointer", json={"x": 0.5, "y": 0.5})
    assert client.post("/reset").json() == {"status": "reset"}
    assert client.get("/state").json()["pointer"] is None


def test_static_file_is_served(app):
    client = TestClient(app)
    response = client.get("/js/main.js")
    assert response.status_code == 200
    assert response.text == "console.log('reef');"


@pytest.mark.parametrize("path", ["/", "/index.html", "/tank/3", "/js/missing.js"])
def test_unmatched_paths_fall_back_to_index(app, path):
    client = TestClient(app)
    response = client.get(path)
    assert response.status_code == 200
    assert response.text == "<html>reef</html>"


def test_missing_frontend_is_404(tmp_path):
    client = TestClient(create_app(SceneConfig(public_dir=tmp_path / "nothing")))
    response = client.get("/anything")
    assert response.status_code == 404
    assert response.json()["detail"] == "Frontend not found"


def test_background_loop_ticks_while_serving(app):
    with TestClient(app) as client:
        deadline = time.monotonic() + 5.0
        while client.get("/state").json()["tick"] == 0:
            assert time.monotonic() < deadline, "tick loop never advanced"
            time.sleep(0.01)


def test_websocket_streams_state_and_moves_goldfish(app):
    with TestClient(app) as client:
        with client.websocket_connect("/ws") as websocket:
            first = receive_until(websocket, lambda m: m["type"] == "state")
            assert "sharks" in first["payload"]

            websocket.send_json({"type": "pointer", "x": 0.5, "y": -0.5})
            moved = receive_until(
                websocket,
                lambda m: m["type"] == "state" and m["payload"]["goldfish"]["x"] == 7.5,
            )
            assert moved["payload"]["goldfish"]["y"] == -5.0


def test_websocket_reports_malformed_messages(app):
    with TestClient(app) as client:
        with client.websocket_connect("/ws") as websocket:
            websocket.send_text("not json")
            error = receive_until(websocket, lambda m: m["type"] == "error")
            assert error["detail"]

            websocket.send_json({"type": "dance"})
            error = receive_until(websocket, lambda m: m["type"] == "error")
            assert "dance" in error["detail"]

            # Connection stays usable
            receive_until(websocket, lambda m: m["type"] == "state")


def test_session_handles_client_pointer():
    session = SceneSession(SceneConfig(seed=2))
    session.handle_message(
        {"type": "pointer_client", "client_x": 600, "client_y": 150, "width": 800, "height": 600}
    )
    assert session.world.pointer.x == pytest.approx(0.5)
    assert session.world.pointer.y == pytest.approx(0.5)


@pytest.mark.parametrize(
    "message",
    [
        ["pointer", 1, 2],
        {"type": "pointer", "x": 0.1},
        {"type": "pointer_client", "client_x": 1, "client_y": 1, "width": 0, "height": 600},
        {"type": "spawn_shark"},
    ],
)
def test_session_rejects_bad_messages(message):
    session = SceneSession(SceneConfig(seed=2))
    with pytest.raises(ValueError):
        session.handle_message(message)
    assert session.world.pointer is None


def test_websocket_broadcasts_proximity_events(public_dir):
    # Threshold wider than the spawn box: every shark is always in range
    app = create_app(
        SceneConfig(seed=1, frame_interval=0.005, proximity_threshold=1000.0, public_dir=public_dir)
    )
    with TestClient(app) as client:
        with client.websocket_connect("/ws") as websocket:
            event = receive_until(websocket, lambda m: m["type"] == "proximity")
            assert event["payload"]["shark_id"] in {"shark-0", "shark-1", "shark-2"}
            assert 0.0 <= event["payload"]["distance"] < 1000.0


def test_import_does_not_read_environment(monkeypatch):
    import reef.api

    monkeypatch.setenv("PORT", "eighty")
    assert not hasattr(reef.api, "app")
    with pytest.raises(ValueError, match="PORT"):
        create_app()
