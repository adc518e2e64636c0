import httpx
import pytest
from fastapi.testclient import TestClient

from placement_designer import data_store
from placement_designer.persistence import (
    ApiPlacementRepository, FilePlacementRepository, PersistenceError,
)
from placement_server import storage
from placement_server.main import app


@pytest.fixture()
def api_repo(tmp_path, monkeypatch):
    monkeypatch.setattr(storage, "DATA_DIR", str(tmp_path / "server"))
    return ApiPlacementRepository(client=TestClient(app))


def test_file_repository_round_trip(project_dir, make_placement):
    repo = FilePlacementRepository()
    saved = repo.save_placements("tpl", [make_placement("a"), make_placement("b")])
    assert [p.id for p in saved] == ["a", "b"]
    assert repo.load_placements("tpl") == saved


def test_file_repository_without_project_raises(monkeypatch):
    monkeypatch.setattr(data_store, "_active_project_dir", None)
    with pytest.raises(PersistenceError):
        FilePlacementRepository().load_placements("tpl")


def test_api_repository_round_trip(api_repo, make_placement):
    assert api_repo.load_placements("tpl") == []
    p = make_placement("a", label="Name")
    p.style.font_size = 16
    saved = api_repo.save_placements("tpl", [p])
    assert saved == [p]
    assert api_repo.load_placements("tpl") == [p]


def test_api_repository_returns_normalized_copy(api_repo, make_placement):
    p = make_placement("a")
    p.rect.x = 1.7  # unclamped client value
    saved = api_repo.save_placements("tpl", [p])
    assert saved[0].rect.x == 1.0


def test_api_repository_duplicate_ids_raise(api_repo, make_placement):
    with pytest.raises(PersistenceError):
        api_repo.save_placements("tpl", [make_placement("a"), make_placement("a")])


def test_api_repository_connection_failure():
    repo = ApiPlacementRepository("http://127.0.0.1:9", timeout=0.5)
    try:
        with pytest.raises(PersistenceError):
            repo.load_placements("tpl")
    finally:
        repo.close()


def test_api_repository_escapes_template_id():
    paths = []

    def handler(request):
        paths.append(request.url.raw_path)
        return httpx.Response(200, json={"placements": []})

    client = httpx.Client(base_url="http://designer.test", transport=httpx.MockTransport(handler))
    repo = ApiPlacementRepository(client=client)
    assert repo.load_placements("exam?v2#1") == []
    assert paths == [b"/api/templates/exam%3Fv2%231/placements"]


def test_api_repository_round_trip_with_unusual_template_id(api_repo, make_placement):
    saved = api_repo.save_placements("spring exam?v2", [make_placement("a")])
    assert api_repo.load_placements("spring exam?v2") == saved
    assert api_repo.load_placements("spring exam") == []
