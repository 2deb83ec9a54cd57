import json

from app.services.cost_store import GLOBAL_SCOPE, InMemoryCostPriceRepository, JsonCostPriceRepository


def test_set_and_remove():
    repo = InMemoryCostPriceRepository()

    repo.set("s1", "ABC123", 50000)
    repo.set("s1", "XYZ9", 20000)
    repo.set("s1", "XYZ9", 0)

    assert repo.get("s1") == {"ABC123": 50000}
    assert repo.get("s2") == {}


def test_global_scope_overrides_shops():
    repo = InMemoryCostPriceRepository({
        "s1": {"ABC123": 40000, "XYZ9": 10000},
        GLOBAL_SCOPE: {"ABC123": 45000}
    })

    assert repo.get(GLOBAL_SCOPE) == {"ABC123": 45000, "XYZ9": 10000}


def test_get_returns_copy():
    repo = InMemoryCostPriceRepository({"s1": {"A": 1}})

    repo.get("s1")["A"] = 99

    assert repo.get("s1") == {"A": 1}


def test_json_repository_persists(tmp_path):
    path = tmp_path / "data" / "costs.json"

    repo = JsonCostPriceRepository(str(path))
    repo.set(GLOBAL_SCOPE, "ABC123", 50000)

    assert json.loads(path.read_text(encoding="utf-8")) == {GLOBAL_SCOPE: {"ABC123": 50000}}

    reopened = JsonCostPriceRepository(str(path))

    assert reopened.get(GLOBAL_SCOPE) == {"ABC123": 50000}


def test_json_repository_ignores_bad_file(tmp_path):
    path = tmp_path / "costs.json"
    path.write_text("{oops", encoding="utf-8")

    assert JsonCostPriceRepository(str(path)).get(GLOBAL_SCOPE) == {}


def test_json_repository_drops_invalid_values(tmp_path):
    path = tmp_path / "costs.json"
    path.write_text(json.dumps({"s1": {"A": 100, "B": "x", "C": -5}, "junk": 3}), encoding="utf-8")

    assert JsonCostPriceRepository(str(path)).get("s1") == {"A": 100}


def test_json_repository_ignores_non_object_file(tmp_path):
    path = tmp_path / "costs.json"
    path.write_text(json.dumps([["ABC123", 50000]]), encoding="utf-8")

    repo = JsonCostPriceRepository(str(path))

    assert repo.get(GLOBAL_SCOPE) == {}

    repo.set("s1", "ABC123", 50000)

    assert json.loads(path.read_text(encoding="utf-8")) == {"s1": {"ABC123": 50000.0}}
