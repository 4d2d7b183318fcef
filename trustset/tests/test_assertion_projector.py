import base64

from trustset.core.indicators import project_assertion, project_assertions
from trustset.core.models import Assertion, AssertionStore


def test_project_assertions_strips_bookkeeping(manifest_store) -> None:
    projected = project_assertions(manifest_store.manifests[0].assertions)

    assert set(projected) == {"c2pa.actions.v2", "c2pa.hash.data"}
    assert projected["c2pa.actions.v2"] == {"actions": [{"action": "c2pa.created"}]}

    data_hash = projected["c2pa.hash.data"]
    assert data_hash["hash"] == base64.b64encode(bytes(range(16))).decode("ascii")
    assert data_hash["alg"] == "sha256"
    assert data_hash["exclusions"] == [{"start": 20, "length": 100}]
    for key in ("uuid", "sourceBox", "componentType", "label", "content"):
        assert key not in data_hash


def test_unlabeled_assertions_go_under_unknown() -> None:
    store = AssertionStore(assertions=[Assertion(fields={"x": 1})])
    assert project_assertions(store) == {"unknown": {"x": 1}}


def test_duplicate_labels_keep_last() -> None:
    store = AssertionStore(
        assertions=[
            Assertion(label="c2pa.actions", fields={"n": 1}),
            Assertion(label="c2pa.actions", fields={"n": 2}),
        ]
    )
    assert project_assertions(store) == {"c2pa.actions": {"n": 2}}


def test_empty_or_missing_store() -> None:
    assert project_assertions(None) == {}
    assert project_assertions(AssertionStore()) == {}


def test_mapping_records_are_accepted() -> None:
    record = {
        "label": "stds.schema-org.CreativeWork",
        "uuid": "abc",
        "componentType": "json",
        "author": [{"name": "A. Photographer"}],
    }
    store = AssertionStore(assertions=[record, "not-a-record"])
    assert project_assertions(store) == {
        "stds.schema-org.CreativeWork": {"author": [{"name": "A. Photographer"}]}
    }
    # source record untouched
    assert record["uuid"] == "abc"


def test_project_assertion_encodes_nested_hashes() -> None:
    out = project_assertion(
        Assertion(
            label="c2pa.ingredient",
            fields={"c2pa_manifest": {"url": "self#jumbf=x", "hash": [1, 2, 3]}},
        )
    )
    assert out == {"c2pa_manifest": {"url": "self#jumbf=x", "hash": "AQID"}}
