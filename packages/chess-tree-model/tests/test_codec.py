"""Tests for the canonical wire encoding."""

import dataclasses
import json

import pytest

from chess_tree_model import (
    FormatError,
    InvalidTree,
    MissingField,
    MoveTree,
    NotFound,
    decode_tree,
    encode_tree,
    validate_tree,
)


def _shape(tree: MoveTree) -> dict:
    return {nid: dataclasses.asdict(n) for nid, n in tree.nodes.items()}


def test_encode_root_only_tree_is_canonical() -> None:
    text = encode_tree(MoveTree.create_root("start"))

    assert text == (
        '{"nodes":{"n:root":{"children":[],"fen":"start","id":"n:root","parentId":null,"ply":0}},'
        '"rootId":"n:root"}'
    )


def test_root_only_tree_round_trips_and_validates() -> None:
    tree = MoveTree.create_root("start")

    restored = decode_tree(encode_tree(tree))

    assert _shape(restored) == _shape(tree)
    assert restored.root_id == tree.root_id
    assert validate_tree(restored).valid


def test_round_trip_preserves_every_field(opening_tree: MoveTree) -> None:
    restored = decode_tree(encode_tree(opening_tree))

    assert restored.root_id == opening_tree.root_id
    assert len(restored) == len(opening_tree)
    assert _shape(restored) == _shape(opening_tree)


def test_encode_decode_encode_is_stable(opening_tree: MoveTree) -> None:
    first = encode_tree(opening_tree)

    assert encode_tree(decode_tree(first)) == first


def test_encoded_nodes_carry_exactly_the_wire_fields(opening_tree: MoveTree) -> None:
    data = json.loads(encode_tree(opening_tree))

    assert set(data) == {"nodes", "rootId"}
    assert set(data["nodes"]["n:root"]) == {"id", "parentId", "children", "fen", "ply"}
    assert data["nodes"]["n:1"] == {
        "id": "n:1",
        "parentId": "n:root",
        "children": ["n:3", "n:6"],
        "move": "e4",
        "uci": "e2e4",
        "fen": "p-e4",
        "ply": 1,
    }


def test_fifty_node_tree_survives_round_trip(wide_tree: MoveTree) -> None:
    assert len(wide_tree) == 50

    restored = decode_tree(encode_tree(wide_tree))

    assert validate_tree(restored).errors == []
    assert len(restored) == 50
    assert max(n.ply for n in restored) == 10


def test_encode_rejects_incomplete_trees() -> None:
    with pytest.raises(InvalidTree, match="None"):
        encode_tree(None)
    with pytest.raises(InvalidTree, match="nodes mapping"):
        encode_tree(MoveTree(None, "r"))  # type: ignore[arg-type]
    with pytest.raises(InvalidTree, match="root id"):
        encode_tree(MoveTree({}, ""))
    with pytest.raises(InvalidTree, match="does not exist"):
        encode_tree(MoveTree({}, "r"))


@pytest.mark.parametrize("text", ["", "   \n", "not json", "{nodes:", "[1, 2]", "42"])
def test_decode_rejects_malformed_input(text: str) -> None:
    with pytest.raises(FormatError):
        decode_tree(text)


def test_decode_missing_nodes() -> None:
    with pytest.raises(MissingField) as exc:
        decode_tree('{"rootId": "r"}')
    assert exc.value.field == "nodes"


def test_decode_missing_root_id() -> None:
    with pytest.raises(MissingField) as exc:
        decode_tree('{"nodes": {}}')
    assert exc.value.field == "rootId"


def test_decode_root_id_without_node() -> None:
    with pytest.raises(NotFound, match="'r'"):
        decode_tree('{"nodes": {}, "rootId": "r"}')


def test_decode_rejects_non_object_nodes() -> None:
    with pytest.raises(FormatError, match="'r' must be an object"):
        decode_tree('{"nodes": {"r": [1]}, "rootId": "r"}')
    with pytest.raises(FormatError, match="must map"):
        decode_tree('{"nodes": [], "rootId": "r"}')


def test_decode_requires_a_position() -> None:
    with pytest.raises(MissingField, match="fen"):
        decode_tree('{"nodes": {"r": {"id": "r", "ply": 0}}, "rootId": "r"}')


def test_decode_coerces_loose_types() -> None:
    text = json.dumps(
        {
            "nodes": {
                "1": {"parentId": None, "children": [2], "fen": "s", "ply": 0},
                "2": {"id": 2, "parentId": 1, "children": "oops", "fen": "a", "ply": 1.0, "move": 5},
            },
            "rootId": 1,
        }
    )

    tree = decode_tree(text)

    assert tree.root_id == "1"
    root, child = tree.get_node("1"), tree.get_node("2")
    assert root.id == "1" and root.children == ["2"]
    assert child.id == "2" and child.parent_id == "1"
    assert child.children == []
    assert child.ply == 1
    assert child.san == "5"
    assert child.uci is None
    assert validate_tree(tree).valid


def test_decode_lenient_ply_defaults_to_zero() -> None:
    text = '{"nodes": {"r": {"fen": "s", "ply": "zero"}, "a": {"fen": "x", "parentId": "r"}}, "rootId": "r"}'

    tree = decode_tree(text)

    assert tree.get_node("r").ply == 0
    assert tree.get_node("a").ply == 0
    # the silent default surfaces as a ply violation once validated
    assert any("expected 1" in e for e in validate_tree(tree).errors)


@pytest.mark.parametrize(
    "node",
    [
        '{"fen": "s", "ply": "zero"}',
        '{"fen": "s", "ply": 1.5}',
        '{"fen": "s", "ply": true}',
        '{"fen": "s"}',
    ],
)
def test_decode_strict_ply_rejects_bad_values(node: str) -> None:
    with pytest.raises(FormatError):
        decode_tree(f'{{"nodes": {{"r": {node}}}, "rootId": "r"}}', ply_policy="strict")


def test_decode_unknown_ply_policy() -> None:
    with pytest.raises(ValueError, match="ply policy"):
        decode_tree('{"nodes": {}, "rootId": "r"}', ply_policy="loose")  # type: ignore[arg-type]


def test_decode_does_not_validate() -> None:
    text = '{"nodes": {"r": {"id": "r", "children": ["ghost"], "fen": "s", "ply": 0}}, "rootId": "r"}'

    tree = decode_tree(text)

    assert tree.root.children == ["ghost"]
    assert not validate_tree(tree).valid


def test_decode_accepts_bytes(opening_tree: MoveTree) -> None:
    restored = decode_tree(encode_tree(opening_tree).encode("utf-8"))

    assert len(restored) == len(opening_tree)


def test_decode_rejects_bytes_that_are_not_utf8() -> None:
    with pytest.raises(FormatError, match="UTF-8"):
        decode_tree(b'{"nodes": {"r": {"fen": "\xff"}}, "rootId": "r"}')


def test_decode_rejects_deeply_nested_json() -> None:
    text = '{"nodes": ' + "[" * 200_000 + ', "rootId": "r"}'

    with pytest.raises(FormatError):
        decode_tree(text)


def test_decoded_tree_keeps_growing_without_id_clash(opening_tree: MoveTree) -> None:
    restored = decode_tree(encode_tree(opening_tree))

    new_id = restored.add_child("n:6", fen="p-e4c5nf3", san="Nf3", uci="g1f3")

    assert new_id not in opening_tree.nodes
    assert restored.get_node(new_id).ply == 3
    assert validate_tree(restored).valid
