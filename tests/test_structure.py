import pytest

from nestgraph.core.structure import (
    DEFAULT_EDGE_NAME,
    Edge,
    as_edge_parts,
    edge_args_to_id,
    edge_args_to_obj,
    edge_obj_to_id,
    is_edge_like,
)


class TestEdgeKeys:
    def test_undirected_key_ignores_argument_order(self):
        assert edge_args_to_id(False, "b", "a") == edge_args_to_id(False, "a", "b")
        assert edge_args_to_obj(False, "b", "a") == Edge("a", "b")

    def test_directed_key_keeps_argument_order(self):
        assert edge_args_to_id(True, "b", "a") != edge_args_to_id(True, "a", "b")
        assert edge_args_to_obj(True, "b", "a") == Edge("b", "a")

    def test_empty_name_differs_from_no_name(self):
        assert edge_args_to_id(True, "a", "b", "") != edge_args_to_id(True, "a", "b")
        assert edge_args_to_id(True, "a", "b")[2] is DEFAULT_EDGE_NAME
        assert edge_args_to_obj(True, "a", "b", "").name == ""

    def test_ids_containing_control_characters_do_not_collide(self):
        # "a\x01b" -> "c" and "a" -> "b\x01c" would share a delimited string key
        k1 = edge_args_to_id(True, "a\x01b", "c")
        k2 = edge_args_to_id(True, "a", "b\x01c")
        assert k1 != k2

    def test_sentinel_never_equals_a_string(self):
        assert DEFAULT_EDGE_NAME != "\x00"
        assert repr(DEFAULT_EDGE_NAME) == "DEFAULT_EDGE_NAME"

    def test_ids_are_coerced_to_strings(self):
        assert edge_args_to_obj(True, 1, 2, 3) == Edge("1", "2", "3")
        # string order, not numeric order
        assert edge_args_to_obj(False, 10, 9) == Edge("10", "9")

    def test_obj_to_id_matches_args_to_id(self):
        assert edge_obj_to_id(False, Edge("b", "a", "x")) == edge_args_to_id(False, "a", "b", "x")
        assert edge_obj_to_id(True, {"v": "a", "w": "b"}) == edge_args_to_id(True, "a", "b")


class TestDescriptors:
    def test_edge_is_immutable(self):
        e = Edge("a", "b")
        with pytest.raises(AttributeError):
            e.v = "z"

    def test_as_edge_parts_accepts_mappings_and_objects(self):
        class Obj:
            v = "a"
            w = "b"

        assert as_edge_parts({"v": "a", "w": "b", "name": "n"}) == ("a", "b", "n")
        assert as_edge_parts(Obj()) == ("a", "b", None)

    def test_as_edge_parts_rejects_other_values(self):
        with pytest.raises(ValueError):
            as_edge_parts({"v": "a"})
        with pytest.raises(TypeError):
            as_edge_parts(42)

    def test_is_edge_like(self):
        assert is_edge_like(Edge("a", "b"))
        assert is_edge_like({"v": "a", "w": "b"})
        assert not is_edge_like({"v": "a"})
        assert not is_edge_like("ab")
