import pytest

from jcontainers.containers import FORM_ZERO, FormCodec, FormId, FormMap, IntMap
from jcontainers.json_handling import (
    dump,
    dumps,
    from_json_value,
    load,
    loads,
    to_json_value,
)


@pytest.fixture
def codec():
    return FormCodec(["Skyrim.esm", "Update.esm"])


def test_round_trip_plain_tree():
    tree = {"name": "box", "items": [1, 2.5, "text", None, {"inner": []}]}
    assert loads(dumps(tree)) == tree


def test_form_map_round_trip_keeps_type(codec):
    form_map = FormMap({FormId(0x14): "player", FormId(0x01000002): 7})
    loaded = loads(dumps(form_map, codec), codec)
    assert isinstance(loaded, FormMap)
    assert loaded == form_map


def test_int_map_round_trip_keeps_type():
    int_map = IntMap({-3: "a", 42: [1, 2]})
    loaded = loads(dumps(int_map))
    assert isinstance(loaded, IntMap)
    assert loaded == int_map


def test_form_map_writes_meta_info():
    assert to_json_value(FormMap()) == {"__metaInfo": {"typeName": "JFormMap"}}


def test_int_map_writes_meta_info():
    assert to_json_value(IntMap()) == {"__metaInfo": {"typeName": "JIntMap"}}


def test_shared_container_written_as_reference():
    shared = {"x": 1}
    value = to_json_value({"a": shared, "b": shared})
    assert value["b"] == "__reference|.a"


def test_shared_container_restored_as_same_object():
    shared = {"x": 1}
    loaded = loads(dumps({"a": shared, "b": [shared]}))
    assert loaded["a"] == {"x": 1}
    assert loaded["b"][0] is loaded["a"]


def test_self_reference_round_trip():
    root = []
    root.append(root)
    loaded = loads(dumps(root))
    assert len(loaded) == 1
    assert loaded[0] is loaded


def test_reference_through_form_map_key(codec):
    inner = ["payload"]
    root = FormMap({FormId(0x14): inner, FormId(0x15): inner})
    loaded = loads(dumps(root, codec), codec)
    assert loaded[FormId(0x14)] == ["payload"]
    assert loaded[FormId(0x15)] is loaded[FormId(0x14)]


def test_form_values_round_trip(codec):
    tree = [FormId(0x01000010), FormId(0xFF000001)]
    assert loads(dumps(tree, codec), codec) == tree


def test_unknown_plugin_form_written_as_null():
    assert to_json_value([FormId(0x05000001)], FormCodec()) == [None]


def test_unresolvable_form_string_becomes_form_zero():
    loaded = from_json_value(["__formData|Missing.esp|0x10"], FormCodec())
    assert loaded == [FORM_ZERO]


def test_other_special_string_kept():
    assert from_json_value(["__other", "plain"]) == ["__other", "plain"]


def test_unresolved_reference_stays_empty():
    assert from_json_value(["__reference|.missing", 3]) == [None, 3]


def test_legacy_form_data_gives_form_map():
    loaded = from_json_value({"__formData": None})
    assert isinstance(loaded, FormMap)
    assert len(loaded) == 0


def test_unknown_type_name_gives_no_container():
    assert from_json_value({"__metaInfo": {"typeName": "Unknown"}}) is None


def test_nested_unknown_type_becomes_null():
    loaded = from_json_value({"a": {"__metaInfo": {"typeName": "Unknown"}}})
    assert loaded == {"a": None}


def test_non_object_meta_info_gives_plain_map_without_meta_keys():
    loaded = from_json_value({"__metaInfo": "junk", "__formData": 1, "k": 2})
    assert type(loaded) is dict
    assert loaded == {"k": 2}


def test_int_map_keys_parsed_and_invalid_dropped():
    loaded = from_json_value(
        {"__metaInfo": {"typeName": "JIntMap"}, "0x10": 1, "abc": 2, "7": 3}
    )
    assert isinstance(loaded, IntMap)
    assert loaded == {16: 1, 7: 3}


def test_form_map_invalid_keys_dropped(codec):
    loaded = from_json_value(
        {"__metaInfo": {"typeName": "JFormMap"}, "nonsense": 1}, codec
    )
    assert loaded == FormMap()


def test_input_not_mutated():
    source = {"__metaInfo": {"typeName": "JIntMap"}, "1": 2}
    from_json_value(source)
    assert "__metaInfo" in source


def test_booleans_load_as_integers():
    assert loads("[true, false]") == [1, 0]


def test_large_integer_wraps_to_32_bits():
    assert from_json_value([2**32 + 5]) == [5]


def test_scalar_root_gives_none():
    assert loads("42") is None


def test_malformed_text_raises():
    with pytest.raises(ValueError):
        loads("[1, ")


def test_nan_constant_rejected():
    with pytest.raises(ValueError):
        loads("[NaN]")


def test_non_container_root_rejected():
    with pytest.raises(TypeError):
        dumps("text")


def test_unsupported_value_rejected():
    with pytest.raises(TypeError):
        dumps([object()])


def test_non_string_map_key_rejected():
    with pytest.raises(TypeError):
        dumps({1: "x"})


def test_out_of_range_integer_rejected():
    with pytest.raises(ValueError):
        dumps([2**40])


def test_dumps_uses_two_space_indent():
    assert dumps([1]) == "[\n  1\n]"


def test_dump_and_load_file(tmp_path, codec):
    tree = {"forms": FormMap({FormId(0x14): "hero"}), "ids": IntMap({5: 1.5})}
    path = tmp_path / "data.json"
    dump(tree, path, codec)
    loaded = load(path, codec)
    assert loaded == tree
    assert isinstance(loaded["forms"], FormMap)
    assert isinstance(loaded["ids"], IntMap)


def test_load_missing_file_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        load(tmp_path / "absent.json")