"""
Tests for StringChain and debug_string().

Identity tags differ per process, so expected strings are built from
identity_tag() of the objects under test.
"""

import pytest

from structchain import StringChain, config, debug_string
from structchain.traversal import identity_tag

from conftest import Node, Point3D, Tagged, ring


class TestFieldLines:

    def test_scalars(self):
        text = StringChain().next("a", 1).next("b", True).next("c", None).finish()
        assert text == "a = 1\nb = true\nc = null\n"

    def test_strings_are_quoted_and_escaped(self):
        text = StringChain().next("s", 'a"b\nc').finish()
        assert text == 's = "a\\"b\\nc"\n'

    def test_non_ascii_text_is_kept(self):
        assert StringChain().next("s", "café").finish() == 's = "café"\n'

    def test_primitive_array_inline(self):
        assert StringChain().next("b", b"\x01\x02").finish() == "b = [1, 2]\n"

    def test_indentation(self):
        assert StringChain(2).next("x", 1).finish() == "        x = 1\n"

    def test_indent_width_from_config(self, monkeypatch):
        monkeypatch.setattr(config, "INDENT_WIDTH", 2)
        assert StringChain(2).next("x", 1).finish() == "    x = 1\n"

    def test_include_pre_rendered_text(self):
        assert StringChain().include("raw", "<x>").finish() == "raw = <x>\n"

    def test_str_is_finish(self):
        chain = StringChain().next("x", 1)
        assert str(chain) == chain.finish()


class TestArguments:

    def test_negative_indent(self):
        with pytest.raises(ValueError):
            StringChain(-1)

    @pytest.mark.parametrize("indent", [1.5, "1", True])
    def test_non_int_indent(self, indent):
        with pytest.raises(TypeError):
            StringChain(indent)

    def test_non_str_field_name(self):
        with pytest.raises(TypeError):
            StringChain().include(1, "x")


class TestCompoundValues:

    def test_opaque_value_block(self):
        value = object()
        text = StringChain().next("o", value).finish()
        assert text.startswith("o = {object@" + identity_tag(value) + " ")
        assert text.endswith("}\n")

    def test_opaque_value_is_escaped(self):
        class Multiline:
            def __str__(self):
                return "a\nb"

        value = Multiline()
        text = StringChain().next("o", value).finish()
        assert text == "o = {Multiline@" + identity_tag(value) + " a\\nb}\n"

    def test_list_block(self):
        value = [1, "x"]
        tag = identity_tag(value)
        text = StringChain().next("items", value).finish()
        assert text == (
            "items = {list@" + tag + "\n"
            '    0 = 1\n'
            '    1 = "x"\n'
            "}\n"
        )

    def test_cyclic_list(self):
        value = [1]
        value.append(value)
        tag = identity_tag(value)
        assert debug_string(value) == (
            "$identity = " + tag + "\n"
            "value = {list@" + tag + "\n"
            "    0 = 1\n"
            "    1 = {list@" + tag + "}\n"
            "}\n"
        )

    def test_mapping_block_has_keys_and_values(self):
        text = debug_string({"k": 1})
        assert "value = {dict@" in text
        assert "    keys = {list@" in text
        assert '        0 = "k"' in text
        assert "    values = {list@" in text
        assert "        0 = 1" in text

    def test_second_occurrence_is_a_backreference(self):
        shared = [1]
        text = StringChain().next("a", shared).next("b", shared).finish()
        assert text.endswith("b = {list@" + identity_tag(shared) + "}\n")


class TestParticipants:

    def test_self_reference(self):
        a = Node("a", 1)
        a.next = a
        tag = identity_tag(a)
        assert debug_string(a) == (
            "$identity = " + tag + "\n"
            'name = "a"\n'
            "value = 1\n"
            "next = {Node@" + tag + "}\n"
        )

    def test_two_cycle(self):
        a, b = ring(1, 2)
        ta, tb = identity_tag(a), identity_tag(b)
        assert debug_string(a) == (
            "$identity = " + ta + "\n"
            'name = "n"\n'
            "value = 1\n"
            "next = {Node@" + tb + "\n"
            '    name = "n"\n'
            "    value = 2\n"
            "    next = {Node@" + ta + "}\n"
            "}\n"
        )

    def test_identity_only_at_top_level(self):
        a, _ = ring(1, 2)
        assert debug_string(a).count("$identity") == 1

    def test_dunder_str(self):
        a = Node("a", 1)
        assert str(a) == debug_string(a)

    def test_to_human_readable_defaults_to_debug_string(self):
        a = Node("a", 1)
        assert a.to_human_readable() == debug_string(a)


class TestBaseLayers:

    def test_participating_base_block(self):
        p = Point3D(1, 2, 3)
        assert debug_string(p) == (
            "$identity = " + identity_tag(p) + "\n"
            "$base = {\n"
            "    x = 1\n"
            "    y = 2\n"
            "}\n"
            "z = 3\n"
        )

    def test_non_participating_base_uses_repr(self):
        t = Tagged(1, "x")
        assert debug_string(t) == (
            "$identity = " + identity_tag(t) + "\n"
            "$base = {Plain(tag=1)}\n"
            'label = "x"\n'
        )

    def test_supports_stringable_base(self):
        assert Point3D(1, 2, 3).supports_stringable_base(Point3D) is True
        assert Tagged(1, "x").supports_stringable_base(Tagged) is False
