import dataclasses

import pytest

from axmldecoder import Element, Text, decode
from axmldecoder.constants import ValueType
from axml_writer import ANDROID_URI, AxmlWriter


@pytest.fixture
def tree():
    w = AxmlWriter(["a", "b", "c", "d", "hello", "name", "android", ANDROID_URI])
    w.start_namespace("android", ANDROID_URI)
    w.start_element("a", [w.attr("name", "hello"), w.attr("name", "b", ns=ANDROID_URI)])
    w.start_element("b")
    w.start_element("c")
    w.end_element("c")
    w.end_element("b")
    w.cdata("hello")
    w.start_element("d", [w.attr("name", data_type=ValueType.INT_HEX, data=255)])
    w.end_element("d")
    w.end_element("a")
    w.end_namespace("android", ANDROID_URI)
    return decode(w.build())


class TestDocument(object):

    def test_depth_first_order(self, tree):
        names = []
        for node in tree.iter():
            if isinstance(node, Element):
                names.append(tree.element_name(node))
            else:
                names.append("#" + tree.text(node))
        assert names == ["a", "b", "c", "#hello", "d"]

    def test_iter_elements(self, tree):
        assert [tree.element_name(e) for e in tree.iter_elements()] == ["a", "b", "c", "d"]
        assert len(list(tree.iter_elements("c"))) == 1

    def test_get_attribute_by_index(self, tree):
        root = tree.root
        plain = root.get_attribute(None, 5)
        assert tree.format_value(plain) == "hello"
        namespaced = root.get_attribute(7, 5)
        assert tree.format_value(namespaced) == "b"
        assert root.get_attribute(7, 4) is None

    def test_find_attribute_by_text(self, tree):
        root = tree.root
        assert tree.attribute_value(root, "name") == "hello"
        assert tree.attribute_value(root, "name", ANDROID_URI) == "b"
        assert tree.attribute_value(root, "missing") is None
        d = root.elements[1]
        assert tree.attribute_value(d, "name") == "0x000000FF"

    def test_elements_skip_text(self, tree):
        assert len(tree.root.children) == 3
        assert isinstance(tree.root.children[1], Text)
        assert [tree.element_name(e) for e in tree.root.elements] == ["b", "d"]

    def test_prefix_for(self, tree):
        assert tree.prefix_for(ANDROID_URI) == "android"
        assert tree.prefix_for("urn:unknown") is None

    def test_frozen(self, tree):
        with pytest.raises(dataclasses.FrozenInstanceError):
            tree.root.name = 1
        with pytest.raises(dataclasses.FrozenInstanceError):
            tree.root = None
        assert isinstance(tree.root.children, tuple)
        assert isinstance(tree.root.attributes, tuple)

    def test_string_resolution_is_stable(self, tree):
        for i in range(len(tree.string_pool)):
            assert tree.string(i) == tree.string(i)
        assert tree.string(None) is None
