import pytest

from resgen.model import Directory, Failure, Leaf, extension, iter_leaves, split_ext, tree_stats
from resgen.registry import Registry, UnknownEntryError


def test_registry_keeps_registration_order():
    reg: Registry[int] = Registry("thing")
    reg.register("b", 1)
    reg.register("a", 2)
    assert reg.keys() == ["b", "a"]
    assert reg.entries() == [("b", 1), ("a", 2)]
    assert len(reg) == 2
    assert "a" in reg and "c" not in reg


def test_registry_override_replaces_and_moves_last():
    reg: Registry[int] = Registry("thing")
    reg.register("a", 1)
    reg.register("b", 2)
    reg.register("a", 3)
    assert list(reg) == ["b", "a"]
    assert reg.find("a") == 3


def test_registry_find_unknown():
    reg: Registry[int] = Registry("thing")
    assert reg.get("nope") is None
    with pytest.raises(UnknownEntryError) as ei:
        reg.find("nope")
    assert str(ei.value) == "Unknown thing 'nope'"
    assert isinstance(ei.value, KeyError)


@pytest.mark.parametrize(
    "name,stem,ext",
    [
        ("a.txt", "a", "txt"),
        ("a.b.txt", "a.b", "txt"),
        ("noext", "noext", None),
        (".hidden", "", "hidden"),
        ("trailing.", "trailing", ""),
    ],
)
def test_split_ext(name, stem, ext):
    assert split_ext(name) == (stem, ext)


def test_extension_is_lower_cased():
    assert extension("DATA.JSON") == "json"
    assert extension("noext") is None
    assert extension("trailing.") is None


def test_directory_children_become_tuple():
    d = Directory("d", [Leaf("a", b"x")])
    assert d.children == (Leaf("a", b"x"),)


def test_tree_walks():
    tree = [
        Directory("d", [Leaf("a", b"xy"), Directory("e", [Leaf("b", b"z")]), Failure("boom")]),
        Leaf("c", b""),
    ]
    assert [leaf.name for leaf in iter_leaves(tree)] == ["a", "b", "c"]
    assert tree_stats(tree) == {"directories": 2, "leaves": 3, "failures": 1, "bytes": 3}
