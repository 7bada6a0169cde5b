import os

import pytest

from kvik_gateway.errors import MalformedIdentifier
from kvik_gateway.ids import is_compound_id, is_gene_id, is_pathway_id, split_id_list, strip_gene_prefix
from kvik_gateway.utils.fs import is_within, safe_join, wipe_directory


@pytest.mark.parametrize("raw,expected", [
    ("hsa:1 hsa:2", ["hsa:1", "hsa:2"]),
    ("hsa:1+hsa:2", ["hsa:1", "hsa:2"]),
    ("  hsa04110   hsa04115 ", ["hsa04110", "hsa04115"]),
    ("", []),
])
def test_split_id_list(raw, expected):
    assert split_id_list(raw) == expected


def test_strip_gene_prefix():
    assert strip_gene_prefix("hsa:1234") == "1234"
    with pytest.raises(MalformedIdentifier):
        strip_gene_prefix("1234")


def test_id_kinds():
    assert is_gene_id("hsa:7157", "hsa")
    assert not is_gene_id("hsa04110", "hsa")
    assert is_pathway_id("hsa04110", "hsa")
    assert not is_pathway_id("hsa:7157", "hsa")
    assert is_compound_id("cpd:C00031")


def test_is_within(tmp_path):
    root = str(tmp_path)

    assert is_within(root, os.path.join(root, "cache"))
    assert not is_within(root, root)
    assert not is_within(root, os.path.join(root, "..", "other"))


def test_safe_join_rejects_traversal(tmp_path):
    root = str(tmp_path)

    assert safe_join(root, "js/app.js") == os.path.realpath(os.path.join(root, "js", "app.js"))
    assert safe_join(root, "../secret.txt") is None
    assert safe_join(root, "/etc/passwd") == os.path.realpath(os.path.join(root, "etc", "passwd"))


def test_wipe_directory(tmp_path):
    target = tmp_path / "cache"
    (target / "a").mkdir(parents=True)
    (target / "a" / "f").write_text("x")

    assert wipe_directory(str(target), str(tmp_path)) is True
    assert not target.exists()
    assert wipe_directory(str(target), str(tmp_path)) is False


def test_wipe_directory_refuses_root_and_outside(tmp_path):
    with pytest.raises(ValueError):
        wipe_directory(str(tmp_path), str(tmp_path))
    with pytest.raises(ValueError):
        wipe_directory(str(tmp_path.parent), str(tmp_path))
    assert tmp_path.exists()
