"""Unit tests for tree building."""

from hypothesis import given
from hypothesis import strategies as st

from dir_analyzer.core.tree import TreeNode, build_compact_tree, build_tree, tree_to_dict
from dir_analyzer.types.models import FileRecord


def names(node: TreeNode) -> list[str]:
    return [child.name for child in node.children]


class TestBuildTree:
    """Test path folding and ordering."""

    def test_nested_structure(self) -> None:
        files = [
            FileRecord("/root/src/app/main.py", 10),
            FileRecord("/root/src/util.py", 5),
            FileRecord("/root/README.md", 3),
        ]

        root = build_tree(files, "/root")

        assert root.name == "root"
        assert root.is_directory is True
        assert names(root) == ["src", "README.md"]
        src = root.children[0]
        assert src.full_path == "/root/src"
        assert names(src) == ["app", "util.py"]
        main = src.children[0].children[0]
        assert (main.name, main.full_path, main.size, main.is_directory) == (
            "main.py",
            "/root/src/app/main.py",
            10,
            False,
        )

    def test_directories_before_files_then_alphabetical(self) -> None:
        files = [
            FileRecord("/r/b.txt", 1),
            FileRecord("/r/a.txt", 1),
            FileRecord("/r/z/x.txt", 1),
            FileRecord("/r/m/y.txt", 1),
        ]

        assert names(build_tree(files, "/r")) == ["m", "z", "a.txt", "b.txt"]

    def test_shared_prefix_reuses_directory(self) -> None:
        files = [FileRecord("/r/d/one", 1), FileRecord("/r/d/two", 1)]

        root = build_tree(files, "/r")

        assert names(root) == ["d"]
        assert names(root.children[0]) == ["one", "two"]

    def test_files_outside_root_are_ignored(self) -> None:
        root = build_tree([FileRecord("/elsewhere/x", 1), FileRecord("/r/in", 1)], "/r")

        assert names(root) == ["in"]

    def test_empty_input(self) -> None:
        root = build_tree([], "/r/")

        assert root.name == "r"
        assert root.children == []

    @given(st.permutations(["/r/a/1", "/r/a/2", "/r/b", "/r/c/d/e", "/r/c/f"]))
    def test_order_independent(self, paths: list[str]) -> None:
        """Property: the tree does not depend on input order."""
        files = [FileRecord(path, len(path)) for path in paths]
        reference = [FileRecord(path, len(path)) for path in sorted(paths)]

        assert tree_to_dict(build_tree(files, "/r")) == tree_to_dict(build_tree(reference, "/r"))


class TestBuildCompactTree:
    """Test the capped tree view."""

    def test_caps_files(self) -> None:
        files = [FileRecord(f"/r/f{index:02d}", index) for index in range(60)]

        view = build_compact_tree(files, "/r", max_files=50)

        assert view.total_files == 60
        assert view.omitted_files == 10
        assert len(view.root.children) == 50

    def test_under_cap(self) -> None:
        view = build_compact_tree([FileRecord("/r/a", 1)], "/r")

        assert view.omitted_files == 0


class TestTreeToDict:
    def test_shape(self) -> None:
        root = build_tree([FileRecord("/r/d/f", 7)], "/r")

        assert tree_to_dict(root) == {
            "name": "r",
            "path": "/r",
            "children": [
                {
                    "name": "d",
                    "path": "/r/d",
                    "children": [{"name": "f", "path": "/r/d/f", "size": 7}],
                }
            ],
        }
