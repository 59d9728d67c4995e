from __future__ import annotations

from pathlib import Path

import pytest

from helpers import write_tree


@pytest.fixture
def project_dir(tmp_path: Path) -> Path:
    """A project with two main templates and one test template."""
    root = tmp_path / "proj"
    write_tree(
        root,
        {
            "src/main/java-templates/a.txt": "X",
            "src/main/java-templates/sub/b.txt": "Y",
            "src/test/java-templates/t.txt": "T",
        },
    )
    return root
