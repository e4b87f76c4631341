"""Exclusion patterns for project scanning (.tsgraphignore).

Entries are matched by name with gitignore-style patterns (via pathspec),
before any directory is listed or any file is fetched. Directories are
matched with a trailing slash so ``dist/`` only hits directories.

A local project may carry a ``.tsgraphignore`` file; without one the
default template below is used.
"""

from pathlib import Path
from typing import TYPE_CHECKING, Iterable, Optional

if TYPE_CHECKING:
    from pathspec import PathSpec

IGNORE_FILE_NAME = ".tsgraphignore"

# Default .tsgraphignore template
DEFAULT_TEMPLATE = """\
# tsgraph ignore patterns (gitignore syntax, matched against entry names)

# ===================
# Dependencies / build outputs
# ===================
node_modules/
dist/
build/
coverage/
.bolt/

# ===================
# Version control
# ===================
.git/
.gitignore

# ===================
# Package manifests and lockfiles
# ===================
package.json
package-lock.json
yarn.lock

# ===================
# Tooling configs
# ===================
tsconfig.json
tsconfig.app.json
tsconfig.node.json
vite.config.ts
vite.config.js
vite-env.d.ts
webpack.config.js
babel.config.js
postcss.config.js
tailwind.config.js
tailwind.config.ts
eslint.config.js
.eslintrc.cjs
.prettierrc
.prettierrc.json
.prettierrc.json5
.prettierrc.yaml
.prettierrc.yml
jest.config.js
jest.config.ts
jest.config.json
jest.setup.*
config.json

# ===================
# Misc
# ===================
README.md
LICENSE
index.html
prompt
"""


def load_exclusions(
    project_dir: Optional[str | Path] = None,
    extra: Iterable[str] = (),
) -> "PathSpec":
    """Load exclusion patterns.

    Args:
        project_dir: Local project root to look for .tsgraphignore in
        extra: Additional patterns appended after the file/default ones

    Returns:
        PathSpec matcher for entry names
    """
    import pathspec

    patterns: list[str] = []
    ignore_path = Path(project_dir) / IGNORE_FILE_NAME if project_dir else None

    if ignore_path is not None and ignore_path.exists():
        patterns = ignore_path.read_text().splitlines()
    else:
        patterns = list(DEFAULT_TEMPLATE.splitlines())

    patterns.extend(extra)
    return pathspec.PathSpec.from_lines("gitwildmatch", patterns)


def is_excluded(name: str, is_dir: bool, spec: "PathSpec") -> bool:
    """Check whether a file or directory entry is excluded by name."""
    return spec.match_file(name + "/" if is_dir else name)
