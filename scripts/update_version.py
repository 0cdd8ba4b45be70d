"""Write zscli/_version.py from the version declared in pyproject.toml."""

import sys
from pathlib import Path

import tomllib


def main():
    """Regenerate zscli/_version.py after a version bump."""
    project_root = Path(__file__).parent.parent
    pyproject_path = project_root / "pyproject.toml"
    version_file_path = project_root / "zscli" / "_version.py"

    try:
        with open(pyproject_path, "rb") as f:
            version = tomllib.load(f)["project"]["version"]
    except (OSError, KeyError, tomllib.TOMLDecodeError) as e:
        print(f"Error reading version from {pyproject_path}: {e}")
        sys.exit(1)

    version_file_path.write_text(
        f'"""Version information for zscli."""\n\n'
        f"# This file is auto-generated. Do not edit manually.\n"
        f'__version__ = "{version}"\n',
        encoding="utf-8",
    )
    print(f"Wrote {version_file_path.relative_to(project_root)} ({version})")


if __name__ == "__main__":
    main()
