from enum import Enum
from pathlib import Path

EXCLUDE_DIRS = {"node_modules", ".git", ".sfdx", ".sf", "__tests__", "__pycache__", "venv"}


class WorkspaceType(Enum):
    """Layout of the workspace, which decides how tags are named."""

    SFDX = "sfdx"
    CORE = "core"
    STANDARD = "standard"
    UNKNOWN = "unknown"


def find_files_pathlib(
    pattern: str,
    directory: Path,
    exclude_dirs: set[str] = EXCLUDE_DIRS,
) -> list[Path]:
    """
    Finds all files matching a pattern in the given directory and its subfolders.

    Args:
        pattern (str): The filename pattern to match (e.g., '*.js').
        directory (Path): The starting directory for the search.

    Returns:
        list: A list of Path objects for all matching files.
    """
    results = []

    try:
        entries = sorted(directory.iterdir())
    except (FileNotFoundError, PermissionError):
        return results

    for item in entries:
        if item.is_dir():
            if item.name not in exclude_dirs:
                results.extend(find_files_pathlib(pattern, item, exclude_dirs))
        elif item.match(pattern):
            results.append(item)

    return results


def detect_workspace_type(workspace_root: Path) -> WorkspaceType:
    """
    Detect the project layout of a workspace.

    - sfdx-project.json at the root: SFDX project (tags in the ``c`` namespace)
    - lwc-services / modules folder: core or standard module layout
    """
    if not workspace_root.is_dir():
        return WorkspaceType.UNKNOWN

    if (workspace_root / "sfdx-project.json").is_file():
        return WorkspaceType.SFDX

    if (workspace_root / "workspace-user.xml").is_file():
        return WorkspaceType.CORE

    if (workspace_root / "lwc.config.json").is_file() or (workspace_root / "package.json").is_file():
        return WorkspaceType.STANDARD

    if (workspace_root / "modules").is_dir():
        return WorkspaceType.STANDARD

    return WorkspaceType.UNKNOWN
