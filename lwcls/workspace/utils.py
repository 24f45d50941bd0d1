import re
from pathlib import Path

from lwcls.utils.find_files import WorkspaceType, find_files_pathlib

_UPPERCASE = re.compile(r"([A-Z])")


def camel_to_kebab(name: str) -> str:
    """Convert a camelCase name to kebab-case (iconName -> icon-name)."""
    return _UPPERCASE.sub(lambda m: "-" + m.group(1).lower(), name)


def is_component_module(file_path: Path, extension: str) -> bool:
    """
    Check if a file is the main module of a component bundle.

    A component lives in a folder named after it: myWidget/myWidget.js
    """
    return file_path.suffix == extension and file_path.stem == file_path.parent.name


def is_js_component(file_path: Path) -> bool:
    return is_component_module(file_path, ".js")


def tag_from_file(file_path: Path, sfdx_project: bool) -> str | None:
    """
    Derive the custom element tag for a component module or template.

    SFDX projects put every component in the ``c`` namespace:
        force-app/main/default/lwc/myWidget/myWidget.js -> c-my-widget

    Other projects use the folder above the component as namespace:
        modules/ui/myWidget/myWidget.html -> ui-my-widget
    """
    if file_path.suffix not in (".js", ".html"):
        return None
    if not is_component_module(file_path, file_path.suffix):
        return None

    name = file_path.stem
    if sfdx_project:
        namespace = "c"
    else:
        namespace = file_path.parent.parent.name
        if not namespace:
            return None

    return f"{namespace}-{camel_to_kebab(name)}"


def find_component_modules(workspace_root: Path, workspace_type: WorkspaceType) -> list[Path]:
    """
    Find the main JavaScript module of every component in the workspace.

    SFDX components live under ``lwc`` folders, the other layouts under
    ``modules`` folders.
    """
    container = "lwc" if workspace_type == WorkspaceType.SFDX else "modules"

    modules = []
    for js_file in find_files_pathlib("*.js", workspace_root):
        if container not in js_file.parts:
            continue
        if is_js_component(js_file):
            modules.append(js_file)

    return modules
