from pathlib import Path

import pytest

from lwcls.utils.find_files import WorkspaceType, detect_workspace_type
from lwcls.workspace.utils import (
    camel_to_kebab,
    find_component_modules,
    is_js_component,
    tag_from_file,
)


@pytest.mark.parametrize(
    "name, expected",
    [
        ("iconName", "icon-name"),
        ("label", "label"),
        ("alternativeText", "alternative-text"),
        ("maximumFractionDigits", "maximum-fraction-digits"),
    ],
)
def test_camel_to_kebab(name, expected):
    assert camel_to_kebab(name) == expected


def test_tag_from_file_sfdx():
    path = Path("/ws/force-app/main/default/lwc/helloWorld/helloWorld.js")
    assert tag_from_file(path, True) == "c-hello-world"
    assert tag_from_file(path.with_suffix(".html"), True) == "c-hello-world"


def test_tag_from_file_namespaced():
    path = Path("/ws/modules/ui/myButton/myButton.js")
    assert tag_from_file(path, False) == "ui-my-button"


def test_tag_from_file_rejects_non_module_files():
    assert tag_from_file(Path("/ws/lwc/helloWorld/utils.js"), True) is None
    assert tag_from_file(Path("/ws/lwc/helloWorld/helloWorld.css"), True) is None


def test_is_js_component():
    assert is_js_component(Path("lwc/card/card.js"))
    assert not is_js_component(Path("lwc/card/card.html"))
    assert not is_js_component(Path("lwc/card/helper.js"))


def test_detect_workspace_type(tmp_path):
    assert detect_workspace_type(tmp_path) == WorkspaceType.UNKNOWN

    (tmp_path / "modules").mkdir()
    assert detect_workspace_type(tmp_path) == WorkspaceType.STANDARD

    (tmp_path / "workspace-user.xml").write_text("<workspace/>")
    assert detect_workspace_type(tmp_path) == WorkspaceType.CORE

    (tmp_path / "sfdx-project.json").write_text("{}")
    assert detect_workspace_type(tmp_path) == WorkspaceType.SFDX

    assert detect_workspace_type(tmp_path / "missing") == WorkspaceType.UNKNOWN


def test_find_component_modules_sfdx(tmp_path):
    lwc = tmp_path / "force-app" / "main" / "default" / "lwc"
    for name in ("alpha", "beta"):
        (lwc / name).mkdir(parents=True)
        (lwc / name / f"{name}.js").write_text("")
    (lwc / "alpha" / "helper.js").write_text("")
    (lwc / "alpha" / "__tests__").mkdir()
    (lwc / "alpha" / "__tests__" / "__tests__.js").write_text("")
    (tmp_path / "node_modules" / "lwc" / "dep").mkdir(parents=True)
    (tmp_path / "node_modules" / "lwc" / "dep" / "dep.js").write_text("")

    modules = find_component_modules(tmp_path, WorkspaceType.SFDX)

    assert [m.name for m in modules] == ["alpha.js", "beta.js"]


def test_find_component_modules_uses_modules_folder(tmp_path):
    (tmp_path / "modules" / "ui" / "card").mkdir(parents=True)
    (tmp_path / "modules" / "ui" / "card" / "card.js").write_text("")
    (tmp_path / "lwc" / "other").mkdir(parents=True)
    (tmp_path / "lwc" / "other" / "other.js").write_text("")

    modules = find_component_modules(tmp_path, WorkspaceType.STANDARD)

    assert [m.name for m in modules] == ["card.js"]
