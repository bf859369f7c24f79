from pathlib import Path

import pytest

tomllib = pytest.importorskip("tomllib")

PYPROJECT = Path(__file__).resolve().parent.parent / "pyproject.toml"


@pytest.fixture(scope="module")
def project():
    with PYPROJECT.open("rb") as fh:
        return tomllib.load(fh)["project"]


def test_package_description_is_not_the_design_notes(project):
    assert project.get("readme") != "DESIGN.md"
    assert project["description"]


def test_runtime_stack_is_declared(project):
    names = {dep.split("[")[0].split(">")[0].split("=")[0].lower() for dep in project["dependencies"]}

    assert {
        "fastapi", "uvicorn", "sqlalchemy", "asyncpg", "aiosqlite",
        "pydantic", "pydantic-settings", "python-jose", "tenacity",
    } <= names
    assert {"pytest", "httpx"} <= {dep.split(">")[0] for dep in project["optional-dependencies"]["test"]}
