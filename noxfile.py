# /// script
# dependencies = [
#   "nox[uv] >= 2024.4.15"
# ]
# ///

import nox

nox.options.default_venv_backend = "uv"
nox.options.reuse_existing_virtualenvs = True

PYTHON_VERSIONS = nox.project.python_versions(nox.project.load_toml("pyproject.toml"))
MIN_PYTHON_VERSION = PYTHON_VERSIONS[0]

# Struct introspection depends on pydantic's model_fields and on Mapped[...]
# from SQLAlchemy's declarative API, so both are pinned per run.
PYDANTIC_VERSIONS = ["2.10", "2.11", "2.12"]
SQLALCHEMY_VERSION = "2.0"
PYDANTIC_MAX_PYTHON: dict[str, str] = {
    "2.10": "3.13",
    "2.11": "3.13",
}
TEST_MATRIX = [
    (python, pydantic)
    for python in PYTHON_VERSIONS
    for pydantic in PYDANTIC_VERSIONS
    if python <= PYDANTIC_MAX_PYTHON.get(pydantic, python)
]


def uv_sync(group: str, session: nox.Session) -> None:
    session.run_install(
        "uv",
        "sync",
        "--group",
        group,
        *(["--python", str(session.python)] if session.python else []),
        "--quiet",
        env={"UV_PROJECT_ENVIRONMENT": session.virtualenv.location},
    )


@nox.session
@nox.parametrize(("python", "pydantic"), TEST_MATRIX)
def test(session: nox.Session, pydantic: str) -> None:
    """Run the test suite against one pydantic release."""
    uv_sync("test", session)
    session.install(f"pydantic~={pydantic}.0", f"sqlalchemy~={SQLALCHEMY_VERSION}.0")
    session.run("pytest", *session.posargs)


@nox.session(python=MIN_PYTHON_VERSION)
def doctest(session: nox.Session) -> None:
    """Run the examples embedded in docstrings."""
    uv_sync("test", session)
    session.run("pytest", "--doctest-modules", "src/fieldresolver", *session.posargs)


@nox.session(python=MIN_PYTHON_VERSION)
def coverage(session: nox.Session) -> None:
    uv_sync("test", session)
    session.run("pytest", "--cov", "--cov-report=term-missing", *session.posargs)


@nox.session(python=MIN_PYTHON_VERSION)
@nox.parametrize("typechecker", ["ty", "pyright"])
def typecheck(session: nox.Session, typechecker: str) -> None:
    uv_sync("typecheck", session)
    match typechecker:
        case "ty":
            session.run("ty", "check", "src", "tests")
        case "pyright":
            session.run("pyright", "src", "tests")
        case _:
            raise RuntimeError(f"Unsupported type checker: {typechecker}")


@nox.session(python=MIN_PYTHON_VERSION)
def lint(session: nox.Session) -> None:
    """Check formatting and lint rules; pass --fix to apply fixes instead."""
    uv_sync("lint", session)
    if "--fix" in session.posargs:
        session.run("ruff", "check", "--fix", "src", "tests")
        session.run("ruff", "format", "src", "tests")
    else:
        session.run("ruff", "format", "--check", "src", "tests")
        session.run("ruff", "check", "src", "tests")


@nox.session(python=MIN_PYTHON_VERSION)
def depcheck(session: nox.Session) -> None:
    uv_sync("depcheck", session)
    session.run("deptry", "src")
