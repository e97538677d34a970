import nox

# Standard locations for the code
LOCATIONS = [
    "src",
    "tests",
]


@nox.session(python=["3.10", "3.11", "3.12"])
def tests(session: nox.Session) -> None:
    """Run the complete test suite."""
    session.install("-e", ".[test]")
    session.run("pytest", *session.posargs)


@nox.session(python="3.12")
def autoformat(session: nox.Session) -> None:
    """Apply ruff fixes and formatting to the package and tests."""
    session.install("ruff")
    session.run("ruff", "check", "--fix", *LOCATIONS, "noxfile.py")
    session.run("ruff", "format", *LOCATIONS, "noxfile.py")


@nox.session(python="3.12")
def lint(session: nox.Session) -> None:
    """Check ruff rules and formatting without changing files."""
    session.install("ruff")
    session.run("ruff", "check", *LOCATIONS, "noxfile.py")
    session.run("ruff", "format", "--check", *LOCATIONS, "noxfile.py")


@nox.session(python=["3.10", "3.11", "3.12"])
def type_check(session: nox.Session) -> None:
    """Run mypy static type analysis."""
    session.install("-e", ".[fastapi,mongo]")
    session.install("mypy", "pytest")
    session.run("mypy")


@nox.session(python=["3.10", "3.11", "3.12"])
def arch_check(session: nox.Session) -> None:
    """Verify architectural boundaries using pytest-archon."""
    session.install("-e", ".[test]")
    session.run("pytest", "tests/architecture", *session.posargs)
