"""Smoke test for application startup."""


def test_app_imports() -> None:
    """Verify the app can be imported without errors."""
    from decksmith.main import app

    assert app.title == "decksmith"


def test_routes_registered() -> None:
    from decksmith.main import app

    paths = set(app.openapi()["paths"])

    assert {"/health", "/resolve"} <= paths
