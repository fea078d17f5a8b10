"""Smoke test for application startup."""


def test_app_imports() -> None:
    """Verify the app can be imported without errors."""
    from cardledger.main import app

    assert app.title == "CardLedger"


def test_all_routers_mounted() -> None:
    """Every ledger surface is reachable from the app."""
    from cardledger.main import app

    paths = {route.path for route in app.routes}

    assert {"/cards", "/grading/graders", "/ownership/{card_id}/transfer", "/health"} <= paths
