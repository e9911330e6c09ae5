"""Tests for the reconcile_balances_cli adapter."""

from decimal import Decimal
from unittest.mock import MagicMock

from finledger.adapters import reconcile_balances_cli
from finledger.domain.models.ledger import AccountDrift, ReconciliationResult


def _patch(monkeypatch, result):
    fake_logger = MagicMock()
    service = MagicMock()
    service.reconcile_balances.return_value = result
    monkeypatch.setattr(reconcile_balances_cli, "get_app_logger", lambda: fake_logger)
    monkeypatch.setattr(reconcile_balances_cli, "build_ledger_service", lambda: service)
    return service, fake_logger


def test_main_requires_owner(monkeypatch, capsys):
    service, fake_logger = _patch(monkeypatch, None)
    monkeypatch.delenv("RECONCILE_OWNER_ID", raising=False)

    reconcile_balances_cli.main()

    service.reconcile_balances.assert_not_called()
    fake_logger.warning.assert_called_once()
    assert capsys.readouterr().out == ""


def test_main_reports_drifts_in_dry_run(monkeypatch, capsys):
    """Without RECONCILE_APPLY the drifts are only printed."""
    result = ReconciliationResult(
        owner_id="owner-1",
        checked_accounts=2,
        drifts=[AccountDrift("acct-b", Decimal("55.00"), Decimal("40.00"))],
        applied=False,
    )
    service, _ = _patch(monkeypatch, result)
    monkeypatch.setenv("RECONCILE_OWNER_ID", "owner-1")
    monkeypatch.delenv("RECONCILE_APPLY", raising=False)

    reconcile_balances_cli.main()

    service.reconcile_balances.assert_called_once_with("owner-1", apply=False)
    out = capsys.readouterr().out
    assert "acct-b: cached 55.00 expected 40.00 (delta -15.00)" in out
    assert "Found 1 drifted account(s)." in out


def test_main_applies_repairs_when_requested(monkeypatch, capsys):
    result = ReconciliationResult("owner-1", 3, [], applied=False)
    service, _ = _patch(monkeypatch, result)
    monkeypatch.setenv("RECONCILE_OWNER_ID", "owner-1")
    monkeypatch.setenv("RECONCILE_APPLY", "yes")

    reconcile_balances_cli.main()

    service.reconcile_balances.assert_called_once_with("owner-1", apply=True)
    assert "All 3 accounts of owner-1" in capsys.readouterr().out
