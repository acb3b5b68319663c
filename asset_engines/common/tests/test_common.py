import pytest
from fastapi import HTTPException

from asset_engines.common.errors import DuplicateError, NotFoundError
from asset_engines.common.identity import RequestContext, get_request_context
from asset_engines.common.results import OperationResult, unwrap_or_raise


def test_context_defaults_and_scope(monkeypatch):
    monkeypatch.setenv("APP_ENV", "STAGING")
    monkeypatch.delenv("ENV", raising=False)
    ctx = RequestContext(tenant_id="t_demo")
    assert ctx.scope_key == ("t_demo", "staging", "p_default")


def test_context_rejects_bad_tenant():
    with pytest.raises(ValueError):
        RequestContext(tenant_id="demo")


def test_header_dependency_requires_tenant():
    with pytest.raises(HTTPException) as exc:
        get_request_context(None, None, None, None, None)
    assert exc.value.status_code == 400
    ctx = get_request_context("t_demo", "Prod", "p_expo", None, "req-1")
    assert ctx.scope_key == ("t_demo", "prod", "p_expo")


def test_failed_result_carries_error_fields():
    result = OperationResult.failed(NotFoundError("gone", code="asset.not_found", details={"row": 4}))
    assert not result.success
    assert result.status_code == 404
    assert result.payload["details"] == {"row": 4}


def test_unwrap_raises_envelope():
    ok = OperationResult.ok("fine", values=[1])
    assert unwrap_or_raise(ok, "assets") is ok
    with pytest.raises(HTTPException) as exc:
        unwrap_or_raise(OperationResult.failed(DuplicateError("twice")), "dropdowns")
    assert exc.value.status_code == 409
    error = exc.value.detail["error"]
    assert error["code"] == "duplicate"
    assert error["resource_kind"] == "dropdowns"
