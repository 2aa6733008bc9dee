from agent_hub.core.exceptions import ConfigurationError, DataUnavailable
from agent_hub.core.results import OperationResult


def test_ok():
    r = OperationResult.ok({"a": 1}, "done")
    assert r.success is True
    assert r.data == {"a": 1}
    assert r.error is None


def test_fail_with_taxonomy_error_carries_class_name():
    r = OperationResult.fail(ConfigurationError("no executor"))
    assert r.success is False
    assert r.error == "ConfigurationError"
    assert r.message == "no executor"

    assert OperationResult.fail(DataUnavailable("x")).error == "DataUnavailable"


def test_fail_with_unexpected_exception():
    r = OperationResult.fail(RuntimeError())
    assert r.success is False
    assert r.message == "RuntimeError"
    assert r.error == "AgentHubError"


def test_fail_with_message():
    r = OperationResult.fail("not found", error="NotFound")
    assert r.message == "not found"
    assert r.error == "NotFound"
