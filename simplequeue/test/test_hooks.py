import pytest

from simplequeue.errors import HookError, QueueError
from simplequeue.hooks import HookRegistry


def testQueueableIndependentOfListeners():
    registry = HookRegistry(queueable=["a"])
    assert registry.is_queueable("a")
    assert not registry.has_listener("a")

    registry.register("b", lambda value: value)
    assert registry.has_listener("b")
    assert not registry.is_queueable("b")

    registry.allow("b")
    registry.disallow("a")
    assert registry.hooks() == ["b"]
    assert registry.is_queueable("b")
    assert not registry.is_queueable("a")


def testPriorityThenRegistrationOrder():
    registry = HookRegistry()
    registry.register("h", lambda value: value + ["late"], priority=20)
    registry.register("h", lambda value: value + ["first"])
    registry.register("h", lambda value: value + ["second"])
    registry.register("h", lambda value: ["early"], priority=1)

    assert registry.dispatch("h") == ["early", "first", "second", "late"]


def testDispatchInputAndNoHandlers():
    registry = HookRegistry()
    assert registry.dispatch("nothing", "unchanged") == "unchanged"

    registry.register("h", lambda value: value)
    assert registry.dispatch("h") is None


@pytest.mark.parametrize("returned", [True, False])
def testErrorStopsChain(returned):
    calls = []
    registry = HookRegistry()

    def failing(value):
        calls.append("failing")
        error = HookError("nope")
        if returned:
            return error
        raise error

    registry.register("h", failing)
    registry.register("h", lambda value: calls.append("after"))

    with pytest.raises(HookError, match="nope"):
        registry.dispatch("h")
    assert calls == ["failing"]


def testOtherExceptionsPropagate():
    registry = HookRegistry()
    registry.register("h", lambda value: 1 / 0)
    with pytest.raises(ZeroDivisionError):
        registry.dispatch("h")


def testReturnedQueueErrorStopsChain():
    registry = HookRegistry()
    registry.register("h", lambda value: QueueError("generic"))
    with pytest.raises(QueueError):
        registry.dispatch("h")


def testDecoratorAndUnregister():
    registry = HookRegistry()

    @registry.handler("h")
    def one(value):
        return 1

    @registry.handler("h")
    def two(value):
        return 2

    assert registry.handlers("h") == [one, two]
    registry.unregister("h", two)
    assert registry.dispatch("h") == 1
    registry.unregister("h", one)
    assert not registry.has_listener("h")

    registry.register("h", one)
    registry.register("h", two)
    registry.unregister("h")
    assert registry.handlers("h") == []
