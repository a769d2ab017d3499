import pytest

from simplequeue import serialize
from simplequeue.errors import HookError, InvalidHook, QueueError, StorageFailure


def testNoneIsEmpty():
    assert serialize.dumps(None) == ""
    assert serialize.loads("") is None
    assert serialize.loads(None) is None


@pytest.mark.parametrize("value", [
    "sent",
    0,
    False,
    2.5,
    ["a", 1],
    {"to": ["x@example.com"], "count": 1},
])
def testPlainValues(value):
    assert serialize.loads(serialize.dumps(value)) == value


def testTupleAndSet():
    assert serialize.loads(serialize.dumps((1, 2))) == [1, 2]
    assert serialize.loads(serialize.dumps({"b", "a"})) == ["a", "b"]


def testBytesAreDecoded():
    assert serialize.loads(serialize.dumps(b"hi there")) == "hi there"


def testErrorWithContext():
    error = InvalidHook(data={"hook": "send_email"})
    error.add_data(StorageFailure("disk full", code="update_failed"), "update")

    loaded = serialize.loads(serialize.dumps(error))
    assert isinstance(loaded, InvalidHook)
    assert loaded.code == "invalid_hook"
    assert loaded.data["hook"] == "send_email"
    assert isinstance(loaded.data["update"], StorageFailure)
    assert loaded.data["update"].message == "disk full"
    assert loaded == error


def testErrorInsideValue():
    loaded = serialize.loads(serialize.dumps({"errors": [HookError("x")]}))
    assert isinstance(loaded["errors"][0], HookError)


def testUnknownErrorCode():
    loaded = serialize.loads(serialize.dumps(QueueError("odd", code="custom")))
    assert type(loaded) is QueueError
    assert loaded.code == "custom"


def testUnsupported():
    with pytest.raises(TypeError):
        serialize.dumps(object())


def testNonStringKeysRefused():
    with pytest.raises(TypeError):
        serialize.dumps({1: "a"})
    with pytest.raises(TypeError):
        serialize.dumps({"outer": {(1, 2): "a"}})


def testErrorMarkerKeyRefused():
    value = {serialize.ERROR_MARKER: {"code": "hook_failed", "message": "x"}}
    with pytest.raises(TypeError):
        serialize.dumps(value)
