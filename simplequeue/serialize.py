"""
Serialization of job results for storage.

Results are stored as JSON text.  ``None`` is stored as an empty string so
that a pending job has no results at all.  Queue errors are wrapped in a
marker object so they come back as ``QueueError`` instances, and byte
strings are decoded to text on the way in.  Dicts must have string keys
and may not use the error marker key, so that every stored value reads
back unchanged.
"""

import simplejson as json

from simplequeue.errors import QueueError, fromDict
from simplequeue.utils import autoDecode

ERROR_MARKER = "__queue_error__"


def prepare(value):
    """Return ``value`` converted to plain JSON types."""
    if isinstance(value, QueueError):
        return {ERROR_MARKER: prepare(value.to_dict())}
    if isinstance(value, (bytes, bytearray)):
        return autoDecode(bytes(value))
    if isinstance(value, dict):
        for key in value:
            if not isinstance(key, str):
                raise TypeError("dict keys must be strings, not %s" %
                                type(key).__name__)
        if ERROR_MARKER in value:
            raise TypeError("%r is a reserved key" % ERROR_MARKER)
        return {key: prepare(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [prepare(item) for item in value]
    if isinstance(value, (set, frozenset)):
        return sorted(prepare(item) for item in value)
    return value


def _objectHook(obj):
    if len(obj) == 1 and ERROR_MARKER in obj:
        return fromDict(obj[ERROR_MARKER])
    return obj


def dumps(value) -> str:
    """Serialize a result; raises TypeError for unsupported objects."""
    if value is None:
        return ""
    return json.dumps(prepare(value), sort_keys=True)


def loads(text):
    if text is None or text == "":
        return None
    return json.loads(text, object_hook=_objectHook)
