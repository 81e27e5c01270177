"""Functions to convert between str and bytes objects. Used to turn the
data callers hand to write operations into something `os.write` accepts,
and to turn whatever path-like object a caller supplies into a str.

See `the Python 3 glossary on ‘bytes-like object’
<https://docs.python.org/3/glossary.html#term-bytes-like-object>`_ for
details on what it means for an object to be bytes-like."""

from os import fsdecode, fspath


def is_byteslike(obj):
    """Test whether `obj` is a bytes-like object.

    :param obj: The object to test
    :return: Whether the object is bytes-like.
    :rtype: bool"""

    try:
        memoryview(obj)
    except TypeError:
        return False
    else:
        return True


def ensure_byteslike(obj, encoding = 'utf-8'):
    """Encode str obj using `encoding`, return bytes-like objects unchanged.

    :param obj: The object to convert
    :type obj: byteslike or str
    :param str encoding: The encoding to use for str objects.
    :return: The potentially converted input
    :rtype: byteslike"""

    if is_byteslike(obj):
        return obj

    if isinstance(obj, str):
        return obj.encode(encoding)

    raise TypeError("cannot convert '%s' object to bytes" % (type(obj).__name__))


def ensure_str(obj):
    """Convert a path-like object to str. Bytes are decoded with the
    filesystem encoding (and its 'surrogateescape' error handler), str
    objects are returned unchanged.

    :param obj: The object to convert
    :type obj: str or bytes or PathLike
    :return: The converted input
    :rtype: str"""

    if isinstance(obj, str):
        return obj

    try:
        return fsdecode(fspath(obj))
    except TypeError:
        pass

    raise TypeError("cannot convert '%s' object to str" % type(obj).__name__)
