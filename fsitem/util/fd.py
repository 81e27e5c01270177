"""Blocking helpers for working with plain POSIX file descriptors. The
asynchronous `fsitem.handle.FileHandle` runs these in the runtime's worker
threads::

	fd = sysopen("/tmp/temprace", O_RDWR|O_CREAT, 0o666)
	write_all(fd, b"hello")
	read_all(fd, 5, 0) # b'hello'

Flags and modes follow `os.open`; in addition, `open_flags` accepts the
short string forms known from other runtimes (``'r'``, ``'w+'``, ``'ax'``,
...)."""

from os import (
	close as os_close,
	open as os_open,
	pread as os_pread,
	pwrite as os_pwrite,
	read as os_read,
	write as os_write,
	O_APPEND,
	O_CLOEXEC,
	O_CREAT,
	O_EXCL,
	O_NOCTTY,
	O_RDONLY,
	O_RDWR,
	O_SYNC,
	O_TRUNC,
	O_WRONLY,
)

from fsitem.util.strbytes import ensure_str

try:
	from os import O_LARGEFILE
except ImportError:
	# that's ok, O_LARGEFILE is just advisory
	O_LARGEFILE = 0

_open_flags = {
	'r': O_RDONLY,
	'rs+': O_RDWR|O_SYNC,
	'r+': O_RDWR,
	'w': O_WRONLY|O_CREAT|O_TRUNC,
	'wx': O_WRONLY|O_CREAT|O_TRUNC|O_EXCL,
	'w+': O_RDWR|O_CREAT|O_TRUNC,
	'wx+': O_RDWR|O_CREAT|O_TRUNC|O_EXCL,
	'a': O_WRONLY|O_CREAT|O_APPEND,
	'ax': O_WRONLY|O_CREAT|O_APPEND|O_EXCL,
	'a+': O_RDWR|O_CREAT|O_APPEND,
	'ax+': O_RDWR|O_CREAT|O_APPEND|O_EXCL,
}
"""Maps the short string forms of open flags to `os.O_*` bitmasks."""

def unpath(obj):
	"""Convert Path-like and bytes objects to str; pass through str objects
	unmodified.

	:param obj: The object to (potentially) convert
	:type obj: str or bytes or PathLike
	:return: the path as a str
	:rtype: str"""
	return ensure_str(obj)

def open_flags(flags):
	"""Translate `flags` into a bitmask for `os.open`. Integers are passed
	through unchanged.

	:param flags: An `os.O_*` bitmask or a short string form such as ``'r+'``.
	:type flags: int or str
	:return: The bitmask.
	:rtype: int"""

	if isinstance(flags, int):
		return flags
	try:
		return _open_flags[flags]
	except KeyError:
		raise ValueError("unknown file open flags '%s'" % (flags,)) from None

def opener(mode = 0o666, **kwargs):
	"""Create an opener suitable for use with the builtin Python `open`
	function's `opener` parameter. See the documentation for Python's `open`
	for details about what this parameter is used for.

	This function returns an opener that will call `os.open` with the supplied
	`mode` and other arguments, as well as the `flags` arguments that Python's
	`open` will provide (bitwise or'd with ``O_CLOEXEC|O_NOCTTY``).

	:param int mode: Integer modes to pass to `os.open`.
	:param dict kwargs: Additional arguments that will be passed to `os.open`.
	:return: A function that is a suitable argument to Python's `open`."""

	def opener(path, flags):
		return os_open(unpath(path), flags|O_CLOEXEC|O_NOCTTY, mode = mode, **kwargs)
	return opener

def sysopen(path, flags, mode = 0o666, large_file = True, controlling_tty = False, inheritable = False):
	"""Open a file using `os.open` and return the plain file descriptor.

	:param path: The filesystem path to open.
	:type path: str or bytes or Path
	:param flags: Flags for `os.open`, see `open_flags`.
	:type flags: int or str
	:param int mode: Permission bits for files created by `os.open`.
	:param bool large_file: Add `O_LARGEFILE` to `flags`.
	:param bool controlling_tty: Do not add `O_NOCTTY` to `flags`.
	:param bool inheritable: Do not add `O_CLOEXEC` to `flags`.
	:return: The file descriptor.
	:rtype: int"""

	flags = open_flags(flags)
	if large_file:
		flags |= O_LARGEFILE
	if not controlling_tty:
		flags |= O_NOCTTY
	if not inheritable:
		flags |= O_CLOEXEC
	return os_open(unpath(path), flags, mode)

def read_all(fd, size = None, position = None, chunk_size = 2 ** 16):
	"""Read bytes from the file descriptor, using as many `os.read` (or
	`os.pread`) operations as necessary to read `size` bytes. The returned
	bytes object may be shorter than `size` if EOF is reached.

	:param int fd: The file descriptor.
	:param size: The number of bytes to read, or None to read until EOF.
	:type size: int or None
	:param position: Read from this offset without moving the file position,
		or from the current position (advancing it) if None.
	:type position: int or None
	:param int chunk_size: How much to request per call when reading until EOF.
	:return: The bytes read from the file descriptor.
	:rtype: bytes"""

	results = []
	while size is None or size > 0:
		request = chunk_size if size is None else size
		if position is None:
			buf = os_read(fd, request)
		else:
			buf = os_pread(fd, request, position)
			position += len(buf)
		if not buf:
			break
		if size is not None:
			size -= len(buf)
		results.append(buf)

	if len(results) == 1:
		return results[0]
	else:
		return b''.join(results)

def write_all(fd, buffer, position = None):
	"""Write a buffer to the file descriptor, using as many `os.write` (or
	`os.pwrite`) operations as necessary to get the whole buffer out.

	:param int fd: The file descriptor.
	:param bytes buffer: The bytes to write to this file descriptor.
	:param position: Write at this offset without moving the file position,
		or at the current position (advancing it) if None.
	:type position: int or None
	:return: The number of bytes written.
	:rtype: int"""

	buffer = memoryview(buffer).cast('B')
	buffer_len = len(buffer)
	offset = 0
	while offset < buffer_len:
		if position is None:
			offset += os_write(fd, buffer[offset:])
		else:
			offset += os_pwrite(fd, buffer[offset:], position + offset)
	return buffer_len

def close_quietly(fd):
	"""Close a file descriptor whose wrapper could not be constructed."""
	try:
		os_close(fd)
	except OSError:
		pass
