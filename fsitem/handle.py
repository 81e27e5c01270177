"""Open file and directory handles.

A handle wraps something the operating system has already opened: a file
descriptor (`FileHandle`) or an incremental directory listing
(`DirectoryHandle`). Handles are normally obtained through the scoped
``open()`` methods of entries, which guarantee that they are closed::

	async with file.open('r+') as fh:
		await fh.write(b'header', position = 0)

	async with directory.open() as dh:
		async for child in dh.files():
			print(child.name)

Closing is idempotent: only the first `close()` reaches the operating
system. Any other operation on a closed handle raises `ValueError`.

Handles provide no locking; a handle must not be used by more than one
task at a time."""

from os import (
	close as os_close,
	fchmod as os_fchmod,
	fchown as os_fchown,
	fdatasync as os_fdatasync,
	fstat as os_fstat,
	fsync as os_fsync,
	ftruncate as os_ftruncate,
	lseek as os_lseek,
	preadv as os_preadv,
	pwritev as os_pwritev,
	readv as os_readv,
	scandir as os_scandir,
	utime as os_utime,
	writev as os_writev,
	SEEK_CUR,
	SEEK_END,
	SEEK_SET,
)
from os.path import join
import sys
from traceback import print_exc

from fsitem.itemtype import classify, ITEM_TYPE_DIRECTORY, ITEM_TYPE_FILE, ITEM_TYPE_SYMLINK
from fsitem.runtime import get_runtime
from fsitem.util import (
	Initializer,
	initializer,
	close_quietly,
	ensure_byteslike,
	read_all,
	sysopen as fd_sysopen,
	timestamp_ns,
	unpath,
	write_all,
)

def _append(fd, buffer):
	os_lseek(fd, 0, SEEK_END)
	return write_all(fd, buffer)

def _readinto(fd, view, position):
	if position is None:
		return os_readv(fd, [view])
	return os_preadv(fd, [view], position)

def _writev(fd, buffers, position):
	if position is None:
		return os_writev(fd, buffers)
	return os_pwritev(fd, buffers, position)

class FileHandle(int):
	"""Wrapper for an open file descriptor. The object is the descriptor
	number itself, so it can be passed to any function that expects one.

	Create objects of this class using the `sysopen` class method, or by
	directly instantiating it with an unmanaged integer file descriptor,
	in which case the handle takes ownership of it. Examples::

		fh = await FileHandle.sysopen('/etc/motd', 'r')

		fh = FileHandle(os.dup(0))

	Forgotten handles close their descriptor when garbage collected."""

	closed = False

	def __del__(self):
		if not self.closed:
			self.closed = True
			close_quietly(self)

	@initializer
	def runtime(self):
		"""The runtime whose worker threads perform the system calls.

		:type: fsitem.runtime.Runtime"""

		return get_runtime()

	@classmethod
	async def sysopen(cls, path, flags = 'r', mode = 0o666, *, runtime = None):
		"""Open a file and return it as a `FileHandle`. The descriptor is
		opened with ``O_CLOEXEC|O_NOCTTY``.

		:param path: The filesystem path to open.
		:type path: str or bytes or Path
		:param flags: `os.O_*` flags or a short string form (``'r'``,
			``'r+'``, ``'w'``, ``'wx'``, ``'a+'``, ...).
		:type flags: int or str
		:param int mode: Permission bits for files created by this call.
		:param runtime: The runtime to use. Defaults to the process-wide one.
		:return: The handle for the opened file.
		:rtype: fsitem.handle.FileHandle"""

		if runtime is None:
			runtime = get_runtime()
		unmanaged_fd = await runtime.run(fd_sysopen, path, flags, mode)
		try:
			handle = cls(unmanaged_fd)
		except BaseException:
			close_quietly(unmanaged_fd)
			raise
		handle.runtime = runtime
		return handle

	async def __aenter__(self):
		return self

	async def __aexit__(self, exc_type, exc_value, traceback):
		await self.close()

	async def close(self):
		"""Close the file descriptor. Using this method ensures that the file
		descriptor number is only closed once."""

		if not self.closed:
			self.closed = True
			await self.runtime.run(os_close, self)

	async def read(self, size = None, position = None):
		"""Read up to `size` bytes. The result is shorter only if EOF is
		reached.

		:param size: The number of bytes to read, or None to read until EOF.
		:type size: int or None
		:param position: Read at this offset, leaving the file position
			alone. If None, read at the file position and advance it.
		:type position: int or None
		:return: The bytes read.
		:rtype: bytes"""

		if self.closed:
			raise ValueError("I/O operation on closed file.")

		return await self.runtime.run(read_all, self, size, position, self.runtime.chunk_size)

	async def readinto(self, buffer, offset = 0, length = None, position = None):
		"""Read into a writable buffer with a single read call.

		:param buffer: The buffer to fill.
		:type buffer: bytearray or memoryview
		:param int offset: Where in `buffer` to start storing data.
		:param length: How many bytes to read at most. Defaults to the rest
			of the buffer.
		:type length: int or None
		:param position: Read at this offset, leaving the file position
			alone. If None, read at the file position and advance it.
		:type position: int or None
		:return: The number of bytes read; 0 at EOF.
		:rtype: int"""

		if self.closed:
			raise ValueError("I/O operation on closed file.")

		view = memoryview(buffer).cast('B')
		if length is None:
			view = view[offset:]
		else:
			view = view[offset:offset + length]
		return await self.runtime.run(_readinto, self, view, position)

	async def write(self, data, position = None, encoding = None):
		"""Write all of `data`, using as many write calls as necessary.

		:param data: The data to write. str is encoded first.
		:type data: bytes or str
		:param position: Write at this offset, leaving the file position
			alone. If None, write at the file position and advance it.
		:type position: int or None
		:param str encoding: The encoding for str data. Defaults to the
			runtime's encoding.
		:return: The number of bytes written.
		:rtype: int"""

		if self.closed:
			raise ValueError("I/O operation on closed file.")

		buffer = ensure_byteslike(data, encoding or self.runtime.encoding)
		return await self.runtime.run(write_all, self, buffer, position)

	async def writev(self, buffers, position = None):
		"""Write a sequence of buffers with a single vectored write call.

		:param buffers: The buffers to write, in order.
		:type buffers: list(bytes)
		:param position: Write at this offset, leaving the file position
			alone. If None, write at the file position and advance it.
		:type position: int or None
		:return: The number of bytes written, which may be less than the
			total length of `buffers`.
		:rtype: int"""

		if self.closed:
			raise ValueError("I/O operation on closed file.")

		return await self.runtime.run(_writev, self, list(buffers), position)

	async def append(self, data, encoding = None):
		"""Move the file position to the end of the file and write all of
		`data` there.

		:param data: The data to append. str is encoded first.
		:type data: bytes or str
		:param str encoding: The encoding for str data.
		:return: The number of bytes written.
		:rtype: int"""

		if self.closed:
			raise ValueError("I/O operation on closed file.")

		buffer = ensure_byteslike(data, encoding or self.runtime.encoding)
		return await self.runtime.run(_append, self, buffer)

	async def seek(self, offset, whence = SEEK_SET):
		"""Move the file position. See `os.lseek`.

		:return: The new file position.
		:rtype: int"""

		if self.closed:
			raise ValueError("I/O operation on closed file.")

		return await self.runtime.run(os_lseek, self, offset, whence)

	async def tell(self):
		"""Return the current file position.

		:rtype: int"""

		return await self.seek(0, SEEK_CUR)

	async def truncate(self, length = 0):
		"""Truncate (or extend) the file to `length` bytes."""

		if self.closed:
			raise ValueError("I/O operation on closed file.")

		return await self.runtime.run(os_ftruncate, self, length)

	async def chmod(self, mode):
		"""Change the permission bits of the open file."""

		if self.closed:
			raise ValueError("I/O operation on closed file.")

		return await self.runtime.run(os_fchmod, self, mode)

	async def chown(self, uid, gid):
		"""Change the owner and group of the open file. Pass -1 to leave
		either one unchanged."""

		if self.closed:
			raise ValueError("I/O operation on closed file.")

		return await self.runtime.run(os_fchown, self, uid, gid)

	async def utime(self, atime, mtime):
		"""Change the access and modification times of the open file.

		:param atime: Seconds since the epoch or a `datetime`.
		:param mtime: Seconds since the epoch or a `datetime`."""

		if self.closed:
			raise ValueError("I/O operation on closed file.")

		ns = (timestamp_ns(atime), timestamp_ns(mtime))
		return await self.runtime.run(os_utime, self, ns = ns)

	async def stat(self):
		"""Retrieve metadata for the open file.

		:rtype: os.stat_result"""

		if self.closed:
			raise ValueError("I/O operation on closed file.")

		return await self.runtime.run(os_fstat, self)

	async def sync(self):
		"""Tell the operating system to flush file contents and metadata to
		stable storage."""

		if self.closed:
			raise ValueError("I/O operation on closed file.")

		return await self.runtime.run(os_fsync, self)

	async def datasync(self):
		"""Tell the operating system to flush file contents to stable storage."""

		if self.closed:
			raise ValueError("I/O operation on closed file.")

		return await self.runtime.run(os_fdatasync, self)

def _child_type(dirent):
	# d_type answers the common cases without another system call
	if dirent.is_symlink():
		return ITEM_TYPE_SYMLINK
	if dirent.is_dir(follow_symlinks = False):
		return ITEM_TYPE_DIRECTORY
	if dirent.is_file(follow_symlinks = False):
		return ITEM_TYPE_FILE
	return classify(dirent.stat(follow_symlinks = False).st_mode)

def _next_child(iterator):
	try:
		dirent = next(iterator)
	except StopIteration:
		return None
	return dirent.name, _child_type(dirent)

class DirectoryHandle(Initializer):
	"""DirectoryHandle(*, path, iterator, runtime = None)
	An open, incremental listing of a directory. Children are read from the
	operating system one at a time, never all at once.

	Use the `opendir` class method to create these objects.

	Iterating over the handle continues from wherever earlier `read` calls
	left off and cannot be restarted: once the listing is exhausted, it
	stays exhausted.

	:param str path: The absolute path of the directory.
	:param iterator: The `os.scandir` iterator to read from."""

	closed = False

	@initializer
	def runtime(self):
		"""The runtime whose worker threads perform the system calls.

		:type: fsitem.runtime.Runtime"""

		return get_runtime()

	@classmethod
	async def opendir(cls, path, *, runtime = None):
		"""Open a directory for incremental listing.

		:param path: The directory to list.
		:type path: str or bytes or Path
		:param runtime: The runtime to use. Defaults to the process-wide one.
		:rtype: fsitem.handle.DirectoryHandle"""

		if runtime is None:
			runtime = get_runtime()
		path = unpath(path)
		iterator = await runtime.run(os_scandir, path)
		return cls(path = path, iterator = iterator, runtime = runtime)

	def __del__(self):
		if not self.closed:
			self.closed = True
			iterator = vars(self).get('iterator')
			if iterator is not None:
				iterator.close()

	async def __aenter__(self):
		return self

	async def __aexit__(self, exc_type, exc_value, traceback):
		if exc_type is None:
			await self.close()
			return
		try:
			await self.close()
		except Exception:
			# keep the original error; a close failure is only reported
			print("W: failed to close directory '%s' while handling another error:" % (self.path,), file = sys.stderr)
			print_exc(file = sys.stderr)

	async def close(self):
		"""Close the directory listing. Only the first call has any effect."""

		if not self.closed:
			self.closed = True
			await self.runtime.run(self.iterator.close)

	async def read(self):
		"""Read the next child of the directory.

		:return: The next child, or None once all children have been read.
		:rtype: fsitem.entry.Item or None"""

		if self.closed:
			raise ValueError("I/O operation on closed directory.")

		child = await self.runtime.run(_next_child, self.iterator)
		if child is None:
			return None
		name, item_type = child

		from fsitem.entry import make_entry
		return make_entry(item_type, join(self.path, name), runtime = self.runtime)

	async def __aiter__(self):
		while True:
			child = await self.read()
			if child is None:
				return
			yield child

	async def of_type(self, item_type):
		"""Iterate over the remaining children of the given item type.

		:param item_type: One of the ITEM_TYPE_* classes."""

		async for child in self:
			if child.type is item_type:
				yield child

	def files(self):
		"""Iterate over the remaining regular files."""
		return self.of_type(ITEM_TYPE_FILE)

	def directories(self):
		"""Iterate over the remaining subdirectories."""
		return self.of_type(ITEM_TYPE_DIRECTORY)
