"""Represent entries in a filesystem.

Entry objects represent one path on the local filesystem each, tagged with
the kind of object found there (see `fsitem.itemtype`). There is one class
per kind:

* `File`, `BlockDevice`, `CharacterDevice`, `FIFO` and `Socket`, which share
  the file-like operations of `FileLikeItem` (reading, writing, copying
  contents, opening a `FileHandle`);
* `Directory`, which can list, create and copy children;
* `SymbolicLink`, which can report and resolve what it points to.

Entries are cheap, independent views of a path. They cache nothing: every
method queries the operating system again, and two entries for the same
path never share state. The filesystem object itself may be removed or
replaced behind an entry's back, in which case operations on the entry fail
with the usual `FileNotFoundError`.

An entry's path is always absolute. Relative paths are made absolute
against the current working directory at the time the entry is created.
Only `rename` and `move_to` change the path of an existing entry; they do
so in place, after the operating system has carried out the rename.

Use the functions in `fsitem.filesystem` (or `resolve_entry` below) to get
an entry of the right class for an existing path::

	item = await resolve_entry('/etc/hostname')
	if item.is_file():
		print(await item.read('utf-8'))
"""

from os import (
	F_OK,
	access as os_access,
	chmod as os_chmod,
	chown as os_chown,
	close as os_close,
	getcwd,
	link as os_link,
	listdir as os_listdir,
	lstat as os_lstat,
	makedirs as os_makedirs,
	mkdir as os_mkdir,
	readlink as os_readlink,
	rename as os_rename,
	rmdir as os_rmdir,
	stat as os_stat,
	symlink as os_symlink,
	truncate as os_truncate,
	unlink as os_unlink,
	utime as os_utime,
	O_APPEND,
	O_CREAT,
	O_EXCL,
	O_TRUNC,
	O_WRONLY,
	altsep,
	sep,
)
from os.path import basename, dirname, isabs, isdir, join, normpath, splitext
from errno import EXDEV
from shutil import copyfile, copymode, rmtree
from contextlib import asynccontextmanager
from asyncio import gather

from fsitem.exceptions import CircularOperationError, InvalidNameError, ItemNotFoundError, UnknownItemTypeError
from fsitem.handle import DirectoryHandle, FileHandle
from fsitem.itemtype import (
	ITEM_TYPE_BLOCKDEVICE,
	ITEM_TYPE_CHARDEVICE,
	ITEM_TYPE_DIRECTORY,
	ITEM_TYPE_FIFO,
	ITEM_TYPE_FILE,
	ITEM_TYPE_SOCKET,
	ITEM_TYPE_SYMLINK,
	classify,
)
from fsitem.runtime import get_runtime
from fsitem.util import Initializer, initializer, ensure_byteslike, opener, timestamp_ns, unpath, write_all, sysopen

__all__ = (
	'absolute_path',
	'is_nested',
	'Item',
	'FileLikeItem',
	'BlockDevice',
	'CharacterDevice',
	'FIFO',
	'File',
	'Socket',
	'Directory',
	'SymbolicLink',
	'make_entry',
	'resolve_entry',
	'create_directory',
	'create_file',
)

def absolute_path(path, base = None):
	"""Make `path` absolute and normalize it lexically (``..`` segments are
	collapsed without consulting the filesystem, symbolic links are not
	resolved).

	:param path: The path to convert.
	:type path: str or bytes or PathLike
	:param str base: The directory relative paths are interpreted against.
		Defaults to the current working directory.
	:rtype: str"""

	path = unpath(path)
	if not isabs(path):
		path = join(getcwd() if base is None else base, path)
	return normpath(path)

def is_nested(parent, sub):
	"""Determine whether `sub` is `parent` itself or lies somewhere below it,
	by comparing the path segments of both (absolute, normalized) paths.

	:rtype: bool"""

	parent_segments = [s for s in parent.split(sep) if s]
	sub_segments = [s for s in sub.split(sep) if s]
	if len(sub_segments) < len(parent_segments):
		return False
	return sub_segments[:len(parent_segments)] == parent_segments

def _write_file(path, buffer, flags, mode):
	fd = sysopen(path, flags, mode)
	try:
		write_all(fd, buffer)
	finally:
		os_close(fd)

def _read_file(path):
	with open(path, 'rb', opener = opener()) as f:
		return f.read()

def _copy_file(source, destination):
	source_dev = os_stat(source).st_dev
	destination_dev = os_stat(dirname(destination)).st_dev
	if source_dev != destination_dev:
		raise OSError(EXDEV, "Cannot copy across devices", source, None, destination)
	copyfile(source, destination)
	copymode(source, destination)

def _mkdir(path, mode, parents, exist_ok):
	if parents:
		os_makedirs(path, mode, exist_ok = exist_ok)
		return
	try:
		os_mkdir(path, mode)
	except FileExistsError:
		if not exist_ok or not isdir(path):
			raise

class Item(Initializer):
	"""Item(path, *, runtime = None)
	Base class for all filesystem entries. Never instantiated directly.

	:param path: The path of the entry. Relative paths are interpreted
		relative to the current working directory.
	:type path: str or bytes or PathLike
	:param runtime: The runtime to perform operations with. Defaults to the
		process-wide runtime.
	:type runtime: fsitem.runtime.Runtime"""

	type = None
	"""The item type of this entry, one of the ITEM_TYPE_* classes.

	:type: type"""

	follow_symlinks = True
	"""Whether metadata operations act on what a symbolic link points to
	(True) or on the entry itself (False)."""

	def __init__(self, path, **kwargs):
		super().__init__(**kwargs)
		self._path = absolute_path(path)

	@initializer
	def runtime(self):
		"""The runtime whose worker threads perform the system calls.

		:type: fsitem.runtime.Runtime"""

		return get_runtime()

	@property
	def path(self):
		"""The absolute path of this entry.

		:type: str"""

		return self._path

	def _set_path(self, path):
		self._path = path

	def __fspath__(self):
		return self._path

	def __repr__(self):
		return '%s(%r)' % (type(self).__name__, self._path)

	@property
	def name(self):
		"""The final segment of the path.

		:type: str"""

		return basename(self._path)

	@property
	def extension(self):
		"""The extension of the name, including the leading dot, or an
		empty string if there is none.

		:type: str"""

		return splitext(self._path)[1]

	def parent(self):
		"""Return the directory this entry resides in, or None if this entry
		is a filesystem root.

		:rtype: fsitem.entry.Directory or None"""

		path = dirname(self._path)
		if path == self._path:
			return None
		return Directory(path, runtime = self.runtime)

	def current_directory(self):
		"""Return this entry if it is a directory, or its parent otherwise.

		:rtype: fsitem.entry.Directory"""

		if self.is_directory():
			return self
		return self.parent()

	def is_file(self):
		return self.type is ITEM_TYPE_FILE

	def is_directory(self):
		return self.type is ITEM_TYPE_DIRECTORY

	def is_block_device(self):
		return self.type is ITEM_TYPE_BLOCKDEVICE

	def is_character_device(self):
		return self.type is ITEM_TYPE_CHARDEVICE

	def is_symbolic_link(self):
		return self.type is ITEM_TYPE_SYMLINK

	def is_fifo(self):
		return self.type is ITEM_TYPE_FIFO

	def is_socket(self):
		return self.type is ITEM_TYPE_SOCKET

	def _resolve(self, path, base_cwd):
		if base_cwd:
			return absolute_path(path)
		return absolute_path(path, dirname(self._path))

	async def stat(self):
		"""Retrieve metadata for this entry.

		:rtype: os.stat_result"""

		return await self.runtime.run(os_stat, self._path, follow_symlinks = self.follow_symlinks)

	async def link(self, path, base_cwd = False):
		"""Create a hard link to this entry.

		:param path: Where to create the link. Relative paths are interpreted
			relative to this entry's directory.
		:type path: str or bytes or PathLike
		:param bool base_cwd: Interpret a relative `path` relative to the
			current working directory instead.
		:return: An entry for the new link.
		:rtype: same class as this entry"""

		path = self._resolve(path, base_cwd)
		await self.runtime.run(os_link, self._path, path, follow_symlinks = self.follow_symlinks)
		return type(self)(path, runtime = self.runtime)

	async def symlink(self, path, base_cwd = False):
		"""Create a symbolic link that points to this entry's (absolute) path.

		:param path: Where to create the link. Relative paths are interpreted
			relative to this entry's directory.
		:type path: str or bytes or PathLike
		:param bool base_cwd: Interpret a relative `path` relative to the
			current working directory instead.
		:rtype: fsitem.entry.SymbolicLink"""

		path = self._resolve(path, base_cwd)
		await self.runtime.run(os_symlink, self._path, path, target_is_directory = self.is_directory())
		return SymbolicLink(path, runtime = self.runtime)

	async def chmod(self, mode):
		"""Change the permission bits."""

		return await self.runtime.run(os_chmod, self._path, mode, follow_symlinks = self.follow_symlinks)

	async def chown(self, uid, gid):
		"""Change the owner and group. Pass -1 to leave either one unchanged."""

		return await self.runtime.run(os_chown, self._path, uid, gid, follow_symlinks = self.follow_symlinks)

	async def utime(self, atime, mtime):
		"""Change the access and modification times.

		:param atime: Seconds since the epoch or a `datetime`.
		:param mtime: Seconds since the epoch or a `datetime`."""

		ns = (timestamp_ns(atime), timestamp_ns(mtime))
		return await self.runtime.run(os_utime, self._path, ns = ns, follow_symlinks = self.follow_symlinks)

	async def access(self, mode = F_OK):
		"""Test whether the current process may access this entry.

		:param int mode: `os.F_OK` or a combination of `os.R_OK`, `os.W_OK`
			and `os.X_OK`.
		:rtype: bool"""

		return await self.runtime.run(os_access, self._path, mode)

	async def rename(self, name):
		"""Change the name of this entry, keeping it in the same directory.

		:param str name: The new name.
		:raises InvalidNameError: if `name` contains a path separator."""

		name = unpath(name)
		if sep in name or (altsep and altsep in name):
			raise InvalidNameError(name)
		path = join(dirname(self._path), name)
		await self.runtime.run(os_rename, self._path, path)
		self._set_path(normpath(path))

	async def move_to(self, path, base_cwd = False):
		"""Move this entry to a new path, possibly in another directory.

		:param path: The new path. Relative paths are interpreted relative to
			this entry's directory.
		:type path: str or bytes or PathLike
		:param bool base_cwd: Interpret a relative `path` relative to the
			current working directory instead."""

		path = self._resolve(path, base_cwd)
		await self.runtime.run(os_rename, self._path, path)
		self._set_path(path)

	async def copy(self, path, base_cwd = False):
		"""Copy this entry. Implemented by subclasses.

		:rtype: fsitem.entry.Item"""

		raise NotImplementedError(type(self).__qualname__ + '.copy')

class FileLikeItem(Item):
	"""Base class for entries whose contents can be read and written like a
	regular file: files, devices, named pipes and sockets."""

	async def size(self):
		"""The size of the entry in bytes.

		:rtype: int"""

		return (await self.stat()).st_size

	async def remove(self):
		"""Remove this entry from its directory."""

		return await self.runtime.run(os_unlink, self._path)

	unlink = remove

	async def read(self, encoding = None):
		"""Read the entire contents.

		:param str encoding: Decode the contents using this encoding.
		:return: The contents, as bytes, or as str if `encoding` was given.
		:rtype: bytes or str"""

		data = await self.runtime.run(_read_file, self._path)
		if encoding is None:
			return data
		return data.decode(encoding)

	async def iter_chunks(self, chunk_size = None):
		"""Read the contents in chunks, without loading them all at once.

		:param int chunk_size: The size of each chunk (the last one may be
			shorter). Defaults to the runtime's `chunk_size`."""

		if chunk_size is None:
			chunk_size = self.runtime.chunk_size
		async with self.open('r') as fh:
			while True:
				chunk = await fh.read(chunk_size)
				if not chunk:
					return
				yield chunk

	async def _write(self, data, encoding, mode, flags):
		buffer = ensure_byteslike(data, encoding or self.runtime.encoding)
		if mode is None:
			mode = self.runtime.file_mode
		await self.runtime.run(_write_file, self._path, buffer, flags, mode)

	async def write(self, data, encoding = None, mode = None):
		"""Replace the contents, creating the file if it does not exist.

		:param data: The new contents. str is encoded first.
		:type data: bytes or str
		:param str encoding: The encoding for str data.
		:param int mode: Permission bits if the file is created."""

		await self._write(data, encoding, mode, O_WRONLY|O_CREAT|O_TRUNC)

	async def append(self, data, encoding = None, mode = None):
		"""Append to the contents, creating the file if it does not exist.

		:param data: The data to append. str is encoded first.
		:type data: bytes or str
		:param str encoding: The encoding for str data.
		:param int mode: Permission bits if the file is created."""

		await self._write(data, encoding, mode, O_WRONLY|O_CREAT|O_APPEND)

	async def write_chunks(self, chunks, encoding = None, mode = None, append = False):
		"""Write chunks as they arrive through a single `FileHandle`,
		without collecting them first. The file is created if it does not
		exist::

			async def lines():
				for i in range(3):
					yield "line %d\\n" % i

			await file.write_chunks(lines())

		:param chunks: The data to write, in order. str chunks are encoded.
		:type chunks: iterable or async iterable of bytes or str
		:param str encoding: The encoding for str chunks.
		:param int mode: Permission bits if the file is created.
		:param bool append: Add to the existing contents instead of
			replacing them.
		:return: The number of bytes written.
		:rtype: int"""

		written = 0
		async with self.open('a' if append else 'w', mode) as fh:
			if hasattr(chunks, '__aiter__'):
				async for chunk in chunks:
					written += await fh.write(chunk, encoding = encoding)
			else:
				for chunk in chunks:
					written += await fh.write(chunk, encoding = encoding)
		return written

	async def truncate(self, length = 0):
		"""Truncate (or extend) the contents to `length` bytes."""

		return await self.runtime.run(os_truncate, self._path, length)

	async def copy(self, path, base_cwd = False):
		"""Copy the contents and permission bits to a new file.

		The destination must be on the same device as this entry; otherwise
		an `OSError` with errno `EXDEV` is raised and nothing is copied.

		:param path: The destination. Relative paths are interpreted relative
			to this entry's directory.
		:type path: str or bytes or PathLike
		:param bool base_cwd: Interpret a relative `path` relative to the
			current working directory instead.
		:return: An entry for the copy.
		:rtype: fsitem.entry.Item"""

		path = self._resolve(path, base_cwd)
		await self.runtime.run(_copy_file, self._path, path)
		return await resolve_entry(path, runtime = self.runtime)

	@asynccontextmanager
	async def open(self, flags = 'r', mode = None):
		"""Open this entry and yield a `FileHandle` for it. The handle is
		closed when the ``async with`` block is left, however that happens::

			async with file.open('r+') as fh:
				data = await fh.read(16, position = 0)

		:param flags: `os.O_*` flags or a short string form (``'r'``,
			``'r+'``, ``'w'``, ``'wx'``, ``'a+'``, ...).
		:type flags: int or str
		:param int mode: Permission bits if the file is created."""

		if mode is None:
			mode = self.runtime.file_mode
		handle = await FileHandle.sysopen(self._path, flags, mode, runtime = self.runtime)
		async with handle:
			yield handle

class BlockDevice(FileLikeItem):
	"""A block device node."""
	type = ITEM_TYPE_BLOCKDEVICE

class CharacterDevice(FileLikeItem):
	"""A character device node."""
	type = ITEM_TYPE_CHARDEVICE

class FIFO(FileLikeItem):
	"""A named pipe."""
	type = ITEM_TYPE_FIFO

class File(FileLikeItem):
	"""A regular file."""
	type = ITEM_TYPE_FILE

class Socket(FileLikeItem):
	"""A UNIX domain socket."""
	type = ITEM_TYPE_SOCKET

class Directory(Item):
	"""A directory."""

	type = ITEM_TYPE_DIRECTORY

	async def remove(self, recursive = False):
		"""Remove this directory.

		:param bool recursive: Remove everything below it as well. Without
			this flag the directory must be empty."""

		if recursive:
			return await self.runtime.run(rmtree, self._path)
		return await self.runtime.run(os_rmdir, self._path)

	async def children(self, item_type = None):
		"""Return entries for all children of this directory, in arbitrary
		order. The children are resolved concurrently; if any of them fails,
		the whole call fails.

		:param item_type: Only return children of this type.
		:type item_type: one of the ITEM_TYPE_* classes, or None
		:rtype: list(fsitem.entry.Item)"""

		names = await self.runtime.run(os_listdir, self._path)
		items = await gather(*(resolve_entry(join(self._path, n), runtime = self.runtime) for n in names))
		if item_type is None:
			return list(items)
		return [i for i in items if i.type is item_type]

	def files(self):
		"""Return entries for all regular files in this directory.

		:rtype: list(fsitem.entry.File)"""
		return self.children(ITEM_TYPE_FILE)

	def directories(self):
		"""Return entries for all subdirectories of this directory.

		:rtype: list(fsitem.entry.Directory)"""
		return self.children(ITEM_TYPE_DIRECTORY)

	async def create_file(self, path, data = b'', encoding = None, mode = None, exist_ok = False):
		"""Create a file below this directory, creating any missing
		intermediate directories.

		:param path: The path of the new file, relative to this directory.
		:type path: str or bytes or PathLike
		:param data: The initial contents. str is encoded first.
		:type data: bytes or str
		:param str encoding: The encoding for str data.
		:param int mode: Permission bits for the new file.
		:param bool exist_ok: Overwrite an existing file instead of failing.
		:rtype: fsitem.entry.File"""

		path = absolute_path(path, self._path)
		await self.runtime.run(_mkdir, dirname(path), self.runtime.directory_mode, True, True)
		return await create_file(path, data, encoding = encoding, mode = mode, exist_ok = exist_ok, runtime = self.runtime)

	async def create_directory(self, path, mode = None, parents = False, exist_ok = False):
		"""Create a directory below this directory.

		:param path: The path of the new directory, relative to this directory.
		:type path: str or bytes or PathLike
		:param int mode: Permission bits for the new directory.
		:param bool parents: Create missing intermediate directories.
		:param bool exist_ok: Do not fail if the directory already exists.
		:rtype: fsitem.entry.Directory"""

		path = absolute_path(path, self._path)
		return await create_directory(path, mode = mode, parents = parents, exist_ok = exist_ok, runtime = self.runtime)

	@asynccontextmanager
	async def open(self):
		"""Open this directory and yield a `DirectoryHandle` for reading its
		children one at a time. The handle is closed when the ``async with``
		block is left::

			async with directory.open() as dh:
				async for child in dh:
					...

		If closing fails while an exception from the block is already being
		propagated, the close error is reported on stderr and the original
		exception is propagated instead."""

		handle = await DirectoryHandle.opendir(self._path, runtime = self.runtime)
		async with handle:
			yield handle

	def _check_circular(self, path):
		if is_nested(self._path, path):
			raise CircularOperationError(self._path, path)

	def _resolve_destination(self, path, base_cwd):
		if base_cwd:
			return absolute_path(path)
		return absolute_path(path, self._path)

	async def move_to(self, path, base_cwd = False):
		"""Move this directory to a new path.

		:param path: The new path. Relative paths are interpreted relative to
			this directory itself, so ``'../archive'`` names a sibling and
			``'./sub/x'`` would lie inside it.
		:type path: str or bytes or PathLike
		:param bool base_cwd: Interpret a relative `path` relative to the
			current working directory instead.
		:raises CircularOperationError: if the new path is this directory or
			lies below it. Nothing is changed in that case."""

		path = self._resolve_destination(path, base_cwd)
		self._check_circular(path)
		await super().move_to(path, True)

	async def copy(self, path, base_cwd = False):
		"""Copy this directory and everything below it.

		The destination directory is created first (it must not exist yet),
		then every child is copied into it, recursively. If copying fails
		halfway, whatever was copied so far is left in place.

		:param path: The destination. Relative paths are interpreted relative
			to this directory itself, as with `move_to`.
		:type path: str or bytes or PathLike
		:param bool base_cwd: Interpret a relative `path` relative to the
			current working directory instead.
		:raises CircularOperationError: if the destination is this directory or
			lies below it. Nothing is created in that case.
		:rtype: fsitem.entry.Directory"""

		path = self._resolve_destination(path, base_cwd)
		self._check_circular(path)

		destination = await create_directory(path, runtime = self.runtime)
		for child in await self.children():
			await child.copy(join(destination.path, child.name), True)
		return destination

class SymbolicLink(Item):
	"""A symbolic link. Metadata operations (`stat`, `chmod`, `chown`,
	`utime`, `link`) act on the link itself, not on what it points to."""

	type = ITEM_TYPE_SYMLINK
	follow_symlinks = False

	async def readlink(self):
		"""Return the path this link points to, exactly as stored.

		:rtype: str"""

		return await self.runtime.run(os_readlink, self._path)

	async def target(self):
		"""Return an entry for whatever this link points to. Only one level
		is resolved: if the target is itself a symbolic link, a
		`SymbolicLink` is returned.

		:raises ItemNotFoundError: if the link is dangling.
		:rtype: fsitem.entry.Item"""

		target = await self.readlink()
		return await resolve_entry(absolute_path(target, dirname(self._path)), runtime = self.runtime)

	async def remove(self):
		"""Remove the link (not its target)."""

		return await self.runtime.run(os_unlink, self._path)

	unlink = remove

	async def copy(self, path, base_cwd = False):
		"""Create a new symbolic link at `path` that points to the (absolute
		path of the) current target of this link.

		:param path: The destination. Relative paths are interpreted relative
			to this link's directory.
		:type path: str or bytes or PathLike
		:param bool base_cwd: Interpret a relative `path` relative to the
			current working directory instead.
		:raises ItemNotFoundError: if the link is dangling.
		:rtype: fsitem.entry.SymbolicLink"""

		path = self._resolve(path, base_cwd)
		target = await self.target()
		return await target.symlink(path, True)

_classes_by_type = {c.type: c for c in (
	BlockDevice,
	CharacterDevice,
	Directory,
	FIFO,
	File,
	Socket,
	SymbolicLink,
)}

def make_entry(item_type, path, *, runtime = None):
	"""Create an entry of the class that corresponds to `item_type`. The
	filesystem is not consulted.

	:param item_type: One of the ITEM_TYPE_* classes.
	:param path: The path of the entry.
	:type path: str or bytes or PathLike
	:rtype: fsitem.entry.Item"""

	try:
		cls = _classes_by_type[item_type]
	except KeyError:
		raise UnknownItemTypeError(getattr(item_type, 'name', item_type)) from None
	return cls(path, runtime = runtime)

async def resolve_entry(path, *, runtime = None):
	"""Create an entry for an existing path, of the class that matches what
	is found there. Symbolic links are not followed: if `path` is a symbolic
	link, a `SymbolicLink` is returned.

	:param path: The path to look up.
	:type path: str or bytes or PathLike
	:param runtime: The runtime to use. Defaults to the process-wide one.
	:raises ItemNotFoundError: if nothing exists at `path`.
	:rtype: fsitem.entry.Item"""

	if runtime is None:
		runtime = get_runtime()
	path = absolute_path(path)
	try:
		st = await runtime.run(os_lstat, path)
	except FileNotFoundError as e:
		raise ItemNotFoundError.from_oserror(e) from e
	return make_entry(classify(st.st_mode), path, runtime = runtime)

async def create_directory(path, mode = None, parents = False, exist_ok = False, *, runtime = None):
	"""Create a directory and return an entry for it.

	:param path: The path of the new directory.
	:type path: str or bytes or PathLike
	:param int mode: Permission bits. Defaults to the runtime's `directory_mode`.
	:param bool parents: Create missing intermediate directories.
	:param bool exist_ok: Do not fail if the directory already exists.
	:rtype: fsitem.entry.Directory"""

	if runtime is None:
		runtime = get_runtime()
	if mode is None:
		mode = runtime.directory_mode
	path = absolute_path(path)
	await runtime.run(_mkdir, path, mode, parents, exist_ok)
	return Directory(path, runtime = runtime)

async def create_file(path, data = b'', encoding = None, mode = None, parents = False, exist_ok = False, *, runtime = None):
	"""Create a regular file with the given contents and return an entry
	for it.

	:param path: The path of the new file.
	:type path: str or bytes or PathLike
	:param data: The initial contents. str is encoded first.
	:type data: bytes or str
	:param str encoding: The encoding for str data. Defaults to the
		runtime's `encoding`.
	:param int mode: Permission bits. Defaults to the runtime's `file_mode`.
	:param bool parents: Create missing intermediate directories.
	:param bool exist_ok: Overwrite an existing file instead of raising
		`FileExistsError`.
	:rtype: fsitem.entry.File"""

	if runtime is None:
		runtime = get_runtime()
	if mode is None:
		mode = runtime.file_mode
	path = absolute_path(path)
	buffer = ensure_byteslike(data, encoding or runtime.encoding)
	if parents:
		await runtime.run(_mkdir, dirname(path), runtime.directory_mode, True, True)
	flags = O_WRONLY|O_CREAT|(O_TRUNC if exist_ok else O_EXCL)
	await runtime.run(_write_file, path, buffer, flags, mode)
	return File(path, runtime = runtime)
