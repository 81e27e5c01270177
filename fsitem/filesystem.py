"""Entry points for getting at filesystem entries.

Resolve existing paths into entries of the matching class, create new
files and directories, or open a file directly::

	from fsitem.filesystem import resolve_directory, create_temporary_directory

	tmp = await create_temporary_directory('/var/tmp/build-')
	await tmp.create_file('logs/build.txt', "started\\n")
	for child in await tmp.children():
		print(child.name, child.type.name)
"""

from os.path import realpath, split
from tempfile import mkdtemp
from contextlib import asynccontextmanager

from fsitem.entry import Directory, absolute_path, create_directory, create_file, resolve_entry
from fsitem.exceptions import ItemNotFoundError, TypeMismatchError
from fsitem.handle import FileHandle
from fsitem.itemtype import ITEM_TYPE_DIRECTORY, ITEM_TYPE_FILE
from fsitem.runtime import get_runtime
from fsitem.util import unpath

__all__ = (
	'resolve_entry',
	'resolve_directory',
	'resolve_file',
	'create_directory',
	'create_file',
	'create_temporary_directory',
	'real_path',
	'open_file',
)

async def _resolve_typed(path, item_type, runtime):
	item = await resolve_entry(path, runtime = runtime)
	if item.type is not item_type:
		raise TypeMismatchError(item.path, item_type, item.type)
	return item

async def resolve_directory(path, *, runtime = None):
	"""Create an entry for an existing directory.

	:param path: The path of the directory.
	:type path: str or bytes or PathLike
	:raises ItemNotFoundError: if nothing exists at `path`.
	:raises TypeMismatchError: if `path` is not a directory. Symbolic links
		are not followed, so this includes links to directories.
	:rtype: fsitem.entry.Directory"""

	return await _resolve_typed(path, ITEM_TYPE_DIRECTORY, runtime)

async def resolve_file(path, *, runtime = None):
	"""Create an entry for an existing regular file.

	:param path: The path of the file.
	:type path: str or bytes or PathLike
	:raises ItemNotFoundError: if nothing exists at `path`.
	:raises TypeMismatchError: if `path` is not a regular file.
	:rtype: fsitem.entry.File"""

	return await _resolve_typed(path, ITEM_TYPE_FILE, runtime)

def _mkdtemp(prefix):
	if prefix is None:
		return mkdtemp()
	directory, name = split(prefix)
	if not directory:
		return mkdtemp(prefix = name)
	return mkdtemp(prefix = name, dir = absolute_path(directory))

async def create_temporary_directory(prefix = None, *, runtime = None):
	"""Create a new, uniquely named directory, readable and writable only by
	the current user. It is not removed automatically.

	:param prefix: The beginning of the directory's name. It may include a
		directory part, in which case the new directory is created there;
		otherwise it is created in the system's temporary directory.
	:type prefix: str or bytes or PathLike
	:rtype: fsitem.entry.Directory"""

	if runtime is None:
		runtime = get_runtime()
	if prefix is not None:
		prefix = unpath(prefix)
	path = await runtime.run(_mkdtemp, prefix)
	return Directory(path, runtime = runtime)

async def real_path(path, *, runtime = None):
	"""Return the canonical absolute path of `path`, with all symbolic
	links and ``.``/``..`` segments resolved.

	:param path: The path to canonicalize.
	:type path: str or bytes or PathLike
	:raises ItemNotFoundError: if `path` (or a link along the way) does not
		resolve to an existing entry.
	:rtype: str"""

	if runtime is None:
		runtime = get_runtime()
	try:
		return await runtime.run(realpath, unpath(path), strict = True)
	except FileNotFoundError as e:
		raise ItemNotFoundError.from_oserror(e) from e

@asynccontextmanager
async def open_file(path, flags = 'r', mode = None, *, runtime = None):
	"""Open a file by path and yield a `FileHandle` for it, closing it when
	the ``async with`` block is left.

	:param path: The file to open.
	:type path: str or bytes or PathLike
	:param flags: `os.O_*` flags or a short string form (``'r'``, ``'w+'``, ...).
	:type flags: int or str
	:param int mode: Permission bits if the file is created."""

	if runtime is None:
		runtime = get_runtime()
	if mode is None:
		mode = runtime.file_mode
	handle = await FileHandle.sysopen(absolute_path(path), flags, mode, runtime = runtime)
	async with handle:
		yield handle
