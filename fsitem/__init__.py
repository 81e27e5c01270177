"""An asynchronous, object-oriented interface to the local filesystem.

Filesystem entries are represented by objects of a class that matches
their kind (`File`, `Directory`, `SymbolicLink`, ...), with coroutine
methods for everything the operating system can do with them. The
blocking system calls run in a thread pool so that the asyncio event loop
stays responsive::

	import asyncio
	from fsitem import resolve_directory

	async def main():
		home = await resolve_directory('/home/user')
		async with home.open() as dh:
			async for f in dh.files():
				print(f.name, await f.size())

	asyncio.run(main())

See `fsitem.entry` for the entry classes, `fsitem.handle` for open file and
directory handles and `fsitem.filesystem` for the functions that create and
look up entries."""

from fsitem.exceptions import *
from fsitem.itemtype import *
from fsitem.runtime import Runtime, get_runtime, set_runtime
from fsitem.config import Config
from fsitem.handle import FileHandle, DirectoryHandle
from fsitem.entry import (
	Item,
	FileLikeItem,
	BlockDevice,
	CharacterDevice,
	Directory,
	FIFO,
	File,
	Socket,
	SymbolicLink,
	make_entry,
)
from fsitem.filesystem import *
