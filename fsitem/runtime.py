"""The runtime bridges the blocking `os` interface to asyncio.

Every filesystem operation in fsitem is a coroutine. The actual system
call is made in a worker thread of the runtime's executor, so the event
loop is never blocked on I/O. The runtime also carries the user-configurable
settings (default permission bits, text encoding, worker count, ...).

Entries and handles use the process-wide runtime returned by `get_runtime`
unless they are given one explicitly::

	runtime = Runtime(config = Config('fsitem.conf.py'))
	item = await resolve_entry('/tmp', runtime = runtime)
"""

from os import getenv
from functools import partial
from asyncio import get_running_loop
from concurrent.futures import ThreadPoolExecutor
from threading import Lock

from fsitem.util import Initializer, initializer
from fsitem.config import Config, configurable

class Runtime(Initializer):
	"""Runtime(*, config = None, **settings)
	Settings and worker threads for filesystem operations.

	:param config: The configuration to take settings from. Defaults to the
		file named by ``$FSITEM_CONF``, if set.
	:type config: fsitem.config.Config
	:param settings: Explicit values for any of the configurable settings;
		these take precedence over the configuration."""

	@initializer
	def config(self):
		"""The configuration, loaded from the file named by the
		``$FSITEM_CONF`` environment variable. Empty if that variable is
		not set.

		:type: fsitem.config.Config"""

		CONF = getenv('FSITEM_CONF')
		if CONF is None:
			return Config()
		return Config(CONF)

	@configurable
	def max_workers(self):
		"""The number of I/O worker threads used to run system calls.
		Defaults to 32.

		This property is user-configurable.

		:type: int"""

		return 32

	@max_workers.validate
	def max_workers(self, value):
		intvalue = int(value)
		if intvalue != value or value < 1:
			raise RuntimeError("max_workers must be a strictly positive integer")
		return intvalue

	@configurable
	def file_mode(self):
		"""Permission bits for newly created files (before the umask is
		applied). Defaults to 0o666.

		This property is user-configurable.

		:type: int"""

		return 0o666

	@file_mode.validate
	def file_mode(self, value):
		if value != value & 0o7777:
			raise RuntimeError("file_mode must only contain permission bits")
		return int(value)

	@configurable
	def directory_mode(self):
		"""Permission bits for newly created directories (before the umask is
		applied). Defaults to 0o777.

		This property is user-configurable.

		:type: int"""

		return 0o777

	@directory_mode.validate
	def directory_mode(self, value):
		if value != value & 0o7777:
			raise RuntimeError("directory_mode must only contain permission bits")
		return int(value)

	@configurable
	def encoding(self):
		"""The text encoding used when str data is written or a text read
		is requested without an explicit encoding. Defaults to UTF-8.

		This property is user-configurable.

		:type: str"""

		return 'utf-8'

	@configurable
	def chunk_size(self):
		"""The size of the chunks yielded by chunked reads. Defaults to 64KiB.

		This property is user-configurable.

		:type: int"""

		return 2 ** 16

	@chunk_size.validate
	def chunk_size(self, value):
		intvalue = int(value)
		if intvalue != value or value < 1:
			raise RuntimeError("chunk_size must be a strictly positive integer")
		return intvalue

	@initializer
	def executor(self):
		"""A `ThreadPoolExecutor` with `max_workers` threads, in which all
		blocking system calls are performed.

		:type: concurrent.futures.ThreadPoolExecutor"""

		return ThreadPoolExecutor(max_workers = self.max_workers, thread_name_prefix = 'fsitem')

	async def run(self, func, *args, **kwargs):
		"""Call `func` in a worker thread and wait for it to finish.

		:param function func: The blocking function to call.
		:return: Whatever `func` returns; exceptions are propagated."""

		loop = get_running_loop()
		return await loop.run_in_executor(self.executor, partial(func, *args, **kwargs))

	def shutdown(self, wait = True):
		"""Stop the worker threads. The executor is recreated if the runtime
		is used again afterwards."""

		executor = vars(self).pop('executor', None)
		if executor is not None:
			executor.shutdown(wait = wait)

_runtime = None
_runtime_lock = Lock()

def get_runtime():
	"""Return the process-wide default runtime, creating it on first use.

	:rtype: fsitem.runtime.Runtime"""

	global _runtime
	with _runtime_lock:
		if _runtime is None:
			_runtime = Runtime()
		return _runtime

def set_runtime(runtime):
	"""Replace the process-wide default runtime. Returns the previous one,
	which is not shut down.

	:param runtime: The new default, or None to create a fresh one on next use.
	:type runtime: fsitem.runtime.Runtime or None
	:rtype: fsitem.runtime.Runtime or None"""

	global _runtime
	with _runtime_lock:
		previous = _runtime
		_runtime = runtime
		return previous
