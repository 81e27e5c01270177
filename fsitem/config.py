"""Configuration for fsitem.

Configuration files are plain Python. They are executed in a private
namespace and every global they define becomes a configuration key::

	# fsitem.conf.py
	max_workers = 8
	file_mode = 0o644
	include('/etc/fsitem/local.py')

Values wrapped in `delayed` are computed when they are read, with the
`Config` object as their only argument::

	directory_mode = delayed(lambda cfg: cfg['file_mode'] | 0o111)

Objects expose configuration keys through the `configurable` descriptor,
which falls back to the decorated method when the key is absent."""

from weakref import ref as weakref
from collections import ChainMap

import builtins as builtins_module
builtins = vars(builtins_module)

from fsitem.util import unpath

class _configurable:
	def __init__(self, initializer):
		self._initializer = initializer
		self.__doc__ = initializer.__doc__

	def __get__(self, obj, objtype = None):
		initializer = self._initializer
		name = initializer.__name__

		try:
			config = obj.config
		except AttributeError:
			if obj is None:
				# This typically happens when querying for docstrings,
				# so return something with the appropriate docstring.
				return self
			raise

		try:
			value = config[name]
		except KeyError:
			value = initializer(obj)
		else:
			value = self._validate(obj, objtype, value)

		return self._prepare(obj, objtype, value)

	def _validate(self, obj, objtype, value):
		return self._validator(obj, value)

	def _prepare(self, obj, objtype, value):
		return self._preparator(obj, value)

	# staticmethod because this isn't a method for the property object itself
	@staticmethod
	def _validator(self, value):
		return value

	# staticmethod because this isn't a method for the property object itself
	@staticmethod
	def _preparator(self, value):
		return value

	def validate(self, f):
		self._validator = f
		return self

	def prepare(self, f):
		self._preparator = f
		return self

class configurable(_configurable):
	"""Decorator for a method that supplies the default value of a setting.
	The value configured under the method's name takes precedence, after
	passing it through the function registered with `validate`. Either way
	the result is passed through the function registered with `prepare` and
	cached on the instance."""

	def __get__(self, obj, objtype = None):
		value = super().__get__(obj, objtype)
		if obj is not None:
			setattr(obj, self._initializer.__name__, value)
		return value

class delayed:
	"""Wrap a function that computes a configuration value on access."""

	def __init__(self, f):
		self.f = f

	def __call__(self, *args, **kwargs):
		return self.f(*args, **kwargs)

class subdict(dict):
	"""Subclass dict so that we can weakref it"""

class Config:
	"""Config(*paths, preseed = None)
	Load configuration from zero or more Python files.

	:param paths: Configuration files to execute, in order.
	:type paths: str or bytes or Path
	:param dict preseed: Initial configuration values."""

	def __init__(self, *paths, preseed = None):
		if preseed is None:
			globals = subdict()
		else:
			globals = subdict(preseed)
		self.globals = globals

		extra_builtins = dict(builtins)
		extra_builtins['delayed'] = delayed
		globals['__builtins__'] = extra_builtins
		weak_globals = weakref(globals)

		def include(path):
			path = unpath(path)
			with open(path) as f:
				content = f.read()
			exec(compile(content, path, 'exec'), weak_globals())
		extra_builtins['include'] = include

		for p in paths:
			include(p)

	def __getitem__(self, key):
		if key == '__builtins__':
			raise KeyError(key)
		value = self.globals[key]
		while isinstance(value, delayed):
			value = value(self)
		return value

	def __contains__(self, key):
		return key != '__builtins__' and key in self.globals

	def get(self, key, default = None):
		try:
			return self[key]
		except KeyError:
			return default

	def copy(self):
		dup = type(self)()
		dup.globals = ChainMap({}, self.globals)
		return dup

	def update(self, *args, **kwargs):
		self.globals.update(*args, **kwargs)

	def __repr__(self):
		rep = ["[fsitem config]\n"]
		for key, value in self.globals.items():
			if key == '__builtins__':
				continue
			if isinstance(value, delayed):
				rep.append(key + " = (delayed)\n")
			else:
				rep.append("%s = %s\n" % (key, repr(value)))
		return "".join(rep)
