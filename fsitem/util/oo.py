"""Small object-oriented helpers shared by the entry, handle and runtime
classes: lazily initialized attributes and keyword-argument initialization."""

class _getinitializer:
	"""A non-data descriptor that runs a function as an initializer whenever
	the attribute is accessed and there is no value in the object's `__dict__`
	for it.

	The return value of the initializer is stored in the dict and will be
	returned for future reads of the attribute (unless it is overwritten or
	deleted)."""

	def __init__(self, getfunction):
		self.getfunction = getfunction
		self.__doc__ = getfunction.__doc__

	def __get__(self, obj, objtype = None):
		getfunction = self.getfunction
		name = getfunction.__name__
		try:
			objdict = vars(obj)
		except TypeError:
			if obj is None:
				# This typically happens when querying for docstrings,
				# so return something with the appropriate docstring.
				return self
			raise

		# another thread may have populated the entry in the meantime
		try:
			return objdict[name]
		except KeyError:
			pass
		value = getfunction(obj)
		objdict[name] = value
		return value

def initializer(getfunction):
	"""Decorate a method to make it an initializer for an attribute. The
	function will be called whenever the attribute is accessed and there is no
	value in the object's `__dict__` for it yet.

	The return value is stored in the object's `__dict__` and will be returned
	for future reads of the attribute (unless it is overwritten or deleted)::

		class Item(Initializer):
			@initializer
			def runtime(self):
				return get_runtime()

		item = Item()
		item.runtime # the process-wide runtime
		item = Item(runtime = Runtime())
		item.runtime # the runtime passed in

	:param function getfunction: The function to call whenever the attribute is
		accessed but hasn't been assigned to.
	:return: A descriptor with the described functionality.
	:rtype: fsitem.util.oo._getinitializer"""

	return _getinitializer(getfunction)

class Initializer:
	"""Generic parent class that provides an `__init__` that simply calls
	`setattr` on all its keyword arguments. This allows for easy initialization
	of objects::

		class Example(Initializer):
			pass

		eg = Example(foo = 3, bar = 5)

		print(eg.foo) # prints 3

	Keyword arguments whose value is None are skipped, so that an explicit
	``runtime = None`` falls back to the initializer for that attribute.

	:param dict kwargs: Attributes (and their values) to set.
	"""

	def __init__(self, **kwargs):
		for name, value in kwargs.items():
			if value is not None:
				setattr(self, name, value)
