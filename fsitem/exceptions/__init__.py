class FsItemException(Exception):
	"""Abstract base class for fsitem exceptions"""

class NotFoundError(FsItemException):
	"""
	Abstract base class for fsitem exceptions that indicate
	something was not found.
	"""

class ItemNotFoundError(NotFoundError, FileNotFoundError):
	"""Indicates that a path does not resolve to any filesystem entry.

	Constructed like `OSError` (errno, strerror, filename) so that it can
	still be handled as a `FileNotFoundError`."""

	@classmethod
	def from_oserror(cls, e):
		return cls(e.errno, e.strerror, e.filename)

	def __str__(self):
		return f"No such file or directory: '{self.filename}'"

class TypeMismatchError(FsItemException, ValueError):
	"""Indicates that an entry is not of the type the caller required.

	:param str path: The path of the entry.
	:param expected: The required item type.
	:param actual: The item type the entry turned out to have."""

	def __init__(self, path, expected, actual):
		super().__init__(path, expected, actual)
		self.path = path
		self.expected = expected
		self.actual = actual

	def __str__(self):
		return f"'{self.path}' is a {self.actual.name}, not a {self.expected.name}"

class InvalidNameError(FsItemException, ValueError):
	"""Indicates that a new name for an entry contains a path separator"""

	def __str__(self):
		return f"Invalid name '{self.args[0]}': names must not contain path separators"

class CircularOperationError(FsItemException, ValueError):
	"""Indicates an attempt to copy or move a directory onto itself or into
	one of its own descendants"""

	def __init__(self, source, destination):
		super().__init__(source, destination)
		self.source = source
		self.destination = destination

	def __str__(self):
		return f"Cannot copy or move '{self.source}' into itself ('{self.destination}')"

class UnknownItemTypeError(FsItemException, ValueError):
	"""Indicates that the file type bits of a mode (or a type name) match
	none of the known item types"""

	def __str__(self):
		value = self.args[0]
		if isinstance(value, int):
			return f"Unknown item type in mode {value:#o}"
		return f"Unknown item type '{value}'"
