"""The kinds of filesystem entries.

Every entry on a POSIX filesystem is one of seven kinds, recorded in the
file type field (``S_IFMT``) of the ``st_mode`` value that `stat` returns.
This module defines one ITEM_TYPE_* class per kind. The classes are never
instantiated; they are used as constant tags::

	from os import lstat
	from fsitem.itemtype import classify, ITEM_TYPE_DIRECTORY

	if classify(lstat('/tmp').st_mode) is ITEM_TYPE_DIRECTORY:
		...
"""

from stat import S_IFBLK, S_IFCHR, S_IFDIR, S_IFIFO, S_IFLNK, S_IFMT, S_IFREG, S_IFSOCK

from fsitem.exceptions import UnknownItemTypeError

class ItemType:
	"""Base class for the ITEM_TYPE_* classes. Never used directly.

	Each ITEM_TYPE_* class defines several representations of the type for
	use in various contexts:"""

	name = None
	"""Human readable name, also accepted by `item_type_by_name`. Read-only.

	:type: str"""

	stat_num = None
	"""The number used in the S_IFMT part of the stat() st_mode field.
	Read-only.

	:type: int"""

	lsl_char = None
	"""The character used in the output of ``ls -l``. Read-only.

	:type: str"""

	def __init__(self):
		raise TypeError("item types are constants and cannot be instantiated")

class ITEM_TYPE_BLOCKDEVICE(ItemType):
	"""Used for entries that are block devices."""
	name = 'block device'
	stat_num = S_IFBLK
	lsl_char = 'b'

class ITEM_TYPE_CHARDEVICE(ItemType):
	"""Used for entries that are character devices."""
	name = 'character device'
	stat_num = S_IFCHR
	lsl_char = 'c'

class ITEM_TYPE_DIRECTORY(ItemType):
	"""Used for entries that are directories."""
	name = 'directory'
	stat_num = S_IFDIR
	lsl_char = 'd'

class ITEM_TYPE_FIFO(ItemType):
	"""Used for entries that are named pipes."""
	name = 'fifo'
	stat_num = S_IFIFO
	lsl_char = 'p'

class ITEM_TYPE_FILE(ItemType):
	"""Used for entries that are regular files."""
	name = 'file'
	stat_num = S_IFREG
	lsl_char = '-'

class ITEM_TYPE_SOCKET(ItemType):
	"""Used for entries that are UNIX domain sockets."""
	name = 'socket'
	stat_num = S_IFSOCK
	lsl_char = 's'

class ITEM_TYPE_SYMLINK(ItemType):
	"""Used for entries that are symbolic links."""
	name = 'symbolic link'
	stat_num = S_IFLNK
	lsl_char = 'l'

ITEM_TYPES = (
	ITEM_TYPE_BLOCKDEVICE,
	ITEM_TYPE_CHARDEVICE,
	ITEM_TYPE_DIRECTORY,
	ITEM_TYPE_FIFO,
	ITEM_TYPE_FILE,
	ITEM_TYPE_SOCKET,
	ITEM_TYPE_SYMLINK,
)
"""All item types, in no particular order."""

_item_types_by_stat_num = {t.stat_num: t for t in ITEM_TYPES}

_item_types_by_name = {t.name: t for t in ITEM_TYPES}
_item_types_by_name.update(
	blockdevice = ITEM_TYPE_BLOCKDEVICE,
	chardevice = ITEM_TYPE_CHARDEVICE,
	dir = ITEM_TYPE_DIRECTORY,
	pipe = ITEM_TYPE_FIFO,
	symlink = ITEM_TYPE_SYMLINK,
	link = ITEM_TYPE_SYMLINK,
)

def classify(mode):
	"""Determine the item type from a raw ``st_mode`` value. Only the
	S_IFMT bits are considered; permission bits are ignored.

	:param int mode: The mode, as found in `os.stat_result.st_mode`.
	:return: The matching ITEM_TYPE_* class.
	:rtype: type
	:raises UnknownItemTypeError: if the file type bits match no known type."""

	try:
		return _item_types_by_stat_num[S_IFMT(mode)]
	except KeyError:
		raise UnknownItemTypeError(mode) from None

def item_type_by_name(name):
	"""Look up an item type by its (case-insensitive) name, such as
	``'file'``, ``'directory'`` or ``'symlink'``.

	:param str name: The name to look up.
	:return: The matching ITEM_TYPE_* class.
	:rtype: type
	:raises UnknownItemTypeError: if no item type has this name."""

	try:
		return _item_types_by_name[name.strip().lower()]
	except KeyError:
		raise UnknownItemTypeError(name) from None
