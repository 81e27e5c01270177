"""Command line interface to fsitem.

Each command is a thin wrapper that runs one coroutine of the library with
`asyncio.run`. Relative paths given on the command line are interpreted
relative to the current working directory. Errors are reported on stderr
and make the command exit with status 1."""

import click
import asyncio
from sys import exit
from stat import S_IMODE, S_IRUSR, S_IWUSR, S_IXUSR, S_IRGRP, S_IWGRP, S_IXGRP, S_IROTH, S_IWOTH, S_IXOTH, S_ISUID, S_ISGID, S_ISVTX
from pwd import getpwuid
from grp import getgrgid

from fsitem.entry import FileLikeItem, SymbolicLink, resolve_entry
from fsitem.exceptions import FsItemException, TypeMismatchError
from fsitem.filesystem import create_directory, create_temporary_directory, real_path, resolve_directory
from fsitem.itemtype import ITEM_TYPE_FILE, ITEM_TYPE_SYMLINK, item_type_by_name
from fsitem.util import format_time, tabulate
from fsitem.util.click import OptionalValueCommand, OptionalValueOption

def run(coroutine):
	"""Run a coroutine to completion, turning library and OS errors into an
	error message and exit status 1."""

	try:
		return asyncio.run(coroutine)
	except (FsItemException, OSError) as e:
		click.echo("fsitem: %s" % (e,), err = True)
		exit(1)

def mode_chars(item_type, mode):
	"""Render a type and permission bits the way ``ls -l`` does, e.g.
	``drwxr-xr-x``."""

	return ''.join((
		item_type.lsl_char,
		'r' if mode & S_IRUSR else '-',
		'w' if mode & S_IWUSR else '-',
		('s' if mode & S_IXUSR else 'S') if mode & S_ISUID else ('x' if mode & S_IXUSR else '-'),
		'r' if mode & S_IRGRP else '-',
		'w' if mode & S_IWGRP else '-',
		('s' if mode & S_IXGRP else 'S') if mode & S_ISGID else ('x' if mode & S_IXGRP else '-'),
		'r' if mode & S_IROTH else '-',
		'w' if mode & S_IWOTH else '-',
		('t' if mode & S_IXOTH else 'T') if mode & S_ISVTX else ('x' if mode & S_IXOTH else '-'),
	))

def user_name(uid):
	try:
		return getpwuid(uid).pw_name
	except KeyError:
		return uid

def group_name(gid):
	try:
		return getgrgid(gid).gr_name
	except KeyError:
		return gid

async def _resolve_symlink(path):
	item = await resolve_entry(path)
	if not isinstance(item, SymbolicLink):
		raise TypeMismatchError(item.path, ITEM_TYPE_SYMLINK, item.type)
	return item

@click.group()
def cli():
	"""Inspect and manipulate filesystem entries."""

@cli.command()
@click.argument('path', type = click.Path())
def stat(path):
	"""Show metadata for PATH. Symbolic links are not followed."""

	async def stat():
		item = await resolve_entry(path)
		st = await item.stat()
		rows = [
			("Path", item.path),
			("Type", item.type.name),
			("Size", st.st_size),
			("Mode", "%04o (%s)" % (S_IMODE(st.st_mode), mode_chars(item.type, st.st_mode))),
			("Links", st.st_nlink),
			("Owner", user_name(st.st_uid)),
			("Group", group_name(st.st_gid)),
			("Inode", st.st_ino),
			("Access", format_time(st.st_atime_ns)),
			("Modify", format_time(st.st_mtime_ns)),
			("Change", format_time(st.st_ctime_ns)),
		]
		if isinstance(item, SymbolicLink):
			rows.insert(2, ("Target", await item.readlink()))
		return rows

	print(tabulate(run(stat())))

@cli.command(cls = OptionalValueCommand)
@click.argument('path', type = click.Path(), default = '.')
@click.option('-l', '--long', 'long', is_flag = True,
	help = "Show type, permissions, owner, size and modification time")
@click.option('--type', 'type_name', cls = OptionalValueOption, bare_value = 'file',
	metavar = '[=TYPE]',
	help = "Only list entries of this type (file, directory, symlink, fifo, socket, ...); regular files if no TYPE is given")
def ls(path, long, type_name):
	"""List the children of directory PATH."""

	item_type = None
	if type_name is not None:
		try:
			item_type = item_type_by_name(type_name)
		except FsItemException as e:
			raise click.BadParameter(str(e), param_hint = '--type')

	async def info(child):
		st = await child.stat()
		description = [child.name]
		if isinstance(child, SymbolicLink):
			description.append("->")
			description.append(await child.readlink())
		return (
			mode_chars(child.type, st.st_mode),
			st.st_nlink,
			user_name(st.st_uid),
			group_name(st.st_gid),
			st.st_size,
			format_time(st.st_mtime_ns),
			' '.join(description),
		)

	async def ls():
		directory = await resolve_directory(path)
		children = sorted(await directory.children(item_type), key = lambda c: c.name)
		if not long:
			return [(c.name,) for c in children]
		return await asyncio.gather(*map(info, children))

	rows = run(ls())
	if rows:
		print(tabulate(rows, right = (1, 4)))

@cli.command()
@click.argument('paths', nargs = -1, type = click.Path())
def cat(paths):
	"""Copy the contents of each of PATHS to standard output."""

	binary_stdout = click.get_binary_stream('stdout')

	async def cat():
		for path in paths:
			item = await resolve_entry(await real_path(path))
			if not isinstance(item, FileLikeItem):
				raise TypeMismatchError(item.path, ITEM_TYPE_FILE, item.type)
			async for chunk in item.iter_chunks():
				binary_stdout.write(chunk)
		binary_stdout.flush()

	run(cat())

@cli.command()
@click.argument('source', type = click.Path())
@click.argument('destination', type = click.Path())
def cp(source, destination):
	"""Copy SOURCE to DESTINATION. Directories are copied recursively,
	symbolic links are recreated pointing to the same target."""

	async def cp():
		item = await resolve_entry(source)
		await item.copy(destination, base_cwd = True)

	run(cp())

@cli.command()
@click.argument('source', type = click.Path())
@click.argument('destination', type = click.Path())
def mv(source, destination):
	"""Move SOURCE to DESTINATION."""

	async def mv():
		item = await resolve_entry(source)
		await item.move_to(destination, base_cwd = True)

	run(mv())

@cli.command()
@click.argument('path', type = click.Path())
@click.argument('name')
def rename(path, name):
	"""Give PATH a new NAME within the same directory."""

	async def rename():
		item = await resolve_entry(path)
		await item.rename(name)

	run(rename())

@cli.command()
@click.argument('paths', nargs = -1, required = True, type = click.Path())
@click.option('-p', '--parents', is_flag = True,
	help = "Create missing parent directories")
@click.option('--exist-ok', 'exist_ok', is_flag = True,
	help = "Do not fail if a directory already exists")
def mkdir(paths, parents, exist_ok):
	"""Create the directories PATHS."""

	async def mkdir():
		for path in paths:
			await create_directory(path, parents = parents, exist_ok = exist_ok)

	run(mkdir())

@cli.command()
@click.argument('paths', nargs = -1, required = True, type = click.Path())
@click.option('-r', '--recursive', is_flag = True,
	help = "Remove directories and everything below them")
def rm(paths, recursive):
	"""Remove PATHS. Directories must be empty unless --recursive is given."""

	async def rm():
		for path in paths:
			item = await resolve_entry(path)
			if item.is_directory():
				await item.remove(recursive = recursive)
			else:
				await item.remove()

	run(rm())

@cli.command()
@click.argument('target', type = click.Path())
@click.argument('link', type = click.Path())
@click.option('-s', '--symbolic', is_flag = True,
	help = "Create a symbolic link instead of a hard link")
def ln(target, link, symbolic):
	"""Create LINK, pointing to the existing entry TARGET."""

	async def ln():
		item = await resolve_entry(target)
		if symbolic:
			await item.symlink(link, base_cwd = True)
		else:
			await item.link(link, base_cwd = True)

	run(ln())

@cli.command()
@click.argument('path', type = click.Path())
def readlink(path):
	"""Print the target of symbolic link PATH."""

	async def readlink():
		item = await _resolve_symlink(path)
		return await item.readlink()

	print(run(readlink()))

@cli.command()
@click.argument('path', type = click.Path())
def realpath(path):
	"""Print the canonical absolute path of PATH."""

	print(run(real_path(path)))

@cli.command()
@click.argument('prefix', required = False, type = click.Path())
def mktemp(prefix):
	"""Create a new temporary directory and print its path. PREFIX may
	include a directory part."""

	async def mktemp():
		directory = await create_temporary_directory(prefix)
		return directory.path

	print(run(mktemp()))

@cli.command()
@click.argument('path', type = click.Path())
@click.option('-s', '--size', type = click.IntRange(min = 0), default = 0, show_default = True,
	help = "The new size in bytes")
def truncate(path, size):
	"""Truncate (or extend) the file PATH to the given size."""

	async def truncate():
		item = await resolve_entry(await real_path(path))
		if not isinstance(item, FileLikeItem):
			raise TypeMismatchError(item.path, ITEM_TYPE_FILE, item.type)
		await item.truncate(size)

	run(truncate())

def main():
	exit(cli())
