from unittest import IsolatedAsyncioTestCase, main
from tempfile import TemporaryDirectory, gettempdir
from os import mkdir, mkfifo, path, stat, symlink
from os.path import realpath
from socket import socket, AF_UNIX
from shutil import rmtree

from fsitem.filesystem import *
from fsitem.entry import CharacterDevice, Directory, FIFO, File, Socket, SymbolicLink
from fsitem.exceptions import ItemNotFoundError, TypeMismatchError
from fsitem.itemtype import ITEM_TYPE_DIRECTORY, ITEM_TYPE_FILE, ITEM_TYPE_SYMLINK


class TempDirTestCase(IsolatedAsyncioTestCase):
    def setUp(self):
        tmp = TemporaryDirectory()
        self.addCleanup(tmp.cleanup)
        self.root = realpath(tmp.name)

    def tmppath(self, *names):
        return path.join(self.root, *names)


class TestResolve(TempDirTestCase):
    async def test_kinds(self):
        mkdir(self.tmppath('d'))
        with open(self.tmppath('f'), 'w'):
            pass
        mkfifo(self.tmppath('p'))
        symlink('f', self.tmppath('l'))
        sock = socket(AF_UNIX)
        self.addCleanup(sock.close)
        sock.bind(self.tmppath('s'))

        expected = {'d': Directory, 'f': File, 'p': FIFO, 'l': SymbolicLink, 's': Socket}
        for name, cls in expected.items():
            item = await resolve_entry(self.tmppath(name))
            self.assertIs(type(item), cls)
            self.assertEqual(item.path, self.tmppath(name))
        self.assertIs(type(await resolve_entry('/dev/null')), CharacterDevice)

    async def test_typed(self):
        mkdir(self.tmppath('d'))
        with open(self.tmppath('f'), 'w'):
            pass
        symlink('d', self.tmppath('l'))

        self.assertIsInstance(await resolve_directory(self.tmppath('d')), Directory)
        self.assertIsInstance(await resolve_file(self.tmppath('f')), File)

        with self.assertRaises(TypeMismatchError) as cm:
            await resolve_directory(self.tmppath('f'))
        self.assertIs(cm.exception.expected, ITEM_TYPE_DIRECTORY)
        self.assertIs(cm.exception.actual, ITEM_TYPE_FILE)
        self.assertEqual(cm.exception.path, self.tmppath('f'))

        with self.assertRaises(TypeMismatchError) as cm:
            await resolve_file(self.tmppath('d'))
        with self.assertRaises(TypeMismatchError) as cm:
            await resolve_directory(self.tmppath('l'))
        self.assertIs(cm.exception.actual, ITEM_TYPE_SYMLINK)

    async def test_missing(self):
        for resolve in (resolve_entry, resolve_directory, resolve_file):
            with self.assertRaises(ItemNotFoundError):
                await resolve(self.tmppath('missing'))


class TestCreate(TempDirTestCase):
    async def test_create_file(self):
        f = await create_file(self.tmppath('f'), "text")
        self.assertIsInstance(f, File)
        self.assertEqual(await f.read('utf-8'), "text")
        with self.assertRaises(FileExistsError):
            await create_file(self.tmppath('f'), "other")
        self.assertEqual(await f.read('utf-8'), "text")
        await create_file(self.tmppath('f'), "other", exist_ok = True)
        self.assertEqual(await f.read('utf-8'), "other")

    async def test_create_file_parents(self):
        with self.assertRaises(FileNotFoundError):
            await create_file(self.tmppath('a', 'b', 'f'))
        f = await create_file(self.tmppath('a', 'b', 'f'), b'x', parents = True)
        self.assertEqual(await f.read(), b'x')

    async def test_create_file_mode(self):
        f = await create_file(self.tmppath('f'), mode = 0o600)
        self.assertEqual(stat(f).st_mode & 0o777, 0o600)

    async def test_create_directory(self):
        d = await create_directory(self.tmppath('d'))
        self.assertIsInstance(d, Directory)
        self.assertTrue(path.isdir(d.path))
        with self.assertRaises(FileExistsError):
            await create_directory(self.tmppath('d'))
        self.assertEqual((await create_directory(self.tmppath('d'), exist_ok = True)).path, d.path)
        await create_file(self.tmppath('f'))
        with self.assertRaises(FileExistsError):
            await create_directory(self.tmppath('f'), exist_ok = True)
        deep = await create_directory(self.tmppath('x', 'y', 'z'), parents = True)
        self.assertTrue(path.isdir(deep.path))
        await create_directory(self.tmppath('x', 'y', 'z'), parents = True, exist_ok = True)

    async def test_temporary_directory(self):
        d = await create_temporary_directory()
        self.addCleanup(rmtree, d.path)
        self.assertIsInstance(d, Directory)
        self.assertTrue(path.isdir(d.path))
        self.assertEqual(path.dirname(d.path), path.abspath(gettempdir()))

    async def test_temporary_directory_prefix(self):
        d1 = await create_temporary_directory(self.tmppath('build-'))
        d2 = await create_temporary_directory(self.tmppath('build-'))
        self.assertNotEqual(d1.path, d2.path)
        for d in (d1, d2):
            self.assertEqual(path.dirname(d.path), self.root)
            self.assertTrue(d.name.startswith('build-'))
            self.assertTrue(path.isdir(d.path))
            self.assertEqual(stat(d).st_mode & 0o777, 0o700)


class TestRealPath(TempDirTestCase):
    async def test_real_path(self):
        mkdir(self.tmppath('d'))
        symlink('d', self.tmppath('l'))
        self.assertEqual(await real_path(self.tmppath('l', '..', 'l')), self.tmppath('d'))
        with self.assertRaises(ItemNotFoundError):
            await real_path(self.tmppath('missing'))
        symlink('nowhere', self.tmppath('dangling'))
        with self.assertRaises(ItemNotFoundError):
            await real_path(self.tmppath('dangling'))


class TestOpenFile(TempDirTestCase):
    async def test_open_file(self):
        async with open_file(self.tmppath('f'), 'w+', 0o600) as fh:
            await fh.write(b'hello')
            self.assertEqual(await fh.read(None, 0), b'hello')
        self.assertTrue(fh.closed)
        await fh.close()
        f = await resolve_file(self.tmppath('f'))
        self.assertEqual(await f.read(), b'hello')
        with self.assertRaises(FileNotFoundError):
            async with open_file(self.tmppath('missing')):
                pass


if __name__ == '__main__':
    main()
