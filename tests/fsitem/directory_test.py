from unittest import IsolatedAsyncioTestCase, main
from tempfile import TemporaryDirectory
from os import listdir, mkdir, path, readlink, stat, symlink
from os.path import realpath
from errno import ENOTEMPTY, EEXIST
from unittest.mock import patch

import fsitem.entry
from fsitem.entry import Directory, File, SymbolicLink, create_directory, create_file, is_nested, resolve_entry
from fsitem.exceptions import CircularOperationError
from fsitem.itemtype import ITEM_TYPE_SYMLINK


class TempDirTestCase(IsolatedAsyncioTestCase):
    def setUp(self):
        tmp = TemporaryDirectory()
        self.addCleanup(tmp.cleanup)
        self.root = realpath(tmp.name)

    def tmppath(self, *names):
        return path.join(self.root, *names)


class TestIsNested(TempDirTestCase):
    def test_segments(self):
        self.assertTrue(is_nested('/a/b', '/a/b'))
        self.assertTrue(is_nested('/a/b', '/a/b/c'))
        self.assertTrue(is_nested('/a/b/', '/a//b/c'))
        self.assertTrue(is_nested('/', '/a'))
        self.assertFalse(is_nested('/a/b', '/a/bc'))
        self.assertFalse(is_nested('/a/b', '/a'))
        self.assertFalse(is_nested('/a/b', '/x/a/b'))


class TestChildren(TempDirTestCase):
    async def test_single_child(self):
        d = await create_directory(self.tmppath('d'))
        await create_file(self.tmppath('d', 'a.txt'), "hi")
        children = await d.children()
        self.assertEqual(len(children), 1)
        child, = children
        self.assertIsInstance(child, File)
        self.assertEqual(child.name, 'a.txt')
        self.assertEqual(child.path, self.tmppath('d', 'a.txt'))
        self.assertEqual(await child.read('utf-8'), "hi")

    async def test_empty(self):
        d = await create_directory(self.tmppath('d'))
        self.assertEqual(await d.children(), [])

    async def test_filtered(self):
        d = Directory(self.root)
        await d.create_file('f1', b'1')
        await d.create_file('f2', b'2')
        await d.create_directory('sub')
        symlink('f1', self.tmppath('link'))
        self.assertEqual(sorted(c.name for c in await d.children()), ['f1', 'f2', 'link', 'sub'])
        self.assertEqual(sorted(f.name for f in await d.files()), ['f1', 'f2'])
        self.assertEqual([s.name for s in await d.directories()], ['sub'])
        links = await d.children(ITEM_TYPE_SYMLINK)
        self.assertEqual(len(links), 1)
        self.assertIsInstance(links[0], SymbolicLink)

    async def test_missing(self):
        with self.assertRaises(FileNotFoundError):
            await Directory(self.tmppath('missing')).children()

    async def test_open(self):
        d = Directory(self.root)
        await d.create_file('f1', b'1')
        await d.create_directory('sub')
        async with d.open() as dh:
            self.assertEqual(dh.path, self.root)
            names = sorted([c.name async for c in dh])
        self.assertEqual(names, ['f1', 'sub'])
        self.assertTrue(dh.closed)


class TestCreate(TempDirTestCase):
    async def test_create_file_nested(self):
        d = Directory(self.root)
        f = await d.create_file('x/y/z.txt', "data", mode = 0o600)
        self.assertIsInstance(f, File)
        self.assertEqual(f.path, self.tmppath('x', 'y', 'z.txt'))
        self.assertEqual(await f.read(), b'data')
        self.assertEqual(stat(f).st_mode & 0o777, 0o600)
        with self.assertRaises(FileExistsError):
            await d.create_file('x/y/z.txt')
        await d.create_file('x/y/z.txt', b'new', exist_ok = True)
        self.assertEqual(await f.read(), b'new')

    async def test_create_directory(self):
        d = Directory(self.root)
        sub = await d.create_directory('sub', mode = 0o750)
        self.assertIsInstance(sub, Directory)
        self.assertEqual(sub.path, self.tmppath('sub'))
        self.assertEqual(stat(sub).st_mode & 0o777, 0o750)
        with self.assertRaises(FileExistsError):
            await d.create_directory('sub')
        await d.create_directory('sub', exist_ok = True)
        with self.assertRaises(FileNotFoundError):
            await d.create_directory('a/b')
        deep = await d.create_directory('a/b', parents = True)
        self.assertTrue(path.isdir(deep.path))


class TestRemove(TempDirTestCase):
    async def test_remove(self):
        d = await create_directory(self.tmppath('d'))
        await d.create_file('sub/f', b'x')
        with self.assertRaises(OSError) as cm:
            await d.remove()
        self.assertIn(cm.exception.errno, (ENOTEMPTY, EEXIST))
        self.assertTrue(path.isdir(d.path))
        await d.remove(recursive = True)
        self.assertFalse(path.lexists(d.path))

    async def test_remove_empty(self):
        d = await create_directory(self.tmppath('d'))
        await d.remove()
        self.assertFalse(path.lexists(d.path))


class TestCopy(TempDirTestCase):
    async def test_copy_tree(self):
        d = await create_directory(self.tmppath('d'))
        await d.create_file('a.txt', b'a')
        await d.create_file('sub/b.txt', b'b')
        await d.create_directory('sub/empty')
        symlink(self.tmppath('d', 'a.txt'), self.tmppath('d', 'sub', 'link'))

        copy = await d.copy('../d2')
        self.assertIsInstance(copy, Directory)
        self.assertEqual(copy.path, self.tmppath('d2'))
        self.assertEqual(sorted(listdir(copy.path)), ['a.txt', 'sub'])
        self.assertEqual(sorted(listdir(self.tmppath('d2', 'sub'))), ['b.txt', 'empty', 'link'])
        with open(self.tmppath('d2', 'sub', 'b.txt'), 'rb') as fh:
            self.assertEqual(fh.read(), b'b')
        self.assertEqual(readlink(self.tmppath('d2', 'sub', 'link')), self.tmppath('d', 'a.txt'))
        self.assertTrue(path.isdir(self.tmppath('d2', 'sub', 'empty')))
        self.assertEqual(d.path, self.tmppath('d'))

    async def test_copy_absolute(self):
        d = await create_directory(self.tmppath('d'))
        await d.create_file('a.txt', b'a')
        copy = await d.copy(self.tmppath('elsewhere'))
        self.assertEqual(copy.path, self.tmppath('elsewhere'))
        self.assertEqual(listdir(copy.path), ['a.txt'])

    async def test_copy_existing_destination(self):
        d = await create_directory(self.tmppath('d'))
        await create_directory(self.tmppath('d2'))
        with self.assertRaises(FileExistsError):
            await d.copy('../d2')

    async def test_copy_into_itself(self):
        d = await create_directory(self.tmppath('d'))
        await d.create_file('a.txt', b'a')
        destinations = ('.', './sub/x', 'sub', '../d', '../d/deeper', self.tmppath('d', '.', 'x'))
        for destination in destinations:
            with self.assertRaises(CircularOperationError) as cm:
                await d.copy(destination)
            self.assertEqual(cm.exception.source, d.path)
        self.assertEqual(listdir(d.path), ['a.txt'])


class TestMove(TempDirTestCase):
    async def test_move(self):
        d = await create_directory(self.tmppath('d'))
        await d.create_file('a.txt', b'a')
        await d.move_to('../e')
        self.assertEqual(d.path, self.tmppath('e'))
        self.assertEqual(listdir(self.tmppath('e')), ['a.txt'])
        self.assertFalse(path.lexists(self.tmppath('d')))

    async def test_move_into_subdirectory(self):
        d = await create_directory(self.tmppath('d'))
        await d.create_directory('sub')
        with self.assertRaises(CircularOperationError):
            await d.move_to('./sub/x')
        self.assertEqual(d.path, self.tmppath('d'))
        again = await resolve_entry(self.tmppath('d'))
        self.assertIsInstance(again, Directory)
        self.assertEqual(listdir(self.tmppath('d')), ['sub'])

    async def test_move_into_itself(self):
        d = await create_directory(self.tmppath('d'))
        await d.create_directory('sub')
        for destination in ('.', 'sub', '../d/sub/x', self.tmppath('d')):
            with self.assertRaises(CircularOperationError):
                await d.move_to(destination)
        self.assertEqual(d.path, self.tmppath('d'))
        self.assertEqual(listdir(self.tmppath('d')), ['sub'])

    async def test_move_to_sibling_with_prefix(self):
        d = await create_directory(self.tmppath('d'))
        await d.move_to('../dd')
        self.assertEqual(d.path, self.tmppath('dd'))

    async def test_move_base_cwd(self):
        d = await create_directory(self.tmppath('d'))
        with patch.object(fsitem.entry, 'getcwd', lambda: self.root):
            await d.move_to('moved', base_cwd = True)
        self.assertEqual(d.path, self.tmppath('moved'))
        self.assertTrue(path.isdir(self.tmppath('moved')))


if __name__ == '__main__':
    main()
