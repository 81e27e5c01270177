from unittest import TestCase, main
from stat import S_IFBLK, S_IFCHR, S_IFDIR, S_IFIFO, S_IFLNK, S_IFREG, S_IFSOCK

from fsitem.itemtype import *
from fsitem.exceptions import UnknownItemTypeError, FsItemException


class TestClassify(TestCase):
    def test_all_types(self):
        expected = {
            S_IFBLK: ITEM_TYPE_BLOCKDEVICE,
            S_IFCHR: ITEM_TYPE_CHARDEVICE,
            S_IFDIR: ITEM_TYPE_DIRECTORY,
            S_IFIFO: ITEM_TYPE_FIFO,
            S_IFREG: ITEM_TYPE_FILE,
            S_IFSOCK: ITEM_TYPE_SOCKET,
            S_IFLNK: ITEM_TYPE_SYMLINK,
        }
        for fmt, item_type in expected.items():
            self.assertIs(classify(fmt), item_type)
            self.assertIs(classify(fmt | 0o4755), item_type)
            self.assertEqual(item_type.stat_num, fmt)
        self.assertEqual(len(ITEM_TYPES), 7)
        self.assertEqual(set(ITEM_TYPES), set(expected.values()))

    def test_unknown(self):
        for mode in (0, 0o644, 0o170000, 0o110644):
            with self.assertRaises(UnknownItemTypeError) as cm:
                classify(mode)
            self.assertIsInstance(cm.exception, FsItemException)
            self.assertIn(oct(mode)[2:], str(cm.exception))

    def test_lsl_chars(self):
        self.assertEqual(''.join(t.lsl_char for t in ITEM_TYPES), 'bcdp-sl')

    def test_not_instantiable(self):
        with self.assertRaises(TypeError):
            ITEM_TYPE_FILE()


class TestByName(TestCase):
    def test_names(self):
        for item_type in ITEM_TYPES:
            self.assertIs(item_type_by_name(item_type.name), item_type)
        self.assertIs(item_type_by_name('Symlink'), ITEM_TYPE_SYMLINK)
        self.assertIs(item_type_by_name(' dir '), ITEM_TYPE_DIRECTORY)
        self.assertIs(item_type_by_name('pipe'), ITEM_TYPE_FIFO)

    def test_unknown(self):
        with self.assertRaises(UnknownItemTypeError):
            item_type_by_name('door')


if __name__ == '__main__':
    main()
