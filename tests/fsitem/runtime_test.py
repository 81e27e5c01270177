from unittest import TestCase, IsolatedAsyncioTestCase, main
from unittest.mock import patch
from tempfile import TemporaryDirectory
from threading import current_thread
from os import path

from fsitem.config import Config, delayed
from fsitem.runtime import Runtime, get_runtime, set_runtime


def write_config(directory, name, content):
    filename = path.join(directory, name)
    with open(filename, 'w') as f:
        f.write(content)
    return filename


class TestConfig(TestCase):
    def test_load(self):
        with TemporaryDirectory() as tmp:
            extra = write_config(tmp, 'extra.py', "encoding = 'latin-1'\n")
            main_conf = write_config(tmp, 'main.py',
                "max_workers = 4\n"
                "file_mode = 0o600\n"
                "directory_mode = delayed(lambda cfg: cfg['file_mode'] | 0o100)\n"
                "include(%r)\n" % (extra,)
            )
            config = Config(main_conf)

        self.assertEqual(config['max_workers'], 4)
        self.assertEqual(config['directory_mode'], 0o700)
        self.assertEqual(config['encoding'], 'latin-1')
        self.assertIn('file_mode', config)
        self.assertNotIn('__builtins__', config)
        self.assertIsNone(config.get('chunk_size'))
        with self.assertRaises(KeyError):
            config['__builtins__']
        self.assertIn('directory_mode = (delayed)', repr(config))

    def test_copy(self):
        config = Config(preseed = dict(max_workers = 2))
        dup = config.copy()
        dup.update(max_workers = 3)
        self.assertEqual(config['max_workers'], 2)
        self.assertEqual(dup['max_workers'], 3)

    def test_delayed(self):
        config = Config(preseed = dict(a = delayed(lambda cfg: 5)))
        self.assertEqual(config['a'], 5)


class TestRuntime(TestCase):
    def test_defaults(self):
        runtime = Runtime(config = Config())
        self.assertEqual(runtime.max_workers, 32)
        self.assertEqual(runtime.file_mode, 0o666)
        self.assertEqual(runtime.directory_mode, 0o777)
        self.assertEqual(runtime.encoding, 'utf-8')
        self.assertEqual(runtime.chunk_size, 65536)

    def test_configured(self):
        runtime = Runtime(config = Config(preseed = dict(max_workers = 2, file_mode = 0o640)))
        self.assertEqual(runtime.max_workers, 2)
        self.assertEqual(runtime.file_mode, 0o640)
        runtime = Runtime(config = Config(), chunk_size = 10)
        self.assertEqual(runtime.chunk_size, 10)

    def test_validation(self):
        with self.assertRaises(RuntimeError):
            Runtime(config = Config(preseed = dict(max_workers = 0))).max_workers
        with self.assertRaises(RuntimeError):
            Runtime(config = Config(preseed = dict(chunk_size = 1.5))).chunk_size
        with self.assertRaises(RuntimeError):
            Runtime(config = Config(preseed = dict(file_mode = 0o100644))).file_mode

    def test_environment(self):
        with TemporaryDirectory() as tmp:
            conf = write_config(tmp, 'fsitem.conf.py', "max_workers = 3\n")
            with patch.dict('os.environ', FSITEM_CONF = conf):
                runtime = Runtime()
                self.assertEqual(runtime.max_workers, 3)

    def test_default_runtime(self):
        runtime = Runtime(config = Config())
        previous = set_runtime(runtime)
        try:
            self.assertIs(get_runtime(), runtime)
        finally:
            set_runtime(previous)
        set_runtime(None)
        try:
            fresh = get_runtime()
            self.assertIsInstance(fresh, Runtime)
            self.assertIs(get_runtime(), fresh)
        finally:
            set_runtime(previous)


class TestRun(IsolatedAsyncioTestCase):
    async def test_run(self):
        runtime = Runtime(config = Config(), max_workers = 1)
        try:
            name = await runtime.run(lambda: current_thread().name)
            self.assertTrue(name.startswith('fsitem'))
            self.assertEqual(await runtime.run(divmod, 7, 2), (3, 1))
            with self.assertRaises(ZeroDivisionError):
                await runtime.run(divmod, 1, 0)
        finally:
            runtime.shutdown()
        self.assertNotIn('executor', vars(runtime))


if __name__ == '__main__':
    main()
