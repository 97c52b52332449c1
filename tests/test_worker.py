import os
import shutil
import tempfile
from unittest import TestCase, main

from PySide6.QtCore import QCoreApplication

from fakefs import MB, FakeFinder, FakeSummarizer

from spacescout.cache import FileCache
from spacescout.config import ScanSettings
from spacescout.models import FileNode, ScanProgress
from spacescout.scanner import Scanner
from spacescout.worker import ScanThread


class ScanThreadTest(TestCase):
    @classmethod
    def setUpClass(cls):
        cls.app = QCoreApplication.instance() or QCoreApplication([])

    def setUp(self):
        self.root = tempfile.mkdtemp(prefix="spacescout-qt-")
        files = {os.path.join(self.root, "d", f"f{i}"): (10 + i) * MB for i in range(12)}
        self.scanner = Scanner(ScanSettings(emit_interval=0, home=self.root), cache=FileCache(),
                               index_finder=FakeFinder(files),
                               summarizer=FakeSummarizer([]))
        self.got = {"progress": [], "intermediate": [], "done": [], "error": []}

    def tearDown(self):
        shutil.rmtree(self.root, ignore_errors=True)

    def connect(self, thread):
        for name, seen in self.got.items():
            getattr(thread, name).connect(lambda value, seen=seen: seen.append(value))

    def test_run_emits_signals(self):
        thread = ScanThread(self.root, self.scanner)
        self.connect(thread)
        thread.run()

        self.assertEqual(self.got["error"], [])
        self.assertEqual(len(self.got["done"]), 1)
        tree = self.got["done"][0]
        self.assertIsInstance(tree, FileNode)
        self.assertEqual(tree.name, "Home")
        self.assertTrue(all(isinstance(p, ScanProgress) for p in self.got["progress"]))
        self.assertTrue(self.got["intermediate"])

    def test_error_string(self):
        thread = ScanThread(os.path.join(self.root, "missing"), self.scanner)
        self.connect(thread)
        thread.run()
        self.assertEqual(self.got["done"], [])
        self.assertEqual(len(self.got["error"]), 1)
        self.assertIn("missing", self.got["error"][0])

    def test_cancel(self):
        thread = ScanThread(self.root, self.scanner)
        self.scanner.index_finder.on_find = lambda n, t: thread.cancel()
        self.connect(thread)
        thread.run()
        self.assertEqual(self.got["done"], [])
        self.assertEqual(self.got["error"], ["Scan cancelled"])


if __name__ == '__main__':
    main()
