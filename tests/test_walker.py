import os
import shutil
import tempfile
from unittest import TestCase, main, skipUnless

from fakefs import KB, make_tree

from spacescout.errors import CancelledError
from spacescout.walker import WalkSummarizer, directory_size


class WalkerTest(TestCase):
    def setUp(self):
        self.root = tempfile.mkdtemp(prefix="spacescout-walk-")
        self.total = make_tree(self.root, {
            "a/1": 10 * KB,
            "a/b/2": 3 * KB,
            "a/b/c/d/3": 7,
            "e/4": 1,
            "5": 2 * KB,
            "empty": None,
        })

    def tearDown(self):
        shutil.rmtree(self.root, ignore_errors=True)

    def test_exact_size(self):
        self.assertEqual(directory_size(self.root), self.total)
        self.assertEqual(directory_size(os.path.join(self.root, "a")), 13 * KB + 7)

    def test_single_worker(self):
        self.assertEqual(directory_size(self.root, max_workers=1), self.total)

    @skipUnless(hasattr(os, "symlink"), "no symlinks")
    def test_symlinks_not_followed(self):
        os.symlink(os.path.join(self.root, "a"), os.path.join(self.root, "loop"))
        self.assertEqual(directory_size(self.root), self.total)

    def test_cancel(self):
        with self.assertRaises(CancelledError):
            directory_size(self.root, cancel_flag=lambda: True)

    def test_missing_dir_is_empty(self):
        self.assertEqual(directory_size(os.path.join(self.root, "nope")), 0)

    def test_summarizer(self):
        make_tree(self.root, {".hidden/x": 50 * KB})
        entries = WalkSummarizer(max_workers=2).summarize(self.root, limit=10)
        self.assertEqual(entries, [("a", 13 * KB + 7), ("5", 2 * KB), ("e", 1), ("empty", 0)])
        self.assertEqual(len(WalkSummarizer().summarize(self.root, limit=2)), 2)


if __name__ == '__main__':
    main()
