# Test doubles for the finder/summarizer interfaces and a helper to lay
# out small real directory trees.
import os

from spacescout.finders import ChildSizeSummarizer, LargeFileFinder

KB = 1024
MB = 1024 * KB


class FakeFinder(LargeFileFinder):
    name = "fake-index"

    def __init__(self, files, available=True, on_find=None):
        self.files = dict(files)
        self._available = available
        self.on_find = on_find
        self.calls = []
        self.results = []

    def available(self):
        return self._available

    def find(self, root, min_size):
        self.calls.append(min_size)
        if self.on_find:
            self.on_find(len(self.calls), min_size)
        hits = sorted(((p, s) for p, s in self.files.items() if s > min_size),
                      key=lambda x: x[1], reverse=True)
        self.results.append(hits)
        return hits


class FakeSummarizer(ChildSizeSummarizer):
    name = "fake-du"

    def __init__(self, entries, on_summarize=None):
        self.entries = list(entries)
        self.on_summarize = on_summarize
        self.calls = 0

    def available(self):
        return True

    def summarize(self, root, limit, cancel_flag=None):
        self.calls += 1
        if self.on_summarize:
            self.on_summarize()
        return sorted(self.entries, key=lambda x: x[1], reverse=True)[:limit]


class EventLog:
    def __init__(self):
        self.events = []

    def __call__(self, event, payload):
        self.events.append((event, payload))

    def of(self, event):
        return [p for e, p in self.events if e == event]


def make_tree(base, layout):
    """Create files below base. layout maps relative paths to sizes; a size
    of None creates a directory."""
    total = 0
    for rel, size in layout.items():
        full = os.path.join(base, rel)
        if size is None:
            os.makedirs(full, exist_ok=True)
            continue
        os.makedirs(os.path.dirname(full), exist_ok=True)
        with open(full, "wb") as f:
            f.write(os.urandom(size))
        total += size
    return total
