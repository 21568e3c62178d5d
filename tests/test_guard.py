import os
import tempfile
import unittest
from pathlib import Path

from liveserver.guard import Rejected, Safe, guard


class GuardTests(unittest.TestCase):
    def setUp(self) -> None:
        tmp = tempfile.TemporaryDirectory()
        self.addCleanup(tmp.cleanup)
        self.outside = Path(tmp.name).resolve()
        self.root = self.outside / "site"
        (self.root / "css").mkdir(parents=True)
        (self.root / "index.html").write_text("<html></html>", encoding="utf-8")
        (self.root / "css" / "style.css").write_text("body {}", encoding="utf-8")
        (self.root / "a..b.txt").write_text("dots", encoding="utf-8")
        (self.outside / "secret.txt").write_text("secret", encoding="utf-8")

    def test_resolves_entries_inside_root(self) -> None:
        self.assertEqual(guard("/index.html", self.root), Safe(self.root / "index.html"))
        self.assertEqual(guard("/css/style.css", self.root), Safe(self.root / "css" / "style.css"))
        self.assertEqual(guard("/", self.root), Safe(self.root))

    def test_decodes_percent_escapes(self) -> None:
        self.assertEqual(guard("/%69ndex.html", self.root), Safe(self.root / "index.html"))
        self.assertEqual(guard("/css%2Fstyle.css", self.root), Safe(self.root / "css" / "style.css"))

    def test_double_dots_inside_a_name_are_allowed(self) -> None:
        self.assertEqual(guard("/a..b.txt", self.root), Safe(self.root / "a..b.txt"))

    def test_rejects_traversal_in_every_encoding(self) -> None:
        attempts = [
            "/../secret.txt",
            "/../../etc/passwd",
            "/%2e%2e/secret.txt",
            "/%2e%2e%2fsecret.txt",
            "/%2E%2E%2F%2E%2E%2Fetc%2Fpasswd",
            "/css/../../secret.txt",
            "/..%5csecret.txt",
        ]
        for attempt in attempts:
            with self.subTest(attempt=attempt), self.assertLogs("liveserver.guard", "WARNING"):
                self.assertIsInstance(guard(attempt, self.root), Rejected)

    def test_rejects_embedded_nul(self) -> None:
        with self.assertLogs("liveserver.guard", "WARNING"):
            self.assertIsInstance(guard("/index.html%00.png", self.root), Rejected)

    def test_missing_entry_raises_not_found(self) -> None:
        with self.assertRaises(FileNotFoundError):
            guard("/nope.html", self.root)
        with self.assertRaises(FileNotFoundError):
            guard("/index.html/child", self.root)

    @unittest.skipUnless(hasattr(os, "symlink"), "symlinks are required")
    def test_rejects_symlink_escaping_root(self) -> None:
        link = self.root / "leak.txt"
        try:
            os.symlink(self.outside / "secret.txt", link)
        except OSError:
            self.skipTest("cannot create symlinks here")

        with self.assertLogs("liveserver.guard", "WARNING"):
            self.assertIsInstance(guard("/leak.txt", self.root), Rejected)

    @unittest.skipUnless(hasattr(os, "symlink"), "symlinks are required")
    def test_allows_symlink_within_root(self) -> None:
        link = self.root / "home.html"
        try:
            os.symlink(self.root / "index.html", link)
        except OSError:
            self.skipTest("cannot create symlinks here")

        self.assertEqual(guard("/home.html", self.root), Safe(self.root / "index.html"))


if __name__ == "__main__":
    unittest.main()
