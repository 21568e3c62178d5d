import os
import tempfile
import unittest
from pathlib import Path

from liveserver.config import ServeConfig


class ServeConfigTests(unittest.TestCase):
    def test_api_prefix_is_normalized(self) -> None:
        for api_dir in ("api", "api/", "/api"):
            with self.subTest(api_dir=api_dir):
                self.assertEqual(ServeConfig(api_dir=api_dir).api_prefix, "/api")
        self.assertEqual(ServeConfig(api_dir="v1/functions").api_prefix, "/v1/functions")

    def test_api_namespace_can_be_disabled(self) -> None:
        for api_dir in (None, "", "/"):
            with self.subTest(api_dir=api_dir):
                config = ServeConfig(api_dir=api_dir)
                self.assertIsNone(config.api_prefix)
                self.assertIsNone(config.api_root)

    def test_api_root_lives_under_served_root(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            config = ServeConfig(root=tmp)

            self.assertEqual(config.api_root, Path(tmp).resolve() / "api")

    def test_defaults(self) -> None:
        config = ServeConfig()

        self.assertEqual(config.root, os.getcwd())
        self.assertEqual(config.url, "http://localhost:5327")
        self.assertIn("css", config.watched_extensions)


if __name__ == "__main__":
    unittest.main()
