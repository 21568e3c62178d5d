import unittest

from liveserver.client import RELOAD_PATH, inject_reload_script, reload_script


class InjectReloadScriptTests(unittest.TestCase):
    def setUp(self) -> None:
        self.script = reload_script().encode("utf-8")

    def test_inserts_before_body_close(self) -> None:
        html = b"<html><body><p>hi</p></body></html>"

        out = inject_reload_script(html)

        self.assertEqual(out, b"<html><body><p>hi</p>" + self.script + b"</body></html>")

    def test_body_match_is_case_insensitive(self) -> None:
        out = inject_reload_script(b"<HTML><BODY>x</BODY></HTML>")

        self.assertTrue(out.endswith(self.script + b"</BODY></HTML>"))

    def test_uses_last_body_close(self) -> None:
        html = b"<body><script>var s = '</body>';</script></body>"

        out = inject_reload_script(html)

        self.assertTrue(out.endswith(self.script + b"</body>"))
        self.assertEqual(out.count(b"</body>"), 2)

    def test_falls_back_to_html_close_then_end(self) -> None:
        self.assertEqual(inject_reload_script(b"<html>x</html>"), b"<html>x" + self.script + b"</html>")
        self.assertEqual(inject_reload_script(b"<p>fragment</p>"), b"<p>fragment</p>" + self.script)

    def test_already_injected_page_is_unchanged(self) -> None:
        once = inject_reload_script(b"<body></body>")

        self.assertEqual(inject_reload_script(once), once)

    def test_non_utf8_bytes_survive(self) -> None:
        html = b"<body>caf\xe9</body>"

        out = inject_reload_script(html)

        self.assertTrue(out.startswith(b"<body>caf\xe9"))

    def test_script_targets_reload_path(self) -> None:
        self.assertIn(RELOAD_PATH, reload_script())
        self.assertIn("css-change", reload_script())
        self.assertIn("full-reload", reload_script())


if __name__ == "__main__":
    unittest.main()
