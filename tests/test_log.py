import io
import logging
import unittest

from liveserver.log import BOLD_RED, GREEN, RED, YELLOW, color_enabled, colored_status, status_level


class TerminalStream(io.StringIO):
    def isatty(self) -> bool:
        return True


class StatusFormattingTests(unittest.TestCase):
    def test_colored_status_buckets(self) -> None:
        self.assertEqual(colored_status(200), f"{GREEN}[200]\x1b[0m")
        self.assertEqual(colored_status(304), f"{YELLOW}[304]\x1b[0m")
        self.assertEqual(colored_status(404), f"{RED}[404]\x1b[0m")
        self.assertEqual(colored_status(500), f"{BOLD_RED}[500]\x1b[0m")
        self.assertEqual(colored_status(404, color=False), "[404]")

    def test_status_level_buckets(self) -> None:
        self.assertEqual(status_level(200), logging.INFO)
        self.assertEqual(status_level(301), logging.INFO)
        self.assertEqual(status_level(403), logging.WARNING)
        self.assertEqual(status_level(503), logging.ERROR)


class ColorEnabledTests(unittest.TestCase):
    def logger_with(self, *streams) -> logging.Logger:
        logger = logging.Logger("liveserver.test")
        for stream in streams:
            logger.addHandler(logging.StreamHandler(stream))
        return logger

    def test_terminal_stream_gets_color(self) -> None:
        self.assertTrue(color_enabled(self.logger_with(TerminalStream())))

    def test_configured_file_like_stream_gets_no_color(self) -> None:
        self.assertFalse(color_enabled(self.logger_with(io.StringIO())))
        self.assertFalse(color_enabled(self.logger_with(TerminalStream(), io.StringIO())))

    def test_no_handlers_means_no_color(self) -> None:
        self.assertFalse(color_enabled(self.logger_with()))

    def test_parent_handlers_are_consulted(self) -> None:
        parent = self.logger_with(io.StringIO())
        child = self.logger_with(TerminalStream())
        child.parent = parent

        self.assertFalse(color_enabled(child))

        child.propagate = False
        self.assertTrue(color_enabled(child))


if __name__ == "__main__":
    unittest.main()
