import io
import json
import os
import tempfile
import unittest
from contextlib import redirect_stderr, redirect_stdout

from wear.lang import config
from wear.lang.config import KEYWORDS
from wear.main import main


class MainTestCase(unittest.TestCase):

    def setUp(self):
        self.directory = tempfile.TemporaryDirectory()

    def tearDown(self):
        self.directory.cleanup()
        config._languages.pop("xx", None)

    def write(self, name, text):
        path = os.path.join(self.directory.name, name)
        with open(path, "w", encoding="utf-8") as file:
            file.write(text)
        return path

    def call(self, *argv):
        """Runs the CLI. Returns (status, stdout, stderr)."""
        out, err = io.StringIO(), io.StringIO()
        with redirect_stdout(out), redirect_stderr(err):
            status = main(list(argv))
        return status, out.getvalue(), err.getvalue()

    def test_run_file(self):
        path = self.write("ok.wr", "var x = 10\nprint x + 5\n")
        self.assertEqual(self.call(path)[:2], (0, "15\n"))

    def test_indonesian_file(self):
        path = self.write("ok.wr", "konstan pesan = \"halo\"\ncetak pesan\n")
        self.assertEqual(self.call("--lang", "id", path)[:2], (0, "halo\n"))

    def test_failing_file(self):
        path = self.write("bad.wr", "print 1\nprint 1 / 0\n")
        status, out, __ = self.call("--no-color", path)

        self.assertEqual(status, 1)
        self.assertTrue(out.startswith("1\n"))
        self.assertIn("bad.wr:2:9: runtime error: Division by zero", out)

    def test_syntax_error_file(self):
        path = self.write("bad.wr", "print (1\n")
        status, out, __ = self.call("--no-color", path)

        self.assertEqual(status, 1)
        self.assertIn("syntax error: Unexpected token", out)

    def test_bad_path(self):
        should_fail = [self.write("notes.txt", "print 1"), os.path.join(self.directory.name, "missing.wr")]
        for path in should_fail:
            with self.assertRaises(SystemExit) as context:
                self.call("--no-color", path)
            self.assertEqual(context.exception.code, 1)

    def test_ast(self):
        path = self.write("tree.wr", "print 1\n")
        status, out, __ = self.call("--ast", path)

        self.assertEqual(status, 0)
        self.assertTrue(out.startswith("Program("))

        broken = self.write("broken.wr", "print )\n")
        self.assertEqual(self.call("--ast", "--no-color", broken)[0], 1)

    def test_keywords_file(self):
        keywords = {key: key for key in KEYWORDS}
        keywords["print"] = "shout"
        language = self.write("pirate.json", json.dumps({"name": "Pirate", "code": "xx", "keywords": keywords}))
        path = self.write("pirate.wr", "shout \"ahoy\"\n")

        self.assertEqual(self.call("--keywords", language, path)[:2], (0, "ahoy\n"))


if __name__ == '__main__':
    unittest.main()
