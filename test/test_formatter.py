"""
Formatter behavioral tests.

Scope
- Exact plain usage and help layouts (column alignment, section order).
- Styled rendering: same text as the plain form, palette overrides honored.
- Idempotence: rendering never changes the tree.

Conventions
- Test method names follow CamelCase per project convention.
- Expected layouts spell out padding with explicit multiplications.
"""
import sys
import unittest
from unittest import TestCase
from unittest.mock import patch

from argtree import ArgumentParser, format_usage, format_help, render_usage, render_help


def _tree():
    parser = ArgumentParser("prog", "short description of the program", "epilogue text")
    parser.add_argument("-v", "--verbose").as_flag().with_help("talk more")
    parser.add_argument("-o", "--output").with_help("write results here").with_default("out.txt")
    parser.add_argument("file").with_help("input file")
    parser.add_subcommand("test", "run the test-suite")
    build = parser.add_subcommand("build", "build the project")
    build.add_argument("-t", "--target").required().with_help("target triple")
    return parser


class TestUsage(TestCase):

    def testRootUsage(self):
        self.assertEqual(format_usage(_tree()), "usage: prog {build,test} [-v] [-o OUTPUT] file")

    def testChildUsageShowsRoute(self):
        self.assertEqual(_tree().children["build"].format_usage(), "usage: prog build -t TARGET")

    def testBareUsage(self):
        self.assertEqual(ArgumentParser("prog").format_usage(), "usage: prog")

    def testChildrenInNameOrder(self):
        parser = ArgumentParser("prog")
        for name in ("zeta", "alpha", "mid"):
            parser.add_subcommand(name)
        self.assertEqual(parser.format_usage(), "usage: prog {alpha,mid,zeta}")


class TestHelp(TestCase):

    def testFullLayout(self):
        expected = "\n".join([
            "usage: prog {build,test} [-v] [-o OUTPUT] file",
            "",
            "short description of the program",
            "",
            "arguments:",
            "  -v, --verbose" + " " * 8 + "talk more",
            "  -o, --output OUTPUT" + " " * 2 + "write results here (default: out.txt)",
            "  file" + " " * 17 + "input file",
            "",
            "subcommands:",
            "  build" + " " * 16 + "build the project",
            "  test" + " " * 17 + "run the test-suite",
            "",
            "epilogue text",
        ])
        self.assertEqual(format_help(_tree()), expected)

    def testChildHelp(self):
        expected = "\n".join([
            "usage: prog build -t TARGET",
            "",
            "build the project",
            "",
            "arguments:",
            "  -t, --target TARGET  target triple",
        ])
        self.assertEqual(_tree().children["build"].format_help(), expected)

    def testOnlyUsage(self):
        self.assertEqual(ArgumentParser("prog").format_help(), "usage: prog")

    def testColumnIsCapped(self):
        parser = ArgumentParser("prog")
        parser.add_argument("-v").as_flag().with_help("talk more")
        parser.add_argument("-c", "--configuration-file").with_help("config path")
        expected = "\n".join([
            "usage: prog [-v] [-c CONFIGURATION_FILE]",
            "",
            "arguments:",
            "  -v" + " " * 24 + "talk more",
            "  -c, --configuration-file CONFIGURATION_FILE",
            " " * 28 + "config path",
        ])
        self.assertEqual(parser.format_help(), expected)

    def testIdempotent(self):
        parser = _tree()
        first = parser.format_help()
        self.assertEqual(parser.format_help(), first)
        self.assertFalse(parser.frozen)

    def testSameBeforeAndAfterParse(self):
        parser = _tree()
        before = parser.format_help()
        parser.parse(["x.txt"])
        self.assertEqual(parser.format_help(), before)


class TestStyled(TestCase):

    def testPlainTextMatches(self):
        parser = _tree()
        self.assertEqual(render_help(parser, colorful=True).plain, parser.format_help())
        self.assertEqual(render_usage(parser, colorful=True).plain, parser.format_usage())

    def testColorfulHasSpans(self):
        self.assertTrue(render_usage(_tree(), colorful=True).spans)

    def testPlainHasNoSpans(self):
        self.assertFalse(render_usage(_tree(), colorful=False).spans)

    def testNodeColorfulIsDefault(self):
        parser = ArgumentParser("prog", colorful=True)
        self.assertTrue(render_usage(parser).spans)

    def testPaletteOverride(self):
        with patch.object(sys.modules["__main__"], "__styles__", {"usage-label": "bold red"}, create=True):
            rendered = render_usage(ArgumentParser("prog"), colorful=True)
        self.assertIn("bold red", [str(span.style) for span in rendered.spans])


if __name__ == "__main__":
    unittest.main()
