from __future__ import annotations

import argparse
import json
import os
import sys

from . import config, constants, t
from . import messages as m


def main(argv: list[str] | None = None) -> None:
    semver = config.semver()
    semverText = f"Sillycode v{semver}: " if semver != "???" else ""

    argparser = argparse.ArgumentParser(description=f"{semverText}Parses and renders sillycode markup.")
    argparser.add_argument("--version", action="version", version=semver)
    argparser.add_argument(
        "-q",
        "--quiet",
        dest="quiet",
        action="count",
        default=0,
        help="Silences one level of message, least-important first.",
    )
    argparser.add_argument(
        "-s",
        "--silent",
        dest="silent",
        action="store_true",
        help="Shorthand for 'as many -q as you need to shut it up'",
    )
    argparser.add_argument(
        "-f",
        "--force",
        dest="errorLevel",
        action="store_const",
        const="nothing",
        help="Force the command to run to completion; fatal errors don't stop processing.",
    )
    argparser.add_argument(
        "-a",
        "--ascii-only",
        dest="asciiOnly",
        action="store_true",
        help="Force all messages to be ASCII-only.",
    )
    argparser.add_argument(
        "--print",
        dest="printMode",
        choices=m.PRINT_MODES,
        default=None,
        help="How messages are formatted. Options are 'plain' (just text), 'console' (text with console color codes), 'markup' (XML), and 'json' (JSON stream). Defaults to 'console'.",
    )
    argparser.add_argument(
        "--die-on",
        dest="errorLevel",
        choices=list(m.MESSAGE_LEVELS.keys()),
        help="Determines what sorts of errors cause a command to fail. Default is 'fatal'; the -f flag is a shorthand for 'nothing'",
    )
    argparser.add_argument(
        "--die-when",
        dest="errorTiming",
        choices=m.DEATH_TIMING,
        default="late",
        help="When a disallowed error should stop processing. 'early' stops immediately; 'late' reports every error first.",
    )

    subparsers = argparser.add_subparsers(title="Subcommands", dest="subparserName")

    renderParser = subparsers.add_parser("render", help="Render a sillycode file as HTML.")
    renderParser.add_argument("infile", nargs="?", default="-", help='Path to the source file, or stdin ("-").')
    renderParser.add_argument("outfile", nargs="?", default="-", help='Path to the output file, or stdout ("-").')
    renderParser.add_argument(
        "--editor",
        dest="editorMode",
        action="store_true",
        help="Also show the markup itself, the way the editor does.",
    )
    renderParser.add_argument(
        "--emote-path",
        dest="emotePath",
        default=None,
        help=f"URL folder holding the emote images. Defaults to '{constants.emotePath}'.",
    )

    parseParser = subparsers.add_parser("parse", help="Print the parts of a sillycode file as JSON.")
    parseParser.add_argument("infile", nargs="?", default="-", help='Path to the source file, or stdin ("-").')

    lengthParser = subparsers.add_parser("length", help="Print the visible length of a sillycode file.")
    lengthParser.add_argument("infile", nargs="?", default="-", help='Path to the source file, or stdin ("-").')

    checkParser = subparsers.add_parser("check", help="Look for unbalanced tags and overlong text.")
    checkParser.add_argument("infile", nargs="?", default="-", help='Path to the source file, or stdin ("-").')
    checkParser.add_argument(
        "--max-length",
        dest="maxLength",
        type=int,
        default=None,
        help="Fail if the visible length is longer than this.",
    )

    reverseParser = subparsers.add_parser(
        "reverse",
        help="Turn editor HTML back into sillycode.",
    )
    reverseParser.add_argument("infile", nargs="?", default="-", help='Path to the HTML file, or stdin ("-").')

    testParser = subparsers.add_parser("test", help="Tools for running the golden-file tests.")
    testParser.add_argument(
        "--rebase",
        default=False,
        action="store_true",
        help="Rebase the specified (or all) tests.",
    )
    testParser.add_argument(
        "files",
        default=None,
        nargs="*",
        help="Run these tests. If called with no args, tests everything.",
    )

    options = argparser.parse_args(argv)

    if options.silent:
        m.state.printOn = "nothing"
        m.state.silent = True
    else:
        m.state.printOn = m.MessagesState.categoryName(options.quiet)
    if options.errorLevel is not None:
        m.state.dieOn = options.errorLevel
    m.state.dieWhen = options.errorTiming
    m.state.asciiOnly = options.asciiOnly
    if options.printMode is None:
        if "NO_COLOR" in os.environ or os.environ.get("TERM") == "dumb":
            m.state.printMode = "plain"
        else:
            m.state.printMode = "console"
    else:
        m.state.printMode = options.printMode

    if options.subparserName == "render":
        handleRender(options)
    elif options.subparserName == "parse":
        handleParse(options)
    elif options.subparserName == "length":
        handleLength(options)
    elif options.subparserName == "check":
        handleCheck(options)
    elif options.subparserName == "reverse":
        handleReverse(options)
    elif options.subparserName == "test":
        handleTest(options)
    else:
        argparser.print_help()
        return

    m.retroactivelyCheckErrorLevel()


def readInput(infile: str) -> str | None:
    if infile != "-":
        m.state.source = infile
    try:
        if infile == "-":
            return sys.stdin.read()
        with open(infile, encoding="utf-8", newline="") as fh:
            return fh.read()
    except OSError as e:
        m.die(f"Couldn't read the input file '{infile}':\n{e}")
    except UnicodeDecodeError as e:
        m.die(f"The input file '{infile}' isn't valid UTF-8:\n{e}")
    return None


def writeOutput(outfile: str, text: str) -> None:
    if outfile == "-":
        sys.stdout.write(text + "\n")
        return
    try:
        with open(outfile, "w", encoding="utf-8") as fh:
            fh.write(text)
    except OSError as e:
        m.die(f"Couldn't write the output file '{outfile}':\n{e}")
        return
    m.success(f"Successfully rendered to {outfile}.")


def readParts(infile: str) -> list[t.PartT] | None:
    from .parser import parse

    text = readInput(infile)
    if text is None:
        return None
    return parse(text)


def handleRender(options: argparse.Namespace) -> None:
    from .renderer import render

    if options.emotePath is not None:
        constants.emotePath = options.emotePath.rstrip("/")
    parts = readParts(options.infile)
    if parts is None:
        return
    writeOutput(options.outfile, render(parts, options.editorMode))


def handleParse(options: argparse.Namespace) -> None:
    parts = readParts(options.infile)
    if parts is None:
        return
    writeOutput("-", json.dumps([part.toJSON() for part in parts], indent=2, ensure_ascii=False))


def handleLength(options: argparse.Namespace) -> None:
    from .parser import length

    parts = readParts(options.infile)
    if parts is None:
        return
    writeOutput("-", str(length(parts)))


def handleCheck(options: argparse.Namespace) -> None:
    from .lint import lintParts

    parts = readParts(options.infile)
    if parts is None:
        return
    if lintParts(parts, maxLength=options.maxLength):
        m.success("No problems found.")
    else:
        m.failure("Found problems in the markup.")


def handleReverse(options: argparse.Namespace) -> None:
    from . import dom

    text = readInput(options.infile)
    if text is None:
        return
    writeOutput("-", dom.reverse(dom.parseFragment(text)))


def handleTest(options: argparse.Namespace) -> None:
    from . import test

    m.state.dieOn = "nothing"
    filters = test.TestFilter.fromOptions(options)
    if options.rebase:
        test.rebase(filters)
    else:
        result = test.run(filters)
        sys.exit(0 if result else 1)
