from __future__ import annotations

import dataclasses
import difflib
import os

from alive_progress import alive_it

from . import config, t
from . import messages as m
from .parser import parse
from .renderer import render

if t.TYPE_CHECKING:
    import argparse

TEST_DIR = os.path.abspath(config.scriptPath("..", "tests", "golden"))
TEST_FILE_EXTENSIONS = (".sc",)

# Each source file is checked against one golden file per rendering mode.
GOLDEN_EXTENSIONS = {
    ".html": False,
    ".editor.html": True,
}


@dataclasses.dataclass
class TestFilter:
    files: list[str] | None = None

    @staticmethod
    def fromOptions(options: argparse.Namespace) -> TestFilter:
        return TestFilter(files=options.files or None)


def testPaths(filters: TestFilter) -> list[str]:
    return sorted(findTestFiles(filters))


def findTestFiles(filters: TestFilter) -> t.Generator[str, None, None]:
    for root, _, filenames in os.walk(TEST_DIR):
        for filename in filenames:
            fullPath = os.path.join(root, filename)
            if not allowedPath(fullPath, filters):
                continue
            yield fullPath


def allowedPath(filePath: str, filters: TestFilter) -> bool:
    extension = os.path.splitext(filePath)[1]
    if extension not in TEST_FILE_EXTENSIONS:
        return False
    if filters.files:
        fileName = os.path.basename(filePath)
        if not any(fileSubstring in fileName for fileSubstring in filters.files):
            return False
    return True


# The test name will be the path relative to the tests directory,
# or the path as given if the test is outside of that directory.
def testNameForPath(path: str) -> str:
    if path.startswith(TEST_DIR):
        return path[len(TEST_DIR) + 1 :]
    return path


def readSource(path: str) -> str:
    # newline="" so CRLF files aren't silently normalized
    with open(path, encoding="utf-8", newline="") as fh:
        return fh.read()


def processTest(path: str) -> dict[str, str]:
    parts = parse(readSource(path))
    return {ext: render(parts, editorMode) for ext, editorMode in GOLDEN_EXTENSIONS.items()}


def run(filters: TestFilter) -> bool:
    paths = testPaths(filters)
    if len(paths) == 0:
        m.p("No tests were found")
        return True
    numPassed = 0
    total = 0
    fails = []
    pathProgress = alive_it(paths, dual_line=True, length=20, disable=m.state.silent)
    for path in pathProgress:
        testName = testNameForPath(path)
        pathProgress.text(testName)
        total += 1
        outputs = processTest(path)
        passed = True
        for ext, testOutput in outputs.items():
            goldenPath = replaceExtension(path, ext)
            try:
                with open(goldenPath, encoding="utf-8", newline="") as golden:
                    goldenOutput = golden.read()
            except FileNotFoundError:
                m.warn(f"Missing golden file {goldenPath}; run with --rebase to create it.")
                passed = False
                continue
            if not compare(testOutput, goldenOutput, path=goldenPath):
                passed = False
        if passed:
            numPassed += 1
        else:
            fails.append(testName)
    if numPassed == total:
        m.p(m.printColor("✔ All tests passed.", color="green"))
        return True
    m.p(m.printColor(f"✘ {numPassed}/{total} tests passed.", color="red"))
    m.p(m.printColor("Failed Tests:", color="red"))
    for fail in fails:
        m.p("* " + fail)
    return False


def rebase(filters: TestFilter) -> bool:
    paths = testPaths(filters)
    if len(paths) == 0:
        m.p("No tests were found.")
        return True
    pathProgress = alive_it(paths, dual_line=True, length=20, disable=m.state.silent)
    for path in pathProgress:
        testName = testNameForPath(path)
        pathProgress.text(testName)
        for ext, testOutput in processTest(path).items():
            with open(replaceExtension(path, ext), "w", encoding="utf-8", newline="") as fh:
                fh.write(testOutput)
    m.say(f"Rebased {len(paths)} tests.")
    return True


def compare(suspect: str, golden: str, path: str) -> bool:
    if suspect == golden:
        return True
    m.p(f"FILE: {path}")
    for line in difflib.unified_diff(golden.split("\n"), suspect.split("\n"), fromfile="golden", tofile="suspect"):
        if line[0] == "-":
            m.p(m.printColor(line, color="red"))
        elif line[0] == "+":
            m.p(m.printColor(line, color="green"))
        else:
            m.p(line)
    m.p("")
    return False


def replaceExtension(path: str, newExt: str) -> str:
    assert newExt[0] == "."
    trunk = os.path.splitext(path)[0]
    return f"{trunk}{newExt}"
