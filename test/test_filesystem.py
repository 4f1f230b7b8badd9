# python
"""
Local filesystem root tests (LocalRoot, FileHandle, FolderHandle).

Scope
- Validate path resolution against the base directory and absolute paths.
- Validate the errors raised for missing paths and paths of the wrong kind.
- Validate handles (equality, os.fspath, nested opens from a folder) and a
  full execute() round through a LocalRoot.

Conventions
- Test method names follow CamelCase per project convention.
- Every test works inside its own temporary directory.
"""

from __future__ import annotations

import os
import tempfile
import unittest
from pathlib import Path
from unittest import IsolatedAsyncioTestCase

from argosy import Arg, Command, File, Folder, execute
from argosy.filesystem import *


class TestLocalRoot(IsolatedAsyncioTestCase):

    def setUp(self):
        directory = tempfile.TemporaryDirectory()
        self.addCleanup(directory.cleanup)
        self.base = Path(directory.name)
        (self.base / "notes.txt").write_text("hello", encoding="utf-8")
        (self.base / "docs").mkdir()
        (self.base / "docs" / "guide.txt").write_text("guide", encoding="utf-8")
        self.root = LocalRoot(self.base)

    def testSatisfiesRootProtocol(self):
        self.assertIsInstance(self.root, Root)
        self.assertIsInstance(FolderHandle(self.base), Root)

    async def testOpenFileRelativeToBase(self):
        handle = await self.root.open_file("notes.txt")
        self.assertIsInstance(handle, FileHandle)
        self.assertEqual(handle.path, self.base / "notes.txt")
        self.assertEqual(handle.read_text(), "hello")
        self.assertEqual(handle.read_bytes(), b"hello")
        with handle.open() as stream:
            self.assertEqual(stream.read(), "hello")

    async def testOpenFileAbsolutePath(self):
        handle = await LocalRoot(self.base / "docs").open_file(os.fspath(self.base / "notes.txt"))
        self.assertEqual(os.fspath(handle), os.fspath(self.base / "notes.txt"))

    async def testMissingPaths(self):
        with self.assertRaises(FileNotFoundError):
            await self.root.open_file("nope.txt")
        with self.assertRaises(FileNotFoundError):
            await self.root.open_folder("nope")

    async def testWrongKinds(self):
        with self.assertRaises(IsADirectoryError):
            await self.root.open_file("docs")
        with self.assertRaises(NotADirectoryError):
            await self.root.open_folder("notes.txt")

    async def testFolderIsNestedRoot(self):
        folder = await self.root.open_folder("docs")
        self.assertIsInstance(folder, FolderHandle)
        self.assertEqual(folder.path, self.base / "docs")
        self.assertEqual([each.name for each in folder.iterdir()], ["guide.txt"])
        guide = await folder.open_file("guide.txt")
        self.assertEqual(guide.read_text(), "guide")

    async def testHandlesCompareByPath(self):
        first = await self.root.open_file("notes.txt")
        second = await self.root.open_file(self.base / "notes.txt")
        self.assertEqual(first, second)
        self.assertEqual(len({first, second}), 1)
        self.assertEqual(await self.root.open_folder("docs"), FolderHandle(self.base / "docs"))
        self.assertNotEqual(first, FolderHandle(self.base))

    async def testRepr(self):
        handle = await self.root.open_file("notes.txt")
        self.assertTrue(repr(handle).startswith("file("))
        self.assertTrue(repr(FolderHandle(self.base)).startswith("folder("))

    async def testExecuteThroughLocalRoot(self):
        cmd = Command(
            args={"src": Arg(type=File, required=True), "dst": Arg(type=Folder, default="docs")},
            default_params=[["src"]],
            handler=lambda record: (record["src"].read_text(), record["dst"].path.name),
        )
        self.assertEqual(await execute(cmd, ["notes.txt"], self.root), ("hello", "docs"))

    def testDefaultBaseIsWorkingDirectory(self):
        self.assertEqual(LocalRoot().base, Path(os.getcwd()))


if __name__ == "__main__":
    unittest.main()
