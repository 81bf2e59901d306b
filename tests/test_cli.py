import argparse
import contextlib
import io
import unittest
from datetime import datetime, timezone
from unittest import mock

from vault import cli
from vault.client.api import VaultApiError
from vault.models.pinned_file import PinnedFile


def _args(**kwargs) -> argparse.Namespace:
    values = {"url": "http://vault.local", "timeout": None}
    values.update(kwargs)
    return argparse.Namespace(**values)


class TestCli(unittest.TestCase):
    def test_list_prints_one_line_per_file(self) -> None:
        files = [
            PinnedFile(id="1", name="cat.png", content_hash="QmAbcdefghijkLMNO", size_bytes=1536,
                       pinned_at=datetime(2024, 5, 1, tzinfo=timezone.utc),
                       access_url="https://gw/ipfs/QmAbcdefghijkLMNO"),
            PinnedFile(id="2", name="notes.pdf", content_hash="QmB", size_bytes=0,
                       pinned_at=None, access_url="https://gw/ipfs/QmB"),
        ]
        api = mock.Mock()
        api.list_files.return_value = files
        out = io.StringIO()
        with mock.patch.object(cli, "VaultApiClient", return_value=api), contextlib.redirect_stdout(out):
            rc = cli.cmd_list(_args())

        self.assertEqual(rc, 0)
        lines = out.getvalue().splitlines()
        self.assertEqual(lines[0].split("\t"), ["cat.png", "QmAbcd...LMNO", "1.5 KB", "2024-05-01", "image", "https://gw/ipfs/QmAbcdefghijkLMNO"])
        self.assertEqual(lines[1].split("\t")[2:5], ["0 Bytes", "-", "PDF"])

    def test_upload_missing_path(self) -> None:
        err = io.StringIO()
        with contextlib.redirect_stderr(err):
            rc = cli.cmd_upload(_args(path="/nope/missing.bin", content_type=None))
        self.assertEqual(rc, 1)
        self.assertIn("File not found", err.getvalue())

    def test_upload_failure_returns_nonzero(self) -> None:
        api = mock.Mock()
        api.upload.side_effect = VaultApiError("boom")
        with mock.patch.object(cli, "VaultApiClient", return_value=api), \
                mock.patch("os.path.isfile", return_value=True), \
                contextlib.redirect_stdout(io.StringIO()), contextlib.redirect_stderr(io.StringIO()), \
                self.assertLogs("vault.client.controller", level="ERROR"):
            rc = cli.cmd_upload(_args(path="/tmp/whatever.bin", content_type=None))
        self.assertEqual(rc, 1)


if __name__ == "__main__":
    unittest.main()
