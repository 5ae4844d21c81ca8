import os
import subprocess
import sys
import tempfile
import unittest
from pathlib import Path

from lzw12 import Compressor

SCRIPT = Path(__file__).resolve().parent / "main-c.py"


class TestMainC(unittest.TestCase):
    def setUp(self):
        self.temp_dir = tempfile.TemporaryDirectory()
        self.work = Path(self.temp_dir.name)

    def tearDown(self):
        self.temp_dir.cleanup()

    def run_script(self, *args):
        return subprocess.run([sys.executable, str(SCRIPT), *args],
                              capture_output=True, text=True, timeout=120,
                              cwd=str(SCRIPT.parent))

    def test_compresses_file(self):
        data = b"Hello Hello Hello, LZW likes repetition. " * 200
        input_path = self.work / "input.bin"
        output_path = self.work / "input.lzw"
        input_path.write_bytes(data)

        result = self.run_script(str(input_path), str(output_path))

        self.assertEqual(result.returncode, 0, result.stdout + result.stderr)
        self.assertEqual(output_path.read_bytes(), Compressor().compress(data))
        self.assertIn(f"Compressing {input_path} to {output_path}", result.stdout)
        self.assertIn("Using LZW 12 Bit Encoder", result.stdout)
        self.assertIn("CompressFile", result.stdout)
        self.assertIn(f"Input bytes:             {len(data)}", result.stdout)
        self.assertIn("Compression ratio:", result.stdout)

    def test_empty_input(self):
        input_path = self.work / "empty.bin"
        output_path = self.work / "empty.lzw"
        input_path.write_bytes(b"")

        result = self.run_script(str(input_path), str(output_path))

        self.assertEqual(result.returncode, 0, result.stdout + result.stderr)
        self.assertEqual(output_path.read_bytes(), b"\xff\xf0")

    def test_unknown_arguments_are_reported(self):
        input_path = self.work / "input.bin"
        input_path.write_bytes(b"abc")

        result = self.run_script(str(input_path), str(self.work / "out.lzw"), "-x", "extra")

        self.assertEqual(result.returncode, 0, result.stdout + result.stderr)
        self.assertIn("Unknown argument: -x", result.stdout)
        self.assertIn("Unknown argument: extra", result.stdout)

    def test_missing_input_file(self):
        output_path = self.work / "out.lzw"
        result = self.run_script(str(self.work / "missing.bin"), str(output_path))

        self.assertEqual(result.returncode, 1)
        self.assertIn("not found", result.stdout)
        self.assertFalse(os.path.exists(output_path))

    def test_usage(self):
        result = self.run_script()
        self.assertEqual(result.returncode, 0)
        self.assertIn("Usage:  main-c in-file out-file", result.stdout)


if __name__ == '__main__':
    unittest.main()
