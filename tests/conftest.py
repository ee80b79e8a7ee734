"""
pytest configuration and fixtures for tsrename tests.
"""

import io
import json
import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Union

import pytest
from PIL import Image


@dataclass
class CliResult:
    """Result from running CLI command."""
    exit_code: int
    output: str
    error: str

    @property
    def lines(self) -> List[str]:
        """Non-empty stdout lines (destination paths)."""
        return [line for line in self.output.splitlines() if line]


@pytest.fixture
def cli_runner(tmp_path):
    """Create a CLI runner that captures output and feeds stdin."""
    missing_config = tmp_path / "no-config.yml"

    def run_cli(*args, stdin: Union[str, bytes, None] = "", config_path=None):
        """Run tsrename CLI with given arguments.

        Args:
            *args: Command line arguments (source, --flags, etc)
            stdin: Text or raw bytes supplied on standard input
            config_path: Optional config path for test isolation

        Returns:
            CliResult with exit_code, output, and error
        """
        from tsrename.cli import main

        old_stdout, old_stderr, old_stdin = sys.stdout, sys.stderr, sys.stdin
        old_argv = sys.argv
        stdin_bytes = os.fsencode(stdin or "")
        # Byte-backed like the real streams, so raw path bytes can be exchanged
        stdout = io.TextIOWrapper(io.BytesIO(), encoding="utf-8")
        stderr = io.StringIO()
        exit_code = 0

        try:
            sys.stdout = stdout
            sys.stderr = stderr
            sys.stdin = io.TextIOWrapper(io.BytesIO(stdin_bytes), encoding="utf-8")
            sys.argv = ['tsrename'] + [str(a) for a in args]

            exit_code = main(config_path=config_path or missing_config)
        except SystemExit as e:
            # argparse errors and --help
            exit_code = e.code if e.code is not None else 0
        finally:
            sys.stdout, sys.stderr, sys.stdin = old_stdout, old_stderr, old_stdin
            sys.argv = old_argv

        stdout.flush()
        return CliResult(
            exit_code=exit_code,
            output=os.fsdecode(stdout.buffer.getvalue()),
            error=stderr.getvalue()
        )

    return run_cli


@pytest.fixture
def create_test_files(tmp_path):
    """Helper to create test files with specific properties."""

    def create_files(file_specs: List[dict], root: Optional[Path] = None) -> Path:
        """Create test files based on specifications.

        Args:
            file_specs: List of dicts with keys:
                - name: filename (may include subdirectories)
                - content: file content (optional)
                - sidecar: dict written as <name>.json (optional)
                - mtime: modification time as datetime (optional)
            root: Directory to create files in (default: tmp_path/source)

        Returns:
            Path to directory containing created files
        """
        test_dir = root or tmp_path / "source"
        test_dir.mkdir(parents=True, exist_ok=True)

        for spec in file_specs:
            file_path = test_dir / spec['name']
            file_path.parent.mkdir(parents=True, exist_ok=True)

            content = spec.get('content', b'test file content')
            if isinstance(content, str):
                file_path.write_text(content)
            else:
                file_path.write_bytes(content)

            if 'sidecar' in spec:
                sidecar = file_path.with_name(file_path.name + ".json")
                sidecar.write_text(json.dumps(spec['sidecar']))

            if 'mtime' in spec:
                mtime = spec['mtime'].timestamp()
                os.utime(file_path, (mtime, mtime))

        return test_dir

    return create_files


@pytest.fixture
def make_exif_jpeg():
    """Write a small real JPEG, optionally carrying EXIF date-time tags."""

    def make(path: Path, datetime_tag: Optional[str] = None,
             original_tag: Optional[str] = None, digitized_tag: Optional[str] = None) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        img = Image.new("RGB", (8, 8), color=(200, 30, 30))
        exif = Image.Exif()
        if datetime_tag is not None:
            exif[0x0132] = datetime_tag
        # Exif sub-IFD, written as a nested mapping under its pointer tag
        sub_ifd = {}
        if original_tag is not None:
            sub_ifd[0x9003] = original_tag
        if digitized_tag is not None:
            sub_ifd[0x9004] = digitized_tag
        if sub_ifd:
            exif[0x8769] = sub_ifd
        img.save(path, format="JPEG", exif=exif.tobytes())
        return path

    return make


@pytest.fixture
def settings_factory(tmp_path):
    """Build Settings rooted in a temporary output directory."""
    from tsrename.config import Settings, TimestampStrategy

    def make(**overrides) -> Settings:
        values = dict(output_root=tmp_path / "out", strategy=TimestampStrategy.FILENAME)
        values.update(overrides)
        return Settings(**values)

    return make

