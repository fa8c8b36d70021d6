#!/usr/bin/env python3
"""
Tests for exclusion resolution and rsync command construction.
"""

import os
import shutil
import sys
import tempfile

import pydantic
import pytest

# Add src to path for testing
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from codesync.core import ExclusionResolver, RsyncCommandBuilder, SyncTarget
from codesync.core.models import SyncOptions


class TestExclusionResolver:
    """Test the ignore file lookup and folder list handling."""

    def setup_method(self):
        self.temp_dir = tempfile.mkdtemp()
        self.resolver = ExclusionResolver()

    def teardown_method(self):
        shutil.rmtree(self.temp_dir, ignore_errors=True)

    def test_missing_ignore_file_is_silent(self):
        spec = self.resolver.resolve(self.temp_dir, ["node_modules"])

        assert spec.ignore_file is None
        assert not spec.has_ignore_file
        assert spec.folders == ("node_modules",)

    def test_ignore_file_directly_under_source(self):
        ignore_file = os.path.join(self.temp_dir, ".codesyncignore")
        with open(ignore_file, "w") as f:
            f.write("*.log\n")

        spec = self.resolver.resolve(self.temp_dir)

        assert spec.ignore_file == ignore_file
        assert spec.folders == ()

    def test_ignore_file_in_subdirectory_is_not_used(self):
        nested = os.path.join(self.temp_dir, "lib")
        os.makedirs(nested)
        with open(os.path.join(nested, ".codesyncignore"), "w") as f:
            f.write("*.log\n")

        assert self.resolver.resolve(self.temp_dir).ignore_file is None

    def test_custom_ignore_filename(self):
        with open(os.path.join(self.temp_dir, ".sshyncignore"), "w") as f:
            f.write("build\n")

        assert ExclusionResolver(".sshyncignore").resolve(self.temp_dir).has_ignore_file
        assert not self.resolver.resolve(self.temp_dir).has_ignore_file

    def test_folder_order_and_duplicates_preserved(self):
        spec = self.resolver.resolve(self.temp_dir, ["dist", "node_modules", "dist"])

        assert spec.folders == ("dist", "node_modules", "dist")


class TestRsyncCommandBuilder:
    """Test the rsync invocation built for a target."""

    def setup_method(self):
        self.temp_dir = tempfile.mkdtemp()
        self.source = os.path.join(self.temp_dir, "proj")
        os.makedirs(self.source)
        self.resolver = ExclusionResolver()
        self.builder = RsyncCommandBuilder()

    def teardown_method(self):
        shutil.rmtree(self.temp_dir, ignore_errors=True)

    def _build(self, folders=None):
        target = SyncTarget(
            source_path=self.source,
            destination="user@host:/srv/app",
            exclusions=tuple(folders or ()),
        )
        return self.builder.build(target, self.resolver.resolve(self.source, target.exclusions))

    def test_base_command_shape(self):
        command = self._build()

        assert command.argv == [
            "rsync",
            "-avuz",
            "--rsh=ssh",
            "--delete",
            self.source,
            "user@host:/srv/app",
        ]

    def test_folder_exclusions_without_ignore_file(self):
        command = self._build(["node_modules", "dist"])

        assert command.exclusion_entries() == ["--exclude=node_modules", "--exclude=dist"]
        assert not any(arg.startswith("--exclude-from") for arg in command.argv)

    def test_ignore_file_adds_exclude_from_entry(self):
        ignore_file = os.path.join(self.source, ".codesyncignore")
        with open(ignore_file, "w") as f:
            f.write("*.pyc\n")

        command = self._build(["node_modules"])

        assert command.exclusion_entries() == [
            f"--exclude-from={ignore_file}",
            "--exclude=node_modules",
        ]

    def test_one_entry_per_folder_including_duplicates(self):
        folders = ["a", "b", "a", "c"]
        command = self._build(folders)

        assert command.exclusion_entries() == [f"--exclude={f}" for f in folders]

    def test_source_and_destination_come_last(self):
        command = self._build(["tmp"])

        assert command.argv[-2:] == [self.source, "user@host:/srv/app"]

    def test_exclusions_fixed_at_build_time(self):
        command = self._build()
        first = command.argv

        with open(os.path.join(self.source, ".codesyncignore"), "w") as f:
            f.write("*.log\n")

        assert command.argv == first

    def test_options_are_applied(self):
        builder = RsyncCommandBuilder(
            SyncOptions(rsync_path="/usr/local/bin/rsync", shell="ssh -p 2222", flags="az", delete=False)
        )
        target = SyncTarget(source_path=self.source, destination="host:/app")
        command = builder.build(target, self.resolver.resolve(self.source))

        assert command.argv[:3] == ["/usr/local/bin/rsync", "-az", "--rsh=ssh -p 2222"]
        assert "--delete" not in command.argv

    def test_string_form_is_shell_quoted(self):
        target = SyncTarget(source_path=self.source, destination="host:/my app")
        command = self.builder.build(target, self.resolver.resolve(self.source))

        assert str(command).endswith("'host:/my app'")

    def test_invalid_flags_rejected(self):
        with pytest.raises(pydantic.ValidationError):
            SyncOptions(flags="a-v")

    def test_negative_debounce_rejected(self):
        with pytest.raises(pydantic.ValidationError):
            SyncOptions(debounce=-1)


class TestSyncTarget:
    """Test target resolution."""

    def setup_method(self):
        self.temp_dir = tempfile.mkdtemp()

    def teardown_method(self):
        shutil.rmtree(self.temp_dir, ignore_errors=True)

    def test_resolve_relative_to_cwd(self):
        os.makedirs(os.path.join(self.temp_dir, "src"))

        target = SyncTarget.resolve("src", "host:/app", ["dist"], cwd=self.temp_dir)

        assert target.source_path == os.path.join(self.temp_dir, "src")
        assert target.exclusions == ("dist",)

    def test_resolve_missing_source(self):
        from codesync.core import ValidationError

        with pytest.raises(ValidationError) as exc_info:
            SyncTarget.resolve("missing", "host:/app", cwd=self.temp_dir)

        assert exc_info.value.field_name == "source"

    def test_relative_source_path_rejected(self):
        with pytest.raises(pydantic.ValidationError):
            SyncTarget(source_path="relative/path", destination="host:/app")

    def test_target_is_immutable(self):
        target = SyncTarget(source_path=self.temp_dir, destination="host:/app")

        with pytest.raises(pydantic.ValidationError):
            target.destination = "other:/app"
