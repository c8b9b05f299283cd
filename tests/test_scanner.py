"""
Unit tests for scanner module functions.
"""

import os
import pytest
from pathlib import Path
from PIL import Image

from imagedupe.config import DEFAULT_THRESHOLD, FINGERPRINT_BYTES, SUPPORTED_EXTENSIONS
from imagedupe.exceptions import FilesystemError, ImageDecodeError
from imagedupe.scanner import (
    has_image_suffix,
    find_image_files,
    compute_fingerprint,
    hash_image,
    hash_images_parallel,
    prepare_image,
)
from conftest import make_pattern


class TestHasImageSuffix:
    """Test the extension classifier."""

    @pytest.mark.parametrize("name", [
        "photo.bmp", "photo.gif", "photo.jpg", "photo.jpeg",
        "photo.jxl", "photo.png", "photo.webp",
    ])
    def test_supported_extensions(self, name):
        assert has_image_suffix(name)

    def test_text_file_rejected(self):
        assert not has_image_suffix("photo.txt")

    def test_case_sensitive(self):
        assert not has_image_suffix("photo.PNG")
        assert not has_image_suffix("photo.Jpg")

    def test_no_extension(self):
        assert not has_image_suffix("README")
        assert not has_image_suffix("/some/dir/")

    def test_only_last_extension_counts(self):
        assert has_image_suffix("archive.tar.png")
        assert not has_image_suffix("photo.png.bak")

    def test_hidden_file_without_extension(self):
        assert not has_image_suffix(".png")

    def test_custom_allowlist(self):
        assert has_image_suffix("scan.tiff", extensions={"tiff"})
        assert not has_image_suffix("photo.png", extensions={"tiff"})

    def test_allowlist_is_configuration(self):
        assert SUPPORTED_EXTENSIONS == {"bmp", "gif", "jpg", "jpeg", "jxl", "png", "webp"}

    def test_accepts_path_objects(self):
        assert has_image_suffix(Path("/tmp/photo.webp"))


class TestFindImageFiles:
    """Test find_image_files function."""

    def test_find_png_files(self, sample_images, temp_dir):
        files = find_image_files(temp_dir)
        assert files == {sample_images[key] for key in ('a', 'b', 'a_copy', 'a_large')}

    def test_returns_canonical_paths(self, image_dir):
        files = find_image_files(image_dir / ".." / image_dir.name)
        assert files == {str((image_dir / "a.png").resolve()), str((image_dir / "b.png").resolve())}

    def test_skips_wrong_extensions(self, image_dir):
        (image_dir / "photo.txt").write_bytes((image_dir / "a.png").read_bytes())
        (image_dir / "photo.PNG").write_bytes((image_dir / "a.png").read_bytes())
        files = find_image_files(image_dir)
        assert len(files) == 2
        assert not any(f.endswith(("photo.txt", "photo.PNG")) for f in files)

    def test_skips_directories_with_image_names(self, image_dir):
        (image_dir / "album.png").mkdir()
        files = find_image_files(image_dir)
        assert str(image_dir / "album.png") not in files

    def test_recursive_search(self, image_dir):
        subdir = image_dir / "subdir"
        subdir.mkdir()
        make_pattern(3).save(subdir / "c.png")

        nested = str((subdir / "c.png").resolve())
        assert nested in find_image_files(image_dir, recursive=True)
        assert nested not in find_image_files(image_dir, recursive=False)

    def test_empty_directory(self, temp_dir):
        empty_dir = temp_dir / "empty"
        empty_dir.mkdir()
        assert find_image_files(empty_dir) == set()

    def test_missing_root(self, temp_dir):
        with pytest.raises(FilesystemError):
            find_image_files(temp_dir / "missing")

    @pytest.mark.parametrize("recursive", [False, True])
    def test_unreadable_root(self, image_dir, monkeypatch, recursive):
        real_scandir = os.scandir

        def scandir(path="."):
            if os.fspath(path) == str(image_dir):
                raise PermissionError(13, "Permission denied", os.fspath(path))
            return real_scandir(path)

        monkeypatch.setattr(os, "scandir", scandir)
        with pytest.raises(FilesystemError) as excinfo:
            find_image_files(image_dir, recursive=recursive)
        assert excinfo.value.path == str(image_dir)

    def test_unreadable_subdirectory_skipped_via_scandir(self, image_dir, monkeypatch):
        locked = image_dir / "locked"
        locked.mkdir()
        make_pattern(4).save(locked / "d.png")
        real_scandir = os.scandir

        def scandir(path="."):
            if os.fspath(path) == str(locked):
                raise PermissionError(13, "Permission denied", os.fspath(path))
            return real_scandir(path)

        monkeypatch.setattr(os, "scandir", scandir)
        assert len(find_image_files(image_dir, recursive=True)) == 2

    @pytest.mark.skipif(not hasattr(os, "symlink"), reason="symlinks not supported")
    def test_symlink_resolves_to_target(self, image_dir):
        os.symlink(image_dir / "a.png", image_dir / "link.png")
        files = find_image_files(image_dir)
        assert files == {str(image_dir / "a.png"), str(image_dir / "b.png")}

    @pytest.mark.skipif(not hasattr(os, "symlink"), reason="symlinks not supported")
    def test_broken_symlink_skipped(self, image_dir):
        os.symlink(image_dir / "gone.png", image_dir / "dangling.png")
        files = find_image_files(image_dir)
        assert len(files) == 2

    @pytest.mark.skipif(
        not hasattr(os, "getuid") or os.getuid() == 0,
        reason="permission checks need a non-root POSIX user",
    )
    def test_unreadable_subdirectory_skipped(self, image_dir):
        locked = image_dir / "locked"
        locked.mkdir()
        make_pattern(4).save(locked / "d.png")
        locked.chmod(0)
        try:
            files = find_image_files(image_dir, recursive=True)
        finally:
            locked.chmod(0o755)
        assert len(files) == 2


class TestComputeFingerprint:
    """Test the fingerprint engine."""

    def test_fixed_length(self, sample_images):
        fp = compute_fingerprint(sample_images['a'])
        assert len(fp.data) == FINGERPRINT_BYTES

    def test_deterministic(self, sample_images):
        assert compute_fingerprint(sample_images['a']) == compute_fingerprint(sample_images['a'])

    def test_identical_files_same_fingerprint(self, sample_images):
        fp1 = compute_fingerprint(sample_images['a'])
        fp2 = compute_fingerprint(sample_images['a_copy'])
        assert fp1.distance(fp2) == 0

    def test_resized_copy_is_close(self, sample_images):
        fp1 = compute_fingerprint(sample_images['a'])
        fp2 = compute_fingerprint(sample_images['a_large'])
        assert fp1.distance(fp2) < DEFAULT_THRESHOLD

    def test_different_images_are_far(self, sample_images):
        fp1 = compute_fingerprint(sample_images['a'])
        fp2 = compute_fingerprint(sample_images['b'])
        assert fp1.distance(fp2) >= DEFAULT_THRESHOLD

    def test_other_formats(self, temp_dir):
        img = make_pattern(5)
        img.save(temp_dir / "x.png")
        img.save(temp_dir / "x.bmp")
        img.convert('P', palette=Image.Palette.ADAPTIVE).save(temp_dir / "x.gif")
        fp_png = compute_fingerprint(temp_dir / "x.png")
        assert compute_fingerprint(temp_dir / "x.bmp").distance(fp_png) == 0
        assert compute_fingerprint(temp_dir / "x.gif").distance(fp_png) < DEFAULT_THRESHOLD

    def test_corrupted_file(self, corrupted_image):
        with pytest.raises(ImageDecodeError) as excinfo:
            compute_fingerprint(corrupted_image)
        assert excinfo.value.path == str(corrupted_image)
        assert str(corrupted_image) in str(excinfo.value)

    def test_truncated_file(self, sample_images, temp_dir):
        data = Path(sample_images['a']).read_bytes()
        truncated = temp_dir / "truncated.png"
        truncated.write_bytes(data[:len(data) // 2])
        with pytest.raises(ImageDecodeError):
            compute_fingerprint(truncated)

    def test_nonexistent_file(self, temp_dir):
        with pytest.raises(FilesystemError):
            compute_fingerprint(temp_dir / "missing.png")


class TestPrepareImage:
    """Test image normalization before hashing."""

    def test_fits_working_size(self):
        prepared = prepare_image(Image.new('RGB', (1024, 512)))
        assert prepared.size == (256, 128)

    def test_small_images_upscaled(self):
        prepared = prepare_image(Image.new('RGB', (32, 32)))
        assert prepared.size == (256, 256)

    def test_palette_converted(self):
        prepared = prepare_image(Image.new('P', (64, 64)))
        assert prepared.mode == 'RGB'


class TestHashImage:
    """Test hash_image and the parallel pipeline."""

    def test_returns_canonical_path(self, image_dir):
        name, fp = hash_image(image_dir / ".." / image_dir.name / "a.png")
        assert name == str(image_dir / "a.png")
        assert fp == compute_fingerprint(image_dir / "a.png")

    def test_parallel_results(self, image_dir):
        paths = [str(image_dir / "a.png"), str(image_dir / "b.png")]
        results, failures = hash_images_parallel(paths, max_workers=2)
        assert failures == []
        assert dict(results) == {path: compute_fingerprint(path) for path in paths}

    def test_parallel_collects_failures(self, image_dir, corrupted_image):
        paths = [str(image_dir / "a.png"), str(corrupted_image)]
        results, failures = hash_images_parallel(paths, max_workers=2)
        assert [name for name, _ in results] == [str(image_dir / "a.png")]
        assert len(failures) == 1
        assert failures[0][0] == str(corrupted_image)
        assert isinstance(failures[0][1], ImageDecodeError)

    def test_parallel_empty(self):
        assert hash_images_parallel([]) == ([], [])

    def test_progress_callback(self, image_dir):
        calls = []
        hash_images_parallel(
            [str(image_dir / "a.png"), str(image_dir / "b.png")],
            progress_callback=lambda current, total: calls.append((current, total)),
        )
        assert calls[-1] == (2, 2)
