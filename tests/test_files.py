import os

import pytest

from streamd.files import (
    File,
    KeyValueStore,
    OpenMode,
    copy_file,
    create_directory,
    directory_exists,
    entry_count,
    file_copy,
    file_exists,
    file_length,
    file_n_copy,
    remove_directory,
    remove_file,
    remove_tree,
    rename_path,
    trim_string,
)


def test_read_flag_value_opens_read_only(tmp_path):
    path = tmp_path / "r4.bin"
    path.write_bytes(b"abc")
    with File(path, OpenMode(4)) as handle:
        assert handle.read(3) == b"abc"
        with pytest.raises(OSError):
            handle.write(b"x")


def test_write_then_read_round_trip(tmp_path):
    path = tmp_path / "data.bin"
    with File(path) as handle:
        assert handle.write(b"hello world") == 11
        assert handle.length() == 11
        assert handle.position() == 11
        assert handle.seek(0) == 0
        assert handle.read(5) == b"hello"
        assert handle.position() == 5
    assert file_length(path) == 11


def test_close_resets_state(tmp_path):
    handle = File(tmp_path / "a.bin")
    assert handle.is_opened()
    assert handle.filename.endswith("a.bin")
    handle.close()
    assert not handle.is_opened()
    assert handle.filename == ""
    assert handle.length() == 0
    with pytest.raises(ValueError):
        handle.read(1)
    with pytest.raises(ValueError):
        handle.fileno()


def test_open_twice_raises(tmp_path):
    with File(tmp_path / "a.bin") as handle:
        with pytest.raises(RuntimeError):
            handle.open(tmp_path / "b.bin")


def test_open_missing_read_only_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        File(tmp_path / "missing", OpenMode.READ)


def test_read_only_mode_cannot_write(tmp_path):
    path = tmp_path / "r.bin"
    path.write_bytes(b"abc")
    with File(path, OpenMode.READ) as handle:
        assert handle.read(10) == b"abc"
        with pytest.raises(OSError):
            handle.write(b"x")


def test_last_access_time_matches_stat(tmp_path):
    path = tmp_path / "t.bin"
    path.write_bytes(b"x")
    with File(path, OpenMode.READ) as handle:
        stamp = handle.last_access_time()
        assert stamp.timestamp() == pytest.approx(os.stat(path).st_atime, abs=1e-3)


def test_file_length_of_missing_is_zero(tmp_path):
    assert file_length(tmp_path / "nothing") == 0


def test_file_exists_only_for_regular_files(tmp_path):
    path = tmp_path / "f"
    path.write_text("x")
    assert file_exists(path)
    assert not file_exists(tmp_path)
    assert not file_exists(tmp_path / "missing")


def test_remove_and_rename(tmp_path):
    old = tmp_path / "old"
    new = tmp_path / "new"
    old.write_text("content")
    rename_path(old, new)
    assert not old.exists()
    assert new.read_text() == "content"
    remove_file(new)
    assert not new.exists()
    with pytest.raises(FileNotFoundError):
        remove_file(new)


def test_copy_file_copies_content_and_mode(tmp_path):
    src = tmp_path / "src"
    dst = tmp_path / "dst"
    payload = bytes(range(256)) * 10
    src.write_bytes(payload)
    os.chmod(src, 0o640)
    dst.write_bytes(b"old content that is longer" * 200)
    copy_file(src, dst)
    assert dst.read_bytes() == payload
    assert os.stat(dst).st_mode & 0o777 == 0o640


def test_copy_file_missing_source_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        copy_file(tmp_path / "missing", tmp_path / "dst")


def test_file_n_copy_copies_whole_blocks_only(tmp_path):
    src = tmp_path / "src"
    dst = tmp_path / "dst"
    payload = b"0123456789"
    src.write_bytes(payload)
    dst.write_bytes(b"")
    written = file_n_copy(dst, src, 4)
    assert written == 8
    assert dst.read_bytes() == payload[:8]


def test_file_n_copy_exact_blocks(tmp_path):
    src = tmp_path / "src"
    dst = tmp_path / "dst"
    payload = b"abcdefgh"
    src.write_bytes(payload)
    dst.write_bytes(b"")
    assert file_n_copy(dst, src, 4) == len(payload)
    assert dst.read_bytes() == payload


def test_file_n_copy_needs_existing_destination(tmp_path):
    src = tmp_path / "src"
    src.write_bytes(b"abcd")
    with pytest.raises(FileNotFoundError):
        file_n_copy(tmp_path / "dst", src, 4)


def test_file_copy_uses_cp(tmp_path):
    src = tmp_path / "src"
    dst = tmp_path / "dst"
    src.write_bytes(b"payload bytes")
    assert file_copy(dst, src) == 0
    assert dst.read_bytes() == b"payload bytes"


def test_trim_string():
    assert trim_string(" \t key \r\n") == "key"
    assert trim_string("   ") == ""


def test_key_value_store_load(tmp_path):
    path = tmp_path / "settings.ini"
    path.write_text(
        "; full comment\n"
        "name = camera ; trailing comment\n"
        "name = other\n"
        "message = a[%C%R][%L%F]b\n"
        "no separator here\n"
        "  spaced\t=\t value \n"
    )
    store = KeyValueStore()
    store.load(path)
    assert store.get("name") == "camera"
    assert store.get("message") == "a\r\nb"
    assert store.get("spaced") == "value"
    assert store.get("missing") is None
    assert "name" in store
    assert len(store) == 3
    store.clear()
    assert len(store) == 0
    assert store.get("name") is None


def test_key_value_store_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        KeyValueStore().load(tmp_path / "missing.ini")


def test_directory_create_exists_remove(tmp_path):
    path = tmp_path / "dir"
    create_directory(path)
    assert directory_exists(path)
    with pytest.raises(FileExistsError):
        create_directory(path)
    remove_directory(path)
    assert not directory_exists(path)


def test_remove_directory_not_empty_raises(tmp_path):
    path = tmp_path / "dir"
    path.mkdir()
    (path / "file").write_text("x")
    with pytest.raises(OSError):
        remove_directory(path)


def test_remove_tree(tmp_path):
    root = tmp_path / "root"
    (root / "a" / "b").mkdir(parents=True)
    (root / "a" / "b" / "f.txt").write_text("x")
    (root / "a" / "g.txt").write_text("y")
    (root / "empty").mkdir()
    (root / "top.txt").write_text("z")
    remove_tree(root)
    assert not root.exists()


def test_remove_tree_missing_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        remove_tree(tmp_path / "missing")


def test_entry_count_removes_short_names(tmp_path):
    long_names = ["alpha.txt", "bravo.txt"]
    for name in long_names:
        (tmp_path / name).write_text("x")
    (tmp_path / "abc").write_text("x")
    assert entry_count(tmp_path) == len(long_names) - 1
    assert not (tmp_path / "abc").exists()
    assert sorted(os.listdir(tmp_path)) == long_names


def test_entry_count_missing_directory_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        entry_count(tmp_path / "missing")