"""Tests for name lookup, metadata fetching and path resolution."""
import pytest
from unittest.mock import Mock

from mtpx.core.config import MtpxConfig
from mtpx.core.constants import ROOT_HANDLE, SIZE_OVERFLOW, ObjectFormat, ObjectProperty
from mtpx.core.exceptions import InvalidPathError, ObjectAccessError, ObjectNotFoundError
from mtpx.core.models import ObjectInfo
from mtpx.core.resolver import (
    describe,
    file_exists,
    get_file_size,
    lookup_by_name,
    resolve_handle_or_path,
    resolve_path,
    root_info,
)
from mtpx.core.mutation import make_directory


class TestDescribe:
    """Test suite for describe()."""

    def test_root_is_synthesized(self):
        """Test the root descriptor needs no store call."""
        store = Mock()

        info = describe(store, ROOT_HANDLE)

        assert info.is_dir is True
        assert info.full_path == '/'
        assert info.size == 0
        assert info.object_id == ROOT_HANDLE
        store.get_object_info.assert_not_called()

    def test_root_size_follows_config(self):
        """Test the root size convention is configurable."""
        config = MtpxConfig(root_size=SIZE_OVERFLOW)

        assert root_info(config).size == SIZE_OVERFLOW

    def test_file(self, store, tree):
        """Test a file descriptor."""
        info = describe(store, tree['IMG_0001.jpg'], '/DCIM/Camera')

        assert info.name == 'IMG_0001.jpg'
        assert info.extension == 'jpg'
        assert info.is_dir is False
        assert info.size == 4
        assert info.parent_path == '/DCIM/Camera'
        assert info.full_path == '/DCIM/Camera/IMG_0001.jpg'
        assert info.parent_id == tree['Camera']
        assert info.object_id == tree['IMG_0001.jpg']
        assert info.mod_time is not None

    def test_directory_has_no_extension(self, store):
        """Test directories never get an extension."""
        handle = store.add_directory(ROOT_HANDLE, 'backup.d')

        info = describe(store, handle, '/')

        assert info.is_dir is True
        assert info.extension == ''

    def test_parent_path_is_normalized(self, store, tree):
        """Test the parent path hint is normalized."""
        info = describe(store, tree['song.mp3'], 'Music\\')

        assert info.parent_path == '/Music'
        assert info.full_path == '/Music/song.mp3'

    def test_unknown_parent_path(self, store, tree):
        """Test full_path without a parent hint."""
        info = describe(store, tree['song.mp3'])

        assert info.parent_path == ''
        assert info.full_path == '/song.mp3'

    def test_info_failure(self, store, tree):
        """Test transport failure becomes ObjectAccessError with the handle."""
        store.fail_info.add(tree['notes.txt'])

        with pytest.raises(ObjectAccessError) as exc_info:
            describe(store, tree['notes.txt'])

        assert exc_info.value.handle == tree['notes.txt']


class TestGetFileSize:
    """Test suite for get_file_size()."""

    def test_compact_size(self):
        """Test the compact field is used when it holds the size."""
        store = Mock()
        info = ObjectInfo(compressed_size=1234)

        assert get_file_size(store, info, 7) == 1234
        store.get_object_property_value.assert_not_called()

    def test_overflow_size(self, store):
        """Test the sentinel triggers a precise size query."""
        big = 5 * 1024 ** 3
        handle = store.add_file(ROOT_HANDLE, 'movie.mkv', size=big)

        info = describe(store, handle, '/')

        assert info.info.compressed_size == SIZE_OVERFLOW
        assert info.size == big

    def test_overflow_query_failure(self, store):
        """Test failure of the precise size query embeds the handle."""
        handle = store.add_file(ROOT_HANDLE, 'movie.mkv', size=SIZE_OVERFLOW + 1)
        store.fail_property.add(handle)

        with pytest.raises(ObjectAccessError) as exc_info:
            describe(store, handle)

        assert exc_info.value.handle == handle
        assert str(handle) in str(exc_info.value)

    def test_overflow_asks_for_object_size(self):
        """Test the OBJECT_SIZE property is queried."""
        store = Mock()
        store.get_object_property_value.return_value = 2 ** 33
        info = ObjectInfo(compressed_size=SIZE_OVERFLOW)

        assert get_file_size(store, info, 42) == 2 ** 33
        store.get_object_property_value.assert_called_once_with(42, ObjectProperty.OBJECT_SIZE)

    def test_malformed_size(self):
        """Test a non-numeric size value becomes ObjectAccessError."""
        store = Mock()
        store.get_object_property_value.return_value = 'huge'
        info = ObjectInfo(compressed_size=SIZE_OVERFLOW)

        with pytest.raises(ObjectAccessError) as exc_info:
            get_file_size(store, info, 42)

        assert exc_info.value.handle == 42


class TestLookupByName:
    """Test suite for lookup_by_name()."""

    def test_found(self, store, tree):
        """Test a matching child is returned."""
        info = lookup_by_name(store, store.storage_id, tree['DCIM'], 'Camera', '/DCIM')

        assert info.object_id == tree['Camera']
        assert info.is_dir is True
        assert info.full_path == '/DCIM/Camera'

    def test_not_found(self, store, tree):
        """Test a missing name raises ObjectNotFoundError."""
        with pytest.raises(ObjectNotFoundError):
            lookup_by_name(store, store.storage_id, tree['DCIM'], 'Screenshots')

    def test_exact_match_only(self, store, tree):
        """Test names are compared exactly."""
        with pytest.raises(ObjectNotFoundError):
            lookup_by_name(store, store.storage_id, ROOT_HANDLE, 'dcim')

    def test_misses_fetch_only_the_name(self, store, tree):
        """Test non-matching children are not fully described."""
        lookup_by_name(store, store.storage_id, ROOT_HANDLE, 'notes.txt')

        info_calls = [handle for method, handle in store.calls if method == 'get_object_info']
        assert info_calls == [tree['notes.txt']]

    def test_rechecks_full_name(self):
        """Test a name property that disagrees with the info record is skipped."""
        store = Mock()
        store.get_object_handles.return_value = [1, 2]
        store.get_object_property_value.side_effect = ['song.mp3', 'song.mp3']
        store.get_object_info.side_effect = [
            ObjectInfo(filename='other.mp3', parent_object=ROOT_HANDLE),
            ObjectInfo(filename='song.mp3', parent_object=ROOT_HANDLE),
        ]

        info = lookup_by_name(store, 1, ROOT_HANDLE, 'song.mp3')

        assert info.object_id == 2

    def test_enumeration_failure(self, store, tree):
        """Test listing failure becomes ObjectAccessError."""
        store.fail_handles.add(tree['Music'])

        with pytest.raises(ObjectAccessError):
            lookup_by_name(store, store.storage_id, tree['Music'], 'song.mp3')

    def test_property_failure(self, store, tree):
        """Test name property failure becomes ObjectAccessError."""
        store.fail_property.add(tree['DCIM'])

        with pytest.raises(ObjectAccessError):
            lookup_by_name(store, store.storage_id, ROOT_HANDLE, 'Music')


class TestResolvePath:
    """Test suite for resolve_path()."""

    def test_root(self):
        """Test "/" needs no store call."""
        store = Mock()

        info = resolve_path(store, 1, '/')

        assert info.object_id == ROOT_HANDLE
        assert store.method_calls == []

    def test_empty_path(self, store):
        """Test an empty path is invalid."""
        with pytest.raises(InvalidPathError):
            resolve_path(store, store.storage_id, '')

    def test_nested_file(self, store, tree):
        """Test a nested file resolves to its handle."""
        info = resolve_path(store, store.storage_id, '/DCIM/Camera/IMG_0002.jpg')

        assert info.object_id == tree['IMG_0002.jpg']
        assert info.size == 6
        assert info.parent_path == '/DCIM/Camera'

    def test_full_path_is_normalized_input(self, store, tree):
        """Test full_path is the caller's normalized path."""
        info = resolve_path(store, store.storage_id, 'DCIM\\Camera//')

        assert info.full_path == '/DCIM/Camera'
        assert info.object_id == tree['Camera']

    def test_missing_segment(self, store, tree):
        """Test a missing segment surfaces as InvalidPathError."""
        with pytest.raises(InvalidPathError) as exc_info:
            resolve_path(store, store.storage_id, '/DCIM/Screenshots/a.png')

        assert isinstance(exc_info.value.__cause__, ObjectNotFoundError)

    def test_file_in_the_middle(self, store, tree):
        """Test a file cannot have children even if the name would match."""
        with pytest.raises(InvalidPathError):
            resolve_path(store, store.storage_id, '/notes.txt/anything')

    def test_file_in_the_middle_stops_lookup(self, store, tree):
        """Test resolution stops at the file segment."""
        with pytest.raises(InvalidPathError):
            resolve_path(store, store.storage_id, '/Music/song.mp3/a/b')

        listed = [handle for method, handle in store.calls if method == 'get_object_handles']
        assert tree['song.mp3'] not in listed

    def test_access_error_propagates(self, store, tree):
        """Test store failures are not turned into InvalidPathError."""
        store.fail_handles.add(tree['DCIM'])

        with pytest.raises(ObjectAccessError):
            resolve_path(store, store.storage_id, '/DCIM/Camera')

    def test_created_directory_round_trip(self, store, tree):
        """Test a created directory resolves to the handle creation returned."""
        parent = resolve_path(store, store.storage_id, '/DCIM')
        handle = make_directory(store, store.storage_id, parent.object_id, 'Screenshots')

        info = resolve_path(store, store.storage_id, parent.full_path + '/Screenshots')

        assert info.object_id == handle
        assert info.is_dir is True


class TestResolveHandleOrPath:
    """Test suite for resolve_handle_or_path()."""

    def test_both_empty(self, store):
        """Test handle and path cannot both be empty."""
        with pytest.raises(InvalidPathError):
            resolve_handle_or_path(store, store.storage_id, 0, '')

    def test_path(self, store, tree):
        """Test a zero handle falls back to the path."""
        info = resolve_handle_or_path(store, store.storage_id, 0, '/Music')

        assert info.object_id == tree['Music']

    def test_handle_is_trusted(self, store, tree):
        """Test a handle wins over a path that names another object."""
        info = resolve_handle_or_path(store, store.storage_id, tree['song.mp3'], '/DCIM')

        assert info.object_id == tree['song.mp3']
        assert info.name == 'song.mp3'


class TestFileExists:
    """Test suite for file_exists()."""

    def test_existing_directory(self, store, tree):
        """Test an existing directory."""
        result = file_exists(store, store.storage_id, full_path='/DCIM/Camera')

        assert result.exists is True
        assert result.is_dir is True
        assert result.object_id == tree['Camera']

    def test_missing(self, store, tree):
        """Test a missing path."""
        result = file_exists(store, store.storage_id, full_path='/nope')

        assert result.exists is False
        assert result.object_id == 0

    def test_store_failure_reads_as_missing(self, store, tree):
        """Test store failures read as missing."""
        store.fail_info.add(tree['notes.txt'])

        result = file_exists(store, store.storage_id, handle=tree['notes.txt'])

        assert result.exists is False


class TestObjectFormat:
    """Test suite for directory detection."""

    def test_association_is_directory(self):
        """Test only ASSOCIATION objects are directories."""
        assert ObjectInfo(object_format=ObjectFormat.ASSOCIATION).is_association is True
        assert ObjectInfo(object_format=ObjectFormat.UNDEFINED).is_association is False
