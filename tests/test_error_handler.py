"""
Tests for video_recall/error_handler.py

Tests exception-to-friendly-message mapping, the safe_operation decorator,
and UserFriendlyError pass-through.
"""

import pytest
import yaml

from video_recall.error_handler import (
    UserFriendlyError,
    error_path,
    get_friendly_message,
    handle_error,
    safe_operation,
)
from video_recall.errors import (
    SerializationFailedError,
    UnresolvableReferenceError,
    UnsupportedReferenceError,
)
from video_recall.logging_config import get_log_file_path


# ---------------------------------------------------------------------------
# UserFriendlyError
# ---------------------------------------------------------------------------

class TestUserFriendlyError:
    def test_basic_creation(self):
        err = UserFriendlyError("Something broke")
        assert err.user_message == "Something broke"
        assert err.technical_message == "Something broke"

    def test_str_is_technical(self):
        err = UserFriendlyError("User msg", "Tech msg")
        assert str(err) == "Tech msg"


# ---------------------------------------------------------------------------
# get_friendly_message
# ---------------------------------------------------------------------------

class TestGetFriendlyMessage:
    def test_unsupported_reference(self):
        title, msg = get_friendly_message(UnsupportedReferenceError("no bookmark", "/x.mp4"))
        assert title == "Cannot remember this file"
        assert "Recent Videos" in msg

    def test_unresolvable_reference(self):
        title, _ = get_friendly_message(UnresolvableReferenceError("gone"))
        assert "no longer available" in title.lower()

    def test_store_error_subclass(self):
        title, _ = get_friendly_message(SerializationFailedError("bad encode"))
        assert "could not be saved" in title.lower()

    def test_file_not_found(self):
        title, msg = get_friendly_message(FileNotFoundError(2, "missing", "clip.mp4"))
        assert "not found" in title.lower()
        assert "clip.mp4" in msg

    def test_permission_error(self):
        title, _ = get_friendly_message(PermissionError("denied"))
        assert "permission" in title.lower()

    def test_os_error(self):
        title, _ = get_friendly_message(OSError("disk full"))
        assert "disk" in title.lower()

    def test_codec_string_match(self):
        title, _ = get_friendly_message(RuntimeError("Codec not supported"))
        assert title == "Playback error"

    def test_yaml_error_maps_by_type(self):
        title, msg = get_friendly_message(yaml.YAMLError("mapping values are not allowed here"))
        assert title == "Settings file error"
        assert "mapping values" in msg

    def test_default_fallback_points_to_log(self):
        title, msg = get_friendly_message(RuntimeError("something totally unexpected"))
        assert title == "Something went wrong"
        assert str(get_log_file_path()) in msg


# ---------------------------------------------------------------------------
# handle_error / safe_operation
# ---------------------------------------------------------------------------

class TestHandleError:
    def test_returns_friendly_tuple(self):
        title, msg = handle_error(FileNotFoundError("test.mp4"), "loading video")
        assert isinstance(title, str)
        assert isinstance(msg, str)
        assert len(title) > 0


class TestSafeOperation:
    def test_normal_return_value(self):
        @safe_operation("test")
        def good_func():
            return 42
        assert good_func() == 42

    def test_wraps_generic_exception(self):
        @safe_operation("test")
        def bad_func():
            raise ValueError("something bad")
        with pytest.raises(UserFriendlyError) as exc_info:
            bad_func()
        assert exc_info.value.technical_message == "something bad"
        assert isinstance(exc_info.value.__cause__, ValueError)

    def test_passes_through_user_friendly_error(self):
        @safe_operation("test")
        def already_friendly():
            raise UserFriendlyError("Already friendly", "technical detail")
        with pytest.raises(UserFriendlyError) as exc_info:
            already_friendly()
        assert exc_info.value.user_message == "Already friendly"

    def test_carries_title_and_video_path(self):
        @safe_operation("opening video")
        def open_missing():
            raise UnresolvableReferenceError("gone", "/videos/clip.mp4")
        with pytest.raises(UserFriendlyError) as exc_info:
            open_missing()
        assert exc_info.value.title == "Video no longer available"
        assert exc_info.value.path == "/videos/clip.mp4"


class TestErrorPath:
    def test_reference_error_path(self):
        assert error_path(UnsupportedReferenceError("nope", "/a.mp4")) == "/a.mp4"

    def test_os_error_filename(self):
        assert error_path(FileNotFoundError(2, "missing", "/b.mp4")) == "/b.mp4"

    def test_other_errors_have_no_path(self):
        assert error_path(ValueError("x")) == ""
        assert error_path(OSError("no filename")) == ""
