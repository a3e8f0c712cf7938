import os
import sys
from unittest import mock

import pytest

from xkit.app.env import (
    DEV_NULL_FILE_PATH,
    DEV_STDERR_FILE_PATH,
    DEV_STDIN_FILE_PATH,
    DEV_STDOUT_FILE_PATH,
    EnvContainer,
    cache_dir_path,
    config_dir_path,
    data_dir_path,
    env_bool,
    env_container_for_os,
    env_container_from_environ,
    env_container_with_overrides,
    environ,
    environ_map,
    home_dir_path,
    is_dev_null,
    is_dev_path,
    is_dev_stderr,
    is_dev_stdin,
    is_dev_stdout,
)


def test_env_container_from_map():
    c = EnvContainer({"foo1": "bar1", "foo2": "bar2", "foo3": ""})
    assert c.env("foo1") == "bar1"
    assert c.env("foo2") == "bar2"
    assert c.env("foo3") == ""
    assert environ(c) == ["foo1=bar1", "foo2=bar2"]
    assert environ_map(c) == {"foo1": "bar1", "foo2": "bar2"}


def test_env_container_from_environ_and_overrides():
    c = env_container_from_environ(["foo1=bar1", "foo2=bar2", "foo3=bar3", "foo4="])
    assert c.env("foo1") == "bar1"
    assert c.env("foo2") == "bar2"
    assert c.env("foo3") == "bar3"
    assert c.env("foo4") == ""
    assert environ(c) == ["foo1=bar1", "foo2=bar2", "foo3=bar3"]
    assert environ_map(c) == {"foo1": "bar1", "foo2": "bar2", "foo3": "bar3"}

    c = env_container_with_overrides(c, {"foo1": "", "foo2": "baz2"})
    assert c.env("foo1") == ""
    assert c.env("foo2") == "baz2"
    assert c.env("foo3") == "bar3"
    assert c.env("foo4") == ""
    assert environ(c) == ["foo2=baz2", "foo3=bar3"]
    assert environ_map(c) == {"foo2": "baz2", "foo3": "bar3"}


def test_env_container_from_environ_rejects_missing_equals():
    with pytest.raises(ValueError):
        env_container_from_environ(["foo1=bar1", "foo2=bar2", "foo3"])


def test_value_may_contain_equals():
    c = env_container_from_environ(["a=b=c"])
    assert c.env("a") == "b=c"


def test_env_container_for_os():
    with mock.patch.dict(os.environ, {"XKIT_TEST_VAR": "value"}):
        c = env_container_for_os()
    assert c.env("XKIT_TEST_VAR") == "value"


def test_is_dev():
    assert is_dev_stdin(DEV_STDIN_FILE_PATH) == (DEV_STDIN_FILE_PATH != "")
    assert is_dev_stdout(DEV_STDOUT_FILE_PATH) == (DEV_STDOUT_FILE_PATH != "")
    assert is_dev_stderr(DEV_STDERR_FILE_PATH) == (DEV_STDERR_FILE_PATH != "")
    assert is_dev_null(DEV_NULL_FILE_PATH) == (DEV_NULL_FILE_PATH != "")
    assert not is_dev_stdin("foo")
    assert not is_dev_stdout("foo")
    assert not is_dev_stderr("foo")
    assert not is_dev_null("foo")
    assert is_dev_path(DEV_NULL_FILE_PATH)
    assert not is_dev_path("foo")
    assert not is_dev_path("")


def test_env_bool():
    c = EnvContainer({"foo1": "bar1", "foo2": "true", "foo3": "false"})
    with pytest.raises(ValueError):
        env_bool(c, "foo1", False)
    assert env_bool(c, "foo2", False) is True
    assert env_bool(c, "foo3", False) is False
    assert env_bool(c, "notset", True) is True


def test_unix_dir_paths_from_home():
    c = EnvContainer({"HOME": "/home/u"})
    with mock.patch.object(sys, "platform", "linux"):
        assert home_dir_path(c) == "/home/u"
        assert cache_dir_path(c) == os.path.join("/home/u", ".cache")
        assert config_dir_path(c) == os.path.join("/home/u", ".config")
        assert data_dir_path(c) == os.path.join("/home/u", ".local", "share")


def test_unix_dir_paths_prefer_xdg():
    c = EnvContainer(
        {
            "HOME": "/home/u",
            "XDG_CACHE_HOME": "/c",
            "XDG_CONFIG_HOME": "/cfg",
            "XDG_DATA_HOME": "/d",
        }
    )
    with mock.patch.object(sys, "platform", "linux"):
        assert cache_dir_path(c) == "/c"
        assert config_dir_path(c) == "/cfg"
        assert data_dir_path(c) == "/d"


def test_unix_dir_paths_unset():
    c = EnvContainer({})
    with mock.patch.object(sys, "platform", "linux"):
        with pytest.raises(LookupError):
            home_dir_path(c)
        with pytest.raises(LookupError):
            cache_dir_path(c)


def test_windows_dir_paths():
    c = EnvContainer({"USERPROFILE": "C:\\u", "LOCALAPPDATA": "C:\\l", "APPDATA": "C:\\a"})
    with mock.patch.object(sys, "platform", "win32"):
        assert home_dir_path(c) == "C:\\u"
        assert cache_dir_path(c) == "C:\\l"
        assert config_dir_path(c) == "C:\\a"
        assert data_dir_path(c) == "C:\\l"
        with pytest.raises(LookupError):
            config_dir_path(EnvContainer({}))