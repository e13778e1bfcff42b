import logging
import os
import stat

import pytest
import structlog

from terraform_invoker.errors import ApplyError, HandleConstructionError, InitError
from terraform_invoker.handle import CommandResult, InitOptions


class FakeHandle:
    """ToolHandle double that records calls into a shared list."""

    def __init__(self, work_dir, exec_path, calls, init_error=None, apply_error=None, on_init=None):
        self.work_dir = work_dir
        self.exec_path = exec_path
        self.calls = calls
        self.init_error = init_error
        self.apply_error = apply_error
        self.on_init = on_init

    def init(self, options: InitOptions) -> CommandResult:
        self.calls.append(("init", options.upgrade))
        if self.on_init:
            self.on_init(self.work_dir)
        if self.init_error:
            raise self.init_error
        return CommandResult(args=["init"], exit_code=0)

    def apply(self) -> CommandResult:
        self.calls.append(("apply",))
        if self.apply_error:
            raise self.apply_error
        return CommandResult(args=["apply"], exit_code=0)


class FakeFactory:
    """Handle factory that records construction and builds FakeHandles."""

    def __init__(self, construct_error=None, **handle_kwargs):
        self.calls = []
        self.construct_error = construct_error
        self.handle_kwargs = handle_kwargs

    def __call__(self, work_dir, exec_path):
        self.calls.append(("construct", work_dir, exec_path))
        if self.construct_error:
            raise self.construct_error
        return FakeHandle(work_dir, exec_path, self.calls, **self.handle_kwargs)

    def names(self):
        return [call[0] for call in self.calls]


@pytest.fixture
def make_factory():
    return FakeFactory


@pytest.fixture
def fake_factory():
    return FakeFactory()


@pytest.fixture
def failing_init_factory():
    failed = CommandResult(args=["init"], exit_code=1, stderr="Error: Failed to query provider")
    return FakeFactory(init_error=InitError("terraform init exited with code 1", result=failed))


@pytest.fixture
def failing_apply_factory():
    failed = CommandResult(args=["apply"], exit_code=1, stderr="Error: creating S3 bucket")
    return FakeFactory(apply_error=ApplyError("terraform apply exited with code 1", result=failed))


@pytest.fixture
def failing_construct_factory():
    return FakeFactory(construct_error=HandleConstructionError("no working directory specified"))


@pytest.fixture
def fake_terraform(tmp_path):
    """An executable file standing in for the terraform binary."""
    path = tmp_path / "bin" / "terraform"
    path.parent.mkdir()
    path.write_text("#!/bin/sh\nexit 0\n")
    path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return str(path)


@pytest.fixture
def work_dir(tmp_path):
    path = tmp_path / "stack"
    path.mkdir()
    return str(path)


@pytest.fixture(autouse=True)
def reset_logging():
    """Reset logging configuration around each test."""
    yield
    root = logging.getLogger()
    for handler in root.handlers[:]:
        root.removeHandler(handler)
    structlog.reset_defaults()
    structlog.contextvars.clear_contextvars()


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for key in list(os.environ):
        if key.startswith("TF_INVOKER_") or key == "TERRAFORM_CLI_PATH":
            monkeypatch.delenv(key, raising=False)
