"""
Shared fakes for the server health report tests. Nothing here touches the network.
"""
from types import SimpleNamespace

import pytest

from server_health.config import PACKAGE_TEMPLATE_DIR, Settings
from server_health.schemas.server import ServerRecord
from server_health.services.report_renderer import ReportRenderer


class FakeWinRMClient:
    """Returns canned query_json results and records the scripts it was given."""

    def __init__(self, results=None, error=None):
        self.results = results if results is not None else []
        self.error = error
        self.scripts = []
        self.hosts = []

    def __call__(self, host):
        self.hosts.append(host)
        return self

    def query_json(self, script):
        self.scripts.append(script)
        if self.error is not None:
            raise self.error
        return self.results


class FakeView:
    def __init__(self, datacenters):
        self.view = datacenters
        self.destroyed = False

    def Destroy(self):
        self.destroyed = True


class FakeVCenterSession:
    """Stands in for VCenterSession; yields a content object with the given datacenters."""

    def __init__(self, datacenters):
        self.view = FakeView(datacenters)
        self.hosts = []
        self.closed = 0
        self.content = SimpleNamespace(
            rootFolder=object(),
            viewManager=SimpleNamespace(CreateContainerView=lambda root, types, recursive: self.view),
        )

    def __call__(self, host):
        self.hosts.append(host)
        return self

    def __enter__(self):
        return self.content

    def __exit__(self, exc_type, exc, tb):
        self.closed += 1
        return False


@pytest.fixture
def fake_winrm():
    return FakeWinRMClient


@pytest.fixture
def renderer():
    return ReportRenderer(PACKAGE_TEMPLATE_DIR)


@pytest.fixture
def config():
    return Settings(CONTINUE_ON_ERROR=False, REPORT_TITLE="Nightly Check")


@pytest.fixture
def windows_server():
    return ServerRecord(name="srv-app01", location="DC1", description="App server", roles="windows")


@pytest.fixture
def fake_vcenter():
    return FakeVCenterSession
