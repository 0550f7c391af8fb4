from datetime import datetime

import pytest

from server_health.config import Settings
from server_health.exceptions import CheckFailedError, RemoteQueryError, ReportWriteError
from server_health.schemas.check_result import Column, CheckTable
from server_health.schemas.server import ServerRecord
from server_health.services.collectors.alert_collector import AlertCollector
from server_health.services.collectors.disk_collector import DiskCollector
from server_health.services.collectors.file_size_collector import FileSizeCollector
from server_health.services.collectors.reboot_collector import RebootCollector
from server_health.services.collectors.service_collector import ServiceCollector
from server_health.services.report_builder import ROLE_CHECKS, ReportBuilder, RoleCheck, slugify


class Row:
    def __init__(self, value, danger=False):
        self.value = value
        self.danger = danger


class FakeCollector:
    def __init__(self, title, rows=None, error=None, log=None):
        self.title = title
        self.rows = rows or []
        self.error = error
        self.calls = []
        self.log = log if log is not None else []

    def collect(self, server):
        self.calls.append(server.name)
        self.log.append((server.name, self.title))
        if self.error is not None:
            raise self.error
        return CheckTable(self.title, [Column("value", "Value")], list(self.rows))


@pytest.fixture
def collectors():
    log = []
    return {
        "disk": FakeCollector("Disk Space", [Row("C:", danger=True)], log=log),
        "reboot": FakeCollector("Pending Reboot", [Row("no")], log=log),
        "sql": FakeCollector("SQL Server Services", [Row("MSSQLSERVER")], log=log),
        "alerts": FakeCollector("vCenter Alerts", [Row("alarm <b>1</b>")], log=log),
        "log": log,
    }


def _builder(config, renderer, collectors):
    checks = [
        RoleCheck("windows", "disk_space", lambda cfg: collectors["disk"]),
        RoleCheck("windows", "pending_reboot", lambda cfg: collectors["reboot"]),
        RoleCheck("mssql_services", "mssql_services", lambda cfg: collectors["sql"]),
        RoleCheck("vcenter_alerts", "vcenter_alerts", lambda cfg: collectors["alerts"]),
    ]
    return ReportBuilder(config=config, renderer=renderer, checks=checks)


SERVERS = [
    ServerRecord(name="srv-app01", location="DC1", description="App", roles="windows"),
    ServerRecord(name="srv-sql01", location="DC1", description="SQL", roles="windows,mssql_services"),
    ServerRecord(name="vcenter01", location="DC2", description="vCenter", roles="vcenter_alerts"),
    ServerRecord(name="printer01", location="DC2", description="No checks", roles=""),
]


def test_checks_run_only_for_matching_roles(config, renderer, collectors):
    _builder(config, renderer, collectors).build(SERVERS)

    assert collectors["disk"].calls == ["srv-app01", "srv-sql01"]
    assert collectors["reboot"].calls == ["srv-app01", "srv-sql01"]
    assert collectors["sql"].calls == ["srv-sql01"]
    assert collectors["alerts"].calls == ["vcenter01"]


def test_server_without_roles_triggers_no_checks(config, renderer, collectors):
    html = _builder(config, renderer, collectors).build([SERVERS[3]])

    assert collectors["log"] == []
    assert '<section class="server" id="printer01">' in html


def test_checks_run_in_fixed_order(config, renderer, collectors):
    _builder(config, renderer, collectors).build([SERVERS[1]])

    assert [title for _, title in collectors["log"]] == [
        "Disk Space", "Pending Reboot", "SQL Server Services",
    ]


def test_report_composes_groups_and_tables(config, renderer, collectors):
    html = _builder(config, renderer, collectors).build(SERVERS, now=datetime(2026, 10, 18, 6, 0, 0))

    assert "<title>Nightly Check</title>" in html
    assert "Generated: 2026-10-18 06:00:00" in html
    assert html.index('id="srv-app01"') < html.index('id="srv-sql01"') < html.index('id="vcenter01"')
    assert "srv-sql01 - DC1 - SQL" in html
    assert html.count('class="danger"') == 2
    assert "alarm &lt;b&gt;1&lt;/b&gt;" in html
    assert '<a href="#srv-app01">' in html


def test_failed_check_aborts_by_default(config, renderer, collectors):
    collectors["reboot"].error = RemoteQueryError("srv-app01", "WinRM unreachable")

    with pytest.raises(CheckFailedError) as exc_info:
        _builder(config, renderer, collectors).build(SERVERS)

    assert exc_info.value.server == "srv-app01"
    assert exc_info.value.check == "pending_reboot"
    assert isinstance(exc_info.value.cause, RemoteQueryError)
    assert collectors["sql"].calls == []
    assert collectors["alerts"].calls == []


def test_failed_check_is_reported_when_continuing(renderer, collectors):
    config = Settings(CONTINUE_ON_ERROR=True)
    collectors["reboot"].error = RemoteQueryError("srv-app01", "WinRM unreachable")

    html = _builder(config, renderer, collectors).build(SERVERS)

    assert "srv-app01: WinRM unreachable" in html
    assert collectors["sql"].calls == ["srv-sql01"]
    assert collectors["alerts"].calls == ["vcenter01"]


def test_write_overwrites_existing_report(config, renderer, collectors, tmp_path):
    target = tmp_path / "out" / "report.html"
    target.parent.mkdir()
    target.write_text("old report")

    _builder(config, renderer, collectors).write(SERVERS[:1], str(target))

    content = target.read_text(encoding="utf-8")
    assert "old report" not in content
    assert content.startswith("<!DOCTYPE html>")


def test_write_creates_parent_directories(config, renderer, collectors, tmp_path):
    target = tmp_path / "reports" / "daily" / "report.html"
    _builder(config, renderer, collectors).write(SERVERS[:1], str(target))
    assert target.exists()


def test_write_to_a_directory_raises_report_write_error(config, renderer, collectors, tmp_path):
    with pytest.raises(ReportWriteError, match="Cannot write report"):
        _builder(config, renderer, collectors).write(SERVERS[:1], str(tmp_path))


def test_duplicate_server_names_get_unique_group_ids(config, renderer, collectors):
    servers = [ServerRecord(name="srv 01"), ServerRecord(name="SRV-01")]
    html = _builder(config, renderer, collectors).build(servers)

    assert 'id="srv-01"' in html
    assert 'id="srv-01-2"' in html


def test_slugify():
    assert slugify("SRV_App.01") == "srv-app-01"
    assert slugify("***") == "server"


def test_default_role_checks_cover_every_role_in_order():
    assert [(c.role, c.name) for c in ROLE_CHECKS] == [
        ("windows", "disk_space"),
        ("windows", "pending_reboot"),
        ("vmware_services", "vmware_services"),
        ("mssql_services", "mssql_services"),
        ("mstmg_services", "mstmg_services"),
        ("surfcop_services", "surfcop_services"),
        ("pi_local_db", "pi_local_db"),
        ("vcenter_alerts", "vcenter_alerts"),
    ]


def test_default_role_checks_build_collectors_from_config(renderer):
    config = Settings(DISK_FREE_THRESHOLD_GB=20, FILE_SIZE_THRESHOLD_GB=7, PI_LOCAL_DB_PATH=r"D:\pi.dat")
    builder = ReportBuilder(config=config, renderer=renderer)
    collectors = {check.name: collector for check, collector in builder.checks}

    assert isinstance(collectors["disk_space"], DiskCollector)
    assert collectors["disk_space"].threshold_bytes == 20 * 1024 ** 3
    assert isinstance(collectors["pending_reboot"], RebootCollector)
    assert isinstance(collectors["surfcop_services"], ServiceCollector)
    assert collectors["mssql_services"].prefix == "SQL Server"
    assert isinstance(collectors["pi_local_db"], FileSizeCollector)
    assert collectors["pi_local_db"].path == r"D:\pi.dat"
    assert collectors["pi_local_db"].threshold_bytes == 7 * 1024 ** 3
    assert isinstance(collectors["vcenter_alerts"], AlertCollector)

    client = collectors["disk_space"].client_factory("srv-app01")
    assert client.config is config
    assert client.endpoint == "http://srv-app01:5985/wsman"
