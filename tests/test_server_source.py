import pytest
from pydantic import ValidationError

from server_health.exceptions import ServerListError
from server_health.schemas.server import ServerRecord
from server_health.services.server_source import load_servers


def _write(tmp_path, text):
    path = tmp_path / "servers.csv"
    path.write_text(text, encoding="utf-8")
    return str(path)


def test_load_servers_parses_rows_and_roles(tmp_path):
    path = _write(tmp_path, (
        "Name,Location,Description,Roles\n"
        "srv-app01,DC1,App server,windows\n"
        "srv-sql01,DC1,\"SQL, primary\",\"Windows; MSSQL_Services\"\n"
        "vcenter01,DC2,vCenter,vcenter_alerts | windows\n"
    ))

    servers = load_servers(path)

    assert [s.name for s in servers] == ["srv-app01", "srv-sql01", "vcenter01"]
    assert servers[1].description == "SQL, primary"
    assert servers[1].roles == frozenset({"windows", "mssql_services"})
    assert servers[2].has_role("vcenter_alerts")
    assert servers[2].has_role("WINDOWS")
    assert not servers[0].has_role("mssql_services")


def test_header_is_case_insensitive_and_bom_tolerant(tmp_path):
    path = tmp_path / "servers.csv"
    path.write_bytes("\ufeffNAME,location,Description,ROLES\nsrv01,DC1,,windows\n".encode("utf-8"))

    servers = load_servers(str(path))

    assert servers[0].name == "srv01"
    assert servers[0].description == ""


def test_rows_without_name_are_skipped(tmp_path):
    path = _write(tmp_path, "Name,Location,Description,Roles\n,DC1,ghost,windows\nsrv01,DC1,,\n")

    servers = load_servers(path)

    assert [s.name for s in servers] == ["srv01"]
    assert servers[0].roles == frozenset()


def test_role_tag_is_not_matched_by_substring(tmp_path):
    path = _write(tmp_path, "Name,Location,Description,Roles\nsrv01,DC1,,mssql_services_legacy\n")

    server = load_servers(path)[0]

    assert not server.has_role("mssql_services")


def test_missing_column_raises(tmp_path):
    path = _write(tmp_path, "Name,Location,Roles\nsrv01,DC1,windows\n")
    with pytest.raises(ServerListError, match="description"):
        load_servers(path)


def test_missing_file_raises(tmp_path):
    with pytest.raises(ServerListError):
        load_servers(str(tmp_path / "nope.csv"))


def test_empty_file_raises(tmp_path):
    with pytest.raises(ServerListError):
        load_servers(_write(tmp_path, ""))


def test_non_utf8_file_raises(tmp_path):
    path = tmp_path / "servers.csv"
    path.write_bytes("Name,Location,Description,Roles\nsrv01,Москва,Сервер,windows\n".encode("cp1251"))

    with pytest.raises(ServerListError, match="Cannot read server list"):
        load_servers(str(path))


def test_directory_instead_of_file_raises(tmp_path):
    with pytest.raises(ServerListError):
        load_servers(str(tmp_path))


def test_server_record_is_immutable():
    server = ServerRecord(name=" srv01 ", roles=["Windows", " "])

    assert server.name == "srv01"
    assert server.roles == frozenset({"windows"})
    with pytest.raises(ValidationError):
        server.name = "other"
