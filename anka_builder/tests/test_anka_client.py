import json
import subprocess
import types

import pytest

import anka_builder.anka_client.client as client_mod
import anka_builder.anka_client.proc as proc_mod
from anka_builder.anka_client import AnkaClient, run_captured
from anka_builder.errors import (
    MalformedOutputError,
    ProcessLaunchError,
    ToolDomainError,
)
from anka_builder.models import (
    CloneParams,
    CreateDiskParams,
    CreateParams,
    DeleteParams,
    RegistryParams,
    RegistryPushParams,
    StartParams,
    StopParams,
    SuspendParams,
)


@pytest.fixture
def fake_anka(monkeypatch):
    """
    Patch the subprocess layer. Returns the list of argv seen and a dict
    the test fills with the next stdout payload.
    """
    calls: list[list[str]] = []
    reply = {"payload": {"status": "OK"}}

    def fake_run_captured(argv):
        calls.append(list(argv))
        payload = reply["payload"]
        return payload if isinstance(payload, bytes) else json.dumps(payload).encode()

    monkeypatch.setattr(client_mod, "run_captured", fake_run_captured)
    return calls, reply


def test_invoke_builds_machine_readable_argv(fake_anka):
    calls, _ = fake_anka
    client = AnkaClient(binary="/usr/local/bin/anka")

    result = client.invoke("describe", ["foo"])

    assert calls == [["/usr/local/bin/anka", "--machine-readable", "describe", "foo"]]
    assert result.ok


def test_invoke_returns_non_ok_status(fake_anka):
    _, reply = fake_anka
    reply["payload"] = {"status": "ERROR", "message": "nope"}

    result = AnkaClient().invoke("show", ["foo"])

    assert result.ok is False
    assert result.message == "nope"


def test_invoke_malformed_output(fake_anka):
    _, reply = fake_anka
    reply["payload"] = b"Segmentation fault"

    with pytest.raises(MalformedOutputError):
        AnkaClient().invoke("show", ["foo"])


def test_describe_round_trip(fake_anka):
    calls, reply = fake_anka
    reply["payload"] = {"status": "OK", "body": {"CPU": {"Threads": 2}, "UUID": "u-1"}}

    descr = AnkaClient().describe("foo")

    assert calls[0][-2:] == ["describe", "foo"]
    assert descr.cpu.threads == 2
    assert descr.uuid == "u-1"


@pytest.mark.parametrize(
    "body",
    [
        {"CPU": {"Threads": "many"}},
        ["not", "an", "object"],
        "foo",
    ],
)
def test_describe_unexpected_body_is_malformed(fake_anka, body):
    _, reply = fake_anka
    reply["payload"] = {"status": "OK", "body": body}

    with pytest.raises(MalformedOutputError, match="unexpected describe body"):
        AnkaClient().describe("foo")


def test_show_list_body_is_malformed(fake_anka):
    _, reply = fake_anka
    reply["payload"] = {"status": "OK", "body": [1, 2]}

    with pytest.raises(MalformedOutputError):
        AnkaClient().show("foo")

def test_wrapper_raises_tool_domain_error_on_non_ok(fake_anka):
    _, reply = fake_anka
    reply["payload"] = {
        "status": "ERROR",
        "exceptionType": "VMNotFoundException",
        "message": "vm foo not found",
    }

    with pytest.raises(ToolDomainError) as exc:
        AnkaClient().stop(StopParams(vm_name="foo", force=True))

    assert str(exc.value) == "vm foo not found"
    assert exc.value.exception_type == "VMNotFoundException"


@pytest.mark.parametrize(
    "call,expected",
    [
        (lambda c: c.stop(StopParams(vm_name="foo", force=True)), ["stop", "--force", "foo"]),
        (lambda c: c.stop(StopParams(vm_name="foo")), ["stop", "foo"]),
        (lambda c: c.suspend(SuspendParams(vm_name="foo")), ["suspend", "foo"]),
        (
            lambda c: c.delete(DeleteParams(vm_name="foo", force=True)),
            ["delete", "--force", "foo"],
        ),
        (
            lambda c: c.start(StartParams(vm_name="foo", update_addons=True)),
            ["start", "--update-addons", "foo"],
        ),
        (
            lambda c: c.modify("foo", "set", "cpu", "--htt"),
            ["modify", "foo", "set", "cpu", "--htt"],
        ),
        (
            lambda c: c.clone(CloneParams(vm_name="new", source_uuid="u-1")),
            ["clone", "u-1", "new"],
        ),
        (lambda c: c.show("foo"), ["show", "foo"]),
    ],
)
def test_wrappers_build_expected_args(fake_anka, call, expected):
    calls, _ = fake_anka
    call(AnkaClient(binary="anka"))
    assert calls == [["anka", "--machine-readable", *expected]]


def test_create_disk_returns_image_id(fake_anka):
    calls, reply = fake_anka
    reply["payload"] = {"status": "OK", "body": "image-42"}

    image_id = AnkaClient(binary="anka").create_disk(
        CreateDiskParams(disk_size="40G", installer_app="/Applications/Install.app")
    )

    assert image_id == "image-42"
    assert calls[0] == [
        "anka",
        "--machine-readable",
        "create-disk",
        "--disk-size",
        "40G",
        "--app",
        "/Applications/Install.app",
    ]


def test_create_disk_without_image_id_is_malformed(fake_anka):
    _, reply = fake_anka
    reply["payload"] = {"status": "OK", "body": {}}

    with pytest.raises(MalformedOutputError):
        AnkaClient().create_disk(CreateDiskParams(disk_size="40G", installer_app="x"))


def test_create_returns_uuid(fake_anka):
    calls, reply = fake_anka
    reply["payload"] = {"status": "OK", "body": {"uuid": "u-9"}}

    uuid = AnkaClient(binary="anka").create(
        CreateParams(image_id="image-42", ram_size="4G", cpu_count=4, name="base")
    )

    assert uuid == "u-9"
    assert calls[0][2:] == [
        "create",
        "--image-id",
        "image-42",
        "--ram-size",
        "4G",
        "--cpu-count",
        "4",
        "base",
    ]


@pytest.mark.parametrize("body", [None, {}, {"uuid": 7}, ["u-9"]])
def test_create_without_uuid_is_malformed(fake_anka, body):
    _, reply = fake_anka
    reply["payload"] = {"status": "OK", "body": body}

    with pytest.raises(MalformedOutputError, match="uuid"):
        AnkaClient().create(
            CreateParams(image_id="image-42", ram_size="4G", cpu_count=4, name="base")
        )

def test_registry_list_and_push_args(fake_anka):
    calls, reply = fake_anka
    params = RegistryParams(
        registry_name="main",
        registry_url="https://registry:8089",
        node_cert_path="/certs/node.pem",
        node_key_path="/certs/node.key",
        ca_root_path="/certs/ca.pem",
        is_insecure=False,
    )
    reply["payload"] = {
        "status": "OK",
        "body": [{"id": "u-1", "name": "base", "latest": "v1"}],
    }

    client = AnkaClient(binary="anka")
    templates = client.registry_list(params)

    assert templates[0].id == "u-1"
    assert templates[0].latest == "v1"
    assert calls[0][2:] == [
        "registry",
        "--remote",
        "main",
        "--registry-path",
        "https://registry:8089",
        "--cert",
        "/certs/node.pem",
        "--key",
        "/certs/node.key",
        "--cacert",
        "/certs/ca.pem",
        "list",
    ]

    reply["payload"] = {"status": "OK"}
    client.registry_push(
        RegistryParams(is_insecure=True),
        RegistryPushParams(vm_id="build-vm", tag="v2", description="nightly", local=True),
    )
    assert calls[1][2:] == [
        "registry",
        "--insecure",
        "push",
        "--tag",
        "v2",
        "--description",
        "nightly",
        "--local",
        "build-vm",
    ]


def test_registry_push_failure(fake_anka):
    _, reply = fake_anka
    reply["payload"] = {"status": "ERROR", "message": "tag exists"}

    with pytest.raises(ToolDomainError, match="tag exists"):
        AnkaClient().registry_push(RegistryParams(), RegistryPushParams(vm_id="x"))


def test_registry_list_item_not_an_object_is_malformed(fake_anka):
    _, reply = fake_anka
    reply["payload"] = {"status": "OK", "body": ["u-1"]}

    with pytest.raises(MalformedOutputError):
        AnkaClient().registry_list(RegistryParams())


# ----------------------
# Subprocess layer
# ----------------------
def test_run_captured_returns_stdout(monkeypatch):
    seen = {}

    def fake_run(argv, stdout=None, stderr=None, check=None):
        seen["argv"] = argv
        seen["check"] = check
        return types.SimpleNamespace(stdout=b'{"status":"OK"}', stderr=b"warn", returncode=1)

    monkeypatch.setattr(proc_mod.subprocess, "run", fake_run)

    out = run_captured(iter(["anka", "--machine-readable", "list"]))

    assert out == b'{"status":"OK"}'
    assert seen["argv"] == ["anka", "--machine-readable", "list"]
    assert seen["check"] is False


def test_run_captured_launch_failure(monkeypatch):
    def fake_run(argv, **kwargs):
        raise FileNotFoundError(2, "No such file or directory", argv[0])

    monkeypatch.setattr(proc_mod.subprocess, "run", fake_run)

    with pytest.raises(ProcessLaunchError):
        run_captured(["/nope/anka", "list"])


def test_invoke_surfaces_launch_failure(monkeypatch):
    def fake_run(argv, **kwargs):
        raise PermissionError(13, "Permission denied")

    monkeypatch.setattr(subprocess, "run", fake_run)

    with pytest.raises(ProcessLaunchError):
        AnkaClient(binary="/opt/anka").invoke("list")
