"""Unit tests for resource rows, converters and wide result tables."""

import json
from typing import Any, Dict, List

import pytest

from zscli.resources import (
    HostRow,
    VmRow,
    convert_disk_offerings,
    convert_hosts,
    convert_images,
    convert_instance_offerings,
    convert_vm_instances,
    convert_vms,
    extract_name,
    get_field_value,
    get_row_converter,
    is_image_ready,
    is_vm_active,
    is_vm_runnable,
    is_vm_stoppable,
    normalize_resource_type,
    print_summary,
    print_vms,
    print_wide_result,
)


def _vm_inventory() -> Dict[str, Any]:
    return {
        "uuid": "vm-uuid-1",
        "name": "web-1",
        "state": "Running",
        "cpuNum": 2,
        "cpuSpeed": 0,
        "memorySize": 2 * 1024**3,
        "hostUuid": "host-1",
        "imageUuid": "img-1",
        "zoneUuid": "zone-1",
        "vmNics": [{"ip": "10.0.0.5"}, {"ip": ""}, {"ip": "192.168.1.9"}],
        "allVolumes": [{"name": "ROOT-web-1"}, {"name": "data"}],
        "createDate": "2024-03-01T10:00:00Z",
    }


class TestStatePredicates:
    """Tests for VM and image state helpers."""

    def test_vm_states(self) -> None:
        """Only stopped VMs can be started; running or paused ones stopped."""
        assert is_vm_runnable("Stopped")
        assert not is_vm_runnable("Running")
        assert is_vm_stoppable("Running")
        assert is_vm_stoppable("Paused")
        assert not is_vm_stoppable("Stopped")
        assert is_vm_active("Paused")
        assert not is_vm_active("Destroyed")

    def test_image_ready(self) -> None:
        """Images are usable once Ready."""
        assert is_image_ready("Ready")
        assert not is_image_ready("Downloading")


class TestConverters:
    """Tests for inventory to row conversion."""

    def test_convert_vms(self) -> None:
        """Compact VM rows join NIC addresses and format memory."""
        (row,) = convert_vms([_vm_inventory()])

        assert row == VmRow(
            name="web-1",
            uuid="vm-uuid-1",
            state="Running",
            cpu=2,
            ips="10.0.0.5, 192.168.1.9",
            memory="2.00 GB",
        )

    def test_convert_vms_with_missing_keys(self) -> None:
        """Absent keys become empty or zero values."""
        (row,) = convert_vms([{"uuid": "u"}])

        assert row == VmRow(uuid="u", memory="0 B")

    def test_convert_vm_instances(self) -> None:
        """Full rows list volume names and keep identifiers."""
        (row,) = convert_vm_instances([_vm_inventory()])

        assert row.volumes == "ROOT-web-1, data"
        assert row.host_uuid == "host-1"
        assert row.memory_size == "2.00 GB"
        assert row.cpu_num == 2

    def test_convert_images(self) -> None:
        """Image sizes are formatted."""
        (row,) = convert_images(
            [{"name": "cirros", "status": "Ready", "size": 1024**2, "actualSize": 512}]
        )

        assert row.size == "1.00 MB"
        assert row.actual_size == "512 B"
        assert row.status == "Ready"

    def test_convert_hosts(self) -> None:
        """Host capacities are shown in GHz and bytes units."""
        (row,) = convert_hosts(
            [
                {
                    "name": "host-a",
                    "managementIp": "172.16.0.10",
                    "totalCpuCapacity": 9_600_000_000,
                    "availableCpuCapacity": 4_800_000_000,
                    "totalMemoryCapacity": 64 * 1024**3,
                    "availableMemoryCapacity": 32 * 1024**3,
                    "cpuSockets": 2,
                }
            ]
        )

        assert isinstance(row, HostRow)
        assert row.total_cpu == "9.60 GHz"
        assert row.available_cpu == "4.80 GHz"
        assert row.total_memory == "64.00 GB"
        assert row.available_memory == "32.00 GB"
        assert row.cpu_sockets == 2

    def test_convert_offerings(self) -> None:
        """Offering sizes are formatted."""
        (instance,) = convert_instance_offerings(
            [{"name": "m", "cpuNum": 4, "memorySize": 1024**3}]
        )
        (disk,) = convert_disk_offerings([{"name": "d", "diskSize": 20 * 1024**3}])

        assert instance.cpu_num == 4
        assert instance.memory_size == "1.00 GB"
        assert disk.disk_size == "20.00 GB"

    def test_bad_numbers_become_zero(self) -> None:
        """Unparsable counts do not break conversion."""
        (row,) = convert_vms([{"cpuNum": "many"}])

        assert row.cpu == 0

    @pytest.mark.parametrize("kind", ["vm", "VMS", "image", "hosts", "disk-offering"])
    def test_get_row_converter(self, kind: str) -> None:
        """Converters are found by singular or plural kind."""
        assert get_row_converter(kind) is not None

    def test_get_row_converter_unknown(self) -> None:
        """Unknown kinds have no converter."""
        assert get_row_converter("router") is None


class TestPrintVms:
    """Tests for print_vms."""

    def test_table_with_fields(
        self, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
    ) -> None:
        """VM inventories render as compact rows."""
        monkeypatch.setenv("ZSCLI_TABLE_STYLE", "plain")

        print_vms([_vm_inventory()], "table", ["name", "state"])

        lines = [line.split() for line in capsys.readouterr().out.splitlines() if line.strip()]
        assert lines == [["NAME", "STATE"], ["web-1", "Running"]]

    def test_json(self, capsys: pytest.CaptureFixture[str]) -> None:
        """JSON uses the row display names."""
        print_vms([_vm_inventory()], "json", ["ips"])

        assert json.loads(capsys.readouterr().out) == [{"ips": "10.0.0.5, 192.168.1.9"}]

    def test_empty(self, capsys: pytest.CaptureFixture[str]) -> None:
        """No VMs prints the empty message."""
        print_vms([], "table")

        assert capsys.readouterr().out == "No resources found.\n"


class TestPrintSummary:
    """Tests for print_summary."""

    def test_all_started(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Only the summary line is printed when nothing failed."""
        print_summary([{"name": "a"}], [], [])

        assert capsys.readouterr().out == "\nSummary: 1 started, 0 failed, 0 skipped\n"

    def test_failures_and_skipped(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Failed and skipped VMs are listed."""
        print_summary(
            [],
            [{"name": "a", "uuid": "1"}],
            [{"name": "b", "uuid": "2", "state": "Running"}],
        )

        out = capsys.readouterr().out
        assert "Summary: 0 started, 1 failed, 1 skipped" in out
        assert "Failures:\n  - a (1)\n" in out
        assert "Skipped (not Stopped):\n  - b (2) state=Running\n" in out


class TestFieldLookup:
    """Tests for get_field_value and extract_name."""

    def test_nested_and_case_insensitive(self) -> None:
        """Paths walk nested mappings; key case is ignored when needed."""
        data = {"inventory": {"Name": "vm"}}

        assert get_field_value(data, ["inventory", "name"]) == "vm"
        assert get_field_value(data, ["inventory", "missing"]) is None
        assert get_field_value(None, ["name"]) is None
        assert get_field_value("text", ["name"]) is None

    def test_records(self) -> None:
        """Records are looked up by display or attribute name."""
        row = convert_hosts([{"managementIp": "1.2.3.4"}])[0]

        assert get_field_value(row, ["managementIp"]) == "1.2.3.4"
        assert get_field_value(row, ["management_ip"]) == "1.2.3.4"

    def test_extract_name(self) -> None:
        """Names are extracted from mappings and records."""
        assert extract_name({"name": "x"}) == "x"
        assert extract_name(VmRow(name="y")) == "y"
        assert extract_name({"uuid": "u"}) == ""


class TestWideResult:
    """Tests for print_wide_result."""

    @pytest.mark.parametrize(
        "alias,expected",
        [
            ("VM", "instance"),
            ("VirtualMachine", "instance"),
            ("instance-offering", "instanceoffering"),
            ("Image", "image"),
            ("l3network", "network"),
        ],
    )
    def test_normalize_resource_type(self, alias: str, expected: str) -> None:
        """Aliases map to table definition keys."""
        assert normalize_resource_type(alias) == expected

    def test_instance(
        self, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
    ) -> None:
        """Instance results show state, host, size and creation time."""
        monkeypatch.setenv("ZSCLI_TABLE_STYLE", "plain")

        print_wide_result("vm", _vm_inventory())

        lines: List[List[str]] = [
            line.split() for line in capsys.readouterr().out.splitlines() if line.strip()
        ]
        assert lines[0] == ["NAME", "UUID", "STATUS", "HOST", "CPU", "MEMORY", "IMAGE", "CREATED"]
        assert lines[1] == [
            "web-1",
            "vm-uuid-1",
            "Running",
            "host-1",
            "2",
            "2.0",
            "GiB",
            "img-1",
            "2024-03-01",
            "10:00:00",
        ]

    def test_no_result(self, capsys: pytest.CaptureFixture[str]) -> None:
        """A missing result is reported instead of an empty table."""
        print_wide_result("image", None)

        assert capsys.readouterr().out == "No result data to display\n"

    def test_unknown_type_falls_back_to_json(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Types without a table definition are printed as JSON."""
        print_wide_result("router", {"name": "r1"})

        out = capsys.readouterr().out
        first, _, rest = out.partition("\n")
        assert first == "No table definition for resource type 'router', using JSON format:"
        assert json.loads(rest) == {"name": "r1"}
