"""Resource row types and converters from platform inventories.

The platform API returns resources as inventory objects with camelCase keys
(``uuid``, ``cpuNum``, ``memorySize``...). The converters below turn those
inventories into flat row records whose display names double as table
headers and ``--fields`` names.
"""

from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, List, Mapping, NamedTuple, Optional, Sequence

import click

from .cli_formatters import (
    format_cpu_capacity,
    format_disk_size,
    format_memory_size,
    format_size,
    format_time,
)
from .output import dump_json, print_with_fields, to_plain
from .records import display_field, is_record, record_fields
from .table_utils import echo_table, stringify

# VM instance states
VM_STATE_RUNNING = "Running"
VM_STATE_STOPPED = "Stopped"
VM_STATE_PAUSED = "Paused"
VM_STATE_DESTROYED = "Destroyed"
VM_STATE_CREATING = "Creating"
VM_STATE_STARTING = "Starting"
VM_STATE_STOPPING = "Stopping"
VM_STATE_REBOOTING = "Rebooting"
VM_STATE_MIGRATING = "Migrating"

# Image states and status
IMAGE_STATE_ENABLED = "Enabled"
IMAGE_STATE_DISABLED = "Disabled"
IMAGE_STATUS_READY = "Ready"
IMAGE_STATUS_DOWNLOADING = "Downloading"
IMAGE_STATUS_DELETED = "Deleted"


def is_vm_runnable(state: str) -> bool:
    """Return True if a VM in this state can be started."""
    return state == VM_STATE_STOPPED


def is_vm_stoppable(state: str) -> bool:
    """Return True if a VM in this state can be stopped."""
    return state in (VM_STATE_RUNNING, VM_STATE_PAUSED)


def is_vm_active(state: str) -> bool:
    """Return True if a VM in this state still exists."""
    return state in (VM_STATE_RUNNING, VM_STATE_STOPPED, VM_STATE_PAUSED)


def is_image_ready(status: str) -> bool:
    """Return True if an image is ready for use."""
    return status == IMAGE_STATUS_READY


# --- Row records ---


@dataclass
class VmRow:
    """Compact VM listing row."""

    name: str = display_field("name", default="")
    uuid: str = display_field("uuid", default="")
    state: str = display_field("state", default="")
    cpu: int = display_field("cpu", default=0)
    ips: str = display_field("ips", default="")
    memory: str = display_field("memory", default="")


@dataclass
class VmInstanceRow:
    """Full VM instance listing row."""

    name: str = display_field("name", default="")
    uuid: str = display_field("uuid", default="")
    description: str = display_field("description", default="")
    zone_uuid: str = display_field("zoneUuid", default="")
    cluster_uuid: str = display_field("clusterUuid", default="")
    image_uuid: str = display_field("imageUuid", default="")
    host_uuid: str = display_field("hostUuid", default="")
    last_host_uuid: str = display_field("lastHostUuid", default="")
    instance_offering_uuid: str = display_field("instanceOfferingUuid", default="")
    root_volume_uuid: str = display_field("rootVolumeUuid", default="")
    platform: str = display_field("platform", default="")
    architecture: str = display_field("architecture", default="")
    guest_os_type: str = display_field("guestOsType", default="")
    default_l3_network_uuid: str = display_field("defaultL3NetworkUuid", default="")
    type: str = display_field("type", default="")
    hypervisor_type: str = display_field("hypervisorType", default="")
    memory_size: str = display_field("memorySize", default="")
    cpu_num: int = display_field("cpuNum", default=0)
    cpu_speed: int = display_field("cpuSpeed", default=0)
    allocator_strategy: str = display_field("allocatorStrategy", default="")
    state: str = display_field("state", default="")
    ips: str = display_field("ips", default="")
    volumes: str = display_field("volumes", default="")


@dataclass
class ImageRow:
    """Image listing row."""

    name: str = display_field("name", default="")
    uuid: str = display_field("uuid", default="")
    state: str = display_field("state", default="")
    status: str = display_field("status", default="")
    size: str = display_field("size", default="")
    actual_size: str = display_field("actualSize", default="")
    format: str = display_field("format", default="")
    media_type: str = display_field("mediaType", default="")
    platform: str = display_field("platform", default="")
    architecture: str = display_field("architecture", default="")
    type: str = display_field("type", default="")
    guest_os_type: str = display_field("guestOsType", default="")


@dataclass
class HostRow:
    """Physical host listing row."""

    name: str = display_field("name", default="")
    uuid: str = display_field("uuid", default="")
    management_ip: str = display_field("managementIp", default="")
    hypervisor_type: str = display_field("hypervisorType", default="")
    state: str = display_field("state", default="")
    status: str = display_field("status", default="")
    cluster_uuid: str = display_field("clusterUuid", default="")
    zone_uuid: str = display_field("zoneUuid", default="")
    total_cpu: str = display_field("totalCpu", default="")
    available_cpu: str = display_field("availableCpu", default="")
    total_memory: str = display_field("totalMemory", default="")
    available_memory: str = display_field("availableMemory", default="")
    cpu_sockets: int = display_field("cpuSockets", default=0)
    cpu_num: int = display_field("cpuNum", default=0)
    architecture: str = display_field("architecture", default="")
    description: str = display_field("description", default="")


@dataclass
class InstanceOfferingRow:
    """Instance offering listing row."""

    name: str = display_field("name", default="")
    uuid: str = display_field("uuid", default="")
    cpu_num: int = display_field("cpuNum", default=0)
    memory_size: str = display_field("memorySize", default="")
    type: str = display_field("type", default="")
    allocator_strategy: str = display_field("allocatorStrategy", default="")
    state: str = display_field("state", default="")


@dataclass
class DiskOfferingRow:
    """Disk offering listing row."""

    name: str = display_field("name", default="")
    uuid: str = display_field("uuid", default="")
    disk_size: str = display_field("diskSize", default="")
    type: str = display_field("type", default="")
    allocator_strategy: str = display_field("allocatorStrategy", default="")
    state: str = display_field("state", default="")


# --- Converters ---


def _text(inv: Mapping[str, Any], key: str) -> str:
    return stringify(inv.get(key))


def _int(inv: Mapping[str, Any], key: str) -> int:
    try:
        return int(inv.get(key) or 0)
    except (TypeError, ValueError, OverflowError):
        return 0


def _nic_ips(inv: Mapping[str, Any]) -> str:
    ips = [nic.get("ip") for nic in inv.get("vmNics") or [] if nic.get("ip")]
    return ", ".join(ips)


def convert_vms(vms: Iterable[Mapping[str, Any]]) -> List[VmRow]:
    """Convert VM inventories into compact rows."""
    return [
        VmRow(
            name=_text(vm, "name"),
            uuid=_text(vm, "uuid"),
            state=_text(vm, "state"),
            cpu=_int(vm, "cpuNum"),
            ips=_nic_ips(vm),
            memory=format_memory_size(_int(vm, "memorySize")),
        )
        for vm in vms
    ]


def convert_vm_instances(vms: Iterable[Mapping[str, Any]]) -> List[VmInstanceRow]:
    """Convert VM inventories into full instance rows."""
    rows = []
    for vm in vms:
        volumes = [vol.get("name") or "" for vol in vm.get("allVolumes") or []]
        rows.append(
            VmInstanceRow(
                name=_text(vm, "name"),
                uuid=_text(vm, "uuid"),
                description=_text(vm, "description"),
                zone_uuid=_text(vm, "zoneUuid"),
                cluster_uuid=_text(vm, "clusterUuid"),
                image_uuid=_text(vm, "imageUuid"),
                host_uuid=_text(vm, "hostUuid"),
                last_host_uuid=_text(vm, "lastHostUuid"),
                instance_offering_uuid=_text(vm, "instanceOfferingUuid"),
                root_volume_uuid=_text(vm, "rootVolumeUuid"),
                platform=_text(vm, "platform"),
                architecture=_text(vm, "architecture"),
                guest_os_type=_text(vm, "guestOsType"),
                default_l3_network_uuid=_text(vm, "defaultL3NetworkUuid"),
                type=_text(vm, "type"),
                hypervisor_type=_text(vm, "hypervisorType"),
                memory_size=format_memory_size(_int(vm, "memorySize")),
                cpu_num=_int(vm, "cpuNum"),
                cpu_speed=_int(vm, "cpuSpeed"),
                allocator_strategy=_text(vm, "allocatorStrategy"),
                state=_text(vm, "state"),
                ips=_nic_ips(vm),
                volumes=", ".join(volumes),
            )
        )
    return rows


def convert_images(images: Iterable[Mapping[str, Any]]) -> List[ImageRow]:
    """Convert image inventories into rows."""
    return [
        ImageRow(
            name=_text(image, "name"),
            uuid=_text(image, "uuid"),
            state=_text(image, "state"),
            status=_text(image, "status"),
            size=format_disk_size(_int(image, "size")),
            actual_size=format_disk_size(_int(image, "actualSize")),
            format=_text(image, "format"),
            media_type=_text(image, "mediaType"),
            platform=_text(image, "platform"),
            architecture=_text(image, "architecture"),
            type=_text(image, "type"),
            guest_os_type=_text(image, "guestOsType"),
        )
        for image in images
    ]


def convert_hosts(hosts: Iterable[Mapping[str, Any]]) -> List[HostRow]:
    """Convert host inventories into rows."""
    return [
        HostRow(
            name=_text(host, "name"),
            uuid=_text(host, "uuid"),
            management_ip=_text(host, "managementIp"),
            hypervisor_type=_text(host, "hypervisorType"),
            state=_text(host, "state"),
            status=_text(host, "status"),
            cluster_uuid=_text(host, "clusterUuid"),
            zone_uuid=_text(host, "zoneUuid"),
            total_cpu=format_cpu_capacity(_int(host, "totalCpuCapacity")),
            available_cpu=format_cpu_capacity(_int(host, "availableCpuCapacity")),
            total_memory=format_memory_size(_int(host, "totalMemoryCapacity")),
            available_memory=format_memory_size(_int(host, "availableMemoryCapacity")),
            cpu_sockets=_int(host, "cpuSockets"),
            cpu_num=_int(host, "cpuNum"),
            architecture=_text(host, "architecture"),
            description=_text(host, "description"),
        )
        for host in hosts
    ]


def convert_instance_offerings(
    offerings: Iterable[Mapping[str, Any]],
) -> List[InstanceOfferingRow]:
    """Convert instance offering inventories into rows."""
    return [
        InstanceOfferingRow(
            name=_text(o, "name"),
            uuid=_text(o, "uuid"),
            cpu_num=_int(o, "cpuNum"),
            memory_size=format_memory_size(_int(o, "memorySize")),
            type=_text(o, "type"),
            allocator_strategy=_text(o, "allocatorStrategy"),
            state=_text(o, "state"),
        )
        for o in offerings
    ]


def convert_disk_offerings(offerings: Iterable[Mapping[str, Any]]) -> List[DiskOfferingRow]:
    """Convert disk offering inventories into rows."""
    return [
        DiskOfferingRow(
            name=_text(o, "name"),
            uuid=_text(o, "uuid"),
            disk_size=format_disk_size(_int(o, "diskSize")),
            type=_text(o, "type"),
            allocator_strategy=_text(o, "allocatorStrategy"),
            state=_text(o, "state"),
        )
        for o in offerings
    ]


ROW_CONVERTERS: Dict[str, Callable[[Iterable[Mapping[str, Any]]], List[Any]]] = {
    "vm": convert_vms,
    "vms": convert_vms,
    "instance": convert_vm_instances,
    "instances": convert_vm_instances,
    "image": convert_images,
    "images": convert_images,
    "host": convert_hosts,
    "hosts": convert_hosts,
    "instance-offering": convert_instance_offerings,
    "instance-offerings": convert_instance_offerings,
    "disk-offering": convert_disk_offerings,
    "disk-offerings": convert_disk_offerings,
}


def get_row_converter(kind: str) -> Optional[Callable[[Iterable[Mapping[str, Any]]], List[Any]]]:
    """Get the row converter for a resource kind (e.g. 'vm', 'images')."""
    return ROW_CONVERTERS.get(kind.lower())


def print_vms(
    vms: Iterable[Mapping[str, Any]],
    output_format: Any,
    fields: Optional[Sequence[str]] = None,
) -> None:
    """Convert VM inventories to compact rows and render them."""
    print_with_fields(convert_vms(vms), output_format, fields)


def print_summary(
    successes: Sequence[Mapping[str, Any]],
    failures: Sequence[Mapping[str, Any]],
    skipped: Sequence[Mapping[str, Any]],
) -> None:
    """Print the outcome of a batch VM start."""
    click.echo(
        f"\nSummary: {len(successes)} started, {len(failures)} failed, {len(skipped)} skipped"
    )

    if failures:
        click.echo("Failures:")
        for vm in failures:
            click.echo(f"  - {vm.get('name', '')} ({vm.get('uuid', '')})")
    if skipped:
        click.echo("Skipped (not Stopped):")
        for vm in skipped:
            click.echo(f"  - {vm.get('name', '')} ({vm.get('uuid', '')}) state={vm.get('state', '')}")


# --- Wide operation results ---


def _format_int(value: Any) -> str:
    if value is None:
        return "0"
    if isinstance(value, float):
        return str(int(value))
    return str(value)


class ColumnDefinition(NamedTuple):
    """One column of a wide result table: a lookup path and a value formatter."""

    path: Sequence[str]
    formatter: Callable[[Any], str]


class ResourceTableDefinition(NamedTuple):
    """Headers and columns for a single-resource result table."""

    headers: Sequence[str]
    columns: Sequence[ColumnDefinition]


RESOURCE_TABLE_DEFINITIONS: Dict[str, ResourceTableDefinition] = {
    "image": ResourceTableDefinition(
        headers=["NAME", "UUID", "STATUS", "SIZE", "MEDIA-TYPE", "FORMAT", "CREATED"],
        columns=[
            ColumnDefinition(["name"], stringify),
            ColumnDefinition(["uuid"], stringify),
            ColumnDefinition(["status"], stringify),
            ColumnDefinition(["size"], format_size),
            ColumnDefinition(["mediaType"], stringify),
            ColumnDefinition(["format"], stringify),
            ColumnDefinition(["createDate"], format_time),
        ],
    ),
    "instance": ResourceTableDefinition(
        headers=["NAME", "UUID", "STATUS", "HOST", "CPU", "MEMORY", "IMAGE", "CREATED"],
        columns=[
            ColumnDefinition(["name"], stringify),
            ColumnDefinition(["uuid"], stringify),
            ColumnDefinition(["state"], stringify),
            ColumnDefinition(["hostUuid"], stringify),
            ColumnDefinition(["cpuNum"], _format_int),
            ColumnDefinition(["memorySize"], format_size),
            ColumnDefinition(["imageUuid"], stringify),
            ColumnDefinition(["createDate"], format_time),
        ],
    ),
    "instanceoffering": ResourceTableDefinition(
        headers=["NAME", "UUID", "CPU", "MEMORY", "TYPE", "ALLOCATOR_STRATEGY", "STATE"],
        columns=[
            ColumnDefinition(["name"], stringify),
            ColumnDefinition(["uuid"], stringify),
            ColumnDefinition(["cpuNum"], _format_int),
            ColumnDefinition(["memorySize"], format_size),
            ColumnDefinition(["type"], stringify),
            ColumnDefinition(["allocatorStrategy"], stringify),
            ColumnDefinition(["state"], stringify),
        ],
    ),
    "diskoffering": ResourceTableDefinition(
        headers=["NAME", "UUID", "DISK_SIZE", "TYPE", "ALLOCATOR_STRATEGY", "STATE", "CREATED"],
        columns=[
            ColumnDefinition(["name"], stringify),
            ColumnDefinition(["uuid"], stringify),
            ColumnDefinition(["diskSize"], format_size),
            ColumnDefinition(["type"], stringify),
            ColumnDefinition(["allocatorStrategy"], stringify),
            ColumnDefinition(["state"], stringify),
            ColumnDefinition(["createDate"], format_time),
        ],
    ),
}

RESOURCE_TYPE_ALIASES: Dict[str, str] = {
    "virtualmachine": "instance",
    "vm": "instance",
    "instance": "instance",
    "l3network": "network",
    "network": "network",
    "instanceoffering": "instanceoffering",
    "instance-offering": "instanceoffering",
    "diskoffering": "diskoffering",
    "disk-offering": "diskoffering",
}


def normalize_resource_type(resource_type: str) -> str:
    """Map a resource type or alias to its table definition key."""
    lower = resource_type.lower()
    return RESOURCE_TYPE_ALIASES.get(lower, lower)


def get_field_value(obj: Any, path: Sequence[str]) -> Any:
    """Follow a key path through mappings and records.

    Keys are matched exactly first, then case-insensitively; records are
    matched on attribute or display name. Missing keys yield None.
    """
    if obj is None or not path:
        return None

    key, rest = path[0], path[1:]
    value: Any = None
    if isinstance(obj, Mapping):
        if key in obj:
            value = obj[key]
        else:
            wanted = key.lower()
            for k, v in obj.items():
                if str(k).lower() == wanted:
                    value = v
                    break
    elif is_record(obj):
        wanted = key.lower()
        for rf in record_fields(obj):
            if wanted in (rf.name.lower(), rf.display.lower()):
                value = getattr(obj, rf.name)
                break
    else:
        return None

    if not rest:
        return value
    return get_field_value(value, rest)


def extract_name(result: Any) -> str:
    """Return the ``name`` of a result, or an empty string."""
    value = get_field_value(result, ["name"])
    return "" if value is None else str(value)


def print_wide_result(resource_type: str, result: Any) -> None:
    """Print a single result as a one-row table using its resource definition."""
    if result is None:
        click.echo("No result data to display")
        return

    table_def = RESOURCE_TABLE_DEFINITIONS.get(normalize_resource_type(resource_type))
    if table_def is None:
        click.echo(
            f"No table definition for resource type '{resource_type}', using JSON format:"
        )
        click.echo(dump_json(to_plain(result)))
        return

    row = [col.formatter(get_field_value(result, col.path)) for col in table_def.columns]
    echo_table(table_def.headers, [row])


