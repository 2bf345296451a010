"""Type definitions for appwand."""

from dataclasses import dataclass
from typing import Any


@dataclass
class ProcessInfo:
    process_id: int
    package_full_name: str | None
    is_running: bool
    image_name: str = ""
    app_name: str = ""
    user_name: str = ""
    cpu_usage: float = 0.0
    working_set_size: int = 0
    publisher: str = ""

    @classmethod
    def from_json(cls, item: dict[str, Any]) -> "ProcessInfo":
        """Build a ProcessInfo from one entry of the device's process list.

        Devices that don't report suspension only list live processes, so a
        missing or null IsRunning is read as running.
        """
        running = item.get("IsRunning")
        return cls(
            process_id=int(item["ProcessId"]),
            package_full_name=item.get("PackageFullName") or None,
            is_running=True if running is None else bool(running),
            image_name=item.get("ImageName") or "",
            app_name=item.get("AppName") or "",
            user_name=item.get("UserName") or "",
            cpu_usage=float(item.get("CPUUsage") or 0.0),
            working_set_size=int(item.get("WorkingSetSize") or 0),
            publisher=item.get("Publisher") or "",
        )


def parse_process_list(data: Any) -> list[ProcessInfo]:
    """Parse a process query response body into a snapshot."""
    if not isinstance(data, dict):
        raise ValueError(
            f"Unexpected process list response (expected an object, got {type(data).__name__})"
        )
    records = data.get("Processes") or []
    if not isinstance(records, list):
        raise ValueError(
            f"Unexpected Processes value (expected a list, got {type(records).__name__})"
        )

    processes: list[ProcessInfo] = []
    for item in records:
        try:
            processes.append(ProcessInfo.from_json(item))
        except (KeyError, TypeError, AttributeError, ValueError) as e:
            raise ValueError(f"Malformed process record {item!r}: {e!r}") from e
    return processes
