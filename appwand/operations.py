"""Task manager operations for appwand."""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import TypeVar

import httpx
import typer

from appwand.config import PortalConfig
from appwand.portal import DevicePortal, RequestFailed
from appwand.types import ProcessInfo

logger = logging.getLogger(__name__)

T = TypeVar("T")

TASK_MANAGER_API = "api/taskmanager/app"

# Returned by launch_application when the package has no process yet
PROCESS_ID_NOT_FOUND = 0


# ===== Payload encoding =====


def hex64_encode(value: str) -> str:
    """Encode a string as the lowercase hex of its UTF-8 bytes."""
    return value.encode("utf-8").hex()


# ===== Snapshot scans =====


def find_process_id(processes: list[ProcessInfo], package_name: str) -> int:
    for proc in processes:
        if proc.package_full_name == package_name:
            return proc.process_id
    return PROCESS_ID_NOT_FOUND


def unique_package_names(processes: list[ProcessInfo]) -> list[str]:
    """Package names in first-seen order, skipping processes without one."""
    apps: list[str] = []
    for proc in processes:
        # An app can own several processes
        if proc.package_full_name and proc.package_full_name not in apps:
            apps.append(proc.package_full_name)
    return apps


def state_label(state: str) -> str:
    """Only "running" (any case) means running; every other value means suspended."""
    return "running" if state.lower() == "running" else "suspended"


def select_app_packages(processes: list[ProcessInfo], state: str) -> list[str]:
    """Package names whose processes match the requested state."""
    should_be_running = state_label(state) == "running"
    return unique_package_names(
        [proc for proc in processes if proc.is_running == should_be_running]
    )


# ===== Application lifecycle =====


async def launch_application(
    portal: DevicePortal, app_id: str, package_name: str
) -> int:
    """Start an application and return its process id, or 0 if not found yet."""
    payload = f"appid={hex64_encode(app_id)}&package={hex64_encode(package_name)}"
    await portal.post(TASK_MANAGER_API, payload)

    processes = await portal.get_running_processes()
    process_id = find_process_id(processes, package_name)
    logger.info("Launched %s (pid %s)", package_name, process_id)
    return process_id


async def list_applications(portal: DevicePortal, state: str) -> list[str]:
    processes = await portal.get_running_processes()
    return select_app_packages(processes, state)


async def list_running_apps(portal: DevicePortal) -> list[str]:
    """Every package present in the process table, without a state filter."""
    processes = await portal.get_running_processes()
    return unique_package_names(processes)


async def list_processes(portal: DevicePortal) -> list[ProcessInfo]:
    return await portal.get_running_processes()


async def terminate_application(portal: DevicePortal, package_name: str) -> None:
    await portal.delete(TASK_MANAGER_API, f"package={hex64_encode(package_name)}")
    logger.info("Terminated %s", package_name)


# ===== CLI handlers =====


def run_with_portal(
    config: PortalConfig, operation: Callable[[DevicePortal], Awaitable[T]]
) -> T:
    """Open a portal for config, await operation(portal) and close it again."""

    async def _run() -> T:
        async with DevicePortal(config) as portal:
            return await operation(portal)

    return asyncio.run(_run())


def _handle(
    config: PortalConfig,
    operation: Callable[[DevicePortal], Awaitable[T]],
    action: str,
) -> T:
    try:
        return run_with_portal(config, operation)
    except RequestFailed as e:
        typer.echo(f"❌ Failed to {action}: {e}", err=True)
        raise typer.Exit(code=1)
    except httpx.HTTPError as e:
        typer.echo(
            f"❌ Error reaching device at {config.address}: {type(e).__name__}: {e}",
            err=True,
        )
        raise typer.Exit(code=1)
    except ValueError as e:
        typer.echo(f"❌ {e}", err=True)
        raise typer.Exit(code=1)


def launch_application_handler(config: PortalConfig, app_id: str, package_name: str) -> int:
    return _handle(
        config,
        lambda portal: launch_application(portal, app_id, package_name),
        f"launch '{package_name}'",
    )


def list_applications_handler(config: PortalConfig, state: str) -> list[str]:
    return _handle(
        config,
        lambda portal: list_applications(portal, state),
        "list applications",
    )


def list_running_apps_handler(config: PortalConfig) -> list[str]:
    return _handle(config, list_running_apps, "list running applications")


def list_processes_handler(config: PortalConfig) -> list[ProcessInfo]:
    return _handle(config, list_processes, "list processes")


def terminate_application_handler(config: PortalConfig, package_name: str) -> None:
    _handle(
        config,
        lambda portal: terminate_application(portal, package_name),
        f"terminate '{package_name}'",
    )
