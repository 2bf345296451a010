import typer

from appwand.config import PortalConfig
from appwand.operations import (
    PROCESS_ID_NOT_FOUND,
    launch_application_handler,
    list_applications_handler,
    list_processes_handler,
    list_running_apps_handler,
    state_label,
    terminate_application_handler,
)
from appwand.ui import (
    configure_logging,
    print_info,
    print_step,
    print_success,
    render_apps_table,
    render_processes_table,
)

app = typer.Typer()


def _require(value: str, option: str) -> str:
    if not value.strip():
        raise typer.BadParameter(f"{option} must not be empty.")
    return value


def _get_config(ctx: typer.Context) -> PortalConfig:
    try:
        return PortalConfig.from_env(**ctx.obj)
    except ValueError as e:
        typer.echo(f"❌ {e}", err=True)
        raise typer.Exit(code=1)


@app.callback()
def main(
    ctx: typer.Context,
    address: str = typer.Option(
        None,
        "--address",
        "-a",
        help="Device portal address, e.g. https://192.168.1.20:11443. Defaults to $APPWAND_ADDRESS.",
    ),
    user: str = typer.Option(
        None, "--user", "-u", help="Portal user name. Defaults to $APPWAND_USER."
    ),
    password: str = typer.Option(
        None, "--password", help="Portal password. Defaults to $APPWAND_PASSWORD."
    ),
    insecure: bool = typer.Option(
        False,
        "--insecure",
        help="Skip TLS certificate verification (portals use self-signed certificates).",
    ),
    timeout: float = typer.Option(
        None, "--timeout", help="Request timeout in seconds. Defaults to 30."
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Log every request made to the device."
    ),
):
    configure_logging(verbose)
    # Resolved per command so --help works without a configured device
    ctx.obj = {
        "address": address,
        "username": user,
        "password": password,
        "verify_tls": False if insecure else None,
        "timeout": timeout,
    }


@app.command(help="Launch an application on the device.")
def launch(
    ctx: typer.Context,
    app_id: str = typer.Option(
        ..., "--app-id", "-i", help="The application ID within the package."
    ),
    package: str = typer.Option(
        ..., "--package", "-p", help="The full name of the application package."
    ),
):
    _require(app_id, "--app-id")
    _require(package, "--package")

    print_step(f"Launching [cyan]{package}[/cyan]...", prefix="🚀")
    pid = launch_application_handler(_get_config(ctx), app_id, package)

    if pid == PROCESS_ID_NOT_FOUND:
        print_info(
            f"Launched [cyan]{package}[/cyan], but its process is not listed yet."
        )
    else:
        print_success(
            f"Launched [cyan]{package}[/cyan] as PID [cyan bold]{pid}[/cyan bold]"
        )


@app.command(help="List application packages in the given state.")
def apps(
    ctx: typer.Context,
    state: str = typer.Option(
        "running",
        "--state",
        "-s",
        help="'running', or anything else for suspended applications.",
    ),
):
    app_list = list_applications_handler(_get_config(ctx), state)
    label = state_label(state)
    if not app_list:
        print_info(f"No {label} applications found.")
        return
    render_apps_table(app_list, label)


@app.command(
    "running-apps",
    help="List every application package present in the process table.",
)
def running_apps(ctx: typer.Context):
    app_list = list_running_apps_handler(_get_config(ctx))
    if not app_list:
        print_info("No applications found.")
        return
    render_apps_table(app_list, "running")


@app.command(help="Show the device's process table.")
def processes(
    ctx: typer.Context,
    package: str = typer.Option(
        None, "--package", "-p", help="Only show processes of this package."
    ),
):
    process_list = list_processes_handler(_get_config(ctx))
    if package:
        process_list = [p for p in process_list if p.package_full_name == package]

    if not process_list:
        typer.echo("❌ No matching processes found.", err=True)
        raise typer.Exit(code=1)
    render_processes_table(process_list)


@app.command(help="Stop an application running on the device.")
def terminate(
    ctx: typer.Context,
    package: str = typer.Option(
        ..., "--package", "-p", help="The full name of the application package."
    ),
):
    _require(package, "--package")

    print_step(f"Terminating [cyan]{package}[/cyan]...", prefix="🛑")
    terminate_application_handler(_get_config(ctx), package)
    print_success(f"Terminated [cyan]{package}[/cyan]")


if __name__ == "__main__":
    app()
