import typer
from rich.console import Console

from terraform_invoker.config import InvokerSettings
from terraform_invoker.invoker import invoke
from terraform_invoker.logging_config import setup_logging

app = typer.Typer()


@app.callback()
def callback():
    """
    Terraform Invoker CLI
    """


@app.command()
def apply(
    work_dir: str = typer.Option(".", "--work-dir", "-d", help="Terraform working directory"),
    exec_path: str | None = typer.Option(
        None, "--exec-path", help="Terraform executable (defaults to TERRAFORM_CLI_PATH)"
    ),
    json_output: bool = typer.Option(False, "--json", help="Output result as JSON"),
):
    """Run terraform init -upgrade, then terraform apply"""
    settings = InvokerSettings()
    setup_logging(settings)

    result = invoke(work_dir, exec_path or settings.terraform_cli_path)

    if json_output:
        typer.echo(result.model_dump_json(indent=2))
    else:
        console = Console()
        if result.ok:
            console.print("[bold green]✓ Apply complete[/bold green]")
            console.print(f"Directory: [cyan]{result.work_dir}[/cyan]")
        else:
            console.print(f"[bold red]✗ {result.outcome.value}[/bold red]")
            console.print(f"Steps: {' -> '.join(result.steps)}")
            console.print(f"[red]{result.diagnostic}[/red]")

    if not result.ok:
        raise typer.Exit(code=1)
