from typing import Annotated

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table
from rich.tree import Tree

from oapigen.codegen.codegen import Codegen
from oapigen.config import DocumentConfig, get_config
from oapigen.exceptions import ConfigurationError, OapigenError

console = Console()
app = typer.Typer(
    name='oapigen',
    help='Generate Go client code from OpenAPI and Swagger documents',
    no_args_is_help=True,
)


@app.command()
def generate(
    source: Annotated[
        str | None,
        typer.Argument(help='Path or URL of the document; overrides the config file'),
    ] = None,
    config: Annotated[
        str | None,
        typer.Option(
            '--config', '-c', help='Path to configuration file (YAML or JSON)'
        ),
    ] = None,
    output: Annotated[
        str | None, typer.Option('--output', '-o', help='Output directory')
    ] = None,
    package: Annotated[
        str | None, typer.Option('--package', '-p', help='Go package name')
    ] = None,
    dialect: Annotated[
        str | None,
        typer.Option('--dialect', help='Document dialect: openapi or swagger'),
    ] = None,
    match_tags: Annotated[
        bool,
        typer.Option(
            '--match-tags', help='Attach tagged operations only to their own service'
        ),
    ] = False,
    clean: Annotated[
        bool, typer.Option('--clean', help='Remove previously generated files first')
    ] = False,
) -> None:
    """Generate a Go client package.

    With a SOURCE argument the document is generated directly; otherwise
    the documents of the configuration file are processed.

    Examples:
        oapigen generate ./petstore.yaml -o ./petstore -p petstore
        oapigen generate
        oapigen generate --config my-config.yaml
    """
    try:
        documents = _documents(
            source, config, output, package, dialect, match_tags, clean
        )

        for document_config in documents:
            with Progress(
                SpinnerColumn(),
                TextColumn('[progress.description]{task.description}'),
                console=console,
            ) as progress:
                task = progress.add_task(
                    f'Generating code for {document_config.source} in {document_config.output}...',
                    total=None,
                )

                codegen = Codegen(document_config)
                written = codegen.generate()

                progress.update(
                    task,
                    description=f'Code generation completed for {document_config.source}!',
                )

            for diagnostic in codegen.diagnostics:
                console.print(f'[yellow]skipped[/yellow] {escape(str(diagnostic))}')
            console.print('[dim]Generated files:[/dim]')
            for path in written:
                console.print(f'  - {path}')

    except OapigenError as e:
        console.print(f'[red]Error:[/red] {escape(str(e))}')
        raise typer.Exit(1)


@app.command()
def inspect(
    source: Annotated[str, typer.Argument(help='Path or URL of the document')],
    dialect: Annotated[
        str | None,
        typer.Option('--dialect', help='Document dialect: openapi or swagger'),
    ] = None,
    match_tags: Annotated[
        bool,
        typer.Option(
            '--match-tags', help='Attach tagged operations only to their own service'
        ),
    ] = False,
) -> None:
    """Show the services, methods, models and diagnostics of a document."""
    document_config = DocumentConfig(
        source=source, output='.', dialect=dialect, match_tags=match_tags
    )
    try:
        api = Codegen(document_config).extract()
    except OapigenError as e:
        console.print(f'[red]Error:[/red] {escape(str(e))}')
        raise typer.Exit(1)

    console.print(f'[bold]{escape(api.title)}[/bold] {api.version} ({api.base_path})')

    tree = Tree('Services')
    for service in api.services:
        branch = tree.add(f'[bold]{service.name}[/bold] [dim]{escape(service.raw_name)}[/dim]')
        for method in service.methods:
            args = ', '.join(p.name for p in method.path_params)
            branch.add(f'{method.name}({args})  [dim]{method.verb} {escape(method.path)}[/dim]')
    console.print(tree)

    table = Table('Model', 'Fields', 'Alias')
    for model in api.models:
        table.add_row(
            model.name,
            ', '.join(p.name for p in model.properties),
            model.alias_type or '',
        )
    console.print(table)

    if api.diagnostics:
        console.print('[yellow]Diagnostics:[/yellow]')
        for diagnostic in api.diagnostics:
            console.print(f'  {escape(str(diagnostic))}')


@app.command()
def version() -> None:
    """Show the version of oapigen."""
    from oapigen import __version__

    console.print(f'oapigen version: {__version__}')


def _documents(
    source: str | None,
    config: str | None,
    output: str | None,
    package: str | None,
    dialect: str | None,
    match_tags: bool,
    clean: bool,
) -> list[DocumentConfig]:
    """Documents to generate: the SOURCE argument, else the configuration's."""
    overrides = {
        key: value
        for key, value in {
            'output': output,
            'package': package,
            'dialect': dialect,
        }.items()
        if value is not None
    }
    if match_tags:
        overrides['match_tags'] = True
    if clean:
        overrides['clean'] = True

    if source is not None:
        overrides.setdefault('output', '.')
        documents = [{'source': source}]
    else:
        documents = [doc.model_dump() for doc in get_config(config).documents]

    try:
        return [DocumentConfig.model_validate({**doc, **overrides}) for doc in documents]
    except ValidationError as e:
        raise ConfigurationError(f'Invalid option: {e.errors()[0]["msg"]}')


if __name__ == '__main__':
    app()
