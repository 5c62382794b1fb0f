import json
import logging
from pathlib import Path

import click

from .pipeline import CompilerConfig, ModelSchemaError, OutputMode, PipelineGenerator


@click.command()
@click.option("--config", "-c", default=None, type=click.Path(exists=True, resolve_path=True))
@click.option(
    "--json-schema",
    "-j",
    default=None,
    type=click.Path(resolve_path=True),
    help="Also write the JSON Schema of every declaration to this file",
)
@click.option(
    "--strict-references",
    is_flag=True,
    default=False,
    help="Fail on references to undeclared types instead of warning",
)
@click.option("--force", "-f", is_flag=True, default=False, help="Overwrite existing output files")
@click.option("--verbose", "-v", is_flag=True, default=False, help="Log type resolution details")
@click.argument("path", default=None, type=click.Path(exists=True, resolve_path=True))
@click.argument("output", default=None, type=click.Path(resolve_path=True))
def model_schema(config, json_schema, strict_references, force, verbose, path, output):
    logging.basicConfig(level=logging.DEBUG if verbose else logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    with open(path) as f:
        document = json.load(f)

    if config is not None:
        with open(config) as f:
            config = json.load(f)
            config = CompilerConfig.from_dict(config)
    else:
        config = CompilerConfig()

    # CLI flags override the config file when set
    if strict_references:
        config.strict_references = True
    if verbose:
        config.verbose = True
    if force:
        config.output.mode = OutputMode.FORCE

    generator = PipelineGenerator(document, config)
    try:
        generator.write(Path(output), Path(json_schema) if json_schema else None)
    except (ModelSchemaError, FileExistsError) as e:
        raise click.ClickException(str(e)) from e
