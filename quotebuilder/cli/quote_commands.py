"""
Quote CLI Commands - Command-line interface over quote documents.

Provides commands for:
- Job and category totals
- Business-rule validation of a quote document
- Creating a new quote document from settings defaults
- Listing suggested units
"""
import json
import logging
from typing import Optional

import click
import yaml

from quotebuilder import __version__
from quotebuilder.config import ConfigurationError, get_config, set_config_path
from quotebuilder.domain.entities import LineItemType, load_settings, new_job
from quotebuilder.domain.exceptions import DomainError
from quotebuilder.domain.services import (
    CategoryTree,
    calculate_category_total,
    calculate_job_total,
    calculate_subcategory_totals,
)
from quotebuilder.quote_document import load_quote_document

logger = logging.getLogger(__name__)

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

# Errors reported as a one-line message instead of a traceback
USER_ERRORS = (DomainError, ConfigurationError)


def _money(value: float) -> str:
    return f"{value:,.2f}"


@click.group()
@click.version_option(version=__version__)
@click.option('--verbose', '-v', is_flag=True, help='Enable debug logging')
@click.option(
    '--config',
    'config_path',
    default=None,
    type=click.Path(exists=True, dir_okay=False),
    help='Path to quote_config.yaml (overrides QUOTE_CONFIG_PATH)',
)
def cli(verbose: bool, config_path: Optional[str]):
    """Quote Builder CLI.

    Compute surcharge-aware totals for hierarchical contractor quotes
    stored as YAML or JSON documents.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format=LOG_FORMAT,
    )
    if config_path:
        try:
            set_config_path(config_path)
        except ConfigurationError as e:
            raise click.ClickException(str(e))


@cli.command()
@click.argument('path', type=click.Path(exists=True, dir_okay=False))
@click.option('--category', 'category_id', default=None, help='Only total this category and its subcategories')
@click.option('--json', 'as_json', is_flag=True, help='Print totals as JSON')
def totals(path: str, category_id: Optional[str], as_json: bool):
    """Print job totals, or one category's totals, for a quote document."""
    try:
        document = load_quote_document(path)
        problems = document.validate_inputs()
        if problems:
            raise click.ClickException(
                f"{len(problems)} validation error(s); run 'quote validate {path}' for details"
            )
        job, categories, line_items = document.to_entities()

        if category_id is not None:
            tree = CategoryTree(categories)
            trail = tree.breadcrumbs(category_id)
            category_total = calculate_category_total(category_id, job, categories, line_items)
            if as_json:
                click.echo(json.dumps(
                    {**category_total.to_dict(), 'breadcrumbs': trail}, indent=2
                ))
                return
            click.echo(click.style(" / ".join([job.name] + trail), fg='cyan', bold=True))
            click.echo(f"  Subtotal:        {_money(category_total.subtotal)}")
            click.echo(f"  Surcharge:       {_money(category_total.surcharge_total)}")
            click.echo(f"  Total:           {_money(category_total.total)}")
            return

        job_total = calculate_job_total(job, categories, line_items)
    except USER_ERRORS as e:
        raise click.ClickException(str(e))

    if as_json:
        click.echo(json.dumps({'job': job.to_dict(), 'totals': job_total.to_dict()}, indent=2))
        return

    click.echo(click.style(f"{job.name} ({job.id})", fg='cyan', bold=True))
    click.echo(f"Mode: {job.surcharge_mode.value}, job surcharge {job.surcharge_percent:g}%")
    click.echo("")
    _echo_category_rows(job, categories, line_items, None, 0)
    click.echo("")
    click.echo(f"  Materials:       {_money(job_total.material_subtotal)}")
    click.echo(f"  Labor:           {_money(job_total.labor_subtotal)}")
    click.echo(f"  Equipment:       {_money(job_total.equipment_subtotal)}")
    click.echo(f"  Subtotal:        {_money(job_total.subtotal)}")
    click.echo(f"  Surcharge:       {_money(job_total.surcharge_total)}")
    click.echo(click.style(f"  Grand total:     {_money(job_total.grand_total)}", bold=True))


def _echo_category_rows(job, categories, line_items, parent_id, level):
    """Print one row per category, indented by nesting level."""
    tree = CategoryTree(categories)
    children = tree.children(parent_id)
    child_totals = calculate_subcategory_totals(parent_id, job, categories, line_items)
    for child, child_total in zip(children, child_totals):
        label = "  " * level + (child.name or child.id)
        click.echo(f"  {label:<32} {_money(child_total.total):>14}")
        _echo_category_rows(job, categories, line_items, child.id, level + 1)


@cli.command()
@click.argument('path', type=click.Path(exists=True, dir_okay=False))
def validate(path: str):
    """Check a quote document against every business rule."""
    try:
        document = load_quote_document(path)
        problems = document.validate_inputs()
    except USER_ERRORS as e:
        raise click.ClickException(str(e))

    if not problems:
        click.echo(click.style("✓ Quote document is valid", fg='green'))
        return

    click.echo(click.style(f"✗ {len(problems)} validation error(s):", fg='red'))
    for record, error in problems:
        click.echo(f"  - {record}.{error.field}: {error.message}")
    raise SystemExit(1)


@cli.command()
@click.argument('name', default='')
@click.option('--customer', default=None, help='Customer name')
@click.option('--output', '-o', type=click.Path(dir_okay=False), default=None,
              help='Write the document here instead of stdout')
def new(name: str, customer: Optional[str], output: Optional[str]):
    """Start a quote document with surcharge defaults from settings."""
    try:
        job = new_job(name, load_settings(), customer_name=customer)
    except USER_ERRORS as e:
        raise click.ClickException(str(e))

    document = {
        'job': {
            'id': job.id,
            'name': job.name,
            'customer_name': job.customer_name,
            'surcharge_percent': job.surcharge_percent,
            'surcharge_mode': job.surcharge_mode.value,
            'status': job.status.value,
        },
        'categories': [],
        'line_items': [],
    }
    text = yaml.safe_dump(document, sort_keys=False)

    if output:
        with open(output, 'w') as f:
            f.write(text)
        click.echo(f"Created {output}")
    else:
        click.echo(text, nl=False)


@cli.command()
@click.argument('item_type', required=False,
                type=click.Choice([t.value for t in LineItemType]))
def units(item_type: Optional[str]):
    """List suggested unit labels per line item type."""
    try:
        config = get_config()
    except ConfigurationError as e:
        raise click.ClickException(str(e))
    types = [item_type] if item_type else [t.value for t in LineItemType]
    for t in types:
        click.echo(f"{t}: {', '.join(config.get_units(t))}")
