#!/usr/bin/env python3
"""
Command line entry point of SitemapChecker.

Commands:
  check          Full check (replays the cache unless --no-cache)
  check-new      Check only sitemap pages missing from the cache
  check-reverse  Check the new site's sitemap against the old site
  check-single   Re-check one page and update the cache
  cached         Print the cached result set
  clear-cache    Delete the cached result sets
  report         Write JSON/HTML reports of the cached result set
  serve          Run the HTTP API with SSE progress streams
  config         Print the effective configuration

Common options:
  --config PATH       Path to the YAML/JSON config (default: configs/default.yaml)
  --log-level LEVEL   Logging level (DEBUG, INFO, ...)
  --log-file PATH     Log file (stderr only when omitted)
  --log-format FORMAT Logging format string

Run commands print one JSON progress event per line on stdout.

Example:
  sitemap-checker --config configs/default.yaml check --no-cache > progress.jsonl
"""
import asyncio
import json
import sys
from contextlib import aclosing
from pathlib import Path

import click
from aiohttp import web

from sitemap_checker import __version__
from sitemap_checker.cache.result_cache import build_caches
from sitemap_checker.config import load_config
from sitemap_checker.engine import CheckerEngine
from sitemap_checker.logger import DEFAULT_FORMAT, init_logging
from sitemap_checker.models import ErrorEvent
from sitemap_checker.parser.sitemap_parser import parse_lastmod
from sitemap_checker.report.html_report import render_html
from sitemap_checker.report.json_report import render_json
from sitemap_checker.report.summary import summarize
from sitemap_checker.server import create_app

CONTEXT_SETTINGS = dict(help_option_names=["--help"])


def print_error(message: str):
    click.secho(message, fg='red', err=True)
    sys.exit(1)


async def _run_events(cfg, run_name: str, **kwargs) -> bool:
    """Stream one run as JSON lines; returns False when the run ended with an error."""
    ok = True
    async with CheckerEngine(cfg) as engine:
        async with aclosing(getattr(engine, run_name)(**kwargs)) as events:
            async for event in events:
                click.echo(json.dumps(event.to_dict(), ensure_ascii=False))
                if isinstance(event, ErrorEvent):
                    ok = False
    return ok


def _run(cfg, run_name: str, **kwargs) -> None:
    try:
        ok = asyncio.run(_run_events(cfg, run_name, **kwargs))
    except Exception as e:
        print_error(f'Check failed: {e}')
    if not ok:
        print_error('Check ended with an error')


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(__version__, '--version', '-v', message='SitemapChecker, version %(version)s')
@click.option(
    '--config', '-c', 'config_path',
    default='configs/default.yaml',
    show_default=True,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help='Path to the YAML/JSON configuration file.'
)
@click.option(
    '--log-level', 'log_level',
    default='INFO', show_default=True,
    type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']),
    help='Logging level'
)
@click.option(
    '--log-file', 'log_file',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Log file path (stderr only when omitted)'
)
@click.option(
    '--log-format', 'log_format',
    default=DEFAULT_FORMAT,
    show_default=True,
    help='Format string for log records'
)
@click.pass_context
def cli(ctx, config_path, log_level, log_file, log_format):
    """SitemapChecker command group."""
    init_logging(
        level=log_level,
        log_file=str(log_file) if log_file else None,
        log_format=log_format
    )
    try:
        cfg = load_config(config_path)
    except Exception as e:
        print_error(f'Failed to load configuration: {e}')
    ctx.ensure_object(dict)
    ctx.obj['config'] = cfg


@cli.command('check', context_settings=CONTEXT_SETTINGS)
@click.option('--no-cache', 'no_cache', is_flag=True, help='Ignore cached results and check again')
@click.pass_context
def check(ctx, no_cache):
    """Check every page of the old site's sitemaps."""
    _run(ctx.obj['config'], 'run_check', use_cache=not no_cache)


@cli.command('check-new', context_settings=CONTEXT_SETTINGS)
@click.pass_context
def check_new(ctx):
    """Check only sitemap pages that are not cached yet."""
    _run(ctx.obj['config'], 'run_incremental')


@cli.command('check-reverse', context_settings=CONTEXT_SETTINGS)
@click.pass_context
def check_reverse(ctx):
    """Find pages of the new site that did not exist on the old site."""
    _run(ctx.obj['config'], 'run_reverse_check')


@cli.command('check-single', context_settings=CONTEXT_SETTINGS)
@click.argument('url')
@click.option('--last-modified', 'last_modified', default=None, help='Last modification date (ISO 8601)')
@click.pass_context
def check_single(ctx, url, last_modified):
    """Re-check one page of the old site and update the cache."""
    cfg = ctx.obj['config']
    lastmod = parse_lastmod(last_modified)
    if last_modified and lastmod is None:
        print_error(f'Invalid date: {last_modified}')

    async def _check():
        async with CheckerEngine(cfg) as engine:
            return await engine.check_single(url, lastmod)

    try:
        record = asyncio.run(_check())
    except Exception as e:
        print_error(f'Check failed: {e}')
    click.echo(json.dumps(record.to_dict(), ensure_ascii=False, indent=2))


@cli.command('cached', context_settings=CONTEXT_SETTINGS)
@click.option('--pretty', is_flag=True, help='Indent JSON output by 2')
@click.pass_context
def cached(ctx, pretty):
    """Print the cached result set."""
    result_set = asyncio.run(build_caches(ctx.obj['config']).main.load())
    payload = {'cached': False} if result_set is None else {'cached': True, **result_set.to_dict()}
    click.echo(json.dumps(payload, ensure_ascii=False, indent=2 if pretty else None))


@cli.command('clear-cache', context_settings=CONTEXT_SETTINGS)
@click.pass_context
def clear_cache(ctx):
    """Delete both cached result sets."""
    asyncio.run(build_caches(ctx.obj['config']).clear())
    click.echo('Cache cleared')


@cli.command('report', context_settings=CONTEXT_SETTINGS)
@click.option(
    '--json', '-j', 'json_output',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Save the JSON report to a file'
)
@click.option(
    '--html', '-h', 'html_output',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Save the HTML report to a file'
)
@click.option(
    '--template', '-t', 'template_dir',
    default='templates',
    show_default=True,
    type=click.Path(file_okay=False, path_type=Path),
    help='Directory with Jinja2 templates'
)
@click.pass_context
def report(ctx, json_output, html_output, template_dir):
    """Write reports of the cached result set."""
    result_set = asyncio.run(build_caches(ctx.obj['config']).main.load())
    if result_set is None:
        print_error('No cached results, run "check" first')

    if not json_output and not html_output:
        click.echo(json.dumps(summarize(result_set.results).to_dict(), indent=2))
        return

    if json_output:
        try:
            saved_json = render_json(result_set, json_output)
            click.echo(f'JSON report: {saved_json}')
        except Exception as e:
            print_error(f'Failed to save JSON report: {e}')

    if html_output:
        try:
            saved_html = render_html(result_set, template_dir, html_output)
            click.echo(f'HTML report: {saved_html}')
        except Exception as e:
            print_error(f'Failed to save HTML report: {e}')


@cli.command('serve', context_settings=CONTEXT_SETTINGS)
@click.option('--host', default='127.0.0.1', show_default=True, help='Interface to bind')
@click.option('--port', default=8080, show_default=True, type=int, help='Port to bind')
@click.pass_context
def serve(ctx, host, port):
    """Run the HTTP API."""
    web.run_app(create_app(ctx.obj['config']), host=host, port=port)


@cli.command('config', context_settings=CONTEXT_SETTINGS)
@click.pass_context
def show_config(ctx):
    """Print the current configuration as JSON."""
    cfg = ctx.obj['config']
    click.echo(cfg.model_dump_json(indent=2))


if __name__ == "__main__":
    cli()
