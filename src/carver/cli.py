# -*- coding: utf-8 -*-
#
# Copyright (C) 2016-2022 Matthias Klumpp <matthias@tenstral.net>
#
# SPDX-License-Identifier: LGPL-3.0+

import sys

import rich
import click
from rich.table import Table
from rich.markup import escape
from rich.console import Console

import carver.typing as T


def _print_error(e: Exception):
    error_console = Console(stderr=True)
    error_console.print('[bold red]ERROR[/]: {}'.format(escape(str(e))))


def _release_dir_option(release_dir: T.Optional[str]) -> str:
    from carver.localconfig import LocalConfig

    if release_dir:
        return release_dir
    release_dir = LocalConfig().release_dir
    if not release_dir:
        click.echo('No release directory given, and none is configured. Can not continue.', err=True)
        sys.exit(2)
    return release_dir


@click.group(invoke_without_command=True)
@click.option('--verbose', envvar='VERBOSE', default=False, is_flag=True, help='Enable debug messages.')
@click.option('--version', default=False, is_flag=True, help='Display the version of Carver itself.')
@click.pass_context
def cli(ctx, verbose, version):
    '''Validate and resolve package slices

    This utility checks release definitions for conflicts and loops, and
    computes the order in which a selection of slices has to be extracted.
    '''
    from carver.logging import set_verbose

    set_verbose(verbose)
    if version:
        from carver import __version__

        print(__version__)
        sys.exit(0)

    if ctx.invoked_subcommand is None:
        click.echo('No subcommand was provided. Can not continue.')
        sys.exit(1)


@cli.command()
@click.argument('release_dir', nargs=1, required=False)
def check(release_dir: T.Optional[str]):
    """Read a release and verify it is consistent."""
    from carver import CarverError, read_release

    release_dir = _release_dir_option(release_dir)
    try:
        release = read_release(release_dir)
    except CarverError as e:
        _print_error(e)
        sys.exit(1)

    table = Table(box=rich.box.MINIMAL)
    table.add_column('Archive', no_wrap=True)
    table.add_column('Version', style='magenta', no_wrap=True)
    table.add_column('Suites')
    table.add_column('Components')
    table.add_column('Priority')
    for name in sorted(release.archives):
        archive = release.archives[name]
        table.add_row(
            archive.name,
            archive.version,
            ' '.join(archive.suites),
            ' '.join(archive.components),
            str(archive.priority),
        )
    rich.print(table)

    n_slices = sum(len(pkg.slices) for pkg in release.packages.values())
    rich.print(
        '[green]Release is valid:[/] {} packages with {} slices.'.format(len(release.packages), n_slices)
    )


@cli.command('select')
@click.option('--arch', '-a', 'arch', default=None, help='Architecture to select paths for.')
@click.option('--release', '-r', 'release_dir', default=None, help='Directory of the release to use.')
@click.argument('slices', nargs=-1, required=True)
def cmd_select(slices: T.List[str], arch: T.Optional[str], release_dir: T.Optional[str]):
    """Show the processing order and content sources of a slice selection."""
    from carver import CarverError, LocalConfig, select, read_release, parse_slice_key
    from carver.utils import is_valid_arch

    release_dir = _release_dir_option(release_dir)
    if not arch:
        arch = LocalConfig().architecture
    if not is_valid_arch(arch):
        click.echo('Architecture "{}" is not supported. Can not continue.'.format(arch), err=True)
        sys.exit(2)

    try:
        keys = [parse_slice_key(name) for name in slices]
        release = read_release(release_dir)
        selection = select(release, keys)
        preferred = selection.prefers()
    except CarverError as e:
        _print_error(e)
        sys.exit(1)

    table = Table(box=rich.box.MINIMAL)
    table.add_column('Slice', no_wrap=True)
    table.add_column('Path')
    table.add_column('Kind', style='magenta')
    table.add_column('From Package')
    for slc in selection.slices:
        for path in sorted(slc.contents):
            info = slc.contents[path]
            if not info.matches_arch(arch):
                continue
            pkg = preferred.get(path)
            table.add_row(str(slc), path, str(info.kind), pkg.name if pkg else slc.package)
    rich.print(table)


def run(args):
    from rich.traceback import install

    if len(args) == 0:
        print('Need a subcommand to proceed!')
        sys.exit(1)

    install(show_locals=True, suppress=[click])
    cli()  # pylint: disable=no-value-for-parameter


def main():
    run(sys.argv[1:])
