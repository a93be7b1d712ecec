# -*- coding: utf-8 -*-
#
# Copyright (C) 2024 Matthias Klumpp <matthias@tenstral.net>
#
# SPDX-License-Identifier: LGPL-3.0+

"""
Load a release directory into the in-memory model.

A release directory contains the release definition file with the archives
to fetch packages from, and a ``slices/`` tree with one definition file per
package. Only syntactic checks happen here, cross-slice validation is left
to :Release.validate.
"""

import os
import re
import posixpath

import yaml

import carver.typing as T
from carver.model import (
    Slice,
    Archive,
    Package,
    Release,
    PathInfo,
    PathKind,
    PathUntil,
    PublicKey,
    SliceScripts,
    GenerateKind,
    RELEASE_FILENAME,
)
from carver.utils import listify, is_valid_arch
from carver.errors import ReleaseError, CarverError
from carver.logging import log
from carver.slicekey import SliceKey, parse_slice_key

# Match slice definition files; groups: package
re_slices_fname = re.compile(r'^([a-z0-9](?:-?[.a-z0-9+]){1,})\.yaml$')
re_slice_name = re.compile(r'^[a-z](?:-?[a-z0-9]){2,}$')

PRO_VALUES = ('fips', 'fips-updates', 'esm-apps', 'esm-infra')

_PATH_FIELDS = {'make', 'text', 'symlink', 'copy', 'mode', 'mutable', 'until', 'arch', 'generate', 'prefer'}


def _load_yaml(fname: str, display_name: str) -> T.Any:
    try:
        with open(fname, 'r') as f:
            return yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ReleaseError('{}: cannot parse: {}'.format(display_name, e))


def parse_release(base_dir: str, data: T.Any) -> Release:
    '''Create a :Release with its archives from the release definition data.'''

    if not isinstance(data, dict):
        raise ReleaseError('{}: invalid release definition'.format(RELEASE_FILENAME))
    if data.get('format') != 'v1':
        raise ReleaseError('{}: unknown format "{}"'.format(RELEASE_FILENAME, data.get('format', '')))

    archives_data = data.get('archives')
    if not archives_data or not isinstance(archives_data, dict):
        raise ReleaseError('{}: no archives defined'.format(RELEASE_FILENAME))

    keys_data = data.get('public-keys') or {}
    if not isinstance(keys_data, dict):
        raise ReleaseError('{}: invalid public-keys definition'.format(RELEASE_FILENAME))
    pub_keys: T.Dict[str, PublicKey] = {}
    for key_name, key_data in keys_data.items():
        if not isinstance(key_data, dict) or not key_data.get('id') or not key_data.get('armor'):
            raise ReleaseError('{}: public key "{}" needs both id and armor'.format(RELEASE_FILENAME, key_name))
        pub_keys[key_name] = PublicKey(id=str(key_data['id']), armor=key_data['armor'])

    release = Release(path=base_dir)
    for name in archives_data:
        if not isinstance(name, str):
            raise ReleaseError('{}: invalid archive name "{}"'.format(RELEASE_FILENAME, name))
    for name in sorted(archives_data):
        adata = archives_data[name]
        if not isinstance(adata, dict):
            raise ReleaseError('{}: invalid definition of archive "{}"'.format(RELEASE_FILENAME, name))
        for required in ('version', 'suites', 'components'):
            if not adata.get(required):
                raise ReleaseError('{}: archive "{}" missing {} field'.format(RELEASE_FILENAME, name, required))

        pro = adata.get('pro', '')
        if pro and pro not in PRO_VALUES:
            log.warning('Archive "%s" ignored: invalid pro value "%s"', name, pro)
            continue

        priority = adata.get('priority', 0)
        if type(priority) is not int:
            raise ReleaseError('{}: archive "{}" has non-numeric priority'.format(RELEASE_FILENAME, name))

        archive = Archive(
            name=name,
            version=str(adata['version']),
            suites=listify(adata['suites']),
            components=listify(adata['components']),
            priority=priority,
            pro=pro,
        )
        for key_name in listify(adata.get('public-keys')):
            key = pub_keys.get(key_name)
            if key is None:
                raise ReleaseError(
                    '{}: archive "{}" refers to undefined public key "{}"'.format(RELEASE_FILENAME, name, key_name)
                )
            archive.pub_keys.append(key)

        release.archives[name] = archive

    return release


def _has_wildcards(path: str) -> bool:
    return '*' in path or '?' in path


def _is_clean_path(path: str) -> bool:
    if not path.startswith('/'):
        return False
    stripped = path.rstrip('/') if path != '/' else path
    return posixpath.normpath(stripped) == stripped


def parse_path_info(pkg_path: str, slc: Slice, path: str, data: T.Any) -> PathInfo:
    '''Interpret the definition of a single content path of slice `slc`.'''

    def error(msg: str):
        return ReleaseError('{}: slice {} path {} {}'.format(pkg_path, slc, path, msg))

    if not isinstance(path, str) or not _is_clean_path(path):
        raise ReleaseError('{}: slice {} has invalid content path: {}'.format(pkg_path, slc, path))
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise error('has invalid definition')
    for key in data:
        if key not in _PATH_FIELDS:
            raise error('has unknown field "{}"'.format(key))

    kinds = []
    info = ''
    generate: T.Union[GenerateKind, str] = GenerateKind.NONE
    if data.get('make'):
        if not path.endswith('/'):
            raise error('must end in / for \'make\' to be valid')
        kinds.append(PathKind.DIR)
    if data.get('text') is not None:
        kinds.append(PathKind.TEXT)
        info = str(data['text'])
    if data.get('symlink'):
        kinds.append(PathKind.SYMLINK)
        info = str(data['symlink'])
    if data.get('copy'):
        kinds.append(PathKind.COPY)
        info = str(data['copy'])
        if not _is_clean_path(info):
            raise error('has invalid copy source: {}'.format(info))
    if data.get('generate'):
        kinds.append(PathKind.GENERATE)
        raw = str(data['generate'])
        generate = GenerateKind(raw) if GenerateKind.is_known(raw) else raw
        if not path.endswith('/**') or _has_wildcards(path[: -len('/**')]):
            raise error('has invalid wildcards for \'generate\'')

    if len(kinds) > 1:
        raise error('has conflicting kinds: {}'.format(', '.join(str(k) for k in kinds)))
    if kinds:
        kind = kinds[0]
        if _has_wildcards(path) and kind != PathKind.GENERATE:
            raise error('has wildcards and can not be of {} kind'.format(kind))
    elif _has_wildcards(path):
        kind = PathKind.GLOB
    elif path.endswith('/'):
        kind = PathKind.DIR
    else:
        kind = PathKind.COPY

    mode = data.get('mode', 0)
    if type(mode) is not int or mode < 0:
        raise error('has non-numeric mode')
    if mode and kind in (PathKind.GLOB, PathKind.SYMLINK, PathKind.GENERATE):
        raise error('can not have a mode as {} kind'.format(kind))

    until = str(data.get('until') or '')
    if until not in (PathUntil.NONE, PathUntil.MUTATE):
        raise error('has invalid \'until\' value: "{}"'.format(until))

    arches = listify(data.get('arch'))
    for arch in arches:
        if not is_valid_arch(arch):
            raise error('has invalid architecture: "{}"'.format(arch))

    prefer = str(data.get('prefer') or '')
    if prefer == slc.package:
        raise error('can not \'prefer\' its own package')

    return PathInfo(
        kind=kind,
        info=info,
        mode=mode,
        mutable=bool(data.get('mutable', False)),
        until=PathUntil(until),
        arch=arches,
        generate=generate,
        prefer=prefer,
    )


def _parse_essentials(pkg_path: str, owner: str, refs: T.Any) -> T.List[SliceKey]:
    keys = []
    for ref in listify(refs):
        try:
            key = parse_slice_key(str(ref))
        except CarverError:
            raise ReleaseError('{}: {} has invalid essential slice reference: "{}"'.format(pkg_path, owner, ref))
        if key in keys:
            raise ReleaseError('{}: {} lists duplicated essential slice: {}'.format(pkg_path, owner, key))
        keys.append(key)
    return keys


def parse_package(pkg_name: str, pkg_path: str, data: T.Any) -> Package:
    '''Create a :Package with all of its slices from a slice definition file's data.'''

    if not isinstance(data, dict):
        raise ReleaseError('{}: invalid slice definition'.format(pkg_path))
    if data.get('package') != pkg_name:
        raise ReleaseError('{}: filename and \'package\' field ("{}") disagree'.format(pkg_path, data.get('package')))

    pkg = Package(name=pkg_name, path=pkg_path, archive=str(data.get('archive') or ''))
    pkg_essential = _parse_essentials(pkg_path, 'package "{}"'.format(pkg_name), data.get('essential'))

    slices_data = data.get('slices') or {}
    if not isinstance(slices_data, dict):
        raise ReleaseError('{}: invalid slices definition'.format(pkg_path))
    for slice_name, sdata in slices_data.items():
        if not re_slice_name.match(str(slice_name)):
            raise ReleaseError('{}: invalid slice name "{}"'.format(pkg_path, slice_name))
        if sdata is None:
            sdata = {}
        if not isinstance(sdata, dict):
            raise ReleaseError('{}: invalid definition of slice "{}"'.format(pkg_path, slice_name))

        slc = Slice(package=pkg_name, name=slice_name)
        slice_essential = _parse_essentials(pkg_path, 'slice {}'.format(slc), sdata.get('essential'))
        for key in slice_essential:
            if key == slc.key:
                raise ReleaseError('{}: cannot add slice to itself as essential: {}'.format(pkg_path, key))
            if key in pkg_essential:
                raise ReleaseError(
                    '{}: slice {} repeats {} in essential fields'.format(pkg_path, slc, key)
                )
        # the package wide essentials apply to all of its slices but themselves
        slc.essential = [key for key in pkg_essential if key != slc.key] + slice_essential

        contents = sdata.get('contents') or {}
        if not isinstance(contents, dict):
            raise ReleaseError('{}: slice {} has invalid contents'.format(pkg_path, slc))
        for path, pdata in contents.items():
            slc.contents[path] = parse_path_info(pkg_path, slc, path, pdata)
        slc.scripts = SliceScripts(mutate=str(sdata.get('mutate') or ''))

        pkg.slices[slice_name] = slc

    return pkg


def _read_slices(release: Release, base_dir: str, dir_name: str):
    try:
        entries = sorted(os.listdir(dir_name))
    except OSError:
        raise ReleaseError('cannot read {}{} directory'.format(os.path.relpath(dir_name, base_dir), os.sep))

    for entry in entries:
        fname = os.path.join(dir_name, entry)
        if os.path.isdir(fname):
            _read_slices(release, base_dir, fname)
            continue
        if not entry.endswith('.yaml'):
            continue
        match = re_slices_fname.match(entry)
        if not match:
            raise ReleaseError('invalid slice definition filename: "{}"'.format(entry))

        pkg_name = match.group(1)
        pkg_path = os.path.relpath(fname, base_dir)
        old = release.packages.get(pkg_name)
        if old is not None:
            raise ReleaseError(
                'package "{}" slices defined more than once: {} and {}'.format(pkg_name, old.path, pkg_path)
            )

        pkg = parse_package(pkg_name, pkg_path, _load_yaml(fname, pkg_path))
        log.debug('Loaded %i slices of package %s', len(pkg.slices), pkg_name)
        release.packages[pkg_name] = pkg


def read_release(base_dir: T.PathUnion) -> Release:
    '''
    Read the release in directory `base_dir` and validate it.
    '''
    base_dir = os.path.normpath(str(base_dir))
    log_dir = base_dir
    if '/.cache/' in base_dir:
        log_dir = os.path.basename(base_dir)
    log.info('Processing %s release...', log_dir)

    fname = os.path.join(base_dir, RELEASE_FILENAME)
    if not os.path.isfile(fname):
        raise ReleaseError('cannot read release definition: {} not found'.format(fname))
    release = parse_release(base_dir, _load_yaml(fname, RELEASE_FILENAME))
    _read_slices(release, base_dir, os.path.join(base_dir, 'slices'))

    release.validate()
    return release
