# -*- coding: utf-8 -*-
#
# Copyright (C) 2024 Matthias Klumpp <matthias@tenstral.net>
#
# SPDX-License-Identifier: LGPL-3.0+

"""
Prefer relationships between packages.

A package may declare, per path, that another package should provide that
path instead. Each declaration is an edge ``package -> preferred package``
scoped to a single path. Chains of such edges decide which of two packages
supplying the same path wins.
"""

import enum

import carver.typing as T
from carver.utils import sort_pair
from carver.errors import ReleaseError, PreferLoopError, PreferConflictError
from carver.logging import log

if T.TYPE_CHECKING:
    from carver.model import Release


class PreferResult(enum.Enum):
    """Outcome of a prefer lookup that found no relationship at all."""

    NONE = 0

    def __repr__(self):
        return 'PREFER_NONE'


# the two packages are not related via prefers, other rules decide
PREFER_NONE = PreferResult.NONE


class PreferIndex:
    '''
    Bidirectional index of prefer edges.

    For every path, the *target* map answers "which package does X prefer?",
    the *source* map answers "which package prefers X?". In addition,
    one sample package is recorded for each path that has any prefer
    declaration at all: such paths must be settled by a relationship.
    '''

    def __init__(self):
        self._targets: T.Dict[T.Tuple[str, str], str] = {}
        self._sources: T.Dict[T.Tuple[str, str], str] = {}
        self._samples: T.Dict[str, str] = {}

    def __len__(self):
        return len(self._targets)

    def add(self, path: str, pkg_name: str, preferred: str):
        self._targets[(path, pkg_name)] = preferred
        self._sources[(path, preferred)] = pkg_name
        self._samples.setdefault(path, pkg_name)

    def target(self, path: str, pkg_name: str) -> T.Optional[str]:
        '''The package `pkg_name` prefers for `path`, if any.'''
        return self._targets.get((path, pkg_name))

    def source(self, path: str, pkg_name: str) -> T.Optional[str]:
        '''The package that prefers `pkg_name` for `path`, if any.'''
        return self._sources.get((path, pkg_name))

    def sample(self, path: str) -> T.Optional[str]:
        '''A package which requires `path` to be in a prefer relationship.'''
        return self._samples.get(path)

    def has_prefers(self, path: str) -> bool:
        return path in self._samples

    def edges(self) -> T.List[T.Tuple[str, str, str]]:
        '''All edges as sorted (path, preferred package, preferring package) tuples.'''
        return sorted((path, preferred, source) for (path, preferred), source in self._sources.items())


def build_prefer_index(release: 'Release') -> PreferIndex:
    '''
    Walk all slice contents of `release` once and collect their prefer edges.
    '''
    prefers = PreferIndex()
    for pkg_name in sorted(release.packages):
        pkg = release.packages[pkg_name]
        for slice_name in sorted(pkg.slices):
            slc = pkg.slices[slice_name]
            for path in sorted(slc.contents):
                info = slc.contents[path]
                if not info.prefer:
                    continue
                if info.prefer not in release.packages:
                    raise ReleaseError(
                        'slice {} path {} \'prefer\' refers to undefined package "{}"'.format(slc, path, info.prefer)
                    )

                target = prefers.target(path, pkg.name)
                if target is not None:
                    if target != info.prefer:
                        pkg1, pkg2 = sort_pair(target, info.prefer)
                        raise PreferConflictError(
                            'package "{}" has conflicting prefers for {}: {} != {}'.format(pkg.name, path, pkg1, pkg2)
                        )
                    continue

                source = prefers.source(path, info.prefer)
                if source is not None:
                    if source != pkg.name:
                        pkg1, pkg2 = sort_pair(source, pkg.name)
                        raise PreferConflictError(
                            'packages "{}" and "{}" cannot both prefer "{}" for {}'.format(
                                pkg1, pkg2, info.prefer, path
                            )
                        )
                    continue

                prefers.add(path, pkg.name, info.prefer)

    log.debug('Found %i prefer relationships', len(prefers))
    return prefers


def _find_prefer(path: str, pkg_name: str, wanted: str, prefers: PreferIndex) -> bool:
    '''
    Follow the prefer edges for `path` starting at `pkg_name`, and check
    whether they lead to `wanted`.
    '''
    seen = {pkg_name}
    while True:
        pkg_name = prefers.target(path, pkg_name)
        if pkg_name is None:
            return False
        if pkg_name == wanted:
            return True
        if pkg_name in seen:
            # the reported package is part of the loop, not necessarily where we started
            raise PreferLoopError('package "{}" is part of a prefer loop on {}'.format(pkg_name, path))
        seen.add(pkg_name)


def preferred_path_package(
    path: str, pkg1: str, pkg2: str, prefers: PreferIndex
) -> T.Union[str, PreferResult]:
    '''
    Decide which of two packages should provide `path`.

    Returns `pkg1` if it can be reached from `pkg2` following prefer relationships,
    and conversely for `pkg2`. If neither is reachable, :PREFER_NONE is returned,
    unless the path is required to be in a prefer relationship, in which case
    the pair is a conflict.
    '''
    pkg1, pkg2 = sort_pair(pkg1, pkg2)
    prefer1 = _find_prefer(path, pkg2, pkg1, prefers)
    prefer2 = _find_prefer(path, pkg1, pkg2, prefers)
    if prefer1 and prefer2:
        raise PreferLoopError('package "{}" is part of a prefer loop on {}'.format(pkg1, path))
    if prefer1:
        return pkg1
    if prefer2:
        return pkg2

    sample = prefers.sample(path)
    if sample is not None:
        # name the package that requires this path to be settled by a relationship
        conflict = pkg2 if pkg1 == sample else pkg1
        pkg1, pkg2 = sort_pair(conflict, sample)
        raise PreferConflictError(
            'packages "{}" and "{}" conflict on {} without prefer relationship'.format(pkg1, pkg2, path)
        )
    return PREFER_NONE
