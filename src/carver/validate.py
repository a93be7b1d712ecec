# -*- coding: utf-8 -*-
#
# Copyright (C) 2024 Matthias Klumpp <matthias@tenstral.net>
#
# SPDX-License-Identifier: LGPL-3.0+

import carver.typing as T
from carver.model import Archive, Release, RELEASE_FILENAME
from carver.errors import ReleaseError
from carver.logging import log
from carver.ordering import order
from carver.slicekey import SliceKey
from carver.conflicts import (
    check_glob_conflicts,
    check_path_conflicts,
    check_prefer_targets,
)


def check_archive_priorities(release: Release):
    '''Ensure no two archives share the same priority.'''
    priorities: T.Dict[int, Archive] = {}
    for name in sorted(release.archives):
        archive = release.archives[name]
        old = priorities.get(archive.priority)
        if old is not None:
            raise ReleaseError(
                '{}: archives "{}" and "{}" have the same priority value of {}'.format(
                    RELEASE_FILENAME, old.name, archive.name, archive.priority
                )
            )
        priorities[archive.priority] = archive


def check_pinned_archives(release: Release):
    '''Ensure archives that packages are pinned to exist.'''
    for name in sorted(release.packages):
        pkg = release.packages[name]
        if pkg.archive and pkg.archive not in release.archives:
            raise ReleaseError('{}: package refers to undefined archive "{}"'.format(pkg.path, pkg.archive))


def validate_release(release: Release):
    '''
    Validate a fully loaded release as a whole.

    Raises the first issue found as :CarverError. Validating a release
    again after it has passed once has no effect.
    '''
    log.debug('Validating release with %i packages', len(release.packages))
    prefers = release.prefers()

    paths = check_path_conflicts(release, prefers)
    check_prefer_targets(paths, prefers)
    check_glob_conflicts(paths)

    # check for essential loops across all slices, regardless of any selection
    keys = [SliceKey(pkg.name, slice_name) for pkg in release.packages.values() for slice_name in pkg.slices]
    order(release.packages, keys)

    check_archive_priorities(release)
    check_pinned_archives(release)
