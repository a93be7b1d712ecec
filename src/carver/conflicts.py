# -*- coding: utf-8 -*-
#
# Copyright (C) 2024 Matthias Klumpp <matthias@tenstral.net>
#
# SPDX-License-Identifier: LGPL-3.0+

"""
Detection of slices producing incompatible content for the same location.

Conflicts are checked without downloading any package, so content extracted
from different packages to the same location can not be proven identical.
Content extracted from the same package is always identical though.
Generated content (text files, created directories, ...) therefore always
conflicts with extracted content of another package, unless the packages
are in a prefer relationship for that path.
"""

import carver.typing as T
from carver.model import Slice, PathKind, Release
from carver.utils import glob_path
from carver.errors import PathConflictError, PreferConflictError
from carver.logging import log
from carver.prefers import PREFER_NONE, PreferIndex, preferred_path_package

# paths claimed by slices, in a stable order
PathSlices = T.Dict[str, T.List[Slice]]


def _slice_sort_key(slc: Slice):
    return (slc.package, slc.name)


def check_path_conflicts(release: Release, prefers: PreferIndex) -> PathSlices:
    '''
    Ensure no two slices of different packages produce different content
    for the same path, unless a prefer relationship decides between them.

    Returns all paths with the slices that claim them.
    '''
    paths: PathSlices = {}
    for pkg_name in sorted(release.packages):
        pkg = release.packages[pkg_name]
        for slice_name in sorted(pkg.slices):
            new = pkg.slices[slice_name]
            for path in sorted(new.contents):
                new_info = new.contents[path]
                for old in paths.get(path, []):
                    if old.package == new.package:
                        continue
                    if preferred_path_package(path, new.package, old.package, prefers) is not PREFER_NONE:
                        continue

                    old_info = old.contents[path]
                    if not new_info.same_content(old_info) or new_info.kind in (PathKind.COPY, PathKind.GLOB):
                        first, second = sorted((old, new), key=_slice_sort_key)
                        raise PathConflictError('slices {} and {} conflict on {}'.format(first, second, path))

                paths.setdefault(path, []).append(new)

    log.debug('Checked %i paths for conflicts', len(paths))
    return paths


def check_prefer_targets(paths: PathSlices, prefers: PreferIndex):
    '''
    Ensure every preferred package actually has the path it is preferred for.
    '''
    for path, preferred, source in prefers.edges():
        if not any(slc.package == preferred for slc in paths.get(path, [])):
            raise PreferConflictError(
                'package {} prefers package "{}" which does not contain path {}'.format(source, preferred, path)
            )


def check_glob_conflicts(paths: PathSlices):
    '''
    Ensure glob and generate paths don't match any other path of another package.
    '''
    path_names = sorted(paths)
    for old_path in path_names:
        for old in paths[old_path]:
            old_info = old.contents[old_path]
            if old_info.kind not in (PathKind.GENERATE, PathKind.GLOB):
                continue
            for new_path in path_names:
                if new_path == old_path:
                    # identical paths have been checked already
                    continue
                for new in paths[new_path]:
                    new_info = new.contents[new_path]
                    if (
                        old_info.kind == PathKind.GLOB
                        and new_info.kind in (PathKind.GLOB, PathKind.COPY)
                        and new.package == old.package
                    ):
                        continue
                    if not glob_path(new_path, old_path):
                        continue

                    (slc1, path1), (slc2, path2) = sorted(
                        ((old, old_path), (new, new_path)), key=lambda e: (e[0].package, e[0].name, e[1])
                    )
                    raise PathConflictError(
                        'slices {} and {} conflict on {} and {}'.format(slc1, slc2, path1, path2)
                    )
