# -*- coding: utf-8 -*-
#
# Copyright (C) 2024 Matthias Klumpp <matthias@tenstral.net>
#
# SPDX-License-Identifier: LGPL-3.0+

from dataclasses import field, dataclass

import carver.typing as T
from carver.model import Slice, Package, Release, GenerateKind
from carver.errors import SelectionError
from carver.logging import log
from carver.prefers import preferred_path_package
from carver.ordering import order
from carver.slicekey import SliceKey


@dataclass
class Selection:
    '''
    Slices chosen from a release, in the order they need to be processed.

    This is still an abstract proposal: the real package contents are
    unknown at this point, so referenced paths could be missing.
    '''

    release: Release
    slices: T.List[Slice] = field(default_factory=list)

    def prefers(self) -> T.Dict[str, Package]:
        '''
        Map each selected path that is in a prefer relationship to the package
        it should be extracted from. Paths without relationship are not included.
        '''
        prefers = self.release.prefers()

        path_pkgs: T.Dict[str, Package] = {}
        for slc in self.slices:
            for path in sorted(slc.contents):
                if not prefers.has_prefers(path):
                    continue
                old = path_pkgs.get(path)
                if old is None:
                    path_pkgs[path] = self.release.packages[slc.package]
                    continue
                if old.name == slc.package:
                    continue
                # the path has prefers and the packages differ, so this either
                # finds a winner or raises
                preferred = preferred_path_package(path, old.name, slc.package, prefers)
                path_pkgs[path] = self.release.packages[preferred]

        return path_pkgs


def select(release: Release, keys: T.Sequence[SliceKey]) -> Selection:
    '''
    Create a :Selection of the slices in `keys` and of everything they require.
    '''
    log.info('Selecting slices...')

    sorted_keys = order(release.packages, keys)
    selection = Selection(release)
    selection.slices = [release.packages[key.package].slices[key.slice] for key in sorted_keys]

    for slc in selection.slices:
        for path in sorted(slc.contents):
            info = slc.contents[path]
            # an invalid generate value is only an error once its slice is selected
            if not GenerateKind.is_known(info.generate):
                raise SelectionError(
                    'slice {} has invalid \'generate\' for path {}: "{}"'.format(slc, path, info.generate)
                )

    return selection
