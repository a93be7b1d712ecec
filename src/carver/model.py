# -*- coding: utf-8 -*-
#
# Copyright (C) 2024 Matthias Klumpp <matthias@tenstral.net>
#
# SPDX-License-Identifier: LGPL-3.0+

import enum
from dataclasses import field, dataclass

import carver.typing as T
from carver.utils import any_arch_matches
from carver.prefers import PreferIndex, build_prefer_index
from carver.slicekey import SliceKey

# name of the file defining the release and its archives
RELEASE_FILENAME = 'release.yaml'


class PathKind(str, enum.Enum):
    """
    How the content of a path is produced.
    """

    DIR = 'dir'
    COPY = 'copy'
    GLOB = 'glob'
    TEXT = 'text'
    SYMLINK = 'symlink'
    GENERATE = 'generate'

    def __str__(self):
        return self.value


class PathUntil(str, enum.Enum):
    """
    Lifetime of a path in the resulting tree.
    """

    NONE = ''
    MUTATE = 'mutate'  # the path is dropped once mutation scripts have run

    def __str__(self):
        return self.value


class GenerateKind(str, enum.Enum):
    """
    Kind of content generated for a path.
    Unknown values read from a definition file are kept as plain strings,
    they are only rejected once a slice using them is selected.
    """

    NONE = ''
    MANIFEST = 'manifest'

    def __str__(self):
        return self.value

    @staticmethod
    def is_known(value: str) -> bool:
        return value in (GenerateKind.NONE, GenerateKind.MANIFEST)


@dataclass
class PublicKey:
    '''A trusted OpenPGP key of an archive, stored but never verified here.'''

    id: str
    armor: str = ''


@dataclass
class Archive:
    '''
    The location from which binary packages are obtained.
    '''

    name: str
    version: str = ''
    suites: T.List[str] = field(default_factory=list)
    components: T.List[str] = field(default_factory=list)
    priority: int = 0
    pro: str = ''
    pub_keys: T.List[PublicKey] = field(default_factory=list)


@dataclass
class PathInfo:
    '''
    Describes how a single filesystem path is produced by a slice.
    '''

    kind: PathKind
    info: str = ''
    mode: int = 0

    mutable: bool = False
    until: PathUntil = PathUntil.NONE
    arch: T.List[str] = field(default_factory=list)
    generate: T.Union[GenerateKind, str] = GenerateKind.NONE
    prefer: str = ''

    def same_content(self, other: 'PathInfo') -> bool:
        '''
        Check whether this path results in the same file or directory as `other`.
        The mutable flag has to match as well, since it is a common agreement
        that the actual content is not well defined upfront.
        '''
        return (
            self.kind == other.kind
            and self.info == other.info
            and self.mode == other.mode
            and self.mutable == other.mutable
            and self.generate == other.generate
        )

    def matches_arch(self, arch: str) -> bool:
        '''Check whether this path is wanted on architecture `arch`.'''
        if not self.arch:
            return True
        return any_arch_matches(arch, self.arch)


@dataclass
class SliceScripts:
    mutate: str = ''


@dataclass
class Slice:
    '''
    A named, partial extraction of a package.
    '''

    package: str
    name: str
    essential: T.List[SliceKey] = field(default_factory=list)
    contents: T.Dict[str, PathInfo] = field(default_factory=dict)
    scripts: SliceScripts = field(default_factory=SliceScripts)

    @property
    def key(self) -> SliceKey:
        return SliceKey(self.package, self.name)

    def __str__(self):
        return '{}_{}'.format(self.package, self.name)


@dataclass
class Package:
    '''
    A package and the slices that represent parts of it.
    '''

    name: str
    path: str = ''
    archive: str = ''
    slices: T.Dict[str, Slice] = field(default_factory=dict)


@dataclass
class Release:
    '''
    A collection of package slices targeting a particular distribution version.
    '''

    path: str = ''
    packages: T.Dict[str, Package] = field(default_factory=dict)
    archives: T.Dict[str, Archive] = field(default_factory=dict)

    def prefers(self) -> PreferIndex:
        '''Compute the prefer relationships between packages, per path.'''
        return build_prefer_index(self)

    def validate(self):
        '''
        Check the release for conflicts and loops.
        Raises a :CarverError for the first issue found.
        '''
        from carver.validate import validate_release

        validate_release(self)
