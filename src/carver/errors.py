# -*- coding: utf-8 -*-
#
# Copyright (C) 2024 Matthias Klumpp <matthias@tenstral.net>
#
# SPDX-License-Identifier: LGPL-3.0+


class CarverError(Exception):
    """Base class for all errors raised while resolving a release."""

    pass


class ReleaseError(CarverError):
    """The release definition is structurally broken.

    This covers references to missing packages or slices, malformed slice
    names, duplicate definitions and invalid archive settings.
    """

    pass


class EssentialLoopError(CarverError):
    """Slices depend on each other in a cycle via their essentials."""

    pass


class PreferLoopError(CarverError):
    """Prefer relationships on a path form a cycle."""

    pass


class PathConflictError(CarverError):
    """Two slices produce incompatible content for the same location."""

    pass


class PreferConflictError(CarverError):
    """Prefer declarations contradict each other, or are missing where needed."""

    pass


class SelectionError(CarverError):
    """A requested slice can not be part of a selection."""

    pass
