# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
A RAW command console tool for AQUOS TVs"""

from ..version import __version__
