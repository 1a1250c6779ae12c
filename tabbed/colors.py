# Copyright (c) 2017 Christoph Landgraf. All rights reserved.
# Use of this source code is governed by a BSD-style license that can be
# found in the LICENSE file.

"""
Derivation of the accent color of a tab.

Each tab is drawn with an accent color derived from the id of its
window, so a window keeps its color across redraws, reorderings and
restarts of the container.
"""

import hashlib

MIN_BRIGHTNESS = 0.25
NEUTRAL_ACCENT = (0.75, 0.75, 0.75)


def window_hash(wid):
    digest = hashlib.blake2b(str(wid).encode('ascii'), digest_size=8).digest()
    return int.from_bytes(digest, 'little')


def color_hash(wid):
    """
    Map ``wid`` to a triple of red, green and blue values in [0, 1).
    """
    rgb = window_hash(wid) & 0xffffffff
    return (((rgb >> 16) & 0xff) / 256.,
            ((rgb >> 8) & 0xff) / 256.,
            (rgb & 0xff) / 256.)


def accent_color(wid, colors=True, minimum=MIN_BRIGHTNESS):
    if not colors:
        return NEUTRAL_ACCENT
    return tuple(max(c, minimum) for c in color_hash(wid))
