# Copyright (c) 2017 Christoph Landgraf. All rights reserved.
# Use of this source code is governed by a BSD-style license that can be
# found in the LICENSE file.

"""
This module renders the tab bar at the top of a container.

The bar is drawn with cairo into an image surface the width of the
container and BAR_HEIGHT pixels high. Flushing the surface copies its
pixels into the container window with PutImage requests.

Tabs are laid out in a single row, each of them ``width / count``
pixels wide. The focused tab is drawn on a darker background and
outlined in the accent color of its window.
"""

import cairo

from Xlib import X

from tabbed.colors import accent_color

BAR_HEIGHT = 20

FONT_FAMILY = 'monospace'
FONT_SIZE = 12.

EMPTY_BRIGHTNESS = 0.5
FOCUSED_BRIGHTNESS = 0.0
UNFOCUSED_BRIGHTNESS = 0.2
OUTLINE_HEIGHT = 14.
OUTLINE_INSET = 3.
OUTLINE_WIDTH = 2.
TEXT_INSET = 5.
TEXT_BASELINE = 13.5

PUT_IMAGE_HEADER = 24


def tab_slots(width, count):
    """
    Return the ``(x, width)`` slot of each of ``count`` tabs in a bar
    that is ``width`` pixels wide.
    """
    if count == 0:
        return []
    tab_width = width / count
    return [(i * tab_width, tab_width) for i in range(count)]


def tab_at(x, width, count):
    """
    Return the index of the tab at horizontal position ``x``, or None.
    """
    if count == 0 or width <= 0:
        return None
    index = int(x // (width / count))
    return index if 0 <= index < count else None


class TabBar(object):
    def __init__(self, font=None, colors=True):
        self.font = font or FONT_FAMILY
        self.colors = colors

    def draw(self, ctx, width, children, names, focused):
        """
        Draw the bar onto the cairo context ``ctx``.

        :param width: The width of the container
        :param children: The window ids of the tabs in display order
        :param names: A mapping from window id to the displayed name
        :param focused: Index of the focused tab, or None
        """
        ctx.select_font_face(self.font,
                             cairo.FONT_SLANT_NORMAL,
                             cairo.FONT_WEIGHT_NORMAL)
        ctx.set_font_size(FONT_SIZE)

        if not children:
            ctx.set_source_rgb(EMPTY_BRIGHTNESS, EMPTY_BRIGHTNESS, EMPTY_BRIGHTNESS)
            ctx.rectangle(0., 0., width, BAR_HEIGHT)
            ctx.fill()
            return

        for i, (tab_x, tab_width) in enumerate(tab_slots(width, len(children))):
            self.draw_tab(ctx, tab_x, tab_width, children[i],
                          names.get(children[i], ''), focused == i)

    def draw_tab(self, ctx, tab_x, tab_width, wid, name, is_focused):
        bg = FOCUSED_BRIGHTNESS if is_focused else UNFOCUSED_BRIGHTNESS
        outline_height = OUTLINE_HEIGHT if is_focused else 0.

        ctx.set_source_rgb(bg, bg, bg)
        ctx.rectangle(tab_x, 0., tab_width, BAR_HEIGHT)
        ctx.fill()

        ctx.set_source_rgb(*accent_color(wid, self.colors))
        ctx.rectangle(tab_x + OUTLINE_INSET, OUTLINE_INSET,
                      tab_width - 2 * OUTLINE_INSET, outline_height)
        ctx.set_line_width(OUTLINE_WIDTH)
        ctx.stroke()

        ctx.set_source_rgb(1., 1., 1.)
        ctx.move_to(tab_x + TEXT_INSET, TEXT_BASELINE)
        ctx.show_text(name)
        ctx.new_path()


class BarSurface(object):
    """
    A cairo image surface backing the tab bar of ``window``.

    ``max_request_bytes`` limits the size of a single PutImage request,
    larger images are sent in bands of rows.
    """
    def __init__(self, display, window, depth, width, max_request_bytes):
        self._display = display
        self._window = window
        self._depth = depth
        self._max_request_bytes = max_request_bytes
        self._gc = window.create_gc()
        self.width = 0
        self._surface = None
        self.set_size(width)

    def set_size(self, width):
        self.width = max(1, width)
        self._surface = cairo.ImageSurface(cairo.FORMAT_RGB24,
                                           self.width, BAR_HEIGHT)

    def context(self):
        return cairo.Context(self._surface)

    def _bands(self, stride):
        rows = max(1, (self._max_request_bytes - PUT_IMAGE_HEADER) // stride)
        for row in range(0, BAR_HEIGHT, rows):
            yield row, min(rows, BAR_HEIGHT - row)

    def flush(self):
        self._surface.flush()
        stride = self._surface.get_stride()
        data = bytes(self._surface.get_data())
        for row, count in self._bands(stride):
            self._window.put_image(self._gc, 0, row, self.width, count,
                                   X.ZPixmap, self._depth, 0,
                                   data[row * stride:(row + count) * stride])
        self._display.flush()
