# Copyright (c) 2017 Christoph Landgraf. All rights reserved.
# Use of this source code is governed by a BSD-style license that can be
# found in the LICENSE file.

"""
This module provides the TabList class, which tracks the windows managed
by a container in display order, as well as the index of the focused tab.

TabList only manipulates its own state. Raising, resizing and focusing
the windows on the display is left to the container, which consults the
return values of the methods to decide what has to be done.

The invariant maintained by all methods is that ``focused`` is either
None or a valid index into ``children``.
"""


class TabList(object):
    def __init__(self, children=None, focused=None):
        self.children = list(children or [])
        self.focused = None
        if focused is not None:
            self.focus(focused)

    def __len__(self):
        return len(self.children)

    def __iter__(self):
        return iter(self.children)

    def __contains__(self, wid):
        return wid in self.children

    def __getitem__(self, index):
        return self.children[index]

    def index(self, wid):
        """
        Return the index of ``wid``, or None if it is not managed.
        """
        try:
            return self.children.index(wid)
        except ValueError:
            return None

    @property
    def focused_window(self):
        return None if self.focused is None else self.children[self.focused]

    def relative_index(self, offset):
        """
        Index ``offset`` tabs away from the focused tab, wrapping around
        at both ends. Returns None if there is no focus.
        """
        if self.focused is None or not self.children:
            return None
        # python's modulo is euclidean for a positive divisor
        return (self.focused + offset) % len(self.children)

    def focus(self, index):
        """
        Focus the tab at ``index``, or clear the focus if ``index`` is None.

        Returns None if ``index`` is out of range, in which case nothing
        changes, otherwise whether the focus has changed.
        """
        if index is not None and not 0 <= index < len(self.children):
            return None
        changed = self.focused != index
        self.focused = index
        return changed

    def cycle(self, offset):
        target = self.relative_index(offset)
        if target is None:
            return None
        return self.focus(target)

    def swap(self, offset):
        """
        Swap the focused tab with the tab ``offset`` positions away.
        The focus moves along with the swapped tab.
        """
        target = self.relative_index(offset)
        if target is None:
            return None
        a = self.focused
        self.children[a], self.children[target] = self.children[target], self.children[a]
        return self.focus(target)

    def append(self, wid):
        self.children.append(wid)
        return len(self.children) - 1

    def remove(self, wid):
        """
        Remove ``wid`` and repair the focus. If the removed tab was at or
        before the focused tab, the focus moves one tab down, wrapping
        around to the last tab. An empty list has no focus.

        Returns the index ``wid`` had, or None if it was not managed.
        """
        index = self.index(wid)
        if index is None:
            return None
        del self.children[index]

        if self.focused is not None and self.focused >= index:
            if self.children:
                self.focused = (self.focused - 1) % len(self.children)
            else:
                self.focused = None
        return index
