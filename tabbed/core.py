# Copyright (c) 2017 Christoph Landgraf. All rights reserved.
# Use of this source code is governed by a BSD-style license that can be
# found in the LICENSE file.

"""
The container controller.

A Tabbed instance owns the container window and tracks the windows that
have been reparented into it. It is driven by the X events delivered to
the container: attaching a window is done by reparenting it into the
container, detaching by reparenting it out of it or destroying it. No
other channel exists, any client that may reparent windows can use it.

Detaching a tab from a keybinding only issues the reparent request. The
tab is removed once the corresponding ReparentNotify arrives.

Each call to step processes exactly one event. If the event changed
anything that is displayed, the tab bar is redrawn before the display is
synchronized and the next event is awaited.
"""

import traceback

import cairo

from Xlib import X

from tabbed import x11
from tabbed.bar import BAR_HEIGHT, BarSurface, TabBar, tab_at
from tabbed.config import Action
from tabbed.logger import Logger
from tabbed.tabs import TabList
from tabbed.util import forward, find

NAME_ATOMS = ('WM_NAME', '_NET_WM_NAME')


def _id(resource):
    return getattr(resource, 'id', resource)


@forward(lambda self: self.tabs, ['index'], TabList)
class Tabbed(object):
    def __init__(self, display, screen, atoms, win, config,
                 close_on_empty=False, logger=None, verbose=False, surface=None):
        self.display = display
        self.screen = screen
        self.atoms = atoms
        self.config = config
        self.close_on_empty = close_on_empty
        self.logger = logger or Logger()
        self.verbose = verbose
        self.win = win
        self.win_id = win.id

        geometry = win.get_geometry()
        self.width = geometry.width
        self.height = geometry.height

        self.tabs = TabList()
        self.names = {}
        self.is_focused = True
        self.running = True
        self.dirty = True
        self.errors = 0

        self.bar = TabBar(config.font, config.colors)
        self.surface = surface or BarSurface(display, win, screen.root_depth,
                                             self.width,
                                             x11.max_request_bytes(display))

        self._name_atoms = set(getattr(atoms, name) for name in NAME_ATOMS)
        self._event_handlers = {
            X.KeyPress:        self.handle_key_press,
            X.ReparentNotify:  self.handle_reparent_notify,
            X.DestroyNotify:   self.handle_destroy_notify,
            X.ConfigureNotify: self.handle_configure_notify,
            X.MapNotify:       self.handle_map_notify,
            X.Expose:          self.handle_expose,
            X.PropertyNotify:  self.handle_property_notify,
            X.ButtonPress:     self.handle_button_press,
            X.ClientMessage:   self.handle_client_message,
            X.FocusIn:         self.handle_focus_in,
            X.FocusOut:        self.handle_focus_out,
        }
        self._action_handlers = {
            Action.FOCUS_UP:           lambda action: self.cycle(1),
            Action.FOCUS_DOWN:         lambda action: self.cycle(-1),
            Action.SHIFT_UP:           lambda action: self.swap(1),
            Action.SHIFT_DOWN:         lambda action: self.swap(-1),
            Action.FOCUS:              lambda action: self.focus(action.index),
            Action.DETACH_FOCUSED:     lambda action: self.detach_focused(),
            Action.DETACH_ALL:         lambda action: self.detach_all(),
            Action.TOGGLE_AUTO_ATTACH: lambda action: None,
        }

        display.set_error_handler(self._x_error)

    @property
    def children(self):
        return self.tabs.children

    @property
    def focused(self):
        return self.tabs.focused

    # Logging

    def message(self, msg):
        self.logger.log(msg)

    def exception(self):
        """
        Call to log the last thrown exception.
        """
        self.errors += 1
        self.message(traceback.format_exc())

    def _x_error(self, err, *args):
        self.errors += 1
        self.message('X error: %s' % err)

    def _window(self, wid):
        return x11.window(self.display, wid)

    # Focus & Actions

    def _apply_focus(self):
        wid = self.tabs.focused_window
        if wid is None:
            return
        w = self._window(wid)
        w.configure(stack_mode=X.Above,
                    x=0,
                    y=BAR_HEIGHT,
                    width=max(1, self.width),
                    height=max(1, self.height - BAR_HEIGHT),
                    border_width=0)
        w.set_input_focus(X.RevertToParent, X.CurrentTime)

    def _focus_result(self, changed):
        if changed is None:
            return
        if changed:
            self.dirty = True
        self._apply_focus()

    def focus(self, index):
        """
        Focus the tab at ``index``. Indices that are out of range are ignored.
        """
        self._focus_result(self.tabs.focus(index))

    def cycle(self, offset):
        self._focus_result(self.tabs.cycle(offset))

    def swap(self, offset):
        self._focus_result(self.tabs.swap(offset))

    def detach_focused(self):
        wid = self.tabs.focused_window
        if wid is not None:
            x11.checked(self.display, self._window(wid).reparent, self.screen.root, 0, 0)

    def detach_all(self):
        for wid in list(self.tabs):
            x11.checked(self.display, self._window(wid).reparent, self.screen.root, 0, 0)

    def do_action(self, action):
        self._action_handlers[action.kind](action)

    # Lifecycle

    def manage(self, wid):
        self.message('Managing 0x%x' % wid)
        self.focus(self.tabs.append(wid))
        self._window(wid).change_attributes(event_mask=X.PropertyChangeMask)
        self.check_name(wid)
        self.dirty = True

    def unmanage(self, wid):
        previous = self.tabs.focused_window
        if self.tabs.remove(wid) is None:
            return
        self.message('Unmanaging 0x%x' % wid)

        if self.close_on_empty and not self.tabs:
            self.running = False

        if self.tabs.focused_window not in (None, previous):
            self._apply_focus()

        self.dirty = True

    def check_name(self, wid):
        name = x11.get_window_name(self.display, self.atoms, wid, self.message)
        if self.names.get(wid) != name:
            self.names[wid] = name
            self.dirty = True

    # Events

    def handle_event(self, event):
        if self.verbose:
            self.message('Event: %s' % event)
        handler = self._event_handlers.get(event.type)
        if handler:
            handler(event)

    def handle_key_press(self, event):
        _, keybind = find(self.config.keybinds,
                          lambda kb, _: kb.matches(event.detail, event.state))
        if keybind:
            self.do_action(keybind.action)

    def handle_reparent_notify(self, event):
        wid = _id(event.window)
        if wid == self.win_id:
            return
        if _id(event.parent) == self.win_id:
            index = self.index(wid)
            if index is None:
                self.manage(wid)
            else:
                self.focus(index)
        else:
            self.unmanage(wid)

    def handle_destroy_notify(self, event):
        self.unmanage(_id(event.window))

    def handle_configure_notify(self, event):
        if _id(event.window) != self.win_id:
            return
        if (event.width, event.height) == (self.width, self.height):
            return
        self.width = event.width
        self.height = event.height
        self.surface.set_size(event.width)
        self._apply_focus()
        self.dirty = True

    def handle_map_notify(self, event):
        if _id(event.window) == self.win_id and self.tabs.focused is not None:
            self.dirty = True

    def handle_expose(self, event):
        if _id(event.window) == self.win_id and event.count == 0:
            self.dirty = True

    def handle_property_notify(self, event):
        wid = _id(event.window)
        if wid in self.tabs and event.atom in self._name_atoms:
            self.check_name(wid)

    def handle_button_press(self, event):
        if not self.tabs or event.event_y > BAR_HEIGHT:
            return
        index = tab_at(event.event_x, self.width, len(self.tabs))
        if index is not None:
            self.focus(index)

    def handle_client_message(self, event):
        fmt, data = event.data
        if (fmt == 32 and _id(event.window) == self.win_id
                and data[0] == self.atoms.WM_DELETE_WINDOW):
            self.message('Received WM_DELETE_WINDOW')
            self.running = False

    def handle_focus_in(self, event):
        self.is_focused = True

    def handle_focus_out(self, event):
        self.is_focused = False

    # Drawing

    def redraw(self):
        ctx = self.surface.context()
        self.bar.draw(ctx, self.width, self.tabs.children, self.names, self.tabs.focused)
        self.surface.flush()

    # Runloop

    def step(self):
        """
        Wait for the next event and process it.
        """
        self.handle_event(self.display.next_event())

        if self.dirty:
            try:
                self.redraw()
                self.dirty = False
            except (cairo.Error, x11.TransportError):
                self.exception()
        self.display.sync()

    def run(self):
        while self.running:
            self.step()
        self.cleanup()

    def cleanup(self):
        """
        Ask every tab that supports WM_DELETE_WINDOW to close itself.
        Other tabs are left alone.
        """
        for wid in list(self.tabs):
            if x11.supports_delete(self.display, self.atoms, wid, self.message):
                self.message('Closing 0x%x' % wid)
                x11.send_delete_window_event(self.display, self.atoms, wid)

        self.running = False
        self.display.sync()
