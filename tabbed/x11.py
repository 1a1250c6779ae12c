# Copyright (c) 2017 Christoph Landgraf. All rights reserved.
# Use of this source code is governed by a BSD-style license that can be
# found in the LICENSE file.

"""
Helpers around python-xlib shared by the container and tabctl.

Windows are referred to by their integer ids throughout tabbed, the
helpers in this module turn them into Xlib resources where needed.

Property lookups are permissive: if the window has vanished in the
meantime, an empty value is returned instead of raising. Requests that
modify the display state may be issued through ``checked``, which
raises the error the server replied with.
"""

from Xlib import X, Xatom, error
from Xlib.protocol import event

LOOKUP_ERRORS = (error.BadWindow, error.BadMatch, error.BadAtom)

TransportError = error.XError


class Atoms(object):
    NAMES = ['UTF8_STRING', 'WM_DELETE_WINDOW', 'WM_PROTOCOLS', '_NET_WM_NAME', 'WM_NAME']

    def __init__(self, display):
        for name in Atoms.NAMES:
            setattr(self, name, display.intern_atom(name))


def window(display, wid):
    return display.create_resource_object('window', wid)


def checked(display, request, *args, **kwargs):
    """
    Issue ``request`` and wait for the server to process it. Raises the
    error reported by the server, if any.
    """
    catch = error.CatchError()
    request(*args, onerror=catch, **kwargs)
    display.sync()
    err = catch.get_error()
    if err:
        raise err


def max_request_bytes(display):
    return display.display.info.max_request_length * 4


def create_window(display, screen, atoms, event_mask, wm_class, size):
    width, height = size
    win = screen.root.create_window(
        0, 0, width, height, 0,
        screen.root_depth,
        X.InputOutput,
        X.CopyFromParent,
        background_pixel=screen.black_pixel,
        event_mask=event_mask,
    )

    encoded = wm_class.encode('utf-8')
    win.change_property(Xatom.WM_NAME, Xatom.STRING, 8, encoded)
    win.set_wm_class(wm_class, wm_class)
    win.change_property(atoms._NET_WM_NAME, atoms.UTF8_STRING, 8, encoded)
    win.change_property(atoms.WM_PROTOCOLS, Xatom.ATOM, 32, [atoms.WM_DELETE_WINDOW])

    win.map()
    return win


def _get_property(display, atom, wid, log=None):
    try:
        return window(display, wid).get_full_property(atom, X.AnyPropertyType)
    except LOOKUP_ERRORS as e:
        if log:
            log('Lookup on 0x%x failed: %s' % (wid, e.__class__.__name__))
        return None


def get_property8(display, atom, wid, log=None):
    prop = _get_property(display, atom, wid, log)
    if prop is None or prop.format != 8:
        return b''
    value = prop.value
    return value.encode('latin-1') if isinstance(value, str) else bytes(value)


def get_property32(display, atom, wid, log=None):
    prop = _get_property(display, atom, wid, log)
    if prop is None or prop.format != 32:
        return []
    return list(prop.value)


def get_window_class(display, wid):
    """
    Return the class of ``wid`` as a list of strings, i.e. the
    instance and class names.
    """
    raw = get_property8(display, Xatom.WM_CLASS, wid)
    return [part.decode('utf-8', 'replace') for part in raw.split(b'\0') if part]


def get_window_name(display, atoms, wid, log=None):
    """
    Return the name of ``wid``, preferring _NET_WM_NAME over WM_NAME.
    Windows without a name, or that no longer exist, yield ''.
    """
    raw = get_property8(display, atoms._NET_WM_NAME, wid, log)
    if not raw:
        raw = get_property8(display, atoms.WM_NAME, wid, log)
    return raw.decode('utf-8', 'replace')


def supports_delete(display, atoms, wid, log=None):
    return atoms.WM_DELETE_WINDOW in get_property32(display, atoms.WM_PROTOCOLS, wid, log)


def send_delete_window_event(display, atoms, wid):
    target = window(display, wid)
    ev = event.ClientMessage(
        window=target,
        client_type=atoms.WM_PROTOCOLS,
        data=(32, [atoms.WM_DELETE_WINDOW, X.CurrentTime, 0, 0, 0]),
    )
    target.send_event(ev, event_mask=X.NoEventMask)


def is_tabbed(display, wid, wm_class):
    return wm_class in get_window_class(display, wid)


def query_children(display, wid):
    """
    Return the ids of the children of ``wid`` in stacking order,
    bottom-most first.
    """
    return [child.id for child in window(display, wid).query_tree().children]
