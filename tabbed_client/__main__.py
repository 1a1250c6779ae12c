# Copyright (c) 2017-2018 Christoph Landgraf. All rights reserved.
# Use of this source code is governed by a BSD-style license that can be
# found in the LICENSE file.

"""
tabctl manipulates tabbed containers from the outside.

All of it is done by reparenting windows: a window is attached to a
container by reparenting it into the container window, and detached by
reparenting it back to the root window. All window ids can be given in
decimal or as hex with the prefix "0x".
"""

import argparse
import shutil
import subprocess
import sys

from Xlib import display

from tabbed import TABBED_WINDOW_CLASS
from tabbed import x11
from tabbed.util import parse_window_id

TABBED_COMMAND = ['tabbed-py', '-c', '-d']


class TabControlError(Exception):
    pass


class TabControl(object):
    def __init__(self, disp, wm_class=TABBED_WINDOW_CLASS, tabbed_command=TABBED_COMMAND):
        self._display = disp
        self._root = disp.screen().root
        self._wm_class = wm_class
        self._tabbed_command = tabbed_command

    def is_tabbed(self, wid):
        return x11.is_tabbed(self._display, wid, self._wm_class)

    def children(self, wid):
        return x11.query_children(self._display, wid)

    def reparent(self, wid, parent):
        x11.checked(self._display, x11.window(self._display, wid).reparent, parent, 0, 0)

    def spawn_tabbed(self):
        """
        Start a new container that closes with its last tab, and
        return its window id.
        """
        try:
            output = subprocess.run(self._tabbed_command, stdout=subprocess.PIPE,
                                    check=True).stdout
        except (OSError, subprocess.CalledProcessError) as e:
            raise TabControlError('Could not start %s: %s' % (self._tabbed_command[0], e))

        line = output.decode('ascii', 'replace').strip()
        try:
            return parse_window_id(line)
        except ValueError:
            raise TabControlError('Unexpected output of %s: %r' % (self._tabbed_command[0], line))

    def focus(self, wid):
        if shutil.which('bspc') is None:
            sys.stderr.write('tabctl: bspc not found, not focusing 0x%X\n' % wid)
            return
        subprocess.run(['bspc', 'node', str(wid), '--focus'])

    def create(self, wids):
        """
        Combine ``wids`` into one container. The children of containers
        among all but the last id are moved over. If the last id is a
        container it receives the windows, otherwise a new container is
        started.
        """
        if not wids:
            raise TabControlError('create requires at least one window')

        to_reparent = []
        for wid in wids[:-1]:
            if self.is_tabbed(wid):
                to_reparent.extend(self.children(wid))
            else:
                to_reparent.append(wid)

        last = wids[-1]
        self.focus(last)

        if self.is_tabbed(last):
            container = last
        else:
            to_reparent.append(last)
            container = self.spawn_tabbed()

        for wid in to_reparent:
            self.reparent(wid, container)

        self._display.flush()
        return container

    def transfer(self, wid0, wid1):
        """
        Attach ``wid0`` to the container ``wid1``, creating it if ``wid1``
        is a plain window. If ``wid0`` is a container, its active tab is
        moved instead.
        """
        container = self.create([wid1])
        if self.is_tabbed(wid0):
            self.detach_current(wid0, container)
        else:
            self.reparent(wid0, container)
        self.focus(container)
        return container

    def detach_all(self, wid, parent=None):
        children = self.children(wid)
        for child in children:
            self.reparent(child, parent or self._root)
        return children

    def detach_current(self, wid, parent=None):
        """
        Move the active tab of ``wid``, the top-most of its children,
        to ``parent``. Returns the moved window, or None.
        """
        children = self.children(wid)
        if not children:
            return None
        self.reparent(children[-1], parent or self._root)
        return children[-1]

    def query(self, wid, out=None):
        out = out or sys.stdout
        out.write('wid: %s 0x%X\n' % (wid, wid))
        out.write('is_tabbed: %s\n' % self.is_tabbed(wid))
        out.write('children: %s\n' % self.children(wid))

    def embed(self, wid, lines=None):
        """
        Wait for the next window bspwm adds and attach it to ``wid``.
        """
        if lines is None:
            with subprocess.Popen(['bspc', 'subscribe', 'node_add'],
                                  stdout=subprocess.PIPE, text=True) as proc:
                try:
                    line = proc.stdout.readline()
                finally:
                    proc.terminate()
        else:
            line = next(iter(lines), None)

        if not line:
            return None

        # node_add <monitor_id> <desktop_id> <ip_id> <node_id>
        new_wid = parse_window_id(line.split()[4])
        container = self.create([wid])
        self.reparent(new_wid, container)
        self.focus(container)
        return container


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        'tabctl',
        description='Utility functions to manipulate tabbed containers. '
                    'Window ids may be given in decimal or hex with the prefix "0x".')
    sub = parser.add_subparsers(dest='command', required=True)

    p = sub.add_parser('create', help='Reparent a set of windows to a container, '
                                      'creating one if necessary')
    p.add_argument('wids', nargs='+', type=parse_window_id)

    p = sub.add_parser('transfer', help='Attach window WID0 to container WID1')
    p.add_argument('wid0', type=parse_window_id)
    p.add_argument('wid1', type=parse_window_id)

    p = sub.add_parser('detach', help='Detach the active tab from a container')
    p.add_argument('wid', type=parse_window_id)
    p.add_argument('-a', '--all', action='store_true',
                   help='Detach all tabs, which closes the container')

    p = sub.add_parser('query', help='Print information about a window')
    p.add_argument('wid', type=parse_window_id)

    p = sub.add_parser('embed', help='Attach the next opened window to WID')
    p.add_argument('wid', type=parse_window_id)

    return parser.parse_args(argv)


def run_command(ctl, args):
    if args.command == 'create':
        ctl.create(args.wids)
    elif args.command == 'transfer':
        ctl.transfer(args.wid0, args.wid1)
    elif args.command == 'detach' and args.all:
        ctl.detach_all(args.wid)
    elif args.command == 'detach':
        ctl.detach_current(args.wid)
    elif args.command == 'query':
        ctl.query(args.wid)
    elif args.command == 'embed':
        ctl.embed(args.wid)


def main(argv=None):
    args = parse_args(argv)
    disp = display.Display()
    try:
        run_command(TabControl(disp), args)
        disp.flush()
    except (TabControlError, x11.TransportError) as e:
        sys.stderr.write('tabctl: %s\n' % e)
        return 1
    finally:
        disp.close()
    return 0


if __name__ == '__main__':
    sys.exit(main())
