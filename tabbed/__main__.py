# Copyright (c) 2017 Christoph Landgraf. All rights reserved.
# Use of this source code is governed by a BSD-style license that can be
# found in the LICENSE file.

import argparse
import os
import sys
import traceback

from Xlib import X, display

import tabbed

from tabbed import x11
from tabbed.config import ConfigError, read_config
from tabbed.core import Tabbed
from tabbed.logger import Logger

INITIAL_SIZE = (200, 200)

EVENT_MASK = (X.ButtonPressMask
              | X.SubstructureNotifyMask
              | X.StructureNotifyMask
              | X.FocusChangeMask
              | X.ExposureMask)


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        'tabbed-py',
        description='Embed windows into a container as tabs.')
    parser.add_argument('-c', '--close', action='store_true',
                        help='Exit once the last tab has been detached')
    parser.add_argument('-d', '--detach', action='store_true',
                        help='Detach from the terminal after printing the window id')
    parser.add_argument('--config', type=str, default=None,
                        help='Path of the configuration file')
    parser.add_argument('-v', '--verbose', action='store_true',
                        help='Print log messages as they occur')
    parser.add_argument('--version', action='version',
                        version='%(prog)s ' + tabbed.__version__)
    return parser.parse_args(argv)


def daemonize():
    """
    Fork into the background. Returns in the child only.
    """
    if os.fork() > 0:
        os._exit(0)
    os.setsid()
    os.chdir('/')
    devnull = os.open(os.devnull, os.O_RDWR)
    for fd in range(3):
        os.dup2(devnull, fd)
    os.close(devnull)


def grab_keys(disp, win, keybinds):
    for keybind in keybinds:
        x11.checked(disp, win.grab_key,
                    keybind.key, keybind.mod_mask(), True,
                    X.GrabModeAsync, X.GrabModeAsync)


def main(argv=None):
    args = parse_args(argv)

    try:
        config = read_config(args.config)
    except ConfigError as e:
        sys.stderr.write('%s\n' % e)
        return 1

    logger = Logger(echo=sys.stderr if args.verbose else None)

    disp = display.Display()
    screen = disp.screen()
    atoms = x11.Atoms(disp)

    win = x11.create_window(disp, screen, atoms, EVENT_MASK,
                            tabbed.TABBED_WINDOW_CLASS, INITIAL_SIZE)
    disp.flush()

    sys.stdout.write('0x%X\n' % win.id)
    sys.stdout.flush()

    if args.detach:
        daemonize()

    try:
        grab_keys(disp, win, config.keybinds)
        container = Tabbed(disp, screen, atoms, win, config,
                           close_on_empty=args.close,
                           logger=logger,
                           verbose=args.verbose)
        container.run()
        if container.errors and not args.verbose:
            logger.dump()
    except x11.TransportError:
        logger.log('Fatal X error:')
        logger.log(traceback.format_exc())
        if not args.verbose:
            logger.dump()
        return 1
    finally:
        disp.close()

    return 0


if __name__ == '__main__':
    sys.exit(main())
