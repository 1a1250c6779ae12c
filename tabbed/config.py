# Copyright (c) 2017 Christoph Landgraf. All rights reserved.
# Use of this source code is governed by a BSD-style license that can be
# found in the LICENSE file.

"""
This module defines the configuration of a tabbed container.

A configuration consists of an ordered list of keybindings and a set of
display options. Each keybinding maps a set of modifiers and a physical
key code to an action. When a key is pressed, the first keybinding whose
modifiers and key code match the event exactly is applied.

The default configuration may be overridden by a TOML file, which is
looked up in the following order:

1. The path given on the command line (``--config``)
2. The path in the environment variable ``TABBED_CONFIG_PATH``
3. ``$HOME/.config/tabbed-py.toml``, if it exists

Top-level keys in the file replace the corresponding default. Note that
``keybinds`` replaces the whole default list:

.. code-block:: toml

   colors = false
   font = "Terminus"

   [[keybinds]]
   modifiers = ["CONTROL"]
   key = 10
   action = { Focus = 0 }

   [[keybinds]]
   modifiers = ["SHIFT", "CONTROL"]
   key = 46
   action = "FocusUp"
"""

import collections
import functools
import os
import tomllib

MOD_MAP = {
    'SHIFT':   1 << 0,
    'LOCK':    1 << 1,
    'CONTROL': 1 << 2,
    'ALT':     1 << 3,
    'ANY':     1 << 15,
}

ANY_MODIFIER = MOD_MAP['ANY']

CONFIG_PATH_ENV = 'TABBED_CONFIG_PATH'
CONFIG_FILE = os.path.join('.config', 'tabbed-py.toml')


class ConfigError(Exception):
    def __init__(self, path, reason):
        super(ConfigError, self).__init__(path, reason)
        self.path = path
        self.reason = reason

    def __str__(self):
        if self.path is None:
            return 'no file: %s' % self.reason
        return '%s: %s' % (self.path, self.reason)


class Action(object):
    """
    An action a keybinding may trigger.

    Actions are compared by value, ``Action.focus(2) == Action.focus(2)``.
    Only ``FOCUS`` carries an argument, the index of the tab to focus.
    """
    FOCUS_UP = 'FocusUp'
    FOCUS_DOWN = 'FocusDown'
    SHIFT_UP = 'ShiftUp'
    SHIFT_DOWN = 'ShiftDown'
    FOCUS = 'Focus'
    DETACH_FOCUSED = 'DetachFocused'
    DETACH_ALL = 'DetachAll'
    TOGGLE_AUTO_ATTACH = 'ToggleAutoAttach'

    SIMPLE_KINDS = (FOCUS_UP, FOCUS_DOWN, SHIFT_UP, SHIFT_DOWN,
                    DETACH_FOCUSED, DETACH_ALL, TOGGLE_AUTO_ATTACH)

    def __init__(self, kind, index=None):
        if kind == Action.FOCUS:
            if not isinstance(index, int) or isinstance(index, bool) or index < 0:
                raise ValueError('Focus requires a non-negative index, got %r' % (index,))
        elif kind in Action.SIMPLE_KINDS:
            if index is not None:
                raise ValueError('%s takes no argument' % kind)
        else:
            raise ValueError('Unknown action: %s' % kind)
        self.kind = kind
        self.index = index

    @classmethod
    def focus(cls, index):
        return cls(Action.FOCUS, index)

    @classmethod
    def parse(cls, value):
        """
        Parse an action given either as a bare name, e.g. ``"FocusUp"``,
        or as a table with a single entry, e.g. ``{Focus = 3}``.
        """
        if isinstance(value, str):
            return cls(value)
        if isinstance(value, dict) and len(value) == 1:
            (kind, index), = value.items()
            return cls(kind, index)
        raise ValueError('Illegal action: %r' % (value,))

    def __eq__(self, other):
        if not isinstance(other, Action):
            return NotImplemented
        return (self.kind, self.index) == (other.kind, other.index)

    def __hash__(self):
        return hash((self.kind, self.index))

    def __repr__(self):
        if self.kind == Action.FOCUS:
            return 'Action.focus(%s)' % self.index
        return 'Action(%r)' % self.kind


class Keybind(collections.namedtuple('Keybind', ['modifiers', 'key', 'action'])):
    __slots__ = ()

    def mod_mask(self):
        """
        The modifier mask used for grabbing the key. A keybinding
        without modifiers is grabbed with any modifier.
        """
        return functools.reduce(lambda acc, m: acc | MOD_MAP[m],
                                self.modifiers, 0) or ANY_MODIFIER

    def key_but_mask(self):
        """
        The modifier state a key press event must carry to match.
        """
        return functools.reduce(lambda acc, m: acc | MOD_MAP[m],
                                self.modifiers, 0)

    def matches(self, key, state):
        return self.key == key and self.key_but_mask() == state


Config = collections.namedtuple('Config', ['keybinds', 'auto_attach', 'colors', 'font'])


def _default_keybinds():
    shift_control = ('SHIFT', 'CONTROL')
    keybinds = [
        Keybind(shift_control, 43, Action(Action.FOCUS_DOWN)),
        Keybind(shift_control, 44, Action(Action.SHIFT_DOWN)),
        Keybind(shift_control, 45, Action(Action.SHIFT_UP)),
        Keybind(shift_control, 46, Action(Action.FOCUS_UP)),

        Keybind(shift_control, 22, Action(Action.DETACH_FOCUSED)),
        Keybind(shift_control, 9,  Action(Action.DETACH_ALL)),
    ]
    # Control + 1..9 focus the first nine tabs
    keybinds.extend(Keybind(('CONTROL',), 10 + i, Action.focus(i))
                    for i in range(9))
    return tuple(keybinds)


DEFAULT_CONFIG = Config(
    keybinds=_default_keybinds(),
    auto_attach=False,
    colors=True,
    font=None,
)


def find_config():
    """
    Return the first found configuration path, or None.
    """
    env_path = os.environ.get(CONFIG_PATH_ENV)
    if env_path:
        return env_path

    home = os.environ.get('HOME')
    if home:
        path = os.path.join(home, CONFIG_FILE)
        if os.path.exists(path):
            return path

    return None


def _parse_keybind(path, index, value):
    if not isinstance(value, dict):
        raise ConfigError(path, 'keybinds[%s]: expected a table' % index)

    unknown = set(value) - set(Keybind._fields)
    missing = set(Keybind._fields) - set(value)
    if unknown or missing:
        raise ConfigError(path, 'keybinds[%s]: unknown keys %s, missing keys %s'
                          % (index, sorted(unknown), sorted(missing)))

    modifiers = value['modifiers']
    if not isinstance(modifiers, list) or any(m not in MOD_MAP for m in modifiers):
        raise ConfigError(path, 'keybinds[%s]: illegal modifiers %r' % (index, modifiers))

    key = value['key']
    if not isinstance(key, int) or isinstance(key, bool) or not 8 <= key <= 255:
        raise ConfigError(path, 'keybinds[%s]: illegal key code %r' % (index, key))

    try:
        action = Action.parse(value['action'])
    except ValueError as e:
        raise ConfigError(path, 'keybinds[%s]: %s' % (index, e))

    return Keybind(tuple(modifiers), key, action)


def parse_config(data, path=None, defaults=DEFAULT_CONFIG):
    """
    Merge a dictionary, as read from a configuration file, onto ``defaults``.

    :param data: The parsed TOML document
    :param path: The path the document was read from, used in errors
    :param defaults: The configuration whose values are overridden
    """
    unknown = set(data) - set(Config._fields)
    if unknown:
        raise ConfigError(path, 'unknown keys %s' % sorted(unknown))

    values = defaults._asdict()
    for name in ('auto_attach', 'colors'):
        if name in data:
            if not isinstance(data[name], bool):
                raise ConfigError(path, '%s: expected a boolean' % name)
            values[name] = data[name]

    if 'font' in data:
        if not isinstance(data['font'], str):
            raise ConfigError(path, 'font: expected a string')
        values['font'] = data['font'] or None

    if 'keybinds' in data:
        if not isinstance(data['keybinds'], list):
            raise ConfigError(path, 'keybinds: expected an array of tables')
        values['keybinds'] = tuple(_parse_keybind(path, i, kb)
                                   for i, kb in enumerate(data['keybinds']))

    return Config(**values)


def read_config(cli_path=None):
    """
    Find, read, and parse the configuration.

    If provided, ``cli_path`` is used instead of searching for it.
    Returns DEFAULT_CONFIG if no configuration file is found.
    """
    path = cli_path or find_config()
    if path is None:
        return DEFAULT_CONFIG

    try:
        with open(path, 'rb') as f:
            data = tomllib.load(f)
    except OSError as e:
        raise ConfigError(path, e.strerror or str(e))
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(path, str(e))

    return parse_config(data, path)
