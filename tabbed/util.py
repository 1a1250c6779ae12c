# Copyright (c) 2017 Christoph Landgraf. All rights reserved.
# Use of this source code is governed by a BSD-style license that can be
# found in the LICENSE file.

from functools import wraps


def find(lst, predicate, default_index=None, default_value=None):
    return next(((index, value)
                 for index, value in enumerate(lst)
                 if predicate(value, index)),
                (default_index, default_value))


def forward(to, methods, cls=None):
    """
    Class Decorator that forwards method calls to another object.

    Parameter ``to`` is a function that receives the object on which
    the function is invoked and must return the object to which it
    should be forwarded. If ``cls`` is provided, the forwarders take
    over the docstrings of the methods of ``cls``.
    """
    def _create_forwarder(method):
        def _forward_fn(self, *args, **kwargs):
            return getattr(to(self), method)(*args, **kwargs)
        return wraps(getattr(cls, method))(_forward_fn) if cls else _forward_fn

    def _forward(cls):
        for method in methods:
            setattr(cls, method, _create_forwarder(method))
        return cls
    return _forward


def parse_window_id(string):
    """
    Parse a window id given in decimal or, prefixed with ``0x``, in hex.
    """
    string = string.strip()
    if string.lower().startswith('0x'):
        return int(string[2:], 16)
    return int(string, 10)
