# Copyright (c) 2017 Christoph Landgraf. All rights reserved.
# Use of this source code is governed by a BSD-style license that can be
# found in the LICENSE file.

# Every container sets this as its WM_CLASS, external tools use it to
# tell containers from other windows.
TABBED_WINDOW_CLASS = 'tabbed-py'

__version__ = '0.1.0'

__all__ = [
    'TABBED_WINDOW_CLASS',
    '__version__',
]
