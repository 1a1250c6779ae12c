# Copyright (c) 2017 Christoph Landgraf. All rights reserved.
# Use of this source code is governed by a BSD-style license that can be
# found in the LICENSE file.

import sys


class Logger(object):
    MAX_MESSAGES = 1000

    def __init__(self, echo=None):
        self.messages = []
        self._echo = echo

    def log(self, msg):
        if (len(self.messages) >= Logger.MAX_MESSAGES):
            self.messages.pop(0)
        self.messages.append(msg)
        if self._echo:
            self._echo.write('%s\n' % msg.rstrip('\n'))
            self._echo.flush()

    def dump(self, stream=None):
        stream = stream or sys.stderr
        for msg in self.messages:
            stream.write('%s\n' % msg.rstrip('\n'))
        stream.flush()
