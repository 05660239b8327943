#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# ****************************************************************************************************************************************************
# * BSD 3-Clause License
# *
# * Copyright (c) 2025, Mana Battery
# * All rights reserved.
# *
# * Redistribution and use in source and binary forms, with or without modification, are permitted provided that the following conditions are met:
# *
# * 1. Redistributions of source code must retain the above copyright notice, this list of conditions and the following disclaimer.
# * 2. Redistributions in binary form must reproduce the above copyright notice, this list of conditions and the following disclaimer in the
# *    documentation and/or other materials provided with the distribution.
# * 3. Neither the name of the copyright holder nor the names of its contributors may be used to endorse or promote products derived from this
# *    software without specific prior written permission.
# *
# * THIS SOFTWARE IS PROVIDED BY THE COPYRIGHT HOLDERS AND CONTRIBUTORS "AS IS" AND ANY EXPRESS OR IMPLIED WARRANTIES, INCLUDING, BUT NOT LIMITED TO,
# * THE IMPLIED WARRANTIES OF MERCHANTABILITY AND FITNESS FOR A PARTICULAR PURPOSE ARE DISCLAIMED. IN NO EVENT SHALL THE COPYRIGHT HOLDER OR
# * CONTRIBUTORS BE LIABLE FOR ANY DIRECT, INDIRECT, INCIDENTAL, SPECIAL, EXEMPLARY, OR CONSEQUENTIAL DAMAGES (INCLUDING, BUT NOT LIMITED TO,
# * PROCUREMENT OF SUBSTITUTE GOODS OR SERVICES; LOSS OF USE, DATA, OR PROFITS; OR BUSINESS INTERRUPTION) HOWEVER CAUSED AND ON ANY THEORY OF
# * LIABILITY, WHETHER IN CONTRACT, STRICT LIABILITY, OR TORT (INCLUDING NEGLIGENCE OR OTHERWISE) ARISING IN ANY WAY OUT OF THE USE OF THIS SOFTWARE,
# * EVEN IF ADVISED OF THE POSSIBILITY OF SUCH DAMAGE.
# ****************************************************************************************************************************************************

"""Diagnostic sinks for progress and error reporting.

The importer never talks to a global event emitter. Callers pass a sink object
into the parsing functions and every progress or error message is delivered
through it, tagged with a channel name (CHANNEL_LOG or CHANNEL_ERROR).

Emission must never break a parse, so all library code goes through emit(),
which absorbs failures raised by a misbehaving sink.
"""

import logging
import threading
from typing import List, Optional, Tuple

from cmakeimport.constants import CHANNEL_LOG, CHANNEL_ERROR

logger = logging.getLogger(__name__)


class DiagnosticSink:
    """Base class for diagnostic sinks.

    Subclasses override write(). Instances may be shared between parses running
    in parallel, so implementations must be thread-safe.
    """

    def write(self, channel: str, message: str) -> None:
        raise NotImplementedError


class LoggingSink(DiagnosticSink):
    """Forward diagnostics to the standard logging module.

    CHANNEL_ERROR maps to WARNING (the parse continues), everything else to INFO.
    """

    def __init__(self, target: Optional[logging.Logger] = None):
        self._logger = target if target is not None else logger

    def write(self, channel: str, message: str) -> None:
        if channel == CHANNEL_ERROR:
            self._logger.warning("%s", message)
        else:
            self._logger.info("%s", message)


class CollectingSink(DiagnosticSink):
    """Keep diagnostics in memory, e.g. for reports or tests.

    Attributes:
        events: List of (channel, message) tuples in emission order
    """

    def __init__(self) -> None:
        self.events: List[Tuple[str, str]] = []
        self._lock = threading.Lock()

    def write(self, channel: str, message: str) -> None:
        with self._lock:
            self.events.append((channel, message))

    def messages(self, channel: Optional[str] = None) -> List[str]:
        """Return collected messages, optionally restricted to one channel."""
        with self._lock:
            return [msg for chan, msg in self.events if channel is None or chan == channel]


def emit(sink: Optional[DiagnosticSink], message: str, channel: str = CHANNEL_LOG) -> None:
    """Deliver a message to the sink without ever failing the caller.

    Args:
        sink: Target sink; None discards the message
        message: Free-text progress or error message
        channel: Channel tag (CHANNEL_LOG or CHANNEL_ERROR)
    """
    if sink is None:
        return
    try:
        sink.write(channel, message)
    except Exception as e:  # pylint: disable=broad-exception-caught
        logger.debug("Diagnostic sink failed on %r: %s", message, e)


def emit_error(sink: Optional[DiagnosticSink], message: str) -> None:
    """Shorthand for emit() on CHANNEL_ERROR."""
    emit(sink, message, CHANNEL_ERROR)
