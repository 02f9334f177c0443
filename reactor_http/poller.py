"""Readiness poller over the platform's best selector."""

from __future__ import annotations

import os
import selectors

from .channel import EventFlag
from .log import logger

_SELECTABLE = EventFlag.READ | EventFlag.WRITE


def _is_open(fd):
    try:
        os.fstat(fd)
    except OSError:
        return False
    return True


class Poller:
    """Tracks channels by descriptor and reports which are ready."""

    def __init__(self):
        self._selector = selectors.DefaultSelector()
        self._channels = {}
        logger.info("poller created")

    def has_channel(self, channel):
        return channel.fd in self._channels

    def update(self, channel):
        """Start watching the channel, or change the events it is watched for."""
        fd = channel.fd
        if not _is_open(fd):
            logger.warning("fd %d is closed, skipping poller update", fd)
            return
        mask = int(channel.events & _SELECTABLE)
        registered = fd in self._selector.get_map()
        if mask == 0:
            if registered:
                self._selector.unregister(fd)
        elif registered:
            self._selector.modify(fd, mask, channel)
        else:
            self._selector.register(fd, mask, channel)
        self._channels[fd] = channel

    def remove(self, channel):
        fd = channel.fd
        self._channels.pop(fd, None)
        if not _is_open(fd):
            logger.warning("fd %d is already closed", fd)
        try:
            self._selector.unregister(fd)
        except (KeyError, ValueError, OSError):
            pass

    def wait(self, timeout=None):
        """Block up to ``timeout`` seconds; return ``(channel, events)`` pairs."""
        ready = []
        for key, mask in self._selector.select(timeout):
            channel = self._channels.get(key.fd)
            if channel is None:
                raise RuntimeError(f"event for unknown fd {key.fd}")
            ready.append((channel, EventFlag(mask)))
        return ready

    def close(self):
        self._selector.close()
        self._channels.clear()