"""Per-descriptor event interest and dispatch of ready events to callbacks."""

from __future__ import annotations

import enum
import selectors

from .log import logger


class EventFlag(enum.IntFlag):
    """Readiness conditions; READ and WRITE match the selectors constants."""

    READ = selectors.EVENT_READ
    WRITE = selectors.EVENT_WRITE
    PRIORITY = 4
    RDHUP = 8
    ERROR = 16
    HUP = 32


class Channel:
    """Binds a file descriptor to its event loop and its event callbacks."""

    def __init__(self, fd, loop):
        self.fd = fd
        self.loop = loop
        self.events = EventFlag(0)
        self.on_read = None
        self.on_write = None
        self.on_error = None
        self.on_close = None
        self.on_event = None

    def readable(self):
        return bool(self.events & EventFlag.READ)

    def writable(self):
        return bool(self.events & EventFlag.WRITE)

    def enable_read(self):
        logger.debug("fd %d: read enabled", self.fd)
        self.events |= EventFlag.READ
        self._update()

    def enable_write(self):
        logger.debug("fd %d: write enabled", self.fd)
        self.events |= EventFlag.WRITE
        self._update()

    def disable_read(self):
        logger.debug("fd %d: read disabled", self.fd)
        self.events &= ~EventFlag.READ
        self._update()

    def disable_write(self):
        logger.debug("fd %d: write disabled", self.fd)
        self.events &= ~EventFlag.WRITE
        self._update()

    def disable_all(self):
        logger.debug("fd %d: all events disabled", self.fd)
        self.events = EventFlag(0)
        self._update()

    def remove(self):
        """Stop the loop watching this descriptor."""
        logger.debug("fd %d: removing from loop", self.fd)
        self.loop.remove_channel(self)

    def handle_event(self, revents):
        """Run the callbacks that match the ready events ``revents``."""
        if revents & (EventFlag.READ | EventFlag.RDHUP | EventFlag.PRIORITY):
            if self.on_read:
                self.on_read()
        if revents & EventFlag.WRITE:
            if self.on_write:
                self.on_write()
        elif revents & EventFlag.ERROR:
            if self.on_error:
                self.on_error()
        elif revents & EventFlag.HUP:
            if self.on_close:
                self.on_close()
        if self.on_event:
            self.on_event()

    def _update(self):
        self.loop.update_channel(self)