"""
Category scroll-sync for the restaurant menu page.

The menu page shows the categories twice: as a sticky, horizontally
scrollable tab strip and as stacked content sections. Clicking a tab scrolls
to its section; scrolling the page activates the tab of the section under
the viewport and re-centers it in the strip.

ScrollSyncController is the reference model of that behaviour. It drives a
Viewport, which static/js/menu-tabs.js implements on top of the DOM. Both
read their offsets from client_settings() so the server and the browser
never disagree.
"""

import logging

logger = logging.getLogger(__name__)

HEADER_OFFSET = 80       # px kept free above a section after a tab click
LOOKAHEAD_OFFSET = 100   # px added to the scroll offset before matching
ACTIVATION_BUFFER = 50   # px a section activates before its top is reached
SUPPRESS_MS = 500        # longest programmatic-scroll window; scroll-end may close it sooner


def client_settings():
    """Offsets rendered into the page for menu-tabs.js"""
    return {
        'header-offset': HEADER_OFFSET,
        'lookahead': LOOKAHEAD_OFFSET,
        'buffer': ACTIVATION_BUFFER,
        'suppress-ms': SUPPRESS_MS,
    }


class Viewport:
    """What the controller needs from the page.

    Geometry is in document coordinates and must be measured live on every
    call; images loading below the fold change section heights.
    """

    # True when the platform fires an event once a smooth scroll has finished
    supports_scroll_end = False

    @property
    def scroll_y(self):
        raise NotImplementedError

    def section_span(self, category):
        """(top, bottom) of the category's section, or None if not rendered"""
        raise NotImplementedError

    def scroll_to(self, top):
        """Smoothly scroll the page so `top` is at the viewport's top edge"""
        raise NotImplementedError

    def tab_geometry(self, category):
        """(left, width) of the category's tab inside the strip, or None"""
        raise NotImplementedError

    def strip_width(self):
        raise NotImplementedError

    def scroll_strip_to(self, left):
        """Smoothly scroll the tab strip horizontally"""
        raise NotImplementedError

    def add_scroll_listener(self, callback):
        raise NotImplementedError

    def remove_scroll_listener(self, callback):
        raise NotImplementedError

    def add_scroll_end_listener(self, callback):
        raise NotImplementedError

    def remove_scroll_end_listener(self, callback):
        raise NotImplementedError

    def request_animation_frame(self, callback):
        raise NotImplementedError

    def set_timeout(self, callback, ms):
        """Schedule `callback`; returns a handle for clear_timeout()"""
        raise NotImplementedError

    def clear_timeout(self, handle):
        raise NotImplementedError


class ScrollSyncController:
    """Keeps the active category tab consistent with the scroll position"""

    def __init__(self, categories, viewport, header_offset=HEADER_OFFSET,
                 lookahead=LOOKAHEAD_OFFSET, buffer=ACTIVATION_BUFFER,
                 suppress_ms=SUPPRESS_MS):
        self.categories = list(categories)
        self.viewport = viewport
        self.header_offset = header_offset
        self.lookahead = lookahead
        self.buffer = buffer
        self.suppress_ms = suppress_ms

        self.active_category = self.categories[0] if self.categories else None
        self.programmatic_scroll = False
        self.attached = False
        self._suppress_timer = None
        self._frame_pending = False

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def attach(self):
        """Start listening to scroll events; nothing to do without categories"""
        if self.attached or not self.categories:
            return
        self.viewport.add_scroll_listener(self._on_scroll_event)
        if self.viewport.supports_scroll_end:
            self.viewport.add_scroll_end_listener(self._on_scroll_end)
        self.attached = True

    def detach(self):
        if not self.attached:
            return
        self.viewport.remove_scroll_listener(self._on_scroll_event)
        if self.viewport.supports_scroll_end:
            self.viewport.remove_scroll_end_listener(self._on_scroll_end)
        self._cancel_suppress_timer()
        self.programmatic_scroll = False
        self._frame_pending = False
        self.attached = False

    # ------------------------------------------------------------------
    # Explicit selection
    # ------------------------------------------------------------------

    def select_category(self, category):
        """Activate a tab and scroll its section to just below the header.

        The latest call always wins: the suppression window restarts so an
        earlier call's timer cannot end it while the new scroll is running.
        """
        if category not in self.categories:
            raise ValueError(f'unknown category: {category!r}')

        self.active_category = category
        span = self.viewport.section_span(category)
        if span is None:
            return

        target = span[0] - self.header_offset
        self._begin_suppression()
        self.viewport.scroll_to(target)

    def _begin_suppression(self):
        # The timer always runs: a clamped or zero-length scroll fires no scroll-end
        self._cancel_suppress_timer()
        self.programmatic_scroll = True
        self._suppress_timer = self.viewport.set_timeout(self._end_suppression, self.suppress_ms)

    def _end_suppression(self):
        self._suppress_timer = None
        self.programmatic_scroll = False

    def _cancel_suppress_timer(self):
        if self._suppress_timer is not None:
            self.viewport.clear_timeout(self._suppress_timer)
            self._suppress_timer = None

    def _on_scroll_end(self):
        if self.programmatic_scroll:
            self._cancel_suppress_timer()
            self._end_suppression()

    # ------------------------------------------------------------------
    # Scroll-spy
    # ------------------------------------------------------------------

    def _on_scroll_event(self):
        # At most one computation per animation frame
        if self._frame_pending:
            return
        self._frame_pending = True
        self.viewport.request_animation_frame(self._on_frame)

    def _on_frame(self):
        self._frame_pending = False
        self.on_viewport_scroll()

    def category_at(self, position):
        """First category whose [top - buffer, bottom) span contains position"""
        for category in self.categories:
            span = self.viewport.section_span(category)
            if span is None:
                continue
            top, bottom = span
            if top - self.buffer <= position < bottom:
                return category
        return None

    def on_viewport_scroll(self):
        """Re-derive the active category from the current scroll position"""
        if not self.categories or self.programmatic_scroll:
            return self.active_category

        current = self.category_at(self.viewport.scroll_y + self.lookahead)
        if current is None:
            current = self.categories[0]
        if current != self.active_category:
            logger.debug('Active category %r -> %r', self.active_category, current)
            self.active_category = current
            self.center_tab(current)
        return self.active_category

    def center_tab(self, category):
        """Scroll the tab strip so the category's tab sits in its middle"""
        geometry = self.viewport.tab_geometry(category)
        if geometry is None:
            return
        left, width = geometry
        self.viewport.scroll_strip_to(left - self.viewport.strip_width() / 2 + width / 2)
