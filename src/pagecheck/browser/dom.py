"""Reusable DOM helpers for carousel, video, form, performance and accessibility checks.

Each helper returns plain Python data so predicates stay short:

    state = await video_state(ctx.page, "#hero video")
    ctx.expect("Hero video autoplays", autoplay_ready(state), describe(state))
"""

from __future__ import annotations

from typing import Any


_VIDEO_STATE_JS = """
(selector) => {
  const video = document.querySelector(selector);
  if (!video) return null;
  return {
    autoplay: video.hasAttribute('autoplay'),
    muted: video.muted || video.hasAttribute('muted'),
    loop: video.hasAttribute('loop'),
    controls: video.hasAttribute('controls'),
    playsinline: video.hasAttribute('playsinline'),
    pointer_events: video.style.pointerEvents || '',
    paused: video.paused,
    current_time: video.currentTime,
    ready_state: video.readyState,
  };
}
"""

_COMPUTED_STYLE_JS = """
([selector, prop]) => {
  const el = document.querySelector(selector);
  return el ? getComputedStyle(el).getPropertyValue(prop) : null;
}
"""

_INLINE_STYLE_JS = """
([selector, prop]) => {
  const el = document.querySelector(selector);
  return el ? el.style.getPropertyValue(prop) : null;
}
"""

_REQUIRED_JS = """
(selector) => {
  const el = document.querySelector(selector);
  if (!el) return null;
  return el.required || el.getAttribute('aria-required') === 'true';
}
"""

_NAVIGATION_TIMING_JS = """
() => {
  const [nav] = performance.getEntriesByType('navigation');
  if (nav) {
    return {
      dns_lookup: nav.domainLookupEnd - nav.domainLookupStart,
      tcp_connect: nav.connectEnd - nav.connectStart,
      server_response: nav.responseEnd - nav.requestStart,
      dom_load: nav.domContentLoadedEventEnd - nav.startTime,
      window_load: nav.loadEventEnd - nav.startTime,
    };
  }
  const t = performance.timing;
  return {
    dns_lookup: t.domainLookupEnd - t.domainLookupStart,
    tcp_connect: t.connectEnd - t.connectStart,
    server_response: t.responseEnd - t.requestStart,
    dom_load: t.domContentLoadedEventEnd - t.navigationStart,
    window_load: t.loadEventEnd - t.navigationStart,
  };
}
"""

_PAINT_METRICS_JS = """
(waitMs) => new Promise((resolve) => {
  const metrics = {};
  for (const entry of performance.getEntriesByType('paint')) {
    if (entry.name === 'first-paint') metrics.first_paint = entry.startTime;
    if (entry.name === 'first-contentful-paint') metrics.first_contentful_paint = entry.startTime;
  }
  try {
    new PerformanceObserver((list) => {
      const entries = list.getEntries();
      const last = entries[entries.length - 1];
      if (last) metrics.largest_contentful_paint = last.renderTime || last.loadTime || last.startTime;
    }).observe({ type: 'largest-contentful-paint', buffered: true });
    let shift = 0;
    metrics.cumulative_layout_shift = 0;
    new PerformanceObserver((list) => {
      for (const entry of list.getEntries()) {
        if (!entry.hadRecentInput) shift += entry.value;
      }
      metrics.cumulative_layout_shift = shift;
    }).observe({ type: 'layout-shift', buffered: true });
  } catch (e) {
    // entry types this engine does not support stay missing
  }
  setTimeout(() => resolve(metrics), waitMs);
})
"""

_DESCRIBE_ELEMENT_JS = """
  const describe = (el) => {
    let text = el.tagName.toLowerCase();
    if (el.id) text += '#' + el.id;
    else if (typeof el.className === 'string' && el.className.trim()) {
      text += '.' + el.className.trim().split(/\\s+/)[0];
    }
    return text;
  };
"""

_MISSING_NAMES_JS = (
    """
(selector) => {
  const scope = selector ? document.querySelector(selector) : document;
  if (!scope) return null;
"""
    + _DESCRIBE_ELEMENT_JS
    + """
  const missing = [];
  for (const img of scope.querySelectorAll('img')) {
    if (!img.hasAttribute('alt')) missing.push(describe(img));
  }
  const controls = scope.querySelectorAll(
    'button, a[href], input:not([type=hidden]), select, textarea, [role=button], [role=link]'
  );
  for (const el of controls) {
    const named =
      (el.textContent || '').trim() ||
      el.getAttribute('aria-label') ||
      el.getAttribute('aria-labelledby') ||
      el.getAttribute('title') ||
      (el.labels && el.labels.length > 0) ||
      (['submit', 'button', 'reset'].includes(el.type) && el.value) ||
      el.querySelector('img[alt]:not([alt=""])');
    if (!named) missing.push(describe(el));
  }
  return missing;
}
"""
)

_ACTIVE_ELEMENT_JS = (
    """
(within) => {
  const el = document.activeElement;
  if (!el || el === document.body) return null;
"""
    + _DESCRIBE_ELEMENT_JS
    + """
  return { element: describe(el), inside: within ? el.closest(within) !== null : true };
}
"""
)


EXPECTED_CARD_RATIO = 0.75  # 3:4 cards
RATIO_TOLERANCE = 0.05

LOAD_BUDGET_MS = 5_000
DOM_LOAD_BUDGET_MS = 3_000
LCP_BUDGET_MS = 2_500
CLS_BUDGET = 0.1
PAINT_METRIC_KEYS = (
    "first_paint",
    "first_contentful_paint",
    "largest_contentful_paint",
    "cumulative_layout_shift",
)


async def video_state(page: Any, selector: str = "video") -> dict[str, Any] | None:
    """Attributes and playback state of the first matching ``<video>``, or None."""
    return await page.evaluate(_VIDEO_STATE_JS, selector)


def autoplay_ready(state: dict[str, Any] | None) -> bool:
    """True when a video is set up for silent, looping, control-less autoplay."""
    if not state:
        return False
    return bool(
        state.get("autoplay")
        and state.get("muted")
        and state.get("loop")
        and not state.get("controls")
        and state.get("playsinline")
    )


def is_playing(state: dict[str, Any] | None) -> bool:
    if not state:
        return False
    return not state.get("paused", True) and (state.get("current_time") or 0) > 0


def describe(state: dict[str, Any] | None) -> str:
    if state is None:
        return "element not found"
    return ", ".join(f"{key}: {value}" for key, value in state.items())


async def computed_style(page: Any, selector: str, prop: str) -> str | None:
    return await page.evaluate(_COMPUTED_STYLE_JS, [selector, prop])


async def inline_style(page: Any, selector: str, prop: str) -> str | None:
    return await page.evaluate(_INLINE_STYLE_JS, [selector, prop])


async def count(page: Any, selector: str) -> int:
    return await page.locator(selector).count()


async def is_visible(page: Any, selector: str) -> bool:
    return await page.locator(selector).first.is_visible()


async def bounding_boxes(page: Any, selector: str) -> list[dict[str, float]]:
    """Bounding boxes of every visible element matching the selector."""
    boxes = []
    for element in await page.locator(selector).all():
        box = await element.bounding_box()
        if box:
            boxes.append(box)
    return boxes


def aspect_ratio(box: dict[str, float] | None) -> float | None:
    """Width divided by height, or None for a missing or zero-height box."""
    if not box or not box.get("height"):
        return None
    return box["width"] / box["height"]


def within_tolerance(value: float | None, expected: float, tolerance: float = RATIO_TOLERANCE) -> bool:
    return value is not None and abs(value - expected) <= tolerance


async def is_required_field(page: Any, selector: str) -> bool | None:
    """``required`` or ``aria-required`` on the field, None when it is missing."""
    return await page.evaluate(_REQUIRED_JS, selector)


async def field_accepts_text(page: Any, selector: str, text: str) -> bool:
    """Fill the field and read the value back."""
    field = page.locator(selector)
    await field.fill(text)
    return await field.input_value() == text


async def navigation_timing(page: Any) -> dict[str, float]:
    """Milliseconds spent in each navigation phase of the current document.

    Keys: ``dns_lookup``, ``tcp_connect``, ``server_response``, ``dom_load``
    (DOMContentLoaded) and ``window_load`` (the load event). Load phases that
    have not finished yet come back as zero or negative.
    """
    return await page.evaluate(_NAVIGATION_TIMING_JS)


async def paint_metrics(page: Any, wait_ms: int = 500) -> dict[str, float | None]:
    """Paint timings and layout shift collected over ``wait_ms``.

    ``largest_contentful_paint`` and ``cumulative_layout_shift`` are None in
    engines without those performance entries.
    """
    metrics = await page.evaluate(_PAINT_METRICS_JS, wait_ms)
    return {key: metrics.get(key) for key in PAINT_METRIC_KEYS}


def within_budget(ms: float | None, budget_ms: float) -> bool:
    """True for a measured, finished timing under ``budget_ms``."""
    return ms is not None and 0 < ms < budget_ms


async def missing_accessible_names(page: Any, selector: str | None = None) -> list[str] | None:
    """Images without ``alt`` and controls without an accessible name.

    Returns short descriptions such as ``img.hero`` or ``button#close`` for the
    offenders inside ``selector`` (the whole document when omitted), or None
    when ``selector`` matches nothing.
    """
    return await page.evaluate(_MISSING_NAMES_JS, selector)


async def focus_order(
    page: Any, steps: int = 20, within: str | None = None
) -> list[dict[str, Any]]:
    """Press Tab up to ``steps`` times and report where focus lands.

    Each entry is ``{"element": "a#pricing", "inside": bool}``; ``inside`` says
    whether the element sits in ``within``. Stops early once focus falls back
    to the document body.
    """
    order = []
    for _ in range(steps):
        await page.keyboard.press("Tab")
        focused = await page.evaluate(_ACTIVE_ELEMENT_JS, within)
        if focused is None:
            break
        order.append(focused)
    return order


__all__ = [
    "CLS_BUDGET",
    "DOM_LOAD_BUDGET_MS",
    "EXPECTED_CARD_RATIO",
    "LCP_BUDGET_MS",
    "LOAD_BUDGET_MS",
    "PAINT_METRIC_KEYS",
    "RATIO_TOLERANCE",
    "aspect_ratio",
    "autoplay_ready",
    "bounding_boxes",
    "computed_style",
    "count",
    "describe",
    "field_accepts_text",
    "focus_order",
    "inline_style",
    "is_playing",
    "is_required_field",
    "is_visible",
    "missing_accessible_names",
    "navigation_timing",
    "paint_metrics",
    "video_state",
    "within_budget",
    "within_tolerance",
]
