import re
import math
import logging

from config import DEFAULT_CURRENCY, DEFAULT_THEME_COLOR

logger = logging.getLogger(__name__)

HEX_COLOR_RE = re.compile(r'#[0-9a-fA-F]{6}')
DARKEN_STEP = 20
DEFAULT_OPACITY = 0.1


def _hex_to_rgb(hex_color):
    if not isinstance(hex_color, str) or not HEX_COLOR_RE.fullmatch(hex_color):
        raise ValueError(f'not a 6-digit hex color: {hex_color!r}')
    return tuple(int(hex_color[i:i + 2], 16) for i in (1, 3, 5))


def lighten_color(hex_color, opacity=DEFAULT_OPACITY):
    """Translucent rgba() version of a hex color, e.g. for tinted borders"""
    try:
        r, g, b = _hex_to_rgb(hex_color)
    except ValueError as e:
        logger.error('Error generating lighter color: %s', e)
        r, g, b = 0, 0, 0
    if isinstance(opacity, bool) or not isinstance(opacity, (int, float)):
        logger.error('Error generating lighter color: not an opacity: %r', opacity)
        opacity = DEFAULT_OPACITY
    return f'rgba({r}, {g}, {b}, {opacity})'


def darken_color(hex_color):
    """Hex color with every channel reduced by 20 (clamped at 0)"""
    try:
        r, g, b = _hex_to_rgb(hex_color)
    except ValueError as e:
        logger.error('Error generating darker color: %s', e)
        return hex_color
    r, g, b = (max(0, channel - DARKEN_STEP) for channel in (r, g, b))
    return f'#{r:02x}{g:02x}{b:02x}'


def theme_palette(theme_color=None, default=DEFAULT_THEME_COLOR):
    """Base, lighter and darker accents used across the restaurant page.

    The colors end up in inline CSS, so anything that is not a 6-digit hex
    color is replaced by the default.
    """
    base = theme_color or default
    if not isinstance(base, str) or not HEX_COLOR_RE.fullmatch(base):
        logger.warning('Ignoring invalid theme color %r', base)
        base = default
    return {
        'base': base,
        'lighter': lighten_color(base, 0.15),
        'darker': darken_color(base),
    }


def format_price(price, currency=DEFAULT_CURRENCY):
    """Format a price with its currency label: 12 -> '12 Birr', 12.5 -> '12.5 Birr'"""
    try:
        if price is None:
            return f'0 {currency}'

        if math.floor(price) == price:
            return f'{math.floor(price)} {currency}'
        # 2 decimal places, trailing zeros removed
        return f'{round(price, 2):.2f}'.rstrip('0').rstrip('.') + f' {currency}'
    except (TypeError, ValueError, OverflowError) as e:
        logger.error('Error formatting price %r: %s', price, e)
        return f'{price} {currency}'
