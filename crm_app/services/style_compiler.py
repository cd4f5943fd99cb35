"""Compile component modification sets into a stylesheet.

Pure functions only: no storage, no network.  The output for a given
input is byte-for-byte stable (components sorted by name, declarations in
a fixed order, extra keys sorted) so compiled stylesheets can be compared
directly.

Every declaration is emitted with ``!important`` so it wins over the
frontend's static styling.  Inside a block the theme bundle comes first,
so explicit colour/spacing fields override what the theme set.
"""

import re
from typing import Any, Dict, List, Mapping, Optional, Tuple

from crm_app.core.constants import COMPONENT_MARKER_ATTRIBUTE
from crm_app.schemas.customization import Modifications

Declaration = Tuple[str, str]

THEME_BUNDLES: Dict[str, Tuple[Declaration, ...]] = {
    "neon": (
        ("box-shadow", "0 0 20px currentColor"),
        ("border", "2px solid currentColor"),
    ),
    "minimal": (
        ("box-shadow", "none"),
        ("border", "1px solid #e5e5e5"),
    ),
    "bold": (
        ("font-weight", "700"),
        ("border-width", "3px"),
    ),
    "dark": (
        ("background-color", "#1f2937"),
        ("color", "#f9fafb"),
        ("border-color", "#374151"),
    ),
    "light": (
        ("background-color", "#ffffff"),
        ("color", "#111827"),
        ("border-color", "#e5e7eb"),
    ),
    "custom": (),
}

# (attribute on the category model, CSS property), in emission order
_COLOR_PROPERTIES: Tuple[Tuple[str, str], ...] = (
    ("background", "background-color"),
    ("text", "color"),
    ("border", "border-color"),
)
_SPACING_PROPERTIES: Tuple[Tuple[str, str], ...] = (
    ("padding", "padding"),
    ("margin", "margin"),
    ("gap", "gap"),
)
_LAYOUT_PROPERTIES: Tuple[Tuple[str, str], ...] = (
    ("width", "width"),
    ("height", "height"),
    ("display", "display"),
    ("flex_direction", "flex-direction"),
)

_UNSAFE_VALUE_CHARS = re.compile(r"[;{}<>\r\n]")
_IMPORTANT_SUFFIX = re.compile(r"\s*!\s*important\s*$", re.IGNORECASE)
_CUSTOM_PROPERTY_CHARS = re.compile(r"[^A-Za-z0-9_-]")

_SELECTOR_PATTERN = re.compile(
    r'^\[' + re.escape(COMPONENT_MARKER_ATTRIBUTE) + r'="((?:[^"\\]|\\.)*)"\]$',
    re.DOTALL,
)
_CSS_ESCAPE = re.compile(r"\\([0-9a-fA-F]{1,6}) ?|\\(.)", re.DOTALL)


# ---------------------------------------------------------------------------
# Selectors
# ---------------------------------------------------------------------------


def _escape_css_string(value: str) -> str:
    out: List[str] = []
    for char in value:
        if char in ('"', "\\"):
            out.append("\\" + char)
        elif char in ("\n", "\r", "\f") or ord(char) < 0x20:
            out.append(f"\\{ord(char):X} ")
        else:
            out.append(char)
    return "".join(out)


def _unescape_css_string(value: str) -> str:
    def _replace(match: "re.Match[str]") -> str:
        if match.group(1) is not None:
            return chr(int(match.group(1), 16))
        return match.group(2)

    return _CSS_ESCAPE.sub(_replace, value)


def component_selector(component_name: str) -> str:
    """Attribute selector matching the elements tagged *component_name*."""
    return f'[{COMPONENT_MARKER_ATTRIBUTE}="{_escape_css_string(component_name)}"]'


def component_from_selector(selector: str) -> Optional[str]:
    """Inverse of :func:`component_selector`; ``None`` for other selectors."""
    match = _SELECTOR_PATTERN.match(selector.strip())
    if match is None:
        return None
    return _unescape_css_string(match.group(1))


# ---------------------------------------------------------------------------
# Declarations
# ---------------------------------------------------------------------------


def _clean_value(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = _UNSAFE_VALUE_CHARS.sub("", str(value))
    text = _IMPORTANT_SUFFIX.sub("", text).strip()
    return text or None


def _custom_property(key: str) -> Optional[str]:
    name = _CUSTOM_PROPERTY_CHARS.sub("", key)
    return f"--{name}" if name else None


def _category_declarations(
    category: Any, properties: Tuple[Tuple[str, str], ...]
) -> List[Declaration]:
    if category is None:
        return []
    result: List[Declaration] = []
    for attribute, css_property in properties:
        value = _clean_value(getattr(category, attribute))
        if value is not None:
            result.append((css_property, value))
    for key, raw in sorted(category.custom_properties().items()):
        name = _custom_property(key)
        value = _clean_value(raw)
        if name and value is not None:
            result.append((name, value))
    return result


def declarations(modifications: Any) -> List[Declaration]:
    """Expand one modification set into ordered (property, value) pairs."""
    mods = Modifications.lenient(modifications)
    result: List[Declaration] = []

    # Unknown themes expand to nothing
    if mods.theme:
        result.extend(THEME_BUNDLES.get(mods.theme, ()))

    result.extend(_category_declarations(mods.colors, _COLOR_PROPERTIES))
    result.extend(_category_declarations(mods.spacing, _SPACING_PROPERTIES))
    result.extend(_category_declarations(mods.layout, _LAYOUT_PROPERTIES))

    font_size = _clean_value(mods.font_size)
    if font_size is not None:
        result.append(("font-size", font_size))
    border_radius = _clean_value(mods.border_radius)
    if border_radius is not None:
        result.append(("border-radius", border_radius))
    return result


def compile_rule(component_name: str, modifications: Any) -> str:
    """Render one rule block.  A block is produced even with no declarations."""
    lines = [f"{component_selector(component_name)} {{"]
    lines.extend(
        f"  {css_property}: {value} !important;"
        for css_property, value in declarations(modifications)
    )
    lines.append("}")
    return "\n".join(lines) + "\n"


def compile_stylesheet(styles: Mapping[str, Any]) -> str:
    """Compile a component → modifications map into one stylesheet."""
    return "".join(compile_rule(name, styles[name]) for name in sorted(styles))
