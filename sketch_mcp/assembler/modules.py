"""Layer builders for each module type.

Each builder takes the module record (a plain dict with at least ``type``)
and a ``ModuleContext`` and returns the module's layers in paint order. A
missing optional field omits the layers that would display it.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Callable

from sketch_mcp.model import LayerBase, Rectangle, StyleSpec, Text

if TYPE_CHECKING:
    from .lib import ModuleContext

ModuleBuilder = Callable[[dict[str, Any], "ModuleContext"], list[LayerBase]]


def _box(x: float, y: float, width: float, height: float) -> dict[str, float]:
    return {"x": x, "y": y, "width": max(width, 0), "height": max(height, 0)}


def _rect(
    ctx: ModuleContext,
    box: dict[str, float],
    fill: str,
    name: str,
    radius: float = 0,
    border: str | None = None,
) -> Rectangle:
    spec = StyleSpec(fills=[fill], corner_radius=radius, border_color=border)
    return ctx.factory.rectangle(box, spec, name=name)


def _text(
    ctx: ModuleContext,
    content: Any,
    box: dict[str, float],
    size: float,
    family: str,
    color: str,
    alignment: str | None = None,
) -> Text:
    spec = StyleSpec(font_family=family, font_size=size, color=color, alignment=alignment)
    return ctx.factory.text(str(content), box, spec)


# =============================================================================
# Page Sections
# =============================================================================


def build_header(module: dict[str, Any], ctx: ModuleContext) -> list[LayerBase]:
    """Top navigation bar with an optional centered title."""
    x, y, width, p = ctx.x, ctx.y, ctx.width, ctx.palette
    layers: list[LayerBase] = [
        _rect(ctx, _box(x, y, width, module.get("height") or 56), p.surface, "Header")
    ]
    if module.get("title"):
        layers.append(
            _text(ctx, module["title"], _box(x + 16, y + 16, width - 32, 24),
                  18, "Roboto-Bold", p.text_primary, "center")
        )
    return layers


def build_hero(module: dict[str, Any], ctx: ModuleContext) -> list[LayerBase]:
    """Primary-colored banner with title, subtitle and a call-to-action pill."""
    x, y, width, p = ctx.x, ctx.y, ctx.width, ctx.palette
    layers: list[LayerBase] = [
        _rect(ctx, _box(x, y, width, module.get("height") or 280), p.primary, "Hero Background")
    ]
    if module.get("title"):
        layers.append(
            _text(ctx, module["title"], _box(x + 24, y + 40, width - 48, 36),
                  28, "Roboto-Bold", "#FFFFFF", "center")
        )
    if module.get("subtitle"):
        layers.append(
            _text(ctx, module["subtitle"], _box(x + 24, y + 84, width - 48, 20),
                  15, "Roboto-Regular", "#FFFFFF", "center")
        )
    if module.get("cta"):
        cta_x = x + width / 2 - 70
        layers.append(_rect(ctx, _box(cta_x, y + 140, 140, 44), "#FFFFFF", "CTA Button", radius=22))
        layers.append(
            _text(ctx, module["cta"], _box(cta_x, y + 152, 140, 20),
                  16, "Roboto-Medium", p.primary, "center")
        )
    return layers


def build_features(module: dict[str, Any], ctx: ModuleContext) -> list[LayerBase]:
    """Section title followed by a bulleted list, one item every 48pt."""
    x, y, width, p = ctx.x, ctx.y, ctx.width, ctx.palette
    layers: list[LayerBase] = [
        _rect(ctx, _box(x, y, width, module.get("height") or 200), p.surface, "Features")
    ]
    if module.get("sectionTitle"):
        layers.append(
            _text(ctx, module["sectionTitle"], _box(x + 16, y + 20, width - 32, 24),
                  20, "Roboto-Medium", p.text_primary, "left")
        )
    for index, item in enumerate(module.get("items") or []):
        layers.append(
            _text(ctx, f"• {item}", _box(x + 16, y + 60 + index * 48, width - 32, 20),
                  16, "Roboto-Regular", p.text_primary, "left")
        )
    return layers


def build_product_grid(module: dict[str, Any], ctx: ModuleContext) -> list[LayerBase]:
    """Two-column grid of product cards with name and price."""
    x, y, width, p = ctx.x, ctx.y, ctx.width, ctx.palette
    layers: list[LayerBase] = [
        _rect(ctx, _box(x, y, width, module.get("height") or 300), p.background, "Product Grid")
    ]
    if module.get("sectionTitle"):
        layers.append(
            _text(ctx, module["sectionTitle"], _box(x + 16, y + 16, width - 32, 24),
                  20, "Roboto-Medium", p.text_primary)
        )
    card_width = max((width - 48) / 2, 0)
    for index, product in enumerate(module.get("products") or []):
        product = product if isinstance(product, dict) else {"name": product}
        col, row = index % 2, index // 2
        card_x = x + 16 + col * (card_width + 16)
        card_y = y + 56 + row * (card_width + 80)
        layers.append(
            _rect(ctx, _box(card_x, card_y, card_width, card_width + 60),
                  p.surface, f"Product {index + 1}", radius=12)
        )
        layers.append(
            _text(ctx, product.get("name") or "Product",
                  _box(card_x + 12, card_y + card_width + 8, card_width - 24, 18),
                  14, "Roboto-Medium", p.text_primary)
        )
        layers.append(
            _text(ctx, product.get("price") or "$99",
                  _box(card_x + 12, card_y + card_width + 28, card_width - 24, 16),
                  14, "Roboto-Regular", p.primary)
        )
    return layers


def build_bottom_nav(module: dict[str, Any], ctx: ModuleContext) -> list[LayerBase]:
    """Tab bar; the first item is highlighted."""
    x, y, width, p = ctx.x, ctx.y, ctx.width, ctx.palette
    layers: list[LayerBase] = [
        _rect(ctx, _box(x, y, width, module.get("height") or 80), p.surface, "Bottom Navigation")
    ]
    items = module.get("items") or []
    if items:
        item_width = width / len(items)
        for index, item in enumerate(items):
            layers.append(
                _text(ctx, item, _box(x + index * item_width, y + 28, item_width, 24),
                      12, "Roboto-Regular",
                      p.primary if index == 0 else p.text_secondary, "center")
            )
    return layers


# =============================================================================
# Forms
# =============================================================================


def _field(
    ctx: ModuleContext,
    label: str,
    placeholder: str,
    left: float,
    top: float,
    width: float,
    name: str,
) -> list[LayerBase]:
    """Label, input box and placeholder for one form field."""
    p = ctx.palette
    return [
        _text(ctx, label, _box(left, top, width, 18), 14, "Roboto-Medium", p.text_secondary, "left"),
        _rect(ctx, _box(left, top + 25, width, 44), p.background, name, radius=8),
        _text(ctx, placeholder, _box(left + 15, top + 39, width - 30, 18),
              14, "Roboto-Regular", p.text_secondary, "left"),
    ]


def build_login_form(module: dict[str, Any], ctx: ModuleContext) -> list[LayerBase]:
    """Centered email/password card with optional sign-in and reset buttons."""
    x, y, width, p = ctx.x, ctx.y, ctx.width, ctx.palette
    center = x + width / 2
    layers: list[LayerBase] = [
        _rect(ctx, _box(center - 200, y + 60, 400, 320), p.surface, "Login Form", radius=12)
    ]
    if module.get("title"):
        layers.append(
            _text(ctx, module["title"], _box(center - 200, y + 80, 400, 32),
                  24, "Roboto-Bold", p.text_primary, "center")
        )
    layers += _field(ctx, "Email", "Enter your email", center - 170, y + 140, 340, "Email Input")
    layers += _field(
        ctx, "Password", "Enter your password", center - 170, y + 225, 340, "Password Input"
    )
    if module.get("buttons"):
        layers.append(
            _rect(ctx, _box(center - 170, y + 310, 160, 44), p.primary, "Login Button", radius=8)
        )
        layers.append(
            _text(ctx, "Sign In", _box(center - 170, y + 322, 160, 20),
                  16, "Roboto-Medium", "#FFFFFF", "center")
        )
        layers.append(
            _rect(ctx, _box(center + 10, y + 310, 160, 44), p.background, "Reset Button",
                  radius=8, border=p.text_secondary)
        )
        layers.append(
            _text(ctx, "Reset", _box(center + 10, y + 322, 160, 20),
                  16, "Roboto-Medium", p.text_secondary, "center")
        )
    return layers


def build_custom_login_form(module: dict[str, Any], ctx: ModuleContext) -> list[LayerBase]:
    """Account/password/verification-code card with login and reset buttons.

    Placeholder and button texts default to Chinese copy and can be
    overridden per module.
    """
    x, y, width, p = ctx.x, ctx.y, ctx.width, ctx.palette
    center = x + width / 2
    layers: list[LayerBase] = [
        _rect(ctx, _box(center - 160, y + 40, 320, 380), p.surface, "Login Form", radius=12)
    ]
    if module.get("title"):
        layers.append(
            _text(ctx, module["title"], _box(center - 160, y + 60, 320, 32),
                  24, "Roboto-Bold", p.text_primary, "center")
        )
    layers += _field(
        ctx, "账号名",
        module.get("usernamePlaceholder") or "请输入账号名",
        center - 140, y + 110, 280, "Username Input",
    )
    layers += _field(
        ctx, "密码",
        module.get("passwordPlaceholder") or "请输入密码",
        center - 140, y + 195, 280, "Password Input",
    )

    # Verification code: short input plus an image slot
    layers.append(
        _text(ctx, "验证码", _box(center - 140, y + 280, 280, 18),
              14, "Roboto-Medium", p.text_secondary, "left")
    )
    layers.append(
        _rect(ctx, _box(center - 140, y + 305, 180, 44), p.background, "Verify Code Input", radius=8)
    )
    layers.append(
        _text(ctx, module.get("verifyCodePlaceholder") or "请输入验证码",
              _box(center - 125, y + 319, 150, 18), 14, "Roboto-Regular", p.text_secondary, "left")
    )
    layers.append(
        _rect(ctx, _box(center + 50, y + 305, 90, 44), p.background, "Verify Code Image", radius=8)
    )
    layers.append(
        _text(ctx, "1234", _box(center + 65, y + 319, 60, 18),
              16, "Roboto-Bold", p.text_primary, "center")
    )

    button_y = y + 365
    layers.append(
        _rect(ctx, _box(center - 140, button_y, 130, 44), p.primary, "Login Button", radius=8)
    )
    layers.append(
        _text(ctx, module.get("loginText") or "登录",
              _box(center - 140, button_y + 12, 130, 20), 16, "Roboto-Medium", "#FFFFFF", "center")
    )
    layers.append(
        _rect(ctx, _box(center + 10, button_y, 130, 44), p.background, "Reset Button", radius=8)
    )
    layers.append(
        _text(ctx, module.get("resetText") or "重置",
              _box(center + 10, button_y + 12, 130, 20),
              16, "Roboto-Medium", p.text_secondary, "center")
    )
    return layers


# =============================================================================
# Admin Panels
# =============================================================================


def build_order_header(module: dict[str, Any], ctx: ModuleContext) -> list[LayerBase]:
    """Detail card with title, subtitle, icon caption and a status tag."""
    x, y, width, p = ctx.x, ctx.y, ctx.width, ctx.palette
    layers: list[LayerBase] = [
        _rect(ctx, _box(x, y, width, module.get("height") or 120), p.surface, "Order Header")
    ]
    if module.get("title"):
        layers.append(
            _text(ctx, module["title"], _box(x + 24, y + 20, 400, 28),
                  22, "Roboto-Bold", p.text_primary, "left")
        )
    if module.get("subtitle"):
        layers.append(
            _text(ctx, module["subtitle"], _box(x + 24, y + 52, 400, 20),
                  14, "Roboto-Regular", p.text_secondary, "left")
        )
    if module.get("icon"):
        layers.append(
            _text(ctx, module["icon"], _box(x + 24, y + 80, 100, 18),
                  13, "Roboto-Medium", p.text_secondary, "left")
        )
    if module.get("status"):
        tag_x = x + width - 120
        layers.append(
            _rect(ctx, _box(tag_x, y + 20, 80, 28), module.get("statusColor") or p.primary,
                  "Status Tag", radius=4)
        )
        layers.append(
            _text(ctx, module["status"], _box(tag_x, y + 26, 80, 16),
                  12, "Roboto-Medium", "#FFFFFF", "center")
        )
    return layers


def build_collapsible_panel(module: dict[str, Any], ctx: ModuleContext) -> list[LayerBase]:
    """Panel with a title and a two-column grid of labelled read-only fields."""
    x, y, width, p = ctx.x, ctx.y, ctx.width, ctx.palette
    layers: list[LayerBase] = [
        _rect(ctx, _box(x, y, width, module.get("height") or 300), p.surface,
              "Collapsible Panel", radius=8)
    ]
    if module.get("title"):
        layers.append(
            _text(ctx, module["title"], _box(x + 16, y + 16, width - 32, 24),
                  16, "Roboto-Bold", p.text_primary, "left")
        )
    field_width = max((width - 48) / 2, 0)
    for index, field in enumerate(module.get("fields") or []):
        field = field if isinstance(field, dict) else {"label": field}
        label = str(field.get("label") or "")
        value = field.get("value")
        col, row = index % 2, index // 2
        field_x = x + 16 + col * (field_width + 16)
        field_y = y + 52 + row * (36 + 16)
        layers.append(
            _text(ctx, label, _box(field_x, field_y, field_width, 16),
                  13, "Roboto-Medium", p.text_secondary, "left")
        )
        layers.append(
            _rect(ctx, _box(field_x, field_y + 18, field_width, 32), p.background,
                  label or "Field", radius=4)
        )
        layers.append(
            _text(ctx, value or "", _box(field_x + 8, field_y + 24, field_width - 16, 18),
                  13, "Roboto-Regular", p.text_primary if value else p.text_secondary, "left")
        )
    return layers


def build_data_table(module: dict[str, Any], ctx: ModuleContext) -> list[LayerBase]:
    """Table with title, add button, column headers and zebra-striped rows.

    With ``hasActions`` the last cell of each row is reserved for actions and
    not rendered as text. The input rows are left untouched.
    """
    x, y, width, p = ctx.x, ctx.y, ctx.width, ctx.palette
    layers: list[LayerBase] = [
        _rect(ctx, _box(x, y, width, module.get("height") or 300), p.surface, "Data Table", radius=8)
    ]
    if module.get("title"):
        layers.append(
            _text(ctx, module["title"], _box(x + 16, y + 16, width - 32, 24),
                  16, "Roboto-Bold", p.text_primary, "left")
        )
    layers.append(_rect(ctx, _box(x + width - 100, y + 12, 80, 32), p.primary, "Add Button", radius=4))
    layers.append(
        _text(ctx, "新增", _box(x + width - 100, y + 18, 80, 20),
              13, "Roboto-Medium", "#FFFFFF", "center")
    )
    layers.append(_rect(ctx, _box(x + 16, y + 52, width - 32, 40), p.background, "Table Header"))

    columns = [c for c in module.get("columns") or [] if isinstance(c, dict)]
    col_x = x + 20
    for column in columns:
        col_width = column.get("width") or 80
        layers.append(
            _text(ctx, column.get("name", ""), _box(col_x, y + 62, col_width, 20),
                  13, "Roboto-Medium", p.text_secondary, "left")
        )
        col_x += col_width

    for row_index, row in enumerate(module.get("rows") or []):
        row_y = y + 92 + row_index * 44
        stripe = p.surface if row_index % 2 == 0 else p.background
        layers.append(
            _rect(ctx, _box(x + 16, row_y, width - 32, 44), stripe, f"Row {row_index + 1}")
        )
        cell_x = x + 20
        if module.get("hasCheckbox"):
            layers.append(
                _rect(ctx, _box(cell_x, row_y + 14, 16, 16), p.border, "Checkbox", radius=2)
            )
            cell_x += 30
        cells = list(row) if isinstance(row, (list, tuple)) else [row]
        if module.get("hasActions"):
            cells = cells[:-1]
        for col_index, cell in enumerate(cells):
            cell_width = (
                columns[col_index].get("width") or 80 if col_index < len(columns) else 80
            )
            layers.append(
                _text(ctx, cell, _box(cell_x, row_y + 12, cell_width, 20),
                      13, "Roboto-Regular", p.text_primary, "left")
            )
            cell_x += cell_width
    return layers


def build_action_buttons(module: dict[str, Any], ctx: ModuleContext) -> list[LayerBase]:
    """Right-aligned row of 100pt buttons; primary buttons are filled."""
    x, y, width, p = ctx.x, ctx.y, ctx.width, ctx.palette
    layers: list[LayerBase] = [
        _rect(ctx, _box(x, y, width, module.get("height") or 64), p.surface, "Action Buttons")
    ]
    buttons = [b for b in module.get("buttons") or [] if isinstance(b, dict)]
    start_x = x + width - len(buttons) * 100 - 16
    for index, button in enumerate(buttons):
        button_x = start_x + index * (100 + 12)
        label = str(button.get("text") or "Button")
        primary = bool(button.get("primary"))
        layers.append(
            _rect(ctx, _box(button_x, y + 12, 100, 40),
                  p.primary if primary else p.background, label, radius=6,
                  border=p.primary if primary else p.border)
        )
        layers.append(
            _text(ctx, label, _box(button_x, y + 20, 100, 24),
                  14, "Roboto-Medium", "#FFFFFF" if primary else p.text_primary, "center")
        )
    return layers


def build_placeholder(module: dict[str, Any], ctx: ModuleContext) -> list[LayerBase]:
    """Generic rounded surface named after the module type."""
    return [
        _rect(ctx, _box(ctx.x, ctx.y, ctx.width, module.get("height") or 100),
              ctx.palette.surface, str(module.get("type") or "Module"), radius=8)
    ]


MODULE_BUILDERS: dict[str, ModuleBuilder] = {
    "header": build_header,
    "hero": build_hero,
    "features": build_features,
    "productGrid": build_product_grid,
    "bottomNav": build_bottom_nav,
    "loginForm": build_login_form,
    "customLoginForm": build_custom_login_form,
    "orderHeader": build_order_header,
    "collapsiblePanel": build_collapsible_panel,
    "collapsePanel": build_collapsible_panel,
    "dataTable": build_data_table,
    "actionButtons": build_action_buttons,
}


__all__ = [
    "ModuleBuilder",
    "MODULE_BUILDERS",
    "build_header",
    "build_hero",
    "build_features",
    "build_product_grid",
    "build_bottom_nav",
    "build_login_form",
    "build_custom_login_form",
    "build_order_header",
    "build_collapsible_panel",
    "build_data_table",
    "build_action_buttons",
    "build_placeholder",
]
