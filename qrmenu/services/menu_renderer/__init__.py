from qrmenu.services.menu_renderer.escaping import escape_html
from qrmenu.services.menu_renderer.renderer import menu_file_path, render, write_menu_file
from qrmenu.services.menu_renderer.sections import MenuRenderError, Theme, format_money

__all__ = [
    "MenuRenderError",
    "Theme",
    "escape_html",
    "format_money",
    "menu_file_path",
    "render",
    "write_menu_file",
]
