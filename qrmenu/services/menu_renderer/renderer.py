import logging
import os
from pathlib import Path
from typing import Optional, Union

from jinja2 import Environment, PackageLoader, StrictUndefined
from markupsafe import Markup

from qrmenu.services.menu_renderer.escaping import finalize
from qrmenu.services.menu_renderer.sections import MenuPage, build_page

log = logging.getLogger(__name__)

# Built once at import and only read afterwards, so render() is safe to call concurrently.
_env = Environment(
    loader=PackageLoader("qrmenu.services.menu_renderer", "templates"),
    autoescape=False,
    finalize=finalize,
    undefined=StrictUndefined,
    trim_blocks=True,
    lstrip_blocks=True,
)


def _render_section(section) -> Markup:
    if section is None:
        return Markup("")
    template = _env.get_template(section.template)
    return Markup(template.render(section=section))


def assemble(page: MenuPage) -> str:
    layout = _env.get_template("layout.html")
    return layout.render(
        head=_render_section(page.head),
        header=_render_section(page.header),
        contact_bar=_render_section(page.contact_bar),
        nav=_render_section(page.nav),
        content=Markup("\n").join(_render_section(s) for s in page.content),
        footer=_render_section(page.footer),
        script=_render_section(page.script),
    )


def render(cafe, categories_with_items) -> str:
    """
    Render a café's complete, standalone menu page.

    ``cafe`` needs ``name`` and ``slug``; everything else falls back to a
    default. ``categories_with_items`` is the ordered list of active
    categories, each carrying its ordered ``items``. The function does no
    I/O and returns identical output for identical input.
    """
    return assemble(build_page(cafe, categories_with_items))


def write_menu_file(html: str, deploy_root: Union[str, os.PathLike], slug: str,
                    filename: str = "index.html") -> Path:
    """Write a rendered page to ``<deploy_root>/<slug>/index.html``."""
    deploy_dir = Path(deploy_root) / slug
    deploy_dir.mkdir(parents=True, exist_ok=True)
    (deploy_dir / "images").mkdir(exist_ok=True)

    target = deploy_dir / filename
    target.write_text(html, encoding="utf-8")
    log.info("Wrote menu page for '%s' to %s", slug, target)
    return target


def menu_file_path(deploy_root: Union[str, os.PathLike], slug: str) -> Optional[Path]:
    target = Path(deploy_root) / slug / "index.html"
    return target if target.exists() else None
