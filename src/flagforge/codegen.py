"""Render flag declarations as a Python module.

The generated module declares one :class:`~flagforge.BitFlags` subclass per
:class:`~flagforge.config.TypeSpec`; composite flags keep their
``A | B`` spelling so the output reads like hand-written code.
"""

from collections.abc import Iterable

import jinja2

from flagforge.config import FlagSpec, TypeSpec

_MODULE_TEMPLATE = jinja2.Template(
    '''\
"""{{ docstring(header) }}

Generated by flagforge from {{ docstring(source) }}.  Do not edit manually; re-run
``flagforge generate`` to update.
"""

from flagforge import BitFlags

__all__ = [
{%- for spec in specs %}
    "{{ spec.name }}",
{%- endfor %}
]
{% for spec in specs %}

class {{ spec.name }}(BitFlags, bits="{{ spec.bits.name }}"):
{%- if spec.doc %}
    """{{ docstring(spec.doc) }}"""
{% endif %}
{%- if not spec.flags %}
    pass
{%- endif %}
{%- for flag in spec.flags %}
    {{ flag.name }} = {{ flag_expr(spec, flag) }}
{%- endfor %}
{% endfor %}''',
    keep_trailing_newline=True,
)


def docstring_text(text: str) -> str:
    """Escape *text* for use between triple double quotes."""
    text = text.replace("\\", "\\\\")
    body = text.rstrip('"')
    # A closing quote right before the terminating """ would end the string early.
    trailing = len(text) - len(body)
    return body.replace('"""', r'\"\"\"') + r'\"' * trailing


def flag_expr(spec: TypeSpec, flag: FlagSpec) -> str:
    """Source expression for *flag*: ``A | B`` for composites, padded hex otherwise."""
    if flag.members:
        return " | ".join(flag.members)
    digits = spec.bits.width // 4
    return f"0x{flag.value:0{digits}x}"


def render_module(
    specs: Iterable[TypeSpec],
    header: str = "",
    source: str = "flagforge.toml",
) -> str:
    """Return the source of a module declaring every spec in *specs*."""
    return _MODULE_TEMPLATE.render(
        specs=list(specs),
        header=header or "Flag types.",
        source=source,
        flag_expr=flag_expr,
        docstring=docstring_text,
    )
