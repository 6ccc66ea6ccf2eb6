import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Sequence

from jinja2 import (
    Environment,
    FileSystemLoader,
    StrictUndefined,
    select_autoescape,
)

from gorm_auto_generator.domain.models import StructDescriptor


logger = logging.getLogger(__name__)

# Define the path to the templates directory relative to this file
TEMPLATE_DIR = Path(__file__).parent / "templates"

MODEL_TEMPLATE = "model.go.j2"
GO_INDENT = "\t"


def go_comment_filter(text: str) -> str:
    """Collapse a SQL comment onto one line so it stays a Go line comment."""
    return " ".join(str(text).split())


def go_string_filter(text: str) -> str:
    """Render a Go interpreted string literal."""
    return json.dumps(text, ensure_ascii=False)


def setup_jinja_env() -> Environment:
    """Sets up and returns the Jinja2 environment."""
    env = Environment(
        loader=FileSystemLoader(TEMPLATE_DIR),
        # Go templates must not be HTML escaped; index.html is
        autoescape=select_autoescape(["html", "xml"]),
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
        undefined=StrictUndefined,
    )
    env.filters["go_comment"] = go_comment_filter
    env.filters["go_string"] = go_string_filter
    return env


# Built once; rendering only reads it
_JINJA_ENV = setup_jinja_env()


def render_field_lines(struct: StructDescriptor) -> List[str]:
    """
    Render struct fields as gofmt aligns them: name, type and tag in
    padded columns, trailing comments lined up after the widest tag.
    """
    if not struct.fields:
        return []
    name_width = max(len(field.name) for field in struct.fields)
    type_width = max(len(field.go_type) for field in struct.fields)
    tag_width = max(len(field.tag) + 2 for field in struct.fields)

    lines = []
    for field in struct.fields:
        line = f"{field.name.ljust(name_width)} {field.go_type.ljust(type_width)} `{field.tag}`"
        if field.comment:
            comment = go_comment_filter(field.comment)
            if comment:
                padding = " " * (tag_width - len(field.tag) - 2)
                line = f"{line}{padding} // {comment}"
        lines.append(line)
    return lines


def _struct_context(struct: StructDescriptor) -> Dict[str, Any]:
    return {
        "name": struct.name,
        "comment": struct.comment,
        "table_name": struct.table_name,
        "emit_table_name": struct.emit_table_name,
        "field_lines": render_field_lines(struct),
    }


def render_structs(structs: Sequence[StructDescriptor], package: str) -> str:
    """
    Render one Go source file: a single package clause, the union of the
    imports every struct needs, then each struct in input order.
    """
    imports = sorted({path for struct in structs for path in struct.imports})
    context = {
        "package": package,
        "imports": imports,
        "structs": [_struct_context(struct) for struct in structs],
        "indent": GO_INDENT,
    }
    template = _JINJA_ENV.get_template(MODEL_TEMPLATE)
    rendered = template.render(context)
    logger.debug(f"Rendered {len(structs)} struct(s) into package '{package}'.")
    return rendered.rstrip("\n") + "\n"
