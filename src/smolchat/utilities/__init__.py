import json
import textwrap

from .async_helpers import synchronize
from .log_helpers import LOG_FMT, basic_log_config, log_trace, suppress_logs

__all__ = [
    "LOG_FMT",
    "basic_log_config",
    "format_json",
    "log_trace",
    "suppress_logs",
    "synchronize",
]


def format_json(data, width: int = 100, indent: int = 2, level: int = 0) -> str:
    """Format JSON data with proper indentation and line wrapping."""
    prefix = " " * (level * indent)

    if isinstance(data, dict):
        if not data:
            return "{}"

        lines = ["{"]
        items = list(data.items())
        for i, (key, value) in enumerate(items):
            key_prefix = f'{prefix}  "{key}": '
            key_indent = " " * len(key_prefix)

            if isinstance(value, str):
                # wrap each line of a multi-line string separately
                segments = [
                    textwrap.fill(
                        segment,
                        width=width - len(key_prefix),
                        initial_indent=key_indent,
                        subsequent_indent=key_indent + " ",
                        drop_whitespace=False,
                    )
                    for segment in value.split("\n")
                ]
                formatted_value = '"{}"'.format((key_indent + "\n").join(segments).strip())
            else:
                formatted_value = format_json(value, width=width, indent=indent, level=level + 1)

            comma = "," if i < len(items) - 1 else ""
            lines.append(f"{key_prefix}{formatted_value}{comma}")

        lines.append(prefix + "}")
        return "\n".join(lines)

    elif isinstance(data, list):
        if not data:
            return "[]"

        lines = ["["]
        for i, item in enumerate(data):
            comma = "," if i < len(data) - 1 else ""
            lines.append(f"{prefix}  {format_json(item, width, indent, level + 1)}{comma}")

        lines.append(prefix + "]")
        return "\n".join(lines)

    elif isinstance(data, str):
        try:
            return format_json(json.loads(data), width, indent, level)
        except json.JSONDecodeError:
            return '"{}"'.format(data)

    elif data is None:
        return "null"

    else:
        return str(data).lower()
