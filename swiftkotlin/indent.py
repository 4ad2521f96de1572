INDENT_WIDTH = 2


def indent(text: str, level: int = 1, width: int = INDENT_WIDTH) -> str:
    """Prefix every line of `text` with `level` indentation units of `width` spaces.

    Line endings are kept as they are. A trailing line break leaves an empty last
    line, which gets its prefix too, so `indent("")` is a single indented empty line.
    """
    prefix = ' ' * (width * level)
    lines = text.splitlines(keepends=True)
    if not lines or lines[-1].endswith(('\n', '\r')):
        lines.append('')
    return ''.join(prefix + line for line in lines)
