def format_location(parts: list[str | int]) -> str:
    """
    Render a validation error location as a field path.

    >>> format_location(["blocks", 0, "optionsType"])
    'blocks[0].optionsType'
    """
    path = ""
    for part in parts:
        if isinstance(part, int):
            path += f"[{part}]"
        else:
            path += f".{part}" if path else str(part)
    return path
