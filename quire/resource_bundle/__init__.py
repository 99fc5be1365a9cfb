from importlib import resources


def get_template_str(template_name: str) -> str | None:
    if "/" in template_name or template_name.startswith("."):
        return None

    path = resources.files(__name__).joinpath("templates").joinpath(template_name)
    try:
        return path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return None
