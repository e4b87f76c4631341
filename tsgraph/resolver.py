"""Resolution of relative import specifiers to project-relative paths."""

from .errors import NonRelativeImport


def is_relative_specifier(specifier: str) -> bool:
    return specifier.startswith(".")


def resolve_import(specifier: str, importing_path: str) -> str:
    """Resolve a relative import specifier against the importing file's path.

    The result is not checked for existence; extensions are left as written.
    Walking above the project root with ``../`` clamps at the root.

    Examples:
        resolve_import("./sibling", "src/a/b.ts") -> "src/a/sibling"
        resolve_import("../../a/b.ts", "src/x/y/z.ts") -> "src/a/b.ts"

    Raises:
        NonRelativeImport: If the specifier is a package/bare import
    """
    if not is_relative_specifier(specifier):
        raise NonRelativeImport(specifier)

    dir_parts = importing_path.split("/")[:-1]

    if specifier.startswith("../"):
        levels = 0
        rest = specifier
        while rest.startswith("../"):
            rest = rest[3:]
            levels += 1
        return "/".join(dir_parts[:-levels] + [rest])

    if specifier.startswith("./"):
        specifier = specifier[2:]

    from_dir = "/".join(dir_parts)
    if from_dir:
        return f"{from_dir}/{specifier}"
    return specifier
