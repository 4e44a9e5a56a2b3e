"""Compiler option tables.

Two flag sets drive the compiler:

* the *collect* set asks for nothing but a manifest of the files an entry
  point needs under strict dependency resolution, and throws the compiled
  output away;
* the *build* set runs the full optimizer over exactly those files.

Most project-specific flags live in the flag file; the tables here only
carry what has to vary per namespace. The base tables are read-only, and
every builder call returns a new dict.

Example::

    >>> build_options("app.main")["js_output_file"]
    'app.main.min.js'
    >>> render_flags({"entry_point": "goog:app.main", "use_types_for_optimization": True})
    ['--entry_point', 'goog:app.main', '--use_types_for_optimization', 'true']
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from types import MappingProxyType

from closure_build.locations import Locations

OptionValue = str | bool
Options = dict[str, OptionValue]

DEBUG_DEFINE = "goog.DEBUG"

COLLECT_TEMPLATE: Mapping[str, OptionValue] = MappingProxyType({
    "entry_point": "",
    "dependency_mode": "STRICT",
    "output_manifest": "nsfiles.txt",
    "js_output_file": "notused.js",
})

BUILD_TEMPLATE: Mapping[str, OptionValue] = MappingProxyType({
    "entry_point": "goog:",
    "dependency_mode": "STRICT",
    "define": f"{DEBUG_DEFINE}=false",
    "process_closure_primitives": True,
    "use_types_for_optimization": True,
    "warning_level": "VERBOSE",
    "compilation_level": "ADVANCED",
    "flagfile": "options/compile.ini",
    "js_output_file": ".min.js",
})

# Build-table values that are completed with the namespace.
NAMESPACE_RULES: Mapping[str, Callable[[str, str], str]] = MappingProxyType({
    "entry_point": lambda value, namespace: value + namespace,
    "js_output_file": lambda value, namespace: namespace + value,
})


def entry_point(namespace: str) -> str:
    return f"goog:{namespace}"


def debug_define(debug: bool) -> str:
    return f"{DEBUG_DEFINE}={'true' if debug else 'false'}"


def output_name(namespace: str) -> str:
    """File name of the bundle built for ``namespace``."""
    return NAMESPACE_RULES["js_output_file"](BUILD_TEMPLATE["js_output_file"], namespace)


def collect_options(namespace: str, locations: Locations | None = None) -> Options:
    """Options for collecting the files used by ``namespace``."""
    locations = locations or Locations()
    return {
        **COLLECT_TEMPLATE,
        "entry_point": entry_point(namespace),
        "output_manifest": str(locations.manifest),
        "js_output_file": locations.discard_file,
    }


def build_options(
    namespace: str,
    debug: bool = False,
    locations: Locations | None = None,
) -> Options:
    """Options for the optimized build of ``namespace``."""
    options: Options = dict(BUILD_TEMPLATE)
    if locations is not None:
        options["flagfile"] = str(locations.flag_file)
    options["define"] = debug_define(debug)
    for key, rule in NAMESPACE_RULES.items():
        options[key] = rule(str(options[key]), namespace)
    return options


def render_flags(options: Mapping[str, OptionValue]) -> list[str]:
    """Turn an option table into ``--key value`` command line pairs."""
    flags: list[str] = []
    for key, value in options.items():
        if isinstance(value, bool):
            value = "true" if value else "false"
        flags.extend([f"--{key}", value])
    return flags


__all__ = [
    "COLLECT_TEMPLATE",
    "BUILD_TEMPLATE",
    "NAMESPACE_RULES",
    "Options",
    "OptionValue",
    "build_options",
    "collect_options",
    "debug_define",
    "entry_point",
    "output_name",
    "render_flags",
]
