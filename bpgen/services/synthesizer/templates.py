"""
Soong declaration templates.

Every function here is pure: it only formats the values it is given.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence

INDENT = "    "
NODEPS_SUFFIX = "-nodeps"
APEX_AVAILABLE = (
    "//apex_available:platform",
    "//apex_available:anyapex",
)
JAVA_VERSION = "1.7"
GENERATED_FILE_NOTICE = "// DO NOT EDIT THIS FILE MANUALLY"


def nodeps_name(module_name: str) -> str:
    return f"{module_name}{NODEPS_SUFFIX}"


def render_list_entries(names: Iterable[str], indent: int = 2) -> str:
    """Render ``"name",`` lines, each on its own line at the given depth."""
    return "\n".join(f'{INDENT * indent}"{name}",' for name in names)


def render_static_libs(names: Sequence[str]) -> str:
    """Render the inside of a ``static_libs: [...]`` list.

    The result opens with a newline and closes at the declaration's
    indentation, so ``static_libs: [%s],`` reads as a multi-line list.
    """
    entries = "".join(f'\n{INDENT * 2}"{name}",' for name in names)
    return f"{entries}\n{INDENT}"


def _apex_available() -> str:
    return f"{INDENT}apex_available: [\n{render_list_entries(APEX_AVAILABLE)}\n{INDENT}],"


def render_header(copyright_holders: Sequence[str], license_id: str) -> str:
    """REUSE-style header of the generated libs/Android.bp."""
    lines = ["//"]
    lines += [f"// SPDX-FileCopyrightText: {holder}" for holder in copyright_holders]
    lines.append(f"// SPDX-License-Identifier: {license_id}")
    lines.append("//")
    lines.append("")
    lines.append(GENERATED_FILE_NOTICE)
    return "\n".join(lines) + "\n"


def render_aggregate_only(name: str, sdk_version: int, min_sdk_version: int, deps: Sequence[str]) -> str:
    """A ``java_library_static`` for a module with no artifact of its own."""
    return f"""
java_library_static {{
    name: "{name}",
    sdk_version: "{sdk_version}",
    min_sdk_version: "{min_sdk_version}",
{_apex_available()}
    static_libs: [{render_static_libs(deps)}],
    java_version: "{JAVA_VERSION}",
}}
"""


def render_jar(
    name: str,
    jar_path: str,
    sdk_version: int,
    min_sdk_version: int,
    deps: Sequence[str],
) -> str:
    """``java_import`` of the jar plus the ``java_library_static`` carrying its deps."""
    return f"""
java_import {{
    name: "{nodeps_name(name)}",
    jars: ["{jar_path}"],
    sdk_version: "{sdk_version}",
    min_sdk_version: "{min_sdk_version}",
{_apex_available()}
}}

java_library_static {{
    name: "{name}",
    sdk_version: "{sdk_version}",
    min_sdk_version: "{min_sdk_version}",
{_apex_available()}
    static_libs: [{render_static_libs([nodeps_name(name), *deps])}],
    java_version: "{JAVA_VERSION}",
}}
"""


def render_aar(
    name: str,
    aar_path: str,
    manifest_path: str,
    sdk_version: int,
    min_sdk_version: int,
    deps: Sequence[str],
    extract_jni: bool,
) -> str:
    """``android_library_import`` of the aar plus the ``android_library`` carrying its deps."""
    jni = f"\n{INDENT}extract_jni: true," if extract_jni else ""
    return f"""
android_library_import {{
    name: "{nodeps_name(name)}",
    aars: ["{aar_path}"],
    sdk_version: "{sdk_version}",
    min_sdk_version: "{min_sdk_version}",
{_apex_available()}
    static_libs: [{render_static_libs(deps)}],{jni}
}}

android_library {{
    name: "{name}",
    sdk_version: "{sdk_version}",
    min_sdk_version: "{min_sdk_version}",
{_apex_available()}
    manifest: "{manifest_path}",
    static_libs: [{render_static_libs([nodeps_name(name), *deps])}],
    java_version: "{JAVA_VERSION}",
}}
"""
