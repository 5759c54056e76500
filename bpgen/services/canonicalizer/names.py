"""
Known Soong module names for Maven coordinates shipped by the platform.

Keys are ``group:name`` coordinates, values the module name the platform
build uses for the same library.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from pathlib import Path
from types import MappingProxyType

from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from ...core.exceptions import ArtifactIOError, ValidationError

DEFAULT_MODULE_NAMES: Mapping[str, str] = MappingProxyType({
    "androidx.annotation:annotation-jvm": "androidx.annotation_annotation",
    "androidx.constraintlayout:constraintlayout": "androidx-constraintlayout_constraintlayout",
    "androidx.test.espresso:espresso-accessibility": "androidx.test.espresso.accessibility",
    "androidx.test.espresso:espresso-contrib": "androidx.test.espresso.contrib",
    "androidx.test.espresso:espresso-core": "androidx.test.espresso.core",
    "androidx.test.espresso:espresso-idling-resource": "androidx.test.espresso.idling-resource",
    "androidx.test.espresso:espresso-intents": "androidx.test.espresso.intents",
    "androidx.test.espresso:espresso-web": "androidx.test.espresso.web",
    "com.github.bumptech.glide:glide": "glide",
    "com.google.auto.value:auto-value-annotations": "auto_value_annotations",
    "com.google.code.findbugs:jsr305": "jsr305",
    "com.google.code.gson:gson": "gson",
    "com.google.errorprone:error_prone_annotations": "error_prone_annotations",
    "com.google.errorprone:error_prone_core": "error_prone_core",
    "com.google.dagger:dagger": "dagger2",
    "com.google.dagger:hilt-android": "hilt_android",
    "com.google.dagger:hilt-core": "hilt_core",
    "com.google.guava:guava": "guava",
    "com.google.guava:listenablefuture": "guava",
    "com.squareup.okhttp3:okhttp": "okhttp-norepackage",
    "com.squareup.okio:okio": "okio-lib",
    "javax.inject:javax.inject": "jsr330",
    "org.bouncycastle:bcpkix-jdk15on": "bouncycastle-bcpkix-unbundled",
    "org.bouncycastle:bcpkix-jdk18on": "bouncycastle-bcpkix-unbundled",
    "org.bouncycastle:bcprov-jdk15on": "bouncycastle-unbundled",
    "org.bouncycastle:bcprov-jdk18on": "bouncycastle-unbundled",
    "org.jetbrains.kotlin:kotlin-stdlib": "kotlin-stdlib",
    "org.jetbrains.kotlin:kotlin-stdlib-jdk7": "kotlin-stdlib-jdk7",
    "org.jetbrains.kotlin:kotlin-stdlib-jdk8": "kotlin-stdlib-jdk8",
    "org.jetbrains.kotlin:kotlin-stdlib-jre7": "kotlin-stdlib-jdk7",
    "org.jetbrains.kotlin:kotlin-stdlib-jre8": "kotlin-stdlib-jdk8",
    "org.jetbrains.kotlinx:kotlinx-coroutines-android": "kotlinx-coroutines-android",
    "org.jetbrains.kotlinx:kotlinx-coroutines-core": "kotlinx-coroutines-core",
    "org.jetbrains.kotlinx:kotlinx-coroutines-core-jvm": "kotlinx-coroutines-core-jvm",
    "org.jetbrains.kotlinx:kotlinx-coroutines-guava": "kotlinx_coroutines_guava",
    "org.jetbrains.kotlinx:kotlinx-coroutines-reactive": "kotlinx_coroutines_reactive",
    "org.jetbrains.kotlinx:kotlinx-coroutines-rx2": "kotlinx_coroutines_rx2",
    "org.jetbrains.kotlinx:kotlinx-serialization-core": "kotlinx_serialization_core",
    "org.jetbrains.kotlinx:kotlinx-serialization-json": "kotlinx_serialization_json",
})

_NAME_TABLE = TypeAdapter(dict[str, str])


def build_name_table(extra: Mapping[str, str] | None = None) -> Mapping[str, str]:
    """Merge extra entries over the default table.

    Args:
        extra: Additional ``group:name`` -> module name entries; they win over
            the defaults.

    Returns:
        A read-only mapping.
    """
    table = dict(DEFAULT_MODULE_NAMES)
    if extra:
        table.update(extra)
    return MappingProxyType(table)


def load_name_table(path: Path | None) -> Mapping[str, str]:
    """Load extra entries from a JSON object file and merge them over the defaults.

    Raises:
        ArtifactIOError: If the file cannot be read.
        ValidationError: If the file is not a JSON object of strings or a key
            is not a ``group:name`` coordinate.
    """
    if path is None:
        return DEFAULT_MODULE_NAMES

    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise ArtifactIOError(
            message="Cannot read module name overrides",
            path=str(path),
            operation="read",
            cause=e,
        ) from e
    except json.JSONDecodeError as e:
        raise ValidationError(
            message="Module name overrides are not valid JSON",
            field_name=str(path),
            cause=e,
        ) from e

    try:
        extra = _NAME_TABLE.validate_python(raw)
    except PydanticValidationError as e:
        raise ValidationError(
            message="Module name overrides must map strings to strings",
            field_name=str(path),
            cause=e,
        ) from e

    for coordinate in extra:
        if coordinate.count(":") != 1:
            raise ValidationError(
                message=f"Override key '{coordinate}' is not a group:name coordinate",
                field_name=str(path),
            )

    return build_name_table(extra)
