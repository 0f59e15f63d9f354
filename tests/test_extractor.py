"""Tests for modmanifest.extractor."""

from __future__ import annotations

import textwrap

from modmanifest.extractor import (
    extract_module,
    find_namespace,
    find_type_name,
    iter_module_markers,
)
from modmanifest.models import CategoryAttribute

_ANNOTATED = textwrap.dedent(
    """\
    <?php

    namespace Billing;

    use Shared\\Contracts\\Service;

    /**
     * Handles invoices.
     *
     * @module svc(priority=1) admin
     */
    class Invoices implements Service
    {
    }
    """
)


def test_extract_module_builds_definition() -> None:
    module = extract_module(_ANNOTATED)

    assert module is not None
    assert module.namespace == "Billing"
    assert module.type_name == "Invoices"
    assert [category.name for category in module.categories] == ["svc", "admin"]
    assert module.categories[0].attributes == [CategoryAttribute(key="priority", value="1")]
    assert module.qualified_name == "Billing\\Invoices"


def test_extract_module_returns_none_without_marker() -> None:
    source = _ANNOTATED.replace(" * @module svc(priority=1) admin\n", "")

    assert extract_module(source) is None


def test_extract_module_requires_namespace() -> None:
    source = _ANNOTATED.replace("namespace Billing;\n", "")

    assert extract_module(source) is None


def test_extract_module_rejects_brace_between_comment_and_class() -> None:
    source = textwrap.dedent(
        """\
        <?php
        namespace Tools;

        /**
         * @module helper
         */
        function helper() { return 1; }

        class Later
        {
        }
        """
    )

    assert extract_module(source) is None


def test_extract_module_skips_unmarked_doc_comments() -> None:
    source = textwrap.dedent(
        """\
        <?php
        namespace Jobs;

        /** File level notes. */

        /**
         * @module queue(name=mail)
         */
        final class Mailer
        {
        }
        """
    )

    module = extract_module(source)

    assert module is not None
    assert module.type_name == "Mailer"
    assert module.categories[0].get("name") == "mail"


def test_extract_module_accepts_qualified_namespace_and_commas() -> None:
    source = textwrap.dedent(
        """\
        <?php
        namespace App\\Http;

        /**
         * @module route(GET,path=users)
         */
        class Users
        {
        }
        """
    )

    module = extract_module(source)

    assert module is not None
    assert module.namespace == "App\\Http"
    assert module.categories[0].attributes == [
        CategoryAttribute(key=None, value="GET"),
        CategoryAttribute(key="path", value="users"),
    ]


def test_extract_module_handles_crlf_line_endings() -> None:
    module = extract_module(_ANNOTATED.replace("\n", "\r\n"))

    assert module is not None
    assert module.type_name == "Invoices"


def test_extract_module_considers_only_first_declaration() -> None:
    source = _ANNOTATED + _ANNOTATED.replace("Invoices", "Refunds").replace(
        "namespace Billing;", ""
    )

    module = extract_module(source)

    assert module is not None
    assert module.type_name == "Invoices"


def test_find_namespace_reports_offset() -> None:
    text = "<?php\nnamespace Acme\\Core;\nclass X {}"

    result = find_namespace(text)

    assert result is not None
    name, offset = result
    assert name == "Acme\\Core"
    assert text[:offset].endswith("namespace Acme\\Core;")


def test_iter_module_markers_yields_trimmed_category_strings() -> None:
    text = "/**\n * @module  alpha beta(x=1)  \n */\n/** plain */\n/**\n * @module gamma\n */\n"

    markers = [categories for categories, _ in iter_module_markers(text)]

    assert markers == ["alpha beta(x=1)", "gamma"]


def test_find_type_name_tolerates_comments_before_class() -> None:
    text = " */\n// implementation note: this class is internal\nabstract class Base\n{"

    assert find_type_name(text, 0) == "Base"


def test_find_type_name_stops_at_brace() -> None:
    assert find_type_name(" */\nfunction f() {}\nclass Foo\n{", 0) is None
