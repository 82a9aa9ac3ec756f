"""Unit tests for generated row statements."""

import pytest

from rowspec.core.statements import (
    bind_name,
    build_delete_statement,
    build_insert_statement,
    build_select_statement,
    build_update_statement,
    format_mysql_identifier,
    quote_mysql_identifier,
)
from rowspec.exceptions import SQLBuilderError


def test_quote_identifier() -> None:
    assert quote_mysql_identifier("users") == "`users`"
    assert quote_mysql_identifier("we`ird") == "`we``ird`"
    with pytest.raises(SQLBuilderError):
        quote_mysql_identifier("")


def test_format_identifier() -> None:
    assert format_mysql_identifier("app.users") == "`app`.`users`"
    assert format_mysql_identifier(" users ") == "`users`"
    with pytest.raises(SQLBuilderError):
        format_mysql_identifier("  ")


def test_insert_statement() -> None:
    assert build_insert_statement("users", ["email", "name"]) == (
        "INSERT INTO `users` (`email`, `name`) VALUES (?, ?)"
    )


def test_select_statement() -> None:
    assert build_select_statement("users") == "SELECT * FROM `users`"
    assert build_select_statement("users", []) == "SELECT * FROM `users`"
    assert build_select_statement("users", ["id", "email"]) == "SELECT `id`, `email` FROM `users`"


def test_update_statement() -> None:
    assert build_update_statement("users", ["email", "name"], ["id"]) == (
        "UPDATE `users` SET `email` = :email, `name` = :name WHERE `id` = :oldid"
    )
    assert build_update_statement("users", ["name"], ["email", "slug"]) == (
        "UPDATE `users` SET `name` = :name WHERE `email` = :oldemail AND `slug` = :oldslug"
    )


def test_update_statement_requires_columns() -> None:
    with pytest.raises(SQLBuilderError, match="no columns to set"):
        build_update_statement("users", [], ["id"])
    with pytest.raises(SQLBuilderError, match="no identity columns"):
        build_update_statement("users", ["name"], [])


def test_delete_statement() -> None:
    assert build_delete_statement("users", ["email"]) == "DELETE FROM `users` WHERE `email` = :email"
    assert build_delete_statement("users", ["a", "b"]) == "DELETE FROM `users` WHERE `a` = :a AND `b` = :b"
    with pytest.raises(SQLBuilderError):
        build_delete_statement("users", [])


def test_bind_name_keeps_plain_identifiers() -> None:
    assert bind_name("email") == "email"
    assert bind_name("created_at", "old") == "oldcreated_at"
    assert bind_name("Email") == "Email"


def test_bind_name_encodes_other_column_names() -> None:
    assert bind_name("e-mail") == "x_652d6d61696c"
    assert bind_name("2fa", "old") == "oldx_326661"
    assert bind_name("first name") == "x_6669727374206e616d65"
    assert bind_name("é") == "x_c3a9"


def test_statements_with_non_identifier_columns() -> None:
    assert build_update_statement("t", ["2fa"], ["e-mail"]) == (
        "UPDATE `t` SET `2fa` = :x_326661 WHERE `e-mail` = :oldx_652d6d61696c"
    )
    assert build_delete_statement("t", ["e-mail", "2fa"]) == (
        "DELETE FROM `t` WHERE `e-mail` = :x_652d6d61696c AND `2fa` = :x_326661"
    )
