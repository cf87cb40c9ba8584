from __future__ import annotations

from ara.pipeline.naming import branch_name, pull_request_title, readable_category


def test_readable_category_capitalises_each_word() -> None:
    assert readable_category("dead-code") == "Dead Code"
    assert readable_category("variable-renaming") == "Variable Renaming"
    assert readable_category("single") == "Single"


def test_readable_category_only_touches_first_character() -> None:
    assert readable_category("html-IDs") == "Html IDs"


def test_branch_name_uses_prefix_category_and_index() -> None:
    assert branch_name("dead-code", 1) == "ai-refactor/dead-code-1"
    assert branch_name("code-formatting", 3, prefix="bots/refactor") == "bots/refactor/code-formatting-3"


def test_branch_names_are_unique_per_category_and_index() -> None:
    names = {
        branch_name(category, index)
        for category in ("dead-code", "duplicate-code")
        for index in range(1, 4)
    }
    assert len(names) == 6


def test_title_without_suffix_for_single_chunk() -> None:
    assert pull_request_title("dead-code", 1, 1) == "[AI Refactor] Dead Code"


def test_title_with_part_suffix_for_multiple_chunks() -> None:
    assert pull_request_title("dead-code", 2, 2) == "[AI Refactor] Dead Code (Part 2)"
    assert pull_request_title("dead-code", 1, 2) == "[AI Refactor] Dead Code (Part 1)"


def test_title_tag_is_configurable() -> None:
    assert pull_request_title("method-extraction", 1, 1, tag="Bot") == "[Bot] Method Extraction"


def test_identifiers_are_pure() -> None:
    assert pull_request_title("dead-code", 2, 3) == pull_request_title("dead-code", 2, 3)
    assert branch_name("dead-code", 2) == branch_name("dead-code", 2)
