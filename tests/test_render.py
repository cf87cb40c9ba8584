from __future__ import annotations

import textwrap

from ara.pipeline.render import positional_diff, render_body


def test_diff_marks_changed_line_as_removal_then_addition() -> None:
    assert positional_diff("a\nb", "a\nc") == ["  a", "- b", "+ c"]


def test_diff_appends_trailing_additions() -> None:
    assert positional_diff("a", "a\nb") == ["  a", "+ b"]


def test_diff_appends_trailing_removals() -> None:
    assert positional_diff("a\nb\nc", "a") == ["  a", "- b", "- c"]


def test_diff_of_empty_contents_is_empty() -> None:
    assert positional_diff("", "") == []


def test_diff_against_empty_original_adds_everything() -> None:
    assert positional_diff("", "x\ny") == ["+ x", "+ y"]


def test_diff_does_not_resynchronise_after_insertion() -> None:
    # An inserted first line shifts every later comparison by one.
    assert positional_diff("b\nc", "a\nb\nc") == ["- b", "+ a", "- c", "+ b", "+ c"]


def test_diff_shows_removed_final_newline() -> None:
    assert positional_diff("x\n", "x") == ["  x", "- "]


def test_diff_keeps_final_empty_line_positional() -> None:
    assert positional_diff("a\n", "a\nb\n") == ["  a", "- ", "+ b", "+ "]


def test_render_body_layout(make_result) -> None:
    chunk = [
        make_result(file_path="src/one.py", description="Drop unused helper."),
        make_result(
            file_path="src/two.py",
            original_content="x = 1",
            refactored_content="x = 1",
            description="Nothing changes.",
        ),
    ]

    body = render_body("dead-code", chunk)

    expected = textwrap.dedent(
        """\
        # AI Refactoring: Dead Code

        This pull request contains automated refactoring suggestions for improving code quality.

        ## Changes

        ### src/one.py

        Drop unused helper.

        ```diff
          a
        - b
        + c
        ```

        ### src/two.py

        Nothing changes.

        ```diff
          x = 1
        ```

        ## About AI Refactoring

        This pull request was created by the AI Refactoring Agent, which automatically identifies potential code improvements.
        Please review the changes carefully before merging.
        """
    )
    assert body == expected


def test_render_body_keeps_chunk_order_and_is_deterministic(make_result) -> None:
    chunk = [make_result(file_path=f"f{index}.py") for index in (3, 1, 2)]

    first = render_body("code-formatting", chunk)
    second = render_body("code-formatting", chunk)

    assert first == second
    assert first.index("### f3.py") < first.index("### f1.py") < first.index("### f2.py")
    assert first.count("```diff\n") == 3
    assert first.startswith("# AI Refactoring: Code Formatting\n")


def test_render_body_with_empty_contents_has_empty_diff_block(make_result) -> None:
    body = render_body("dead-code", [make_result(original_content="", refactored_content="")])

    assert "```diff\n```\n" in body
