from resgen.layout import (
    HARDLINE,
    break_,
    column,
    group,
    ifflat,
    nest,
    pretty_string,
    separate,
    text,
)


def _words(n):
    return separate(break_(1), [text(f"w{i}") for i in range(n)])


def test_group_stays_flat_when_it_fits():
    doc = group(text("let x =") + nest(2, break_(1) + text("1")))
    assert pretty_string(doc, 80) == "let x = 1"


def test_group_breaks_and_indents_when_too_wide():
    doc = group(text("let x =") + nest(2, break_(1) + text("y" * 90)))
    assert pretty_string(doc, 80) == "let x =\n  " + "y" * 90


def test_hardline_forces_enclosing_group_to_break():
    doc = group(text("a") + break_(1) + text("b") + HARDLINE + text("c"))
    assert pretty_string(doc, 80) == "a\nb\nc"


def test_ribbon_limits_line_content():
    # 10 words of 2-3 chars fit in width 80 but not in a ribbon of 0.1.
    doc = group(_words(10))
    assert "\n" not in pretty_string(doc, 80, ribbon=1.0)
    assert "\n" in pretty_string(doc, 80, ribbon=0.1)


def test_ifflat_picks_branch_from_enclosing_group():
    choice = ifflat(text("flat"), text("broken"))
    assert pretty_string(group(choice), 80) == "flat"
    assert pretty_string(group(choice + HARDLINE), 80).startswith("broken")


def test_column_receives_current_column():
    doc = text("abc") + column(lambda col: text(str(col)))
    assert pretty_string(doc, 80) == "abc3"


def test_reserve_keeps_room_after_group():
    doc = text("x" * 9) + group(text("y"), reserve=1)
    assert pretty_string(doc, 10, ribbon=1.0) == "x" * 9 + "y"
    doc = text("x" * 9) + group(ifflat(text("y"), HARDLINE + text("y")), reserve=1)
    assert pretty_string(doc, 10, ribbon=1.0) == "x" * 9 + "\ny"


def test_no_trailing_blanks_on_empty_lines():
    doc = nest(4, text("a") + HARDLINE + HARDLINE + text("b"))
    assert pretty_string(doc, 80) == "a\n\n    b"


def test_large_documents_do_not_recurse():
    doc = separate(text(","), [text("x")] * 200_000)
    assert len(pretty_string(doc, 80)) == 399_999
