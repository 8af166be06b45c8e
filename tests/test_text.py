"""Tests for the text transforms behind compatibility fixes."""

import yaml

from vaultbridge.check.text import (
    convert_task_markers,
    find_task_markers,
    insert_namespace_tags,
    split_namespace,
    translate_date_format,
)


def test_convert_todo_and_done():
    assert convert_task_markers("TODO buy milk") == "- [ ] buy milk"
    assert convert_task_markers("DONE buy milk") == "- [x] buy milk"


def test_convert_list_dash_and_indentation():
    text = "- DOING write\n\t- LATER rest\n  - DONE ship\n"
    assert convert_task_markers(text) == "- [ ] write\n\t- [ ] rest\n  - [x] ship\n"


def test_convert_is_case_insensitive_and_line_anchored():
    assert convert_task_markers("todo lower") == "- [ ] lower"
    assert convert_task_markers("see TODO later") == "see TODO later"


def test_convert_leaves_other_lines_alone():
    text = "# Heading\nToday I did things\n- Nowhere\nTODO x"
    assert convert_task_markers(text) == "# Heading\nToday I did things\n- Nowhere\n- [ ] x"


def test_find_task_markers_whole_words():
    assert find_task_markers("- TODO a\n- DONE b\n- TODO c") == ["TODO", "DONE"]
    assert find_task_markers("TODOS and UNDONE and NOWHERE") == []
    assert find_task_markers("x IN-PROGRESS y") == ["IN-PROGRESS"]


def test_split_namespace():
    assert split_namespace("proj___sub___page") == (["proj", "sub"], "page")
    assert split_namespace("plain") is None
    assert split_namespace(".hidden___x") is None
    assert split_namespace("___page") is None


def test_insert_namespace_tags_without_frontmatter():
    assert insert_namespace_tags("Hello\n", "proj/sub") == "tags: proj/sub\nHello\n"


def test_insert_namespace_tags_with_frontmatter():
    content = "---\ntitle: Page\n---\nBody\n"
    result = insert_namespace_tags(content, "proj/sub")
    assert result == "---\ntags: proj/sub\ntitle: Page\n---\nBody\n"


def test_insert_namespace_tags_merges_existing_tags():
    content = "---\ntags: [alpha]\ntitle: Page\n---\nBody\n"
    result = insert_namespace_tags(content, "proj/sub")
    fm = yaml.safe_load(result.split("---\n")[1])
    assert fm["tags"] == ["alpha", "proj/sub"]
    assert fm["title"] == "Page"
    assert result.endswith("---\nBody\n")


def test_translate_date_format():
    assert translate_date_format("yyyy_MM_dd") == "YYYY-MM-dd"
    assert translate_date_format("yyyy-MM-dd") == "YYYY-MM-dd"
    assert translate_date_format("MMM do, yyyy") == "MMM do, YYYY"


def test_wait_and_waiting_are_open_markers():
    assert convert_task_markers("WAIT reply\nWAITING review") == "- [ ] reply\n- [ ] review"
    assert find_task_markers("WAITING x WAIT y") == ["WAITING", "WAIT"]


def test_insert_namespace_tags_with_empty_frontmatter():
    assert insert_namespace_tags("---\n---\nBody\n", "a/b") == "---\ntags: a/b\n---\nBody\n"


def test_insert_namespace_tags_body_rule_is_not_frontmatter():
    content = "---\n---\nBody\n---\nmore\n"
    assert insert_namespace_tags(content, "a/b") == "---\ntags: a/b\n---\nBody\n---\nmore\n"


def test_prose_words_need_upper_case():
    text = "Done with the draft\nLater we meet\nNow is fine\nWaiting room\nWait here\n"
    assert convert_task_markers(text) == text
    assert convert_task_markers("LATER we meet\nDONE draft") == "- [ ] we meet\n- [x] draft"
    assert convert_task_markers("Doing laundry\nin-progress x") == "- [ ] laundry\n- [ ] x"
