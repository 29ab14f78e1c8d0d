from penguin_chat.chat.content import Code, Prose, parse


def test_plain_text_is_one_prose_segment():
    text = "Just some words.\nOn two lines."
    assert parse(text) == [Prose(text)]


def test_empty_string_has_no_segments():
    assert parse("") == []


def test_prose_then_code():
    assert parse("explain ```py\nprint(1)\n```") == [
        Prose("explain "),
        Code(text="print(1)", language="py"),
    ]


def test_multiple_blocks_keep_order_and_languages():
    raw = (
        "First:\n```python\ndef f():\n    return 1\n```\n"
        "then\n```sql\nSELECT 1;\n```\n"
        "done"
    )
    segments = parse(raw)
    assert [type(s) for s in segments] == [Prose, Code, Prose, Code, Prose]
    assert segments[1] == Code(text="def f():\n    return 1", language="python")
    assert segments[3] == Code(text="SELECT 1;", language="sql")
    assert segments[4] == Prose("\ndone")


def test_adjacent_blocks():
    segments = parse("```\na\n``````\nb\n```")
    assert segments == [Code(text="a"), Code(text="b")]


def test_missing_language_is_none():
    assert parse("```\nx = 1\n```") == [Code(text="x = 1", language=None)]


def test_language_tag_is_trimmed():
    assert parse("```  bash  \nls\n```")[0].language == "bash"


def test_inline_fence_has_no_language():
    assert parse("run ```ls -la``` now") == [
        Prose("run "),
        Code(text="ls -la"),
        Prose(" now"),
    ]


def test_closer_on_last_code_line_keeps_the_code():
    assert parse("```py\nx = 1```") == [Code(text="x = 1", language="py")]


def test_crlf_line_endings():
    assert parse("```js\r\nlet a = 1;\r\n```") == [Code(text="let a = 1;", language="js")]


def test_dangling_opener_is_trailing_prose():
    raw = "Here is code:\n```python\nprint('never closed')"
    assert parse(raw) == [Prose(raw)]


def test_odd_fence_count_closes_first_pair_only():
    assert parse("```a```b```c") == [Code(text="a"), Prose("b```c")]


def test_content_survives_outside_fence_syntax():
    raw = "intro\n```go\nfmt.Println(1)\n```\noutro"
    segments = parse(raw)
    assert "".join(s.text for s in segments) == "intro\nfmt.Println(1)\noutro"
