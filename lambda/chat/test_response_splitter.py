"""응답 분리기 테스트"""
from response_splitter import split_response, RelayResult, TRANSLATION_PLACEHOLDER


def test_marker_split():
    result = split_response('Hello world\n<div class="translation">你好世界</div>')
    assert result.text == "Hello world"
    assert result.translation == "你好世界"
    assert result.success is True


def test_marker_split_with_trailing_whitespace_after_close_tag():
    result = split_response('**Serendipity** means luck.\n\n<div class="translation">\n意外发现的好运。\n</div>\n')
    assert result.text == "**Serendipity** means luck."
    assert result.translation == "意外发现的好运。"


def test_marker_without_close_tag():
    result = split_response('Answer here <div class="translation">这里是答案')
    assert result.text == "Answer here"
    assert result.translation == "这里是答案"


def test_marker_splits_at_first_occurrence():
    content = 'English <div class="translation">第一 <div class="translation">第二</div>'
    result = split_response(content)
    assert result.text == "English"
    assert result.translation == '第一 <div class="translation">第二'


def test_fallback_uses_last_line_as_translation():
    result = split_response("Line one\nLine two\n最后一行")
    assert result.text == "Line one\nLine two"
    assert result.translation == "最后一行"


def test_fallback_single_line_uses_placeholder():
    result = split_response("Only one line")
    assert result.text == "Only one line"
    assert result.translation == TRANSLATION_PLACEHOLDER


def test_fallback_trailing_newline_leaves_empty_translation():
    result = split_response("Just English\n")
    assert result.text == "Just English"
    assert result.translation == ""


def test_to_dict_shape():
    assert RelayResult(text="a", translation="b").to_dict() == {
        "text": "a",
        "translation": "b",
        "success": True,
    }
