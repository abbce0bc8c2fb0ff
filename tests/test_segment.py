"""
Unit tests for pagesnap_core/segment.py - paragraph and sentence splitting
"""
from pagesnap_core.segment import (
    Block,
    group_blocks,
    is_divider,
    normalize_text,
    paragraph_blocks,
    sentence_blocks,
    split_paragraphs,
    split_sentences,
)


class TestSplitParagraphs:
    def test_blank_lines_separate_paragraphs(self):
        assert split_paragraphs("one\n\ntwo\n\n\n\nthree") == ["one", "two", "three"]

    def test_whitespace_only_lines_count_as_blank(self):
        assert split_paragraphs("one\n   \t\ntwo") == ["one", "two"]

    def test_single_newline_stays_inside_paragraph(self):
        assert split_paragraphs("line one\nline two") == ["line one\nline two"]

    def test_windows_line_endings(self):
        assert split_paragraphs("a\r\n\r\nb") == ["a", "b"]

    def test_empty_and_blank_input(self):
        assert split_paragraphs("") == []
        assert split_paragraphs(" \n\n \t ") == []

    def test_normalize_trims_outer_whitespace(self):
        assert normalize_text("\n\n  text  \n\n") == "text"


class TestDividers:
    def test_recognized_markers(self):
        for marker in ("---", "***", "___", "-----", "  ---  "):
            assert is_divider(marker), marker

    def test_not_dividers(self):
        for text in ("--", "- - -", "--- text", "text"):
            assert not is_divider(text), text

    def test_paragraph_blocks_flag_dividers(self):
        blocks = paragraph_blocks(["first", "---", "second"])
        assert [b.divider for b in blocks] == [False, True, False]
        assert [b.source for b in blocks] == [0, 1, 2]


class TestSplitSentences:
    def test_cjk_terminators(self):
        assert split_sentences("今天天气很好。我们去公园吧！好吗？") == [
            "今天天气很好。",
            "我们去公园吧！",
            "好吗？",
        ]

    def test_latin_terminators_keep_spacing(self):
        sentences = split_sentences("One. Two! Three?")
        assert sentences == ["One.", " Two!", " Three?"]
        assert "".join(sentences) == "One. Two! Three?"

    def test_runs_of_terminators_stay_together(self):
        assert split_sentences("Really?! Yes...") == ["Really?!", " Yes..."]

    def test_trailing_text_without_terminator(self):
        assert split_sentences("Done. and then") == ["Done.", " and then"]

    def test_trailing_whitespace_joins_last_sentence(self):
        assert split_sentences("Done.  ") == ["Done.  "]

    def test_no_terminator_returns_paragraph(self):
        assert split_sentences("no terminators here") == ["no terminators here"]

    def test_semicolons_split(self):
        assert split_sentences("甲；乙") == ["甲；", "乙"]

    def test_sentence_blocks_keep_source(self):
        blocks = sentence_blocks(Block("A. B.", source=4))
        assert blocks == [Block("A.", 4), Block(" B.", 4)]

    def test_divider_is_not_split(self):
        divider = Block("---", source=1, divider=True)
        assert sentence_blocks(divider) == [divider]


class TestGroupBlocks:
    def test_sentences_of_one_paragraph_merge(self):
        blocks = [Block("A.", 0), Block(" B.", 0), Block("C.", 1)]
        assert group_blocks(blocks) == [("A. B.", False), ("C.", False)]

    def test_leading_space_stripped_after_page_break(self):
        assert group_blocks([Block(" B.", 0)]) == [("B.", False)]

    def test_dividers_never_merge(self):
        blocks = [Block("A", 0), Block("---", 1, divider=True), Block("B", 2)]
        assert group_blocks(blocks) == [("A", False), ("---", True), ("B", False)]
