"""
Tabular parser tests
"""

import pytest

from sortly.services.tabular_parser import TabularParser


class TestTabularParser:
    """붙여넣기 파싱 테스트"""

    def test_csv_with_header(self):
        result = TabularParser.parse("Name,Age\nAlice,30\nBob,25")

        assert result.columns == ["Name", "Age"]
        assert result.rows == [
            {"Name": "Alice", "Age": "30"},
            {"Name": "Bob", "Age": "25"},
        ]
        assert TabularParser.detect_delimiter("Name,Age\nAlice,30\nBob,25") == ","

    def test_single_line_becomes_value_column(self):
        result = TabularParser.parse("apple banana cherry")

        assert result.columns == ["Value"]
        assert result.rows == [{"Value": "apple"}, {"Value": "banana"}, {"Value": "cherry"}]

    def test_single_line_mixed_separators(self):
        result = TabularParser.parse("  a, b|c;d\te  ")

        assert [row["Value"] for row in result.rows] == ["a", "b", "c", "d", "e"]

    @pytest.mark.parametrize("raw", ["", "   ", "\n\n\t\n"])
    def test_empty_input_returns_none(self, raw):
        assert TabularParser.parse(raw) is None

    def test_single_line_of_only_separators_returns_none(self):
        assert TabularParser.parse(",,,;;|") is None

    def test_tab_separated_from_spreadsheet(self):
        result = TabularParser.parse("City\tPopulation\nParis\t2,100,000\nLyon\t516,000\n")

        assert result.columns == ["City", "Population"]
        assert result.rows[0] == {"City": "Paris", "Population": "2,100,000"}

    def test_delimiter_tie_breaks_by_priority(self):
        # one tab and one comma: tab wins
        assert TabularParser.detect_delimiter("a\tb,c") == "\t"
        # one comma and one pipe: comma wins
        assert TabularParser.detect_delimiter("a|b,c") == ","
        # pipe beats semicolon
        assert TabularParser.detect_delimiter("a;b|c") == "|"
        # nothing found: first entry
        assert TabularParser.detect_delimiter("abc") == "\t"

    def test_delimiter_uses_first_line_only(self):
        assert TabularParser.detect_delimiter("a;b;c\n1,2,3,4,5") == ";"

    def test_semicolon_and_pipe(self):
        assert TabularParser.parse("x;y\n1;2").rows == [{"x": "1", "y": "2"}]
        assert TabularParser.parse("x|y\n1|2").rows == [{"x": "1", "y": "2"}]

    def test_quoted_fields(self):
        result = TabularParser.parse('name,quote\n"Smith, John","He said ""hi"""')

        assert result.rows == [{"name": "Smith, John", "quote": 'He said "hi"'}]

    def test_split_line_trims_fields(self):
        assert TabularParser.split_line('  a  ,  "b"  , c ', ",") == ["a", "b", "c"]

    def test_empty_header_gets_positional_name(self):
        result = TabularParser.parse("id,,score\n1,x,9")

        assert result.columns == ["id", "Column 2", "score"]
        assert result.rows == [{"id": "1", "Column 2": "x", "score": "9"}]

    def test_missing_trailing_fields_become_empty(self):
        result = TabularParser.parse("a,b,c\n1")

        assert result.rows == [{"a": "1", "b": "", "c": ""}]

    def test_extra_fields_are_ignored(self):
        result = TabularParser.parse("a,b\n1,2,3")

        assert result.rows == [{"a": "1", "b": "2"}]

    def test_line_break_styles_and_blank_lines(self):
        result = TabularParser.parse("a,b\r\n1,2\r\n\r\n3,4\r5,6\n\n")

        assert [row["a"] for row in result.rows] == ["1", "3", "5"]

    def test_duplicate_headers_collapse(self):
        result = TabularParser.parse("a,a,b\n1,2,3")

        assert result.columns == ["a", "b"]
        assert result.rows == [{"a": "2", "b": "3"}]

    def test_unicode_content(self):
        result = TabularParser.parse("이름,도시\n김철수,서울")

        assert result.rows == [{"이름": "김철수", "도시": "서울"}]
