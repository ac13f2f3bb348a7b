"""
Unit tests for the question/answer chunker.
"""

from rag.chunker import Chunk, QAChunker


def make_chunker(**kwargs):
    kwargs.setdefault("min_length", 20)
    kwargs.setdefault("query_marker", "Query:")
    kwargs.setdefault("answer_marker", "Response:")
    kwargs.setdefault("max_chunk_chars", 0)
    return QAChunker(**kwargs)


class TestPairing:
    """Query lines absorb the line that follows them."""

    def test_query_and_response_merge_into_one_chunk(self):
        text = "Query: What colors?\nResponse: Red and blue."
        chunks = make_chunker().split_text(text)

        assert chunks == [Chunk(text="Query: What colors? Response: Red and blue.", source_ordinal=0)]

    def test_single_line_query_response_stays_one_chunk(self):
        chunks = make_chunker().split_text("Query: What colors? Response: Red and blue.")

        assert [c.text for c in chunks] == ["Query: What colors? Response: Red and blue."]

    def test_pairing_consumes_next_line_even_without_marker(self):
        text = "Query: Which sedans are in stock?\nThe Civic and the Corolla are available."
        chunks = make_chunker().split_text(text)

        assert len(chunks) == 1
        assert chunks[0].text.startswith("Query: Which sedans")
        assert chunks[0].text.endswith("Corolla are available.")

    def test_trailing_query_pairs_with_empty_string(self):
        text = "Toyota Corolla 2022 available in Seattle\nQuery: Is there a hybrid?"
        chunks = make_chunker().split_text(text)

        assert [c.text for c in chunks] == [
            "Toyota Corolla 2022 available in Seattle",
            "Query: Is there a hybrid?",
        ]

    def test_trailing_short_query_is_dropped_without_error(self):
        chunks, skipped = make_chunker().partition("Query: Hi?")

        assert chunks == []
        assert skipped == ["Query: Hi?"]


class TestFiltering:

    def test_unpaired_response_is_discarded(self):
        text = "Response: this answer has no question attached\nHonda Civic 2021 available in Portland"
        chunks = make_chunker().split_text(text)

        assert [c.text for c in chunks] == ["Honda Civic 2021 available in Portland"]

    def test_short_lines_are_dropped(self):
        text = "Page 1\nHonda Civic 2021 available in Portland\nok"
        chunks, skipped = make_chunker().partition(text)

        assert [c.text for c in chunks] == ["Honda Civic 2021 available in Portland"]
        assert skipped == ["Page 1", "ok"]

    def test_line_of_exactly_min_length_is_kept(self):
        line = "x" * 20
        assert [c.text for c in make_chunker().split_text(line)] == [line]

    def test_whitespace_is_trimmed_and_blank_lines_removed(self):
        text = "\n\n   Honda Civic 2021 available in Portland   \n\t\n"
        chunks = make_chunker().split_text(text)

        assert chunks == [Chunk(text="Honda Civic 2021 available in Portland", source_ordinal=0)]

    def test_ordinals_follow_normalized_lines(self):
        text = "Honda Civic 2021 available in Portland\nQuery: What colors?\nResponse: Red and blue.\nFord Focus 2019 available in Denver"
        chunks = make_chunker().split_text(text)

        assert [c.source_ordinal for c in chunks] == [0, 1, 3]


class TestEdgeCases:

    def test_empty_input_yields_nothing(self):
        assert make_chunker().split_text("") == []

    def test_whitespace_only_input_yields_nothing(self):
        assert make_chunker().split_text("   \n\t \n ") == []

    def test_chunking_is_deterministic(self):
        text = "Query: What colors?\nResponse: Red and blue.\nHonda Civic 2021 available in Portland"
        chunker = make_chunker()

        assert chunker.split_text(text) == chunker.split_text(text)

    def test_iter_chunks_is_a_one_shot_generator(self):
        chunks = make_chunker().iter_chunks("Honda Civic 2021 available in Portland")

        assert len(list(chunks)) == 1
        assert list(chunks) == []

    def test_custom_markers(self):
        chunker = make_chunker(query_marker="Q:", answer_marker="A:")
        chunks = chunker.split_text("Q: Which trims exist?\nA: LX, EX and Touring.")

        assert [c.text for c in chunks] == ["Q: Which trims exist? A: LX, EX and Touring."]


class TestLongCandidates:

    def test_long_line_is_split_below_max_chars(self):
        sentence = "The hybrid model is available in every region. "
        text = sentence * 10
        chunker = make_chunker(max_chunk_chars=120, chunk_overlap=0)

        chunks = chunker.split_text(text)

        assert len(chunks) > 1
        assert all(len(c.text) <= 120 for c in chunks)
        assert all(c.source_ordinal == 0 for c in chunks)

    def test_short_line_is_not_split(self):
        chunker = make_chunker(max_chunk_chars=120)
        line = "Honda Civic 2021 available in Portland"

        assert [c.text for c in chunker.split_text(line)] == [line]
