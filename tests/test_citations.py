"""Tests for citations.extract_sources."""

from app.services.citations import extract_sources


def _chunk(uri=None, title=None) -> dict:
    web = {}
    if uri is not None:
        web["uri"] = uri
    if title is not None:
        web["title"] = title
    return {"web": web}


class TestExtractSources:
    def test_maps_chunks_in_order(self):
        grounding = {
            "groundingChunks": [
                _chunk("https://a.example/post", "A"),
                _chunk("https://b.example/", "B"),
            ]
        }
        sources = extract_sources(grounding)
        assert [(s.title, s.uri) for s in sources] == [
            ("A", "https://a.example/post"),
            ("B", "https://b.example/"),
        ]

    def test_drops_entries_without_usable_uri(self):
        grounding = {
            "groundingChunks": [
                _chunk(title="No URI"),
                _chunk("", "Empty"),
                _chunk("javascript:alert(1)", "Script"),
                _chunk("not a url", "Text"),
                {"retrievedContext": {"uri": "gs://bucket/doc"}},
                "garbage",
                _chunk("https://ok.example", "OK"),
            ]
        }
        assert [s.uri for s in extract_sources(grounding)] == ["https://ok.example"]

    def test_missing_title_falls_back_to_host(self):
        (source,) = extract_sources({"groundingChunks": [_chunk("https://docs.example.org/x")]})
        assert source.title == "docs.example.org"

    def test_duplicate_uris_collapsed(self):
        grounding = {"groundingChunks": [_chunk("https://a.example", "A"), _chunk("https://a.example", "A2")]}
        sources = extract_sources(grounding)
        assert len(sources) == 1
        assert sources[0].title == "A"

    def test_no_metadata(self):
        assert extract_sources(None) == []
        assert extract_sources({}) == []
        assert extract_sources({"groundingChunks": None}) == []
