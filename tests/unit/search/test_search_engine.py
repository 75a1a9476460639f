"""Unit tests for the search entry points."""

from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import SimpleSpanProcessor
from opentelemetry.sdk.trace.export.in_memory_span_exporter import InMemorySpanExporter
import pytest

from record_search.config import Settings
from record_search.observability import metrics as metrics_module, tracing as tracing_module
from record_search.search.engine import InvalidArgumentError, KeywordSearch, search_records
from record_search.search.schema import RecordSchema, SchemaRegistry, TextField


class Widget:
    def __init__(self, label):
        self.label = label


@pytest.fixture
def mixed_records(person):
    return [
        {"title": "Alpha release notes", "tags": ["alpha", "release"]},
        person,
        {"title": "Beta", "body": "alpha alpha beta"},
        42,
        None,
        {"title": "Unrelated"},
    ]


@pytest.mark.unit
class TestSearchRecords:
    def test_end_to_end_example(self, sample_records):
        result = search_records("hello", sample_records, case_sensitive=False, max_results=50)

        assert len(result) == 1
        assert result.records[0] is sample_records[0]
        assert ("<title>", "Hello World") in result.provenance[0]
        assert result.scores == [1.0]
        assert all(record is not sample_records[1] for record in result.records)

    def test_case_insensitive_match(self):
        result = search_records("HELLO", [{"greeting": "hello world"}])
        assert result.scores == [1.0]

    def test_case_sensitive_miss(self):
        assert len(search_records("HELLO", [{"greeting": "hello world"}], case_sensitive=True)) == 0

    def test_exact_field_value_scores_at_least_one(self):
        result = search_records("Enchantress of Numbers", [{"nickname": "enchantress of numbers"}])
        assert result.scores[0] >= 1.0

    def test_multi_keyword_accumulation(self):
        result = search_records("a b", [{"f": "a a b"}])
        assert result.scores == [pytest.approx(2.5)]

    def test_scores_non_increasing_and_bounded(self, mixed_records):
        result = search_records("alpha beta", mixed_records, max_results=2)

        assert len(result) <= 2
        assert result.scores == sorted(result.scores, reverse=True)
        assert len(result.records) == len(result.provenance) == len(result.scores)

    def test_ranking_order(self, mixed_records):
        result = search_records("alpha", mixed_records)
        # record 0: title + tag (2.0); record 2: body (1.0)
        assert result.records == [mixed_records[0], mixed_records[2]]
        assert result.scores == [2.0, 1.0]
        assert result.provenance[0] == [("<title>", "Alpha release notes"), ("<tags[2]>", "alpha")]

    def test_nested_match_provenance(self, mixed_records, person):
        result = search_records("london", mixed_records)
        assert result.records == [person]
        assert result.provenance == [[("<address.city>", "London")]]

    def test_idempotent(self, mixed_records):
        first = search_records("alpha beta", mixed_records)
        second = search_records("alpha beta", mixed_records)
        assert first.records == second.records
        assert first.provenance == second.provenance
        assert first.scores == second.scores

    def test_max_results_zero_returns_empty(self, sample_records):
        assert len(search_records("hello", sample_records, max_results=0)) == 0

    def test_empty_collection_returns_empty(self):
        assert len(search_records("hello", [])) == 0

    def test_blank_query_returns_empty(self, sample_records):
        assert len(search_records("   ", sample_records)) == 0

    def test_none_query_rejected(self, sample_records):
        with pytest.raises(InvalidArgumentError):
            search_records(None, sample_records)  # type: ignore[arg-type]

    def test_none_records_rejected(self):
        with pytest.raises(InvalidArgumentError):
            search_records("hello", None)  # type: ignore[arg-type]

    def test_invalid_argument_is_value_error(self):
        assert issubclass(InvalidArgumentError, ValueError)

    def test_same_record_twice_shares_one_accumulator(self):
        record = {"title": "hello"}
        result = search_records("hello", [record, record])
        assert len(result) == 1
        assert result.scores == [2.0]
        assert result.provenance == [[("<title>", "hello"), ("<title>", "hello")]]

    def test_equal_but_distinct_records_ranked_separately(self):
        result = search_records("hello", [{"title": "hello"}, {"title": "hello"}])
        assert len(result) == 2

    def test_generator_input(self, sample_records):
        result = search_records("hello", (record for record in sample_records))
        assert result.records == [sample_records[0]]

    def test_flags_forwarded_to_extractor(self, sample_records, person):
        assert len(search_records("beta", sample_records, include_collections=False)) == 0
        assert len(search_records("london", [person], include_nested=False)) == 0

    def test_custom_registry(self):
        registry = SchemaRegistry()
        registry.register(Widget, RecordSchema(fields=[TextField("label")]))
        widget = Widget("sprocket")

        assert search_records("sprocket", [widget], registry=registry).records == [widget]
        assert len(search_records("sprocket", [widget])) == 0

    def test_unreadable_field_does_not_abort_search(self):
        class Gadget:
            label = "sprocket"

            @property
            def summary(self):
                raise RuntimeError("not readable")

        registry = SchemaRegistry()
        registry.register(Gadget, RecordSchema(fields=[TextField("summary"), TextField("label")]))
        result = search_records("sprocket", [Gadget()], registry=registry)

        assert result.provenance == [[("<label>", "sprocket")]]
        assert result.scores == [pytest.approx(1.0)]

    def test_normalizer_hook(self):
        result = search_records("ice cream", [{"f": "ice-cream"}], normalizer=lambda t: t.replace("-", " "))
        assert result.scores == [pytest.approx(2.0)]

    def test_updates_search_counter(self, sample_records):
        counter = metrics_module._SEARCH_COUNT_PROM.labels(outcome="ranked")
        before = counter._value.get()
        search_records("hello", sample_records)
        assert counter._value.get() == before + 1


@pytest.mark.unit
class TestKeywordSearch:
    def test_uses_default_records(self, sample_records):
        engine = KeywordSearch(default_records=sample_records)
        assert engine.search("hello").records == [sample_records[0]]

    def test_explicit_records_override_defaults(self, sample_records):
        engine = KeywordSearch(default_records=sample_records)
        other = {"title": "hello again"}
        assert engine.search("hello", [other]).records == [other]

    def test_default_records_read_at_call_time(self):
        records: list = []
        engine = KeywordSearch(default_records=records)
        records.append({"title": "late arrival"})
        assert len(engine.search("late")) == 1

    def test_missing_records_rejected(self):
        with pytest.raises(InvalidArgumentError):
            KeywordSearch().search("hello")

    def test_settings_supply_defaults(self, monkeypatch):
        monkeypatch.setenv("RECORD_SEARCH_MAX_RESULTS", "1")
        monkeypatch.setenv("RECORD_SEARCH_CASE_SENSITIVE", "true")
        engine = KeywordSearch(default_records=[{"t": "Hi there"}, {"t": "hi"}, {"t": "hi", "u": "hi"}])

        result = engine.search("hi")
        assert len(result) == 1
        assert result.records[0] == {"t": "hi", "u": "hi"}
        assert result.scores == [2.0]

    def test_call_arguments_override_settings(self):
        engine = KeywordSearch(settings=Settings(max_results=1))
        records = [{"t": "a"}, {"t": "a"}]
        assert len(engine.search("a", records, max_results=5)) == 2
        assert len(engine.search("A", records, case_sensitive=True)) == 0

    def test_settings_control_extraction(self, sample_records):
        engine = KeywordSearch(settings=Settings(include_collections=False))
        assert len(engine.search("alpha", sample_records)) == 0
        assert engine.extract_fields(sample_records[0]) == engine.extract_fields(
            sample_records[0], include_collections=False
        )
        assert len(engine.extract_fields(sample_records[0], include_collections=True)) == 4

    def test_engine_normalizer(self):
        engine = KeywordSearch(normalizer=str.upper)
        assert len(engine.search("HELLO", [{"t": "hello"}], case_sensitive=True)) == 1

    def test_tracing_wraps_search_in_span(self, monkeypatch, sample_records):
        exporter = InMemorySpanExporter()
        provider = TracerProvider()
        provider.add_span_processor(SimpleSpanProcessor(exporter))
        monkeypatch.setitem(tracing_module._tracer_holder, "tracer", provider.get_tracer("test"))

        engine = KeywordSearch(default_records=sample_records, settings=Settings(tracing_enabled=True))
        engine.search("hello world")

        spans = exporter.get_finished_spans()
        assert [span.name for span in spans] == ["record_search.search"]
        assert spans[0].attributes["search.keyword_count"] == 2

    def test_no_span_when_tracing_disabled(self, monkeypatch, sample_records):
        exporter = InMemorySpanExporter()
        provider = TracerProvider()
        provider.add_span_processor(SimpleSpanProcessor(exporter))
        monkeypatch.setitem(tracing_module._tracer_holder, "tracer", provider.get_tracer("test"))

        KeywordSearch(default_records=sample_records).search("hello")
        assert exporter.get_finished_spans() == ()
