import pytest

from mindmap_service.core.errors import InputTooLargeError
from mindmap_service.services.mindmap_generator import MAX_CONCEPTS, MindmapGenerator


# ── Heading extraction ───────────────────────────────────────────────────────

def test_extract_headings_levels_and_lines(generator):
    nodes = generator.extract_headings("# Title\n## Sub A\n## Sub B\nBody text")

    assert [n.text for n in nodes] == ["Title", "Sub A", "Sub B"]
    assert [n.level for n in nodes] == [1, 2, 2]
    assert [n.line_number for n in nodes] == [1, 2, 3]
    assert all(n.type == "heading" for n in nodes)


def test_extract_headings_rejects_seven_hashes_and_missing_space(generator):
    content = "###### Six\n####### Seven\n#NoSpace\nplain # text\n###   Padded   "
    nodes = generator.extract_headings(content)

    assert [(n.level, n.text) for n in nodes] == [(6, "Six"), (3, "Padded")]
    assert [n.line_number for n in nodes] == [1, 5]


@pytest.mark.parametrize("content", ["", "   \n\t", None, 42, ["# A"]])
def test_extract_headings_invalid_input_returns_empty(generator, content):
    assert generator.extract_headings(content) == []


def test_extract_headings_ignores_crlf_lines(generator):
    assert generator.extract_headings("# Title\r\n## Sub\r\n") == []
    assert [n.text for n in generator.extract_headings("# Title\n## Sub\n")] == ["Title", "Sub"]


def test_node_ids_are_sequential_and_unique(generator):
    nodes = generator.extract_headings("# A\n# B\n# C")
    assert [n.id for n in nodes] == ["node_1", "node_2", "node_3"]


def test_generators_have_independent_counters():
    first = MindmapGenerator().extract_headings("# A")
    second = MindmapGenerator().extract_headings("# B")
    assert first[0].id == second[0].id == "node_1"


# ── Concept extraction ───────────────────────────────────────────────────────

def test_extract_concepts_first_three_keywords(generator):
    nodes = generator.extract_concepts("Alpha Beta Gamma project")

    assert len(nodes) == 1
    assert nodes[0].text == "Alpha Beta Gamma"
    assert nodes[0].level == 1
    assert nodes[0].type == "concept"
    assert nodes[0].line_number == 1


def test_extract_concepts_filters_stop_words_and_short_tokens(generator):
    text = "# Heading Line\n\nThe Quick Brown Fox And More\nAn Ox Big\nnothing here"
    nodes = generator.extract_concepts(text)

    assert [n.text for n in nodes] == ["Quick Brown Fox", "Big"]
    assert [n.line_number for n in nodes] == [3, 4]


def test_extract_concepts_caps_at_ten(generator):
    text = "\n".join(f"Concept Number{i}" for i in range(25))
    nodes = generator.extract_concepts(text)

    assert len(nodes) == MAX_CONCEPTS == 10
    assert nodes[-1].text == "Concept Number9"


def test_extract_concepts_only_ascii_capitals(generator):
    nodes = generator.extract_concepts("Émile Zola Novels")
    assert [n.text for n in nodes] == ["Zola Novels"]


@pytest.mark.parametrize("text", ["", "  ", None])
def test_extract_concepts_missing_selection_is_noop(generator, text):
    assert generator.extract_concepts(text) == []


# ── Structure building ───────────────────────────────────────────────────────

def test_build_graph_scenario_a(heading_graph):
    assert len(heading_graph.nodes) == 3
    assert [(c.from_, c.to) for c in heading_graph.connections] == [
        ("node_1", "node_2"),
        ("node_1", "node_3"),
    ]
    assert all(c.type == "hierarchy" for c in heading_graph.connections)
    assert heading_graph.metadata.source_type == "heading"
    assert heading_graph.metadata.node_count == 3


def test_build_graph_empty(generator):
    graph = generator.build_graph([])

    assert graph.nodes == []
    assert graph.connections == []
    assert graph.metadata.source_type == "empty"
    assert graph.metadata.node_count == 0


def test_build_graph_synthesizes_single_root(generator):
    items = generator.extract_headings("## A\n### B\n## C")
    graph = generator.build_graph(items)

    roots = [n for n in graph.nodes if n.level == 0]
    assert len(roots) == 1
    assert graph.nodes[0] == roots[0]
    assert roots[0].text == "Document"
    assert roots[0].type == "root"
    assert roots[0].id not in {item.id for item in items}
    assert len(graph.nodes) == len(items) + 1
    assert [n.text for n in graph.nodes] == ["Document", "A", "C", "B"]


def test_build_graph_level_two_without_level_one_are_orphans(generator):
    graph = generator.build_graph(generator.extract_headings("## A\n### B\n## C"))
    by_text = {n.text: n.id for n in graph.nodes}

    assert [(c.from_, c.to) for c in graph.connections] == [(by_text["A"], by_text["B"])]


def test_build_graph_attaches_to_first_parent_of_previous_level(generator):
    graph = generator.generate_from_headings("# One\n## A\n# Two\n## B")
    by_text = {n.text: n.id for n in graph.nodes}

    assert [n.text for n in graph.nodes] == ["One", "Two", "A", "B"]
    assert [(c.from_, c.to) for c in graph.connections] == [
        (by_text["One"], by_text["A"]),
        (by_text["One"], by_text["B"]),
    ]


def test_build_graph_does_not_touch_input(generator):
    items = generator.extract_headings("## A\n### B")
    snapshot = [n.model_copy() for n in items]
    generator.build_graph(items)
    assert items == snapshot


def test_connections_reference_existing_nodes(generator):
    content = "# A\n## B\n### C\n#### D\n## E\n###### Deep\n# F"
    graph = generator.generate_from_headings(content)
    ids = {n.id for n in graph.nodes}
    synthesized = any(n.level == 0 for n in graph.nodes)

    assert len(ids) == len(graph.nodes)
    assert len(graph.connections) <= len(graph.nodes) - (1 if synthesized else 0)
    for conn in graph.connections:
        assert conn.from_ in ids
        assert conn.to in ids


def test_generate_from_selection_is_flat(generator):
    graph = generator.generate_from_selection("Alpha Beta\nGamma Delta\nlowercase only")

    assert [n.text for n in graph.nodes] == ["Alpha Beta", "Gamma Delta"]
    assert graph.connections == []
    assert graph.metadata.source_type == "concept"


def test_generate_from_empty_selection(generator):
    graph = generator.generate_from_selection("")
    assert graph.metadata.source_type == "empty"


def test_size_guard():
    generator = MindmapGenerator(max_lines=2)
    with pytest.raises(InputTooLargeError) as exc_info:
        generator.generate_from_headings("# A\n# B\n# C")
    assert exc_info.value.line_count == 3
    assert generator.generate_from_headings("# A\n# B").metadata.node_count == 2
