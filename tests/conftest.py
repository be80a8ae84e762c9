import pytest
from fastapi.testclient import TestClient

from mindmap_service.main import app
from mindmap_service.services.mindmap_generator import MindmapGenerator

SCENARIO_A = "# Title\n## Sub A\n## Sub B\nBody text"


@pytest.fixture
def generator():
    return MindmapGenerator()


@pytest.fixture
def heading_graph(generator):
    return generator.generate_from_headings(SCENARIO_A)


@pytest.fixture
def client():
    return TestClient(app)
