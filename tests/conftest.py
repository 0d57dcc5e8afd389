# conftest.py

import os
from urllib.parse import unquote

import httpx
import pytest
from fastapi.testclient import TestClient

from skill_system.models import Tree

BASE_URL = "http://skilltree.test"
ENTRY_ID = "97838643-4e9b-434f-8985-89dd23408647"
MDN_GUIDE = "https://developer.mozilla.org/en-US/docs/Web/JavaScript/Guide"

# --- Environment Configuration ---

def pytest_configure(config):
    """
    Forcefully sets the environment variables for the entire test session,
    so a developer's .env never leaks into the tests.
    """
    os.environ["SKILLTREE_API_BASE_URL"] = BASE_URL
    os.environ["ENTRY_NODE_ID"] = ENTRY_ID
    os.environ["HTTP_TIMEOUT_SECONDS"] = "5"
    os.environ["STRICT_GRAPH_VALIDATION"] = "false"
    os.environ["LOG_LEVEL"] = "INFO"


# --- Graph fixtures ---

def make_tree_data():
    return {
        "nodes": [
            {"id": ENTRY_ID, "type": "skill", "name": "E"},
            {"id": "1", "type": "skill", "name": "JavaScript"},
            {"id": "2", "type": "skill", "name": "React"},
            {"id": "3", "type": "url", "name": MDN_GUIDE},
        ],
        "links": [
            {"id": "link-e-to-js", "source": ENTRY_ID, "target": "3"},
            {"id": "1", "source": "1", "target": "3"},
            {"id": "2", "source": "3", "target": "2"},
        ],
    }


def make_path_data(start_id, target_id):
    """The path the fake service returns: entry -> MDN guide -> target."""
    return {
        "nodes": [
            {"id": start_id, "type": "skill", "name": "E"},
            {"id": "3", "type": "url", "name": MDN_GUIDE},
            {"id": target_id, "type": "skill", "name": "React"},
        ],
        "links": [
            {"id": "path-link-1", "source": start_id, "target": "3"},
            {"id": "path-link-2", "source": "3", "target": target_id},
        ],
    }


@pytest.fixture
def tree_data():
    return make_tree_data()


@pytest.fixture
def tree(tree_data):
    return Tree.model_validate(tree_data)


# --- Fake graph service ---

class FakeGraphService:
    """
    Stands in for the remote graph service behind an httpx.MockTransport.
    Tests flip `tree_status` / `path_status` or replace the payloads to
    simulate failures.
    """

    def __init__(self):
        self.tree_payload = make_tree_data()
        self.tree_status = 200
        self.path_status = 200
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        # Split before unescaping so an escaped "/" stays inside its segment
        raw_path = request.url.raw_path.decode("ascii").split("?")[0]
        parts = [unquote(part) for part in raw_path.strip("/").split("/")]

        if parts == ["tree"]:
            if self.tree_status != 200:
                return httpx.Response(self.tree_status, json={"error": "down"})
            if isinstance(self.tree_payload, str):
                return httpx.Response(200, text=self.tree_payload)
            return httpx.Response(200, json=self.tree_payload)

        if len(parts) == 3 and parts[0] == "paths":
            _, start_id, target_id = parts
            known = {node["id"] for node in self.tree_payload["nodes"]}
            if self.path_status != 200:
                return httpx.Response(self.path_status, json={"error": "failed"})
            if start_id not in known or target_id not in known:
                return httpx.Response(404, json={"error": "No path found"})
            return httpx.Response(200, json=make_path_data(start_id, target_id))

        return httpx.Response(404)


@pytest.fixture
def graph_service():
    return FakeGraphService()


@pytest.fixture
def tree_client(graph_service):
    from api.tree_client import SkillTreeClient

    http_client = httpx.AsyncClient(transport=httpx.MockTransport(graph_service))
    return SkillTreeClient(BASE_URL, http_client=http_client)


@pytest.fixture
def app_client(tree_client):
    """
    Provides a TestClient for a freshly built app whose graph service is the
    fake one. Entering the client runs the lifespan, which loads the tree.
    """
    from api.config import load_settings
    from api.main import create_app

    app_instance = create_app(settings=load_settings(), tree_client=tree_client)
    with TestClient(app_instance) as client:
        yield client
