# tests/conftest.py
import pytest
from fastapi.testclient import TestClient

from entity_normalizer.main import app
from entity_normalizer.normalizers import SchemaRegistry


@pytest.fixture
def client():
    with TestClient(app) as c:
        yield c


# --- Blog schemas: posts -> author, comments -> author ---
@pytest.fixture
def blog_registry():
    registry = SchemaRegistry()
    registry.define("authors")
    registry.define("comments", relations={"author": "authors"})
    registry.define("posts", relations={"author": "authors", "comments": ["comments"]})
    return registry


@pytest.fixture
def blog_definitions():
    """Same schemas as `blog_registry`, in the JSON form the API takes."""
    return [
        {"name": "authors"},
        {"name": "comments", "relations": {"author": {"target": "authors"}}},
        {
            "name": "posts",
            "relations": {
                "author": {"target": "authors"},
                "comments": {"target": "comments", "many": True},
            },
        },
    ]


@pytest.fixture
def posts():
    """Two posts, nested authors and comments; authors repeat across both."""
    paul = {"id": 1, "name": "Paul"}
    nicole = {"id": 2, "name": "Nicole"}
    return [
        {
            "id": 1,
            "author": dict(paul),
            "body": "Normalizing state",
            "comments": [
                {"id": 1, "author": dict(nicole), "comment": "Nice post"},
                {"id": 2, "author": dict(nicole), "comment": "Still nice"},
            ],
        },
        {
            "id": 2,
            "author": dict(nicole),
            "body": "Entity tables",
            "comments": [
                {"id": 3, "author": dict(paul), "comment": "Thanks"},
            ],
        },
    ]


@pytest.fixture
def normalized_posts():
    """What `posts` normalizes to."""
    return {
        "entities": {
            "authors": {
                "1": {"id": 1, "name": "Paul"},
                "2": {"id": 2, "name": "Nicole"},
            },
            "comments": {
                "1": {"id": 1, "author": 2, "comment": "Nice post"},
                "2": {"id": 2, "author": 2, "comment": "Still nice"},
                "3": {"id": 3, "author": 1, "comment": "Thanks"},
            },
            "posts": {
                "1": {"id": 1, "author": 1, "body": "Normalizing state", "comments": [1, 2]},
                "2": {"id": 2, "author": 2, "body": "Entity tables", "comments": [3]},
            },
        },
        "result": [1, 2],
    }
